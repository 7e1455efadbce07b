"""
Variant Expansion

Turns one ScrapedProduct into the ordered list of (color, weight)
variants to persist. Colors form the outer loop and weights the inner
loop, so repeated runs attempt variants in the same order.
"""

import logging
from typing import List, Optional, Tuple

from ..models import ScrapedColor, ScrapedProduct, Variant

logger = logging.getLogger(__name__)


def resolve_weights(product: ScrapedProduct, color: ScrapedColor) -> List[Optional[float]]:
    """
    Weights a color is sold in.

    A color with a models list is restricted to product models whose name
    contains one of its codes. When nothing matches, every product weight
    is used and a warning is logged.

    Returns:
        Weights in product order, or [None] when the product has no weights
    """
    all_weights: List[Optional[float]] = list(product.weights) or [None]

    if not color.models or not product.models:
        return all_weights

    matched: List[Optional[float]] = []
    for model in product.models:
        if model.weight is None:
            continue
        if any(code and code in model.name for code in color.models):
            if model.weight not in matched:
                matched.append(model.weight)

    if not matched:
        logger.warning(
            "%s: color '%s' matched none of models %s, using all weights",
            product.slug, color.name, [m.name for m in product.models],
        )
        return all_weights

    # Keep product weight order where possible
    ordered = [w for w in all_weights if w in matched]
    ordered += [w for w in matched if w not in ordered]
    return ordered


def resolve_image_source(product: ScrapedProduct, color: ScrapedColor) -> Tuple[str, bool]:
    """
    Pick the source image for a color.

    Returns:
        (url, uses_main_image); url is "" when neither the color nor the
        product has an image
    """
    if color.image_url:
        return color.image_url, False
    if product.main_image:
        return product.main_image, True
    return "", False


def expand_variants(product: ScrapedProduct) -> List[Variant]:
    """
    Expand a product into its color x weight variants.

    Example:
        colors Red(a.jpg), Blue(no image); weights [10, 14]; main image main.jpg
        -> (Red,10,a.jpg) (Red,14,a.jpg) (Blue,10,main.jpg) (Blue,14,main.jpg)

    Returns:
        Variants in deterministic order; empty if the product has no colors
    """
    if not product.colors:
        return []

    variants: List[Variant] = []
    for index, color in enumerate(product.colors):
        image_source, uses_main = resolve_image_source(product, color)
        for weight in resolve_weights(product, color):
            variants.append(Variant(
                manufacturer_slug=product.manufacturer_slug,
                slug=product.slug,
                color_name=color.name,
                weight=weight,
                color_index=index,
                image_source=image_source,
                uses_main_image=uses_main,
            ))
    return variants
