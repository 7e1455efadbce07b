"""
Spec-table parsing helpers shared by adapters.

Prices, weights and lengths on manufacturer sites are free text such as
"1,650円（税込）", "7g / 10g", "1/2oz" or "2.8in"; these helpers turn them
into the catalog's units (tax-included yen, grams, millimeters).
"""

import re
from fractions import Fraction
from typing import List, Optional, Pattern, Sequence, Tuple

from ..common.units import inches_to_mm, ounces_to_grams, tax_included

# Amounts: digits with optional thousands separators
_AMOUNT = r'(\d[\d,]*)'
_TAX_INCLUDED_PREFIX = re.compile(r'税込[^\d]{0,3}' + _AMOUNT)
_TAX_INCLUDED = re.compile(_AMOUNT + r'\s*円?\s*[（(]?\s*税込')
_TAX_EXCLUDED_PREFIX = re.compile(r'(?:本体|税抜|税別)[^\d]{0,3}' + _AMOUNT)
_TAX_EXCLUDED = re.compile(_AMOUNT + r'\s*円?\s*[（(]?\s*\+?\s*(?:税別|税抜|税)')
_PLAIN_YEN = re.compile(r'[¥￥]\s*' + _AMOUNT + r'|' + _AMOUNT + r'\s*円')

_GRAMS = re.compile(r'(\d+(?:\.\d+)?)\s*(?:g|ｇ|グラム)(?![a-z])', re.IGNORECASE)
_OUNCES = re.compile(r'(\d+\s*/\s*\d+|\d+(?:\.\d+)?)\s*oz', re.IGNORECASE)

_INCHES = re.compile(r'(\d+(?:\.\d+)?)\s*(?:in(?:ch)?\b|インチ|")', re.IGNORECASE)
_MILLIMETERS = re.compile(r'(\d+(?:\.\d+)?)\s*mm', re.IGNORECASE)
_CENTIMETERS = re.compile(r'(\d+(?:\.\d+)?)\s*cm', re.IGNORECASE)


def _to_int(digits: str) -> int:
    return int(digits.replace(',', ''))


def parse_yen_price(text: str) -> int:
    """
    Parse a yen price, returning the tax-included amount (0 if none).

    Example:
        >>> parse_yen_price("1,650円（税込）")
        1650
        >>> parse_yen_price("1,500円（税別）")
        1650
        >>> parse_yen_price("価格未定")
        0
    """
    if not text:
        return 0

    match = _TAX_INCLUDED_PREFIX.search(text) or _TAX_INCLUDED.search(text)
    if match:
        return _to_int(match.group(1))

    match = _TAX_EXCLUDED_PREFIX.search(text) or _TAX_EXCLUDED.search(text)
    if match:
        return tax_included(_to_int(match.group(1)))

    match = _PLAIN_YEN.search(text)
    if match:
        return _to_int(match.group(1) or match.group(2))
    return 0


def _parse_ounces(value: str) -> float:
    return float(Fraction(value.replace(' ', '')))


def parse_weights(text: str) -> List[float]:
    """
    Parse every weight in text as grams, deduplicated in order of appearance.

    Ounce values (including fractions) are converted to grams.

    Example:
        >>> parse_weights("7g / 10g / 7g")
        [7.0, 10.0]
        >>> parse_weights("1/2oz")
        [14.2]
    """
    if not text:
        return []

    found: List[Tuple[int, float]] = []
    for match in _GRAMS.finditer(text):
        found.append((match.start(), float(match.group(1))))
    for match in _OUNCES.finditer(text):
        found.append((match.start(), ounces_to_grams(_parse_ounces(match.group(1)))))

    weights: List[float] = []
    for _, weight in sorted(found):
        if weight > 0 and weight not in weights:
            weights.append(weight)
    return weights


def parse_length_mm(text: str) -> Optional[int]:
    """
    Parse a length as millimeters. Inches and centimeters are converted.

    Example:
        >>> parse_length_mm("2.8in")
        71
        >>> parse_length_mm("120mm")
        120
    """
    if not text:
        return None

    match = _INCHES.search(text)
    if match:
        return inches_to_mm(float(match.group(1)))

    match = _MILLIMETERS.search(text)
    if match:
        return round(float(match.group(1)))

    match = _CENTIMETERS.search(text)
    if match:
        return round(float(match.group(1)) * 10)
    return None


def classify_by_keywords(
    text: str,
    table: Sequence[Tuple[Pattern, str]],
    default: str = "",
) -> str:
    """
    Return the label of the first pattern in table that matches text.

    Example:
        >>> classify_by_keywords("Blooownin 140S", [(re.compile("ミノー|MINNOW"), "ミノー")], "プラグ")
        'プラグ'
    """
    for pattern, label in table:
        if pattern.search(text or ""):
            return label
    return default
