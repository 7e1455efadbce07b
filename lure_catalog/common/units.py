"""
Unit and tax normalization.

Source sites publish prices with or without consumption tax and weights
in grams or ounces; the catalog stores tax-included yen and grams.
"""

from decimal import ROUND_HALF_UP, Decimal

# Japanese consumption tax (10%)
TAX_RATE = Decimal("1.1")

OZ_TO_GRAMS = Decimal("28.3495")
INCH_TO_MM = Decimal("25.4")


def _round_half_up(value: Decimal, places: int = 0) -> Decimal:
    exponent = Decimal(1).scaleb(-places)
    return value.quantize(exponent, rounding=ROUND_HALF_UP)


def tax_included(price_ex_tax: float) -> int:
    """
    Convert a tax-excluded price to tax-included yen.

    Example:
        >>> tax_included(1500)
        1650
        >>> tax_included(15)
        17
    """
    return int(_round_half_up(Decimal(str(price_ex_tax)) * TAX_RATE))


def ounces_to_grams(ounces: float) -> float:
    """
    Convert ounces to grams, rounded to one decimal place.

    Example:
        >>> ounces_to_grams(0.5)
        14.2
    """
    return float(_round_half_up(Decimal(str(ounces)) * OZ_TO_GRAMS, 1))


def inches_to_mm(inches: float) -> int:
    """
    Convert inches to whole millimeters.

    Example:
        >>> inches_to_mm(2.8)
        71
    """
    return int(_round_half_up(Decimal(str(inches)) * INCH_TO_MM))
