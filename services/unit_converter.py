"""
Unit converter - serving units to grams.

Conversion table:
- g / grama / gramas            x1
- kg / kilograma / kilogramas   x1000
- unidade / unidades / un / und x100 (average serving mass)
- colher ... sopa               x15
- colher ... chá                x5
- xícara                        x240
- ml / mililitro / mililitros   x1 (1 ml of liquid taken as 1 g)

Anything else is treated as grams already (unknown-unit-as-grams policy).
"""

import logging
from typing import Optional

logger = logging.getLogger("dietplan.units")

GRAM_UNITS = frozenset({"g", "grama", "gramas"})
KILOGRAM_UNITS = frozenset({"kg", "kilograma", "kilogramas"})
PIECE_UNITS = frozenset({"unidade", "unidades", "un", "und"})
MILLILITER_UNITS = frozenset({"ml", "mililitro", "mililitros"})

GRAMS_PER_KILOGRAM = 1000
GRAMS_PER_PIECE = 100
GRAMS_PER_TABLESPOON = 15
GRAMS_PER_TEASPOON = 5
GRAMS_PER_CUP = 240


def grams(quantity: float, unit: Optional[str]) -> float:
    """
    Convert a quantity expressed in `unit` to grams.

    Deterministic and pure; the unit is matched case-insensitively after trimming.

    Examples:
        >>> grams(2, "colher de sopa")
        30
        >>> grams(1, " Xícara ")
        240
        >>> grams(42, "pitada")
        42
    """
    u = (unit or "").lower().strip()

    if u in GRAM_UNITS:
        return quantity
    if u in KILOGRAM_UNITS:
        return quantity * GRAMS_PER_KILOGRAM
    if u in PIECE_UNITS:
        return quantity * GRAMS_PER_PIECE
    if "colher" in u:
        if "sopa" in u:
            return quantity * GRAMS_PER_TABLESPOON
        if "chá" in u or "cha" in u:
            return quantity * GRAMS_PER_TEASPOON
    if "xícara" in u or "xicara" in u:
        return quantity * GRAMS_PER_CUP
    if u in MILLILITER_UNITS:
        return quantity

    logger.debug("Unrecognized unit %r, treating %s as grams", unit, quantity)
    return quantity
