"""
Tests for the serving-unit to grams converter.
"""

import pytest

from services.unit_converter import grams


@pytest.mark.parametrize(
    "quantity, unit, expected",
    [
        (150, "g", 150),
        (150, "gramas", 150),
        (1.5, "kg", 1500),
        (2, "kilogramas", 2000),
        (5, "unidade", 500),
        (3, "und", 300),
        (2, "colher de sopa", 30),
        (3, "colher de chá", 15),
        (3, "colher de cha", 15),
        (1, "xícara", 240),
        (2, "xicara", 480),
        (200, "ml", 200),
    ],
)
def test_known_units(quantity, unit, expected):
    assert grams(quantity, unit) == expected


def test_unit_matching_ignores_case_and_surrounding_spaces():
    assert grams(1, "  Xícara ") == 240
    assert grams(2, "COLHER DE SOPA") == 30
    assert grams(1, "KG") == 1000


def test_unknown_unit_is_taken_as_grams():
    """A pinch, a slice or a typo all fall back to the raw quantity"""
    assert grams(42, "pitada") == 42
    assert grams(42, "fatia") == 42
    assert grams(42, "") == 42
    assert grams(42, None) == 42


def test_colher_without_size_falls_back_to_quantity():
    assert grams(2, "colher") == 2
