from decimal import Decimal

import pytest

from models.money import MonetaryAmount, Percentage


def test_monetary_amount_keeps_two_decimal_places():
    assert str(MonetaryAmount.value_of("8")) == "8.00"
    assert MonetaryAmount.value_of("$100.00").as_decimal() == Decimal("100.00")


def test_monetary_amount_rounds_half_even():
    assert MonetaryAmount.value_of("0.125").as_decimal() == Decimal("0.12")
    assert MonetaryAmount.value_of("0.135").as_decimal() == Decimal("0.14")


def test_monetary_amount_arithmetic():
    eight = MonetaryAmount.value_of("8.00")
    assert eight + MonetaryAmount.value_of("0.01") == MonetaryAmount.value_of("8.01")
    assert eight - MonetaryAmount.value_of("3.50") == MonetaryAmount.value_of("4.50")
    assert eight * Percentage.value_of("50%") == MonetaryAmount.value_of("4.00")
    assert 2 * eight == MonetaryAmount.value_of("16.00")


def test_monetary_amount_rejects_floats_and_garbage():
    with pytest.raises(TypeError):
        MonetaryAmount(8.0)
    with pytest.raises(ValueError):
        MonetaryAmount.value_of("eight dollars")


@pytest.mark.parametrize("text", ["NaN", "sNaN", "Infinity", "-Infinity"])
def test_non_finite_values_are_rejected(text):
    with pytest.raises(ValueError):
        MonetaryAmount.value_of(text)
    with pytest.raises(ValueError):
        Percentage.value_of(text)


def test_percentage_parses_both_forms():
    assert Percentage.value_of("50%") == Percentage.value_of("0.5")
    assert str(Percentage.value_of("50%")) == "0.50"


def test_percentage_must_be_a_fraction():
    with pytest.raises(ValueError):
        Percentage.value_of("101%")
    with pytest.raises(ValueError):
        Percentage(Decimal("-0.01"))


def test_percentage_addition():
    assert Percentage.value_of("0.25") + Percentage.value_of("0.75") == Percentage.one()


def test_values_are_immutable():
    amount = MonetaryAmount.zero()
    with pytest.raises(AttributeError):
        amount.value = Decimal("1")
