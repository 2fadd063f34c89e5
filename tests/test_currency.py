"""
Test suite for currency module

Tests CurrencyAmount parsing, formatting, checked arithmetic and bounds.
All monetary calculations must be exact.
"""

import pytest
from decimal import Decimal

from transaction_processor.currency import (
    CurrencyAmount, MAX_MANTISSA, amount_from
)
from transaction_processor.exceptions import (
    CurrencyError, InvalidNumericValueError, OutOfBoundsError
)


def amount(text: str) -> CurrencyAmount:
    return CurrencyAmount.parse(text)


MAX = amount(str(MAX_MANTISSA))


class TestParse:
    """Test parsing and formatting"""

    @pytest.mark.parametrize("text, expected", [
        ("12", "12"),
        ("12.", "12"),
        ("12.0", "12.0"),
        ("12.3", "12.3"),
        ("12.34", "12.34"),
        ("12.345", "12.345"),
        ("12.3456", "12.3456"),
        ("12.34567", "12.34567"),
        ("12.3400", "12.3400"),
        ("00.34567", "0.34567"),
        ("0.34567", "0.34567"),
        (".34567", "0.34567"),
        (".5", "0.5"),
        ("0.0", "0.0"),
        ("0.", "0"),
        (".0", "0.0"),
        ("+7.25", "7.25"),
        (str(2 ** 63 - 1), str(2 ** 63 - 1)),
    ])
    def test_parse_positive(self, text, expected):
        """Test that positive values keep their written scale"""
        assert str(amount(text)) == expected

    @pytest.mark.parametrize("text, expected", [
        ("-12", "-12"),
        ("-12.", "-12"),
        ("-12.0", "-12.0"),
        ("-12.3456", "-12.3456"),
        ("-00.34567", "-0.34567"),
        ("-.345", "-0.345"),
        ("-0", "0"),
        ("-0.", "0"),
        ("-.0", "0.0"),
        (str(-(2 ** 63)), str(-(2 ** 63))),
    ])
    def test_parse_negative(self, text, expected):
        """Test negative values and negative zero collapsing to zero"""
        assert str(amount(text)) == expected

    @pytest.mark.parametrize("text", [
        "", "a", "a.0", "0.a", "..", ".", "-", "+", "1.2.3", "0.-5", "--1",
        " 1", "1 ", "1e5", "1_000", "nan", "inf", "0x10",
        str(2 ** 127 - 1), str(2 ** 96),
    ])
    def test_parse_fail(self, text):
        """Test that malformed and out of range strings are rejected"""
        with pytest.raises(InvalidNumericValueError):
            amount(text)

    def test_parse_error_is_value_error(self):
        """Test that parse errors can be caught as ValueError"""
        with pytest.raises(ValueError, match="Invalid numeric value"):
            amount("abc")

    def test_parse_max(self):
        """Test the largest representable magnitude"""
        assert str(MAX) == "79228162514264337593543950335"
        assert str(amount("-" + str(MAX_MANTISSA))) == "-79228162514264337593543950335"

    def test_scale(self):
        """Test the scale property"""
        assert amount("12").scale == 0
        assert amount("12.").scale == 0
        assert amount("12.3400").scale == 4
        assert amount(".5").scale == 1

    def test_scale_capped(self):
        """Test that more than 28 fractional digits are rounded away"""
        value = amount("1." + "1" * 30)
        assert value.scale == 28
        assert str(value) == "1." + "1" * 28

    def test_fraction_rounded_to_fit_mantissa(self):
        """Test that fractional digits are dropped when the mantissa is too wide"""
        value = amount("1234567890.1234567890123456789012")
        assert str(value) == "1234567890.1234567890123456789"

    def test_round_trip(self):
        """Test that formatting then parsing gives the same value and scale"""
        for text in ["0", "0.00", "-1.5", "12.3400", "99999.9999", str(MAX_MANTISSA)]:
            value = amount(text)
            reparsed = amount(str(value))
            assert reparsed == value
            assert reparsed.scale == value.scale
            assert str(reparsed) == str(value)


class TestArithmetic:
    """Test checked arithmetic"""

    def test_add(self):
        """Test exact addition"""
        assert amount("123").checked_add(amount("456")) == amount("579")
        assert amount("123").checked_add(amount("0.1")) == amount("123.1")

        half = amount(str(2 ** 95 - 1))
        assert half.checked_add(half) == amount(str(2 ** 96 - 2))

    def test_add_keeps_larger_scale(self):
        """Test that the result uses the larger of the two scales"""
        assert str(amount("1.50").checked_add(amount("1"))) == "2.50"
        assert str(amount("1.5").checked_add(amount("2.25"))) == "3.75"
        assert str(amount("0.1").checked_add(amount("0.2"))) == "0.3"

    def test_sub(self):
        """Test exact subtraction"""
        assert amount("123").checked_sub(amount("456")) == amount("-333")
        assert amount("123").checked_sub(amount("0.1")) == amount("122.9")

        half = amount(str(2 ** 95 - 1))
        assert half.checked_sub(half) == CurrencyAmount.ZERO

    def test_sub_to_zero_is_not_negative(self):
        """Test that subtracting to zero never produces negative zero"""
        result = amount("1.5").checked_sub(amount("1.5"))
        assert str(result) == "0.0"
        assert not result.is_negative()

    def test_add_commutative(self):
        """Test that addition is commutative within range"""
        values = [amount(v) for v in ["0", "1", "-1", "0.0001", "123.45", "-99.999", "1000000"]]
        for a in values:
            for b in values:
                assert a.checked_add(b) == b.checked_add(a)

    def test_add_overflow(self):
        """Test that overflow raises instead of wrapping"""
        with pytest.raises(OutOfBoundsError):
            MAX.checked_add(MAX)

        with pytest.raises(OutOfBoundsError):
            MAX.checked_add(amount("1"))

        with pytest.raises(CurrencyError):
            (-MAX).checked_sub(MAX)

    def test_add_near_bound_with_fraction(self):
        """Test that fractional digits are rounded off before integer digits overflow"""
        result = MAX.checked_sub(amount("1")).checked_add(amount("0.4"))
        assert result == amount("79228162514264337593543950334")

    def test_negate(self):
        """Test negation keeps scale and never produces negative zero"""
        assert str(-amount("12.30")) == "-12.30"
        assert str(amount("12.30").negate()) == "-12.30"
        assert str(-amount("-5")) == "5"
        assert str(-CurrencyAmount.ZERO) == "0"
        assert str(-amount("0.0")) == "0.0"
        assert str(-MAX) == "-" + str(MAX_MANTISSA)


class TestComparison:
    """Test equality and ordering"""

    def test_equality_is_numeric(self):
        """Test that equality ignores scale"""
        assert amount("12.0") == amount("12")
        assert hash(amount("12.0")) == hash(amount("12"))
        assert str(amount("12.0")) != str(amount("12"))
        assert amount("12.01") != amount("12")

    def test_ordering(self):
        """Test the total order"""
        assert amount("-1") < CurrencyAmount.ZERO < amount("0.01")
        assert amount("10") > amount("9.99")
        assert amount("1.0") <= amount("1")
        assert sorted([amount("3"), amount("-2"), amount("0.5")]) == [
            amount("-2"), amount("0.5"), amount("3")
        ]

    def test_state_checks(self):
        """Test is_negative and is_zero"""
        assert amount("-0.01").is_negative()
        assert not CurrencyAmount.ZERO.is_negative()
        assert not amount("-0").is_negative()
        assert amount("0.00").is_zero()
        assert not amount("0.01").is_zero()


class TestConstruction:
    """Test building amounts from other types"""

    def test_from_decimal(self):
        """Test direct construction from Decimal"""
        assert str(CurrencyAmount(Decimal("1.25"))) == "1.25"
        assert str(CurrencyAmount(Decimal("1E+3"))) == "1000"

    def test_from_decimal_out_of_bounds(self):
        """Test that out of range Decimals are rejected"""
        with pytest.raises(OutOfBoundsError):
            CurrencyAmount(Decimal("1E+40"))

        with pytest.raises(OutOfBoundsError):
            CurrencyAmount(Decimal("NaN"))

    def test_from_other_types(self):
        """Test that direct construction follows the same rules as amount_from"""
        assert CurrencyAmount("2.50") == amount("2.5")
        assert str(CurrencyAmount("2.50")) == "2.50"
        assert CurrencyAmount(3) == amount("3")

        with pytest.raises(InvalidNumericValueError):
            CurrencyAmount("abc")

        with pytest.raises(InvalidNumericValueError):
            CurrencyAmount(1.5)

        with pytest.raises(InvalidNumericValueError):
            CurrencyAmount(False)

    def test_amount_from(self):
        """Test loose conversion helper"""
        assert amount_from("1.5") == amount("1.5")
        assert amount_from(7) == amount("7")
        assert amount_from(Decimal("0.25")) == amount("0.25")

        value = amount("3")
        assert amount_from(value) is value

    def test_amount_from_rejects_other_types(self):
        """Test that floats and bools are not accepted"""
        with pytest.raises(InvalidNumericValueError):
            amount_from(1.5)

        with pytest.raises(InvalidNumericValueError):
            amount_from(True)

        with pytest.raises(InvalidNumericValueError):
            amount_from("1,5")
