"""
Unit Tests for /pay input validation
"""

import pytest

from mpesa_express.utils.validators import normalize_phone, validate_phone_number, validate_amount


class TestNormalizePhone:

    @pytest.mark.parametrize("raw, expected", [
        ("0712345678",   "254712345678"),  # local 07XX -> 2547XX
        ("0110345678",   "254110345678"),
        ("254712345678", "254712345678"),  # already international
        ("712345678",    "254712345678"),  # bare subscriber number
        ("+254712345678", "254+254712345678"),  # '+' is not stripped
    ])
    def test_normalize_phone(self, raw, expected):
        assert normalize_phone(raw) == expected

    @pytest.mark.parametrize("raw", ["0712345678", "0", "00", "0abc"])
    def test_leading_zero_grows_length_by_two(self, raw):
        normalized = normalize_phone(raw)
        assert normalized.startswith("254")
        assert len(normalized) == len(raw) + 2

    @pytest.mark.parametrize("raw", ["254", "2547", "254712345678", "254abc"])
    def test_254_prefix_is_left_alone(self, raw):
        assert normalize_phone(raw) == raw

    @pytest.mark.parametrize("raw", ["", "2", "25", "7", "99"])
    def test_short_input_does_not_fail(self, raw):
        assert normalize_phone(raw) == "254" + raw


class TestValidatePhoneNumber:

    def test_valid_number(self):
        assert validate_phone_number("254712345678") == (True, None)

    @pytest.mark.parametrize("phone", [
        "254712a45678",
        "254+254712345678",
        "254 712345678",
        "254-71234567",
        "254７12345678",  # full-width digit
        "254²",
    ])
    def test_non_digits_rejected(self, phone):
        valid, error = validate_phone_number(phone)
        assert valid is False
        assert error == "Phone number must contain only digits"

    @pytest.mark.parametrize("phone", ["2547123", "25471234", "2547123456789"])
    def test_length_out_of_bounds(self, phone):
        valid, error = validate_phone_number(phone)
        assert valid is False
        assert error == "Invalid Phone Number"

    @pytest.mark.parametrize("phone", ["254712345", "2547123456", "254712345678"])
    def test_length_bounds_inclusive(self, phone):
        assert validate_phone_number(phone) == (True, None)


class TestValidateAmount:

    @pytest.mark.parametrize("amount", ["1", "10", "0.5", "1500.75", "007"])
    def test_positive_amounts(self, amount):
        assert validate_amount(amount) == (True, None)

    @pytest.mark.parametrize("amount", [
        "0", "0.0", "-1", "-0.01", "abc", "10KES", "nan", "inf", "-inf", "",
        " 10", "10\n", "1_000", "\u0661\u0660", "+10", "1e3", ".5", "10.", "9" * 400,
    ])
    def test_rejected_amounts(self, amount):
        valid, error = validate_amount(amount)
        assert valid is False
        assert error == "Amount must be greater than 0"
