"""Tests for request shape checks."""

import pytest

from connect_platform.engine.errors import BusinessError
from connect_platform.engine.validation import (
    check_application_fee,
    optional_text,
    require_account_id,
    require_currency,
    require_destination,
    require_positive_amount,
)
from connect_platform.models.enums import ErrorKind


def _message(exc_info) -> str:
    assert exc_info.value.kind == ErrorKind.BAD_REQUEST
    return exc_info.value.message


class TestAmount:
    def test_valid(self):
        assert require_positive_amount(1000) == 1000

    @pytest.mark.parametrize("amount", [0, -1, -500, None])
    def test_invalid(self, amount):
        with pytest.raises(BusinessError) as exc_info:
            require_positive_amount(amount)
        assert "amount" in _message(exc_info)


class TestCurrency:
    def test_valid_is_stripped(self):
        assert require_currency(" eur ") == "eur"

    @pytest.mark.parametrize("currency", [None, "", "   "])
    def test_blank(self, currency):
        with pytest.raises(BusinessError) as exc_info:
            require_currency(currency)
        assert _message(exc_info) == "Missing currency"


class TestDestination:
    def test_valid(self):
        assert require_destination("acct_123") == "acct_123"

    @pytest.mark.parametrize("destination", [None, "", "  "])
    def test_blank(self, destination):
        with pytest.raises(BusinessError) as exc_info:
            require_destination(destination)
        assert "destination_account_id" in _message(exc_info)


class TestApplicationFee:
    def test_absent(self):
        assert check_application_fee(None) is None

    def test_zero_allowed(self):
        assert check_application_fee(0) == 0

    def test_negative_rejected(self):
        with pytest.raises(BusinessError) as exc_info:
            check_application_fee(-1)
        assert "application_fee_amount" in _message(exc_info)


class TestAccountId:
    def test_plain_id(self):
        assert require_account_id("anything") == "anything"

    def test_missing(self):
        with pytest.raises(BusinessError) as exc_info:
            require_account_id("  ")
        assert _message(exc_info) == "Missing id"

    def test_prefix_required(self):
        with pytest.raises(BusinessError) as exc_info:
            require_account_id("cus_123", require_prefix=True)
        assert _message(exc_info) == "Invalid account id"

    def test_prefixed_id(self):
        assert require_account_id("acct_123", require_prefix=True) == "acct_123"


class TestOptionalText:
    def test_blank_is_none(self):
        assert optional_text("   ") is None
        assert optional_text(None) is None

    def test_value_is_stripped(self):
        assert optional_text(" ord-1 ") == "ord-1"
