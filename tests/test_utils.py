#!/usr/bin/env python3

from decimal import Decimal

import pytest
from tests.utils import VALID_IBANS, fake_iban, tamper

from sepa_credit_transfer import utils
from sepa_credit_transfer.errors import ConversionError


@pytest.mark.parametrize("iban", VALID_IBANS)
def test_is_valid_iban(iban):
    assert utils.is_valid_iban(iban)


@pytest.mark.parametrize("iban", VALID_IBANS)
def test_is_valid_iban_tampered(iban):
    assert not utils.is_valid_iban(tamper(iban))


@pytest.mark.parametrize(
    "iban",
    [
        "",
        "GB2",
        "GB29NWBK60161331926819" + "0" * 13,
        "GB29-NWBK-6016-1331-9268-19",
        "gb29nwbk60161331926819",
        "GB29NWBK6016133192681é",
        "ZZ382200221020145685",
        "XX12345678901234567",
    ],
)
def test_is_valid_iban_rejects(iban):
    assert not utils.is_valid_iban(iban)


def test_is_valid_iban_ignores_spaces():
    assert utils.is_valid_iban("GB29 NWBK 6016 1331 9268 19")


def test_is_valid_iban_long_with_letters():
    iban = fake_iban(country="MT", size=30, letters=True)
    assert len(iban) == 34
    assert utils.is_valid_iban(iban)


def test_is_valid_iban_random():
    for _ in range(50):
        assert utils.is_valid_iban(fake_iban())


@pytest.mark.parametrize(
    "amount, expected",
    [
        (0, 0),
        (123.0, 0),
        (144.2, 1),
        (1.123456789, 9),
        (3.1415900000, 5),
        (-1250, 0),
        (-252123.123, 3),
        (0.1, 1),
        (1e-05, 5),
        (Decimal("1.50"), 1),
        (Decimal("1E+3"), 0),
        ("7.98", 2),
        (float("nan"), 0),
    ],
)
def test_decimals_number(amount, expected):
    assert utils.decimals_number(amount) == expected


@pytest.mark.parametrize(
    "amount, expected",
    [
        (0, 0),
        (70000, 7000000),
        (0.34, 34),
        (1199.86, 119986),
        (7.98, 798),
        (-252.9, -25290),
        (Decimal("0.005"), 1),
        (Decimal("-0.005"), -1),
        ("12.3", 1230),
    ],
)
def test_to_minor_units(amount, expected):
    assert utils.to_minor_units(amount) == expected


@pytest.mark.parametrize(
    "amount",
    [
        float("inf"),
        float("-inf"),
        float("nan"),
        "abc",
        Decimal("1e17"),
        Decimal("1e40"),
    ],
)
def test_to_minor_units_fails(amount):
    with pytest.raises(ConversionError):
        utils.to_minor_units(amount)


@pytest.mark.parametrize(
    "minor_units, expected",
    [
        (0, Decimal("0")),
        (5, Decimal("0.05")),
        (34, Decimal("0.34")),
        (17000000, Decimal("170000")),
        (-25290, Decimal("-252.9")),
    ],
)
def test_to_amount(minor_units, expected):
    assert utils.to_amount(minor_units) == expected


@pytest.mark.parametrize(
    "number, expected",
    [
        (Decimal("170000.00"), "170000"),
        (Decimal("76.30"), "76.3"),
        (Decimal("0.05"), "0.05"),
        (Decimal("0"), "0"),
        (Decimal("1E+5"), "100000"),
        (Decimal("-12.10"), "-12.1"),
    ],
)
def test_format_amount(number, expected):
    assert utils.format_amount(number) == expected


@pytest.mark.parametrize("minor_units", [2**63, -(2**63) - 1])
def test_to_amount_overflow(minor_units):
    with pytest.raises(ConversionError):
        utils.to_amount(minor_units)
