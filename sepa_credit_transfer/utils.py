#!/usr/bin/env python3

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from sepa_credit_transfer.errors import ConversionError

logger = logging.getLogger(__name__)

IBAN_MIN_LENGTH = 4
IBAN_MAX_LENGTH = 34

CENT = Decimal("0.01")
MINOR_UNITS_MIN = -(2**63)
MINOR_UNITS_MAX = 2**63 - 1


def is_valid_iban(iban: str) -> bool:
    """Check an IBAN with the ISO 7064 mod-97 algorithm.

    The first four characters are moved to the end, letters are expanded to
    two digits (A=10 ... Z=35) and spaces are skipped. The resulting number is
    reduced modulo 97 digit by digit, so no big integer is ever built.

    Args:
      iban: The IBAN, uppercase, optionally with spaces.
    Returns:
      True if the remainder is 1.
    """
    if not IBAN_MIN_LENGTH <= len(iban) <= IBAN_MAX_LENGTH:
        logger.debug(f"Rejecting {iban=}: bad length")
        return False

    remainder = 0
    for char in iban[4:] + iban[:4]:
        if "A" <= char <= "Z":
            digits = str(ord(char) - ord("A") + 10)
        elif "0" <= char <= "9":
            digits = char
        elif char == " ":
            continue
        else:
            logger.debug(f"Rejecting {iban=}: unexpected {char=}")
            return False
        for digit in digits:
            remainder = (remainder * 10 + int(digit)) % 97
    return remainder == 1


def to_decimal(amount: Decimal | float | int | str) -> Decimal:
    """Floats go through their shortest repr so 0.1 stays one tenth."""
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, float):
        return Decimal(repr(amount))
    try:
        return Decimal(amount)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ConversionError(f"Can't convert {amount=} to a decimal") from e


def decimals_number(amount: Decimal | float | int | str) -> int:
    """Number of digits after the decimal point, trailing zeros ignored."""
    number = to_decimal(amount)
    if not number.is_finite():
        return 0
    text = f"{number:f}"
    if "." not in text:
        return 0
    return len(text.split(".")[1].rstrip("0"))


def to_minor_units(amount: Decimal | float | int | str) -> int:
    """Convert an amount to an integer number of cents.

    The amount is rounded half away from zero to two decimals, the decimal
    point is dropped and the remaining digits are read as an integer.

    Raises:
      ConversionError: The amount is not finite or the cents don't fit in a
        signed 64-bit integer.
    """
    number = to_decimal(amount)
    if not number.is_finite():
        raise ConversionError(f"Can't convert non-finite {amount=} to minor units")
    try:
        cents = number.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ConversionError(f"Can't convert {amount=} to minor units") from e

    minor_units = int(f"{cents:f}".replace(".", "", 1))
    if not MINOR_UNITS_MIN <= minor_units <= MINOR_UNITS_MAX:
        raise ConversionError(f"{minor_units=} overflows a 64-bit integer")
    return minor_units


def to_amount(minor_units: int) -> Decimal:
    if not MINOR_UNITS_MIN <= minor_units <= MINOR_UNITS_MAX:
        raise ConversionError(f"{minor_units=} overflows a 64-bit integer")
    return Decimal(minor_units).scaleb(-2)


def format_amount(number: Decimal) -> str:
    """Fixed-point text without exponent or trailing zeros, e.g. 170000 or 76.3."""
    text = f"{number:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
