#!/usr/bin/env python3


class SepaError(ValueError):
    """Base class for every error raised while building a transfer document."""


class FormatError(SepaError):
    """A timestamp or date does not match its required pattern."""


class InvalidIBANError(SepaError):
    """An emitter or creditor IBAN fails the mod-97 checksum."""


class PrecisionError(SepaError):
    """An amount carries more than two decimal digits."""


class ConversionError(SepaError):
    """An amount can't be represented in minor units."""
