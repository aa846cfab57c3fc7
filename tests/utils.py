#!/usr/bin/env python3

import random
import string

VALID_IBANS = (
    "FR1420041010050500013M02606",
    "GB29NWBK60161331926819",
    "BE62510007547061",
    "BG80BNBG96611020345678",
    "EE382200221020145685",
    "AT611904300234573201",
)


def random_string(size: int, letters: bool = False, digits: bool = False):
    population = ""
    if letters:
        population += string.ascii_uppercase
    if digits:
        population += string.digits
    return "".join(random.choices(population=population, k=size))


def iban_check_digits(country: str, bban: str) -> str:
    expanded = "".join(str(int(char, 36)) for char in bban + country + "00")
    return f"{98 - int(expanded) % 97:02d}"


def fake_iban(country: str = "DE", size: int = 18, letters: bool = False):
    bban = random_string(size=size, letters=letters, digits=True)
    return country + iban_check_digits(country, bban) + bban


def tamper(iban: str) -> str:
    """Change one check digit."""
    digit = int(iban[2])
    return iban[:2] + str((digit + 1) % 10) + iban[3:]
