#!/usr/bin/env python3

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

PAIN_NAMESPACE = "urn:iso:std:iso:20022:tech:xsd:pain.001.001.03"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"

# Single-debtor, single-currency SEPA credit transfer profile.
PAYMENT_METHOD = "TRF"
SERVICE_LEVEL = "SEPA"
CHARGE_BEARER = "SLEV"
REGULATORY_CODE = "150"


@dataclass(frozen=True)
class Amount:
    number: Decimal
    currency: str


@dataclass
class Transaction:
    instruction_id: str
    end_to_end_id: str
    amount: Amount
    creditor_name: str
    creditor_iban: str
    regulatory_code: str
    remittance_info: str

