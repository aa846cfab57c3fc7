#!/usr/bin/env python3

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from lxml import etree

from sepa_credit_transfer.config import Emitter
from sepa_credit_transfer.errors import FormatError, InvalidIBANError, PrecisionError
from sepa_credit_transfer.models import (
    CHARGE_BEARER,
    PAIN_NAMESPACE,
    PAYMENT_METHOD,
    REGULATORY_CODE,
    SERVICE_LEVEL,
    XSI_NAMESPACE,
    Amount,
    Transaction,
)
from sepa_credit_transfer.utils import (
    decimals_number,
    format_amount,
    is_valid_iban,
    to_amount,
    to_decimal,
    to_minor_units,
)

logger = logging.getLogger(__name__)

CREATION_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
EXECUTION_DATE_FORMAT = "%Y-%m-%d"
CREATION_DATE_PATTERN = re.compile(
    r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}"
)
EXECUTION_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

MAX_DECIMALS = 2


def check_date(value: str, pattern: re.Pattern, date_format: str) -> None:
    """Raise a FormatError unless value is a real date in date_format."""
    if not pattern.fullmatch(value):
        raise FormatError(f"{value=} does not match {date_format}")
    try:
        datetime.strptime(value, date_format)
    except ValueError as e:
        raise FormatError(f"{value=} is not a valid {date_format} date") from e


@dataclass
class Document:
    """A pain.001.001.03 credit transfer batch held in memory.

    Both transaction counters and both control sums are kept equal to each
    other and to the transaction list. Only ``init_doc`` and
    ``add_transaction`` mutate the document; there is no internal locking.
    """

    namespace: str = ""
    xsi_namespace: str = ""
    group_header_msg_id: str = ""
    group_header_creation_date: str = ""
    group_header_nb_of_txs: int = 0
    group_header_ctrl_sum: Decimal = Decimal(0)
    group_header_emitter_name: str = ""
    payment_info_id: str = ""
    payment_method: str = ""
    payment_info_nb_of_txs: int = 0
    payment_info_ctrl_sum: Decimal = Decimal(0)
    service_level: str = ""
    execution_date: str = ""
    debtor_name: str = ""
    debtor_iban: str = ""
    debtor_bic: str = ""
    charge_bearer: str = ""
    transactions: list[Transaction] = field(default_factory=list)

    def init_doc(
        self,
        msg_id: str,
        creation_date: str,
        execution_date: str,
        emitter_name: str,
        emitter_iban: str,
        emitter_bic: str,
    ) -> None:
        """Stamp the emitter identity and the profile constants.

        Calling it again overwrites the identity; transactions, counters and
        control sums are left alone.

        Args:
          msg_id: Message id, also used as payment information id.
          creation_date: Creation timestamp, ``YYYY-MM-DDTHH:MM:SS``.
          execution_date: Requested execution date, ``YYYY-MM-DD``.
          emitter_name: Initiating party and debtor name.
          emitter_iban: Debtor account IBAN.
          emitter_bic: Debtor agent BIC.
        Raises:
          FormatError: A date doesn't match its pattern.
          InvalidIBANError: The emitter IBAN fails the checksum.
        """
        check_date(creation_date, CREATION_DATE_PATTERN, CREATION_DATE_FORMAT)
        check_date(execution_date, EXECUTION_DATE_PATTERN, EXECUTION_DATE_FORMAT)
        if not is_valid_iban(emitter_iban):
            raise InvalidIBANError(f"Invalid emitter {emitter_iban=}")

        self.namespace = PAIN_NAMESPACE
        self.xsi_namespace = XSI_NAMESPACE
        self.group_header_msg_id = msg_id
        self.payment_info_id = msg_id
        self.group_header_creation_date = creation_date
        self.execution_date = execution_date
        self.group_header_emitter_name = emitter_name
        self.debtor_name = emitter_name
        self.debtor_iban = emitter_iban
        self.debtor_bic = emitter_bic
        self.payment_method = PAYMENT_METHOD
        self.service_level = SERVICE_LEVEL
        self.charge_bearer = CHARGE_BEARER
        logger.info(f"Initialized document {msg_id=} for {emitter_name=}")

    def init_from_emitter(
        self, msg_id: str, creation_date: str, execution_date: str, emitter: Emitter
    ) -> None:
        self.init_doc(
            msg_id=msg_id,
            creation_date=creation_date,
            execution_date=execution_date,
            emitter_name=emitter.name,
            emitter_iban=emitter.iban,
            emitter_bic=emitter.bic,
        )

    def add_transaction(
        self,
        id: str,
        amount: Decimal | float | int | str,
        currency: str,
        creditor_name: str,
        creditor_iban: str,
    ) -> Transaction:
        """Append a transfer and update both counters and both control sums.

        The new control sum is computed in minor units before anything is
        modified, so a failing call leaves the document untouched.

        Raises:
          InvalidIBANError: The creditor IBAN fails the checksum.
          PrecisionError: The amount has more than two decimals.
          ConversionError: The amount or the new sum can't be expressed in
            minor units.
        """
        if not is_valid_iban(creditor_iban):
            raise InvalidIBANError(f"Invalid creditor {creditor_iban=}")
        if decimals_number(amount) > MAX_DECIMALS:
            raise PrecisionError(f"{amount=} has more than {MAX_DECIMALS} decimals")

        ctrl_sum = to_amount(
            to_minor_units(self.group_header_ctrl_sum) + to_minor_units(amount)
        )
        logger.debug(f"Control sum {self.group_header_ctrl_sum} -> {ctrl_sum}")

        transaction = Transaction(
            instruction_id=id,
            end_to_end_id=id,
            amount=Amount(number=to_decimal(amount), currency=currency),
            creditor_name=creditor_name,
            creditor_iban=creditor_iban,
            regulatory_code=REGULATORY_CODE,
            remittance_info=id,
        )
        self.transactions.append(transaction)
        self.group_header_nb_of_txs += 1
        self.payment_info_nb_of_txs += 1
        self.group_header_ctrl_sum = ctrl_sum
        self.payment_info_ctrl_sum = ctrl_sum
        logger.info(f"New {transaction=}")
        return transaction

    def serialize(self) -> bytes:
        return etree.tostring(self.to_xml(), encoding="UTF-8", xml_declaration=False)

    def pretty_serialize(self) -> bytes:
        return etree.tostring(
            self.to_xml(), pretty_print=True, encoding="UTF-8", xml_declaration=False
        )

    def to_xml(self) -> etree._Element:
        """Build the element tree in schema order. Nothing is validated here."""
        nsmap = {}
        if self.namespace:
            nsmap[None] = self.namespace
        if self.xsi_namespace:
            nsmap["xsi"] = self.xsi_namespace

        root = etree.Element("Document", nsmap=nsmap)
        cst = _elm(root, "CstmrCdtTrfInitn")

        # Group Header
        grp = _elm(cst, "GrpHdr")
        _elm(grp, "MsgId", self.group_header_msg_id)
        _elm(grp, "CreDtTm", self.group_header_creation_date)
        _elm(grp, "NbOfTxs", str(self.group_header_nb_of_txs))
        _elm(grp, "CtrlSum", format_amount(self.group_header_ctrl_sum))
        initg = _elm(grp, "InitgPty")
        _elm(initg, "Nm", self.group_header_emitter_name)

        # Payment Information
        pmt = _elm(cst, "PmtInf")
        _elm(pmt, "PmtInfId", self.payment_info_id)
        _elm(pmt, "PmtMtd", self.payment_method)
        _elm(pmt, "NbOfTxs", str(self.payment_info_nb_of_txs))
        _elm(pmt, "CtrlSum", format_amount(self.payment_info_ctrl_sum))
        tp_inf = _elm(pmt, "PmtTpInf")
        svc_lvl = _elm(tp_inf, "SvcLvl")
        _elm(svc_lvl, "Cd", self.service_level)
        _elm(pmt, "ReqdExctnDt", self.execution_date)
        dbtr = _elm(pmt, "Dbtr")
        _elm(dbtr, "Nm", self.debtor_name)
        dbtr_acct = _elm(pmt, "DbtrAcct")
        _elm(_elm(dbtr_acct, "Id"), "IBAN", self.debtor_iban)
        dbtr_agt = _elm(pmt, "DbtrAgt")
        _elm(_elm(dbtr_agt, "FinInstnId"), "BIC", self.debtor_bic)
        _elm(pmt, "ChrgBr", self.charge_bearer)

        for transaction in self.transactions:
            _transaction_elm(pmt, transaction)

        return root


def _elm(
    parent,
    tag: str,
    text: str | None = None,
    attrib: dict[str, str] | None = None,
):
    if attrib is None:
        elem = etree.SubElement(parent, tag)
    else:
        elem = etree.SubElement(parent, tag, attrib=attrib)
    if text is not None:
        elem.text = text
    return elem


def _transaction_elm(parent, transaction: Transaction):
    """Constructs CdtTrfTxInf: PmtId, Amt, Cdtr, CdtrAcct, RgltryRptg, RmtInf"""
    cdt = _elm(parent, "CdtTrfTxInf")
    pmt_id = _elm(cdt, "PmtId")
    _elm(pmt_id, "InstrId", transaction.instruction_id)
    _elm(pmt_id, "EndToEndId", transaction.end_to_end_id)

    amt = _elm(cdt, "Amt")
    _elm(
        amt,
        "InstdAmt",
        format_amount(transaction.amount.number),
        attrib={"Ccy": transaction.amount.currency},
    )

    cdtr = _elm(cdt, "Cdtr")
    _elm(cdtr, "Nm", transaction.creditor_name)
    cdtr_acct = _elm(cdt, "CdtrAcct")
    _elm(_elm(cdtr_acct, "Id"), "IBAN", transaction.creditor_iban)

    rgltry = _elm(cdt, "RgltryRptg")
    _elm(_elm(rgltry, "Dtls"), "Cd", transaction.regulatory_code)

    rmt = _elm(cdt, "RmtInf")
    _elm(rmt, "Ustrd", transaction.remittance_info)
    return cdt
