from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from carservice.errors import MalformedBillNumberError

MAX_SEQ = 9999

_BILL_NUMBER_RE = re.compile(r"^(\d+)/(\d{4})$")

# Baht with satang precision, emitted as a JSON number rather than a string.
Amount = Annotated[
    Decimal,
    Field(max_digits=12, decimal_places=2),
    PlainSerializer(float, return_type=float, when_used="json"),
]

STRING_FIELDS = (
    "username",
    "phone",
    "name1",
    "name2",
    "name3",
    "name4",
    "extension1",
    "extension3",
    "refer1",
    "refer2",
    "refer3",
    "refer4",
    "typerefer1",
    "typerefer2",
    "typerefer3",
    "typerefer4",
    "car_registration1",
    "car_registration2",
    "car_registration3",
    "car_registration4",
    "payment_method",
    "description",
)

OPTIONAL_AMOUNT_FIELDS = (
    "amount2",
    "amount3",
    "amount4",
    "tax1",
    "tax2",
    "tax3",
    "tax4",
    "taxgo1",
    "taxgo2",
    "taxgo3",
    "taxgo4",
    "check1",
    "check2",
    "check3",
    "check4",
    "extension2",
    "extension4",
)

# Only these contribute to Bill.total; taxgo, check and extension amounts are tracked separately.
TOTAL_FIELDS = ("amount1", "amount2", "amount3", "amount4", "tax1", "tax2", "tax3", "tax4")

# Normalized to zero on creation so consumers can rely on them being present.
CREATE_DEFAULT_ZERO_FIELDS = ("amount2", "tax1", "taxgo1")


class BillNumber(BaseModel):
    model_config = ConfigDict(frozen=True)

    prefix: int = Field(ge=1)
    seq: int = Field(ge=1, le=MAX_SEQ)

    def __str__(self) -> str:
        return f"{self.prefix}/{self.seq:04d}"

    def next(self) -> BillNumber:
        if self.seq < MAX_SEQ:
            return BillNumber(prefix=self.prefix, seq=self.seq + 1)
        return BillNumber(prefix=self.prefix + 1, seq=1)

    @classmethod
    def first(cls) -> BillNumber:
        return cls(prefix=1, seq=1)

    @classmethod
    def parse(cls, raw: str) -> BillNumber:
        match = _BILL_NUMBER_RE.match(raw or "")
        if match is None:
            raise MalformedBillNumberError(f"Malformed bill number: {raw!r}")
        prefix, seq = int(match.group(1)), int(match.group(2))
        if prefix < 1 or not 1 <= seq <= MAX_SEQ:
            raise MalformedBillNumberError(f"Bill number out of range: {raw!r}")
        return cls(prefix=prefix, seq=seq)


class _BillFields(BaseModel):
    username: str = ""
    phone: str = ""

    name1: str = ""
    name2: str = ""
    amount2: Amount | None = None
    name3: str = ""
    amount3: Amount | None = None
    name4: str = ""
    amount4: Amount | None = None

    tax1: Amount | None = None
    tax2: Amount | None = None
    tax3: Amount | None = None
    tax4: Amount | None = None
    taxgo1: Amount | None = None
    taxgo2: Amount | None = None
    taxgo3: Amount | None = None
    taxgo4: Amount | None = None

    check1: Amount | None = None
    check2: Amount | None = None
    check3: Amount | None = None
    check4: Amount | None = None

    extension1: str = ""
    extension2: Amount | None = None
    extension3: str = ""
    extension4: Amount | None = None

    refer1: str = ""
    refer2: str = ""
    refer3: str = ""
    refer4: str = ""
    typerefer1: str = ""
    typerefer2: str = ""
    typerefer3: str = ""
    typerefer4: str = ""

    car_registration1: str = ""
    car_registration2: str = ""
    car_registration3: str = ""
    car_registration4: str = ""

    payment_method: str = ""  # cash, transfer, credit_card
    description: str = ""


class BillCreate(_BillFields):
    """Client payload for a new bill; number, total and audit fields are ignored."""

    amount1: Amount = Decimal("0")


class BillUpdate(_BillFields):
    """Partial payload: empty strings and missing amounts leave the stored value alone."""

    amount1: Amount | None = None


class Bill(_BillFields):
    id: int | None = None
    bill_number: str = ""
    amount1: Amount = Decimal("0")
    total: Amount = Decimal("0")
    date: datetime | None = None
    created_by: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def number(self) -> BillNumber:
        return BillNumber.parse(self.bill_number)


def compute_total(bill: Bill) -> Decimal:
    total = Decimal("0")
    for field in TOTAL_FIELDS:
        value = getattr(bill, field)
        if value is not None:
            total += value
    return total
