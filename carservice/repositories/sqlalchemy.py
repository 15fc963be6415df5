from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import pydantic
from sqlalchemy import Connection, text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from carservice.errors import ConflictError, InternalError, MalformedBillNumberError, NotFoundError
from carservice.models import from_satang, to_satang
from carservice.models.bill import OPTIONAL_AMOUNT_FIELDS, STRING_FIELDS, Bill, BillNumber
from carservice.repositories.base import BillRepository

logger = logging.getLogger(__name__)

# Amount columns hold integer satang.
_AMOUNT_COLUMNS = ("amount1", *OPTIONAL_AMOUNT_FIELDS, "total")

_MUTABLE_COLUMNS = (*STRING_FIELDS, *_AMOUNT_COLUMNS, "updated_at")

_INSERT_COLUMNS = (
    "bill_number",
    "bill_prefix",
    "bill_seq",
    *STRING_FIELDS,
    *_AMOUNT_COLUMNS,
    "bill_date",
    "created_by",
    "created_at",
    "updated_at",
)


# Column names (SQLite) or constraint names (PostgreSQL, MySQL) of the bill-number uniqueness rules.
_BILL_NUMBER_MARKERS = ("bill_number", "bill_prefix", "bill_seq", "uq_bills_")
_NOT_NULL_MARKERS = ("not null", "not-null", "cannot be null")


def _is_bill_number_violation(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower()
    if any(marker in message for marker in _NOT_NULL_MARKERS):
        return False
    return any(marker in message for marker in _BILL_NUMBER_MARKERS)


def _bill_params(bill: Bill) -> dict:
    params: dict = {field: getattr(bill, field) for field in STRING_FIELDS}
    params.update({field: to_satang(getattr(bill, field)) for field in _AMOUNT_COLUMNS})
    params["bill_date"] = bill.date
    params["created_by"] = bill.created_by
    params["created_at"] = bill.created_at
    params["updated_at"] = bill.updated_at
    return params


class SQLAlchemyBillRepository(BillRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @contextmanager
    def _translate_errors(self, action: str) -> Iterator[None]:
        """Map driver failures onto the service error taxonomy, rolling back the connection."""
        try:
            yield
        except IntegrityError as exc:
            self.conn.rollback()
            if not _is_bill_number_violation(exc):
                logger.error("Integrity violation while trying to %s: %s", action, exc.orig)
                raise InternalError(f"Failed to {action}", details=str(exc.orig)) from exc
            logger.warning("Duplicate bill number while trying to %s: %s", action, exc.orig)
            raise ConflictError(f"Failed to {action}: bill number already exists", details=str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            self.conn.rollback()
            logger.error("Database error while trying to %s: %s", action, exc)
            raise InternalError(f"Failed to {action}", details=str(exc)) from exc

    def create(self, bill: Bill) -> Bill:
        number = bill.number
        params = _bill_params(bill)
        params["bill_number"] = str(number)
        params["bill_prefix"] = number.prefix
        params["bill_seq"] = number.seq
        columns = ", ".join(_INSERT_COLUMNS)
        placeholders = ", ".join(f":{column}" for column in _INSERT_COLUMNS)
        with self._translate_errors("create bill"):
            result = self.conn.execute(text(f"INSERT INTO bills ({columns}) VALUES ({placeholders})"), params)
            bill_id = result.lastrowid
            self.conn.commit()
        try:
            return self.get_by_id(bill_id)
        except NotFoundError:
            raise InternalError(f"Failed to retrieve bill after create (id={bill_id})") from None

    @staticmethod
    def _build_bill(row: RowMapping) -> Bill:
        fields: dict = {field: row[field] or "" for field in STRING_FIELDS}
        fields.update({field: from_satang(row[field]) for field in _AMOUNT_COLUMNS})
        return Bill(
            id=row["id"],
            bill_number=row["bill_number"],
            date=row["bill_date"],
            created_by=row["created_by"] or "",
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            **fields,
        )

    def get_by_id(self, bill_id: int) -> Bill:
        with self._translate_errors("retrieve bill"):
            row = (
                self.conn.execute(
                    text("SELECT * FROM bills WHERE id = :id"),
                    {"id": bill_id},
                )
                .mappings()
                .fetchone()
            )
        if row is None:
            raise NotFoundError("Bill not found")
        return self._build_bill(row)

    def list_all(self) -> list[Bill]:
        with self._translate_errors("retrieve bills"):
            rows = self.conn.execute(text("SELECT * FROM bills ORDER BY id")).mappings().fetchall()
        return [self._build_bill(row) for row in rows]

    def update(self, bill: Bill) -> Bill:
        if bill.id is None:
            raise ValueError("Cannot update bill without an id")
        assignments = ", ".join(f"{column} = :{column}" for column in _MUTABLE_COLUMNS)
        params = _bill_params(bill)
        params["id"] = bill.id
        with self._translate_errors("update bill"):
            result = self.conn.execute(text(f"UPDATE bills SET {assignments} WHERE id = :id"), params)
            self.conn.commit()
        if result.rowcount == 0:
            raise NotFoundError("Bill not found")
        return self.get_by_id(bill.id)

    def delete(self, bill_id: int) -> None:
        with self._translate_errors("delete bill"):
            result = self.conn.execute(text("DELETE FROM bills WHERE id = :id"), {"id": bill_id})
            self.conn.commit()
        if result.rowcount == 0:
            raise NotFoundError("Bill not found")

    def get_latest_number(self) -> BillNumber | None:
        with self._translate_errors("read latest bill number"):
            row = (
                self.conn.execute(text("SELECT id, bill_prefix, bill_seq FROM bills ORDER BY id DESC LIMIT 1"))
                .mappings()
                .fetchone()
            )
        if row is None:
            return None
        try:
            return BillNumber(prefix=row["bill_prefix"], seq=row["bill_seq"])
        except pydantic.ValidationError as exc:
            raise MalformedBillNumberError(
                f"Stored bill number is out of range (id={row['id']})",
                details=str(exc),
            ) from exc
