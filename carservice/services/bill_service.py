from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal

from carservice.constants import BKK_TZ
from carservice.errors import UnauthorizedError, ValidationError
from carservice.models.bill import (
    CREATE_DEFAULT_ZERO_FIELDS,
    OPTIONAL_AMOUNT_FIELDS,
    STRING_FIELDS,
    Bill,
    BillCreate,
    BillUpdate,
    compute_total,
)
from carservice.repositories.base import BillRepository
from carservice.services.sequence import next_bill_number

logger = logging.getLogger(__name__)


def merge_bill(bill: Bill, update: BillUpdate) -> Bill:
    """Overlay the non-empty parts of ``update`` onto a copy of ``bill``.

    Strings overwrite only when non-empty and amounts only when present, so a
    partial update can replace a value but never clear it. ``amount1`` is
    required on every bill and additionally ignores zero.
    """
    changes: dict = {}
    for field in STRING_FIELDS:
        value = getattr(update, field)
        if value:
            changes[field] = value
    for field in OPTIONAL_AMOUNT_FIELDS:
        value = getattr(update, field)
        if value is not None:
            changes[field] = value
    if update.amount1:
        changes["amount1"] = update.amount1
    logger.debug("merge_bill id=%s fields=%s", bill.id, sorted(changes))
    return bill.model_copy(update=changes)


class BillService:
    def __init__(self, repo: BillRepository) -> None:
        self.repo = repo

    def create_bill(self, payload: BillCreate, created_by: str | None) -> Bill:
        if not created_by or not created_by.strip():
            logger.warning("Bill create rejected: caller identity missing")
            raise UnauthorizedError("Unauthorized: user_id missing")
        if not payload.name1 or payload.amount1 == 0:
            logger.warning("Bill create rejected: name1=%r amount1=%s", payload.name1, payload.amount1)
            raise ValidationError("Name1 and Amount1 are required")

        number = next_bill_number(self.repo)
        now = datetime.now(BKK_TZ)
        bill = Bill(
            **payload.model_dump(),
            bill_number=str(number),
            created_by=created_by,
            date=now,
            created_at=now,
            updated_at=now,
        )
        for field in CREATE_DEFAULT_ZERO_FIELDS:
            if getattr(bill, field) is None:
                setattr(bill, field, Decimal("0"))
        bill.total = compute_total(bill)

        bill = self.repo.create(bill)
        logger.info(
            "Bill created: id=%s, number=%s, total=%s, by=%s",
            bill.id,
            bill.bill_number,
            bill.total,
            bill.created_by,
        )
        return bill

    def get_bill(self, bill_id: int) -> Bill:
        result = self.repo.get_by_id(bill_id)
        logger.debug("get_bill id=%s number=%s", bill_id, result.bill_number)
        return result

    def list_bills(self) -> list[Bill]:
        result = self.repo.list_all()
        logger.debug("Listed %d bills", len(result))
        return result

    def update_bill(self, bill_id: int, payload: BillUpdate) -> Bill:
        existing = self.repo.get_by_id(bill_id)
        bill = merge_bill(existing, payload)
        bill.total = compute_total(bill)
        bill.updated_at = datetime.now(BKK_TZ)

        bill = self.repo.update(bill)
        logger.info("Bill updated: id=%s, number=%s, total=%s", bill.id, bill.bill_number, bill.total)
        return bill

    def delete_bill(self, bill_id: int) -> None:
        self.repo.delete(bill_id)
        logger.info("Bill %s deleted", bill_id)
