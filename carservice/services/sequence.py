from __future__ import annotations

import logging

from carservice.models.bill import BillNumber
from carservice.repositories.base import BillRepository

logger = logging.getLogger(__name__)


def next_bill_number(repo: BillRepository) -> BillNumber:
    """Derive the number following the most recently created bill.

    Read-only: two concurrent callers can compute the same number, and the
    store's uniqueness constraint decides which insert wins.
    """
    latest = repo.get_latest_number()
    if latest is None:
        result = BillNumber.first()
    else:
        result = latest.next()
    logger.debug("next_bill_number latest=%s next=%s", latest, result)
    return result
