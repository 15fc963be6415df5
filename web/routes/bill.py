from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from carservice.errors import NotFoundError
from carservice.models.bill import BillCreate, BillUpdate
from web.deps import get_bill_service, get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter()

CREATE_SUMMARY_FIELDS = {"bill_number", "created_at", "id", "total", "created_by"}

# Largest value a signed 64-bit id column can hold.
_MAX_BILL_ID = 2**63 - 1


def _parse_bill_id(raw: str) -> int:
    """Ids that can never match a row are reported as a missing bill."""
    if not (raw.isascii() and raw.isdigit()) or len(raw) > 19 or not 1 <= int(raw) <= _MAX_BILL_ID:
        raise NotFoundError("Bill not found")
    return int(raw)


@router.post("/bill", status_code=201)
async def create_bill(request: Request, payload: BillCreate):
    user_id = get_current_user_id(request)
    logger.info("POST /bill by user=%s", user_id)
    bill = get_bill_service(request).create_bill(payload, user_id)
    return JSONResponse(
        {"status": "success", "data": bill.model_dump(mode="json", include=CREATE_SUMMARY_FIELDS)},
        status_code=201,
    )


@router.get("/bill/{bill_id}")
async def get_bill(request: Request, bill_id: str):
    logger.info("GET /bill/%s", bill_id)
    bill = get_bill_service(request).get_bill(_parse_bill_id(bill_id))
    return {"status": "success", "data": bill.model_dump(mode="json", exclude_none=True)}


@router.get("/bills")
async def list_bills(request: Request):
    logger.info("GET /bills")
    bills = get_bill_service(request).list_bills()
    return {
        "status": "success",
        "data": [bill.model_dump(mode="json", exclude_none=True) for bill in bills],
        "count": len(bills),
    }


@router.put("/bill/{bill_id}")
async def update_bill(request: Request, bill_id: str, payload: BillUpdate):
    logger.info("PUT /bill/%s", bill_id)
    bill = get_bill_service(request).update_bill(_parse_bill_id(bill_id), payload)
    return {
        "status": "success",
        "message": "Bill updated successfully",
        "data": bill.model_dump(mode="json", exclude_none=True),
    }


@router.delete("/bill/{bill_id}")
async def delete_bill(request: Request, bill_id: str):
    logger.info("DELETE /bill/%s", bill_id)
    get_bill_service(request).delete_bill(_parse_bill_id(bill_id))
    return {"status": "success", "message": "Bill deleted successfully"}
