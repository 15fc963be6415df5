"""Root conftest: in-memory SQLite engine and fixtures for the bills schema."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import Connection, create_engine, event, text
from sqlalchemy.engine import Engine

from carservice.constants import BKK_TZ
from carservice.models.bill import Bill, BillCreate

# Matches Alembic head: 3c9d1f0b7a21 (create bills)
SCHEMA_DDL = """
CREATE TABLE bills (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    bill_number VARCHAR(20) NOT NULL UNIQUE,
    bill_prefix INTEGER NOT NULL,
    bill_seq INTEGER NOT NULL,
    username TEXT NOT NULL DEFAULT '',
    phone TEXT NOT NULL DEFAULT '',
    name1 TEXT NOT NULL DEFAULT '',
    amount1 BIGINT NOT NULL,
    name2 TEXT NOT NULL DEFAULT '',
    amount2 BIGINT,
    name3 TEXT NOT NULL DEFAULT '',
    amount3 BIGINT,
    name4 TEXT NOT NULL DEFAULT '',
    amount4 BIGINT,
    tax1 BIGINT,
    tax2 BIGINT,
    tax3 BIGINT,
    tax4 BIGINT,
    taxgo1 BIGINT,
    taxgo2 BIGINT,
    taxgo3 BIGINT,
    taxgo4 BIGINT,
    check1 BIGINT,
    check2 BIGINT,
    check3 BIGINT,
    check4 BIGINT,
    extension1 TEXT NOT NULL DEFAULT '',
    extension2 BIGINT,
    extension3 TEXT NOT NULL DEFAULT '',
    extension4 BIGINT,
    refer1 TEXT NOT NULL DEFAULT '',
    refer2 TEXT NOT NULL DEFAULT '',
    refer3 TEXT NOT NULL DEFAULT '',
    refer4 TEXT NOT NULL DEFAULT '',
    typerefer1 TEXT NOT NULL DEFAULT '',
    typerefer2 TEXT NOT NULL DEFAULT '',
    typerefer3 TEXT NOT NULL DEFAULT '',
    typerefer4 TEXT NOT NULL DEFAULT '',
    car_registration1 TEXT NOT NULL DEFAULT '',
    car_registration2 TEXT NOT NULL DEFAULT '',
    car_registration3 TEXT NOT NULL DEFAULT '',
    car_registration4 TEXT NOT NULL DEFAULT '',
    payment_method TEXT NOT NULL DEFAULT '',
    description TEXT NOT NULL DEFAULT '',
    total BIGINT NOT NULL DEFAULT 0,
    bill_date DATETIME,
    created_by TEXT NOT NULL DEFAULT '',
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL,
    UNIQUE(bill_prefix, bill_seq)
);
"""


def create_schema(conn: Connection) -> None:
    for statement in SCHEMA_DDL.strip().split(";"):
        stmt = statement.strip()
        if stmt:
            conn.execute(text(stmt))
    conn.commit()


@pytest.fixture()
def db_engine() -> Engine:
    return create_engine("sqlite:///:memory:")


@pytest.fixture()
def db_connection(db_engine: Engine) -> Connection:
    conn = db_engine.connect()
    create_schema(conn)
    yield conn
    conn.close()


def _sample_bill_create(**overrides) -> BillCreate:
    defaults = dict(
        username="Somchai",
        phone="0812345678",
        name1="Annual inspection",
        amount1=Decimal("500"),
        name2="Compulsory insurance",
        amount2=Decimal("645.21"),
        tax1=Decimal("35"),
        taxgo1=Decimal("20"),
        check1=Decimal("1200"),
        extension1="N1",
        extension2=Decimal("100"),
        refer1="INV-001",
        typerefer1="receipt",
        car_registration1="1กก 1234",
        payment_method="cash",
        description="Walk-in customer",
    )
    defaults.update(overrides)
    return BillCreate(**defaults)


def _sample_bill(bill_number: str = "1/0001", **overrides) -> Bill:
    now = datetime(2026, 3, 1, 10, 30, tzinfo=BKK_TZ)
    defaults = dict(
        bill_number=bill_number,
        username="Somchai",
        phone="0812345678",
        name1="Annual inspection",
        amount1=Decimal("500"),
        amount2=Decimal("0"),
        tax1=Decimal("35"),
        taxgo1=Decimal("20"),
        check1=Decimal("1200"),
        payment_method="cash",
        total=Decimal("535"),
        date=now,
        created_by="staff-1",
        created_at=now,
        updated_at=now,
    )
    defaults.update(overrides)
    return Bill(**defaults)


@pytest.fixture()
def sample_bill_create():
    return _sample_bill_create


@pytest.fixture()
def sample_bill():
    return _sample_bill
