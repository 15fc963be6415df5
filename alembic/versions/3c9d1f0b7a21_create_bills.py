"""create bills

Revision ID: 3c9d1f0b7a21
Revises:
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "3c9d1f0b7a21"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _text(name: str) -> sa.Column:
    return sa.Column(name, sa.Text, nullable=False, server_default="")


def _satang(name: str) -> sa.Column:
    return sa.Column(name, sa.BigInteger, nullable=True)


def upgrade() -> None:
    op.create_table(
        "bills",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("bill_number", sa.String(20), nullable=False),
        sa.Column("bill_prefix", sa.Integer, nullable=False),
        sa.Column("bill_seq", sa.Integer, nullable=False),
        _text("username"),
        _text("phone"),
        _text("name1"),
        sa.Column("amount1", sa.BigInteger, nullable=False),
        _text("name2"),
        _satang("amount2"),
        _text("name3"),
        _satang("amount3"),
        _text("name4"),
        _satang("amount4"),
        *[_satang(f"tax{i}") for i in range(1, 5)],
        *[_satang(f"taxgo{i}") for i in range(1, 5)],
        *[_satang(f"check{i}") for i in range(1, 5)],
        _text("extension1"),
        _satang("extension2"),
        _text("extension3"),
        _satang("extension4"),
        *[_text(f"refer{i}") for i in range(1, 5)],
        *[_text(f"typerefer{i}") for i in range(1, 5)],
        *[_text(f"car_registration{i}") for i in range(1, 5)],
        _text("payment_method"),
        _text("description"),
        sa.Column("total", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("bill_date", sa.DateTime, nullable=True),
        _text("created_by"),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("bill_number", name="uq_bills_bill_number"),
        sa.UniqueConstraint("bill_prefix", "bill_seq", name="uq_bills_prefix_seq"),
    )


def downgrade() -> None:
    op.drop_table("bills")
