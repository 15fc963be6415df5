from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

_CENT = Decimal("0.01")


def to_satang(amount: Decimal | None) -> int | None:
    """Convert baht to integer satang for storage: Decimal('107.50') -> 10750"""
    if amount is None:
        return None
    return int((amount / _CENT).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_satang(satang: int | None) -> Decimal | None:
    """Convert stored satang back to baht: 10750 -> Decimal('107.50')"""
    if satang is None:
        return None
    return (Decimal(satang) * _CENT).quantize(_CENT)


def format_thb(amount: Decimal | None) -> str:
    """Format baht for display: Decimal('2850') -> '฿2,850.00'"""
    return f"฿{(amount or Decimal('0')):,.2f}"
