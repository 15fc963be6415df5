from zoneinfo import ZoneInfo

BKK_TZ = ZoneInfo("Asia/Bangkok")

PAYMENT_METHOD_LABELS = {
    "cash": "Cash",
    "transfer": "Bank transfer",
    "credit_card": "Credit card",
}


def format_payment_method(method: str) -> str:
    if not method:
        return "-"
    return PAYMENT_METHOD_LABELS.get(method, method)
