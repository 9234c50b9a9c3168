from decimal import Decimal, ROUND_HALF_UP

TWO_PLACES = Decimal("0.01")


def round_money(value) -> float:
    """Round to 2 decimal places, half-up (cents, not banker's rounding)."""
    return float(Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def to_minor_units(amount) -> int:
    """Major-unit amount (rupees) to the gateway's integer minor unit (paise)."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_number(value) -> str:
    # 20.0 -> "20", 12.5 -> "12.5"
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return str(value)
