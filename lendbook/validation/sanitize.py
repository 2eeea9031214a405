"""Input sanitization run on raw form data before validation.

Free text loses markup and control characters, numbers become finite
non-negative Decimals, dates become naive datetimes (or None when missing
or unreadable), and tag lists are deduplicated.
"""

import re
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from lendbook.calculations.interest import ZERO, as_datetime, round_money, to_decimal

_TAG_RE = re.compile(r"<[^>]*>")
_ANGLE_RE = re.compile(r"[<>]")
_JS_PROTOCOL_RE = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER_RE = re.compile(r"on\w+\s*=", re.IGNORECASE)
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_SQL_CHARS_RE = re.compile(r"[';\"\\]")

HUNDRED = Decimal("100")
MAX_QUERY_LENGTH = 100


def sanitize_text(value: Any) -> str:
    """Strip HTML-like markup, script vectors and control characters."""
    if value is None:
        return ""
    text = str(value)
    text = _TAG_RE.sub("", text)
    text = _ANGLE_RE.sub("", text)
    text = _JS_PROTOCOL_RE.sub("", text)
    text = _EVENT_HANDLER_RE.sub("", text)
    text = _CONTROL_RE.sub("", text)
    return text.strip()


def sanitize_number(value: Any) -> Decimal:
    """Parse a number; anything missing, unparseable or infinite becomes 0."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return ZERO
    try:
        number = to_decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return ZERO
    if not number.is_finite():
        return ZERO
    return number


def sanitize_currency(value: Any) -> Decimal:
    """Non-negative amount rounded to cents."""
    return max(ZERO, round_money(sanitize_number(value)))


def sanitize_percentage(value: Any) -> Decimal:
    """Percentage clamped to [0, 100]."""
    return max(ZERO, min(HUNDRED, sanitize_number(value)))


def sanitize_date(value: Any) -> datetime | None:
    """Naive datetime from a datetime, date or ISO 8601 string.

    Timezone-aware input is converted to local time. Missing or unreadable
    input yields None so that validators can report it.
    """
    if value is None or value == "":
        return None
    if isinstance(value, date):
        parsed = as_datetime(value)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def sanitize_string_list(values: Iterable[Any] | None) -> list[str]:
    """Sanitize each entry, drop empties and duplicates, keep first-seen order."""
    if not values or isinstance(values, str):
        return []
    cleaned = (sanitize_text(v) for v in values)
    return list(dict.fromkeys(v for v in cleaned if v))


def sanitize_search_query(query: str | None) -> str:
    """Strip quoting and comment sequences from a free-text search."""
    if not query:
        return ""
    query = _SQL_CHARS_RE.sub("", query)
    query = query.replace("--", "").replace("/*", "")
    return query.strip()[:MAX_QUERY_LENGTH]


def _optional_percentage(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    return sanitize_percentage(value)


def sanitize_loan_data(data: Mapping[str, Any]) -> dict[str, Any]:
    """Normalize a raw loan form. Enum fields pass through for the validator."""
    return {
        "lender_name": sanitize_text(data.get("lender_name")),
        "borrower_name": sanitize_text(data.get("borrower_name")),
        "principal_amount": sanitize_currency(data.get("principal_amount")),
        "start_date": sanitize_date(data.get("start_date")),
        "due_date": sanitize_date(data.get("due_date")),
        "interest_type": data.get("interest_type") or "none",
        "interest_rate": _optional_percentage(data.get("interest_rate")),
        "compounding_frequency": data.get("compounding_frequency") or None,
        "notes": sanitize_text(data.get("notes")),
        "tags": sanitize_string_list(data.get("tags")),
        "is_user_lender": bool(data.get("is_user_lender", True)),
    }


def sanitize_repayment_data(data: Mapping[str, Any]) -> dict[str, Any]:
    """Normalize a raw repayment form."""
    return {
        "loan_id": sanitize_text(data.get("loan_id")),
        "payment_amount": sanitize_currency(data.get("payment_amount")),
        "payment_date": sanitize_date(data.get("payment_date")),
        "payment_method": data.get("payment_method") or None,
        "transaction_reference": sanitize_text(data.get("transaction_reference")),
        "notes": sanitize_text(data.get("notes")),
    }


def sanitize_transaction_data(data: Mapping[str, Any]) -> dict[str, Any]:
    """Normalize a raw ledger entry form."""
    return {
        "loan_id": sanitize_text(data.get("loan_id")),
        "transaction_type": data.get("transaction_type") or None,
        "amount": sanitize_currency(data.get("amount")),
        "interest_portion": sanitize_currency(data.get("interest_portion")),
        "transaction_date": sanitize_date(data.get("transaction_date")),
        "particulars": sanitize_text(data.get("particulars")),
        "payment_method": data.get("payment_method") or None,
        "notes": sanitize_text(data.get("notes")),
    }
