"""Event date entry: display form ``MM/DD/YYYY``, storage form ``YYYY-MM-DD``."""

import re
from datetime import date

DISPLAY_DATE_RE = re.compile(r"^\d{2}/\d{2}/\d{4}$")
_NON_DIGIT = re.compile(r"\D")

MAX_DIGITS = 8


def shape_date_input(previous: str, raw: str) -> str:
    """Reformat a keystroke or paste into segmented ``MM/DD/YYYY`` digits.

    Once eight digits are present, anything adding digits is ignored so the
    existing ones do not shift. Longer pastes are cut to eight digits.
    """
    previous = previous or ""
    prev_digits = _NON_DIGIT.sub("", previous)
    digits = _NON_DIGIT.sub("", raw or "")

    if len(prev_digits) >= MAX_DIGITS and len(digits) > len(prev_digits):
        return previous

    digits = digits[:MAX_DIGITS]
    parts = [digits[0:2], digits[2:4], digits[4:8]]
    return "/".join(p for p in parts if p)


def is_valid_display_date(value: str | None) -> bool:
    return bool(DISPLAY_DATE_RE.match((value or "").strip()))


def display_to_storage(value: str | None) -> str | None:
    """``09/01/1859`` -> ``1859-09-01``; None when the value is not a full display date."""
    value = (value or "").strip()
    if not DISPLAY_DATE_RE.match(value):
        return None
    mm, dd, yyyy = value.split("/")
    return f"{yyyy}-{mm}-{dd}"


def storage_to_display(value: str | date | None) -> str:
    """``1859-09-01`` -> ``09/01/1859``; empty string when the value is missing or malformed."""
    if value is None:
        return ""
    if isinstance(value, date):
        return f"{value.month:02d}/{value.day:02d}/{value.year:04d}"
    parts = str(value).strip()[:10].split("-")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        return ""
    yyyy, mm, dd = parts
    return f"{mm.zfill(2)}/{dd.zfill(2)}/{yyyy.zfill(4)}"
