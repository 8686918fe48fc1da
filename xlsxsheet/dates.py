"""Conversions between dates and spreadsheet serial numbers, and small XML helpers."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

_MS_PER_DAY = 86_400_000.0


def _epoch(is1904: bool) -> datetime:
    # Serial 0 in the 1900 system is shown as 1900-01-00, i.e. 1899-12-31.
    return datetime(1904, 1, 1) if is1904 else datetime(1899, 12, 31)


def datetime_to_number(value: datetime | date, is1904: bool = False) -> float:
    """Return the serial day number of a date or datetime."""
    if not isinstance(value, datetime):
        value = datetime.combine(value, time())
    value = value.replace(tzinfo=None)
    delta = value - _epoch(is1904)
    milliseconds = delta // timedelta(milliseconds=1)
    number = milliseconds / _MS_PER_DAY
    # The 1900 system counts the non-existent 1900-02-29.
    if not is1904 and number > 59:
        number += 1
    return number


def datetime_from_number(number: float, is1904: bool = False) -> datetime | date | time:
    """Return a time for serials below 1, a date for whole serials, else a datetime."""
    serial = number
    if not is1904 and serial > 60:
        serial -= 1
    milliseconds = int(serial * _MS_PER_DAY + 0.5)
    result = _epoch(is1904) + timedelta(milliseconds=milliseconds)
    if number < 1:
        return result.time()
    if float(number).is_integer():
        return result.date()
    return result


def time_to_number(value: time) -> float:
    """Return the fraction of a day that a time of day represents."""
    milliseconds = ((value.hour * 60 + value.minute) * 60 + value.second) * 1000
    milliseconds += value.microsecond // 1000
    return milliseconds / _MS_PER_DAY


def is_space_reserve_needed(text: str) -> bool:
    """True when leading or trailing whitespace must be preserved in XML."""
    spaces = " \t\n\r"
    return bool(text) and (text[0] in spaces or text[-1] in spaces)


def parse_xsd_boolean(value: str, default: bool = False) -> bool:
    """Read an xsd:boolean value, falling back to ``default``."""
    if value in ("1", "true"):
        return True
    if value in ("0", "false"):
        return False
    return default