"""Date-aware selection over report object keys.

Report keys look like ``<prefix><YYYY-MM-DD>.<ext>``. Every function here is a
pure transformation over a key listing that the caller has already fetched.
Keys without a parseable leading date are skipped by the date-based helpers,
never raised on.
"""

import logging
import re
from datetime import date, datetime
from typing import Iterable, Optional

from weekly_reports.periods import DateRange

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
_DATE_TOKEN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def filename_of(key: str) -> str:
    return key[key.rfind("/") + 1:]


def extract_date(key: str) -> Optional[date]:
    """Return the report date encoded in the key's filename, or None."""
    filename = filename_of(key)
    if "." not in filename:
        return None
    token = filename.split(".", 1)[0]
    if not _DATE_TOKEN.match(token):
        return None
    try:
        return datetime.strptime(token, DATE_FORMAT).date()
    except ValueError:
        return None


def _dated(keys: Iterable[str]) -> list[tuple[str, date]]:
    pairs = []
    for key in keys:
        report_date = extract_date(key)
        if report_date is None:
            logger.warning("Could not parse date from filename: %s", filename_of(key))
            continue
        pairs.append((key, report_date))
    return pairs


def filter_by_range(keys: Iterable[str], date_range: DateRange) -> list[str]:
    """Keys whose date falls inside ``date_range`` (inclusive), in input order."""
    matched = [key for key, report_date in _dated(keys) if date_range.contains(report_date)]
    logger.info(
        "Found %d reports in date range %s to %s",
        len(matched), date_range.start, date_range.end,
    )
    return matched


def sort_chronologically(keys: Iterable[str]) -> list[str]:
    """Parseable keys ordered by report date, ties broken by key."""
    return [key for key, _ in sorted(_dated(keys), key=lambda pair: (pair[1], pair[0]))]


def latest(keys: Iterable[str]) -> Optional[str]:
    """The key with the greatest report date; keys without a date are ignored."""
    dated = _dated(keys)
    if not dated:
        return None
    key, _ = max(dated, key=lambda pair: (pair[1], pair[0]))
    return key


def latest_by_key(keys: Iterable[str]) -> Optional[str]:
    """Lexicographically greatest key.

    Only tracks calendar order while the date is the fixed-width start of the
    filename; prefer ``latest``.
    """
    return max(keys, default=None)


def matches_date(key: str, day: date) -> bool:
    """Loose check: the filename contains ``YYYY-MM-DD`` anywhere.

    ``2024-01-01-extra.csv`` matches 2024-01-01 even though ``extract_date``
    cannot parse it.
    """
    return day.strftime(DATE_FORMAT) in filename_of(key)


def matches_date_exact(key: str, day: date) -> bool:
    return extract_date(key) == day
