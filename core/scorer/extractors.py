#!/usr/bin/env python3
"""
Factor Extractors - pull raw signals out of a ScorableRecord.

Every builder here returns an extractor `(record, as_of) -> raw | MISSING`.
Extractors return MISSING (never None or 0) when the source attribute is
absent so that "unknown" can be told apart from "low". `extract()` is the
single entry point used by the engine and never raises for a well-formed
record.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from dateutil import parser as date_parser

from core.scorer.exceptions import MissingFactorData
from core.scorer.models import MISSING, Extractor, FactorDefinition, ScorableRecord

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def _is_absent(value: Any) -> bool:
    if value is None or value is MISSING:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def to_datetime(value: Any) -> datetime:
    """Coerce a datetime, date or ISO-8601 string into an aware UTC datetime."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        dt = date_parser.isoparse(value.strip())
    else:
        raise TypeError(f"Cannot interpret {value!r} as a date")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_number(value: Any) -> float:
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, str):
        value = value.strip().replace(",", "")
    return float(value)


# ----------------------------
# Builders
# ----------------------------
def attribute(name: str) -> Extractor:
    """Raw attribute value, or MISSING."""
    def _extract(record: ScorableRecord, as_of: datetime) -> Any:
        value = record.get(name)
        return MISSING if _is_absent(value) else value
    return _extract


def numeric(name: str) -> Extractor:
    """Attribute coerced to float, or MISSING."""
    def _extract(record: ScorableRecord, as_of: datetime) -> Any:
        value = record.get(name)
        if _is_absent(value):
            return MISSING
        return to_number(value)
    return _extract


def days_since(name: str) -> Extractor:
    """Whole days between the attribute's date and `as_of` (time-relative)."""
    def _extract(record: ScorableRecord, as_of: datetime) -> Any:
        value = record.get(name)
        if _is_absent(value):
            return MISSING
        delta = to_datetime(as_of) - to_datetime(value)
        return max(0, math.floor(delta.total_seconds() / SECONDS_PER_DAY))
    return _extract


def count(name: str, where: Optional[Callable[[Any], bool]] = None) -> Extractor:
    """Number of items in a list attribute, optionally filtered."""
    def _extract(record: ScorableRecord, as_of: datetime) -> Any:
        items = record.get(name)
        if items is None:
            return MISSING
        if where is None:
            return len(items)
        return sum(1 for item in items if where(item))
    return _extract


def count_within_days(name: str, days: int, date_key: str = "created_at") -> Extractor:
    """Number of list items whose `date_key` falls within `days` before `as_of`."""
    def _extract(record: ScorableRecord, as_of: datetime) -> Any:
        items = record.get(name)
        if items is None:
            return MISSING
        return len(items_within_days(items, as_of, days, date_key))
    return _extract


def categorical(name: str, mapping: Mapping[str, float], default: Any = MISSING) -> Extractor:
    """Map a string attribute through `mapping` (case-insensitive)."""
    lowered = {k.lower(): float(v) for k, v in mapping.items()}

    def _extract(record: ScorableRecord, as_of: datetime) -> Any:
        value = record.get(name)
        if _is_absent(value):
            return default
        return lowered.get(str(value).strip().lower(), default)
    return _extract


def flag(name: str) -> Extractor:
    """Boolean attribute as 1.0/0.0, or MISSING."""
    def _extract(record: ScorableRecord, as_of: datetime) -> Any:
        value = record.get(name)
        if value is None:
            return MISSING
        return 1.0 if bool(value) else 0.0
    return _extract


def keyword_hits(list_name: str, haystack_names: Sequence[str]) -> Extractor:
    """
    How many entries of a list attribute occur (case-insensitively) in any
    of the haystack attributes. MISSING if the list or every haystack is absent.
    """
    def _extract(record: ScorableRecord, as_of: datetime) -> Any:
        return len(matched_keywords(record, list_name, haystack_names))
    return _extract


def exact_match(list_name: str, target_name: str) -> Extractor:
    """1.0 if the target attribute equals (case-insensitively) any list entry."""
    def _extract(record: ScorableRecord, as_of: datetime) -> Any:
        items = record.get(list_name)
        target = record.get(target_name)
        if items is None or _is_absent(target):
            return MISSING
        wanted = str(target).strip().lower()
        return 1.0 if any(str(item).strip().lower() == wanted for item in items) else 0.0
    return _extract


# ----------------------------
# Helpers shared with rubrics
# ----------------------------
def items_within_days(items: Iterable[Any], as_of: datetime, days: int, date_key: str = "created_at") -> list:
    cutoff = to_datetime(as_of) - timedelta(days=days)
    recent = []
    for item in items:
        raw = item.get(date_key) if isinstance(item, Mapping) else getattr(item, date_key, None)
        if _is_absent(raw):
            continue
        if to_datetime(raw) >= cutoff:
            recent.append(item)
    return recent


def matched_keywords(record: ScorableRecord, list_name: str, haystack_names: Sequence[str]) -> list:
    """Entries of `list_name` found in the haystack attributes; raises MissingFactorData if unknowable."""
    items = record.get(list_name)
    haystacks = [record.get(h) for h in haystack_names]
    present = [str(h).lower() for h in haystacks if not _is_absent(h)]
    if items is None or not present:
        raise MissingFactorData(f"{list_name} or {list(haystack_names)} unavailable on {record.id}")
    matched = []
    for item in items:
        needle = str(item).strip().lower()
        if needle and any(needle in text for text in present):
            matched.append(item)
    return matched


def extract(record: ScorableRecord, factor: FactorDefinition, as_of: datetime) -> Any:
    """
    Run a factor's extractor. Any failure degrades to MISSING so one bad
    factor never aborts the whole scoring call.
    """
    try:
        raw = factor.extractor(record, as_of)
    except MissingFactorData as e:
        logger.debug("Missing factor data for %s on record %s: %s", factor.name, record.id, e)
        return MISSING
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError, ZeroDivisionError) as e:
        logger.debug("Extraction of %s failed on record %s: %r", factor.name, record.id, e)
        return MISSING

    if raw is None:
        return MISSING
    return raw
