from __future__ import annotations

import re
from collections import defaultdict
from datetime import date, datetime
from typing import Dict, Iterable, Optional

from loguru import logger

from pydantic_models.data.entry_model import EntryModel

# RFC 3339: Datum, Uhrzeit und Offset sind Pflicht
_RFC3339_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)

HoursByDate = Dict[date, Dict[str, float]]


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parst einen vollständigen RFC-3339-Zeitstempel ("2025-01-06T00:00:00Z").
    Reine Datumsangaben oder Zeitstempel ohne Offset ergeben None.
    """
    if not value:
        return None
    match = _RFC3339_RE.match(value.strip())
    if not match:
        return None
    offset = match.group("offset")
    offset = "+00:00" if offset in ("Z", "z") else offset
    fraction = (match.group("fraction") or "")[:6].ljust(6, "0")
    text = f"{match.group('base').replace('t', 'T')}.{fraction}{offset}"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def aggregate_hours(entries: Iterable[EntryModel], overtime: bool, log=logger) -> HoursByDate:
    """
    Summiert die Stunden eines Blocks je (Kalendertag, Spaltenschlüssel).

    Es zählen nur Buchungen, deren Überstunden-Flag zum Block passt. Buchungen
    mit unlesbarem Datum werden übersprungen und nur geloggt.

    Returns:
        HoursByDate: Tag -> {Spaltenschlüssel -> Stundensumme}.
    """
    totals: Dict[date, Dict[str, float]] = defaultdict(lambda: defaultdict(float))
    for entry in entries:
        if entry.overtime != overtime:
            continue
        parsed = parse_timestamp(entry.date)
        if parsed is None:
            log.warning(f"Ungültiges Buchungsdatum {entry.date!r} (Auftrag {entry.job_code}), übersprungen.")
            continue
        totals[parsed.date()][entry.composite_key] += entry.hours
    return {day: dict(hours) for day, hours in totals.items()}
