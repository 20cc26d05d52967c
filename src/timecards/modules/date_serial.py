from datetime import date, datetime, timezone

# Tag 0 der Excel-Datumszählung (1900-System inkl. des fiktiven 29.02.1900)
EXCEL_EPOCH = datetime(1899, 12, 30, tzinfo=timezone.utc)

SECONDS_PER_DAY = 86400.0


def to_excel_serial(value: date) -> float:
    """
    Excel-Seriennummer: vergangene Tage seit 1899-12-30 00:00 UTC, als Bruchzahl.
    Naive Zeitstempel gelten als UTC, reine Datumswerte als Mitternacht UTC.
    """
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    elif value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - EXCEL_EPOCH).total_seconds() / SECONDS_PER_DAY
