from __future__ import annotations

from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, StrictBool, field_validator, model_validator

# Reihenfolge = Priorität: der erste vorhandene Schlüssel gewinnt.
OVERTIME_KEYS: Tuple[str, ...] = ("overtime", "isOvertime")
NIGHT_SHIFT_KEYS: Tuple[str, ...] = ("night_shift", "is_night_shift", "isNightShift")
JOB_CODE_KEYS: Tuple[str, ...] = ("job_code", "code")

NIGHT_PREFIX = "N"


def _first_present(data: dict, keys: Tuple[str, ...]) -> Optional[Any]:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _first_non_empty(data: dict, keys: Tuple[str, ...]) -> str:
    for key in keys:
        value = data.get(key)
        if value not in (None, ""):
            return str(value)
    return ""


class EntryModel(BaseModel):
    """
    Kanonische Zeitbuchung.

    Eingehende Buchungen kommen je nach Client in snake_case oder camelCase.
    Der Decode-Schritt in `normalize_field_names` bildet alle Varianten auf genau
    dieses Modell ab; danach arbeitet niemand mehr mit Rohfeldern.

    `date` bleibt ein String: ein unlesbares Datum verwirft nur diese Buchung
    bei der Aggregation, nicht den ganzen Request.
    """
    model_config = ConfigDict(frozen=True)

    date: str = ""
    job_code: str = ""
    hours: float = 0.0
    overtime: StrictBool = False
    is_night_shift: StrictBool = False

    @model_validator(mode="before")
    @classmethod
    def normalize_field_names(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ValueError("Buchung muss ein Objekt sein")
        overtime = _first_present(data, OVERTIME_KEYS)
        night_shift = _first_present(data, NIGHT_SHIFT_KEYS)
        hours = data.get("hours")
        date = data.get("date")
        return {
            "date": "" if date is None else date,
            "job_code": _first_non_empty(data, JOB_CODE_KEYS),
            "hours": 0.0 if hours is None else hours,
            "overtime": False if overtime is None else overtime,
            "is_night_shift": False if night_shift is None else night_shift,
        }

    @field_validator("hours", mode="before")
    @classmethod
    def hours_must_be_numeric(cls, v):
        # bool ist ein int, gehört hier aber nicht hin
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError(f"hours muss eine Zahl sein, erhalten: {v!r}")
        return float(v)

    @field_validator("date", mode="before")
    @classmethod
    def date_must_be_str(cls, v):
        if not isinstance(v, str):
            raise ValueError(f"date muss ein String sein, erhalten: {v!r}")
        return v

    @property
    def composite_key(self) -> str:
        """Spaltenschlüssel: Nachtschichten bekommen das Präfix "N"."""
        return f"{NIGHT_PREFIX}{self.job_code}" if self.is_night_shift else self.job_code
