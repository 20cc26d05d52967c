from __future__ import annotations

from typing import Iterable, List

from pydantic import BaseModel, ConfigDict, Field

from pydantic_models.data.entry_model import NIGHT_PREFIX, EntryModel

DEFAULT_SLOTS = 16


class ColumnKey(BaseModel):
    """Ein Spaltenschlüssel: Auftragsnummer plus Nachtschicht-Kennzeichen."""
    model_config = ConfigDict(frozen=True)

    job_code: str
    night_shift: bool = False

    @property
    def composite(self) -> str:
        return f"{NIGHT_PREFIX}{self.job_code}" if self.night_shift else self.job_code


class ColumnAssignment(BaseModel):
    """
    Spaltenbelegung eines Blocks.
    keys[i] belegt Slot i; dropped enthält die Schlüssel jenseits der letzten Spalte.
    """
    keys: List[ColumnKey] = Field(default_factory=list)
    dropped: List[ColumnKey] = Field(default_factory=list)

    @property
    def composites(self) -> List[str]:
        return [key.composite for key in self.keys]


def assign_columns(entries: Iterable[EntryModel], overtime: bool, slots: int = DEFAULT_SLOTS) -> ColumnAssignment:
    """
    Vergibt Slots in der Reihenfolge des ersten Auftretens eines Schlüssels
    innerhalb des Blocks. Es wird nicht sortiert; gleiche Eingabe ergibt
    immer dieselbe Belegung.
    """
    seen = set()
    ordered: List[ColumnKey] = []
    for entry in entries:
        if entry.overtime != overtime:
            continue
        key = entry.composite_key
        if key in seen:
            continue
        seen.add(key)
        ordered.append(ColumnKey(job_code=entry.job_code, night_shift=entry.is_night_shift))
    return ColumnAssignment(keys=ordered[:slots], dropped=ordered[slots:])
