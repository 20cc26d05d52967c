from typing import List

from pydantic import BaseModel, Field

from .entry_model import EntryModel


class WeekDataModel(BaseModel):
    """
    Eine Kalenderwoche des Stundenzettels.
    week_start_date muss ein vollständiger RFC-3339-Zeitstempel sein, sonst wird
    die Woche beim Befüllen übersprungen.
    """
    week_number: int = 0
    week_start_date: str = ""
    week_label: str = ""
    entries: List[EntryModel] = Field(default_factory=list)
