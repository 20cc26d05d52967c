from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from .entry_model import EntryModel
from .job_model import JobModel
from .week_data_model import WeekDataModel


class TimecardRequestModel(BaseModel):
    """
    Request für einen Stundenzettel mit bis zu zwei Wochen.

    Ältere Clients schicken statt `weeks` eine einzelne Woche flach im Request
    (week_start_date, week_number_label, entries). Diese Form wird beim
    Validieren in `weeks` überführt.
    Top-Level-`entries` werden damit übernommen statt ignoriert. Ist `weeks`
    gesetzt, bleiben sie unbeachtet.
    """
    employee_name: str = ""
    pay_period_num: int = 0
    year: int = 0
    jobs: List[JobModel] = Field(default_factory=list)
    weeks: List[WeekDataModel] = Field(default_factory=list)

    week_start_date: str = ""
    week_number_label: str = ""
    entries: List[EntryModel] = Field(default_factory=list)

    @model_validator(mode="after")
    def fold_flat_week(self) -> "TimecardRequestModel":
        if not self.weeks and self.entries:
            self.weeks = [
                WeekDataModel(
                    week_number=1,
                    week_start_date=self.week_start_date,
                    week_label=self.week_number_label,
                    entries=list(self.entries),
                )
            ]
        return self


class EmailTimecardRequestModel(TimecardRequestModel):
    to: str
    cc: Optional[str] = None
    subject: str = ""
    body: str = ""
