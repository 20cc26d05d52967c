from __future__ import annotations

from typing import List, Tuple

from openpyxl.utils import column_index_from_string, get_column_letter
from pydantic import BaseModel, Field, model_validator

from shared_modules.utils import split_cell_address


class HeaderCells(BaseModel):
    """
    Zelladressen im Excel-Template für die Kopfwerte eines Wochenblatts.
    Diese Adressen sind fest durch template.xlsx vorgegeben.
    """
    employee_name: str = "M2"
    pay_period_num: str = "AJ2"
    year: str = "AJ3"
    week_start_date: str = "B4"
    week_label: str = "AJ4"


class BlockLayout(BaseModel):
    """
    Ein Tabellenblock (Normalzeit oder Überstunden) auf dem Wochenblatt.
    header_row: Zeile mit Leistungscode/Auftragsnummer,
    first_data_row: erste Tageszeile (Wochenstart), danach days_per_week Zeilen.
    """
    header_row: int
    first_data_row: int
    border_start: str
    border_end: str

    def data_row(self, day_offset: int) -> int:
        return self.first_data_row + day_offset


def _paired_columns(first: str, slots: int) -> List[str]:
    start = column_index_from_string(first)
    return [get_column_letter(start + 2 * i) for i in range(slots)]


class TimecardLayout(BaseModel):
    """
    Feste Geometrie des Stundenzettel-Templates.

    Jede Spalte im Block ist ein Paar: in der Label-Spalte (C, E, G, ...) stehen
    Leistungscode und Stunden, in der Auftragsspalte (D, F, H, ...) die Auftragsnummer.
    Positionen werden als (Block, Slot, Tag) gerechnet und erst beim Schreiben
    in Zelladressen übersetzt.
    """
    header_cells: HeaderCells = Field(default_factory=HeaderCells)
    date_column: str = "B"
    slots: int = 16
    days_per_week: int = 7
    label_columns: List[str] = Field(default_factory=lambda: _paired_columns("C", 16))
    job_columns: List[str] = Field(default_factory=lambda: _paired_columns("D", 16))
    regular: BlockLayout = Field(
        default_factory=lambda: BlockLayout(header_row=4, first_data_row=5, border_start="A4", border_end="AJ12")
    )
    overtime: BlockLayout = Field(
        default_factory=lambda: BlockLayout(header_row=15, first_data_row=16, border_start="A15", border_end="AJ24")
    )

    @model_validator(mode="after")
    def columns_match_slots(self) -> "TimecardLayout":
        if len(self.label_columns) != self.slots or len(self.job_columns) != self.slots:
            raise ValueError("label_columns/job_columns müssen genau `slots` Einträge haben")
        for slot, (label_idx, job_idx) in enumerate(self.slot_index_columns()):
            if job_idx != label_idx + 1:
                raise ValueError(f"Slot {slot}: Auftragsspalte muss direkt rechts der Label-Spalte liegen")
        for address in (self.regular.border_start, self.regular.border_end,
                        self.overtime.border_start, self.overtime.border_end):
            split_cell_address(address)
        return self

    def slot_index_columns(self) -> List[Tuple[int, int]]:
        """(Label-Spalte, Auftragsspalte) je Slot als 1-basierte Spaltenindizes."""
        return [
            (column_index_from_string(label), column_index_from_string(job))
            for label, job in zip(self.label_columns, self.job_columns)
        ]

    def block(self, overtime: bool) -> BlockLayout:
        return self.overtime if overtime else self.regular

    def label_cell(self, overtime: bool, slot: int) -> Tuple[str, int]:
        return self.label_columns[slot], self.block(overtime).header_row

    def job_cell(self, overtime: bool, slot: int) -> Tuple[str, int]:
        return self.job_columns[slot], self.block(overtime).header_row

    def hours_cell(self, overtime: bool, slot: int, day_offset: int) -> Tuple[str, int]:
        return self.label_columns[slot], self.block(overtime).data_row(day_offset)

    def date_cell(self, overtime: bool, day_offset: int) -> Tuple[str, int]:
        return self.date_column, self.block(overtime).data_row(day_offset)


def to_address(cell: Tuple[str, int]) -> str:
    """Übersetzt (Spalte, Zeile) in eine Excel-Adresse wie "AA16"."""
    column, row = cell
    return f"{column}{row}"
