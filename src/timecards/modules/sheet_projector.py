from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger
from pydantic import BaseModel, Field

from pydantic_models.data.job_model import JobModel
from pydantic_models.data.timecard_layout import TimecardLayout, to_address
from pydantic_models.data.timecard_request_model import TimecardRequestModel
from pydantic_models.data.week_data_model import WeekDataModel
from shared_modules.utils import log_exceptions
from timecards.modules.column_assigner import ColumnAssignment, assign_columns
from timecards.modules.date_serial import to_excel_serial
from timecards.modules.job_index import build_job_index
from timecards.modules.key_aggregator import HoursByDate, aggregate_hours, parse_timestamp
from timecards.modules.workbook import THIN_BLACK_BORDER, WorkbookHandle


class WeekProjection(BaseModel):
    """
    Ergebnis des Befüllens eines Wochenblatts.
    Die dropped_*-Listen enthalten Spaltenschlüssel, für die keine Spalte mehr frei war.
    """
    sheet: str
    week_number: int
    regular_keys: List[str] = Field(default_factory=list)
    overtime_keys: List[str] = Field(default_factory=list)
    dropped_regular: List[str] = Field(default_factory=list)
    dropped_overtime: List[str] = Field(default_factory=list)
    cells_written: int = 0

    @property
    def dropped_count(self) -> int:
        return len(self.dropped_regular) + len(self.dropped_overtime)


class SheetProjector:
    """
    Schreibt eine Woche in ein Blatt des Templates:
    Kopfzeilen, Spaltenköpfe je Block, Tagesdaten und Rahmen.

    Args:
        layout: Geometrie des Templates (Default: feste Vorlage).
        log: Logger für Diagnoseausgaben; Default ist der globale loguru-Logger.
    """

    def __init__(self, layout: Optional[TimecardLayout] = None, log=None) -> None:
        self.layout: TimecardLayout = layout or TimecardLayout()
        self.log = log or logger

    def project_week(
        self,
        handle: WorkbookHandle,
        sheet: str,
        request: TimecardRequestModel,
        week: WeekDataModel,
        week_num: int,
        job_index: Optional[Dict[str, JobModel]] = None,
    ) -> WeekProjection:
        """
        Befüllt `sheet` mit den Daten von `week`.

        Raises:
            ValueError: Wenn week_start_date kein gültiger Zeitstempel ist.
                Das Blatt bleibt dann unverändert.
        """
        week_start = parse_timestamp(week.week_start_date)
        if week_start is None:
            raise ValueError(f"Ungültiges Wochenstartdatum: {week.week_start_date!r}")

        log = self.log.bind(sheet=sheet, week=week_num)
        log.info(
            f"Befülle {sheet} (Woche {week_num}) ab {week_start.date().isoformat()} "
            f"mit {len(week.entries)} Buchungen"
        )
        jobs = job_index if job_index is not None else build_job_index(request.jobs)
        layout = self.layout
        writer = _CellWriter(handle, sheet, log)

        cells = layout.header_cells
        writer.write(cells.employee_name, request.employee_name)
        writer.write(cells.pay_period_num, request.pay_period_num)
        writer.write(cells.year, request.year)
        writer.write(cells.week_start_date, to_excel_serial(week_start))
        writer.write(cells.week_label, week.week_label)

        regular = assign_columns(week.entries, overtime=False, slots=layout.slots)
        overtime = assign_columns(week.entries, overtime=True, slots=layout.slots)
        for block_is_overtime, assignment in ((False, regular), (True, overtime)):
            self._write_block_headers(writer, jobs, assignment, block_is_overtime)
            if assignment.dropped:
                log.warning(
                    f"{len(assignment.dropped)} Schlüssel ohne freie Spalte im "
                    f"{'Überstunden' if block_is_overtime else 'Normalzeit'}-Block: "
                    f"{[key.composite for key in assignment.dropped]}"
                )

        regular_hours = aggregate_hours(week.entries, overtime=False, log=log)
        overtime_hours = aggregate_hours(week.entries, overtime=True, log=log)

        for day_offset in range(layout.days_per_week):
            day = week_start + timedelta(days=day_offset)
            serial = to_excel_serial(day)
            writer.write_cell(layout.date_cell(False, day_offset), serial)
            writer.write_cell(layout.date_cell(True, day_offset), serial)
            self._write_block_day(writer, regular, regular_hours, day.date(), day_offset, False)
            self._write_block_day(writer, overtime, overtime_hours, day.date(), day_offset, True)

        for block in (layout.regular, layout.overtime):
            with log_exceptions(f"Rahmen {block.border_start}:{block.border_end} auf {sheet} fehlgeschlagen"):
                handle.set_cell_style(sheet, block.border_start, block.border_end, THIN_BLACK_BORDER)

        log.info(f"{sheet} Woche {week_num} fertig ({writer.count} Zellen)")
        return WeekProjection(
            sheet=sheet,
            week_number=week_num,
            regular_keys=regular.composites,
            overtime_keys=overtime.composites,
            dropped_regular=[key.composite for key in regular.dropped],
            dropped_overtime=[key.composite for key in overtime.dropped],
            cells_written=writer.count,
        )

    def _write_block_headers(
        self,
        writer: "_CellWriter",
        jobs: Dict[str, JobModel],
        assignment: ColumnAssignment,
        block_is_overtime: bool,
    ) -> None:
        for slot, key in enumerate(assignment.keys):
            job = jobs.get(key.job_code)
            if job is None:
                writer.log.warning(f"Auftrag {key.job_code} fehlt in der Auftragsliste, Spaltenkopf bleibt leer.")
                continue
            label = f"N{job.job_name}" if key.night_shift else job.job_name
            writer.write_cell(self.layout.label_cell(block_is_overtime, slot), label)
            writer.write_cell(self.layout.job_cell(block_is_overtime, slot), key.job_code)

    def _write_block_day(
        self,
        writer: "_CellWriter",
        assignment: ColumnAssignment,
        totals: HoursByDate,
        day,
        day_offset: int,
        block_is_overtime: bool,
    ) -> None:
        hours = totals.get(day)
        if not hours:
            return
        for slot, key in enumerate(assignment.keys):
            value = hours.get(key.composite)
            # 0 und fehlende Werte lassen die Vorlage unverändert
            if not value:
                continue
            writer.write_cell(self.layout.hours_cell(block_is_overtime, slot, day_offset), value)


class _CellWriter:
    """Übersetzt (Spalte, Zeile) in Adressen und zählt die geschriebenen Zellen."""

    def __init__(self, handle: WorkbookHandle, sheet: str, log) -> None:
        self.handle = handle
        self.sheet = sheet
        self.log = log
        self.count = 0

    def write_cell(self, cell: Tuple[str, int], value: Any) -> None:
        self.write(to_address(cell), value)

    def write(self, address: str, value: Any) -> None:
        self.handle.set_cell_value(self.sheet, address, value)
        self.count += 1
        self.log.debug(f"{self.sheet}!{address} = {value!r}")
