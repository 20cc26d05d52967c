from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from loguru import logger
from pydantic import BaseModel, Field

from pydantic_models.data.timecard_request_model import TimecardRequestModel
from shared_modules.config import Config
from timecards.modules.job_index import build_job_index
from timecards.modules.sheet_projector import SheetProjector, WeekProjection
from timecards.modules.workbook import WorkbookHandle

FALLBACK_LABEL = "Employee:"


class TimecardResult(BaseModel):
    """Erzeugte Excel-Datei plus Protokoll der befüllten Wochen."""
    content: bytes
    weeks: List[WeekProjection] = Field(default_factory=list)
    fallback: bool = False

    @property
    def dropped_count(self) -> int:
        return sum(week.dropped_count for week in self.weeks)


class TimecardFactory:
    """
    Factory zum Erzeugen eines Stundenzettels aus einem Request.
    Woche 1 landet im ersten Blatt des Templates, Woche 2 im zweiten.
    Fehlt das Template, entsteht eine Basisdatei mit dem Mitarbeiternamen.
    """

    def __init__(
        self,
        template_file: Path,
        fallback_sheet_name: str = "Sheet1",
        projector: Optional[SheetProjector] = None,
    ) -> None:
        self.template_file: Path = Path(template_file)
        self.fallback_sheet_name: str = fallback_sheet_name
        self.projector: SheetProjector = projector or SheetProjector()

    @classmethod
    def from_config(cls, config: Config, projector: Optional[SheetProjector] = None) -> "TimecardFactory":
        return cls(
            template_file=config.template_file,
            fallback_sheet_name=config.templates.fallback_sheet_name or "Sheet1",
            projector=projector,
        )

    def generate(self, request: TimecardRequestModel) -> TimecardResult:
        """
        Befüllt das Template mit bis zu zwei Wochen und liefert die Datei als Bytes.

        Eine Woche mit ungültigem Startdatum wird übersprungen, die übrigen
        werden trotzdem geschrieben.

        Raises:
            RuntimeError: Wenn die Datei nicht serialisiert werden kann.
        """
        logger.info(f"Erzeuge Stundenzettel für {request.employee_name}")
        handle = WorkbookHandle.open(self.template_file)
        if handle is None:
            logger.warning("Template nicht verfügbar, erzeuge Basisdatei.")
            return self._generate_basic(request)

        sheets = handle.list_sheets()
        if not sheets:
            logger.warning(f"Template {self.template_file.name} enthält keine Blätter, erzeuge Basisdatei.")
            return self._generate_basic(request)

        job_index = build_job_index(request.jobs)
        projections: List[WeekProjection] = []
        for week_num, (sheet, week) in enumerate(zip(sheets[:2], request.weeks[:2]), start=1):
            try:
                projections.append(
                    self.projector.project_week(handle, sheet, request, week, week_num, job_index=job_index)
                )
            except ValueError as exc:
                logger.error(f"Woche {week_num} übersprungen: {exc}")

        content = handle.serialize()
        logger.info(f"Stundenzettel erzeugt: {len(content)} Bytes")
        return TimecardResult(content=content, weeks=projections)

    def _generate_basic(self, request: TimecardRequestModel) -> TimecardResult:
        handle = WorkbookHandle.new(self.fallback_sheet_name)
        handle.set_cell_value(self.fallback_sheet_name, "A1", FALLBACK_LABEL)
        handle.set_cell_value(self.fallback_sheet_name, "B1", request.employee_name)
        return TimecardResult(content=handle.serialize(), fallback=True)


def project_timecard(request: TimecardRequestModel, template_file: Path) -> bytes:
    """Request -> Excel-Bytes gegen das Template unter `template_file`."""
    return TimecardFactory(template_file).generate(request).content
