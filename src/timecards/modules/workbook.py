from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Any, List, Optional

from loguru import logger
from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Border, Side

THIN_BLACK = Side(style="thin", color="000000")
THIN_BLACK_BORDER = Border(left=THIN_BLACK, right=THIN_BLACK, top=THIN_BLACK, bottom=THIN_BLACK)


class WorkbookHandle:
    """
    Schmale Hülle um ein openpyxl-Workbook.
    Der Projektor schreibt nur über diese Methoden, adressiert über
    Blattname und Excel-Adresse.
    """

    def __init__(self, workbook: Workbook) -> None:
        self.workbook = workbook

    @classmethod
    def open(cls, template_file: Path) -> Optional["WorkbookHandle"]:
        """
        Öffnet das Template. Fehlt die Datei oder ist sie nicht lesbar, kommt None zurück.
        """
        if not template_file.exists():
            logger.warning(f"Template nicht gefunden: {template_file}")
            return None
        try:
            return cls(load_workbook(template_file))
        except Exception as exc:
            logger.error(f"Fehler beim Laden des Templates {template_file.name}: {exc}")
            return None

    @classmethod
    def new(cls, sheet_name: str = "Sheet1") -> "WorkbookHandle":
        workbook = Workbook()
        workbook.active.title = sheet_name
        return cls(workbook)

    def list_sheets(self) -> List[str]:
        return list(self.workbook.sheetnames)

    def set_cell_value(self, sheet: str, address: str, value: Any) -> None:
        # Steuerzeichen lehnt openpyxl ab, sie werden entfernt
        if isinstance(value, str):
            value = ILLEGAL_CHARACTERS_RE.sub("", value)
        self.workbook[sheet][address] = value

    def set_cell_style(self, sheet: str, start: str, end: str, border: Border) -> None:
        """Setzt den Rahmen für jede Zelle im Bereich start:end (inklusive)."""
        for row in self.workbook[sheet][f"{start}:{end}"]:
            for cell in row:
                cell.border = border

    def serialize(self) -> bytes:
        """
        Schreibt das Workbook in einen Byte-Puffer.
        Excel rechnet beim Öffnen alle Formeln neu, damit keine veralteten Werte stehen bleiben.
        """
        self.workbook.calculation.fullCalcOnLoad = True
        buffer = BytesIO()
        try:
            self.workbook.save(buffer)
        except Exception as exc:
            logger.error(f"Fehler beim Serialisieren des Workbooks: {exc}")
            raise RuntimeError(f"Fehler beim Serialisieren des Workbooks: {exc}") from exc
        return buffer.getvalue()
