from __future__ import annotations

import subprocess
import tempfile
from pathlib import Path
from typing import Optional

from loguru import logger

from shared_modules.config import Config
from shared_modules.utils import ensure_dir


class DocumentConverter:
    """
    Konvertiert Excel-Dateien mit LibreOffice (headless) nach PDF.
    Jeder Aufruf arbeitet in einem eigenen temporären Verzeichnis.
    """

    def __init__(self, binary: str = "soffice", timeout_seconds: float = 120.0, tmp_dir: Optional[Path] = None) -> None:
        self.binary = binary
        self.timeout_seconds = timeout_seconds
        self.tmp_dir = tmp_dir

    @classmethod
    def from_config(cls, config: Config) -> "DocumentConverter":
        return cls(
            binary=config.converter.binary,
            timeout_seconds=config.converter.timeout_seconds,
            tmp_dir=config.tmp_dir,
        )

    def convert(self, xlsx_data: bytes, filename: str = "timecard.xlsx") -> bytes:
        """
        Wandelt die übergebene Excel-Datei in ein PDF um.

        Args:
            xlsx_data (bytes): Inhalt der Excel-Datei.
            filename (str): Dateiname für die Eingabe; LibreOffice benennt das PDF danach.
        Returns:
            bytes: Inhalt des erzeugten PDFs.
        Raises:
            RuntimeError: Wenn LibreOffice fehlschlägt, nicht rechtzeitig fertig wird
                oder kein PDF erzeugt.
        """
        base_dir = ensure_dir(self.tmp_dir) if self.tmp_dir else None
        with tempfile.TemporaryDirectory(prefix="pdf-", dir=base_dir) as work:
            work_dir = Path(work)
            input_dir = ensure_dir(work_dir / "in")
            output_dir = ensure_dir(work_dir / "out")
            input_file = input_dir / Path(filename).name
            input_file.write_bytes(xlsx_data)

            logger.info(f"Konvertiere {input_file.name} mit LibreOffice nach PDF ...")
            try:
                result = subprocess.run(
                    [
                        self.binary,
                        "--headless",
                        "--convert-to",
                        "pdf",
                        "--outdir",
                        str(output_dir),
                        str(input_file),
                    ],
                    capture_output=True,
                    text=True,
                    timeout=self.timeout_seconds,
                )
            except subprocess.TimeoutExpired as e:
                logger.error(f"PDF-Konvertierung nach {self.timeout_seconds}s abgebrochen.")
                raise RuntimeError(f"PDF-Konvertierung nach {self.timeout_seconds}s abgebrochen") from e
            except OSError as e:
                logger.error(f"LibreOffice konnte nicht gestartet werden: {e}")
                raise RuntimeError(f"LibreOffice konnte nicht gestartet werden: {e}") from e

            output = f"{result.stdout or ''}{result.stderr or ''}".strip()
            if result.returncode != 0:
                logger.error(f"PDF-Konvertierung fehlgeschlagen: {output}")
                raise RuntimeError(f"PDF-Konvertierung fehlgeschlagen (Exit {result.returncode}): {output}")
            logger.debug(f"LibreOffice-Ausgabe: {output}")

            pdf_files = sorted(output_dir.glob("*.pdf"))
            if not pdf_files:
                logger.error("LibreOffice hat kein PDF erzeugt.")
                raise RuntimeError("LibreOffice hat kein PDF erzeugt")

            pdf_data = pdf_files[0].read_bytes()
        logger.info(f"PDF erzeugt: {len(pdf_data)} Bytes")
        return pdf_data
