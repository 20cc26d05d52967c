import argparse
import json
from pathlib import Path

from loguru import logger

from pydantic_models.data.timecard_request_model import TimecardRequestModel
from shared_modules.config import Config
from shared_modules.utils import ensure_dir
from timecards.modules.document_converter import DocumentConverter
from timecards.modules.timecard_factory import TimecardFactory


def main() -> None:
    """
    Erzeugt einen Stundenzettel aus einer JSON-Request-Datei im Ausgabeverzeichnis,
    optional zusätzlich als PDF.
    """
    parser = argparse.ArgumentParser(description="Stundenzettel aus JSON-Request erzeugen")
    parser.add_argument("request_file", type=Path)
    parser.add_argument("--config", type=Path, default=None)
    parser.add_argument("--pdf", action="store_true", help="zusätzlich PDF erzeugen")
    args = parser.parse_args()

    config = Config(args.config)
    request = TimecardRequestModel.model_validate(json.loads(args.request_file.read_text(encoding="utf-8")))

    result = TimecardFactory.from_config(config).generate(request)
    output_dir = ensure_dir(config.output_dir)
    xlsx_file = output_dir / f"timecard_{request.employee_name.replace(' ', '_')}.xlsx"
    xlsx_file.write_bytes(result.content)
    logger.info(f"Stundenzettel gespeichert: {xlsx_file}")
    if result.dropped_count:
        logger.warning(f"{result.dropped_count} Aufträge hatten keine freie Spalte mehr.")

    if args.pdf:
        pdf_data = DocumentConverter.from_config(config).convert(result.content, xlsx_file.name)
        pdf_file = xlsx_file.with_suffix(".pdf")
        pdf_file.write_bytes(pdf_data)
        logger.info(f"PDF gespeichert: {pdf_file}")


if __name__ == "__main__":
    main()
