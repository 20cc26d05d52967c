from __future__ import annotations

from io import BytesIO
from typing import Optional, Type

from flask import Flask, jsonify, request, send_file
from loguru import logger
from pydantic import BaseModel, ValidationError

from pydantic_models.data.timecard_request_model import EmailTimecardRequestModel, TimecardRequestModel
from shared_modules.config import Config
from timecards.modules.document_converter import DocumentConverter
from timecards.modules.mail_sender import MailSender
from timecards.modules.timecard_factory import TimecardFactory

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PDF_MIMETYPE = "application/pdf"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


class InvalidRequest(Exception):
    pass


def _parse(model: Type[BaseModel]):
    data = request.get_json(force=True, silent=True)
    if data is None:
        raise InvalidRequest("body ist kein gültiges JSON")
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise InvalidRequest(str(exc)) from exc


def create_app(
    config: Optional[Config] = None,
    factory: Optional[TimecardFactory] = None,
    converter: Optional[DocumentConverter] = None,
    mailer: Optional[MailSender] = None,
) -> Flask:
    """
    Baut die Flask-App. Ohne explizite Komponenten werden sie aus der Config erzeugt.
    """
    if factory is None or converter is None or mailer is None:
        config = config or Config()
    factory = factory or TimecardFactory.from_config(config)
    converter = converter or DocumentConverter.from_config(config)
    mailer = mailer or MailSender.from_config(config)

    app = Flask(__name__)

    @app.after_request
    def add_cors_headers(response):
        if request.path.startswith("/api/"):
            response.headers.update(CORS_HEADERS)
        return response

    @app.errorhandler(InvalidRequest)
    def invalid_request(exc):
        logger.warning(f"Ungültiger Request auf {request.path}: {exc}")
        return f"invalid request: {exc}", 400

    @app.route("/health")
    def health():
        return "OK", 200

    @app.route("/api/generate-timecard", methods=["POST"])
    def generate_timecard():
        req = _parse(TimecardRequestModel)
        try:
            result = factory.generate(req)
        except RuntimeError as exc:
            return f"error generating timecard: {exc}", 500

        response = send_file(
            BytesIO(result.content),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=f"timecard_{req.employee_name}.xlsx",
        )
        response.headers["X-Timecard-Dropped-Keys"] = str(result.dropped_count)
        logger.info(f"OK: Stundenzettel {len(result.content)} Bytes")
        return response

    @app.route("/api/generate-pdf", methods=["POST"])
    def generate_pdf():
        req = _parse(TimecardRequestModel)
        try:
            result = factory.generate(req)
        except RuntimeError as exc:
            return f"error generating Excel: {exc}", 500
        try:
            pdf_data = converter.convert(result.content, f"timecard_{req.employee_name}.xlsx")
        except RuntimeError as exc:
            return f"error converting to PDF: {exc}", 500

        response = send_file(
            BytesIO(pdf_data),
            mimetype=PDF_MIMETYPE,
            as_attachment=True,
            download_name=f"timecard_{req.employee_name}.pdf",
        )
        response.headers["X-Timecard-Dropped-Keys"] = str(result.dropped_count)
        logger.info(f"OK: PDF {len(pdf_data)} Bytes")
        return response

    @app.route("/api/email-timecard", methods=["POST"])
    def email_timecard():
        req = _parse(EmailTimecardRequestModel)
        logger.info(f"Versende Stundenzettel für {req.employee_name} an {req.to}")
        try:
            result = factory.generate(req)
        except RuntimeError as exc:
            return f"error generating timecard: {exc}", 500
        try:
            mailer.send_timecard(req.to, req.cc, req.subject, req.body, result.content, req.employee_name)
        except RuntimeError as exc:
            return f"error sending email: {exc}", 500

        response = jsonify({"status": "success", "message": f"Email sent to {req.to}"})
        response.headers["X-Timecard-Dropped-Keys"] = str(result.dropped_count)
        return response

    return app


if __name__ == "__main__":
    config = Config()
    app = create_app(config)
    logger.info(f"Server startet auf :{config.server.port} ...")
    app.run(host=config.server.host, port=config.server.port)
