from pydantic import BaseModel, field_validator


class ConverterConfig(BaseModel):
    """
    Einstellungen für die PDF-Konvertierung mit LibreOffice (headless).
    """
    binary: str = "soffice"
    timeout_seconds: float = 120.0

    @field_validator("timeout_seconds")
    @classmethod
    def positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout_seconds muss > 0 sein")
        return v
