from pydantic import BaseModel, ConfigDict, field_validator

from shared_modules.utils import safe_str


class JobModel(BaseModel):
    """
    Ein Auftrag aus dem Request.
    job_code ist die Auftragsnummer (z. B. "29699"), job_name der Leistungscode
    (z. B. "201", "223", "H"), der als Spaltenüberschrift im Sheet erscheint.
    """
    model_config = ConfigDict(frozen=True)

    job_code: str = ""
    job_name: str = ""

    @field_validator("job_code", "job_name", mode="before")
    @classmethod
    def ensure_str(cls, v):
        return safe_str(v)
