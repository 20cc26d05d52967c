from pathlib import Path
from typing import Any, Dict, List

import pytest
from openpyxl import Workbook

from pydantic_models.data.timecard_request_model import TimecardRequestModel
from shared_modules.config import Config

MONDAY = "2025-01-06T00:00:00Z"
MONDAY_SERIAL = 45663.0


def day(offset: int) -> str:
    return f"2025-01-{6 + offset:02d}T00:00:00Z"


def entry(job_code: str, hours: float, offset: int = 0, overtime: bool = False, night: bool = False) -> Dict[str, Any]:
    return {
        "date": day(offset),
        "job_code": job_code,
        "hours": hours,
        "overtime": overtime,
        "is_night_shift": night,
    }


def make_request(entries: List[Dict[str, Any]], jobs=None, weeks: int = 1) -> TimecardRequestModel:
    return TimecardRequestModel.model_validate(
        {
            "employee_name": "Jane Doe",
            "pay_period_num": 3,
            "year": 2025,
            "jobs": jobs if jobs is not None else [{"job_code": "29699", "job_name": "201"}],
            "weeks": [
                {
                    "week_number": n + 1,
                    "week_start_date": MONDAY,
                    "week_label": f"Week {n + 1}",
                    "entries": entries,
                }
                for n in range(weeks)
            ],
        }
    )


@pytest.fixture
def template_file(tmp_path: Path) -> Path:
    """Template mit zwei leeren Wochenblättern."""
    wb = Workbook()
    wb.active.title = "Week 1"
    wb.create_sheet("Week 2")
    path = tmp_path / "template.xlsx"
    wb.save(path)
    return path


@pytest.fixture(autouse=True)
def fresh_config():
    Config.reset()
    yield
    Config.reset()
