from typing import Optional
from pydantic import BaseModel

class TemplatesConfig(BaseModel):
    timecard_template: Optional[str] = "template.xlsx"
    fallback_sheet_name: Optional[str] = "Sheet1"
