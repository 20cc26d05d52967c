from typing import Optional
from pydantic import BaseModel

class StructureConfig(BaseModel):
    """
    Modell für die Struktur-Konfiguration des Projekts.

    Attribute:
        prj_root (str): Wurzelverzeichnis des Projekts (Standard: aktuelles Verzeichnis).
        output_path (Optional[str]): Pfad zum Ausgabeverzeichnis (Standard: "output").
        template_path (Optional[str]): Pfad zum Template-Verzeichnis relativ zu prj_root (Standard: ".").
        tmp_path (Optional[str]): Pfad zum temporären Verzeichnis (Standard: ".tmp").
    """
    prj_root: str = "."
    output_path: Optional[str] = "output"
    template_path: Optional[str] = "."
    tmp_path: Optional[str] = ".tmp"
