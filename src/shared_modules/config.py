import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Type

import yaml
from cryptography.fernet import Fernet
from loguru import logger
from pydantic import BaseModel

from pydantic_models.config.converter_config import ConverterConfig
from pydantic_models.config.logging_config import LoggingConfig
from pydantic_models.config.server_config import ServerConfig
from pydantic_models.config.smtp_config import SmtpConfig
from pydantic_models.config.structure_config import StructureConfig
from pydantic_models.config.templates_config import TemplatesConfig

DEFAULT_CONFIG_PATH = Path(".config") / "timecard_config.yaml"


class Config:
    """
    Singleton für das Laden und Prüfen der Konfiguration.
    Nutzt statische Pydantic-Modelle für alle Abschnitte.
    Fehlt die YAML-Datei, gelten die Defaults der Modelle; SMTP-Zugang und Port
    können zusätzlich über Umgebungsvariablen gesetzt werden.
    """

    _instance: Optional["Config"] = None

    def __new__(cls, config_path: Optional[Path] = None):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None):
        # Fallback-Logger für Fehler beim Laden der Config
        logger.remove()
        logger.add(sys.stderr, level="WARNING")
        self.config_path = Path(config_path or os.getenv("TIMECARD_CONFIG") or DEFAULT_CONFIG_PATH)
        try:
            self.raw_config: Dict[str, Any] = self._load_config()
            self.logging = self._parse_section(self.raw_config, "logging", LoggingConfig)
            self._setup_logging()
            logger.debug(f"Lade Konfiguration von {self.config_path}")
        except Exception as e:
            logger.error(f"Fehler beim Laden der Konfiguration: {e}")
            raise

        self.structure = self._parse_section(self.raw_config, "structure", StructureConfig)
        self.templates = self._parse_section(self.raw_config, "templates", TemplatesConfig)
        self.converter = self._parse_section(self.raw_config, "converter", ConverterConfig)
        self.smtp = self._parse_section(self.raw_config, "smtp", SmtpConfig)
        self.server = self._parse_section(self.raw_config, "server", ServerConfig)

        self._apply_environment()
        self._validate_structure_and_paths()
        logger.debug("Konfiguration erfolgreich geladen und validiert.")
        self._initialized = True

    @classmethod
    def reset(cls) -> None:
        """Verwirft die Singleton-Instanz (z. B. zwischen Tests)."""
        cls._instance = None

    def _setup_logging(self) -> None:
        """
        Initialisiert loguru mit den Einstellungen aus der Config-Datei.
        """
        logger.remove()
        log_file = getattr(self.logging, "log_file", None)
        log_level = getattr(self.logging, "log_level", "INFO")
        if log_file:
            logger.add(log_file, level=log_level)
        logger.add(sys.stderr, level=log_level)

    def _load_config(self) -> Dict[str, Any]:
        """
        Lädt die YAML-Konfigurationsdatei. Eine fehlende Datei bedeutet: nur Defaults.
        """
        if not self.config_path.exists():
            logger.warning(f"Keine Konfigurationsdatei unter {self.config_path}, verwende Defaults.")
            return {}
        with open(self.config_path, "r") as f:
            return yaml.safe_load(f) or {}

    def _parse_section(self, config: Dict[str, Any], section: str, model: Type[BaseModel]) -> Any:
        """
        Parst einen Abschnitt der Config mit dem passenden Pydantic-Modell.
        """
        data = config.get(section) or {}
        logger.debug(f"Parsiere Abschnitt '{section}': {data}")
        return model(**data)

    def _apply_environment(self) -> None:
        """
        Übernimmt Umgebungsvariablen, die Vorrang vor der YAML-Datei haben
        (SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_FROM, PORT).
        """
        overrides = {
            "host": self.get_secret("SMTP_HOST"),
            "port": self.get_secret("SMTP_PORT"),
            "user": self.get_secret("SMTP_USER"),
            "from_address": self.get_secret("SMTP_FROM"),
        }
        overrides = {key: value for key, value in overrides.items() if value}
        if overrides:
            self.smtp = SmtpConfig(**{**self.smtp.model_dump(), **overrides})

        port = self.get_secret("PORT")
        if port:
            self.server = ServerConfig(**{**self.server.model_dump(), "port": port})

    def _validate_structure_and_paths(self) -> None:
        """
        Prüft einmalig die Pfadangaben. Eine fehlende Projektwurzel ist ein Fehler,
        ein fehlendes Template nur eine Warnung (dann wird die Basisdatei erzeugt).
        """
        prj_root = Path(self.structure.prj_root).expanduser().resolve()
        if not prj_root.exists():
            logger.error(f"Projektwurzel existiert nicht: {prj_root}")
            raise FileNotFoundError(f"Projektwurzel nicht gefunden: {prj_root}")

        if not self.templates.timecard_template:
            logger.error("templates.timecard_template ist nicht gesetzt.")
            raise ValueError("templates.timecard_template ist Pflicht.")

        template_file = self.template_file
        if not template_file.exists():
            logger.warning(f"Timecard-Template nicht gefunden: {template_file}")

    @property
    def prj_root(self) -> Path:
        return Path(self.structure.prj_root).expanduser().resolve()

    @property
    def template_file(self) -> Path:
        return self.prj_root / (self.structure.template_path or ".") / self.templates.timecard_template

    @property
    def output_dir(self) -> Path:
        return self.prj_root / (self.structure.output_path or "output")

    @property
    def tmp_dir(self) -> Path:
        return self.prj_root / (self.structure.tmp_path or ".tmp")

    def get_secret(self, key: str, default: Any = None) -> Optional[str]:
        """
        Gibt ein Secret (z. B. Passwort, API-Key) aus Umgebungsvariablen zurück.
        """
        logger.debug(f"Lese Secret '{key}' aus Umgebungsvariablen.")
        return os.getenv(key, default)

    def get_decrypted_secret(
        self, key: str, fernet_key_env: str = "FERNET_KEY", default: Any = None
    ) -> Optional[str]:
        """
        Holt ein verschlüsseltes Secret aus der Umgebung und entschlüsselt es mit Fernet.
        """
        encrypted = os.getenv(key)
        fernet_key = os.getenv(fernet_key_env)
        logger.debug(f"Versuche Secret '{key}' mit Fernet-Key '{fernet_key_env}' zu entschlüsseln.")
        if not encrypted or not fernet_key:
            logger.debug("Kein Secret oder Key gefunden, Rückgabe Default.")
            return default
        try:
            f = Fernet(fernet_key.encode())
            decrypted = f.decrypt(encrypted.encode())
            logger.debug("Secret erfolgreich entschlüsselt.")
            return decrypted.decode()
        except Exception as e:
            logger.error(f"Entschlüsselung fehlgeschlagen: {e}")
            raise RuntimeError(f"Entschlüsselung fehlgeschlagen: {e}") from e

    def get_smtp_password(self) -> Optional[str]:
        """SMTP_PASS_ENC (verschlüsselt) hat Vorrang vor SMTP_PASS (Klartext)."""
        return self.get_decrypted_secret("SMTP_PASS_ENC") or self.get_secret("SMTP_PASS")


if __name__ == "__main__":
    config = Config()
    logger.info("Projektwurzel: {}", config.prj_root)
    logger.info("Template: {}", config.template_file)
