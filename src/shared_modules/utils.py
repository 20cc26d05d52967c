import re
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional, Tuple

from loguru import logger
from openpyxl.utils.cell import coordinate_from_string


def safe_str(val) -> str:
    """
    Gibt immer einen String zurück, auch wenn val None oder numerisch ist.
    """
    return "" if val is None else str(val)


@contextmanager
def log_exceptions(msg: str, continue_on_error: bool = True) -> Generator[None, None, None]:
    """
    Context-Manager für das Logging von Ausnahmen.
    Loggt eine Fehlermeldung und entscheidet, ob die Exception weitergereicht wird.

    Args:
        msg (str): Nachricht für das Logging im Fehlerfall.
        continue_on_error (bool): Bei False wird die Exception erneut ausgelöst, ansonsten nur geloggt.

    Beispiel:
        with log_exceptions("Rahmen konnte nicht gesetzt werden"):
            handle.set_cell_style(...)
    """
    try:
        yield
    except Exception as e:
        logger.error(f"{msg}: {e}")
        if not continue_on_error:
            raise


def ensure_dir(path: Path) -> Path:
    """Erzeugt ein Verzeichnis (rekursiv), falls es fehlt, und gibt den Pfad zurück."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def split_csv_addresses(value: Optional[str]) -> list[str]:
    """Zerlegt "a@x, b@y" in ["a@x", "b@y"]; leere Teile fallen weg."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


_CELL_RE = re.compile(r"^[A-Za-z]+[0-9]+$")

def split_cell_address(address: str) -> Tuple[str, int]:
    addr = address.strip().upper()
    if not _CELL_RE.match(addr):
        raise ValueError(f"Ungültige Zelladresse: {address}")
    col, row = coordinate_from_string(addr)
    return col, int(row)
