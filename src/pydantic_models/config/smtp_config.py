from typing import Optional
from pydantic import BaseModel

class SmtpConfig(BaseModel):
    """
    SMTP-Zugang für den Mailversand. Das Passwort steht nie in der YAML-Datei,
    sondern kommt aus SMTP_PASS_ENC (Fernet) oder SMTP_PASS.
    """
    host: Optional[str] = None
    port: Optional[int] = None
    user: Optional[str] = None
    from_address: Optional[str] = None
    use_tls: bool = True
    timeout_seconds: float = 30.0
