# Hilfsskript zum Verschlüsseln des SMTP-Passworts für .env (SMTP_PASS_ENC)
# Ausführen: python -m shared_modules.encrypt_secret <klartext-passwort>
import os
import sys
from typing import Optional, Tuple

from cryptography.fernet import Fernet


def encrypt_secret(plain: str, fernet_key: Optional[str] = None) -> Tuple[str, str]:
    """
    Verschlüsselt `plain` mit dem übergebenen Fernet-Key oder einem neu erzeugten.

    Returns:
        Tuple[str, str]: (FERNET_KEY, verschlüsselter Wert)
    """
    key = fernet_key or Fernet.generate_key().decode()
    token = Fernet(key.encode()).encrypt(plain.encode()).decode()
    return key, token


def main():
    if len(sys.argv) == 2:
        password = sys.argv[1]
    else:
        # Interaktive Abfrage, falls kein Argument übergeben wurde (z. B. VSCode Run/Debug)
        import getpass
        print("Kein Passwort als Argument übergeben.")
        password = getpass.getpass("Bitte Passwort eingeben (wird nicht angezeigt): ")
        if not password:
            print("Kein Passwort eingegeben. Abbruch.")
            sys.exit(1)

    existing_key = os.getenv("FERNET_KEY")
    key, encrypted = encrypt_secret(password, existing_key)
    if not existing_key:
        # Schlüssel nur einmal erzeugen und dann sicher speichern!
        print(f"Dein geheimer Schlüssel (FERNET_KEY): {key}")
    print(f"Verschlüsseltes Passwort für .env: SMTP_PASS_ENC={encrypted}")

if __name__ == "__main__":
    main()
