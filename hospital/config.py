from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# DB SQLite su file nella root del progetto se non configurato
DB_PATH = Path(__file__).resolve().parents[1] / "hospital.sqlite"
DATABASE_URL = os.getenv("HOSPITAL_DATABASE_URL", f"sqlite:///{DB_PATH}")

SQL_ECHO = os.getenv("HOSPITAL_SQL_ECHO", "0") == "1"
LOG_LEVEL = os.getenv("HOSPITAL_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# "conflict": rifiuta la cancellazione se esistono appuntamenti collegati
# "cascade" : cancella anche appuntamenti e consultazioni collegati
DELETE_POLICY = os.getenv("HOSPITAL_DELETE_POLICY", "conflict").strip().lower()
DELETE_POLICIES = ("conflict", "cascade")

RESET_SCHEMA = os.getenv("HOSPITAL_RESET_SCHEMA", "0") == "1"
SEED_ON_STARTUP = os.getenv("HOSPITAL_SEED_ON_STARTUP", "0") == "1"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)
