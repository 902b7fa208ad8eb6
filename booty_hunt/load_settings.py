import logging
import os

from dotenv import load_dotenv

load_dotenv()


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logging.warning(f"Invalid value for {name}: {raw!r}, using {default}")
        return default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logging.warning(f"Invalid value for {name}: {raw!r}, using {default}")
        return default


db_backend = os.getenv("DB_BACKEND", "sqlite").lower()
database_path = os.getenv("DATABASE_PATH", "booty-hunt.sqlite3")

user = os.getenv("DB_USER")
password = os.getenv("DB_PASSWORD")
host = os.getenv("DB_HOST")
port = os.getenv("DB_PORT")
db_name = os.getenv("DB_NAME")

store_busy_timeout = _float_env("STORE_BUSY_TIMEOUT", 5.0)

server_host = os.getenv("HOST", "0.0.0.0")
server_port = _int_env("PORT", 3001)
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
cors_allow_origins = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
    if origin.strip()
]

if __name__ == "__main__":
    print(db_backend, database_path, host, port, db_name, store_busy_timeout)
