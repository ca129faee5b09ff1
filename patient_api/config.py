import os

from dotenv import load_dotenv

load_dotenv()


def _must_get(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required env var: {name}")
    return value


# HTTP server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "4000"))

# Flask debug
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Statement classifier: "lexical" | "token"
SQL_CLASSIFIER = os.getenv("SQL_CLASSIFIER", "lexical")

# DB connection
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = int(os.getenv("DB_PORT", "3306"))
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))


def database_settings() -> dict:
    """
    Connection kwargs for mysql.connector.
    Credentials are read at call time so importing this module never fails.
    """
    return {
        "host": os.getenv("DB_HOST", DB_HOST),
        "port": int(os.getenv("DB_PORT", str(DB_PORT))),
        "user": _must_get("DB_USER"),
        "password": _must_get("DB_PASSWORD"),
        "database": _must_get("DB_DATABASE"),
    }
