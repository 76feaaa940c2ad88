# payparty/config.py
# Central place for environment settings and constants
import os
from dotenv import load_dotenv

# .env next to the package wins over nothing, but never over the real environment
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), "../.env"))

# --- Database Config ---
DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME")
# older deployments spell it COLLECTION_NAME
DATABASE_COLLECTION = os.getenv("DATABASE_COLLECTION") or os.getenv("COLLECTION_NAME") or "parties"

# Server selection timeout used for the start-up connection check
CONNECT_TIMEOUT_MS = int(os.getenv("CONNECT_TIMEOUT_MS", "30000"))

# --- Server Config ---
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Comma separated list, "*" allows every origin
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
