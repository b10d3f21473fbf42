import os

SECRET_KEY = "test-secret"

STORAGE_BACKEND = "sqlite"
SQLITE_PATH = os.getenv("SQLITE_PATH", "data/test_events.db")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "event_checkin_test"),
}

PUBLIC_BASE_URL = "http://testserver"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
MAX_UPLOAD_BYTES = 1024 * 1024

AUTO_INIT_DB = True
