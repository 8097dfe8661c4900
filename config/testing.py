import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "ojt_tracker_test"),
    "pool_size": 2,
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

TIMEZONE = os.getenv("TIMEZONE", "Asia/Manila")
LATE_GRACE_MINUTES = 5
RETENTION_DAYS = 730

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
