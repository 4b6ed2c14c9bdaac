import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "academic_records_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

ALERT_CONSECUTIVE_THRESHOLD = 3
ALERT_MONTHLY_THRESHOLD = 5
