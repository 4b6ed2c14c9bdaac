import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "reports_reader"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "academic_records"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

ALERT_CONSECUTIVE_THRESHOLD = int(os.getenv("ALERT_CONSECUTIVE_THRESHOLD", "3"))
ALERT_MONTHLY_THRESHOLD = int(os.getenv("ALERT_MONTHLY_THRESHOLD", "5"))
