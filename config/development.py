import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "academic_records"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Risk alert thresholds (unexcused absences)
ALERT_CONSECUTIVE_THRESHOLD = int(os.getenv("ALERT_CONSECUTIVE_THRESHOLD", "3"))
ALERT_MONTHLY_THRESHOLD = int(os.getenv("ALERT_MONTHLY_THRESHOLD", "5"))
