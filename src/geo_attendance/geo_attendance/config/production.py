import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "geo_attendance"),
}

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
SEED_DEMO_DATA = bool(int(os.getenv("SEED_DEMO_DATA", "0")))

REQUIRED_ATTENDANCE_PERCENTAGE = float(os.getenv("REQUIRED_ATTENDANCE_PERCENTAGE", "75"))
LATE_THRESHOLD_MINUTES = int(os.getenv("LATE_THRESHOLD_MINUTES", "5"))
DEFAULT_ALLOWED_RADIUS_METERS = int(os.getenv("DEFAULT_ALLOWED_RADIUS_METERS", "50"))
DEFAULT_CHECK_IN_WINDOW_MINUTES = int(os.getenv("DEFAULT_CHECK_IN_WINDOW_MINUTES", "10"))
DEFAULT_EXCUSE_DEADLINE_HOURS = int(os.getenv("DEFAULT_EXCUSE_DEADLINE_HOURS", "48"))
