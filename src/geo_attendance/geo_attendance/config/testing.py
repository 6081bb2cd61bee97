import os

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

STORE_BACKEND = "memory"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "geo_attendance_test"),
}

AUTO_INIT_DB = False
SEED_DEMO_DATA = False

REQUIRED_ATTENDANCE_PERCENTAGE = 75.0
LATE_THRESHOLD_MINUTES = 5
DEFAULT_ALLOWED_RADIUS_METERS = 50
DEFAULT_CHECK_IN_WINDOW_MINUTES = 10
DEFAULT_EXCUSE_DEADLINE_HOURS = 48
