import os

SECRET_KEY = "test-secret"

STORAGE_BACKEND = "memory"
DATA_FILE = os.getenv("DATA_FILE", "instance/attendance-test.json")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "face_attendance_test"),
}

MATCH_THRESHOLD = 0.6
ATTENDANCE_TIMEZONE = "UTC"
LOG_LEVEL = "WARNING"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
