import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# "json" keeps everything in DATA_FILE; "mysql" uses DB_CONFIG.
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "json")
DATA_FILE = os.getenv("DATA_FILE", "instance/attendance.json")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "face_attendance"),
}

# Face descriptor distance below which a scan counts as a match (tuned, not derived).
MATCH_THRESHOLD = float(os.getenv("MATCH_THRESHOLD", "0.6"))

# Calendar day used for once-per-day marking: "local" (server zone) or an IANA name.
ATTENDANCE_TIMEZONE = os.getenv("ATTENDANCE_TIMEZONE", "local")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEBUG = True

# If enabled with the mysql backend, schema.sql is applied on startup (CREATE IF NOT EXISTS).
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
