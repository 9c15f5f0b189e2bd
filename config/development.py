import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_lifecycle_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed leave types and demo users on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Organisation wall clock is a fixed UTC offset (no DST)
ORG_UTC_OFFSET_HOURS = int(os.getenv("ORG_UTC_OFFSET_HOURS", "7"))
CHECKOUT_TOLERANCE_SECONDS = int(os.getenv("CHECKOUT_TOLERANCE_SECONDS", "60"))
AUTO_CHECKOUT_AFTER_HOURS = int(os.getenv("AUTO_CHECKOUT_AFTER_HOURS", "1"))
