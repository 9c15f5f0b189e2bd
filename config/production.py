import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_lifecycle_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

ORG_UTC_OFFSET_HOURS = int(os.getenv("ORG_UTC_OFFSET_HOURS", "7"))
CHECKOUT_TOLERANCE_SECONDS = int(os.getenv("CHECKOUT_TOLERANCE_SECONDS", "60"))
AUTO_CHECKOUT_AFTER_HOURS = int(os.getenv("AUTO_CHECKOUT_AFTER_HOURS", "1"))
