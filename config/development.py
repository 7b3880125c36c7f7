import os

from config import env_list

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "recruit_portal"),
}

# Empty host disables email; notifications are logged instead
SMTP_CONFIG = {
    "host": os.getenv("SMTP_HOST", ""),
    "port": int(os.getenv("SMTP_PORT", "587")),
    "user": os.getenv("SMTP_USER", ""),
    "password": os.getenv("SMTP_PASSWORD", ""),
    "sender": os.getenv("SMTP_SENDER", ""),
    "use_tls": bool(int(os.getenv("SMTP_USE_TLS", "1"))),
}
ADMIN_EMAILS = env_list("ADMIN_EMAILS")

INVOICE_DUE_DAYS = int(os.getenv("INVOICE_DUE_DAYS", "30"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo users and billing on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
