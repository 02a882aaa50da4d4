import os

SECRET_KEY = os.getenv("SESSION_SECRET", "")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "relational")

SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_API_KEY = os.getenv("SUPABASE_API_KEY", "")
MONGODB_URI = os.getenv("MONGODB_URI", "")

SESSION_BACKEND = os.getenv("SESSION_BACKEND", "document")
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", "86400"))

SEED_SAMPLE_DATA = bool(int(os.getenv("SEED_SAMPLE_DATA", "0")))

LEGACY_CREDENTIALS_ENABLED = bool(int(os.getenv("LEGACY_CREDENTIALS_ENABLED", "0")))
LEGACY_FIXED_PASSWORD = os.getenv("LEGACY_FIXED_PASSWORD", "")
DEBUG_IDENTITY_ENABLED = False
