import os

SECRET_KEY = os.getenv("SESSION_SECRET", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# memory | relational | document
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")

SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_API_KEY = os.getenv("SUPABASE_API_KEY", "")
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017/edumanage")

# memory | document
SESSION_BACKEND = os.getenv("SESSION_BACKEND", "memory")
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", "86400"))

# Demo dataset (admin/teacher1/student1/student2, password admin123) on an empty store
SEED_SAMPLE_DATA = bool(int(os.getenv("SEED_SAMPLE_DATA", "1")))

LEGACY_CREDENTIALS_ENABLED = bool(int(os.getenv("LEGACY_CREDENTIALS_ENABLED", "1")))
LEGACY_FIXED_PASSWORD = os.getenv("LEGACY_FIXED_PASSWORD", "admin123")
DEBUG_IDENTITY_ENABLED = bool(int(os.getenv("DEBUG_IDENTITY_ENABLED", "0")))
