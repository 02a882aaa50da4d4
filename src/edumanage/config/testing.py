import os

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

STORAGE_BACKEND = "memory"
SESSION_BACKEND = "memory"
SESSION_TTL_SECONDS = 86400

SEED_SAMPLE_DATA = bool(int(os.getenv("SEED_SAMPLE_DATA", "0")))

LEGACY_CREDENTIALS_ENABLED = False
DEBUG_IDENTITY_ENABLED = False
