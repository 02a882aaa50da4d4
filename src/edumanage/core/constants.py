"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SESSION_COOKIE_NAME = "edumanage.sid"
DEFAULT_SESSION_TTL_SECONDS = 60 * 60 * 24
DEFAULT_MAX_SCORE = 100.0
DEFAULT_LOW_STOCK_THRESHOLD = 5
STOCK_CAS_ATTEMPTS = 5
DEBUG_IDENTITY_ID = 999
DEMO_PASSWORD = "admin123"
