"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SUNDAY = 0
DEFAULT_HOLIDAY_NAME = "Holiday"
SESSION_CODE_PREFIX_LENGTH = 8
SESSION_CODE_SUFFIX_LENGTH = 4
MAX_SPOKEN_SESSIONS = 5
ALEXA_ID_PREFIX = "amzn1.ask.account."
ALEXA_DOC_PREFIX = "alexa-"
FALLBACK_SESSION_LABEL = "current year"
