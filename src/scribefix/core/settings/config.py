"""
Centralized application configuration.

Edit the variables below to configure development settings.
"""

import logging

# =============================================================================
# DEVELOPMENT SETTINGS - Edit these for local development
# =============================================================================
LOG_LEVEL = "DEBUG"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
LOG_TO_CONSOLE = True  # Set to True to output logs to terminal
# =============================================================================

# =============================================================================
# POST-PROCESSING SETTINGS
# =============================================================================
DEFAULT_TIMEOUT_SECONDS = 30  # Hard limit for a single correction call
PROBE_TIMEOUT_SECONDS = 5  # Limit for `<command> --version` availability checks
MODEL_FETCH_TIMEOUT_SECONDS = 10  # Limit for list-models requests
MAX_WORKERS = 4  # Worker pool size for settings mutations and model fetches
# =============================================================================

DEFAULT_SYSTEM_PROMPT = (
    "You are a proofreader for dictated text. Fix grammar, spelling and "
    "punctuation in the language the text is written in. Preserve the "
    "meaning, the wording and any loanwords or technical terms. Do not "
    "translate, summarize or add commentary. Return only the corrected text."
)


def get_log_level() -> int:
    """Get the logging level as an integer."""
    return getattr(logging, LOG_LEVEL.upper(), logging.INFO)
