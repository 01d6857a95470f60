"""Configuration settings for the Auralis teacher assistant."""

import os
import logging
from typing import Final

# Debug flag: 1 = debug mode (verbose logging), 0 = production mode
DEBUG: Final[int] = int(os.environ.get("AURALIS_DEBUG", "0"))

PRODUCT_NAME: Final[str] = "Auralis"

# --- Completion Endpoint Settings ---

# Load the Mistral API key from the environment; never hardcode it here.
MISTRAL_API_KEY: Final[str | None] = os.environ.get("MISTRAL_API_KEY")
MISTRAL_MODEL: Final[str] = os.environ.get("MISTRAL_MODEL", "mistral-large-latest")
MISTRAL_BASE_URL: Final[str] = os.environ.get("MISTRAL_BASE_URL", "https://api.mistral.ai/v1")

if not MISTRAL_API_KEY and DEBUG:
    logging.warning("MISTRAL_API_KEY environment variable not set. Generation will fail until it is provided.")

# Generation parameters sent with every request
MAX_TOKENS: Final[int] = int(os.environ.get("AURALIS_MAX_TOKENS", "4000"))
TEMPERATURE: Final[float] = float(os.environ.get("AURALIS_TEMPERATURE", "0.7"))

# Retry policy: attempts are counted including the first one.
# The wait before attempt n+1 is n * RETRY_DELAY_SECONDS (linear backoff).
MAX_ATTEMPTS: Final[int] = int(os.environ.get("AURALIS_MAX_ATTEMPTS", "3"))
RETRY_DELAY_SECONDS: Final[float] = float(os.environ.get("AURALIS_RETRY_DELAY", "1.0"))
REQUEST_TIMEOUT_SECONDS: Final[float] = float(os.environ.get("AURALIS_REQUEST_TIMEOUT", "60"))

# --- Local Storage ---
# Each named slot is stored as one JSON file inside DATA_DIR.
DATA_DIR: Final[str] = os.environ.get("AURALIS_DATA_DIR", os.path.join(os.path.expanduser("~"), ".auralis"))
HISTORY_SLOT: Final[str] = "auralis_history"
USAGE_SLOT: Final[str] = "auralis_usage_data"
EXPORT_DIR: Final[str] = os.environ.get("AURALIS_EXPORT_DIR", "exports")

# History entries keep only a preview of the submitted input
INPUT_PREVIEW_LENGTH: Final[int] = 100
# Usage history keeps this many most-recent days
USAGE_DAYS_KEPT: Final[int] = 7

# --- Optional Remote Document Store (Firestore) ---
# Remote saves are disabled unless a project id is configured.
FIRESTORE_PROJECT: Final[str | None] = os.environ.get("AURALIS_FIRESTORE_PROJECT")
FIRESTORE_COLLECTION: Final[str] = os.environ.get("AURALIS_FIRESTORE_COLLECTION", "responses")
USER_ID: Final[str] = os.environ.get("AURALIS_USER_ID", "local-user")
USER_EMAIL: Final[str] = os.environ.get("AURALIS_USER_EMAIL", "")
USER_NAME: Final[str] = os.environ.get("AURALIS_USER_NAME", "")

# --- Uploaded File Extraction ---
# Non-text uploads must yield at least this many readable characters
MIN_EXTRACTED_CHARS: Final[int] = 10
PLAIN_TEXT_EXTENSIONS: Final[tuple[str, ...]] = (".txt", ".md")

# --- Logging Configuration ---
LOG_DIR: Final[str] = "logs"
LOG_FILE: Final[str] = os.path.join(LOG_DIR, "auralis.log")
LOG_LEVEL = logging.DEBUG if DEBUG else logging.INFO
# Structured log format: timestamp, level, logger, module.function:line, message
LOG_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(module)s.%(funcName)s:%(lineno)d | %(message)s'

# Basic check
if __name__ == "__main__":
    print(f"Debug Mode: {'On' if DEBUG else 'Off'}")
    print(f"Log Level: {logging.getLevelName(LOG_LEVEL)}")
    print(f"Model: {MISTRAL_MODEL} @ {MISTRAL_BASE_URL}")
    print(f"API Key Loaded: {'Yes' if MISTRAL_API_KEY else 'No'}")
    print(f"Retry: {MAX_ATTEMPTS} attempts, {RETRY_DELAY_SECONDS}s linear backoff")
    print(f"Data Dir: {DATA_DIR}")
    print(f"Export Dir: {EXPORT_DIR}")
    print(f"Firestore Project: {FIRESTORE_PROJECT or 'disabled'}")
