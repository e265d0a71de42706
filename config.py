"""
CarouWatch Configuration
Loads settings from environment variables and defines constants.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Base directory (where this script lives)
BASE_DIR = Path(__file__).parent.resolve()

# Slack (bot or user OAuth token with chat:write)
SLACK_ACCESS_TOKEN = os.getenv("SLACK_ACCESS_TOKEN", "")
SLACK_CHANNEL = os.getenv("SLACK_CHANNEL", "")
SLACK_API_URL = "https://slack.com/api"

# Search defaults (0 means unset)
MIN_PRICE = int(os.getenv("MIN_PRICE", "0"))
MAX_PRICE = int(os.getenv("MAX_PRICE", "0"))
RECENT_ONLY = os.getenv("RECENT_ONLY", "false").lower() == "true"

# Timing
CHECK_INTERVAL_MINUTES = int(os.getenv("CHECK_INTERVAL_MINUTES", "10"))
REQUEST_TIMEOUT_SECONDS = int(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))

# File paths (empty LOG_FILE disables file logging)
LOG_FILE = os.getenv("LOG_FILE", "")
if LOG_FILE:
    LOG_FILE = BASE_DIR / LOG_FILE

# Browser settings (only used with --browser)
HEADLESS = os.getenv("HEADLESS", "true").lower() == "true"

# Carousell settings
CAROUSELL_BASE_URL = "https://www.carousell.sg"

# Attribute on the listing card div that holds the listing id
IDENTITY_ATTRIBUTE = "data-testid"

# Overlay text rendered inside listing cards, not part of the listing
PLACEHOLDER_TEXT = "Protection"

# User agent for requests
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
