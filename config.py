import os
from dotenv import load_dotenv

from src.errors import ConfigurationError

# Load environment variables
load_dotenv()

# Slack configuration
SLACK_BOT_TOKEN = os.getenv("SLACK_BOT_TOKEN")
SLACK_APP_TOKEN = os.getenv("SLACK_APP_TOKEN")
SLACK_SIGNING_SECRET = os.getenv("SLACK_SIGNING_SECRET")

# Firestore configuration
GOOGLE_APPLICATION_CREDENTIALS = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")

# Application configuration
PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Position of the bot's own top role; roles at or above it are off limits.
# The "bot_role_position" field of the global config document overrides this.
BOT_ROLE_POSITION = int(os.getenv("BOT_ROLE_POSITION", "0"))

# Seconds spent typing out an approval message
REVEAL_DURATION = float(os.getenv("REVEAL_DURATION", "0.3"))

REQUIRED_ENV_VARS = ["SLACK_BOT_TOKEN", "SLACK_SIGNING_SECRET"]

# Confirmation line colors
CONFIRMATION_COLORS = {
    "GRANT": "#2eb886",   # green
    "REVOKE": "#e01e5a"   # red
}

# Database collections
COLLECTIONS = {
    "ROLES": "roles",
    "CONFIG": "config"
}


def check_required_env():
    """Raise ConfigurationError when a required variable is not set"""
    missing_vars = [var for var in REQUIRED_ENV_VARS if not os.getenv(var)]
    if missing_vars:
        raise ConfigurationError(f"Missing environment variables: {', '.join(missing_vars)}")
