import logging
import sys
from datetime import datetime
from flask import Flask, request, jsonify
from slack_bolt import App
from slack_bolt.adapter.flask import SlackRequestHandler
from slack_bolt.adapter.socket_mode import SocketModeHandler

from config import (
    LOG_LEVEL, PORT, SLACK_APP_TOKEN, SLACK_BOT_TOKEN, SLACK_SIGNING_SECRET, check_required_env
)
from src.errors import ConfigurationError
from src.models import Action
from src.services.clearance_service import ClearanceService
from src.services.firebase_utils import get_db

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

# Initialize Flask app
flask_app = Flask(__name__)

# Initialize Slack app
slack_app = App(
    token=SLACK_BOT_TOKEN,
    signing_secret=SLACK_SIGNING_SECRET
)

clearance_service = ClearanceService(slack_app.client)


@flask_app.route("/slack/events", methods=["POST"])
def slack_events():
    return SlackRequestHandler(slack_app).handle(request)

@flask_app.route("/health", methods=["GET"])
def health_check():
    return jsonify({"status": "healthy", "timestamp": datetime.now().isoformat()})

# Log all incoming requests
@slack_app.middleware
def log_request(body, logger, next):
    logger.debug(f"🔍 Incoming request type: {body.get('type', body.get('command', 'unknown'))}")
    return next()

@slack_app.command("/grant")
def grant_command(ack, body, respond, logger):
    ack()
    logger.info(f"🔍 /grant command received from {body.get('user_id')}")
    clearance_service.handle_command(Action.GRANT, body, respond)

@slack_app.command("/revoke")
def revoke_command(ack, body, respond, logger):
    ack()
    logger.info(f"🔍 /revoke command received from {body.get('user_id')}")
    clearance_service.handle_command(Action.REVOKE, body, respond)

# Error handling
@slack_app.error
def global_error_handler(error, body, logger):
    logger.exception(f"Error: {error}")
    return "⚠️ Sorry, something went wrong."


if __name__ == "__main__":
    logger.info("🚀 Starting Clearance Bot...")

    try:
        check_required_env()
    except ConfigurationError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    try:
        get_db()
        logger.info("✅ Firebase connected successfully")
    except Exception as e:
        logger.warning(f"⚠️ Firebase connection warning: {e}")

    identity = slack_app.client.auth_test()
    logger.info(f"🤖 Logged in as {identity.get('user')}")

    if SLACK_APP_TOKEN:
        logger.info("📡 Starting in Socket Mode...")
        SocketModeHandler(slack_app, SLACK_APP_TOKEN).start()
    else:
        logger.info(f"🌐 Starting in HTTP Mode on port {PORT}...")
        flask_app.run(host="0.0.0.0", port=PORT)
