import logging
import time

from slack_sdk.errors import SlackApiError

from config import REVEAL_DURATION
from src.errors import CommandUsageError, LastMemberError, PlatformOperationFailure
from src.models import Approved
from src.services.authorization import authorize
from src.services.outcome_renderer import (
    LAST_MEMBER_MESSAGE, PLATFORM_FAILURE_MESSAGE, play, render, render_failure
)
from src.services.workspace_service import WorkspaceService

logger = logging.getLogger(__name__)

PLACEHOLDER_TEXT = "⏳ Processing clearance request..."


def get_usage_text(action):
    return f"Usage: `/{action.value} @user @role`"


class ClearanceService:
    """Runs one /grant or /revoke command from invocation to final reply"""

    def __init__(self, client, workspace=None, sleep=time.sleep, duration=REVEAL_DURATION):
        self.client = client
        self.workspace = workspace or WorkspaceService(client)
        self.sleep = sleep
        self.duration = duration

    def handle_command(self, action, body, respond):
        """Entry point for the slash command listeners"""
        user_id = body["user_id"]
        logger.info(f"🔍 User {user_id} executed /{action.value} with: '{body.get('text', '')}'")

        try:
            invocation = self.workspace.build_invocation(action, user_id, body.get("text", ""))
        except CommandUsageError as e:
            respond(response_type="ephemeral", text=f"⚠️ {e}\n{get_usage_text(action)}")
            return None
        except PlatformOperationFailure:
            logger.exception(f"❌ Could not read workspace state for /{action.value}")
            respond(response_type="ephemeral", text=PLATFORM_FAILURE_MESSAGE)
            return None

        return self.execute(invocation, body["channel_id"])

    def execute(self, invocation, channel_id):
        """Authorize, apply and reply. Returns the Decision."""
        decision = authorize(invocation)
        logger.info(f"🔍 Decision for {invocation.action.value} {invocation.target_role.name}: {decision}")

        rendering = None
        if isinstance(decision, Approved):
            try:
                self.workspace.apply(invocation)
            except LastMemberError as e:
                logger.warning(f"⚠️ {e}")
                rendering = render_failure(invocation.target_user, invocation.target_role, LAST_MEMBER_MESSAGE)
            except PlatformOperationFailure:
                logger.exception(f"❌ Error applying {invocation.action.value}")
                rendering = render_failure(invocation.target_user, invocation.target_role)

        if rendering is None:
            rendering = render(
                decision,
                invocation.action,
                invocation.target_user,
                invocation.target_role,
                duration=self.duration
            )

        self.deliver(rendering, channel_id)
        return decision

    def deliver(self, rendering, channel_id):
        """Post a placeholder and type the rendering into it. Returns True on success."""
        try:
            response = self.client.chat_postMessage(channel=channel_id, text=PLACEHOLDER_TEXT, parse="none")
        except SlackApiError as e:
            logger.error(f"❌ Could not post reply in {channel_id}: {e.response['error']}")
            return False
        ts = response["ts"]

        def send(content, attachments=None):
            try:
                self.client.chat_update(
                    channel=channel_id,
                    ts=ts,
                    text=content,
                    attachments=attachments or [],
                    parse="none"
                )
            except SlackApiError as e:
                raise PlatformOperationFailure(e.response["error"]) from e

        if not play(rendering.frames, send, self.sleep):
            return False

        if rendering.confirmation:
            try:
                send(rendering.text, attachments=[{
                    "color": rendering.confirmation.color,
                    "text": rendering.confirmation.text
                }])
            except PlatformOperationFailure as e:
                logger.warning(f"⚠️ Could not post confirmation: {e}")
                return False

        logger.info(f"✅ Reply delivered in {channel_id}")
        return True
