import logging
import re
import time

from config import CONFIRMATION_COLORS, REVEAL_DURATION
from src.errors import PlatformOperationFailure
from src.models import Action, Approved, Confirmation, DenyReason, Frame

logger = logging.getLogger(__name__)

DENIAL_MESSAGES = {
    DenyReason.NO_MANAGE_PERMISSION: "⚠️ You lack permission.",
    DenyReason.ROLE_ABOVE_BOT: "⚠️ I cannot modify that role; it is higher than my top role."
}

MENTION_PATTERN = re.compile(r"<(@|!subteam\^|!)([^>|]+)(\|[^>]*)?>")

PLATFORM_FAILURE_MESSAGE = "⚠️ I lack permission to modify that role."
LAST_MEMBER_MESSAGE = "⚠️ I cannot remove the last member of that role."

CONFIRMATIONS = {
    Action.GRANT: Confirmation("Authorization logged.", CONFIRMATION_COLORS["GRANT"]),
    Action.REVOKE: Confirmation("Revocation logged.", CONFIRMATION_COLORS["REVOKE"])
}


def user_mention(user_id):
    return f"<@{user_id}>"


def role_mention(role_id):
    return f"<!subteam^{role_id}>"


def restrict_mentions(text, allowed_mentions):
    """Escape every mention that is not in the allow-list.

    Broadcasts such as <!here> and <!channel> are never allowed.
    """
    def _replace(match):
        kind, target = match.group(1), match.group(2)
        if kind == "@" and target in allowed_mentions.get("users", []):
            return match.group(0)
        if kind == "!subteam^" and target in allowed_mentions.get("roles", []):
            return match.group(0)
        return match.group(0).replace("<", "&lt;").replace(">", "&gt;")

    return MENTION_PATTERN.sub(_replace, text)


def type_frames(text, total_time=REVEAL_DURATION):
    """Yield growing prefixes of text, one character at a time.

    Each frame carries the pause to take before the next one; the pauses add
    up to total_time. Empty text gives a single empty frame with no pause.
    """
    if not text:
        yield Frame("", 0.0)
        return

    per_char = total_time / len(text)
    for end in range(1, len(text) + 1):
        yield Frame(text[:end], per_char)


class Rendering:
    """Display form of one decision.

    frames is a generator and can only be consumed once.
    """

    def __init__(self, text, confirmation=None, allowed_mentions=None, animated=False,
                 duration=REVEAL_DURATION):
        self.allowed_mentions = allowed_mentions or {"users": [], "roles": []}
        self.text = restrict_mentions(text, self.allowed_mentions)
        self.confirmation = confirmation
        self.animated = animated
        if animated:
            self.frames = type_frames(self.text, duration)
        else:
            self.frames = iter([Frame(self.text, 0.0)])

    def content(self):
        """Get the final message text, confirmation line included"""
        if not self.confirmation:
            return self.text
        return f"{self.text}\n\n{self.confirmation.text}"


def _allowed_mentions(target_user, target_role):
    return {"users": [target_user], "roles": [target_role.id]}


def render(decision, action, target_user, target_role, duration=REVEAL_DURATION):
    """Turn a Decision into a Rendering"""
    mentions = _allowed_mentions(target_user, target_role)

    if not isinstance(decision, Approved):
        return Rendering(DENIAL_MESSAGES[decision.reason], allowed_mentions=mentions)

    verb, preposition = ("authorized", "for") if action is Action.GRANT else ("revoked", "from")
    text = (
        f"{decision.executor_rank} has {verb} {decision.target_descriptor} "
        f"[{role_mention(target_role.id)}] {preposition} {user_mention(target_user)}."
    )
    return Rendering(
        text,
        confirmation=CONFIRMATIONS[action],
        allowed_mentions=mentions,
        animated=True,
        duration=duration
    )


def render_failure(target_user, target_role, message=PLATFORM_FAILURE_MESSAGE):
    """Static reply for a grant/revoke the workspace refused"""
    return Rendering(message, allowed_mentions=_allowed_mentions(target_user, target_role))


def play(frames, send, sleep=time.sleep):
    """Deliver frames in order, pausing after each one.

    Stops for good on the first PlatformOperationFailure from send; the
    frame is not retried. Returns True when every frame was delivered.
    """
    for frame in frames:
        try:
            send(frame.content)
        except PlatformOperationFailure as e:
            logger.warning(f"⚠️ Frame delivery stopped: {e}")
            return False
        sleep(frame.pause)
    return True
