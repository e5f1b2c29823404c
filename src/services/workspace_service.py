import logging
import re
import threading
from collections import defaultdict

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import DefaultCredentialsError
from slack_sdk.errors import SlackApiError

from config import BOT_ROLE_POSITION
from src.errors import CommandUsageError, LastMemberError, PlatformOperationFailure
from src.models import Action, ExecutorContext, Invocation, RoleRef
from src.services import firebase_utils

logger = logging.getLogger(__name__)

# Slack escapes mentions in slash command text as <@U123|name> and <!subteam^S123|@handle>
USER_MENTION_PATTERN = re.compile(r"<@([UW][^>|]+)(?:\|[^>]*)?>")
USERGROUP_MENTION_PATTERN = re.compile(r"<!subteam\^([^>|]+)(?:\|[^>]*)?>")


def parse_command_text(text):
    """Pull the target user and user group IDs out of /grant or /revoke text"""
    text = text or ""
    user_match = USER_MENTION_PATTERN.search(text)
    group_match = USERGROUP_MENTION_PATTERN.search(text)
    if not user_match or not group_match:
        raise CommandUsageError("Both a user and a role are required.")
    return user_match.group(1), group_match.group(1)


class WorkspaceService:
    """Reads roles and permissions from Slack and applies grants/revokes.

    User groups stand in for roles. Their positions come from the role
    store, since Slack itself does not rank user groups.
    """

    def __init__(self, client, role_store=firebase_utils):
        self.client = client
        self.role_store = role_store
        # Membership updates replace the whole list, so they run one at a time per group
        self._locks = defaultdict(threading.Lock)
        self._locks_guard = threading.Lock()

    def _lock_for(self, usergroup_id):
        with self._locks_guard:
            return self._locks[usergroup_id]

    def _read_store(self, read, *args):
        try:
            return read(*args)
        except (GoogleAPIError, DefaultCredentialsError) as e:
            raise PlatformOperationFailure(f"Could not read role store: {e}") from e

    def _list_usergroups(self):
        try:
            response = self.client.usergroups_list(include_users=True)
        except SlackApiError as e:
            raise PlatformOperationFailure(f"Could not list user groups: {e.response['error']}") from e
        return response.get("usergroups", [])

    def _to_role(self, usergroup):
        return RoleRef(
            id=usergroup["id"],
            name=usergroup.get("name", ""),
            position=self._read_store(self.role_store.get_role_position, usergroup["id"])
        )

    def get_role(self, usergroup_id, usergroups=None):
        """Get a user group as a RoleRef"""
        for usergroup in usergroups if usergroups is not None else self._list_usergroups():
            if usergroup["id"] == usergroup_id:
                return self._to_role(usergroup)
        raise CommandUsageError(f"Unknown role: {usergroup_id}")

    def get_executor(self, user_id, usergroups=None):
        """Get the roles and manage permission of the invoking user"""
        if usergroups is None:
            usergroups = self._list_usergroups()
        try:
            user = self.client.users_info(user=user_id)["user"]
        except SlackApiError as e:
            raise PlatformOperationFailure(f"Could not look up user {user_id}: {e.response['error']}") from e

        held_roles = frozenset(
            self._to_role(usergroup) for usergroup in usergroups
            if user_id in usergroup.get("users", [])
        )
        return ExecutorContext(
            held_roles=held_roles,
            has_manage_role_permission=bool(user.get("is_admin") or user.get("is_owner"))
        )

    def get_bot_top_role_position(self):
        """Get the bot's top role position, preferring the stored config"""
        config = self._read_store(self.role_store.get_global_config) or {}
        return int(config.get("bot_role_position", BOT_ROLE_POSITION))

    def build_invocation(self, action, executor_id, text):
        """Assemble an Invocation from a slash command"""
        target_user, usergroup_id = parse_command_text(text)
        usergroups = self._list_usergroups()
        return Invocation(
            action=action,
            target_user=target_user,
            target_role=self.get_role(usergroup_id, usergroups),
            executor=self.get_executor(executor_id, usergroups),
            bot_top_role_position=self.get_bot_top_role_position()
        )

    def apply(self, invocation):
        """Add the target user to, or remove them from, the target user group.

        Slack rejects a user group with no members, so removing the last
        member raises LastMemberError without touching the group.
        """
        role_id = invocation.target_role.id
        try:
            with self._lock_for(role_id):
                response = self.client.usergroups_users_list(usergroup=role_id)
                users = set(response.get("users", []))
                if invocation.action is Action.GRANT:
                    users.add(invocation.target_user)
                else:
                    users.discard(invocation.target_user)
                if not users:
                    raise LastMemberError(f"Cannot remove the last member of {role_id}")
                self.client.usergroups_users_update(usergroup=role_id, users=",".join(sorted(users)))
        except SlackApiError as e:
            raise PlatformOperationFailure(
                f"Could not {invocation.action.value} {role_id} for {invocation.target_user}: {e.response['error']}"
            ) from e
        logger.info(f"✅ {invocation.action.value} {role_id} for {invocation.target_user}")
