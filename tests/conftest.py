import time

import pytest
from slack_sdk.errors import SlackApiError

from src.models import Action, ExecutorContext, Invocation, RoleRef


def slack_error(error="not_allowed"):
    return SlackApiError(f"The request failed: {error}", {"ok": False, "error": error})


class FakeSlackClient:
    """Records Slack Web API calls made by the bot"""

    def __init__(self, usergroups=None, users=None, fail_on=(), fail_after_updates=None):
        self.usergroups = {group["id"]: dict(group) for group in (usergroups or [])}
        self.users = users or {}
        self.fail_on = set(fail_on)
        self.fail_after_updates = fail_after_updates
        self.posts = []
        self.updates = []

    def _check(self, method):
        if method in self.fail_on:
            raise slack_error()

    def usergroups_list(self, include_users=False):
        self._check("usergroups_list")
        return {"ok": True, "usergroups": [dict(group) for group in self.usergroups.values()]}

    def users_info(self, user):
        self._check("users_info")
        return {"ok": True, "user": self.users.get(user, {"id": user})}

    def usergroups_users_list(self, usergroup):
        self._check("usergroups_users_list")
        return {"ok": True, "users": list(self.usergroups[usergroup].get("users", []))}

    def usergroups_users_update(self, usergroup, users):
        self._check("usergroups_users_update")
        self.usergroups[usergroup]["users"] = users.split(",") if users else []
        return {"ok": True}

    def chat_postMessage(self, channel, text, **kwargs):
        self._check("chat_postMessage")
        self.posts.append({"channel": channel, "text": text, **kwargs})
        return {"ok": True, "channel": channel, "ts": "1700000000.000100"}

    def chat_update(self, channel, ts, text, **kwargs):
        self._check("chat_update")
        if self.fail_after_updates is not None and len(self.updates) >= self.fail_after_updates:
            raise slack_error("message_not_found")
        self.updates.append({"channel": channel, "ts": ts, "text": text, **kwargs})
        return {"ok": True}


class FakeRoleStore:
    def __init__(self, positions=None, config=None):
        self.positions = positions or {}
        self.config = config

    def get_role_position(self, role_id):
        return self.positions.get(role_id, 0)

    def get_global_config(self):
        return self.config


@pytest.fixture
def make_invocation():
    def _make(held=(), manage=True, target=RoleRef("S_RA", "RA Access", 3), bot_position=10,
              action=Action.GRANT, user="U_TARGET"):
        return Invocation(
            action=action,
            target_user=user,
            target_role=target,
            executor=ExecutorContext(held_roles=frozenset(held), has_manage_role_permission=manage),
            bot_top_role_position=bot_position
        )
    return _make


@pytest.fixture
def workspace_client():
    return FakeSlackClient(
        usergroups=[
            {"id": "S_CA", "name": "CA Something", "users": ["U_EXEC"]},
            {"id": "S_RA", "name": "RA Access", "users": ["U_OTHER"]},
            {"id": "S_MOD", "name": "Moderator", "users": ["U_EXEC", "U_TARGET"]},
        ],
        users={
            "U_EXEC": {"id": "U_EXEC", "is_admin": True},
            "U_PLAIN": {"id": "U_PLAIN", "is_admin": False, "is_owner": False},
        }
    )


@pytest.fixture
def role_store():
    return FakeRoleStore(positions={"S_CA": 5, "S_RA": 3, "S_MOD": 2}, config={"bot_role_position": 10})


class FailingRoleStore:
    """Role store whose reads fail the way an unreachable Firestore does"""

    def __init__(self, error):
        self.error = error

    def get_role_position(self, role_id):
        raise self.error

    def get_global_config(self):
        raise self.error


class SlowListSlackClient(FakeSlackClient):
    """Pauses between reading and returning a group's members"""

    def usergroups_users_list(self, usergroup):
        response = super().usergroups_users_list(usergroup)
        time.sleep(0.05)
        return response
