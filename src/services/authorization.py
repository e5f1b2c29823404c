"""Decides whether a grant or revoke may go ahead.

Only two things gate the action: the executor's manage-roles permission and
the bot's own top role position. The executor's clearance rank is worked out
for the reply text but does not block anything.
"""
from src.models import Approved, Denied, DenyReason
from src.services.role_service import RoleService

_role_service = RoleService()


def authorize(invocation, role_service=None):
    """Return the Decision for an invocation. Never raises for denials."""
    role_service = role_service or _role_service

    if not invocation.executor.has_manage_role_permission:
        return Denied(DenyReason.NO_MANAGE_PERMISSION)

    if invocation.target_role.position >= invocation.bot_top_role_position:
        return Denied(DenyReason.ROLE_ABOVE_BOT)

    return Approved(
        executor_rank=role_service.highest_rank(invocation.executor.held_roles),
        target_descriptor=role_service.describe_role(invocation.target_role)
    )
