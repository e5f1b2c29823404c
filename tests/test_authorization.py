import pytest

from src.config.clearance import UNRANKED
from src.models import Approved, Denied, DenyReason, RoleRef
from src.services.authorization import authorize


class TestAuthorize:

    @pytest.mark.parametrize("target_position,bot_position", [(3, 10), (12, 10), (10, 10), (0, 0)])
    def test_missing_permission_always_denied(self, make_invocation, target_position, bot_position):
        invocation = make_invocation(
            manage=False,
            target=RoleRef("S_RA", "RA Access", target_position),
            bot_position=bot_position
        )
        assert authorize(invocation) == Denied(DenyReason.NO_MANAGE_PERMISSION)

    @pytest.mark.parametrize("target_position", [10, 11, 12])
    def test_role_at_or_above_bot_denied(self, make_invocation, target_position):
        invocation = make_invocation(target=RoleRef("S_RA", "RA Access", target_position), bot_position=10)
        assert authorize(invocation) == Denied(DenyReason.ROLE_ABOVE_BOT)

    def test_role_below_bot_approved(self, make_invocation):
        invocation = make_invocation(target=RoleRef("S_RA", "RA Access", 9), bot_position=10)
        assert isinstance(authorize(invocation), Approved)

    def test_scenario_a(self, make_invocation):
        invocation = make_invocation(held=[RoleRef("S_CA", "CA Something", 5)])
        assert authorize(invocation) == Approved(
            executor_rank="CA",
            target_descriptor="Level 1 System Access | Restricted Access"
        )

    def test_scenario_c_ignores_permission(self, make_invocation):
        target = RoleRef("S_OS", "OS Overseer", 12)
        assert authorize(make_invocation(target=target)) == Denied(DenyReason.ROLE_ABOVE_BOT)
        assert authorize(make_invocation(target=target, manage=False)) == Denied(DenyReason.NO_MANAGE_PERMISSION)

    def test_scenario_d_unrecognized_target(self, make_invocation):
        invocation = make_invocation(target=RoleRef("S_MOD", "Moderator", 2))
        decision = authorize(invocation)
        assert decision == Approved(executor_rank=UNRANKED, target_descriptor="Moderator")

    def test_executor_rank_does_not_gate(self, make_invocation):
        # An AA executor may still grant OS while the bot can reach it
        invocation = make_invocation(
            held=[RoleRef("S_AA", "AA Bot", 1)],
            target=RoleRef("S_OS", "OS Overseer", 8)
        )
        assert authorize(invocation) == Approved(
            executor_rank="AA",
            target_descriptor="Level 5 System Access | Overseer System"
        )
