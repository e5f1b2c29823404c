from src.scripts.setup_bot import get_clearance_positions
from src.services.role_service import RoleService


def test_positions_follow_hierarchy():
    usergroups = [
        {"id": "S_AA", "name": "AA Automated"},
        {"id": "S_OS", "name": "OS Overseer"},
        {"id": "S_RA", "name": "RA Access"},
        {"id": "S_MOD", "name": "Moderator"},
    ]
    positions = get_clearance_positions(usergroups, RoleService())

    assert positions == {
        "S_OS": ("OS Overseer", 8),
        "S_RA": ("RA Access", 4),
        "S_AA": ("AA Automated", 1),
    }
