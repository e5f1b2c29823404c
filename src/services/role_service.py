import re

from src.config.clearance import UNRANKED
from src.services.clearance_registry import DEFAULT_REGISTRY


class RoleService:
    def __init__(self, registry=DEFAULT_REGISTRY):
        self.registry = registry

    def resolve(self, role):
        """Get the clearance code a role name starts with, or None"""
        # A name with leading whitespace has an empty first token
        code = re.split(r"\s", role.name, maxsplit=1)[0]
        return code if self.registry.is_known(code) else None

    def highest_rank(self, held_roles):
        """Get the most senior clearance code among held roles.

        Only the clearance hierarchy decides; platform role positions are
        ignored here. Returns UNRANKED when no held role is a clearance role.
        """
        codes = {self.resolve(role) for role in held_roles}
        codes.discard(None)
        if not codes:
            return UNRANKED
        return min(codes, key=self.registry.rank)

    def describe_role(self, role):
        """Get the clearance label for a role, falling back to its raw name"""
        return self.registry.describe(self.resolve(role)) or role.name

    def get_role_hierarchy(self):
        """Get the clearance hierarchy"""
        return self.registry.codes()
