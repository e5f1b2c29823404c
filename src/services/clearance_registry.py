from types import MappingProxyType

from src.config.clearance import CLEARANCE_LEVELS, CLEARANCE_ORDER


class ClearanceRegistry:
    """Read-only lookup of clearance codes, their labels and their rank.

    Rank 0 is the most senior code. Unknown codes give None rather than
    raising, so callers can treat any free-form token as a candidate code.
    """

    def __init__(self, levels, order):
        if set(levels) != set(order) or len(order) != len(set(order)):
            raise ValueError("Clearance order must list every level exactly once")
        self._order = tuple(order)
        self._labels = MappingProxyType(dict(levels))
        self._ranks = MappingProxyType({code: index for index, code in enumerate(self._order)})

    def describe(self, code):
        """Get the label for a code"""
        return self._labels.get(code)

    def rank(self, code):
        """Get the rank of a code (lower is more senior)"""
        return self._ranks.get(code)

    def is_known(self, code):
        return code in self._ranks

    def codes(self):
        """Get the codes in hierarchy order"""
        return self._order


DEFAULT_REGISTRY = ClearanceRegistry(CLEARANCE_LEVELS, CLEARANCE_ORDER)
