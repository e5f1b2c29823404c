from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Union


class Action(Enum):
    GRANT = "grant"
    REVOKE = "revoke"


class DenyReason(Enum):
    NO_MANAGE_PERMISSION = "no_manage_permission"
    ROLE_ABOVE_BOT = "role_above_bot"


@dataclass(frozen=True)
class RoleRef:
    """A role as the workspace reports it.

    The clearance code is never stored here; it is read from the name
    every time so a renamed role is picked up straight away.
    """
    id: str
    name: str
    position: int = 0


@dataclass(frozen=True)
class ExecutorContext:
    held_roles: FrozenSet[RoleRef] = field(default_factory=frozenset)
    has_manage_role_permission: bool = False


@dataclass(frozen=True)
class Invocation:
    action: Action
    target_user: str
    target_role: RoleRef
    executor: ExecutorContext
    bot_top_role_position: int


@dataclass(frozen=True)
class Approved:
    executor_rank: str
    target_descriptor: str


@dataclass(frozen=True)
class Denied:
    reason: DenyReason


Decision = Union[Approved, Denied]


@dataclass(frozen=True)
class Frame:
    content: str
    pause: float = 0.0


@dataclass(frozen=True)
class Confirmation:
    text: str
    color: Optional[str] = None
