"""
Authorization policy — two independent layers.

* Route layer: a static, ordered rule table keyed on HTTP method + path,
  evaluated by the gate middleware before any handler runs.
* Resource layer: ownership rules evaluated inside business operations
  with the caller and the loaded target record.

Both layers return a :class:`Decision`; turning a decision into an HTTP
response is the caller's job.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from swms.core.authn import Identity
from swms.core.enums import Role


class Decision(str, Enum):
    ALLOW = "allow"
    FORBIDDEN = "forbidden"
    UNAUTHENTICATED = "unauthenticated"


# ── Route layer ─────────────────────────────────────────────────────
PUBLIC = "public"
AUTHENTICATED = "authenticated"

_STAFF = frozenset({Role.ADMIN, Role.MANAGER})
_EVERYONE = frozenset(Role)


@dataclass(frozen=True)
class RouteRule:
    pattern: str
    access: str | frozenset[Role]
    methods: frozenset[str] | None = None  # None matches every method

    def matches(self, method: str, path: str) -> bool:
        if self.methods is not None and method.upper() not in self.methods:
            return False
        return _path_matches(self.pattern, path)


def _path_matches(pattern: str, path: str) -> bool:
    if pattern.endswith("/**"):
        base = pattern[:-3]
        return path == base or path.startswith(base + "/")
    return path == pattern


def _methods(*names: str) -> frozenset[str]:
    return frozenset(names)


# First match wins.
ROUTE_RULES: tuple[RouteRule, ...] = (
    RouteRule("/auth/**", PUBLIC),
    RouteRule("/api/users/**", frozenset({Role.ADMIN}), _methods("GET", "DELETE")),
    RouteRule("/api/users/**", _STAFF, _methods("PUT")),
    RouteRule("/users/me", AUTHENTICATED),
    RouteRule("/api/tasks/**", _STAFF, _methods("POST")),
    RouteRule("/api/tasks/**", _EVERYONE, _methods("PUT")),
    RouteRule("/api/tasks/**", _STAFF, _methods("DELETE")),
    RouteRule("/api/tasks/**", AUTHENTICATED, _methods("GET")),
    RouteRule("/api/attendance/**", AUTHENTICATED),
)

FALLBACK_RULE = RouteRule("/**", AUTHENTICATED)


def _normalise_path(path: str) -> str:
    if len(path) > 1 and path.endswith("/"):
        path = path.rstrip("/") or "/"
    return path


def match_route(method: str, path: str, rules: Iterable[RouteRule] = ROUTE_RULES) -> RouteRule:
    path = _normalise_path(path)
    for rule in rules:
        if rule.matches(method, path):
            return rule
    return FALLBACK_RULE


def authorize_route(
    method: str,
    path: str,
    identity: Identity | None,
    rules: Iterable[RouteRule] = ROUTE_RULES,
) -> Decision:
    rule = match_route(method, path, rules)
    if rule.access == PUBLIC:
        return Decision.ALLOW
    if identity is None:
        return Decision.UNAUTHENTICATED
    if rule.access == AUTHENTICATED or identity.role in rule.access:
        return Decision.ALLOW
    return Decision.FORBIDDEN


# ── Resource layer ──────────────────────────────────────────────────
class ResourceAction(str, Enum):
    ATTENDANCE_CREATE = "attendance:create"
    ATTENDANCE_READ = "attendance:read"
    ATTENDANCE_UPDATE = "attendance:update"
    ATTENDANCE_DELETE = "attendance:delete"
    ATTENDANCE_REPORT = "attendance:report"
    TASK_READ = "task:read"
    TASK_UPDATE = "task:update"
    TASK_DELETE = "task:delete"


@dataclass(frozen=True)
class Caller:
    user_id: int
    role: Role

    @property
    def is_staff(self) -> bool:
        return self.role in _STAFF


@dataclass(frozen=True)
class ResourceRef:
    """The parts of a target record the ownership rules look at.

    ``owner_id`` is the attendance record's user or the task's assignee.
    """

    owner_id: int | None = None
    creator_id: int | None = None


EMPLOYEE_TASK_FIELDS = frozenset({"status"})

_OWNER_SCOPED = frozenset(
    {
        ResourceAction.ATTENDANCE_CREATE,
        ResourceAction.ATTENDANCE_READ,
        ResourceAction.ATTENDANCE_UPDATE,
        ResourceAction.TASK_READ,
    }
)
_STAFF_ONLY = frozenset({ResourceAction.ATTENDANCE_DELETE, ResourceAction.ATTENDANCE_REPORT})


def _decide(allowed: bool) -> Decision:
    return Decision.ALLOW if allowed else Decision.FORBIDDEN


def authorize_resource(
    action: ResourceAction,
    caller: Caller,
    target: ResourceRef | None = None,
    changes: Iterable[str] = (),
) -> Decision:
    """Decide whether *caller* may perform *action* on *target*.

    *changes* names the fields a ``TASK_UPDATE`` would modify.
    """
    owns = target is not None and target.owner_id == caller.user_id

    if action in _STAFF_ONLY:
        return _decide(caller.is_staff)

    if action in _OWNER_SCOPED:
        return _decide(caller.is_staff or owns)

    if action is ResourceAction.TASK_UPDATE:
        if caller.is_staff:
            return Decision.ALLOW
        return _decide(owns and set(changes) <= EMPLOYEE_TASK_FIELDS)

    if action is ResourceAction.TASK_DELETE:
        is_creator = target is not None and target.creator_id == caller.user_id
        return _decide(caller.role is Role.ADMIN or is_creator)

    return Decision.FORBIDDEN


def list_scope(caller: Caller) -> int | None:
    """Owner id a list query must be restricted to, or ``None`` for all rows."""
    return None if caller.is_staff else caller.user_id
