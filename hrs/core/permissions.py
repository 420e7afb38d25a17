"""Permission hierarchy, path resolution and authorization checks.

The hierarchy is a fixed tree. Holding any permission on the path from the
root down to a requested permission authorizes it, so "Do Everything"
authorizes everything and "Manage Roles" authorizes every role action,
while "Read Roles" does not authorize "Update Roles".
"""

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Tuple

REQUIRES_KEY = "requires"


class Permission:
    """Permission labels known to the application."""

    DO_EVERYTHING = "Do Everything"

    MANAGE_DEPARTMENTS = "Manage Departments"
    CREATE_DEPARTMENTS = "Create Departments"
    READ_DEPARTMENTS = "Read Departments"
    UPDATE_DEPARTMENTS = "Update Departments"
    DELETE_DEPARTMENTS = "Delete Departments"

    MANAGE_USERS = "Manage Users"
    CREATE_USERS = "Create Users"
    READ_USERS = "Read Users"
    UPDATE_USERS = "Update Users"
    DELETE_USERS = "Delete Users"

    MANAGE_ROLES = "Manage Roles"
    CREATE_ROLES = "Create Roles"
    READ_ROLES = "Read Roles"
    UPDATE_ROLES = "Update Roles"
    DELETE_ROLES = "Delete Roles"

    READ_REPORTS = "Read Reports"


P = Permission

DEFINITION: Mapping[str, Any] = {
    P.DO_EVERYTHING: {
        P.MANAGE_DEPARTMENTS: {
            P.READ_DEPARTMENTS: True,
            P.CREATE_DEPARTMENTS: {REQUIRES_KEY: [P.READ_DEPARTMENTS]},
            P.UPDATE_DEPARTMENTS: {REQUIRES_KEY: [P.READ_DEPARTMENTS]},
            P.DELETE_DEPARTMENTS: {REQUIRES_KEY: [P.READ_DEPARTMENTS]},
        },
        P.MANAGE_USERS: {
            P.READ_USERS: True,
            P.CREATE_USERS: {REQUIRES_KEY: [P.READ_USERS]},
            P.UPDATE_USERS: {REQUIRES_KEY: [P.READ_USERS]},
            P.DELETE_USERS: {REQUIRES_KEY: [P.READ_USERS]},
        },
        P.MANAGE_ROLES: {
            P.READ_ROLES: True,
            P.CREATE_ROLES: {REQUIRES_KEY: [P.READ_ROLES]},
            P.UPDATE_ROLES: {REQUIRES_KEY: [P.READ_ROLES]},
            P.DELETE_ROLES: {REQUIRES_KEY: [P.READ_ROLES]},
        },
        P.READ_REPORTS: True,
    }
}


@dataclass(frozen=True)
class PermissionNode:
    """A single permission in the tree."""

    label: str
    children: Tuple["PermissionNode", ...] = ()
    requires: Tuple[str, ...] = ()


class PermissionHierarchy:
    """Immutable permission tree with path lookups.

    Labels are unique across the whole tree; construction fails otherwise,
    as it does when a ``requires`` entry names a label not in the tree.
    """

    def __init__(self, roots: Iterable[PermissionNode]):
        self._roots: Tuple[PermissionNode, ...] = tuple(roots)
        paths: Dict[str, Tuple[str, ...]] = {}
        nodes: Dict[str, PermissionNode] = {}

        for node, path in self._walk():
            if node.label in paths:
                raise ValueError(f"Duplicate permission label '{node.label}'")
            paths[node.label] = path
            nodes[node.label] = node

        for node in nodes.values():
            for required in node.requires:
                if required not in nodes:
                    raise ValueError(
                        f"Permission '{node.label}' requires unknown permission '{required}'"
                    )

        self._paths = paths
        self._nodes = nodes

    @classmethod
    def from_mapping(cls, definition: Mapping[str, Any]) -> "PermissionHierarchy":
        """Build a hierarchy from a nested mapping.

        A value of ``True`` marks a leaf. A mapping value holds child labels
        and optionally a ``requires`` list of prerequisite labels.
        """
        return cls(_parse_nodes(definition))

    @property
    def roots(self) -> Tuple[PermissionNode, ...]:
        return self._roots

    def _walk(self) -> Iterator[Tuple[PermissionNode, Tuple[str, ...]]]:
        # Depth-first, root first.
        stack: List[Tuple[PermissionNode, Tuple[str, ...]]] = [
            (root, (root.label,)) for root in reversed(self._roots)
        ]
        while stack:
            node, path = stack.pop()
            yield node, path
            for child in reversed(node.children):
                stack.append((child, path + (child.label,)))

    def path(self, permission: str) -> Tuple[str, ...]:
        """Ancestor chain from the root to ``permission`` inclusive, or ``()``."""
        return self._paths.get(permission, ())

    def all_permissions(self) -> FrozenSet[str]:
        return frozenset(self._paths)

    def requirements(self, permission: str) -> Tuple[str, ...]:
        node = self._nodes.get(permission)
        return node.requires if node else ()

    def can(self, granted: Iterable[str], requested: str) -> bool:
        """True when any permission on the path to ``requested`` is granted."""
        granted = set(granted or ())
        return any(label in granted for label in self.path(requested))

    def as_dict(self) -> List[Dict[str, Any]]:
        """Serializable view of the tree."""
        return [_node_to_dict(root) for root in self._roots]

    def __contains__(self, permission: object) -> bool:
        return permission in self._paths


def _parse_nodes(definition: Mapping[str, Any]) -> Tuple[PermissionNode, ...]:
    nodes = []
    for label, value in definition.items():
        if label == REQUIRES_KEY:
            continue
        if value is True:
            nodes.append(PermissionNode(label=label))
        elif isinstance(value, Mapping):
            nodes.append(PermissionNode(
                label=label,
                children=_parse_nodes(value),
                requires=tuple(value.get(REQUIRES_KEY, ())),
            ))
        else:
            raise ValueError(f"Invalid definition for permission '{label}': {value!r}")
    return tuple(nodes)


def _node_to_dict(node: PermissionNode) -> Dict[str, Any]:
    return {
        "name": node.label,
        "requires": list(node.requires),
        "children": [_node_to_dict(child) for child in node.children],
    }


HIERARCHY = PermissionHierarchy.from_mapping(DEFINITION)


def get_permission_path(
    permission: str, hierarchy: PermissionHierarchy = HIERARCHY
) -> Tuple[str, ...]:
    return hierarchy.path(permission)


def get_all_permissions(hierarchy: PermissionHierarchy = HIERARCHY) -> FrozenSet[str]:
    return hierarchy.all_permissions()


def can(
    granted: Iterable[str], requested: str, hierarchy: PermissionHierarchy = HIERARCHY
) -> bool:
    return hierarchy.can(granted, requested)


def effective_permissions(
    override: Optional[Iterable[str]], role_permissions: Optional[Iterable[str]]
) -> FrozenSet[str]:
    """A non-empty override list replaces the role's permissions entirely."""
    override = list(override or ())
    if override:
        return frozenset(override)
    return frozenset(role_permissions or ())


def unknown_permissions(
    permissions: Iterable[str], hierarchy: PermissionHierarchy = HIERARCHY
) -> List[str]:
    return [p for p in permissions if p not in hierarchy]
