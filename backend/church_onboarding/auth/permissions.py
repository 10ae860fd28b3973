"""Granular permissions, passed around as an explicit capability.

Design:
  - Each role has a set of DEFAULT permissions (defined here).
  - Per-user overrides ({perm: True/False}) are applied on top.
  - The dashboard's auth service usually embeds the effective set in
    the JWT. Tokens that carry only a `role` (and optional
    `permission_overrides`) are resolved here.
  - Route handlers receive a `PermissionSet` through a dependency instead
    of consulting ambient auth state, and the wizard core never sees one.

Permission naming: `<resource>.<action>`
"""

from __future__ import annotations

from dataclasses import dataclass, field


# ── All known permissions ───────────────────────────────────

ALL_PERMISSIONS: set[str] = {
    "organizations.read",
    "organizations.create",
    "organizations.delete",

    "subscriptions.read",
    "subscriptions.manage",
}


# ── Role → default permissions ──────────────────────────────

ROLE_DEFAULTS: dict[str, set[str]] = {
    "super_admin": ALL_PERMISSIONS.copy(),

    "subscription_manager": {
        "organizations.read",
        "organizations.create",
        "subscriptions.read",
        "subscriptions.manage",
    },

    "viewer": {
        "organizations.read",
        "subscriptions.read",
    },
}


# ── Resolution ──────────────────────────────────────────────

def resolve_permissions(
    role: str,
    custom_overrides: dict[str, bool] | None = None,
) -> list[str]:
    """Compute effective permissions for a user.

    1. Start with the role's defaults.
    2. Apply custom_overrides: {perm: True} adds, {perm: False} removes.
    3. Return a sorted list (for stable JWT claims).
    """
    base = ROLE_DEFAULTS.get(role, set()).copy()

    if custom_overrides:
        for perm, granted in custom_overrides.items():
            if perm not in ALL_PERMISSIONS:
                continue  # ignore unknown permissions
            if granted:
                base.add(perm)
            else:
                base.discard(perm)

    return sorted(base)


@dataclass(frozen=True)
class PermissionSet:
    """The caller's effective permissions."""

    subject: str | None = None
    permissions: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_claims(cls, claims: dict) -> PermissionSet:
        """Use the token's `permissions` claim; tokens without one get their
        role's defaults."""
        granted = claims.get("permissions")
        if granted is None:
            granted = resolve_permissions(
                claims.get("role") or "", claims.get("permission_overrides")
            )
        return cls(subject=claims.get("sub"), permissions=frozenset(granted))

    def has_permission(self, key: str) -> bool:
        return key in self.permissions

    def missing(self, *keys: str) -> list[str]:
        return [k for k in keys if not self.has_permission(k)]
