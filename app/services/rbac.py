"""Role-based access control: one decision table keyed by (role, HTTP verb).

Each role maps to a policy variant: either an explicit verb allowlist or the
wildcard. super_admin is the only wildcard entry. Routes may additionally
declare a role set; a role outside that set is denied unless its policy is the
wildcard. A role missing from the table is always denied.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

HTTP_VERBS: frozenset[str] = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})

# Verbs that never change state; HEAD/OPTIONS are treated like GET.
READ_ALIASES = {"HEAD": "GET", "OPTIONS": "GET"}


@dataclass(frozen=True)
class VerbAllowlist:
    """Policy allowing exactly the listed verbs."""

    verbs: frozenset[str]

    def allows(self, verb: str) -> bool:
        return verb in self.verbs


@dataclass(frozen=True)
class Wildcard:
    """Policy allowing every verb and satisfying every route role set."""

    def allows(self, verb: str) -> bool:
        return True


RolePolicy = VerbAllowlist | Wildcard


@dataclass(frozen=True)
class PolicyDecision:
    allowed: bool
    reason: str | None = None


ALLOW = PolicyDecision(allowed=True)

DEFAULT_ROLE_POLICIES: Mapping[str, RolePolicy] = {
    "member": VerbAllowlist(frozenset({"GET"})),
    "staff": VerbAllowlist(frozenset({"GET", "POST", "PUT", "PATCH"})),
    "admin": VerbAllowlist(HTTP_VERBS),
    "finance": VerbAllowlist(frozenset({"GET", "POST"})),
    "super_admin": Wildcard(),
}


class RBACPolicyEngine:
    """Evaluates (role, verb) against a static, immutable policy table."""

    def __init__(self, policies: Mapping[str, RolePolicy]) -> None:
        for role, policy in policies.items():
            if isinstance(policy, VerbAllowlist):
                unknown = policy.verbs - HTTP_VERBS
                if unknown:
                    raise ValueError(f"Role {role!r} lists unknown verbs: {sorted(unknown)}")
            elif not isinstance(policy, Wildcard):
                raise TypeError(f"Role {role!r} has unsupported policy {policy!r}")
        self._policies = dict(policies)

    def policy_for(self, role: str) -> RolePolicy | None:
        return self._policies.get(role)

    def is_wildcard(self, role: str) -> bool:
        return isinstance(self._policies.get(role), Wildcard)

    def authorize(
        self,
        role: str,
        verb: str,
        allowed_roles: Iterable[str] | None = None,
    ) -> PolicyDecision:
        """Return allow, or deny with a client-facing reason."""
        policy = self._policies.get(role)
        if policy is None:
            return PolicyDecision(False, f"Role '{role}' not recognized")
        if isinstance(policy, Wildcard):
            return ALLOW
        if allowed_roles is not None and role not in allowed_roles:
            return PolicyDecision(False, "Forbidden: insufficient permissions")
        verb = verb.upper()
        verb = READ_ALIASES.get(verb, verb)
        if not policy.allows(verb):
            return PolicyDecision(False, f"Role '{role}' not allowed to {verb}")
        return ALLOW


policy_engine = RBACPolicyEngine(DEFAULT_ROLE_POLICIES)
