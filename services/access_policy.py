"""
Access policy for user updates and removals.

Pure decision logic: given the acting principal, the target account as it is
currently stored and a sparse set of proposed changes, decide which fields may
be applied. Nothing here touches the database or hashes passwords.

Permissions are declared in a table keyed by (actor role, relation of the
target to the actor, field):

    actor     relation             password/calorie_target/name   role
    USER      SELF                 allow                          deny
    MANAGER   SELF                 allow                          deny
    MANAGER   USER_ACCOUNT         allow                          promotion
    ADMIN     SELF                 allow                          deny
    ADMIN     USER_ACCOUNT         allow                          allow
    ADMIN     PRIVILEGED_ACCOUNT   allow                          allow

Anything not listed is denied. ``promotion`` only admits USER -> MANAGER.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import enum

from domain.enums import ErrorKind, Role


class Relation(str, enum.Enum):
    """How the target account relates to the acting principal"""

    SELF = "self"
    USER_ACCOUNT = "user_account"
    PRIVILEGED_ACCOUNT = "privileged_account"


class Rule(str, enum.Enum):
    ALLOW = "allow"
    DENY = "deny"
    PROMOTION = "promotion"


PROFILE_FIELDS = ("password", "calorie_target", "name")
# Evaluation order; the first denied field rejects the whole request.
FIELD_ORDER = PROFILE_FIELDS + ("role",)

ALLOWED_PROMOTIONS = frozenset({(Role.USER, Role.MANAGER)})


def _grant(actor: Role, relation: Relation, role_rule: Rule) -> Dict[tuple, Rule]:
    rules = {(actor, relation, name): Rule.ALLOW for name in PROFILE_FIELDS}
    rules[(actor, relation, "role")] = role_rule
    return rules


UPDATE_PERMISSIONS: Dict[tuple, Rule] = {
    **_grant(Role.USER, Relation.SELF, Rule.DENY),
    **_grant(Role.MANAGER, Relation.SELF, Rule.DENY),
    **_grant(Role.MANAGER, Relation.USER_ACCOUNT, Rule.PROMOTION),
    **_grant(Role.ADMIN, Relation.SELF, Rule.DENY),
    **_grant(Role.ADMIN, Relation.USER_ACCOUNT, Rule.ALLOW),
    **_grant(Role.ADMIN, Relation.PRIVILEGED_ACCOUNT, Rule.ALLOW),
}

REMOVAL_PERMISSIONS: Dict[tuple, Rule] = {
    (Role.MANAGER, Relation.USER_ACCOUNT): Rule.ALLOW,
    (Role.ADMIN, Relation.USER_ACCOUNT): Rule.ALLOW,
    (Role.ADMIN, Relation.PRIVILEGED_ACCOUNT): Rule.ALLOW,
}


@dataclass(frozen=True)
class PolicyDecision:
    """Outcome of a policy evaluation.

    ``changes`` maps field names to the values to store; ``password`` holds the
    new plaintext and must be hashed by the caller before persisting.
    """

    allowed: bool
    changes: Dict[str, Any] = field(default_factory=dict)
    error: Optional[ErrorKind] = None
    denied_field: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def permit(cls, changes: Optional[Dict[str, Any]] = None) -> "PolicyDecision":
        return cls(allowed=True, changes=dict(changes or {}))

    @classmethod
    def deny(
        cls, error: ErrorKind, denied_field: Optional[str] = None, reason: Optional[str] = None
    ) -> "PolicyDecision":
        return cls(allowed=False, error=error, denied_field=denied_field, reason=reason)


def relation_of(actor, target) -> Relation:
    """Classify ``target`` relative to ``actor``; computed once per decision."""
    if target.user_name == actor.user_name:
        return Relation.SELF
    if target.role == Role.USER:
        return Relation.USER_ACCOUNT
    return Relation.PRIVILEGED_ACCOUNT


def requested_fields(proposal) -> Dict[str, Any]:
    """Recognized fields present in ``proposal``.

    Empty strings count as absent, and so does a calorie target that is not
    positive.
    """
    requested: Dict[str, Any] = {}
    if proposal.password:
        requested["password"] = proposal.password
    if proposal.calorie_target is not None and proposal.calorie_target > 0:
        requested["calorie_target"] = proposal.calorie_target
    if proposal.name:
        requested["name"] = proposal.name
    if proposal.role is not None:
        requested["role"] = Role(proposal.role)
    return requested


def changed_fields(target, requested: Dict[str, Any]) -> Dict[str, Any]:
    """Subset of ``requested`` that differs from the stored account.

    A supplied password is always a change.
    """
    return {
        name: value
        for name, value in requested.items()
        if name == "password" or getattr(target, name) != value
    }


def evaluate_update(actor, target, proposal) -> PolicyDecision:
    """Decide whether ``actor`` may apply ``proposal`` to ``target``."""
    requested = requested_fields(proposal)
    changes = changed_fields(target, requested)

    if actor.role == Role.USER:
        if not any(name in requested for name in PROFILE_FIELDS):
            return PolicyDecision.deny(
                ErrorKind.BAD_REQUEST, reason="no updatable field supplied"
            )
    elif actor.role in (Role.MANAGER, Role.ADMIN):
        if not changes:
            return PolicyDecision.deny(
                ErrorKind.BAD_REQUEST, reason="nothing would change"
            )
    else:
        return PolicyDecision.deny(
            ErrorKind.UNAUTHORIZED, reason=f"role {actor.role.value} cannot update users"
        )

    relation = relation_of(actor, target)
    for name in FIELD_ORDER:
        if name not in changes:
            continue
        rule = UPDATE_PERMISSIONS.get((actor.role, relation, name), Rule.DENY)
        if not _rule_admits(rule, name, target, changes[name]):
            return PolicyDecision.deny(
                ErrorKind.UNAUTHORIZED,
                denied_field=name,
                reason=f"{actor.role.value} may not change {name} of {relation.value}",
            )

    return PolicyDecision.permit(changes)


def _rule_admits(rule: Rule, name: str, target, value) -> bool:
    if rule == Rule.DENY:
        return False
    if name == "role" and value not in Role.assignable():
        return False
    if rule == Rule.PROMOTION:
        return (target.role, value) in ALLOWED_PROMOTIONS
    return True


def evaluate_removal(actor, target) -> PolicyDecision:
    """Managers may remove USER accounts; admins may remove anyone but themselves."""
    relation = relation_of(actor, target)
    rule = REMOVAL_PERMISSIONS.get((actor.role, relation), Rule.DENY)
    if rule != Rule.ALLOW:
        return PolicyDecision.deny(
            ErrorKind.UNAUTHORIZED,
            reason=f"{actor.role.value} may not remove {relation.value}",
        )
    return PolicyDecision.permit()
