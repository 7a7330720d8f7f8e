"""
Tests for the access policy (pure decision logic, no database).

Covers:
- USER self-service: allowed fields, role changes, empty proposals
- MANAGER: edits of USER accounts, self-edits, privileged accounts, promotions
- ADMIN: unrestricted profile edits, role changes, self-lockout protection
- Removal rules
- Determinism of decisions
"""

from types import SimpleNamespace
import itertools

import pytest

from domain.enums import ErrorKind, Role
from domain.schemas import Principal, UserUpdate
from services.access_policy import (
    Relation,
    evaluate_removal,
    evaluate_update,
    relation_of,
    requested_fields,
)


def account(user_name, role=Role.USER, name=None, calorie_target=2000):
    return SimpleNamespace(
        user_name=user_name,
        role=role,
        name=name or user_name.title(),
        calorie_target=calorie_target,
    )


def actor(user_name, role):
    return Principal(user_name=user_name, role=role)


def proposal(user_name, **fields):
    return UserUpdate(user_name=user_name, **fields)


# =============================================================================
# INPUT NORMALIZATION
# =============================================================================


def test_non_positive_calorie_target_counts_as_absent():
    assert "calorie_target" not in requested_fields(proposal("x", calorie_target=0))
    assert "calorie_target" not in requested_fields(proposal("x", calorie_target=-50))
    assert requested_fields(proposal("x", calorie_target=1500)) == {"calorie_target": 1500}


def test_empty_strings_count_as_absent():
    assert requested_fields(proposal("x", name="", password="")) == {}


def test_relation_of():
    manager = actor("maria", Role.MANAGER)
    assert relation_of(manager, account("maria", Role.MANAGER)) == Relation.SELF
    assert relation_of(manager, account("alice")) == Relation.USER_ACCOUNT
    assert relation_of(manager, account("adam", Role.ADMIN)) == Relation.PRIVILEGED_ACCOUNT


# =============================================================================
# USER
# =============================================================================


def test_user_updates_own_profile_fields():
    alice = account("alice")
    decision = evaluate_update(
        actor("alice", Role.USER),
        alice,
        proposal("alice", password="n3w-secret", calorie_target=1700, name="Alice B"),
    )

    assert decision.allowed
    assert decision.changes == {
        "password": "n3w-secret",
        "calorie_target": 1700,
        "name": "Alice B",
    }


def test_user_without_any_profile_field_is_bad_request():
    decision = evaluate_update(actor("alice", Role.USER), account("alice"), proposal("alice"))

    assert not decision.allowed
    assert decision.error == ErrorKind.BAD_REQUEST


def test_user_only_non_positive_calorie_target_is_bad_request():
    decision = evaluate_update(
        actor("alice", Role.USER), account("alice"), proposal("alice", calorie_target=0)
    )

    assert decision.error == ErrorKind.BAD_REQUEST


def test_user_cannot_change_own_role():
    decision = evaluate_update(
        actor("alice", Role.USER),
        account("alice"),
        proposal("alice", name="Alice", role=Role.ADMIN),
    )

    assert not decision.allowed
    assert decision.error == ErrorKind.UNAUTHORIZED
    assert decision.denied_field == "role"


def test_user_echoing_current_role_is_not_a_role_change():
    decision = evaluate_update(
        actor("alice", Role.USER),
        account("alice"),
        proposal("alice", name="Alice B", role=Role.USER),
    )

    assert decision.allowed
    assert "role" not in decision.changes


def test_user_cannot_edit_someone_else():
    decision = evaluate_update(
        actor("alice", Role.USER), account("bob"), proposal("bob", name="Robert")
    )

    assert decision.error == ErrorKind.UNAUTHORIZED


# =============================================================================
# MANAGER
# =============================================================================


def test_manager_edits_user_account():
    decision = evaluate_update(
        actor("maria", Role.MANAGER),
        account("alice", calorie_target=2000),
        proposal("alice", calorie_target=2200, password="reset-me", name="Alice C"),
    )

    assert decision.allowed
    assert set(decision.changes) == {"calorie_target", "password", "name"}


def test_manager_edits_self():
    decision = evaluate_update(
        actor("maria", Role.MANAGER),
        account("maria", Role.MANAGER),
        proposal("maria", name="Maria K", calorie_target=2100),
    )

    assert decision.allowed


@pytest.mark.parametrize("target_role", [Role.MANAGER, Role.ADMIN])
@pytest.mark.parametrize(
    "fields",
    [{"password": "other-secret"}, {"name": "Renamed"}, {"calorie_target": 1234}],
)
def test_manager_cannot_edit_other_privileged_accounts(target_role, fields):
    decision = evaluate_update(
        actor("maria", Role.MANAGER),
        account("otto", target_role),
        proposal("otto", **fields),
    )

    assert not decision.allowed
    assert decision.error == ErrorKind.UNAUTHORIZED


def test_manager_promotes_user_to_manager():
    decision = evaluate_update(
        actor("maria", Role.MANAGER), account("bob"), proposal("bob", role=Role.MANAGER)
    )

    assert decision.allowed
    assert decision.changes == {"role": Role.MANAGER}


def test_manager_promotion_applies_only_once():
    promoted = account("bob", Role.MANAGER)
    decision = evaluate_update(
        actor("maria", Role.MANAGER), promoted, proposal("bob", role=Role.MANAGER)
    )

    # Already a manager: nothing would change
    assert decision.error == ErrorKind.BAD_REQUEST


def test_manager_cannot_promote_user_to_admin():
    decision = evaluate_update(
        actor("maria", Role.MANAGER), account("bob"), proposal("bob", role=Role.ADMIN)
    )

    assert decision.error == ErrorKind.UNAUTHORIZED
    assert decision.denied_field == "role"


@pytest.mark.parametrize(
    "target_role,new_role",
    [(Role.MANAGER, Role.USER), (Role.ADMIN, Role.MANAGER), (Role.ADMIN, Role.USER)],
)
def test_manager_cannot_demote(target_role, new_role):
    decision = evaluate_update(
        actor("maria", Role.MANAGER), account("otto", target_role), proposal("otto", role=new_role)
    )

    assert decision.error == ErrorKind.UNAUTHORIZED


def test_manager_cannot_change_own_role():
    decision = evaluate_update(
        actor("maria", Role.MANAGER),
        account("maria", Role.MANAGER),
        proposal("maria", role=Role.ADMIN),
    )

    assert decision.error == ErrorKind.UNAUTHORIZED


def test_manager_nothing_changed_is_bad_request():
    alice = account("alice", name="Alice", calorie_target=2000)
    decision = evaluate_update(
        actor("maria", Role.MANAGER),
        alice,
        proposal("alice", name="Alice", calorie_target=2000, role=Role.USER),
    )

    assert decision.error == ErrorKind.BAD_REQUEST


def test_manager_violation_rejects_whole_request():
    decision = evaluate_update(
        actor("maria", Role.MANAGER),
        account("bob"),
        proposal("bob", name="Bobby", role=Role.ADMIN),
    )

    assert not decision.allowed
    assert decision.changes == {}


# =============================================================================
# ADMIN
# =============================================================================


@pytest.mark.parametrize("target_role", [Role.USER, Role.MANAGER, Role.ADMIN])
def test_admin_edits_any_profile(target_role):
    decision = evaluate_update(
        actor("root", Role.ADMIN),
        account("someone", target_role),
        proposal("someone", password="pw-123456", name="Someone Else", calorie_target=2500),
    )

    assert decision.allowed
    assert set(decision.changes) == {"password", "name", "calorie_target"}


@pytest.mark.parametrize(
    "target_role,new_role",
    [
        (Role.USER, Role.ADMIN),
        (Role.USER, Role.MANAGER),
        (Role.MANAGER, Role.USER),
        (Role.ADMIN, Role.USER),
        (Role.ADMIN, Role.MANAGER),
    ],
)
def test_admin_changes_other_roles(target_role, new_role):
    decision = evaluate_update(
        actor("root", Role.ADMIN), account("someone", target_role), proposal("someone", role=new_role)
    )

    assert decision.allowed
    assert decision.changes == {"role": new_role}


def test_admin_cannot_change_own_role():
    decision = evaluate_update(
        actor("root", Role.ADMIN), account("root", Role.ADMIN), proposal("root", role=Role.USER)
    )

    assert decision.error == ErrorKind.UNAUTHORIZED
    assert decision.denied_field == "role"


def test_admin_cannot_assign_anonymous():
    decision = evaluate_update(
        actor("root", Role.ADMIN), account("bob"), proposal("bob", role=Role.ANONYMOUS)
    )

    assert decision.error == ErrorKind.UNAUTHORIZED


def test_admin_ignores_non_positive_calorie_target():
    decision = evaluate_update(
        actor("root", Role.ADMIN), account("bob"), proposal("bob", calorie_target=-1, name="Bobby")
    )

    assert decision.allowed
    assert decision.changes == {"name": "Bobby"}


def test_admin_nothing_changed_is_bad_request():
    decision = evaluate_update(
        actor("root", Role.ADMIN), account("bob"), proposal("bob", calorie_target=0)
    )

    assert decision.error == ErrorKind.BAD_REQUEST


def test_anonymous_cannot_update():
    decision = evaluate_update(
        Principal.anonymous(), account("bob"), proposal("bob", name="Bobby")
    )

    assert decision.error == ErrorKind.UNAUTHORIZED


# =============================================================================
# REMOVAL
# =============================================================================


@pytest.mark.parametrize(
    "actor_role,target_role,is_self,allowed",
    [
        (Role.MANAGER, Role.USER, False, True),
        (Role.MANAGER, Role.MANAGER, False, False),
        (Role.MANAGER, Role.ADMIN, False, False),
        (Role.MANAGER, Role.MANAGER, True, False),
        (Role.ADMIN, Role.USER, False, True),
        (Role.ADMIN, Role.MANAGER, False, True),
        (Role.ADMIN, Role.ADMIN, False, True),
        (Role.ADMIN, Role.ADMIN, True, False),
        (Role.USER, Role.USER, False, False),
        (Role.USER, Role.USER, True, False),
    ],
)
def test_removal_rules(actor_role, target_role, is_self, allowed):
    target = account("me" if is_self else "them", target_role)
    decision = evaluate_removal(actor("me", actor_role), target)

    assert decision.allowed is allowed
    if not allowed:
        assert decision.error == ErrorKind.UNAUTHORIZED


# =============================================================================
# DETERMINISM
# =============================================================================


def test_decisions_are_deterministic():
    fields = [
        {"password": "pw-abcdef"},
        {"name": "New Name"},
        {"calorie_target": 1900},
        {"role": Role.MANAGER},
    ]
    roles = [Role.USER, Role.MANAGER, Role.ADMIN]

    for actor_role, target_role, is_self, combo in itertools.product(
        roles, roles, [True, False], range(1, len(fields) + 1)
    ):
        for subset in itertools.combinations(fields, combo):
            merged = {k: v for part in subset for k, v in part.items()}
            target = account("me" if is_self else "them", target_role)
            first = evaluate_update(actor("me", actor_role), target, proposal(target.user_name, **merged))
            second = evaluate_update(actor("me", actor_role), target, proposal(target.user_name, **merged))
            assert first == second
