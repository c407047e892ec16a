import pytest

from angra.core.roles import Role, coerce_role, is_admin, is_admin_or_operator, parse_role
from angra.schemas.session import Principal, Profile, SessionSnapshot, SessionState


@pytest.mark.parametrize("role, admin, staff", [
    (Role.ADMIN, True, True),
    (Role.OPERATOR, False, True),
    (Role.CLIENT, False, False),
    (None, False, False),
])
def test_privilege_flags(role, admin, staff):
    assert is_admin(role) is admin
    assert is_admin_or_operator(role) is staff


@pytest.mark.parametrize("value", [None, "", "superuser", 42, "ADMINISTRATOR"])
def test_unknown_stored_values_become_client(value):
    assert coerce_role(value) is Role.CLIENT


def test_coerce_role_normalises_case_and_spaces():
    assert coerce_role(" Operator ") is Role.OPERATOR


def test_parse_role_is_strict():
    assert parse_role("admin") is Role.ADMIN
    assert parse_role("root") is None
    assert parse_role(None) is None


def test_missing_profile_resolves_to_client():
    principal = Principal(uid="u1", email="u1@example.com")
    snap = SessionSnapshot.authenticated(principal, None, sequence=1)
    assert snap.state is SessionState.AUTHENTICATED
    assert snap.role is Role.CLIENT
    assert snap.is_authenticated
    assert not snap.is_admin
    assert not snap.is_admin_or_operator


def test_operator_profile_flags():
    principal = Principal(uid="u1")
    snap = SessionSnapshot.authenticated(principal, Profile(uid="u1", role=Role.OPERATOR), sequence=1)
    assert snap.is_admin_or_operator
    assert not snap.is_admin


def test_unresolved_snapshot_has_no_role():
    snap = SessionSnapshot.unresolved(Principal(uid="u1"), sequence=3)
    assert snap.role is None
    assert snap.is_authenticated
    assert not snap.is_admin_or_operator


def test_snapshot_serialises_flags():
    snap = SessionSnapshot.authenticated(Principal(uid="u1"), Profile(uid="u1", role=Role.ADMIN), 1)
    data = snap.model_dump(mode="json")
    assert data["role"] == "admin"
    assert data["is_admin"] is True
    assert data["is_admin_or_operator"] is True


@pytest.mark.parametrize("role", list(Role))
def test_every_role_is_recognised(role):
    assert parse_role(role.value.upper()) is role
    assert coerce_role(role.value) is role
