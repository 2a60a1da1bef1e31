"""
Tests for the permission decision, including the carte_blanche bypass.
"""

import pytest

from backoffice.services.authorization_service import authorization_service
from backoffice.services.rbac_service import rbac_service


def test_user_without_role_is_denied_everything(db, factory):
    factory.permission("view_forms")
    user = factory.user()

    for name in ["view_forms", "manage_roles", "carte_blanche", "", "anything"]:
        assert authorization_service.has_permission(db, user.id, name) is False


def test_unknown_user_is_denied(db, factory):
    factory.role("editor", ["view_forms"])

    assert authorization_service.has_permission(db, "no-such-user", "view_forms") is False


def test_grant_then_revoke(db, factory):
    role = factory.role("editor")
    permission = factory.permission("view_forms")
    user = factory.user(role=role)

    rbac_service.grant_permission(db, role.id, permission.id)
    assert authorization_service.has_permission(db, user.id, "view_forms") is True

    rbac_service.revoke_permission(db, role.id, permission.id)
    assert authorization_service.has_permission(db, user.id, "view_forms") is False


def test_scenarios_editor_role(db, factory):
    editor = factory.role("editor")
    view_forms = factory.permission("view_forms")
    factory.permission("manage_roles")
    carte_blanche = factory.permission("carte_blanche")
    user = factory.user(role=editor)

    # A: fresh role holds nothing
    assert authorization_service.has_permission(db, user.id, "view_forms") is False

    # B: exact grant, nothing more
    rbac_service.grant_permission(db, editor.id, view_forms.id)
    assert authorization_service.has_permission(db, user.id, "view_forms") is True
    assert authorization_service.has_permission(db, user.id, "manage_roles") is False

    # C: sentinel passes every check, even unregistered names
    rbac_service.grant_permission(db, editor.id, carte_blanche.id)
    for name in ["view_forms", "manage_roles", "does_not_exist"]:
        assert authorization_service.has_permission(db, user.id, name) is True


def test_matching_is_exact_and_case_sensitive(db, factory):
    user = factory.user(role=factory.role(permissions=["view_forms"]))

    assert authorization_service.has_permission(db, user.id, "view_forms") is True
    for name in ["View_Forms", "view_forms ", "view", "view_*", "*"]:
        assert authorization_service.has_permission(db, user.id, name) is False


def test_wildcard_named_permission_is_not_special(db, factory):
    user = factory.user(role=factory.role(permissions=["*"]))

    assert authorization_service.has_permission(db, user.id, "*") is True
    assert authorization_service.has_permission(db, user.id, "view_forms") is False


@pytest.mark.parametrize("name", ["view_forms", "manage_users", "never_registered"])
def test_carte_blanche_covers_any_name(db, factory, name):
    user = factory.user(role=factory.role(permissions=["carte_blanche"]))

    assert authorization_service.has_permission(db, user.id, name) is True


def test_decision_is_stable_for_a_fixed_state(db, factory):
    user = factory.user(role=factory.role(permissions=["view_forms"]))

    results = {
        authorization_service.has_permission(db, user.id, "view_forms") for _ in range(5)
    }
    assert results == {True}


def test_user_permissions_report_sentinel_unexpanded(db, factory):
    factory.permission("view_forms")
    user = factory.user(role=factory.role(permissions=["carte_blanche"]))

    assert authorization_service.get_user_permissions(db, user.id) == ["carte_blanche"]


def test_deleted_role_revokes_access(db, factory):
    role = factory.role("editor", ["view_forms"])
    user = factory.user(role=role)

    rbac_service.delete_role(db, role.id)

    assert authorization_service.has_permission(db, user.id, "view_forms") is False
    assert authorization_service.get_user_permissions(db, user.id) == []
