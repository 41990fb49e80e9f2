# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Integration tests for the roles API."""

import uuid

import pytest

from src.models import Company, Role, User
from src.services.permission_service import ROLE_ALREADY_ASSIGNED, PermissionService


def headers_for(user: User, company: Company) -> dict[str, str]:
    return {"X-User-Id": str(user.id), "X-Company-Id": str(company.id)}


@pytest.fixture
def manager_role(make_role) -> Role:
    return make_role("manager", ["role:*", "user:update"])


@pytest.fixture
def viewer_role(make_role) -> Role:
    return make_role("viewer", ["customer:read"])


@pytest.fixture
def manager(db_session, company, make_user, manager_role) -> User:
    user = make_user("manager@example.com", full_name="Office Manager")
    PermissionService(db_session).assign_role(user.id, manager_role.id, company.id)
    return user


@pytest.fixture
def manager_headers(manager, company) -> dict[str, str]:
    return headers_for(manager, company)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


class TestCallerContext:
    """Tests for resolving the caller from identity headers."""

    def test_missing_headers(self, client):
        response = client.get("/api/v1/roles/me")
        assert response.status_code == 401

    def test_malformed_ids(self, client):
        response = client.get(
            "/api/v1/roles/me",
            headers={"X-User-Id": "not-a-uuid", "X-Company-Id": "nope"},
        )
        assert response.status_code == 401

    def test_unknown_user(self, client, company):
        response = client.get(
            "/api/v1/roles/me",
            headers={"X-User-Id": str(uuid.uuid4()), "X-Company-Id": str(company.id)},
        )
        assert response.status_code == 401

    def test_inactive_user(self, client, company, make_user):
        user = make_user("gone@example.com", is_active=False)
        response = client.get("/api/v1/roles/me", headers=headers_for(user, company))
        assert response.status_code == 401

    def test_unknown_company(self, client, test_user):
        response = client.get(
            "/api/v1/roles/me",
            headers={"X-User-Id": str(test_user.id), "X-Company-Id": str(uuid.uuid4())},
        )
        assert response.status_code == 401


class TestPermissionChecks:
    """Tests for the permission dependencies."""

    def test_missing_permission_is_forbidden(self, client, company, test_user):
        response = client.get("/api/v1/roles", headers=headers_for(test_user, company))
        assert response.status_code == 403
        assert "role:read" in response.json()["detail"]

    def test_require_all_needs_every_permission(
        self, client, db_session, company, test_user, make_role
    ):
        assigner = make_role("assigner", ["role:assign"])
        PermissionService(db_session).assign_role(test_user.id, assigner.id, company.id)

        response = client.delete(
            f"/api/v1/roles/users/{test_user.id}",
            headers=headers_for(test_user, company),
        )

        assert response.status_code == 403

    def test_require_any_accepts_one_permission(
        self, client, db_session, company, test_user, make_role, viewer_role
    ):
        user_reader = make_role("userReader", ["user:read"])
        PermissionService(db_session).assign_role(
            test_user.id, user_reader.id, company.id
        )

        response = client.get(
            f"/api/v1/roles/{viewer_role.id}/users",
            headers=headers_for(test_user, company),
        )

        assert response.status_code == 200

    def test_permissions_are_scoped_to_company(
        self, client, manager, other_company
    ):
        response = client.get("/api/v1/roles", headers=headers_for(manager, other_company))
        assert response.status_code == 403


def test_list_permissions(client, manager_headers):
    response = client.get("/api/v1/roles/permissions", headers=manager_headers)

    assert response.status_code == 200
    data = response.json()
    names = {p["name"] for p in data["permissions"]}
    assert "customer:read" in names
    assert "role:assign" in data["by_category"]["Roles & Permissions"]


def test_list_roles_with_user_counts(
    client, company, other_company, make_role, manager_headers, viewer_role
):
    make_role("estimator", ["customer:*"], company=company)
    make_role("installer", ["office:read"], company=other_company)

    response = client.get("/api/v1/roles", headers=manager_headers)

    assert response.status_code == 200
    roles = {r["name"]: r for r in response.json()}
    assert set(roles) == {"manager", "viewer", "estimator"}
    assert roles["manager"]["user_count"] == 1
    assert roles["viewer"]["user_count"] == 0
    assert roles["estimator"]["company_id"] == str(company.id)


def test_get_my_roles(client, manager_headers):
    response = client.get("/api/v1/roles/me", headers=manager_headers)

    assert response.status_code == 200
    data = response.json()
    assert [r["name"] for r in data["roles"]] == ["manager"]
    assert data["permissions"] == ["role:*", "user:update"]


class TestAssignRole:
    """Tests for POST /roles/assign."""

    def test_assign_and_read_back(
        self, client, company, manager, manager_headers, test_user, viewer_role
    ):
        # Warm the cache so the assignment has to invalidate it
        before = client.get(
            f"/api/v1/roles/users/{test_user.id}", headers=manager_headers
        )
        assert before.json()["permissions"] == []

        response = client.post(
            "/api/v1/roles/assign",
            json={"user_id": str(test_user.id), "role_id": str(viewer_role.id)},
            headers=manager_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["user_id"] == str(test_user.id)
        assert data["company_id"] == str(company.id)
        assert data["assigned_by_id"] == str(manager.id)
        assert data["role"]["name"] == "viewer"

        after = client.get(
            f"/api/v1/roles/users/{test_user.id}", headers=manager_headers
        )
        assert after.json()["permissions"] == ["customer:read"]

    def test_duplicate_assignment_conflicts(
        self, client, manager_headers, test_user, viewer_role
    ):
        body = {"user_id": str(test_user.id), "role_id": str(viewer_role.id)}
        assert client.post("/api/v1/roles/assign", json=body, headers=manager_headers).status_code == 201

        response = client.post("/api/v1/roles/assign", json=body, headers=manager_headers)

        assert response.status_code == 409
        assert response.json()["detail"] == ROLE_ALREADY_ASSIGNED

    def test_role_of_other_company_not_found(
        self, client, other_company, make_role, manager_headers, test_user
    ):
        foreign = make_role("installer", ["office:read"], company=other_company)

        response = client.post(
            "/api/v1/roles/assign",
            json={"user_id": str(test_user.id), "role_id": str(foreign.id)},
            headers=manager_headers,
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Role not found"

    def test_unknown_user_not_found(self, client, manager_headers, viewer_role):
        response = client.post(
            "/api/v1/roles/assign",
            json={"user_id": str(uuid.uuid4()), "role_id": str(viewer_role.id)},
            headers=manager_headers,
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "User not found"

    def test_invalid_body(self, client, manager_headers):
        response = client.post(
            "/api/v1/roles/assign", json={"user_id": "x"}, headers=manager_headers
        )
        assert response.status_code == 422


class TestRevokeRole:
    """Tests for revoking roles."""

    def test_revoke(self, client, db_session, company, manager_headers, test_user, viewer_role):
        PermissionService(db_session).assign_role(test_user.id, viewer_role.id, company.id)
        body = {"user_id": str(test_user.id), "role_id": str(viewer_role.id)}

        response = client.post("/api/v1/roles/revoke", json=body, headers=manager_headers)
        assert response.status_code == 200

        again = client.post("/api/v1/roles/revoke", json=body, headers=manager_headers)
        assert again.status_code == 404

    def test_revoke_all(
        self, client, db_session, company, manager_headers, test_user, viewer_role, make_role
    ):
        reports = make_role("reports", ["report:read"])
        service = PermissionService(db_session)
        service.assign_role(test_user.id, viewer_role.id, company.id)
        service.assign_role(test_user.id, reports.id, company.id)

        response = client.delete(
            f"/api/v1/roles/users/{test_user.id}", headers=manager_headers
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Revoked 2 roles"
        assert service.get_user_roles(test_user.id, company.id) == []


def test_assign_default_roles(client, company, make_role, manager_headers, test_user):
    make_role("salesRep", ["customer:read"], is_default=True)

    response = client.post(
        f"/api/v1/roles/users/{test_user.id}/defaults", headers=manager_headers
    )

    assert response.status_code == 201
    assert [a["role"]["name"] for a in response.json()] == ["salesRep"]


def test_list_role_users(client, manager, manager_role, manager_headers):
    response = client.get(
        f"/api/v1/roles/{manager_role.id}/users", headers=manager_headers
    )

    assert response.status_code == 200
    holders = response.json()
    assert [h["email"] for h in holders] == ["manager@example.com"]
    assert holders[0]["full_name"] == "Office Manager"
