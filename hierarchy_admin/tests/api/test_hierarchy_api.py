"""Tests for hierarchy API endpoints."""

import uuid
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from hierarchy_admin.database.database import get_db
from hierarchy_admin.main import create_app
from hierarchy_admin.models import Brand, Collaborator


ADMIN_HEADERS = {"X-User-ID": str(uuid.uuid4()), "X-User-Role": "admin"}
READER_HEADERS = {"X-User-ID": str(uuid.uuid4()), "X-User-Role": "user"}


@pytest.fixture
def client(session: Session) -> TestClient:
    """Create a test client whose requests share the test session."""
    app = create_app()

    def override_get_db() -> Generator[Session, None, None]:
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    # Not entered as a context manager so the lifespan never opens the real database
    return TestClient(app)


class TestHealth:
    """Tests for the health endpoint."""

    def test_health(self, client):
        """Test that the service reports healthy."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestAuthentication:
    """Tests for request authentication and permission checks."""

    def test_anonymous_request_is_unauthorized(self, client, hierarchy):
        """Test that a request without identity headers is rejected with 401."""
        response = client.get("/api/economic-groups")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "unauthorized"

    def test_missing_permission_is_forbidden(self, client, hierarchy):
        """Test that a view-only actor can't create."""
        response = client.post(
            "/api/economic-groups", json={"name": "Grupo Beta"}, headers=READER_HEADERS
        )

        assert response.status_code == 403
        body = response.json()["error"]
        assert body["code"] == "forbidden"
        assert body["details"]["required_permission"] == "create_economic_group"

    def test_explicit_permission_header_grants_access(self, client, hierarchy):
        """Test granting a single permission without a role."""
        response = client.get(
            "/api/brands",
            headers={"X-User-ID": str(uuid.uuid4()), "X-User-Permissions": "view_brand"},
        )

        assert response.status_code == 200

    def test_manager_cannot_delete_units(self, client, hierarchy):
        """Test the manager role limits."""
        response = client.delete(
            f"/api/units/{hierarchy['unit'].id}",
            headers={"X-User-ID": str(uuid.uuid4()), "X-User-Role": "manager"},
        )

        assert response.status_code == 403


class TestEconomicGroupEndpoints:
    """Tests for /api/economic-groups."""

    def test_create(self, client):
        """Test creating an economic group."""
        response = client.post(
            "/api/economic-groups", json={"name": "Grupo Beta"}, headers=ADMIN_HEADERS
        )

        assert response.status_code == 201
        body = response.json()
        assert body["data"]["name"] == "Grupo Beta"
        assert body["message"] == "Economic group created successfully"

    def test_create_missing_name(self, client):
        """Test that an empty body yields a field-keyed error."""
        response = client.post("/api/economic-groups", json={}, headers=ADMIN_HEADERS)

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "validation_error"
        assert [fe["field"] for fe in error["field_errors"]] == ["name"]
        assert error["field_errors"][0]["code"] == "required"

    def test_create_duplicate_echoes_input(self, client, hierarchy):
        """Test that the submitted values come back with the errors."""
        response = client.post(
            "/api/economic-groups", json={"name": "Grupo Alpha"}, headers=ADMIN_HEADERS
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["field_errors"][0]["code"] == "unique"
        assert error["details"]["input"] == {"name": "Grupo Alpha"}

    def test_get_with_dependents_count(self, client, hierarchy):
        """Test the detail view."""
        response = client.get(
            f"/api/economic-groups/{hierarchy['group'].id}", headers=READER_HEADERS
        )

        assert response.status_code == 200
        assert response.json()["data"]["dependents_count"] == 1

    def test_get_not_found(self, client):
        """Test a missing record."""
        response = client.get("/api/economic-groups/999", headers=READER_HEADERS)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "not_found"

    def test_delete_with_brands_conflicts(self, client, hierarchy):
        """Test that a group owning brands can't be deleted."""
        response = client.delete(
            f"/api/economic-groups/{hierarchy['group'].id}", headers=ADMIN_HEADERS
        )

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "integrity_conflict"
        assert error["details"]["dependent_type"] == "brand"


class TestBrandEndpoints:
    """Tests for /api/brands."""

    def test_list_filtered_by_group(self, client, hierarchy):
        """Test the economic group filter."""
        response = client.get(
            "/api/brands",
            params={"economic_group_id": hierarchy["group"].id},
            headers=READER_HEADERS,
        )

        assert response.status_code == 200
        body = response.json()
        assert [item["name"] for item in body["data"]] == ["Bandeira X"]
        assert body["pagination"]["total_items"] == 1

    def test_create_with_unknown_group(self, client):
        """Test the parent existence rule."""
        response = client.post(
            "/api/brands",
            json={"name": "Bandeira Y", "economic_group_id": 999},
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 400
        field_errors = response.json()["error"]["field_errors"]
        assert [fe["field"] for fe in field_errors] == ["economic_group_id"]

    def test_create_with_oversized_group_id(self, client):
        """Test that a parent id beyond the column range is a field error."""
        response = client.post(
            "/api/brands",
            json={"name": "Bandeira Y", "economic_group_id": 2**70},
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 400
        field_errors = response.json()["error"]["field_errors"]
        assert field_errors == [{
            "field": "economic_group_id",
            "message": "The selected economic group does not exist",
            "code": "not_found",
        }]

    def test_update(self, client, hierarchy):
        """Test renaming a brand."""
        response = client.put(
            f"/api/brands/{hierarchy['brand'].id}",
            json={"name": "Bandeira X2", "economic_group_id": hierarchy["group"].id},
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Bandeira X2"

    def test_malformed_body_is_bad_request(self, client, hierarchy):
        """Test that a body of the wrong shape is reported as a field error."""
        response = client.post(
            "/api/brands",
            json={"name": "Bandeira Y", "economic_group_id": "not-a-number"},
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 400
        field_errors = response.json()["error"]["field_errors"]
        assert field_errors[0]["field"] == "economic_group_id"


class TestUnitEndpoints:
    """Tests for /api/units."""

    def test_create_normalizes_tax_id(self, client, hierarchy):
        """Test that the formatted tax id is stored digit-only."""
        response = client.post(
            "/api/units",
            json={
                "trade_name": "Unidade Sul",
                "legal_name": "Unidade Sul LTDA",
                "tax_id": "11.222.333/0001-81",
                "brand_id": hierarchy["brand"].id,
            },
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 201
        assert response.json()["data"]["tax_id"] == "11222333000181"

    def test_create_reports_every_failing_field(self, client, hierarchy):
        """Test that errors accumulate across fields."""
        response = client.post(
            "/api/units",
            json={"trade_name": "Unidade Sul", "tax_id": "123", "brand_id": 999},
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 400
        fields = {fe["field"] for fe in response.json()["error"]["field_errors"]}
        assert fields == {"legal_name", "tax_id", "brand_id"}

    def test_id_beyond_column_range_is_not_found(self, client, hierarchy):
        """Test that an id no row can hold yields 404."""
        response = client.get(f"/api/units/{2**70}", headers=READER_HEADERS)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "not_found"

    def test_page_beyond_limit_is_bad_request(self, client, hierarchy):
        """Test that huge page numbers are rejected before querying."""
        response = client.get(
            "/api/units", params={"page": 2**62}, headers=READER_HEADERS
        )

        assert response.status_code == 400
        assert response.json()["error"]["field_errors"][0]["field"] == "page"

    def test_search_percent_sign_is_literal(self, client, hierarchy):
        """Test that a wildcard in the search term doesn't match every row."""
        response = client.get(
            "/api/economic-groups", params={"search": "%"}, headers=READER_HEADERS
        )

        assert response.status_code == 200
        assert response.json()["pagination"]["total_items"] == 0

    def test_delete_with_collaborators_conflicts(self, client, session, hierarchy):
        """Test that a unit with collaborators is kept."""
        response = client.delete(f"/api/units/{hierarchy['unit'].id}", headers=ADMIN_HEADERS)

        assert response.status_code == 409
        assert session.query(Collaborator).count() == 1


class TestCollaboratorEndpoints:
    """Tests for /api/collaborators."""

    def test_create(self, client, hierarchy):
        """Test creating a collaborator."""
        response = client.post(
            "/api/collaborators",
            json={
                "name": "Ana Souza",
                "email": "ana.souza@example.com",
                "personal_tax_id": "111.222.333-44",
                "unit_id": hierarchy["unit"].id,
            },
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 201
        assert response.json()["data"]["personal_tax_id"] == "11122233344"

    def test_invalid_email(self, client, hierarchy):
        """Test email validation."""
        response = client.post(
            "/api/collaborators",
            json={
                "name": "Ana Souza",
                "email": "ana.souza",
                "personal_tax_id": "11122233344",
                "unit_id": hierarchy["unit"].id,
            },
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 400
        assert response.json()["error"]["field_errors"][0]["field"] == "email"

    def test_list_filtered_by_economic_group(self, client, hierarchy):
        """Test the cross-level filter and the collaborator page size."""
        response = client.get(
            "/api/collaborators",
            params={"economic_group_id": hierarchy["group"].id},
            headers=READER_HEADERS,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["pagination"]["page_size"] == 15
        assert [item["email"] for item in body["data"]] == ["joao.silva@example.com"]

    def test_delete(self, client, session, hierarchy):
        """Test deleting a collaborator, then its unit."""
        collaborator_id = hierarchy["collaborator"].id

        response = client.delete(f"/api/collaborators/{collaborator_id}", headers=ADMIN_HEADERS)
        assert response.status_code == 200
        assert session.get(Collaborator, collaborator_id) is None

        response = client.delete(f"/api/units/{hierarchy['unit'].id}", headers=ADMIN_HEADERS)
        assert response.status_code == 200

        assert session.query(Brand).count() == 1
