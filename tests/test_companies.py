"""
Test suite for company endpoints.

Tests cover:
- Company creation (admin only)
- Listing with name / employee-count filters
- Retrieval with jobs
- Partial updates and deletion
"""

import pytest

from app.core.database import run_query


class TestCompanyCreation:
    """Tests for POST /companies"""

    def test_create_company_as_admin(self, client, seed_data, admin_headers, sample_company_data):
        response = client.post("/api/v1/companies", json=sample_company_data, headers=admin_headers)

        assert response.status_code == 201
        assert response.json() == sample_company_data

    def test_create_company_requires_admin(self, client, seed_data, u1_headers, sample_company_data):
        response = client.post("/api/v1/companies", json=sample_company_data, headers=u1_headers)
        assert response.status_code == 403

    def test_create_company_anonymous(self, client, seed_data, sample_company_data):
        response = client.post("/api/v1/companies", json=sample_company_data)
        assert response.status_code == 401

    def test_create_duplicate_handle(self, client, seed_data, admin_headers, sample_company_data):
        sample_company_data["handle"] = "c1"
        response = client.post("/api/v1/companies", json=sample_company_data, headers=admin_headers)

        assert response.status_code == 400
        assert "duplicate" in response.json()["detail"].lower()

    def test_create_duplicate_name(self, client, seed_data, admin_headers, sample_company_data):
        sample_company_data["name"] = "C1"
        response = client.post("/api/v1/companies", json=sample_company_data, headers=admin_headers)

        assert response.status_code == 400

    def test_create_company_invalid_data(self, client, seed_data, admin_headers, sample_company_data):
        sample_company_data["numEmployees"] = -1
        response = client.post("/api/v1/companies", json=sample_company_data, headers=admin_headers)

        assert response.status_code == 422

    def test_create_company_unknown_field(self, client, seed_data, admin_headers, sample_company_data):
        sample_company_data["color"] = "red"
        response = client.post("/api/v1/companies", json=sample_company_data, headers=admin_headers)

        assert response.status_code == 422


class TestCompanyListing:
    """Tests for GET /companies"""

    def test_list_all(self, client, seed_data):
        response = client.get("/api/v1/companies")

        assert response.status_code == 200
        assert response.json() == [
            {"handle": "c1", "name": "C1", "description": "Desc1", "numEmployees": 1, "logoUrl": "http://c1.img"},
            {"handle": "c2", "name": "C2", "description": "Desc2", "numEmployees": 2, "logoUrl": "http://c2.img"},
            {"handle": "c3", "name": "C3", "description": "Desc3", "numEmployees": 3, "logoUrl": "http://c3.img"},
        ]

    def test_filter_by_name_is_case_insensitive(self, client, seed_data):
        response = client.get("/api/v1/companies", params={"name": "c2"})

        assert response.status_code == 200
        assert [c["handle"] for c in response.json()] == ["c2"]

    @pytest.mark.parametrize("params,expected", [
        ({"minEmployees": 2}, ["c2", "c3"]),
        ({"maxEmployees": 2}, ["c1", "c2"]),
        ({"minEmployees": 2, "maxEmployees": 2}, ["c2"]),
        ({"name": "C", "minEmployees": 3}, ["c3"]),
        ({"minEmployees": 0}, ["c1", "c2", "c3"]),
    ])
    def test_filters(self, client, seed_data, params, expected):
        response = client.get("/api/v1/companies", params=params)

        assert response.status_code == 200
        assert [c["handle"] for c in response.json()] == expected

    def test_no_matches_is_empty_list(self, client, seed_data):
        response = client.get("/api/v1/companies", params={"name": "nope"})

        assert response.status_code == 200
        assert response.json() == []

    def test_like_wildcards_match_literally(self, client, seed_data):
        response = client.get("/api/v1/companies", params={"name": "%"})

        assert response.status_code == 200
        assert response.json() == []

    def test_min_greater_than_max(self, client, seed_data):
        response = client.get("/api/v1/companies", params={"minEmployees": 3, "maxEmployees": 1})

        assert response.status_code == 400
        assert "minEmployees" in response.json()["detail"]

    def test_non_numeric_filter(self, client, seed_data):
        response = client.get("/api/v1/companies", params={"minEmployees": "lots"})
        assert response.status_code == 422

    def test_injection_attempt_is_harmless(self, client, seed_data):
        response = client.get("/api/v1/companies", params={"name": "x'; DROP TABLE companies; --"})

        assert response.status_code == 200
        assert response.json() == []
        assert len(client.get("/api/v1/companies").json()) == 3


class TestCompanyRetrieval:
    """Tests for GET /companies/{handle}"""

    def test_get_company_with_jobs(self, client, seed_data):
        response = client.get("/api/v1/companies/c1")

        assert response.status_code == 200
        data = response.json()
        assert data["handle"] == "c1"
        assert data["numEmployees"] == 1
        assert [job["title"] for job in data["jobs"]] == ["J1", "J2", "J3", "J4"]
        assert data["jobs"][0] == {
            "id": seed_data["job_ids"]["J1"],
            "title": "J1",
            "salary": 100,
            "equity": 0.1,
        }

    def test_get_company_without_jobs(self, client, seed_data):
        response = client.get("/api/v1/companies/c2")

        assert response.status_code == 200
        assert response.json()["jobs"] == []

    def test_get_nonexistent_company(self, client, seed_data):
        response = client.get("/api/v1/companies/nope")

        assert response.status_code == 404
        assert "no company" in response.json()["detail"].lower()


class TestCompanyUpdate:
    """Tests for PATCH /companies/{handle}"""

    def test_update_as_admin(self, client, seed_data, admin_headers):
        response = client.patch(
            "/api/v1/companies/c1",
            json={"name": "C1-new", "numEmployees": 10, "logoUrl": "http://new.img"},
            headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json() == {
            "handle": "c1",
            "name": "C1-new",
            "description": "Desc1",
            "numEmployees": 10,
            "logoUrl": "http://new.img",
        }

    def test_update_persists(self, client, db_session, seed_data, admin_headers):
        client.patch("/api/v1/companies/c1", json={"numEmployees": 54}, headers=admin_headers)

        row = run_query(db_session, "SELECT num_employees FROM companies WHERE handle = $1", ["c1"]).first()
        assert row[0] == 54

    def test_update_requires_admin(self, client, seed_data, u1_headers):
        response = client.patch("/api/v1/companies/c1", json={"name": "x"}, headers=u1_headers)
        assert response.status_code == 403

    def test_update_nonexistent(self, client, seed_data, admin_headers):
        response = client.patch("/api/v1/companies/nope", json={"name": "x"}, headers=admin_headers)
        assert response.status_code == 404

    def test_update_empty_body(self, client, seed_data, admin_headers):
        response = client.patch("/api/v1/companies/c1", json={}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "No data"

    def test_update_handle_not_allowed(self, client, seed_data, admin_headers):
        response = client.patch("/api/v1/companies/c1", json={"handle": "c1-new"}, headers=admin_headers)
        assert response.status_code == 422

    def test_update_to_taken_name(self, client, seed_data, admin_headers):
        response = client.patch("/api/v1/companies/c1", json={"name": "C2"}, headers=admin_headers)
        assert response.status_code == 400


class TestCompanyDeletion:
    """Tests for DELETE /companies/{handle}"""

    def test_delete_as_admin(self, client, db_session, seed_data, admin_headers):
        response = client.delete("/api/v1/companies/c1", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"deleted": "c1"}
        assert client.get("/api/v1/companies/c1").status_code == 404

        # Jobs are removed with their company
        jobs = run_query(db_session, "SELECT id FROM jobs WHERE company_handle = $1", ["c1"]).all()
        assert jobs == []

    def test_delete_requires_admin(self, client, seed_data, u1_headers):
        response = client.delete("/api/v1/companies/c1", headers=u1_headers)
        assert response.status_code == 403

    def test_delete_nonexistent(self, client, seed_data, admin_headers):
        response = client.delete("/api/v1/companies/nope", headers=admin_headers)
        assert response.status_code == 404


class TestCompanyNullsAndBounds:
    """Tests for explicit nulls in PATCH bodies and oversized numbers"""

    def test_null_clears_logo_url(self, client, seed_data, admin_headers):
        client.patch("/api/v1/companies/c1", json={"logoUrl": "http://c1.img"}, headers=admin_headers)
        response = client.patch("/api/v1/companies/c1", json={"logoUrl": None}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["logoUrl"] is None

    def test_null_clears_num_employees(self, client, seed_data, admin_headers):
        response = client.patch("/api/v1/companies/c1", json={"numEmployees": None}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["numEmployees"] is None

    @pytest.mark.parametrize("body", [{"name": None}, {"description": None}])
    def test_null_on_required_field_is_rejected(self, client, seed_data, admin_headers, body):
        response = client.patch("/api/v1/companies/c1", json=body, headers=admin_headers)
        assert response.status_code == 422

    @pytest.mark.parametrize("param", ["minEmployees", "maxEmployees"])
    def test_huge_employee_bound(self, client, seed_data, param):
        response = client.get("/api/v1/companies", params={param: 10 ** 20})
        assert response.status_code == 422

    def test_list_without_trailing_slash(self, client, seed_data):
        response = client.get("/api/v1/companies", follow_redirects=False)
        assert response.status_code == 200
