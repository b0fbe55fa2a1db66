"""API endpoint integration tests.

Tests the FastAPI endpoints for timesheet submission, review and export.
"""

import csv
import io
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

from timesheet_tracker.api.app import create_app
from timesheet_tracker.database import create_session_factory

pytestmark = pytest.mark.asyncio


async def submit(client: AsyncClient, headers, day: str, **fields):
    body = {"date": day, "plannedWork": "Plan", "actualWork": "Done", **fields}
    return await client.post("/api/timesheets", headers=headers, json=body)


class TestHealthEndpoints:
    """Test health check endpoints."""

    async def test_banner(self, client: AsyncClient):
        response = await client.get("/")
        assert response.status_code == 200
        assert response.json() == {"message": "Timesheet backend is running"}

    async def test_health_check(self, client: AsyncClient):
        """Health endpoint should return 200."""
        response = await client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert "timestamp" in data

    async def test_readiness_check(self, client: AsyncClient):
        """Ready when the database answers."""
        response = await client.get("/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    async def test_unreachable_database(self, settings, tmp_path):
        """Readiness fails and health degrades when the database is down."""
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'db.sqlite'}")
        app = create_app(settings, session_factory=create_session_factory(engine))
        try:
            async with AsyncClient(
                transport=ASGITransport(app=app), base_url="http://test"
            ) as client:
                ready = await client.get("/ready")
                health = await client.get("/health")
        finally:
            await engine.dispose()

        assert ready.status_code == 503
        assert ready.json()["status"] == "unavailable"
        assert health.status_code == 200
        assert health.json()["database"] == "unhealthy"


class TestAuthentication:
    """Test login and credential handling."""

    async def test_login_and_me(self, client: AsyncClient, alice):
        response = await client.post(
            "/api/auth/login",
            json={"email": "alice@company.com", "password": "password123"},
        )
        assert response.status_code == 200, response.text
        data = response.json()
        assert data["tokenType"] == "bearer"
        assert data["user"]["email"] == "alice@company.com"
        assert "passwordHash" not in data["user"]

        me = await client.get(
            "/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"}
        )
        assert me.status_code == 200
        assert me.json()["id"] == str(alice.id)

    async def test_login_wrong_password(self, client: AsyncClient, alice):
        response = await client.post(
            "/api/auth/login",
            json={"email": "alice@company.com", "password": "nope"},
        )
        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHENTICATED"

    async def test_missing_token(self, client: AsyncClient):
        response = await client.get("/api/timesheets")
        assert response.status_code == 401
        assert response.json() == {
            "message": "No token, authorization denied",
            "code": "UNAUTHENTICATED",
        }

    async def test_invalid_token(self, client: AsyncClient):
        response = await client.get(
            "/api/timesheets", headers={"Authorization": "Bearer garbage"}
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Token is not valid"

    async def test_token_for_deleted_user(
        self, client: AsyncClient, token_for, alice, admin_headers
    ):
        headers = {"Authorization": f"Bearer {token_for(alice)}"}
        await client.delete(f"/api/admin/employees/{alice.id}", headers=admin_headers)

        response = await client.get("/api/timesheets", headers=headers)
        assert response.status_code == 401

    async def test_deactivated_user(self, client: AsyncClient, alice, alice_headers, admin_headers):
        await client.put(
            f"/api/admin/employees/{alice.id}",
            headers=admin_headers,
            json={"name": "Alice Smith", "email": "alice@company.com", "isActive": False},
        )

        response = await client.get("/api/timesheets", headers=alice_headers)
        assert response.status_code == 401
        assert response.json()["message"] == "Account is deactivated"

    async def test_employee_cannot_use_admin_routes(self, client: AsyncClient, alice_headers):
        for path in ("/api/admin/timesheets", "/api/admin/dashboard", "/api/admin/employees"):
            response = await client.get(path, headers=alice_headers)
            assert response.status_code == 403
            assert response.json()["code"] == "UNAUTHORIZED"


class TestTimesheetScenario:
    """End-to-end submission and review flow."""

    async def test_submit_review_and_lock(
        self, client: AsyncClient, admin, alice_headers, admin_headers
    ):
        """Create, duplicate, accept, then a refused edit."""
        created = await submit(client, alice_headers, "2024-03-01")
        assert created.status_code == 201, created.text
        timesheet = created.json()
        assert timesheet["status"] == "pending"
        assert timesheet["date"] == "2024-03-01"

        duplicate = await submit(client, alice_headers, "2024-03-01")
        assert duplicate.status_code == 400
        assert duplicate.json()["code"] == "CONFLICT"

        reviewed = await client.put(
            f"/api/admin/timesheets/{timesheet['id']}/review",
            headers=admin_headers,
            json={"status": "accepted", "adminComments": "Looks good"},
        )
        assert reviewed.status_code == 200, reviewed.text
        data = reviewed.json()
        assert data["status"] == "accepted"
        assert data["adminComments"] == "Looks good"
        assert data["reviewedBy"] == str(admin.id)
        assert data["reviewerName"] == "Grace Admin"
        assert data["reviewedAt"] is not None

        edit = await client.put(
            f"/api/timesheets/{timesheet['id']}",
            headers=alice_headers,
            json={"plannedWork": "Changed", "actualWork": "Changed"},
        )
        assert edit.status_code == 400
        assert edit.json()["code"] == "INVALID_STATE"

    async def test_edit_and_delete_pending(self, client: AsyncClient, alice_headers):
        timesheet = (await submit(client, alice_headers, "2024-03-01")).json()

        edit = await client.put(
            f"/api/timesheets/{timesheet['id']}",
            headers=alice_headers,
            json={"plannedWork": "New plan", "actualWork": "New actual", "remarks": "late"},
        )
        assert edit.status_code == 200
        assert edit.json()["plannedWork"] == "New plan"

        deleted = await client.delete(f"/api/timesheets/{timesheet['id']}", headers=alice_headers)
        assert deleted.status_code == 200
        assert deleted.json() == {"message": "Timesheet deleted successfully"}

        listing = await client.get("/api/timesheets", headers=alice_headers)
        assert listing.json() == []

    async def test_other_employee_gets_not_found(
        self, client: AsyncClient, alice_headers, bob_headers
    ):
        timesheet = (await submit(client, alice_headers, "2024-03-01")).json()

        response = await client.delete(f"/api/timesheets/{timesheet['id']}", headers=bob_headers)
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    async def test_missing_fields_are_bad_request(self, client: AsyncClient, alice_headers):
        response = await client.post(
            "/api/timesheets", headers=alice_headers, json={"date": "2024-03-01"}
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"

    async def test_list_is_scoped_and_filtered(
        self, client: AsyncClient, alice_headers, bob_headers
    ):
        for day in ("2023-12-31", "2024-01-01", "2024-01-31", "2024-02-01"):
            await submit(client, alice_headers, day)
        await submit(client, bob_headers, "2024-01-15")

        response = await client.get(
            "/api/timesheets",
            headers=alice_headers,
            params={"startDate": "2024-01-01", "endDate": "2024-01-31"},
        )
        assert response.status_code == 200
        assert [t["date"] for t in response.json()] == ["2024-01-31", "2024-01-01"]

    async def test_invalid_status_filter(self, client: AsyncClient, alice_headers):
        response = await client.get(
            "/api/timesheets", headers=alice_headers, params={"status": "approved"}
        )
        assert response.status_code == 400


class TestEmployeeExports:
    """Test self-service downloads."""

    async def test_csv_export(self, client: AsyncClient, alice_headers):
        await submit(client, alice_headers, "2024-03-01")
        await submit(client, alice_headers, "2024-03-02")

        response = await client.get("/api/timesheets/export/csv", headers=alice_headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.headers["content-disposition"] == 'attachment; filename="timesheets.csv"'
        rows = list(csv.reader(io.StringIO(response.text)))
        assert len(rows) == 3
        assert rows[0][0] == "employeeName"
        assert rows[1][4] == "2024-03-02"

    async def test_pdf_export(self, client: AsyncClient, alice_headers):
        await submit(client, alice_headers, "2024-03-01")

        response = await client.get("/api/timesheets/export/pdf", headers=alice_headers)

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF-")

    async def test_download_pdf_requires_records(self, client: AsyncClient, alice_headers):
        response = await client.get("/api/timesheets/download-pdf", headers=alice_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "No timesheets found."

        await submit(client, alice_headers, "2024-03-01")
        response = await client.get("/api/timesheets/download-pdf", headers=alice_headers)
        assert response.status_code == 200
        assert response.content.startswith(b"%PDF-")


class TestAdminEndpoints:
    """Test admin review, reporting and employee management."""

    async def test_list_with_search_and_employee(
        self, client: AsyncClient, alice, alice_headers, bob_headers, admin_headers
    ):
        await submit(client, alice_headers, "2024-03-01", plannedWork="Database migration")
        await submit(client, bob_headers, "2024-03-01")

        everyone = await client.get(
            "/api/admin/timesheets", headers=admin_headers, params={"employee": "all"}
        )
        searched = await client.get(
            "/api/admin/timesheets", headers=admin_headers, params={"search": "migration"}
        )
        by_employee = await client.get(
            "/api/admin/timesheets", headers=admin_headers, params={"employee": str(alice.id)}
        )

        assert len(everyone.json()) == 2
        assert [t["employee"]["email"] for t in searched.json()] == ["alice@company.com"]
        assert [t["employeeId"] for t in by_employee.json()] == [str(alice.id)]

    async def test_dashboard(self, client: AsyncClient, alice_headers, admin_headers):
        timesheet = (await submit(client, alice_headers, "2024-03-01")).json()
        await submit(client, alice_headers, "2024-03-02")
        await client.put(
            f"/api/admin/timesheets/{timesheet['id']}/review",
            headers=admin_headers,
            json={"status": "rejected"},
        )

        response = await client.get("/api/admin/dashboard", headers=admin_headers)

        assert response.json() == {
            "totalTimesheets": 2,
            "pending": 1,
            "accepted": 0,
            "rejected": 1,
            "totalEmployees": 1,
        }

    async def test_review_missing_timesheet(self, client: AsyncClient, admin_headers):
        response = await client.put(
            f"/api/admin/timesheets/{uuid4()}/review",
            headers=admin_headers,
            json={"status": "accepted"},
        )
        assert response.status_code == 404

    async def test_employee_crud(self, client: AsyncClient, admin_headers, alice_headers):
        created = await client.post(
            "/api/admin/employees",
            headers=admin_headers,
            json={
                "name": "Dan Brown",
                "email": "dan@company.com",
                "password": "secret123",
                "employeeNumber": "E-042",
                "department": "Ops",
            },
        )
        assert created.status_code == 201, created.text
        employee = created.json()
        assert employee["role"] == "employee"

        duplicate = await client.post(
            "/api/admin/employees",
            headers=admin_headers,
            json={"name": "Dan", "email": "dan@company.com", "password": "secret123"},
        )
        assert duplicate.status_code == 400
        assert duplicate.json()["message"] == "User already exists with this email"

        updated = await client.put(
            f"/api/admin/employees/{employee['id']}",
            headers=admin_headers,
            json={"name": "Dan Green", "email": "dan@company.com", "department": "Sales"},
        )
        assert updated.json()["name"] == "Dan Green"

        names = [e["name"] for e in (await client.get(
            "/api/admin/employees", headers=admin_headers
        )).json()]
        assert names == ["Alice Smith", "Dan Green"]

    async def test_delete_employee_cascades(
        self, client: AsyncClient, alice, alice_headers, admin_headers
    ):
        await submit(client, alice_headers, "2024-03-01")
        await submit(client, alice_headers, "2024-03-02")

        response = await client.delete(f"/api/admin/employees/{alice.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {
            "message": "Employee deleted successfully",
            "timesheetsDeleted": 2,
        }
        listing = await client.get("/api/admin/timesheets", headers=admin_headers)
        assert listing.json() == []


class TestAdminExports:
    """Test admin downloads."""

    async def test_filtered_csv(
        self, client: AsyncClient, alice_headers, bob_headers, admin_headers
    ):
        await submit(client, alice_headers, "2024-03-01")
        await submit(client, alice_headers, "2024-04-01")
        await submit(client, bob_headers, "2024-03-15")

        response = await client.get(
            "/api/admin/timesheets/export/csv",
            headers=admin_headers,
            params={"month": "2024-03"},
        )

        assert response.status_code == 200
        assert 'filename="filtered_timesheets.csv"' in response.headers["content-disposition"]
        rows = list(csv.reader(io.StringIO(response.text)))
        assert [row[4] for row in rows[1:]] == ["2024-03-15", "2024-03-01"]

    async def test_export_requires_employee_and_format(self, client: AsyncClient, admin_headers):
        response = await client.get(
            "/api/admin/timesheets/export", headers=admin_headers, params={"format": "csv"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Employee ID and format are required"

    async def test_export_rejects_all_employees(
        self, client: AsyncClient, alice_headers, admin_headers
    ):
        """The per-employee export needs a concrete employee id."""
        await submit(client, alice_headers, "2024-03-01")

        response = await client.get(
            "/api/admin/timesheets/export",
            headers=admin_headers,
            params={"employeeId": "all", "format": "csv"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"

    async def test_export_invalid_format(self, client: AsyncClient, alice, admin_headers):
        response = await client.get(
            "/api/admin/timesheets/export",
            headers=admin_headers,
            params={"employeeId": str(alice.id), "format": "xlsx"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid format"

    async def test_export_by_format(
        self, client: AsyncClient, alice, alice_headers, bob_headers, admin_headers
    ):
        await submit(client, alice_headers, "2024-03-01")
        await submit(client, bob_headers, "2024-03-01")
        params = {"employeeId": str(alice.id)}

        as_csv = await client.get(
            "/api/admin/timesheets/export", headers=admin_headers, params={**params, "format": "csv"}
        )
        as_pdf = await client.get(
            "/api/admin/timesheets/export", headers=admin_headers, params={**params, "format": "pdf"}
        )

        assert len(list(csv.reader(io.StringIO(as_csv.text)))) == 2
        assert as_pdf.headers["content-type"] == "application/pdf"
        assert 'filename="filtered_timesheets.pdf"' in as_pdf.headers["content-disposition"]

    async def test_single_record_pdf(self, client: AsyncClient, alice_headers, admin_headers):
        timesheet = (await submit(client, alice_headers, "2024-03-01")).json()

        response = await client.get(
            f"/api/admin/timesheets/{timesheet['id']}/download", headers=admin_headers
        )

        assert response.status_code == 200
        assert response.content.startswith(b"%PDF-")
        assert f"timesheet-{timesheet['id']}.pdf" in response.headers["content-disposition"]

    async def test_single_record_pdf_accepts_query_token(
        self, client: AsyncClient, token_for, admin, alice_headers
    ):
        timesheet = (await submit(client, alice_headers, "2024-03-01")).json()
        token = token_for(admin)

        response = await client.get(
            f"/api/admin/timesheets/{timesheet['id']}/export/pdf", params={"token": token}
        )

        assert response.status_code == 200
        assert response.content.startswith(b"%PDF-")

    async def test_query_token_only_on_pdf_route(self, client: AsyncClient, token_for, admin):
        token = token_for(admin)

        response = await client.get("/api/admin/dashboard", params={"token": token})

        assert response.status_code == 401

    async def test_query_token_needs_admin(
        self, client: AsyncClient, token_for, alice, alice_headers
    ):
        timesheet = (await submit(client, alice_headers, "2024-03-01")).json()
        token = token_for(alice)

        response = await client.get(
            f"/api/admin/timesheets/{timesheet['id']}/export/pdf", params={"token": token}
        )

        assert response.status_code == 403
