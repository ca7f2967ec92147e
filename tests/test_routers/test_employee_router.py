import unittest
from datetime import date
from decimal import Decimal
from types import SimpleNamespace as Obj
from unittest.mock import MagicMock, patch
from fastapi.testclient import TestClient

from main import app
from core.database import get_db
from authz.deps import get_current_employee_id
from hierarchy.deps import get_hierarchy_service
from hierarchy.errors import HierarchyIntegrityFault


def _row(**kw):
    base = dict(id=1, manager_id=None, first_name="Johanna", last_name="Rios", title="Agent",
                status="active", document_id="900", email="johanna@agency.test",
                hire_date=date(2020, 5, 4), salary=Decimal("4500.00"))
    base.update(kw)
    return Obj(**base)


class EmployeeRouterTests(unittest.TestCase):
    def setUp(self):
        class FakeDB:
            def rollback(self): pass
        def _fake_db():
            yield FakeDB()

        self.hierarchy = MagicMock()
        app.dependency_overrides[get_db] = _fake_db
        app.dependency_overrides[get_hierarchy_service] = lambda: self.hierarchy
        app.dependency_overrides[get_current_employee_id] = lambda: 7

        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.pop(get_db, None)
        app.dependency_overrides.pop(get_hierarchy_service, None)
        app.dependency_overrides.pop(get_current_employee_id, None)

    # --- LIST ---

    @patch("employee.router.service.get_employees")
    def test_get_employees_happy_path(self, mock_get):
        mock_get.return_value = [_row()]
        resp = self.client.get("/api/employees")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json(), [{
            "id": 1, "manager_id": None, "first_name": "Johanna", "last_name": "Rios",
            "title": "Agent", "status": "active",
        }])

    @patch("employee.router.service.get_employees")
    def test_get_employees_passes_filters(self, mock_get):
        mock_get.return_value = []
        resp = self.client.get("/api/employees", params={"status": "on_leave", "title": "Agent"})
        self.assertEqual(resp.status_code, 200)
        kwargs = mock_get.call_args.kwargs
        self.assertEqual(kwargs["status"], "on_leave")
        self.assertEqual(kwargs["title"], "Agent")

    def test_get_employees_bad_status_422(self):
        resp = self.client.get("/api/employees", params={"status": "retired"})
        self.assertEqual(resp.status_code, 422)

    @patch("employee.router.service.search_employees")
    def test_search(self, mock_search):
        mock_search.return_value = [_row()]
        resp = self.client.get("/api/employees/search", params={"q": "rio"})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(len(resp.json()), 1)

    @patch("employee.router.service.get_employee_by_document")
    def test_by_document_404(self, mock_get):
        mock_get.return_value = None
        resp = self.client.get("/api/employees/by-document/123")
        self.assertEqual(resp.status_code, 404)

    # --- CREATE ---

    @patch("employee.router.service.create_employee")
    def test_create_employee_201(self, mock_create):
        mock_create.return_value = _row(id=10, first_name="Jonas")
        resp = self.client.post("/api/employees", json={
            "first_name": "Jonas", "last_name": "Lopez", "document_id": "200",
            "email": "jonas@agency.test", "title": "Agent", "hire_date": "2024-01-08",
        })
        self.assertEqual(resp.status_code, 201, resp.text)

    def test_create_employee_422_on_unknown_field(self):
        resp = self.client.post("/api/employees", json={
            "first_name": "Jonas", "last_name": "Lopez", "document_id": "200",
            "email": "jonas@agency.test", "title": "Agent", "hire_date": "2024-01-08", "org_id": 2,
        })
        self.assertEqual(resp.status_code, 422)

    @patch("employee.router.service.create_employee")
    def test_create_employee_409_duplicate_document(self, mock_create):
        from sqlalchemy.exc import IntegrityError
        mock_create.side_effect = IntegrityError("stmt", "params", Exception("dup"))

        resp = self.client.post("/api/employees", json={
            "first_name": "Jonas", "last_name": "Lopez", "document_id": "200",
            "email": "jonas@agency.test", "title": "Agent", "hire_date": "2024-01-08",
        })
        self.assertEqual(resp.status_code, 409, resp.text)
        self.assertEqual(resp.json()["detail"], "employee document already exists")

    # --- GET /{id} ---

    @patch("employee.router.service.get_employee")
    def test_get_employee_salary_visible_to_manager(self, mock_get):
        mock_get.return_value = _row()
        self.hierarchy.can_view_sensitive.return_value = True
        resp = self.client.get("/api/employees/1")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["salary"], "4500.00")
        self.hierarchy.can_view_sensitive.assert_called_once_with(7, 1)

    @patch("employee.router.service.get_employee")
    def test_get_employee_salary_masked(self, mock_get):
        mock_get.return_value = _row()
        self.hierarchy.can_view_sensitive.return_value = False
        resp = self.client.get("/api/employees/1")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertIsNone(resp.json()["salary"])

    @patch("employee.router.service.get_employee")
    def test_get_employee_salary_masked_for_anonymous(self, mock_get):
        app.dependency_overrides[get_current_employee_id] = lambda: None
        mock_get.return_value = _row()
        resp = self.client.get("/api/employees/1")
        self.assertIsNone(resp.json()["salary"])
        self.hierarchy.can_view_sensitive.assert_not_called()

    @patch("employee.router.service.get_employee")
    def test_get_employee_500_on_hierarchy_cycle(self, mock_get):
        mock_get.return_value = _row()
        self.hierarchy.can_view_sensitive.side_effect = HierarchyIntegrityFault(1, 2, "employee 1 reached twice")
        resp = self.client.get("/api/employees/1")
        self.assertEqual(resp.status_code, 500, resp.text)
        self.assertEqual(resp.json()["detail"], "hierarchy integrity fault: employee 1 reached twice")

    @patch("employee.router.service.get_employee")
    def test_get_employee_404(self, mock_get):
        mock_get.return_value = None
        resp = self.client.get("/api/employees/999")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"], "employee not found")

    # --- PATCH /{id} ---

    @patch("employee.router.service.update_employee")
    @patch("employee.router.service.get_employee")
    def test_update_employee_200(self, mock_get, mock_update):
        mock_get.return_value = _row()
        mock_update.return_value = _row(title="Senior Agent")

        resp = self.client.patch("/api/employees/1", json={"title": "Senior Agent"})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["title"], "Senior Agent")

    @patch("employee.router.service.update_employee")
    @patch("employee.router.service.get_employee")
    def test_update_employee_document_and_hire_date(self, mock_get, mock_update):
        mock_get.return_value = _row()
        mock_update.return_value = _row(document_id="901", hire_date=date(2019, 1, 7))

        resp = self.client.patch("/api/employees/1", json={"document_id": "901", "hire_date": "2019-01-07"})
        self.assertEqual(resp.status_code, 200, resp.text)
        patch_arg = mock_update.call_args.args[2]
        self.assertEqual(patch_arg.document_id, "901")
        self.assertEqual(patch_arg.hire_date, date(2019, 1, 7))

    @patch("employee.router.service.update_employee")
    @patch("employee.router.service.get_employee")
    def test_update_employee_409_duplicate_document(self, mock_get, mock_update):
        from sqlalchemy.exc import IntegrityError
        mock_get.return_value = _row()
        mock_update.side_effect = IntegrityError("stmt", "params", Exception("dup"))

        resp = self.client.patch("/api/employees/1", json={"document_id": "100"})
        self.assertEqual(resp.status_code, 409, resp.text)
        self.assertEqual(resp.json()["detail"], "employee document already exists")

    def test_update_employee_rejects_salary_field(self):
        # salary changes go through PUT /hierarchy/{id}/salary
        resp = self.client.patch("/api/employees/1", json={"salary": "1.00"})
        self.assertEqual(resp.status_code, 422)

    def test_update_employee_rejects_manager_field(self):
        resp = self.client.patch("/api/employees/1", json={"manager_id": 3})
        self.assertEqual(resp.status_code, 422)

    # --- DELETE /{id} ---

    @patch("employee.router.service.delete_employee")
    @patch("employee.router.service.get_employee")
    def test_delete_employee_200(self, mock_get, mock_delete):
        mock_get.return_value = _row()
        mock_delete.return_value = True
        resp = self.client.delete("/api/employees/1")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json(), {"message": "employee deleted"})

    @patch("employee.router.service.delete_employee")
    @patch("employee.router.service.get_employee")
    def test_delete_employee_409_with_reports(self, mock_get, mock_delete):
        from fastapi import HTTPException
        mock_get.return_value = _row()
        mock_delete.side_effect = HTTPException(status_code=409, detail="employee has direct reports, reassign them first")
        resp = self.client.delete("/api/employees/1")
        self.assertEqual(resp.status_code, 409)

    @patch("employee.router.service.get_employee")
    def test_delete_employee_404_missing(self, mock_get):
        mock_get.return_value = None
        resp = self.client.delete("/api/employees/999")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"], "employee not found")


if __name__ == "__main__":
    unittest.main()
