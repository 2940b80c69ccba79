"""The application imports and every model maps, including the shared record audit columns."""

import unittest

from app.core.ownership import RECORD_OWNERSHIP
from app.main import app
from app.models import Base


class TestAppImport(unittest.TestCase):

    def test_routes_registered(self) -> None:
        paths = {route.path for route in app.routes}
        self.assertIn("/api/v1/users/login", paths)
        self.assertIn("/api/v1/health/", paths)
        for entity in RECORD_OWNERSHIP.entities():
            self.assertIn(f"/api/v1/{entity}/{{record_id}}", paths)

    def test_record_tables_reference_users(self) -> None:
        for entity in RECORD_OWNERSHIP.entities():
            table = RECORD_OWNERSHIP.table(entity)
            for column in ("created_by_user_id", "modified_by_user_id"):
                foreign_keys = list(table.c[column].foreign_keys)
                self.assertEqual(len(foreign_keys), 1, f"{table.name}.{column}")
                self.assertEqual(foreign_keys[0].column.table.name, "users")
                self.assertEqual(foreign_keys[0].ondelete, "RESTRICT")

    def test_each_record_table_has_its_own_audit_columns(self) -> None:
        students = Base.metadata.tables["students"]
        donors = Base.metadata.tables["donors"]
        self.assertIsNot(students.c.created_by_user_id, donors.c.created_by_user_id)
