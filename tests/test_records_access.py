"""Record routes: verb matrix, ownership-scoped reads/updates and ownership-plus-verb deletes."""

from tests.support import API, ApiTestCase


class RecordTestCase(ApiTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.add_user("root", "root@example.org", role="super_admin")
        self.add_user("boss", "boss@example.org", role="admin")
        self.add_user("sam", "sam@example.org", role="staff")
        self.add_user("fin", "fin@example.org", role="finance")
        self.owner_id = self.add_user("ana_r", "ana@example.org")
        self.add_user("bob_r", "bob@example.org")
        self.headers = {
            email.split("@")[0]: self.bearer(self.token_for(email))
            for email in (
                "root@example.org",
                "boss@example.org",
                "sam@example.org",
                "fin@example.org",
                "ana@example.org",
                "bob@example.org",
            )
        }
        self.client.cookies.clear()
        created = self.client.post(
            f"{API}/students",
            headers=self.headers["boss"],
            json={
                "id": "STU-1",
                "student_frf_name": "Kiran",
                "student_frf_owner": "ana@example.org",
                "date_of_birth": "2012-04-01",
            },
        )
        self.assertEqual(created.status_code, 201, created.text)


class TestVerbMatrix(RecordTestCase):

    def test_member_cannot_create(self) -> None:
        response = self.client.post(
            f"{API}/students",
            headers=self.headers["ana"],
            json={"id": "STU-2", "student_frf_name": "Ravi"},
        )
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["detail"], "Role 'member' not allowed to POST")

    def test_member_can_list(self) -> None:
        response = self.client.get(f"{API}/students", headers=self.headers["bob"])
        self.assertEqual(response.status_code, 200)
        self.assertEqual([r["id"] for r in response.json()["data"]], ["STU-1"])

    def test_finance_can_create(self) -> None:
        response = self.client.post(
            f"{API}/finance",
            headers=self.headers["fin"],
            json={"id": "FIN-1", "finance_report_frf_name": "Q1"},
        )
        self.assertEqual(response.status_code, 201, response.text)

    def test_created_record_carries_audit_ids(self) -> None:
        response = self.client.get(f"{API}/students/STU-1", headers=self.headers["boss"])
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertIsNotNone(body["created_by_user_id"])
        self.assertEqual(body["date_of_birth"], "2012-04-01")

    def test_audit_columns_are_read_only(self) -> None:
        response = self.client.patch(
            f"{API}/students/STU-1",
            headers=self.headers["boss"],
            json={"created_by_user_id": self.owner_id},
        )
        self.assertEqual(response.status_code, 400)

    def test_missing_required_field(self) -> None:
        response = self.client.post(
            f"{API}/students", headers=self.headers["sam"], json={"id": "STU-3"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("student_frf_name", response.json()["detail"])

    def test_duplicate_id_conflict(self) -> None:
        response = self.client.post(
            f"{API}/students",
            headers=self.headers["sam"],
            json={"id": "STU-1", "student_frf_name": "Again"},
        )
        self.assertEqual(response.status_code, 409)


class TestOwnership(RecordTestCase):

    def test_owner_reads_and_updates(self) -> None:
        read = self.client.get(f"{API}/students/STU-1", headers=self.headers["ana"])
        self.assertEqual(read.status_code, 200)
        updated = self.client.put(
            f"{API}/students/STU-1", headers=self.headers["ana"], json={"school": "Govt. High"}
        )
        self.assertEqual(updated.status_code, 200, updated.text)
        self.assertEqual(updated.json()["school"], "Govt. High")
        self.assertEqual(updated.json()["modified_by_user_id"], self.owner_id)

    def test_owner_by_id(self) -> None:
        self.client.patch(
            f"{API}/students/STU-1",
            headers=self.headers["boss"],
            json={"student_frf_owner": str(self.owner_id)},
        )
        response = self.client.get(f"{API}/students/STU-1", headers=self.headers["ana"])
        self.assertEqual(response.status_code, 200)

    def test_other_member_denied(self) -> None:
        response = self.client.get(f"{API}/students/STU-1", headers=self.headers["bob"])
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["detail"], "Forbidden: not owner")

    def test_missing_record_is_not_found(self) -> None:
        response = self.client.get(f"{API}/students/NOPE", headers=self.headers["ana"])
        self.assertEqual(response.status_code, 404)

    def test_staff_bypasses_ownership(self) -> None:
        response = self.client.patch(
            f"{API}/students/STU-1", headers=self.headers["sam"], json={"section": "B"}
        )
        self.assertEqual(response.status_code, 200)

    def test_finance_not_owner_denied(self) -> None:
        response = self.client.get(f"{API}/students/STU-1", headers=self.headers["fin"])
        self.assertEqual(response.status_code, 403)


class TestDeleteRecord(RecordTestCase):

    def test_owner_member_still_needs_delete_verb(self) -> None:
        response = self.client.delete(f"{API}/students/STU-1", headers=self.headers["ana"])
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["detail"], "Role 'member' not allowed to DELETE")

    def test_staff_cannot_delete(self) -> None:
        response = self.client.delete(f"{API}/students/STU-1", headers=self.headers["sam"])
        self.assertEqual(response.status_code, 403)

    def test_admin_deletes(self) -> None:
        response = self.client.delete(f"{API}/students/STU-1", headers=self.headers["boss"])
        self.assertEqual(response.status_code, 200)
        gone = self.client.get(f"{API}/students/STU-1", headers=self.headers["boss"])
        self.assertEqual(gone.status_code, 404)

    def test_super_admin_deletes(self) -> None:
        response = self.client.delete(f"{API}/students/STU-1", headers=self.headers["root"])
        self.assertEqual(response.status_code, 200)


class TestPayloadTypes(RecordTestCase):
    """JSON arrays and objects are rejected instead of stored as their string form."""

    def test_list_id_rejected(self) -> None:
        response = self.client.post(
            f"{API}/students",
            headers=self.headers["boss"],
            json={"id": ["a"], "student_frf_name": "Ravi"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Invalid value for id: expected a scalar")

    def test_object_name_rejected(self) -> None:
        response = self.client.post(
            f"{API}/students",
            headers=self.headers["boss"],
            json={"id": "STU-9", "student_frf_name": {"x": 1}},
        )
        self.assertEqual(response.status_code, 400)
        listed = self.client.get(f"{API}/students", headers=self.headers["boss"])
        self.assertEqual([r["id"] for r in listed.json()["data"]], ["STU-1"])

    def test_boolean_in_text_column_rejected(self) -> None:
        response = self.client.patch(
            f"{API}/students/STU-1", headers=self.headers["boss"], json={"school": True}
        )
        self.assertEqual(response.status_code, 400)

    def test_number_in_text_column_is_stored_as_text(self) -> None:
        response = self.client.patch(
            f"{API}/students/STU-1", headers=self.headers["boss"], json={"section": 7}
        )
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["section"], "7")

    def test_invalid_date_rejected(self) -> None:
        response = self.client.patch(
            f"{API}/students/STU-1",
            headers=self.headers["boss"],
            json={"date_of_birth": "not-a-date"},
        )
        self.assertEqual(response.status_code, 400)


class TestRevokedTokenOnRecordRoutes(RecordTestCase):

    def test_logged_out_token_rejected_on_list_and_read(self) -> None:
        headers = self.headers["ana"]
        self.assertEqual(self.client.post(f"{API}/users/logout", headers=headers).status_code, 200)
        for response in (
            self.client.get(f"{API}/students", headers=headers),
            self.client.get(f"{API}/students/STU-1", headers=headers),
        ):
            self.assertEqual(response.status_code, 401)
            self.assertEqual(response.json()["detail"], "Token revoked. Please log in again.")
