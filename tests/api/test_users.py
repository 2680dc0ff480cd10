"""
Tests for the user endpoints.

These test the HTTP layer: status codes, response bodies
and error mapping. Business logic is tested in
tests/services/.
"""


class TestCreateUser:

    def test_new_user_returns_201(self, client):
        response = client.post("/test/users", json={"email": "u@x.com"})
        assert response.status_code == 201
        data = response.json()
        assert data["ok"] is True
        assert data["existed"] is False
        assert data["user"]["email"] == "u@x.com"
        assert data["user"]["id"] is not None

    def test_existing_user_returns_200(self, client):
        client.post("/test/users", json={"email": "u@x.com"})
        response = client.post("/test/users", json={"email": "  U@X.com "})
        assert response.status_code == 200
        assert response.json()["existed"] is True

    def test_missing_email_returns_400(self, client):
        response = client.post("/test/users", json={})
        assert response.status_code == 400
        assert response.json()["detail"] == "email_required"

    def test_blank_email_returns_400(self, client):
        response = client.post("/test/users", json={"email": "   "})
        assert response.status_code == 400


class TestGetTotal:

    def test_new_user_total_is_zero(self, client):
        client.post("/test/users", json={"email": "u@x.com"})
        response = client.get("/test/users/u@x.com/total")
        assert response.status_code == 200
        assert response.json() == {"ok": True, "email": "u@x.com", "total": 0}

    def test_lookup_is_case_insensitive(self, client):
        client.post("/test/users", json={"email": "u@x.com"})
        response = client.get("/test/users/U@X.COM/total")
        assert response.status_code == 200
        assert response.json()["email"] == "u@x.com"

    def test_unknown_user_returns_404(self, client):
        response = client.get("/test/users/ghost@x.com/total")
        assert response.status_code == 404
        assert response.json()["detail"] == "user_not_found"


class TestGetEntries:

    def test_unknown_user_returns_404(self, client):
        response = client.get("/test/users/ghost@x.com/entries")
        assert response.status_code == 404

    def test_new_user_has_no_entries(self, client):
        client.post("/test/users", json={"email": "u@x.com"})
        response = client.get("/test/users/u@x.com/entries")
        assert response.status_code == 200
        assert response.json() == []

    def test_entries_carry_utc_timestamps(self, client):
        client.post("/test/users", json={"email": "u@x.com"})
        client.post(
            "/webhooks/gleam/post-entry",
            params={"token": "test-webhook-token"},
            json={
                "campaign": {"key": "camp1"},
                "user": {"email": "u@x.com"},
                "entry": {"id": "e1", "action": "subscribe_newsletter"},
            },
        )

        entries = client.get("/test/users/u@x.com/entries").json()

        assert len(entries) == 1
        assert entries[0]["created_at"].endswith("Z")


class TestTimestamps:

    def test_created_user_timestamp_is_utc(self, client):
        response = client.post("/test/users", json={"email": "u@x.com"})
        assert response.json()["user"]["created_at"].endswith("Z")


class TestStorageFailure:

    def test_total_storage_failure_returns_500(self, client, monkeypatch):
        from growth_ledger.services.exceptions import StorageFailure
        from growth_ledger.services.ledger_service import LedgerService

        def broken_total(self, user_id):
            raise StorageFailure("db down")

        monkeypatch.setattr(LedgerService, "get_total", broken_total)
        client.post("/test/users", json={"email": "u@x.com"})

        response = client.get("/test/users/u@x.com/total")

        assert response.status_code == 500
        assert response.json()["detail"] == "server_error"

    def test_entries_storage_failure_returns_500(self, client, monkeypatch):
        from growth_ledger.services.exceptions import StorageFailure
        from growth_ledger.services.user_service import UserService

        def broken_find(self, email):
            raise StorageFailure("db down")

        monkeypatch.setattr(UserService, "find_by_email", broken_find)

        response = client.get("/test/users/u@x.com/entries")

        assert response.status_code == 500
        assert response.json()["detail"] == "server_error"
