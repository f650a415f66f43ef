from wheelapi.models.account import AccountRole


class TestAdminRoutes:
    """관리자 라우터 테스트"""

    def test_user_cannot_adjust_points(self, client, auth_header):
        response = client.post(
            "/api/v1/admin/accounts/user-1/points",
            json={"amount": 100, "reason": "Self grant"},
            headers=auth_header("user-1"),
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "AUTH_002"

    def test_staff_cannot_run_jobs(self, client, auth_header):
        response = client.post(
            "/api/v1/admin/jobs/reset-points",
            json={},
            headers=auth_header("staff-1", role=AccountRole.STAFF),
        )

        assert response.status_code == 403

    def test_adjust_unknown_account(self, client, auth_header):
        response = client.post(
            "/api/v1/admin/accounts/ghost/points",
            json={"amount": 100, "reason": "Bonus"},
            headers=auth_header("admin-1", role=AccountRole.ADMIN),
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ACCOUNT_001"

    def test_negative_adjustment_beyond_balance(self, client, auth_header):
        client.get("/api/v1/accounts/me", headers=auth_header("user-1"))

        response = client.post(
            "/api/v1/admin/accounts/user-1/points",
            json={"amount": -5, "reason": "Correction"},
            headers=auth_header("admin-1", role=AccountRole.ADMIN),
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "BALANCE_001"

    def test_run_job_twice(self, client, auth_header):
        # Given
        client.get("/api/v1/accounts/me", headers=auth_header("user-1"))
        client.get("/api/v1/accounts/me", headers=auth_header("user-2"))
        admin = auth_header("admin-1", role=AccountRole.ADMIN)
        body = {"params": {"campaign": "opening", "amount": 40}}

        # When
        first = client.post("/api/v1/admin/jobs/grant-bonus", json=body, headers=admin)
        second = client.post("/api/v1/admin/jobs/grant-bonus", json=body, headers=admin)

        # Then
        assert first.status_code == 200
        assert first.json()["migrated"] == 2
        assert second.json()["migrated"] == 0
        assert second.json()["skipped"] == 2
        me = client.get("/api/v1/accounts/me", headers=auth_header("user-1")).json()
        assert me["balance"] == 40

    def test_unknown_job(self, client, auth_header):
        response = client.post(
            "/api/v1/admin/jobs/drop-everything",
            json={},
            headers=auth_header("admin-1", role=AccountRole.ADMIN),
        )

        assert response.status_code == 404
        assert "grant-bonus" in response.json()["error"]["details"]["available"]

    def test_invalid_job_params(self, client, auth_header):
        response = client.post(
            "/api/v1/admin/jobs/rename-prizes",
            json={"params": {"mapping": {"A": "B", "B": "C"}}},
            headers=auth_header("admin-1", role=AccountRole.ADMIN),
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_001"

    def test_zero_adjustment_rejected(self, client, auth_header):
        client.get("/api/v1/accounts/me", headers=auth_header("user-1"))

        response = client.post(
            "/api/v1/admin/accounts/user-1/points",
            json={"amount": 0, "reason": "Nothing"},
            headers=auth_header("admin-1", role=AccountRole.ADMIN),
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_001"
        ledger = client.get("/api/v1/accounts/me/ledger", headers=auth_header("user-1")).json()
        assert ledger["total_count"] == 0

    def test_admin_reads_another_accounts_ledger(self, client, auth_header):
        # Given
        client.get("/api/v1/accounts/me", headers=auth_header("user-1", name="Ploy"))
        admin = auth_header("admin-1", role=AccountRole.ADMIN)
        for amount in (50, -20):
            client.post(
                "/api/v1/admin/accounts/user-1/points",
                json={"amount": amount, "reason": "Booth visit"},
                headers=admin,
            )

        # When
        ledger = client.get("/api/v1/admin/accounts/user-1/ledger", headers=admin)
        profile = client.get("/api/v1/admin/accounts/user-1", headers=admin)

        # Then
        assert ledger.status_code == 200
        data = ledger.json()
        assert data["balance"] == 30
        assert data["total_count"] == 2
        assert [e["delta_points"] for e in data["entries"]] == [-20, 50]
        assert profile.status_code == 200
        assert profile.json()["display_name"] == "Ploy"
        assert profile.json()["balance"] == 30

    def test_ledger_audit_is_admin_only(self, client, auth_header):
        client.get("/api/v1/accounts/me", headers=auth_header("user-1"))

        as_user = client.get("/api/v1/admin/accounts/user-1/ledger", headers=auth_header("user-2"))
        as_staff = client.get(
            "/api/v1/admin/accounts/user-1/ledger",
            headers=auth_header("staff-1", role=AccountRole.STAFF),
        )

        assert as_user.status_code == 403
        assert as_staff.status_code == 403

    def test_ledger_audit_unknown_account(self, client, auth_header):
        admin = auth_header("admin-1", role=AccountRole.ADMIN)

        ledger = client.get("/api/v1/admin/accounts/ghost/ledger", headers=admin)
        profile = client.get("/api/v1/admin/accounts/ghost", headers=admin)

        assert ledger.status_code == 404
        assert ledger.json()["error"]["code"] == "ACCOUNT_001"
        assert profile.status_code == 404
