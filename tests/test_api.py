"""
API Tests - HTTP 엔드포인트 / 응답 형식 / 상태 코드 테스트
"""
import pytest

from app.config import get_settings
from conftest import ADMIN_ID, MEMBER_ID, OTHER_MEMBER_ID, auth_header


def issue_pass(client, headers, member_id=MEMBER_ID):
    return client.post("/api/passes", json={"memberId": member_id}, headers=headers)


def mark(client, headers, session_date, member_id=MEMBER_ID):
    return client.post(
        "/api/attendance",
        json={"memberId": member_id, "sessionDate": session_date},
        headers=headers
    )


class TestStatus:
    """서비스 상태"""

    def test_status(self, client):
        response = client.get("/api/status")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["store_backend"] == "memory"
        assert data["pass_total_sessions"] == 8
        assert data["pass_completion_policy"] == "deactivate"


class TestCreatePassAPI:
    """POST /api/passes"""

    def test_create(self, client, admin_headers):
        response = issue_pass(client, admin_headers)
        assert response.status_code == 200

        data = response.json()
        assert data["success"] is True
        assert data["pass"]["member_id"] == MEMBER_ID
        assert data["pass"]["total_sessions"] == 8
        assert data["pass"]["used_sessions"] == 0
        assert data["pass"]["is_active"] is True

    def test_no_token(self, client):
        response = client.post("/api/passes", json={"memberId": MEMBER_ID})
        assert response.status_code == 401
        assert response.json() == {"error": "Missing or invalid authorization header"}

    def test_invalid_token(self, client):
        response = issue_pass(client, {"Authorization": "Bearer broken"})
        assert response.status_code == 401
        assert "error" in response.json()

    def test_non_admin(self, client, member_headers):
        response = issue_pass(client, member_headers)
        assert response.status_code == 403
        assert response.json() == {"error": "Admin access required"}

    def test_missing_member_id(self, client, admin_headers):
        response = client.post("/api/passes", json={}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Missing memberId"}

    def test_malformed_json(self, client, admin_headers):
        response = client.post(
            "/api/passes",
            content="{\"memberId\": ",
            headers={**admin_headers, "Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}

    def test_first_access_non_admin(self, client, seeded_store):
        """최초 접속 사용자는 일반 회원으로 생성되고 관리자 권한 없음"""
        headers = auth_header("fresh-user", email="fresh@nomad.test")
        response = issue_pass(client, headers)
        assert response.status_code == 403
        assert response.json() == {"error": "Admin access required"}
        assert seeded_store.get_member("fresh-user")["is_admin"] is False

    def test_unknown_member(self, client, admin_headers):
        response = issue_pass(client, admin_headers, member_id="ghost")
        assert response.status_code == 404

    def test_duplicate_active_pass(self, client, admin_headers):
        issue_pass(client, admin_headers)
        response = issue_pass(client, admin_headers)
        assert response.status_code == 409
        assert response.json() == {"error": "A member can only have one active pass at a time."}


class TestMarkAttendanceAPI:
    """POST /api/attendance"""

    def test_mark(self, client, admin_headers):
        issue_pass(client, admin_headers)
        response = mark(client, admin_headers, "2026-10-05")
        assert response.status_code == 200

        data = response.json()
        assert data["success"] is True
        assert data["attendance"]["session_date"] == "2026-10-05"
        assert data["passStatus"] == {
            "used_sessions": 1,
            "remaining_sessions": 7,
            "is_active": True,
        }
        assert data["passDeleted"] is False

    def test_missing_fields(self, client, admin_headers):
        response = client.post("/api/attendance", json={}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Missing memberId or sessionDate"}

    def test_invalid_date(self, client, admin_headers):
        response = mark(client, admin_headers, "not-a-date")
        assert response.status_code == 400

    def test_numeric_date_rejected(self, client, admin_headers, seeded_store):
        """숫자 sessionDate 는 timestamp 로 해석하지 않고 거부"""
        pass_id = issue_pass(client, admin_headers).json()["pass"]["id"]
        response = mark(client, admin_headers, 0)
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid sessionDate"}
        assert seeded_store.list_all_attendance() == []
        assert seeded_store.get_pass(pass_id)["used_sessions"] == 0

    def test_no_active_pass(self, client, admin_headers):
        response = mark(client, admin_headers, "2026-10-05")
        assert response.status_code == 404
        assert response.json() == {"error": "No active pass found for this member"}

    def test_duplicate_date(self, client, admin_headers):
        issue_pass(client, admin_headers)
        mark(client, admin_headers, "2026-10-05")
        response = mark(client, admin_headers, "2026-10-05")
        assert response.status_code == 409

    def test_non_admin(self, client, admin_headers, member_headers):
        issue_pass(client, admin_headers)
        response = mark(client, member_headers, "2026-10-05")
        assert response.status_code == 403

    def test_final_session_deactivates(self, client, admin_headers):
        issue_pass(client, admin_headers)
        for day in range(1, 8):
            mark(client, admin_headers, f"2026-10-{day:02d}")

        response = mark(client, admin_headers, "2026-10-08")
        data = response.json()
        assert data["passStatus"]["used_sessions"] == 8
        assert data["passStatus"]["remaining_sessions"] == 0
        assert data["passStatus"]["is_active"] is False
        assert data["passDeleted"] is False

        assert mark(client, admin_headers, "2026-10-09").status_code == 404

    def test_final_session_purges(self, client, admin_headers, seeded_store, monkeypatch):
        monkeypatch.setenv("PASS_COMPLETION_POLICY", "purge")
        monkeypatch.setenv("PASS_TOTAL_SESSIONS", "2")
        get_settings.cache_clear()

        pass_id = issue_pass(client, admin_headers).json()["pass"]["id"]
        mark(client, admin_headers, "2026-10-01")
        response = mark(client, admin_headers, "2026-10-02")

        data = response.json()
        assert data["passStatus"]["remaining_sessions"] == 0
        assert data["passDeleted"] is True
        assert seeded_store.get_pass(pass_id) is None


class TestAttendanceQueryAPI:
    """GET /api/passes/{pass_id}/attendance, /calendar"""

    @pytest.fixture
    def pass_id(self, client, admin_headers):
        pass_id = issue_pass(client, admin_headers).json()["pass"]["id"]
        for day in ("2026-10-17", "2026-10-03"):
            mark(client, admin_headers, day)
        return pass_id

    def test_owner_reads_dates(self, client, member_headers, pass_id):
        response = client.get(f"/api/passes/{pass_id}/attendance", headers=member_headers)
        assert response.status_code == 200
        assert response.json() == {"pass_id": pass_id, "dates": ["2026-10-03", "2026-10-17"]}

    def test_admin_reads_dates(self, client, admin_headers, pass_id):
        response = client.get(f"/api/passes/{pass_id}/attendance", headers=admin_headers)
        assert len(response.json()["dates"]) == 2

    def test_other_member_forbidden(self, client, other_headers, pass_id):
        response = client.get(f"/api/passes/{pass_id}/attendance", headers=other_headers)
        assert response.status_code == 403
        assert response.json() == {"error": "You can only view your own attendance"}

    def test_unknown_pass(self, client, member_headers):
        response = client.get("/api/passes/unknown/attendance", headers=member_headers)
        assert response.status_code == 200
        assert response.json()["dates"] == []

    def test_requires_login(self, client, pass_id):
        response = client.get(f"/api/passes/{pass_id}/attendance")
        assert response.status_code == 401

    def test_first_access_provisions_member(self, client, seeded_store):
        """회원 레코드가 없는 로그인 사용자도 조회 가능, 최초 접속 시 회원 생성"""
        headers = auth_header("fresh-user", email="fresh@nomad.test")
        response = client.get("/api/passes/unknown/attendance", headers=headers)
        assert response.status_code == 200
        assert response.json()["dates"] == []

        member = seeded_store.get_member("fresh-user")
        assert member["full_name"] == "fresh"
        assert member["is_admin"] is False

    def test_calendar(self, client, member_headers, pass_id):
        response = client.get(
            f"/api/passes/{pass_id}/calendar",
            params={"year": 2026, "month": 10},
            headers=member_headers
        )
        assert response.status_code == 200

        data = response.json()
        assert data["year"] == 2026
        assert data["month"] == 10
        assert data["weekdays"][0] == "Mon"
        assert data["attended_count"] == 2
        attended = [cell["day"] for week in data["weeks"] for cell in week if cell["attended"]]
        assert attended == [3, 17]

    def test_calendar_invalid_month(self, client, member_headers, pass_id):
        response = client.get(
            f"/api/passes/{pass_id}/calendar",
            params={"year": 2026, "month": 13},
            headers=member_headers
        )
        assert response.status_code == 400


class TestMemberAPI:
    """/api/me, /api/admin/members"""

    def test_me_existing(self, client, member_headers):
        response = client.get("/api/me", headers=member_headers)
        assert response.status_code == 200
        assert response.json()["full_name"] == "Kim Minji"

    def test_me_provisions_new_member(self, client, seeded_store):
        headers = auth_header("new-user", email="newbie@nomad.test", full_name="New Bie")
        response = client.get("/api/me", headers=headers)

        assert response.status_code == 200
        assert response.json()["full_name"] == "New Bie"
        assert response.json()["is_admin"] is False
        assert seeded_store.get_member("new-user") is not None

    def test_me_name_from_email(self, client):
        headers = auth_header("mail-user", email="surfer@nomad.test")
        assert client.get("/api/me", headers=headers).json()["full_name"] == "surfer"

    def test_dashboard_without_pass(self, client, member_headers):
        response = client.get("/api/me/dashboard", params={"year": 2026, "month": 10}, headers=member_headers)
        assert response.status_code == 200

        data = response.json()
        assert data["pass"] is None
        assert data["remaining_sessions"] == 0
        assert data["is_admin"] is False
        assert data["calendar"]["month"] == 10

    def test_dashboard_with_pass(self, client, admin_headers, member_headers):
        issue_pass(client, admin_headers)
        mark(client, admin_headers, "2026-10-05")

        data = client.get(
            "/api/me/dashboard",
            params={"year": 2026, "month": 10},
            headers=member_headers
        ).json()
        assert data["pass"]["used_sessions"] == 1
        assert data["remaining_sessions"] == 7
        assert data["sessions"] == [True] + [False] * 7
        assert data["attendance_dates"] == ["2026-10-05"]
        assert data["calendar"]["attended_count"] == 1

    def test_admin_member_list(self, client, admin_headers):
        issue_pass(client, admin_headers)
        response = client.get("/api/admin/members", headers=admin_headers)
        assert response.status_code == 200

        members = response.json()
        assert [m["full_name"] for m in members] == ["Alex Park", "Kim Minji"]
        assert all(m["id"] != ADMIN_ID for m in members)
        assert len(members[1]["passes"]) == 1
        assert members[0]["passes"] == []

    def test_admin_member_list_forbidden(self, client, member_headers):
        assert client.get("/api/admin/members", headers=member_headers).status_code == 403

    def test_member_detail_latest_pass(self, client, admin_headers):
        """완료된 패스도 최근 패스로 표시"""
        issue_pass(client, admin_headers, member_id=OTHER_MEMBER_ID)
        for day in range(1, 9):
            mark(client, admin_headers, f"2026-10-{day:02d}", member_id=OTHER_MEMBER_ID)

        data = client.get(
            f"/api/admin/members/{OTHER_MEMBER_ID}",
            params={"year": 2026, "month": 10},
            headers=admin_headers
        ).json()
        assert data["member"]["id"] == OTHER_MEMBER_ID
        assert data["pass"]["is_active"] is False
        assert data["remaining_sessions"] == 0
        assert len(data["attendance_dates"]) == 8

    def test_member_detail_unknown(self, client, admin_headers):
        response = client.get("/api/admin/members/ghost", headers=admin_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Member not found"}


class TestBackupAPI:
    """POST /api/backup"""

    def test_backup_download(self, client, admin_headers):
        issue_pass(client, admin_headers)
        response = client.post("/api/backup", headers=admin_headers)
        assert response.status_code == 200

        data = response.json()
        backup_day = data["backup_timestamp"][:10]
        assert response.headers["content-disposition"] == (
            f'attachment; filename="nomad-spirit-backup-{backup_day}.json"'
        )

        assert data["summary"] == {
            "total_passes": 1,
            "total_members": 3,
            "total_attendance_records": 0,
        }
        assert data["passes"][0]["member_full_name"] == "Kim Minji"

    def test_backup_forbidden(self, client, member_headers):
        assert client.post("/api/backup", headers=member_headers).status_code == 403
