import pytest

from academy_console.api.token_store import TOKEN_KEY

PUBLIC_FORM = {
    "data": {
        "academy_name": "맥스핏 체대입시",
        "duration_minutes": 30,
        "fields": {"school": True},
        "weekly_hours": {"mon": ["09:00-10:00"]},
        "blocked_slots": [{"date": "2030-01-14"}],
    }
}

# Mondays far enough ahead to never be in the past.
OPEN_MONDAY = "2030-01-07"
BLOCKED_MONDAY = "2030-01-14"


def test_protected_page_redirects_to_login(client):
    response = client.get("/students")

    location = response.headers["Location"]
    assert response.status_code == 302
    assert location.startswith("/login?next=")
    assert location.endswith("students")


def test_login_page_renders(client):
    response = client.get("/login")

    assert response.status_code == 200
    assert "로그인" in response.get_data(as_text=True)


def test_login_stores_token_and_follows_next(client, fake_api, tokens):
    fake_api.add(
        "POST",
        "/auth/login",
        {"token": "tok-9", "user": {"id": 3, "email": "o@a.t", "name": "원장", "role": "owner", "academy_id": 7}},
    )

    response = client.post("/login?next=/students", data={"email": "o@a.t", "password": "secret1"})

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/students")
    assert tokens.get(TOKEN_KEY) == "tok-9"


def test_failed_login_rerenders_with_401(client, fake_api):
    fake_api.fail("POST", "/auth/login", 400, {"message": "bad"})

    response = client.post("/login", data={"email": "o@a.t", "password": "nope"})

    assert response.status_code == 401
    assert "이메일 또는 비밀번호가 올바르지 않습니다" in response.get_data(as_text=True)


@pytest.mark.parametrize("target", ["//evil.test/", "/\\evil.test", "https://evil.test/", "/\t/evil.test"])
def test_login_ignores_offsite_next(client, fake_api, target):
    fake_api.add("POST", "/auth/login", {"token": "t", "user": {"id": 3, "email": "o@a.t", "role": "owner"}})

    response = client.post("/login", query_string={"next": target}, data={"email": "o@a.t", "password": "x"})

    assert response.headers["Location"].endswith("/dashboard")


def test_dashboard_for_signed_in_owner(client, fake_api, sign_in):
    sign_in()
    fake_api.add("GET", "/reports/dashboard", {"total_students": 42, "monthly_trend": [{"month": "2026-09", "amount": 1200000}]})

    response = client.get("/dashboard")

    body = response.get_data(as_text=True)
    assert response.status_code == 200
    assert "42" in body
    assert "₩1,200,000" in body


def test_dashboard_handles_decimal_string_amounts(client, fake_api, sign_in):
    sign_in()
    fake_api.add(
        "GET",
        "/reports/dashboard",
        {"monthly_income": "1500000.00", "monthly_trend": [{"month": "2026-09", "amount": "750000.00"}, {"month": "2026-10", "amount": "1500000.00"}]},
    )

    response = client.get("/dashboard")

    body = response.get_data(as_text=True)
    assert response.status_code == 200
    assert "₩1,500,000" in body
    assert "₩750,000" in body
    assert "width: 50.0%" in body


def test_student_list_renders_rows(client, fake_api, sign_in):
    sign_in()
    fake_api.add("GET", "/students", {"data": [{"id": 5, "name": "김학생", "phone": "010-1111-2222", "status": "active", "time_slot": "evening"}]})

    response = client.get("/students?status=active")

    body = response.get_data(as_text=True)
    assert response.status_code == 200
    assert "김학생" in body
    assert "저녁" in body
    assert fake_api.last("GET", "/students")["params"]["status"] == "active"


def test_page_without_permission_is_403(client, sign_in):
    sign_in({"id": 4, "email": "t@a.t", "name": "강사", "role": "teacher", "academy_id": 7, "permissions": {"students": {"view": True}}, "modules": ["core"]})

    response = client.get("/payments")

    assert response.status_code == 403


def test_api_403_renders_forbidden_page(client, fake_api, sign_in):
    sign_in()
    fake_api.fail("GET", "/reports/dashboard", 403, {"message": "이 지점의 권한이 없습니다"})

    response = client.get("/dashboard")

    assert response.status_code == 403
    assert "이 지점의 권한이 없습니다" in response.get_data(as_text=True)


def test_expired_session_sends_back_to_login(client, fake_api, sign_in, tokens):
    sign_in()
    fake_api.fail("GET", "/reports/dashboard", 401)

    response = client.get("/dashboard")

    assert response.status_code == 302
    assert "/login" in response.headers["Location"]
    assert tokens.get(TOKEN_KEY) is None


def test_switch_branch_redirects_back(client, sign_in, tokens):
    sign_in()

    response = client.post("/branches/switch", data={"branch_id": "all", "next": "/students"})

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/students")
    assert tokens.get("activeAcademyId") == "all"


def test_switch_branch_refreshes_the_signed_in_user(client, fake_api, sign_in, tokens):
    sign_in({"id": 4, "email": "t@a.t", "name": "강사", "role": "teacher", "academy_id": 7, "permissions": {"students": {"view": True}}, "modules": ["core"]})
    fake_api.add("GET", "/auth/me", {"data": {"id": 4, "email": "t@a.t", "name": "강사", "role": "teacher", "academy_id": 8, "permissions": {}, "modules": ["core"]}})

    client.post("/branches/switch", data={"branch_id": "8", "next": "/dashboard"})
    response = client.get("/students")

    assert fake_api.last("GET", "/auth/me")["headers"]["X-Academy-Id"] == "8"
    assert tokens.get("user")["academy_id"] == 8
    assert response.status_code == 403


def test_unknown_booking_slug_is_404(client):
    response = client.get("/c/nowhere")

    assert response.status_code == 404
    assert "존재하지 않는 페이지입니다" in response.get_data(as_text=True)


def test_booking_page_renders_without_login(client, fake_api):
    fake_api.add("GET", "/consultations/public/maxfit", PUBLIC_FORM)

    response = client.get("/c/maxfit")

    assert response.status_code == 200
    assert "맥스핏 체대입시" in response.get_data(as_text=True)


def test_booking_slots_json(client, fake_api):
    fake_api.add("GET", "/consultations/public/maxfit", PUBLIC_FORM)

    open_day = client.get(f"/c/maxfit/slots?date={OPEN_MONDAY}").get_json()
    blocked_day = client.get(f"/c/maxfit/slots?date={BLOCKED_MONDAY}").get_json()

    assert open_day == {"date": OPEN_MONDAY, "available": True, "slots": ["09:00", "09:30"]}
    assert blocked_day == {"date": BLOCKED_MONDAY, "available": False, "slots": []}


def test_booking_slots_bad_date(client, fake_api):
    fake_api.add("GET", "/consultations/public/maxfit", PUBLIC_FORM)

    response = client.get("/c/maxfit/slots?date=soon")

    assert response.status_code == 400


def test_booking_submit_redirects_to_success(client, fake_api):
    fake_api.add("GET", "/consultations/public/maxfit", PUBLIC_FORM)
    fake_api.add("POST", "/consultations/public/maxfit", {"data": {"reservation_number": "C2030-0001"}})

    response = client.post(
        "/c/maxfit",
        data={"name": "김학생", "phone": "010-1234-5678", "preferred_date": OPEN_MONDAY, "preferred_time": "09:30"},
    )

    assert response.status_code == 302
    assert "reservation=C2030-0001" in response.headers["Location"]
    sent = fake_api.last("POST", "/consultations/public/maxfit")
    assert sent["json"]["preferred_time"] == "09:30"
    assert "Authorization" not in sent["headers"]


def test_booking_submit_with_closed_time_stays_on_form(client, fake_api):
    fake_api.add("GET", "/consultations/public/maxfit", PUBLIC_FORM)

    response = client.post(
        "/c/maxfit",
        data={"name": "김학생", "phone": "010-1234-5678", "preferred_date": OPEN_MONDAY, "preferred_time": "15:00"},
    )

    assert response.status_code == 200
    assert "선택한 시간은 상담이 불가능합니다" in response.get_data(as_text=True)
    assert fake_api.last("POST", "/consultations/public/maxfit") is None


def test_unknown_reservation(client):
    response = client.get("/consultation/C0000")

    assert response.status_code == 404


def test_unknown_scoreboard_is_404(client):
    response = client.get("/board/nowhere")

    assert response.status_code == 404
    assert "기록판을 찾을 수 없습니다" in response.get_data(as_text=True)


def test_scoreboard_renders_categories(client, fake_api):
    fake_api.add(
        "GET",
        "/public/scoreboard/maxfit",
        {
            "title": "10월 기록판",
            "categories": [{"name": "제자리멀리뛰기", "top_scores": [{"student_name": "박선수", "value": 285, "unit": "cm"}]}],
        },
    )

    response = client.get("/board/maxfit")

    body = response.get_data(as_text=True)
    assert response.status_code == 200
    assert "10월 기록판" in body
    assert "박선수" in body


def test_permission_cell_toggle_saves_full_grid(client, fake_api, sign_in):
    sign_in()
    fake_api.add("GET", "/staff/2", {"data": {"id": 2, "name": "강사", "email": "t@a.t", "role": "teacher", "permissions": {"students": {"view": True}}}})
    fake_api.add("PUT", "/staff/2/permissions", {"success": True})

    response = client.post("/staff/2/permissions/toggle", data={"cell": "payments:view"})

    saved = fake_api.last("PUT", "/staff/2/permissions")["json"]["permissions"]
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/staff/2/permissions")
    assert saved["payments"]["view"] is True
    assert saved["students"]["view"] is True
