import pytest
import requests

from academy_console.api.client import ApiClient, ApiConfig
from academy_console.api.http_base import as_float, as_int, created_id, unwrap_item, unwrap_list
from academy_console.api.token_store import ACADEMY_ID_KEY, TOKEN_KEY, MemoryTokenStore
from academy_console.core.exceptions import ApiError, AuthenticationError, AuthorizationError, NotFoundError


@pytest.fixture
def api(fake_api):
    store = MemoryTokenStore({TOKEN_KEY: "tok-1", ACADEMY_ID_KEY: "7"})
    return ApiClient(ApiConfig(base_url="http://api.test/api/v1/", timeout=3), store, session=fake_api)


def test_requests_carry_token_and_academy(api, fake_api):
    fake_api.add("GET", "/students", {"data": [{"id": 1}]})

    assert api.get("/students", params={"status": "active", "search": "", "grade": None}) == {"data": [{"id": 1}]}

    call = fake_api.last("GET", "/students")
    assert call["headers"] == {"Authorization": "Bearer tok-1", "X-Academy-Id": "7"}
    assert call["params"] == {"status": "active"}
    assert fake_api.headers["Content-Type"] == "application/json"


def test_all_branches_header(fake_api):
    store = MemoryTokenStore({TOKEN_KEY: "tok-1", ACADEMY_ID_KEY: "all"})
    client = ApiClient(ApiConfig(base_url="http://api.test/api/v1"), store, session=fake_api)
    fake_api.add("GET", "/reports/dashboard", {})

    client.get("reports/dashboard")

    assert fake_api.last("GET", "/reports/dashboard")["headers"]["X-Academy-Id"] == "all"


def test_401_clears_token(api, fake_api):
    fake_api.fail("GET", "/auth/me", 401, {"message": "expired"})

    with pytest.raises(AuthenticationError):
        api.get("/auth/me")
    assert api.tokens.get(TOKEN_KEY) is None


def test_403_raises_authorization_error_with_api_message(api, fake_api):
    fake_api.fail("DELETE", "/students/3", 403, {"message": "권한이 없습니다"})

    with pytest.raises(AuthorizationError, match="권한이 없습니다"):
        api.delete("/students/3")
    assert api.tokens.get(TOKEN_KEY) == "tok-1"


def test_404_is_not_found(api):
    with pytest.raises(NotFoundError) as e:
        api.get("/nowhere")
    assert e.value.status_code == 404


def test_other_errors_carry_message(api, fake_api):
    fake_api.fail("POST", "/payments", 422, {"error": "금액이 올바르지 않습니다"})

    with pytest.raises(ApiError, match="금액이 올바르지 않습니다") as e:
        api.post("/payments", {"amount": -1})
    assert e.value.status_code == 422
    assert fake_api.last("POST", "/payments")["json"] == {"amount": -1}


def test_transport_failure_becomes_api_error(api, fake_api):
    fake_api.add("GET", "/students", requests.exceptions.ConnectionError("refused"))

    with pytest.raises(ApiError):
        api.get("/students")


def test_empty_body_is_none(api, fake_api):
    fake_api.add("PUT", "/settings", None)

    assert api.put("/settings", {"name": "x"}) is None


def test_download_reads_filename(api, fake_api):
    fake_api.attach("/payments/export", b"PK\x03\x04", filename="payments-2026-10.xlsx", mimetype="application/vnd.ms-excel; charset=binary")

    download = api.download("/payments/export", default_filename="payments.xlsx")

    assert download.filename == "payments-2026-10.xlsx"
    assert download.mimetype == "application/vnd.ms-excel"
    assert download.content == b"PK\x03\x04"


def test_unwrap_helpers():
    assert unwrap_list({"data": [1, 2], "total": 2}) == [1, 2]
    assert unwrap_list({"items": [3]}) == [3]
    assert unwrap_list({"message": "x"}) == []
    assert unwrap_list(None) == []
    assert unwrap_item({"data": {"id": 4}}) == {"id": 4}
    assert unwrap_item([1]) is None
    assert created_id({"data": {"id": "9"}}) == 9
    assert as_int("x", 3) == 3
    assert as_int("1500000.00") == 1500000
    assert as_float("") is None
    assert as_float("1.5") == 1.5
