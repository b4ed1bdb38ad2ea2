import uuid

from fastapi.testclient import TestClient

from app.main import app
from app.repositories.coupons import CouponRepository, get_coupon_repository

client = TestClient(app)


def test_http_error_shape():
    res = client.get("/api/v1/does-not-exist")
    assert res.status_code == 404
    body = res.json()
    assert set(body.keys()) == {"detail", "code", "request_id"}
    assert body["detail"] == "Not Found"
    assert body["code"] is None


def test_invalid_path_parameter_is_a_validation_error():
    res = client.get("/api/v1/cupons/not-a-uuid")
    assert res.status_code == 400
    assert res.json()["code"] == "validation_error"


def test_unexpected_failure_is_reported_as_internal_error():
    class BrokenRepository(CouponRepository):
        def __init__(self) -> None:
            pass

        async def find_by_id(self, coupon_id):
            raise ConnectionError("database unavailable")

    app.dependency_overrides[get_coupon_repository] = lambda: BrokenRepository()
    try:
        broken_client = TestClient(app, raise_server_exceptions=False)
        res = broken_client.get(f"/api/v1/cupons/{uuid.uuid4()}")
    finally:
        app.dependency_overrides.clear()

    assert res.status_code == 500
    body = res.json()
    assert body["code"] == "internal_error"
    assert "database unavailable" not in body["detail"]
