import json
import logging

from app.core.logging_config import JsonFormatter, request_id_ctx_var


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("app.services.coupons", logging.INFO, __file__, 10, "coupon_created", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extras_as_top_level_keys() -> None:
    payload = json.loads(JsonFormatter().format(_record(coupon_id="abc", coupon_code="ABC123", fields=["published"])))

    assert payload["message"] == "coupon_created"
    assert payload["logger"] == "app.services.coupons"
    assert payload["level"] == "INFO"
    assert payload["coupon_code"] == "ABC123"
    assert payload["fields"] == ["published"]


def test_json_formatter_stringifies_unknown_types() -> None:
    from decimal import Decimal

    payload = json.loads(JsonFormatter().format(_record(discount=Decimal("0.50"))))

    assert payload["discount"] == "0.50"


def test_json_formatter_reports_request_fields() -> None:
    token = request_id_ctx_var.set("req-1")
    try:
        record = _record(request_id=request_id_ctx_var.get(), path="/api/v1/cupons", status_code=201)
        payload = json.loads(JsonFormatter().format(record))
    finally:
        request_id_ctx_var.reset(token)

    assert payload["request_id"] == "req-1"
    assert payload["path"] == "/api/v1/cupons"
    assert payload["status_code"] == 201
