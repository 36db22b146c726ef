"""Unit tests for the shared logging formatter and timestamp helpers."""

import json
import logging
import sys
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from libs.common.datetime_utils import compact_timestamp, utc_now
from libs.common.logging import JsonFormatter


def _record(message, *args, **extra):
    record = logging.LogRecord(
        name="services.pos_service.services.order_ops",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=args,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.unit
def test_json_formatter_emits_one_object_with_context():
    shop_id = uuid.uuid4()
    record = _record(
        "Created order %s", "ORD-1", shop_id=shop_id, order_number="ORD-1", unrelated="x"
    )

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "Created order ORD-1"
    assert payload["service"] == "pos"
    assert payload["level"] == "INFO"
    assert payload["shop_id"] == str(shop_id)
    assert payload["order_number"] == "ORD-1"
    assert "unrelated" not in payload
    assert "product_id" not in payload


@pytest.mark.unit
def test_json_formatter_includes_exception():
    try:
        raise RuntimeError("store unavailable")
    except RuntimeError:
        record = _record("Unit of work aborted")
        record.exc_info = sys.exc_info()

    payload = json.loads(JsonFormatter().format(record))

    assert "RuntimeError: store unavailable" in payload["exception"]


@pytest.mark.unit
def test_compact_timestamp_is_utc():
    ist = timezone(timedelta(hours=5, minutes=30))

    assert compact_timestamp(datetime(2026, 10, 19, 15, 0, 5, tzinfo=ist)) == "20261019093005"
    assert compact_timestamp(datetime(2026, 1, 2, 3, 4, 5)) == "20260102030405"
    assert len(compact_timestamp()) == 14
    assert utc_now().tzinfo is not None
