"""
Tests for the HTTP collaborators (requests is mocked, no network).
"""
from unittest.mock import MagicMock

import pytest
import requests

from pkg.kanban.config import BoardConfig
from pkg.kanban.errors import FeedError, RemoteMoveFailed
from pkg.kanban.remote import HttpMoveOperation, HttpOrderFeed
from pkg.kanban.schema import OrderStatus


def fake_response(status_code=200, body=None, bad_json=False):
    r = MagicMock()
    r.status_code = status_code
    r.ok = status_code < 400
    if bad_json:
        r.json.side_effect = ValueError("not json")
    else:
        r.json.return_value = body
    return r


@pytest.fixture
def config():
    return BoardConfig(api_base_url="http://shop.test", api_token="s3cret", request_timeout=3).validate()


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HttpOrderFeed
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_feed_fetches_order_list(config):
    http = MagicMock()
    http.get.return_value = fake_response(body=[{"order_id": "1", "status": "pending"}])

    orders = HttpOrderFeed(config, session=http)()

    assert orders == [{"order_id": "1", "status": "pending"}]
    url = http.get.call_args.args[0]
    kwargs = http.get.call_args.kwargs
    assert url == "http://shop.test/api/orders"
    assert kwargs["timeout"] == 3
    assert kwargs["headers"]["Authorization"] == "Bearer s3cret"


def test_feed_accepts_wrapped_payload(config):
    http = MagicMock()
    http.get.return_value = fake_response(body={"success": True, "data": [{"order_id": "2"}]})
    assert HttpOrderFeed(config, session=http)() == [{"order_id": "2"}]


@pytest.mark.parametrize("response", [
    fake_response(status_code=401, body={"success": False, "message": "Not authenticated"}),
    fake_response(status_code=500, bad_json=True),
    fake_response(bad_json=True),
    fake_response(body={"success": True}),
])
def test_feed_errors(config, response):
    http = MagicMock()
    http.get.return_value = response
    with pytest.raises(FeedError):
        HttpOrderFeed(config, session=http)()


def test_feed_transport_error(config):
    http = MagicMock()
    http.get.side_effect = requests.ConnectionError("refused")
    with pytest.raises(FeedError, match="refused"):
        HttpOrderFeed(config, session=http)()


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HttpMoveOperation
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_move_puts_new_status(config):
    http = MagicMock()
    http.put.return_value = fake_response(body={"success": True})

    assert HttpMoveOperation(config, session=http)("42", OrderStatus.SHIPPED) is True

    url = http.put.call_args.args[0]
    kwargs = http.put.call_args.kwargs
    assert url == "http://shop.test/api/orders/42/status"
    assert kwargs["json"] == {"status": "shipped"}
    assert kwargs["timeout"] == 3


def test_move_non_ok_raises(config):
    http = MagicMock()
    http.put.return_value = fake_response(status_code=409, body={"message": "Order already delivered"})

    with pytest.raises(RemoteMoveFailed) as exc_info:
        HttpMoveOperation(config, session=http)("42", "delivered")
    assert exc_info.value.card_id == "42"
    assert exc_info.value.status == "delivered"
    assert exc_info.value.reason == "HTTP 409: Order already delivered"


def test_move_transport_error_raises(config):
    http = MagicMock()
    http.put.side_effect = requests.Timeout("read timed out")
    with pytest.raises(RemoteMoveFailed, match="read timed out"):
        HttpMoveOperation(config, session=http)("42", OrderStatus.PROCESSING)


def test_no_auth_header_without_token():
    http = MagicMock()
    http.put.return_value = fake_response()
    HttpMoveOperation(BoardConfig(), session=http)("1", OrderStatus.PENDING)
    assert "Authorization" not in http.put.call_args.kwargs["headers"]
