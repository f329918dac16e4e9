from datetime import date, datetime, timezone

import orjson
import pytest

from bfx_api.errors import PreconditionViolation
from bfx_api.signing import sign_payload
from bfx_api.types import TradingOrderType
from tests.mock_executors import MockSuccessfulOutput, is_private_call, json_response
from tests.unit.conftest import load_json, load_json_all_cases


def has_body(path, expected):
    return (
        lambda call: call.function_name == "send_private_request"
        and call.arg_pack[0] == path
        and orjson.loads(call.arg_pack[2]) == expected
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("test_data", load_json_all_cases("response.trading_orders"))
async def test_get_trading_orders(mock_http_client, test_data):
    payload, path = test_data
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response(payload["response"]),
            call_validation=is_private_call(payload["path"]),
        )
    )

    orders = await client.get_trading_orders(payload["symbol"])

    assert len(orders) == len(payload["response"])
    for order, row in zip(orders, payload["response"]):
        assert order.id == row[0]
        assert order.group_id == row[1]
        assert order.symbol == row[3]
        assert order.order_type.value == row[8]
        assert order.status == row[13]
        assert order.price == row[16]
        assert order.routing == row[28]
        assert order.meta == row[31]


@pytest.mark.asyncio
async def test_get_trading_orders_signed_headers(mock_http_client):
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response([]),
            call_validation=is_private_call("auth/r/orders"),
        )
    )

    await client.get_trading_orders()

    _, headers, body, params = mock_http.call_log[0].arg_pack
    assert body == "{}"
    assert params is None
    assert headers["bfx-apikey"] == "FOO"
    assert headers["content-type"] == "application/json"
    assert headers["bfx-signature"] == sign_payload(
        b"BAR", "auth/r/orders", headers["bfx-nonce"], body
    )


@pytest.mark.asyncio
async def test_get_trading_orders_by_client_id(mock_http_client):
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response([]),
            call_validation=has_body(
                "auth/r/orders/tBTCUSD",
                {"gid": 42, "cid": 1678988263842, "cid_date": "2023-03-16"},
            ),
        )
    )

    await client.get_trading_orders(
        "tBTCUSD",
        group_id=42,
        client_id=1678988263842,
        client_id_date=date(2023, 3, 16),
    )


@pytest.mark.asyncio
async def test_get_trading_orders_client_id_requires_date(mock_http_client):
    client, mock_http = mock_http_client

    with pytest.raises(PreconditionViolation):
        await client.get_trading_orders(client_id=1678988263842)

    assert mock_http.call_log == []


@pytest.mark.asyncio
async def test_get_trading_orders_history(mock_http_client):
    client, mock_http = mock_http_client
    start = datetime(2023, 3, 1, tzinfo=timezone.utc)

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response(load_json("response.trading_orders", 0)["response"]),
            call_validation=has_body(
                "auth/r/orders/tBTCUSD/hist", {"limit": 25, "start": 1677628800000}
            ),
        )
    )

    orders = await client.get_trading_orders_history("tBTCUSD", limit=25, start=start)

    assert len(orders) == 2
    assert orders[1].type_prev is TradingOrderType.EXCHANGE_LIMIT


@pytest.mark.asyncio
@pytest.mark.parametrize("test_data", load_json_all_cases("test.submit_trading_order"))
async def test_submit_trading_order(mock_http_client, test_data):
    payload, path = test_data
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response(payload["response"]),
            call_validation=has_body("auth/w/order/submit", payload["body"]),
        )
    )

    orders = await client.submit_trading_order(**payload["request"])

    assert len(orders) == 1
    assert orders[0].symbol == payload["request"]["symbol"]
    assert orders[0].order_type.value == payload["body"]["type"]


@pytest.mark.asyncio
async def test_submit_trading_order_time_in_force(mock_http_client):
    client, mock_http = mock_http_client
    response = load_json("test.submit_trading_order", 0)["response"]

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response(response),
            call_validation=has_body(
                "auth/w/order/submit",
                {
                    "symbol": "tBTCUSD",
                    "type": "EXCHANGE LIMIT",
                    "amount": "0.1",
                    "price": "25000",
                    "tif": "2023-03-17 12:30:00",
                },
            ),
        )
    )

    await client.submit_trading_order(
        "tBTCUSD",
        TradingOrderType.EXCHANGE_LIMIT,
        "0.1",
        "25000",
        time_in_force=datetime(2023, 3, 17, 12, 30, tzinfo=timezone.utc),
    )


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "symbol, order_type",
    [("fUSD", "LIMIT"), ("tBTCUSD", "ICEBERG")],
)
async def test_submit_trading_order_rejected(mock_http_client, symbol, order_type):
    client, mock_http = mock_http_client

    with pytest.raises(PreconditionViolation):
        await client.submit_trading_order(symbol, order_type, "0.1", "25000")

    assert mock_http.call_log == []


@pytest.mark.asyncio
async def test_update_trading_order(mock_http_client):
    client, mock_http = mock_http_client
    response = load_json("response.cancel_trading_order", 0)["response"]
    response[1] = "ou-req"

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response(response),
            call_validation=has_body(
                "auth/w/order/update",
                {"id": 1747566428, "price": "25100", "delta": "-0.02"},
            ),
        )
    )

    order = await client.update_trading_order(1747566428, price=25100, delta="-0.02")

    assert order.id == 1747566428


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "kwargs, expected_body",
    [
        ({"order_id": 1747566428}, {"id": 1747566428}),
        (
            {"cid": 1678988263842, "cid_date": "2023-03-16"},
            {"cid": 1678988263842, "cid_date": "2023-03-16"},
        ),
    ],
)
async def test_cancel_trading_order(mock_http_client, kwargs, expected_body):
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response(load_json("response.cancel_trading_order", 0)["response"]),
            call_validation=has_body("auth/w/order/cancel", expected_body),
        )
    )

    order = await client.cancel_trading_order(**kwargs)

    assert order.client_order_id == 1678988263842


@pytest.mark.asyncio
@pytest.mark.parametrize("kwargs", [{}, {"cid": 1678988263842}])
async def test_cancel_trading_order_missing_identifier(mock_http_client, kwargs):
    client, mock_http = mock_http_client

    with pytest.raises(PreconditionViolation):
        await client.cancel_trading_order(**kwargs)


@pytest.mark.asyncio
async def test_cancel_all_trading_orders(mock_http_client):
    client, mock_http = mock_http_client
    response = load_json("test.submit_trading_order", 0)["response"]
    response[1] = "oc_multi-req"

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response(response),
            call_validation=has_body("auth/w/order/cancel/multi", {"all": 1}),
        )
    )

    orders = await client.cancel_all_trading_orders()

    assert [o.id for o in orders] == [1747566428]
