import pytest

from bfx_api.types import BookPrecision
from tests.mock_executors import MockSuccessfulOutput, is_public_call, json_response
from tests.unit.conftest import load_json_all_cases


@pytest.mark.asyncio
@pytest.mark.parametrize("test_data", load_json_all_cases("response.trading_book"))
async def test_get_trading_book(mock_http_client, test_data):
    payload, path = test_data
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response(payload["response"]),
            call_validation=is_public_call(payload["path"]),
        )
    )

    book = await client.get_trading_book(payload["symbol"], payload["precision"])

    assert len(book) == len(payload["response"])
    for level, (price, count, amount) in zip(book, payload["response"]):
        assert level.price == price
        assert level.count == count
        assert level.amount == amount


@pytest.mark.asyncio
@pytest.mark.parametrize("test_data", load_json_all_cases("response.funding_book"))
async def test_get_funding_book(mock_http_client, test_data):
    payload, path = test_data
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response(payload["response"]),
            call_validation=is_public_call(payload["path"]),
        )
    )

    book = await client.get_funding_book(
        payload["symbol"], BookPrecision(payload["precision"])
    )

    assert [(b.rate, b.period, b.count, b.amount) for b in book] == [
        tuple(level) for level in payload["response"]
    ]


@pytest.mark.asyncio
async def test_get_trading_book_raw(mock_http_client):
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response([[1747566428, 27001.5, 0.25], [1747566430, 27010, -1]]),
            call_validation=is_public_call("book/tBTCUSD/R0?len=250"),
        )
    )

    book = await client.get_trading_book_raw("tBTCUSD")

    assert [o.order_id for o in book] == [1747566428, 1747566430]
    assert book[1].amount == -1


@pytest.mark.asyncio
async def test_get_funding_book_raw(mock_http_client):
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response([[41237920, 2, 0.00024, -500]]),
            call_validation=is_public_call("book/fUSD/R0?len=250"),
        )
    )

    book = await client.get_funding_book_raw("fUSD")

    assert book[0].id == 41237920
    assert book[0].period == 2
    assert book[0].rate == 0.00024
