import orjson
import pytest

from bfx_api.errors import ExceedMaxOfferCount, PreconditionViolation, RateLimited
from bfx_api.types import CreditSide, FundingOrderType
from tests.mock_executors import (
    MockSuccessfulOutput,
    is_private_call,
    json_response,
)
from tests.unit.conftest import load_json, load_json_all_cases


@pytest.mark.asyncio
@pytest.mark.parametrize("test_data", load_json_all_cases("response.funding_offers"))
async def test_get_funding_offers(mock_http_client, test_data):
    payload, path = test_data
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response(payload["response"]),
            call_validation=lambda call: is_private_call(payload["path"])(call)
            and call.arg_pack[2] is None,
        )
    )

    offers = await client.get_funding_offers(payload["symbol"])

    assert len(offers) == len(payload["response"])
    for offer, row in zip(offers, payload["response"]):
        assert offer.id == row[0]
        assert offer.amount_orig == row[5]
        assert offer.offer_type.value == row[6]
        assert offer.status == row[10]
        assert offer.rate == row[14]
        assert offer.period == row[15]
        assert offer.renew is bool(row[19])


@pytest.mark.asyncio
@pytest.mark.parametrize("test_data", load_json_all_cases("response.funding_credits"))
async def test_get_funding_credits(mock_http_client, test_data):
    payload, path = test_data
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response(payload["response"]),
            call_validation=is_private_call(payload["path"]),
        )
    )

    credits = await client.get_funding_credits(payload["symbol"])

    lender, borrower = credits
    assert lender.side is CreditSide.LENDER
    assert lender.rate_type == "FIXED"
    assert lender.last_payout is not None
    assert lender.hidden is False
    assert borrower.side is CreditSide.BORROWER
    assert borrower.last_payout is None
    assert borrower.notify is None
    assert borrower.no_close is True
    assert borrower.pair == "tETHUSD"


@pytest.mark.asyncio
async def test_get_funding_credits_history(mock_http_client):
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response(load_json("response.funding_credits", 0)["response"]),
            call_validation=lambda call: call.function_name == "send_private_request"
            and call.arg_pack[0] == "auth/r/funding/credits/fUSD/hist"
            and call.arg_pack[2] is None
            and call.arg_pack[3] == [("limit", "50"), ("end", "1677628800000")],
        )
    )

    credits = await client.get_funding_credits_history(
        "fUSD", limit=50, end=1677628800000
    )

    assert len(credits) == 2


@pytest.mark.asyncio
async def test_get_funding_offers_history(mock_http_client):
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response([]),
            call_validation=lambda call: call.function_name == "send_private_request"
            and call.arg_pack[0] == "auth/r/funding/offers/fETH/hist"
            and call.arg_pack[3] == [],
        )
    )

    assert await client.get_funding_offers_history("fETH") == []


@pytest.mark.asyncio
@pytest.mark.parametrize("test_data", load_json_all_cases("test.submit_funding_offer"))
async def test_submit_funding_offer(mock_http_client, test_data):
    payload, path = test_data
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response(payload["response"]),
            call_validation=lambda call: is_private_call("auth/w/funding/offer/submit")(
                call
            )
            and orjson.loads(call.arg_pack[2]) == payload["body"],
        )
    )

    offer = await client.submit_funding_offer(**payload["request"])

    assert offer.symbol == payload["request"]["symbol"]
    assert offer.period == payload["request"]["period"]
    assert offer.offer_type is FundingOrderType.parse(payload["body"]["type"])


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "symbol, period",
    [("fUSD", 1), ("fUSD", 121), ("fUSD", 30.0), ("fUSD", True), ("tBTCUSD", 30)],
)
async def test_submit_funding_offer_rejected(mock_http_client, symbol, period):
    client, mock_http = mock_http_client

    with pytest.raises(PreconditionViolation):
        await client.submit_funding_offer(symbol, "100", "0.0002", period)

    assert mock_http.call_log == []


@pytest.mark.asyncio
async def test_submit_funding_offer_renders_plain_decimals(mock_http_client):
    client, mock_http = mock_http_client
    payload = load_json("test.submit_funding_offer", 0)

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response(payload["response"]),
            call_validation=lambda call: orjson.loads(call.arg_pack[2])
            == {
                "symbol": "fETH",
                "amount": "0.5",
                "rate": "0.00005",
                "period": 2,
                "type": "LIMIT",
            },
        )
    )

    await client.submit_funding_offer("fETH", 0.5, 0.00005, 2)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "amount, rate",
    [("NaN", "0.0002"), ("100", "Infinity"), (float("nan"), 0.0002), (100, float("inf"))],
)
async def test_submit_funding_offer_rejects_non_finite(mock_http_client, amount, rate):
    client, mock_http = mock_http_client

    with pytest.raises(PreconditionViolation):
        await client.submit_funding_offer("fUSD", amount, rate, 2)

    assert mock_http.call_log == []


@pytest.mark.asyncio
async def test_submit_funding_offer_too_many_offers(mock_http_client):
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response(["error", 10001, "Limit: too many active offers"]),
            call_validation=is_private_call("auth/w/funding/offer/submit"),
        )
    )

    with pytest.raises(ExceedMaxOfferCount):
        await client.submit_funding_offer("fUSD", "100", "0.0002", 2)

    assert len(mock_http.call_log) == 1


@pytest.mark.asyncio
async def test_cancel_funding_offer(mock_http_client):
    client, mock_http = mock_http_client
    response = load_json("test.submit_funding_offer", 0)["response"]
    response[1] = "foc-req"

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response(response),
            call_validation=lambda call: is_private_call("auth/w/funding/offer/cancel")(
                call
            )
            and call.arg_pack[2] == '{"id":41237920}',
        )
    )

    offer = await client.cancel_funding_offer(41237920)

    assert offer.id == 41237920


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "symbol, currency",
    [("fUSD", "USD"), ("tBTCUSD", "USD"), ("tETH:USDT", "USDT")],
)
async def test_cancel_all_funding_offers(mock_http_client, symbol, currency):
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response([1573912039000, "foc_all-req", None, None, [], None, "SUCCESS", "None"]),
            call_validation=lambda call: is_private_call(
                "auth/w/funding/offer/cancel/all"
            )(call)
            and orjson.loads(call.arg_pack[2]) == {"currency": currency},
        )
    )

    assert await client.cancel_all_funding_offers(symbol) is None


@pytest.mark.asyncio
async def test_cancel_all_funding_offers_propagates_errors(mock_http_client):
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=json_response(["error", 11010, "ratelimit: error"]),
            call_validation=is_private_call("auth/w/funding/offer/cancel/all"),
        )
    )

    with pytest.raises(RateLimited):
        await client.cancel_all_funding_offers("fUSD")
