import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Generator

import orjson
import pytest

from bfx_api.api import BitfinexApiClient
from tests.mock_executors import MockHttpExecutor, MockOutputNotExhausted

DATA_DIR = Path(__file__).parent.joinpath("data")

log = logging.getLogger(__name__)


@pytest.fixture
def mock_http_client() -> Generator[
    tuple[BitfinexApiClient, MockHttpExecutor], None, None
]:
    mock_http = MockHttpExecutor()
    client = BitfinexApiClient(
        api_key="FOO",
        api_secret="BAR",
        # replace real network requests with our mock
        executor=mock_http,
        # retries happen back to back
        retry_interval=0,
    )

    yield (client, mock_http)

    if len(mock_http.staged_outputs) > 0:
        raise MockOutputNotExhausted(mock_http.staged_outputs)


@pytest.fixture
def mock_public_client() -> Generator[
    tuple[BitfinexApiClient, MockHttpExecutor], None, None
]:
    mock_http = MockHttpExecutor()
    client = BitfinexApiClient(executor=mock_http, retry_interval=0)

    yield (client, mock_http)

    if len(mock_http.staged_outputs) > 0:
        raise MockOutputNotExhausted(mock_http.staged_outputs)


@lru_cache(maxsize=1)
def data_files() -> list[Path]:
    return list(DATA_DIR.iterdir())


@lru_cache(maxsize=None)
def json_data_files(name: str) -> list[Path]:
    return list(
        sorted(
            path
            for path in data_files()
            if path.match(f"*/{name}.*.json", case_sensitive=True)
        )
    )


def load_json(name: str, case: int | None = None) -> Any:
    case_part = f"case{case}." if case is not None else ""
    path = DATA_DIR / f"{name}.{case_part}json"
    with open(path, "rb") as fh:
        return orjson.loads(fh.read())


def load_json_all_cases(name: str) -> list[tuple[dict[str, Any], Path]]:
    """Load all json payloads for a given base name (case0, case1, ...)."""
    results = []
    for path in json_data_files(name):
        log.debug("Loading json from %s", path.as_posix())
        with open(path, "rb") as fh:
            payload = orjson.loads(fh.read())
            results.append((payload, path))
    return results
