from bfx_api.executors.aiohttp import AiohttpHttpExecutor
from bfx_api.executors.defaults import DEFAULT_HTTP_EXECUTOR
from bfx_api.executors.httpx import HttpxHttpExecutor
from bfx_api.executors.interface import HttpExecutor, HttpResponse

__all__ = [
    "HttpExecutor",
    "HttpResponse",
    "HttpxHttpExecutor",
    "AiohttpHttpExecutor",
    "DEFAULT_HTTP_EXECUTOR",
]
