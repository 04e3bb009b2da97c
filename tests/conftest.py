import inspect

import httpx
import pytest

from qdrant_vector_db.client import QdrantVectorDbClient


BASE_URL = "http://qdrant.test:6333"


def ok(result, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json={"result": result, "status": "ok", "time": 0.001})


@pytest.fixture
def make_client():
    def _make(handler, **kwargs):
        seen: list[httpx.Request] = []

        async def _handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            response = handler(request)
            if inspect.isawaitable(response):
                response = await response
            return response

        http_client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(_handler))
        return QdrantVectorDbClient(http_client=http_client, **kwargs), seen

    return _make
