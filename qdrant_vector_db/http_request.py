"""Transport-neutral description of one Qdrant HTTP call."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel


@dataclass(frozen=True)
class HttpRequest:
    method: str
    url: str
    body: Optional[Dict[str, Any]] = None


def _serialize(payload: Optional[BaseModel]) -> Optional[Dict[str, Any]]:
    if payload is None:
        return None
    return payload.model_dump(mode="json", by_alias=True, exclude_none=True)


def create_get_request(url: str) -> HttpRequest:
    return HttpRequest(method="GET", url=url)


def create_delete_request(url: str) -> HttpRequest:
    return HttpRequest(method="DELETE", url=url)


def create_post_request(url: str, payload: Optional[BaseModel] = None) -> HttpRequest:
    return HttpRequest(method="POST", url=url, body=_serialize(payload))


def create_put_request(url: str, payload: Optional[BaseModel] = None) -> HttpRequest:
    return HttpRequest(method="PUT", url=url, body=_serialize(payload))
