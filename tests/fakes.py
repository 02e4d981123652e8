"""Scripted stand-in for the commerce API.

Built on httpx.MockTransport, so no test opens a socket and every outbound
request can be counted and inspected.
"""

from __future__ import annotations

import json

import httpx

from relay_service.clients import CommerceClient
from relay_service.config import Settings

INTERNAL_TOKEN = "internal-secret"
API_KEY = "test-api-key"


class ScriptedUpstream:
    """Answers requests with queued responses; the last one repeats.

    A queued exception is raised instead of answering, like a transport failure.
    """

    def __init__(self, *responses: httpx.Response | Exception) -> None:
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if len(self._responses) > 1:
            response = self._responses.pop(0)
        else:
            response = self._responses[0]
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def calls(self) -> int:
        return len(self.requests)

    def sent_payload(self, index: int = 0) -> dict:
        return json.loads(self.requests[index].content)


def created(order_id: str = "ord_1", url: str = "https://pay.test/ord_1") -> httpx.Response:
    return httpx.Response(200, json={"order": {"id": order_id, "checkoutUrl": url}})


def failed(status: int, message: str | None = None) -> httpx.Response:
    if message is None:
        return httpx.Response(status, text="error")
    return httpx.Response(status, json={"message": message})


def make_client(
    settings: Settings,
    upstream: ScriptedUpstream,
    delays: list[float] | None = None,
) -> CommerceClient:
    http_client = httpx.Client(
        base_url=settings.api_base_url,
        transport=httpx.MockTransport(upstream),
    )
    sleep = delays.append if delays is not None else (lambda seconds: None)
    return CommerceClient(settings, http_client=http_client, sleep=sleep)
