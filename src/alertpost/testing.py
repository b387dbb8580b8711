"""Stub HTTP receiver that records alert POSTs for assertions.

Runs an ``aiohttp`` server on its own event loop thread so blocking
callers (handlers, the test trigger) can POST to it from ordinary tests::

    with StubServer(headers={"Auth": "secret"}) as server:
        service.update([{"name": "ops", "url": server.url, "headers": {"Auth": "secret"}}])
        service.handler(HandlerConfig(endpoint="ops")).handle(event)
        assert server.requests()[0].matching_headers
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Mapping
from types import TracebackType

from aiohttp import web
from pydantic import BaseModel, Field, ValidationError

from src.alertpost.types import AlertData


class ReceivedRequest(BaseModel):
    """One request as seen by the stub."""

    matching_headers: bool
    data: AlertData = Field(default_factory=AlertData)
    method: str = "POST"
    path: str = "/"
    headers: dict[str, str] = Field(default_factory=dict)


class StubServer:
    """Records every request, whether expected headers matched, and the payload.

    Bodies that do not decode as an alert are recorded as an empty
    ``AlertData``. :meth:`close` is safe to call more than once.
    """

    def __init__(
        self,
        headers: Mapping[str, str] | None = None,
        status: int = 200,
        host: str = "127.0.0.1",
    ) -> None:
        self._expected = dict(headers or {})
        self._status = status
        self._requests: list[ReceivedRequest] = []
        self._lock = threading.Lock()
        self._closed = False

        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self._loop.run_forever, name="alertpost-stub", daemon=True
        )
        self._thread.start()
        self._runner = asyncio.run_coroutine_threadsafe(
            self._start(host), self._loop
        ).result()
        bound_host, port = self._runner.addresses[0][:2]
        self.url = f"http://{bound_host}:{port}"

    async def _start(self, host: str) -> web.AppRunner:
        app = web.Application()
        app.router.add_route("*", "/{tail:.*}", self._handle)
        runner = web.AppRunner(app, access_log=None)
        await runner.setup()
        site = web.TCPSite(runner, host, 0)
        await site.start()
        return runner

    async def _handle(self, request: web.Request) -> web.Response:
        matching = all(
            request.headers.get(name, "") == value
            for name, value in self._expected.items()
        )
        raw = await request.read()
        try:
            data = AlertData.model_validate_json(raw)
        except ValidationError:
            data = AlertData()

        received = ReceivedRequest(
            matching_headers=matching,
            data=data,
            method=request.method,
            path=request.path,
            headers={name.lower(): value for name, value in request.headers.items()},
        )
        with self._lock:
            self._requests.append(received)
        return web.Response(status=self._status)

    def requests(self) -> list[ReceivedRequest]:
        """Requests received so far, oldest first."""
        with self._lock:
            return list(self._requests)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        asyncio.run_coroutine_threadsafe(self._runner.cleanup(), self._loop).result()
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join()
        self._loop.close()

    def __enter__(self) -> StubServer:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
