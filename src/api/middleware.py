import logging
import time
from typing import Optional

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from src.core.interfaces.log_sink import ILogSink

logger = logging.getLogger("TradeEntries")


class StatusRecordingSend:
    """
    Wraps an ASGI send callable and remembers the status of the
    response-start message that actually went out.
    """

    def __init__(self, send: Send):
        self._send = send
        self.status_code: Optional[int] = None

    async def __call__(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            self.status_code = message["status"]
        await self._send(message)


def format_duration(seconds: float) -> str:
    if seconds < 1e-3:
        return f"{seconds * 1e6:.3f}µs"
    if seconds < 1:
        return f"{seconds * 1e3:.3f}ms"
    return f"{seconds:.3f}s"


def format_request_line(scope: Scope, status_code: int, seconds: float) -> str:
    client = scope.get("client")
    remote_addr = f"{client[0]}:{client[1]}" if client else "-"
    raw_query = scope.get("query_string", b"").decode("latin-1")
    return (
        f"[{scope['method']}] [{format_duration(seconds)}] [{status_code}] "
        f"{remote_addr} {scope['path']} {raw_query}"
    )


class RequestLoggerMiddleware:
    """
    Emits exactly one log line per HTTP request once the wrapped app returns,
    to the local logger and to the remote sink when one is configured.
    """

    def __init__(self, app: ASGIApp, log_sink: Optional[ILogSink] = None):
        self.app = app
        self.log_sink = log_sink

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        recorder = StatusRecordingSend(send)
        try:
            await self.app(scope, receive, recorder)
        finally:
            # Nothing sent means the exception escapes to the server error layer, which answers 500
            status_code = recorder.status_code if recorder.status_code is not None else 500
            line = format_request_line(scope, status_code, time.perf_counter() - start)
            logger.info(line)
            self._ship(line)

    def _ship(self, line: str) -> None:
        if self.log_sink is None:
            return
        try:
            self.log_sink.ship("info", line)
        except Exception as e:
            logger.debug(f"Log sink rejected line: {e}")
