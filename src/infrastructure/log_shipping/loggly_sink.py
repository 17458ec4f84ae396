import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional, Set

import httpx

from src.core.interfaces.log_sink import ILogSink

logger = logging.getLogger(__name__)

DEFAULT_LOGGLY_URL = "https://logs-01.loggly.com/inputs"


class LogglySink(ILogSink):
    """
    Ships log lines to a Loggly HTTP input, tagged with the service tag.
    Delivery runs as a detached task; failures are logged at debug level and dropped.
    """

    def __init__(
        self,
        token: str,
        tag: str,
        base_url: str = DEFAULT_LOGGLY_URL,
        timeout: float = 2.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.endpoint = f"{base_url.rstrip('/')}/{token}/tag/{tag}/"
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self._pending: Set[asyncio.Task] = set()
        logger.info(f"Loggly shipping enabled. Tag: {tag}")

    def ship(self, level: str, message: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; dropping log line.")
            return
        task = loop.create_task(self._send(level, message))
        # The loop only holds weak references to tasks
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _send(self, level: str, message: str) -> None:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "message": message,
        }
        try:
            resp = await self.client.post(self.endpoint, json=payload)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.debug(f"Loggly shipping failed: {e}")

    async def aclose(self) -> None:
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        await self.client.aclose()
