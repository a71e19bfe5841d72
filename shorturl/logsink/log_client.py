"""
Remote structured log sink for the Short URL service.

LogClient validates a (stack, level, package, message) record, mirrors it to
the local ``logging`` logger and ships it to the remote log endpoint as JSON.

Contract:
    - Malformed arguments raise LogValidationError immediately, before any I/O.
    - Valid records are sent fire-and-forget: ``log()`` schedules an asyncio
      task on the running loop and returns at once.
    - Missing token, transport errors and non-2xx answers are reported on the
      local logger and swallowed. Nothing is retried.
    - ``drain()`` waits for in-flight sends (app shutdown, tests).

Example
-------
>>> client = LogClient(endpoint="http://logs.local/logs", token="secret")
>>> client.log("backend", "info", "route", "Server started")   # inside a running loop
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Set

import httpx

STACKS = frozenset({"backend", "frontend"})
LEVELS = frozenset({"debug", "info", "warn", "error", "fatal"})

_SHARED_PACKAGES = {"auth", "config", "middleware", "utils"}
PACKAGES = {
    "backend": frozenset({
        "cache", "controller", "cron_job", "db", "domain", "handler", "repository", "route",
    } | _SHARED_PACKAGES),
    "frontend": frozenset({"api", "component", "hook", "page", "state", "style"} | _SHARED_PACKAGES),
}

_LOCAL_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
}

local_log = logging.getLogger("shorturl.logsink")


class LogValidationError(ValueError):
    """Raised for a malformed log record."""


def build_record(stack: str, level: str, package: str, message: str) -> Dict[str, str]:
    """
    Validate and normalize a log record.

    Returns:
        dict: ``{"stack", "level", "package", "message"}`` with lowercased enums.

    Raises:
        LogValidationError: On an unknown stack, level or package, or an empty message.
    """
    if not isinstance(stack, str) or stack.lower() not in STACKS:
        raise LogValidationError(f"Invalid stack: {stack}")
    if not isinstance(level, str) or level.lower() not in LEVELS:
        raise LogValidationError(f"Invalid level: {level}")
    stack, level = stack.lower(), level.lower()
    if not isinstance(package, str) or package.lower() not in PACKAGES[stack]:
        raise LogValidationError(f"Invalid package for {stack}: {package}")
    if not isinstance(message, str) or not message.strip():
        raise LogValidationError("Message must be a non-empty string")
    return {"stack": stack, "level": level, "package": package.lower(), "message": message}


class LogClient:
    def __init__(
        self,
        endpoint: str,
        token: str = "",
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            endpoint (str): URL receiving POSTed records.
            token (str): Bearer token; when empty, remote sends are skipped.
            timeout (float): Per-request timeout in seconds.
            transport (Optional[httpx.AsyncBaseTransport]): Custom transport (tests use MockTransport).
        """
        self.endpoint = endpoint
        self.token = token
        self.timeout = timeout
        self.transport = transport
        self._pending: Set["asyncio.Task[Any]"] = set()

    def log(self, stack: str, level: str, package: str, message: str) -> None:
        """
        Validate, mirror locally and schedule the remote send.

        Raises:
            LogValidationError: Malformed arguments. Callers are expected to catch it.
        """
        record = build_record(stack, level, package, message)
        local_log.log(_LOCAL_LEVELS[record["level"]], "[%s/%s] %s",
                      record["stack"], record["package"], record["message"])

        if not self.token:
            local_log.warning("Logging failed: missing LOG_TOKEN/ACCESS_TOKEN; record not sent")
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            local_log.warning("Logging failed: no running event loop; record not sent")
            return

        task = loop.create_task(self.send(record))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def send(self, record: Dict[str, str]) -> Optional[Dict[str, Any]]:
        """
        POST one record. Returns the sink's JSON answer, or None on any failure.
        """
        headers = {"Authorization": f"Bearer {self.token}"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                r = await client.post(self.endpoint, json=record, headers=headers)
                r.raise_for_status()
                data = r.json()
        except (httpx.HTTPError, ValueError) as exc:
            local_log.warning("Logging failed: %s", exc)
            return None
        if not isinstance(data, dict):
            local_log.warning("Logging failed: unexpected sink answer %r", data)
            return None
        local_log.debug("Log created: ID=%s, Message=%r", data.get("logID"), data.get("message"))
        return data

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every scheduled send to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
