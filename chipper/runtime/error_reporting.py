# chipper/runtime/error_reporting.py
from __future__ import annotations

import logging
import sys
import traceback
from typing import Any, Callable, Literal, Optional, Protocol

import httpx
from pydantic import BaseModel

from chipper.core.settings import get_settings

log = logging.getLogger("chipper.errors")


class ErrorReport(BaseModel):
    type: Literal["error"] = "error"
    url: str = ""
    message: str = ""
    stack: str = ""


class MessageTarget(Protocol):
    def post_message(self, data: str, target_origin: str = "*") -> None: ...


class HttpParent:
    """Parent context reached over HTTP: the sim test harness ``POST /errors``."""

    def __init__(self, base_url: str, *, timeout: float = 5.0, client: Optional[httpx.Client] = None) -> None:
        self.base_url = str(base_url).rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(cls) -> "HttpParent":
        url = get_settings().harness_url
        if not url:
            raise RuntimeError("HARNESS_URL is not configured")
        return cls(str(url))

    def post_message(self, data: str, target_origin: str = "*") -> None:
        r = self._client.post(
            f"{self.base_url}/errors",
            content=data,
            headers={"content-type": "application/json", "x-target-origin": target_origin},
        )
        r.raise_for_status()

    def close(self) -> None:
        self._client.close()


class ErrorForwarder:
    """Sends uncaught errors to the parent context as ErrorReport JSON."""

    def __init__(self, parent: MessageTarget, url: str) -> None:
        self.parent = parent
        self.url = url
        self._previous_hook: Optional[Callable[..., Any]] = None

    def handle_error(self, message: str = "", stack: str = "") -> ErrorReport:
        report = ErrorReport(url=self.url, message=message or "", stack=stack or "")
        self.parent.post_message(report.model_dump_json(), "*")
        return report

    def handle_exception(self, exc: BaseException) -> ErrorReport:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return self.handle_error(str(exc), stack)

    def _excepthook(self, exc_type, exc, tb) -> None:
        try:
            self.handle_exception(exc.with_traceback(tb))
        except Exception:
            log.exception("failed to forward error to parent")
        finally:
            previous = self._previous_hook or sys.__excepthook__
            previous(exc_type, exc, tb)

    @property
    def installed(self) -> bool:
        return self._previous_hook is not None

    def install(self) -> "ErrorForwarder":
        if not self.installed:
            self._previous_hook = sys.excepthook
            sys.excepthook = self._excepthook
        return self

    def uninstall(self) -> None:
        if self._previous_hook is not None:
            sys.excepthook = self._previous_hook
            self._previous_hook = None
