# tests/test_error_reporting.py
from __future__ import annotations

import json
import sys

import httpx

from chipper.runtime.error_reporting import ErrorForwarder, HttpParent


class FakeParent:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def post_message(self, data: str, target_origin: str = "*") -> None:
        self.messages.append((data, target_origin))


def test_handle_error_payload() -> None:
    parent = FakeParent()
    ErrorForwarder(parent, "http://sim/x_en.html?postMessageOnError").handle_error("boom", "at line 1")
    data, origin = parent.messages[0]
    assert origin == "*"
    assert json.loads(data) == {
        "type": "error",
        "url": "http://sim/x_en.html?postMessageOnError",
        "message": "boom",
        "stack": "at line 1",
    }


def test_handle_exception_has_stack() -> None:
    parent = FakeParent()
    try:
        raise ValueError("bad value")
    except ValueError as e:
        report = ErrorForwarder(parent, "u").handle_exception(e)
    assert report.message == "bad value"
    assert "ValueError" in report.stack


def test_excepthook_chains_previous(monkeypatch) -> None:
    seen = []
    monkeypatch.setattr(sys, "excepthook", lambda t, e, tb: seen.append(e))
    parent = FakeParent()
    fwd = ErrorForwarder(parent, "u").install()
    try:
        assert fwd.installed
        err = RuntimeError("uncaught")
        sys.excepthook(RuntimeError, err, None)
        assert seen == [err]
        assert json.loads(parent.messages[0][0])["message"] == "uncaught"
    finally:
        fwd.uninstall()
    assert not fwd.installed


def test_excepthook_survives_broken_parent(monkeypatch) -> None:
    seen = []
    monkeypatch.setattr(sys, "excepthook", lambda t, e, tb: seen.append(e))

    class Broken:
        def post_message(self, data, target_origin="*"):
            raise OSError("parent gone")

    fwd = ErrorForwarder(Broken(), "u").install()
    try:
        sys.excepthook(KeyError, KeyError("k"), None)
    finally:
        fwd.uninstall()
    assert len(seen) == 1


def test_http_parent_posts_json() -> None:
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["body"] = json.loads(request.content)
        return httpx.Response(201, json={"ok": True})

    client = httpx.Client(transport=httpx.MockTransport(handler))
    parent = HttpParent("http://harness:8000/", client=client)
    ErrorForwarder(parent, "u").handle_error("m", "s")
    assert captured["url"] == "http://harness:8000/errors"
    assert captured["body"]["type"] == "error"
    parent.close()


def test_http_parent_from_settings(monkeypatch) -> None:
    from chipper.core import settings as settings_mod

    monkeypatch.setenv("HARNESS_URL", "http://harness.local:9000")
    settings_mod.get_settings.cache_clear()
    try:
        parent = HttpParent.from_settings()
        assert parent.base_url == "http://harness.local:9000"
        parent.close()
    finally:
        settings_mod.get_settings.cache_clear()
