# chipper/runtime/initialize_globals.py
"""Startup state for a simulation: query parameters, assertions, error reporting.

Must run once, before any asynchronous module loading starts.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from chipper.runtime.assertions import (
    AssertionFlags,
    Assertions,
    AssertionToggles,
    apply_assertion_flags,
    compute_assertion_flags,
    is_production_page,
)
from chipper.runtime.error_reporting import ErrorForwarder, MessageTarget
from chipper.runtime.query_parameters import QueryParameters

log = logging.getLogger("chipper.init")


class SimGlobals:
    def __init__(
        self,
        url: str,
        query_parameters: QueryParameters,
        assertion_flags: AssertionFlags,
        assertions: AssertionToggles,
        arch: Any = None,
        error_forwarder: Optional[ErrorForwarder] = None,
    ) -> None:
        self.url = url
        self.query_parameters = query_parameters
        self.assertion_flags = assertion_flags
        self.assertions = assertions
        self.arch = arch  # None unless preloaded; callers use `arch and arch.method()`
        self.error_forwarder = error_forwarder

    def get_query_parameter(self, key: str) -> Optional[str]:
        return self.query_parameters.get(key)

    @property
    def get_cache_buster_args(self) -> Callable[[], str]:
        return self.query_parameters.cache_buster_args


def initialize_globals(
    url: str,
    *,
    is_production: Optional[bool] = None,
    page_html: Optional[str] = None,
    assertions: Optional[AssertionToggles] = None,
    parent: Optional[MessageTarget] = None,
    arch: Any = None,
    install_hook: bool = True,
) -> SimGlobals:
    params = QueryParameters.from_url(url or "")

    if is_production is None:
        is_production = is_production_page(page_html)
    if assertions is None:
        assertions = Assertions()

    flags = compute_assertion_flags(params, is_production)
    apply_assertion_flags(flags, assertions)

    forwarder: Optional[ErrorForwarder] = None
    if params.is_set("postMessageOnError"):
        if parent is None:
            log.warning({"event": "no_parent_context", "url": url})
        else:
            forwarder = ErrorForwarder(parent, url)
            if install_hook:
                forwarder.install()

    log.debug(
        {
            "event": "globals_initialized",
            "params": len(params),
            "ea": flags.enable_basic,
            "eall": flags.enable_all,
            "post_message_on_error": forwarder is not None,
        }
    )
    return SimGlobals(url, params, flags, assertions, arch=arch, error_forwarder=forwarder)
