# chipper/runtime/assertions.py
from __future__ import annotations

import logging
from typing import Optional, Protocol

from bs4 import BeautifulSoup
from pydantic import BaseModel

from chipper.runtime.query_parameters import QueryParameters

log = logging.getLogger("chipper.assertions")


class AssertionToggles(Protocol):
    def enable_assert(self) -> None: ...

    def enable_assert_slow(self) -> None: ...


class Assertions:
    """Default toggles: basic and slow assertion levels, both off at start."""

    def __init__(self) -> None:
        self.assert_enabled = False
        self.assert_slow_enabled = False

    def enable_assert(self) -> None:
        self.assert_enabled = True
        log.info("enabling assert")

    def enable_assert_slow(self) -> None:
        self.assert_slow_enabled = True
        log.info("enabling assertSlow")


class AssertionFlags(BaseModel):
    enable_basic: bool = False
    enable_all: bool = False


def meta_content(html: str, name: str) -> Optional[str]:
    soup = BeautifulSoup(html or "", "html.parser")
    tag = soup.find("meta", attrs={"name": name})
    if tag is None:
        return None
    return tag.get("content")


def is_production_page(html: Optional[str]) -> bool:
    return meta_content(html or "", "phet-sim-level") == "production"


def compute_assertion_flags(params: QueryParameters, is_production: bool) -> AssertionFlags:
    # eall enables basic and slow; production builds ignore both
    enable_all = not is_production and params.is_set("eall")
    enable_basic = enable_all or (not is_production and params.is_set("ea"))
    return AssertionFlags(enable_basic=enable_basic, enable_all=enable_all)


def apply_assertion_flags(flags: AssertionFlags, toggles: AssertionToggles) -> None:
    if flags.enable_basic:
        toggles.enable_assert()
    if flags.enable_all:
        toggles.enable_assert_slow()
