# chipper/runtime/query_parameters.py
"""Query parameters a simulation can be launched with.

Append ``?`` and the parameter (optionally with a value) to the sim URL, and
separate several parameters with ``&``, for example::

    .../reactants-products-and-leftovers_en.html?dev&showPointerAreas&webgl=false

Only ``ea``, ``eall``, ``cacheBuster`` and ``postMessageOnError`` are acted on
during startup; the rest are opaque values read later by the sim.
"""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import unquote

log = logging.getLogger("chipper.query")

KNOWN_PARAMETERS: Dict[str, str] = {
    # most useful for QA
    "dev": "enable developer-only features, such as showing the layout bounds",
    "ea": "enable assertions, internal code error checks",
    "fuzzMouse": "randomly sends mouse events to sim",
    "profiler": "shows profiling information for the sim",
    "showPointerAreas": "touch areas in red, mouse areas in blue, both dotted outlines",
    "webgl": "set to false to turn off WebGL rendering",
    # others
    "accessibility": "enable accessibility features, such as keyboard navigation",
    "eall": "enable all assertions, including time consuming checks",
    "joistRenderer": "renderer for Joist to use: svg, webgl or canvas",
    "locale": "test with a specific locale",
    "playbackInputEventLog": "plays an input event log back from the server",
    "recordInputEventLog": "enables input event logging, optionally named",
    "sceneryLog": "scenery logs to enable, delimited with '.'",
    "sceneryStringLog": "scenery logs go to a string instead of the window",
    "screens": "1-based screen indices to run, delimited with '.', e.g. 3.1",
    "showHomeScreen": "if false, go immediately to screenIndex",
    "strings": "override strings, JSON shaped like the string files",
    "webglContextLossTimeout": "simulate WebGL context loss, optionally after N ms",
    "webglContextLossIncremental": "simulate context loss between increasing gl calls",
    "cacheBuster": "set to false to omit the bust=<ms> argument on asset URLs",
    "postMessageOnError": "post uncaught errors to the parent window",
}


def parse_query_string(search: str) -> Dict[str, Optional[str]]:
    """Map of name -> decoded value for everything after the first ``?``.

    ``?ea`` maps ea to None. When a name repeats, the first occurrence wins.
    """
    search = (search or "").split("#", 1)[0]
    if "?" not in search:
        # like location.search: no "?" means no parameters
        return {}
    search = search.split("?", 1)[1]

    params: Dict[str, Optional[str]] = {}
    for pair in search.split("&"):
        if not pair:
            continue
        name_value = pair.split("=")
        name = name_value[0]
        if name in params:
            continue
        params[name] = unquote(name_value[1]) if len(name_value) > 1 else None
    return params


class QueryParameters:
    """Read-only lookup built once per page load."""

    def __init__(self, params: Optional[Mapping[str, Optional[str]]] = None) -> None:
        self._params: Dict[str, Optional[str]] = dict(params or {})

    @classmethod
    def from_url(cls, url: str) -> "QueryParameters":
        return cls(parse_query_string(url))

    def get(self, key: str) -> Optional[str]:
        return self._params.get(key)

    def has(self, key: str) -> bool:
        return key in self._params

    def is_set(self, key: str) -> bool:
        # ?ea and ?ea=1 turn a flag on, ?ea= does not
        return key in self._params and self._params[key] != ""

    def get_list(self, key: str, sep: str = ".") -> List[str]:
        value = self._params.get(key)
        if not value:
            return []
        return [part for part in value.split(sep) if part]

    def screens(self) -> List[int]:
        out: List[int] = []
        for part in self.get_list("screens"):
            try:
                out.append(int(part))
            except ValueError:
                log.warning({"event": "bad_screen_index", "value": part})
        return out

    def string_overrides(self) -> Optional[Dict[str, Any]]:
        raw = self._params.get("strings")
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except ValueError:
            log.warning({"event": "bad_strings_param", "length": len(raw)})
            return None
        return data if isinstance(data, dict) else None

    def cache_buster_args(self, now_ms: Optional[int] = None) -> str:
        if self.get("cacheBuster") == "false":
            return ""
        if now_ms is None:
            now_ms = int(time.time() * 1000)
        return f"bust={now_ms}"

    def as_dict(self) -> Dict[str, Optional[str]]:
        return dict(self._params)

    def __contains__(self, key: object) -> bool:
        return key in self._params

    def __len__(self) -> int:
        return len(self._params)
