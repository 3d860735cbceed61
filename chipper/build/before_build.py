# chipper/build/before_build.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from chipper.build.locales import resolve_locales

log = logging.getLogger("chipper.build")


class BuildContext(BaseModel):
    """State shared with the bundling step. Created once per build."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    sim_name: str
    sim_version: str = ""
    fallback_locale: str = "en"
    locale: str = "en"
    locales_to_build: List[str] = Field(default_factory=list)
    # Mipmaps can't be built synchronously while bundling; they are queued here
    mipmaps_to_build: List[Any] = Field(default_factory=list)
    build_options: Dict[str, Any] = Field(default_factory=dict)
    diagnostics: List[str] = Field(default_factory=list)
    get_cache_buster_args: Optional[Callable[[], str]] = Field(default=None, exclude=True)

    def install_default_cache_buster(self) -> bool:
        # The sims' *-config.js files call getCacheBusterArgs during the build too
        if self.get_cache_buster_args is not None:
            return False
        self.get_cache_buster_args = lambda: ""
        return True


def load_package_json(path: Union[str, Path]) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict) or not data.get("name"):
        raise ValueError(f"{path}: package.json must define a name")
    return data


def before_requirejs_build(
    pkg: Mapping[str, Any],
    fallback_locale: str,
    options: Optional[Mapping[str, Any]] = None,
    context: Optional[BuildContext] = None,
    babel_root: Union[str, Path, None] = None,
) -> BuildContext:
    options = options or {}
    name = str(pkg["name"])
    version = str(pkg.get("version", ""))
    log.debug("Building simulation: %s %s", name, version)

    if context is None:
        context = BuildContext(sim_name=name, sim_version=version, fallback_locale=fallback_locale)
    context.install_default_cache_buster()

    # e.g. --locale=fr
    context.locale = options.get("locale") or fallback_locale
    context.build_options["phetLocale"] = context.locale

    resolution = resolve_locales(name, fallback_locale, options, babel_root=babel_root)
    context.locales_to_build = resolution.locales
    if resolution.diagnostic:
        context.diagnostics.append(resolution.diagnostic)
    log.debug("Locales to build: %s", ",".join(context.locales_to_build))

    context.mipmaps_to_build = []
    return context
