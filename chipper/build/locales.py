# chipper/build/locales.py
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel

from chipper.core.diagnostics import StringsLocationError, soft_assert
from chipper.core.settings import get_settings

log = logging.getLogger("chipper.locales")

ALL_LOCALES = "*"

# Not anchored at the end: "foo-strings_fr.json.bak" still counts
_STRING_FILE_RX = re.compile(r"^.*-strings.*\.json")


class LocaleResolution(BaseModel):
    locales: List[str]
    diagnostic: Optional[str] = None

    def raise_for_diagnostic(self) -> None:
        if self.diagnostic:
            raise StringsLocationError(self.diagnostic)


def locale_from_filename(filename: str) -> str:
    """Locale suffix of a string file name, e.g. ``foo-strings_ar_SA.json`` -> ``ar_SA``.

    Sim names must not contain ``_``. A name without ``_`` yields its stem.
    """
    return filename[filename.find("_") + 1:filename.rfind(".")]


def get_locales_for_repo(
    repo: str,
    fallback_locale: str,
    babel_root: Union[str, Path, None] = None,
) -> LocaleResolution:
    root = Path(babel_root if babel_root is not None else get_settings().babel_root)
    directory = root / repo
    locales = [fallback_locale]  # always pulled from the sim repo itself

    try:
        if not directory.is_dir():
            if directory.exists():
                msg = soft_assert(False, f"Strings location is not a directory: {directory}")
            else:
                msg = soft_assert(False, f"Failure checking strings repo location: {directory}")
            return LocaleResolution(locales=locales, diagnostic=msg)

        string_files = [p.name for p in directory.iterdir() if _STRING_FILE_RX.match(p.name)]
    except OSError:
        msg = soft_assert(False, f"Failure checking strings repo location: {directory}")
        return LocaleResolution(locales=locales, diagnostic=msg)

    msg = soft_assert(len(string_files) > 0, f"no string files found in {directory}")
    if msg:
        return LocaleResolution(locales=locales, diagnostic=msg)

    return LocaleResolution(locales=locales + [locale_from_filename(f) for f in string_files])


def resolve_locales(
    repo_name: str,
    fallback_locale: str,
    options: Optional[Mapping[str, Any]] = None,
    babel_root: Union[str, Path, None] = None,
) -> LocaleResolution:
    """Locales to build, honoring the command-line flags.

    --locales=*            all locales in ../babel/<repo_name>
    --locales=ar,fr,es     exactly these, fallback not added
    --localesRepo=<repo>   all locales of another repo, ignored if --locales is given
    (nothing)              just the fallback locale
    """
    options = options or {}
    locales = options.get("locales")  # takes precedence
    locales_repo = options.get("localesRepo")

    if locales:
        if locales == ALL_LOCALES:
            return get_locales_for_repo(repo_name, fallback_locale, babel_root)
        return LocaleResolution(locales=str(locales).split(","))
    if locales_repo:
        return get_locales_for_repo(str(locales_repo), fallback_locale, babel_root)
    return LocaleResolution(locales=[fallback_locale])
