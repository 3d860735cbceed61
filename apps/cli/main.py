# apps/cli/main.py
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from chipper.build.before_build import before_requirejs_build, load_package_json
from chipper.core.logging import configure_logging
from chipper.core.settings import get_settings
from chipper.runtime.error_reporting import HttpParent
from chipper.runtime.initialize_globals import initialize_globals

log = logging.getLogger("chipper.cli")


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    p = argparse.ArgumentParser(
        prog="chipper-build",
        description="Resolve locales and build options before bundling a simulation.",
    )
    p.add_argument("--package", default="package.json", help="path to the sim's package.json")
    p.add_argument("--fallback-locale", default=settings.fallback_locale)
    p.add_argument("--locales", help="'*', or comma separated locales such as ar,fr,es")
    p.add_argument("--localesRepo", help="take all locales from another repo, ignored if --locales is given")
    p.add_argument("--locale", help="locale used for string lookup, defaults to the fallback locale")
    p.add_argument("--babel-root", default=settings.babel_root, help="directory holding <repo>/ string files")
    p.add_argument("--strict", action="store_true", help="exit non-zero on locale diagnostics")
    p.add_argument("--log-format", default=None, choices=["json", "plain"])
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=get_settings().log_level, fmt=args.log_format)

    try:
        pkg = load_package_json(args.package)
    except (OSError, ValueError) as e:
        log.error({"event": "bad_package_json", "path": args.package, "error": str(e)})
        return 2

    options = {"locales": args.locales, "localesRepo": args.localesRepo, "locale": args.locale}
    ctx = before_requirejs_build(pkg, args.fallback_locale, options, babel_root=args.babel_root)

    print(json.dumps(ctx.model_dump(), ensure_ascii=False, indent=2))
    if args.strict and ctx.diagnostics:
        log.error({"event": "locale_diagnostics", "diagnostics": ctx.diagnostics})
        return 1
    return 0


def build_init_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="chipper-init",
        description="Initialize sim startup globals for a launch URL and report errors to the harness.",
    )
    p.add_argument("url", help="sim launch URL, e.g. http://localhost/foo_en.html?ea&postMessageOnError")
    p.add_argument("--page", help="sim HTML file; its phet-sim-level meta decides production")
    p.add_argument("--production", action="store_true", help="treat the sim as a production build")
    p.add_argument("--harness-url", default=None, help="error harness base URL, defaults to HARNESS_URL")
    p.add_argument("--log-format", default=None, choices=["json", "plain"])
    return p


def init_main(argv: Optional[List[str]] = None) -> int:
    args = build_init_parser().parse_args(argv)
    configure_logging(level=get_settings().log_level, fmt=args.log_format)

    page_html = None
    if args.page:
        try:
            with open(args.page, "r", encoding="utf-8") as fh:
                page_html = fh.read()
        except OSError as e:
            log.error({"event": "bad_page", "path": args.page, "error": str(e)})
            return 2

    parent = HttpParent(args.harness_url) if args.harness_url else HttpParent.from_settings()
    sim = initialize_globals(
        args.url,
        is_production=True if args.production else None,
        page_html=page_html,
        parent=parent,
    )
    print(
        json.dumps(
            {
                "query_parameters": sim.query_parameters.as_dict(),
                "enable_basic_assertions": sim.assertion_flags.enable_basic,
                "enable_all_assertions": sim.assertion_flags.enable_all,
                "cache_buster_args": sim.get_cache_buster_args(),
                "post_message_on_error": sim.error_forwarder is not None,
                "harness_url": parent.base_url,
            },
            ensure_ascii=False,
            indent=2,
        )
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
