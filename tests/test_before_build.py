# tests/test_before_build.py
from __future__ import annotations

import json
import logging

import pytest

from chipper.build.before_build import BuildContext, before_requirejs_build, load_package_json

PKG = {"name": "foo", "version": "1.0.0-dev.3"}


def test_defaults(tmp_path) -> None:
    ctx = before_requirejs_build(PKG, "en", {}, babel_root=tmp_path)
    assert ctx.sim_name == "foo"
    assert ctx.locale == "en"
    assert ctx.build_options["phetLocale"] == "en"
    assert ctx.locales_to_build == ["en"]
    assert ctx.mipmaps_to_build == []
    assert ctx.diagnostics == []
    assert ctx.get_cache_buster_args() == ""


def test_target_locale_option(tmp_path) -> None:
    ctx = before_requirejs_build(PKG, "en", {"locale": "fr", "locales": "fr,es"}, babel_root=tmp_path)
    assert ctx.build_options["phetLocale"] == "fr"
    assert ctx.locales_to_build == ["fr", "es"]


def test_existing_cache_buster_is_kept(tmp_path) -> None:
    ctx = BuildContext(sim_name="foo")
    ctx.get_cache_buster_args = lambda: "bust=1"
    out = before_requirejs_build(PKG, "en", {}, context=ctx, babel_root=tmp_path)
    assert out is ctx
    assert out.get_cache_buster_args() == "bust=1"
    assert ctx.install_default_cache_buster() is False


def test_diagnostic_recorded_not_raised(tmp_path) -> None:
    ctx = before_requirejs_build(PKG, "en", {"locales": "*"}, babel_root=tmp_path)
    assert ctx.locales_to_build == ["en"]
    assert len(ctx.diagnostics) == 1


def test_debug_logging(tmp_path, caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="chipper.build")
    before_requirejs_build(PKG, "en", {"locales": "ar,fr"}, babel_root=tmp_path)
    text = caplog.text
    assert "Building simulation: foo 1.0.0-dev.3" in text
    assert "Locales to build: ar,fr" in text


def test_dump_excludes_callable(tmp_path) -> None:
    ctx = before_requirejs_build(PKG, "en", {}, babel_root=tmp_path)
    data = ctx.model_dump()
    assert "get_cache_buster_args" not in data
    assert data["locales_to_build"] == ["en"]


def test_load_package_json(tmp_path) -> None:
    p = tmp_path / "package.json"
    p.write_text(json.dumps(PKG), encoding="utf-8")
    assert load_package_json(p)["name"] == "foo"
    p.write_text(json.dumps({"version": "1"}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_package_json(p)
