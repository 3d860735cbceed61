# tests/test_assertions.py
from __future__ import annotations

from chipper.runtime.assertions import (
    Assertions,
    apply_assertion_flags,
    compute_assertion_flags,
    is_production_page,
)
from chipper.runtime.query_parameters import QueryParameters


def test_ea_enables_basic_only() -> None:
    flags = compute_assertion_flags(QueryParameters.from_url("?ea"), is_production=False)
    assert flags.enable_basic and not flags.enable_all


def test_eall_enables_both() -> None:
    flags = compute_assertion_flags(QueryParameters.from_url("?eall"), is_production=False)
    assert flags.enable_basic and flags.enable_all


def test_production_disables_everything() -> None:
    flags = compute_assertion_flags(QueryParameters.from_url("?ea&eall"), is_production=True)
    assert not flags.enable_basic
    assert not flags.enable_all


def test_nothing_requested() -> None:
    flags = compute_assertion_flags(QueryParameters.from_url("?dev"), is_production=False)
    assert not flags.enable_basic and not flags.enable_all


def test_apply_calls_toggles() -> None:
    a = Assertions()
    apply_assertion_flags(compute_assertion_flags(QueryParameters.from_url("?eall"), False), a)
    assert a.assert_enabled and a.assert_slow_enabled

    b = Assertions()
    apply_assertion_flags(compute_assertion_flags(QueryParameters.from_url("?ea"), False), b)
    assert b.assert_enabled and not b.assert_slow_enabled


def test_production_meta() -> None:
    html = '<head><meta charset="utf-8"><meta name="phet-sim-level" content="production"></head>'
    assert is_production_page(html)
    assert not is_production_page("<meta content='development' name='phet-sim-level'>")
    assert not is_production_page("<html></html>")
    assert not is_production_page(None)


def test_commented_out_meta_is_ignored() -> None:
    html = (
        '<!-- <meta name="phet-sim-level" content="production"> -->'
        '<meta name="phet-sim-level" content="development">'
    )
    assert not is_production_page(html)


def test_meta_with_gt_inside_attribute() -> None:
    assert is_production_page('<meta data-x="a>b" name="phet-sim-level" content="production">')


def test_meta_without_content() -> None:
    assert not is_production_page('<meta name="phet-sim-level">')
