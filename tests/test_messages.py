from __future__ import annotations

from xplat_bans.matching.messages import (
    DEFAULT_REASON,
    constructor_message,
    method_call_message,
    standard_message,
)


def test_standard_message() -> None:
    assert (
        standard_message("org.joda.time.tz", "time zones differ.")
        == "Use of org.joda.time.tz has been banned due to time zones differ."
    )


def test_empty_reason_uses_default() -> None:
    assert DEFAULT_REASON == "cross platform incompatibility."
    assert (
        standard_message("org.joda.time.Chronology", "")
        == "Use of org.joda.time.Chronology has been banned due to cross platform incompatibility."
    )


def test_method_call_message() -> None:
    assert method_call_message("getChronology()", "org.joda.time.Chronology", "") == (
        "Use of getChronology() is not allowed, as org.joda.time.Chronology has been banned "
        "due to cross platform incompatibility."
    )


def test_constructor_message() -> None:
    assert constructor_message("Foo(org.joda.time.Chronology)", "org.joda.time.Chronology", "no.") == (
        "Use of this constructor (Foo(org.joda.time.Chronology)) is not allowed, "
        "as org.joda.time.Chronology is banned due to no."
    )
