from __future__ import annotations

import logging
from pathlib import Path

import pytest
import requests

from xplat_bans.exceptions import BanListLoadError, DefaultBanListError
from xplat_bans.registry.loader import DEFAULT_BAN_FILE, BanRegistryLoader, build_registry, is_url
from xplat_bans.registry.models import BanRegistry, LoadStatus


class FakeResponse:
    def __init__(self, text: str, status_code: int = 200) -> None:
        self.text = text
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, response=None, error=None) -> None:
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, timeout=None, headers=None):
        self.calls.append((url, timeout, headers))
        if self.error is not None:
            raise self.error
        return self.response


def test_full_document_loads_every_section() -> None:
    loader = BanRegistryLoader()
    result = loader.load_document(
        {
            "classes": {"a.B": "why"},
            "packages": {"a.c": ""},
            "methods": {"a.D": {"m": "", "n": "x"}},
        },
        "doc",
    )

    assert result.status is LoadStatus.LOADED
    assert result.entry_counts == {"classes": 1, "packages": 1, "methods": 2}

    registry = loader.build()
    assert registry.class_ban("a.B") == "why"
    assert registry.package_ban("a.c") == ""
    assert registry.method_ban("a.D", "n") == "x"
    assert registry.sources == ("doc",)


def test_missing_section_is_logged_and_others_still_load(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="xplat_bans")
    loader = BanRegistryLoader()

    result = loader.load_document({"classes": {"a.B": ""}}, "only-classes.json")

    assert result.status is LoadStatus.PARTIAL
    assert result.missing_sections == ["packages", "methods"]
    assert 'Missing "packages" top level JSON name' in caplog.text
    assert loader.build().class_ban("a.B") == ""


def test_malformed_section_is_skipped(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="xplat_bans")
    loader = BanRegistryLoader()

    result = loader.load_document(
        {"classes": ["a.B"], "packages": {"a.c": "p"}, "methods": {"a.D": {"m": 3}}},
        "bad.json",
    )

    assert result.malformed_sections == ["classes", "methods"]
    assert result.loaded_sections == ["packages"]
    registry = loader.build()
    assert dict(registry.classes) == {}
    assert dict(registry.methods) == {}
    assert registry.package_ban("a.c") == "p"
    assert "Ignoring \"classes\"" in caplog.text


def test_non_string_reason_rejects_whole_section() -> None:
    loader = BanRegistryLoader()
    loader.load_document({"classes": {"a.B": "ok", "a.C": None}}, "doc")
    assert dict(loader.build().classes) == {}


def test_empty_key_is_skipped() -> None:
    loader = BanRegistryLoader()
    loader.load_document({"classes": {"": "x", "a.B": ""}}, "doc")
    assert dict(loader.build().classes) == {"a.B": ""}


def test_invalid_json_leaves_previous_data_intact(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="xplat_bans")
    loader = BanRegistryLoader()
    loader.load_document({"classes": {"a.B": "first"}}, "first")

    result = loader.load_text('{"classes": {"a.B": ', "broken.json")

    assert result.status is LoadStatus.FAILED
    assert "broken.json" in caplog.text
    registry = loader.build()
    assert registry.class_ban("a.B") == "first"
    assert registry.sources == ("first",)


def test_top_level_must_be_an_object() -> None:
    loader = BanRegistryLoader()
    result = loader.load_text('["a.B"]', "list.json")
    assert result.status is LoadStatus.FAILED
    assert loader.build().is_empty()


def test_later_source_wins_on_collision() -> None:
    loader = BanRegistryLoader()
    loader.load_document(
        {"classes": {"a.B": "old"}, "methods": {"a.D": {"m": "", "n": ""}}}, "defaults"
    )
    loader.load_document({"classes": {"a.B": "new"}, "methods": {"a.D": {"x": "y"}}}, "override")

    registry = loader.build()
    assert registry.class_ban("a.B") == "new"
    assert dict(registry.methods["a.D"]) == {"x": "y"}


def test_missing_file_fails_without_raising(tmp_path: Path) -> None:
    loader = BanRegistryLoader()
    result = loader.load_from_file(tmp_path / "nope.json")
    assert result.status is LoadStatus.FAILED
    assert result.error == "file not found"


def test_load_from_url_uses_session() -> None:
    session = FakeSession(FakeResponse('{"classes": {"x.Y": "remote"}}'))
    loader = BanRegistryLoader()

    result = loader.load_from_url("https://example.org/bans.json", timeout=3, session=session)

    assert result.ok
    url, timeout, headers = session.calls[0]
    assert url == "https://example.org/bans.json"
    assert timeout == 3
    assert headers["User-Agent"].startswith("xplat-bans/")
    assert loader.build().class_ban("x.Y") == "remote"


def test_load_from_url_http_error_is_a_failed_load() -> None:
    loader = BanRegistryLoader()
    result = loader.load_from_url("https://example.org/bans.json",
                                  session=FakeSession(FakeResponse("", status_code=404)))
    assert result.status is LoadStatus.FAILED
    assert loader.build().is_empty()


def test_is_url() -> None:
    assert is_url("https://example.org/x.json")
    assert is_url("http://example.org/x.json")
    assert not is_url("/etc/bans.json")


def test_build_registry_loads_bundled_defaults() -> None:
    registry = build_registry()

    assert registry.class_ban("org.joda.time.Chronology") == ""
    assert registry.package_ban("org.joda.time.tz") is not None
    assert registry.method_ban("org.joda.time.DateTimeZone", "getAvailableIDs") is not None
    assert registry.class_ban("org.joda.time.DateTime") is None
    assert registry.sources == (str(DEFAULT_BAN_FILE),)


def test_build_registry_overlays_override_file(write_json) -> None:
    override = write_json("custom.json", {"classes": {"com.example.Legacy": "gone."}})

    registry = build_registry(override=str(override))

    assert registry.class_ban("com.example.Legacy") == "gone."
    assert registry.class_ban("org.joda.time.Chronology") == ""
    assert registry.sources[-1] == str(override)


def test_build_registry_override_from_url(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_get(self, url, timeout=None, headers=None):
        return FakeResponse('{"packages": {"com.example.remote": ""}}')

    monkeypatch.setattr(requests.Session, "get", fake_get)

    registry = build_registry(override="https://example.org/bans.json")

    assert registry.package_ban("com.example.remote") == ""


def test_unloadable_override_falls_back_to_defaults(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="xplat_bans")

    registry = build_registry(override=str(tmp_path / "missing.json"))

    assert registry.class_ban("org.joda.time.Chronology") == ""
    assert "Custom bans will not be in effect." in caplog.text


def test_unreachable_url_override_falls_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_get(self, url, timeout=None, headers=None):
        raise requests.ConnectionError("no route to host")

    monkeypatch.setattr(requests.Session, "get", failing_get)

    registry = build_registry(override="https://example.org/bans.json")

    assert registry.sources == (str(DEFAULT_BAN_FILE),)


def test_missing_default_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(DefaultBanListError) as excinfo:
        build_registry(default_path=tmp_path / "defaults.json")

    assert isinstance(excinfo.value, BanListLoadError)
    assert "defaults.json" in str(excinfo.value)


def test_corrupt_default_is_fatal(tmp_path: Path) -> None:
    path = tmp_path / "defaults.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(DefaultBanListError):
        build_registry(default_path=path)


def test_prefix_match_prefers_longest_prefix() -> None:
    registry = BanRegistry(packages={"org.joda": "broad", "org.joda.time.tz": "narrow"})

    assert registry.package_prefix_match("org.joda.time.tz.FixedDateTimeZone") == (
        "org.joda.time.tz", "narrow")
    assert registry.package_prefix_match("org.joda.time.DateTime") == ("org.joda", "broad")
    assert registry.package_prefix_match("java.util.List") is None


def test_package_ban_is_exact() -> None:
    registry = BanRegistry(packages={"org.joda.time.tz": ""})
    assert registry.package_ban("org.joda.time.tz") == ""
    assert registry.package_ban("org.joda.time.tz.sub") is None


def test_registry_is_read_only() -> None:
    registry = BanRegistry(classes={"a.B": ""})
    with pytest.raises(TypeError):
        registry.classes["a.C"] = ""


def test_to_document_round_trips_through_loader() -> None:
    loader = BanRegistryLoader()
    loader.load_from_file(DEFAULT_BAN_FILE)
    registry = loader.build()

    copy = BanRegistryLoader()
    copy.load_document(registry.to_document(), "copy")

    assert copy.build().to_document() == registry.to_document()
    assert registry.counts()["methods"] == len(
        [entry for entry in registry.entries() if entry.section == "methods"])
