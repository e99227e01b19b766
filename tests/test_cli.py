from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from xplat_bans import cli
from xplat_bans.registry import loader


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("NO_COLOR", raising=False)
    yield
    # main() installs handlers bound to this test's captured stderr
    logging.getLogger("xplat_bans").handlers.clear()


@pytest.fixture
def clean_tree(write_json) -> Path:
    return write_json("clean.json", {
        "format": "xplat-typed-ast",
        "compilation_units": [{
            "file": "Clean.java",
            "imports": [{"name": "org.joda.time.DateTime"}],
            "declarations": [{"kind": "class", "name": "Clean", "members": [
                {"kind": "field", "name": "when", "type": "org.joda.time.DateTime"},
            ]}],
        }],
    })


def test_clean_tree_exits_zero(clean_tree: Path, capsys: pytest.CaptureFixture) -> None:
    assert cli.main(["check", str(clean_tree), "--no-color"]) == cli.EXIT_OK
    assert "No banned API usage found in 1 file(s)." in capsys.readouterr().out


def test_diagnostics_exit_one(fixtures_dir: Path, capsys: pytest.CaptureFixture) -> None:
    exit_code = cli.main(["check", str(fixtures_dir / "positive_cases.yaml"), "-f", "json"])

    assert exit_code == cli.EXIT_DIAGNOSTICS
    data = json.loads(capsys.readouterr().out)
    assert data["summary"]["total_diagnostics"] == 9


def test_unreadable_input_only_exits_two(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    exit_code = cli.main(["check", str(tmp_path / "missing.json"), "--no-color"])

    assert exit_code == cli.EXIT_FATAL
    assert "could not be read" in capsys.readouterr().out


def test_report_written_to_file(fixtures_dir: Path, tmp_path: Path) -> None:
    output = tmp_path / "report.md"

    exit_code = cli.main(["check", str(fixtures_dir / "suppressed_cases.json"),
                          "-f", "markdown", "-o", str(output), "-j", "2"])

    assert exit_code == cli.EXIT_DIAGNOSTICS
    assert "| Banned API uses | 3 |" in output.read_text(encoding="utf-8")


def test_excel_needs_an_output_file(clean_tree: Path) -> None:
    assert cli.main(["check", str(clean_tree), "-f", "excel"]) == cli.EXIT_FATAL


def test_jobs_must_be_positive(clean_tree: Path) -> None:
    assert cli.main(["check", str(clean_tree), "-j", "0"]) == cli.EXIT_FATAL


def test_override_bans_apply(clean_tree: Path, write_json, capsys: pytest.CaptureFixture) -> None:
    bans = write_json("bans.json", {"classes": {"org.joda.time.DateTime": "use java.time."}})

    exit_code = cli.main(["check", str(clean_tree), "--bans", str(bans), "--no-color"])

    assert exit_code == cli.EXIT_DIAGNOSTICS
    assert "Use of org.joda.time.DateTime has been banned due to use java.time." in capsys.readouterr().out


def test_config_file_is_read(clean_tree: Path, tmp_path: Path, write_json,
                             capsys: pytest.CaptureFixture) -> None:
    bans = write_json("bans.json", {"classes": {"org.joda.time.DateTime": ""}})
    (tmp_path / "xplat_bans.yaml").write_text(
        f"bans:\n  override: {bans}\noutput:\n  default_format: json\n", encoding="utf-8")

    exit_code = cli.main(["check", str(clean_tree)])

    assert exit_code == cli.EXIT_DIAGNOSTICS
    assert json.loads(capsys.readouterr().out)["summary"]["total_diagnostics"] == 2


def test_invalid_config_exits_two(clean_tree: Path, tmp_path: Path) -> None:
    config = tmp_path / "bad.yaml"
    config.write_text("output:\n  default_format: html\n", encoding="utf-8")

    assert cli.main(["check", str(clean_tree), "--config", str(config)]) == cli.EXIT_FATAL


def test_missing_default_ban_list_exits_two(clean_tree: Path, tmp_path: Path,
                                            monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(loader, "DEFAULT_BAN_FILE", tmp_path / "gone.json")

    assert cli.main(["check", str(clean_tree)]) == cli.EXIT_FATAL


def test_list_bans(write_json, capsys: pytest.CaptureFixture) -> None:
    bans = write_json("bans.json", {"packages": {"com.example.legacy": "retired."}})

    assert cli.main(["list-bans", "--bans", str(bans)]) == cli.EXIT_OK

    document = json.loads(capsys.readouterr().out)
    assert document["packages"]["com.example.legacy"] == "retired."
    assert "org.joda.time.Chronology" in document["classes"]
    assert "getAvailableIDs" in document["methods"]["org.joda.time.DateTimeZone"]


def test_list_bans_as_text(write_json, capsys: pytest.CaptureFixture) -> None:
    bans = write_json("bans.json", {"packages": {"com.example.legacy": "retired."}})

    assert cli.main(["list-bans", "--bans", str(bans), "-f", "text"]) == cli.EXIT_OK

    lines = capsys.readouterr().out.splitlines()
    assert "classes\torg.joda.time.Chronology\tcross platform incompatibility." in lines
    assert "packages\tcom.example.legacy\tretired." in lines
    assert ("methods\torg.joda.time.DateTimeZone#getAvailableIDs\t"
            "the set of zone ids differs between platforms.") in lines
    sections = [line.split("\t")[0] for line in lines]
    assert sections == sorted(sections, key=["classes", "packages", "methods"].index)


def test_version(capsys: pytest.CaptureFixture) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--version"])

    assert excinfo.value.code == 0
    assert "Xplat Bans v" in capsys.readouterr().out
