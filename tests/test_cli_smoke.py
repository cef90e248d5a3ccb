from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from cli import main


def _copy_mini_project_fixture(root: Path) -> Path:
    fixture_project = Path(__file__).parent / "fixtures" / "mini_project"
    shutil.copytree(fixture_project, root)
    return root.resolve()


def test_cli_specifier_between_source_files(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _copy_mini_project_fixture(tmp_path / "project")

    exit_code = main(
        [
            "specifier",
            str(root / "src" / "lib" / "utils.ts"),
            str(root / "src" / "main.ts"),
            "--root",
            str(root),
        ]
    )

    assert exit_code == 0
    assert capsys.readouterr().out == "./lib/utils\n"


def test_cli_specifier_from_generated_file_uses_nested_output(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _copy_mini_project_fixture(tmp_path / "project")

    exit_code = main(
        [
            "specifier",
            str(root / "src" / "main.ts"),
            str(root / "src" / "main.ngfactory.ts"),
            "--root",
            str(root),
        ]
    )

    assert exit_code == 0
    assert capsys.readouterr().out == "../main\n"


def test_cli_specifier_self_import_reports_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _copy_mini_project_fixture(tmp_path / "project")
    main_file = str(root / "src" / "main.ts")

    exit_code = main(["specifier", main_file, main_file, "--root", str(root)])

    assert exit_code == 2
    assert "cannot import itself" in capsys.readouterr().err


def test_cli_metadata_upgrades_legacy_record(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _copy_mini_project_fixture(tmp_path / "project")

    exit_code = main(
        ["metadata", str(root / "src" / "models.pyi"), "--root", str(root)]
    )

    assert exit_code == 0
    records = json.loads(capsys.readouterr().out)
    assert [record["version"] for record in records] == [1, 2]
    assert list(records[1]["metadata"]) == ["Bar", "BarChild", "Greeter", "foo"]
    assert records[1]["metadata"]["Bar"]["members"] == {
        "name": [{"__symbolic": "property"}],
        "__init__": [{"__symbolic": "constructor"}],
        "init": [{"__symbolic": "method"}],
    }
    assert records[1]["metadata"]["Greeter"]["__symbolic"] == "interface"


def test_cli_metadata_collects_module_without_stored_records(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _copy_mini_project_fixture(tmp_path / "project")

    exit_code = main(
        ["metadata", str(root / "src" / "widgets.py"), "--root", str(root)]
    )

    assert exit_code == 0
    records = json.loads(capsys.readouterr().out)
    assert records == [
        {
            "__symbolic": "module",
            "version": 2,
            "metadata": {
                "Widget": {
                    "__symbolic": "class",
                    "members": {"render": [{"__symbolic": "method"}]},
                },
                "make_widget": {
                    "__symbolic": "function",
                    "parameters": ["kind", "theme"],
                },
            },
        }
    ]


def test_cli_metadata_unknown_module(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _copy_mini_project_fixture(tmp_path / "project")

    exit_code = main(["metadata", str(root / "src" / "main.ts"), "--root", str(root)])

    assert exit_code == 1
    assert "no metadata" in capsys.readouterr().err


def test_cli_metadata_malformed_record(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _copy_mini_project_fixture(tmp_path / "project")
    broken = root / "src" / "broken.metadata.json"
    broken.write_text("{not json", encoding="utf-8")

    exit_code = main(
        ["metadata", str(root / "src" / "broken.d.ts"), "--root", str(root)]
    )

    assert exit_code == 2
    assert f"{broken.as_posix()}: Invalid JSON" in capsys.readouterr().err


def test_cli_metadata_strict_rejects_legacy_only(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _copy_mini_project_fixture(tmp_path / "project")
    (root / "src" / "legacy.metadata.v1.json").write_text(
        json.dumps({"__symbolic": "module", "version": 1, "metadata": {}}),
        encoding="utf-8",
    )
    legacy = str(root / "src" / "legacy.d.ts")

    assert main(["metadata", legacy, "--root", str(root)]) == 0
    assert [r["version"] for r in json.loads(capsys.readouterr().out)] == [1]

    assert main(["metadata", legacy, "--strict", "--root", str(root)]) == 1
    assert "only version 1 metadata is stored" in capsys.readouterr().err


def test_cli_validate_warns_on_legacy_only(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _copy_mini_project_fixture(tmp_path / "project")

    exit_code = main(["validate", "--root", str(root)])

    assert exit_code == 0
    captured = capsys.readouterr()
    assert "warning: " in captured.err
    assert "models.metadata.v1.json" in captured.err


def test_cli_validate_strict_schema_version_fails(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _copy_mini_project_fixture(tmp_path / "project")

    exit_code = main(["validate", "--root", str(root), "--strict-schema-version"])

    assert exit_code == 1
    assert "Only schema version 1 is stored" in capsys.readouterr().err


def test_cli_validate_default_directory_from_cwd(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _copy_mini_project_fixture(tmp_path / "project")
    (root / "src" / "models.metadata.json").write_text("[1]", encoding="utf-8")

    monkeypatch.chdir(root)
    exit_code = main(["validate"])

    assert exit_code == 1
    captured = capsys.readouterr()
    assert f"{(root / 'src' / 'models.metadata.json').as_posix()}:" in captured.err
    assert "Record 0 is not a JSON object." in captured.err


def test_cli_validate_missing_directory_reports_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _copy_mini_project_fixture(tmp_path / "project")
    missing = root / "missing"

    exit_code = main(["validate", str(missing), "--root", str(root)])

    assert exit_code == 1
    captured = capsys.readouterr()
    assert f"{missing.as_posix()}:" in captured.err
    assert "Directory does not exist." in captured.err


def test_cli_invalid_config_reports_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _copy_mini_project_fixture(tmp_path / "project")
    (root / "genref.toml").write_text("bogus_key = true\n", encoding="utf-8")

    exit_code = main(["validate", "--root", str(root)])

    assert exit_code == 2
    assert "Invalid config" in capsys.readouterr().err
