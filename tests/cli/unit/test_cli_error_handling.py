"""CLI error-handling tests."""

from __future__ import annotations

from pathlib import Path

from docstore_schema.cli import main


def _write_config(tmp_path: Path) -> Path:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "schema:\n  inline: 'users: {\"*\": {$schema: {name: string, age: number}}}'\n",
        encoding="utf-8",
    )
    return config_path


def test_missing_required_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["export-inventory", "--output", "/tmp/out.xlsx"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "Missing option" in captured.err
    assert "--config" in captured.err
    assert "Traceback" not in captured.err


def test_unknown_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["resolve", "--bogus"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "No such option: --bogus" in captured.err
    assert "Traceback" not in captured.err


def test_missing_configuration_returns_domain_error(tmp_path: Path, capsys) -> None:
    exit_code = main(["resolve", "--config", str(tmp_path / "missing.yaml"), "users"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Configuration file not found" in captured.err


def test_malformed_path_returns_domain_error(tmp_path: Path, capsys) -> None:
    exit_code = main(["resolve", "--config", str(_write_config(tmp_path)), "users//u1"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "empty segment" in captured.err


def test_unknown_operator_returns_domain_error(tmp_path: Path, capsys) -> None:
    exit_code = main(
        ["narrow", "--config", str(_write_config(tmp_path)), "users", "--where", "age ~ 3"]
    )
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Unsupported filter operator" in captured.err


def test_incomplete_filter_returns_domain_error(tmp_path: Path, capsys) -> None:
    exit_code = main(
        ["narrow", "--config", str(_write_config(tmp_path)), "users", "--where", "age =="]
    )
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "missing a comparison value" in captured.err


def test_existing_config_is_not_overwritten(tmp_path: Path, capsys) -> None:
    output_path = tmp_path / "config.yaml"
    output_path.write_text("existing", encoding="utf-8")

    exit_code = main(["generate-config", "--output", str(output_path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "already exists" in captured.err
    assert output_path.read_text(encoding="utf-8") == "existing"
