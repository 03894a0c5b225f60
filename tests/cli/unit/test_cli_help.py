"""CLI smoke tests."""

from click.testing import CliRunner
from docstore_schema.cli import cli


def test_cli_displays_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    for command in ("generate-config", "resolve", "collection-group", "narrow", "export-inventory"):
        assert command in result.output
    assert "--log-level" in result.output
