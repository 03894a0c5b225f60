"""CLI orchestration integration tests."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner
from docstore_schema.cli import cli
from docstore_schema.inventory_export import COLLECTIONS_SHEET_NAME
from openpyxl import load_workbook

_DECLARATION = """
users:
  "*":
    $schema:
      name: string
      age: number
      role: "'admin' | 'member'"
    posts:
      "*":
        $schema:
          title: string
          tags: string[]
posts:
  p1:
    $schema:
      title: string
  p2:
    $schema:
      title: string
      draft: boolean
"""


def _write_config(tmp_path: Path) -> Path:
    (tmp_path / "schema.yaml").write_text(_DECLARATION, encoding="utf-8")
    path = tmp_path / "config.yaml"
    path.write_text('schema:\n  path: "schema.yaml"\n', encoding="utf-8")
    return path


def _invoke_json(arguments: list[str]) -> dict:
    result = CliRunner().invoke(cli, arguments)
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def test_generate_config_command_writes_scaffold(tmp_path: Path) -> None:
    output_path = tmp_path / "generated.yaml"

    result = CliRunner().invoke(cli, ["generate-config", "--output", str(output_path)])

    assert result.exit_code == 0
    assert str(output_path.resolve()) in result.stdout
    assert "schema:" in output_path.read_text(encoding="utf-8")


def test_resolve_command_prints_union_for_either_kind(tmp_path: Path) -> None:
    config_path = str(_write_config(tmp_path))

    document = _invoke_json(["resolve", "--config", config_path, "users/u1"])
    collection = _invoke_json(["resolve", "--config", config_path, "posts"])

    assert document == {
        "generic": False,
        "variants": [
            {
                "origins": ["users/{id}"],
                "fields": {"age": "number", "name": "string", "role": "'admin' | 'member'"},
            }
        ],
    }
    assert [variant["origins"] for variant in collection["variants"]] == [
        ["posts/p2"],
        ["posts/p1"],
    ]


def test_resolve_command_supports_wildcards_and_literal_mode(tmp_path: Path) -> None:
    config_path = str(_write_config(tmp_path))

    wildcard = _invoke_json(["resolve", "--config", config_path, "{any}/p2"])
    literal = _invoke_json(["resolve", "--config", config_path, "--literal", "users/{uid}"])

    assert len(wildcard["variants"]) == 2
    assert literal["variants"][0]["origins"] == ["users/{id}"]


def test_collection_group_command_spans_depths(tmp_path: Path) -> None:
    payload = _invoke_json(
        ["collection-group", "--config", str(_write_config(tmp_path)), "posts"]
    )

    origins = sorted(origin for variant in payload["variants"] for origin in variant["origins"])
    assert origins == ["posts/p1", "posts/p2", "users/{id}/posts/{id}"]


def test_narrow_command_applies_filters_and_selection(tmp_path: Path) -> None:
    config_path = str(_write_config(tmp_path))

    drafts = _invoke_json(
        ["narrow", "--config", config_path, "posts", "--where", "draft == false"]
    )
    tagged = _invoke_json(
        [
            "narrow",
            "--config",
            config_path,
            "users/{uid}/posts",
            "--where",
            "tags array-contains-any [news, sports]",
            "--select",
            "title",
        ]
    )
    not_admins = _invoke_json(
        ["narrow", "--config", config_path, "users", "--where", "role != admin"]
    )
    unknown = _invoke_json(
        ["narrow", "--config", config_path, "users", "--where", "nickname has-field"]
    )

    assert drafts["variants"][0]["origins"] == ["posts/p2"]
    assert len(drafts["variants"]) == 1
    assert tagged["variants"] == [
        {"origins": ["users/{id}/posts/{id}"], "fields": {"title": "string"}}
    ]
    assert [variant["origins"] for variant in not_admins["variants"]] == [["users/{id}"]]
    assert unknown == {"generic": True, "variants": []}


def test_export_inventory_command_writes_workbook(tmp_path: Path) -> None:
    output_path = tmp_path / "inventory.xlsx"

    result = CliRunner().invoke(
        cli,
        [
            "export-inventory",
            "--config",
            str(_write_config(tmp_path)),
            "--output",
            str(output_path),
        ],
    )

    assert result.exit_code == 0, result.output
    workbook = load_workbook(output_path)
    sheet = workbook[COLLECTIONS_SHEET_NAME]
    paths = {row[0] for row in sheet.iter_rows(min_row=3, values_only=True)}
    assert paths == {"users", "posts", "users/{id}/posts"}
