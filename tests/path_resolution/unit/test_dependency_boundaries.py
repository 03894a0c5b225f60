"""Boundary tests for the pure resolution core."""

from __future__ import annotations

from pathlib import Path


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


def test_core_packages_do_not_import_outer_layers() -> None:
    package_dir = _project_root() / "src" / "docstore_schema"
    core_dirs = (
        package_dir / "schema_tree",
        package_dir / "path_grammar",
        package_dir / "path_resolution",
        package_dir / "query_narrowing",
    )
    forbidden_import_fragments = (
        "docstore_schema.typed_store",
        "docstore_schema.configuration",
        "docstore_schema.inventory_export",
        "docstore_schema.cli",
        "import click",
        "openpyxl",
    )

    for core_dir in core_dirs:
        for module_path in sorted(core_dir.glob("*.py")):
            text = module_path.read_text(encoding="utf-8")
            for fragment in forbidden_import_fragments:
                assert fragment not in text, (
                    f"Forbidden core dependency in {module_path}: {fragment}"
                )


def test_schema_tree_does_not_depend_on_resolution() -> None:
    schema_tree_dir = _project_root() / "src" / "docstore_schema" / "schema_tree"

    for module_path in sorted(schema_tree_dir.glob("*.py")):
        text = module_path.read_text(encoding="utf-8")
        assert "docstore_schema.path_resolution" not in text
        assert "docstore_schema.query_narrowing" not in text
