"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "config.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Configuration template for docstore-schema.
# Replace every <REQUIRED> placeholder before running resolve, narrow or export-inventory.
# Optional sections may be deleted; their defaults are shown.

schema:
  # Provide either an inline YAML declaration or a path to a declaration file.
  # Relative paths are resolved against the directory of this file.
  path: "<REQUIRED>"
  # inline: |
  #   users:
  #     "*":
  #       $schema:
  #         name: string
  #         age: number

declaration:
  # Document key holding a document's field schema.
  schema_key: "$schema"
  # Collection key standing for any document name.
  generic_document_key: "*"

resolution:
  # Collection nesting levels searched by collection-group lookups.
  max_traversal_depth: 64
"""


def build_placeholder_configuration() -> str:
    """Build a YAML configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
