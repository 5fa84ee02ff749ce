"""Load schema shapes from YAML files.

File format:

    fields:
      firstName:
        type: string
        required: true
        choices: [hello, goodbye, yo]
      lastName:
        type: string
        nullable: true
    allowUnknown: false
"""

from pathlib import Path
from typing import Any

import yaml

from supermodel.errors import ConfigurationError
from supermodel.schema.types import Schema


def load_schema(path: Path | str) -> Schema:
    """Load a Schema from a YAML file.

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Schema file not found: {path}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    return schema_from_dict(data, source=str(path))


def schema_from_dict(data: Any, source: str = "<dict>") -> Schema:
    """Build a Schema from the parsed YAML document structure."""
    if not isinstance(data, dict) or not isinstance(data.get("fields"), dict):
        raise ConfigurationError(f"{source}: expected a mapping with a 'fields' key")

    shape: dict[str, Any] = dict(data["fields"])
    if data.get("allowUnknown"):
        shape["allowUnknown"] = True
    return Schema.from_shape(shape)
