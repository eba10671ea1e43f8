"""Helper functions for parsing and error handling in configuration models."""

from pathlib import Path
from typing import Dict, Optional, Tuple

import yaml
from pydantic import ValidationError as PydanticValidationError

from .validation import ConfigurationParseError


# Top-level and nested keys that are written in kebab-case in files
_BRANCH_MAPPING_KEY = "branches"


def to_snake_case(key: str) -> str:
    return key.replace("-", "_")


def normalize_keys(data: Dict) -> Dict:
    """Convert kebab-case configuration keys to the model's field names.

    Branch names (the keys under 'branches') are user identifiers and are
    kept verbatim.
    """
    normalized = {}
    for key, value in data.items():
        field = to_snake_case(str(key))
        if field == _BRANCH_MAPPING_KEY and isinstance(value, dict):
            value = {
                name: normalize_keys(entry) if isinstance(entry, dict) else entry
                for name, entry in value.items()
            }
        elif isinstance(value, dict):
            value = normalize_keys(value)
        normalized[field] = value
    return normalized


def build_line_map(content: str) -> Dict[str, int]:
    """Map dotted key paths (in model field names) to 1-based line numbers.

    Args:
        content: YAML document

    Returns:
        Mapping such as {'branches.main.increment': 12}
    """
    line_map: Dict[str, int] = {}
    try:
        root = yaml.compose(content)
    except yaml.YAMLError:
        return line_map
    if root is None:
        return line_map

    def walk(node, prefix: str, in_branches: bool) -> None:
        if not isinstance(node, yaml.MappingNode):
            return
        for key_node, value_node in node.value:
            raw = str(key_node.value)
            key = raw if in_branches else to_snake_case(raw)
            path = f"{prefix}.{key}" if prefix else key
            line_map[path] = key_node.start_mark.line + 1
            walk(value_node, path, in_branches=(path == _BRANCH_MAPPING_KEY))

    walk(root, "", in_branches=False)
    return line_map


def convert_pydantic_error_to_parse_error(
    pydantic_error: PydanticValidationError,
    line_map: Dict[str, int],
    config_file: Optional[Path],
    loc_prefix: Tuple[str, ...] = (),
) -> ConfigurationParseError:
    """Convert a Pydantic validation error to a ConfigurationParseError with context.

    Args:
        pydantic_error: The Pydantic validation error
        line_map: Mapping of key paths to line numbers
        config_file: Path to the configuration file (if loaded from file)
        loc_prefix: Path of the model that failed, e.g. ('branches', 'main')

    Returns:
        ConfigurationParseError pointing at the first failing key
    """
    if not pydantic_error.errors():
        return ConfigurationParseError(
            message=str(pydantic_error),
            config_file=config_file,
            original_error=pydantic_error,
        )

    error = pydantic_error.errors()[0]
    loc = tuple(loc_prefix) + tuple(error.get("loc", ()))
    key = ".".join(str(part) for part in loc) if loc else None

    # Missing keys have no line of their own; fall back to the parent mapping
    line_number = None
    if key:
        parts = key.split(".")
        while parts and line_number is None:
            line_number = line_map.get(".".join(parts))
            parts.pop()

    return ConfigurationParseError(
        message=error.get("msg", str(pydantic_error)),
        config_file=config_file,
        line_number=line_number,
        key=key,
        original_error=pydantic_error,
    )
