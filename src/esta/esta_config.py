"""
Parser configuration for Esta.

`ParserConfig` gathers the switches that change what the parser accepts.
It can be built directly, from a plain mapping, or from a JSON file:

    {
        "legacy_for_syntax": true,
        "max_nesting_depth": 64
    }

Raises:
    ConfigError: If the mapping has unknown keys, values of the wrong type,
        or the file cannot be read or decoded.
"""

import json
from dataclasses import dataclass, fields
from typing import Any

from esta.esta_errors import ConfigError


@dataclass(frozen=True)
class ParserConfig:
    """Options consulted by `Parser`.

    Attributes:
        legacy_for_syntax (bool): Require the extra `;` between the increment
            clause and the body of a `for` loop (`for a; b; c; { }`).
        max_nesting_depth (int): Deepest allowed nesting of statements and
            expressions before the parse is rejected.
    """

    legacy_for_syntax: bool = False
    max_nesting_depth: int = 200

    @classmethod
    def from_mapping(cls, raw: Any) -> "ParserConfig":
        """Validates `raw` and builds a config; missing keys keep their defaults."""
        if not isinstance(raw, dict):
            raise ConfigError("Configuration must be a JSON object")

        known = {f.name: f for f in fields(cls)}
        problems: list[str] = []
        values: dict[str, Any] = {}
        for key, value in raw.items():
            if key not in known:
                problems.append(f"unknown option '{key}'")
                continue
            expected = type(getattr(cls(), key))
            # bool is an int subclass; keep the two apart
            if type(value) is not expected:
                problems.append(
                    f"'{key}' must be {expected.__name__}, got {type(value).__name__}"
                )
                continue
            values[key] = value

        if "max_nesting_depth" in values and values["max_nesting_depth"] < 1:
            problems.append("'max_nesting_depth' must be at least 1")

        if problems:
            raise ConfigError("Invalid parser configuration", problems)
        return cls(**values)

    @classmethod
    def from_json(cls, path: str) -> "ParserConfig":
        """Loads a config from a JSON file."""
        try:
            with open(path, encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to load config file: {e}") from e
        return cls.from_mapping(raw)


__all__ = ["ParserConfig"]
