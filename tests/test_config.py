import json
from pathlib import Path

import pytest

from esta.esta_config import ParserConfig
from esta.esta_errors import ConfigError


def test_defaults() -> None:
    cfg = ParserConfig()
    assert cfg.legacy_for_syntax is False
    assert cfg.max_nesting_depth == 200


def test_from_mapping_overrides() -> None:
    cfg = ParserConfig.from_mapping({"legacy_for_syntax": True, "max_nesting_depth": 10})
    assert cfg == ParserConfig(legacy_for_syntax=True, max_nesting_depth=10)


def test_from_mapping_empty_keeps_defaults() -> None:
    assert ParserConfig.from_mapping({}) == ParserConfig()


def test_unknown_key_raises() -> None:
    with pytest.raises(ConfigError) as e:
        ParserConfig.from_mapping({"strict": True})
    assert e.value.problems == ["unknown option 'strict'"]


def test_wrong_types_are_all_reported() -> None:
    with pytest.raises(ConfigError, match="Invalid parser configuration") as e:
        ParserConfig.from_mapping({"legacy_for_syntax": 1, "max_nesting_depth": True})
    assert e.value.problems == [
        "'legacy_for_syntax' must be bool, got int",
        "'max_nesting_depth' must be int, got bool",
    ]


def test_depth_must_be_positive() -> None:
    with pytest.raises(ConfigError) as e:
        ParserConfig.from_mapping({"max_nesting_depth": 0})
    assert "at least 1" in e.value.problems[0]


def test_non_object_raises() -> None:
    with pytest.raises(ConfigError, match="JSON object"):
        ParserConfig.from_mapping(["legacy_for_syntax"])


def test_from_json(tmp_path: Path) -> None:
    path = tmp_path / "esta.json"
    path.write_text(json.dumps({"legacy_for_syntax": True}), encoding="utf-8")
    assert ParserConfig.from_json(str(path)).legacy_for_syntax is True


def test_from_json_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Failed to load config file"):
        ParserConfig.from_json(str(tmp_path / "nope.json"))


def test_from_json_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError, match="Failed to load config file"):
        ParserConfig.from_json(str(path))
