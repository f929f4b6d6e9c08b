from pathlib import Path

import pytest

from esta.esta_config import ParserConfig

SAMPLE_PROGRAM = """\
# sum the first n numbers
fun sum(n,) {
    var total = 0;
    var i = 0;
    while i < n {
        i = i + 1;
        total = total + i;
    }
    return total;
}

var result = sum(10);
if result == 55 {
    print("ok");
} else if result > 55 {
    print("high");
} else {
    print("low");
}
"""


@pytest.fixture  # type: ignore[misc]
def legacy_config() -> ParserConfig:
    return ParserConfig(legacy_for_syntax=True)


@pytest.fixture  # type: ignore[misc]
def sample_file(tmp_path: Path) -> Path:
    path = tmp_path / "sample.esta"
    path.write_text(SAMPLE_PROGRAM, encoding="utf-8")
    return path


@pytest.fixture  # type: ignore[misc]
def sample_source() -> str:
    return SAMPLE_PROGRAM
