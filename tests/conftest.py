import shutil
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def scenario_dir(tmp_path):
    """Copy of the two-file scenario (a.zig imports b.zig) in a temp dir."""
    target = tmp_path / "scenario"
    shutil.copytree(FIXTURES / "scenario", target)
    return target


@pytest.fixture
def write_zig(tmp_path):
    def write(name, source):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
        return path
    return write
