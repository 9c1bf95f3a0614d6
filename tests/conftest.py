"""Test configuration ensuring the project source tree is importable."""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent

root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from ink_decomp.ast import DecompileContext  # noqa: E402


@pytest.fixture
def context():
    return DecompileContext()
