import json
import logging

import pytest

from ink_decomp.main import main
from test_story import EXPECTED, STORY


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def story_file(tmp_path):
    path = tmp_path / "story.json"
    path.write_bytes(b"\xef\xbb\xbf" + json.dumps(STORY).encode("utf-8"))
    return path


def test_script_mode(story_file, capsys):
    assert main([str(story_file)]) == 0
    assert capsys.readouterr().out == EXPECTED


def test_script_mode_with_header(story_file, capsys):
    assert main([str(story_file), "--with-header"]) == 0
    assert capsys.readouterr().out.startswith("// Decompiled by pyinkdec\n\nVAR score = 0\n")


def test_missing_argument(capsys):
    assert main([]) == 1
    assert "story file is required" in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "absent.json")]) == 1
    assert "File not found" in capsys.readouterr().err


def test_tokens_mode(story_file, capsys):
    assert main([str(story_file), "--mode", "tokens"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("OBJECT_START {\n    FIELD_NAME \"inkVersion\"\n    INTEGER 21\n")
    assert "VAR score" not in out


def test_both_mode(story_file, capsys):
    assert main([str(story_file), "--mode", "both"]) == 0
    out = capsys.readouterr().out
    assert "INK SCRIPT" in out
    assert "TOKENS" in out
    assert out.index(EXPECTED) < out.index("OBJECT_START {")


def test_statistics(story_file, capsys):
    assert main([str(story_file), "--stats"]) == 0
    out = capsys.readouterr().out
    assert "STORY STATISTICS" in out
    assert "Globals: 4" in out
    assert "Knots: 1" in out
    assert "Functions: 1" in out
    assert "Stitches: 1" in out
    assert "Token kinds:" in out


def test_broken_story_in_tokens_mode(tmp_path, capsys):
    path = tmp_path / "broken.json"
    path.write_bytes(b"[1,]")
    assert main([str(path), "--mode", "tokens"]) == 1
    captured = capsys.readouterr()
    assert "ERROR Unexpected trailing comma" in captured.out
    assert "Token stream stopped at offset 3" in captured.err


def test_broken_story_in_script_mode(tmp_path, capsys):
    path = tmp_path / "broken.json"
    path.write_bytes(b'{"root": [1,]}')
    assert main([str(path)]) == 1
    assert "Error decompiling" in capsys.readouterr().err


def test_story_without_root(tmp_path, capsys):
    path = tmp_path / "empty.json"
    path.write_bytes(b'{"inkVersion": 21}')
    assert main([str(path)]) == 1
    assert "no root container" in capsys.readouterr().err
