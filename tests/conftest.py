import os

import pytest

from myshell import config
from myshell.builtin import BUILTINS
from myshell.state import ShellState


def write_script(folder, name, body, mode=0o755):
    path = folder / name
    path.write_text("#!/bin/sh\n" + body + "\n")
    os.chmod(path, mode)
    return path


@pytest.fixture
def bin_dir(tmp_path):
    d = tmp_path / "bin"
    d.mkdir()
    return d


@pytest.fixture
def work_dir(tmp_path):
    d = tmp_path / "work"
    d.mkdir()
    return d


@pytest.fixture
def state(bin_dir, work_dir):
    return ShellState(dict(BUILTINS), [str(bin_dir)], str(work_dir))


@pytest.fixture(autouse=True)
def isolated_history(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "HISTORY_FILE", str(tmp_path / "history"))
