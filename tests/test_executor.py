import os
import stat

import pytest

from myshell import config
from myshell.executor import execute_line, flush_outcome, run_external
from myshell.state import CommandOutcome

from conftest import write_script


def test_echo_to_terminal(state, capsys):
    outcome = execute_line(state, "echo 'hello   world'")
    assert outcome.stdout == "hello   world\n"
    assert capsys.readouterr().out == "hello   world\n"


def test_blank_line_runs_nothing(state, capsys):
    assert execute_line(state, "   ") is None
    assert capsys.readouterr().out == ""


def test_command_not_found(state, work_dir, capsys):
    execute_line(state, "nonexistent-cmd arg1")
    assert capsys.readouterr().out == "nonexistent-cmd: command not found\n"
    assert state.cwd == str(work_dir)


def test_redirect_truncate_and_append(state, tmp_path, capsys):
    out = tmp_path / "out.txt"
    execute_line(state, f"echo hello > {out}")
    assert out.read_text() == "hello\n"
    execute_line(state, f"echo again >> {out}")
    assert out.read_text() == "hello\nagain\n"
    execute_line(state, f"echo first 1> {out}")
    execute_line(state, f"echo second 1> {out}")
    assert out.read_text() == "second\n"
    execute_line(state, f"echo third 1>> {out}")
    assert out.read_text() == "second\nthird\n"
    assert capsys.readouterr().out == ""


def test_redirect_file_mode(state, tmp_path):
    old = os.umask(0)
    try:
        execute_line(state, f"echo x > {tmp_path / 'f'}")
    finally:
        os.umask(old)
    assert stat.S_IMODE(os.stat(tmp_path / "f").st_mode) == 0o644


def test_relative_redirect_uses_shell_cwd(state, work_dir):
    execute_line(state, "echo hi > rel.txt")
    assert (work_dir / "rel.txt").read_text() == "hi\n"


def test_words_after_redirect_are_dropped(state, tmp_path):
    out = tmp_path / "out.txt"
    execute_line(state, f"echo a > {out} b c")
    assert out.read_text() == "a\n"


def test_last_redirect_wins_but_all_are_created(state, tmp_path):
    first, second = tmp_path / "first", tmp_path / "second"
    execute_line(state, f"echo hi > {first} > {second}")
    assert first.read_text() == ""
    assert second.read_text() == "hi\n"


def test_stdout_redirect_leaves_stderr_on_terminal(state, bin_dir, tmp_path, capsys):
    write_script(bin_dir, "both", "echo out; echo err >&2")
    out = tmp_path / "out.txt"
    execute_line(state, f"both > {out}")
    captured = capsys.readouterr()
    assert out.read_text() == "out\n"
    assert captured.out == ""
    assert captured.err == "err\n"


def test_stderr_redirect_leaves_stdout_on_terminal(state, bin_dir, tmp_path, capsys):
    write_script(bin_dir, "both", "echo out; echo err >&2")
    err = tmp_path / "err.txt"
    execute_line(state, f"both 2> {err}")
    execute_line(state, f"both 2>> {err}")
    captured = capsys.readouterr()
    assert err.read_text() == "err\nerr\n"
    assert captured.out == "out\nout\n"
    assert captured.err == ""


def test_builtin_stderr_redirect(state, tmp_path, capsys):
    err = tmp_path / "err.txt"
    execute_line(state, f"type missing_cmd 2> {err}")
    assert err.read_text() == "missing_cmd: not found\n"
    assert capsys.readouterr().err == ""


def test_external_nonzero_exit_is_output(state, bin_dir, capsys):
    write_script(bin_dir, "fail", "echo partial; echo broken >&2; exit 7")
    outcome = execute_line(state, "fail")
    assert outcome == CommandOutcome("partial\n", "broken\n")
    captured = capsys.readouterr()
    assert captured.out == "partial\n"
    assert captured.err == "broken\n"


def test_external_argv_and_cwd(state, bin_dir, work_dir, capsys):
    write_script(bin_dir, "show", 'echo "$0|$#|$1|$2"; pwd')
    execute_line(state, "show 'a b' c\\ d")
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].endswith("show|2|a b|c d")
    assert os.path.realpath(lines[1]) == os.path.realpath(str(work_dir))


def test_external_start_failure(state, bin_dir, capsys, monkeypatch):
    write_script(bin_dir, "vanish", "true")

    def boom(*args, **kwargs):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr("myshell.executor.run_external", boom)
    assert execute_line(state, "vanish x") == CommandOutcome()
    out = capsys.readouterr().out
    assert out.startswith(f"{config.SHELL_NAME}: failed to execute external command")
    assert "['x']" in out


def test_builtin_error_is_reported(state, capsys):
    execute_line(state, "cd a b")
    out = capsys.readouterr().out
    assert out == ("myshell: failed to execute cd with args ['a', 'b']: "
                   "cd command takes exactly 1 argument of type string\n")


def test_exit_closes_redirect_files(state, tmp_path):
    out = tmp_path / "out.txt"
    with pytest.raises(SystemExit) as exc:
        execute_line(state, f"exit 4 > {out}")
    assert exc.value.code == 4
    assert out.exists()


def test_missing_filename_is_reported(state, capsys):
    assert execute_line(state, "echo hi >") is None
    assert capsys.readouterr().out == "myshell: syntax error near unexpected token 'newline'\n"


def test_open_failure_is_fatal(state, tmp_path, capsys):
    target = tmp_path / "nodir" / "out.txt"
    with pytest.raises(SystemExit) as exc:
        execute_line(state, f"echo hi > {target}")
    assert exc.value.code == 1
    assert "No such file or directory" in capsys.readouterr().out


def test_open_failure_recoverable(state, tmp_path, capsys, monkeypatch):
    monkeypatch.setattr(config, "FATAL_REDIRECT_ERRORS", False)
    target = tmp_path / "nodir" / "out.txt"
    assert execute_line(state, f"echo hi > {target}") is None
    out = capsys.readouterr().out
    assert out == f"myshell: {target}: No such file or directory\n"


def test_run_external_captures(bin_dir):
    exe = write_script(bin_dir, "greet", 'echo "hi $1"')
    assert run_external(str(exe), ["greet", "bob"], str(bin_dir)) == CommandOutcome("hi bob\n", "")


def test_flush_outcome_skips_empty(tmp_path):
    out_path, err_path = tmp_path / "o", tmp_path / "e"
    with open(out_path, "w") as out, open(err_path, "w") as err:
        flush_outcome(CommandOutcome("x\n", ""), out, err)
    assert out_path.read_text() == "x\n"
    assert err_path.read_text() == ""
