import os
import sys
import subprocess
from contextlib import ExitStack

from myshell import config
from myshell.parser import (
    APPEND, STDERR, STDOUT, TRUNCATE, RedirectionError, plan_redirections, tokenize,
)
from myshell.resolver import CommandKind, resolve
from myshell.state import BuiltinError, CommandOutcome

OPEN_FLAGS = {
    TRUNCATE: os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
    APPEND: os.O_WRONLY | os.O_CREAT | os.O_APPEND,
}


def run_external(path, argv, cwd):
    """
    Chạy lệnh ngoài, giữ lại stdout/stderr.
    Returns: CommandOutcome

    argv[0] is what the user typed; `path` is the executable actually started.
    A non-zero exit status is ordinary output, only a failure to start raises.
    """
    res = subprocess.run(
        argv,
        executable=path,
        cwd=cwd,
        stdin=subprocess.DEVNULL,
        capture_output=True,
        encoding=config.ENCODING,
        errors="replace",
    )
    return CommandOutcome(stdout=res.stdout or "", stderr=res.stderr or "")


def run_command(state, plan):
    """
    Resolve and run one planned command.
    Returns: CommandOutcome
    """
    name, args = plan.command, plan.args
    resolution = resolve(name, state.builtins, state.search_path)

    if resolution.kind is CommandKind.BUILTIN:
        try:
            return resolution.handler(state, args) or CommandOutcome()
        except BuiltinError as e:
            print(f"{config.SHELL_NAME}: failed to execute {name} with args {args}: {e}")
            return CommandOutcome()

    elif resolution.kind is CommandKind.EXTERNAL:
        try:
            return run_external(resolution.path, plan.argv, state.cwd)
        except OSError as e:
            print(f"{config.SHELL_NAME}: failed to execute external command "
                  f"{resolution.path} with args {args}: {e}")
            return CommandOutcome()

    elif resolution.kind is CommandKind.NOT_FOUND:
        print(f"{name}: command not found")
        return CommandOutcome()

    raise ValueError(f"unknown command kind: {resolution.kind}")


def open_destination(spec, cwd):
    """Mở file đích của redirection (tạo mới nếu chưa có, quyền 0644)"""
    path = os.path.join(cwd, os.path.expanduser(spec.path))
    fd = os.open(path, OPEN_FLAGS[spec.mode], config.FILE_MODE)
    return os.fdopen(fd, "w", encoding=config.ENCODING)


def flush_outcome(outcome, out, err):
    """Ghi output của lệnh ra đích đã chọn"""
    if outcome.stdout:
        out.write(outcome.stdout)
        out.flush()
    if outcome.stderr:
        err.write(outcome.stderr)
        err.flush()


def execute_line(state, line):
    """
    tokenize -> plan -> resolve -> execute -> flush
    Returns: CommandOutcome of the command, or None if nothing ran.
    """
    tokens = tokenize(line)
    if not tokens:
        return None

    try:
        plan = plan_redirections(tokens)
    except RedirectionError as e:
        print(f"{config.SHELL_NAME}: {e}")
        return None

    # Mọi file redirect đều được mở (và truncate) theo thứ tự,
    # nhưng chỉ file cuối cùng của mỗi stream nhận output
    with ExitStack() as stack:
        opened = {}
        for spec in plan.redirections:
            try:
                opened[spec] = stack.enter_context(open_destination(spec, state.cwd))
            except OSError as e:
                print(f"{config.SHELL_NAME}: {spec.path}: {e.strerror}")
                if config.FATAL_REDIRECT_ERRORS:
                    sys.exit(1)
                return None

        out_spec, err_spec = plan.destination(STDOUT), plan.destination(STDERR)
        out = opened[out_spec] if out_spec else sys.stdout
        err = opened[err_spec] if err_spec else sys.stderr

        outcome = run_command(state, plan)
        flush_outcome(outcome, out, err)

    return outcome
