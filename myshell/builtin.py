import os
import re
import sys

from myshell.history import format_history
from myshell.parser import REDIRECT_OPERATORS
from myshell.resolver import search_path
from myshell.state import BuiltinError, CommandOutcome

EXIT_CODE_RE = re.compile(r"[+-]?\d+", re.ASCII)


def builtin_exit(state, args):
    """Thoát shell với exit code cho trước"""
    if len(args) != 1:
        raise BuiltinError("exit command takes exactly 1 argument of type int")
    if not EXIT_CODE_RE.fullmatch(args[0]):
        raise BuiltinError(f"exit command failed to parse exit code: {args[0]!r}")
    sys.exit(int(args[0]))


def builtin_echo(state, args):
    return CommandOutcome(stdout=" ".join(args) + "\n")


def builtin_type(state, args):
    """Cho biết lệnh là builtin, file thực thi trong PATH, hay không tồn tại"""
    if len(args) != 1:
        raise BuiltinError("type command takes exactly 1 argument of type string")

    name = args[0]
    if name in state.builtins:
        return CommandOutcome(stdout=f"{name} is a shell builtin\n")

    path = search_path(name, state.search_path)
    if path:
        return CommandOutcome(stdout=f"{name} is {path}\n")
    return CommandOutcome(stderr=f"{name}: not found\n")


def builtin_pwd(state, args):
    return CommandOutcome(stdout=state.cwd + "\n")


def builtin_cd(state, args):
    """
    Change the shell's working directory.

     ~...  : ~ đầu tiên được thay bằng home directory
     ....  : nối với thư mục hiện tại
     other : dùng nguyên văn
    The directory is left unchanged when the destination does not exist.
    """
    if len(args) != 1:
        raise BuiltinError("cd command takes exactly 1 argument of type string")

    dest = args[0]
    if dest.startswith("~"):
        dest = dest.replace("~", os.path.expanduser("~"), 1)
    elif dest.startswith("."):
        dest = os.path.normpath(os.path.join(state.cwd, dest))

    if not os.path.exists(dest):
        return CommandOutcome(stderr=f"cd: {dest}: No such file or directory\n")

    state.cwd = dest
    return CommandOutcome()


def builtin_history(state, args):
    """Show command history"""
    return CommandOutcome(stdout=format_history())


def builtin_help(state, args):
    """Print help message"""
    operators = " ".join(REDIRECT_OPERATORS)
    lines = [
        "myshell help:",
        " Built-in commands:",
    ]
    lines += [f"  {name}" for name in sorted(state.builtins)]
    lines += [
        "Features:",
        f"  Redirection using {operators}",
        "  External commands found on PATH",
    ]
    return CommandOutcome(stdout="\n".join(lines) + "\n")


BUILTINS = {
    "exit": builtin_exit,
    "echo": builtin_echo,
    "type": builtin_type,
    "pwd": builtin_pwd,
    "cd": builtin_cd,
    "history": builtin_history,
    "help": builtin_help,
}
