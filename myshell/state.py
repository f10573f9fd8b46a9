import os
from collections import namedtuple

from myshell.resolver import path_folders

# Output của một lệnh, flush ra terminal hoặc file sau khi chạy xong
CommandOutcome = namedtuple("CommandOutcome", ["stdout", "stderr"], defaults=("", ""))


class BuiltinError(Exception):
    """Wrong arity or unparseable arguments for a built-in."""


class ShellState:
    """
    State that lives for the whole session.
    Only `cd` writes `cwd`; the resolver and built-ins read the rest.
    """

    def __init__(self, builtins, search_path, cwd):
        self.builtins = builtins
        self.search_path = list(search_path)
        self.cwd = cwd


def new_state(builtins=None, environ=None):
    """Build the session state from PATH and the process working directory."""
    if builtins is None:
        from myshell.builtin import BUILTINS
        builtins = BUILTINS
    environ = os.environ if environ is None else environ
    return ShellState(dict(builtins), path_folders(environ.get("PATH", "")), os.getcwd())
