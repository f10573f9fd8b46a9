import os
import stat
from collections import namedtuple
from enum import Enum


class CommandKind(Enum):
    BUILTIN = "builtin"
    EXTERNAL = "external"
    NOT_FOUND = "not_found"


Resolution = namedtuple("Resolution", ["kind", "handler", "path"])

NOT_FOUND = Resolution(CommandKind.NOT_FOUND, None, None)

EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def path_folders(path_value):
    """Split PATH on ':'; empty or unset PATH gives an empty list."""
    if not path_value:
        return []
    return path_value.split(":")


def is_executable(mode):
    return bool(mode & EXEC_BITS)


def search_path(command, folders):
    """
    Tìm file thực thi tên `command` trong các thư mục PATH.
    Returns: absolute path or None

    Folders are scanned in order, entries in whatever order the OS lists them.
    Nothing is cached.
    """
    for folder in folders:
        try:
            entries = os.scandir(folder)
        except OSError:
            continue

        with entries:
            for entry in entries:
                if entry.name != command:
                    continue
                try:
                    mode = entry.stat().st_mode
                except OSError:
                    continue
                if is_executable(mode):
                    return os.path.abspath(os.path.join(folder, entry.name))
    return None


def resolve(name, builtins, folders):
    """Built-ins win over anything on the search path."""
    handler = builtins.get(name)
    if handler is not None:
        return Resolution(CommandKind.BUILTIN, handler, None)

    path = search_path(name, folders)
    if path is not None:
        return Resolution(CommandKind.EXTERNAL, None, path)

    return NOT_FOUND
