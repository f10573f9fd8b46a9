import os
import sys
import readline  # Windows: module này do pyreadline3 cung cấp

from myshell import config
from myshell.resolver import is_executable


def command_names(state):
    """Builtin + mọi file thực thi trong PATH (quét lại mỗi lần gọi)"""
    names = set(state.builtins)
    for folder in state.search_path:
        try:
            entries = os.scandir(folder)
        except OSError:
            continue
        with entries:
            for entry in entries:
                try:
                    if entry.is_file() and is_executable(entry.stat().st_mode):
                        names.add(entry.name)
                except OSError:
                    continue
    return names


def complete_command(state, text):
    return sorted(name for name in command_names(state) if name.startswith(text))


def init_readline(state):
    """Tab completes the command name (first word of the line)."""
    try:
        if not sys.stdin.isatty():
            return

        matches = []

        def completer(text, index):
            if index == 0:
                before = readline.get_line_buffer()[:readline.get_begidx()]
                matches[:] = complete_command(state, text) if not before.strip() else []
                if len(matches) == 1:
                    matches[0] += " "
            return matches[index] if index < len(matches) else None

        readline.set_completer_delims(" \t\n")
        readline.set_completer(completer)
        if "libedit" in (readline.__doc__ or ""):
            readline.parse_and_bind("bind ^I rl_complete")
        else:
            readline.parse_and_bind("tab: complete")

    except Exception as e:
        print(f"Warning: Could not configure readline: {e}", file=sys.stderr)


def save_history(path=None):
    """Lưu history ra file"""
    path = path or config.HISTORY_FILE
    try:
        readline.set_history_length(config.MAX_HISTORY)
        readline.write_history_file(path)
    except OSError as e:
        print(f"Warning: Could not save history: {e}", file=sys.stderr)


def load_history(path=None):
    """Load history từ file"""
    path = path or config.HISTORY_FILE
    try:
        if os.path.exists(path):
            readline.read_history_file(path)
            readline.set_history_length(config.MAX_HISTORY)
    except OSError as e:
        print(f"Warning: Could not load history: {e}", file=sys.stderr)


def add_to_history(line):
    """Thêm command vào history"""
    readline.add_history(line)


def format_history():
    """Toàn bộ history dạng '<n>\\t<line>', mỗi dòng một lệnh"""
    hlen = readline.get_current_history_length()
    return "".join(f"{i}\t{readline.get_history_item(i)}\n" for i in range(1, hlen + 1))
