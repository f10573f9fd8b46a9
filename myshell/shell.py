import sys

from myshell import config
from myshell.executor import execute_line
from myshell.history import add_to_history, init_readline, load_history, save_history
from myshell.state import new_state


def prompt():
    """Generate shell prompt"""
    return config.PROMPT


def read_line():
    """
    Đọc một dòng lệnh từ stdin.
    EOF hoặc lỗi đọc là lỗi không phục hồi được: thoát với code 1.
    """
    try:
        return input(prompt())
    except EOFError:
        print("Failed to read input: EOF")
        sys.exit(1)
    except OSError as e:
        print(f"Failed to read input: {e}")
        sys.exit(1)


def main_loop(state=None):
    """Main shell loop"""
    if state is None:
        state = new_state()

    init_readline(state)
    load_history()

    try:
        while True:
            # Ctrl+C chỉ huỷ dòng hiện tại (đang gõ hoặc đang chạy), không thoát shell
            try:
                line = read_line()
                if not line.strip():
                    continue

                add_to_history(line)
                execute_line(state, line)
            except KeyboardInterrupt:
                print()
                continue

    finally:
        save_history()
