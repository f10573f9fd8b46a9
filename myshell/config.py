import os

SHELL_NAME = "myshell"
PROMPT = "$ "

HISTORY_FILE = os.environ.get("MYSHELL_HISTFILE") or os.path.expanduser("~/.myshell_history")
MAX_HISTORY = 1000  # Giới hạn số lệnh lưu

# Quyền tạo file khi redirect (rw-r--r--)
FILE_MODE = 0o644

# Redirect không mở được file -> thoát shell với code 1
FATAL_REDIRECT_ERRORS = os.environ.get("MYSHELL_RECOVER_REDIRECT") != "1"

ENCODING = "utf-8"
