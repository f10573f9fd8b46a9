from collections import namedtuple

UNQUOTED, SINGLE_QUOTED, DOUBLE_QUOTED = range(3)

# Sau dấu \ trong "...", chỉ các ký tự này được escape
DOUBLE_QUOTED_ESCAPES = ('$', '\\', '"')

STDOUT, STDERR = "stdout", "stderr"
TRUNCATE, APPEND = "truncate", "append"

# operator -> (stream, mode)
REDIRECT_OPERATORS = {
    ">": (STDOUT, TRUNCATE),
    "1>": (STDOUT, TRUNCATE),
    ">>": (STDOUT, APPEND),
    "1>>": (STDOUT, APPEND),
    "2>": (STDERR, TRUNCATE),
    "2>>": (STDERR, APPEND),
}

RedirectionSpec = namedtuple("RedirectionSpec", ["stream", "mode", "path"])


class RedirectionError(Exception):
    pass


class ExecutionPlan:
    """argv of the command plus the redirections found on its line."""

    def __init__(self, argv, redirections=None):
        self.argv = argv
        self.redirections = redirections or []

    @property
    def command(self):
        return self.argv[0]

    @property
    def args(self):
        return self.argv[1:]

    def destination(self, stream):
        """Last redirection of `stream` wins; None means the terminal."""
        effective = None
        for spec in self.redirections:
            if spec.stream == stream:
                effective = spec
        return effective

    def __repr__(self):
        return f"ExecutionPlan(argv={self.argv!r}, redirections={self.redirections!r})"


def tokenize(line):
    """
    Split a command line into arguments.

    Rules:
     - '...' : mọi ký tự giữ nguyên, không có escape
     - "..." : \\ chỉ escape $, \\ và "; các trường hợp khác giữ nguyên \\
     - ngoài quote: \\ escape ký tự kế tiếp (kể cả dấu cách),
       dấu cách chưa escape thì tách argument
    Unterminated quotes run to the end of the line. Empty arguments are dropped.
    """
    line = line.rstrip("\r\n")
    args, buf = [], []
    state = UNQUOTED
    i, n = 0, len(line)

    while i < n:
        ch = line[i]
        nxt = line[i + 1] if i + 1 < n else None

        if state == SINGLE_QUOTED:
            if ch == "'":
                state = UNQUOTED
            else:
                buf.append(ch)
        elif state == DOUBLE_QUOTED:
            if ch == '"':
                state = UNQUOTED
            elif ch == '\\' and nxt in DOUBLE_QUOTED_ESCAPES:
                buf.append(nxt)
                i += 1
            else:
                buf.append(ch)
        else:
            if ch == '\\':
                if nxt is None:
                    buf.append(ch)
                else:
                    buf.append(nxt)
                    i += 1
            elif ch == "'":
                state = SINGLE_QUOTED
            elif ch == '"':
                state = DOUBLE_QUOTED
            elif ch == ' ':
                args.append("".join(buf))
                buf = []
            else:
                buf.append(ch)
        i += 1

    if buf:
        args.append("".join(buf))

    return [arg for arg in args if arg]


def plan_redirections(tokens):
    """
    Tách redirection khỏi argv.
    Returns: ExecutionPlan

    Everything from the first operator onward is dropped from argv, including
    ordinary words written after a redirection.
    """
    if not tokens:
        return ExecutionPlan([])

    args = tokens[1:]
    redirections = []
    cut = None
    i = 0

    while i < len(args):
        tok = args[i]
        if tok in REDIRECT_OPERATORS:
            if i + 1 >= len(args):
                raise RedirectionError("syntax error near unexpected token 'newline'")
            stream, mode = REDIRECT_OPERATORS[tok]
            redirections.append(RedirectionSpec(stream, mode, args[i + 1]))
            if cut is None:
                cut = i
            i += 2
        else:
            i += 1

    if cut is not None:
        args = args[:cut]

    return ExecutionPlan([tokens[0]] + args, redirections)
