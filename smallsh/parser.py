from dataclasses import dataclass, field
from typing import List, Optional

from smallsh.config import (
    BACKGROUND_TOKEN,
    COMMENT_MARKER,
    INPUT_TOKEN,
    MAX_ARGS,
    MAX_COMMAND_LENGTH,
    OUTPUT_TOKEN,
    PID_MARKER,
)
from smallsh.errors import ParseError


@dataclass
class Invocation:
    """One parsed command line, ready to dispatch."""
    args: List[str] = field(default_factory=list)
    input_file: Optional[str] = None
    output_file: Optional[str] = None
    background: bool = False

    @property
    def program(self):
        return self.args[0]


def expand_pid(token, pid):
    """
    Replace every $$ in token with the decimal pid.
    Returns: new string (input is never modified)
    """
    # str.replace scans left to right and never rescans inserted digits
    return token.replace(PID_MARKER, str(pid))


def is_blank(line):
    stripped = line.strip()
    return not stripped or stripped.startswith(COMMENT_MARKER)


def parse_command(line, pid, foreground_only=False):
    """
    Parse one input line into an Invocation.
    Returns: Invocation, or None for blank and comment lines
    Raises: ParseError for malformed lines
    """
    if is_blank(line):
        return None

    if len(line) > MAX_COMMAND_LENGTH:
        raise ParseError(f"command line longer than {MAX_COMMAND_LENGTH} characters")

    tokens = line.split()
    invocation = Invocation()

    if tokens[-1] == BACKGROUND_TOKEN:
        tokens.pop()
        # Accepted but ignored in foreground-only mode
        invocation.background = not foreground_only

    i = 0
    while i < len(tokens):
        tok = tokens[i]
        if tok in (INPUT_TOKEN, OUTPUT_TOKEN):
            if i + 1 >= len(tokens) or tokens[i + 1] in (INPUT_TOKEN, OUTPUT_TOKEN):
                raise ParseError(f"missing file name after '{tok}'")
            target = expand_pid(tokens[i + 1], pid)
            if tok == INPUT_TOKEN:
                if invocation.input_file is not None:
                    raise ParseError("only one input redirection is allowed")
                invocation.input_file = target
            else:
                if invocation.output_file is not None:
                    raise ParseError("only one output redirection is allowed")
                invocation.output_file = target
            i += 2
        else:
            invocation.args.append(expand_pid(tok, pid))
            i += 1

    if not invocation.args:
        raise ParseError("no command given")
    if len(invocation.args) > MAX_ARGS:
        raise ParseError(f"too many arguments (limit {MAX_ARGS})")

    return invocation
