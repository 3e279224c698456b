"""
Exceptions raised by the shell.

Only interpreter-side failures are exceptions. Failures inside a spawned
child (redirection, exec) are reported by the child itself and reach the
shell as a non-zero exit status.
"""

class ShellError(Exception):
    """Base class for all smallsh errors."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ParseError(ShellError):
    """The line could not be turned into an invocation. The line is discarded."""


class RedirectionError(ShellError):
    """A redirection target could not be opened."""

    def __init__(self, path, direction, reason=None):
        what = "input" if direction == "input" else "output"
        message = f"cannot open {path} for {what}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.path = path
        self.direction = direction


class SpawnError(ShellError):
    """The process host could not create a child. Fatal to the shell."""
