import os

from smallsh.config import NULL_DEVICE
from smallsh.errors import RedirectionError
from smallsh.state import Role

STDIN_FD = 0
STDOUT_FD = 1


class FileSystem:
    """Raw descriptor primitives used by the redirector."""

    def open_read(self, path):
        return os.open(path, os.O_RDONLY)

    def open_write(self, path):
        return os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)

    def dup2(self, fd, target):
        os.dup2(fd, target)

    def close(self, fd):
        os.close(fd)

    def set_inheritable(self, fd):
        os.set_inheritable(fd, True)


def _rebind(fs, fd, target):
    if fd != target:
        fs.dup2(fd, target)
        fs.close(fd)
    else:
        # Opened straight onto a closed std stream; os.open fds are close-on-exec
        fs.set_inheritable(fd)


def _bind_null(fs, opener, target):
    # Background children must never block on the terminal; errors are ignored
    try:
        fd = opener(NULL_DEVICE)
        _rebind(fs, fd, target)
    except OSError:
        pass


def apply_redirections(invocation, role, fs=None):
    """
    Rebind stdin/stdout of the current (child) process for an invocation.
    Must only be called in the child, between fork and exec.
    Raises: RedirectionError when a requested file cannot be opened
    """
    fs = fs or FileSystem()

    if invocation.input_file is not None:
        try:
            fd = fs.open_read(invocation.input_file)
        except OSError as e:
            raise RedirectionError(invocation.input_file, "input", e.strerror)
        _rebind(fs, fd, STDIN_FD)
    elif role is Role.BACKGROUND:
        _bind_null(fs, fs.open_read, STDIN_FD)

    if invocation.output_file is not None:
        try:
            fd = fs.open_write(invocation.output_file)
        except OSError as e:
            raise RedirectionError(invocation.output_file, "output", e.strerror)
        _rebind(fs, fd, STDOUT_FD)
    elif role is Role.BACKGROUND:
        _bind_null(fs, fs.open_write, STDOUT_FD)

