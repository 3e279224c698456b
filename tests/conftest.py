import contextlib

import pytest

from smallsh.state import ShellState


def exited(code):
    """Raw wait status of a child that called exit(code)."""
    return code << 8


def killed(sig):
    """Raw wait status of a child terminated by sig."""
    return sig


class ChildExit(Exception):
    def __init__(self, code):
        super().__init__(code)
        self.code = code


class FakeHost:
    def __init__(self, fork_pid=4242):
        self.fork_pid = fork_pid
        self.pending = []
        self.killed = []
        self.executed = []
        self.exec_error = None

    def fork(self):
        if isinstance(self.fork_pid, Exception):
            raise self.fork_pid
        return self.fork_pid

    def exec(self, args):
        self.executed.append(list(args))
        if self.exec_error:
            raise self.exec_error

    def reap(self):
        if not self.pending:
            return 0, 0
        return self.pending.pop(0)

    def kill(self, pid, sig):
        self.killed.append((pid, sig))

    def exit(self, code):
        raise ChildExit(code)


class FakeRouter:
    """Stands in for SignalRouter: 'waiting' delivers the queued child exits."""

    def __init__(self, state, host):
        self.state = state
        self.host = host
        self.reset_roles = []
        self.waits = 0

    @contextlib.contextmanager
    def deferred_reaping(self):
        yield

    def reset_in_child(self, role):
        self.reset_roles.append(role)

    def wait_for_signal(self):
        self.waits += 1
        while self.host.pending:
            pid, status = self.host.pending.pop(0)
            self.state.child_reaped(pid, status)


@pytest.fixture
def state():
    return ShellState()


@pytest.fixture
def host():
    return FakeHost()
