import sys

from smallsh.config import SHELL_NAME
from smallsh.errors import RedirectionError, SpawnError
from smallsh.redirect import apply_redirections
from smallsh.state import ChildRecord, Role


class ProcessSupervisor:
    """Spawns children, records them in ShellState, waits on the foreground one."""

    def __init__(self, state, router, host, fs=None):
        self.state = state
        self.router = router
        self.host = host
        self.fs = fs

    def spawn(self, invocation):
        """
        Run an external command.
        Returns: the ChildRecord of the new child
        Raises: SpawnError when no process can be created
        """
        role = Role.BACKGROUND if invocation.background else Role.FOREGROUND
        # Nothing buffered may be written twice by the child
        sys.stdout.flush()
        sys.stderr.flush()

        with self.router.deferred_reaping():
            try:
                pid = self.host.fork()
            except OSError as e:
                raise SpawnError(f"fork failed: {e.strerror}") from e
            if pid == 0:
                self._run_child(invocation, role)
            record = ChildRecord(pid, role)
            self.state.add_child(record)

        if role is Role.BACKGROUND:
            print(f"background pid {pid}", flush=True)
        else:
            self.wait_foreground()
        return record

    def _run_child(self, invocation, role):
        """Runs in the child only. Never returns."""
        try:
            self.router.reset_in_child(role)
            apply_redirections(invocation, role, self.fs)
            self.host.exec(invocation.args)
        except RedirectionError as e:
            print(f"{SHELL_NAME}: {e.message}", file=sys.stderr, flush=True)
        except OSError as e:
            print(f"{SHELL_NAME}: {invocation.program}: {e.strerror}", file=sys.stderr, flush=True)
        finally:
            self.host.exit(1)

    def wait_foreground(self):
        """Block until the SIGCHLD handler has cleared the foreground slot."""
        while self.state.foreground_running:
            self.router.wait_for_signal()
        if self.state.signaled:
            print(self.state.status_text(), flush=True)
