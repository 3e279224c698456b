import os
import select
import signal
import sys
from contextlib import contextmanager

import psutil

from smallsh.config import (
    ENTER_FOREGROUND_ONLY,
    EXIT_FOREGROUND_ONLY,
    TERMINATE_GRACE_PERIOD,
)
from smallsh.process import ProcessHost
from smallsh.state import BACKGROUND_DONE, MODE_CHANGED, Role, describe_wait_status


class SignalRouter:
    """
    Owns the shell's SIGCHLD, SIGTSTP and SIGINT dispositions.

    The handlers only reap children and flip fields on ShellState. Each
    delivered signal also writes a byte to a self-pipe (signal.set_wakeup_fd),
    which is how the read-eval loop waits for "something happened" without
    polling.
    """

    def __init__(self, state, host=None):
        self.state = state
        self.host = host or ProcessHost()
        self._read_fd = None
        self._write_fd = None
        self._saved_mask = None

    @property
    def wakeup_fd(self):
        return self._read_fd

    def install(self):
        """Install the shell's signal handlers and the wakeup pipe."""
        self._read_fd, self._write_fd = os.pipe()
        os.set_blocking(self._read_fd, False)
        os.set_blocking(self._write_fd, False)
        signal.set_wakeup_fd(self._write_fd, warn_on_full_buffer=False)

        signal.signal(signal.SIGINT, signal.SIG_IGN)
        signal.signal(signal.SIGTSTP, self.handle_sigtstp)
        signal.signal(signal.SIGCHLD, self.handle_sigchld)

    def uninstall(self):
        signal.signal(signal.SIGCHLD, signal.SIG_DFL)
        signal.signal(signal.SIGTSTP, signal.SIG_DFL)
        if self._write_fd is not None:
            signal.set_wakeup_fd(-1)
            os.close(self._read_fd)
            os.close(self._write_fd)
            self._read_fd = self._write_fd = None

    # ---- handlers ----
    def handle_sigchld(self, signum, frame):
        """Reap every terminated child; one signal may stand for several."""
        while True:
            try:
                pid, status = self.host.reap()
            except ChildProcessError:
                return
            if pid == 0:
                return
            self.state.child_reaped(pid, status)

    def handle_sigtstp(self, signum, frame):
        self.state.toggle_foreground_only()

    # ---- waiting ----
    def drain(self):
        if self._read_fd is None:
            return
        while True:
            try:
                if not os.read(self._read_fd, 512):
                    return
            except BlockingIOError:
                return

    def wait_for_signal(self):
        """Block until at least one signal has been delivered."""
        select.select([self._read_fd], [], [])
        self.drain()

    @contextmanager
    def deferred_reaping(self):
        """
        Hold SIGCHLD while a child is forked and registered, so the
        handler never sees a pid the state does not know about yet.
        """
        old_mask = signal.pthread_sigmask(signal.SIG_BLOCK, {signal.SIGCHLD})
        self._saved_mask = old_mask
        try:
            yield
        finally:
            signal.pthread_sigmask(signal.SIG_SETMASK, old_mask)

    def reset_in_child(self, role):
        """Give a freshly forked child the dispositions its role needs."""
        if self._write_fd is not None:
            signal.set_wakeup_fd(-1)
            os.close(self._read_fd)
            os.close(self._write_fd)
            self._read_fd = self._write_fd = None

        signal.signal(signal.SIGCHLD, signal.SIG_DFL)
        signal.signal(signal.SIGTSTP, signal.SIG_IGN)
        if role is Role.FOREGROUND:
            signal.signal(signal.SIGINT, signal.SIG_DFL)
        else:
            signal.signal(signal.SIGINT, signal.SIG_IGN)

        if self._saved_mask is not None:
            signal.pthread_sigmask(signal.SIG_SETMASK, self._saved_mask)


def report_events(state):
    """
    Print notices queued by the handlers.
    Returns: True if anything was printed
    """
    printed = False
    while True:
        try:
            event = state.events.popleft()
        except IndexError:
            break
        if event[0] == BACKGROUND_DONE:
            _, pid, status = event
            print(f"background pid {pid} is done: {describe_wait_status(status)}")
        elif event[0] == MODE_CHANGED:
            print(ENTER_FOREGROUND_ONLY if event[1] else EXIT_FOREGROUND_ONLY)
        printed = True
    if printed:
        sys.stdout.flush()
    return printed


def cleanup_jobs(state, host, grace=TERMINATE_GRACE_PERIOD):
    """
    Terminate every child the shell still owns.
    SIGTERM goes to all of them; whatever outlives the grace period is killed.
    """
    pids = state.tracked_pids()
    procs = []
    for pid in pids:
        try:
            procs.append(psutil.Process(pid))
        except psutil.NoSuchProcess:
            pass

    for pid in pids:
        try:
            host.kill(pid, signal.SIGTERM)
        except ProcessLookupError:
            pass

    if not procs:
        return
    _, alive = psutil.wait_procs(procs, timeout=grace)
    for p in alive:
        try:
            p.kill()
        except psutil.NoSuchProcess:
            pass
    psutil.wait_procs(alive, timeout=grace)
