"""
Process-wide shell state.

ShellState is written from two contexts: the read-eval loop and the
signal handlers in job_control. Every field is replaced or mutated by a
single operation so a handler interrupting the loop never sees a half
written record. Handlers only touch the fields documented on each method
below; everything that needs formatting or I/O runs later in the loop.
"""

import enum
import os
from collections import deque, namedtuple


class Role(enum.Enum):
    FOREGROUND = "foreground"
    BACKGROUND = "background"


ChildRecord = namedtuple("ChildRecord", ["pid", "role"])


# Event kinds queued by signal handlers
BACKGROUND_DONE = "background-done"
MODE_CHANGED = "mode-changed"


def describe_wait_status(status):
    """Format a raw wait status as 'exit value N' or 'terminated by signal N'."""
    if os.WIFSIGNALED(status):
        return f"terminated by signal {os.WTERMSIG(status)}"
    return f"exit value {os.WEXITSTATUS(status)}"


class ShellState:
    def __init__(self):
        self.exit_status = 0
        self.term_signal = 0
        self.signaled = False

        self.foreground_only = False
        self.should_exit = False

        self.foreground = None
        self.background = {}  # pid -> ChildRecord

        # Filled by handlers, drained by the loop
        self.events = deque()

    # ---- read-eval loop side ----
    def add_child(self, record):
        if record.role is Role.BACKGROUND:
            self.background[record.pid] = record
        else:
            self.foreground = record

    def status_text(self):
        if self.signaled:
            return f"terminated by signal {self.term_signal}"
        return f"exit value {self.exit_status}"

    def tracked_pids(self):
        pids = list(self.background)
        fg = self.foreground
        if fg is not None:
            pids.append(fg.pid)
        return pids

    @property
    def foreground_running(self):
        return self.foreground is not None

    # ---- signal handler side ----
    def child_reaped(self, pid, status):
        """
        Record one reaped child. Called from the SIGCHLD handler.
        Writes: background (remove), events, outcome fields, foreground slot.
        """
        # Remove first, then look at the result: a pid can only be claimed once
        if self.background.pop(pid, None) is not None:
            self.events.append((BACKGROUND_DONE, pid, status))
            return

        fg = self.foreground
        if fg is None or fg.pid != pid:
            return
        if os.WIFSIGNALED(status):
            self.term_signal = os.WTERMSIG(status)
            self.signaled = True
        else:
            self.exit_status = os.WEXITSTATUS(status)
            self.signaled = False
        self.foreground = None

    def toggle_foreground_only(self):
        """Flip foreground-only mode. Called from the SIGTSTP handler."""
        enabled = not self.foreground_only
        self.foreground_only = enabled
        self.events.append((MODE_CHANGED, enabled))
