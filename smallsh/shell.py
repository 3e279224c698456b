import os
import select
import sys

from smallsh.builtin import dispatch
from smallsh.config import PROMPT, READ_CHUNK_SIZE, SHELL_NAME
from smallsh.errors import ParseError, SpawnError
from smallsh.executor import ProcessSupervisor
from smallsh.job_control import SignalRouter, cleanup_jobs, report_events
from smallsh.parser import parse_command
from smallsh.process import ProcessHost
from smallsh.state import ShellState


class LineReader:
    """
    Reads lines straight from a descriptor.

    While waiting it also watches the signal wakeup pipe, so job-control
    notices can be shown while the user sits at the prompt.
    """

    def __init__(self, fd, router):
        self.fd = fd
        self.router = router
        self.interactive = os.isatty(fd)
        self._buffer = bytearray()

    def _take_line(self, end):
        line = bytes(self._buffer[:end])
        del self._buffer[:end + 1]
        return line.decode("utf-8", errors="replace")

    def readline(self, on_signal=None, on_retry=None):
        """
        Returns: one line without its newline, or None at end of input
        """
        while True:
            end = self._buffer.find(b"\n")
            if end >= 0:
                return self._take_line(end)

            watched = [self.fd]
            wakeup_fd = self.router.wakeup_fd
            if wakeup_fd is not None:
                watched.append(wakeup_fd)
            ready, _, _ = select.select(watched, [], [])

            if wakeup_fd is not None and wakeup_fd in ready:
                self.router.drain()
                if on_signal:
                    on_signal()
            if self.fd not in ready:
                continue

            try:
                chunk = os.read(self.fd, READ_CHUNK_SIZE)
            except OSError as e:
                print(f"{SHELL_NAME}: cannot read input: {e.strerror}", file=sys.stderr, flush=True)
                return None

            if chunk:
                self._buffer.extend(chunk)
            elif self._buffer:
                # Last line of a script without a trailing newline
                return self._take_line(len(self._buffer))
            elif self.interactive:
                # Ctrl-D at the prompt is not a way out
                if on_retry:
                    on_retry()
            else:
                return None


class Shell:
    def __init__(self, host=None, fs=None, stdin_fd=0):
        self.pid = os.getpid()
        self.state = ShellState()
        self.host = host or ProcessHost()
        self.router = SignalRouter(self.state, self.host)
        self.supervisor = ProcessSupervisor(self.state, self.router, self.host, fs)
        self.reader = LineReader(stdin_fd, self.router)

    def prompt(self):
        print(PROMPT, end="", flush=True)

    def _on_signal(self):
        if self.state.events:
            print()
            report_events(self.state)
            self.prompt()

    def _on_retry(self):
        print()
        self.prompt()

    def run_line(self, line):
        try:
            invocation = parse_command(line, self.pid, self.state.foreground_only)
        except ParseError as e:
            print(f"{SHELL_NAME}: {e.message}", file=sys.stderr, flush=True)
            return
        if invocation is None:
            return
        dispatch(invocation, self.state, self.supervisor)

    def run(self):
        """
        Main shell loop.
        Returns: process exit code
        """
        self.router.install()
        try:
            while not self.state.should_exit:
                report_events(self.state)
                self.prompt()
                line = self.reader.readline(self._on_signal, self._on_retry)
                if line is None:
                    print()
                    break
                self.run_line(line)
            return 0
        except SpawnError as e:
            print(f"{SHELL_NAME}: {e.message}", file=sys.stderr, flush=True)
            return 1
        finally:
            self.router.uninstall()
            cleanup_jobs(self.state, self.host)


def main():
    return Shell().run()
