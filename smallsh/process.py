import os


class ProcessHost:
    """Thin wrapper over the OS process primitives so they can be replaced in tests."""

    def fork(self):
        return os.fork()

    def exec(self, args):
        os.execvp(args[0], args)

    def reap(self):
        """
        Collect one terminated child without blocking.
        Returns: (pid, status); pid is 0 when no child has terminated
        Raises: ChildProcessError when there are no children at all
        """
        return os.waitpid(-1, os.WNOHANG)

    def kill(self, pid, sig):
        os.kill(pid, sig)

    def exit(self, code):
        os._exit(code)
