import os

from smallsh.config import HOME_VARIABLE


def home_directory():
    return os.environ.get(HOME_VARIABLE) or os.path.expanduser("~")


def builtin_status(state, args):
    """Print how the last foreground command ended"""
    print(state.status_text(), flush=True)
    return 0


def builtin_cd(state, args):
    """Change directory"""
    path = args[0] if args else home_directory()
    try:
        os.chdir(path)
        return 0
    except OSError as e:
        print(f"cd: {path}: {e.strerror}", flush=True)
        return 1


def builtin_exit(state, args):
    """Ask the loop to stop; children are cleaned up on the way out"""
    state.should_exit = True
    return 0


BUILTINS = {
    "status": builtin_status,
    "cd": builtin_cd,
    "exit": builtin_exit,
}


def execute_builtin(invocation, state):
    """
    Execute built-in command if it matches.
    Built-ins run in the shell process and never change the recorded status.
    Returns: True if the invocation was a built-in
    """
    handler = BUILTINS.get(invocation.program)
    if handler is None:
        return False
    handler(state, invocation.args[1:])
    return True


def dispatch(invocation, state, supervisor):
    """Run a built-in, or hand the invocation to the supervisor."""
    if execute_builtin(invocation, state):
        return None
    return supervisor.spawn(invocation)
