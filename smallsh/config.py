import os

SHELL_NAME = "smallsh"
PROMPT = ": "

# Limits of a single command line
MAX_COMMAND_LENGTH = 2048
MAX_ARGS = 512

PID_MARKER = "$$"
COMMENT_MARKER = "#"
INPUT_TOKEN = "<"
OUTPUT_TOKEN = ">"
BACKGROUND_TOKEN = "&"

NULL_DEVICE = os.devnull
HOME_VARIABLE = "HOME"

READ_CHUNK_SIZE = 4096
TERMINATE_GRACE_PERIOD = 2.0  # seconds before SIGKILL on exit

ENTER_FOREGROUND_ONLY = "Entering foreground-only mode (& is now ignored)"
EXIT_FOREGROUND_ONLY = "Exiting foreground-only mode"
