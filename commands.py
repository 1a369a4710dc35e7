import queue


DIRECTIONS = {
    "right": (1, 0),
    "r": (1, 0),
    "left": (-1, 0),
    "l": (-1, 0),
    "up": (0, -1),
    "u": (0, -1),
    "down": (0, 1),
    "d": (0, 1),
}

SPRING_TOKENS = ["t"]
JUMP_TOKENS = ["space", "jump"]

# pre-composed modifier + direction shortcuts
FUSED_COMMANDS = {
    "jr": ("jump", "r"),
    "jumpright": ("jump", "r"),
    "jl": ("jump", "l"),
    "jumpleft": ("jump", "l"),
    "ju": ("jump", "u"),
    "jumpup": ("jump", "u"),
    "jd": ("jump", "d"),
    "jumpdown": ("jump", "d"),
    "sr": ("spring", "r"),
    "springr": ("spring", "r"),
    "sl": ("spring", "l"),
    "springl": ("spring", "l"),
    "su": ("spring", "u"),
    "springu": ("spring", "u"),
    "sd": ("spring", "d"),
    "springd": ("spring", "d"),
}

ACTION_COMMANDS = ["pickup", "p", "find", "check", "c", "removetrap", "rt"]
YES_NO = ["y", "n", "yes", "no"]
META_COMMANDS = ["score", "status", "quit", "q", "replay", "restart", "help", "?", "h"]

VALID_COMMANDS = (
    list(DIRECTIONS)
    + SPRING_TOKENS
    + JUMP_TOKENS
    + list(FUSED_COMMANDS)
    + ACTION_COMMANDS
    + YES_NO
    + META_COMMANDS
)

POLL_INTERVAL = 0.05


class InputClosed(Exception):
    pass


def normalize(token):
    return token.strip().lower()


def get_valid_input(valid, get_line, write=print):
    accepted = {normalize(v) for v in valid}
    while True:
        line = normalize(get_line())
        if line in accepted:
            return line
        write("Invalid input. Please try again")


class CommandQueue:
    """FIFO channel between input producers (keyboard, stdin) and the session."""

    def __init__(self):
        self._queue = queue.Queue()
        self.closed = False

    def put(self, cmd):
        if cmd is None or self.closed:
            return
        self._queue.put(cmd)

    def close(self):
        self.closed = True

    def get_line(self):
        while True:
            try:
                return self._queue.get(timeout=POLL_INTERVAL)
            except queue.Empty:
                if self.closed:
                    raise InputClosed()

    def reader(self, valid):
        return get_valid_input(valid, self.get_line)

    def __len__(self):
        return self._queue.qsize()
