from enum import Enum

from commands import (
    DIRECTIONS,
    FUSED_COMMANDS,
    InputClosed,
    JUMP_TOKENS,
    SPRING_TOKENS,
    VALID_COMMANDS,
    YES_NO,
)


HELP_LINES = [
    "Commands: right/left/up/down (r/l/u/d). Keyboard: WASD/Arrows for movement",
    "jump (jr/jl/ju/jd or space + direction), pickup (p), find, check (c), spring (t + direction)",
    "removetrap (rt), score, replay, restart (R key), quit (q)",
]

SCAN_ORDER = [("right", "r"), ("left", "l"), ("up", "u"), ("down", "d")]

CHECK_COST = 1
DECLINE_PENALTY = 1


class Modifier(Enum):
    NONE = "none"
    SPRING = "spring"
    JUMP = "jump"


class EscapeSession:
    def __init__(self, env, read_command, write=print):
        self.env = env
        self.read_command = read_command
        self.write = write
        self.m = env.space
        self.moves = 0
        self.score = 0
        self.modifier = Modifier.NONE
        self.finished = False
        self.quit = False

    def banner(self):
        self.write("Welcome to EscapeRoom!")
        self.write("Get to the other side of the room, avoiding walls and invisible traps,")
        self.write("pick up all the prizes.\n")
        self.write(f"Traps on this board: {self.env.total_traps}")

    def run(self):
        self.banner()
        try:
            while not self.quit:
                self.write("> ")
                cmd = self.read_command(VALID_COMMANDS)
                self.step(cmd)
                if self.finished:
                    self.write("Finish: reached the exit")
                    break
                if not self.quit:
                    self.write(f"Score now: {self.score}")
        except InputClosed:
            self.write("Input closed, ending game")
        return self.finish()

    def step(self, cmd):
        self.moves += 1
        # restart zeroes the score inside handle(), so read it afterwards
        delta = self.handle(cmd)
        self.score += delta
        if self.env.has_pending_trap_collision():
            self.negotiate_trap()
        if self.env.is_at_finish():
            self.finished = True

    def finish(self):
        self.score += self.env.end_game()
        self.write(f"Final score: {self.score}")
        self.write(f"Total steps: {self.env.steps}")
        return self.score

    def handle(self, cmd):
        if cmd in SPRING_TOKENS:
            self.modifier = Modifier.SPRING
            self.write("Spring mode: choose direction")
            return 0
        if cmd in JUMP_TOKENS:
            self.modifier = Modifier.JUMP
            self.write("Jump mode: choose direction")
            return 0
        if cmd in FUSED_COMMANDS:
            mode, direction = FUSED_COMMANDS[cmd]
            self.modifier = Modifier(mode)
            return self.directional(direction)
        if cmd in DIRECTIONS:
            return self.directional(cmd)

        if cmd in ("pickup", "p"):
            return self.env.pickup_prize()
        if cmd == "find":
            return self.find_traps()
        if cmd in ("check", "c"):
            return self.check_traps()
        if cmd in ("removetrap", "rt"):
            return self.env.remove_trap()
        if cmd == "replay":
            return self.env.replay()
        if cmd == "restart":
            delta = self.env.restart()
            self.score = 0
            self.write("Your Score and steps have reset")
            return delta
        if cmd in ("score", "status"):
            self.write(self.status_line())
            return 0
        if cmd in ("quit", "q"):
            self.quit = True
            return 0
        if cmd in ("help", "?", "h"):
            for line in HELP_LINES:
                self.write(line)
            return 0
        # bare yes/no outside a detrap prompt
        return 0

    def directional(self, cmd):
        ux, uy = DIRECTIONS[cmd]
        dx, dy = ux * self.m, uy * self.m
        mode = self.modifier
        self.modifier = Modifier.NONE
        if mode == Modifier.SPRING:
            return self.env.spring_trap(dx, dy)
        if mode == Modifier.JUMP:
            return self.jump(dx, dy)
        return self.env.move(dx, dy)

    def jump(self, dx, dy):
        first = self.env.move(dx, dy)
        if self.env.last_move_blocked or self.env.has_pending_trap_collision():
            return first
        return first + self.env.move(dx, dy)

    def scan_traps(self):
        found = []
        for name, key in SCAN_ORDER:
            ux, uy = DIRECTIONS[key]
            if self.env.is_trap(ux * self.m, uy * self.m):
                found.append(name)
        return found

    def report_scan(self, label, found):
        if found:
            self.write(f"{label}: {' '.join(found)}")
        else:
            self.write(f"{label}: no traps adjacent")

    def find_traps(self):
        self.report_scan("Find Trap", self.scan_traps())
        return 0

    def check_traps(self):
        self.report_scan("Check", self.scan_traps())
        return -CHECK_COST

    def negotiate_trap(self):
        self.write(f"Detrap for {self.env.trap_removal_cost} points? (y/n): ")
        resp = self.read_command(YES_NO)
        if resp in ("y", "yes"):
            self.score += self.env.remove_trap()
        else:
            # declining costs a point but keeps the removal chance
            self.score -= DECLINE_PENALTY
        self.env.clear_pending_trap_collision()

    def status_line(self):
        return (
            f"Score: {self.score}, Steps: {self.env.steps}, "
            f"Trap Collisions: {self.env.trap_collisions}/{self.env.collision_limit}, "
            f"Trap Removals: {self.env.trap_removals}"
        )
