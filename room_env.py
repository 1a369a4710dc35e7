import json
import os
import random

import numpy as np

from board import (
    GRID_H,
    GRID_W,
    HEIGHT,
    SPACE_SIZE,
    START_LOC_X,
    START_LOC_Y,
    WIDTH,
    generate_board,
)


DEFAULT_CONFIG = {
    "total_walls": 20,
    "total_traps": 8,
    "total_prizes": 3,
    "prize_value": 10,
    "trap_value": 5,
    "end_value": 10,
    "collision_penalty": 5,
    "trap_removal_cost": 5,
    "collision_limit": 6,
    "step_penalty": 1,
    "max_removals": 2,
}

CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config.json")

OBSERVATION_LABELS = ["walls_right", "walls_down", "traps", "prizes", "player", "finish"]


def load_config(path=CONFIG_PATH):
    cfg = DEFAULT_CONFIG.copy()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
            if isinstance(data, dict):
                for k in cfg.keys():
                    if k in data:
                        cfg[k] = data[k]
    except FileNotFoundError:
        pass
    except json.JSONDecodeError:
        pass
    return cfg


class RoomEnv:
    def __init__(self, config=None, seed=None):
        cfg = DEFAULT_CONFIG.copy()
        if config:
            cfg.update(config)
        self.config = cfg
        self.total_walls = int(cfg["total_walls"])
        self.total_traps = int(cfg["total_traps"])
        self.total_prizes = int(cfg["total_prizes"])
        self.prize_value = int(cfg["prize_value"])
        self.trap_value = int(cfg["trap_value"])
        self.end_value = int(cfg["end_value"])
        self.collision_penalty = int(cfg["collision_penalty"])
        self.trap_removal_cost = int(cfg["trap_removal_cost"])
        self.collision_limit = int(cfg["collision_limit"])
        self.step_penalty = int(cfg["step_penalty"])
        self.max_removals = int(cfg["max_removals"])

        self.space = SPACE_SIZE
        self.width = WIDTH
        self.height = HEIGHT
        self.grid_w = GRID_W
        self.grid_h = GRID_H
        self.rng = random.Random(seed)

        self.walls = []
        self.traps = []
        self.prizes = []
        self.ended = False
        self.create_board()
        self._reset_player()
        self.finish_top = self.rng.random() < 0.5

    def create_board(self):
        self.walls, self.traps, self.prizes = generate_board(
            self.rng,
            self.total_walls,
            self.total_traps,
            self.total_prizes,
            self.grid_w,
            self.grid_h,
            self.space,
        )

    def _reset_player(self):
        self.x = START_LOC_X
        self.y = START_LOC_Y
        self.steps = 0
        self.trap_collisions = 0
        self.trap_removals = 0
        self.removal_chances_used = 0
        self.pending_trap_collision = False
        self.step_penalty_active = False
        self.last_move_blocked = False

    @property
    def player_pos(self):
        return (self.x, self.y)

    @property
    def removals_exhausted(self):
        return self.removal_chances_used >= self.max_removals

    def _active_trap_at(self, px, py):
        for t in self.traps:
            if t.contains(px, py):
                return t
        return None

    def is_trap(self, dx, dy):
        return self._active_trap_at(self.x + dx, self.y + dy) is not None

    def is_on_trap(self):
        return self._active_trap_at(self.x, self.y) is not None

    def off_grid(self, px, py):
        return px < 0 or px > self.width - self.space or py < 0 or py > self.height - self.space

    def wall_in_way(self, dx, dy):
        for w in self.walls:
            if w.blocks(self.x, self.y, dx, dy):
                return True
        return False

    def move(self, dx, dy):
        sticky = 0
        if self.removals_exhausted and self.is_on_trap():
            sticky -= self.step_penalty

        # counted even when the player does not actually move
        self.steps += 1
        self.last_move_blocked = True

        if self.off_grid(self.x + dx, self.y + dy):
            print("OFF THE GRID!")
            return sticky

        if self.wall_in_way(dx, dy):
            print("A WALL IS IN THE WAY")
            return sticky

        self.x += dx
        self.y += dy
        self.last_move_blocked = False

        penalty = self.check_trap_collision()
        if self.step_penalty_active:
            penalty -= self.step_penalty
        return sticky + penalty

    def check_trap_collision(self):
        if not self.is_on_trap():
            return 0
        self.trap_collisions += 1
        print(f"TRAP COLLISION! ({self.trap_collisions}/{self.collision_limit})")
        if self.removals_exhausted:
            self.step_penalty_active = True
            return -self.step_penalty
        self.pending_trap_collision = True
        return 0

    def has_pending_trap_collision(self):
        return self.pending_trap_collision

    def clear_pending_trap_collision(self):
        self.pending_trap_collision = False

    def spring_trap(self, dx, dy):
        trap = self._active_trap_at(self.x + dx, self.y + dy)
        if trap is not None:
            trap.consume()
            print("TRAP IS SPRUNG!")
            return self.trap_value
        print("THERE IS NO TRAP HERE TO SPRING")
        return -self.trap_value

    def pickup_prize(self):
        for p in self.prizes:
            if p.contains(self.x, self.y):
                p.consume()
                print("YOU PICKED UP A PRIZE!")
                return self.prize_value
        print("OOPS, NO PRIZE HERE")
        return 0

    def remove_trap(self):
        if self.removals_exhausted:
            print("TRAP REMOVAL LIMIT REACHED! Traps are now permanent.")
            return -self.trap_removal_cost
        trap = self._active_trap_at(self.x, self.y)
        if trap is None:
            print("NO TRAP HERE TO REMOVE!")
            return -self.trap_removal_cost
        trap.consume()
        self.trap_removals += 1
        self.removal_chances_used += 1
        print(f"TRAP REMOVED! ({self.trap_removals}/{self.max_removals} removals used)")
        return -self.trap_removal_cost

    def in_finish_region(self, px, py):
        at_right = px > self.width - 2 * self.space
        if self.finish_top:
            at_y = py < self.space
        else:
            at_y = py > self.height - 2 * self.space
        return at_right and at_y

    def is_at_finish(self):
        return self.in_finish_region(self.x, self.y)

    def evaluate_finish(self):
        if not self.is_at_finish():
            print("OOPS, YOU QUIT TOO SOON!")
            return -self.end_value
        if self.trap_collisions > self.collision_limit:
            print(f"TOO MANY TRAP COLLISIONS! Pay {self.collision_penalty} points to finish anyway.")
            return -self.collision_penalty
        print("YOU MADE IT!")
        return self.end_value

    def end_game(self):
        win = self.evaluate_finish()
        self.ended = True
        return win

    def randomize_finish(self):
        self.finish_top = self.rng.random() < 0.5

    def replay(self):
        win = self.evaluate_finish()
        for p in self.prizes:
            p.reactivate()
        for t in self.traps:
            t.reactivate()
        self._reset_player()
        self.randomize_finish()
        return win

    def restart(self):
        self.create_board()
        self._reset_player()
        self.randomize_finish()
        return 0

    def get_state(self):
        return {
            "grid_w": self.grid_w,
            "grid_h": self.grid_h,
            "space": self.space,
            "player": {"x": self.x, "y": self.y},
            "steps": self.steps,
            "walls": [w.rect() for w in self.walls],
            "traps": [t.rect() for t in self.traps if t.active],
            "prizes": [p.rect() for p in self.prizes if p.active],
            "trap_collisions": self.trap_collisions,
            "trap_removals": self.trap_removals,
            "removal_chances_used": self.removal_chances_used,
            "pending_trap_collision": self.pending_trap_collision,
            "step_penalty_active": self.step_penalty_active,
            "finish_top": self.finish_top,
            "at_finish": self.is_at_finish(),
        }

    def get_observation(self):
        planes = np.zeros((len(OBSERVATION_LABELS), self.grid_h, self.grid_w), dtype=np.float32)
        walls_right, walls_down, traps, prizes, player, finish = planes

        for w in self.walls:
            cx, cy = w.cell(self.space)
            if not (0 <= cx < self.grid_w and 0 <= cy < self.grid_h):
                continue
            if w.vertical:
                walls_right[cy, cx] = 1
            else:
                walls_down[cy, cx] = 1
        for t in self.traps:
            if t.active:
                cx, cy = t.cell(self.space)
                traps[cy, cx] = 1
        for p in self.prizes:
            if p.active:
                cx, cy = p.cell(self.space)
                prizes[cy, cx] = 1

        player[self.y // self.space, self.x // self.space] = 1
        for cy in range(self.grid_h):
            for cx in range(self.grid_w):
                if self.in_finish_region(cx * self.space + START_LOC_X, cy * self.space + START_LOC_Y):
                    finish[cy, cx] = 1

        scalars = {
            "steps": self.steps,
            "trap_collisions": self.trap_collisions,
            "trap_removals": self.trap_removals,
            "removals_left": self.max_removals - self.removal_chances_used,
            "pending_trap_collision": 1.0 if self.pending_trap_collision else 0.0,
            "step_penalty_active": 1.0 if self.step_penalty_active else 0.0,
        }
        return planes, list(OBSERVATION_LABELS), scalars
