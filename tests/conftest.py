import pytest

from board import make_token, make_wall
from commands import InputClosed, get_valid_input
from room_env import RoomEnv


@pytest.fixture
def env():
    room = RoomEnv(seed=1)
    room.walls = []
    room.traps = []
    room.prizes = []
    room.finish_top = True
    return room


@pytest.fixture
def add_trap(env):
    def _add(col, row):
        trap = make_token(col, row)
        env.traps.append(trap)
        return trap

    return _add


@pytest.fixture
def add_prize(env):
    def _add(col, row):
        prize = make_token(col, row)
        env.prizes.append(prize)
        return prize

    return _add


@pytest.fixture
def add_wall(env):
    def _add(col, row, vertical=True):
        wall = make_wall(col, row, vertical)
        env.walls.append(wall)
        return wall

    return _add


class ScriptedInput:
    """Feeds a fixed list of lines through the command validator."""

    def __init__(self, lines):
        self.lines = list(lines)
        self.rejected = []

    def get_line(self):
        if not self.lines:
            raise InputClosed()
        return self.lines.pop(0)

    def __call__(self, valid):
        return get_valid_input(valid, self.get_line, write=self.rejected.append)


@pytest.fixture
def scripted():
    return ScriptedInput
