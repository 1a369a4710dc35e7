WIDTH = 510
HEIGHT = 360
SPACE_SIZE = 60
GRID_W = 8
GRID_H = 5
START_LOC_X = 15
START_LOC_Y = 15

TOKEN_OFFSET = 15
TOKEN_SIZE = 15
WALL_THICKNESS = 8
WALL_INSET = 5


def rect_contains(rect, px, py):
    x, y, w, h = rect
    return x <= px < x + w and y <= py < y + h


class Wall:
    def __init__(self, x, y, w, h):
        self.x = x
        self.y = y
        self.w = w
        self.h = h

    @property
    def vertical(self):
        return self.h > self.w

    def rect(self):
        return (self.x, self.y, self.w, self.h)

    def cell(self, space=SPACE_SIZE):
        if self.vertical:
            return ((self.x + self.w) // space - 1, self.y // space)
        return (self.x // space, (self.y + self.h) // space - 1)

    def blocks(self, x, y, dx, dy):
        # The wall is crossed when its leading edge lies between the current
        # and target coordinate and the player's other coordinate is within its span.
        start_x, end_x = self.x, self.x + self.w
        start_y, end_y = self.y, self.y + self.h
        nx, ny = x + dx, y + dy
        if dx > 0:
            return x <= start_x <= nx and start_y <= y <= end_y
        if dx < 0:
            return x >= start_x >= nx and start_y <= y <= end_y
        if dy > 0:
            return y <= start_y <= ny and start_x <= x <= end_x
        if dy < 0:
            return y >= start_y >= ny and start_x <= x <= end_x
        return False


class Token:
    """A trap or a prize: fixed position plus an active flag."""

    def __init__(self, x, y, size=TOKEN_SIZE):
        self.x = x
        self.y = y
        self.size = size
        self.active = True

    def rect(self):
        return (self.x, self.y, self.size, self.size)

    def contains(self, px, py):
        return self.active and rect_contains(self.rect(), px, py)

    def consume(self):
        self.active = False

    def reactivate(self):
        self.active = True

    def cell(self, space=SPACE_SIZE):
        return (self.x // space, self.y // space)


def make_wall(col, row, vertical, space=SPACE_SIZE):
    if vertical:
        return Wall(col * space + space - WALL_INSET, row * space, WALL_THICKNESS, space)
    return Wall(col * space, row * space + space - WALL_INSET, space, WALL_THICKNESS)


def make_token(col, row, space=SPACE_SIZE):
    return Token(col * space + TOKEN_OFFSET, row * space + TOKEN_OFFSET)


def random_cell(rng, grid_w, grid_h):
    row = rng.randrange(grid_h)
    col = rng.randrange(grid_w)
    return col, row


def create_tokens(rng, count, grid_w=GRID_W, grid_h=GRID_H, space=SPACE_SIZE):
    tokens = []
    for _ in range(count):
        col, row = random_cell(rng, grid_w, grid_h)
        tokens.append(make_token(col, row, space))
    return tokens


def create_walls(rng, count, grid_w=GRID_W, grid_h=GRID_H, space=SPACE_SIZE):
    walls = []
    for _ in range(count):
        col, row = random_cell(rng, grid_w, grid_h)
        walls.append(make_wall(col, row, rng.randrange(2) == 0, space))
    return walls


def generate_board(rng, total_walls, total_traps, total_prizes, grid_w=GRID_W, grid_h=GRID_H, space=SPACE_SIZE):
    # Entities may overlap; traps can hide prizes. Reachability is not checked.
    traps = create_tokens(rng, total_traps, grid_w, grid_h, space)
    prizes = create_tokens(rng, total_prizes, grid_w, grid_h, space)
    walls = create_walls(rng, total_walls, grid_w, grid_h, space)
    return walls, traps, prizes
