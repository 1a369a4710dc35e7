import argparse
import os
import sys
import threading

import pygame

from commands import CommandQueue, InputClosed, get_valid_input
from room_env import CONFIG_PATH, RoomEnv, load_config
from session import EscapeSession


FPS = 30
ASSETS_DIR = os.path.dirname(os.path.abspath(__file__))
ASSET_FILES = {
    "grid": "grid.png",
    "coin": "coin.png",
    "player": "player.png",
}
PLAYER_SIZE = 40

BLACK = (10, 10, 15)
WHITE = (240, 240, 240)
GRID_LINE = (200, 200, 200)
YELLOW = (250, 215, 70)
BLUE = (40, 60, 200)
GREEN = (60, 160, 120)

KEY_COMMANDS = {
    pygame.K_w: "u",
    pygame.K_UP: "u",
    pygame.K_a: "l",
    pygame.K_LEFT: "l",
    pygame.K_d: "r",
    pygame.K_RIGHT: "r",
    pygame.K_s: "d",
    pygame.K_DOWN: "d",
    pygame.K_t: "t",
    pygame.K_SPACE: "space",
    pygame.K_h: "h",
    pygame.K_q: "q",
    pygame.K_y: "y",
    pygame.K_n: "n",
    pygame.K_p: "p",
    pygame.K_c: "c",
    pygame.K_r: "restart",
}


def load_image(assets_dir, name):
    path = os.path.join(assets_dir, name)
    try:
        return pygame.image.load(path).convert_alpha()
    except (pygame.error, FileNotFoundError):
        print(f"Could not open file {name}", file=sys.stderr)
        return None


def load_images(assets_dir):
    return {key: load_image(assets_dir, name) for key, name in ASSET_FILES.items()}


def draw_env(screen, state, images, status_line=None):
    space = state["space"]
    width = state["grid_w"] * space
    height = state["grid_h"] * space

    if images.get("grid"):
        screen.blit(images["grid"], (0, 0))
    else:
        screen.fill(WHITE)
        for gx in range(state["grid_w"] + 1):
            pygame.draw.line(screen, GRID_LINE, (gx * space, 0), (gx * space, height))
        for gy in range(state["grid_h"] + 1):
            pygame.draw.line(screen, GRID_LINE, (0, gy * space), (width, gy * space))

    # traps stay invisible

    for x, y, w, h in state["prizes"]:
        if images.get("coin"):
            screen.blit(images["coin"], (x, y))
        else:
            pygame.draw.circle(screen, YELLOW, (x + w // 2, y + h // 2), w // 2 + 2)

    for rect in state["walls"]:
        pygame.draw.rect(screen, BLACK, pygame.Rect(*rect))

    px, py = state["player"]["x"], state["player"]["y"]
    if images.get("player"):
        screen.blit(pygame.transform.smoothscale(images["player"], (PLAYER_SIZE, PLAYER_SIZE)), (px, py))
    else:
        color = GREEN if state["at_finish"] else BLUE
        pygame.draw.rect(screen, color, pygame.Rect(px, py, PLAYER_SIZE, PLAYER_SIZE), border_radius=6)

    if status_line:
        font = pygame.font.SysFont("Arial", 16)
        status = font.render(status_line, True, BLACK)
        screen.blit(status, (6, screen.get_height() - 20))


def stdin_reader(commands):
    for line in sys.stdin:
        commands.put(line)


def read_console(valid):
    def get_line():
        try:
            return input()
        except EOFError:
            raise InputClosed()

    return get_valid_input(valid, get_line)


def run_console(env):
    session = EscapeSession(env, read_console)
    return session.run()


def run_gui(env, assets_dir, fps):
    os.environ.setdefault("SDL_VIDEO_WINDOW_POS", "60,60")
    pygame.init()
    screen = pygame.display.set_mode((env.width, env.height))
    pygame.display.set_caption("EscapeRoom")
    clock = pygame.time.Clock()
    images = load_images(assets_dir)

    commands = CommandQueue()
    session = EscapeSession(env, commands.reader)
    result = {}

    def play():
        result["score"] = session.run()

    threading.Thread(target=stdin_reader, args=(commands,), daemon=True).start()
    game_thread = threading.Thread(target=play, daemon=True)
    game_thread.start()

    running = True
    while running and game_thread.is_alive():
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                commands.put(KEY_COMMANDS.get(event.key))

        status = f"Score: {session.score}  Steps: {env.steps}  Traps hit: {env.trap_collisions}"
        draw_env(screen, env.get_state(), images, status_line=status)
        pygame.display.flip()
        clock.tick(fps)

    commands.close()
    game_thread.join(timeout=5.0)
    pygame.quit()
    return result.get("score", session.score)


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--no-gui", action="store_true", help="play in the console only")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--config", default=CONFIG_PATH)
    parser.add_argument("--assets", default=ASSETS_DIR)
    parser.add_argument("--fps", type=int, default=FPS)
    args = parser.parse_args()

    cfg = load_config(args.config)
    env = RoomEnv(cfg, seed=args.seed)

    if args.no_gui:
        run_console(env)
    else:
        run_gui(env, args.assets, args.fps)


if __name__ == "__main__":
    main()
