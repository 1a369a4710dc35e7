import argparse
import contextlib
import io
import random

import numpy as np

from commands import DIRECTIONS, YES_NO
from room_env import CONFIG_PATH, RoomEnv, load_config
from session import EscapeSession


MOVE_TOKENS = ["r", "l", "u", "d"]
EXTRA_TOKENS = ["p", "find", "c", "rt", "jr", "jd", "ju", "sr", "sd", "su"]
TOWARD_FINISH_WEIGHT = 3.0


def finish_direction(env):
    planes, labels, _ = env.get_observation()
    finish = planes[labels.index("finish")]
    player = planes[labels.index("player")]
    targets = np.argwhere(finish > 0)
    here = np.argwhere(player > 0)
    if len(targets) == 0 or len(here) == 0:
        return None
    py, px = here[0]
    ty, tx = targets[np.argmin(np.abs(targets - here[0]).sum(axis=1))]
    if tx > px:
        return "r"
    if ty > py:
        return "d"
    if ty < py:
        return "u"
    return None


class RandomPolicy:
    def __init__(self, env, rng, max_commands, explore=0.2):
        self.env = env
        self.rng = rng
        self.max_commands = max_commands
        self.explore = explore
        self.issued = 0

    def __call__(self, valid):
        if set(valid) == set(YES_NO):
            return self.rng.choice(YES_NO)
        self.issued += 1
        if self.issued > self.max_commands:
            return "q"
        if self.rng.random() < self.explore:
            return self.rng.choice(EXTRA_TOKENS)
        weights = [1.0] * len(MOVE_TOKENS)
        toward = finish_direction(self.env)
        if toward in DIRECTIONS:
            weights[MOVE_TOKENS.index(toward)] = TOWARD_FINISH_WEIGHT
        return self.rng.choices(MOVE_TOKENS, weights=weights)[0]


def run_episode(config, max_commands, seed=None):
    env = RoomEnv(config, seed=seed)
    policy = RandomPolicy(env, random.Random(seed), max_commands)
    session = EscapeSession(env, policy, write=lambda *_: None)
    with contextlib.redirect_stdout(io.StringIO()):
        score = session.run()
    return {
        "score": score,
        "steps": env.steps,
        "commands": session.moves,
        "finished": session.finished,
        "trap_collisions": env.trap_collisions,
    }


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--episodes", type=int, default=200)
    parser.add_argument("--max-commands", type=int, default=120)
    parser.add_argument("--seed", type=int, default=123)
    parser.add_argument("--config", default=CONFIG_PATH)
    args = parser.parse_args()

    cfg = load_config(args.config)
    rng = random.Random(args.seed)
    seeds = [rng.randint(0, 1_000_000) for _ in range(args.episodes)]

    results = [run_episode(cfg, args.max_commands, seed=s) for s in seeds]
    scores = np.array([r["score"] for r in results], dtype=np.float64)
    steps = np.array([r["steps"] for r in results], dtype=np.float64)
    finished = np.array([r["finished"] for r in results], dtype=bool)

    if len(results) == 0:
        print("No episodes played.")
        return

    print(
        f"episodes={len(results)} | score mean={scores.mean():.2f} std={scores.std():.2f} "
        f"min={scores.min():.0f} max={scores.max():.0f} | steps mean={steps.mean():.1f} | "
        f"finish_rate={finished.mean():.2f}"
    )


if __name__ == "__main__":
    main()
