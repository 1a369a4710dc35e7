import pytest

from session import EscapeSession, Modifier

M = 60


def make_session(env, scripted, tokens):
    out = []
    session = EscapeSession(env, scripted(tokens), write=out.append)
    return session, out


class TestCommandLoop:
    def test_five_moves_right_then_quit(self, env, scripted):
        session, out = make_session(env, scripted, ["right"] * 5 + ["quit"])
        final = session.run()
        assert env.player_pos == (315, 15)
        assert env.steps == 5
        assert session.moves == 6
        # only the early-quit penalty from the end-of-game evaluation
        assert final == -10
        assert "Final score: -10" in out
        assert "Total steps: 5" in out
        assert out.count("Score now: 0") == 5

    def test_banner_reports_trap_count(self, env, scripted):
        session, out = make_session(env, scripted, ["q"])
        session.run()
        assert out[0] == "Welcome to EscapeRoom!"
        assert f"Traps on this board: {env.total_traps}" in out

    def test_invalid_tokens_are_retried(self, env, scripted):
        reader = scripted(["jump around", "XYZZY", "Q"])
        session = EscapeSession(env, reader, write=lambda *_: None)
        session.run()
        assert session.moves == 1
        assert len(reader.rejected) == 2

    def test_reaching_finish_ends_session(self, env, scripted):
        env.x, env.y = 375, 15
        session, out = make_session(env, scripted, ["r", "r", "r"])
        final = session.run()
        assert session.finished
        assert "Finish: reached the exit" in out
        assert env.steps == 1
        assert final == 10

    def test_closed_input_ends_session(self, env, scripted):
        session, out = make_session(env, scripted, ["d"])
        assert session.run() == -10
        assert "Input closed, ending game" in out
        assert env.ended


class TestScans:
    def test_check_reports_adjacent_trap(self, env, scripted, add_trap):
        trap = add_trap(1, 0)
        session, out = make_session(env, scripted, ["check"])
        session.step("check")
        assert "Check: right" in out
        assert session.score == -1
        assert trap.active

    def test_check_lists_every_direction_in_order(self, env, scripted, add_trap):
        env.x, env.y = 75, 75
        for col, row in [(1, 0), (1, 2), (0, 1), (2, 1)]:
            add_trap(col, row)
        session, out = make_session(env, scripted, [])
        session.step("c")
        assert "Check: right left up down" in out

    def test_find_is_free(self, env, scripted):
        session, out = make_session(env, scripted, [])
        session.step("find")
        assert "Find Trap: no traps adjacent" in out
        assert session.score == 0

    def test_scans_skip_sticky_penalty(self, env, scripted, add_trap):
        add_trap(0, 0)
        env.removal_chances_used = env.trap_removals = 2
        session, _ = make_session(env, scripted, [])
        session.step("find")
        assert session.score == 0


class TestModifiers:
    def test_spring_mode_applies_to_next_direction_only(self, env, scripted, add_trap):
        add_trap(1, 0)
        session, out = make_session(env, scripted, [])
        session.step("t")
        assert session.modifier == Modifier.SPRING
        assert "Spring mode: choose direction" in out
        session.step("r")
        assert session.score == 5
        assert session.modifier == Modifier.NONE
        assert env.player_pos == (15, 15)
        session.step("r")
        assert env.player_pos == (75, 15)

    @pytest.mark.parametrize("fused", ["sr", "springr"])
    def test_fused_spring_matches_modifier(self, env, scripted, add_trap, fused):
        add_trap(1, 0)
        session, _ = make_session(env, scripted, [])
        session.step(fused)
        assert session.score == 5
        assert session.modifier == Modifier.NONE

    def test_spring_without_trap(self, env, scripted):
        session, _ = make_session(env, scripted, [])
        session.step("sd")
        assert session.score == -5

    def test_last_modifier_wins(self, env, scripted):
        session, _ = make_session(env, scripted, [])
        session.step("t")
        session.step("space")
        assert session.modifier == Modifier.JUMP
        session.step("d")
        assert env.player_pos == (15, 135)

    @pytest.mark.parametrize("tokens", [["space", "r"], ["jump", "right"], ["jr"]])
    def test_jump_moves_two_cells(self, env, scripted, tokens):
        session, _ = make_session(env, scripted, [])
        for token in tokens:
            session.step(token)
        assert env.player_pos == (135, 15)
        assert env.steps == 2

    def test_jump_stops_after_blocked_first_move(self, env, scripted, add_wall):
        add_wall(0, 0, vertical=True)
        session, _ = make_session(env, scripted, [])
        session.step("jr")
        assert env.player_pos == (15, 15)
        assert env.steps == 1

    def test_jump_stops_on_trap(self, env, scripted, add_trap):
        add_trap(1, 0)
        session, out = make_session(env, scripted, ["n"])
        session.step("jr")
        assert env.player_pos == (75, 15)
        assert env.steps == 1
        assert "Detrap for 5 points? (y/n): " in out


class TestDetrapPrompt:
    def test_accepting_removes_trap(self, env, scripted, add_trap):
        trap = add_trap(1, 0)
        session, _ = make_session(env, scripted, ["y"])
        session.step("r")
        assert session.score == -5
        assert not trap.active
        assert env.removal_chances_used == 1
        assert not env.has_pending_trap_collision()

    def test_declining_costs_one_point(self, env, scripted, add_trap):
        trap = add_trap(1, 0)
        session, _ = make_session(env, scripted, ["maybe", "no"])
        session.step("r")
        assert session.score == -1
        assert trap.active
        assert env.removal_chances_used == 0
        assert not env.has_pending_trap_collision()

    def test_no_prompt_once_removals_exhausted(self, env, scripted, add_trap):
        add_trap(1, 0)
        env.removal_chances_used = env.trap_removals = 2
        session, out = make_session(env, scripted, [])
        session.step("r")
        assert session.score == -2
        assert not any(line.startswith("Detrap") for line in out)

    def test_full_session_with_removal(self, env, scripted, add_trap):
        add_trap(1, 0)
        session, _ = make_session(env, scripted, ["r", "y", "q"])
        assert session.run() == -15


class TestMetaCommands:
    def test_status_line(self, env, scripted):
        session, out = make_session(env, scripted, [])
        session.step("c")
        session.step("status")
        assert "Score: -1, Steps: 0, Trap Collisions: 0/6, Trap Removals: 0" in out

    def test_restart_zeroes_score(self, env, scripted):
        session, out = make_session(env, scripted, [])
        session.step("c")
        session.step("c")
        session.step("restart")
        assert session.score == 0
        assert "Your Score and steps have reset" in out
        assert len(env.walls) == env.total_walls

    def test_replay_before_finish_is_penalised(self, env, scripted):
        session, _ = make_session(env, scripted, ["replay", "q"])
        assert session.run() == -20

    def test_help(self, env, scripted):
        session, out = make_session(env, scripted, [])
        session.step("?")
        assert any(line.startswith("Commands:") for line in out)

    def test_bare_yes_is_a_no_op(self, env, scripted):
        session, _ = make_session(env, scripted, [])
        session.step("y")
        assert session.score == 0
        assert session.moves == 1
        assert env.steps == 0
