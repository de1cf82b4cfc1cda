"""Tests for the game loop driver: full steps through physics, collisions and progression."""

import dataclasses

import pytest

from treasure_dash.driver import GameDriver, InputState, RenderState
from treasure_dash.entities import PowerType
from treasure_dash.events import Cue, EventKind
from treasure_dash.progression import GamePhase


def place_on(player, target):
    """Put the player so that it overlaps a 20px pickup without landing anywhere."""
    player.x = target.x - 14
    player.y = target.y - 18
    player.vx = 0.0
    player.vy = 0.0


def place_on_enemy(player, enemy):
    player.x = enemy.x - 14
    player.y = 602.0
    player.vx = 0.0
    player.vy = 0.0


def powerup(state, kind):
    return next(p for p in state.powerups if p.kind is kind)


class TestStepBasics:
    def test_resting_player_stays_on_ground(self, driver):
        for _ in range(90):
            driver.step(1)
        player = driver.state.player
        assert player.on_ground
        assert player.y == 596

    def test_run_right(self, driver):
        for _ in range(60):
            driver.step(1)
        start_x = driver.state.player.x
        driver.step(1, InputState(right=True))
        assert driver.state.player.x == pytest.approx(start_x + 5)

    def test_jump_emits_cue(self, driver):
        for _ in range(60):
            driver.step(1)
        result = driver.step(1, InputState(up=True))
        assert [e.kind for e in result.events][0] is EventKind.JUMPED
        assert Cue.JUMP in result.cues
        assert not driver.state.player.on_ground

    def test_input_is_sticky(self, driver):
        driver.step(1, InputState(right=True))
        x = driver.state.player.x
        driver.step(1)
        assert driver.state.player.x > x

    def test_zero_ticks_is_noop(self, driver):
        y = driver.state.player.y
        result = driver.step(0)
        assert result.ticks == 0
        assert driver.state.player.y == y
        assert driver.state.clock == 0

    def test_ticks_capped(self, driver):
        assert driver.step(30).ticks == 4

    def test_no_step_in_menu(self, game_config):
        d = GameDriver(game_config)
        result = d.step(1)
        assert result.events == []
        assert d.state.phase is GamePhase.MENU

    def test_player_stays_inside_horizontal_bounds(self, driver):
        for i in range(600):
            going_right = (i // 150) % 2 == 0
            driver.step(4, InputState(left=not going_right, right=going_right, up=i % 30 == 0))
            if not driver.state.running:
                break
            player = driver.state.player
            assert 0 <= player.x <= 1280 - player.w


class TestFrames:
    def test_first_frame_advances_nothing(self, driver):
        assert driver.frame(5000).ticks == 0

    def test_frame_delta_to_ticks(self, driver):
        driver.frame(1000)
        result = driver.frame(1000 + 2 * 1000 / 60)
        assert result.ticks == pytest.approx(2.0)

    def test_long_stall_capped(self, driver):
        driver.frame(1000)
        assert driver.frame(6000).ticks == 4

    def test_resume_does_not_simulate_pause(self, driver):
        driver.frame(1000)
        driver.pause()
        driver.frame(2000)
        driver.resume()
        assert driver.frame(90000).ticks == 0


class TestPause:
    def test_paused_step_changes_nothing(self, driver):
        driver.step(1)
        driver.pause()
        player = driver.state.player
        before = (player.x, player.y, driver.state.timer, driver.state.enemies[0].x)
        driver.step(4, InputState(right=True, up=True))
        after = (player.x, player.y, driver.state.timer, driver.state.enemies[0].x)
        assert before == after

    def test_toggle_pause(self, driver):
        driver.toggle_pause()
        assert driver.state.phase is GamePhase.PAUSED
        driver.toggle_pause()
        assert driver.state.phase is GamePhase.RUNNING


class TestLevelClear:
    def test_collect_all_treasures_advances_level(self, driver):
        state = driver.state
        for index in range(3):
            place_on(state.player, state.treasures[index])
            result = driver.step(1)
            assert Cue.COLLECT in result.cues

        assert state.level == 2
        assert state.score == 30
        assert state.timer == 54
        assert result.transitions == [GamePhase.LEVEL_COMPLETE, GamePhase.RUNNING]
        assert not any(t.collected for t in state.treasures)

    def test_win_after_last_level(self, driver):
        driver.start_level(6)
        state = driver.state
        state.score = 100
        for t in state.treasures[:-1]:
            t.collected = True
        place_on(state.player, state.treasures[-1])
        result = driver.step(1)
        assert state.phase is GamePhase.WON
        assert state.final_score == 110
        assert result.cues == [Cue.COLLECT, Cue.GAME_WON]


class TestLifeLoss:
    def test_timer_expiry_costs_life(self, driver):
        state = driver.state
        state.timer = 0.01
        result = driver.step(1)
        assert state.lives == 2
        assert state.timer == 60
        assert state.level == 1
        assert GamePhase.LIFE_LOST in result.transitions

    def test_enemy_contact(self, driver):
        state = driver.state
        place_on_enemy(state.player, state.enemies[0])
        result = driver.step(1)
        assert EventKind.PLAYER_HIT in [e.kind for e in result.events]
        assert state.lives == 2
        assert (state.player.x, state.player.y) == (80, 580)

    def test_falling_out(self, driver):
        driver.state.player.y = 721.0
        driver.step(1)
        assert driver.state.lives == 2

    def test_fresh_entities_after_life_loss(self, driver):
        state = driver.state
        place_on(state.player, state.treasures[0])
        driver.step(1)
        assert state.score == 10
        state.timer = 0.0
        driver.step(1)
        assert state.score == 10
        assert not any(t.collected for t in state.treasures)

    def test_hit_beats_level_completion(self, driver):
        state = driver.state
        for t in state.treasures[:2]:
            t.collected = True
        last = state.treasures[2]
        enemy = state.enemies[0]
        enemy.x, enemy.y = last.x - 10, last.y - 8
        enemy.min_x, enemy.max_x = enemy.x - 20, enemy.x + 20
        place_on(state.player, last)
        result = driver.step(1)
        assert state.level == 1
        assert state.lives == 2
        assert state.score == 10
        assert GamePhase.LEVEL_COMPLETE not in result.transitions

    def test_last_life_game_over(self, driver):
        state = driver.state
        state.lives = 1
        state.score = 40
        place_on_enemy(state.player, state.enemies[0])
        result = driver.step(1)

        assert state.phase is GamePhase.GAME_OVER
        assert state.final_score == 40
        assert (state.score, state.lives, state.level) == (0, 3, 1)
        assert result.cues == [Cue.LIFE_LOST, Cue.GAME_OVER]

        assert driver.step(1).events == []
        driver.acknowledge()
        assert state.phase is GamePhase.MENU


class TestPowerUps:
    def test_double_score_window(self, driver):
        driver.start_level(3)
        state = driver.state
        place_on(state.player, powerup(state, PowerType.DOUBLE))
        result = driver.step(1)
        assert Cue.POWER in result.cues
        assert driver.snapshot().double

        place_on(state.player, state.treasures[0])
        driver.step(1)
        assert state.score == 20

        # Wait out the 8 second window on open ground, away from the patrols
        state.player.x, state.player.y, state.player.vy = 1000.0, 596.0, 0.0
        for _ in range(125):
            driver.step(4)
        assert not driver.snapshot().double

        place_on(state.player, state.treasures[1])
        driver.step(1)
        assert state.score == 30

    def test_time_bonus(self, driver):
        driver.start_level(2)
        state = driver.state
        place_on(state.player, powerup(state, PowerType.TIME))
        driver.step(1)
        assert state.timer == pytest.approx(54 + 10 - 1 / 60)

    def test_invincibility_ignores_enemies(self, driver):
        driver.start_level(5)
        state = driver.state
        place_on(state.player, powerup(state, PowerType.INV))
        driver.step(1)
        assert driver.snapshot().inv

        for _ in range(10):
            place_on_enemy(state.player, state.enemies[0])
            result = driver.step(1)
            assert EventKind.PLAYER_HIT not in [e.kind for e in result.events]
        assert state.lives == 3

    def test_powerup_picked_once(self, driver):
        driver.start_level(2)
        state = driver.state
        target = powerup(state, PowerType.TIME)
        place_on(state.player, target)
        driver.step(1)
        place_on(state.player, target)
        result = driver.step(1)
        assert Cue.POWER not in result.cues


class TestListeners:
    def test_cues_delivered_in_order(self, driver):
        heard = []
        driver.add_listener(heard.append)
        state = driver.state
        state.lives = 1
        place_on_enemy(state.player, state.enemies[0])
        driver.step(1)
        assert heard == [Cue.LIFE_LOST, Cue.GAME_OVER]

    def test_failing_listener_does_not_stop_simulation(self, driver, caplog):
        def broken(cue):
            raise RuntimeError("speaker on fire")

        heard = []
        driver.add_listener(broken)
        driver.add_listener(heard.append)

        state = driver.state
        place_on(state.player, state.treasures[0])
        driver.step(1)

        assert heard == [Cue.COLLECT]
        assert state.score == 10
        assert "Cue listener failed" in caplog.text


class TestSnapshot:
    def test_contents(self, driver):
        snap = driver.snapshot()
        assert isinstance(snap, RenderState)
        assert snap.phase is GamePhase.RUNNING
        assert (snap.score, snap.lives, snap.level) == (0, 3, 1)
        assert snap.player == (80, 580, 48, 64)
        assert len(snap.platforms) == 5
        assert len(snap.treasures) == 3
        assert not snap.double and not snap.inv

    def test_timer_clamped(self, driver):
        driver.state.timer = -3.0
        assert driver.snapshot().timer == 0.0

    def test_is_read_only(self, driver):
        snap = driver.snapshot()
        with pytest.raises(dataclasses.FrozenInstanceError):
            snap.score = 999

    def test_menu_snapshot(self, game_config):
        snap = GameDriver(game_config).snapshot()
        assert snap.phase is GamePhase.MENU
        assert snap.player is None
        assert snap.platforms == ()
