"""Session state and the progression state machine.

GameState is the single owner of everything that changes during a session:
score, lives, level, timer, phase and the current level's entities.
Progression applies step events and session-control requests to it.

Phases:
    MENU -> RUNNING <-> PAUSED
    RUNNING -> LEVEL_COMPLETE -> RUNNING (next level) | WON
    RUNNING -> LIFE_LOST -> RUNNING (same level) | GAME_OVER
    GAME_OVER | WON -> MENU (acknowledge)

LEVEL_COMPLETE and LIFE_LOST are passed through within a single step and
recorded in GameState.transitions for that step.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from .config import GameConfig
from .entities import Player, Platform, Enemy, Treasure, PowerUp, PowerType, ActivePower
from .events import Event, EventKind, Cue
from .level_gen import LevelGenerator


logger = logging.getLogger(__name__)


class GamePhase(Enum):
    MENU = "menu"
    RUNNING = "running"
    PAUSED = "paused"
    LEVEL_COMPLETE = "level_complete"
    LIFE_LOST = "life_lost"
    GAME_OVER = "game_over"
    WON = "won"


TERMINAL_PHASES = (GamePhase.GAME_OVER, GamePhase.WON)


@dataclass
class GameState:
    """Everything a session mutates.

    Entity lists belong to the current level attempt only and are replaced
    on every level (re)start.
    """
    score: int = 0
    lives: int = 3
    level: int = 1
    timer: float = 0.0  # Seconds remaining; may dip below zero inside a step
    phase: GamePhase = GamePhase.MENU
    clock: float = 0.0  # Seconds of running (unpaused) simulation time

    player: Optional[Player] = None
    platforms: List[Platform] = field(default_factory=list)
    treasures: List[Treasure] = field(default_factory=list)
    enemies: List[Enemy] = field(default_factory=list)
    powerups: List[PowerUp] = field(default_factory=list)
    active_power: ActivePower = field(default_factory=ActivePower)

    # Score reported by the last GAME_OVER or WON
    final_score: Optional[int] = None

    # Phases entered during the current step, in order
    transitions: List[GamePhase] = field(default_factory=list)

    @property
    def running(self) -> bool:
        """A level is in play (possibly paused)."""
        return self.phase in (GamePhase.RUNNING, GamePhase.PAUSED)

    @property
    def paused(self) -> bool:
        return self.phase is GamePhase.PAUSED

    @property
    def display_timer(self) -> float:
        """Timer as shown to the player, never negative."""
        return max(0.0, self.timer)

    @property
    def all_treasures_collected(self) -> bool:
        return bool(self.treasures) and all(t.collected for t in self.treasures)


class Progression:
    """Applies step events and session control to a GameState."""

    def __init__(self, config: Optional[GameConfig] = None):
        self.config = config or GameConfig()
        self.generator = LevelGenerator.from_config(self.config)

    @property
    def max_level(self) -> int:
        return self.config.progression.max_level

    def new_state(self) -> GameState:
        """Fresh session in the menu."""
        return GameState(lives=self.config.progression.starting_lives)

    # ------------------------------------------------------------------
    # Session control
    # ------------------------------------------------------------------

    def start_level(self, state: GameState, level_index: int) -> None:
        """Start (or restart) a level attempt.

        Out-of-range indices are clamped to [1, max_level]. All level
        entities, the player, the timer and active powers are replaced.
        """
        clamped = max(1, min(int(level_index), self.max_level))
        if clamped != level_index:
            logger.warning("Level %s out of range, starting level %d", level_index, clamped)

        level = self.generator.generate(clamped)
        world = self.config.world

        state.level = clamped
        state.platforms = level.platforms
        state.treasures = level.treasures
        state.enemies = level.enemies
        state.powerups = level.powerups
        state.player = Player(
            x=world.spawn[0], y=world.spawn[1],
            w=world.player_width, h=world.player_height,
        )
        state.timer = level.timer_budget
        state.active_power = ActivePower()
        self._enter(state, GamePhase.RUNNING)

        logger.info("Level %d started (timer %.0fs, %d enemies, %d power-ups)",
                    clamped, level.timer_budget, len(level.enemies), len(level.powerups))

    def start_game(self, state: GameState) -> None:
        """Reset the session and start from level 1."""
        self.reset_session(state)
        self.start_level(state, 1)

    def pause(self, state: GameState) -> None:
        """Freeze a running level. No-op in any other phase."""
        if state.phase is GamePhase.RUNNING:
            self._enter(state, GamePhase.PAUSED)

    def resume(self, state: GameState) -> None:
        """Continue a paused level. No-op in any other phase."""
        if state.phase is GamePhase.PAUSED:
            self._enter(state, GamePhase.RUNNING)

    def reset_session(self, state: GameState) -> None:
        """Return to the menu with default score, lives and level."""
        self._reset_fields(state)
        state.final_score = None
        state.clock = 0.0
        state.transitions.clear()
        state.phase = GamePhase.MENU

    def acknowledge(self, state: GameState) -> None:
        """Leave GAME_OVER or WON for the menu. No-op otherwise."""
        if state.phase in TERMINAL_PHASES:
            self._enter(state, GamePhase.MENU)

    # ------------------------------------------------------------------
    # Per-step updates
    # ------------------------------------------------------------------

    def advance_clock(self, state: GameState, dt_ticks: float) -> None:
        """Run the session clock and level timer forward. Only while RUNNING."""
        if state.phase is not GamePhase.RUNNING:
            return
        seconds = dt_ticks * self.config.physics.tick_seconds
        state.clock += seconds
        state.timer -= seconds

    def apply(self, state: GameState, events: Sequence[Event]) -> List[Cue]:
        """Consume one step's events and decide transitions.

        Order: power expiry, score and power effects, life loss (events or
        timer), then level completion. At most one life is lost per step and
        a lost life takes precedence over completing the level.

        Returns:
            Audio cues for the step.
        """
        if state.phase is not GamePhase.RUNNING:
            return []

        cues: List[Cue] = []
        now = state.clock

        if state.active_power.expire(now):
            logger.debug("Active power expired at t=%.2f", now)

        life_lost = False
        for event in events:
            if event.kind is EventKind.JUMPED:
                cues.append(Cue.JUMP)
            elif event.kind is EventKind.COLLECTED:
                state.score += event.value
                cues.append(Cue.COLLECT)
            elif event.kind is EventKind.POWER_ACTIVATED:
                self._activate_power(state, event.power, now)
                cues.append(Cue.POWER)
            elif event.costs_life:
                life_lost = True

        if state.timer <= 0:
            state.timer = 0.0
            life_lost = True

        if life_lost:
            cues.extend(self.lose_life(state))
        elif state.all_treasures_collected:
            cues.extend(self.complete_level(state))

        return cues

    def lose_life(self, state: GameState) -> List[Cue]:
        """Take a life; restart the level or end the game."""
        state.lives -= 1
        self._enter(state, GamePhase.LIFE_LOST)
        logger.info("Life lost on level %d, %d remaining", state.level, state.lives)

        if state.lives <= 0:
            self._finish(state, GamePhase.GAME_OVER)
            return [Cue.LIFE_LOST, Cue.GAME_OVER]

        self.start_level(state, state.level)
        return [Cue.LIFE_LOST]

    def complete_level(self, state: GameState) -> List[Cue]:
        """Advance to the next level, or win after the last one."""
        self._enter(state, GamePhase.LEVEL_COMPLETE)
        logger.info("Level %d complete, score %d", state.level, state.score)

        if state.level < self.max_level:
            self.start_level(state, state.level + 1)
            return []

        self._finish(state, GamePhase.WON)
        return [Cue.GAME_WON]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _activate_power(self, state: GameState, kind: Optional[PowerType], now: float) -> None:
        p = self.config.progression
        if kind is PowerType.TIME:
            state.timer += p.time_bonus
        elif kind is PowerType.DOUBLE:
            state.active_power.double = True
            state.active_power.end_time = now + p.power_duration
        elif kind is PowerType.INV:
            state.active_power.inv = True
            state.active_power.end_time = now + p.power_duration
        logger.debug("Power-up %s activated at t=%.2f", kind, now)

    def _finish(self, state: GameState, phase: GamePhase) -> None:
        """Report the final score and reset the session fields."""
        state.final_score = state.score
        logger.info("%s with final score %d",
                    "Game over" if phase is GamePhase.GAME_OVER else "Game won",
                    state.final_score)
        self._reset_fields(state)
        self._enter(state, phase)

    def _reset_fields(self, state: GameState) -> None:
        state.score = 0
        state.lives = self.config.progression.starting_lives
        state.level = 1
        state.timer = 0.0
        state.player = None
        state.platforms = []
        state.treasures = []
        state.enemies = []
        state.powerups = []
        state.active_power = ActivePower()

    def _enter(self, state: GameState, phase: GamePhase) -> None:
        state.phase = phase
        state.transitions.append(phase)
