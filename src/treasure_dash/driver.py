"""Game loop driver.

Runs exactly one simulation step per frame:
    input -> physics -> enemy patrol -> collisions -> progression
and then hands audio cues to listeners. Rendering reads snapshot() after
the step. The driver is the only writer of GameState during play.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from .config import GameConfig
from .collisions import resolve
from .entities import PowerType
from .events import Event, Cue
from .physics import apply_input, integrate, normalize_ticks
from .progression import GameState, GamePhase, Progression


logger = logging.getLogger(__name__)

Rect = Tuple[float, float, float, float]  # (x, y, w, h)
CueListener = Callable[[Cue], None]


@dataclass(frozen=True)
class InputState:
    """Pressed state of the three controls, sampled once per step."""
    left: bool = False
    right: bool = False
    up: bool = False


@dataclass(frozen=True)
class RenderState:
    """Read-only view of the session for drawing and the HUD."""
    phase: GamePhase
    score: int
    lives: int
    level: int
    timer: float
    player: Optional[Rect] = None
    platforms: Tuple[Rect, ...] = ()
    enemies: Tuple[Rect, ...] = ()
    treasures: Tuple[Tuple[Rect, bool], ...] = ()  # (rect, collected)
    powerups: Tuple[Tuple[Rect, PowerType, bool], ...] = ()  # (rect, kind, picked)
    double: bool = False
    inv: bool = False
    final_score: Optional[int] = None


@dataclass
class StepResult:
    """What one step produced."""
    ticks: float = 0.0
    events: List[Event] = field(default_factory=list)
    cues: List[Cue] = field(default_factory=list)
    transitions: List[GamePhase] = field(default_factory=list)


def _rect(entity) -> Rect:
    return (entity.x, entity.y, entity.w, entity.h)


class GameDriver:
    """Owns a session and advances it frame by frame.

    Usage:
        driver = GameDriver()
        driver.start_game()
        while True:
            driver.frame(now_ms, InputState(right=True))
            draw(driver.snapshot())
    """

    def __init__(self, config: Optional[GameConfig] = None):
        self.config = config or GameConfig()
        self.progression = Progression(self.config)
        self.state: GameState = self.progression.new_state()
        self.input = InputState()

        self._listeners: List[CueListener] = []
        self._last_timestamp: Optional[float] = None

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------

    def add_listener(self, listener: CueListener) -> None:
        """Register a cue consumer (e.g. audio). Called synchronously, never awaited."""
        self._listeners.append(listener)

    def _publish(self, cues: List[Cue]) -> None:
        for cue in cues:
            for listener in self._listeners:
                try:
                    listener(cue)
                except Exception:
                    # Collaborator failures must not stop the simulation
                    logger.warning("Cue listener failed on %s", cue.value, exc_info=True)

    # ------------------------------------------------------------------
    # Session control
    # ------------------------------------------------------------------

    def start_level(self, level_index: int) -> None:
        self.progression.start_level(self.state, level_index)
        self._last_timestamp = None

    def start_game(self) -> None:
        self.progression.start_game(self.state)
        self._last_timestamp = None

    def pause(self) -> None:
        self.progression.pause(self.state)

    def resume(self) -> None:
        self.progression.resume(self.state)
        # Time spent paused is not simulated
        self._last_timestamp = None

    def toggle_pause(self) -> None:
        if self.state.paused:
            self.resume()
        else:
            self.pause()

    def reset_session(self) -> None:
        self.progression.reset_session(self.state)
        self._last_timestamp = None

    def acknowledge(self) -> None:
        self.progression.acknowledge(self.state)

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def frame(self, timestamp_ms: float, input_state: Optional[InputState] = None) -> StepResult:
        """Step using a frame timestamp; the first frame after (re)start advances 0 ticks."""
        if self._last_timestamp is None:
            elapsed = 0.0
        else:
            elapsed = timestamp_ms - self._last_timestamp
        self._last_timestamp = timestamp_ms
        return self.step(normalize_ticks(elapsed, self.config.physics), input_state)

    def step(self, dt_ticks: float = 1.0, input_state: Optional[InputState] = None) -> StepResult:
        """Advance the simulation by dt_ticks (capped).

        Does nothing unless the session is RUNNING.
        """
        if input_state is not None:
            self.input = input_state

        state = self.state
        state.transitions.clear()
        dt = max(0.0, min(dt_ticks, self.config.physics.max_ticks_per_step))
        result = StepResult(ticks=dt)

        if state.phase is not GamePhase.RUNNING or state.player is None or dt == 0:
            return result

        physics = self.config.physics
        player = state.player

        self.progression.advance_clock(state, dt)

        events = apply_input(player, self.input.left, self.input.right, self.input.up, physics)
        events += integrate(player, dt, physics, self.config.world)

        for enemy in state.enemies:
            enemy.update(dt)

        events += resolve(
            player,
            state.platforms,
            state.enemies,
            state.treasures,
            state.powerups,
            state.active_power,
            now=state.clock,
            base_value=self.config.progression.treasure_value,
        )

        cues = self.progression.apply(state, events)
        self._publish(cues)

        result.events = events
        result.cues = cues
        result.transitions = list(state.transitions)
        return result

    # ------------------------------------------------------------------
    # Rendering sink
    # ------------------------------------------------------------------

    def snapshot(self) -> RenderState:
        """Read-only copy of what a renderer needs."""
        state = self.state
        now = state.clock
        return RenderState(
            phase=state.phase,
            score=state.score,
            lives=state.lives,
            level=state.level,
            timer=state.display_timer,
            player=_rect(state.player) if state.player else None,
            platforms=tuple(_rect(p) for p in state.platforms),
            enemies=tuple(_rect(e) for e in state.enemies),
            treasures=tuple((_rect(t), t.collected) for t in state.treasures),
            powerups=tuple((_rect(p), p.kind, p.picked) for p in state.powerups),
            double=state.active_power.double_active(now),
            inv=state.active_power.inv_active(now),
            final_score=state.final_score,
        )
