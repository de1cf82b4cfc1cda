"""treasure-dash: 2D platformer simulation with a pygame front end.

Collect every treasure on each of six levels before the clock runs out,
dodging patrolling enemies and using timed power-ups. The simulation core
(level generation, physics, collisions, progression) is deterministic and
free of rendering; pygame and Gymnasium front ends drive it.
"""

from .config import PhysicsConfig, WorldConfig, ProgressionConfig, EnemyConfig, GameConfig, CONFIGS
from .entities import Player, Platform, Enemy, Treasure, PowerUp, PowerType, ActivePower
from .events import Event, EventKind, Cue
from .level_gen import LevelGenerator, LevelData, generate
from .physics import integrate, apply_input, normalize_ticks
from .collisions import overlaps, resolve
from .progression import GameState, GamePhase, Progression
from .driver import GameDriver, InputState, RenderState, StepResult

__all__ = [
    "PhysicsConfig",
    "WorldConfig",
    "ProgressionConfig",
    "EnemyConfig",
    "GameConfig",
    "CONFIGS",
    "Player",
    "Platform",
    "Enemy",
    "Treasure",
    "PowerUp",
    "PowerType",
    "ActivePower",
    "Event",
    "EventKind",
    "Cue",
    "LevelGenerator",
    "LevelData",
    "generate",
    "integrate",
    "apply_input",
    "normalize_ticks",
    "overlaps",
    "resolve",
    "GameState",
    "GamePhase",
    "Progression",
    "GameDriver",
    "InputState",
    "RenderState",
    "StepResult",
]
