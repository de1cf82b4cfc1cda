"""Configuration system for the Treasure Dash simulation.

All tunables live in small dataclasses grouped by concern:
- PhysicsConfig: per-tick motion constants (gravity, run speed, jump)
- WorldConfig: world bounds, player size and spawn point
- ProgressionConfig: levels, lives, scoring and power-up timing
- EnemyConfig: patrol behaviour

Units are world pixels and 60 Hz ticks unless noted. The defaults give the
standard six-level game.
"""

from dataclasses import dataclass, field
from typing import Tuple, Dict, Any


@dataclass
class PhysicsConfig:
    """Per-tick motion constants.

    Velocities are in pixels per tick, gravity in pixels per tick per tick.
    Screen coordinates: positive y points down, so jumps are negative.
    """

    gravity: float = 0.7
    run_speed: float = 5.0
    jump_velocity: float = -14.0

    # Frame-time normalization
    tick_rate: float = 60.0  # Nominal ticks per second
    max_ticks_per_step: float = 4.0  # Cap on a single step's advance (lag spikes)

    @property
    def tick_seconds(self) -> float:
        """Length of one tick in seconds."""
        return 1.0 / self.tick_rate

    @property
    def jump_apex(self) -> float:
        """Height reached by a standing jump (v0^2 / 2g)."""
        return self.jump_velocity ** 2 / (2 * self.gravity)

    def to_dict(self) -> Dict[str, float]:
        return {
            "gravity": self.gravity,
            "run_speed": self.run_speed,
            "jump_velocity": self.jump_velocity,
            "tick_rate": self.tick_rate,
            "max_ticks_per_step": self.max_ticks_per_step,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, float]) -> "PhysicsConfig":
        return cls(
            gravity=d.get("gravity", 0.7),
            run_speed=d.get("run_speed", 5.0),
            jump_velocity=d.get("jump_velocity", -14.0),
            tick_rate=d.get("tick_rate", 60.0),
            max_ticks_per_step=d.get("max_ticks_per_step", 4.0),
        )


@dataclass
class WorldConfig:
    """World bounds and player geometry."""
    width: float = 1280.0
    height: float = 720.0
    player_width: float = 48.0
    player_height: float = 64.0
    spawn: Tuple[float, float] = (80.0, 580.0)  # Player top-left at level start

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "player_width": self.player_width,
            "player_height": self.player_height,
            "spawn": list(self.spawn),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WorldConfig":
        return cls(
            width=d.get("width", 1280.0),
            height=d.get("height", 720.0),
            player_width=d.get("player_width", 48.0),
            player_height=d.get("player_height", 64.0),
            spawn=tuple(d.get("spawn", (80.0, 580.0))),
        )


@dataclass
class ProgressionConfig:
    """Scoring, lives and power-up timing.

    Power-up durations and the time bonus are in seconds of running time.
    """
    max_level: int = 6
    starting_lives: int = 3
    treasure_value: int = 10
    time_bonus: float = 10.0  # Seconds added by a "time" power-up
    power_duration: float = 8.0  # Window for "double" and "inv" power-ups

    # Timer budget formula: base - (level - 1) * decrement
    timer_base: float = 60.0
    timer_decrement: float = 6.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_level": self.max_level,
            "starting_lives": self.starting_lives,
            "treasure_value": self.treasure_value,
            "time_bonus": self.time_bonus,
            "power_duration": self.power_duration,
            "timer_base": self.timer_base,
            "timer_decrement": self.timer_decrement,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ProgressionConfig":
        return cls(
            max_level=d.get("max_level", 6),
            starting_lives=d.get("starting_lives", 3),
            treasure_value=d.get("treasure_value", 10),
            time_bonus=d.get("time_bonus", 10.0),
            power_duration=d.get("power_duration", 8.0),
            timer_base=d.get("timer_base", 60.0),
            timer_decrement=d.get("timer_decrement", 6.0),
        )


@dataclass
class EnemyConfig:
    """Enemy patrol behaviour.

    Each enemy walks back and forth over a range of patrol_distance pixels
    centred on its spawn x, reversing when it reaches either end.
    """
    patrol_distance: float = 120.0

    def to_dict(self) -> Dict[str, float]:
        return {"patrol_distance": self.patrol_distance}

    @classmethod
    def from_dict(cls, d: Dict[str, float]) -> "EnemyConfig":
        return cls(patrol_distance=d.get("patrol_distance", 120.0))


@dataclass
class GameConfig:
    """Complete game configuration combining all parameter groups."""
    physics: PhysicsConfig = field(default_factory=PhysicsConfig)
    world: WorldConfig = field(default_factory=WorldConfig)
    progression: ProgressionConfig = field(default_factory=ProgressionConfig)
    enemies: EnemyConfig = field(default_factory=EnemyConfig)

    # Display settings (front end only, never read by the simulation)
    fps: int = 60
    asset_dir: str = "."

    def to_dict(self) -> Dict[str, Any]:
        """Convert to nested dictionary."""
        return {
            "physics": self.physics.to_dict(),
            "world": self.world.to_dict(),
            "progression": self.progression.to_dict(),
            "enemies": self.enemies.to_dict(),
            "fps": self.fps,
            "asset_dir": self.asset_dir,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GameConfig":
        return cls(
            physics=PhysicsConfig.from_dict(d.get("physics", {})),
            world=WorldConfig.from_dict(d.get("world", {})),
            progression=ProgressionConfig.from_dict(d.get("progression", {})),
            enemies=EnemyConfig.from_dict(d.get("enemies", {})),
            fps=d.get("fps", 60),
            asset_dir=d.get("asset_dir", "."),
        )


# Named presets for the CLI
CONFIGS = {
    # Standard six-level game
    "default": GameConfig(),

    # More lives, longer power-ups, gentler clock
    "casual": GameConfig(
        progression=ProgressionConfig(
            starting_lives=5,
            power_duration=12.0,
            time_bonus=15.0,
            timer_base=90.0,
        ),
    ),

    # One life, heavier gravity, wide enemy patrols
    "hardcore": GameConfig(
        physics=PhysicsConfig(gravity=0.9, jump_velocity=-15.5),
        progression=ProgressionConfig(starting_lives=1, power_duration=5.0),
        enemies=EnemyConfig(patrol_distance=160.0),
    ),
}
