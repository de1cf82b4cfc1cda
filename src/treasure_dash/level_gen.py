"""Level generation from a level index.

Levels are a fixed formula of the level index, so the same index always
yields the same layout:
- a full-width ground strip
- four floating platforms, 240px apart, stepping up to the right and
  lifted slightly on later levels
- a treasure above each of the first three floating platforms
- min(1 + n // 2, 4) patrolling enemies on the ground, faster each level
- level-gated power-ups (time on even levels, double from 3, inv from 5)

Every call builds new entity objects; nothing is shared between calls.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .config import GameConfig, ProgressionConfig, WorldConfig, EnemyConfig
from .entities import Platform, Enemy, Treasure, PowerUp, PowerType


# Ground strip
GROUND_Y = 660.0
GROUND_HEIGHT = 60.0

# Floating platforms
PLATFORM_COUNT = 4
PLATFORM_START_X = 180.0
PLATFORM_SPACING = 240.0
PLATFORM_BASE_Y = 520.0
PLATFORM_STEP_Y = 60.0  # Each platform is this much higher than the previous
PLATFORM_LEVEL_SHIFT = 10.0  # Per-level y offset (screen coordinates)
PLATFORM_WIDTH = 180.0
PLATFORM_HEIGHT = 18.0

# Treasures sit above platforms 0..2
TREASURE_PLATFORMS = 3
TREASURE_OFFSET_X = 70.0
TREASURE_OFFSET_Y = -32.0

# Enemies
MAX_ENEMIES = 4
ENEMY_START_X = 320.0
ENEMY_SPACING = 180.0
ENEMY_Y = 620.0
ENEMY_SIZE = 42.0
ENEMY_BASE_SPEED = 1.6
ENEMY_SPEED_PER_LEVEL = 0.25

# Power-up positions
TIME_POWERUP_POS = (900.0, 420.0)
DOUBLE_POWERUP_POS = (520.0, 300.0)
INV_POWERUP_POS = (1080.0, 540.0)
DOUBLE_MIN_LEVEL = 3
INV_MIN_LEVEL = 5


@dataclass
class LevelData:
    """Entities and timer budget for one level attempt."""
    level: int
    platforms: List[Platform] = field(default_factory=list)
    treasures: List[Treasure] = field(default_factory=list)
    enemies: List[Enemy] = field(default_factory=list)
    powerups: List[PowerUp] = field(default_factory=list)
    timer_budget: float = 0.0


class LevelGenerator:
    """Builds LevelData for a level index.

    World size, enemy patrol range and timer formula come from config; the
    layout formula itself is fixed.
    """

    def __init__(
        self,
        world: Optional[WorldConfig] = None,
        progression: Optional[ProgressionConfig] = None,
        enemies: Optional[EnemyConfig] = None,
    ):
        self.world = world or WorldConfig()
        self.progression = progression or ProgressionConfig()
        self.enemies = enemies or EnemyConfig()

    def timer_budget(self, level_index: int) -> float:
        """Seconds on the clock at the start of a level.

        Not clamped: very high indices give a non-positive budget.
        """
        p = self.progression
        return p.timer_base - (level_index - 1) * p.timer_decrement

    def enemy_count(self, level_index: int) -> int:
        return min(1 + level_index // 2, MAX_ENEMIES)

    def generate(self, level_index: int) -> LevelData:
        """Generate a level.

        Args:
            level_index: 1-based level number.

        Returns:
            Freshly built LevelData.

        Raises:
            ValueError: If level_index is below 1.
        """
        if level_index < 1:
            raise ValueError(f"Level index must be >= 1, got {level_index}")

        level = LevelData(level=level_index, timer_budget=self.timer_budget(level_index))

        # Ground spans the whole world
        level.platforms.append(Platform(0.0, GROUND_Y, self.world.width, GROUND_HEIGHT))

        level.platforms.extend(self._floating_platforms(level_index))
        level.treasures.extend(self._place_treasures(level.platforms[1:]))
        level.enemies.extend(self._place_enemies(level_index))
        level.powerups.extend(self._place_powerups(level_index))

        return level

    def _floating_platforms(self, level_index: int) -> List[Platform]:
        platforms = []
        for i in range(PLATFORM_COUNT):
            px = PLATFORM_START_X + i * PLATFORM_SPACING
            py = PLATFORM_BASE_Y - i * PLATFORM_STEP_Y + (level_index - 1) * PLATFORM_LEVEL_SHIFT
            platforms.append(Platform(px, py, PLATFORM_WIDTH, PLATFORM_HEIGHT))
        return platforms

    def _place_treasures(self, floating: List[Platform]) -> List[Treasure]:
        """One treasure above each of the first floating platforms (never the last)."""
        return [
            Treasure(p.x + TREASURE_OFFSET_X, p.y + TREASURE_OFFSET_Y)
            for p in floating[:TREASURE_PLATFORMS]
        ]

    def _place_enemies(self, level_index: int) -> List[Enemy]:
        enemies = []
        speed = ENEMY_BASE_SPEED + level_index * ENEMY_SPEED_PER_LEVEL
        for i in range(self.enemy_count(level_index)):
            enemies.append(Enemy.patrolling(
                x=ENEMY_START_X + i * ENEMY_SPACING,
                y=ENEMY_Y,
                direction=1 if i % 2 else -1,
                speed=speed,
                patrol_distance=self.enemies.patrol_distance,
                world_width=self.world.width,
                w=ENEMY_SIZE,
                h=ENEMY_SIZE,
            ))
        return enemies

    def _place_powerups(self, level_index: int) -> List[PowerUp]:
        powerups = []
        if level_index % 2 == 0:
            powerups.append(PowerUp(*TIME_POWERUP_POS, kind=PowerType.TIME))
        if level_index >= DOUBLE_MIN_LEVEL:
            powerups.append(PowerUp(*DOUBLE_POWERUP_POS, kind=PowerType.DOUBLE))
        if level_index >= INV_MIN_LEVEL:
            powerups.append(PowerUp(*INV_POWERUP_POS, kind=PowerType.INV))
        return powerups

    @classmethod
    def from_config(cls, config: GameConfig) -> "LevelGenerator":
        """Create generator from full game config."""
        return cls(
            world=config.world,
            progression=config.progression,
            enemies=config.enemies,
        )


def generate(level_index: int, config: Optional[GameConfig] = None) -> LevelData:
    """Generate a level with the given (or default) configuration."""
    return LevelGenerator.from_config(config or GameConfig()).generate(level_index)
