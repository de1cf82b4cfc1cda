"""Game entities: player, platforms, enemies, treasures, power-ups.

Entities are plain data holders in world coordinates (origin top-left,
y grows downward). Every entity exposes x, y, w, h so the collision code
can treat them uniformly. Level entities are created by the level
generator and thrown away wholesale when a level (re)starts.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


# Default pickup size (treasures and power-ups are point-like)
PICKUP_SIZE = 20.0


class PowerType(str, Enum):
    """Kinds of power-up."""
    TIME = "time"      # Adds seconds to the level timer
    DOUBLE = "double"  # Doubles treasure awards for a while
    INV = "inv"        # Enemy contact is harmless for a while


@dataclass
class Player:
    """Player avatar.

    Created fresh at the spawn point for every level attempt.
    """
    x: float
    y: float
    w: float = 48.0
    h: float = 64.0
    vx: float = 0.0
    vy: float = 0.0
    on_ground: bool = False

    # Ticks covered by the last integration step, used to estimate where the
    # player's feet were before it (see collisions.resolve_platforms).
    step_ticks: float = 1.0

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def center_x(self) -> float:
        return self.x + self.w / 2

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """Get (left, top, right, bottom) bounds."""
        return (self.x, self.y, self.x + self.w, self.y + self.h)


@dataclass(frozen=True)
class Platform:
    """Static platform. Immutable once created."""
    x: float
    y: float
    w: float
    h: float

    @property
    def top(self) -> float:
        return self.y

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """Get (left, top, right, bottom) bounds."""
        return (self.x, self.y, self.x + self.w, self.y + self.h)


@dataclass
class Enemy:
    """Ground enemy that patrols horizontally.

    The left edge walks between min_x and max_x; reaching either end clamps
    the position there and reverses direction.
    """
    x: float
    y: float
    w: float = 42.0
    h: float = 42.0
    direction: int = 1  # 1 = right, -1 = left
    speed: float = 1.0  # Pixels per tick
    min_x: float = 0.0
    max_x: float = 0.0

    @classmethod
    def patrolling(
        cls,
        x: float,
        y: float,
        direction: int,
        speed: float,
        patrol_distance: float,
        world_width: float,
        w: float = 42.0,
        h: float = 42.0,
    ) -> "Enemy":
        """Create an enemy whose patrol range is centred on its spawn x.

        The range is cut to the world so the enemy never walks off screen.
        """
        half = patrol_distance / 2
        min_x = max(0.0, x - half)
        max_x = min(world_width - w, x + half)
        return cls(x=x, y=y, w=w, h=h, direction=direction, speed=speed,
                   min_x=min_x, max_x=max(min_x, max_x))

    def update(self, dt_ticks: float) -> None:
        """Advance the patrol by dt_ticks."""
        if self.speed <= 0:
            return

        new_x = self.x + self.direction * self.speed * dt_ticks

        if new_x >= self.max_x:
            new_x = self.max_x
            self.direction = -1
        elif new_x <= self.min_x:
            new_x = self.min_x
            self.direction = 1

        self.x = new_x

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """Get (left, top, right, bottom) bounds."""
        return (self.x, self.y, self.x + self.w, self.y + self.h)


@dataclass
class Treasure:
    """Collectible treasure. Collected at most once."""
    x: float
    y: float
    w: float = PICKUP_SIZE
    h: float = PICKUP_SIZE
    collected: bool = False


@dataclass
class PowerUp:
    """Power-up pickup. Picked at most once."""
    x: float
    y: float
    kind: PowerType = PowerType.TIME
    w: float = PICKUP_SIZE
    h: float = PICKUP_SIZE
    picked: bool = False


@dataclass
class ActivePower:
    """Timed modifiers sharing a single expiry time.

    end_time is in seconds on the session clock. Activating another power
    overwrites end_time rather than extending it.
    """
    double: bool = False
    inv: bool = False
    end_time: float = 0.0

    def double_active(self, now: float) -> bool:
        return self.double and now <= self.end_time

    def inv_active(self, now: float) -> bool:
        return self.inv and now <= self.end_time

    def expire(self, now: float) -> bool:
        """Clear both flags once now has passed end_time.

        Returns:
            True if any flag was cleared.
        """
        if now > self.end_time and (self.double or self.inv):
            self.double = False
            self.inv = False
            return True
        return False
