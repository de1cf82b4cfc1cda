"""Per-tick player motion.

Time is measured in normalized ticks (1 tick = 1/60 s nominal). A frame's
wall-clock delta is converted to ticks and capped so that a long stall
cannot move the player far past obstacles in a single step.
"""

import logging
from typing import List, Optional

from .config import PhysicsConfig, WorldConfig
from .entities import Player
from .events import Event, EventKind


logger = logging.getLogger(__name__)


def normalize_ticks(elapsed_ms: float, params: Optional[PhysicsConfig] = None) -> float:
    """Convert a frame delta in milliseconds to a capped tick count.

    Negative deltas (clock going backwards) count as zero.
    """
    params = params or PhysicsConfig()
    ticks = elapsed_ms / (1000.0 / params.tick_rate)
    return max(0.0, min(ticks, params.max_ticks_per_step))


def apply_input(
    player: Player,
    left: bool,
    right: bool,
    up: bool,
    params: Optional[PhysicsConfig] = None,
) -> List[Event]:
    """Set horizontal velocity from input and start a jump if grounded.

    Returns:
        [JUMPED] if a jump started, otherwise [].
    """
    params = params or PhysicsConfig()

    horizontal = 0
    if left:
        horizontal -= 1
    if right:
        horizontal += 1
    player.vx = horizontal * params.run_speed

    if up and player.on_ground:
        player.vy = params.jump_velocity
        player.on_ground = False
        return [Event(EventKind.JUMPED)]
    return []


def integrate(
    player: Player,
    dt_ticks: float,
    params: Optional[PhysicsConfig] = None,
    world: Optional[WorldConfig] = None,
) -> List[Event]:
    """Advance the player by dt_ticks under gravity.

    Horizontal position is clamped to the world. Vertical position is left
    alone even past the bottom edge; that case is reported as FELL.

    Args:
        player: Player to move (mutated).
        dt_ticks: Elapsed ticks, capped at params.max_ticks_per_step.
        params: Motion constants. Uses defaults if None.
        world: World bounds. Uses defaults if None.

    Returns:
        [FELL] if the player is below the world, otherwise [].
    """
    params = params or PhysicsConfig()
    world = world or WorldConfig()
    dt = max(0.0, min(dt_ticks, params.max_ticks_per_step))

    player.vy += params.gravity * dt
    player.x += player.vx * dt
    player.y += player.vy * dt
    player.step_ticks = dt

    # Clamp, never bounce
    if player.x < 0:
        player.x = 0.0
    if player.x + player.w > world.width:
        player.x = world.width - player.w

    if player.y > world.height:
        logger.debug("Player fell out of the world at y=%.1f", player.y)
        return [Event(EventKind.FELL)]
    return []
