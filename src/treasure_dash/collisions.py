"""Collision detection and resolution.

All tests are axis-aligned bounding-box overlaps with strict inequalities,
so rectangles that merely share an edge do not collide.

Resolution order is fixed: platforms, enemies, treasures, power-ups.
Platforms go first so on_ground reflects this step's support before
anything else looks at the player. Effects on score, lives and timers are
not applied here; the caller gets a list of events instead.
"""

from typing import List, Sequence

from .entities import Player, Platform, Enemy, Treasure, PowerUp, ActivePower
from .events import Event, EventKind


# Float slack when comparing the previous bottom edge to a platform top
LANDING_TOLERANCE = 1e-6


def overlaps(a, b) -> bool:
    """Strict AABB overlap between two objects with x, y, w, h."""
    return (
        a.x < b.x + b.w
        and a.x + a.w > b.x
        and a.y < b.y + b.h
        and a.y + a.h > b.y
    )


def resolve_platforms(player: Player, platforms: Sequence[Platform]) -> List[Event]:
    """Land the player on platforms it reached from above.

    The previous bottom edge is estimated as the current bottom minus the
    vertical velocity over the ticks just integrated. Overlaps entered from
    the side or from below are left as they are.
    """
    events = []
    player.on_ground = False
    for platform in platforms:
        if not overlaps(player, platform):
            continue
        prev_bottom = player.bottom - player.vy * player.step_ticks
        if prev_bottom <= platform.top + LANDING_TOLERANCE:
            player.y = platform.top - player.h
            player.vy = 0.0
            player.on_ground = True
            events.append(Event(EventKind.LANDED))
    return events


def resolve_enemies(
    player: Player,
    enemies: Sequence[Enemy],
    active_power: ActivePower,
    now: float,
) -> List[Event]:
    """Report enemy contact. Ignored entirely while invincible."""
    if active_power.inv_active(now):
        return []
    for enemy in enemies:
        if overlaps(player, enemy):
            return [Event(EventKind.PLAYER_HIT)]
    return []


def resolve_treasures(
    player: Player,
    treasures: Sequence[Treasure],
    active_power: ActivePower,
    now: float,
    base_value: int,
) -> List[Event]:
    """Collect overlapping treasures.

    Already-collected treasures are skipped. The award is doubled while
    the double-score power is active.
    """
    events = []
    multiplier = 2 if active_power.double_active(now) else 1
    for treasure in treasures:
        if treasure.collected or not overlaps(player, treasure):
            continue
        treasure.collected = True
        events.append(Event(EventKind.COLLECTED, value=base_value * multiplier))
    return events


def resolve_powerups(player: Player, powerups: Sequence[PowerUp]) -> List[Event]:
    """Pick up overlapping power-ups. Effects are applied by the caller."""
    events = []
    for powerup in powerups:
        if powerup.picked or not overlaps(player, powerup):
            continue
        powerup.picked = True
        events.append(Event(EventKind.POWER_ACTIVATED, power=powerup.kind))
    return events


def resolve(
    player: Player,
    platforms: Sequence[Platform],
    enemies: Sequence[Enemy],
    treasures: Sequence[Treasure],
    powerups: Sequence[PowerUp],
    active_power: ActivePower,
    now: float = 0.0,
    base_value: int = 10,
) -> List[Event]:
    """Resolve all player collisions for one step.

    Args:
        player: Player after integration (mutated on landing).
        platforms, enemies, treasures, powerups: Current level entities.
        active_power: Current power state (read only).
        now: Session clock in seconds, compared against active_power.end_time.
        base_value: Treasure award before power-up multipliers.

    Returns:
        Events in resolution order.
    """
    events = resolve_platforms(player, platforms)
    events += resolve_enemies(player, enemies, active_power, now)
    events += resolve_treasures(player, treasures, active_power, now, base_value)
    events += resolve_powerups(player, powerups)
    return events
