"""Tests for collision detection and resolution."""

import pytest

from treasure_dash.collisions import (
    overlaps, resolve, resolve_platforms, resolve_enemies, resolve_treasures, resolve_powerups,
)
from treasure_dash.entities import Player, Platform, Enemy, Treasure, PowerUp, PowerType, ActivePower
from treasure_dash.events import EventKind
from treasure_dash.physics import integrate


GROUND = Platform(0, 660, 1280, 60)


class TestOverlaps:
    def test_overlapping(self):
        assert overlaps(Platform(0, 0, 10, 10), Platform(5, 5, 10, 10))

    def test_touching_edges_do_not_overlap(self):
        a = Platform(0, 0, 10, 10)
        assert not overlaps(a, Platform(10, 0, 10, 10))
        assert not overlaps(a, Platform(0, 10, 10, 10))
        assert not overlaps(a, Platform(-10, 0, 10, 10))

    def test_barely_overlapping(self):
        assert overlaps(Platform(0, 0, 10, 10), Platform(9.9, 9.9, 10, 10))

    def test_separate(self):
        assert not overlaps(Platform(0, 0, 10, 10), Platform(50, 50, 10, 10))


class TestPlatformLanding:
    def test_landing_from_above(self):
        player = Player(100, 598, vy=5.0)  # bottom 662, was 657 before the tick
        events = resolve_platforms(player, [GROUND])
        assert player.y == 596
        assert player.vy == 0
        assert player.on_ground
        assert [e.kind for e in events] == [EventKind.LANDED]

    def test_approach_from_below_does_not_land(self):
        platform = Platform(100, 400, 180, 18)
        player = Player(120, 410, vy=-10.0)
        events = resolve_platforms(player, [platform])
        assert not player.on_ground
        assert player.y == 410
        assert player.vy == -10.0
        assert events == []

    def test_approach_from_side_does_not_land(self):
        platform = Platform(200, 500, 180, 60)
        player = Player(160, 510, vx=5.0, vy=0.7)
        events = resolve_platforms(player, [platform])
        assert not player.on_ground
        assert player.x == 160  # side penetration is not corrected
        assert events == []

    def test_previous_bottom_uses_integrated_ticks(self):
        """A 4-tick step moving 20px still counts as coming from above."""
        player = Player(100, 600, vy=5.0, step_ticks=4.0)  # bottom 664, was 644
        resolve_platforms(player, [GROUND])
        assert player.on_ground
        assert player.y == 596

    def test_on_ground_cleared_without_support(self):
        player = Player(100, 300, on_ground=True)
        resolve_platforms(player, [GROUND])
        assert not player.on_ground

    def test_resting_player_stays_grounded(self):
        player = Player(80, 596, on_ground=True)
        for _ in range(120):
            integrate(player, 1)
            resolve_platforms(player, [GROUND])
            assert player.on_ground
            assert player.y == 596

    def test_falls_and_lands(self):
        player = Player(80, 400)
        for _ in range(120):
            integrate(player, 1)
            resolve_platforms(player, [GROUND])
        assert player.on_ground
        assert player.bottom == 660


class TestEnemyContact:
    def test_hit(self):
        player = Player(300, 600)
        enemy = Enemy(310, 620)
        events = resolve_enemies(player, [enemy], ActivePower(), now=0.0)
        assert [e.kind for e in events] == [EventKind.PLAYER_HIT]

    def test_single_event_for_several_enemies(self):
        player = Player(300, 600)
        events = resolve_enemies(player, [Enemy(300, 620), Enemy(310, 620)], ActivePower(), now=0.0)
        assert len(events) == 1

    def test_invincible_ignores_contact(self):
        player = Player(300, 600)
        enemy = Enemy(310, 620)
        power = ActivePower(inv=True, end_time=10.0)
        assert resolve_enemies(player, [enemy], power, now=5.0) == []
        assert enemy.x == 310  # enemy is not removed or moved

    def test_expired_invincibility_does_not_protect(self):
        player = Player(300, 600)
        power = ActivePower(inv=True, end_time=10.0)
        events = resolve_enemies(player, [Enemy(310, 620)], power, now=10.5)
        assert [e.kind for e in events] == [EventKind.PLAYER_HIT]

    def test_no_contact(self):
        assert resolve_enemies(Player(0, 0), [Enemy(500, 620)], ActivePower(), now=0.0) == []


class TestTreasureCollection:
    def test_collect(self):
        treasure = Treasure(250, 488)
        player = Player(236, 470)
        events = resolve_treasures(player, [treasure], ActivePower(), now=0.0, base_value=10)
        assert treasure.collected
        assert [(e.kind, e.value) for e in events] == [(EventKind.COLLECTED, 10)]

    def test_collection_is_idempotent(self):
        treasure = Treasure(250, 488)
        player = Player(236, 470)
        resolve_treasures(player, [treasure], ActivePower(), now=0.0, base_value=10)
        assert resolve_treasures(player, [treasure], ActivePower(), now=0.0, base_value=10) == []
        assert treasure.collected

    def test_double_score_window(self):
        power = ActivePower(double=True, end_time=5.0)
        player = Player(236, 470)

        inside = resolve_treasures(player, [Treasure(250, 488)], power, now=5.0, base_value=10)
        assert inside[0].value == 20

        after = resolve_treasures(player, [Treasure(250, 488)], power, now=5.5, base_value=10)
        assert after[0].value == 10

    def test_out_of_reach(self):
        treasure = Treasure(730, 368)
        assert resolve_treasures(Player(80, 580), [treasure], ActivePower(), 0.0, 10) == []
        assert not treasure.collected


class TestPowerUpPickup:
    def test_pickup(self):
        powerup = PowerUp(520, 300, kind=PowerType.DOUBLE)
        events = resolve_powerups(Player(506, 282), [powerup])
        assert powerup.picked
        assert [(e.kind, e.power) for e in events] == [(EventKind.POWER_ACTIVATED, PowerType.DOUBLE)]

    def test_pickup_once(self):
        powerup = PowerUp(520, 300, kind=PowerType.TIME)
        player = Player(506, 282)
        resolve_powerups(player, [powerup])
        assert resolve_powerups(player, [powerup]) == []


class TestResolveOrder:
    def test_landing_and_collection_in_one_step(self):
        platform = Platform(180, 520, 180, 18)
        treasure = Treasure(250, 500)
        player = Player(236, 458, vy=3.0)  # bottom 522, was 519
        events = resolve(player, [platform], [], [treasure], [], ActivePower())
        assert [e.kind for e in events] == [EventKind.LANDED, EventKind.COLLECTED]
        assert player.on_ground

    def test_landing_and_hit_both_apply(self):
        player = Player(300, 598, vy=5.0)
        events = resolve(player, [GROUND], [Enemy(310, 620)], [], [], ActivePower())
        assert [e.kind for e in events] == [EventKind.LANDED, EventKind.PLAYER_HIT]
        assert player.on_ground

    def test_full_order(self):
        player = Player(300, 598, vy=5.0)
        events = resolve(
            player,
            [GROUND],
            [Enemy(310, 620)],
            [Treasure(320, 600)],
            [PowerUp(300, 610, kind=PowerType.INV)],
            ActivePower(),
            base_value=25,
        )
        assert [e.kind for e in events] == [
            EventKind.LANDED,
            EventKind.PLAYER_HIT,
            EventKind.COLLECTED,
            EventKind.POWER_ACTIVATED,
        ]
        assert events[2].value == 25
