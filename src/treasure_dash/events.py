"""Simulation events and audio cues.

Physics and collision code report what happened during a step as a list of
Event values; the progression state machine consumes each list once.
Cues are the named moments handed to the audio collaborator.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from .entities import PowerType


class EventKind(Enum):
    """What happened to the player during a step."""
    JUMPED = auto()
    LANDED = auto()
    FELL = auto()             # Dropped below the bottom of the world
    PLAYER_HIT = auto()       # Touched an enemy without invincibility
    COLLECTED = auto()        # Picked up a treasure
    POWER_ACTIVATED = auto()  # Picked up a power-up


@dataclass(frozen=True)
class Event:
    """A tagged simulation event.

    value is the score award for COLLECTED; power is the kind for
    POWER_ACTIVATED.
    """
    kind: EventKind
    value: int = 0
    power: Optional[PowerType] = None

    @property
    def costs_life(self) -> bool:
        return self.kind in (EventKind.FELL, EventKind.PLAYER_HIT)


class Cue(str, Enum):
    """Named audio triggers."""
    JUMP = "jump"
    COLLECT = "collect"
    POWER = "power"
    LIFE_LOST = "life_lost"
    GAME_WON = "game_won"
    GAME_OVER = "game_over"
