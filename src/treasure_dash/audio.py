"""Audio collaborator backed by pygame.mixer.

Plays a short sound per cue and loops background music. A missing mixer,
missing files or playback errors all end in silence; the simulation never
waits on or hears back from this module.
"""

import logging
import os
from typing import Dict, Optional

import pygame

from .events import Cue


logger = logging.getLogger(__name__)

CUE_FILES = {
    Cue.JUMP: "jump.wav",
    Cue.COLLECT: "collect.wav",
    Cue.POWER: "power.wav",
    Cue.LIFE_LOST: "lose.wav",
    Cue.GAME_OVER: "lose.wav",
    Cue.GAME_WON: "win.wav",
}
MUSIC_FILE = "bgm.mp3"


class PygameAudio:
    """Cue listener that plays sounds.

    Register with GameDriver.add_listener(audio).
    """

    def __init__(self, asset_dir: Optional[str] = None, enabled: bool = True):
        self.asset_dir = asset_dir
        self.enabled = enabled
        self.available = False
        self._sounds: Dict[Cue, pygame.mixer.Sound] = {}
        self._music_loaded = False

        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
            self.available = True
        except pygame.error as exc:
            logger.warning("Audio disabled: %s", exc)
            return

        self._load()

    def _path(self, filename: str) -> Optional[str]:
        if not self.asset_dir:
            return None
        path = os.path.join(self.asset_dir, filename)
        return path if os.path.exists(path) else None

    def _load(self) -> None:
        for cue, filename in CUE_FILES.items():
            path = self._path(filename)
            if path is None:
                continue
            try:
                self._sounds[cue] = pygame.mixer.Sound(path)
            except pygame.error as exc:
                logger.debug("Could not load sound %s: %s", path, exc)

        music = self._path(MUSIC_FILE)
        if music is not None:
            try:
                pygame.mixer.music.load(music)
                self._music_loaded = True
            except pygame.error as exc:
                logger.debug("Could not load music %s: %s", music, exc)

    def __call__(self, cue: Cue) -> None:
        self.play(cue)

    def play(self, cue: Cue) -> None:
        if not (self.enabled and self.available):
            return
        sound = self._sounds.get(cue)
        if sound is not None:
            sound.play()
        if cue is Cue.GAME_OVER:
            self.stop_music()

    def start_music(self) -> None:
        if self.enabled and self._music_loaded and not pygame.mixer.music.get_busy():
            pygame.mixer.music.play(loops=-1)

    def stop_music(self) -> None:
        if self._music_loaded:
            pygame.mixer.music.pause()

    def toggle_mute(self) -> bool:
        """Flip mute state. Returns True if sound is now enabled."""
        self.enabled = not self.enabled
        if self.enabled:
            if self._music_loaded:
                pygame.mixer.music.unpause()
            self.start_music()
        else:
            self.stop_music()
        return self.enabled
