"""Pygame rendering of a RenderState.

Draws images from the asset directory when they load, and flat coloured
rectangles when they don't, so the game looks plain but plays the same
without any art files.
"""

import logging
import os
from typing import Dict, Optional, Tuple

import pygame

from .driver import RenderState
from .entities import PowerType
from .progression import GamePhase


logger = logging.getLogger(__name__)

# Colors (RGB)
COLOR_BG = (40, 44, 52)
COLOR_PLAYER = (59, 130, 246)
COLOR_PLAYER_INV = (190, 220, 255)
COLOR_PLATFORM = (107, 79, 46)
COLOR_ENEMY = (224, 108, 117)
COLOR_TREASURE = (255, 215, 0)
COLOR_HUD = (255, 255, 255)
COLOR_BANNER = (229, 192, 123)
COLOR_POWER = {
    PowerType.TIME: (97, 175, 239),
    PowerType.DOUBLE: (198, 120, 221),
    PowerType.INV: (152, 195, 121),
}

IMAGE_FILES = {
    "player": "player.png",
    "enemy": "enemy.png",
    "treasure": "treasure.png",
    "platform": "platform.png",
    "bg1": "bg1.png",
    "bg2": "bg2.png",
    "power_time": "power_time.png",
    "power_double": "power_double.png",
    "power_inv": "power_inv.png",
}


def load_images(asset_dir: Optional[str]) -> Dict[str, Optional[pygame.Surface]]:
    """Load every known image; missing or unreadable files map to None."""
    images: Dict[str, Optional[pygame.Surface]] = {}
    for key, filename in IMAGE_FILES.items():
        images[key] = None
        if not asset_dir:
            continue
        path = os.path.join(asset_dir, filename)
        if not os.path.exists(path):
            continue
        try:
            images[key] = pygame.image.load(path)
        except pygame.error as exc:
            logger.debug("Could not load %s: %s", path, exc)
    loaded = sum(1 for img in images.values() if img is not None)
    logger.debug("Loaded %d/%d images from %s", loaded, len(IMAGE_FILES), asset_dir)
    return images


class Renderer:
    """Draws snapshots onto a pygame surface."""

    def __init__(self, asset_dir: Optional[str] = None):
        if not pygame.font.get_init():
            pygame.font.init()
        self.images = load_images(asset_dir)
        self._font = pygame.font.Font(None, 32)
        self._big_font = pygame.font.Font(None, 64)
        self._scaled: Dict[Tuple[str, int, int], pygame.Surface] = {}

    def _image(self, key: str, w: float, h: float) -> Optional[pygame.Surface]:
        img = self.images.get(key)
        if img is None:
            return None
        size = (max(1, int(w)), max(1, int(h)))
        cache_key = (key, size[0], size[1])
        if cache_key not in self._scaled:
            self._scaled[cache_key] = pygame.transform.scale(img, size)
        return self._scaled[cache_key]

    def _draw_box(self, surface, key: str, rect, color) -> None:
        x, y, w, h = rect
        img = self._image(key, w, h)
        if img is not None:
            surface.blit(img, (int(x), int(y)))
        else:
            pygame.draw.rect(surface, color, (int(x), int(y), int(w), int(h)))

    def draw(self, surface: pygame.Surface, snap: RenderState, hud: bool = True) -> None:
        """Draw the world (and optionally HUD and banners)."""
        self._draw_background(surface, snap.level)

        for rect in snap.platforms:
            self._draw_box(surface, "platform", rect, COLOR_PLATFORM)

        for rect, collected in snap.treasures:
            if not collected:
                self._draw_box(surface, "treasure", rect, COLOR_TREASURE)

        for rect, kind, picked in snap.powerups:
            if not picked:
                self._draw_box(surface, f"power_{kind.value}", rect, COLOR_POWER[kind])

        for rect in snap.enemies:
            self._draw_box(surface, "enemy", rect, COLOR_ENEMY)

        if snap.player:
            color = COLOR_PLAYER_INV if snap.inv else COLOR_PLAYER
            self._draw_box(surface, "player", snap.player, color)

        if hud:
            self.draw_hud(surface, snap)
            self.draw_banner(surface, snap)

    def _draw_background(self, surface, level: int) -> None:
        key = "bg2" if level % 2 == 0 else "bg1"
        w, h = surface.get_size()
        img = self._image(key, w, h)
        if img is not None:
            surface.blit(img, (0, 0))
        else:
            surface.fill(COLOR_BG)

    def draw_hud(self, surface, snap: RenderState) -> None:
        """Score, lives, timer and level along the top edge."""
        parts = [
            f"Score: {snap.score}",
            f"Lives: {snap.lives}",
            f"Time: {int(snap.timer)}",
            f"Level: {snap.level}",
        ]
        if snap.double:
            parts.append("x2")
        if snap.inv:
            parts.append("INV")
        text = self._font.render("   ".join(parts), True, COLOR_HUD)
        surface.blit(text, (12, 10))

    def draw_banner(self, surface, snap: RenderState) -> None:
        """Centered message for non-playing phases."""
        if snap.phase is GamePhase.PAUSED:
            lines = ["PAUSED", "Press P to resume"]
        elif snap.phase is GamePhase.GAME_OVER:
            lines = [f"GAME OVER  Score: {snap.final_score}", "Press Enter"]
        elif snap.phase is GamePhase.WON:
            lines = [f"YOU WON!  Final score: {snap.final_score}", "Press Enter"]
        elif snap.phase is GamePhase.MENU:
            lines = ["TREASURE DASH", "Enter: start   M: mute   Esc: quit"]
        else:
            return

        cx = surface.get_width() // 2
        cy = surface.get_height() // 2
        title = self._big_font.render(lines[0], True, COLOR_BANNER)
        surface.blit(title, title.get_rect(center=(cx, cy - 30)))
        sub = self._font.render(lines[1], True, COLOR_HUD)
        surface.blit(sub, sub.get_rect(center=(cx, cy + 20)))
