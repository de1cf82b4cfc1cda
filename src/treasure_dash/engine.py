"""Interactive pygame front end.

Wires the keyboard, the frame clock, the renderer and audio around a
GameDriver. All game rules live in the driver; this module only turns
key presses into InputState and session-control calls.
"""

import argparse
import logging
from typing import Optional, List

import pygame

from .config import GameConfig, CONFIGS
from .driver import GameDriver, InputState
from .progression import GamePhase, TERMINAL_PHASES
from .render import Renderer
from .audio import PygameAudio


logger = logging.getLogger(__name__)


class TreasureDashGame:
    """Main window and game loop.

    Keys:
    - Left/Right or A/D: run
    - Up, W or Space: jump
    - P: pause/resume
    - M: mute/unmute
    - Enter: start from the menu, dismiss game over / win
    - Esc: quit
    """

    def __init__(self, config: Optional[GameConfig] = None, sound: bool = True):
        """Initialize window, driver and collaborators.

        Args:
            config: Game configuration. Uses defaults if None.
            sound: Start with audio enabled.
        """
        self.config = config or GameConfig()

        pygame.init()
        self.screen = pygame.display.set_mode(
            (int(self.config.world.width), int(self.config.world.height))
        )
        pygame.display.set_caption("Treasure Dash")
        self.clock = pygame.time.Clock()

        self.driver = GameDriver(self.config)
        self.renderer = Renderer(self.config.asset_dir)
        self.audio = PygameAudio(self.config.asset_dir, enabled=sound)
        self.driver.add_listener(self.audio)

        self.running = False
        self.start_level = 1

    def read_input(self) -> InputState:
        """Sample the currently held keys."""
        keys = pygame.key.get_pressed()
        return InputState(
            left=bool(keys[pygame.K_LEFT] or keys[pygame.K_a]),
            right=bool(keys[pygame.K_RIGHT] or keys[pygame.K_d]),
            up=bool(keys[pygame.K_UP] or keys[pygame.K_w] or keys[pygame.K_SPACE]),
        )

    def handle_key(self, key: int) -> None:
        """Session-control keys."""
        phase = self.driver.state.phase
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key == pygame.K_p:
            self.driver.toggle_pause()
        elif key == pygame.K_m:
            self.audio.toggle_mute()
        elif key == pygame.K_RETURN:
            if phase in TERMINAL_PHASES:
                self.driver.acknowledge()
            elif phase is GamePhase.MENU:
                self.driver.reset_session()
                self.driver.start_level(self.start_level)
                self.audio.start_music()

    def handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self.handle_key(event.key)

    def render(self) -> None:
        self.renderer.draw(self.screen, self.driver.snapshot())
        pygame.display.flip()

    def run(self) -> None:
        """Main game loop."""
        self.running = True
        while self.running:
            self.handle_events()
            self.driver.frame(pygame.time.get_ticks(), self.read_input())
            self.render()
            self.clock.tick(self.config.fps)
        pygame.quit()


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Play Treasure Dash.")
    parser.add_argument("--preset", choices=sorted(CONFIGS), default="default",
                        help="Named configuration preset")
    parser.add_argument("--level", type=int, default=1, help="Level to start on")
    parser.add_argument("--assets", default=None,
                        help="Directory with images and sounds (optional)")
    parser.add_argument("--mute", action="store_true", help="Start with audio off")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = GameConfig.from_dict(CONFIGS[args.preset].to_dict())
    if args.assets:
        config.asset_dir = args.assets

    game = TreasureDashGame(config, sound=not args.mute)
    game.start_level = args.level
    logger.info("Starting Treasure Dash (preset=%s)", args.preset)
    game.run()
