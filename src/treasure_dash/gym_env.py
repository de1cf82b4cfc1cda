"""Gymnasium environment wrapper for Treasure Dash.

Runs a full session (lives, timer, levels) headlessly, one tick per step.
Observations include a structured state vector and, when a render mode
asks for it, an RGB frame.
"""

import numpy as np
import gymnasium
from gymnasium import spaces
from typing import Optional, Dict, Tuple

import pygame

from .config import GameConfig
from .driver import GameDriver, InputState, StepResult
from .events import EventKind
from .progression import GamePhase, TERMINAL_PHASES
from .render import Renderer


STATE_SIZE = 12


class TreasureDashEnv(gymnasium.Env):
    """Gymnasium wrapper around GameDriver.

    Observation space (Dict):
        'rgb': uint8 array of shape (H, W, 3) - rendered frame (zeros unless
               render_mode is 'rgb_array' or 'human')
        'state': float32 array of shape (12,):
            [0-1] player position (x, y)
            [2-3] player velocity (vx, vy)
            [4]   on ground (0/1)
            [5]   score
            [6]   lives
            [7]   level
            [8]   timer (seconds, >= 0)
            [9]   double-score active (0/1)
            [10]  invincible (0/1)
            [11]  treasures remaining

    Action space: MultiBinary(3) = (left, right, up).

    Reward = weighted sum of raw signals (stored in info['reward_signals']):
        treasure: points awarded this step
        level:    1.0 when a level is completed
        life:     1.0 when a life is lost
        step:     1.0 every step
    """

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        obs_resolution: Tuple[int, int] = (144, 256),
        max_episode_steps: int = 20000,
        reward_weights: Optional[Dict[str, float]] = None,
    ):
        super().__init__()

        self.config = config or GameConfig()
        self.render_mode = render_mode
        self.obs_height, self.obs_width = obs_resolution
        self.max_episode_steps = max_episode_steps

        self.reward_weights = reward_weights or {
            "treasure": 1.0,
            "level": 50.0,
            "life": -50.0,
            "step": -0.01,
        }

        self.action_space = spaces.MultiBinary(3)
        self.observation_space = spaces.Dict({
            "rgb": spaces.Box(
                low=0, high=255,
                shape=(self.obs_height, self.obs_width, 3),
                dtype=np.uint8,
            ),
            "state": spaces.Box(
                low=-np.inf, high=np.inf,
                shape=(STATE_SIZE,),
                dtype=np.float32,
            ),
        })

        self.driver = GameDriver(self.config)
        self._episode_steps = 0

        # Rendering is only set up when asked for (caller sets SDL_VIDEODRIVER for headless)
        self._renderer: Optional[Renderer] = None
        self._surface = None
        self._display = None
        if render_mode in ("rgb_array", "human"):
            if not pygame.get_init():
                pygame.init()
            size = (int(self.config.world.width), int(self.config.world.height))
            self._surface = pygame.Surface(size)
            self._renderer = Renderer(self.config.asset_dir)
            if render_mode == "human":
                self._display = pygame.display.set_mode(size)
                pygame.display.set_caption("TreasureDashEnv")

    def reset(self, *, seed=None, options=None):
        super().reset(seed=seed)

        level = 1
        if options and "level" in options:
            level = int(options["level"])

        self.driver.reset_session()
        self.driver.start_level(level)
        self._episode_steps = 0

        return self._get_obs(), self._get_info()

    def step(self, action):
        assert self.driver.state.running, "Must call reset() before step()"

        action = np.asarray(action).astype(bool).reshape(-1)
        input_state = InputState(left=bool(action[0]), right=bool(action[1]), up=bool(action[2]))

        result = self.driver.step(1.0, input_state)
        self._episode_steps += 1

        reward_signals = self._compute_rewards(result)
        reward = sum(
            self.reward_weights.get(k, 0.0) * v
            for k, v in reward_signals.items()
        )

        terminated = self.driver.state.phase in TERMINAL_PHASES
        truncated = self._episode_steps >= self.max_episode_steps

        obs = self._get_obs()
        info = self._get_info()
        info["reward_signals"] = reward_signals

        if self.render_mode == "human":
            self.render()

        return obs, float(reward), terminated, truncated, info

    # ------------------------------------------------------------------
    # Rewards and observations
    # ------------------------------------------------------------------

    def _compute_rewards(self, result: StepResult):
        return {
            "treasure": float(sum(e.value for e in result.events if e.kind is EventKind.COLLECTED)),
            "level": float(result.transitions.count(GamePhase.LEVEL_COMPLETE)),
            "life": float(result.transitions.count(GamePhase.LIFE_LOST)),
            "step": 1.0,
        }

    def _get_obs(self):
        if self.render_mode in ("rgb_array", "human"):
            rgb = self._render_frame()
        else:
            rgb = np.zeros((self.obs_height, self.obs_width, 3), dtype=np.uint8)
        return {"rgb": rgb, "state": self._get_state_vector()}

    def _get_state_vector(self):
        state_vec = np.zeros(STATE_SIZE, dtype=np.float32)
        state = self.driver.state

        if state.player:
            p = state.player
            state_vec[0] = p.x
            state_vec[1] = p.y
            state_vec[2] = p.vx
            state_vec[3] = p.vy
            state_vec[4] = float(p.on_ground)

        state_vec[5] = float(state.score)
        state_vec[6] = float(state.lives)
        state_vec[7] = float(state.level)
        state_vec[8] = state.display_timer
        state_vec[9] = float(state.active_power.double_active(state.clock))
        state_vec[10] = float(state.active_power.inv_active(state.clock))
        state_vec[11] = float(sum(1 for t in state.treasures if not t.collected))
        return state_vec

    def _render_frame(self):
        """Render current state to numpy array (H, W, 3) uint8."""
        self._renderer.draw(self._surface, self.driver.snapshot(), hud=False)
        scaled = pygame.transform.scale(self._surface, (self.obs_width, self.obs_height))
        # surfarray gives (W, H, 3); transpose to (H, W, 3)
        array = pygame.surfarray.array3d(scaled)
        return np.transpose(array, (1, 0, 2)).astype(np.uint8)

    def render(self):
        if self.render_mode == "rgb_array":
            return self._render_frame()
        elif self.render_mode == "human" and self._display:
            self._renderer.draw(self._surface, self.driver.snapshot(), hud=True)
            self._display.blit(self._surface, (0, 0))
            pygame.display.flip()

    def _get_info(self):
        state = self.driver.state
        info = {
            "score": state.score,
            "lives": state.lives,
            "level": state.level,
            "timer": state.display_timer,
            "phase": state.phase.value,
            "episode_steps": self._episode_steps,
        }
        if state.final_score is not None:
            info["final_score"] = state.final_score
        return info

    def close(self):
        if self._display:
            pygame.display.quit()
            self._display = None
