"""Simulation session management for Chain Reaction.

Wires a multi-game run together: seeds, player construction from configs,
pacing hooks, logging and progress reporting.
"""

import asyncio
import hashlib
import itertools
import random
import time
from typing import Callable

import numpy as np

from controller.game_logger import GameLogger
from controller.runner import Runner
from game.constants import DEFAULT_HEIGHT, DEFAULT_WIDTH, EXPLOSION_DELAY, GAME_DELAY, TURN_DELAY
from game.player_config import PlayerConfig
from game.players import (
    AvoidOthersPlayer,
    FixedPlayer,
    FormChainsPlayer,
    HumanPlayer,
    RandomPlayer,
)

# Keeps default seeds apart for sessions created within one clock tick
_session_counter = itertools.count()


class SimulationSession:
    """Manages one simulation run (board, players, seeds, pacing and logs)."""

    def __init__(
        self,
        width=DEFAULT_WIDTH,
        height=DEFAULT_HEIGHT,
        player_configs: list[PlayerConfig] | None = None,
        seed=None,
        turn_delay=0.0,
        explosion_delay=0.0,
        game_delay=0.0,
        transcript_dir: str | None = None,
        log_to_screen=False,
        board_to_screen=False,
        status_reporter: Callable[[str], None] | None = None,
    ):
        """Initialize a simulation session.

        Args:
            width: Board width
            height: Board height
            player_configs: One PlayerConfig per seat (default: two random players)
            seed: Session seed (auto-generated if None)
            turn_delay: Seconds to pause after every move
            explosion_delay: Seconds to pause before every explosion wave
            game_delay: Seconds to pause between games
            transcript_dir: Directory for transcript files (None to disable)
            log_to_screen: Print the transcript to stdout
            board_to_screen: Print the board to stdout after every move
            status_reporter: Callback for progress messages (default: print)
        """
        if player_configs is None:
            player_configs = [PlayerConfig.random(), PlayerConfig.random()]
        if not player_configs:
            raise ValueError("At least one player is required.")
        for delay in (turn_delay, explosion_delay, game_delay):
            if delay < 0:
                raise ValueError("Delays cannot be negative.")

        self.width = width
        self.height = height
        self.player_configs = list(player_configs)
        self.turn_delay = turn_delay
        self.explosion_delay = explosion_delay
        self.game_delay = game_delay
        self._status_reporter: Callable[[str], None] | None = status_reporter

        if seed is None:
            seed = (time.time_ns() + next(_session_counter)) % (2**32)
        self.current_seed = seed
        self._apply_seed(seed)

        self.players = [
            self._create_player_from_config(i, config)
            for i, config in enumerate(self.player_configs)
        ]
        self.runner = Runner(width, height, self.players, on_move=self._on_move)

        self.logger = GameLogger(
            session=self,
            transcript_dir=transcript_dir,
            log_to_screen=log_to_screen,
            board_to_screen=board_to_screen,
            status_reporter=self._report,
        )

        self.games_played = 0
        self.last_tally: list[int] | None = None
        self._user_callback = None

    def _apply_seed(self, seed):
        """Apply a seed to both random number generators."""
        self._report(f"-- Setting Seed: {seed}")
        np.random.seed(seed % (2**32))
        random.seed(seed)

    def _derive_seed(self, salt):
        """Derive a 32-bit seed deterministically from the session seed."""
        hash_obj = hashlib.sha256(f"{self.current_seed}:{salt}".encode())
        return int.from_bytes(hash_obj.digest()[:8], byteorder="big") % (2**32)

    def _create_player_from_config(self, player_num: int, config: PlayerConfig):
        """Create a player from a PlayerConfig.

        Players without an explicit seed get one derived from the session seed so
        that a seeded session is reproducible end to end.
        """
        seed = config.rng_seed if config.rng_seed is not None else self._derive_seed(player_num)

        if config.player_type == "random":
            player = RandomPlayer(player_num, rng_seed=seed)
        elif config.player_type == "avoid_others":
            player = AvoidOthersPlayer(player_num, rng_seed=seed)
        elif config.player_type == "form_chains":
            player = FormChainsPlayer(player_num, rng_seed=seed)
        elif config.player_type == "human":
            player = HumanPlayer(player_num)
            # One canvas pixel per cell: clicks and coordinates coincide
            player.set_board_geometry(self.width, self.height, self.width, self.height)
        elif config.player_type == "fixed":
            player = FixedPlayer(player_num, config.fixed_x, config.fixed_y)
        else:
            raise ValueError(f"Unknown player type: {config.player_type}")

        if config.name is not None:
            player.name = config.name

        return player

    def player_names(self):
        return [player.name for player in self.players]

    def human_players(self):
        return [player for player in self.players if isinstance(player, HumanPlayer)]

    def get_seed(self):
        return self.current_seed

    @property
    def game(self):
        return self.runner.game

    def _install_pacing(self):
        """Subscribe sleep handlers for the configured delays.

        The runner drops pacing hooks at the end of every run, so they are
        installed again for each run.
        """
        for event, delay in (
            (TURN_DELAY, self.turn_delay),
            (EXPLOSION_DELAY, self.explosion_delay),
            (GAME_DELAY, self.game_delay),
        ):
            if delay > 0:
                self.runner.hooks.add(event, lambda d=delay: asyncio.sleep(d))

    def _on_move(self, player, x, y, result):
        self.logger.log_move(player, x, y, result, self.runner.game)

    def _on_game_finished(self, winner, game_id, tally):
        self.games_played += 1
        self.last_tally = tally
        self.logger.log_game_end(game_id, winner, tally)
        if self._user_callback is not None:
            self._user_callback(winner, game_id, tally)

    async def run(self, games, on_game_finished=None):
        """Play ``games`` games and return the tally of wins per player.

        If the run is cancelled, the tally of the finished games is returned.
        """
        self._user_callback = on_game_finished
        self.last_tally = [0] * len(self.players)
        self._install_pacing()
        self.logger.start_log()
        self._report(f"** Running {games} game(s) on a {self.width}x{self.height} board **")

        handle = self.runner.run(games, self._on_game_finished)
        tally = None
        try:
            tally = await handle
            if handle.cancelled:
                self.logger.log_comment(f"Run cancelled after {sum(tally)} game(s)")
        finally:
            self.logger.end_log(tally)
            self._user_callback = None

        self.last_tally = tally
        if handle.cancelled:
            self._report(f"Run cancelled after {sum(tally)} game(s)")
        return tally

    def run_sync(self, games, on_game_finished=None):
        """Blocking wrapper around ``run`` for scripts."""
        return asyncio.run(self.run(games, on_game_finished))

    def cancel(self):
        self.runner.cancel()

    def set_status_reporter(self, reporter: Callable[[str], None] | None) -> None:
        self._status_reporter = reporter

    def _report(self, message: str | None) -> None:
        if message is None:
            return
        if self._status_reporter is not None:
            self._status_reporter(message)
        else:
            print(message)
