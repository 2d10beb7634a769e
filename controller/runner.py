"""Multi-game runner.

Drives a ``ChainReactionGame`` with an ordered list of strategies through any
number of complete games, tallying wins. Every wait (strategy move, pacing
hooks, board updates) races the run's cancellation signal, so a run can be
stopped from outside at any time and still report the games it finished.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Callable, Sequence

from game.chain_reaction_game import ChainReactionGame
from game.constants import DELAY_EVENTS, GAME_DELAY, RUNNER_EVENTS, TURN_DELAY
from game.errors import RunnerBusyError
from game.game_context import GameContext
from game.placement_result import PlacementResult
from shared.cancellation import CancellableResult, CancelSignal, race
from shared.hooks import extend_hooks
from shared.interfaces import Playable

logger = logging.getLogger(__name__)

GameFinishedFn = Callable[[int, int, list[int]], None]
MoveFn = Callable[[int, int, int, PlacementResult], None]


class Runner:
    """Plays complete games between ``players`` on a ``width`` x ``height`` board."""

    def __init__(
        self,
        width: int,
        height: int,
        players: Sequence[Playable],
        on_move: MoveFn | None = None,
    ) -> None:
        if not players:
            raise ValueError("At least one player is required.")

        self.players = list(players)
        self.game = ChainReactionGame(width, height, len(self.players))
        self.on_move = on_move

        # Gets passed to players so they can decide what their move will be
        self._contexts = [GameContext(self.game, p) for p in range(len(self.players))]

        self.hooks = extend_hooks(self.game.hooks, *RUNNER_EVENTS)
        self._signal = CancelSignal()
        self._handle: CancellableResult[list[int]] | None = None

    @property
    def is_running(self) -> bool:
        return self._handle is not None and not self._handle.done()

    def context(self, player: int) -> GameContext:
        return self._contexts[player]

    def run(
        self,
        times: int,
        on_game_finished: GameFinishedFn | None = None,
    ) -> CancellableResult[list[int]]:
        """Play ``times`` games in the background.

        Must be called while an event loop is running. The returned handle
        resolves to the tally of wins per player; if the run is cancelled it
        resolves to the tally of the games completed so far.
        """
        if self.is_running:
            raise RunnerBusyError()
        if times < 0:
            raise ValueError("Number of games cannot be negative.")

        self._signal = CancelSignal()
        self.game.arm(self._signal)

        task = asyncio.ensure_future(self._run(times, on_game_finished, self._signal))
        handle: CancellableResult[list[int]] = CancellableResult(task, self._signal)
        handle.add_done_callback(self._on_run_finished)
        self._handle = handle
        return handle

    def cancel(self) -> None:
        """Stop the current run. Safe to call repeatedly or when idle."""
        self._signal.cancel()
        self.hooks.clear_many(DELAY_EVENTS)

    def _on_run_finished(self, handle: CancellableResult[list[int]]) -> None:
        if handle is not self._handle:
            return
        self.game.arm()
        self.hooks.clear_many(DELAY_EVENTS)

    async def _play_turn(self, signal: CancelSignal) -> None:
        player_index = self.game.current_player
        context = self._contexts[player_index]

        if not self.game.player_is_alive(player_index) or not context.available_cells():
            # Skip the player's turn if they can't make any legal moves
            logger.debug("Skipping player %d", player_index)
            self.game.next_player()
            return

        player = self.players[player_index]
        move = player.play(context)
        if inspect.isawaitable(move):
            finished, move = await race(move, signal)
            if not finished:
                return

        x, y = move
        result = await self.game.place(x, y)
        if result.aborted:
            return

        if self.on_move is not None:
            self.on_move(player_index, x, y, result)

        await self.hooks.run(TURN_DELAY, signal)

    async def _run(
        self,
        times: int,
        on_game_finished: GameFinishedFn | None,
        signal: CancelSignal,
    ) -> list[int]:
        tally = [0] * len(self.players)

        for game_id in range(1, times + 1):
            for player in self.players:
                player.on_game_start()

            while self.game.is_active():
                if signal.cancelled:
                    await self.game.reset()
                    return tally
                await self._play_turn(signal)

            if signal.cancelled:
                await self.game.reset()
                return tally

            winner = self.game.winner()
            tally[winner] += 1
            logger.debug("Game %d won by player %d after %d turns", game_id, winner, self.game.turn)
            if on_game_finished is not None:
                on_game_finished(winner, game_id, list(tally))

            await self.hooks.run(GAME_DELAY, signal)
            await self.game.reset()

        return tally
