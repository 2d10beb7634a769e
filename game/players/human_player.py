from __future__ import annotations

import asyncio
import logging
import math

from game.game_context import GameContext
from game.players.chain_reaction_player import ChainReactionPlayer

logger = logging.getLogger(__name__)


class HumanPlayer(ChainReactionPlayer):
    """Bridges external input (clicks or typed coordinates) into moves.

    The board geometry has to be supplied with ``set_board_geometry`` before
    the first move so that canvas clicks can be mapped to cells. Moves that are
    not legal when they are taken off the queue are dropped and the player
    keeps waiting.
    """

    def __init__(self, n):
        super().__init__(n)
        self.name = f"Human {n}"
        self._input_queue: asyncio.Queue = asyncio.Queue()
        self._canvas_size: tuple[float, float] | None = None
        self._board_size: tuple[int, int] | None = None

    def set_board_geometry(self, canvas_width, canvas_height, board_width, board_height):
        if canvas_width <= 0 or canvas_height <= 0:
            raise ValueError("Canvas size must be positive.")
        if board_width <= 0 or board_height <= 0:
            raise ValueError("Board size must be positive.")
        self._canvas_size = (float(canvas_width), float(canvas_height))
        self._board_size = (int(board_width), int(board_height))

    def click_to_cell(self, px, py) -> tuple[int, int]:
        """Map a canvas pixel to board coordinates."""
        if self._canvas_size is None or self._board_size is None:
            raise RuntimeError("No board geometry supplied.")
        canvas_w, canvas_h = self._canvas_size
        board_w, board_h = self._board_size
        return math.floor(px / canvas_w * board_w), math.floor(py / canvas_h * board_h)

    def submit(self, x, y) -> None:
        self._input_queue.put_nowait((x, y))

    def submit_click(self, px, py) -> None:
        self.submit(*self.click_to_cell(px, py))

    def cancel_pending_input(self) -> None:
        while True:
            try:
                self._input_queue.get_nowait()
            except asyncio.QueueEmpty:
                break

    def pending_input_empty(self) -> bool:
        return self._input_queue.empty()

    def on_game_start(self) -> None:
        # Clicks queued during the previous game must not leak into this one
        if not self.pending_input_empty():
            logger.debug("%s dropped input left over from the last game", self.name)
            self.cancel_pending_input()

    async def play(self, context: GameContext):
        if self._canvas_size is None or self._board_size is None:
            raise RuntimeError("No board geometry supplied.")

        while True:
            x, y = await self._input_queue.get()
            if context.can_place(x, y):
                return x, y
            logger.debug("%s ignored illegal input (%s, %s)", self.name, x, y)
