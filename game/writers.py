"""Game writers for Chain Reaction.

Provides pluggable writer classes that log simulation runs to output streams
(files, stdout) in different formats.
"""

import sys
from abc import ABC, abstractmethod
from typing import Sequence, TextIO

from game.placement_result import PlacementResult


class GameWriter(ABC):
    """Abstract base class for game writers.

    A GameWriter formats run events onto an output stream. Subclasses decide
    what to write for each event; the base class handles flushing and closing.
    """

    def __init__(self, output: TextIO):
        """Initialize the writer.

        Args:
            output: Output stream to write to (file, stdout, etc.)
        """
        self.output = output
        self._run_started = False

    @abstractmethod
    def write_header(self, seed: int | None, width: int, height: int, player_names: Sequence[str]) -> None:
        """Write run metadata.

        Args:
            seed: Session seed (None when unseeded)
            width: Board width
            height: Board height
            player_names: Display name of each player slot
        """
        pass

    @abstractmethod
    def write_move(self, player: int, x: int, y: int, result: PlacementResult, game=None) -> None:
        """Write a single placement.

        Args:
            player: Player index (0-based)
            x: Column played
            y: Row played
            result: PlacementResult returned by the engine
            game: Optional ChainReactionGame for board snapshots
        """
        pass

    def write_game_end(self, game_id: int, winner: int, tally: Sequence[int]) -> None:
        """Write the outcome of one game. Default implementation does nothing."""
        pass

    def write_comment(self, message: str) -> None:
        """Write a status/comment message. Default implementation does nothing."""
        pass

    def write_footer(self, tally: Sequence[int] | None = None) -> None:
        """Write the final tally of the run (optional)."""
        pass

    def flush(self) -> None:
        self.output.flush()

    def close(self) -> None:
        """Close the output stream (but never close stdout/stderr)."""
        if self.output in (sys.stdout, sys.stderr):
            return
        if hasattr(self.output, "close"):
            self.output.close()


class TranscriptWriter(GameWriter):
    """Writes runs in transcript format.

    File format:
        # Seed: 12345              # Header comments
        # Board: 6x6
        # Player 1: Random 0
        # Player 2: Avoid others 1
        #
        # Game 1
        Player 1: (2, 3)           # One line per move, 1-based player numbers
        Player 2: (0, 0) exploded waves=2 captured={1: 3}
        # Game 1 winner: Player 2
        #
        # Final tally: [0, 1]      # Footer
    """

    def __init__(self, output: TextIO):
        super().__init__(output)
        self._game_number = 1
        self._game_started = False

    def write_header(self, seed, width, height, player_names):
        self.output.write(f"# Seed: {seed}\n")
        self.output.write(f"# Board: {width}x{height}\n")
        for i, name in enumerate(player_names, start=1):
            self.output.write(f"# Player {i}: {name}\n")
        self.output.write("#\n")
        self._run_started = True
        self.flush()

    def write_move(self, player, x, y, result, game=None):
        if not self._game_started:
            self.output.write(f"# Game {self._game_number}\n")
            self._game_started = True

        line = f"Player {player + 1}: ({x}, {y})"
        if result.exploded:
            line += f" exploded waves={result.waves}"
            if result.has_captures():
                captured = {victim + 1: units for victim, units in sorted(result.captured.items())}
                line += f" captured={captured}"
        self.output.write(line + "\n")
        self.flush()

    def write_game_end(self, game_id, winner, tally):
        self.output.write(f"# Game {game_id} winner: Player {winner + 1}\n")
        self._game_number = game_id + 1
        self._game_started = False
        self.flush()

    def write_comment(self, message):
        self.output.write(f"# {message}\n")
        self.flush()

    def write_footer(self, tally=None):
        self.output.write("#\n")
        if tally is not None:
            self.output.write(f"# Final tally: {list(tally)}\n")
        self.flush()


class BoardWriter(GameWriter):
    """Writes a board diagram after every move.

    Empty cells are drawn as ``o``, owned cells as ``<count><player letter>``:

        Player 1 plays (1, 0)
        o  1a o
        o  o  o
        o  o  2b
    """

    PLAYER_LETTERS = "abcdefghijklmnopqrstuvwxyz"

    def write_header(self, seed, width, height, player_names):
        legend = ", ".join(
            f"{self.PLAYER_LETTERS[i % 26]}={name}" for i, name in enumerate(player_names)
        )
        self.output.write(f"Board {width}x{height} ({legend})\n")
        self._run_started = True
        self.flush()

    def format_board(self, game) -> str:
        rows = []
        for y in range(game.height):
            cells = []
            for x in range(game.width):
                cell = game.cell(game.to_pos(x, y))
                if cell.is_empty:
                    cells.append("o ")
                else:
                    cells.append(f"{cell.count}{self.PLAYER_LETTERS[cell.owner % 26]}")
            rows.append(" ".join(cells).rstrip())
        return "\n".join(rows)

    def write_move(self, player, x, y, result, game=None):
        line = f"Player {player + 1} plays ({x}, {y})"
        if result.exploded:
            line += f", {result.waves} wave(s)"
        if result.has_captures():
            line += f", captured {result.total_captured()}"
        self.output.write(line + "\n")
        if game is not None:
            self.output.write(self.format_board(game) + "\n")
        self.output.write("\n")
        self.flush()

    def write_game_end(self, game_id, winner, tally):
        self.output.write(f"Game {game_id}: Player {winner + 1} wins, tally {list(tally)}\n\n")
        self.flush()
