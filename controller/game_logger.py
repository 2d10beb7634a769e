"""Game logging for Chain Reaction.

Handles logging moves and game results of a simulation run using pluggable
writers.
"""

import os
import sys
from typing import Callable, Sequence

from game.placement_result import PlacementResult
from game.writers import BoardWriter, GameWriter, TranscriptWriter


class GameLogger:
    """Manages multiple writers for flexible logging.

    Supports several output formats and destinations at once (e.g. a
    transcript file plus board diagrams on screen). Owns writer lifecycle
    management including file creation and error handling.
    """

    def __init__(
        self,
        session,
        transcript_dir: str | None = None,
        log_to_screen: bool = False,
        board_to_screen: bool = False,
        status_reporter: Callable[[str], None] | None = None,
    ):
        """Initialize the game logger.

        Args:
            session: SimulationSession providing seed, board size and player names
            transcript_dir: Directory for the transcript file (None to disable)
            log_to_screen: Whether to write the transcript to stdout
            board_to_screen: Whether to draw the board on stdout after each move
            status_reporter: Optional callback for status messages
        """
        self.session = session
        self._transcript_dir = transcript_dir
        self._log_to_screen = log_to_screen
        self._board_to_screen = board_to_screen
        self._status_reporter = status_reporter
        self._run_active = False

        self._log_filenames: list[str] = []

        self.writers: list[GameWriter] = []
        self._persistent_writers: list[GameWriter] = []
        self._create_screen_writers()

    def _create_file_writer(self, directory, filename, writer_class, log_type):
        """Create a file writer, reporting failures to stderr.

        Returns:
            Writer instance on success, None on failure
        """
        try:
            os.makedirs(directory, exist_ok=True)
            filepath = os.path.join(directory, filename)
            writer = writer_class(open(filepath, "w"))
            self._log_filenames.append(filepath)
            return writer
        except OSError as e:
            print(f"Error: Cannot create {log_type} log file: {e}", file=sys.stderr)
            print(f"Attempted path: {directory}", file=sys.stderr)
            print(f"{log_type.capitalize()} logging to file disabled for this run", file=sys.stderr)
            return None

    def _create_screen_writers(self):
        if self._log_to_screen:
            writer = TranscriptWriter(sys.stdout)
            self.add_writer(writer, persistent=True)

        if self._board_to_screen:
            writer = BoardWriter(sys.stdout)
            self.add_writer(writer, persistent=True)

    def _create_file_writers(self):
        if self._transcript_dir:
            filename = f"chainlog_{self.session.get_seed()}.txt"
            writer = self._create_file_writer(
                self._transcript_dir, filename, TranscriptWriter, "transcript"
            )
            if writer:
                self.add_writer(writer)
                self._report(f"Logging to: {writer.output.name}")

    def _close_run_writers(self):
        kept = []
        for writer in self.writers:
            if writer in self._persistent_writers:
                kept.append(writer)
            else:
                writer.close()
        self.writers = kept

    def get_log_filenames(self):
        """Get list of log filenames created."""
        return self._log_filenames.copy()

    def add_writer(self, writer: GameWriter, persistent: bool = False) -> None:
        """Attach a writer.

        Persistent writers survive end_log; the others are closed when the run
        they were added to ends.
        """
        self.writers.append(writer)
        if persistent:
            self._persistent_writers.append(writer)

    def start_log(self) -> None:
        """Open file writers for a new run and write headers to every writer.

        Calling it again while a run is logged closes the previous run's files.
        """
        if self._run_active:
            self._close_run_writers()

        self._create_file_writers()

        for writer in self.writers:
            writer.write_header(
                self.session.get_seed(),
                self.session.width,
                self.session.height,
                self.session.player_names(),
            )

        self._run_active = True

    def end_log(self, tally: Sequence[int] | None = None) -> None:
        """Write footers and close file writers. Screen writers persist."""
        for writer in self.writers:
            writer.write_footer(tally)
        self._close_run_writers()
        self._run_active = False

    def log_move(self, player: int, x: int, y: int, result: PlacementResult, game=None) -> None:
        for writer in self.writers:
            writer.write_move(player, x, y, result, game)

    def log_game_end(self, game_id: int, winner: int, tally: Sequence[int]) -> None:
        for writer in self.writers:
            writer.write_game_end(game_id, winner, tally)

    def log_comment(self, message: str) -> None:
        for writer in self.writers:
            writer.write_comment(message)

    def set_status_reporter(self, reporter: Callable[[str], None] | None) -> None:
        self._status_reporter = reporter

    def _report(self, message: str | None) -> None:
        if message is None:
            return
        if self._status_reporter is not None:
            self._status_reporter(message)
        else:
            print(message)
