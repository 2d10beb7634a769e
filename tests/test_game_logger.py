"""
Unit tests for GameLogger and the game writers.

Tests the pluggable writer system for logging simulation runs in different
formats.
"""

import pytest
import sys
import tempfile
import os
from pathlib import Path
from io import StringIO
from unittest.mock import Mock

# Add parent directory to path to import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from controller.game_logger import GameLogger
from game.chain_reaction_game import ChainReactionGame
from game.placement_result import PlacementResult
from game.writers import BoardWriter, TranscriptWriter


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def mock_session():
    """Create a mock session for testing."""
    session = Mock()
    session.get_seed.return_value = 12345
    session.width = 3
    session.height = 3
    session.player_names.return_value = ["Random 0", "Avoid others 1"]
    return session


@pytest.fixture
def quiet():
    return lambda message: None


# ============================================================================
# PlacementResult Tests
# ============================================================================


class TestPlacementResult:
    """Test the placement result value object."""

    def test_defaults(self):
        result = PlacementResult(4, 1)
        assert not result.exploded
        assert result.waves == 0
        assert result.captured == {}
        assert not result.aborted
        assert not result.has_captures()
        assert result.total_captured() == 0

    def test_captures(self):
        result = PlacementResult(0, 0, exploded=True, waves=2, captured={1: 2, 2: 1})
        assert result.has_captures()
        assert result.total_captured() == 3
        assert "waves=2" in repr(result)

    def test_captured_dicts_are_not_shared(self):
        first = PlacementResult(0, 0)
        first.captured[1] = 1
        assert PlacementResult(0, 0).captured == {}


# ============================================================================
# TranscriptWriter Tests
# ============================================================================


class TestTranscriptWriter:
    """Test the transcript format."""

    def test_header(self):
        output = StringIO()
        TranscriptWriter(output).write_header(7, 4, 3, ["Random 0", "Form chains 1"])
        assert output.getvalue() == (
            "# Seed: 7\n"
            "# Board: 4x3\n"
            "# Player 1: Random 0\n"
            "# Player 2: Form chains 1\n"
            "#\n"
        )

    def test_moves_and_games(self):
        output = StringIO()
        writer = TranscriptWriter(output)
        writer.write_move(0, 2, 1, PlacementResult(5, 0))
        writer.write_move(1, 0, 0, PlacementResult(0, 1, exploded=True, waves=2, captured={0: 3}))
        writer.write_game_end(1, 1, [0, 1])
        writer.write_move(0, 1, 1, PlacementResult(4, 0))
        writer.write_footer([0, 1])

        assert output.getvalue().splitlines() == [
            "# Game 1",
            "Player 1: (2, 1)",
            "Player 2: (0, 0) exploded waves=2 captured={1: 3}",
            "# Game 1 winner: Player 2",
            "# Game 2",
            "Player 1: (1, 1)",
            "#",
            "# Final tally: [0, 1]",
        ]

    def test_explosion_without_captures(self):
        output = StringIO()
        TranscriptWriter(output).write_move(0, 0, 0, PlacementResult(0, 0, exploded=True, waves=1))
        assert output.getvalue().endswith("Player 1: (0, 0) exploded waves=1\n")

    def test_comment(self):
        output = StringIO()
        TranscriptWriter(output).write_comment("hello")
        assert output.getvalue() == "# hello\n"

    def test_never_closes_stdout(self):
        writer = TranscriptWriter(sys.stdout)
        writer.close()
        assert not sys.stdout.closed


# ============================================================================
# BoardWriter Tests
# ============================================================================


class TestBoardWriter:
    """Test the board diagram format."""

    def test_header_legend(self):
        output = StringIO()
        BoardWriter(output).write_header(1, 3, 3, ["Random 0", "Fixed 1 (0, 0)"])
        assert output.getvalue() == "Board 3x3 (a=Random 0, b=Fixed 1 (0, 0))\n"

    @pytest.mark.asyncio
    async def test_board_after_move(self):
        game = ChainReactionGame(3, 3, 2)
        result = await game.place(1, 0)
        await game.place(2, 2)

        output = StringIO()
        BoardWriter(output).write_move(0, 1, 0, result, game)

        assert output.getvalue().splitlines() == [
            "Player 1 plays (1, 0)",
            "o  1a o",
            "o  o  o",
            "o  o  1b",
            "",
        ]

    def test_move_without_game(self):
        output = StringIO()
        BoardWriter(output).write_move(1, 2, 2, PlacementResult(8, 1))
        assert output.getvalue() == "Player 2 plays (2, 2)\n\n"

    def test_move_with_explosion_and_captures(self):
        output = StringIO()
        result = PlacementResult(0, 0, exploded=True, waves=2, captured={1: 2, 2: 1})
        BoardWriter(output).write_move(0, 0, 0, result)
        assert output.getvalue() == "Player 1 plays (0, 0), 2 wave(s), captured 3\n\n"

    def test_game_end(self):
        output = StringIO()
        BoardWriter(output).write_game_end(3, 0, [2, 1])
        assert output.getvalue() == "Game 3: Player 1 wins, tally [2, 1]\n\n"


# ============================================================================
# GameLogger Tests
# ============================================================================


def test_logger_with_no_writers(mock_session, quiet):
    """Test that logger works with no writers."""
    logger = GameLogger(session=mock_session, status_reporter=quiet)
    logger.start_log()
    logger.log_move(0, 1, 1, PlacementResult(4, 0))
    logger.log_game_end(1, 0, [1, 0])
    logger.end_log([1, 0])
    assert logger.writers == []
    assert logger.get_log_filenames() == []


def test_logger_start_log_writes_headers(mock_session, quiet):
    """Test that start_log writes headers to all writers."""
    logger = GameLogger(session=mock_session, status_reporter=quiet)
    first, second = StringIO(), StringIO()
    logger.add_writer(TranscriptWriter(first))
    logger.add_writer(BoardWriter(second))

    logger.start_log()

    assert "# Seed: 12345" in first.getvalue()
    assert "# Player 2: Avoid others 1" in first.getvalue()
    assert second.getvalue().startswith("Board 3x3 (a=Random 0, b=Avoid others 1)")


def test_logger_fans_out_to_every_writer(mock_session, quiet):
    logger = GameLogger(session=mock_session, status_reporter=quiet)
    first, second = StringIO(), StringIO()
    logger.add_writer(TranscriptWriter(first))
    logger.add_writer(TranscriptWriter(second))

    logger.log_move(1, 2, 0, PlacementResult(2, 1))
    logger.log_comment("note")

    assert first.getvalue() == second.getvalue()
    assert "Player 2: (2, 0)" in first.getvalue()
    assert "# note" in first.getvalue()


def test_added_writers_closed_at_end_of_run_unless_persistent(mock_session, quiet):
    logger = GameLogger(session=mock_session, status_reporter=quiet)
    run_output, kept_output = StringIO(), StringIO()
    run_writer = TranscriptWriter(run_output)
    kept_writer = TranscriptWriter(kept_output)
    logger.add_writer(run_writer)
    logger.add_writer(kept_writer, persistent=True)

    logger.start_log()
    logger.end_log([1, 0])

    assert run_output.closed
    assert not kept_output.closed
    assert logger.writers == [kept_writer]
    assert kept_output.getvalue().endswith("# Final tally: [1, 0]\n")


def test_transcript_file_created(temp_dir, mock_session):
    messages = []
    logger = GameLogger(session=mock_session, transcript_dir=temp_dir, status_reporter=messages.append)
    logger.start_log()
    logger.log_move(0, 0, 0, PlacementResult(0, 0))
    logger.end_log([1, 0])

    path = os.path.join(temp_dir, "chainlog_12345.txt")
    assert logger.get_log_filenames() == [path]
    assert any(path in m for m in messages)
    # File writers are closed at the end of a run
    assert logger.writers == []

    with open(path) as f:
        lines = f.read().splitlines()
    assert lines[0] == "# Seed: 12345"
    assert "Player 1: (0, 0)" in lines
    assert lines[-1] == "# Final tally: [1, 0]"


def test_transcript_dir_created(temp_dir, mock_session, quiet):
    nested = os.path.join(temp_dir, "logs", "runs")
    logger = GameLogger(session=mock_session, transcript_dir=nested, status_reporter=quiet)
    logger.start_log()
    logger.end_log()
    assert os.path.exists(os.path.join(nested, "chainlog_12345.txt"))


def test_unwritable_transcript_dir_disables_file_logging(temp_dir, mock_session, quiet, capsys):
    blocker = os.path.join(temp_dir, "not_a_dir")
    with open(blocker, "w") as f:
        f.write("x")

    logger = GameLogger(session=mock_session, transcript_dir=blocker, status_reporter=quiet)
    logger.start_log()
    logger.end_log()

    assert logger.get_log_filenames() == []
    assert "Cannot create transcript log file" in capsys.readouterr().err


def test_screen_writers_persist_across_runs(mock_session, quiet, capsys):
    logger = GameLogger(session=mock_session, log_to_screen=True, board_to_screen=True, status_reporter=quiet)
    assert len(logger.writers) == 2

    logger.start_log()
    logger.end_log([0, 0])
    logger.start_log()
    logger.end_log([0, 0])

    assert len(logger.writers) == 2
    assert capsys.readouterr().out.count("# Seed: 12345") == 2
