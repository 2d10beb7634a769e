"""Main entry point for Chain Reaction simulations."""

import argparse
import asyncio
import signal
import sys
import threading

from controller import SimulationSession
from game.constants import DEFAULT_GAMES, DEFAULT_HEIGHT, DEFAULT_WIDTH
from game.player_config import parse_player_spec, PlayerConfig


def _start_terminal_input(session: SimulationSession, loop: asyncio.AbstractEventLoop) -> None:
    """Feed ``x y`` lines typed on stdin to the human player whose turn it is."""
    humans = {player.n: player for player in session.human_players()}
    if not humans:
        return

    def submit(x, y):
        player = humans.get(session.game.current_player)
        if player is not None:
            player.submit(x, y)

    def read_lines():
        for line in sys.stdin:
            parts = line.replace(",", " ").split()
            if len(parts) != 2:
                print("Enter a move as: X Y")
                continue
            try:
                x, y = int(parts[0]), int(parts[1])
            except ValueError:
                print("Enter a move as: X Y")
                continue
            loop.call_soon_threadsafe(submit, x, y)

    threading.Thread(target=read_lines, daemon=True).start()


async def _run(session: SimulationSession, games: int) -> list[int]:
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, session.cancel)
    except (NotImplementedError, RuntimeError):
        # Not available on this platform; Ctrl-C raises KeyboardInterrupt instead
        pass

    _start_terminal_input(session, loop)
    return await session.run(games)


def print_results(names, tally) -> None:
    total = sum(tally)
    print(f"\nGames played: {total}")
    for name, wins in zip(names, tally):
        rate = wins / total if total else 0.0
        print(f"  {name:<20} {wins:>6} wins ({rate:.1%})")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Chain Reaction simulation",
        epilog="""
Player Configuration:
  Use --player once per seat, in turn order, with the format:
    TYPE[:PARAM=VALUE,PARAM=VALUE,...]

  Types:
    random          - Uniformly random legal move
    avoid_others    - Plays where the neighborhood holds the fewest units
    form_chains     - Builds up cells next to loaded neighbors
    human           - Moves typed on stdin as "X Y"
    fixed           - Always plays the same cell (requires x and y)

  Parameters:
    seed=N          - Random seed for this player
    x=N, y=N        - Target cell of a fixed player
    name=TEXT       - Display name

  Examples:
    --player random --player form_chains:seed=3
    --player avoid_others --player random --player fixed:x=0,y=0
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--width", type=int, default=DEFAULT_WIDTH, help=f"Board width (default: {DEFAULT_WIDTH})"
    )
    parser.add_argument(
        "--height", type=int, default=DEFAULT_HEIGHT, help=f"Board height (default: {DEFAULT_HEIGHT})"
    )
    parser.add_argument(
        "--player",
        action="append",
        default=None,
        metavar="SPEC",
        help="Player configuration, repeat for every seat (default: two random players). See --help for format.",
    )
    parser.add_argument(
        "--games", type=int, default=DEFAULT_GAMES, help=f"Number of games to play (default: {DEFAULT_GAMES})"
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducible runs",
    )
    parser.add_argument(
        "--turn-delay",
        type=float,
        default=0.0,
        help="Pause after every move in seconds (default: 0)",
    )
    parser.add_argument(
        "--explosion-delay",
        type=float,
        default=0.0,
        help="Pause before every explosion wave in seconds (default: 0)",
    )
    parser.add_argument(
        "--game-delay",
        type=float,
        default=0.0,
        help="Pause between games in seconds (default: 0)",
    )
    parser.add_argument(
        "--transcript-file",
        nargs="?",
        const=".",
        default=None,
        metavar="DIR",
        help="Log moves to chainlog_<seed>.txt in DIR (default: current directory)",
    )
    parser.add_argument(
        "--transcript-screen",
        action="store_true",
        help="Output transcript format moves to screen",
    )
    parser.add_argument(
        "--board-screen",
        action="store_true",
        help="Draw the board on screen after every move",
    )
    args = parser.parse_args()

    # Parse player configurations
    try:
        if args.player:
            player_configs = [parse_player_spec(spec) for spec in args.player]
        else:
            player_configs = [PlayerConfig.random(), PlayerConfig.random()]
    except ValueError as e:
        parser.error(f"Invalid player configuration: {e}")
        return

    if args.games < 0:
        parser.error("--games cannot be negative")

    try:
        session = SimulationSession(
            width=args.width,
            height=args.height,
            player_configs=player_configs,
            seed=args.seed,
            turn_delay=args.turn_delay,
            explosion_delay=args.explosion_delay,
            game_delay=args.game_delay,
            transcript_dir=args.transcript_file,
            log_to_screen=args.transcript_screen,
            board_to_screen=args.board_screen,
        )
    except ValueError as e:
        parser.error(str(e))
        return

    try:
        tally = asyncio.run(_run(session, args.games))
    except KeyboardInterrupt:
        tally = session.last_tally or [0] * len(session.players)
        print("\nInterrupted")

    print_results(session.player_names(), tally)
    for filename in session.logger.get_log_filenames():
        print(f"Transcript: {filename}")


if __name__ == "__main__":
    main()
