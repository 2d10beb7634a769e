"""Run round-robin tournaments between Chain Reaction strategies.

Every pair of strategies plays ``--games`` games against each other on the
same board. Seats are alternated for fairness: half of the games are played
with the first strategy moving first, the other half with the second.

Usage:
    # Default: Random, Avoid others, Form chains
    python tournament.py --games 100

    # Custom strategies on a larger board
    python tournament.py --games 50 --width 8 --height 8 \
        --player random --player form_chains --player avoid_others
"""

import argparse
import time
from collections import defaultdict

from controller import SimulationSession
from game.constants import DEFAULT_HEIGHT, DEFAULT_WIDTH
from game.player_config import parse_player_spec

DEFAULT_PLAYERS = ["random", "avoid_others", "form_chains"]


def play_matchup(spec1, spec2, games, width, height, seed=None):
    """Play ``games`` games between two strategy specs.

    Args:
        spec1: Player spec string of the first strategy
        spec2: Player spec string of the second strategy
        games: Total number of games, split across both seat orders
        width: Board width
        height: Board height
        seed: Optional seed; each seat order gets its own derived run

    Returns:
        Tuple of (wins of spec1, wins of spec2)
    """
    first_half = (games + 1) // 2
    second_half = games // 2
    wins1 = wins2 = 0

    for order, count in ((0, first_half), (1, second_half)):
        if count == 0:
            continue
        configs = [parse_player_spec(spec1), parse_player_spec(spec2)]
        if order == 1:
            configs.reverse()

        session = SimulationSession(
            width=width,
            height=height,
            player_configs=configs,
            seed=None if seed is None else seed + order,
            status_reporter=lambda message: None,
        )
        tally = session.run_sync(count)

        if order == 0:
            wins1 += tally[0]
            wins2 += tally[1]
        else:
            wins1 += tally[1]
            wins2 += tally[0]

    return wins1, wins2


def run_tournament(player_specs, games_per_matchup=50, width=DEFAULT_WIDTH, height=DEFAULT_HEIGHT, seed=None):
    """Run a round-robin tournament between strategy specs.

    Args:
        player_specs: List of player spec strings
        games_per_matchup: Games to play per matchup
        width: Board width
        height: Board height
        seed: Optional base seed for reproducible tournaments. A base seed is
            drawn from the clock when omitted, so every matchup still gets its
            own seed.

    Returns:
        Dict mapping each spec to its (wins, games played)
    """
    if seed is None:
        seed = time.time_ns() % (2**31)
    results = defaultdict(lambda: [0, 0])

    print("\n" + "="*60)
    print("Tournament Configuration")
    print("="*60)
    print(f"Players: {len(player_specs)}")
    print(f"Games per matchup: {games_per_matchup}")
    print(f"Total games: {len(player_specs) * (len(player_specs) - 1) // 2 * games_per_matchup}")
    print(f"Board size: {width}x{height}")
    print(f"Base seed: {seed}")
    print()

    for i, spec in enumerate(player_specs):
        print(f"  Player {i+1}: {spec}")

    print("="*60 + "\n")

    total_games = 0
    start_time = time.time()

    for i, spec1 in enumerate(player_specs):
        for j, spec2 in enumerate(player_specs):
            if i >= j:  # Skip self-play and duplicate matchups
                continue

            print(f"\nMatchup: {spec1} vs {spec2}")
            print(f"  Playing {games_per_matchup} games...")

            matchup_start = time.time()
            matchup_seed = seed + 1000 * i + 10 * j
            wins1, wins2 = play_matchup(spec1, spec2, games_per_matchup, width, height, matchup_seed)
            matchup_time = time.time() - matchup_start

            results[spec1][0] += wins1
            results[spec1][1] += games_per_matchup
            results[spec2][0] += wins2
            results[spec2][1] += games_per_matchup
            total_games += games_per_matchup

            print(f"\n  Results:")
            print(f"    {spec1} wins: {wins1}")
            print(f"    {spec2} wins: {wins2}")
            if matchup_time > 0:
                print(f"  Time: {matchup_time:.1f}s ({games_per_matchup/matchup_time:.2f} games/s)")

    elapsed = time.time() - start_time
    print("\n" + "="*60)
    print("Tournament Complete!")
    print("="*60)
    print(f"Total games: {total_games}")
    print(f"Total time: {elapsed:.1f} seconds")
    print()

    print_standings(results)
    return dict(results)


def print_standings(results):
    """Print strategies ordered by win rate."""
    print(f"{'Strategy':<30} {'Wins':>6} {'Games':>6} {'Win rate':>9}")
    print("-"*54)
    standings = sorted(
        results.items(),
        key=lambda item: item[1][0] / item[1][1] if item[1][1] else 0.0,
        reverse=True,
    )
    for spec, (wins, games) in standings:
        rate = wins / games if games else 0.0
        print(f"{spec:<30} {wins:>6} {games:>6} {rate:>9.1%}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run round-robin strategy tournament")
    parser.add_argument("--games", type=int, default=50,
                        help="Games per matchup (default: 50)")
    parser.add_argument("--width", type=int, default=DEFAULT_WIDTH,
                        help=f"Board width (default: {DEFAULT_WIDTH})")
    parser.add_argument("--height", type=int, default=DEFAULT_HEIGHT,
                        help=f"Board height (default: {DEFAULT_HEIGHT})")
    parser.add_argument("--seed", type=int,
                        help="Base random seed for reproducible tournaments")
    parser.add_argument("--player", action="append", metavar="SPEC",
                        help="Strategy spec, repeat for every entrant (default: all computer strategies)")

    args = parser.parse_args()

    player_specs = args.player or DEFAULT_PLAYERS
    for spec in player_specs:
        try:
            config = parse_player_spec(spec)
        except ValueError as e:
            parser.error(f"Invalid player configuration: {e}")
        if config.player_type == "human":
            parser.error("Human players cannot take part in a tournament")

    if len(player_specs) < 2:
        print("Error: A tournament needs at least two players")
        exit(1)

    run_tournament(
        player_specs,
        games_per_matchup=args.games,
        width=args.width,
        height=args.height,
        seed=args.seed,
    )
