"""
Mythos CLI - Command-line interface for the engine.

Usage:
    mythos simulate --p1 hard --p2 expert --games 5    AI-vs-AI matches
    mythos validate-deck <deck_file>                    Check a deck list
    mythos cards                                        Print the catalog
    mythos serve --host 0.0.0.0 --port 8000             Run the API
"""

import argparse
import sys
from collections import Counter

from .config import configure_logging


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Mythos - Naruto Mythos TCG engine",
        prog="mythos",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default from MYTHOS_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Play AI-vs-AI matches")
    simulate_parser.add_argument("--p1", default="medium", help="Difficulty for player1")
    simulate_parser.add_argument("--p2", default="medium", help="Difficulty for player2")
    simulate_parser.add_argument("--games", type=int, default=1, help="Number of matches")
    simulate_parser.add_argument("--seed", type=int, default=None, help="Seed of the first match")
    simulate_parser.add_argument("--deck1", default="leaf", help="Starter deck for player1")
    simulate_parser.add_argument("--deck2", default="sound_sand", help="Starter deck for player2")

    # Validate command
    validate_parser = subparsers.add_parser("validate-deck", help="Validate a deck list file")
    validate_parser.add_argument("deck_file", help="Card ids, one per line; # starts a comment")

    # Cards command
    cards_parser = subparsers.add_parser("cards", help="Print the card catalog")
    cards_parser.add_argument("--missions", action="store_true", help="Only mission cards")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "simulate":
        return cmd_simulate(args)
    elif args.command == "validate-deck":
        return cmd_validate_deck(args)
    elif args.command == "cards":
        return cmd_cards(args)
    elif args.command == "serve":
        return cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_simulate(args):
    """Play AI-vs-AI matches and summarize."""
    from .bots import STRATEGIES
    from .session import simulate_match

    for difficulty in (args.p1, args.p2):
        if difficulty not in STRATEGIES:
            print(f"Error: Unknown difficulty: {difficulty}. Choose from {', '.join(STRATEGIES)}")
            sys.exit(1)

    wins = Counter()
    for game in range(args.games):
        seed = None if args.seed is None else args.seed + game
        try:
            result = simulate_match(args.p1, args.p2, seed=seed, decks=(args.deck1, args.deck2))
        except KeyError as e:
            print(f"Error: {e.args[0] if e.args else e}")
            sys.exit(1)
        wins[result.winner or "none"] += 1
        status = "" if result.completed else " (incomplete)"
        print(
            f"Game {game + 1}: winner {result.winner or '-'}  "
            f"{result.points['player1']}-{result.points['player2']}  "
            f"{result.actions} actions{status}"
        )

    print(f"\nplayer1 ({args.p1}): {wins['player1']} wins")
    print(f"player2 ({args.p2}): {wins['player2']} wins")
    return 0


def cmd_validate_deck(args):
    """Validate a deck list file."""
    from .cards.deck import load_deck_file, validate_deck

    try:
        characters, missions = load_deck_file(args.deck_file)
    except FileNotFoundError:
        print(f"Error: File not found: {args.deck_file}")
        sys.exit(1)
    except KeyError as e:
        print(f"Error: {e.args[0] if e.args else e}")
        sys.exit(1)

    result = validate_deck(characters, missions)
    print(f"Characters: {len(characters)}  Missions: {len(missions)}")
    if result.valid:
        print("Deck is valid")
        return 0

    print("\nErrors:")
    for error in result.errors:
        print(f"  - {error}")
    sys.exit(1)


def cmd_cards(args):
    """Print the card catalog."""
    from .cards.catalog import all_character_cards, all_mission_cards

    if not args.missions:
        for card in all_character_cards():
            title = f" - {card.title}" if card.title else ""
            print(f"{card.card_id:<10} {card.name}{title}  [{card.chakra}/{card.power}] {card.group}")
        print()
    for card in all_mission_cards():
        print(f"{card.card_id:<10} {card.name}  ({card.base_points} pts)")
    return 0


def cmd_serve(args):
    """Run the REST API with uvicorn."""
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Install with: pip install uvicorn")
        sys.exit(1)

    from .api.app import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    main()
