"""
Kaledrun CLI - Command-line interface for the engine.

Usage:
    kaledrun play [--seed N]                          Play in the terminal
    kaledrun simulate [--seed N] [--steps N] [--policy random|first]
                                                      Autoplay and audit invariants
    kaledrun validate                                 Validate the built-in catalog
"""

import argparse
import logging
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Kaledrun - Village management decision engine",
        prog="kaledrun",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a game in the terminal")
    play_parser.add_argument("--seed", type=int, default=None, help="RNG seed")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Autoplay a game with a bot policy")
    simulate_parser.add_argument("--seed", type=int, default=None, help="RNG seed")
    simulate_parser.add_argument("--steps", type=int, default=200, help="Maximum number of decisions")
    simulate_parser.add_argument(
        "--policy", default="random", choices=["random", "first"], help="Bot policy"
    )

    # Validate command
    subparsers.add_parser("validate", help="Validate the built-in catalog")

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "play":
        cmd_play(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "validate":
        cmd_validate(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_validate(args):
    """Validate the built-in catalog."""
    from .catalog import default_catalog, validate_catalog

    catalog = default_catalog()
    result = validate_catalog(catalog)

    print(f"Requests: {len(catalog.all_requests)}")
    if result.warnings:
        print("\nWarnings:")
        for w in result.warnings:
            print(f"  - {w}")

    if result.errors:
        print("\nErrors:")
        for e in result.errors:
            print(f"  - {e}")
        sys.exit(1)

    print("Catalog is valid")


def cmd_simulate(args):
    """Autoplay a game and print a summary."""
    from .bots import autoplay, make_policy
    from .engine_core import GameRandom, Reducer

    rng = GameRandom(args.seed)
    reducer = Reducer(rng=rng)
    state = reducer.initial_state()
    policy = make_policy(args.policy, seed=rng.seed)

    result = autoplay(reducer, state, policy, args.steps)
    final = result.final_state

    print(f"Seed: {rng.seed}")
    print(f"Policy: {policy.get_name()}")
    print(f"Decisions: {result.steps_taken}")
    print(f"Tick: {final.tick}")
    for key, value in final.stats.to_dict().items():
        print(f"  {key}: {value}")
    print(f"Needs: {', '.join(n for n, active in final.needs.to_dict().items() if active) or 'none'}")
    print(f"Log entries: {len(final.log)}")
    if final.game_over:
        print(f"Game over: {final.game_over_reason}")

    if result.violations:
        print("\nInvariant violations:")
        for v in result.violations:
            print(f"  - {v}")
    if result.rejected_actions:
        print(f"\nRejected actions: {result.rejected_actions}")

    if not result.ok or result.rejected_actions:
        sys.exit(1)


def _prompt_int(prompt, lo, hi, allow_blank=False):
    while True:
        raw = input(prompt).strip()
        if raw.lower() == "q":
            raise EOFError
        if allow_blank and raw == "":
            return None
        try:
            value = int(raw)
        except ValueError:
            print(f"  Enter a number between {lo} and {hi}")
            continue
        if lo <= value <= hi:
            return value
        print(f"  Enter a number between {lo} and {hi}")


def cmd_play(args):
    """Interactive terminal game."""
    from .bots.policy import authority_commit_range, combat_commit_range, is_option_playable
    from .engine_core import Action, GameRandom, Reducer, get_current_request

    rng = GameRandom(args.seed)
    reducer = Reducer(rng=rng)
    state = reducer.initial_state()
    print(f"A new village is founded (seed {rng.seed}). Enter q to quit.")

    try:
        while not state.game_over:
            request = get_current_request(state, reducer.catalog)
            stats = ", ".join(f"{k}={v}" for k, v in state.stats.to_dict().items())
            print(f"\n[Tick {state.tick}] {stats}")
            print(f"\n== {request.title} ==\n{request.text}\n")
            for index, option in enumerate(request.options):
                marker = "" if is_option_playable(state, request, index) else " (no forces available)"
                print(f"  {index}) {option.text}{marker}")

            index = _prompt_int("> ", 0, len(request.options) - 1)
            combat_commit = None
            authority_commit = None

            combat_range = combat_commit_range(state, request, index)
            if combat_range is not None and combat_range[0] <= combat_range[1]:
                combat_commit = _prompt_int(f"Land forces to commit ({combat_range[0]}-{combat_range[1]}): ", *combat_range)

            authority_range = authority_commit_range(state, request, index)
            if authority_range is not None:
                authority_commit = _prompt_int(
                    f"Authority to commit ({authority_range[0]}-{authority_range[1]}, blank to skip): ",
                    *authority_range,
                    allow_blank=True,
                )

            result = reducer.apply(state, Action.choose_option(index, combat_commit, authority_commit))
            if not result.success:
                print(f"  Not possible: {result.error}")
                continue
            for change in result.state_changes:
                print(f"  {change}")
            state = result.new_state
    except (EOFError, KeyboardInterrupt):
        print("\nYou leave the village to its fate.")
        return

    print(f"\n{state.game_over_reason}")
    print(f"The village lasted {state.tick} ticks.")


if __name__ == "__main__":
    main()
