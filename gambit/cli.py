"""
Gambit CLI - Ask the boss AI about a scenario.

Usage:
    gambit evaluate <scenario>                 Show the evaluation breakdown
    gambit move <scenario>                     Show the boss's best move
    gambit spawn <scenario> --unit-type B ...  Choose a spawn tile
    gambit buff <scenario> --effect shield     Choose a unit to buff
    gambit barrier <scenario>                  Choose a tile for a barrier

Every command accepts --config, --personality, --depth, --seed and --verbose.
Exits with 1 when the boss declines or the input is bad.
"""

import argparse
import logging
import sys

from .bots.evaluator import DeploymentZones
from .bots.personality import PERSONALITIES
from .bots.policy import ActionCategory, TargetResult
from .bots.search import MinimaxSearch
from .bots.selectors import BossCardTargetResolver, BuffTargetSelector, SpawnTargetSelector, TileEffectTargetSelector
from .config import ConfigError, load_ai_config
from .engine_core.state import INFINITE_LIFETIME
from .games.skirmish import ActionCard, ScenarioError, Skirmish, UnitCard, load_scenario
from .games.skirmish.effects import UNIT_EFFECT_FACTORIES

logger = logging.getLogger(__name__)

# Factory argument that --amount sets, per unit effect
AMOUNT_PARAMS = {
    "thorns": "reflection",
    "attack": "amount",
    "moves": "amount",
    "multiplier": "multiplier",
}


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("scenario", help="Path to a scenario JSON file")
    common.add_argument("--config", help="AI config JSON (default: $GAMBIT_CONFIG)")
    common.add_argument("--personality", choices=sorted(PERSONALITIES), help="Preset to start from")
    common.add_argument("--depth", type=int, help="Search depth override")
    common.add_argument("--seed", type=int, help="Seed for random fallback choices")
    common.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    parser = argparse.ArgumentParser(
        description="Gambit - Boss AI for a chess-like tactical card game",
        prog="gambit",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("evaluate", parents=[common], help="Show the evaluation breakdown")
    subparsers.add_parser("move", parents=[common], help="Show the boss's best move")

    spawn_parser = subparsers.add_parser("spawn", parents=[common], help="Choose a spawn tile")
    spawn_parser.add_argument("--unit-type", required=True, help="Movement archetype (A-E)")
    spawn_parser.add_argument("--health", type=int, required=True)
    spawn_parser.add_argument("--damage", type=int, required=True)
    spawn_parser.add_argument("--lifetime", type=int, default=INFINITE_LIFETIME)
    spawn_parser.add_argument("--worth", type=int, default=0)

    buff_parser = subparsers.add_parser("buff", parents=[common], help="Choose a boss unit to buff")
    buff_parser.add_argument("--effect", required=True, choices=sorted(UNIT_EFFECT_FACTORIES))
    buff_parser.add_argument("--duration", type=int)
    buff_parser.add_argument("--amount", type=float, help="Bonus, multiplier or reflection share")

    barrier_parser = subparsers.add_parser("barrier", parents=[common], help="Choose a tile for a barrier")
    barrier_parser.add_argument("--duration", type=int)

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_ai_config(args.config)
        personality = config.to_personality(args.personality)
        deployment = config.deployment_zones()
        game = load_scenario(args.scenario, deployment)
    except (ConfigError, ScenarioError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    search = personality.build_search(deployment)
    logger.debug("Using personality %s", personality.name)

    if args.command == "evaluate":
        depth = _depth(args, personality.target_depth)
        return cmd_evaluate(game, search, depth)
    if args.command == "move":
        depth = _depth(args, personality.move_depth)
        return cmd_move(game, search, depth)

    depth = _depth(args, personality.target_depth)
    resolver = build_resolver(game, search, depth, deployment, args.seed)

    if args.command == "spawn":
        card = UnitCard(args.unit_type, args.health, args.damage, args.lifetime, args.worth)
    elif args.command == "buff":
        params = {}
        if args.duration is not None:
            params["duration"] = args.duration
        if args.amount is not None:
            key = AMOUNT_PARAMS.get(args.effect)
            if key is None:
                print(f"Error: --amount does not apply to {args.effect}", file=sys.stderr)
                return 1
            params[key] = int(args.amount) if key == "amount" else args.amount
        card = ActionCard(ActionCategory.BUFF, args.effect, params)
    else:
        params = {"duration": args.duration} if args.duration is not None else {}
        card = ActionCard(ActionCategory.TILE, "barrier", params)

    return report(resolver.resolve(card))


def build_resolver(
    game: Skirmish,
    search: MinimaxSearch,
    depth: int,
    deployment: DeploymentZones,
    seed: int | None = None,
) -> BossCardTargetResolver:
    builder = game.state_builder()
    return BossCardTargetResolver(
        spawn=SpawnTargetSelector(game.board, search, builder, depth, deployment, seed),
        buff=BuffTargetSelector(game, search, builder, depth, seed),
        tile=TileEffectTargetSelector(game.board, search, builder, depth, seed),
    )


def cmd_evaluate(game: Skirmish, search: MinimaxSearch, depth: int) -> int:
    """Print the static breakdown and the searched score."""
    built = game.state_builder().build()
    if built is None:
        print("Error: could not snapshot the scenario", file=sys.stderr)
        return 1

    evaluation = search.evaluator.evaluate_detailed(built.state)
    print(evaluation.format())
    print(f"Search score (depth {depth}): {search.evaluate(built.state, depth):.3f}")
    return 0


def cmd_move(game: Skirmish, search: MinimaxSearch, depth: int) -> int:
    """Print the boss's best move."""
    built = game.state_builder().build()
    if built is None:
        print("Error: could not snapshot the scenario", file=sys.stderr)
        return 1

    move = search.find_best_move(built.state, depth)
    if move is None:
        print("No boss move available")
        return 1
    if move.is_pass:
        print("End phase")
        return 0

    unit = built.live_unit(move.unit_id)
    print(f"Move {unit} to ({move.to_row}, {move.to_col})")
    print(f"Searched {search.stats.nodes_visited} nodes, {search.stats.cutoffs} cutoffs")
    return 0


def report(result: TargetResult) -> int:
    """Print a selector result; 0 on success."""
    if not result.success:
        print(f"Declined ({result.error_code.value}): {result.error}")
        return 1

    print(f"Target: {result.target}")
    print(f"Method: {result.method.value}")
    if result.best_score is not None:
        print(f"Score: {result.best_score:.3f} (current {result.current_score:.3f})")
    return 0


def _depth(args, default: int) -> int:
    return args.depth if args.depth is not None else default


if __name__ == "__main__":
    sys.exit(main())
