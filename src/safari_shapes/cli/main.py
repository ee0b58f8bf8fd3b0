"""
CLI principale pour Safari Shapes.

Commandes : `demo` (session scriptée), `score`, `compare` et `plot` sur des
layouts JSON.
"""

from __future__ import annotations

import argparse
import random
from typing import List, Optional

from safari_shapes.analysis.report import SessionReport
from safari_shapes.board.comparator import compare_layouts
from safari_shapes.board.layout_io import load_layout, render_ascii
from safari_shapes.board.scoring import categories_used, score, unique_shape_count
from safari_shapes.core.models import palette_entry
from safari_shapes.experiment.collaborators import LoggingNotifier, ManualLivenessSignal, ManualTimer
from safari_shapes.experiment.config import ExperimentConfig
from safari_shapes.experiment.rounds import ObjectiveKind
from safari_shapes.experiment.state_machine import RoundPhase, RoundStateMachine
from safari_shapes.utils.logger import SafariLogger, set_logger

# Layout libre joué par la démo (label, ligne, colonne).
FREE_FORM_MOVES = [("Fox", 0, 0), ("Leopard", 0, 3), ("Elephant", 2, 0), ("Rabbit", 4, 3), ("Mouse", 4, 4)]


def _play_round(machine: RoundStateMachine, timer: ManualTimer) -> None:
    round_cfg = machine.current_round
    if round_cfg.objective.kind is not ObjectiveKind.FREE_FORM_MIN_SHAPES and machine.reference is not None:
        moves = [(s.label, s.origin.row, s.origin.col) for s in machine.reference.shapes()]
    else:
        moves = FREE_FORM_MOVES

    for label, row, col in moves:
        machine.select_category(palette_entry(label, machine.config.palette))
        machine.click_cell(row, col)

    print(f"\nRound {machine.round_number} board (score {machine.score}):")
    print(render_ascii(machine.grid))

    if machine.time_pressure and timer.running:
        timer.tick(machine.config.time_limit_seconds)
    elif not machine.advance_round():
        machine.advance_round(force=True)


def cmd_demo(args: argparse.Namespace) -> None:
    """Commande `demo` : joue une expérience complète avec des collaborateurs manuels."""
    logger = SafariLogger(verbose=args.verbose, log_file=args.log_file)
    set_logger(logger)

    config = ExperimentConfig.from_json(args.config) if args.config else ExperimentConfig.default()
    timer = ManualTimer()
    machine = RoundStateMachine(
        config=config,
        notifier=LoggingNotifier(logger),
        timer=timer,
        liveness=ManualLivenessSignal(),
        rng=random.Random(args.seed),
        logger=logger,
    )

    machine.start()
    while machine.phase is RoundPhase.ACTIVE:
        _play_round(machine, timer)

    report = SessionReport(machine.history, explore_exploit=machine.explore_exploit_score)
    report.print_summary()
    logger.print_metrics_summary()


def cmd_score(args: argparse.Namespace) -> None:
    grid = load_layout(args.layout)
    print(render_ascii(grid))
    print(f"\nScore: {score(grid)}")
    print(f"Animals: {unique_shape_count(grid)}")
    labels = sorted(label or kind.value for kind, _, label in categories_used(grid))
    print(f"Categories used: {', '.join(labels) if labels else '(none)'}")


def cmd_compare(args: argparse.Namespace) -> None:
    first = load_layout(args.first)
    second = load_layout(args.second)
    comparison = compare_layouts(first, second)
    print(f"Equal: {comparison.is_equal}")
    print(f"Similarity: {comparison.similarity:.1f}%")
    print(f"Explore/exploit: {100.0 - comparison.similarity:.1f}%")
    if comparison.details:
        for key, value in comparison.details.items():
            print(f"  {key}: {value}")


def cmd_plot(args: argparse.Namespace) -> None:
    import matplotlib

    if args.output:
        matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    from safari_shapes.board.visualize import BoardVisualizer

    grid = load_layout(args.layout)
    if args.reference:
        fig, _ = BoardVisualizer.plot_comparison(grid, load_layout(args.reference))
    else:
        fig, _ = BoardVisualizer.plot_board(grid, title=args.layout)

    if args.output:
        fig.savefig(args.output, dpi=120)
        print(f"Saved figure to {args.output}")
    else:
        plt.show()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="safari-shapes", description="Safari Shapes experiment CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    demo_parser = subparsers.add_parser("demo", help="Jouer une session scriptée complète.")
    demo_parser.add_argument("--config", type=str, default=None, help="Fichier JSON de configuration.")
    demo_parser.add_argument("--seed", type=int, default=0, help="Graine du tirage de condition.")
    demo_parser.add_argument("--log-file", type=str, default=None, help="Journal JSON/texte optionnel.")
    demo_parser.add_argument("--quiet", dest="verbose", action="store_false", help="Masquer le journal.")
    demo_parser.set_defaults(func=cmd_demo)

    score_parser = subparsers.add_parser("score", help="Scorer un layout JSON.")
    score_parser.add_argument("layout", type=str)
    score_parser.set_defaults(func=cmd_score)

    compare_parser = subparsers.add_parser("compare", help="Comparer deux layouts JSON.")
    compare_parser.add_argument("first", type=str)
    compare_parser.add_argument("second", type=str)
    compare_parser.set_defaults(func=cmd_compare)

    plot_parser = subparsers.add_parser("plot", help="Afficher un layout (et sa référence).")
    plot_parser.add_argument("layout", type=str)
    plot_parser.add_argument("--reference", type=str, default=None)
    plot_parser.add_argument("--output", type=str, default=None, help="Fichier image de sortie.")
    plot_parser.set_defaults(func=cmd_plot)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
