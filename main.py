#!/usr/bin/env python3
"""
Quadrant Balancing System
=========================
Main entry point: generate, inspect and solve tasks, and run experiments
comparing the Greedy and Aggregate partitioners.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np

from config import Config
from experiments import (
    AngleStepExperimentConfig, ExperimentRunner, PatienceExperimentConfig,
    SizeExperimentConfig
)
from models import WeightedPointSet
from partitioners import compare_partitioners
from reports import ExperimentReport, format_comparison, format_point_set
from task_io import load_point_set, save_point_set
from utils import ensure_directory, save_json, setup_logging

# Setup logging
logger = logging.getLogger(__name__)


def cmd_generate(args) -> int:
    gen = Config.GENERATION
    seed = args.seed if args.seed is not None else gen['seed']
    point_set = WeightedPointSet.generate(
        args.count if args.count is not None else gen['count'],
        args.radius if args.radius is not None else gen['radius'],
        args.weight_min if args.weight_min is not None else gen['weight_min'],
        args.weight_max if args.weight_max is not None else gen['weight_max'],
        rng=np.random.default_rng(seed)
    )
    save_point_set(point_set, args.output)
    print(f"Generated task with {point_set.count} points: {args.output}")
    return 0


def cmd_show(args) -> int:
    point_set = load_point_set(args.task)
    print(format_point_set(point_set))
    return 0


def _solve(args, point_set):
    rotating = Config.SOLVERS['rotating']
    return compare_partitioners(
        point_set,
        args.patience if args.patience is not None else rotating['patience'],
        args.angle_step if args.angle_step is not None else rotating['angle_step']
    )


def cmd_solve(args) -> int:
    point_set = load_point_set(args.task)
    comparison = _solve(args, point_set)

    print("\n" + "=" * 60)
    print("PARTITION RESULTS")
    print("=" * 60)
    print(f"Points: {point_set.count}, total weight: {point_set.total_weight:.4f}")
    print(format_comparison(comparison))
    print("=" * 60)

    if args.json:
        save_json({'task': point_set.to_dict(), 'solution': comparison.to_dict()}, args.json)
        print(f"\nSolution saved to: {args.json}")

    if args.plot:
        _save_partition_plot(point_set, comparison, args.plot)
        print(f"Plot saved to: {args.plot}")
    return 0


def cmd_plot(args) -> int:
    point_set = load_point_set(args.task)
    comparison = _solve(args, point_set)
    _save_partition_plot(point_set, comparison, args.output, show=args.show)
    print(f"Plot saved to: {args.output}")
    return 0


def _save_partition_plot(point_set, comparison, output_path, show=False):
    import matplotlib.pyplot as plt
    from visualization import PartitionVisualizer

    ensure_directory(Path(output_path).parent)
    fig = PartitionVisualizer(point_set).create_partition_plot(
        comparison, output_path=output_path, show=show
    )
    plt.close(fig)


def cmd_experiment(args) -> int:
    if args.repetitions is not None:
        Config.set('EXPERIMENTS.repetitions', args.repetitions)

    runner = ExperimentRunner(seed=args.seed, show_progress=args.progress or None)
    if args.kind == 'patience':
        result = runner.run_patience(PatienceExperimentConfig.from_config())
    elif args.kind == 'angle-step':
        result = runner.run_angle_step(AngleStepExperimentConfig.from_config())
    else:
        result = runner.run_size(SizeExperimentConfig.from_config())

    output_dir = ensure_directory(args.output or Config.OUTPUT_DIR / result.name)
    report = ExperimentReport(result)
    report.generate_all_reports(str(output_dir))
    print(report.generate_text_report())

    if not args.no_chart:
        import matplotlib.pyplot as plt
        from visualization import ExperimentVisualizer

        fig = ExperimentVisualizer(result).create_experiment_plot(
            output_path=str(Path(output_dir) / f"{result.name}_chart.png")
        )
        plt.close(fig)

    print(f"\nResults saved to: {output_dir}")
    return 0


def cmd_interactive(args) -> int:
    from interactive import InteractiveSession

    InteractiveSession(runner=ExperimentRunner(seed=args.seed)).run()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Quadrant Balancing System: Greedy vs Aggregate partitioning",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate --count 200 --seed 7 task.txt    # Random task in the unit disk
  %(prog)s solve task.txt --plot task.png           # Solve with both partitioners
  %(prog)s experiment angle-step --repetitions 20   # Sweep the rotation increment
  %(prog)s interactive                              # Menu-driven session
        """
    )

    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("--config", help="Path to configuration file (JSON or YAML)")
    parser.add_argument("--log-file", help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    gen = subparsers.add_parser("generate", help="Generate a random task")
    gen.add_argument("output", help="Task file to write (.txt or .json)")
    gen.add_argument("--count", type=int, help="Number of points")
    gen.add_argument("--radius", type=float, help="Disk radius")
    gen.add_argument("--weight-min", type=float, help="Minimum weight")
    gen.add_argument("--weight-max", type=float, help="Maximum weight")
    gen.add_argument("--seed", type=int, help="Random seed")
    gen.set_defaults(func=cmd_generate)

    show = subparsers.add_parser("show", help="Print a task")
    show.add_argument("task", help="Task file (.txt or .json)")
    show.set_defaults(func=cmd_show)

    solve = subparsers.add_parser("solve", help="Solve a task with both partitioners")
    solve.add_argument("task", help="Task file (.txt or .json)")
    solve.add_argument("--patience", type=int, help="Aggregate patience")
    solve.add_argument("--angle-step", type=float, help="Aggregate rotation step (radians)")
    solve.add_argument("--json", help="Save the solution as JSON")
    solve.add_argument("--plot", help="Save a partition plot (PNG)")
    solve.set_defaults(func=cmd_solve)

    plot = subparsers.add_parser("plot", help="Plot both partitions of a task")
    plot.add_argument("task", help="Task file (.txt or .json)")
    plot.add_argument("output", help="Image file to write (PNG)")
    plot.add_argument("--patience", type=int, help="Aggregate patience")
    plot.add_argument("--angle-step", type=float, help="Aggregate rotation step (radians)")
    plot.add_argument("--show", action="store_true", help="Also open the figure window")
    plot.set_defaults(func=cmd_plot)

    exp = subparsers.add_parser("experiment", help="Run a parameter sweep")
    exp.add_argument("kind", choices=["patience", "angle-step", "size"],
                     help="Which parameter to sweep")
    exp.add_argument("--repetitions", type=int, help="Tasks per parameter value")
    exp.add_argument("--seed", type=int, help="Random seed")
    exp.add_argument("--output", help="Output directory for reports and charts")
    exp.add_argument("--no-chart", action="store_true", help="Skip the chart")
    exp.add_argument("--progress", action="store_true", help="Show a progress bar")
    exp.set_defaults(func=cmd_experiment)

    inter = subparsers.add_parser("interactive", help="Start the menu-driven session")
    inter.add_argument("--seed", type=int, help="Random seed")
    inter.set_defaults(func=cmd_interactive)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        setup_logging("DEBUG", args.log_file)
    else:
        setup_logging(Config.get('LOGGING.level', 'INFO'), args.log_file)

    try:
        if args.config:
            Config.from_file(args.config)
        return args.func(args)
    except Exception as e:
        logger.error(f"Error: {e}", exc_info=args.verbose)
        return 1


if __name__ == "__main__":
    sys.exit(main())
