#!/usr/bin/env python3
"""
Interactive Quadrant Balancing Session
======================================
Menu-driven session: enter, load or generate a task, solve it with both
partitioners, run the experiment sweeps and inspect the results.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import matplotlib.pyplot as plt

from config import Config
from experiments import (
    AngleStepExperimentConfig, ExperimentResult, ExperimentRunner,
    PatienceExperimentConfig, SizeExperimentConfig
)
from models import PartitionComparison, Point, WeightedPointSet
from partitioners import compare_partitioners
from reports import ExperimentReport, format_comparison, format_point_set
from task_io import load_point_set
from utils import ValidationError, ensure_directory
from visualization import ExperimentVisualizer

logger = logging.getLogger(__name__)


MAIN_MENU = [
    ("1", "Enter / load / generate a task"),
    ("2", "Solve the current task"),
    ("3", "Experiment: effect of patience"),
    ("4", "Experiment: effect of angle step"),
    ("5", "Experiment: effect of n and weight range"),
    ("6", "Show the current task"),
    ("7", "Show the last solution"),
    ("0", "Exit"),
]


class InteractiveSession:
    """Holds the current task and the last solution between menu actions."""

    def __init__(self, input_fn: Callable[[str], str] = input,
                 output_fn: Callable[..., None] = print,
                 runner: Optional[ExperimentRunner] = None):
        self.input = input_fn
        self.output = output_fn
        self.runner = runner or ExperimentRunner()
        self.point_set: Optional[WeightedPointSet] = None
        self.last_solution: Optional[PartitionComparison] = None

        self.actions = {
            "1": self.load_or_generate_task,
            "2": self.solve_task,
            "3": self.run_patience_experiment,
            "4": self.run_angle_step_experiment,
            "5": self.run_size_experiment,
            "6": self.print_task,
            "7": self.print_solution,
        }

    def run(self):
        """Main menu loop; returns when the user exits or input ends."""
        while True:
            self.output("\n" + "=" * 8 + " MAIN MENU " + "=" * 8)
            if self.point_set is None:
                self.output("No task entered, loaded or generated yet.")
            for key, label in MAIN_MENU:
                self.output(f"{key} - {label}")

            try:
                choice = self.input("Your choice: ").strip()
            except EOFError:
                return

            if choice == "0":
                self.output("Goodbye!")
                return

            action = self.actions.get(choice)
            if action is None:
                self.output("Invalid choice. Try again.")
                continue

            try:
                action()
            except EOFError:
                return
            except (ValueError, ValidationError, OSError) as e:
                logger.warning(f"Menu action {choice} failed: {e}")
                self.output(f"Error: {e}")

    # ------------------------------------------------------------------
    # Prompts
    # ------------------------------------------------------------------

    def _ask(self, prompt: str) -> str:
        return self.input(prompt).strip()

    def _ask_int(self, prompt: str) -> int:
        raw = self._ask(prompt)
        try:
            return int(raw)
        except ValueError:
            raise ValueError(f"expected an integer, got {raw!r}") from None

    def _ask_float(self, prompt: str) -> float:
        raw = self._ask(prompt)
        try:
            return float(raw)
        except ValueError:
            raise ValueError(f"expected a number, got {raw!r}") from None

    def _ask_list(self, prompt: str, convert: Callable[[str], float]) -> List:
        values = []
        for token in self._ask(prompt).split():
            try:
                values.append(convert(token))
            except ValueError:
                # Unparseable tokens are skipped, like stray separators
                continue
        return values

    def _ask_weight_ranges(self, prompt: str) -> List[Tuple[float, float]]:
        ranges = []
        for pair in self._ask(prompt).split(";"):
            parts = pair.split()
            if len(parts) != 2:
                continue
            try:
                ranges.append((float(parts[0]), float(parts[1])))
            except ValueError:
                continue
        return ranges

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def load_or_generate_task(self):
        self.output("\n--- Enter, load or generate a task ---")
        self.output("1 - Enter manually")
        self.output("2 - Load from file")
        self.output("3 - Generate randomly")
        choice = self._ask("Your choice: ")

        if choice == "1":
            count = self._ask_int("n: ")
            radius = self._ask_float("R: ")
            points, weights = [], []
            for i in range(1, count + 1):
                x = self._ask_float(f"x_{i}: ")
                y = self._ask_float(f"y_{i}: ")
                w = self._ask_float(f"w_{i}: ")
                points.append(Point(x, y))
                weights.append(w)
            self.point_set = WeightedPointSet(count=count, radius=radius,
                                              points=tuple(points), weights=tuple(weights))
            self.output("Task entered manually.")
        elif choice == "2":
            path = self._ask("Path to file: ")
            self.point_set = load_point_set(path)
            self.output(f"Task loaded from file: {path}")
        elif choice == "3":
            count = self._ask_int("n: ")
            radius = self._ask_float("R: ")
            weight_min = self._ask_float("wMin: ")
            weight_max = self._ask_float("wMax: ")
            self.point_set = WeightedPointSet.generate(count, radius, weight_min, weight_max,
                                                       rng=self.runner.rng)
            self.output(f"Task generated (n={count}, R={radius}, "
                        f"wMin={weight_min}, wMax={weight_max}).")
        else:
            self.output("Invalid choice.")

    def solve_task(self):
        if self.point_set is None:
            self.output("No task. Enter, load or generate one first (menu 1).")
            return
        rotating = Config.SOLVERS['rotating']
        self.last_solution = compare_partitioners(self.point_set, rotating['patience'],
                                                  rotating['angle_step'])
        self.output("\nSolutions:")
        self.output(format_comparison(self.last_solution))

    def print_task(self):
        if self.point_set is None:
            self.output("No task.")
            return
        self.output("\n--- Current task ---")
        self.output(format_point_set(self.point_set))

    def print_solution(self):
        if self.last_solution is None:
            self.output("No solution yet. Run menu 2 first.")
            return
        self.output("\n--- Last solution ---")
        self.output(format_comparison(self.last_solution))

    def run_patience_experiment(self):
        self.output("\n=== Experiment: effect of patience ===")
        cfg = PatienceExperimentConfig(
            count=self._ask_int("Fixed n: "),
            angle_step=self._ask_float("Fixed angle step (rad): "),
            weight_range=(self._ask_float("wMin: "), self._ask_float("wMax: ")),
            patience_values=self._ask_list("Patience values separated by spaces (e.g. 2 5 10): ", int),
            repetitions=self._ask_int("Tasks per patience value: "),
        )
        self.output("\nRunning...")
        self._save_experiment(self.runner.run_patience(cfg), "patience_results")

    def run_angle_step_experiment(self):
        self.output("\n=== Experiment: effect of angle step ===")
        cfg = AngleStepExperimentConfig(
            count=self._ask_int("Fixed n: "),
            patience=self._ask_int("Fixed patience: "),
            weight_range=(self._ask_float("wMin: "), self._ask_float("wMax: ")),
            angle_step_values=self._ask_list(
                "Angle steps separated by spaces (rad, e.g. 1.5708 0.7854 0.3927): ", float
            ),
            repetitions=self._ask_int("Tasks per angle step: "),
        )
        self.output("\nRunning...")
        self._save_experiment(self.runner.run_angle_step(cfg), "angle_step_results")

    def run_size_experiment(self):
        self.output("\n=== Experiment: effect of n and weight range ===")
        count_range = (self._ask_int("n from: "), self._ask_int("n to: "), self._ask_int("n step: "))
        cfg = SizeExperimentConfig(
            count_range=count_range,
            weight_ranges=self._ask_weight_ranges(
                "wMin wMax pairs separated by ';' (e.g. 1 3; 3 5; 5 10): "
            ),
            patience=self._ask_int("Patience: "),
            angle_step=self._ask_float("Angle step (rad): "),
            repetitions=self._ask_int("Tasks per combination: "),
        )
        self.output("\nRunning...")
        self._save_experiment(self.runner.run_size(cfg), "size_results")

    def _save_experiment(self, result: ExperimentResult, default_dir: str):
        out_dir = self._ask(f"Output folder (e.g. {default_dir}): ") or default_dir
        out_dir = ensure_directory(Path(out_dir))
        self.output("\nSaving results...")

        paths = ExperimentReport(result).generate_all_reports(str(out_dir))
        fig = ExperimentVisualizer(result).create_experiment_plot(
            output_path=str(out_dir / f"{result.name}_chart.png")
        )
        plt.close(fig)

        self.output(f"Done. {len(paths) + 1} files in folder: {out_dir}")
