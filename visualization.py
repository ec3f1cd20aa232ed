"""
visualization.py - Visualization and Plotting Module
=====================================================
Plots a task with both partitions drawn on it, and charts of experiment
averages.
"""

import logging
from typing import Optional

import matplotlib.pyplot as plt
import matplotlib.patches as patches
import numpy as np
import pandas as pd
import seaborn as sns

from config import Config
from experiments import ExperimentResult
from models import PartitionComparison, WeightedPointSet
from sector_geometry import (
    QUARTER_TURN, REGION_COUNT, direction_angles, quadrant_bin_indices, sector_indices
)


logger = logging.getLogger(__name__)

# Set style
plt.style.use('seaborn-v0_8-darkgrid')
sns.set_palette("husl")


class PartitionVisualizer:
    """Draws a task with the Greedy and Aggregate partitions side by side."""

    def __init__(self, point_set: WeightedPointSet):
        """Initialize visualizer."""
        self.point_set = point_set

        self.config = Config.VISUALIZATION
        self.colors = self.config['colors']
        self.figure_size = self.config['figure_size']
        self.dpi = self.config['dpi']

        logger.info(f"Initialized visualizer for task with {point_set.count} points")

    def create_partition_plot(self, comparison: PartitionComparison,
                              output_path: Optional[str] = None,
                              show: bool = False) -> plt.Figure:
        """Create the two-panel partition figure."""
        logger.info("Creating partition visualization")

        fig, (ax_greedy, ax_aggregate) = plt.subplots(1, 2, figsize=self.figure_size)

        self._plot_greedy(ax_greedy, comparison)
        self._plot_aggregate(ax_aggregate, comparison)

        fig.suptitle(f'Quadrant Balancing: n={self.point_set.count}',
                     fontsize=self.config['font_size']['title'], fontweight='bold')
        fig.tight_layout()

        if output_path:
            fig.savefig(output_path, dpi=self.dpi, bbox_inches='tight')
            logger.info(f"Visualization saved to {output_path}")

        if show:
            plt.show()

        return fig

    def _plot_greedy(self, ax, comparison: PartitionComparison):
        """Points coloured by quadrant with the two split lines."""
        result = comparison.exhaustive
        ax.set_title(f'Greedy (D={result.imbalance:.3f})',
                     fontsize=12, fontweight='bold')

        bins = quadrant_bin_indices(self.point_set.xs, self.point_set.ys,
                                    result.split_x, result.split_y)
        self._scatter_regions(ax, bins)

        ax.axvline(result.split_x, color='black', linewidth=1.5)
        ax.axhline(result.split_y, color='black', linewidth=1.5)
        self._finish_axes(ax)

    def _plot_aggregate(self, ax, comparison: PartitionComparison):
        """Points coloured by sector with the rays bounding the sectors."""
        result = comparison.rotating
        ax.set_title(f'Aggregate (D={result.imbalance:.3f}, '
                     f'theta={result.angle_offset:.3f})',
                     fontsize=12, fontweight='bold')

        centroid = result.centroid or self.point_set.centroid()
        directions = direction_angles(self.point_set.xs, self.point_set.ys, centroid)
        sectors = sector_indices(directions, result.angle_offset)
        self._scatter_regions(ax, sectors)

        # Rays long enough to leave the disk from any centroid inside it
        ray = 2.5 * self.point_set.radius
        for k in range(REGION_COUNT):
            angle = result.angle_offset + k * QUARTER_TURN
            ax.plot([centroid.x, centroid.x + ray * np.cos(angle)],
                    [centroid.y, centroid.y + ray * np.sin(angle)],
                    color='black', linewidth=1.5)
        ax.plot(centroid.x, centroid.y, marker='x', markersize=10,
                color=self.colors['centroid'])
        self._finish_axes(ax)

    def _scatter_regions(self, ax, regions: np.ndarray):
        weights = self.point_set.weight_array
        sizes = self.config['point_scale'] * (1 + weights / max(weights.max(), 1e-12) * 4)
        for region in range(REGION_COUNT):
            mask = regions == region
            if not mask.any():
                continue
            ax.scatter(self.point_set.xs[mask], self.point_set.ys[mask], s=sizes[mask],
                       color=self.colors['bins'][region], alpha=self.config['point_alpha'],
                       label=f'Region {region} (w={weights[mask].sum():.2f})')
        ax.legend(loc='upper right', fontsize=self.config['font_size']['annotation'])

    def _finish_axes(self, ax):
        radius = self.point_set.radius
        ax.add_patch(patches.Circle((0, 0), radius, fill=False,
                                    edgecolor=self.colors['disk'], linestyle='--'))
        margin = 0.1 * radius
        extent = max(radius, np.abs(self.point_set.xs).max(), np.abs(self.point_set.ys).max())
        ax.set_xlim(-extent - margin, extent + margin)
        ax.set_ylim(-extent - margin, extent + margin)
        ax.set_aspect('equal')
        ax.grid(True, alpha=self.config['grid_alpha'])
        ax.set_xlabel('x', fontsize=self.config['font_size']['label'])
        ax.set_ylabel('y', fontsize=self.config['font_size']['label'])


class ExperimentVisualizer:
    """Charts mean imbalance and mean running time per parameter value."""

    def __init__(self, result: ExperimentResult):
        self.result = result
        self.config = Config.VISUALIZATION
        self.dpi = self.config['dpi']
        self.algorithm_colors = self.config['colors']['algorithms']

    def _long_frame(self) -> pd.DataFrame:
        """Summary reshaped to one row per (parameter value, algorithm, metric)."""
        summary = self.result.summary.copy()
        if self.result.name == 'size':
            summary['weight_range'] = [
                f"{lo:g}-{hi:g}" for lo, hi in zip(summary['weight_min'], summary['weight_max'])
            ]

        frames = []
        for algorithm, suffix in (('Greedy', 'exhaustive'), ('Aggregate', 'rotating')):
            part = summary.copy()
            part['algorithm'] = algorithm
            part['imbalance'] = summary[f'imbalance_{suffix}']
            part['time'] = summary[f'time_{suffix}']
            frames.append(part)
        return pd.concat(frames, ignore_index=True)

    def create_experiment_plot(self, output_path: Optional[str] = None,
                               show: bool = False) -> plt.Figure:
        """Imbalance and time against the swept parameter."""
        logger.info(f"Creating chart for '{self.result.name}' experiment")

        data = self._long_frame()
        x = 'count' if self.result.name == 'size' else self.result.parameters[0]
        style = 'weight_range' if self.result.name == 'size' else None

        fig, (ax_quality, ax_time) = plt.subplots(1, 2, figsize=self.config['figure_size'])

        sns.lineplot(data=data, x=x, y='imbalance', hue='algorithm', style=style,
                     palette=self.algorithm_colors, marker='o', ax=ax_quality)
        ax_quality.set_title('Mean imbalance D', fontsize=12, fontweight='bold')
        ax_quality.set_xlabel(x)

        sns.lineplot(data=data, x=x, y='time', hue='algorithm', style=style,
                     palette=self.algorithm_colors, marker='o', ax=ax_time)
        ax_time.set_title('Mean running time (s)', fontsize=12, fontweight='bold')
        ax_time.set_xlabel(x)

        if self.result.name == 'angle_step':
            # Finer steps are smaller values; read the axis right to left
            ax_quality.invert_xaxis()
            ax_time.invert_xaxis()

        fig.suptitle(f'Experiment: {self.result.name}',
                     fontsize=self.config['font_size']['title'], fontweight='bold')
        fig.tight_layout()

        if output_path:
            fig.savefig(output_path, dpi=self.dpi, bbox_inches='tight')
            logger.info(f"Experiment chart saved to {output_path}")

        if show:
            plt.show()

        return fig
