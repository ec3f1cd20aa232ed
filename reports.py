"""
reports.py - Report Generation Module
======================================
Console summaries of tasks and solutions, and experiment reports in
text, JSON, HTML and CSV formats.
"""

import csv
import json
import logging
import math
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np
from jinja2 import Template

from config import Config
from experiments import ExperimentResult
from models import PartitionComparison, WeightedPointSet
from utils import calculate_statistics, ensure_directory, safe_divide


logger = logging.getLogger(__name__)


CSV_COLUMNS = [
    'experiment', 'count', 'patience', 'angle_step', 'weight_min', 'weight_max',
    'repetition', 'time_exhaustive', 'imbalance_exhaustive',
    'time_rotating', 'imbalance_rotating', 'steps_evaluated'
]

PARAMETER_LABELS = {
    'patience': 'Patience',
    'angle_step': 'Angle step (rad)',
    'count': 'n',
    'weight_min': 'w min',
    'weight_max': 'w max',
}


def format_point_set(point_set: WeightedPointSet) -> str:
    """Human-readable listing of a task."""
    lines = [f"n = {point_set.count}, R = {point_set.radius:.2f}"]
    for i, (point, weight) in enumerate(zip(point_set.points, point_set.weights), 1):
        lines.append(f"Point {i}: (x={point.x:.2f}, y={point.y:.2f}), w={weight:.2f}")
    return "\n".join(lines)


def format_comparison(comparison: PartitionComparison) -> str:
    """Human-readable summary of both solutions."""
    exhaustive = comparison.exhaustive
    rotating = comparison.rotating
    lines = [
        f"Greedy:    x={exhaustive.split_x:.2f}, y={exhaustive.split_y:.2f}, "
        f"D={exhaustive.imbalance:.4f}",
        f"Aggregate: theta={rotating.angle_offset:.4f}, D={rotating.imbalance:.4f} "
        f"(patience={comparison.patience}, angle step={comparison.angle_step:.4f}, "
        f"{rotating.steps_evaluated}/{rotating.step_count} offsets)",
        f"Time:      greedy {comparison.exhaustive_time:.4f}s, "
        f"aggregate {comparison.rotating_time:.4f}s",
    ]
    return "\n".join(lines)


class ExperimentReport:
    """Generates reports for one experiment sweep."""

    def __init__(self, result: ExperimentResult):
        """Initialize report generator."""
        self.result = result
        self.config = Config.REPORTING
        self.summary = result.summary

        self.report_data = self._prepare_report_data()

        logger.info(f"Initialized ExperimentReport for '{result.name}' "
                    f"({len(result.records)} records)")

    def _prepare_report_data(self) -> Dict:
        """Prepare data for report generation."""
        places = self.config['decimal_places']
        records = self.result.records

        time_stats_exhaustive = calculate_statistics([r.time_exhaustive for r in records])
        time_stats_rotating = calculate_statistics([r.time_rotating for r in records])
        gaps = [r.imbalance_rotating - r.imbalance_exhaustive for r in records]
        gap_stats = calculate_statistics(gaps)

        rows = []
        for row in self.summary.to_dict(orient='records'):
            rows.append({k: self._round(v, places) for k, v in row.items()})

        return {
            'timestamp': datetime.now().strftime(self.config['date_format']),
            'experiment': self.result.name,
            'parameters': self.result.parameters,
            'parameter_labels': [PARAMETER_LABELS.get(p, p) for p in self.result.parameters],
            'tasks': len(records),
            'mean_time_exhaustive': self._round(time_stats_exhaustive['mean'], places),
            'mean_time_rotating': self._round(time_stats_rotating['mean'], places),
            'mean_imbalance_gap': self._round(gap_stats['mean'], places),
            'max_imbalance_gap': self._round(gap_stats['max'], places),
            'rotating_win_rate': round(
                safe_divide(sum(1 for g in gaps if g <= 0), len(gaps)) * 100, 1
            ),
            'summary_rows': rows,
            'observations': self._generate_observations(),
        }

    @staticmethod
    def _round(value: Any, places: int) -> Any:
        if isinstance(value, (float, np.floating)):
            return round(float(value), places)
        if isinstance(value, np.integer):
            return int(value)
        return value

    def generate_text_report(self, output_path: Optional[str] = None) -> str:
        """Generate text report."""
        logger.info("Generating text report")
        data = self.report_data

        lines = []
        lines.append("=" * 80)
        lines.append(f"QUADRANT BALANCING EXPERIMENT REPORT: {data['experiment'].upper()}")
        lines.append("=" * 80)
        lines.append("")
        lines.append(f"Report Generated: {data['timestamp']}")
        lines.append(f"Tasks Solved: {data['tasks']}")
        lines.append("")

        lines.append("OVERALL")
        lines.append("-" * 40)
        lines.append(f"Mean Greedy Time: {data['mean_time_exhaustive']}s")
        lines.append(f"Mean Aggregate Time: {data['mean_time_rotating']}s")
        lines.append(f"Mean Imbalance Gap (Aggregate - Greedy): {data['mean_imbalance_gap']}")
        lines.append(f"Max Imbalance Gap: {data['max_imbalance_gap']}")
        lines.append(f"Aggregate Matched Greedy: {data['rotating_win_rate']}% of tasks")
        lines.append("")

        lines.append("AVERAGES PER PARAMETER VALUE")
        lines.append("-" * 40)
        header = data['parameter_labels'] + ['D greedy', 'D aggregate', 't greedy', 't aggregate',
                                            'offsets']
        lines.append(" | ".join(f"{h:>14}" for h in header))
        for row in data['summary_rows']:
            values = [row[p] for p in data['parameters']] + [
                row['imbalance_exhaustive'], row['imbalance_rotating'],
                row['time_exhaustive'], row['time_rotating'], row['steps_evaluated']
            ]
            lines.append(" | ".join(f"{v:>14}" for v in values))
        lines.append("")

        lines.append("OBSERVATIONS")
        lines.append("-" * 40)
        for i, note in enumerate(data['observations'], 1):
            lines.append(f"{i}. {note}")

        lines.append("")
        lines.append("=" * 80)

        report_text = "\n".join(lines)

        if output_path:
            with open(output_path, 'w') as f:
                f.write(report_text)
            logger.info(f"Text report saved to {output_path}")

        return report_text

    def generate_json_report(self, output_path: Optional[str] = None) -> Dict:
        """Generate JSON report."""
        logger.info("Generating JSON report")

        json_data = self._clean_for_json(self.report_data)

        if output_path:
            with open(output_path, 'w') as f:
                json.dump(json_data, f, indent=2)
            logger.info(f"JSON report saved to {output_path}")

        return json_data

    def generate_html_report(self, output_path: Optional[str] = None) -> str:
        """Generate HTML report."""
        logger.info("Generating HTML report")

        html_template = """
        <!DOCTYPE html>
        <html>
        <head>
            <title>Quadrant Balancing Experiment - {{ experiment }}</title>
            <style>
                body { font-family: Arial, sans-serif; margin: 40px; background-color: #f5f5f5; }
                .header { background-color: #2c3e50; color: white; padding: 20px; border-radius: 5px; }
                .section { background-color: white; margin: 20px 0; padding: 20px; border-radius: 5px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
                .metric { display: inline-block; margin: 10px 20px; }
                .metric-value { font-size: 24px; font-weight: bold; color: #2c3e50; }
                .metric-label { font-size: 12px; color: #7f8c8d; }
                table { width: 100%; border-collapse: collapse; margin: 20px 0; }
                th { background-color: #34495e; color: white; padding: 10px; text-align: left; }
                td { padding: 8px; border-bottom: 1px solid #ecf0f1; }
                tr:hover { background-color: #f8f9fa; }
            </style>
        </head>
        <body>
            <div class="header">
                <h1>Quadrant Balancing Experiment: {{ experiment }}</h1>
                <p>{{ tasks }} tasks | Generated: {{ timestamp }}</p>
            </div>

            <div class="section">
                <h2>Overall</h2>
                <div class="metric">
                    <div class="metric-value">{{ mean_time_exhaustive }} s</div>
                    <div class="metric-label">Mean Greedy Time</div>
                </div>
                <div class="metric">
                    <div class="metric-value">{{ mean_time_rotating }} s</div>
                    <div class="metric-label">Mean Aggregate Time</div>
                </div>
                <div class="metric">
                    <div class="metric-value">{{ mean_imbalance_gap }}</div>
                    <div class="metric-label">Mean Imbalance Gap</div>
                </div>
                <div class="metric">
                    <div class="metric-value">{{ rotating_win_rate }}%</div>
                    <div class="metric-label">Aggregate Matched Greedy</div>
                </div>
            </div>

            <div class="section">
                <h2>Averages per Parameter Value</h2>
                <table>
                    <thead>
                        <tr>
                            {% for label in parameter_labels %}<th>{{ label }}</th>{% endfor %}
                            <th>D greedy</th>
                            <th>D aggregate</th>
                            <th>t greedy (s)</th>
                            <th>t aggregate (s)</th>
                            <th>Offsets evaluated</th>
                            <th>Tasks</th>
                        </tr>
                    </thead>
                    <tbody>
                        {% for row in summary_rows %}
                        <tr>
                            {% for p in parameters %}<td>{{ row[p] }}</td>{% endfor %}
                            <td>{{ row.imbalance_exhaustive }}</td>
                            <td>{{ row.imbalance_rotating }}</td>
                            <td>{{ row.time_exhaustive }}</td>
                            <td>{{ row.time_rotating }}</td>
                            <td>{{ row.steps_evaluated }}</td>
                            <td>{{ row.tasks }}</td>
                        </tr>
                        {% endfor %}
                    </tbody>
                </table>
            </div>

            <div class="section">
                <h2>Observations</h2>
                <ul>
                    {% for note in observations %}
                    <li>{{ note }}</li>
                    {% endfor %}
                </ul>
            </div>
        </body>
        </html>
        """

        template = Template(html_template)
        html_content = template.render(**self.report_data)

        if output_path:
            with open(output_path, 'w') as f:
                f.write(html_content)
            logger.info(f"HTML report saved to {output_path}")

        return html_content

    def generate_csv_report(self, output_path: Optional[str] = None) -> List[Dict]:
        """Generate CSV with one row per solved task."""
        logger.info("Generating CSV report")

        rows = [record.to_row() for record in self.result.records]

        if output_path:
            with open(output_path, 'w', newline='') as f:
                writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
                writer.writeheader()
                writer.writerows(rows)
            logger.info(f"CSV report saved to {output_path}")

        return rows

    def generate_summary_csv(self, output_path: Optional[str] = None) -> List[Dict]:
        """Generate CSV with the per-parameter averages."""
        rows = self.summary.to_dict(orient='records')

        if output_path:
            with open(output_path, 'w', newline='') as f:
                writer = csv.DictWriter(f, fieldnames=list(self.summary.columns))
                writer.writeheader()
                writer.writerows(rows)
            logger.info(f"Summary CSV saved to {output_path}")

        return rows

    def generate_all_reports(self, output_dir: str) -> Dict[str, Path]:
        """Generate all report formats."""
        output_dir = ensure_directory(output_dir)

        base_name = f"{self.result.name}_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
        paths = {
            'txt': output_dir / f"{base_name}.txt",
            'json': output_dir / f"{base_name}.json",
            'html': output_dir / f"{base_name}.html",
            'csv': output_dir / f"{base_name}.csv",
            'summary_csv': output_dir / f"{base_name}_summary.csv",
        }

        self.generate_text_report(paths['txt'])
        self.generate_json_report(paths['json'])
        self.generate_html_report(paths['html'])
        self.generate_csv_report(paths['csv'])
        self.generate_summary_csv(paths['summary_csv'])

        logger.info(f"All reports generated in {output_dir}")
        return paths

    def _generate_observations(self) -> List[str]:
        """Short findings derived from the averages."""
        observations = []
        summary = self.summary
        if summary.empty:
            return ["No tasks were solved."]

        parameters = self.result.parameters
        best = summary.loc[summary['imbalance_rotating'].idxmin()]
        setting = ", ".join(f"{p}={best[p]:g}" for p in parameters)
        observations.append(
            f"Lowest mean Aggregate imbalance {best['imbalance_rotating']:.4f} at {setting}."
        )

        mean_exhaustive = float(summary['time_exhaustive'].mean())
        mean_rotating = float(summary['time_rotating'].mean())
        if mean_rotating > 0:
            observations.append(
                f"Mean Greedy/Aggregate time ratio: "
                f"{safe_divide(mean_exhaustive, mean_rotating):.1f}."
            )

        steps = summary['steps_evaluated']
        observations.append(
            f"Aggregate evaluated {steps.min():.1f} to {steps.max():.1f} offsets per task on average."
        )

        worst_gap = float(summary['imbalance_gap'].max())
        if worst_gap > 0:
            worst = summary.loc[summary['imbalance_gap'].idxmax()]
            setting = ", ".join(f"{p}={worst[p]:g}" for p in parameters)
            observations.append(
                f"Largest mean quality loss of Aggregate vs Greedy: {worst_gap:.4f} at {setting}."
            )
        else:
            observations.append("Aggregate matched Greedy on every parameter value.")

        return observations

    def _clean_for_json(self, data: Any) -> Any:
        """Clean data for JSON serialization."""
        if isinstance(data, dict):
            return {k: self._clean_for_json(v) for k, v in data.items()}
        elif isinstance(data, (list, tuple)):
            return [self._clean_for_json(v) for v in data]
        elif isinstance(data, np.integer):
            return int(data)
        elif isinstance(data, (float, np.floating)):
            value = float(data)
            return value if math.isfinite(value) else None
        elif isinstance(data, (int, str, bool, type(None))):
            return data
        else:
            return str(data)
