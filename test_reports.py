import csv
import json
import math

import pytest

from experiments import ExperimentRunner, PatienceExperimentConfig, SizeExperimentConfig
from partitioners import compare_partitioners
from reports import CSV_COLUMNS, ExperimentReport, format_comparison, format_point_set


@pytest.fixture
def patience_result():
    cfg = PatienceExperimentConfig(count=6, angle_step=math.pi / 8, weight_range=(1.0, 5.0),
                                   patience_values=[1, 4], repetitions=2)
    return ExperimentRunner(seed=21).run_patience(cfg)


def test_format_point_set(unit_square):
    text = format_point_set(unit_square)
    lines = text.splitlines()
    assert lines[0] == "n = 4, R = 1.00"
    assert lines[1] == "Point 1: (x=1.00, y=1.00), w=1.00"
    assert len(lines) == 5


def test_format_comparison(unit_square):
    text = format_comparison(compare_partitioners(unit_square, 2, math.pi / 2))
    assert "Greedy:    x=1.00, y=1.00, D=0.0000" in text
    assert "Aggregate: theta=0.0000, D=0.0000" in text
    assert "patience=2" in text


def test_text_report(patience_result):
    text = ExperimentReport(patience_result).generate_text_report()
    assert "EXPERIMENT REPORT: PATIENCE" in text
    assert "Tasks Solved: 4" in text
    assert "offsets" in text
    assert "OBSERVATIONS" in text


def test_json_report_is_serializable(patience_result, tmp_path):
    path = tmp_path / "report.json"
    data = ExperimentReport(patience_result).generate_json_report(path)

    loaded = json.loads(path.read_text())
    assert loaded == data
    assert loaded['experiment'] == 'patience'
    assert [row['patience'] for row in loaded['summary_rows']] == [1, 4]


def test_html_report(patience_result):
    html = ExperimentReport(patience_result).generate_html_report()
    assert "<title>Quadrant Balancing Experiment - patience</title>" in html
    assert html.count("<tr>") == 3


def test_generate_all_reports(patience_result, tmp_path):
    paths = ExperimentReport(patience_result).generate_all_reports(tmp_path / "reports")

    assert set(paths) == {'txt', 'json', 'html', 'csv', 'summary_csv'}
    for path in paths.values():
        assert path.exists()

    with open(paths['csv'], newline='') as f:
        rows = list(csv.DictReader(f))
    assert list(rows[0].keys()) == CSV_COLUMNS
    assert len(rows) == 4
    assert rows[0]['experiment'] == 'patience'

    with open(paths['summary_csv'], newline='') as f:
        summary = list(csv.DictReader(f))
    assert len(summary) == 2
    assert summary[0]['tasks'] == '2'


def test_observations_for_size_sweep():
    cfg = SizeExperimentConfig(count_range=(4, 6, 2), weight_ranges=[(1.0, 2.0)],
                               patience=1, angle_step=math.pi / 2, repetitions=1)
    report = ExperimentReport(ExperimentRunner(seed=4).run_size(cfg))
    observations = report.report_data['observations']
    assert observations[0].startswith("Lowest mean Aggregate imbalance")
    assert any(note.startswith("Aggregate evaluated") for note in observations)
    assert "count=" in observations[0]
