import json
import math

import pytest

from config import Config


def test_get_by_dotted_key():
    assert Config.get('SOLVERS.rotating.patience') == 5
    assert Config.get('SOLVERS.rotating.angle_step') == math.pi / 8
    assert Config.get('SOLVERS.missing.key', 'fallback') == 'fallback'
    assert Config.get('NOT_A_SECTION') is None


def test_set_by_dotted_key():
    Config.set('SOLVERS.rotating.patience', 9)
    assert Config.SOLVERS['rotating']['patience'] == 9

    with pytest.raises(KeyError):
        Config.set('NOPE.value', 1)


def test_to_dict_lists_sections():
    sections = Config.to_dict()
    for name in ('GENERATION', 'SOLVERS', 'EXPERIMENTS', 'VISUALIZATION', 'REPORTING', 'LOGGING'):
        assert name in sections
    assert 'get' not in sections


def test_from_file_merges_nested_sections(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({
        "SOLVERS": {"rotating": {"patience": 2}},
        "UNKNOWN": {"ignored": True},
    }))

    Config.from_file(path)

    assert Config.SOLVERS['rotating']['patience'] == 2
    assert Config.SOLVERS['rotating']['angle_step'] == math.pi / 8
    assert Config.SOLVERS['exhaustive']['name'] == 'Greedy'
    assert not hasattr(Config, 'UNKNOWN')


def test_save_and_reload(tmp_path):
    path = tmp_path / "saved.json"
    Config.set('EXPERIMENTS.repetitions', 4)
    Config.save_to_file(path)

    saved = json.loads(path.read_text())
    assert saved['EXPERIMENTS']['repetitions'] == 4

    Config.set('EXPERIMENTS.repetitions', 10)
    Config.from_file(path)
    assert Config.EXPERIMENTS['repetitions'] == 4


def test_unsupported_format(tmp_path):
    path = tmp_path / "settings.toml"
    path.write_text("")
    with pytest.raises(ValueError):
        Config.from_file(path)
    with pytest.raises(ValueError):
        Config.save_to_file(tmp_path / "out.toml")
