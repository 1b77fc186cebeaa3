import pytest

from NuEvtGen.utilities.config import get_config, merge_config


def test_merge_config():
    default = {'a': 1, 'b': {'c': 2, 'd': 3}}
    user = {'b': {'c': 5}, 'e': 6}
    merged = merge_config(user, default)
    assert merged == {'a': 1, 'b': {'c': 5, 'd': 3}, 'e': 6}


def test_default_config(monkeypatch):
    monkeypatch.delenv("NUEVTGEN_EVGL", raising=False)
    cfg = get_config()
    assert cfg['event_generator_list'] == 'Default'
    assert cfg['splines']['min_knots'] == 30
    assert cfg['splines']['knots_per_decade'] == 15
    assert isinstance(cfg['seed'], int)
    assert [entry['name'] for entry in cfg['event_generator_lists']['Default']] == \
        ['RES-CC', 'RES-NC', 'DIS-CC', 'DIS-NC', 'DFR-CC', 'DFR-NC']


def test_user_config(tmp_path, monkeypatch):
    monkeypatch.delenv("NUEVTGEN_EVGL", raising=False)
    config_file = tmp_path / "config.yaml"
    config_file.write_text("seed: 7\nsplines:\n  min_knots: 12\n")
    cfg = get_config(str(config_file))
    assert cfg['seed'] == 7
    assert cfg['splines']['min_knots'] == 12
    assert cfg['splines']['knots_per_decade'] == 15

    cfg = get_config(str(config_file), user_config={'event_generator_list': 'DIS'})
    assert cfg['event_generator_list'] == 'DIS'

    with pytest.raises(FileNotFoundError):
        get_config(str(tmp_path / "missing.yaml"))


def test_event_generator_list_override(monkeypatch):
    monkeypatch.setenv("NUEVTGEN_EVGL", "HighEnergy")
    assert get_config()['event_generator_list'] == 'HighEnergy'
