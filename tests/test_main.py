import pytest

import main
from fieldsim.site_config import ConfigValidationError


def test_show_config_applies_scenario(capsys):
    main.main(['show_config', '--scenario', 'drought'])
    out = capsys.readouterr().out
    assert 'irrigation_pulse_vwc: 0.0' in out


def test_sim_run_writes_csv(tmp_path, monkeypatch):
    monkeypatch.setattr(main, 'ROOT', tmp_path)
    csv_out = tmp_path / 'out' / 'run.csv'
    main.main(['sim_run', '--days', '0.05', '--step', '30', '--seed', '3', '--csv_out', str(csv_out)])
    assert csv_out.exists()
    assert (tmp_path / 'logs').is_dir()


@pytest.mark.parametrize('flag', ['--step', '--days'])
def test_zero_override_is_rejected(flag):
    args = main.parse_args(['show_config', flag, '0'])
    with pytest.raises(ConfigValidationError):
        main._build_config(args)
