import logging
import numpy as np
import pytest

from NuEvtGen.utilities import units, pdg
from NuEvtGen.utilities.config import get_config
from NuEvtGen.utilities.exceptions import ConfigurationError, NoViableChannelError, OutOfDomainError
from NuEvtGen.Interaction.interaction import InitialState, InteractionCurrent, ProcessType
from NuEvtGen.EvtGen.evg_driver import (EventGeneratorDriver, DriverState, select_channel_from_draw,
                                        n_scattering_centers)
from NuEvtGen.EvtGen.path_length_list import PathLengthList
from NuEvtGen.EvtGen.xsec_spline_list import XSecSplineList
from NuEvtGen.XSecModels.quark_parton_dis import QuarkPartonDIS

iron = 1000260560


def _path_lengths(target=iron, value=1e27):
    pl = PathLengthList()
    pl.set_path_length(target, value)
    return pl


@pytest.fixture(scope="module")
def cfg():
    return get_config(user_config={'seed': 1234})


def test_select_channel_from_draw():
    weights = [1., 0., 2.]
    assert select_channel_from_draw(weights, 0.) == 0
    assert select_channel_from_draw(weights, 0.5) == 0
    # the zero weight entry has no width
    assert select_channel_from_draw(weights, 1.) == 2
    assert select_channel_from_draw(weights, 2.99) == 2
    with pytest.raises(ValueError):
        select_channel_from_draw(weights, 3.)
    with pytest.raises(NoViableChannelError):
        select_channel_from_draw([0., 0.], 0.)


def test_unconfigured_driver(cfg):
    driver = EventGeneratorDriver(cfg=cfg, event_generator_list='DIS')
    assert driver.state == DriverState.UNCONFIGURED
    with pytest.raises(ConfigurationError):
        driver.select_channel(_path_lengths(), 5 * units.GeV)
    with pytest.raises(ConfigurationError):
        driver.create_splines()


def test_configure(cfg):
    driver = EventGeneratorDriver(cfg=cfg)
    driver.configure(InitialState(14, iron))
    assert driver.state == DriverState.CONFIGURED
    assert driver.initial_state == InitialState(14, iron)
    # RES, DIS and DFR with CC and NC on protons and neutrons
    assert len(driver.channels) == 12
    assert {c.hit_nucleon for c in driver.channels} == {pdg.proton, pdg.neutron}
    assert {c.process for c in driver.channels} == {ProcessType.RES, ProcessType.DIS, ProcessType.DFR}

    # configuring again replaces the binding
    driver.configure((-12, 1000010010))
    assert driver.initial_state.probe == -12
    assert len(driver.channels) == 6
    assert all(c.hit_nucleon == pdg.proton for c in driver.channels)


def test_unknown_event_generator_list(cfg):
    with pytest.raises(ConfigurationError):
        EventGeneratorDriver(cfg=cfg, event_generator_list='DoesNotExist')


def test_create_splines(cfg):
    splines = XSecSplineList.from_config(cfg)
    driver = EventGeneratorDriver(splines, cfg, event_generator_list='DIS')
    driver.configure((14, iron))
    failed = driver.create_splines()
    assert failed == []
    assert driver.state == DriverState.SPLINES_READY
    assert len(splines) == 4
    for channel in driver.channels:
        spline = splines.get_spline(channel)
        assert spline.n_knots == 45
        assert spline.e_min == 0.1 * units.GeV
        assert spline.e_max == 100 * units.GeV

    # a second driver sharing the list does not integrate again
    driver2 = EventGeneratorDriver(splines, cfg, event_generator_list='DIS')
    driver2.configure((14, iron))
    driver2.create_splines()
    assert splines.n_builds == 4


def test_create_splines_max_energy(cfg):
    splines = XSecSplineList.from_config(cfg)
    driver = EventGeneratorDriver(splines, cfg, event_generator_list='DIS')
    driver.configure((14, iron))
    driver.create_splines(n_knots=10, max_energy=10 * units.GeV)
    for channel in driver.channels:
        assert splines.get_spline(channel).e_max == 10 * units.GeV
        assert splines.get_spline(channel).n_knots == 10
    assert driver.valid_energy_range() == (0.1 * units.GeV, 10 * units.GeV)
    with pytest.raises(OutOfDomainError):
        driver.select_channel(_path_lengths(), 20 * units.GeV)


def test_range_of_existing_splines(cfg, tmp_path):
    splines = XSecSplineList.from_config(cfg)
    driver = EventGeneratorDriver(splines, cfg, event_generator_list='DIS')
    driver.configure((14, iron))
    driver.create_splines(n_knots=10, max_energy=10 * units.GeV)

    # a second driver sharing the list is limited to the domain of the splines
    driver2 = EventGeneratorDriver(splines, cfg, event_generator_list='DIS')
    driver2.configure((14, iron))
    assert driver2.valid_energy_range() == (0.1 * units.GeV, 10 * units.GeV)
    with pytest.raises(OutOfDomainError):
        driver2.select_channel(_path_lengths(), 50 * units.GeV)
    assert driver2.select_channel(_path_lengths(), 5 * units.GeV) in driver2.channels
    for channel in driver2.channels:
        assert driver2.xsec(channel, 50 * units.GeV) == 0

    # configuring again drops the maximum energy but not the spline domains
    driver.configure((14, iron))
    assert driver.valid_energy_range() == (0.1 * units.GeV, 10 * units.GeV)

    # same for splines loaded from a file
    filename = str(tmp_path / "splines.xml")
    splines.save_as_xml(filename)
    loaded = XSecSplineList.from_config(cfg)
    loaded.load_from_xml(filename)
    driver3 = EventGeneratorDriver(loaded, cfg, event_generator_list='DIS')
    driver3.configure((14, iron))
    assert driver3.valid_energy_range() == (0.1 * units.GeV, 10 * units.GeV)
    with pytest.raises(OutOfDomainError):
        driver3.select_channel(_path_lengths(), 50 * units.GeV)
    assert loaded.n_builds == 0


def test_create_splines_partial_failure(cfg, monkeypatch, caplog):
    splines = XSecSplineList.from_config(cfg)
    driver = EventGeneratorDriver(splines, cfg, event_generator_list='DIS')
    driver.configure((14, iron))
    bad = driver.channels[0]
    integrate = QuarkPartonDIS.integrate

    def failing_integrate(self, channel, energy):
        if channel == bad:
            raise ArithmeticError("integral does not converge")
        return integrate(self, channel, energy)

    monkeypatch.setattr(QuarkPartonDIS, "integrate", failing_integrate)
    driver_logger = logging.getLogger('NuEvtGen.evg_driver')
    driver_logger.addHandler(caplog.handler)
    try:
        failed = driver.create_splines()
    finally:
        driver_logger.removeHandler(caplog.handler)

    assert failed == [bad]
    assert driver.state == DriverState.SPLINES_READY
    assert any(record.levelno == logging.WARNING and bad.key in record.getMessage()
               for record in caplog.records)
    # the other channels are built, nothing is stored for the failed one
    assert len(splines) == 3
    assert not splines.spline_exists(bad)
    assert all(splines.spline_exists(c) for c in driver.channels if c != bad)

    # the failed channel has zero weight in the selection
    energy = 5 * units.GeV
    assert driver.xsec(bad, energy) == 0
    rnd = np.random.default_rng(7)
    selected = {driver.select_channel(_path_lengths(), energy, rnd) for i in range(500)}
    assert bad not in selected
    assert selected == set(driver.channels) - {bad}


def test_zero_path_lengths(cfg):
    splines = XSecSplineList.from_config(cfg)
    driver = EventGeneratorDriver(splines, cfg, event_generator_list='DIS')
    driver.configure((14, iron))
    with pytest.raises(NoViableChannelError):
        driver.select_channel(PathLengthList([iron]), 5 * units.GeV)
    # checked before any spline is needed
    assert len(splines) == 0
    # no path length through the configured target
    with pytest.raises(NoViableChannelError):
        driver.select_channel(_path_lengths(1000080160), 5 * units.GeV)


def test_energy_outside_of_validity(cfg):
    driver = EventGeneratorDriver(cfg=cfg, event_generator_list='DIS')
    driver.configure((14, iron))
    with pytest.raises(OutOfDomainError):
        driver.select_channel(_path_lengths(), 1e3 * units.GeV)


def test_no_viable_channel_below_threshold(cfg):
    driver = EventGeneratorDriver(cfg=cfg, event_generator_list='DIS')
    driver.configure((14, iron))
    # the invariant mass cut removes the full DIS phase space at 0.1 GeV
    with pytest.raises(NoViableChannelError):
        driver.select_channel(_path_lengths(), 0.1 * units.GeV)


def test_select_builds_missing_splines(cfg):
    splines = XSecSplineList.from_config(cfg)
    driver = EventGeneratorDriver(splines, cfg, event_generator_list='DIS')
    driver.configure((14, iron))
    channel = driver.select_channel(_path_lengths(), 5 * units.GeV)
    assert channel in driver.channels
    assert driver.state == DriverState.CONFIGURED
    assert len(splines) == 4


def test_selection_is_deterministic(cfg):
    driver = EventGeneratorDriver(cfg=cfg, event_generator_list='DIS')
    driver.configure((14, iron))
    driver.create_splines()
    pl = _path_lengths()
    rnd1 = np.random.default_rng(42)
    rnd2 = np.random.default_rng(42)
    selected1 = [driver.select_channel(pl, 5 * units.GeV, rnd1) for i in range(50)]
    selected2 = [driver.select_channel(pl, 5 * units.GeV, rnd2) for i in range(50)]
    assert selected1 == selected2
    # the path lengths are not modified
    assert pl == _path_lengths()


def test_selection_frequencies(cfg):
    driver = EventGeneratorDriver(cfg=cfg, event_generator_list='DIS')
    driver.configure((14, iron))
    driver.create_splines()
    energy = 5 * units.GeV
    weights = np.array([driver.xsec(c, energy) * n_scattering_centers(c) for c in driver.channels])
    expected = weights / np.sum(weights)
    np.testing.assert_allclose(np.sum(weights), driver.xsec_sum(energy))

    rnd = np.random.default_rng(2024)
    n = 4000
    counts = {c: 0 for c in driver.channels}
    for i in range(n):
        counts[driver.select_channel(_path_lengths(), energy, rnd)] += 1
    fractions = np.array([counts[c] / n for c in driver.channels])
    np.testing.assert_allclose(fractions, expected, atol=0.04)


def test_cross_sections(cfg):
    driver = EventGeneratorDriver(cfg=cfg, event_generator_list='DIS')
    driver.configure((14, iron))
    energy = 5 * units.GeV
    cc = [c for c in driver.channels if c.current == InteractionCurrent.CC]
    nc = [c for c in driver.channels if c.current == InteractionCurrent.NC]
    for channel in cc + nc:
        assert driver.xsec(channel, energy) > 0
    assert sum(driver.xsec(c, energy) for c in nc) < sum(driver.xsec(c, energy) for c in cc)


def test_n_scattering_centers(cfg):
    driver = EventGeneratorDriver(cfg=cfg, event_generator_list='DIS')
    driver.configure((14, iron))
    for channel in driver.channels:
        if channel.hit_nucleon == pdg.proton:
            assert n_scattering_centers(channel) == 26
        else:
            assert n_scattering_centers(channel) == 30

    driver = EventGeneratorDriver(cfg=cfg, event_generator_list='HighEnergy')
    driver.configure((14, iron))
    assert len(driver.channels) == 2
    for channel in driver.channels:
        assert channel.hit_nucleon == 0
        assert n_scattering_centers(channel) == 56


def test_high_energy_list(cfg):
    driver = EventGeneratorDriver(cfg=cfg, event_generator_list='HighEnergy')
    driver.configure((14, iron))
    driver.create_splines()
    assert driver.valid_energy_range() == (1e4 * units.GeV, 1e12 * units.GeV)
    xsec = driver.xsec_sum(1e6 * units.GeV) / 56
    assert 1e-34 * units.cm2 < xsec < 1e-32 * units.cm2
    channel = driver.select_channel(_path_lengths(), 1e6 * units.GeV)
    assert channel in driver.channels


def test_xsec_sum_spline(cfg):
    driver = EventGeneratorDriver(cfg=cfg, event_generator_list='DIS')
    driver.configure((14, iron))
    spline = driver.create_xsec_sum_spline(n_knots=20)
    assert driver.xsec_sum_spline is spline
    assert spline.n_knots == 20
    energy = spline.energies[10]
    np.testing.assert_allclose(spline(energy), driver.xsec_sum(energy))


def test_event_generator_list_from_environment(monkeypatch):
    monkeypatch.setenv("NUEVTGEN_EVGL", "DIS")
    cfg = get_config()
    assert cfg['event_generator_list'] == 'DIS'
    driver = EventGeneratorDriver(cfg=cfg)
    driver.configure((14, iron))
    assert len(driver.channels) == 4


if __name__ == "__main__":
    test_select_channel_from_draw()
