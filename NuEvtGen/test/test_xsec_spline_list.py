import threading
import time
import numpy as np
import pytest

from NuEvtGen.utilities import units
from NuEvtGen.utilities.exceptions import BuildFailure, NotFoundError, OutOfDomainError
from NuEvtGen.Interaction.interaction import InteractionChannel
from NuEvtGen.EvtGen.xsec_spline_list import XSecSplineList, knot_energies

channel_p = InteractionChannel(14, 1000260560, 2212, 'DIS', 'CC', 'quark_parton_dis')
channel_n = InteractionChannel(14, 1000260560, 2112, 'DIS', 'CC', 'quark_parton_dis')
channel_nubar = InteractionChannel(-14, 1000260560, 2212, 'DIS', 'NC', 'quark_parton_dis')


class LinearIntegrator:
    """ cross section rising linearly with energy, counts its calls """

    def __init__(self, scale=1., delay=0):
        self.scale = scale
        self.delay = delay
        self.n_calls = 0
        self._lock = threading.Lock()

    def integrate(self, channel, energy):
        if self.delay:
            time.sleep(self.delay)
        with self._lock:
            self.n_calls += 1
        return self.scale * 0.7e-38 * units.cm2 * energy / units.GeV


class FailingIntegrator:

    def __init__(self, value=None):
        self.value = value

    def integrate(self, channel, energy):
        if self.value is None:
            raise ArithmeticError("integral does not converge")
        return self.value


def test_default_knot_policy():
    splines = XSecSplineList()
    assert splines.n_knots_default(0.1 * units.GeV, 100 * units.GeV) == 45
    assert splines.n_knots_default(1 * units.GeV, 10 * units.GeV) == 30
    assert XSecSplineList(min_knots=10, knots_per_decade=2).n_knots_default(1 * units.GeV, 10 * units.GeV) == 10


def test_knot_energies():
    e_min, e_max = 0.1 * units.GeV, 100 * units.GeV
    energies = knot_energies(e_min, e_max, 45)
    assert energies[0] == e_min
    assert energies[-1] == e_max
    np.testing.assert_allclose(np.diff(np.log10(energies)), 3. / 44)
    energies = knot_energies(e_min, e_max, 11, log_spacing=False)
    np.testing.assert_allclose(np.diff(energies), (e_max - e_min) / 10)
    with pytest.raises(ValueError):
        knot_energies(e_min, e_max, 1)
    with pytest.raises(ValueError):
        knot_energies(e_max, e_min, 10)


def test_get_or_build_builds_once():
    splines = XSecSplineList()
    integrator = LinearIntegrator()
    spline = splines.get_or_build(channel_p, integrator, 0.1 * units.GeV, 100 * units.GeV)
    assert spline.n_knots == 45
    assert integrator.n_calls == 45
    assert splines.n_builds == 1
    assert splines.spline_exists(channel_p)
    assert channel_p in splines
    assert channel_n not in splines
    assert len(splines) == 1

    # a cached spline is returned as it is
    spline2 = splines.get_or_build(channel_p, integrator, 1 * units.GeV, 10 * units.GeV, n_knots=5)
    assert spline2 is spline
    assert integrator.n_calls == 45
    assert splines.n_builds == 1


def test_explicit_number_of_knots():
    splines = XSecSplineList()
    spline = splines.get_or_build(channel_p, LinearIntegrator(), 1 * units.GeV, 10 * units.GeV, n_knots=7)
    assert spline.n_knots == 7
    spline = splines.get_or_build(channel_n, LinearIntegrator(), 1 * units.GeV, 10 * units.GeV, n_knots=0)
    assert spline.n_knots == 30
    with pytest.raises(ValueError):
        splines.get_or_build(channel_nubar, LinearIntegrator(), 1 * units.GeV, 10 * units.GeV, n_knots=1)
    assert channel_nubar not in splines


def test_evaluate():
    splines = XSecSplineList()
    with pytest.raises(NotFoundError):
        splines.evaluate(channel_p, 1 * units.GeV)
    # NotFoundError is a KeyError
    with pytest.raises(KeyError):
        splines.get_spline(channel_p)

    spline = splines.get_or_build(channel_p, LinearIntegrator(), 0.1 * units.GeV, 100 * units.GeV)
    for energy, value in zip(spline.energies, spline.values):
        assert splines.evaluate(channel_p, energy) == value
    np.testing.assert_allclose(splines.evaluate(channel_p, 3.3 * units.GeV), 3.3 * 0.7e-38 * units.cm2, rtol=1e-3)
    with pytest.raises(OutOfDomainError):
        splines.evaluate(channel_p, 200 * units.GeV)


@pytest.mark.parametrize("integrator", [FailingIntegrator(), FailingIntegrator(np.nan),
                                        FailingIntegrator(-1e-42), FailingIntegrator(np.inf)])
def test_build_failure(integrator):
    splines = XSecSplineList()
    with pytest.raises(BuildFailure) as e:
        splines.get_or_build(channel_p, integrator, 0.1 * units.GeV, 100 * units.GeV)
    assert e.value.channel == channel_p
    assert channel_p not in splines
    assert splines.n_builds == 0


def test_concurrent_requests_build_once():
    splines = XSecSplineList()
    integrator = LinearIntegrator(delay=0.001)
    results = []

    def request():
        results.append(splines.get_or_build(channel_p, integrator, 0.1 * units.GeV, 100 * units.GeV))

    threads = [threading.Thread(target=request) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(results) == 8
    assert all(result is results[0] for result in results)
    assert splines.n_builds == 1
    assert integrator.n_calls == 45


def test_concurrent_requests_different_channels():
    splines = XSecSplineList()
    integrator = LinearIntegrator(delay=0.001)
    channels = [channel_p, channel_n, channel_nubar]
    threads = [threading.Thread(target=splines.get_or_build,
                                args=(channel, integrator, 1 * units.GeV, 10 * units.GeV))
               for channel in channels * 3]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert splines.n_builds == 3
    assert integrator.n_calls == 3 * 30
    assert splines.channels() == sorted(channels, key=lambda c: c.key)


def test_xml_round_trip(tmp_path):
    filename = str(tmp_path / "splines.xml")
    splines = XSecSplineList()
    splines.get_or_build(channel_p, LinearIntegrator(), 0.1 * units.GeV, 100 * units.GeV)
    splines.get_or_build(channel_nubar, LinearIntegrator(0.37), 1 * units.GeV, 10 * units.GeV, n_knots=12)
    splines.save_as_xml(filename)

    loaded = XSecSplineList()
    assert loaded.load_from_xml(filename) == 2
    assert loaded.channels() == splines.channels()
    for channel in splines.channels():
        assert loaded.get_spline(channel) == splines.get_spline(channel)
        energy = 7.1 * units.GeV
        assert loaded.evaluate(channel, energy) == splines.evaluate(channel, energy)
    assert loaded.n_builds == 0


def test_xml_load_merges(tmp_path):
    filename = str(tmp_path / "splines.xml")
    splines = XSecSplineList()
    splines.get_or_build(channel_p, LinearIntegrator(2.), 1 * units.GeV, 10 * units.GeV)
    splines.save_as_xml(filename)

    other = XSecSplineList()
    other.get_or_build(channel_p, LinearIntegrator(1.), 1 * units.GeV, 10 * units.GeV)
    other.get_or_build(channel_n, LinearIntegrator(1.), 1 * units.GeV, 10 * units.GeV)
    other.load_from_xml(filename)

    assert len(other) == 2
    # the file replaces the in-memory spline, other channels are kept
    assert other.get_spline(channel_p) == splines.get_spline(channel_p)
    np.testing.assert_allclose(other.evaluate(channel_n, 5 * units.GeV), 5 * 0.7e-38 * units.cm2, rtol=1e-6)


def test_xml_errors(tmp_path):
    splines = XSecSplineList()
    with pytest.raises(FileNotFoundError):
        splines.load_from_xml(str(tmp_path / "missing.xml"))
    filename = tmp_path / "wrong.xml"
    filename.write_text("<path_length_list></path_length_list>")
    with pytest.raises(ValueError):
        splines.load_from_xml(str(filename))


def test_reset():
    splines = XSecSplineList()
    splines.get_or_build(channel_p, LinearIntegrator(), 1 * units.GeV, 10 * units.GeV)
    splines.reset()
    assert len(splines) == 0
    assert not splines.spline_exists(channel_p)
    integrator = LinearIntegrator()
    splines.get_or_build(channel_p, integrator, 1 * units.GeV, 10 * units.GeV)
    assert integrator.n_calls == 30


class BlockingIntegrator(LinearIntegrator):
    """ waits for ``release`` at its first call """

    def __init__(self):
        super().__init__()
        self.started = threading.Event()
        self.release = threading.Event()

    def integrate(self, channel, energy):
        self.started.set()
        self.release.wait(timeout=10)
        return super().integrate(channel, energy)


def test_reset_during_build():
    splines = XSecSplineList()
    integrator = BlockingIntegrator()
    results = []

    def request():
        results.append(splines.get_or_build(channel_p, integrator, 1 * units.GeV, 10 * units.GeV))

    first = threading.Thread(target=request)
    first.start()
    assert integrator.started.wait(timeout=10)
    splines.reset()
    second = threading.Thread(target=request)
    second.start()
    time.sleep(0.05)
    integrator.release.set()
    first.join()
    second.join()

    # the second request waits for the running build instead of integrating again
    assert integrator.n_calls == 30
    assert results[0] is results[1]
    assert splines.spline_exists(channel_p)


def test_linear_spacing():
    splines = XSecSplineList(log_spacing=False)
    spline = splines.get_or_build(channel_p, LinearIntegrator(), 1 * units.GeV, 10 * units.GeV, n_knots=10)
    np.testing.assert_allclose(np.diff(spline.energies), 1 * units.GeV)


def test_from_config():
    cfg = {'splines': {'min_knots': 5, 'knots_per_decade': 3, 'log_spacing': False}}
    splines = XSecSplineList.from_config(cfg)
    assert not splines.log_spacing
    assert splines.n_knots_default(1 * units.GeV, 1e3 * units.GeV) == 9


if __name__ == "__main__":
    test_get_or_build_builds_once()
    test_concurrent_requests_build_once()
