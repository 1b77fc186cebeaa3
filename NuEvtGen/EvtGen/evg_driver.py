"""
The event generator driver.

For a given initial state (neutrino + target) the driver collects the
interaction channels of all event generators, makes sure that the cross
section spline of every channel exists and selects the channel in which an
interaction happens, weighting the cross sections with the path lengths
through the materials of the geometry.
"""
import logging
import numpy as np
from aenum import Enum

from NuEvtGen.utilities import units, pdg
from NuEvtGen.utilities.config import get_config
from NuEvtGen.utilities.exceptions import (BuildFailure, ConfigurationError, NoViableChannelError,
                                           OutOfDomainError)
from NuEvtGen.Interaction.interaction import InitialState
from NuEvtGen.EvtGen.evg_list import load_event_generator_list
from NuEvtGen.EvtGen.spline import Spline
from NuEvtGen.EvtGen.xsec_spline_list import XSecSplineList, knot_energies

logger = logging.getLogger('NuEvtGen.evg_driver')


class DriverState(Enum):
    UNCONFIGURED = 0
    CONFIGURED = 1
    SPLINES_READY = 2


def select_channel_from_draw(weights, draw):
    """
    index of the entry whose interval of the cumulative weights contains the draw

    Entry i covers [sum(weights[:i]), sum(weights[:i+1])), so entries with zero
    weight are never selected.

    Parameters
    ----------
    weights: array of floats
        non-negative weights
    draw: float
        number in [0, sum(weights))

    Returns
    -------
    index: int
    """
    cumulative = np.cumsum(weights)
    if len(cumulative) == 0 or cumulative[-1] <= 0:
        raise NoViableChannelError("the sum of the selection weights is zero")
    if not 0 <= draw < cumulative[-1]:
        raise ValueError(f"draw {draw} outside of [0, {cumulative[-1]})")
    return int(np.searchsorted(cumulative, draw, side='right'))


def n_scattering_centers(channel):
    """
    number of scattering centers of the channel in its target

    Z for a struck proton, N for a struck neutron and A for nucleus-level channels.
    """
    if pdg.is_proton(channel.hit_nucleon):
        return pdg.ion_z(channel.target)
    if pdg.is_neutron(channel.hit_nucleon):
        return pdg.ion_n(channel.target)
    return pdg.ion_a(channel.target)


class EventGeneratorDriver:

    def __init__(self, spline_list=None, cfg=None, event_generator_list=None, config_file=None):
        """
        Parameters
        ----------
        spline_list: XSecSplineList or None
            the spline cache to use. Several drivers can share one list. If
            None, the driver creates its own list
        cfg: dict or None
            NuEvtGen configuration. If None, it is read with ``get_config(config_file)``
        event_generator_list: string or None
            name of the event generator list, defaults to the list selected in the config
        config_file: string or None
            user configuration file, only used if cfg is None
        """
        if cfg is None:
            cfg = get_config(config_file)
        self._cfg = cfg
        if spline_list is None:
            spline_list = XSecSplineList.from_config(cfg)
        self._spline_list = spline_list
        self._generators = load_event_generator_list(cfg, event_generator_list)
        self._rnd = np.random.default_rng(cfg.get('seed'))
        self._initial_state = None
        self._channels = []
        self._generator_of_channel = {}
        self._failed_channels = set()
        self._max_energy = -1
        self._xsec_sum_spline = None
        self._state = DriverState.UNCONFIGURED

    @property
    def state(self):
        return self._state

    @property
    def initial_state(self):
        return self._initial_state

    @property
    def channels(self):
        """ interaction channels of the configured initial state, in generator order """
        return list(self._channels)

    @property
    def generators(self):
        return list(self._generators)

    @property
    def spline_list(self):
        return self._spline_list

    @property
    def xsec_sum_spline(self):
        return self._xsec_sum_spline

    def configure(self, initial_state):
        """
        binds the driver to an initial state

        Parameters
        ----------
        initial_state: InitialState or tuple (probe, target)
        """
        if not isinstance(initial_state, InitialState):
            initial_state = InitialState(*initial_state)
        self._initial_state = initial_state
        self._channels = []
        self._generator_of_channel = {}
        self._failed_channels = set()
        self._max_energy = -1
        self._xsec_sum_spline = None
        for generator in self._generators:
            for channel in generator.channels(initial_state):
                if channel in self._generator_of_channel:
                    continue
                self._channels.append(channel)
                self._generator_of_channel[channel] = generator
        if not self._channels:
            logger.warning(f"no interaction channel for initial state {initial_state}")
        logger.info(f"configured driver for {initial_state} with {len(self._channels)} channels")
        self._state = DriverState.CONFIGURED

    def _check_configured(self):
        if self._state == DriverState.UNCONFIGURED:
            msg = "the event generator driver needs to be configured with an initial state first"
            logger.error(msg)
            raise ConfigurationError(msg)

    def _spline_range(self, generator):
        e_min, e_max = generator.valid_energy_range()
        if self._max_energy > 0:
            e_max = min(e_max, self._max_energy)
        return e_min, e_max

    def _channel_range(self, channel):
        """ validity range of a channel, limited to the domain of its spline if that exists already """
        e_min, e_max = self._spline_range(self._generator_of_channel[channel])
        if self._spline_list.spline_exists(channel):
            spline = self._spline_list.get_spline(channel)
            e_min, e_max = max(e_min, spline.e_min), min(e_max, spline.e_max)
        return e_min, e_max

    def create_splines(self, n_knots=-1, max_energy=-1):
        """
        builds the cross section splines of all channels that do not have one

        Parameters
        ----------
        n_knots: int
            number of knots, <= 0 selects the default knot policy
        max_energy: float
            upper energy of the splines (internal units). <= 0 uses the
            validity range of the cross section models

        Returns
        -------
        failed: list of InteractionChannel
            channels whose spline could not be built
        """
        self._check_configured()
        self._max_energy = max_energy
        failed = []
        for channel in self._channels:
            generator = self._generator_of_channel[channel]
            e_min, e_max = self._spline_range(generator)
            if e_max <= e_min:
                logger.warning(f"maximum energy {max_energy / units.GeV:.3g} GeV is below the validity range "
                               f"of {channel.key}, skipping")
                failed.append(channel)
                continue
            try:
                self._spline_list.get_or_build(channel, generator.model, e_min, e_max, n_knots)
            except BuildFailure as e:
                logger.warning(f"could not build the spline of {channel.key}: {e}")
                failed.append(channel)
        self._failed_channels = set(failed)
        logger.status(f"{len(self._channels) - len(failed)} of {len(self._channels)} splines ready "
                      f"for {self._initial_state}")
        self._state = DriverState.SPLINES_READY
        return failed

    def valid_energy_range(self):
        """
        union of the validity ranges of the channels (internal units)

        The range of a channel whose spline exists already (e.g. built by
        another driver sharing the spline list or loaded from a file) is
        limited to the domain of that spline.
        """
        self._check_configured()
        ranges = [self._channel_range(c) for c in self._channels]
        ranges = [r for r in ranges if r[1] >= r[0]]
        if not ranges:
            return 0., 0.
        return min(r[0] for r in ranges), max(r[1] for r in ranges)

    def xsec(self, channel, energy):
        """
        integrated cross section of a channel, per scattering center

        The spline is built if it does not exist yet. Outside the validity
        range of its cross section model (or the domain of an existing
        spline) the cross section is zero.
        """
        self._check_configured()
        generator = self._generator_of_channel.get(channel)
        if generator is None:
            msg = f"channel {channel.key} does not belong to the configured initial state {self._initial_state}"
            logger.error(msg)
            raise ValueError(msg)
        if channel in self._failed_channels:
            return 0.
        e_min, e_max = self._channel_range(channel)
        if not e_min <= energy <= e_max:
            return 0.
        spline = self._spline_list.get_or_build(channel, generator.model, e_min, e_max)
        return spline.evaluate(energy)

    def xsec_sum(self, energy):
        """ sum of the cross sections of all channels weighted with their number of scattering centers """
        return sum(self.xsec(c, energy) * n_scattering_centers(c) for c in self._channels)

    def create_xsec_sum_spline(self, n_knots=-1, e_min=None, e_max=None):
        """
        tabulates the total cross section of the initial state

        Parameters
        ----------
        n_knots: int
            number of knots, <= 0 selects the default knot policy
        e_min, e_max: floats or None
            energy range, defaults to the valid energy range of the driver

        Returns
        -------
        spline: Spline
        """
        self._check_configured()
        v_min, v_max = self.valid_energy_range()
        e_min = v_min if e_min is None else e_min
        e_max = v_max if e_max is None else e_max
        if n_knots is None or n_knots <= 0:
            n_knots = self._spline_list.n_knots_default(e_min, e_max)
        energies = knot_energies(e_min, e_max, n_knots, self._spline_list.log_spacing)
        values = [self.xsec_sum(energy) for energy in energies]
        self._xsec_sum_spline = Spline(energies, values)
        return self._xsec_sum_spline

    def select_channel(self, path_lengths, energy, rnd=None):
        """
        selects the interaction channel

        Each channel is weighted with its cross section times the path length
        of its target times its number of scattering centers. A channel is
        drawn with a probability proportional to its weight.

        Parameters
        ----------
        path_lengths: PathLengthList
            path lengths through the targets of the geometry, not modified
        energy: float
            neutrino energy (internal units)
        rnd: numpy random Generator or None
            random generator, the driver's generator (seeded from the config) if None

        Returns
        -------
        channel: InteractionChannel
        """
        self._check_configured()
        if path_lengths.are_all_zero():
            raise NoViableChannelError("all path lengths are zero, no interaction is possible")
        e_min, e_max = self.valid_energy_range()
        if not e_min <= energy <= e_max:
            msg = (f"energy {energy / units.GeV:.4g} GeV outside of the valid range "
                   f"[{e_min / units.GeV:.4g}, {e_max / units.GeV:.4g}] GeV of the driver")
            logger.error(msg)
            raise OutOfDomainError(msg)

        weights = np.zeros(len(self._channels))
        for i, channel in enumerate(self._channels):
            path_length = path_lengths.path_length(channel.target)
            if path_length <= 0:
                continue
            weights[i] = self.xsec(channel, energy) * path_length * n_scattering_centers(channel)
        total = np.cumsum(weights)[-1] if len(weights) else 0.
        if total <= 0:
            raise NoViableChannelError(f"all interaction channels have zero weight at "
                                       f"E = {energy / units.GeV:.4g} GeV for {self._initial_state}")
        rnd = rnd or self._rnd
        draw = rnd.uniform(0, total)
        channel = self._channels[select_channel_from_draw(weights, draw)]
        logger.debug(f"selected channel {channel.key}")
        return channel

    def __str__(self):
        s = f"EventGeneratorDriver ({self._state.name})\n"
        s += "event generators:\n"
        for generator in self._generators:
            s += f"  {generator}\n"
        if self._initial_state is not None:
            s += f"channels of {self._initial_state}:\n"
            for channel in self._channels:
                s += f"  {channel.key}\n"
        return s
