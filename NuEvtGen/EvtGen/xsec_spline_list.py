"""
Cache of integrated cross section splines.

An :class:`XSecSplineList` maps each :class:`InteractionChannel` to one
:class:`Spline`. A spline is computed on the first request (or in a warm-up
step, see :meth:`EventGeneratorDriver.create_splines`) by integrating the
cross section at a set of knot energies, and can be stored to and loaded
from an XML file so that the expensive integration is done once.

The list is created explicitly and handed to the event generator drivers
that share it. It is safe to use from several threads: concurrent requests
for the same channel integrate it once, different channels are built in
parallel.
"""
import os
import math
import threading
import logging
import xml.etree.ElementTree as ET
import numpy as np

from NuEvtGen.utilities import units
from NuEvtGen.utilities.exceptions import BuildFailure, NotFoundError
from NuEvtGen.Interaction.interaction import InteractionChannel
from NuEvtGen.EvtGen.spline import Spline

logger = logging.getLogger('NuEvtGen.xsec_spline_list')

XML_VERSION = "1.0"

# units understood in the header of a spline file
_energy_units = {'eV': units.eV, 'MeV': units.MeV, 'GeV': units.GeV}
_xsec_units = {'m2': units.m2, 'cm2': units.cm2, 'fb': units.fb, 'pb': units.pb, 'mb': units.mb}


def knot_energies(e_min, e_max, n_knots, log_spacing=True):
    """
    knot energies spanning [e_min, e_max]

    The first and last knot are exactly e_min and e_max.
    """
    if n_knots < 2:
        raise ValueError(f"at least 2 knots are needed, got {n_knots}")
    if not e_min < e_max:
        raise ValueError(f"invalid energy range [{e_min}, {e_max}]")
    if log_spacing:
        if e_min <= 0:
            raise ValueError(f"log spaced knots need a positive lower energy, got {e_min}")
        energies = np.logspace(np.log10(e_min), np.log10(e_max), n_knots)
    else:
        energies = np.linspace(e_min, e_max, n_knots)
    energies[0] = e_min
    energies[-1] = e_max
    return energies


class XSecSplineList:

    def __init__(self, min_knots=30, knots_per_decade=15, log_spacing=True):
        """
        Parameters
        ----------
        min_knots: int
            minimum number of knots of the default knot policy
        knots_per_decade: int
            knots per decade of energy of the default knot policy
        log_spacing: bool
            if True the knots are log spaced, otherwise linearly spaced
        """
        self._min_knots = int(min_knots)
        self._knots_per_decade = knots_per_decade
        self._log_spacing = bool(log_spacing)
        self._splines = {}
        self._key_locks = {}
        self._lock = threading.Lock()
        self._n_builds = 0

    @classmethod
    def from_config(cls, cfg):
        """ creates a spline list with the knot policy of the ``splines`` config section """
        splines_cfg = cfg.get('splines', {})
        return cls(min_knots=splines_cfg.get('min_knots', 30),
                   knots_per_decade=splines_cfg.get('knots_per_decade', 15),
                   log_spacing=splines_cfg.get('log_spacing', True))

    @property
    def log_spacing(self):
        return self._log_spacing

    @property
    def n_builds(self):
        """ number of splines integrated by this list (loaded splines are not counted) """
        return self._n_builds

    def n_knots_default(self, e_min, e_max):
        """
        default number of knots for the energy range [e_min, e_max]
        """
        decades = math.log10(e_max / e_min) if e_min > 0 else 0
        # rounding avoids an extra knot from floating point noise in the number of decades
        return max(self._min_knots, int(math.ceil(round(self._knots_per_decade * decades, 6))))

    def spline_exists(self, channel):
        return channel in self._splines

    def __contains__(self, channel):
        return self.spline_exists(channel)

    def __len__(self):
        return len(self._splines)

    def channels(self):
        """ channels with a spline, sorted by their key """
        with self._lock:
            channels = list(self._splines.keys())
        return sorted(channels, key=lambda c: c.key)

    def get_spline(self, channel):
        spline = self._splines.get(channel)
        if spline is None:
            msg = f"no cross section spline for channel {channel.key}"
            logger.debug(msg)
            raise NotFoundError(msg)
        return spline

    def add_spline(self, channel, spline):
        """ inserts a spline, replacing an existing spline of the same channel """
        with self._lock:
            self._splines[channel] = spline

    def evaluate(self, channel, energy):
        """
        interpolated cross section of a channel

        Raises NotFoundError if the spline was never built and
        OutOfDomainError if the energy is outside of its knot range.
        """
        return self.get_spline(channel).evaluate(energy)

    def reset(self):
        """ removes all splines """
        # the per channel locks are kept, a build running during the reset still guards its channel
        with self._lock:
            self._splines.clear()
            self._n_builds = 0

    def get_or_build(self, channel, integrator, e_min, e_max, n_knots=None):
        """
        returns the spline of a channel, integrating it if it does not exist yet

        A spline that exists already is returned as it is, regardless of
        the requested energy range and number of knots.

        Parameters
        ----------
        channel: InteractionChannel
        integrator: object
            provides ``integrate(channel, energy)``, e.g. a cross section model
        e_min, e_max: floats
            energy range of the spline (internal units)
        n_knots: int or None
            number of knots. None or <= 0 selects the default knot policy

        Returns
        -------
        spline: Spline
        """
        spline = self._splines.get(channel)
        if spline is not None:
            return spline
        with self._lock:
            key_lock = self._key_locks.setdefault(channel, threading.Lock())
        with key_lock:
            # another thread might have built it while we were waiting
            spline = self._splines.get(channel)
            if spline is not None:
                return spline
            spline = self._build(channel, integrator, e_min, e_max, n_knots)
            with self._lock:
                self._splines[channel] = spline
                self._n_builds += 1
        return spline

    def _build(self, channel, integrator, e_min, e_max, n_knots):
        if n_knots is None or n_knots <= 0:
            n_knots = self.n_knots_default(e_min, e_max)
        elif n_knots < 2:
            msg = f"a spline needs at least 2 knots, {n_knots} were requested for {channel.key}"
            logger.error(msg)
            raise ValueError(msg)
        energies = knot_energies(e_min, e_max, n_knots, self._log_spacing)
        logger.info(f"building spline for {channel.key} with {n_knots} knots in "
                    f"[{e_min / units.GeV:.3g}, {e_max / units.GeV:.3g}] GeV")
        values = np.zeros(n_knots)
        for i, energy in enumerate(energies):
            try:
                value = integrator.integrate(channel, energy)
            except Exception as e:
                raise BuildFailure(f"integration of {channel.key} failed at E = {energy / units.GeV:.4g} GeV: {e}",
                                   channel) from e
            if value is None or not np.isfinite(value) or value < 0:
                raise BuildFailure(f"integration of {channel.key} returned the invalid cross section {value} "
                                   f"at E = {energy / units.GeV:.4g} GeV", channel)
            values[i] = value
        return Spline(energies, values)

    def save_as_xml(self, filename):
        """
        writes all splines to an XML file

        Floats are written with their repr, so that loading the file gives
        the identical knots.
        """
        root = ET.Element('xsec_spline_list', version=XML_VERSION, energy_units='eV', xsec_units='m2')
        for channel in self.channels():
            spline = self._splines[channel]
            attributes = {'name': channel.key}
            attributes.update(channel.to_dict())
            attributes['nknots'] = str(spline.n_knots)
            node = ET.SubElement(root, 'spline', attributes)
            for energy, value in zip(spline.energies, spline.values):
                knot = ET.SubElement(node, 'knot')
                ET.SubElement(knot, 'E').text = repr(float(energy / units.eV))
                ET.SubElement(knot, 'xsec').text = repr(float(value / units.m2))
        tree = ET.ElementTree(root)
        ET.indent(tree)
        tree.write(filename, encoding='utf-8', xml_declaration=True)
        logger.status(f"saved {len(root)} cross section splines to {filename}")

    def load_from_xml(self, filename):
        """
        reads splines from an XML file

        Splines in the file replace in-memory splines of the same channel,
        all other in-memory splines are kept.

        Returns
        -------
        n: int
            number of splines read
        """
        if not os.path.exists(filename):
            msg = f"spline file {filename} not found"
            logger.error(msg)
            raise FileNotFoundError(msg)
        try:
            root = ET.parse(filename).getroot()
        except ET.ParseError:
            logger.error(f"could not parse spline file {filename}")
            raise
        if root.tag != 'xsec_spline_list':
            msg = f"{filename} is not a cross section spline file (root element {root.tag})"
            logger.error(msg)
            raise ValueError(msg)
        energy_unit = root.get('energy_units', 'eV')
        xsec_unit = root.get('xsec_units', 'm2')
        if energy_unit not in _energy_units or xsec_unit not in _xsec_units:
            msg = f"unknown units {energy_unit}, {xsec_unit} in spline file {filename}"
            logger.error(msg)
            raise ValueError(msg)

        loaded = {}
        for node in root.findall('./spline'):
            channel = InteractionChannel.from_dict(node.attrib)
            energies = []
            values = []
            for knot in node.findall('./knot'):
                energies.append(float(knot.find('E').text) * _energy_units[energy_unit])
                values.append(float(knot.find('xsec').text) * _xsec_units[xsec_unit])
            if 'nknots' in node.attrib and int(node.get('nknots')) != len(energies):
                logger.warning(f"spline {channel.key} declares {node.get('nknots')} knots but has {len(energies)}")
            loaded[channel] = Spline(energies, values)
        with self._lock:
            self._splines.update(loaded)
        logger.status(f"loaded {len(loaded)} cross section splines from {filename}")
        return len(loaded)

    def __str__(self):
        s = f"XSecSplineList with {len(self)} splines\n"
        for channel in self.channels():
            spline = self._splines[channel]
            s += f"  {channel.key}: {spline.n_knots} knots [{spline.e_min / units.GeV:.3g}, {spline.e_max / units.GeV:.3g}] GeV\n"
        return s
