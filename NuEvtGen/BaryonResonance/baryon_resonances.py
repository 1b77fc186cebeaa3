"""
Baryon resonances and lists of baryon resonances.

Resonances are identified by their spectroscopic name, e.g. ``P33(1232)``.
Masses and widths are the values used by the resonance cross section
model and are given in internal units.
"""
import collections
import copy
import logging
from aenum import Enum

from NuEvtGen.utilities import units

logger = logging.getLogger('NuEvtGen.baryon_resonances')

_ResonanceData = collections.namedtuple('ResonanceData', ['name', 'mass', 'width', 'isospin', 'pdg_codes'])


class Resonance(Enum):
    _init_ = 'value data'

    P33_1232 = 1, _ResonanceData("P33(1232)", 1.232, 0.120, 1.5, {2: 2224, 1: 2214, 0: 2114, -1: 1114})
    S11_1535 = 2, _ResonanceData("S11(1535)", 1.535, 0.150, 0.5, {1: 22212, 0: 22112})
    D13_1520 = 3, _ResonanceData("D13(1520)", 1.520, 0.115, 0.5, {1: 2124, 0: 1214})
    S11_1650 = 4, _ResonanceData("S11(1650)", 1.655, 0.150, 0.5, {1: 32212, 0: 32112})
    D15_1675 = 5, _ResonanceData("D15(1675)", 1.675, 0.150, 0.5, {1: 2216, 0: 2116})
    S31_1620 = 6, _ResonanceData("S31(1620)", 1.630, 0.140, 1.5, {2: 2222, 1: 2122, 0: 1212, -1: 1112})
    D33_1700 = 7, _ResonanceData("D33(1700)", 1.700, 0.300, 1.5, {2: 12224, 1: 12214, 0: 12114, -1: 11114})
    P11_1440 = 8, _ResonanceData("P11(1440)", 1.440, 0.350, 0.5, {1: 12212, 0: 12112})
    P33_1600 = 9, _ResonanceData("P33(1600)", 1.600, 0.350, 1.5, {2: 32224, 1: 32214, 0: 32114, -1: 31114})
    P13_1720 = 10, _ResonanceData("P13(1720)", 1.720, 0.200, 0.5, {1: 32124, 0: 31214})
    F15_1680 = 11, _ResonanceData("F15(1680)", 1.685, 0.130, 0.5, {1: 12216, 0: 12116})
    P11_1710 = 12, _ResonanceData("P11(1710)", 1.710, 0.100, 0.5, {1: 42212, 0: 42112})
    F35_1905 = 13, _ResonanceData("F35(1905)", 1.880, 0.330, 1.5, {2: 2226, 1: 2126, 0: 1216, -1: 1116})
    F37_1950 = 14, _ResonanceData("F37(1950)", 1.930, 0.285, 1.5, {2: 2228, 1: 2218, 0: 2118, -1: 1118})

    @property
    def resonance_name(self):
        return self.data.name

    @property
    def mass(self):
        return self.data.mass * units.GeV

    @property
    def width(self):
        return self.data.width * units.GeV

    @property
    def isospin(self):
        return self.data.isospin

    @property
    def is_delta(self):
        return self.data.isospin == 1.5

    @property
    def is_n(self):
        return self.data.isospin == 0.5

    def pdg_code(self, charge):
        """
        PDG code of the charge state of this resonance

        Raises a ValueError if the resonance has no state with this charge
        (e.g. an N resonance with charge +2).
        """
        if charge not in self.data.pdg_codes:
            raise ValueError(f"resonance {self.data.name} has no state with charge {charge}")
        return self.data.pdg_codes[charge]

    def has_charge_state(self, charge):
        return charge in self.data.pdg_codes


_resonances_by_name = {res.data.name: res for res in Resonance}


def resonance_from_name(name):
    """ returns the Resonance for a spectroscopic name like 'P33(1232)' """
    name = name.strip()
    if name not in _resonances_by_name:
        msg = f"unknown baryon resonance {name}, available are {list(_resonances_by_name.keys())}"
        logger.error(msg)
        raise ValueError(msg)
    return _resonances_by_name[name]


class BaryonResList:
    """
    an ordered list of baryon resonances
    """

    def __init__(self, resonances=None):
        self._resonances = []
        if resonances is not None:
            for res in resonances:
                if isinstance(res, str):
                    res = resonance_from_name(res)
                self._resonances.append(Resonance(res))

    def decode_from_name_list(self, name_list, delimiter=","):
        """
        fill the list from a delimited string of resonance names

        The current content is replaced.

        Parameters
        ----------
        name_list: string
            e.g. "P33(1232),S11(1535),D13(1520)"
        delimiter: string
        """
        resonances = []
        for name in name_list.split(delimiter):
            if name.strip() == "":
                continue
            resonances.append(resonance_from_name(name))
        self._resonances = resonances
        logger.debug(f"decoded {len(resonances)} resonances from '{name_list}'")

    def n_resonances(self):
        return len(self._resonances)

    def resonance_name(self, ires):
        return self._resonances[ires].resonance_name

    def resonance_id(self, ires):
        return self._resonances[ires]

    def resonance_pdg_code(self, ires, charge):
        return self._resonances[ires].pdg_code(charge)

    def clear(self):
        self._resonances = []

    def copy(self):
        return copy.copy(self)

    def __copy__(self):
        return BaryonResList(self._resonances)

    def __len__(self):
        return len(self._resonances)

    def __iter__(self):
        return iter(self._resonances)

    def __eq__(self, other):
        if not isinstance(other, BaryonResList):
            return NotImplemented
        return self._resonances == other._resonances

    def __str__(self):
        lines = [f"Number of resonances: {len(self._resonances)}"]
        for ires, res in enumerate(self._resonances):
            lines.append(f" -> {ires}: {res.resonance_name} (M = {res.mass / units.GeV:.3f} GeV, "
                         f"Width = {res.width / units.GeV:.3f} GeV)")
        return "\n".join(lines)
