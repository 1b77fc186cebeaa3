"""
Initial states and interaction channels.

An :class:`InteractionChannel` identifies one cross section function: the
probe, the target, the struck nucleon, the scattering process, the
interaction current and the cross section algorithm (name and configuration)
that computes it. Channels are immutable and hashable; they are the keys of
the cross section spline cache.
"""
import collections
import logging
from aenum import Enum

from NuEvtGen.utilities import pdg

logger = logging.getLogger('NuEvtGen.interaction')


class ProcessType(Enum):
    QEL = 1  # quasi-elastic scattering
    RES = 2  # baryon resonance production
    DIS = 3  # deep inelastic scattering
    DFR = 4  # diffractive pion production
    COH = 5  # coherent pion production
    NUE = 6  # neutrino-electron elastic scattering


class InteractionCurrent(Enum):
    CC = 1  # charged current
    NC = 2  # neutral current


def process_type(name):
    """ returns the ProcessType for a name like 'DIS' (case insensitive) """
    try:
        return ProcessType[name.upper()]
    except KeyError:
        raise ValueError(f"unknown process type {name}, available are {[p.name for p in ProcessType]}")


def interaction_current(name):
    """ returns the InteractionCurrent for a name like 'CC' (case insensitive) """
    try:
        return InteractionCurrent[name.upper()]
    except KeyError:
        raise ValueError(f"unknown interaction current {name}, available are {[c.name for c in InteractionCurrent]}")


class InitialState(collections.namedtuple('InitialState', ['probe', 'target'])):
    """
    a (probe, target) pair of PDG codes

    The target is either a nucleus (10LZZZAAAI) or a free nucleon.
    """
    __slots__ = ()

    def __new__(cls, probe, target):
        probe = int(probe)
        target = int(target)
        if not pdg.is_neutrino(probe):
            msg = f"probe {probe} is not a neutrino PDG code"
            logger.error(msg)
            raise ValueError(msg)
        if not pdg.is_valid_target(target):
            msg = f"target {target} is not a nucleus or nucleon PDG code"
            logger.error(msg)
            raise ValueError(msg)
        return super().__new__(cls, probe, target)

    @property
    def Z(self):
        return pdg.ion_z(self.target)

    @property
    def N(self):
        return pdg.ion_n(self.target)

    @property
    def A(self):
        return pdg.ion_a(self.target)

    def __str__(self):
        return f"nu:{self.probe};tgt:{self.target};"


_InteractionChannelBase = collections.namedtuple(
    'InteractionChannel',
    ['probe', 'target', 'hit_nucleon', 'process', 'current', 'algorithm', 'config'])


class InteractionChannel(_InteractionChannelBase):
    """
    cache key of a cross section spline

    Parameters
    ----------
    probe: int
        PDG code of the neutrino
    target: int
        PDG code of the target nucleus or nucleon
    hit_nucleon: int
        PDG code of the struck nucleon (2212 or 2112). 0 means that the
        cross section refers to the nucleus as a whole (per nucleon average)
    process: ProcessType
    current: InteractionCurrent
    algorithm: string
        name of the cross section algorithm
    config: string
        name of the algorithm configuration
    """
    __slots__ = ()

    def __new__(cls, probe, target, hit_nucleon, process, current, algorithm, config="Default"):
        if isinstance(process, str):
            process = process_type(process)
        if isinstance(current, str):
            current = interaction_current(current)
        hit_nucleon = int(hit_nucleon)
        if hit_nucleon not in (0, pdg.proton, pdg.neutron):
            raise ValueError(f"hit nucleon {hit_nucleon} must be 0, {pdg.proton} or {pdg.neutron}")
        return super().__new__(cls, int(probe), int(target), hit_nucleon, process, current,
                               str(algorithm), str(config))

    @property
    def initial_state(self):
        return InitialState(self.probe, self.target)

    @property
    def key(self):
        """ human readable unique string representation, used as spline name """
        s = f"{self.algorithm}/{self.config}/nu:{self.probe};tgt:{self.target};"
        if self.hit_nucleon:
            s += f"N:{self.hit_nucleon};"
        s += f"proc:Weak[{self.current.name}],{self.process.name};"
        return s

    def to_dict(self):
        return {'probe': str(self.probe),
                'target': str(self.target),
                'hit_nucleon': str(self.hit_nucleon),
                'process': self.process.name,
                'current': self.current.name,
                'algorithm': self.algorithm,
                'config': self.config}

    @classmethod
    def from_dict(cls, d):
        return cls(int(d['probe']), int(d['target']), int(d['hit_nucleon']),
                   d['process'], d['current'], d['algorithm'], d['config'])

    def __str__(self):
        return self.key
