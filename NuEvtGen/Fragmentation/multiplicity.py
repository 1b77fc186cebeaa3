"""
Hadronic final state multiplicities.
"""
import numpy as np
from aenum import Enum

from NuEvtGen.utilities import pdg


class Multiplicity(Enum):
    UNDEFINED = -1
    TOTAL = 0
    TOTAL_CHARGED = 1
    TOTAL_NEGATIVE = 2
    TOTAL_POSITIVE = 3
    TOTAL_NEUTRAL = 4
    FWD_TOTAL = 5  # forward hemisphere: xF > 0
    FWD_CHARGED = 6
    FWD_NEGATIVE = 7
    FWD_POSITIVE = 8
    FWD_NEUTRAL = 9
    BKW_TOTAL = 10  # backward hemisphere: xF < 0
    BKW_CHARGED = 11
    BKW_NEGATIVE = 12
    BKW_POSITIVE = 13
    BKW_NEUTRAL = 14


def count_multiplicity(pdg_codes, xf, multiplicity):
    """
    counts the hadrons of a final state that belong to a multiplicity class

    Parameters
    ----------
    pdg_codes: array of ints
        PDG codes of the final state hadrons
    xf: array of floats
        Feynman x of each hadron (only the sign is used)
    multiplicity: Multiplicity

    Returns
    -------
    n: int
    """
    if multiplicity == Multiplicity.UNDEFINED:
        raise ValueError("can not count an undefined multiplicity")
    pdg_codes = np.atleast_1d(pdg_codes)
    xf = np.atleast_1d(xf)
    if pdg_codes.shape != xf.shape:
        raise ValueError("pdg_codes and xf need to have the same length")

    charges = np.array([pdg.charge(int(code)) for code in pdg_codes], dtype=int)

    index = multiplicity.value
    if index < 5:
        hemisphere = np.ones_like(xf, dtype=bool)
    elif index < 10:
        hemisphere = xf > 0
    else:
        hemisphere = xf < 0

    kind = index % 5
    if kind == 0:
        selection = np.ones_like(charges, dtype=bool)
    elif kind == 1:
        selection = charges != 0
    elif kind == 2:
        selection = charges < 0
    elif kind == 3:
        selection = charges > 0
    else:
        selection = charges == 0

    return int(np.sum(hemisphere & selection))
