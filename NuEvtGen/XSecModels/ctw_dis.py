"""
High energy neutrino nucleon cross sections from parameterizations.

The cross section refers to an isoscalar nucleon, so the channels of this
model are nucleus-level (no struck nucleon is distinguished).
"""
import numpy as np

from NuEvtGen.utilities import units, pdg
from NuEvtGen.Interaction.interaction import ProcessType, InteractionCurrent
from NuEvtGen.XSecModels.xsec_model_base import XSecModelBase

import logging
logger = logging.getLogger('NuEvtGen.ctw_dis')


def param(energy, inttype='cc', parameterization='ctw'):
    """
    Parameterization and constants of the high energy cross section

    Parameters
    ----------
    energy: float or array
        neutrino energy (internal units), >= 1e4 GeV
    inttype: string
        one of 'cc', 'nc', 'cc_bar', 'nc_bar'
    parameterization: string
        'ctw' or 'hedis_bgr18'

    Returns
    -------
    crscn: float or array
        cross section in internal units
    """
    if np.any(np.asarray(energy) < 1e4 * units.GeV):
        msg = f"CTW / BGR neutrino nucleon cross sections not valid for energies below 1e4 GeV, ({np.min(energy) / units.GeV}GeV was requested)"
        logger.error(msg)
        raise ValueError(msg)

    if parameterization == 'ctw':
        # Phys.Rev.D83:113009,2011 Amy Connolly, Robert S. Thorne, David Waters
        if inttype == 'cc':
            c = (-1.826, -17.31, -6.406, 1.431, -17.91)  # nu, CC
        elif inttype == 'nc':
            c = (-1.826, -17.31, -6.448, 1.431, -18.61)  # nu, NC
        elif inttype == 'cc_bar':
            c = (-1.033, -15.95, -7.247, 1.569, -17.72)  # nu_bar, CC
        elif inttype == 'nc_bar':
            c = (-1.033, -15.95, -7.296, 1.569, -18.30)  # nu_bar, NC
        else:
            logger.error("Type {0} of interaction not defined for 'ctw'".format(inttype))
            raise NotImplementedError
    elif parameterization == 'hedis_bgr18':
        # fit to the GENIE HEDIS module (with BGR18) cross sections, arXiv:2004.04756v2
        if inttype == 'cc':
            c = (-1.6049779136562436, -17.7480299104706, -6.748861524562085, 1.5569481852252935, -16.545379184836094)  # nu, CC
        elif inttype == 'nc':
            c = (-1.9625311094497564, -17.576550328008224, -6.444583672267122, 1.4702739736023922, -18.6167800243672)  # nu, NC
        elif inttype == 'cc_bar':
            c = (-2.28879962998228, -15.725804320703244, -5.273935123272873, 1.0314821502761589, -23.15773837113476)  # nu_bar, CC
        elif inttype == 'nc_bar':
            c = (-2.582585867636026, -15.742658435090945, -5.075692336968196, 0.9963850387362603, -24.870843546539973)  # nu_bar, NC
        else:
            logger.error("Type {0} of interaction not defined for 'hedis_bgr18'".format(inttype))
            raise NotImplementedError
    else:
        logger.error("Parameterization {0} of interaction cross section not defined".format(parameterization))
        raise NotImplementedError

    epsilon = np.log10(energy / units.GeV)
    l_eps = np.log(epsilon - c[0])
    crscn = c[1] + c[2] * l_eps + c[3] * l_eps ** 2 + c[4] / l_eps
    crscn = np.power(10, crscn) * units.cm ** 2
    return crscn


class CTWDIS(XSecModelBase):
    """
    nucleus-level high energy DIS cross section per nucleon

    Configuration parameters: ``parameterization`` ('ctw' or 'hedis_bgr18').
    """
    algorithm_name = 'ctw_dis'
    process = ProcessType.DIS

    def __init__(self, config_name="Default", config=None, global_parameters=None, integrator=None):
        super().__init__(config_name, config, global_parameters, integrator)
        self._parameterization = self.get_parameter('parameterization', default='ctw')
        if self._parameterization not in ('ctw', 'hedis_bgr18'):
            msg = f"parameterization {self._parameterization} is not implemented"
            logger.error(msg)
            raise NotImplementedError(msg)
        if self._energy_min < 1e4 * units.GeV:
            msg = f"{self.algorithm_name} is not valid below 1e4 GeV, energy_min is {self._energy_min / units.GeV} GeV"
            logger.error(msg)
            raise ValueError(msg)

    def hit_nucleons(self, target):
        return [0]

    def integrate(self, channel, energy):
        if not self.valid_channel(channel):
            return 0.
        inttype = 'cc' if channel.current == InteractionCurrent.CC else 'nc'
        if pdg.is_antineutrino(channel.probe):
            inttype += '_bar'
        return float(param(energy, inttype, self._parameterization))
