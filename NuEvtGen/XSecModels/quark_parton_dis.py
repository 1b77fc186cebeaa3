"""
Deep inelastic scattering in the simple quark parton model.

The structure of the nucleon is described by one valence and one sea
momentum distribution. The y integration above the invariant mass cut is
done analytically, the x integration numerically.
"""
import numpy as np
from scipy import special

from NuEvtGen.utilities import units, pdg
from NuEvtGen.utilities.constants import G_F, nucleon_mass, gev_minus2
from NuEvtGen.Interaction.interaction import ProcessType, InteractionCurrent
from NuEvtGen.XSecModels.xsec_model_base import XSecModelBase

import logging
logger = logging.getLogger('NuEvtGen.quark_parton_dis')


class QuarkPartonDIS(XSecModelBase):
    """
    DIS cross section per struck nucleon

    Configuration parameters: ``Wcut`` (GeV, global ``DIS-Wcut``),
    ``valence_momentum``, ``sea_momentum``, ``nc_ratio_nu``, ``nc_ratio_nubar``.
    """
    algorithm_name = 'quark_parton_dis'
    process = ProcessType.DIS

    def __init__(self, config_name="Default", config=None, global_parameters=None, integrator=None):
        super().__init__(config_name, config, global_parameters, integrator)
        self._wcut = float(self.get_parameter('Wcut', 'DIS-Wcut', 1.7))
        self._valence_momentum = float(self.get_parameter('valence_momentum', default=0.40))
        self._sea_momentum = float(self.get_parameter('sea_momentum', default=0.06))
        self._nc_ratio_nu = float(self.get_parameter('nc_ratio_nu', default=0.31))
        self._nc_ratio_nubar = float(self.get_parameter('nc_ratio_nubar', default=0.37))
        self._valence_norm = special.beta(1.5, 4.)

    def _valence(self, x):
        # normalized to unity
        return x ** 0.5 * (1. - x) ** 3 / self._valence_norm

    def _sea(self, x):
        return 8. * (1. - x) ** 7

    def integrate(self, channel, energy):
        if not self.valid_channel(channel):
            return 0.
        E = energy / units.GeV
        M = nucleon_mass / units.GeV

        # the neutrino scatters on d quarks, the antineutrino on u quarks
        antineutrino = pdg.is_antineutrino(channel.probe)
        if pdg.is_proton(channel.hit_nucleon):
            n_valence = 2 if antineutrino else 1
        else:
            n_valence = 1 if antineutrino else 2

        wcut2 = self._wcut ** 2
        m2 = M ** 2

        def integrand(x):
            # W^2 = M^2 + 2 M E y (1 - x) > Wcut^2
            y_min = np.clip((wcut2 - m2) / (2. * M * E * (1. - x)), 0., 1.)
            y_flat = 1. - y_min
            y_suppressed = (1. - y_min) ** 3 / 3.
            valence = n_valence / 3. * self._valence_momentum * self._valence(x)
            sea = self._sea_momentum * self._sea(x)
            if antineutrino:
                return sea * y_flat + (valence + sea) * y_suppressed
            return (valence + sea) * y_flat + sea * y_suppressed

        integral = self._integrator.integrate_1d(integrand, 0., 1.)
        gf = G_F / units.GeV ** (-2)
        xsec = 2. * gf ** 2 * M * E / np.pi * integral

        if channel.current == InteractionCurrent.NC:
            xsec *= self._nc_ratio_nubar if antineutrino else self._nc_ratio_nu

        return xsec * gev_minus2
