"""
Diffractive pion production off free nucleons following Rein.

The differential cross section d3sigma/dxdydt is integrated over x and y
numerically and over t analytically.
"""
import numpy as np

from NuEvtGen.utilities import units, pdg
from NuEvtGen.utilities.constants import G_F, proton_mass, neutron_mass, pi_mass, gev_minus2
from NuEvtGen.Interaction.interaction import ProcessType, InteractionCurrent
from NuEvtGen.XSecModels.xsec_model_base import XSecModelBase
from NuEvtGen.XSecModels.breit_wigner_res import lepton_masses

import logging
logger = logging.getLogger('NuEvtGen.rein_dfr')


class ReinDFR(XSecModelBase):
    """
    diffractive pion production cross section per struck nucleon

    Configuration parameters: ``Ma`` (GeV, global ``DFR-Ma``), ``beta``
    (GeV^-2, global ``DFR-Beta``), ``t_max`` (GeV^2), ``nc_factor``.
    """
    algorithm_name = 'rein_dfr'
    process = ProcessType.DFR

    def __init__(self, config_name="Default", config=None, global_parameters=None, integrator=None):
        super().__init__(config_name, config, global_parameters, integrator)
        self._ma = float(self.get_parameter('Ma', 'DFR-Ma', 1.0))
        self._beta = float(self.get_parameter('beta', 'DFR-Beta', 7.0))
        self._t_max = float(self.get_parameter('t_max', default=1.0))
        self._nc_factor = float(self.get_parameter('nc_factor', default=0.5))
        if self._beta <= 0:
            raise ValueError(f"the t slope beta needs to be positive, not {self._beta}")

    def xsec(self, channel, energy, x, y, t):
        """
        d3sigma/dxdydt in natural units (GeV^-4), vectorized in x, y and t

        Parameters
        ----------
        channel: InteractionChannel
        energy: float
            neutrino energy in internal units
        x, y: floats or arrays
            Bjorken x and inelasticity y
        t: float or array
            squared momentum transfer to the nucleon (GeV^2, t > 0)
        """
        E = energy / units.GeV
        M = (proton_mass if pdg.is_proton(channel.hit_nucleon) else neutron_mass) / units.GeV
        m_pi = pi_mass / units.GeV
        gf = G_F / units.GeV ** (-2)

        Q2 = 2. * x * y * M * E  # momentum transfer Q2 > 0
        Gf = gf ** 2 * M / (16. * np.pi ** 3)
        fp2 = (0.93 * m_pi) ** 2  # pion decay constant
        Epi = y * E  # pion energy
        sqrt_epi = np.sqrt(np.maximum(Epi, 0.))
        ma2 = self._ma ** 2
        propagator = (ma2 / (ma2 + Q2)) ** 2
        # pi+N total cross section (Regge parametrization), converted to GeV^-2
        with np.errstate(divide='ignore'):
            s_tot = np.where(sqrt_epi > 0, 12. * (2. + 1. / sqrt_epi) * units.mb / gev_minus2, 0.)
        t_factor = np.exp(-self._beta * t)

        xsec = Gf * E * fp2 * (1. - y) * propagator * s_tot ** 2 * t_factor
        if channel.current == InteractionCurrent.NC:
            xsec = xsec * self._nc_factor
        return xsec

    def integrate(self, channel, energy):
        if not self.valid_channel(channel):
            return 0.
        E = energy / units.GeV
        m_lepton = 0.
        if channel.current == InteractionCurrent.CC:
            m_lepton = lepton_masses[abs(pdg.charged_lepton[channel.probe])] / units.GeV
        y_min = pi_mass / units.GeV / E  # pion needs to be produced on shell
        y_max = 1. - m_lepton / E
        if y_max <= y_min:
            return 0.

        # int_0^tmax exp(-beta t) dt
        t_integral = (1. - np.exp(-self._beta * self._t_max)) / self._beta

        def integrand(x, y):
            return self.xsec(channel, energy, x, y, 0.)

        xy_integral = self._integrator.integrate_2d(integrand, (0., 1.), (y_min, y_max))
        return float(xy_integral * t_integral * gev_minus2)
