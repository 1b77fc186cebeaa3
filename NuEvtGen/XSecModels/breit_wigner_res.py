"""
Baryon resonance production with Breit-Wigner line shapes.

Each resonance of the configured :class:`BaryonResList` contributes with
the isospin Clebsch-Gordan weight of the (weak current + struck nucleon)
system and with the fraction of its Breit-Wigner distribution that is
kinematically accessible.
"""
import numpy as np

from NuEvtGen.utilities import units, pdg
from NuEvtGen.utilities.constants import e_mass, mu_mass, tau_mass, nucleon_mass, pi_mass
from NuEvtGen.Interaction.interaction import ProcessType, InteractionCurrent
from NuEvtGen.BaryonResonance.baryon_resonances import BaryonResList
from NuEvtGen.XSecModels.xsec_model_base import XSecModelBase

import logging
logger = logging.getLogger('NuEvtGen.breit_wigner_res')

lepton_masses = {11: e_mass, 13: mu_mass, 15: tau_mass}

# squared Clebsch-Gordan coefficients <I, m1 + m2 | 1, m1; 1/2, m2>^2
# key: (I, m1, 2 * m2)
_isospin_weights = {
    (1.5, 1, 1): 1., (1.5, 1, -1): 1. / 3, (1.5, 0, 1): 2. / 3,
    (1.5, 0, -1): 2. / 3, (1.5, -1, 1): 1. / 3, (1.5, -1, -1): 1.,
    (0.5, 1, -1): 2. / 3, (0.5, 0, 1): 1. / 3, (0.5, 0, -1): 1. / 3,
    (0.5, -1, 1): 2. / 3}


def isospin_weight(isospin, current_m, nucleon_2m):
    return _isospin_weights.get((isospin, current_m, nucleon_2m), 0.)


class BreitWignerRES(XSecModelBase):
    """
    resonance production cross section per struck nucleon

    Configuration parameters: ``resonances`` (comma separated names),
    ``Wmax`` (GeV, global ``RES-Wmax``), ``strength`` (1e-38 cm^2),
    ``saturation_energy`` (GeV), ``nc_ratio``.
    """
    algorithm_name = 'breit_wigner_res'
    process = ProcessType.RES

    def __init__(self, config_name="Default", config=None, global_parameters=None, integrator=None):
        super().__init__(config_name, config, global_parameters, integrator)
        self._resonances = BaryonResList()
        self._resonances.decode_from_name_list(self.get_parameter('resonances', default="P33(1232)"))
        self._wmax = float(self.get_parameter('Wmax', 'RES-Wmax', 1.7)) * units.GeV
        self._strength = float(self.get_parameter('strength', default=0.5)) * 1e-38 * units.cm2
        self._saturation_energy = float(self.get_parameter('saturation_energy', default=1.)) * units.GeV
        self._nc_ratio = float(self.get_parameter('nc_ratio', default=0.35))

    @property
    def resonances(self):
        return self._resonances

    def final_state_charge(self, channel):
        """ charge of the produced resonance """
        q = pdg.charge(channel.hit_nucleon)
        if channel.current == InteractionCurrent.CC:
            q += -1 if pdg.is_antineutrino(channel.probe) else 1
        return q

    def resonance_fraction(self, channel, energy):
        """
        sum over resonances of isospin weight times accessible Breit-Wigner fraction
        """
        if channel.current == InteractionCurrent.CC:
            m_lepton = lepton_masses[abs(pdg.charged_lepton[channel.probe])]
            current_m = -1 if pdg.is_antineutrino(channel.probe) else 1
        else:
            m_lepton = 0.
            current_m = 0
        nucleon_2m = 1 if pdg.is_proton(channel.hit_nucleon) else -1

        M = nucleon_mass
        w_min = M + pi_mass
        w_max = min(np.sqrt(M ** 2 + 2 * M * energy) - m_lepton, self._wmax)
        if w_max <= w_min:
            return 0.

        charge = self.final_state_charge(channel)
        total = 0.
        for ires in range(self._resonances.n_resonances()):
            res = self._resonances.resonance_id(ires)
            if not res.has_charge_state(charge):
                continue
            weight = isospin_weight(res.isospin, current_m, nucleon_2m)
            if weight == 0:
                continue
            upper = np.arctan(2. * (w_max - res.mass) / res.width)
            lower = np.arctan(2. * (w_min - res.mass) / res.width)
            total += weight * (upper - lower) / np.pi
        return total

    def resonance_pdg_codes(self, channel):
        """ PDG codes of the resonances that can be produced in this channel """
        charge = self.final_state_charge(channel)
        codes = []
        for ires in range(self._resonances.n_resonances()):
            if self._resonances.resonance_id(ires).has_charge_state(charge):
                codes.append(self._resonances.resonance_pdg_code(ires, charge))
        return codes

    def threshold_energy(self, channel):
        m_lepton = 0.
        if channel.current == InteractionCurrent.CC:
            m_lepton = lepton_masses[abs(pdg.charged_lepton[channel.probe])]
        M = nucleon_mass
        return ((M + pi_mass + m_lepton) ** 2 - M ** 2) / (2. * M)

    def integrate(self, channel, energy):
        if not self.valid_channel(channel):
            return 0.
        e_threshold = self.threshold_energy(channel)
        if energy <= e_threshold:
            return 0.
        rise = 1. - np.exp(-(energy - e_threshold) / self._saturation_energy)
        xsec = self._strength * rise * self.resonance_fraction(channel, energy)
        if channel.current == InteractionCurrent.NC:
            xsec *= self._nc_ratio
        return float(xsec)
