"""
This module (re)defines physics constants in NuEvtGen units.

Cross-section formulas are evaluated in natural units (GeV) and converted
at the end with ``gev_minus2``.
"""

from scipy import constants as scipy_constants

from NuEvtGen.utilities import units

e_mass = scipy_constants.physical_constants['electron mass energy equivalent in MeV'][0] * units.MeV
mu_mass = scipy_constants.physical_constants['muon mass energy equivalent in MeV'][0] * units.MeV
tau_mass = scipy_constants.physical_constants['tau mass energy equivalent in MeV'][0] * units.MeV
proton_mass = scipy_constants.physical_constants['proton mass energy equivalent in MeV'][0] * units.MeV
neutron_mass = scipy_constants.physical_constants['neutron mass energy equivalent in MeV'][0] * units.MeV
nucleon_mass = 0.5 * (proton_mass + neutron_mass)
pi_mass = 139.57061 * units.MeV
pi0_mass = 134.9768 * units.MeV

#: atomic mass unit, as a mass (not an energy)
amu = scipy_constants.physical_constants['atomic mass constant'][0] * units.kg

G_F = scipy_constants.physical_constants['Fermi coupling constant'][0] * units.GeV ** (-2)

#: (hbar c)^2: a cross section of 1 GeV^-2 in natural units, expressed as an area
gev_minus2 = 0.3893793721 * units.millibarn

sin2_theta_w = 0.2312
