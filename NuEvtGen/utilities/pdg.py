""" PDG particle codes, names and nuclear code helpers. """
import numpy as np
import logging
logger = logging.getLogger('NuEvtGen.pdg')

proton = 2212
neutron = 2112

nu_e = 12
nu_mu = 14
nu_tau = 16

particle_names = \
    {    11: "Electron",
        -11: "Positron",
         12: "Electron neutrino",
        -12: "Electron antineutrino",
         13: "Muon (negative)",
        -13: "Antimuon (positive muon)",
         14: "Muon neutrino",
        -14: "Muon antineutrino",
         15: "Tau (negative)",
        -15: "Antitau (or positive tau)",
         16: "Tau neutrino",
        -16: "Tau antineutrino",
         22: "Gamma (photon)",
        111: "Pion (neutral)",
        211: "Pion (positive)",
       -211: "Pion (negative)",
        130: "Kaon (long)",
        310: "Kaon (short)",
        311: "Kaon (neutral)",
        321: "Kaon (positive)",
       -321: "Kaon (negative)",
       2212: "Proton",
      -2212: "Antiproton",
       2112: "Neutron",
      -2112: "Antineutron"}

# electric charge in units of the positron charge
particle_charges = \
    {11: -1, -11: 1, 12: 0, -12: 0, 13: -1, -13: 1, 14: 0, -14: 0, 15: -1, -15: 1,
     16: 0, -16: 0, 22: 0, 111: 0, 211: 1, -211: -1, 130: 0, 310: 0, 311: 0,
     321: 1, -321: -1, 2212: 1, -2212: -1, 2112: 0, -2112: 0}

particle_ids = {}
for key, value in particle_names.items():
    particle_ids[value] = key

neutrinos = [12, 14, 16, -12, -14, -16]

# charged lepton produced in a CC interaction of the given neutrino
charged_lepton = {12: 11, 14: 13, 16: 15, -12: -11, -14: -13, -16: -15}


def particle_name(id):
    if not isinstance(id, (int, np.integer)):
        logger.error("This function only takes integers.")
        raise TypeError("This function only takes integers.")

    if is_ion(id):
        return "Ion (Z={}, A={})".format(ion_z(id), ion_a(id))
    if id not in particle_names:
        return "Unknown particle ({})".format(id)
    return particle_names[id]


def charge(pdg_code):
    """
    electric charge of a particle in units of the positron charge

    Nuclei return Z. Unknown codes raise a KeyError.
    """
    if is_ion(pdg_code):
        return ion_z(pdg_code)
    return particle_charges[pdg_code]


def is_neutrino(pdg_code):
    return abs(pdg_code) in (12, 14, 16)


def is_antineutrino(pdg_code):
    return pdg_code in (-12, -14, -16)


def is_proton(pdg_code):
    return pdg_code == proton


def is_neutron(pdg_code):
    return pdg_code == neutron


def is_nucleon(pdg_code):
    return pdg_code in (proton, neutron)


def is_ion(pdg_code):
    """ nuclear codes follow the 10LZZZAAAI scheme """
    return 1000000000 <= pdg_code <= 1099999999


def ion_pdg_code(A, Z):
    """
    returns the nuclear PDG code 10LZZZAAAI (L=0, I=0)

    Parameters
    ----------
    A: int
        mass number
    Z: int
        atomic number
    """
    if Z < 0 or A < 1 or Z > A:
        raise ValueError("invalid nucleus A={}, Z={}".format(A, Z))
    return 1000000000 + Z * 10000 + A * 10


def ion_z(pdg_code):
    if pdg_code == proton:
        return 1
    if pdg_code == neutron:
        return 0
    if not is_ion(pdg_code):
        raise ValueError("{} is not a nucleus or nucleon PDG code".format(pdg_code))
    return (pdg_code // 10000) % 1000


def ion_a(pdg_code):
    if is_nucleon(pdg_code):
        return 1
    if not is_ion(pdg_code):
        raise ValueError("{} is not a nucleus or nucleon PDG code".format(pdg_code))
    return (pdg_code // 10) % 1000


def ion_n(pdg_code):
    return ion_a(pdg_code) - ion_z(pdg_code)


def is_valid_target(pdg_code):
    if is_nucleon(pdg_code):
        return True
    if not is_ion(pdg_code):
        return False
    return 0 <= ion_z(pdg_code) <= ion_a(pdg_code) and ion_a(pdg_code) > 0


def parse_code_list(code_list, delimiter=","):
    """
    split a delimited string of PDG codes into a list of ints

    Empty entries are dropped, so an empty string gives an empty list.
    Entries that are not integers raise a ValueError.
    """
    codes = []
    for entry in code_list.split(delimiter):
        entry = entry.strip()
        if entry == "":
            continue
        codes.append(int(entry))
    return codes
