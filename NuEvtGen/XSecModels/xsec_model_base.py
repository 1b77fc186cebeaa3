"""
Structure of a cross section model. All cross section algorithms derive from
this class and are looked up by name in :mod:`NuEvtGen.XSecModels.xsec_models`.
"""
import logging

from NuEvtGen.utilities import units, pdg
from NuEvtGen.Interaction.interaction import InteractionCurrent
from NuEvtGen.XSecModels.integrators import GaussLegendreIntegrator

logger = logging.getLogger('NuEvtGen.xsec_model_base')


class XSecModelBase:
    """
    base class of cross section algorithms

    A model computes the integrated cross section of a channel at a given
    neutrino energy (:meth:`integrate`) and is used as the integrator of the
    cross section spline cache. The cross section is given per struck nucleon
    (or per nucleon of the nucleus for nucleus-level channels); the number of
    scattering centers is applied by the event generator driver.

    Derived classes set ``algorithm_name`` and ``process`` and implement
    :meth:`integrate`.
    """
    algorithm_name = None
    process = None
    currents = (InteractionCurrent.CC, InteractionCurrent.NC)

    def __init__(self, config_name="Default", config=None, global_parameters=None, integrator=None):
        """
        Parameters
        ----------
        config_name: string
            name of the configuration, part of the channel key
        config: dict
            the model configuration (energies in GeV)
        global_parameters: dict
            global physics parameters, used where config has no value
        integrator: GaussLegendreIntegrator or None
            numerical integrator, a default one is created if None
        """
        self._config_name = config_name
        self._config = dict(config or {})
        self._global_parameters = dict(global_parameters or {})
        self._integrator = integrator or GaussLegendreIntegrator()
        self._energy_min = float(self._config.get('energy_min', 0.1)) * units.GeV
        self._energy_max = float(self._config.get('energy_max', 100.)) * units.GeV
        if not 0 < self._energy_min < self._energy_max:
            msg = (f"invalid energy range [{self._energy_min / units.GeV}, {self._energy_max / units.GeV}] GeV "
                   f"for {self.algorithm_name}/{config_name}")
            logger.error(msg)
            raise ValueError(msg)

    @property
    def name(self):
        return self.algorithm_name

    @property
    def config_name(self):
        return self._config_name

    def get_parameter(self, key, global_key=None, default=None):
        """
        returns a parameter from the model configuration, falling back to the
        global parameter list and then to the default
        """
        if key in self._config:
            return self._config[key]
        if global_key is not None and global_key in self._global_parameters:
            return self._global_parameters[global_key]
        if default is not None:
            return default
        msg = f"parameter {key} is neither set in {self.algorithm_name}/{self._config_name} nor globally ({global_key})"
        logger.error(msg)
        raise KeyError(msg)

    def valid_energy_range(self):
        """ returns the (min, max) neutrino energy in which the model is valid """
        return self._energy_min, self._energy_max

    def hit_nucleons(self, target):
        """
        returns the struck nucleons the model distinguishes for this target

        Nucleon-level models return the nucleon species present in the target.
        """
        nucleons = []
        if pdg.ion_z(target) > 0:
            nucleons.append(pdg.proton)
        if pdg.ion_n(target) > 0:
            nucleons.append(pdg.neutron)
        return nucleons

    def valid_channel(self, channel):
        """ checks whether this model can compute the cross section of a channel """
        if channel.algorithm != self.algorithm_name or channel.config != self._config_name:
            return False
        if channel.process != self.process or channel.current not in self.currents:
            return False
        if not pdg.is_neutrino(channel.probe):
            return False
        return channel.hit_nucleon in self.hit_nucleons(channel.target)

    def integrate(self, channel, energy):
        """
        integrated cross section of the channel at the given neutrino energy

        Parameters
        ----------
        channel: InteractionChannel
        energy: float
            neutrino energy in internal units

        Returns
        -------
        xsec: float
            cross section (area in internal units)
        """
        raise NotImplementedError("integrate needs to be implemented by the cross section model")

    def __str__(self):
        return f"{self.algorithm_name}/{self._config_name}"
