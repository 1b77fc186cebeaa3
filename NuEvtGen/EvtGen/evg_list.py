"""
Event generator lists.

An event generator simulates one scattering process with one interaction
current. Its cross section algorithm is looked up in the model registry
when the list is loaded, so that the driver does not resolve names during
event generation.
"""
import logging

from NuEvtGen.Interaction.interaction import InteractionChannel, process_type, interaction_current
from NuEvtGen.XSecModels.xsec_models import get_xsec_model
from NuEvtGen.utilities.exceptions import ConfigurationError

logger = logging.getLogger('NuEvtGen.evg_list')


class EventGenerator:

    def __init__(self, name, process, current, model):
        """
        Parameters
        ----------
        name: string
            name of the generator, e.g. 'DIS-CC'
        process: ProcessType
        current: InteractionCurrent
        model: XSecModelBase
            the configured cross section algorithm
        """
        self._name = name
        self._process = process
        self._current = current
        self._model = model

    @property
    def name(self):
        return self._name

    @property
    def process(self):
        return self._process

    @property
    def current(self):
        return self._current

    @property
    def model(self):
        return self._model

    def valid_energy_range(self):
        return self._model.valid_energy_range()

    def channels(self, initial_state):
        """ interaction channels this generator simulates for an initial state """
        channels = []
        for hit_nucleon in self._model.hit_nucleons(initial_state.target):
            channel = InteractionChannel(initial_state.probe, initial_state.target, hit_nucleon,
                                         self._process, self._current,
                                         self._model.name, self._model.config_name)
            if self._model.valid_channel(channel):
                channels.append(channel)
        return channels

    def __str__(self):
        return f"{self._name} ({self._process.name}, {self._current.name}, {self._model})"


def load_event_generator_list(cfg, list_name=None):
    """
    creates the event generators of a list in the configuration

    Parameters
    ----------
    cfg: dict
        NuEvtGen configuration
    list_name: string or None
        name of the list in ``cfg['event_generator_lists']``, defaults to
        ``cfg['event_generator_list']``

    Returns
    -------
    generators: list of EventGenerator
        in the order of the configuration
    """
    if list_name is None:
        list_name = cfg.get('event_generator_list', 'Default')
    lists = cfg.get('event_generator_lists', {})
    if list_name not in lists:
        msg = f"event generator list {list_name} is not defined, available are {list(lists)}"
        logger.error(msg)
        raise ConfigurationError(msg)
    entries = lists[list_name]
    if not entries:
        msg = f"event generator list {list_name} is empty"
        logger.error(msg)
        raise ConfigurationError(msg)

    models = {}
    generators = []
    for entry in entries:
        try:
            process = process_type(entry['process'])
            current = interaction_current(entry['current'])
            model_key = (entry['xsec_model'], entry.get('config', 'Default'))
            if model_key not in models:
                models[model_key] = get_xsec_model(model_key[0], model_key[1], cfg)
        except (KeyError, ValueError, NotImplementedError) as e:
            msg = f"invalid event generator entry {entry} in list {list_name}: {e}"
            logger.error(msg)
            raise ConfigurationError(msg) from e
        model = models[model_key]
        if model.process != process or current not in model.currents:
            msg = (f"cross section model {model} computes {model.process.name} cross sections, "
                   f"it can not be used for the {process.name} {current.name} generator {entry.get('name')}")
            logger.error(msg)
            raise ConfigurationError(msg)
        generators.append(EventGenerator(entry.get('name', f"{process.name}-{current.name}"), process, current, model))
    logger.info(f"loaded event generator list {list_name} with {len(generators)} generators")
    return generators
