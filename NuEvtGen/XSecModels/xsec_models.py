"""
Registry of the cross section algorithms.

Algorithms are looked up by name once, when an event generator list is
loaded, and are instantiated with one of their named configurations from
the yaml config (``xsec_models.<name>.<config>``).
"""
import logging

from NuEvtGen.XSecModels.integrators import GaussLegendreIntegrator

logger = logging.getLogger('NuEvtGen.xsec_models')


def _quark_parton_dis():
    from NuEvtGen.XSecModels.quark_parton_dis import QuarkPartonDIS
    return QuarkPartonDIS


def _breit_wigner_res():
    from NuEvtGen.XSecModels.breit_wigner_res import BreitWignerRES
    return BreitWignerRES


def _rein_dfr():
    from NuEvtGen.XSecModels.rein_dfr import ReinDFR
    return ReinDFR


def _ctw_dis():
    from NuEvtGen.XSecModels.ctw_dis import CTWDIS
    return CTWDIS


_registry = {'quark_parton_dis': _quark_parton_dis,
             'breit_wigner_res': _breit_wigner_res,
             'rein_dfr': _rein_dfr,
             'ctw_dis': _ctw_dis}


def available_models():
    return list(_registry.keys())


def register_xsec_model(name, factory):
    """
    adds a cross section algorithm to the registry

    Parameters
    ----------
    name: string
        algorithm name, used in the event generator lists and in the spline keys
    factory: callable
        returns the model class (a subclass of XSecModelBase) when called
        without arguments
    """
    if name in _registry:
        logger.warning(f"cross section model {name} already registered. Overwriting.")
    _registry[name] = factory


def get_xsec_model_class(name):
    """
    returns the python class of the cross section algorithm with this name
    """
    if name not in _registry:
        msg = "Cross section model \'{}\' not implemented. Available models: {}".format(
            name, str(available_models()))
        logger.error(msg)
        raise NotImplementedError(msg)
    return _registry[name]()


def get_xsec_model(name, config_name="Default", cfg=None):
    """
    creates a configured cross section algorithm

    Parameters
    ----------
    name: string
        algorithm name
    config_name: string
        name of the algorithm configuration in ``cfg['xsec_models'][name]``
    cfg: dict or None
        the NuEvtGen configuration (the default configuration if None)

    Returns
    -------
    model: XSecModelBase
    """
    if cfg is None:
        from NuEvtGen.utilities.config import get_config
        cfg = get_config()
    model_class = get_xsec_model_class(name)
    model_configs = cfg.get('xsec_models', {}).get(name, {})
    if config_name not in model_configs:
        msg = f"no configuration {config_name} for cross section model {name}, available are {list(model_configs)}"
        logger.error(msg)
        raise KeyError(msg)
    integrator = GaussLegendreIntegrator(cfg.get('integration', {}).get('gauss_legendre_order', 48))
    model = model_class(config_name, model_configs[config_name], cfg.get('global_parameters', {}), integrator)
    logger.debug(f"created cross section model {model}")
    return model
