"""
Reading of the NuEvtGen yaml configuration.

The default configuration is shipped as ``config_default.yaml`` next to the
package. A user configuration file only needs to contain the settings that
differ from the default; it is merged recursively on top of it.
"""
import copy
import os
import logging
import yaml
import numpy as np

logger = logging.getLogger('NuEvtGen.config')

config_file_default = os.path.join(os.path.dirname(os.path.dirname(__file__)), 'config_default.yaml')

#: environmental variable selecting the event generator list
EVGL_ENV_VARIABLE = "NUEVTGEN_EVGL"


def merge_config(user, default):
    if isinstance(user, dict) and isinstance(default, dict):
        for k, v in default.items():
            if k not in user:
                user[k] = v
            else:
                user[k] = merge_config(user[k], v)
    return user


def get_config(config_file=None, user_config=None):
    """
    returns the configuration dictionary

    Parameters
    ----------
    config_file: string or None
        path to a yaml file with local config overrides
    user_config: dict or None
        config overrides passed directly (applied after config_file)

    Returns
    -------
    cfg: dict
    """
    logger.debug('reading default config from {}'.format(config_file_default))
    with open(config_file_default, 'r') as ymlfile:
        cfg = yaml.load(ymlfile, Loader=yaml.FullLoader)

    if config_file is not None:
        if not os.path.exists(config_file):
            msg = f"config file {config_file} does not exist"
            logger.error(msg)
            raise FileNotFoundError(msg)
        logger.status('reading local config overrides from {}'.format(config_file))
        with open(config_file, 'r') as ymlfile:
            local_config = yaml.load(ymlfile, Loader=yaml.FullLoader)
            if local_config is not None:
                cfg = merge_config(local_config, cfg)

    if user_config is not None:
        cfg = merge_config(copy.deepcopy(user_config), cfg)

    evgl = os.environ.get(EVGL_ENV_VARIABLE)
    if evgl:
        logger.info(f"event generator list {evgl} selected by ${EVGL_ENV_VARIABLE}")
        cfg['event_generator_list'] = evgl

    if cfg['seed'] is None:
        # a random seed is drawn once and stored so that a run can be repeated
        cfg['seed'] = int(np.random.randint(0, 2 ** 32 - 1))

    return cfg
