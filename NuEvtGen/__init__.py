""" NuEvtGen: neutrino interaction event generation driven by cached cross section splines"""

import os
import logging
import importlib.metadata as importlib_metadata

from NuEvtGen.utilities.logging import NuEvtGenLogger, setup_logger

logging.setLoggerClass(NuEvtGenLogger)
setup_logger(name="NuEvtGen")

__version__ = None
# First, try to obtain version number from pyproject.toml (developer version)
parent_dir = os.path.dirname(os.path.dirname(os.path.realpath(__file__)))
toml_file = os.path.join(parent_dir, 'pyproject.toml')
if os.path.isfile(toml_file):
    import toml
    toml_dict = toml.load(toml_file)
    try:
        if toml_dict['tool']['poetry']['name'] == "NuEvtGen":  # check this is the right pyproject.toml
            __version__ = toml_dict['tool']['poetry']['version']
    except KeyError:
        pass
# If not available, we're probably using the pip installed package
if __version__ is None:
    try:
        __version__ = importlib_metadata.version("NuEvtGen")
    except importlib_metadata.PackageNotFoundError:
        __version__ = "unknown"
