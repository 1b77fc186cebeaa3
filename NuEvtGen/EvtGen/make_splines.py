"""
Computes the cross section splines of a set of neutrinos and targets and
writes them to an XML file.

Example::

    nuevtgen-mkspl -p 14,-14 -t 1000260560 -o xsec_splines.xml

The targets are given either as a comma separated list of nuclear PDG codes
(``-t``) or as the geometry file whose target nuclei are used (``-f``).

Exit codes: 0 on success, 1 for missing, conflicting or invalid arguments,
2 if the neutrino list is empty and 3 if the target list is empty.
"""
import sys
import argparse
import logging
import yaml

from NuEvtGen.utilities import units, pdg
from NuEvtGen.utilities.config import get_config
from NuEvtGen.utilities.logging import LOGGING_STATUS, setup_logger
from NuEvtGen.utilities.exceptions import ConfigurationError
from NuEvtGen.EvtGen.xsec_spline_list import XSecSplineList
from NuEvtGen.EvtGen.evg_driver import EventGeneratorDriver
from NuEvtGen.Geo.geom_analyzer import GeomAnalyzer

logger = logging.getLogger('NuEvtGen.make_splines')

EXIT_SUCCESS = 0
EXIT_BAD_ARGUMENTS = 1
EXIT_NO_NEUTRINOS = 2
EXIT_NO_TARGETS = 3

log_levels = {'debug': logging.DEBUG, 'info': logging.INFO, 'status': LOGGING_STATUS,
              'warning': logging.WARNING, 'error': logging.ERROR}


class _ArgumentParser(argparse.ArgumentParser):
    """ argument parser that raises instead of exiting the interpreter """

    def error(self, message):
        raise ConfigurationError(message, EXIT_BAD_ARGUMENTS)


def get_parser():
    parser = _ArgumentParser(prog='nuevtgen-mkspl',
                             description='Compute the cross section splines of all interaction channels '
                                         'of the given neutrinos and targets')
    parser.add_argument('-p', dest='probes', type=str, required=True,
                        help='comma separated list of neutrino PDG codes, e.g. 14,-14')
    targets = parser.add_mutually_exclusive_group(required=True)
    targets.add_argument('-t', dest='targets', type=str, default=None,
                         help='comma separated list of target PDG codes, e.g. 1000260560')
    targets.add_argument('-f', dest='geometry', type=str, default=None,
                         help='geometry file, all of its target nuclei are used')
    parser.add_argument('-o', dest='output', type=str, default='xsec_splines.xml',
                        help='output XML file (default xsec_splines.xml)')
    parser.add_argument('-n', dest='n_knots', type=int, default=-1,
                        help='number of knots per spline (default: depends on the energy range)')
    parser.add_argument('-e', dest='max_energy', type=float, default=-1,
                        help='maximum neutrino energy in GeV (default: validity range of the cross section models)')
    parser.add_argument('-c', '--config', dest='config', type=str, default=None,
                        help='yaml file with configuration overrides')
    parser.add_argument('--log_level', type=str, default='status', choices=list(log_levels.keys()),
                        help='verbosity of the log output')
    return parser


def get_command_line_args(argv=None):
    """
    parses the command line

    Parameters
    ----------
    argv: list of strings or None
        the arguments (without the program name), ``sys.argv[1:]`` if None

    Returns
    -------
    options: argparse.Namespace or None
        parsed options with the neutrino codes in ``probes`` and, if given
        with -t, the target codes in ``targets``. Energies are in internal units
    error: ConfigurationError or None
        the problem with the command line, its ``exit_code`` is the exit code
        of the program
    """
    parser = get_parser()
    try:
        options = parser.parse_args(argv)
    except ConfigurationError as e:
        return None, e

    try:
        options.probes = pdg.parse_code_list(options.probes)
    except ValueError:
        return None, ConfigurationError(f"invalid neutrino code list '{options.probes}'", EXIT_BAD_ARGUMENTS)
    if not options.probes:
        return None, ConfigurationError("the neutrino code list is empty", EXIT_NO_NEUTRINOS)
    for probe in options.probes:
        if not pdg.is_neutrino(probe):
            return None, ConfigurationError(f"{probe} is not a neutrino PDG code", EXIT_BAD_ARGUMENTS)

    if options.targets is not None:
        try:
            options.targets = pdg.parse_code_list(options.targets)
        except ValueError:
            return None, ConfigurationError(f"invalid target code list '{options.targets}'", EXIT_BAD_ARGUMENTS)
        if not options.targets:
            return None, ConfigurationError("the target code list is empty", EXIT_NO_TARGETS)
        for target in options.targets:
            if not pdg.is_valid_target(target):
                return None, ConfigurationError(f"{target} is not a target PDG code", EXIT_BAD_ARGUMENTS)

    if 0 < options.n_knots < 2:
        return None, ConfigurationError(f"a spline needs at least 2 knots, not {options.n_knots}", EXIT_BAD_ARGUMENTS)

    if options.max_energy > 0:
        options.max_energy *= units.GeV
    return options, None


def _fatal(error):
    print(f"FATAL: {error}", file=sys.stderr)
    get_parser().print_usage(sys.stderr)
    return error.exit_code


def main(argv=None):
    """
    runs nuevtgen-mkspl and returns the exit code
    """
    options, error = get_command_line_args(argv)
    if error is not None:
        return _fatal(error)

    setup_logger("NuEvtGen", log_levels[options.log_level])

    try:
        cfg = get_config(options.config)
    except (FileNotFoundError, yaml.YAMLError) as e:
        return _fatal(ConfigurationError(str(e), EXIT_BAD_ARGUMENTS))

    targets = options.targets
    if options.geometry is not None:
        try:
            targets = GeomAnalyzer(options.geometry).list_of_target_nuclei()
        except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
            return _fatal(ConfigurationError(str(e), EXIT_BAD_ARGUMENTS))
        if not targets:
            return _fatal(ConfigurationError(f"the geometry {options.geometry} has no target nuclei",
                                             EXIT_NO_TARGETS))

    spline_list = XSecSplineList.from_config(cfg)
    try:
        driver = EventGeneratorDriver(spline_list, cfg)
    except ConfigurationError as e:
        return _fatal(e)

    for probe in options.probes:
        for target in targets:
            logger.status(f"computing splines for neutrino {probe} on target {target}")
            driver.configure((probe, target))
            failed = driver.create_splines(options.n_knots, options.max_energy)
            for channel in failed:
                logger.warning(f"no spline for {channel.key}")

    spline_list.save_as_xml(options.output)
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
