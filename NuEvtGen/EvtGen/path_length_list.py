"""
Path lengths of a neutrino ray through the materials of a geometry.
"""
import os
import copy
import logging
import xml.etree.ElementTree as ET

from NuEvtGen.utilities.exceptions import InvalidScaleError

logger = logging.getLogger('NuEvtGen.path_length_list')


class PathLengthList:
    """
    mapping of target (material) PDG code to path length

    The path length of a target is the amount of that target seen along the
    neutrino trajectory. When it is given in target nuclei per unit area,
    cross section times path length is an interaction probability. Unknown
    targets have a path length of zero.
    """

    def __init__(self, targets=None):
        """
        Parameters
        ----------
        targets: list of ints or None
            PDG codes to create with a path length of zero
        """
        self._path_lengths = {}
        if targets is not None:
            for target in targets:
                self._path_lengths[int(target)] = 0.

    def add_path_length(self, target, path_length):
        """ adds to the path length of a target (creating it if needed) """
        target = int(target)
        value = self._path_lengths.get(target, 0.) + path_length
        if value < 0:
            msg = f"adding {path_length} to the path length of {target} would make it negative"
            logger.error(msg)
            raise ValueError(msg)
        self._path_lengths[target] = value

    def set_path_length(self, target, path_length):
        if path_length < 0:
            msg = f"path length of {target} needs to be non-negative, not {path_length}"
            logger.error(msg)
            raise ValueError(msg)
        self._path_lengths[int(target)] = float(path_length)

    def scale_path_length(self, target, scale):
        """
        multiplies the path length of a target by a non-negative factor

        A negative factor raises InvalidScaleError and leaves the path lengths unchanged.
        """
        if scale < 0:
            msg = f"can not scale the path length of {target} by the negative factor {scale}"
            logger.error(msg)
            raise InvalidScaleError(msg)
        target = int(target)
        if target in self._path_lengths:
            self._path_lengths[target] *= scale

    def set_all_to_zero(self):
        for target in self._path_lengths:
            self._path_lengths[target] = 0.

    def are_all_zero(self):
        """ True if every path length is exactly zero (also for an empty list) """
        return all(value == 0 for value in self._path_lengths.values())

    def path_length(self, target):
        return self._path_lengths.get(int(target), 0.)

    def materials(self):
        return list(self._path_lengths.keys())

    def items(self):
        return self._path_lengths.items()

    def copy(self):
        return copy.deepcopy(self)

    def __len__(self):
        return len(self._path_lengths)

    def __contains__(self, target):
        return target in self._path_lengths

    def __eq__(self, other):
        if not isinstance(other, PathLengthList):
            return NotImplemented
        return self._path_lengths == other._path_lengths

    def save_as_xml(self, filename):
        root = ET.Element('path_length_list')
        for target, value in self._path_lengths.items():
            node = ET.SubElement(root, 'path_length', pdgc=str(target))
            node.text = repr(float(value))
        tree = ET.ElementTree(root)
        ET.indent(tree)
        tree.write(filename, encoding='utf-8', xml_declaration=True)
        logger.info(f"saved path lengths of {len(self)} targets to {filename}")

    def load_from_xml(self, filename):
        """
        replaces the content with the path lengths stored in an XML file
        """
        if not os.path.exists(filename):
            msg = f"path length file {filename} not found"
            logger.error(msg)
            raise FileNotFoundError(msg)
        root = ET.parse(filename).getroot()
        if root.tag != 'path_length_list':
            msg = f"{filename} is not a path length file (root element {root.tag})"
            logger.error(msg)
            raise ValueError(msg)
        path_lengths = {}
        for node in root.findall('./path_length'):
            value = float(node.text)
            if value < 0:
                msg = f"negative path length {value} for {node.get('pdgc')} in {filename}"
                logger.error(msg)
                raise ValueError(msg)
            path_lengths[int(node.get('pdgc'))] = value
        self._path_lengths = path_lengths
        logger.info(f"loaded path lengths of {len(self)} targets from {filename}")

    def __str__(self):
        s = "path lengths:\n"
        for target, value in self._path_lengths.items():
            s += f"  {target}: {value:.6g}\n"
        return s
