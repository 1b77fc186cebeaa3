"""
Analyzer of a simple geometry made of axis-aligned boxes.

The geometry is described in a yaml file::

    materials:
      water:
        density: 1.0  # g/cm^3
        composition:  # nuclear PDG code: mass fraction
          1000010010: 0.112
          1000080160: 0.888
    volumes:
      - name: tank
        material: water
        min: [-5, -5, -5]  # m
        max: [5, 5, 5]

Volumes must not overlap.
"""
import os
import logging
import yaml
import numpy as np

from NuEvtGen.utilities import units, pdg
from NuEvtGen.utilities.constants import amu
from NuEvtGen.EvtGen.path_length_list import PathLengthList

logger = logging.getLogger('NuEvtGen.geom_analyzer')


def ray_box_intersection(position, direction, box_min, box_max):
    """
    length of the part of the ray position + t * direction (t >= 0) inside a box

    Parameters
    ----------
    position: 3dim array
    direction: 3dim array
        unit vector
    box_min, box_max: 3dim arrays
        lower and upper corner of the box

    Returns
    -------
    length: float
    """
    t_near = 0.
    t_far = np.inf
    for i in range(3):
        if direction[i] == 0:
            if position[i] < box_min[i] or position[i] > box_max[i]:
                return 0.
            continue
        t1 = (box_min[i] - position[i]) / direction[i]
        t2 = (box_max[i] - position[i]) / direction[i]
        t_near = max(t_near, min(t1, t2))
        t_far = min(t_far, max(t1, t2))
        if t_near >= t_far:
            return 0.
    return t_far - t_near


class GeomAnalyzer:

    def __init__(self, filename):
        if not os.path.exists(filename):
            msg = f"geometry file {filename} not found"
            logger.error(msg)
            raise FileNotFoundError(msg)
        with open(filename, 'r') as fin:
            geometry = yaml.load(fin, Loader=yaml.FullLoader)
        self._materials = {}
        self._volumes = []
        try:
            for name, material in geometry['materials'].items():
                composition = {int(k): float(v) for k, v in material['composition'].items()}
                for target in composition:
                    if not pdg.is_valid_target(target):
                        raise ValueError(f"{target} is not a nucleus PDG code")
                total = sum(composition.values())
                if not np.isclose(total, 1, rtol=1e-3):
                    logger.warning(f"mass fractions of material {name} add up to {total}, normalizing them")
                    composition = {k: v / total for k, v in composition.items()}
                self._materials[name] = {'density': float(material['density']) * units.g / units.cm3,
                                         'composition': composition}
            for volume in geometry['volumes']:
                if volume['material'] not in self._materials:
                    raise ValueError(f"volume {volume.get('name')} uses the unknown material {volume['material']}")
                box_min = np.array(volume['min'], dtype=float) * units.m
                box_max = np.array(volume['max'], dtype=float) * units.m
                if box_min.shape != (3,) or np.any(box_max <= box_min):
                    raise ValueError(f"invalid box of volume {volume.get('name')}")
                self._volumes.append({'name': volume.get('name', ''), 'material': volume['material'],
                                      'min': box_min, 'max': box_max})
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            msg = f"invalid geometry file {filename}: {e}"
            logger.error(msg)
            raise ValueError(msg) from e
        logger.info(f"read geometry with {len(self._materials)} materials and {len(self._volumes)} volumes from {filename}")

    def list_of_target_nuclei(self):
        """ sorted PDG codes of all nuclei in the volumes of the geometry """
        targets = set()
        for volume in self._volumes:
            targets.update(self._materials[volume['material']]['composition'].keys())
        return sorted(targets)

    def compute_path_lengths(self, position, direction):
        """
        path lengths of a ray through the geometry

        Parameters
        ----------
        position: 3dim array
            start point of the ray
        direction: 3dim array
            direction of the ray (normalized internally)

        Returns
        -------
        path_lengths: PathLengthList
            number of target nuclei per unit area along the ray, for every
            target of the geometry
        """
        position = np.array(position, dtype=float)
        direction = np.array(direction, dtype=float)
        norm = np.linalg.norm(direction)
        if norm == 0:
            raise ValueError("direction of the ray must not be zero")
        direction = direction / norm
        path_lengths = PathLengthList(self.list_of_target_nuclei())
        for volume in self._volumes:
            length = ray_box_intersection(position, direction, volume['min'], volume['max'])
            if length <= 0:
                continue
            material = self._materials[volume['material']]
            for target, mass_fraction in material['composition'].items():
                # column density / mass of one nucleus
                n_nuclei = material['density'] * length * mass_fraction / (pdg.ion_a(target) * amu)
                path_lengths.add_path_length(target, n_nuclei)
        return path_lengths
