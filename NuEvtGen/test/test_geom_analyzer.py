import numpy as np
import pytest

from NuEvtGen.utilities import units
from NuEvtGen.utilities.constants import amu
from NuEvtGen.Geo.geom_analyzer import GeomAnalyzer, ray_box_intersection

geometry = """
materials:
  water:
    density: 1.0
    composition:
      1000010010: 0.112
      1000080160: 0.888
  iron:
    density: 7.87
    composition:
      1000260560: 1.0
volumes:
  - name: tank
    material: water
    min: [0, -5, -5]
    max: [10, 5, 5]
  - name: absorber
    material: iron
    min: [20, -1, -1]
    max: [21, 1, 1]
"""


@pytest.fixture
def analyzer(tmp_path):
    filename = tmp_path / "geometry.yaml"
    filename.write_text(geometry)
    return GeomAnalyzer(str(filename))


def test_ray_box_intersection():
    box_min = np.array([0., 0., 0.])
    box_max = np.array([1., 2., 3.])
    assert ray_box_intersection(np.array([-1., 1., 1.]), np.array([1., 0., 0.]), box_min, box_max) == pytest.approx(1.)
    # start inside the box
    assert ray_box_intersection(np.array([0.5, 1., 1.]), np.array([0., 0., 1.]), box_min, box_max) == pytest.approx(2.)
    # pointing away
    assert ray_box_intersection(np.array([-1., 1., 1.]), np.array([-1., 0., 0.]), box_min, box_max) == 0.
    # parallel to a face, outside
    assert ray_box_intersection(np.array([-1., 5., 1.]), np.array([1., 0., 0.]), box_min, box_max) == 0.
    diagonal = np.array([1., 2., 3.]) / np.linalg.norm([1., 2., 3.])
    assert ray_box_intersection(np.zeros(3), diagonal, box_min, box_max) == pytest.approx(np.linalg.norm([1., 2., 3.]))


def test_list_of_target_nuclei(analyzer):
    assert analyzer.list_of_target_nuclei() == [1000010010, 1000080160, 1000260560]


def test_path_lengths(analyzer):
    pl = analyzer.compute_path_lengths([-10 * units.m, 0, 0], [2., 0, 0])
    density_water = 1. * units.g / units.cm3
    density_iron = 7.87 * units.g / units.cm3
    np.testing.assert_allclose(pl.path_length(1000080160), density_water * 10 * units.m * 0.888 / (16 * amu))
    np.testing.assert_allclose(pl.path_length(1000010010), density_water * 10 * units.m * 0.112 / (1 * amu))
    np.testing.assert_allclose(pl.path_length(1000260560), density_iron * 1 * units.m / (56 * amu))
    # about 3.3e25 oxygen nuclei per cm^2
    assert 3.0e25 < pl.path_length(1000080160) * units.cm2 < 3.7e25


def test_path_lengths_missing_geometry(analyzer):
    pl = analyzer.compute_path_lengths([0, 20 * units.m, 0], [1., 0, 0])
    assert len(pl) == 3
    assert pl.are_all_zero()
    with pytest.raises(ValueError):
        analyzer.compute_path_lengths([0, 0, 0], [0, 0, 0])


def test_invalid_geometry(tmp_path):
    with pytest.raises(FileNotFoundError):
        GeomAnalyzer(str(tmp_path / "missing.yaml"))
    filename = tmp_path / "geometry.yaml"
    filename.write_text(geometry.replace("material: iron", "material: lead"))
    with pytest.raises(ValueError):
        GeomAnalyzer(str(filename))
