from dataclasses import dataclass, fields
import math
from typing import List
from ..geometries import CylinderZ, Shape
from .intensities import TubesParameters


@dataclass(frozen=True)
class TubesGeometry:
    """
    Geometry of the tubes phantom in normalized units (1 = 10 cm).

    Tubes are equally spaced on a circle inside the outer cylinder and
    touch it when gap_fraction is 0.
    """

    outer_radius: float = 0.4
    outer_height: float = 0.8
    tubes_height_fraction: float = 0.9
    tube_wall_thickness: float = 0.025
    gap_fraction: float = 0.3


def tubes_geometry_from_dict(d: dict) -> TubesGeometry:
    names = set(f.name for f in fields(TubesGeometry))
    unknown = set(d) - names
    if unknown:
        raise ValueError("Unknown geometry fields: %s" % ", ".join(sorted(unknown)))
    return TubesGeometry(**{k: float(v) for k, v in d.items()})


def tubes_shapes(tg: TubesGeometry, ti: TubesParameters) -> List[Shape]:
    """
    The outer cylinder followed by the wall and the filling of every tube.
    """
    n_tubes = len(ti.tube_fillings)
    if n_tubes == 0:
        raise ValueError("tube_fillings must contain at least one tube")
    R = tg.outer_radius
    # largest radius such that n tubes fit on a circle inside R
    r = R * math.sin(math.pi / n_tubes) / (1.0 + math.sin(math.pi / n_tubes))
    r_centers = R - r
    wall_radius = r * (1 - tg.gap_fraction / 2)
    filling_radius = r * (1 - tg.gap_fraction)
    wall_height = tg.outer_height * tg.tubes_height_fraction
    filling_height = wall_height - 2 * tg.tube_wall_thickness

    shapes: List[Shape] = [
        CylinderZ(0.0, 0.0, 0.0, R, tg.outer_height, ti.outer_cylinder)
    ]
    for i, filling in enumerate(ti.tube_fillings):
        angle = 2 * math.pi * i / n_tubes
        cx = r_centers * math.cos(angle)
        cy = r_centers * math.sin(angle)
        shapes.append(CylinderZ(cx, cy, 0.0, wall_radius, wall_height, ti.tube_wall))
        shapes.append(CylinderZ(cx, cy, 0.0, filling_radius, filling_height, filling))
    return shapes
