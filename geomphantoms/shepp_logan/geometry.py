"""
Ellipsoids of the 3D Shepp-Logan head phantom.

Coefficients follow Kak and Slaney (1988), with the duplicated row removed and
the two ellipsoids of the 2D phantom that are missing there restored. The head
is shifted by 0.25 in z so that the central axial slice equals the classic 2D
Shepp-Logan phantom.
"""

import math
from typing import List
from ..geometries import Ellipsoid, RotatedEllipsoid, Shape
from .intensities import SheppLoganParameters, get_intensity


def shepp_logan_shapes(ti: SheppLoganParameters) -> List[Shape]:
    def e(cx, cy, cz, rx, ry, rz, name):
        return Ellipsoid(cx, cy, cz, rx, ry, rz, get_intensity(ti, name))

    def re(cx, cy, cz, rx, ry, rz, phi_deg, name):
        phi = phi_deg * math.pi / 180
        return RotatedEllipsoid(
            cx, cy, cz, rx, ry, rz, phi, 0.0, 0.0, get_intensity(ti, name)
        )

    return [
        e(0.0, 0.0, 0.25, 0.69, 0.92, 0.9, "skull"),
        e(0.0, -0.0184, 0.25, 0.6624, 0.874, 0.88, "brain"),
        re(-0.22, 0.0, 0.0, 0.41, 0.16, 0.21, -72, "right_big"),
        re(0.22, 0.0, 0.0, 0.31, 0.11, 0.22, 72, "left_big"),
        e(0.0, 0.35, 0.0, 0.21, 0.25, 0.35, "top"),
        e(0.0, 0.1, 0.0, 0.046, 0.046, 0.046, "middle_high"),
        e(-0.08, -0.605, 0.0, 0.046, 0.023, 0.02, "bottom_left"),
        e(0.0, -0.1, 0.0, 0.046, 0.046, 0.046, "middle_low"),
        e(0.0, -0.605, 0.0, 0.023, 0.023, 0.023, "bottom_center"),
        re(0.06, -0.605, 0.0, 0.046, 0.023, 0.02, -90, "bottom_right"),
        re(0.06, -0.105, 0.3125, 0.056, 0.04, 0.1, -90, "extra_1"),
        e(0.0, 0.1, 0.875, 0.056, 0.056, 0.1, "extra_2"),
    ]
