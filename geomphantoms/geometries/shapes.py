from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Sequence, Tuple, Union
import torch
from .rotation import euler2mat, bounding_radii, check_plane


@dataclass(frozen=True)
class Additive:
    """Intensity accumulated onto the voxels a shape covers."""

    value: Any


@dataclass(frozen=True)
class Masking:
    """Intensity that overwrites the voxels a shape covers."""

    value: Any


Intensity = Union[Additive, Masking]


def as_intensity(value: Any) -> Intensity:
    if isinstance(value, (Additive, Masking)):
        return value
    return Masking(value)


def draw_pixels(view: torch.Tensor, intensity: Intensity, mask: torch.Tensor) -> None:
    if not isinstance(intensity, (Additive, Masking)):
        raise TypeError("Unknown intensity type %s" % type(intensity).__name__)
    value = torch.as_tensor(intensity.value, dtype=view.dtype)
    if isinstance(intensity, Additive):
        view[mask] += value
    else:
        view[mask] = value


class Shape(object):
    cx: float
    cy: float
    cz: float
    intensity: Intensity

    @property
    def center(self) -> Tuple[float, float, float]:
        return (self.cx, self.cy, self.cz)

    def bounding_radii(self) -> Tuple[float, float, float]:
        raise NotImplementedError

    def is_degenerate(self) -> bool:
        return min(self.bounding_radii()) <= 0

    def inside(self, x, y, z) -> torch.Tensor:
        raise NotImplementedError

    def contains(self, point: Sequence[float]) -> bool:
        if self.is_degenerate():
            return False
        x, y, z = (torch.tensor(float(p), dtype=torch.float64) for p in point)
        return bool(self.inside(x, y, z))

    def rotate_coronal(self) -> Shape:
        raise NotImplementedError

    def rotate_sagittal(self) -> Shape:
        raise NotImplementedError


@dataclass(frozen=True)
class Ellipsoid(Shape):
    cx: float
    cy: float
    cz: float
    rx: float
    ry: float
    rz: float
    intensity: Intensity

    def __post_init__(self) -> None:
        object.__setattr__(self, "intensity", as_intensity(self.intensity))

    def bounding_radii(self) -> Tuple[float, float, float]:
        return (self.rx, self.ry, self.rz)

    def inside(self, x, y, z) -> torch.Tensor:
        dx = (x - self.cx) / self.rx
        dy = (y - self.cy) / self.ry
        dz = (z - self.cz) / self.rz
        return dx * dx + dy * dy + dz * dz <= 1.0

    def rotate_coronal(self) -> Ellipsoid:
        return Ellipsoid(
            self.cx, self.cz, self.cy, self.rx, self.rz, self.ry, self.intensity
        )

    def rotate_sagittal(self) -> Ellipsoid:
        return Ellipsoid(
            self.cy, self.cz, self.cx, self.ry, self.rz, self.rx, self.intensity
        )


@dataclass(frozen=True)
class SuperEllipsoid(Shape):
    """
    |x-cx|/rx ** ex + |y-cy|/ry ** ey + |z-cz|/rz ** ez <= 1

    Exponents of 2 give an ellipsoid, larger exponents a box-like shape and
    smaller ones a pointed shape. The exponent is always applied to the
    absolute deviation so fractional exponents stay real.
    """

    cx: float
    cy: float
    cz: float
    rx: float
    ry: float
    rz: float
    exponents: Tuple[float, float, float]
    intensity: Intensity

    def __post_init__(self) -> None:
        object.__setattr__(self, "exponents", tuple(self.exponents))
        object.__setattr__(self, "intensity", as_intensity(self.intensity))

    def bounding_radii(self) -> Tuple[float, float, float]:
        return (self.rx, self.ry, self.rz)

    def inside(self, x, y, z) -> torch.Tensor:
        ex, ey, ez = self.exponents
        dx = torch.abs(x - self.cx) / self.rx
        dy = torch.abs(y - self.cy) / self.ry
        dz = torch.abs(z - self.cz) / self.rz
        return dx**ex + dy**ey + dz**ez <= 1.0

    def rotate_coronal(self) -> SuperEllipsoid:
        ex, ey, ez = self.exponents
        return SuperEllipsoid(
            self.cx,
            self.cz,
            self.cy,
            self.rx,
            self.rz,
            self.ry,
            (ex, ez, ey),
            self.intensity,
        )

    def rotate_sagittal(self) -> SuperEllipsoid:
        ex, ey, ez = self.exponents
        return SuperEllipsoid(
            self.cy,
            self.cz,
            self.cx,
            self.ry,
            self.rz,
            self.rx,
            (ey, ez, ex),
            self.intensity,
        )


@dataclass(frozen=True)
class RotatedEllipsoid(Shape):
    """
    Ellipsoid rotated by R = Rz(phi) Ry(theta) Rx(psi) about its centre.

    A point P is inside when d = R^T (P - C) satisfies
    (dx/rx)^2 + (dy/ry)^2 + (dz/rz)^2 <= 1. ``plane`` tracks which view the
    centre has been permuted into; the rows of R are permuted to match.
    """

    cx: float
    cy: float
    cz: float
    rx: float
    ry: float
    rz: float
    phi: float
    theta: float
    psi: float
    intensity: Intensity
    plane: str = "axial"

    def __post_init__(self) -> None:
        check_plane(self.plane)
        object.__setattr__(self, "intensity", as_intensity(self.intensity))

    def rotation(self) -> torch.Tensor:
        return euler2mat(self.phi, self.theta, self.psi, self.plane)

    def bounding_radii(self) -> Tuple[float, float, float]:
        return bounding_radii(self.rotation(), self.rx, self.ry, self.rz)

    def is_degenerate(self) -> bool:
        return min(self.rx, self.ry, self.rz) <= 0

    def inside(self, x, y, z) -> torch.Tensor:
        (r11, r12, r13), (r21, r22, r23), (r31, r32, r33) = self.rotation().tolist()
        dx = x - self.cx
        dy = y - self.cy
        dz = z - self.cz
        x_loc = r11 * dx + (r21 * dy + r31 * dz)
        y_loc = r12 * dx + (r22 * dy + r32 * dz)
        z_loc = r13 * dx + (r23 * dy + r33 * dz)
        return (
            x_loc**2 / self.rx**2 + y_loc**2 / self.ry**2 + z_loc**2 / self.rz**2
            <= 1.0
        )

    def rotate_coronal(self) -> RotatedEllipsoid:
        return RotatedEllipsoid(
            self.cx,
            self.cz,
            self.cy,
            self.rx,
            self.ry,
            self.rz,
            self.phi,
            self.theta,
            self.psi,
            self.intensity,
            "coronal",
        )

    def rotate_sagittal(self) -> RotatedEllipsoid:
        return RotatedEllipsoid(
            self.cy,
            self.cz,
            self.cx,
            self.rx,
            self.ry,
            self.rz,
            self.phi,
            self.theta,
            self.psi,
            self.intensity,
            "sagittal",
        )


@dataclass(frozen=True)
class _Cylinder(Shape):
    cx: float
    cy: float
    cz: float
    r: float
    height: float
    intensity: Intensity

    def __post_init__(self) -> None:
        # cylinders always overwrite what lies underneath
        value = self.intensity
        if isinstance(value, (Additive, Masking)):
            value = value.value
        object.__setattr__(self, "intensity", Masking(value))

    def is_degenerate(self) -> bool:
        return self.r <= 0 or self.height < 0

    def _inside(self, a, b, c, ca, cb, cc) -> torch.Tensor:
        # a, b span the cross section, c runs along the axis
        da = a - ca
        db = b - cb
        return (da * da + db * db <= self.r * self.r) & (
            torch.abs(c - cc) <= self.height / 2
        )


class CylinderZ(_Cylinder):
    def bounding_radii(self) -> Tuple[float, float, float]:
        return (self.r, self.r, self.height / 2)

    def inside(self, x, y, z) -> torch.Tensor:
        return self._inside(x, y, z, self.cx, self.cy, self.cz)

    def rotate_coronal(self) -> CylinderY:
        return CylinderY(self.cx, self.cz, self.cy, self.r, self.height, self.intensity)

    def rotate_sagittal(self) -> CylinderY:
        return CylinderY(self.cy, self.cz, self.cx, self.r, self.height, self.intensity)


class CylinderY(_Cylinder):
    def bounding_radii(self) -> Tuple[float, float, float]:
        return (self.r, self.height / 2, self.r)

    def inside(self, x, y, z) -> torch.Tensor:
        return self._inside(x, z, y, self.cx, self.cz, self.cy)

    def rotate_coronal(self) -> CylinderZ:
        return CylinderZ(self.cx, self.cz, self.cy, self.r, self.height, self.intensity)

    def rotate_sagittal(self) -> CylinderX:
        return CylinderX(self.cy, self.cz, self.cx, self.r, self.height, self.intensity)


class CylinderX(_Cylinder):
    def bounding_radii(self) -> Tuple[float, float, float]:
        return (self.height / 2, self.r, self.r)

    def inside(self, x, y, z) -> torch.Tensor:
        return self._inside(y, z, x, self.cy, self.cz, self.cx)

    def rotate_coronal(self) -> CylinderX:
        return CylinderX(self.cx, self.cz, self.cy, self.r, self.height, self.intensity)

    def rotate_sagittal(self) -> CylinderZ:
        return CylinderZ(self.cy, self.cz, self.cx, self.r, self.height, self.intensity)


def rotate_coronal(shape: Shape) -> Shape:
    return shape.rotate_coronal()


def rotate_sagittal(shape: Shape) -> Shape:
    return shape.rotate_sagittal()
