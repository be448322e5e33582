from dataclasses import dataclass, fields
from typing import Union
from ..geometries import Additive, Intensity, Masking

ELLIPSOIDS = (
    "skull",
    "brain",
    "right_big",
    "left_big",
    "top",
    "middle_high",
    "bottom_left",
    "middle_low",
    "bottom_center",
    "bottom_right",
    "extra_1",
    "extra_2",
)


@dataclass(frozen=True)
class SheppLoganIntensities:
    """
    Intensities of the 12 ellipsoids of the 3D Shepp-Logan phantom.

    Intensities add up, so the value of a voxel is the sum over all
    ellipsoids containing it. The last two ellipsoids only appear off the
    central axial slice.
    """

    skull: float = 0.0
    brain: float = 0.0
    right_big: float = 0.0
    left_big: float = 0.0
    top: float = 0.0
    middle_high: float = 0.0
    bottom_left: float = 0.0
    middle_low: float = 0.0
    bottom_center: float = 0.0
    bottom_right: float = 0.0
    extra_1: float = 0.0
    extra_2: float = 0.0


@dataclass(frozen=True)
class SheppLoganMask:
    """Selects ellipsoids; each one overwrites what lies underneath."""

    skull: bool = False
    brain: bool = False
    right_big: bool = False
    left_big: bool = False
    top: bool = False
    middle_high: bool = False
    bottom_left: bool = False
    middle_low: bool = False
    bottom_center: bool = False
    bottom_right: bool = False
    extra_1: bool = False
    extra_2: bool = False


SheppLoganParameters = Union[SheppLoganIntensities, SheppLoganMask]


def ct_shepp_logan_intensities() -> SheppLoganIntensities:
    # Shepp and Logan, IEEE Trans. Nucl. Sci., 1974
    return SheppLoganIntensities(
        skull=2.0,
        brain=-0.98,
        right_big=-0.02,
        left_big=-0.02,
        top=0.01,
        middle_high=0.01,
        bottom_left=0.01,
        middle_low=0.01,
        bottom_center=0.01,
        bottom_right=0.01,
        extra_1=0.02,
        extra_2=-0.02,
    )


def mri_shepp_logan_intensities() -> SheppLoganIntensities:
    # higher contrast version of Toft, 1996
    return SheppLoganIntensities(
        skull=1.0,
        brain=-0.8,
        right_big=-0.2,
        left_big=-0.2,
        top=0.1,
        middle_high=0.1,
        bottom_left=0.1,
        middle_low=0.1,
        bottom_center=0.1,
        bottom_right=0.1,
        extra_1=0.1,
        extra_2=-0.1,
    )


def get_intensity(ti: SheppLoganParameters, name: str) -> Intensity:
    if name not in ELLIPSOIDS:
        raise ValueError("Unknown Shepp-Logan ellipsoid %r" % name)
    if isinstance(ti, SheppLoganMask):
        return Masking(getattr(ti, name))
    return Additive(getattr(ti, name))


def shepp_logan_parameters_from_dict(
    d: dict, mask: bool = False
) -> SheppLoganParameters:
    names = set(f.name for f in fields(SheppLoganIntensities))
    unknown = set(d) - names
    if unknown:
        raise ValueError(
            "Unknown Shepp-Logan fields: %s" % ", ".join(sorted(unknown))
        )
    if mask:
        return SheppLoganMask(**{k: bool(v) for k, v in d.items()})
    return SheppLoganIntensities(**{k: float(v) for k, v in d.items()})
