from dataclasses import dataclass, fields
from typing import Union
from ..geometries import Masking

TISSUES = (
    "lung",
    "heart",
    "vessels_blood",
    "bones",
    "liver",
    "stomach",
    "body",
    "lv_blood",
    "rv_blood",
    "la_blood",
    "ra_blood",
)


@dataclass(frozen=True)
class TissueIntensities:
    lung: float = 0.08
    heart: float = 0.65
    vessels_blood: float = 1.0
    bones: float = 0.85
    liver: float = 0.55
    stomach: float = 0.9
    body: float = 0.25
    lv_blood: float = 0.98
    rv_blood: float = 0.99
    la_blood: float = 0.97
    ra_blood: float = 0.96


@dataclass(frozen=True)
class TissueMask:
    """
    Selects tissues for a boolean torso mask.

    A voxel of the mask is True when the last structure drawn over it belongs
    to a selected tissue.
    """

    lung: bool = False
    heart: bool = False
    vessels_blood: bool = False
    bones: bool = False
    liver: bool = False
    stomach: bool = False
    body: bool = False
    lv_blood: bool = False
    rv_blood: bool = False
    la_blood: bool = False
    ra_blood: bool = False


TissueParameters = Union[TissueIntensities, TissueMask]


def check_tissue(name: str) -> str:
    if name not in TISSUES:
        raise ValueError(
            "Unknown tissue %r, expected one of %s" % (name, ", ".join(TISSUES))
        )
    return name


def tissue_mask(name: str) -> TissueMask:
    return TissueMask(**{check_tissue(name): True})


def get_intensity(ti: TissueParameters, name: str) -> Masking:
    # every torso structure overwrites what lies underneath
    return Masking(getattr(ti, check_tissue(name)))


def is_mask(ti: TissueParameters) -> bool:
    return isinstance(ti, TissueMask)


def tissue_parameters_from_dict(d: dict, mask: bool = False) -> TissueParameters:
    cls = TissueMask if mask else TissueIntensities
    names = set(f.name for f in fields(cls))
    unknown = set(d) - names
    if unknown:
        raise ValueError("Unknown tissue fields: %s" % ", ".join(sorted(unknown)))
    if mask:
        return cls(**{k: bool(v) for k, v in d.items()})
    return cls(**{k: float(v) for k, v in d.items()})
