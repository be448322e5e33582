from dataclasses import dataclass, fields
from typing import Tuple, Union


@dataclass(frozen=True)
class TubesIntensities:
    """
    Intensities of the tubes phantom. The number of fillings sets the number
    of tubes.
    """

    outer_cylinder: float = 0.25
    tube_wall: float = 0.0
    tube_fillings: Tuple[float, ...] = (0.1, 0.3, 0.5, 0.7, 0.9, 1.0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tube_fillings", tuple(self.tube_fillings))


@dataclass(frozen=True)
class TubesMask:
    outer_cylinder: bool = True
    tube_wall: bool = True
    tube_fillings: Tuple[bool, ...] = (True,) * 6

    def __post_init__(self) -> None:
        object.__setattr__(self, "tube_fillings", tuple(self.tube_fillings))


TubesParameters = Union[TubesIntensities, TubesMask]


def tubes_parameters_from_dict(d: dict, mask: bool = False) -> TubesParameters:
    cls = TubesMask if mask else TubesIntensities
    cast = bool if mask else float
    names = set(f.name for f in fields(cls))
    unknown = set(d) - names
    if unknown:
        raise ValueError("Unknown tubes fields: %s" % ", ".join(sorted(unknown)))
    kwargs = {}
    for k, v in d.items():
        kwargs[k] = tuple(cast(x) for x in v) if k == "tube_fillings" else cast(v)
    return cls(**kwargs)
