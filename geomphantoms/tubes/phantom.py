from typing import Optional, Sequence, Union
import logging
import torch
from ..geometries import check_plane, draw, draw_2d
from ..utils import check_sizes, get_dtype, log_shapes
from .intensities import TubesIntensities, TubesMask, TubesParameters
from .geometry import TubesGeometry, tubes_shapes

# one normalized unit is 10 cm
TUBES_SCALE = 10.0

TubesInput = Union[TubesParameters, Sequence[TubesParameters]]


def tubes_axis(n: int, fov: float) -> torch.Tensor:
    # the grid spans the whole fov, endpoints included
    return torch.linspace(-fov / 2, fov / 2, n, dtype=torch.float64) / TUBES_SCALE


def _render(image, tg, ti, draw_shape):
    shapes = tubes_shapes(tg, ti)
    logging.debug("tubes phantom: %s", log_shapes(shapes))
    for shape in shapes:
        draw_shape(image, shape)
    return image


def _render_stack(size, tg, ti: Optional[TubesInput], dtype, draw_shape):
    if ti is None:
        ti = TubesIntensities()
    if tg is None:
        tg = TubesGeometry()
    if isinstance(ti, (TubesIntensities, TubesMask)):
        dtype = torch.bool if isinstance(ti, TubesMask) else get_dtype(dtype)
        return _render(torch.zeros(size, dtype=dtype), tg, ti, draw_shape)
    if len(ti) == 0:
        raise ValueError("ti must contain at least one intensity set")
    # a stack keeps the requested dtype, masks included
    dtype = get_dtype(dtype)
    result = torch.zeros(tuple(size) + (len(ti),), dtype=dtype)
    for m, t in enumerate(ti):
        _render(result[..., m], tg, t, draw_shape)
    return result


def create_tubes_phantom(
    nx: int,
    ny: int,
    nz: int,
    fovs: Sequence[float] = (10, 10, 10),
    tg: Optional[TubesGeometry] = None,
    ti: Optional[TubesInput] = None,
    dtype: Union[str, torch.dtype] = torch.float32,
) -> torch.Tensor:
    """
    Generate a 3D tubes phantom.

    Parameters
    ----------
    nx, ny, nz : int
        grid size
    fovs : sequence of float
        field of view in cm
    tg : TubesGeometry, optional
    ti : TubesIntensities, TubesMask or a list of them, optional
        a list renders one volume per entry along a trailing axis

    Returns
    -------
    torch.Tensor
        (nx, ny, nz) or (nx, ny, nz, len(ti))
    """
    check_sizes((nx, ny, nz), fovs)
    ax_x, ax_y, ax_z = (tubes_axis(n, f) for n, f in zip((nx, ny, nz), fovs))
    return _render_stack(
        (nx, ny, nz),
        tg,
        ti,
        dtype,
        lambda image, shape: draw(image, ax_x, ax_y, ax_z, shape),
    )


def create_tubes_phantom_2d(
    n1: int,
    n2: int,
    plane: str,
    fovs: Sequence[float] = (10, 10),
    slice_position: float = 0.0,
    tg: Optional[TubesGeometry] = None,
    ti: Optional[TubesInput] = None,
    dtype: Union[str, torch.dtype] = torch.float32,
) -> torch.Tensor:
    """(n1, n2) slice of the tubes phantom, or (n1, n2, len(ti)) for a list"""
    check_sizes((n1, n2), fovs)
    check_plane(plane)
    ax_1, ax_2 = (tubes_axis(n, f) for n, f in zip((n1, n2), fovs))
    value = float(slice_position) / TUBES_SCALE
    return _render_stack(
        (n1, n2),
        tg,
        ti,
        dtype,
        lambda image, shape: draw_2d(image, ax_1, ax_2, value, plane, shape),
    )
