from typing import Optional, Sequence, Union
import logging
import torch
from ..geometries import check_plane, draw, draw_2d
from ..utils import centered_axis, check_sizes, get_dtype, log_shapes
from .intensities import (
    SheppLoganMask,
    SheppLoganParameters,
    ct_shepp_logan_intensities,
)
from .geometry import shepp_logan_shapes

# one normalized unit is 8 cm
HEAD_SCALE = 8.0


def _setup(ti: Optional[SheppLoganParameters], dtype):
    if ti is None:
        ti = ct_shepp_logan_intensities()
    if isinstance(ti, SheppLoganMask):
        dtype = torch.bool
    else:
        dtype = get_dtype(dtype)
    shapes = shepp_logan_shapes(ti)
    logging.debug("Shepp-Logan phantom: %s", log_shapes(shapes))
    return shapes, dtype


def create_shepp_logan_phantom(
    nx: int,
    ny: int,
    nz: int,
    fovs: Sequence[float] = (20, 20, 20),
    ti: Optional[SheppLoganParameters] = None,
    dtype: Union[str, torch.dtype] = torch.float32,
) -> torch.Tensor:
    """
    Generate a 3D Shepp-Logan phantom of shape (nx, ny, nz).

    ti defaults to the CT intensities; a SheppLoganMask yields a boolean
    mask of the selected ellipsoids.
    """
    check_sizes((nx, ny, nz), fovs)
    shapes, dtype = _setup(ti, dtype)
    axes = [centered_axis(n, f) / HEAD_SCALE for n, f in zip((nx, ny, nz), fovs)]
    phantom = torch.zeros((nx, ny, nz), dtype=dtype)
    for shape in shapes:
        draw(phantom, *axes, shape)
    return phantom


def create_shepp_logan_phantom_2d(
    n1: int,
    n2: int,
    plane: str,
    fovs: Sequence[float] = (20, 20),
    slice_position: float = 0.0,
    ti: Optional[SheppLoganParameters] = None,
    dtype: Union[str, torch.dtype] = torch.float32,
) -> torch.Tensor:
    """
    Generate a (n1, n2) slice of the Shepp-Logan phantom, slice_position in cm.

    The axial slice at 0 is the classic 2D Shepp-Logan phantom.
    """
    check_sizes((n1, n2), fovs)
    check_plane(plane)
    shapes, dtype = _setup(ti, dtype)
    ax_1, ax_2 = (centered_axis(n, f) / HEAD_SCALE for n, f in zip((n1, n2), fovs))
    value = float(slice_position) / HEAD_SCALE
    phantom = torch.zeros((n1, n2), dtype=dtype)
    for shape in shapes:
        draw_2d(phantom, ax_1, ax_2, value, plane, shape)
    return phantom
