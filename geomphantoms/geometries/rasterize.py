import math
from typing import Optional, Tuple
import torch
from .shapes import Shape, draw_pixels
from .rotation import check_plane


def idx_bounds(ax: torch.Tensor, c: float, r: float) -> Optional[Tuple[int, int]]:
    """
    Inclusive 0-based index range of the voxels of a uniform axis that may lie
    within [c - r, c + r]. Works for ascending and descending axes. Returns
    None if the interval does not overlap the axis.
    """
    n = ax.shape[0]
    first = float(ax[0])
    step = float(ax[1]) - first if n > 1 else 1.0
    i1 = 1 + ((c - r) - first) / step
    i2 = 1 + ((c + r) - first) / step
    i_min = math.floor(min(i1, i2))
    i_max = math.ceil(max(i1, i2))
    if i_min > n or i_max < 1:
        return None
    return max(i_min, 1) - 1, min(i_max, n) - 1


def draw(
    image: torch.Tensor,
    ax_x: torch.Tensor,
    ax_y: torch.Tensor,
    ax_z: torch.Tensor,
    shape: Shape,
) -> torch.Tensor:
    """
    Rasterize a shape onto a 3D grid in place.

    Only the sub-box of the grid overlapping the shape's axis-aligned bounding
    box is visited. The axes should be float64 and uniformly spaced.
    """
    if shape.is_degenerate():
        return image
    rx, ry, rz = shape.bounding_radii()
    bx = idx_bounds(ax_x, shape.cx, rx)
    by = idx_bounds(ax_y, shape.cy, ry)
    bz = idx_bounds(ax_z, shape.cz, rz)
    if bx is None or by is None or bz is None:
        return image
    x = ax_x[bx[0] : bx[1] + 1].view(-1, 1, 1)
    y = ax_y[by[0] : by[1] + 1].view(1, -1, 1)
    z = ax_z[bz[0] : bz[1] + 1].view(1, 1, -1)
    view = image[bx[0] : bx[1] + 1, by[0] : by[1] + 1, bz[0] : bz[1] + 1]
    mask = torch.broadcast_to(shape.inside(x, y, z), view.shape)
    draw_pixels(view, shape.intensity, mask)
    return image


def orient(shape: Shape, plane: str) -> Shape:
    if check_plane(plane) == "axial":
        return shape
    elif plane == "coronal":
        return shape.rotate_coronal()
    else:
        return shape.rotate_sagittal()


def draw_2d(
    image: torch.Tensor,
    ax_1: torch.Tensor,
    ax_2: torch.Tensor,
    value: float,
    plane: str,
    shape: Shape,
) -> torch.Tensor:
    """
    Rasterize the intersection of a shape with a plane in place.

    axial: (ax_1, ax_2) = (x, y) at z = value
    coronal: (ax_1, ax_2) = (x, z) at y = value
    sagittal: (ax_1, ax_2) = (y, z) at x = value
    """
    shape = orient(shape, plane)
    if shape.is_degenerate():
        return image
    value = float(value)
    if abs(value - shape.cz) > shape.bounding_radii()[2]:
        return image
    ax_3 = torch.tensor([value], dtype=ax_1.dtype)
    draw(image.unsqueeze(-1), ax_1, ax_2, ax_3, shape)
    return image
