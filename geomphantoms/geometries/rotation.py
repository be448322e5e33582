import math
import torch

PLANES = ("axial", "coronal", "sagittal")

# row order of the rotation matrix for each slice orientation
_PLANE_ROWS = {
    "axial": (0, 1, 2),
    "coronal": (0, 2, 1),
    "sagittal": (1, 2, 0),
}


def check_plane(plane: str) -> str:
    if plane not in _PLANE_ROWS:
        raise ValueError(
            "plane must be one of %s, got %r" % (", ".join(PLANES), plane)
        )
    return plane


def euler2mat(
    phi: float, theta: float, psi: float, plane: str = "axial"
) -> torch.Tensor:
    """
    Rotation matrix R = Rz(phi) Ry(theta) Rx(psi) in float64.

    For coronal and sagittal views the rows are reordered so that a shape whose
    centre has already been permuted into that view can be tested directly.
    """
    rows = _PLANE_ROWS[check_plane(plane)]

    c1, s1 = math.cos(phi), math.sin(phi)
    c2, s2 = math.cos(theta), math.sin(theta)
    c3, s3 = math.cos(psi), math.sin(psi)

    mat = torch.empty((3, 3), dtype=torch.float64)

    mat[0, 0] = c1 * c2
    mat[0, 1] = c1 * s2 * s3 - s1 * c3
    mat[0, 2] = c1 * s2 * c3 + s1 * s3

    mat[1, 0] = s1 * c2
    mat[1, 1] = s1 * s2 * s3 + c1 * c3
    mat[1, 2] = s1 * s2 * c3 - c1 * s3

    mat[2, 0] = -s2
    mat[2, 1] = c2 * s3
    mat[2, 2] = c2 * c3

    return mat[list(rows)]


def bounding_radii(mat: torch.Tensor, rx: float, ry: float, rz: float):
    # half extent along each output axis of an ellipsoid rotated by mat
    r2 = torch.tensor([rx * rx, ry * ry, rz * rz], dtype=mat.dtype)
    return tuple(torch.sqrt((mat**2 * r2).sum(-1)).tolist())
