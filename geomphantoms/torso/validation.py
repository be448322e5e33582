from typing import Sequence, Tuple, Union
import torch


def _real(frame: torch.Tensor) -> torch.Tensor:
    if frame.is_complex():
        frame = frame.real
    return frame.to(torch.float64)


def count_voxels(
    frame: torch.Tensor,
    intensity: Union[float, Tuple[float, float]],
    tolerance: float = 1e-6,
) -> int:
    """
    Count the voxels of a frame with a given intensity.

    intensity is either a value, matched within tolerance, or an inclusive
    (min, max) range. Complex frames are compared on their real part.
    """
    values = _real(frame)
    if isinstance(intensity, (tuple, list)):
        lo, hi = intensity
        return int(((values >= lo) & (values <= hi)).sum())
    return int((torch.abs(values - intensity) < tolerance).sum())


def calculate_volume(
    frame: torch.Tensor,
    intensity: Union[float, Tuple[float, float]],
    fov: Sequence[float],
    tolerance: float = 1e-6,
) -> float:
    """volume in L of the voxels matching intensity, fov in cm"""
    nx, ny, nz = frame.shape[:3]
    voxel_volume = (fov[0] / nx) * (fov[1] / ny) * (fov[2] / nz) / 1000.0
    return count_voxels(frame, intensity, tolerance) * voxel_volume
