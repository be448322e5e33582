from typing import Dict, Iterable, Sequence, Union
import os
import torch


DTYPES: Dict[str, torch.dtype] = {
    "float32": torch.float32,
    "float64": torch.float64,
    "complex64": torch.complex64,
    "complex128": torch.complex128,
    "bool": torch.bool,
}


def makedirs(path: Union[str, Iterable[str]]) -> None:
    if isinstance(path, str):
        path = [path]
    for p in path:
        if p:
            os.makedirs(p, exist_ok=True)


def get_dtype(dtype: Union[str, torch.dtype]) -> torch.dtype:
    if isinstance(dtype, torch.dtype):
        return dtype
    if dtype not in DTYPES:
        raise ValueError(
            "Unsupported dtype %r, expected one of %s" % (dtype, ", ".join(DTYPES))
        )
    return DTYPES[dtype]


def centered_axis(n: int, fov: float) -> torch.Tensor:
    # voxel centres of n voxels of size fov / n, symmetric about 0
    return (torch.arange(n, dtype=torch.float64) - (n - 1) / 2) * (fov / n)


def check_sizes(sizes: Sequence[int], fovs: Sequence[float]) -> None:
    if any(int(n) <= 0 for n in sizes):
        raise ValueError(
            "grid dimensions must be positive integers, got %s" % (tuple(sizes),)
        )
    if len(fovs) != len(sizes):
        raise ValueError(
            "fovs must have %d elements for a %dD phantom, got %d"
            % (len(sizes), len(sizes), len(fovs))
        )
