import dataclasses
import json
import logging
import os
from typing import Any, Dict, List, Optional, Sequence
import numpy as np
import nibabel as nib
import scipy.io
import imageio.v2 as imageio
import torch
from ..signals import CardiacVolumes, CHAMBERS

PHANTOM_FORMATS = {
    "npy": "npy",
    "mat": "mat",
    "cfl": "cfl",
    "hdr": "cfl",
    "nifti": "nifti",
    "nii": "nifti",
    "png": "png",
    "tiff": "tiff",
    "tif": "tiff",
}
SIGNAL_FORMATS = ("csv", "json", "npy")


def parse_size(value: str) -> List[int]:
    try:
        dims = [int(p) for p in value.split(",") if p.strip()]
    except ValueError:
        raise ValueError("--size must be a comma separated list of integers")
    if len(dims) not in (2, 3):
        raise ValueError("--size must have 2 or 3 integers, got %r" % value)
    return dims


def json_to_value(value: Optional[str]) -> Any:
    """parse a JSON string or the content of a JSON file"""
    if value is None:
        return None
    if os.path.isfile(value):
        with open(value, "r") as f:
            return json.load(f)
    return json.loads(value)


def json_dict(value: Optional[str], name: str) -> Dict[str, Any]:
    obj = json_to_value(value)
    if obj is None:
        return dict()
    if not isinstance(obj, dict):
        raise ValueError("%s must be a JSON object" % name)
    return obj


def record_from_dict(cls, d: Dict[str, Any], name: str):
    names = set(f.name for f in dataclasses.fields(cls))
    unknown = set(d) - names
    if unknown:
        raise ValueError(
            "Unknown %s fields: %s" % (name, ", ".join(sorted(unknown)))
        )
    return cls(**{k: float(v) for k, v in d.items()})


def resolve_format(fmt: Optional[str], path: str) -> str:
    if fmt is not None:
        key = fmt.strip().lower()
        if key not in PHANTOM_FORMATS:
            raise ValueError("Unsupported output format: %s" % fmt)
        return PHANTOM_FORMATS[key]
    lower = path.lower()
    if lower.endswith(".npy"):
        return "npy"
    if lower.endswith(".mat"):
        return "mat"
    if lower.endswith(".nii") or lower.endswith(".nii.gz"):
        return "nifti"
    if lower.endswith(".png"):
        return "png"
    if lower.endswith(".tif") or lower.endswith(".tiff"):
        return "tiff"
    raise ValueError("Cannot infer the output format from %s, use --format" % path)


def resolve_signal_format(fmt: Optional[str], path: str) -> str:
    if fmt is not None:
        key = fmt.strip().lower()
        if key not in SIGNAL_FORMATS:
            raise ValueError("Unsupported signal output format: %s" % fmt)
        return key
    ext = os.path.splitext(path)[1].lower()
    if ext in (".json", ".npy"):
        return ext[1:]
    return "csv"


def _to_numpy(data: torch.Tensor) -> np.ndarray:
    return data.detach().cpu().numpy()


def save_nii(path: str, data: torch.Tensor, voxel_size: Sequence[float]) -> None:
    volume = _to_numpy(data)
    if volume.dtype == np.bool_:
        volume = volume.astype(np.uint8)
    affine = np.eye(4)
    for i, v in enumerate(voxel_size[:3]):
        affine[i, i] = v
    img = nib.nifti1.Nifti1Image(volume, affine)
    img.header.set_xyzt_units(2)
    img.header.set_qform(affine, code="aligned")
    img.header.set_sform(affine, code="scanner")
    nib.save(img, path)


def save_cfl(path: str, data: torch.Tensor) -> None:
    """write a BART .cfl/.hdr pair, path is the base name"""
    if path.lower().endswith(".cfl") or path.lower().endswith(".hdr"):
        raise ValueError("For BART output, provide the base path without extension")
    array = _to_numpy(data).astype(np.complex64)
    with open(path + ".hdr", "w") as f:
        f.write("# Dimensions\n")
        f.write(" ".join(str(n) for n in array.shape) + "\n")
    # BART stores arrays in column-major order
    with open(path + ".cfl", "wb") as f:
        array.ravel(order="F").tofile(f)


def to_uint8(data: torch.Tensor) -> np.ndarray:
    """
    Gray levels for image formats: magnitude of complex data, then min-max
    normalised over the whole array (all slices share one scale).
    """
    values = data.abs() if data.is_complex() else data
    values = _to_numpy(values).astype(np.float64)
    min_val, max_val = values.min(), values.max()
    if max_val == min_val:
        norm = np.zeros_like(values)
    else:
        norm = np.clip((values - min_val) / (max_val - min_val), 0.0, 1.0)
    return np.round(norm * 255).astype(np.uint8)


def save_png(path: str, data: torch.Tensor) -> None:
    if not path.lower().endswith(".png"):
        raise ValueError("PNG output requires a .png path, got %s" % path)
    if data.ndim == 3 and data.shape[-1] == 1:
        # a single frame of a 2D torso slice
        data = data[..., 0]
    if data.ndim != 2:
        raise ValueError("PNG output requires a 2D array, got %s" % (data.shape,))
    imageio.imwrite(path, to_uint8(data))


def save_tiff(path: str, data: torch.Tensor) -> None:
    """2D data is one page, 3D data one page per z, 4D data z-major within t"""
    if data.ndim not in (2, 3, 4):
        raise ValueError(
            "TIFF output requires a 2D, 3D or 4D array, got shape %s" % (data.shape,)
        )
    if not path.lower().endswith((".tif", ".tiff")):
        raise ValueError("TIFF output requires a .tif or .tiff path, got %s" % path)
    image = to_uint8(data)
    if image.ndim == 2:
        imageio.imwrite(path, image)
        return
    n1, n2 = image.shape[:2]
    pages = image.reshape(n1, n2, -1, order="F")
    imageio.mimwrite(path, list(np.moveaxis(pages, -1, 0)))


def save_output(
    path: str,
    fmt: str,
    data: torch.Tensor,
    voxel_size: Optional[Sequence[float]] = None,
) -> None:
    if fmt == "npy":
        np.save(path, _to_numpy(data))
    elif fmt == "mat":
        scipy.io.savemat(path, {"phantom": _to_numpy(data)})
    elif fmt == "cfl":
        save_cfl(path, data)
    elif fmt == "nifti":
        save_nii(path, data, voxel_size if voxel_size is not None else (1, 1, 1))
    elif fmt == "png":
        save_png(path, data)
    elif fmt == "tiff":
        save_tiff(path, data)
    else:
        raise ValueError("Unsupported output format: %s" % fmt)
    logging.info("%s saved to %s", fmt, path)


def save_signal(path: str, fmt: str, data: Dict[str, np.ndarray]) -> None:
    keys = sorted(data)
    if fmt == "csv":
        table = np.stack([np.asarray(data[k], dtype=np.float64) for k in keys], -1)
        np.savetxt(path, table, delimiter=",", header=",".join(keys), comments="")
    elif fmt == "json":
        with open(path, "w") as f:
            json.dump({k: np.asarray(data[k]).tolist() for k in keys}, f)
    elif fmt == "npy":
        if len(data) != 1:
            raise ValueError(
                "NPY output supports a single series, use CSV or JSON for %s"
                % ", ".join(keys)
            )
        np.save(path, np.asarray(data[keys[0]], dtype=np.float64))
    else:
        raise ValueError("Unsupported signal output format: %s" % fmt)
    logging.info("signal saved to %s", path)


def write_metadata(path: str, meta: Dict[str, Any]) -> None:
    with open(path, "w") as f:
        json.dump(meta, f, indent=2)


def _read_csv(path: str):
    """returns (column names or None, 2D float array)"""
    with open(path, "r") as f:
        first = f.readline().strip()
    names = None
    try:
        [float(v) for v in first.split(",")]
    except ValueError:
        names = [v.strip() for v in first.split(",")]
    table = np.loadtxt(
        path, delimiter=",", skiprows=0 if names is None else 1, ndmin=2
    )
    return names, table


def load_respiratory_signal(path: Optional[str]) -> Optional[np.ndarray]:
    """lung volume in L per frame from a JSON, CSV or NPY file"""
    if path is None:
        return None
    ext = os.path.splitext(path)[1].lower()
    if ext == ".json":
        with open(path, "r") as f:
            obj = json.load(f)
        if isinstance(obj, dict):
            if "signal" not in obj:
                raise ValueError(
                    "Respiratory JSON must be an array or include a 'signal' field"
                )
            obj = obj["signal"]
        return np.asarray(obj, dtype=np.float64)
    elif ext == ".csv":
        names, table = _read_csv(path)
        col = names.index("signal") if names and "signal" in names else 0
        return table[:, col]
    elif ext == ".npy":
        return np.load(path).astype(np.float64).reshape(-1)
    else:
        raise ValueError("Unsupported respiratory signal format: %s" % ext)


def load_cardiac_volumes(path: Optional[str]) -> Optional[CardiacVolumes]:
    """chamber volumes in mL per frame from a JSON or CSV file"""
    if path is None:
        return None
    ext = os.path.splitext(path)[1].lower()
    if ext == ".json":
        with open(path, "r") as f:
            obj = json.load(f)
        if not isinstance(obj, dict):
            raise ValueError(
                "Cardiac JSON must be an object with lv, rv, la and ra fields"
            )
        return CardiacVolumes.from_any(obj)
    elif ext == ".csv":
        names, table = _read_csv(path)
        if names is not None and all(c in names for c in CHAMBERS):
            return CardiacVolumes(*(table[:, names.index(c)] for c in CHAMBERS))
        if table.shape[1] < 4:
            raise ValueError("Cardiac CSV must have 4 columns: lv, rv, la, ra")
        return CardiacVolumes(*(table[:, i] for i in range(4)))
    else:
        raise ValueError("Unsupported cardiac signal format: %s" % ext)
