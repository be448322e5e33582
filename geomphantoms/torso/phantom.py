from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, Tuple, Union
import logging
import torch
from ..geometries import Shape, check_plane, draw, draw_2d
from ..utils import centered_axis, check_sizes, get_dtype, log_shapes
from .intensities import TissueIntensities, TissueParameters, is_mask
from .geometry import dynamic_shapes, static_bones, torso_static_parts
from .motion import MotionParameters, frame_motion_parameters

# one normalized unit is 15 cm
TORSO_HALF_EXTENT = 15.0


def torso_axis(n: int, fov: float) -> torch.Tensor:
    return 2 * centered_axis(n, fov) / (2 * TORSO_HALF_EXTENT)


def torso_slice_value(slice_position: float) -> float:
    return 2 * float(slice_position) / (2 * TORSO_HALF_EXTENT)


def render_frames(
    phantom: torch.Tensor,
    template: torch.Tensor,
    params: List[MotionParameters],
    ti: TissueParameters,
    draw_shape: Callable[[torch.Tensor, Shape], torch.Tensor],
    num_workers: Optional[int] = None,
) -> torch.Tensor:
    """
    Fill phantom[..., m] for every frame m: a copy of the static template,
    the moving structures of the frame and finally the static bones.
    """
    bones = static_bones(ti)

    def render(m: int) -> None:
        frame = phantom[..., m]
        frame.copy_(template)
        shapes = dynamic_shapes(params[m], ti)
        if m == 0:
            logging.debug("dynamic structures per frame: %s", log_shapes(shapes))
        for shape in shapes:
            draw_shape(frame, shape)
        for shape in bones:
            draw_shape(frame, shape)

    nt = len(params)
    if nt == 1 or num_workers == 1:
        for m in range(nt):
            render(m)
    else:
        # frames are disjoint views of the output, so no locking is needed
        logging.debug("rendering %d frames, num_workers = %s", nt, num_workers)
        with ThreadPoolExecutor(max_workers=num_workers) as executor:
            # consume the iterator so exceptions of the workers are raised
            list(executor.map(render, range(nt)))
    return phantom


def _setup(
    respiratory_signal, cardiac_volumes, ti: Optional[TissueParameters], dtype
) -> Tuple[List[MotionParameters], TissueParameters, torch.dtype]:
    if ti is None:
        ti = TissueIntensities()
    dtype = torch.bool if is_mask(ti) else get_dtype(dtype)
    params = frame_motion_parameters(respiratory_signal, cardiac_volumes)
    return params, ti, dtype


def create_torso_phantom(
    nx: int = 128,
    ny: int = 128,
    nz: int = 128,
    fovs: Sequence[float] = (30, 30, 30),
    respiratory_signal: Optional[Sequence[float]] = None,
    cardiac_volumes=None,
    ti: Optional[TissueParameters] = None,
    dtype: Union[str, torch.dtype] = torch.float32,
    num_workers: Optional[int] = None,
) -> torch.Tensor:
    """
    Generate a (possibly moving) 3D torso phantom.

    Parameters
    ----------
    nx, ny, nz : int
        grid size
    fovs : sequence of float
        field of view in cm along x, y and z
    respiratory_signal : sequence of float, optional
        lung volume in L per frame
    cardiac_volumes : CardiacVolumes or mapping, optional
        chamber volumes in mL per frame with fields lv, rv, la and ra
    ti : TissueIntensities or TissueMask, optional
        tissue intensities; a TissueMask yields a boolean mask
    dtype : str or torch.dtype
        element type of the output, ignored for masks
    num_workers : int, optional
        number of threads rendering frames concurrently

    Returns
    -------
    torch.Tensor
        array of shape (nx, ny, nz, nt). Without signals nt is 1.
    """
    check_sizes((nx, ny, nz), fovs)
    params, ti, dtype = _setup(respiratory_signal, cardiac_volumes, ti, dtype)
    ax_x, ax_y, ax_z = (torso_axis(n, f) for n, f in zip((nx, ny, nz), fovs))

    template = torch.zeros((nx, ny, nz), dtype=dtype)
    static = torso_static_parts(ti)
    logging.debug("static structures: %s", log_shapes(static))
    for shape in static:
        draw(template, ax_x, ax_y, ax_z, shape)

    phantom = torch.zeros((nx, ny, nz, len(params)), dtype=dtype)
    return render_frames(
        phantom,
        template,
        params,
        ti,
        lambda image, shape: draw(image, ax_x, ax_y, ax_z, shape),
        num_workers,
    )


def create_torso_phantom_2d(
    n1: int,
    n2: int,
    plane: str,
    fovs: Sequence[float] = (30, 30),
    slice_position: float = 0.0,
    respiratory_signal: Optional[Sequence[float]] = None,
    cardiac_volumes=None,
    ti: Optional[TissueParameters] = None,
    dtype: Union[str, torch.dtype] = torch.float32,
    num_workers: Optional[int] = None,
) -> torch.Tensor:
    """
    Generate a slice of the torso phantom.

    plane is 'axial' (x, y at z), 'coronal' (x, z at y) or 'sagittal'
    (y, z at x) and slice_position is the position of the slice in cm along
    the remaining axis. The result has shape (n1, n2, nt) and equals the
    matching slice of the 3D phantom.
    """
    check_sizes((n1, n2), fovs)
    check_plane(plane)
    params, ti, dtype = _setup(respiratory_signal, cardiac_volumes, ti, dtype)
    ax_1, ax_2 = (torso_axis(n, f) for n, f in zip((n1, n2), fovs))
    value = torso_slice_value(slice_position)

    template = torch.zeros((n1, n2), dtype=dtype)
    for shape in torso_static_parts(ti):
        draw_2d(template, ax_1, ax_2, value, plane, shape)

    phantom = torch.zeros((n1, n2, len(params)), dtype=dtype)
    return render_frames(
        phantom,
        template,
        params,
        ti,
        lambda image, shape: draw_2d(image, ax_1, ax_2, value, plane, shape),
        num_workers,
    )
