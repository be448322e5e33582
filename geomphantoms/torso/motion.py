from typing import List, NamedTuple, Optional, Sequence, Tuple
import numpy as np
from ..signals import CardiacVolumes, CHAMBERS

NOMINAL_LUNG_VOLUME = 2.7
NOMINAL_CARDIAC_VOLUMES = {"lv": 140.0, "rv": 140.0, "la": 60.0, "ra": 60.0}

# lung volume range (L) mapped onto [0, 1]
RESP_MIN = 1.2
RESP_MAX = 6.0
# cubic fits of lung radius and lower lobe height against normalized volume
_SCALE_COEFFS = (0.598, 0.842, -0.175, -0.0320625)
_LOWER_RZ_COEFFS = (1.819140625, 0.831375, -1.7111875, 1.24575)


class RespiratoryMotion(NamedTuple):
    scale: float
    lower_rz_scale: float
    body_scale: float
    diaphragm_up: float
    diaphragm_rscale: float
    y_offset: float
    y_offset_visc: float
    xy_visc_scale: float


class CardiacMotion(NamedTuple):
    lv: float
    rv: float
    la: float
    ra: float


class MotionParameters(NamedTuple):
    """Shape parameters of a single frame."""

    respiratory: RespiratoryMotion
    heart_scale: CardiacMotion
    heart_scale_max: CardiacMotion


def _cubic(coeffs: Sequence[float], x: float) -> float:
    a0, a1, a2, a3 = coeffs
    return a0 + a1 * x + a2 * x**2 + a3 * x**3


def respiratory_motion(liters: float) -> RespiratoryMotion:
    """
    Map a lung volume (L) onto the respiratory deformation of the torso.

    Volumes outside [1.2, 6] L extrapolate the polynomial fits.
    """
    rn = (float(liters) - RESP_MIN) / (RESP_MAX - RESP_MIN)
    scale = _cubic(_SCALE_COEFFS, rn)
    lower_rz_scale = _cubic(_LOWER_RZ_COEFFS, rn)
    body_scale = 0.4 + 0.63 * scale
    y_offset = -0.4 + 0.45 * body_scale
    return RespiratoryMotion(
        scale=scale,
        lower_rz_scale=lower_rz_scale,
        body_scale=body_scale,
        diaphragm_up=-0.5 * (lower_rz_scale - 1.0),
        diaphragm_rscale=lower_rz_scale,
        y_offset=y_offset,
        y_offset_visc=0.8 * y_offset,
        xy_visc_scale=1.0 + 0.04 * rn,
    )


def cardiac_scales(
    volumes: CardiacVolumes,
) -> Tuple[List[CardiacMotion], CardiacMotion]:
    """
    Linear scale factors of the heart chambers, (v / mean(v)) ** (1/3) per
    frame, and their per-chamber maximum over all frames.
    """
    volumes = CardiacVolumes.from_any(volumes)
    scales = [(v / v.mean()) ** (1 / 3) for v in volumes]
    per_frame = [
        CardiacMotion(*(float(s[m]) for s in scales)) for m in range(len(scales[0]))
    ]
    scales_max = CardiacMotion(*(float(s.max()) for s in scales))
    return per_frame, scales_max


def motion_parameters(
    liters: float, scales: CardiacMotion, scales_max: CardiacMotion
) -> MotionParameters:
    return MotionParameters(respiratory_motion(liters), scales, scales_max)


def setup_motion_signals(
    respiratory_signal: Optional[Sequence[float]],
    cardiac_volumes,
) -> Tuple[np.ndarray, CardiacVolumes]:
    """
    Fill in missing signals with nominal values and check that both signals
    describe the same frames.
    """
    if respiratory_signal is None and cardiac_volumes is None:
        respiratory_signal = [NOMINAL_LUNG_VOLUME]
    if respiratory_signal is not None:
        respiratory_signal = np.atleast_1d(
            np.asarray(respiratory_signal, dtype=np.float64)
        )
        if respiratory_signal.ndim != 1:
            raise ValueError("respiratory_signal must be a 1D sequence")
    if cardiac_volumes is None:
        cardiac_volumes = CardiacVolumes.constant(
            len(respiratory_signal), **NOMINAL_CARDIAC_VOLUMES
        )
    else:
        cardiac_volumes = CardiacVolumes.from_any(cardiac_volumes)
    if respiratory_signal is None:
        respiratory_signal = np.full(cardiac_volumes.n_frames, NOMINAL_LUNG_VOLUME)
    nt = len(respiratory_signal)
    if nt == 0:
        raise ValueError("motion signals must contain at least one frame")
    for key in CHAMBERS:
        if len(getattr(cardiac_volumes, key)) != nt:
            raise ValueError(
                "respiratory_signal and cardiac_volumes must have the same length"
            )
    return respiratory_signal, cardiac_volumes


def frame_motion_parameters(
    respiratory_signal: Optional[Sequence[float]] = None,
    cardiac_volumes=None,
) -> List[MotionParameters]:
    respiratory_signal, cardiac_volumes = setup_motion_signals(
        respiratory_signal, cardiac_volumes
    )
    scales, scales_max = cardiac_scales(cardiac_volumes)
    return [
        motion_parameters(liters, s, scales_max)
        for liters, s in zip(respiratory_signal, scales)
    ]
