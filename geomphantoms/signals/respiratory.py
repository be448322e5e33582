from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np


def sample_times(duration: float, fs: float) -> np.ndarray:
    if duration <= 0 or fs <= 0:
        raise ValueError(
            "duration and fs must be positive, got %s and %s" % (duration, fs)
        )
    n = int(np.floor(duration * fs + 1e-9))
    return np.arange(n, dtype=np.float64) / fs


@dataclass(frozen=True)
class RespiratoryPhysiology:
    """
    Constants of the simulated respiratory signal.

    Attributes
    ----------
    min_l, max_l : float
        Lung volume range in liters.
    asym_amp : float
        Amplitude of the second harmonic that makes inspiration and expiration
        asymmetric, relative to the main amplitude.
    amp_mod_amp, amp_mod_freq : float
        Breathing depth modulation (fraction) and its frequency (Hz).
    rr_var_amp, rr_var_freq : float
        Respiratory rate variability (fraction of the base rate) and its
        frequency (Hz).
    """

    min_l: float = 2.4
    max_l: float = 3.0
    asym_amp: float = 0.2
    amp_mod_amp: float = 0.15
    amp_mod_freq: float = 0.05
    rr_var_amp: float = 0.03
    rr_var_freq: float = 0.03


def generate_respiratory_signal(
    duration: float = 60.0,
    fs: float = 50.0,
    rr: float = 15.0,
    physiology: Optional[RespiratoryPhysiology] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Synthetic lung volume curve in liters.

    Parameters
    ----------
    duration : float
        Length of the signal in seconds.
    fs : float
        Sampling rate in Hz.
    rr : float
        Respiratory rate in breaths per minute.
    physiology : RespiratoryPhysiology, optional

    Returns
    -------
    t : np.ndarray
        Sample times in seconds.
    volume : np.ndarray
        Lung volume in liters, spanning [min_l, max_l].
    """
    if physiology is None:
        physiology = RespiratoryPhysiology()
    t = sample_times(duration, fs)
    rr_hz = rr / 60.0

    fm = physiology.rr_var_freq
    var = physiology.rr_var_amp
    if fm > 0 and var != 0:
        # integrated frequency modulation
        theta = 2 * np.pi * rr_hz * t - (rr_hz * var / fm) * (
            np.cos(2 * np.pi * fm * t) - 1.0
        )
    else:
        theta = 2 * np.pi * rr_hz * t

    resp = np.sin(theta) + physiology.asym_amp * np.sin(2 * theta)
    resp = resp * (
        1.0 + physiology.amp_mod_amp * np.sin(2 * np.pi * physiology.amp_mod_freq * t)
    )

    resp_range = resp.max() - resp.min()
    if resp_range > 0:
        resp_norm = (resp - resp.min()) / resp_range
    else:
        resp_norm = np.zeros_like(resp)
    volume = physiology.min_l + (physiology.max_l - physiology.min_l) * resp_norm
    return t, volume
