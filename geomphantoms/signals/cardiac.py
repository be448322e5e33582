from dataclasses import dataclass
from typing import Any, Mapping, NamedTuple, Optional, Sequence, Tuple, Union
import numpy as np
from .respiratory import sample_times

CHAMBERS = ("lv", "rv", "la", "ra")


class CardiacVolumes(NamedTuple):
    """Chamber volumes in mL, one value per frame."""

    lv: Sequence[float]
    rv: Sequence[float]
    la: Sequence[float]
    ra: Sequence[float]

    @property
    def n_frames(self) -> int:
        return len(self.lv)

    @staticmethod
    def from_any(
        volumes: Union["CardiacVolumes", Mapping[str, Any], Any]
    ) -> "CardiacVolumes":
        values = {}
        for key in CHAMBERS:
            if isinstance(volumes, Mapping):
                v = volumes.get(key)
            else:
                v = getattr(volumes, key, None)
            if v is None:
                raise ValueError("cardiac_volumes must have fields lv, rv, la, ra")
            values[key] = np.atleast_1d(np.asarray(v, dtype=np.float64))
        return CardiacVolumes(**values)

    @staticmethod
    def constant(n: int, lv=140.0, rv=140.0, la=60.0, ra=60.0) -> "CardiacVolumes":
        return CardiacVolumes(
            np.full(n, lv), np.full(n, rv), np.full(n, la), np.full(n, ra)
        )


@dataclass(frozen=True)
class CardiacPhysiology:
    """
    Constants of the simulated cardiac chamber volumes.

    Volumes are in mL, fractions are relative to the chamber's volume range,
    frequencies are in Hz, and kick/contraction centres and widths are
    expressed as a fraction of diastole.
    """

    lv_edv: float = 130.0
    lv_esv: float = 55.0
    rv_edv: float = 140.0
    rv_esv: float = 65.0
    la_min: float = 30.0
    la_max: float = 60.0
    ra_min: float = 30.0
    ra_max: float = 60.0
    hr_var_amp: float = 0.0
    hr_var_freq: float = 0.1
    v_amp_amp: float = 0.0
    v_amp_freq: float = 0.08
    a_amp_amp: float = 0.02
    a_amp_freq: float = 0.09
    bw_amp: float = 0.0
    bw_freq: float = 0.03
    s_frac_base: float = 0.35
    lv_kick_amp_frac: float = 0.07
    lv_kick_center: float = 0.92
    lv_kick_width: float = 0.04
    rv_kick_amp_frac: float = 0.06
    rv_kick_center: float = 0.92
    rv_kick_width: float = 0.05
    la_contr_amp_frac: float = 0.15
    la_contr_center: float = 0.95
    la_contr_width: float = 0.03
    ra_contr_amp_frac: float = 0.12
    ra_contr_center: float = 0.95
    ra_contr_width: float = 0.03


def _bump(x: np.ndarray, center: float, width: float) -> np.ndarray:
    return np.exp(-(((x - center) / width) ** 2))


def generate_cardiac_signals(
    duration: float = 10.0,
    fs: float = 500.0,
    hr: float = 70.0,
    physiology: Optional[CardiacPhysiology] = None,
) -> Tuple[np.ndarray, CardiacVolumes]:
    """
    Synthetic volumes of the four heart chambers in mL.

    Ventricles are full at end diastole and empty during systole; the atria
    fill while the ventricles contract and empty (with a late atrial
    contraction) while they relax. Slow heart rate variability, amplitude
    modulation and baseline wander are added on top.

    Parameters
    ----------
    duration : float
        Length of the signal in seconds.
    fs : float
        Sampling rate in Hz.
    hr : float
        Heart rate in beats per minute.
    physiology : CardiacPhysiology, optional

    Returns
    -------
    t : np.ndarray
        Sample times in seconds.
    volumes : CardiacVolumes
        lv, rv, la, ra volumes in mL.
    """
    p = CardiacPhysiology() if physiology is None else physiology
    if hr <= 0:
        raise ValueError("hr must be positive, got %s" % hr)
    t = sample_times(duration, fs)
    period = 60.0 / hr
    t_var = t + p.hr_var_amp * np.sin(2 * np.pi * p.hr_var_freq * t)
    phase = np.mod(t_var, period) / period

    s_frac = p.s_frac_base * (1 + 0.08 * np.sin(2 * np.pi * 0.1 * t))
    systole = phase < s_frac
    x_s = np.clip(phase / s_frac, 0.0, 1.0)
    x_d = np.clip((phase - s_frac) / (1 - s_frac), 0.0, 1.0)

    # ventricles: ejection during systole, filling plus atrial kick in diastole
    lv_range = p.lv_edv - p.lv_esv
    rv_range = p.rv_edv - p.rv_esv
    lv_s = p.lv_edv - lv_range * (1 - (1 - x_s) ** 3)
    rv_s = p.rv_edv - rv_range * (1 - (1 - x_s) ** 3)
    lv_d = (
        p.lv_esv
        + lv_range * x_d**2.2
        + p.lv_kick_amp_frac * lv_range * _bump(x_d, p.lv_kick_center, p.lv_kick_width)
    )
    rv_d = (
        p.rv_esv
        + rv_range * x_d**2.0
        + p.rv_kick_amp_frac * rv_range * _bump(x_d, p.rv_kick_center, p.rv_kick_width)
    )
    lv = np.where(systole, lv_s, lv_d)
    rv = np.where(systole, rv_s, rv_d)

    # atria: filling during systole, emptying plus contraction in diastole
    la_range = p.la_max - p.la_min
    ra_range = p.ra_max - p.ra_min
    la_s = p.la_min + la_range * x_s**1.5
    ra_s = p.ra_min + ra_range * x_s**1.5
    la_d = (
        p.la_max
        - la_range * (1 - (1 - x_d) ** 3)
        - p.la_contr_amp_frac
        * la_range
        * _bump(x_d, p.la_contr_center, p.la_contr_width)
    )
    ra_d = (
        p.ra_max
        - ra_range * (1 - (1 - x_d) ** 3)
        - p.ra_contr_amp_frac
        * ra_range
        * _bump(x_d, p.ra_contr_center, p.ra_contr_width)
    )
    la = np.where(systole, la_s, la_d)
    ra = np.where(systole, ra_s, ra_d)

    v_amp = 1 + p.v_amp_amp * np.sin(2 * np.pi * p.v_amp_freq * t)
    a_amp = 1 + p.a_amp_amp * np.sin(2 * np.pi * p.a_amp_freq * t + 0.7)
    bw = p.bw_amp * np.sin(2 * np.pi * p.bw_freq * t)

    return t, CardiacVolumes(
        lv=lv * v_amp + bw,
        rv=rv * v_amp + bw,
        la=la * a_amp + 0.8 * bw,
        ra=ra * a_amp + 0.8 * bw,
    )
