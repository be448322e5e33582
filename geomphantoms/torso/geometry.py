"""
Anatomy of the torso phantom in normalized coordinates.

x runs from the subject's right (negative) to left, y from anterior
(negative) to posterior and z from feet to head. One unit is 15 cm.
"""

import math
from typing import Callable, List, Sequence, Tuple
import numpy as np
from ..geometries import Ellipsoid, SuperEllipsoid, Shape
from .intensities import TissueParameters, get_intensity
from .motion import CardiacMotion, MotionParameters

_SE = (2.5, 2.5, 2.5)


def torso_static_parts(ti: TissueParameters) -> List[Shape]:
    """neck, shoulders, arms and back, which do not move with breathing"""
    body = get_intensity(ti, "body")
    parts = [
        # neck
        (0.0, 0.165, 0.85, 0.312, 0.336, 0.264),
        (0.0, 0.165, 1.0, 0.312, 0.312, 0.18),
        # shoulders
        (0.0, 0.165, 0.7, 0.8, 0.28, 0.25),
        # arms: upper, mid, lower
        (-0.68, 0.165, 0.62, 0.18, 0.18, 0.28),
        (-0.88, 0.165, 0.5, 0.17, 0.17, 0.26),
        (-1.05, 0.165, 0.38, 0.16, 0.16, 0.24),
        (0.68, 0.165, 0.62, 0.18, 0.18, 0.28),
        (0.88, 0.165, 0.5, 0.17, 0.17, 0.26),
        (1.05, 0.165, 0.38, 0.16, 0.16, 0.24),
        # back: upper, mid, lower
        (0.0, 0.28, 0.35, 0.7, 0.43, 0.5),
        (0.0, 0.28, -0.1, 0.75, 0.47, 0.55),
        (0.0, 0.15, -0.6, 0.78, 0.48, 0.55),
    ]
    return [SuperEllipsoid(*p, _SE, body) for p in parts]


def torso_dynamic_parts(
    body_scale: float, y_offset: float, ti: TissueParameters
) -> List[Shape]:
    s = body_scale
    body = get_intensity(ti, "body")
    flat = (2.5, 2.5, 3.5)
    return [
        # upper, mid and lower chest
        SuperEllipsoid(0.0, -y_offset, 0.45, 0.86 * s, 0.69 * s, 0.35, _SE, body),
        SuperEllipsoid(0.0, -y_offset, 0.17, 0.93 * s, 0.72 * s, 0.32, flat, body),
        SuperEllipsoid(0.0, -y_offset, -0.11, 0.91 * s, 0.71 * s, 0.32, flat, body),
        # abdomen expands less than the chest
        SuperEllipsoid(0.0, -y_offset, -0.45, 0.87 * s, 0.67 * s, 0.4, flat, body),
        SuperEllipsoid(
            0.0,
            -y_offset,
            -0.85,
            0.83 * math.sqrt(s),
            0.62 * math.sqrt(s),
            0.45,
            flat,
            body,
        ),
    ]


def lungs(
    scale: float,
    diaphragm_up: float,
    lower_rz_scale: float,
    y_offset: float,
    ti: TissueParameters,
) -> List[Shape]:
    """upper and lower lobes of both lungs followed by the diaphragm domes"""
    x_offset = 0.32
    top_x = x_offset - 0.1
    top_r = 0.25 + 0.22 * scale
    lower_r = 0.43 * scale
    lower_rz = 0.48 * lower_rz_scale
    lung = get_intensity(ti, "lung")
    body = get_intensity(ti, "body")
    parts: List[Shape] = []
    for sign in (-1, 1):
        parts.append(
            SuperEllipsoid(
                sign * top_x,
                -y_offset,
                -0.1 - diaphragm_up * 0.5,
                top_r,
                lower_r,
                0.7,
                (2.0, 2.0, 1.2),
                lung,
            )
        )
        parts.append(
            SuperEllipsoid(
                sign * x_offset,
                -y_offset,
                -0.17 + diaphragm_up * 0.5,
                lower_r,
                lower_r,
                lower_rz,
                (2.0, 2.0, 2.5),
                lung,
            )
        )
    for sign in (-1, 1):
        parts.append(
            SuperEllipsoid(
                sign * x_offset,
                -y_offset,
                -0.5 + diaphragm_up,
                lower_r,
                lower_r,
                0.4,
                (2.5, 2.5, 1.5),
                body,
            )
        )
    return parts


def heart_background(
    scales_max: CardiacMotion, y_offset: float, ti: TissueParameters
) -> List[Shape]:
    # sized for the largest heart of the sequence so it never uncovers
    lv, rv, la, ra = scales_max
    rx = 1.35 * max(0.251 * lv, 0.209 * rv, 0.15 * la, 0.15 * ra)
    rz = 1.65 * max(
        0.242 * lv, 0.178 * lv, 0.195 * rv, 0.136 * rv, 0.188 * la, 0.188 * ra
    )
    return [
        SuperEllipsoid(
            0.01,
            -y_offset,
            0.24,
            rx,
            0.8 * rx,
            rz,
            (2.2, 2.2, 2.2),
            get_intensity(ti, "body"),
        )
    ]


def heart_chambers(
    scales: CardiacMotion, y_offset: float, ti: TissueParameters
) -> List[Shape]:
    """
    Myocardium and blood pools of the four chambers.

    Each chamber is scaled by its own factor. Ventricles and atria are pushed
    apart laterally and along z in proportion to their growth so that the
    blood volumes follow the input volumes.
    """
    zo = 0.2
    s_lv, s_rv, s_la, s_ra = scales
    # cavity scales
    c_lv = 1.1 * s_lv
    c_rv = 1.06 * s_rv
    c_la = 0.95 * s_la
    c_ra = s_ra

    dx_lv = 0.45 * 0.251 * (s_lv - 1.0)
    dx_rv = 0.45 * 0.209 * (s_rv - 1.0)
    dx_la = 0.15048 * (s_la - 1.0)
    dx_ra = 0.15048 * (s_ra - 1.0)

    z_sep_l = 0.9 * (0.209 * (s_lv - 1.0) + 0.188 * (s_la - 1.0))
    z_sep_r = 0.9 * (0.195 * (s_rv - 1.0) + 0.188 * (s_ra - 1.0))

    bottom_z_scale = 1.2
    lv_off, rv_off, la_off, ra_off = 0.006, 0.004, -0.001, 0.0005
    lv_base, rv_base = 1.02, 0.98

    heart = get_intensity(ti, "heart")
    lv_blood = get_intensity(ti, "lv_blood")
    rv_blood = get_intensity(ti, "rv_blood")
    la_blood = get_intensity(ti, "la_blood")
    ra_blood = get_intensity(ti, "ra_blood")

    x_lv, y_lv = -0.06 - dx_lv, 0.02 - y_offset
    x_rv, y_rv = 0.14 + dx_rv, -y_offset

    return [
        # outer myocardium, base
        Ellipsoid(
            x_lv, y_lv, -0.1 + zo, 0.1595 * s_lv, 0.2145 * s_lv, 0.242 * s_lv, heart
        ),
        Ellipsoid(
            x_rv, y_rv, -0.1 + zo, 0.1595 * s_rv, 0.2145 * s_rv, 0.242 * s_rv, heart
        ),
        # outer myocardium, mid
        SuperEllipsoid(
            x_lv,
            y_lv,
            zo,
            0.1485 * s_lv,
            0.2035 * s_lv,
            0.1782 * s_lv,
            _SE,
            heart,
        ),
        SuperEllipsoid(
            x_rv,
            y_rv,
            zo,
            0.1485 * s_rv,
            0.2035 * s_rv,
            0.1782 * s_rv,
            _SE,
            heart,
        ),
        # left ventricle
        SuperEllipsoid(
            -0.063 - dx_lv,
            y_lv,
            zo - z_sep_l,
            0.251 * s_lv,
            0.251 * s_lv,
            0.209 * s_lv * bottom_z_scale,
            (2.0, 2.0, 2.0),
            heart,
        ),
        SuperEllipsoid(
            -0.063 - dx_lv,
            y_lv,
            0.08 + zo - z_sep_l,
            0.195 * s_lv,
            0.195 * s_lv,
            0.157 * s_lv,
            (3.0, 3.0, 2.0),
            heart,
        ),
        SuperEllipsoid(
            x_lv,
            y_lv,
            -0.1 + zo - z_sep_l,
            (0.112125 * c_lv + lv_off) * lv_base,
            (0.160875 * c_lv + lv_off) * lv_base,
            0.156 * c_lv * lv_base,
            (2.0, 2.0, 2.0),
            lv_blood,
        ),
        SuperEllipsoid(
            x_lv,
            y_lv,
            zo - z_sep_l,
            0.102375 * c_lv + lv_off,
            0.151125 * c_lv + lv_off,
            0.1404 * c_lv,
            _SE,
            lv_blood,
        ),
        SuperEllipsoid(
            x_lv,
            y_lv,
            zo - z_sep_l,
            0.193288 * c_lv,
            0.193288 * c_lv,
            0.14366 * c_lv,
            (2.0, 2.0, 2.0),
            lv_blood,
        ),
        SuperEllipsoid(
            x_lv,
            y_lv,
            0.04 + zo - z_sep_l,
            0.151496 * c_lv,
            0.151496 * c_lv,
            0.094032 * c_lv,
            (3.0, 3.0, 2.0),
            lv_blood,
        ),
        # right ventricle
        SuperEllipsoid(
            0.143 + dx_rv,
            y_rv,
            zo - z_sep_r,
            0.209 * s_rv,
            0.209 * s_rv,
            0.195 * s_rv * bottom_z_scale,
            (2.0, 2.0, 2.0),
            heart,
        ),
        SuperEllipsoid(
            0.143 + dx_rv,
            y_rv,
            0.08 + zo - z_sep_r,
            0.167 * s_rv,
            0.167 * s_rv,
            0.136 * s_rv,
            (3.0, 3.0, 2.0),
            heart,
        ),
        SuperEllipsoid(
            x_rv,
            y_rv,
            -0.1 + zo - z_sep_r,
            (0.11822 * c_rv + rv_off) * rv_base,
            (0.16962 * c_rv + rv_off) * rv_base,
            0.16448 * c_rv * rv_base,
            (2.0, 2.0, 2.0),
            rv_blood,
        ),
        SuperEllipsoid(
            x_rv,
            y_rv,
            zo - z_sep_r,
            0.10794 * c_rv + rv_off,
            0.15934 * c_rv + rv_off,
            0.148032 * c_rv,
            _SE,
            rv_blood,
        ),
        SuperEllipsoid(
            x_rv,
            y_rv,
            zo - z_sep_r,
            0.172112 * c_rv,
            0.172112 * c_rv,
            0.133248 * c_rv,
            (2.0, 2.0, 2.0),
            rv_blood,
        ),
        SuperEllipsoid(
            x_rv,
            y_rv,
            0.04 + zo - z_sep_r,
            0.1388 * c_rv,
            0.1388 * c_rv,
            0.094384 * c_rv,
            (3.0, 3.0, 2.0),
            rv_blood,
        ),
        # left atrium
        SuperEllipsoid(
            -0.101 - dx_la,
            -0.05 - y_offset,
            0.25 + zo + z_sep_l,
            0.15 * s_la,
            0.15 * s_la,
            0.188 * s_la,
            (2.2, 2.2, 2.2),
            heart,
        ),
        SuperEllipsoid(
            -0.101,
            -0.05 - y_offset,
            0.25 + zo + z_sep_l,
            0.134352 * c_la + la_off,
            0.134352 * c_la + la_off,
            0.16794 * c_la,
            (2.2, 2.2, 2.2),
            la_blood,
        ),
        # right atrium
        SuperEllipsoid(
            0.161 + dx_ra,
            -0.07 - y_offset,
            0.25 + zo + z_sep_r,
            0.15 * s_ra,
            0.15 * s_ra,
            0.188 * s_ra,
            (2.2, 2.2, 2.2),
            heart,
        ),
        SuperEllipsoid(
            0.161,
            -0.07 - y_offset,
            0.25 + zo + z_sep_r,
            0.126468 * c_ra + ra_off,
            0.126468 * c_ra + ra_off,
            0.158085 * c_ra,
            (2.2, 2.2, 2.2),
            ra_blood,
        ),
    ]


def aorta_xy(z: float) -> Tuple[float, float]:
    return (
        -0.02 + 0.06 * math.sin(math.pi * (z - 0.2)),
        -0.05 + 0.035 * math.sin(0.7 * math.pi * (z - 0.2) + 0.4),
    )


def pulmonary_xy(z: float) -> Tuple[float, float]:
    return (
        -0.05 + 0.05 * math.sin(math.pi * (z - 0.22) + 0.2),
        -0.05 + 0.03 * math.sin(0.9 * math.pi * (z - 0.22) - 0.3),
    )


def svc_xy(z: float) -> Tuple[float, float]:
    return (
        0.1 + 0.05 * math.sin(0.8 * math.pi * (z - 0.3)),
        -0.05 + 0.03 * math.sin(0.6 * math.pi * (z - 0.3) + 0.2),
    )


# (centerline, radius, [(z, half height), ...]) per vessel
VESSELS: List[Tuple[Callable[[float], Tuple[float, float]], float, list]] = [
    (
        aorta_xy,
        0.06,
        [
            (1.0, 0.08),
            (0.95, 0.08),
            (0.9, 0.08),
            (0.75, 0.12),
            (0.6, 0.12),
            (0.45, 0.12),
            (0.32, 0.1),
        ],
    ),
    (
        pulmonary_xy,
        0.05,
        [(0.75, 0.08), (0.62, 0.1), (0.47, 0.12), (0.34, 0.12), (0.3, 0.1)],
    ),
    (
        svc_xy,
        0.04,
        [
            (1.0, 0.08),
            (0.95, 0.08),
            (0.82, 0.1),
            (0.68, 0.12),
            (0.55, 0.12),
            (0.45, 0.08),
        ],
    ),
]


def vessels(y_offset: float, ti: TissueParameters) -> List[Shape]:
    """aorta, pulmonary artery and superior vena cava as stacks of segments"""
    blood = get_intensity(ti, "vessels_blood")
    parts: List[Shape] = []
    for centerline, r, segments in VESSELS:
        for z, half_height in segments:
            zc = z + 0.2
            x, y = centerline(zc)
            parts.append(
                SuperEllipsoid(x, -y - y_offset, zc, r, r, half_height, _SE, blood)
            )
    return parts


def spine_curve(z: float) -> float:
    """
    y of the spine at height z. Amplitude and period of the curvature grow
    linearly from the neck (z = 1) to the lumbar region (z = -1).
    """
    p = 0.5 * (1.0 - z)
    amplitude = 0.07 + p * (0.2 - 0.07)
    period = 1.5 + p * (2.3 - 1.5)
    return 0.4 + 0.25 * p - amplitude * math.sin(2 * math.pi / period * (z - 0.7))


SPINE_LEVELS = [
    (1.05, 0.084),
    (0.95, 0.084),
    (0.85, 0.084),
    (0.7, 0.084),
    (0.55, 0.084),
    (0.4, 0.084),
    (0.25, 0.084),
    (0.1, 0.084),
    (-0.05, 0.084),
    (-0.2, 0.084),
    (-0.4, 0.095),
    (-0.6, 0.095),
    (-0.8, 0.095),
    (-1.0, 0.095),
]


def spine(ti: TissueParameters) -> List[Shape]:
    bones = get_intensity(ti, "bones")
    return [Ellipsoid(0.0, spine_curve(z), z, r, r, r, bones) for z, r in SPINE_LEVELS]


# (z, width, depth, arc coverage); 1 is a closed loop, 0.5 the posterior half
RIB_LEVELS = [
    (0.6, 0.64, 0.53, 1.0),
    (0.45, 0.68, 0.58, 1.0),
    (0.3, 0.72, 0.61, 1.0),
    (0.15, 0.76, 0.62, 1.0),
    (0.0, 0.8, 0.62, 1.0),
    (-0.15, 0.8, 0.62, 0.9),
    (-0.3, 0.78, 0.58, 0.75),
    (-0.45, 0.78, 0.59, 0.6),
    (-0.6, 0.8, 0.6, 0.5),
]
RIB_SEGMENTS = 80


def rib_angles(arc: float, num_segments: int = RIB_SEGMENTS) -> Sequence[float]:
    # angle -pi/2 points at the spine
    if arc >= 1.0:
        return np.linspace(-3 * math.pi / 2, math.pi / 2, num_segments).tolist()
    half = math.pi * arc
    n = int(round(num_segments * arc))
    return np.linspace(-0.5 * math.pi - half, -0.5 * math.pi + half, n).tolist()


def ribs(
    width_scale: float, depth_scale: float, y_offset: float, ti: TissueParameters
) -> List[Shape]:
    bones = get_intensity(ti, "bones")
    parts: List[Shape] = []
    for z, width, depth, arc in RIB_LEVELS:
        w = width * width_scale
        d = depth * depth_scale
        spine_y = spine_curve(z)
        for a in rib_angles(arc):
            # ribs slope downward anteriorly
            dz = (math.pi - abs(0.5 * math.pi + a)) / (2 * math.pi) * 0.06
            parts.append(
                Ellipsoid(
                    w * math.cos(a),
                    spine_y - d - d * math.sin(a) - y_offset,
                    z + dz,
                    0.04,
                    0.04,
                    0.055,
                    bones,
                )
            )
    return parts


# (|x|, y, z, diameters) of the humerus segments, from the shoulder outwards
ARM_BONES = [
    (0.5, 0.28, 0.58, 0.15, 0.075, 0.15),
    (0.55, 0.25, 0.56, 0.16, 0.08, 0.2),
    (0.6, 0.23, 0.54, 0.165, 0.083, 0.26),
    (0.65, 0.2, 0.52, 0.17, 0.1, 0.35),
    (0.7, 0.15, 0.51, 0.175, 0.12, 0.22),
    (0.75, 0.05, 0.5, 0.175, 0.15, 0.175),
    (0.8, 0.0, 0.5, 0.17, 0.17, 0.17),
    (0.85, 0.0, 0.5, 0.165, 0.165, 0.165),
    (0.9, 0.0, 0.48, 0.16, 0.16, 0.16),
    (0.95, 0.0, 0.45, 0.155, 0.155, 0.155),
    (1.0, 0.0, 0.42, 0.15, 0.15, 0.15),
    (1.05, 0.0, 0.39, 0.145, 0.145, 0.145),
    (1.1, 0.0, 0.36, 0.14, 0.14, 0.14),
    (1.15, 0.0, 0.33, 0.135, 0.135, 0.135),
    (1.2, 0.0, 0.3, 0.13, 0.13, 0.13),
]


def arm_bones(ti: TissueParameters) -> List[Shape]:
    bones = get_intensity(ti, "bones")
    return [
        Ellipsoid(sign * x, y + 0.165, z, dx / 2, dy / 2, dz / 2, bones)
        for sign in (-1, 1)
        for x, y, z, dx, dy, dz in ARM_BONES
    ]


def static_bones(ti: TissueParameters) -> List[Shape]:
    return arm_bones(ti) + spine(ti)


def liver(
    diaphragm_up: float, y_offset: float, xy_scale: float, ti: TissueParameters
) -> List[Shape]:
    intensity = get_intensity(ti, "liver")
    return [
        # right lobe
        SuperEllipsoid(
            0.3,
            -0.15 - y_offset,
            -0.55 + diaphragm_up,
            0.385 * xy_scale,
            0.33 * xy_scale,
            0.3,
            _SE,
            intensity,
        ),
        # left lobe
        SuperEllipsoid(
            0.0,
            -0.12 - y_offset,
            -0.5 + diaphragm_up,
            0.22 * xy_scale,
            0.275 * xy_scale,
            0.25,
            _SE,
            intensity,
        ),
    ]


def stomach(
    diaphragm_up: float, y_offset: float, xy_scale: float, ti: TissueParameters
) -> List[Shape]:
    intensity = get_intensity(ti, "stomach")
    return [
        # fundus
        SuperEllipsoid(
            -0.3,
            -0.05 - y_offset,
            -0.45 + diaphragm_up,
            0.33 * xy_scale,
            0.198 * xy_scale,
            0.2,
            _SE,
            intensity,
        ),
        # body
        SuperEllipsoid(
            -0.2,
            -0.08 - y_offset,
            -0.55 + diaphragm_up,
            0.176 * xy_scale,
            0.176 * xy_scale,
            0.22,
            _SE,
            intensity,
        ),
    ]


def dynamic_shapes(params: MotionParameters, ti: TissueParameters) -> List[Shape]:
    """All moving structures of one frame, in drawing order."""
    resp = params.respiratory
    return (
        torso_dynamic_parts(resp.body_scale, resp.y_offset, ti)
        + lungs(resp.scale, resp.diaphragm_up, resp.lower_rz_scale, resp.y_offset, ti)
        + heart_background(params.heart_scale_max, resp.y_offset_visc, ti)
        + vessels(resp.y_offset, ti)
        + heart_chambers(params.heart_scale, resp.y_offset_visc, ti)
        + ribs(resp.body_scale, resp.body_scale, resp.y_offset, ti)
        + liver(resp.diaphragm_up, resp.y_offset_visc, resp.xy_visc_scale, ti)
        + stomach(resp.diaphragm_up, resp.y_offset_visc, resp.xy_visc_scale, ti)
    )
