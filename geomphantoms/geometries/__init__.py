from .shapes import (
    Additive,
    Masking,
    Intensity,
    as_intensity,
    draw_pixels,
    Shape,
    Ellipsoid,
    SuperEllipsoid,
    RotatedEllipsoid,
    CylinderX,
    CylinderY,
    CylinderZ,
    rotate_coronal,
    rotate_sagittal,
)
from .rotation import PLANES, check_plane, euler2mat
from .rasterize import idx_bounds, draw, draw_2d
