from .intensities import (
    ELLIPSOIDS,
    SheppLoganIntensities,
    SheppLoganMask,
    ct_shepp_logan_intensities,
    mri_shepp_logan_intensities,
    shepp_logan_parameters_from_dict,
)
from .geometry import shepp_logan_shapes
from .phantom import create_shepp_logan_phantom, create_shepp_logan_phantom_2d
