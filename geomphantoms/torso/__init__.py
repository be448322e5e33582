from .intensities import (
    TISSUES,
    TissueIntensities,
    TissueMask,
    TissueParameters,
    tissue_mask,
    get_intensity,
    tissue_parameters_from_dict,
)
from .motion import (
    RespiratoryMotion,
    CardiacMotion,
    MotionParameters,
    respiratory_motion,
    cardiac_scales,
    motion_parameters,
    setup_motion_signals,
    frame_motion_parameters,
)
from .geometry import dynamic_shapes, static_bones, torso_static_parts, spine_curve
from .phantom import create_torso_phantom, create_torso_phantom_2d
from .validation import count_voxels, calculate_volume
