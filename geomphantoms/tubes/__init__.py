from .intensities import TubesIntensities, TubesMask, tubes_parameters_from_dict
from .geometry import TubesGeometry, tubes_geometry_from_dict, tubes_shapes
from .phantom import create_tubes_phantom, create_tubes_phantom_2d
