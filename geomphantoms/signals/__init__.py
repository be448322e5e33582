from .respiratory import (
    RespiratoryPhysiology,
    generate_respiratory_signal,
    sample_times,
)
from .cardiac import (
    CardiacPhysiology,
    CardiacVolumes,
    generate_cardiac_signals,
    CHAMBERS,
)
