from .logger import *
from .misc import *
