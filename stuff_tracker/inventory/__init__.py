from .application import *  # NOQA
from .config import *  # NOQA
from .domain import *  # NOQA
