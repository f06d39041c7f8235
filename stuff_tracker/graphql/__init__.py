from .errors import *  # NOQA
from .types import *  # NOQA
