from .in_memory_gateway import *  # NOQA
from .logging_gateway import *  # NOQA
