from .cursor import *  # NOQA
from .exceptions import *  # NOQA
from .filter import *  # NOQA
from .gateway import *  # NOQA
from .keyset import *  # NOQA
from .pagination import *  # NOQA
from .repository import *  # NOQA
from .root_entity import *  # NOQA
from .sort import *  # NOQA
from .types import *  # NOQA
from .value_object import *  # NOQA
