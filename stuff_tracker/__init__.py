# -*- coding: utf-8 -*-
# (c) Nelen & Schuurmans

from .base.application.manage import Manage  # NOQA
from .base.domain import *  # NOQA
from .base.infrastructure import *  # NOQA

# fmt: off
__version__ = '0.1.0.dev0'
# fmt: on
