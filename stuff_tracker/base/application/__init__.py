from .manage import *  # NOQA
