from .asgi import *  # NOQA
from .fastapi_access_logger import *  # NOQA
from .service import *  # NOQA
