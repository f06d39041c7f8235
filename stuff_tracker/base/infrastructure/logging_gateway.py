# (c) Nelen & Schuurmans

import logging
import time

from stuff_tracker.base.domain import Gateway
from stuff_tracker.base.domain import Json

__all__ = ["LoggingGateway"]


class LoggingGateway(Gateway):
    """Write-only gateway that emits every added item as a log record."""

    def __init__(self, logger_name: str = "stuff_tracker.access"):
        self.logger = logging.getLogger(logger_name)

    async def add(self, item: Json) -> Json:
        data = item.copy()
        label = data.pop("tag_suffix", "")
        timestamp = data.pop("time", None)
        if timestamp is None:
            timestamp = time.time()
        self.logger.info(label, extra={"data": data, "timestamp": timestamp})
        return {**data, "time": timestamp, "tag_suffix": label}
