"""Event, response and error observers.

With logging enabled and no custom observer, each record is written to the
module logger as JSON. A custom observer is always called and replaces the
default output for its kind.
"""

import json
from typing import Any, Callable, Mapping

from simple_msf.log import get_logger

logger = get_logger(__name__)

EventLogger = Callable[[Mapping[str, Any]], None]
ResponseLogger = Callable[[Mapping[str, Any]], None]
ErrorLogger = Callable[[BaseException], None]


def _dumps(value: Any) -> str:
    return json.dumps(value, default=str)


class Observers:
    def __init__(
        self,
        logging_enabled: bool = True,
        event_logger: EventLogger | None = None,
        response_logger: ResponseLogger | None = None,
        error_logger: ErrorLogger | None = None,
    ):
        self.logging_enabled = logging_enabled
        self.event_logger = event_logger
        self.response_logger = response_logger
        self.error_logger = error_logger

    def event(self, event: Mapping[str, Any]) -> None:
        if self.event_logger is not None:
            self.event_logger(event)
        elif self.logging_enabled:
            logger.info("event %s", _dumps(event))

    def response(self, response: Mapping[str, Any]) -> None:
        if self.response_logger is not None:
            self.response_logger(response)
        elif self.logging_enabled:
            logger.info("response %s", _dumps(response))

    def error(self, error: BaseException) -> None:
        if self.error_logger is not None:
            self.error_logger(error)
        elif self.logging_enabled:
            logger.error("error %r", error, exc_info=error)
