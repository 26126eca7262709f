#!/usr/bin/env python
import logging

## Kept as a literal, setup.py parses it out of this file
__version__ = "0.1.0"

from .client import AsyncClient
from .client import get_client
from .client import SyncClient
from .session import Session

# Silence notification of no default logging handler
log = logging.getLogger("nckit")


class NullHandler(logging.Handler):
    def emit(self, record) -> None:
        pass


log.addHandler(NullHandler())

__all__ = ["__version__", "AsyncClient", "Session", "SyncClient", "get_client"]
