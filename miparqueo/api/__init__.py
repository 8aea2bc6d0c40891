# =============================================================================
# API MODULE INITIALIZATION
# =============================================================================
# File: api/__init__.py
# Description: API module exports
# =============================================================================

from miparqueo.api.v1 import api_router
from miparqueo.api.middleware import (
    DatabaseGateMiddleware,
    RequestIDMiddleware,
    RequestLoggingMiddleware,
)

__all__ = [
    "api_router",
    "DatabaseGateMiddleware",
    "RequestIDMiddleware",
    "RequestLoggingMiddleware",
]
