# =============================================================================
# MIDDLEWARE MODULE INITIALIZATION
# =============================================================================
# File: api/middleware/__init__.py
# Description: Middleware module exports
# =============================================================================

from miparqueo.api.middleware.db_gate import DatabaseGateMiddleware
from miparqueo.api.middleware.request_logger import (
    RequestIDMiddleware,
    RequestLoggingMiddleware,
)

__all__ = [
    "DatabaseGateMiddleware",
    "RequestIDMiddleware",
    "RequestLoggingMiddleware",
]
