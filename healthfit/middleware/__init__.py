# ==============================================================================
# MIDDLEWARE PACKAGE INITIALIZATION
# ==============================================================================

from healthfit.middleware.request_logger import RequestLoggerMiddleware

__all__ = ["RequestLoggerMiddleware"]
