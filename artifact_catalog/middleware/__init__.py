# artifact_catalog/middleware/__init__.py
from .cors import add_cors
from .logging import install_request_logging
from .correlation import add_correlation_middleware, get_correlation_id
from .error_handlers import add_error_handlers

__all__ = [
    "add_cors",
    "install_request_logging",
    "add_correlation_middleware",
    "get_correlation_id",
    "add_error_handlers",
]
