"""
API module for the REST boundary.
"""

from .rest_api import LedgerRestAPI

__all__ = [
    "LedgerRestAPI",
]
