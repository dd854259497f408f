"""
Error taxonomy for the property discovery layer.

Every failure raised by the discovery layer is a DiscoveryError. The API maps
each subclass to an HTTP status in main.py, so none of them escape as a 500.
"""

from typing import Any, Dict, Optional


class DiscoveryError(Exception):
    """Base class with a user-facing message and structured details"""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, **({"details": self.details} if self.details else {})}


class QueryFailure(DiscoveryError):
    """The remote property collection could not answer a query"""

    status_code = 502


class NotFound(DiscoveryError):
    """A slug did not resolve or the resolved listing does not exist"""

    status_code = 404

    def __init__(self, message: str = "Property not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class Unauthenticated(DiscoveryError):
    """A favorite was toggled without a signed-in user"""

    status_code = 401

    def __init__(
        self,
        message: str = "Please sign in to save favorites",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)


class FavoriteSyncFailure(DiscoveryError):
    """The favorites store rejected an add/remove; local state was rolled back"""

    status_code = 502


class ListingSubmissionFailure(DiscoveryError):
    """The property collection did not accept a new listing"""

    status_code = 502
