"""
Dashboard Exceptions
Errors raised by the service layer and translated to HTTP responses by the routes.
"""


class DashboardException(Exception):
    """Base exception for dashboard errors."""
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationException(DashboardException):
    """Exception raised when request data fails validation."""
    status_code = 400


class NotFoundException(DashboardException):
    """Exception raised when a referenced record does not exist."""
    status_code = 404


class AuthorizationException(DashboardException):
    """Exception raised when the current user may not access a page."""
    status_code = 403


class ImageUploadException(DashboardException):
    """Exception raised when the image CDN rejects or fails an operation."""
    def __init__(self, message, cdn_response=None):
        super().__init__(message)
        self.cdn_response = cdn_response


class CurrencyRateException(DashboardException):
    """Exception raised when exchange rates cannot be fetched."""
    status_code = 502
