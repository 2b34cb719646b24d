"""
Error types shared by the parser, the editor, the outbound clients and the API.

Every error carries the HTTP status it maps to and a category
(validation, upstream, not_found, conflict) so route handlers never have to
inspect unknown error shapes.
"""


class DashboardError(Exception):
    """Base class for errors that are reported back to the user."""

    status_code = 500
    category = "unexpected"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"message": self.message, "detail": self.message, "category": self.category}


class ValidationError(DashboardError):
    """Missing or invalid input."""

    status_code = 400
    category = "validation"


class NoItemsFoundError(ValidationError):
    """The order text did not contain a single parseable line item."""

    def __init__(self, message: str = "No valid items found in the text"):
        super().__init__(message)


class FileTooLargeError(ValidationError):
    """An upload exceeded its size limit."""

    status_code = 413

    def __init__(self, filename: str, max_bytes: int):
        if max_bytes >= 1024 * 1024:
            limit = f"{max_bytes // (1024 * 1024)}MB"
        else:
            limit = f"{max_bytes} byte"
        super().__init__(f"{filename or 'File'} exceeds the {limit} limit")
        self.filename = filename
        self.max_bytes = max_bytes


class UpstreamError(DashboardError):
    """The extraction backend, Zoho Books or the OCR service failed."""

    status_code = 502
    category = "upstream"

    def __init__(self, message: str, service: str = "", status_code_upstream=None):
        super().__init__(message)
        self.service = service
        self.upstream_status = status_code_upstream

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.service:
            data["service"] = self.service
        if self.upstream_status is not None:
            data["upstreamStatus"] = self.upstream_status
        return data


class OrderNotFoundError(DashboardError):
    status_code = 404
    category = "not_found"

    def __init__(self, order_id: str):
        super().__init__(f"Purchase order not found: {order_id}")
        self.order_id = order_id


class ItemNotFoundError(DashboardError):
    status_code = 404
    category = "not_found"

    def __init__(self, item_id: str):
        super().__init__(f"Line item not found: {item_id}")
        self.item_id = item_id


class OrderLockedError(DashboardError):
    """Raised on any edit of a purchase order that was already sent."""

    status_code = 409
    category = "conflict"

    def __init__(self, order_id: str):
        super().__init__(f"Purchase order {order_id} was already sent and can no longer be edited")
        self.order_id = order_id
