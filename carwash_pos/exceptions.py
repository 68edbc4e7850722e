"""Domain errors raised by services and translated to JSON responses in main.py"""

from typing import Optional


class POSError(Exception):
    """Base class for all errors surfaced to API callers"""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(POSError):
    status_code = 400
    default_message = "Invalid input"


class NotFound(POSError):
    status_code = 404
    default_message = "Not found"


class ProductNotFound(NotFound):
    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class ServiceNotFound(NotFound):
    def __init__(self, service_id):
        self.service_id = service_id
        super().__init__(f"Service {service_id} not found")


class AppointmentNotFound(NotFound):
    default_message = "Appointment not found"


class OrderNotFound(NotFound):
    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class InsufficientStock(POSError):
    status_code = 400

    def __init__(self, product_name: str):
        self.product_name = product_name
        super().__init__(f"Insufficient stock for {product_name}")


class InvalidSize(POSError):
    status_code = 400
    default_message = "Invalid size"


class NoValidSize(POSError):
    status_code = 400
    default_message = "No valid sizes found"


class NoProductConfiguration(POSError):
    """A service/size combination has no linked products configured"""

    status_code = 400
    default_message = "No product configuration"


class InvalidImageFormat(POSError):
    status_code = 400
    default_message = "Invalid image format. Expected data:<mime>;base64,<payload>"


class InvalidTransition(POSError):
    status_code = 400
    default_message = "Invalid status transition"


class StockConflict(POSError):
    """Stock kept changing underneath a conditional update"""

    status_code = 409
    default_message = "Stock changed concurrently, please retry"


class UpstreamUnavailable(POSError):
    status_code = 500
    default_message = "Upstream service unavailable"
