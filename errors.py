class CheckoutError(Exception):
    """Base error for the checkout flow, rendered as ``{"error": message}``."""

    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class InvalidRequest(CheckoutError):
    status_code = 400


class GatewayError(CheckoutError):
    status_code = 500
