"""
Excepciones personalizadas del servicio de helpers de pago.
"""


class PaymentServiceError(Exception):
    """Error base del servicio."""

    def __init__(self, message: str, code: str = "PAYMENT_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class OrderNotFoundError(PaymentServiceError):
    """La orden no fue encontrada."""

    def __init__(self, order_id: str):
        super().__init__(
            message=f"Order not found: {order_id}",
            code="ORDER_NOT_FOUND",
        )
        self.order_id = order_id


class QuoteNotFoundError(PaymentServiceError):
    """El quote no fue encontrado."""

    def __init__(self, quote_id: str):
        super().__init__(
            message=f"Quote not found: {quote_id}",
            code="QUOTE_NOT_FOUND",
        )
        self.quote_id = quote_id


class DonationFailedError(PaymentServiceError):
    """
    La donación fue rechazada.

    El mensaje es siempre el mismo hacia el usuario; la causa no se expone.
    """

    def __init__(self):
        super().__init__(
            message="Donation failed!",
            code="DONATION_FAILED",
        )


class DonationInProgressError(PaymentServiceError):
    """Ya hay un intento de donación en curso para la orden."""

    def __init__(self, order_id: str):
        super().__init__(
            message=f"A donation for order {order_id} is already being processed",
            code="DONATION_IN_PROGRESS",
        )
        self.order_id = order_id


class ManagementApiError(PaymentServiceError):
    """Error de la API remota de gestión de merchants."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(
            message=message,
            code="MANAGEMENT_API_ERROR",
        )
        self.status_code = status_code


class CaptureCommandError(PaymentServiceError):
    """Error del comando de captura del proveedor de pago."""

    def __init__(self, provider: str, message: str):
        super().__init__(
            message=f"Capture command failed ({provider}): {message}",
            code="CAPTURE_FAILED",
        )
        self.provider = provider
