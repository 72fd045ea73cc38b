"""Taxonomia de erros do bridge.

Erros de entrada (payload inválido) viram 400; erros de entrega ao Discord
viram 502. Nenhum deles derruba o processo.
"""
from typing import Optional


class BridgeError(Exception):
    code = "bridge_error"
    http_status = 500


class MalformedPayload(BridgeError):
    code = "malformed_payload"
    http_status = 400

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Malformed Alertmanager payload: {reason}")


class EmptyNotification(BridgeError):
    code = "empty_notification"
    http_status = 400

    def __init__(self):
        super().__init__("Notification contains no alerts")


class DeliveryError(BridgeError):
    code = "delivery_error"
    http_status = 502


class DeliveryFailed(DeliveryError):
    code = "delivery_failed"

    def __init__(self, status_code: int, body: Optional[str] = None):
        self.status_code = status_code
        self.body = (body or "")[:500]
        message = f"Discord rejected the message with HTTP {status_code}"
        if self.body:
            message += f": {self.body}"
        super().__init__(message)


class DeliveryUnreachable(DeliveryError):
    code = "delivery_unreachable"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Could not reach Discord: {reason}")


class DeliveryTimeout(DeliveryError):
    code = "delivery_timeout"

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Discord did not answer within {timeout:g}s")
