import logging

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from .constants import DISCORD_TIMEOUT_SECONDS, DISCORD_WEBHOOK_URL, MAX_EMBEDS_PER_MESSAGE, SERVICE_NAME
from .errors import BridgeError, DeliveryError
from .models import decode_notification
from .services import DiscordForwarder
from .translator import translate

logger = logging.getLogger(__name__)


def _error_response(exc: BridgeError, **extra):
    body = {"status": "error", "error": exc.code, "message": str(exc)}
    body.update(extra)
    return jsonify(body), exc.http_status


def create_app(webhook_url=None, forwarder=None, path="/", max_embeds=None, timeout=None):
    """Cria o Flask app do bridge.

    A configuração chega por parâmetro (com fallback para as variáveis de
    ambiente em constants), nunca é lida dentro do handler.
    """
    if forwarder is None:
        webhook_url = webhook_url or DISCORD_WEBHOOK_URL
        if not webhook_url:
            raise ValueError("DISCORD_WEBHOOK_URL must be set")
        forwarder = DiscordForwarder(
            webhook_url,
            timeout=DISCORD_TIMEOUT_SECONDS if timeout is None else timeout,
        )
    max_embeds = max_embeds or MAX_EMBEDS_PER_MESSAGE

    app = Flask(__name__)

    @app.route('/health', methods=['GET'])
    def health():
        return {'status': 'ok', 'service': SERVICE_NAME}, 200

    @app.route(path, methods=['POST'])
    def alert():
        try:
            notification = decode_notification(request.get_data())
            messages = translate(notification, max_embeds=max_embeds)
        except BridgeError as exc:
            logger.warning("Rejected webhook from %s: %s", request.remote_addr, exc)
            return _error_response(exc)

        logger.info(
            "Received %d alert(s) for receiver %r (%d firing, %d resolved)",
            len(notification.alerts), notification.receiver,
            len(notification.firing), len(notification.resolved),
        )

        # Envio sequencial para manter a ordem; para na primeira falha
        delivered = 0
        for message in messages:
            try:
                forwarder.forward(message)
            except DeliveryError as exc:
                logger.error(
                    "Delivery of message %d/%d failed: %s", delivered + 1, len(messages), exc,
                )
                return _error_response(exc, stage="forward", delivered=delivered, total=len(messages))
            delivered += 1

        logger.info("Dispatched %d message(s) to Discord", delivered)
        return {'status': 'ok', 'messages': delivered, 'alerts': len(notification.alerts)}, 200

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return {'status': 'error', 'error': exc.name, 'message': exc.description}, exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc):
        logger.exception("Unexpected error while handling %s %s", request.method, request.path)
        return {'status': 'error', 'error': 'internal_error', 'message': str(exc)}, 500

    return app
