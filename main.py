import logging
import sys

from alertbridge.constants import (
    DEBUG_MODE,
    DISCORD_TIMEOUT_SECONDS,
    DISCORD_WEBHOOK_URL,
    LISTEN_ADDRESS,
    LOG_LEVEL,
    MAX_EMBEDS_PER_MESSAGE,
)
from alertbridge.controller import create_app
from alertbridge.utils import ensure_bindable, parse_listen_address

logger = logging.getLogger("alertbridge")


def configure_logging():
    level = logging.DEBUG if DEBUG_MODE else getattr(logging, LOG_LEVEL, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main():
    configure_logging()

    if not DISCORD_WEBHOOK_URL:
        logger.error("Must set DISCORD_WEBHOOK_URL environment variable")
        sys.exit(1)

    try:
        host, port = parse_listen_address(LISTEN_ADDRESS)
    except ValueError as exc:
        logger.error("Invalid LISTEN_ADDRESS: %s", exc)
        sys.exit(1)

    # o Werkzeug encerra o processo sozinho se o bind falhar, sem passar pelo logger
    try:
        ensure_bindable(host, port)
    except OSError as exc:
        logger.error("Could not bind %s:%d: %s", host, port, exc)
        sys.exit(1)

    app = create_app(
        webhook_url=DISCORD_WEBHOOK_URL,
        max_embeds=MAX_EMBEDS_PER_MESSAGE,
        timeout=DISCORD_TIMEOUT_SECONDS,
    )
    logger.info("Listening on %s:%d", host, port)
    app.run(host=host, port=port, debug=DEBUG_MODE, threaded=True, use_reloader=False)


if __name__ == '__main__':
    main()
