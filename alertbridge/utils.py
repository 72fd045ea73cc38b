import socket
from typing import Optional, Tuple

from .constants import ZERO_TIMESTAMP_PREFIX

ELLIPSIS = "…"


def _is_meaningful(value):
    if value is None:
        return False
    return str(value).strip() != ""


def pick_first_nonempty(*candidates):
    for c in candidates:
        if _is_meaningful(c):
            return str(c).strip()
    return None


def truncate(text, limit: int) -> str:
    """Corta o texto no limite do Discord, mantendo o máximo possível."""
    text = "" if text is None else str(text)
    if len(text) <= limit:
        return text
    if limit <= len(ELLIPSIS):
        return text[:limit]
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS


def is_zero_timestamp(timestamp_str) -> bool:
    return not timestamp_str or str(timestamp_str).startswith(ZERO_TIMESTAMP_PREFIX)


def format_timestamp(timestamp_str):
    if is_zero_timestamp(timestamp_str):
        return 'N/A'
    clean_timestamp = str(timestamp_str).replace('T', ' ')
    # remove fração de segundos (Alertmanager usa nanossegundos)
    if '.' in clean_timestamp:
        head, _, tail = clean_timestamp.partition('.')
        suffix = 'Z' if tail.endswith('Z') else ''
        for sign in ('+', '-'):
            if sign in tail:
                suffix = sign + tail.split(sign, 1)[1]
                break
        clean_timestamp = head + suffix
    if clean_timestamp.endswith('Z'):
        clean_timestamp = clean_timestamp[:-1] + ' UTC'
    return clean_timestamp


def is_http_url(value: Optional[str]) -> bool:
    if not value:
        return False
    lowered = value.strip().lower()
    return lowered.startswith("http://") or lowered.startswith("https://")


def parse_listen_address(value: str) -> Tuple[str, int]:
    """Converte "host:porta" em (host, porta). Host vazio escuta em todas as interfaces."""
    if not value or ':' not in value:
        raise ValueError(f"listen address must be host:port, got {value!r}")
    host, _, port_text = value.strip().rpartition(':')
    host = host.strip('[]') or '0.0.0.0'
    try:
        port = int(port_text)
    except ValueError:
        raise ValueError(f"invalid port in listen address {value!r}") from None
    if not 0 < port < 65536:
        raise ValueError(f"port out of range in listen address {value!r}")
    return host, port


def ensure_bindable(host: str, port: int) -> None:
    """Abre e fecha um socket no endereço; levanta OSError se não der para escutar nele."""
    family = socket.AF_INET6 if ':' in host else socket.AF_INET
    sock = socket.create_server((host, port), family=family)
    sock.close()
