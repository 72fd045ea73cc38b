"""Tradução de uma Notification do Alertmanager em mensagens do Discord.

Um embed por alerta, na ordem recebida. Se o lote passar do limite de
embeds por mensagem, ele é dividido em várias mensagens sem descartar
alertas. Campos acima dos limites do Discord são truncados.
"""
import logging
from typing import List, Optional

from .constants import (
    COLOR_UNKNOWN,
    DISCORD_LIMITS,
    DISPLAYED_LABELS,
    MAX_EMBEDS_PER_MESSAGE,
    MIN_DESCRIPTION,
    NO_DESCRIPTION,
    OPTIONAL_FIELDS,
    STATUS_COLORS,
    STATUS_EMOJIS,
    UNKNOWN_STATUS_EMOJI,
)
from .errors import EmptyNotification
from .models import Alert, DiscordMessage, Embed, EmbedAuthor, EmbedField, Notification
from .utils import format_timestamp, is_http_url, is_zero_timestamp, pick_first_nonempty, truncate

logger = logging.getLogger(__name__)


def status_color(status: str) -> int:
    return STATUS_COLORS.get((status or "").lower(), COLOR_UNKNOWN)


def status_emoji(status: str) -> str:
    return STATUS_EMOJIS.get((status or "").lower(), UNKNOWN_STATUS_EMOJI)


def _field(name, value, inline=False) -> EmbedField:
    value = truncate(value, DISCORD_LIMITS["field_value"])
    # Discord rejeita campos com valor vazio
    return EmbedField(
        name=truncate(name, DISCORD_LIMITS["field_name"]),
        value=value if value.strip() else "-",
        inline=inline,
    )


def build_fields(alert: Alert) -> List[EmbedField]:
    fields = []
    if alert.severity:
        fields.append(_field("Severity", alert.severity.upper(), inline=True))

    description = pick_first_nonempty(alert.annotations.get("description"))
    summary = pick_first_nonempty(alert.annotations.get("summary"))
    if description and summary and summary != description:
        fields.append(_field("Summary", summary))

    if not is_zero_timestamp(alert.starts_at):
        fields.append(_field("Started", format_timestamp(alert.starts_at), inline=True))
    if alert.status == "resolved" and not is_zero_timestamp(alert.ends_at):
        fields.append(_field("Ended", format_timestamp(alert.ends_at), inline=True))

    instance = pick_first_nonempty(alert.labels.get("instance"))
    if instance:
        fields.append(_field("Instance", f"`{instance}`", inline=True))

    other_labels = [
        f"{key}={value}"
        for key, value in sorted(alert.labels.items())
        if key not in DISPLAYED_LABELS
    ]
    if other_labels:
        fields.append(_field("Labels", "\n".join(other_labels)))

    return fields[: DISCORD_LIMITS["fields"]]


def build_author(notification: Notification) -> Optional[EmbedAuthor]:
    name = pick_first_nonempty(notification.common_labels.get("prometheus"), notification.receiver)
    if not name:
        return None
    url = notification.external_url if is_http_url(notification.external_url) else None
    return EmbedAuthor(name=truncate(name, DISCORD_LIMITS["author_name"]), url=url)


def build_embed(alert: Alert, author: Optional[EmbedAuthor] = None) -> Embed:
    status_label = (alert.status or "unknown").upper()
    title = f"{status_emoji(alert.status)} [{status_label}] {alert.name}"
    return Embed(
        title=truncate(title, DISCORD_LIMITS["title"]),
        description=truncate(alert.body or NO_DESCRIPTION, DISCORD_LIMITS["description"]),
        color=status_color(alert.status),
        fields=build_fields(alert),
        url=alert.generator_url if is_http_url(alert.generator_url) else None,
        author=author,
    )


def build_content(alerts) -> str:
    firing = sum(1 for a in alerts if a.status == "firing")
    resolved = sum(1 for a in alerts if a.status == "resolved")
    other = len(alerts) - firing - resolved

    parts = []
    if firing:
        parts.append(f"{firing} firing")
    if resolved:
        parts.append(f"{resolved} resolved")
    if other:
        parts.append(f"{other} with unknown status")

    if firing:
        emoji = STATUS_EMOJIS["firing"]
    elif resolved and not other:
        emoji = STATUS_EMOJIS["resolved"]
    else:
        emoji = UNKNOWN_STATUS_EMOJI
    return f"{emoji} " + ", ".join(parts)


def embed_size(embed: Embed) -> int:
    """Caracteres que o Discord soma no limite total de embeds da mensagem."""
    size = len(embed.title) + len(embed.description)
    size += sum(len(f.name) + len(f.value) for f in embed.fields)
    if embed.author:
        size += len(embed.author.name)
    if embed.footer:
        size += len(embed.footer)
    return size


def _size_cap(sizes: List[int], budget: int) -> Optional[int]:
    # Divide o orçamento entre os embeds; os menores ficam intactos
    remaining = budget
    ordered = sorted(sizes)
    for i, size in enumerate(ordered):
        share = remaining // (len(ordered) - i)
        if size > share:
            return share
        remaining -= size
    return None


def shrink_embed(embed: Embed, cap: int) -> None:
    if embed_size(embed) <= cap:
        return

    embed.fields = [f for f in embed.fields if f.name not in OPTIONAL_FIELDS]

    over = embed_size(embed) - cap
    if over > 0:
        keep = max(len(embed.description) - over, min(MIN_DESCRIPTION, len(embed.description)))
        embed.description = truncate(embed.description, keep)

    while embed.fields and embed_size(embed) > cap:
        embed.fields = embed.fields[:-1]

    if embed_size(embed) > cap:
        embed.author = None

    over = embed_size(embed) - cap
    if over > 0:
        embed.title = truncate(embed.title, max(len(embed.title) - over, 1))

    over = embed_size(embed) - cap
    if over > 0:
        embed.description = truncate(embed.description, max(len(embed.description) - over, 0))


def fit_embeds(embeds: List[Embed], budget: int = DISCORD_LIMITS["embed_total"]) -> List[Embed]:
    """Garante que a soma dos embeds de uma mensagem cabe no limite total do Discord."""
    cap = _size_cap([embed_size(e) for e in embeds], budget)
    if cap is None:
        return embeds
    logger.debug("Embeds exceed %d characters, shrinking each to at most %d", budget, cap)
    for embed in embeds:
        shrink_embed(embed, cap)
    return embeds


def translate(notification: Notification, max_embeds: int = MAX_EMBEDS_PER_MESSAGE) -> List[DiscordMessage]:
    """Converte a notificação em uma ou mais DiscordMessage, preservando a ordem dos alertas."""
    if not notification.alerts:
        raise EmptyNotification()
    max_embeds = max(1, min(max_embeds, DISCORD_LIMITS["embeds"]))

    author = build_author(notification)
    embeds = [build_embed(alert, author) for alert in notification.alerts]
    content = build_content(notification.alerts)
    if notification.truncated_alerts:
        content += f" ({notification.truncated_alerts} more truncated by Alertmanager)"

    chunks = [embeds[i:i + max_embeds] for i in range(0, len(embeds), max_embeds)]
    messages = []
    for index, chunk in enumerate(chunks, start=1):
        chunk_content = content
        if len(chunks) > 1:
            chunk_content += f" (part {index}/{len(chunks)})"
        messages.append(DiscordMessage(
            content=truncate(chunk_content, DISCORD_LIMITS["content"]),
            embeds=fit_embeds(chunk),
        ))

    logger.debug(
        "Translated %d alert(s) from receiver %r into %d message(s)",
        len(notification.alerts), notification.receiver, len(messages),
    )
    return messages
