import os

# Configurações globais de ambiente
DISCORD_WEBHOOK_URL = os.getenv("DISCORD_WEBHOOK_URL") or os.getenv("DISCORD_WEBHOOK")
LISTEN_ADDRESS = os.getenv("LISTEN_ADDRESS", "127.0.0.1:9094")
DISCORD_TIMEOUT_SECONDS = float(os.getenv("DISCORD_TIMEOUT_SECONDS", "5"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG_MODE = os.getenv("DEBUG_MODE", "False").lower() == "true"

SERVICE_NAME = "alertmanager-discord-bridge"

# Limites documentados da API de webhooks do Discord
DISCORD_LIMITS = {
    "content": 2000,
    "title": 256,
    "description": 4096,
    "field_name": 256,
    "field_value": 1024,
    "fields": 25,
    "author_name": 256,
    "footer": 2048,
    "embeds": 25,
    "embed_total": 6000,
}

MAX_EMBEDS_PER_MESSAGE = min(
    int(os.getenv("MAX_EMBEDS_PER_MESSAGE", str(DISCORD_LIMITS["embeds"]))),
    DISCORD_LIMITS["embeds"],
)

# Cores por status do alerta (tabela fixa)
COLOR_FIRING = 15145498
COLOR_RESOLVED = 3066993
COLOR_UNKNOWN = 9807270

STATUS_COLORS = {
    "firing": COLOR_FIRING,
    "resolved": COLOR_RESOLVED,
}

STATUS_EMOJIS = {
    "firing": "🚨",
    "resolved": "✅",
}
UNKNOWN_STATUS_EMOJI = "❔"

NO_DESCRIPTION = "No description provided"
UNNAMED_ALERT = "Unnamed alert"

# Alertmanager envia endsAt zerado enquanto o alerta está ativo
ZERO_TIMESTAMP_PREFIX = "0001-01-01"

# Labels que já aparecem em campos próprios do embed
DISPLAYED_LABELS = {"alertname", "severity", "instance"}

# Campos descartados primeiro quando a mensagem passa do limite total
OPTIONAL_FIELDS = {"Summary", "Labels"}
MIN_DESCRIPTION = 64
