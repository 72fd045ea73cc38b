"""Modelos do payload do Alertmanager (entrada) e da mensagem do Discord (saída).

Labels e annotations são mapas abertos de string -> string: o Alertmanager
não fixa as chaves, então as conhecidas ("alertname", "description",
"summary") são lidas sempre com fallback explícito.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import UNNAMED_ALERT
from .errors import MalformedPayload
from .utils import pick_first_nonempty


def _coerce_string_map(value: Any) -> Any:
    if value is None:
        return {}
    if isinstance(value, dict):
        return {str(k): "" if v is None else str(v) for k, v in value.items()}
    return value


def _freeze_map(value: Dict[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(value))


class Alert(BaseModel):
    """Um alerta do webhook do Alertmanager."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    status: str
    labels: Mapping[str, str] = Field(default_factory=dict)
    annotations: Mapping[str, str] = Field(default_factory=dict)
    starts_at: str = Field(default="", alias="startsAt")
    ends_at: str = Field(default="", alias="endsAt")
    generator_url: str = Field(default="", alias="generatorURL")
    fingerprint: str = ""

    @field_validator("status", "starts_at", "ends_at", "generator_url", "fingerprint", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value

    @field_validator("status")
    @classmethod
    def _normalize_status(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("labels", "annotations", mode="before")
    @classmethod
    def _coerce_maps(cls, value):
        return _coerce_string_map(value)

    @field_validator("labels", "annotations")
    @classmethod
    def _freeze_maps(cls, value):
        return _freeze_map(value)

    @property
    def name(self) -> str:
        return pick_first_nonempty(self.labels.get("alertname")) or UNNAMED_ALERT

    @property
    def severity(self) -> Optional[str]:
        return pick_first_nonempty(self.labels.get("severity"))

    @property
    def body(self) -> Optional[str]:
        return pick_first_nonempty(
            self.annotations.get("description"),
            self.annotations.get("summary"),
            self.annotations.get("message"),
        )


class Notification(BaseModel):
    """Payload completo do webhook do Alertmanager (um lote de alertas)."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    status: str
    receiver: str
    alerts: Tuple[Alert, ...]
    group_labels: Mapping[str, str] = Field(default_factory=dict, alias="groupLabels")
    common_labels: Mapping[str, str] = Field(default_factory=dict, alias="commonLabels")
    common_annotations: Mapping[str, str] = Field(default_factory=dict, alias="commonAnnotations")
    external_url: str = Field(default="", alias="externalURL")
    version: str = ""
    group_key: str = Field(default="", alias="groupKey")
    truncated_alerts: int = Field(default=0, ge=0, alias="truncatedAlerts")

    @field_validator("external_url", "version", "group_key", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value

    @field_validator("status")
    @classmethod
    def _normalize_status(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("group_labels", "common_labels", "common_annotations", mode="before")
    @classmethod
    def _coerce_maps(cls, value):
        return _coerce_string_map(value)

    @field_validator("group_labels", "common_labels", "common_annotations")
    @classmethod
    def _freeze_maps(cls, value):
        return _freeze_map(value)

    @field_validator("truncated_alerts", mode="before")
    @classmethod
    def _reject_bool_count(cls, value):
        # true/false não é contagem
        if value is None or isinstance(value, bool):
            return 0
        return value

    @property
    def firing(self) -> List[Alert]:
        return [a for a in self.alerts if a.status == "firing"]

    @property
    def resolved(self) -> List[Alert]:
        return [a for a in self.alerts if a.status == "resolved"]


def _describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors()[:3]:
        location = ".".join(str(p) for p in error.get("loc", ())) or "body"
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)


def decode_notification(body) -> Notification:
    """Decodifica o corpo do webhook do Alertmanager.

    Qualquer problema de formato vira MalformedPayload; uma lista de alertas
    vazia é aceita aqui e rejeitada pelo tradutor.
    """
    if body is None:
        raise MalformedPayload("empty body")
    if isinstance(body, (bytes, bytearray)):
        try:
            body = bytes(body).decode("utf-8")
        except UnicodeDecodeError:
            raise MalformedPayload("body is not valid UTF-8") from None
    if not body.strip():
        raise MalformedPayload("empty body")
    try:
        return Notification.model_validate_json(body)
    except ValidationError as exc:
        raise MalformedPayload(_describe_validation_error(exc)) from None
    except RecursionError:
        raise MalformedPayload("JSON nested too deeply") from None


@dataclass
class EmbedField:
    name: str
    value: str
    inline: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value, "inline": self.inline}


@dataclass
class EmbedAuthor:
    name: str
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"name": self.name}
        if self.url:
            data["url"] = self.url
        return data


@dataclass
class Embed:
    title: str
    description: str
    color: int
    fields: List[EmbedField] = field(default_factory=list)
    url: Optional[str] = None
    author: Optional[EmbedAuthor] = None
    footer: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "color": self.color,
        }
        if self.fields:
            data["fields"] = [f.to_dict() for f in self.fields]
        if self.url:
            data["url"] = self.url
        if self.author:
            data["author"] = self.author.to_dict()
        if self.footer:
            data["footer"] = {"text": self.footer}
        return data


@dataclass
class DiscordMessage:
    content: str = ""
    embeds: List[Embed] = field(default_factory=list)
    username: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.content:
            data["content"] = self.content
        if self.embeds:
            data["embeds"] = [e.to_dict() for e in self.embeds]
        if self.username:
            data["username"] = self.username
        return data
