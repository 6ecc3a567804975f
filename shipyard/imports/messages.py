"""Localizable diagnostics emitted while importing an application."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

DEFAULT_LOCALE = "en"


class MessageKind(str, Enum):
    PIPELINE_NOT_FOUND = "pipeline_not_found"
    APPLICATION_NOT_FOUND = "application_not_found"
    ENVIRONMENT_NOT_FOUND = "environment_not_found"
    GROUP_NOT_FOUND = "group_not_found"
    PIPELINE_ATTACHED = "pipeline_attached"
    HOOK_CREATED = "hook_created"
    POLLER_CREATED = "poller_created"
    APPLICATION_UPDATE_SKIPPED = "application_update_skipped"


_CATALOG: dict[MessageKind, dict[str, str]] = {
    MessageKind.PIPELINE_NOT_FOUND: {
        "en": "Pipeline {0} not found",
        "fr": "Le pipeline {0} n'existe pas",
    },
    MessageKind.APPLICATION_NOT_FOUND: {
        "en": "Application {0} not found",
        "fr": "L'application {0} n'existe pas",
    },
    MessageKind.ENVIRONMENT_NOT_FOUND: {
        "en": "Environment {0} not found",
        "fr": "L'environnement {0} n'existe pas",
    },
    MessageKind.GROUP_NOT_FOUND: {
        "en": "Group {0} not found",
        "fr": "Le groupe {0} n'existe pas",
    },
    MessageKind.PIPELINE_ATTACHED: {
        "en": "Pipeline {0} attached to application {1}",
        "fr": "Le pipeline {0} a été associé à l'application {1}",
    },
    MessageKind.HOOK_CREATED: {
        "en": "Hook created on repository {0} for pipeline {1}",
        "fr": "Hook créé sur le repository {0} pour le pipeline {1}",
    },
    MessageKind.POLLER_CREATED: {
        "en": "Poller created on repository {0} for pipeline {1}",
        "fr": "Poller créé sur le repository {0} pour le pipeline {1}",
    },
    MessageKind.APPLICATION_UPDATE_SKIPPED: {
        "en": "Application {0} already exists, update skipped",
        "fr": "L'application {0} existe déjà, mise à jour ignorée",
    },
}


@dataclass(frozen=True)
class Message:
    kind: MessageKind
    args: tuple[object, ...] = ()

    @classmethod
    def of(cls, kind: MessageKind, *args: object) -> "Message":
        return cls(kind=kind, args=tuple(args))

    def render(self, locale: Optional[str] = None) -> str:
        translations = _CATALOG.get(self.kind)
        if not translations:
            return ""
        template = translations.get(normalize_locale(locale)) or translations[
            DEFAULT_LOCALE
        ]
        return template.format(*("" if arg is None else arg for arg in self.args))


def normalize_locale(value: Optional[str]) -> str:
    """Reduce an Accept-Language header to a primary language tag we can render.

    >>> normalize_locale("fr-FR,fr;q=0.9,en;q=0.8")
    'fr'
    """
    if not value:
        return DEFAULT_LOCALE
    first = value.split(",", 1)[0].split(";", 1)[0].strip()
    primary = first.replace("_", "-").split("-", 1)[0].lower()
    if primary in _supported_locales():
        return primary
    return DEFAULT_LOCALE


def _supported_locales() -> set[str]:
    return {locale for translations in _CATALOG.values() for locale in translations}


def render_messages(messages: Iterable[Message], locale: Optional[str] = None) -> list[str]:
    """Render messages, dropping empty texts and repeats of an earlier text."""
    rendered: list[str] = []
    seen: set[str] = set()
    for message in messages:
        text = message.render(locale)
        if not text or text in seen:
            continue
        seen.add(text)
        rendered.append(text)
    return rendered
