"""
Language Generation - Resolvers for template references in outbound text.

An activity's text may reference templates as ``[templateName]``. A
resolver replaces every reference with generated text before the
activity is sent. Template bodies may use ``{entity}`` placeholders
filled from the entities passed to :meth:`resolve`.
"""
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

import httpx
import structlog

from ..config import Settings, get_settings
from ..errors import LanguageGenerationError
from ..schema import Activity

logger = structlog.get_logger()


TEMPLATE_REFERENCE = re.compile(r"\[(?P<name>[A-Za-z_][\w.]*)\]")
ENTITY_PLACEHOLDER = re.compile(r"\{(?P<name>\w+)\}")


class TemplateResponses:
    """Template references used by the bundled bots."""

    WELCOME_USER = "[welcomeUser]"


DEFAULT_TEMPLATES: Dict[str, str] = {
    "welcomeUser": "Welcome!",
}


def template_names(text: Optional[str]) -> List[str]:
    """Template names referenced in ``text``, in order, without duplicates."""
    names: List[str] = []
    for match in TEMPLATE_REFERENCE.finditer(text or ""):
        if match.group("name") not in names:
            names.append(match.group("name"))
    return names


def fill_entities(body: str, entities: Mapping[str, Any]) -> str:
    """Replace ``{entity}`` placeholders; unknown placeholders are kept."""
    return ENTITY_PLACEHOLDER.sub(
        lambda m: str(entities[m.group("name")]) if m.group("name") in entities else m.group(0),
        body,
    )


class LanguageGenerationResolver(ABC):
    """Abstract base class for language generation resolvers."""

    @abstractmethod
    async def resolve_templates(self, names: List[str], entities: Mapping[str, Any]) -> Dict[str, str]:
        """
        Generate text for each template name.

        Raises:
            LanguageGenerationError: if a template cannot be resolved
        """
        pass

    async def resolve(self, activity: Activity, entities: Optional[Mapping[str, Any]] = None) -> Activity:
        """Resolve template references in ``activity.text`` and ``activity.speak`` in place."""
        entities = entities or {}
        names = template_names(activity.text) + [
            n for n in template_names(activity.speak) if n not in template_names(activity.text)
        ]
        if not names:
            return activity

        resolved = await self.resolve_templates(names, entities)

        def substitute(text: Optional[str]) -> Optional[str]:
            if text is None:
                return None
            return TEMPLATE_REFERENCE.sub(lambda m: resolved[m.group("name")], text)

        activity.text = substitute(activity.text)
        activity.speak = substitute(activity.speak)

        logger.debug("templates_resolved", templates=names)
        return activity


class TemplateResolver(LanguageGenerationResolver):
    """Resolves templates from a local name -> body mapping."""

    def __init__(self, templates: Optional[Mapping[str, str]] = None) -> None:
        self.templates: Dict[str, str] = dict(DEFAULT_TEMPLATES if templates is None else templates)

    async def resolve_templates(self, names: List[str], entities: Mapping[str, Any]) -> Dict[str, str]:
        missing = [n for n in names if n not in self.templates]
        if missing:
            raise LanguageGenerationError(
                f"Unknown templates: {', '.join(missing)}",
                details={"templates": missing},
            )
        return {name: fill_entities(self.templates[name], entities) for name in names}


class RemoteLanguageGenerationResolver(LanguageGenerationResolver):
    """
    Client for a hosted language generation application.

    Request:  POST {endpoint}/apps/{application_id}/resolve
              {"templates": [...], "entities": {...}}
    Response: {"resolutions": {"templateName": "generated text", ...}}
    """

    def __init__(
        self,
        endpoint: str,
        application_id: str,
        endpoint_key: str,
        endpoint_region: str,
        timeout: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not endpoint:
            raise ValueError("endpoint is required")
        self.endpoint = endpoint.rstrip("/")
        self.application_id = application_id
        self.endpoint_key = endpoint_key
        self.endpoint_region = endpoint_region
        self.timeout = timeout
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={
                    "X-Endpoint-Key": self.endpoint_key,
                    "X-Endpoint-Region": self.endpoint_region,
                },
            )
        return self._client

    async def resolve_templates(self, names: List[str], entities: Mapping[str, Any]) -> Dict[str, str]:
        url = f"{self.endpoint}/apps/{self.application_id}/resolve"
        try:
            response = await self._get_client().post(
                url,
                json={"templates": names, "entities": dict(entities)},
            )
            response.raise_for_status()
            resolutions = response.json().get("resolutions") or {}
        except (httpx.HTTPError, ValueError) as e:
            logger.error("language_generation_failed", url=url, error=str(e))
            raise LanguageGenerationError(
                "Language generation service request failed",
                details={"url": url, "error": str(e)},
            ) from e

        missing = [n for n in names if n not in resolutions]
        if missing:
            raise LanguageGenerationError(
                f"Service did not resolve: {', '.join(missing)}",
                details={"templates": missing},
            )
        return {name: str(resolutions[name]) for name in names}

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def create_resolver(
    provider: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> LanguageGenerationResolver:
    """
    Factory function to create a language generation resolver.

    Args:
        provider: "template" or "remote". If None, uses setting from config.
        settings: Settings to read endpoint details from; defaults to get_settings()
    """
    settings = settings or get_settings()
    provider = provider or settings.lg_provider

    if provider == "remote":
        if not settings.lg_endpoint or not settings.lg_endpoint_key:
            logger.warning("LG_ENDPOINT or LG_ENDPOINT_KEY not set, falling back to local templates")
            return TemplateResolver()
        return RemoteLanguageGenerationResolver(
            endpoint=settings.lg_endpoint,
            application_id=settings.lg_application_id,
            endpoint_key=settings.lg_endpoint_key,
            endpoint_region=settings.lg_endpoint_region,
            timeout=settings.lg_timeout_seconds,
        )

    return TemplateResolver()


__all__ = [
    "TemplateResponses",
    "DEFAULT_TEMPLATES",
    "template_names",
    "fill_entities",
    "LanguageGenerationResolver",
    "TemplateResolver",
    "RemoteLanguageGenerationResolver",
    "create_resolver",
]
