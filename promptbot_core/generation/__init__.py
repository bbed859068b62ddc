"""Language generation: template resolution for outbound activities."""
from .resolver import (
    DEFAULT_TEMPLATES,
    LanguageGenerationResolver,
    RemoteLanguageGenerationResolver,
    TemplateResolver,
    TemplateResponses,
    create_resolver,
    fill_entities,
    template_names,
)

__all__ = [
    "DEFAULT_TEMPLATES",
    "LanguageGenerationResolver",
    "RemoteLanguageGenerationResolver",
    "TemplateResolver",
    "TemplateResponses",
    "create_resolver",
    "fill_entities",
    "template_names",
]
