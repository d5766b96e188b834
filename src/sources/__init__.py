"""Source definitions and their durable registry."""

from src.sources.models import DEFAULT_CACHE_TTL, Source, slugify_name
from src.sources.registry import SourceRegistry

__all__ = ["DEFAULT_CACHE_TTL", "Source", "SourceRegistry", "slugify_name"]
