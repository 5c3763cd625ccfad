"""Candidate catalog providers.

The pipeline only ever sees a CandidateCatalog: a read-only source with a
single list_candidates() capability. Providers hand out tuples of frozen
Recipe models, so nothing downstream can write through to catalog data,
and one provider instance can be shared by concurrent callers.
"""

import json
from pathlib import Path
from typing import Iterable, Optional, Protocol, runtime_checkable

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from recipe_engine.catalog.sample_recipes import SAMPLE_RECIPES
from recipe_engine.models.models import Recipe
from recipe_engine.utils.config import Config, config as default_config
from recipe_engine.utils.errors import GenerationError, ValidationError
from recipe_engine.utils.logger import logger

_RECIPE_LIST = TypeAdapter(list[Recipe])


@runtime_checkable
class CandidateCatalog(Protocol):
    """Read-only recipe source."""

    def list_candidates(self) -> tuple[Recipe, ...]:
        ...


class InMemoryCatalog:
    """Catalog over an in-memory collection, frozen at construction."""

    def __init__(self, recipes: Iterable[Recipe]) -> None:
        self._recipes = tuple(recipes)

    def list_candidates(self) -> tuple[Recipe, ...]:
        return self._recipes

    def __len__(self) -> int:
        return len(self._recipes)


def parse_recipe_records(records, source: str) -> tuple[Recipe, ...]:
    """Validate raw recipe records (camelCase or snake_case) into Recipe models.

    Args:
        records: Decoded JSON, expected to be a list of recipe objects.
        source: Human-readable origin used in error messages.

    Returns:
        Tuple of validated recipes.

    Raises:
        GenerationError: If the payload is not a list of valid recipes.
    """
    if not isinstance(records, list):
        raise GenerationError(
            f"Invalid response from catalog {source}: expected a list of recipes",
            details=type(records).__name__,
        )
    try:
        return tuple(_RECIPE_LIST.validate_python(records))
    except PydanticValidationError as e:
        raise GenerationError(f"Failed to parse catalog {source}", details=str(e)) from e


class JsonFileCatalog:
    """Catalog backed by a JSON file holding an array of recipes.

    The file is read and validated on first use and cached afterwards.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._recipes: Optional[tuple[Recipe, ...]] = None

    def list_candidates(self) -> tuple[Recipe, ...]:
        if self._recipes is None:
            self._recipes = self._load()
        return self._recipes

    def _load(self) -> tuple[Recipe, ...]:
        logger.info(f"Loading recipe catalog from {self.path}")
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise GenerationError(f"Catalog file not found: {self.path}") from e
        except json.JSONDecodeError as e:
            raise GenerationError(f"Failed to parse catalog file {self.path}", details=str(e)) from e
        recipes = parse_recipe_records(raw, str(self.path))
        logger.info(f"Loaded {len(recipes)} recipes from {self.path}")
        return recipes


_DEFAULT_CATALOG: Optional[InMemoryCatalog] = None


def default_catalog() -> InMemoryCatalog:
    """The bundled sample catalog (validated once per process)."""
    global _DEFAULT_CATALOG
    if _DEFAULT_CATALOG is None:
        _DEFAULT_CATALOG = InMemoryCatalog(parse_recipe_records(SAMPLE_RECIPES, "builtin"))
    return _DEFAULT_CATALOG


def load_catalog(cfg: Optional[Config] = None) -> CandidateCatalog:
    """Build the catalog provider selected by configuration.

    Remote catalogs need network I/O and are only available through
    load_catalog_async() in recipe_engine.catalog.remote.

    Raises:
        ValidationError: If CATALOG_SOURCE is "remote".
    """
    cfg = cfg or default_config
    if cfg.CATALOG_SOURCE == "file":
        return JsonFileCatalog(cfg.CATALOG_PATH)
    if cfg.CATALOG_SOURCE == "remote":
        raise ValidationError(
            "CATALOG_SOURCE=remote requires the async entry points",
            details="use load_catalog_async() or the *_async service functions",
        )
    return default_catalog()
