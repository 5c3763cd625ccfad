"""Identity stamping for pipeline output."""

import uuid
from typing import Callable, Iterable, Optional

from recipe_engine.models.models import Recipe
from recipe_engine.utils.errors import GenerationError

VARIATION_SUFFIX = "Variation"
VARIATION_PREFIX = "A variation of the original recipe"


def _new_id() -> str:
    return uuid.uuid4().hex


def variation_title(title: str) -> str:
    """Append " Variation" unless the title already carries it."""
    if VARIATION_SUFFIX.lower() in title.lower():
        return title
    return f"{title} {VARIATION_SUFFIX}"


def variation_description(description: str, changed_ingredients: Iterable[str]) -> str:
    """Prefix the description with what changed, replacing any earlier prefix."""
    if description.startswith(VARIATION_PREFIX):
        # Earlier prefix ends at the first ". "
        _, _, description = description.partition(". ")
    changed = ", ".join(changed_ingredients)
    prefix = f"{VARIATION_PREFIX} with modified ingredients: {changed}." if changed else f"{VARIATION_PREFIX}."
    return f"{prefix} {description}".strip()


class IdentityAssigner:
    """Gives every output recipe a fresh id and, for variations, a marked title."""

    def __init__(self, id_factory: Optional[Callable[[], str]] = None) -> None:
        self.id_factory = id_factory or _new_id

    def stamp(
        self,
        recipe: Recipe,
        *,
        variation: bool = False,
        changed_ingredients: Iterable[str] = (),
    ) -> Recipe:
        """Return a copy with a new id (never equal to the input's id).

        With variation=True the title gets the "Variation" suffix exactly once
        and the description is prefixed with the changed ingredients.
        """
        new_id = self.id_factory()
        if new_id == recipe.id:
            new_id = self.id_factory()
        if new_id == recipe.id:
            raise GenerationError(f"Identifier factory returned the existing id {recipe.id!r}")

        update = {"id": new_id}
        if variation:
            update["title"] = variation_title(recipe.title)
            update["description"] = variation_description(recipe.description, changed_ingredients)
        return recipe.model_copy(update=update)
