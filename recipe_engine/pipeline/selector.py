"""Ranking and winner selection over the surviving pool."""

import random
from typing import Iterable, Optional

from recipe_engine.models.models import CandidatePool, MicroPreference, Recipe, ScoreRecord
from recipe_engine.pipeline.filters import matches_any_term, micro_preference_score
from recipe_engine.utils.logger import logger


def ingredient_match_count(recipe: Recipe, user_ingredients: Iterable[str]) -> int:
    """Number of user ingredients found (as substrings) in some recipe ingredient."""
    return sum(
        1
        for ingredient in user_ingredients
        if ingredient.strip() and any(matches_any_term(line, (ingredient.strip(),)) for line in recipe.ingredients)
    )


def _rank_key(record: ScoreRecord, use_micro: bool) -> tuple[int, int]:
    return (record.micro_score if use_micro else 0, record.ingredient_matches)


class ScoringSelector:
    """Picks the best recipe by micro-preference score, then ingredient overlap.

    Ties keep pool order. When more than `tie_threshold` candidates share the
    top rank, the winner is drawn with `rng` from the first `tie_pool` of them.
    """

    def __init__(self, tie_threshold: int = 2, tie_pool: int = 3) -> None:
        self.tie_threshold = tie_threshold
        self.tie_pool = tie_pool

    def score(
        self,
        pool: CandidatePool | Iterable[Recipe],
        user_ingredients: Iterable[str],
        micro_preferences: Iterable[MicroPreference] = (),
    ) -> list[ScoreRecord]:
        user_ingredients = tuple(user_ingredients)
        micro_preferences = tuple(micro_preferences)
        return [
            ScoreRecord(
                recipe=recipe,
                micro_score=micro_preference_score(recipe, micro_preferences),
                ingredient_matches=ingredient_match_count(recipe, user_ingredients),
            )
            for recipe in pool
        ]

    def rank(self, records: list[ScoreRecord]) -> list[ScoreRecord]:
        """Stable sort; micro score only counts when some candidate scored above 0."""
        use_micro = any(record.micro_score > 0 for record in records)
        return sorted(records, key=lambda record: _rank_key(record, use_micro), reverse=True)

    def select(
        self,
        pool: CandidatePool | Iterable[Recipe],
        user_ingredients: Iterable[str],
        micro_preferences: Iterable[MicroPreference] = (),
        rng: Optional[random.Random] = None,
    ) -> Optional[Recipe]:
        """Return the winning recipe, or None for an empty pool.

        Args:
            pool: Surviving candidates in pool order.
            user_ingredients: Ingredients the user has.
            micro_preferences: Nutrition-shape preferences to score.
            rng: Random source for large ties; a fresh entropy-seeded one if None.

        Returns:
            The selected catalog recipe (unmodified), or None if the pool is empty.
        """
        records = self.rank(self.score(pool, user_ingredients, micro_preferences))
        if not records:
            return None

        use_micro = any(record.micro_score > 0 for record in records)
        top = records[0]
        ties = [record for record in records if _rank_key(record, use_micro) == _rank_key(top, use_micro)]

        if len(ties) > self.tie_threshold:
            candidates = ties[: self.tie_pool]
            winner = (rng or random.Random()).choice(candidates)
            logger.debug(f"{len(ties)} candidates tied for first; drew '{winner.recipe.title}' from top {len(candidates)}")
        else:
            winner = top

        logger.info(
            f"Selected '{winner.recipe.title}' "
            f"(micro_score={winner.micro_score}, ingredient_matches={winner.ingredient_matches})"
        )
        return winner.recipe
