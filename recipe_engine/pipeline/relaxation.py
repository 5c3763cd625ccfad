"""Stage supervision: decides whether a filter stage's result is kept.

Soft stages that would empty the pool are rolled back to the pre-stage
pool and noted for diagnostics. Safety-critical stages are always kept,
even when they empty the pool.
"""

from typing import Callable, Iterable

from recipe_engine.models.models import CandidatePool, Recipe
from recipe_engine.utils.logger import logger

StageFn = Callable[[tuple[Recipe, ...]], Iterable[Recipe]]


class RelaxationController:
    """Applies one filter stage at a time under the relaxation policy."""

    def apply_stage(
        self,
        pool: CandidatePool,
        stage_fn: StageFn,
        is_safety_critical: bool,
        name: str = "stage",
    ) -> CandidatePool:
        """Run stage_fn on the pool and accept or discard its result.

        Args:
            pool: Pool produced by the previous accepted stage.
            stage_fn: Pure function from a recipe tuple to the surviving recipes.
            is_safety_critical: True only for allergies; an empty result is kept.
            name: Constraint name used in relaxation notes and logs.

        Returns:
            The stage's pool when non-empty or safety-critical, otherwise the
            pre-stage pool with a relaxation note attached.
        """
        result = tuple(stage_fn(pool.recipes))

        if result or is_safety_critical:
            if not result:
                logger.warning(
                    f"Safety-critical constraint '{name}' eliminated all {len(pool)} candidates",
                    extra={"stage": name},
                )
            else:
                logger.debug(f"Stage '{name}' kept {len(result)}/{len(pool)} candidates", extra={"stage": name})
            return pool.with_recipes(result)

        note = f"Relaxed soft constraint '{name}': it would have eliminated all {len(pool)} candidates"
        logger.warning(note, extra={"stage": name})
        return pool.with_note(note)
