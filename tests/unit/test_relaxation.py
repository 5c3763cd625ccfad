"""Unit tests for the stage relaxation policy."""

import logging

from recipe_engine.models.models import CandidatePool, Recipe
from recipe_engine.pipeline.relaxation import RelaxationController


def recipes(*titles):
    return tuple(Recipe(title=title, servings=2) for title in titles)


def drop_all(pool):
    return []


def keep_first(pool):
    return pool[:1]


class TestRelaxationController:
    """Test acceptance and rollback of stage results."""

    def test_non_empty_soft_result_accepted(self):
        pool = CandidatePool(recipes("A", "B"))

        result = RelaxationController().apply_stage(pool, keep_first, is_safety_critical=False, name="diet")

        assert [recipe.title for recipe in result] == ["A"]
        assert result.notes == ()

    def test_empty_soft_result_rolled_back_with_note(self):
        """Test that a soft stage emptying the pool restores the pre-stage pool."""
        pool = CandidatePool(recipes("A", "B"))

        result = RelaxationController().apply_stage(
            pool, drop_all, is_safety_critical=False, name="cooking_time_limit"
        )

        assert result.recipes == pool.recipes
        assert len(result.notes) == 1
        assert "cooking_time_limit" in result.notes[0]

    def test_empty_safety_critical_result_accepted(self):
        """Test that the allergy stage never falls back to unsafe candidates."""
        pool = CandidatePool(recipes("A", "B"))

        result = RelaxationController().apply_stage(pool, drop_all, is_safety_critical=True, name="allergies")

        assert len(result) == 0
        assert result.notes == ()

    def test_existing_notes_preserved(self):
        pool = CandidatePool(recipes("A"), notes=("earlier",))

        result = RelaxationController().apply_stage(pool, drop_all, is_safety_critical=False, name="max_calories")

        assert result.notes[0] == "earlier"
        assert len(result.notes) == 2

    def test_input_pool_unchanged(self):
        pool = CandidatePool(recipes("A", "B"))

        RelaxationController().apply_stage(pool, keep_first, is_safety_critical=False)

        assert len(pool) == 2

    def test_relaxation_logged_as_warning(self, caplog):
        pool = CandidatePool(recipes("A"))

        with caplog.at_level(logging.WARNING, logger="recipe_engine"):
            RelaxationController().apply_stage(pool, drop_all, is_safety_critical=False, name="dietary_preference")

        relaxed = [record for record in caplog.records if "Relaxed soft constraint" in record.getMessage()]
        assert relaxed
        assert relaxed[0].stage == "dietary_preference"
