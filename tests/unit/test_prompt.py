from __future__ import annotations

from recipe_genie.services.prompt import build_recipe_prompt


class TestBuildRecipePrompt:
    def test_minimal_prompt(self) -> None:
        prompt = build_recipe_prompt(["eggs", "spinach"])

        assert "Create 5 different creative recipes" in prompt
        assert "eggs, spinach" in prompt
        assert "Number of servings: 2." in prompt
        assert "Cuisine type" not in prompt
        assert "Dietary restrictions" not in prompt
        assert "Include ONLY the JSON output" in prompt

    def test_optional_lines(self) -> None:
        prompt = build_recipe_prompt(["rice"], servings=4, cuisine="Thai", dietary_preferences="vegan")

        assert "Number of servings: 4." in prompt
        assert "Cuisine type: Thai." in prompt
        assert "Dietary restrictions: vegan." in prompt

    def test_schema_lists_every_field(self) -> None:
        prompt = build_recipe_prompt(["rice"])
        for name in (
            "title", "description", "ingredients", "instructions", "prepTime", "cookTime",
            "totalTime", "servings", "cuisine", "difficulty", "nutritionalInfo", "fiber",
            "dietaryInfo", "glutenFree",
        ):
            assert f'"{name}"' in prompt
