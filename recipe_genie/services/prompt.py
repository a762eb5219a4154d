from __future__ import annotations

from typing import Optional, Sequence

RECIPES_PER_REQUEST = 5
DEFAULT_SERVINGS = 2

_RECIPE_SCHEMA = """[
  {
    "title": "Recipe name",
    "description": "Brief description",
    "ingredients": ["ingredient 1 with quantity", "ingredient 2 with quantity"],
    "instructions": ["step 1", "step 2", "step 3"],
    "prepTime": number in minutes,
    "cookTime": number in minutes,
    "totalTime": number in minutes (sum of prepTime and cookTime),
    "servings": number of servings,
    "cuisine": "cuisine type",
    "difficulty": "Easy", "Medium", or "Hard",
    "nutritionalInfo": {
      "calories": number,
      "protein": number,
      "carbs": number,
      "fats": number,
      "fiber": number
    },
    "dietaryInfo": {
      "vegetarian": boolean,
      "vegan": boolean,
      "glutenFree": boolean,
      "dairyFree": boolean
    }
  }
]"""


def build_recipe_prompt(
    ingredients: Sequence[str],
    servings: Optional[int] = None,
    cuisine: Optional[str] = None,
    dietary_preferences: Optional[str] = None,
) -> str:
    """Build the chef prompt asking for exactly five recipes as a JSON array."""
    lines = [
        "You are a professional chef. "
        f"Create {RECIPES_PER_REQUEST} different creative recipes using these ingredients: "
        f"{', '.join(ingredients)}.",
        f"Number of servings: {servings or DEFAULT_SERVINGS}.",
    ]
    if cuisine:
        lines.append(f"Cuisine type: {cuisine}.")
    if dietary_preferences:
        lines.append(f"Dietary restrictions: {dietary_preferences}.")

    lines.append("")
    lines.append("Return the response as a JSON array with this exact structure:")
    lines.append(_RECIPE_SCHEMA)
    lines.append("")
    lines.append("Include ONLY the JSON output, with no additional text.")
    lines.append("Make sure all properties are included and properly formatted.")
    return "\n".join(lines)
