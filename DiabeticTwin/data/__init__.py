"""Static reference data for DiabeticTwin.

Key Contents:
    - `FoodEntry`: nutrition facts for one food (per 100 g).
    - `FoodSafetyFlag`: static safe/moderate/unsafe flag per entry.
    - `FoodTable`: immutable, ordered food table with fuzzy name lookup.
    - `DEFAULT_FOOD_TABLE`: the built-in table of common foods.
    - `load_food_table`: loads a replacement table from YAML.
"""

from .food_database import (
    FoodEntry, FoodSafetyFlag, FoodTable, DEFAULT_FOOD_TABLE, load_food_table
)

__all__ = ["FoodEntry", "FoodSafetyFlag", "FoodTable", "DEFAULT_FOOD_TABLE", "load_food_table"]
