# DiabeticTwin Food Database
# Static nutrition reference table and the lookup used by the food safety analyzer

import logging
from dataclasses import dataclass, asdict
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

import pandas as pd
import yaml

logger = logging.getLogger(__name__)

class FoodSafetyFlag(Enum):
    """Static suitability flag carried by each food table entry."""
    SAFE = "safe"
    UNSAFE = "unsafe"
    MODERATE = "moderate"

@dataclass(frozen=True)
class FoodEntry:
    """Nutrition reference data for one food, per 100 g."""
    name: str
    carbs_per_100g: float
    glycemic_index: int  # 0-100
    category: str
    fiber_per_100g: float = 0.0
    safety_flag: FoodSafetyFlag = FoodSafetyFlag.MODERATE
    portion: str = "100g"

    @property
    def net_carbs_per_100g(self) -> float:
        return max(0.0, self.carbs_per_100g - self.fiber_per_100g)


_S, _M, _U = FoodSafetyFlag.SAFE, FoodSafetyFlag.MODERATE, FoodSafetyFlag.UNSAFE

# name, carbs, GI, category, fiber, flag, portion
_DEFAULT_FOODS = [
    # Low glycemic index vegetables
    ("broccoli", 6, 15, "vegetable", 2.6, _S, "1 cup (91g)"),
    ("spinach", 3, 15, "vegetable", 2.2, _S, "1 cup (30g)"),
    ("cauliflower", 5, 15, "vegetable", 2.1, _S, "1 cup (107g)"),
    ("kale", 7, 15, "vegetable", 2.6, _S, "1 cup (67g)"),
    ("cabbage", 5, 10, "vegetable", 2.2, _S, "1 cup (89g)"),
    ("zucchini", 4, 15, "vegetable", 1.2, _S, "1 cup (124g)"),
    ("mushrooms", 3, 15, "vegetable", 1.0, _S, "1 cup (70g)"),
    ("bell peppers", 6, 15, "vegetable", 1.5, _S, "1 cup (149g)"),
    # Proteins and dairy
    ("chicken breast", 0, 0, "protein", 0.0, _S, "100g"),
    ("salmon", 0, 0, "protein", 0.0, _S, "100g"),
    ("eggs", 1, 0, "protein", 0.0, _S, "1 large (50g)"),
    ("tofu", 2, 15, "protein", 1.0, _S, "100g"),
    ("greek yogurt", 4, 35, "dairy", 0.0, _S, "100g"),
    ("cheese", 1, 0, "dairy", 0.0, _S, "28g"),
    # Fats and nuts
    ("avocado", 9, 15, "fat", 7.0, _S, "100g"),
    ("almonds", 6, 15, "nuts", 3.5, _S, "28g"),
    ("walnuts", 4, 15, "nuts", 2.0, _S, "28g"),
    ("olive oil", 0, 0, "fat", 0.0, _S, "1 tbsp (14g)"),
    # Medium glycemic index
    ("apple", 25, 36, "fruit", 4.4, _M, "1 medium (182g)"),
    ("orange", 21, 40, "fruit", 4.3, _M, "1 medium (131g)"),
    ("banana", 27, 51, "fruit", 3.1, _M, "1 medium (118g)"),
    ("sweet potato", 20, 54, "starch", 3.3, _M, "100g"),
    ("brown rice", 45, 55, "grain", 3.5, _M, "1 cup cooked (195g)"),
    ("oats", 66, 55, "grain", 10.1, _M, "100g dry"),
    ("quinoa", 39, 53, "grain", 5.2, _M, "1 cup cooked (185g)"),
    ("whole wheat bread", 49, 60, "grain", 6.9, _M, "2 slices (56g)"),
    # High glycemic index
    ("white bread", 49, 75, "grain", 2.7, _U, "2 slices (56g)"),
    ("white rice", 53, 73, "grain", 0.6, _U, "1 cup cooked (186g)"),
    ("potato", 37, 78, "starch", 4.0, _U, "1 medium (173g)"),
    ("sugar", 100, 100, "sweet", 0.0, _U, "100g"),
    ("soda", 39, 90, "drink", 0.0, _U, "1 can (355ml)"),
    ("cake", 57, 85, "sweet", 1.0, _U, "100g"),
    ("cookies", 68, 80, "sweet", 2.0, _U, "100g"),
    ("ice cream", 28, 65, "sweet", 0.0, _U, "100g"),
    ("candy", 98, 95, "sweet", 0.0, _U, "100g"),
]


class FoodTable(Mapping[str, FoodEntry]):
    """Read-only food table keyed by lowercase name.

    Iteration follows the canonical table order (the order entries were
    supplied in), which is also the tie-break order for fuzzy lookups.
    """

    def __init__(self, entries: Iterable[FoodEntry]):
        foods: Dict[str, FoodEntry] = {}
        for entry in entries:
            key = entry.name.strip().lower()
            if key in foods:
                raise ValueError(f"Duplicate food entry: '{key}'")
            foods[key] = entry
        self._foods = MappingProxyType(foods)

    def __getitem__(self, key: str) -> FoodEntry:
        return self._foods[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._foods)

    def __len__(self) -> int:
        return len(self._foods)

    def find(self, food_name: str) -> Optional[FoodEntry]:
        """Looks up a food by name.

        Tries a case-insensitive exact match first. Failing that, every key
        that contains the query, or is contained in it, is a candidate;
        the longest candidate key wins and equal lengths resolve to the
        earlier entry in table order. A blank query matches nothing.

        Args:
            food_name (str): Free-text food name.

        Returns:
            Optional[FoodEntry]: The matched entry, or None.
        """
        query = food_name.strip().lower()
        if not query:
            return None
        if query in self._foods:
            return self._foods[query]

        best: Optional[FoodEntry] = None
        best_len = -1
        for key, entry in self._foods.items():
            if (query in key or key in query) and len(key) > best_len:
                best, best_len = entry, len(key)
        return best

    def filter(self, max_gi: Optional[int] = None, max_carbs: Optional[float] = None,
               safety_flag: Optional[FoodSafetyFlag] = None,
               category: Optional[str] = None) -> List[FoodEntry]:
        """Entries matching every given criterion, in table order."""
        selected = []
        for entry in self._foods.values():
            if max_gi is not None and entry.glycemic_index > max_gi:
                continue
            if max_carbs is not None and entry.carbs_per_100g > max_carbs:
                continue
            if safety_flag is not None and entry.safety_flag is not safety_flag:
                continue
            if category is not None and entry.category != category:
                continue
            selected.append(entry)
        return selected

    def to_dataframe(self) -> pd.DataFrame:
        rows = []
        for entry in self._foods.values():
            row = asdict(entry)
            row["safety_flag"] = entry.safety_flag.value
            rows.append(row)
        return pd.DataFrame(rows).set_index("name")

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "FoodTable":
        """Builds a table from plain mappings.

        Each record needs ``name``, ``carbs_per_100g``, ``glycemic_index``
        and ``category``; ``fiber_per_100g``, ``safety_flag`` and
        ``portion`` are optional. ``safety_flag`` also accepts the booleans
        True/False for safe/unsafe.

        Raises:
            ValueError: On a missing field or an unknown safety flag.
        """
        entries = []
        for record in records:
            try:
                flag = record.get("safety_flag", FoodSafetyFlag.MODERATE.value)
                if flag is True:
                    flag = FoodSafetyFlag.SAFE
                elif flag is False:
                    flag = FoodSafetyFlag.UNSAFE
                entries.append(FoodEntry(
                    name=str(record["name"]),
                    carbs_per_100g=float(record["carbs_per_100g"]),
                    glycemic_index=int(record["glycemic_index"]),
                    category=str(record["category"]),
                    fiber_per_100g=float(record.get("fiber_per_100g", 0.0)),
                    safety_flag=FoodSafetyFlag(flag),
                    portion=str(record.get("portion", "100g")),
                ))
            except KeyError as e:
                raise ValueError(f"Food record {dict(record)} is missing field {e}") from e
        return cls(entries)


DEFAULT_FOOD_TABLE = FoodTable(
    FoodEntry(name, carbs, gi, category, fiber, flag, portion)
    for name, carbs, gi, category, fiber, flag, portion in _DEFAULT_FOODS
)


def load_food_table(path: str) -> FoodTable:
    """Loads a food table from a YAML file.

    The file holds either a list of food records or a mapping with a
    ``foods`` key containing that list (see `FoodTable.from_records`).

    Raises:
        ValueError: If the file does not contain a list of records.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if isinstance(data, dict):
        data = data.get("foods")
    if not isinstance(data, list):
        raise ValueError(f"Food table file '{path}' must contain a list of foods")
    table = FoodTable.from_records(data)
    logger.info("Loaded %d foods from '%s'", len(table), path)
    return table
