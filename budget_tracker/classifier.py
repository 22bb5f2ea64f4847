"""Map store names to the category groups they count towards."""

from typing import FrozenSet

from budget_tracker.config import BudgetConfig, CategoryGroup, DEFAULT_CONFIG


class CategoryClassifier:
    """
    Looks up which groups a store belongs to.

    Matching is exact and case-sensitive: "Sasol" is fuel, "sasol" is not.
    A store may belong to several groups or to none.
    """

    def __init__(self, config: BudgetConfig = DEFAULT_CONFIG):
        self.config = config
        index = {}
        for group, stores in config.groups.items():
            for store in stores:
                index.setdefault(store, []).append(group)
        self._index = {store: frozenset(groups) for store, groups in index.items()}

    def groups_for(self, store: str) -> FrozenSet[CategoryGroup]:
        return self._index.get(store, frozenset())
