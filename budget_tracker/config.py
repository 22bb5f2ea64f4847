"""
config.py - category groups and spending thresholds

The tracker knows a fixed set of category groups (CategoryGroup). Which stores
belong to each group, and the threshold above which a group is flagged, live
in a BudgetConfig value that is passed to the classifier, aggregator and
alert evaluator. DEFAULT_CONFIG holds the household's settings; a JSON file
named by BUDGET_CONFIG_FILE can override them per group.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional
import json
import logging
import os

from budget_tracker.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = "BUDGET_CONFIG_FILE"


class CategoryGroup(str, Enum):
    """Known category groups. Declaration order is the display/alert order."""
    GROCERIES = "groceries"
    CHILD_HEALTH = "childHealth"
    FUEL = "fuel"


DEFAULT_STORE_GROUPS: Dict[CategoryGroup, FrozenSet[str]] = {
    CategoryGroup.GROCERIES: frozenset({"Pick n Pay", "Woolworths", "Food Lovers Market"}),
    CategoryGroup.CHILD_HEALTH: frozenset({"Dischem", "Baby City"}),
    CategoryGroup.FUEL: frozenset({"Sasol"}),
}

DEFAULT_THRESHOLDS: Dict[CategoryGroup, Decimal] = {
    CategoryGroup.GROCERIES: Decimal("4000"),
    CategoryGroup.CHILD_HEALTH: Decimal("3000"),
    CategoryGroup.FUEL: Decimal("3000"),
}


@dataclass(frozen=True)
class BudgetConfig:
    """
    Store membership and thresholds per category group.

    groups: group -> set of store names (exact, case-sensitive)
    thresholds: group -> limit; a group with no entry here never alerts
    """
    groups: Mapping[CategoryGroup, FrozenSet[str]]
    thresholds: Mapping[CategoryGroup, Decimal]

    def __post_init__(self):
        # keep iteration in enum order regardless of how the caller built the maps
        object.__setattr__(self, "groups", {
            g: frozenset(self.groups[g]) for g in CategoryGroup if g in self.groups
        })
        object.__setattr__(self, "thresholds", {
            g: Decimal(self.thresholds[g]) for g in CategoryGroup if g in self.thresholds
        })

    def threshold_for(self, group: CategoryGroup) -> Optional[Decimal]:
        return self.thresholds.get(group)


DEFAULT_CONFIG = BudgetConfig(groups=DEFAULT_STORE_GROUPS, thresholds=DEFAULT_THRESHOLDS)


def _group_from_name(name: str) -> CategoryGroup:
    try:
        return CategoryGroup(str(name).strip())
    except ValueError:
        known = ", ".join(g.value for g in CategoryGroup)
        raise ConfigError(f"Unknown category group {name!r} (known: {known})")


def _parse_threshold(group: CategoryGroup, value: Any) -> Decimal:
    try:
        limit = Decimal(str(value).strip())
    except InvalidOperation:
        raise ConfigError(f"Threshold for {group.value} is not a number: {value!r}")
    if not limit.is_finite() or limit < 0:
        raise ConfigError(f"Threshold for {group.value} must be a finite non-negative number")
    return limit


def _parse_stores(group: CategoryGroup, stores: Any) -> FrozenSet[str]:
    if isinstance(stores, str) or not isinstance(stores, Iterable):
        raise ConfigError(f"Stores for {group.value} must be a list of names")
    return frozenset(str(s) for s in stores if str(s).strip())


def config_from_dict(data: Mapping[str, Any], base: BudgetConfig = DEFAULT_CONFIG) -> BudgetConfig:
    """
    Build a BudgetConfig by overriding `base` with the groups/thresholds in `data`.

    Expected shape:
        {"groups": {"fuel": ["Sasol", "Shell"]}, "thresholds": {"fuel": 2500}}
    Groups not mentioned keep their base values.
    """
    if not isinstance(data, Mapping):
        raise ConfigError("Budget config must be a JSON object")
    groups = dict(base.groups)
    thresholds = dict(base.thresholds)
    for name, stores in (data.get("groups") or {}).items():
        group = _group_from_name(name)
        groups[group] = _parse_stores(group, stores)
    for name, value in (data.get("thresholds") or {}).items():
        group = _group_from_name(name)
        if value is None:
            # explicit null switches alerting off for the group
            thresholds.pop(group, None)
            continue
        thresholds[group] = _parse_threshold(group, value)
    return BudgetConfig(groups=groups, thresholds=thresholds)


def load_config(path: Optional[str] = None) -> BudgetConfig:
    """
    Return the budget configuration.

    Uses `path` or the BUDGET_CONFIG_FILE env var when set, otherwise the
    compiled-in defaults.
    """
    path = path or (os.getenv(CONFIG_FILE_ENV) or "").strip()
    if not path:
        return DEFAULT_CONFIG
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Could not read budget config {path}: {exc}") from exc
    logger.info("Loaded budget config overrides from %s", path)
    return config_from_dict(data)
