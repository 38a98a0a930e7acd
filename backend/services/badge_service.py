"""
Badge catalog and evaluation.

Badges are declared once in BADGE_RULES. Evaluation adds every badge whose
predicate matches and never removes one already granted.
"""
from dataclasses import dataclass
from typing import Callable, List, Sequence

from backend.constants import (
    BADGE_FIRST_STEP, BADGE_WEEK_WARRIOR, BADGE_POINTS_MASTER,
    WEEK_WARRIOR_STREAK, POINTS_MASTER_THRESHOLD
)


def _get(obj, name: str, default=None):
    """Read a field from an ORM object or a camelCase/snake_case dict"""
    if isinstance(obj, dict):
        if name in obj:
            return obj[name]
        parts = name.split("_")
        camel = parts[0] + "".join(p.title() for p in parts[1:])
        return obj.get(camel, default)
    return getattr(obj, name, default)


def _max_streak(habits: Sequence) -> int:
    return max((_get(h, "streak", 0) or 0 for h in habits), default=0)


@dataclass(frozen=True)
class BadgeRule:
    id: str
    name: str
    description: str
    icon: str
    predicate: Callable[[object, Sequence, Sequence], bool]


BADGE_RULES = (
    BadgeRule(
        id=BADGE_FIRST_STEP,
        name="First Step",
        description="Create your first habit",
        icon="footprints",
        predicate=lambda user, habits, tasks: len(habits) > 0,
    ),
    BadgeRule(
        id=BADGE_WEEK_WARRIOR,
        name="Week Warrior",
        description=f"Reach a {WEEK_WARRIOR_STREAK}-day streak on any habit",
        icon="flame",
        predicate=lambda user, habits, tasks: _max_streak(habits) >= WEEK_WARRIOR_STREAK,
    ),
    BadgeRule(
        id=BADGE_POINTS_MASTER,
        name="Points Master",
        description=f"Collect {POINTS_MASTER_THRESHOLD} points",
        icon="trophy",
        predicate=lambda user, habits, tasks: (_get(user, "points", 0) or 0) >= POINTS_MASTER_THRESHOLD,
    ),
)


class BadgeService:
    """Evaluates BADGE_RULES against a user snapshot"""

    def __init__(self, rules: Sequence[BadgeRule] = BADGE_RULES):
        self.rules = tuple(rules)

    def evaluate(self, user, habits: Sequence, tasks: Sequence) -> List[str]:
        """
        Merge newly unlocked badges into the user's badge list.

        Args:
            user: User (ORM object or dict) with points and badges
            habits: The user's habits
            tasks: The user's tasks

        Returns:
            Existing badges followed by any newly unlocked ones
        """
        badges = list(dict.fromkeys(_get(user, "badges", None) or []))
        for rule in self.rules:
            if rule.id in badges:
                continue
            if rule.predicate(user, habits, tasks):
                badges.append(rule.id)
        return badges

    def catalog(self) -> List[dict]:
        """Public description of every badge"""
        return [
            {"id": r.id, "name": r.name, "description": r.description, "icon": r.icon}
            for r in self.rules
        ]
