# flowinit/compiler/heuristics.py
"""Heuristics that imply a gating condition for steps without an explicit tag."""

from abc import ABC, abstractmethod
from typing import FrozenSet, Iterable, Tuple

from flowinit.workflow.models import Step


class BranchHeuristic(ABC):
    """Implies ``condition_name`` for every step it matches."""

    def __init__(self, condition_name: str):
        self.condition_name = condition_name

    @abstractmethod
    def matches(self, step: Step) -> bool:
        """Return True when the step belongs to this heuristic's branch."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.condition_name!r})"


class RoleBasedHeuristic(BranchHeuristic):
    """Matches steps assigned to one of a fixed set of roles."""

    def __init__(self, condition_name: str, roles: Iterable[str]):
        super().__init__(condition_name)
        self.roles: FrozenSet[str] = frozenset(roles)

    def matches(self, step: Step) -> bool:
        return step.role in self.roles


class TextContainsHeuristic(BranchHeuristic):
    """Matches steps whose title or description mentions a phrase."""

    def __init__(self, condition_name: str, phrase: str):
        super().__init__(condition_name)
        self.phrase = phrase.lower()

    def matches(self, step: Step) -> bool:
        for text in (step.title, step.description):
            if text and self.phrase in text.lower():
                return True
        return False


DEFAULT_HEURISTICS: Tuple[BranchHeuristic, ...] = (
    RoleBasedHeuristic("high_school", roles=("High School", "Counselor")),
    TextContainsHeuristic("home_school", "home school"),
    TextContainsHeuristic("non_partner", "non partner"),
)
