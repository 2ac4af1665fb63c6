# flowinit/compiler/branches.py
"""Static analysis of which steps each condition gates."""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

import structlog

from flowinit.compiler.heuristics import DEFAULT_HEURISTICS, BranchHeuristic
from flowinit.workflow.models import Step, StepType

COMPLETION_SUFFIXES: Dict[str, str] = {
    StepType.APPROVAL.value: "_yes",
    StepType.UPLOAD.value: "_complete",
    StepType.PROVIDE_CONSENT.value: "_provided",
    StepType.INFORMATION.value: "_viewed",
}
DEFAULT_COMPLETION_SUFFIX = "_complete"


def snake_case(text: Optional[str]) -> str:
    """Convert a step title to a snake_case field name."""
    if not text:
        return ""
    result = text.lower()
    result = re.sub(r"\s+", "_", result)
    result = re.sub(r"[^a-z0-9_]", "", result)
    return re.sub(r"_+", "_", result)


def get_step_completion_state(step: Optional[Step]) -> Optional[str]:
    """Return the completion token a step sets when it is satisfied."""
    if step is None or not step.title:
        return None
    suffix = COMPLETION_SUFFIXES.get(step.step_type, DEFAULT_COMPLETION_SUFFIX)
    return f"{snake_case(step.title)}{suffix}"


@dataclass
class ConditionalBranch:
    """Steps gated by one condition and the completion tokens they set."""
    steps: List[Step] = field(default_factory=list)
    completion_states: List[str] = field(default_factory=list)

    def add_step(self, step: Step) -> bool:
        """Append a step unless it is already part of the branch."""
        key = _step_key(step)
        if any(_step_key(existing) == key for existing in self.steps):
            return False
        self.steps.append(step)
        token = get_step_completion_state(step)
        if token and token not in self.completion_states:
            self.completion_states.append(token)
        return True

    def contains(self, step: Step) -> bool:
        key = _step_key(step)
        return any(_step_key(existing) == key for existing in self.steps)


def _step_key(step: Step) -> Any:
    return step.id if step.id is not None else id(step)


class BranchAnalyzer:
    """Discovers conditional branches from explicit tags and heuristics."""

    def __init__(self, heuristics: Optional[Sequence[BranchHeuristic]] = None,
                 logger: Any = None):
        self.heuristics = tuple(DEFAULT_HEURISTICS if heuristics is None else heuristics)
        self.logger = logger or structlog.get_logger(__name__)

    def referenced_condition_names(self, steps: Iterable[Step]) -> List[str]:
        """Condition names implied by the steps, explicit tags first."""
        names: List[str] = []
        steps = list(steps)
        for step in steps:
            for name in step.condition_names:
                if name not in names:
                    names.append(name)
        for heuristic in self.heuristics:
            if heuristic.condition_name in names:
                continue
            if any(heuristic.matches(step) for step in steps):
                names.append(heuristic.condition_name)
        return names

    def identify_conditional_branches(self, steps: Sequence[Step]) -> Dict[str, ConditionalBranch]:
        """Map each condition name to the steps and completion tokens it gates."""
        steps = list(steps)
        branches: Dict[str, ConditionalBranch] = {}

        for name in self.referenced_condition_names(steps):
            heuristics = [h for h in self.heuristics if h.condition_name == name]
            branch = ConditionalBranch()
            for step in steps:
                explicit = name in step.condition_names
                implied = any(h.matches(step) for h in heuristics)
                if explicit or implied:
                    branch.add_step(step)
            self._link_dependent_steps(steps, branch, name)
            if name == "homeschool" or "home_school" in name:
                self._link_affidavit_review(steps, branch, name)
            branches[name] = branch

            self.logger.debug(
                "branch_discovered",
                condition=name,
                steps=[step.title for step in branch.steps],
                completion_states=list(branch.completion_states),
            )

        return branches

    def _link_dependent_steps(self, steps: List[Step], branch: ConditionalBranch,
                              condition_name: str) -> None:
        """Pull in steps that directly wait on the condition or a branch step.

        Only one hop is followed: steps added here are not scanned again.
        """
        anchors = [
            token for token in (get_step_completion_state(s) for s in list(branch.steps)) if token
        ]
        for candidate in steps:
            if branch.contains(candidate):
                continue
            deps = candidate.dependencies
            if not deps:
                continue
            on_condition = any(condition_name in dep for dep in deps)
            on_step = any(anchor in dep for anchor in anchors for dep in deps)
            if on_condition or on_step:
                branch.add_step(candidate)
                self.logger.debug(
                    "dependent_step_linked",
                    condition=condition_name,
                    step=candidate.title,
                )

    def _link_affidavit_review(self, steps: List[Step], branch: ConditionalBranch,
                               condition_name: str) -> None:
        """Attach affidavit review approvals to a home school branch that collects an affidavit."""
        has_affidavit = any(
            step.step_type == StepType.UPLOAD.value and "affidavit" in (step.title or "").lower()
            for step in branch.steps
        )
        if not has_affidavit:
            return
        for candidate in steps:
            title = (candidate.title or "").lower()
            if candidate.step_type != StepType.APPROVAL.value:
                continue
            if "review" in title and "affidavit" in title and branch.add_step(candidate):
                self.logger.debug(
                    "affidavit_review_linked",
                    condition=condition_name,
                    step=candidate.title,
                )


def identify_conditional_branches(steps: Sequence[Step]) -> Dict[str, ConditionalBranch]:
    """Run the default analyzer over a step list."""
    return BranchAnalyzer().identify_conditional_branches(steps)
