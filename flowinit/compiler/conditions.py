# flowinit/compiler/conditions.py
"""Compile workflow conditions into Ruby predicate expressions."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import structlog

from flowinit.compiler.branches import BranchAnalyzer
from flowinit.compiler.entities import (
    COLLEGE_ARGUMENT_METHODS,
    HOME_SCHOOL_PROPERTIES,
    Entity,
    KnownCondition,
    expression_for,
    get_entity_variable,
    get_property_method,
    is_condition_relevant_for_target_object,
    lookup_condition_expression,
    resolve_entity,
)
from flowinit.workflow.models import (
    Comparison,
    Condition,
    Step,
    TargetObjectType,
    WorkflowDefinition,
)

# Mutually exclusive classification of a student's high school
PARTITION_CONDITIONS: Tuple[str, ...] = ("high_school", "home_school", "non_partner")

_PARTITION_FALLBACKS: Dict[str, KnownCondition] = {
    "high_school": KnownCondition.PARTNER_HIGH_SCHOOL,
    "home_school": KnownCondition.HOME_SCHOOL,
    "non_partner": KnownCondition.NON_PARTNER,
}

# Substring rules used when a workflow declares no conditions at all
_NAME_HEURISTICS: Tuple[Tuple[Tuple[str, ...], KnownCondition], ...] = (
    (("home_school", "homeschool"), KnownCondition.HOME_SCHOOL),
    (("non_partner", "nonpartner"), KnownCondition.NON_PARTNER),
    (("prereq", "requisites"), KnownCondition.HAS_PREREQUISITES),
    (("wish_list",), KnownCondition.WISH_LIST),
    (("section_full",), KnownCondition.SECTION_FULL),
    (("minor",), KnownCondition.MINOR),
)

_ORDERING_OPERATORS = {
    Comparison.GREATER_THAN: ">",
    Comparison.LESS_THAN: "<",
    Comparison.GREATER_OR_EQUAL: ">=",
    Comparison.LESS_OR_EQUAL: "<=",
}


@dataclass
class CompiledCondition:
    """Ruby predicate for a condition plus the fields it sets when true."""
    expression: str
    fields: List[str]


@dataclass
class ConditionResolution:
    """Everything the emitter needs to know about a workflow's conditions."""
    condition_map: Dict[str, CompiledCondition] = field(default_factory=dict)
    completion_states: Dict[str, List[str]] = field(default_factory=dict)


def _is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str) and value.strip():
        try:
            float(value)
        except ValueError:
            return False
        return True
    return False


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def _quoted(value: Any) -> str:
    return "'" + _scalar(value).replace("'", "\\'") + "'"


def _is_negated(condition: Condition, comparison: Optional[Comparison]) -> bool:
    """Whether a truth predicate must be emitted in its negated form."""
    return comparison in (Comparison.NOT_EQUALS, Comparison.BLANK) or condition.is_false_value


def _literal(value: Any) -> str:
    """Bare numeric literal when the value parses as a number, else a quoted string."""
    return _scalar(value) if _is_numeric(value) else _quoted(value)


class ConditionCompiler:
    """Turns named Conditions into Ruby expressions.

    Resolution is tried in order: custom expressions, predicate
    ``rubyMethod`` values, the known condition registry, the high school
    home-school shortcut and finally entity/property/comparison building.
    """

    def __init__(self, analyzer: Optional[BranchAnalyzer] = None, logger: Any = None):
        self.logger = logger or structlog.get_logger(__name__)
        self.analyzer = analyzer or BranchAnalyzer(logger=self.logger)

    def compile(self, condition: Optional[Condition]) -> Optional[str]:
        """Compile one condition; returns None when it cannot be resolved."""
        if condition is None:
            return None

        comparison = condition.comparison_kind

        if comparison == Comparison.CUSTOM:
            if isinstance(condition.value, str) and condition.value.strip():
                return condition.value.strip()
            self.logger.warning("custom_condition_empty", condition=condition.name)
            return None

        method = condition.ruby_method
        if method and method.endswith("?"):
            return self._compile_predicate_method(condition, method, comparison)

        registered = lookup_condition_expression(condition.name)
        if registered:
            self.logger.debug("condition_registry_match", condition=condition.name)
            return registered

        if (resolve_entity(condition.entity) == Entity.HIGH_SCHOOL
                and condition.property_name in HOME_SCHOOL_PROPERTIES):
            expression = expression_for(KnownCondition.HOME_SCHOOL)
            return f"!{expression}" if _is_negated(condition, comparison) else expression

        accessor = get_entity_variable(condition.entity)
        if method and method != Comparison.CUSTOM.value:
            method_name = method
        else:
            method_name = get_property_method(condition.entity, condition.property_name)
        if not method_name:
            self.logger.warning(
                "condition_property_unresolved",
                condition=condition.name,
                entity=condition.entity,
                property=condition.property_name,
            )
            return None

        return self._build_expression(accessor, method_name, comparison, condition)

    def _compile_predicate_method(self, condition: Condition, method: str,
                                  comparison: Optional[Comparison]) -> str:
        accessor = get_entity_variable(condition.entity)
        call = method
        if method in COLLEGE_ARGUMENT_METHODS:
            call = f"{method}(college)"
        if _is_negated(condition, comparison):
            return f"!{accessor}.{call}"
        return f"{accessor}.{call}"

    def _build_expression(self, accessor: str, method: str,
                          comparison: Optional[Comparison], condition: Condition) -> str:
        value = condition.value

        # Truth predicates, with or without call arguments, become a plain or negated call
        if method.endswith("?") or "?(" in method:
            if _is_negated(condition, comparison):
                return f"!{accessor}.{method}"
            return f"{accessor}.{method}"

        target = f"{accessor}.{method}"

        if comparison == Comparison.EQUALS:
            return f"{target} == {_literal(value)}"
        if comparison == Comparison.NOT_EQUALS:
            return f"{target} != {_literal(value)}"
        if comparison in _ORDERING_OPERATORS:
            return f"{target} {_ORDERING_OPERATORS[comparison]} {_scalar(value)}"
        if comparison == Comparison.INCLUDES:
            return f"{target}.to_s.include?({_quoted(value)})"
        if comparison == Comparison.NOT_INCLUDES:
            return f"!{target}.to_s.include?({_quoted(value)})"
        if comparison == Comparison.PRESENT:
            return f"{target}.present?"
        if comparison == Comparison.BLANK:
            return f"{target}.blank?"
        return f"{target} == {_quoted(value)}"

    def guess_expression(self, name: str) -> str:
        """Infer a predicate from a bare condition name.

        Used only when a workflow declares no conditions; anything not
        matching a known fragment becomes a lookup of the runtime field.
        """
        lowered = name.lower()
        for fragments, known in _NAME_HEURISTICS:
            if any(fragment in lowered for fragment in fragments):
                return expression_for(known)
        return f'fields["{name}"]'

    def process_workflow_conditions(self, workflow_data: WorkflowDefinition,
                                    relevant_steps: Sequence[Step],
                                    target: TargetObjectType) -> ConditionResolution:
        """Compile the conditions that matter for ``relevant_steps`` and ``target``."""
        resolution = ConditionResolution()
        steps = list(relevant_steps)

        referenced = self.analyzer.referenced_condition_names(steps)
        branches = self.analyzer.identify_conditional_branches(steps)

        self.logger.info(
            "analyzing_conditions",
            target=target.value,
            steps=len(steps),
            referenced=referenced,
            branches=list(branches),
        )

        def register(name: str, expression: str, fields: List[str]) -> None:
            resolution.condition_map[name] = CompiledCondition(
                expression=expression,
                fields=list(fields) or [name],
            )
            if name in branches:
                resolution.completion_states[name] = list(branches[name].completion_states)
            self.logger.debug("condition_compiled", condition=name, expression=expression)

        if workflow_data.conditions:
            for name, condition in workflow_data.conditions.items():
                if name not in referenced:
                    self.logger.debug("condition_skipped", condition=name, reason="unreferenced")
                    continue
                if not is_condition_relevant_for_target_object(condition, target):
                    self.logger.info(
                        "condition_skipped",
                        condition=name,
                        reason="not_available_for_target",
                        target=target.value,
                    )
                    continue
                expression = self.compile(condition)
                if expression is None:
                    self.logger.warning("condition_dropped", condition=name)
                    continue
                register(name, expression, condition.fields)

            for name in PARTITION_CONDITIONS:
                if name in referenced and name not in resolution.condition_map:
                    self.logger.info("partition_condition_defaulted", condition=name)
                    register(name, expression_for(_PARTITION_FALLBACKS[name]), [name])
        else:
            for name in referenced:
                register(name, self.guess_expression(name), [name])

        return resolution


def compile_condition(condition: Optional[Condition]) -> Optional[str]:
    """Compile a single condition with a default compiler."""
    return ConditionCompiler().compile(condition)
