# flowinit/workflow/models.py
"""Pydantic models for workflow definitions authored in the workflow builder."""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class TargetObjectType(str, Enum):
    """Backend record kinds an initializer can attach to."""
    COLLEGE_STUDENT_APPLICATION = "CollegeStudentApplication"
    STUDENT_TERM = "StudentTerm"
    STUDENT_DE_COURSE = "StudentDeCourse"


class StepType(str, Enum):
    """Step types known to the workflow builder."""
    APPROVAL = "Approval"
    UPLOAD = "Upload"
    INFORMATION = "Information"
    PROVIDE_CONSENT = "ProvideConsent"
    CHECK_HOLDS = "CheckHolds"
    REGISTER_VIA_API = "RegisterViaApi"
    RESOLVE_ISSUE = "ResolveIssue"


class Comparison(str, Enum):
    """Canonical comparison operators for conditions."""
    EQUALS = "equals"
    NOT_EQUALS = "not-equals"
    GREATER_THAN = "greater-than"
    LESS_THAN = "less-than"
    GREATER_OR_EQUAL = "greater-or-equal"
    LESS_OR_EQUAL = "less-or-equal"
    INCLUDES = "includes"
    NOT_INCLUDES = "not-includes"
    PRESENT = "present"
    BLANK = "blank"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Comparison"]:
        """Map a raw comparison string (including symbol aliases) to a member."""
        if value is None:
            return None
        if value in _COMPARISON_ALIASES:
            return _COMPARISON_ALIASES[value]
        try:
            return cls(value)
        except ValueError:
            return None


_COMPARISON_ALIASES = {
    "==": Comparison.EQUALS,
    "!=": Comparison.NOT_EQUALS,
    ">": Comparison.GREATER_THAN,
    "<": Comparison.LESS_THAN,
    ">=": Comparison.GREATER_OR_EQUAL,
    "<=": Comparison.LESS_OR_EQUAL,
    "greater-than-or-equal": Comparison.GREATER_OR_EQUAL,
    "less-than-or-equal": Comparison.LESS_OR_EQUAL,
    "contains": Comparison.INCLUDES,
    "not-contains": Comparison.NOT_INCLUDES,
}


class Condition(BaseModel):
    """A named boolean predicate over a domain entity."""
    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    name: str
    entity: Optional[str] = None
    property_name: Optional[str] = Field(default=None, alias="property")
    ruby_method: Optional[str] = Field(default=None, alias="rubyMethod")
    comparison: Optional[str] = None
    value: Any = None
    fields: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _default_fields(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("fields"):
            data = {**data, "fields": [data.get("name")] if data.get("name") else []}
        return data

    @property
    def comparison_kind(self) -> Optional[Comparison]:
        return Comparison.parse(self.comparison)

    @property
    def is_false_value(self) -> bool:
        return self.value is False or self.value == "false"

    @property
    def is_true_value(self) -> bool:
        return self.value is True or self.value == "true"


class Step(BaseModel):
    """A single step of an authored workflow."""
    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    id: Optional[Union[str, int]] = None
    title: Optional[str] = None
    step_type: Optional[str] = Field(default=None, alias="stepType")
    role: Optional[str] = None
    description: Optional[str] = None
    workflow_category: Optional[str] = None
    conditional: bool = False
    workflow_condition: Optional[Union[str, List[str]]] = Field(default=None, alias="workflowCondition")
    soft_required_fields: Optional[Union[str, List[str]]] = Field(default=None, alias="softRequiredFields")
    action_options: List[Any] = Field(default_factory=list, alias="actionOptions")
    comments: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("conditional", mode="before")
    @classmethod
    def _coerce_conditional(cls, value: Any) -> bool:
        return bool(value)

    @field_validator("action_options", "comments", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any, info) -> Any:
        if value is None:
            return {} if info.field_name == "comments" else []
        return value

    @property
    def condition_names(self) -> List[str]:
        """Condition names explicitly gating this step."""
        if not self.conditional or not self.workflow_condition:
            return []
        if isinstance(self.workflow_condition, str):
            return [self.workflow_condition]
        return [name for name in self.workflow_condition if name]

    @property
    def dependencies(self) -> List[str]:
        """Soft-required field names this step waits on."""
        if not self.soft_required_fields:
            return []
        if isinstance(self.soft_required_fields, str):
            return [self.soft_required_fields]
        return [dep for dep in self.soft_required_fields if isinstance(dep, str)]


class WorkflowDefinition(BaseModel):
    """Authored workflow: declared conditions plus the ordered step list."""
    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    conditions: Dict[str, Condition] = Field(default_factory=dict)
    workflow: List[Step] = Field(default_factory=list)

    @field_validator("conditions", mode="before")
    @classmethod
    def _name_conditions(cls, value: Any) -> Any:
        if not value:
            return {}
        named = {}
        for key, condition in value.items():
            if isinstance(condition, dict) and not condition.get("name"):
                condition = {**condition, "name": key}
            named[key] = condition
        return named

    @field_validator("workflow", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return value or []

    @classmethod
    def coerce(cls, data: Union["WorkflowDefinition", Dict[str, Any], None]) -> "WorkflowDefinition":
        """Accept either a parsed definition or its raw mapping."""
        if isinstance(data, cls):
            return data
        return cls.model_validate(data or {})
