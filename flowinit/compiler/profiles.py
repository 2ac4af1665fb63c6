# flowinit/compiler/profiles.py
"""Per target object type parameters for the initializer emitter."""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from flowinit.compiler.entities import Entity, ENTITY_ACCESSORS, KnownCondition, expression_for
from flowinit.workflow.models import TargetObjectType


@dataclass(frozen=True)
class FieldGuard:
    """``if predicate`` setting one field, optionally another one otherwise."""
    comment: str
    predicate: str
    field: str
    otherwise: Optional[str] = None


@dataclass(frozen=True)
class TargetObjectProfile:
    """Everything that differs between the three initializer flavors."""
    target: TargetObjectType
    class_suffix: str
    file_suffix: str
    workflow_category: str
    heading: str
    entities: Tuple[Entity, ...]
    home_school_fields: Tuple[str, ...]
    non_partner_fields: Tuple[str, ...]
    partner_fields: Tuple[str, ...]
    guards_before: Tuple[FieldGuard, ...] = ()
    guards_after: Tuple[FieldGuard, ...] = ()
    common_fields: Tuple[str, ...] = ("parent_consent_email",)
    filter_by_category: bool = False
    # Test the high school type inline instead of binding is_home_school/is_non_partner
    inline_path_predicates: bool = False

    def class_name(self, college_var_name: str) -> str:
        college = college_var_name[:1].upper() + college_var_name[1:]
        return f"Initialize{college}{self.class_suffix}Step"

    def filename(self, college_var_name: str) -> str:
        return f"initialize_{college_var_name}_{self.file_suffix}_step.rb"

    @property
    def bindings(self) -> Tuple[str, ...]:
        return tuple(ENTITY_ACCESSORS[entity] for entity in self.entities)


COLLEGE_STUDENT_APPLICATION = TargetObjectProfile(
    target=TargetObjectType.COLLEGE_STUDENT_APPLICATION,
    class_suffix="CollegeStudentApplication",
    file_suffix="college_student_application",
    workflow_category="One Time",
    heading="One-time workflow initialization",
    entities=(Entity.STUDENT, Entity.COLLEGE),
    home_school_fields=("parent_consent_provided", "home_school", "mou_required"),
    non_partner_fields=("non_partner", "parent_consent_required"),
    partner_fields=("high_school", "parent_consent_required", "partner_high_school"),
    filter_by_category=True,
)

STUDENT_TERM = TargetObjectProfile(
    target=TargetObjectType.STUDENT_TERM,
    class_suffix="StudentTerm",
    file_suffix="student_term",
    workflow_category="Per Term",
    heading="Per-term workflow initialization",
    entities=(Entity.STUDENT, Entity.COLLEGE, Entity.TERM),
    home_school_fields=("home_school",),
    non_partner_fields=("non_partner",),
    partner_fields=("high_school", "partner_high_school"),
    guards_before=(
        FieldGuard(
            comment="Parent consent based on student age",
            predicate=expression_for(KnownCondition.MINOR),
            field="parent_consent_required",
            otherwise="parent_consent_provided",
        ),
    ),
)

STUDENT_DE_COURSE = TargetObjectProfile(
    target=TargetObjectType.STUDENT_DE_COURSE,
    class_suffix="CourseRegistration",
    file_suffix="course_registration",
    workflow_category="Per Course",
    heading="Per-course workflow initialization",
    entities=(Entity.STUDENT, Entity.COLLEGE, Entity.COURSE, Entity.COURSE_SECTION),
    home_school_fields=("home_school",),
    non_partner_fields=("non_partner",),
    partner_fields=("high_school", "hs_student"),
    inline_path_predicates=True,
    guards_after=(
        FieldGuard(
            comment="Set course prerequisites flag if applicable",
            predicate=expression_for(KnownCondition.HAS_PREREQUISITES),
            field="has_prereqs",
        ),
        FieldGuard(
            comment="Set wish list flag if applicable",
            predicate=expression_for(KnownCondition.WISH_LIST),
            field="wish_list",
        ),
    ),
)

PROFILES: Dict[TargetObjectType, TargetObjectProfile] = {
    profile.target: profile
    for profile in (COLLEGE_STUDENT_APPLICATION, STUDENT_TERM, STUDENT_DE_COURSE)
}


def get_profile(target) -> Optional[TargetObjectProfile]:
    """Look up a profile by TargetObjectType or its string value."""
    try:
        return PROFILES.get(TargetObjectType(target))
    except (ValueError, TypeError):
        return None
