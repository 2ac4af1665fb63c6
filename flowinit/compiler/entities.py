# flowinit/compiler/entities.py
"""Closed registry of domain entities, accessors and known predicates.

Every lookup table here is keyed by an Enum so the set of entities and
registered conditions is closed and can be checked for completeness.
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

import structlog

from flowinit.workflow.models import Condition, TargetObjectType

logger = structlog.get_logger(__name__)

_ALL_TARGETS = frozenset(TargetObjectType)


class Entity(Enum):
    """Domain entities a condition can refer to."""
    STUDENT = "student"
    HIGH_SCHOOL = "high_school"
    COURSE = "course"
    COURSE_SECTION = "course_section"
    TERM = "term"
    INSTRUCTOR = "instructor"
    COLLEGE = "college"


# Designators used by the workflow builder for each entity
ENTITY_ALIASES: Dict[str, Entity] = {
    "Student": Entity.STUDENT,
    "student": Entity.STUDENT,
    "HighSchool": Entity.HIGH_SCHOOL,
    "high_school": Entity.HIGH_SCHOOL,
    "Course": Entity.COURSE,
    "course": Entity.COURSE,
    "CourseSection": Entity.COURSE_SECTION,
    "course_section": Entity.COURSE_SECTION,
    "Term": Entity.TERM,
    "term": Entity.TERM,
    "Instructor": Entity.INSTRUCTOR,
    "instructor": Entity.INSTRUCTOR,
    "College": Entity.COLLEGE,
    "college": Entity.COLLEGE,
}

ENTITY_ACCESSORS: Dict[Entity, str] = {
    Entity.STUDENT: "student",
    Entity.HIGH_SCHOOL: "student.high_school",
    Entity.COURSE: "course",
    Entity.COURSE_SECTION: "course_section",
    Entity.TERM: "term",
    Entity.INSTRUCTOR: "instructor",
    Entity.COLLEGE: "college",
}

# Target object types whose initializer can reach each entity
ENTITY_SCOPES: Dict[Entity, FrozenSet[TargetObjectType]] = {
    Entity.STUDENT: _ALL_TARGETS,
    Entity.HIGH_SCHOOL: _ALL_TARGETS,
    Entity.COLLEGE: _ALL_TARGETS,
    Entity.COURSE: frozenset({TargetObjectType.STUDENT_DE_COURSE}),
    Entity.COURSE_SECTION: frozenset({TargetObjectType.STUDENT_DE_COURSE}),
    Entity.INSTRUCTOR: frozenset({TargetObjectType.STUDENT_DE_COURSE}),
    Entity.TERM: frozenset({TargetObjectType.STUDENT_TERM}),
}

PROPERTY_METHODS: Dict[Entity, Dict[str, str]] = {
    Entity.STUDENT: {
        "isMinor": "is_minor?",
        "is_minor": "is_minor?",
        "hasParentConsent": "has_parent_consent?",
        "has_parent_consent": "has_parent_consent?",
        "isHomeSchool": "high_school.is_home_school?",
        "is_home_school": "high_school.is_home_school?",
        "name": "name",
        "grade": "grade",
        "email": "email",
        "age": "age",
    },
    Entity.HIGH_SCHOOL: {
        "isNonPartner": "is_non_partner?(college)",
        "is_non_partner": "is_non_partner?(college)",
        "isHomeSchool": "is_home_school?",
        "is_home_school": "is_home_school?",
        "name": "name",
        "type": "type",
    },
    Entity.COURSE: {
        "hasPrerequisites": "has_requisites?",
        "has_prerequisites": "has_requisites?",
        "hasRequisites": "has_requisites?",
        "has_requisites": "has_requisites?",
        "hasCourseCategory": "has_course_category?",
        "has_course_category": "has_course_category?",
        "title": "title",
        "number": "number",
        "subject": "subject",
    },
    Entity.COURSE_SECTION: {
        "isFull": "is_full?",
        "is_full": "is_full?",
        "isWishList": "is_wish_list?",
        "is_wish_list": "is_wish_list?",
        "number": "number",
        "capacity": "capacity",
        "enrollment_count": "enrollment_count",
        "location": "location",
    },
    Entity.TERM: {
        "name": "name",
        "start_date": "start_date",
        "end_date": "end_date",
    },
    Entity.INSTRUCTOR: {},
    Entity.COLLEGE: {},
}

HOME_SCHOOL_PROPERTIES = frozenset({"is_home_school", "isHomeSchool"})

# Predicates that take the college as an explicit argument
COLLEGE_ARGUMENT_METHODS = frozenset({"is_non_partner?"})


class KnownCondition(Enum):
    """Conditions with a fixed, historically known predicate."""
    HOME_SCHOOL = "home_school"
    NON_PARTNER = "non_partner"
    PARTNER_HIGH_SCHOOL = "high_school"
    HAS_PREREQUISITES = "has_prerequisites"
    WISH_LIST = "wish_list"
    SECTION_FULL = "section_full"
    MINOR = "minor"
    PARENT_CONSENT = "parent_consent"
    ON_CAMPUS = "on_campus"
    AT_HIGH_SCHOOL = "at_high_school"


CONDITION_EXPRESSIONS: Dict[KnownCondition, str] = {
    KnownCondition.HOME_SCHOOL: "student.high_school.is_home_school?",
    KnownCondition.NON_PARTNER: "student.high_school.is_non_partner?(college)",
    KnownCondition.PARTNER_HIGH_SCHOOL: (
        "!student.high_school.is_home_school? && !student.high_school.is_non_partner?(college)"
    ),
    KnownCondition.HAS_PREREQUISITES: "course.has_requisites?",
    KnownCondition.WISH_LIST: "course_section.is_wish_list?",
    KnownCondition.SECTION_FULL: "course_section.is_full?",
    KnownCondition.MINOR: "student.is_minor?",
    KnownCondition.PARENT_CONSENT: "student.has_parent_consent?",
    KnownCondition.ON_CAMPUS: "course_section.location == 'College Campus'",
    KnownCondition.AT_HIGH_SCHOOL: "course_section.location == 'High School'",
}

# Condition names resolved verbatim through the registry. The partner high
# school predicate has no synonyms: it is only used as a partition fallback.
CONDITION_SYNONYMS: Dict[KnownCondition, Tuple[str, ...]] = {
    KnownCondition.HOME_SCHOOL: (
        "home_school", "homeschool", "home_schooled", "is_home_school", "isHomeSchool",
    ),
    KnownCondition.NON_PARTNER: (
        "non_partner", "nonpartner", "is_non_partner", "isNonPartner",
    ),
    KnownCondition.PARTNER_HIGH_SCHOOL: (),
    KnownCondition.HAS_PREREQUISITES: (
        "has_prereqs", "hasPrerequisites", "has_prerequisites", "hasRequisites",
        "has_requisites", "prerequisites", "requisites",
    ),
    KnownCondition.WISH_LIST: ("wish_list", "isWishList", "is_wish_list"),
    KnownCondition.SECTION_FULL: (
        "section_full", "isSectionFull", "is_section_full", "course_full",
    ),
    KnownCondition.MINOR: ("minor", "is_minor", "isMinor"),
    KnownCondition.PARENT_CONSENT: (
        "has_parent_consent", "hasParentConsent", "parent_consent",
    ),
    KnownCondition.ON_CAMPUS: ("on_campus", "college_campus"),
    KnownCondition.AT_HIGH_SCHOOL: ("at_high_school",),
}

_SYNONYM_INDEX: Dict[str, KnownCondition] = {
    synonym: known
    for known, synonyms in CONDITION_SYNONYMS.items()
    for synonym in synonyms
}


def resolve_entity(entity: Optional[str]) -> Optional[Entity]:
    """Return the Entity a builder designator refers to, if it is known."""
    if not entity:
        return None
    return ENTITY_ALIASES.get(entity)


def get_entity_variable(entity: Optional[str]) -> str:
    """Return the Ruby accessor expression for an entity designator."""
    if not entity:
        return ENTITY_ACCESSORS[Entity.STUDENT]
    known = ENTITY_ALIASES.get(entity)
    if known is None:
        logger.debug("entity_unknown", entity=entity, fallback=entity.lower())
        return entity.lower()
    return ENTITY_ACCESSORS[known]


def get_property_method(entity: Optional[str], prop: Optional[str]) -> Optional[str]:
    """Return the Ruby method name for an entity property.

    Unknown entity/property pairs pass the property through unchanged.
    """
    if not prop:
        return None
    known = resolve_entity(entity) if entity else Entity.STUDENT
    if known is None:
        return prop
    return PROPERTY_METHODS[known].get(prop, prop)


def lookup_condition_expression(name: Optional[str]) -> Optional[str]:
    """Return the registered expression for a known condition name."""
    if not name:
        return None
    known = _SYNONYM_INDEX.get(name)
    if known is None:
        return None
    return CONDITION_EXPRESSIONS[known]


def expression_for(known: KnownCondition) -> str:
    return CONDITION_EXPRESSIONS[known]


def is_condition_relevant_for_target_object(condition: Optional[Condition],
                                            target: TargetObjectType) -> bool:
    """Check whether a condition only refers to entities the target can reach.

    The entity must be bound by the target's initializer. Course and
    prerequisite conditions belong to StudentDeCourse initializers, term
    conditions to StudentTerm initializers.
    """
    if condition is None:
        return False

    name = (condition.name or "").lower()
    method = condition.ruby_method or ""
    known = resolve_entity(condition.entity)

    if known is not None and target not in ENTITY_SCOPES[known]:
        return False

    course_flavored = (
        "course" in name
        or "prereq" in name
        or "requisites" in method
        or "course_section" in method
    )
    if course_flavored and target != TargetObjectType.STUDENT_DE_COURSE:
        return False

    term_flavored = "term" in name or "term" in method
    if term_flavored and target != TargetObjectType.STUDENT_TERM:
        return False

    return True
