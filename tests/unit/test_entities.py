"""
Tests for flowinit.compiler.entities - the closed entity/predicate registry.
"""

import pytest

from flowinit.compiler.entities import (
    CONDITION_EXPRESSIONS,
    CONDITION_SYNONYMS,
    ENTITY_ACCESSORS,
    ENTITY_ALIASES,
    ENTITY_SCOPES,
    PROPERTY_METHODS,
    Entity,
    KnownCondition,
    get_entity_variable,
    get_property_method,
    is_condition_relevant_for_target_object,
    lookup_condition_expression,
)
from flowinit.workflow.models import Condition, TargetObjectType


# ============================================================================
# REGISTRY COMPLETENESS
# ============================================================================

class TestRegistryCompleteness:
    """Every enum member must be covered by the lookup tables."""

    def test_every_entity_has_accessor_scope_and_property_table(self):
        for entity in Entity:
            assert entity in ENTITY_ACCESSORS
            assert entity in ENTITY_SCOPES
            assert entity in PROPERTY_METHODS

    def test_every_alias_points_at_a_known_entity(self):
        assert set(ENTITY_ALIASES.values()) == set(Entity)

    def test_every_known_condition_has_an_expression(self):
        for known in KnownCondition:
            assert CONDITION_EXPRESSIONS[known]
            assert known in CONDITION_SYNONYMS

    def test_synonyms_are_unique_across_conditions(self):
        seen = []
        for synonyms in CONDITION_SYNONYMS.values():
            seen.extend(synonyms)
        assert len(seen) == len(set(seen))


# ============================================================================
# ACCESSORS AND METHODS
# ============================================================================

class TestEntityVariable:

    @pytest.mark.parametrize("designator,expected", [
        ("Student", "student"),
        ("HighSchool", "student.high_school"),
        ("high_school", "student.high_school"),
        ("CourseSection", "course_section"),
        ("Term", "term"),
        ("College", "college"),
    ])
    def test_known_designators(self, designator, expected):
        assert get_entity_variable(designator) == expected

    def test_unknown_entity_falls_back_to_lower_case(self):
        assert get_entity_variable("Advisor") == "advisor"

    def test_absent_entity_defaults_to_student(self):
        assert get_entity_variable(None) == "student"
        assert get_entity_variable("") == "student"


class TestPropertyMethod:

    def test_mapped_property(self):
        assert get_property_method("HighSchool", "isNonPartner") == "is_non_partner?(college)"
        assert get_property_method("Course", "hasPrerequisites") == "has_requisites?"
        assert get_property_method("CourseSection", "isFull") == "is_full?"

    def test_unknown_pairs_pass_through(self):
        assert get_property_method("Student", "gpa") == "gpa"
        assert get_property_method("Advisor", "office") == "office"

    def test_missing_property_is_unresolved(self):
        assert get_property_method("Student", None) is None


class TestConditionRegistry:

    @pytest.mark.parametrize("name", [
        "home_school", "homeschool", "home_schooled", "is_home_school", "isHomeSchool",
    ])
    def test_home_school_synonyms(self, name):
        assert lookup_condition_expression(name) == "student.high_school.is_home_school?"

    def test_location_conditions(self):
        assert lookup_condition_expression("on_campus") == "course_section.location == 'College Campus'"
        assert lookup_condition_expression("at_high_school") == "course_section.location == 'High School'"

    def test_unknown_name(self):
        assert lookup_condition_expression("gpa_above_three") is None

    def test_partner_predicate_is_not_reachable_by_name(self):
        assert lookup_condition_expression("high_school") is None


# ============================================================================
# TARGET RELEVANCE
# ============================================================================

class TestRelevance:

    def test_course_condition_only_for_course_target(self):
        condition = Condition(name="needs_review", entity="Course", property="title")
        assert is_condition_relevant_for_target_object(condition, TargetObjectType.STUDENT_DE_COURSE)
        assert not is_condition_relevant_for_target_object(condition, TargetObjectType.STUDENT_TERM)
        assert not is_condition_relevant_for_target_object(
            condition, TargetObjectType.COLLEGE_STUDENT_APPLICATION
        )

    def test_prerequisite_name_only_for_course_target(self):
        condition = Condition(name="has_prereqs")
        assert not is_condition_relevant_for_target_object(condition, TargetObjectType.STUDENT_TERM)

    def test_requisites_ruby_method_only_for_course_target(self):
        condition = Condition(name="gate", rubyMethod="has_requisites?", entity="Course")
        assert not is_condition_relevant_for_target_object(
            condition, TargetObjectType.COLLEGE_STUDENT_APPLICATION
        )

    def test_term_condition_only_for_term_target(self):
        condition = Condition(name="spring_term", entity="Term", property="name")
        assert is_condition_relevant_for_target_object(condition, TargetObjectType.STUDENT_TERM)
        assert not is_condition_relevant_for_target_object(condition, TargetObjectType.STUDENT_DE_COURSE)

    def test_student_condition_everywhere(self):
        condition = Condition(name="minor", entity="Student", property="isMinor")
        for target in TargetObjectType:
            assert is_condition_relevant_for_target_object(condition, target)

    def test_entity_must_be_bound_by_target(self):
        """Instructor and course section are only reachable from course registrations."""
        instructor = Condition(name="adjunct", entity="Instructor", property="adjunct")
        section = Condition(name="capacity_left", entity="CourseSection", property="capacity")

        for condition in (instructor, section):
            assert is_condition_relevant_for_target_object(condition, TargetObjectType.STUDENT_DE_COURSE)
            assert not is_condition_relevant_for_target_object(condition, TargetObjectType.STUDENT_TERM)
            assert not is_condition_relevant_for_target_object(
                condition, TargetObjectType.COLLEGE_STUDENT_APPLICATION
            )

    @pytest.mark.parametrize("name,entity", [
        ("section_504_plan", "Student"),
        ("wish_list_opt_in", "Student"),
        ("requisites_waived", "HighSchool"),
    ])
    def test_only_course_and_prereq_names_are_course_flavored(self, name, entity):
        condition = Condition(name=name, entity=entity, property="flag")
        for target in TargetObjectType:
            assert is_condition_relevant_for_target_object(condition, target)

    def test_unknown_entity_is_not_scoped(self):
        condition = Condition(name="advisor_ok", entity="Advisor", property="approved")
        for target in TargetObjectType:
            assert is_condition_relevant_for_target_object(condition, target)

    def test_missing_condition(self):
        assert not is_condition_relevant_for_target_object(None, TargetObjectType.STUDENT_TERM)
