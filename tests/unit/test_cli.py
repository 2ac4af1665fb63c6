"""
Tests for the flowinit command line interface.
"""

import pytest
import yaml
from click.testing import CliRunner

from cli.main import cli
from flowinit import __version__
from flowinit.config import get_settings


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Each test reads settings from its own environment."""
    monkeypatch.delenv("FLOWINIT_DEFAULT_COLLEGE", raising=False)
    monkeypatch.delenv("FLOWINIT_OUTPUT_DIR", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def workflow_file(tmp_path, scenario_b_data):
    path = tmp_path / "workflow.yaml"
    path.write_text(yaml.safe_dump(scenario_b_data), encoding="utf-8")
    return path


@pytest.fixture
def mixed_workflow_file(tmp_path, mixed_category_data):
    path = tmp_path / "mixed.yaml"
    path.write_text(yaml.safe_dump(mixed_category_data), encoding="utf-8")
    return path


# ============================================================================
# ROOT
# ============================================================================

class TestRoot:

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_command_groups_registered(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert "generate" in result.output
        assert "workflow" in result.output


# ============================================================================
# GENERATE
# ============================================================================

class TestGenerateInitializer:

    def test_prints_class(self, runner, workflow_file):
        result = runner.invoke(cli, [
            "generate", "initializer", str(workflow_file), "-c", "northwood", "-t", "StudentDeCourse",
        ])

        assert result.exit_code == 0, result.output
        assert "class InitializeNorthwoodCourseRegistrationStep < Step" in result.output
        assert "unless student.high_school.is_home_school?" in result.output

    def test_writes_output_file(self, runner, workflow_file, tmp_path):
        output = tmp_path / "out" / "initializer.rb"

        result = runner.invoke(cli, [
            "generate", "initializer", str(workflow_file), "-c", "northwood",
            "-t", "StudentTerm", "-o", str(output),
        ])

        assert result.exit_code == 0, result.output
        assert "✅ Wrote" in result.output
        content = output.read_text(encoding="utf-8")
        assert content.startswith("class InitializeNorthwoodStudentTermStep < Step\n")
        assert content.endswith("end\n")

    def test_college_from_settings(self, runner, workflow_file, monkeypatch):
        monkeypatch.setenv("FLOWINIT_DEFAULT_COLLEGE", "Lake View")

        result = runner.invoke(cli, ["generate", "initializer", str(workflow_file), "-t", "StudentTerm"])

        assert result.exit_code == 0, result.output
        assert "class InitializeLakeviewStudentTermStep < Step" in result.output

    def test_college_required(self, runner, workflow_file):
        result = runner.invoke(cli, ["generate", "initializer", str(workflow_file), "-t", "StudentTerm"])

        assert result.exit_code == 2
        assert "A college is required" in result.output

    def test_unknown_target_rejected(self, runner, workflow_file):
        result = runner.invoke(cli, [
            "generate", "initializer", str(workflow_file), "-c", "northwood", "-t", "Invoice",
        ])
        assert result.exit_code == 2

    def test_invalid_workflow(self, runner, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("workflow: [unclosed", encoding="utf-8")

        result = runner.invoke(cli, ["generate", "initializer", str(bad), "-c", "northwood", "-t", "StudentTerm"])

        assert result.exit_code == 1
        assert "Invalid workflow document" in result.output


class TestGenerateAll:

    def test_writes_every_target(self, runner, workflow_file, tmp_path):
        output = tmp_path / "initializers"

        result = runner.invoke(cli, ["generate", "all", str(workflow_file), "-c", "northwood", "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert "🎉 Generated 3 initializer(s)" in result.output
        assert sorted(p.name for p in output.iterdir()) == [
            "initialize_northwood_college_student_application_step.rb",
            "initialize_northwood_course_registration_step.rb",
            "initialize_northwood_student_term_step.rb",
        ]

    def test_restricted_targets(self, runner, workflow_file, tmp_path):
        result = runner.invoke(cli, [
            "generate", "all", str(workflow_file), "-c", "northwood", "-o", str(tmp_path),
            "-t", "StudentTerm",
        ])

        assert result.exit_code == 0, result.output
        assert "🎉 Generated 1 initializer(s)" in result.output

    def test_refuses_to_overwrite_without_force(self, runner, workflow_file, tmp_path):
        args = ["generate", "all", str(workflow_file), "-c", "northwood", "-o", str(tmp_path), "-t", "StudentTerm"]
        runner.invoke(cli, args)

        again = runner.invoke(cli, args)
        forced = runner.invoke(cli, args + ["--force"])

        assert again.exit_code == 1
        assert "already exists" in again.output
        assert forced.exit_code == 0, forced.output


# ============================================================================
# WORKFLOW
# ============================================================================

class TestWorkflowCommands:

    def test_validate(self, runner, workflow_file):
        result = runner.invoke(cli, ["workflow", "validate", str(workflow_file), "--verbose"])

        assert result.exit_code == 0, result.output
        assert "✅ Valid workflow: workflow.yaml" in result.output
        assert "Steps: 2" in result.output
        assert "Conditions: 2" in result.output
        assert "Confirm Enrollment [Approval] -> confirm_enrollment_yes" in result.output
        assert "cannot be compiled" not in result.output

    def test_validate_reports_uncompilable_conditions(self, runner, tmp_path):
        path = tmp_path / "odd.yaml"
        path.write_text(yaml.safe_dump({"conditions": {"mystery": {}}, "workflow": []}), encoding="utf-8")

        result = runner.invoke(cli, ["workflow", "validate", str(path)])

        assert result.exit_code == 0, result.output
        assert "Conditions that cannot be compiled: mystery" in result.output

    def test_validate_invalid_file(self, runner, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("just a string", encoding="utf-8")

        result = runner.invoke(cli, ["workflow", "validate", str(path)])

        assert result.exit_code == 1

    def test_branches(self, runner, workflow_file):
        result = runner.invoke(cli, ["workflow", "branches", str(workflow_file)])

        assert result.exit_code == 0, result.output
        assert "Conditional branches (2)" in result.output
        assert "step: Confirm Enrollment" in result.output
        assert "completes: verify_partner_status_yes" in result.output

    def test_branches_for_target(self, runner, mixed_workflow_file):
        application = runner.invoke(cli, [
            "workflow", "branches", str(mixed_workflow_file), "-t", "CollegeStudentApplication",
        ])
        term = runner.invoke(cli, ["workflow", "branches", str(mixed_workflow_file), "-t", "StudentTerm"])

        assert "term_agreement_viewed" not in application.output
        assert "completes: term_agreement_viewed" in term.output

    def test_no_branches(self, runner, tmp_path):
        path = tmp_path / "plain.yaml"
        path.write_text("- title: Welcome\n  stepType: Information\n", encoding="utf-8")

        result = runner.invoke(cli, ["workflow", "branches", str(path)])

        assert "📭 No conditional branches found" in result.output

    @pytest.mark.parametrize("target,category", [
        ("CollegeStudentApplication", "One Time"),
        ("StudentTerm", "Per Term"),
        ("StudentDeCourse", "Per Course"),
    ])
    def test_category(self, runner, target, category):
        result = runner.invoke(cli, ["workflow", "category", target])
        assert result.exit_code == 0
        assert result.output.strip() == category
