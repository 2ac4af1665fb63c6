# flowinit/compiler/emitter.py
"""Assemble Ruby initializer classes from a workflow definition."""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import jinja2
import structlog

from flowinit.compiler.completion import CompletionStateResolver
from flowinit.compiler.conditions import ConditionCompiler
from flowinit.compiler.entities import KnownCondition, expression_for
from flowinit.compiler.profiles import PROFILES, TargetObjectProfile, get_profile
from flowinit.workflow.models import Step, TargetObjectType, WorkflowDefinition

logger = structlog.get_logger(__name__)

SKELETON_TEMPLATE_STR = """\
class {{ class_name }} < Step

  def self.required_fields
    return ["active_flow_step_id"]
  end

  def self.provided_fields(*args)
    return ["initialization_complete"]
  end

  def self.on_activate(*args)
    fields = args[0]
    active_flow_step = ActiveFlowStep.find(fields["active_flow_step_id"])
    target_object = active_flow_step.get_target_object
"""

GUARD_TEMPLATE_STR = """\
    # {{ guard.comment }}
    if {{ guard.predicate }}
      fields["{{ guard.field }}"] = true
{% if guard.otherwise %}
    else
      fields["{{ guard.otherwise }}"] = true
{% endif %}
    end

"""

BODY_TEMPLATE_STR = """\
{% for local in profile.bindings %}
    {{ local }} = target_object.{{ local }}
{% endfor %}

    # Common initialization
{% for name in profile.common_fields %}
    fields["{{ name }}"] = true
{% endfor %}

    # {{ profile.heading }}
{{ guards_before }}\
{% if profile.inline_path_predicates %}
    # Set high school type
    if {{ home_school_predicate }}
{% else %}
    # Home school, non-partner and partner high school paths are mutually exclusive
    is_home_school = {{ home_school_predicate }}
    is_non_partner = {{ non_partner_predicate }}

    if is_home_school
{% endif %}
{% for name in profile.home_school_fields %}
      fields["{{ name }}"] = true
{% endfor %}
    elsif {{ non_partner_predicate if profile.inline_path_predicates else "is_non_partner" }}
{% for name in profile.non_partner_fields %}
      fields["{{ name }}"] = true
{% endfor %}
    else
{% for name in profile.partner_fields %}
      fields["{{ name }}"] = true
{% endfor %}
    end

{{ guards_after }}{{ conditional_fields }}{{ completion_states }}\
    # Set up student signature for enrollment form
    fields["esign_enrollment_form_sign"] = target_object.student.display_name
    fields["esign_enrollment_form_date"] = Time.now.strftime('%-d %b %Y')

"""

CLOSING_TEMPLATE_STR = """
    # Complete the initialization
    fields["initialization_complete"] = true
    fields = active_flow_step.complete_step(fields)
    return fields
  end

end"""


class InitializerEmitter:
    """Render initializer classes for each target object type."""

    DEFAULT_TEMPLATES = {
        "skeleton.rb.j2": SKELETON_TEMPLATE_STR,
        "guard.rb.j2": GUARD_TEMPLATE_STR,
        "body.rb.j2": BODY_TEMPLATE_STR,
        "closing.rb.j2": CLOSING_TEMPLATE_STR,
    }

    def __init__(self, template_dir: Optional[Path] = None,
                 compiler: Optional[ConditionCompiler] = None,
                 resolver: Optional[CompletionStateResolver] = None,
                 logger: Any = None):
        self.logger = logger or structlog.get_logger(__name__)
        self.template_dir_path = template_dir
        self.compiler = compiler or ConditionCompiler(logger=self.logger)
        self.resolver = resolver or CompletionStateResolver(logger=self.logger)
        self.jinja_env: Optional[jinja2.Environment] = None

    def _ensure_jinja_env(self) -> jinja2.Environment:
        if self.jinja_env:
            return self.jinja_env

        loaders = []
        # Templates in a user supplied directory override the built-in ones
        if self.template_dir_path and Path(self.template_dir_path).is_dir():
            loaders.append(jinja2.FileSystemLoader(str(self.template_dir_path)))
        loaders.append(jinja2.DictLoader(self.DEFAULT_TEMPLATES))

        self.jinja_env = jinja2.Environment(
            loader=jinja2.ChoiceLoader(loaders),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=jinja2.StrictUndefined,
        )
        return self.jinja_env

    def _render(self, name: str, **context: Any) -> str:
        return self._ensure_jinja_env().get_template(name).render(**context)

    def render_skeleton(self, class_name: str) -> str:
        """Class header shared by every initializer."""
        return self._render("skeleton.rb.j2", class_name=class_name)

    def render_closing(self) -> str:
        """Trailer that marks initialization complete."""
        return self._render("closing.rb.j2")

    def select_steps(self, profile: TargetObjectProfile,
                     definition: WorkflowDefinition) -> List[Step]:
        """Steps considered for a target.

        Only the one-time application initializer filters by workflow
        category; the others see every step and rely on condition relevance.
        """
        steps = list(definition.workflow)
        if not profile.filter_by_category:
            return steps
        return [
            step for step in steps
            if not step.workflow_category or step.workflow_category == profile.workflow_category
        ]

    def emit(self, profile: TargetObjectProfile,
             workflow_data: Union[WorkflowDefinition, Dict[str, Any], None],
             college_var_name: str) -> str:
        """Render the full initializer class for one target profile."""
        definition = WorkflowDefinition.coerce(workflow_data)
        steps = self.select_steps(profile, definition)
        class_name = profile.class_name(college_var_name)

        self.logger.info(
            "generating_initializer",
            target=profile.target.value,
            class_name=class_name,
            steps=len(steps),
        )

        resolution = self.compiler.process_workflow_conditions(definition, steps, profile.target)

        body = self._render(
            "body.rb.j2",
            profile=profile,
            home_school_predicate=expression_for(KnownCondition.HOME_SCHOOL),
            non_partner_predicate=expression_for(KnownCondition.NON_PARTNER),
            guards_before="".join(self._render("guard.rb.j2", guard=g) for g in profile.guards_before),
            guards_after="".join(self._render("guard.rb.j2", guard=g) for g in profile.guards_after),
            conditional_fields=self.resolver.conditional_fields_code(resolution.condition_map),
            completion_states=self.resolver.generate(
                resolution.condition_map, resolution.completion_states
            ),
        )

        return self.render_skeleton(class_name) + body + self.render_closing()


def get_workflow_category_for_target_object_type(target_object_type: Any) -> str:
    """Primary workflow category for a target object type ("" when unknown)."""
    profile = get_profile(target_object_type)
    return profile.workflow_category if profile else ""


def generate_initializer_class(workflow_data: Union[WorkflowDefinition, Dict[str, Any], None],
                               college_var_name: str,
                               target_object_type: Any,
                               emitter: Optional[InitializerEmitter] = None) -> str:
    """Generate the Ruby initializer class for one target object type.

    Unsupported target types yield a Ruby comment instead of raising.
    """
    profile = get_profile(target_object_type)
    if profile is None:
        label = getattr(target_object_type, "value", target_object_type)
        logger.error("unsupported_target_object_type", target=label)
        return f"# Error: Unsupported target object type: {label}"

    emitter = emitter or InitializerEmitter()
    return emitter.emit(profile, workflow_data, college_var_name)


def initializer_filename(college_var_name: str, target_object_type: Any) -> Optional[str]:
    """File name the backend expects for an initializer class."""
    profile = get_profile(target_object_type)
    return profile.filename(college_var_name) if profile else None


def export_initializers(workflow_data: Union[WorkflowDefinition, Dict[str, Any]],
                        college_var_name: str,
                        output_dir: Union[str, Path],
                        targets: Optional[Iterable[Any]] = None,
                        emitter: Optional[InitializerEmitter] = None) -> Dict[TargetObjectType, Path]:
    """Write one initializer file per target into ``output_dir``."""
    definition = WorkflowDefinition.coerce(workflow_data)
    emitter = emitter or InitializerEmitter()
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written: Dict[TargetObjectType, Path] = {}
    for target in (targets or list(PROFILES)):
        profile = get_profile(target)
        if profile is None:
            raise ValueError(f"Unsupported target object type: {target}")
        path = output_dir / profile.filename(college_var_name)
        path.write_text(emitter.emit(profile, definition, college_var_name) + "\n", encoding="utf-8")
        written[profile.target] = path
        logger.info("initializer_written", target=profile.target.value, path=str(path))

    return written
