# flowinit/compiler/completion.py
"""Emit Ruby that keeps completion gates consistent across conditional paths."""

from typing import Any, Dict, Iterable, List, Sequence

import structlog

from flowinit.compiler.conditions import PARTITION_CONDITIONS, CompiledCondition

INDENT = "    "


def _set_fields(fields: Iterable[str]) -> str:
    return "".join(f'{INDENT}  fields["{name}"] = true\n' for name in fields)


class CompletionStateResolver:
    """Builds the conditional-field, auto-complete and partition-merge blocks."""

    def __init__(self, partition: Sequence[str] = PARTITION_CONDITIONS, logger: Any = None):
        self.partition = tuple(partition)
        self.logger = logger or structlog.get_logger(__name__)

    def conditional_fields_code(self, condition_map: Dict[str, CompiledCondition]) -> str:
        """Set each condition's fields when its predicate holds."""
        if not condition_map:
            return ""

        code = f"{INDENT}# Conditional fields based on workflow conditions\n"
        for name, compiled in condition_map.items():
            fields = compiled.fields or [name]
            code += f"{INDENT}# Condition: {name}\n"
            code += f"{INDENT}if {compiled.expression}\n"
            code += _set_fields(fields)
            code += f"{INDENT}end\n\n"
        return code

    def auto_complete_code(self, condition_map: Dict[str, CompiledCondition],
                           completion_states: Dict[str, List[str]]) -> str:
        """Pre-satisfy completion tokens of branches a record will never take."""
        blocks = []
        for name, states in completion_states.items():
            compiled = condition_map.get(name)
            if compiled is None or not states:
                continue
            block = f"{INDENT}# Auto-complete steps for students who don't qualify for {name}\n"
            block += f"{INDENT}unless {compiled.expression}\n"
            block += _set_fields(states)
            block += f"{INDENT}end\n\n"
            blocks.append(block)

        if not blocks:
            return ""
        return f"{INDENT}# Set completion states for students who don't meet condition criteria\n" + "".join(blocks)

    def partition_merge_code(self, condition_map: Dict[str, CompiledCondition],
                             completion_states: Dict[str, List[str]]) -> str:
        """Satisfy the other partition paths' tokens on whichever path is taken."""
        present = [name for name in self.partition if name in condition_map]
        if len(present) < 2:
            return ""

        blocks = []
        for taken in present:
            others: List[str] = []
            for other in present:
                if other == taken:
                    continue
                for state in completion_states.get(other, []):
                    if state not in others:
                        others.append(state)
            if not others:
                continue
            block = f"{INDENT}# Path taken: {taken}\n"
            block += f"{INDENT}if {condition_map[taken].expression}\n"
            block += _set_fields(others)
            block += f"{INDENT}end\n\n"
            blocks.append(block)

        if not blocks:
            return ""

        self.logger.debug("partition_merged", conditions=present)
        header = f"{INDENT}# Merge completion states across mutually exclusive high school paths\n"
        return header + "".join(blocks)

    def generate(self, condition_map: Dict[str, CompiledCondition],
                 completion_states: Dict[str, List[str]]) -> str:
        """Auto-complete blocks followed by the partition merge."""
        return (
            self.auto_complete_code(condition_map, completion_states)
            + self.partition_merge_code(condition_map, completion_states)
        )
