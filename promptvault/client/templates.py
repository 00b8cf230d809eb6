"""Placeholder extraction and substitution for prompt content.

A placeholder is ``{{name}}`` or ``{{name:default}}``. Names and defaults are
trimmed. Any span without ``}`` or ``:`` is accepted as a name, including a
blank one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

PLACEHOLDER_PATTERN = re.compile(r"\{\{([^}:]+)(?::([^}]*))?\}\}")


@dataclass(frozen=True)
class Variable:
    name: str
    default_value: Optional[str] = None


def extract_variables(content: str) -> List[Variable]:
    """Return each distinct placeholder once, in order of first appearance.

    The default recorded for a name is the one from its first occurrence, even
    when that occurrence has none and a later one does.
    """
    variables: List[Variable] = []
    seen = set()
    for match in PLACEHOLDER_PATTERN.finditer(content or ""):
        name = match.group(1).strip()
        if name in seen:
            continue
        seen.add(name)
        default = match.group(2)
        variables.append(Variable(name=name, default_value=default.strip() if default is not None else None))
    return variables


def replace_variables(content: str, values: Mapping[str, str]) -> str:
    """Substitute placeholders with ``values``.

    A name missing from ``values`` is written back as ``{{name}}`` with any
    default annotation dropped. An empty string is a value, not a miss.
    """

    def _substitute(match: "re.Match[str]") -> str:
        name = match.group(1).strip()
        if name in values:
            return values[name]
        return "{{" + name + "}}"

    return PLACEHOLDER_PATTERN.sub(_substitute, content or "")


def initial_values(variables: Sequence[Variable]) -> Dict[str, str]:
    return {variable.name: variable.default_value or "" for variable in variables}


__all__ = [
    "PLACEHOLDER_PATTERN",
    "Variable",
    "extract_variables",
    "initial_values",
    "replace_variables",
]
