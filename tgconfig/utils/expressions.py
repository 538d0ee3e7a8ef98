"""JSONata expression evaluation for transition conditions and the output template.

Two modes share the same language:

- Conditions (transition ``when`` clauses, docs manifest ``when`` clauses) fail
  open: an absent condition is satisfied, and a condition that does not parse or
  raises while evaluating is treated as not satisfied. A broken condition
  disables its branch or fragment instead of aborting the wizard.
- The output template fails loudly: compile and evaluation errors surface as
  TemplateEvaluationError.
"""

from typing import Any

import jsonata

from tgconfig.errors import TemplateEvaluationError
from tgconfig.utils import console


def evaluate_condition(condition: str | None, state: dict) -> bool:
    """Return the truthiness of ``condition`` evaluated against ``state``.

    Never raises. An empty or missing condition returns True.
    """
    if not condition:
        return True
    try:
        result = jsonata.Jsonata(condition).evaluate(state)
    except Exception as exc:
        console.debug(f"Condition {condition!r} failed to evaluate: {exc!r}")
        return False
    return bool(result)


def compile_template(text: str) -> "jsonata.Jsonata":
    """Parse the output template once so syntax errors surface at load time."""
    try:
        return jsonata.Jsonata(text)
    except Exception as exc:
        raise TemplateEvaluationError(f"Invalid output template: {exc}") from exc


def evaluate_template(template: "jsonata.Jsonata | str", state: dict) -> Any:
    """Evaluate a compiled (or raw) template against ``state``.

    Raises TemplateEvaluationError on any failure.
    """
    if isinstance(template, str):
        template = compile_template(template)
    try:
        return template.evaluate(state)
    except Exception as exc:
        raise TemplateEvaluationError(f"Output template failed: {exc}") from exc
