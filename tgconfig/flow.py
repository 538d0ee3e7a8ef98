"""Dialog flow definition — parsed once from the service's YAML, read-only afterwards.

Expected document shape::

    flow:
      title: TrustGraph Configuration
      start: platform
    steps:
      platform:
        title: "Deployment platform?"
        input:
          type: select
          options:
            - {value: docker, label: Docker Compose, recommended: true}
            - {value: k8s, label: Kubernetes}
        state_key: platform
        transitions:
          - when: platform = "k8s"
            next: k8s-cluster
          - next: review
      review:
        type: review
"""

from dataclasses import dataclass, field
from typing import Any, Union

from tgconfig.errors import FlowDefinitionError

REVIEW_TYPE = "review"


@dataclass(frozen=True)
class InputSpec:
    kind: str = "select"
    options: tuple[dict, ...] = ()
    default: Any = None
    min: int | None = None
    max: int | None = None
    placeholder: str | None = None

    def option_label(self, value: Any) -> str:
        """Label of the option whose value matches, falling back to the raw value."""
        for opt in self.options:
            if opt.get("value") == value:
                return str(opt.get("label", value))
        return str(value)


@dataclass(frozen=True)
class Transition:
    when: str | None = None
    next: str | None = None


@dataclass(frozen=True)
class InputStep:
    id: str
    title: str
    input: InputSpec = field(default_factory=InputSpec)
    state_key: str | None = None
    transitions: tuple[Transition, ...] = ()


@dataclass(frozen=True)
class ReviewStep:
    id: str
    title: str = "Review"


Step = Union[InputStep, ReviewStep]


@dataclass(frozen=True)
class FlowDefinition:
    title: str
    start: str
    steps: dict[str, Step]

    def get_step(self, step_id: str) -> Step | None:
        return self.steps.get(step_id)


def _parse_input(step_id: str, raw: Any) -> InputSpec:
    raw = raw or {}
    if not isinstance(raw, dict):
        raise FlowDefinitionError(f"Step '{step_id}': 'input' must be a mapping")

    kind = raw.get("type") or "select"
    options = raw.get("options") or []
    if kind == "select":
        if not isinstance(options, list) or not options:
            raise FlowDefinitionError(f"Step '{step_id}': select input has no options")
        for opt in options:
            if not isinstance(opt, dict) or "value" not in opt:
                raise FlowDefinitionError(
                    f"Step '{step_id}': every select option needs a 'value'"
                )

    return InputSpec(
        kind=kind,
        options=tuple(options) if isinstance(options, list) else (),
        default=raw.get("default"),
        min=raw.get("min"),
        max=raw.get("max"),
        placeholder=raw.get("placeholder"),
    )


def _parse_transitions(step_id: str, raw: Any) -> tuple[Transition, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise FlowDefinitionError(f"Step '{step_id}': 'transitions' must be a list")
    transitions = []
    for t in raw:
        if not isinstance(t, dict):
            raise FlowDefinitionError(f"Step '{step_id}': transition must be a mapping")
        transitions.append(Transition(when=t.get("when") or None, next=t.get("next") or None))
    return tuple(transitions)


def parse_step(step_id: str, raw: Any) -> Step:
    """Build the tagged Step variant for one raw step mapping."""
    if not isinstance(raw, dict):
        raise FlowDefinitionError(f"Step '{step_id}' must be a mapping")

    title = str(raw.get("title", step_id))
    if raw.get("type") == REVIEW_TYPE:
        return ReviewStep(id=step_id, title=title)

    return InputStep(
        id=step_id,
        title=title,
        input=_parse_input(step_id, raw.get("input")),
        state_key=raw.get("state_key") or None,
        transitions=_parse_transitions(step_id, raw.get("transitions")),
    )


def _check_state_key_conflicts(steps: dict[str, Step]) -> None:
    """Reject flows where one state_key is a strict prefix of another.

    Writing ``a`` as a scalar and later ``a.b`` (or the reverse) would need to
    replace an answer with an object, which the state tree does not allow.
    """
    owners: dict[str, str] = {}
    for step in steps.values():
        if isinstance(step, InputStep) and step.state_key:
            owners.setdefault(step.state_key, step.id)

    for key, owner in owners.items():
        parts = key.split(".")
        for i in range(1, len(parts)):
            prefix = ".".join(parts[:i])
            if prefix in owners:
                raise FlowDefinitionError(
                    f"state_key '{key}' (step '{owner}') nests under "
                    f"'{prefix}' (step '{owners[prefix]}')"
                )


def load_flow(data: Any) -> FlowDefinition:
    """Parse the dialog-flow document into a FlowDefinition.

    Accepts the service shape (``flow: {title, start}``) as well as a bare
    top-level ``start``/``title``. Raises FlowDefinitionError on malformed input.
    Unknown step references are left for the walker to report.
    """
    if not isinstance(data, dict):
        raise FlowDefinitionError("Dialog flow must be a mapping")

    header = data.get("flow") or {}
    if not isinstance(header, dict):
        raise FlowDefinitionError("'flow' must be a mapping")

    start = header.get("start") or data.get("start")
    if not start:
        raise FlowDefinitionError("Dialog flow has no start step")

    raw_steps = data.get("steps")
    if not isinstance(raw_steps, dict) or not raw_steps:
        raise FlowDefinitionError("Dialog flow has no steps")

    steps = {str(sid): parse_step(str(sid), raw) for sid, raw in raw_steps.items()}
    _check_state_key_conflicts(steps)

    title = header.get("title") or data.get("title") or "Configuration"
    return FlowDefinition(title=str(title), start=str(start), steps=steps)
