"""Flow walker — steps through the dialog flow, collecting answers into state."""

from dataclasses import dataclass, field
from typing import Any, Callable, Literal

from tgconfig.errors import UnknownStepError
from tgconfig.flow import FlowDefinition, InputStep, ReviewStep, Step
from tgconfig.prompts import is_cancel, prompt_step
from tgconfig.state import HistoryEntry, set_value
from tgconfig.utils import console
from tgconfig.utils.expressions import evaluate_condition
from tgconfig.utils.formatter import format_history

WalkStatus = Literal["terminal", "cancelled", "failed"]

# on_review(state, history) -> False if the user cancelled during the review phase
ReviewHandler = Callable[[dict, list[HistoryEntry]], bool]


@dataclass
class WalkResult:
    status: WalkStatus
    state: dict = field(default_factory=dict)
    history: list[HistoryEntry] = field(default_factory=list)
    reviewed: bool = False  # True only when an explicit review step ran.
    step_id: str | None = None  # Step the walk stopped on.
    error: str | None = None


def find_next_step(step: Step, state: dict) -> str | None:
    """Return the next step id from the first transition whose condition holds.

    Transitions are checked in declaration order; a transition without ``when``
    always matches. A matching transition without ``next`` ends the walk, as
    does no match at all.
    """
    if isinstance(step, ReviewStep):
        return None
    for transition in step.transitions:
        if evaluate_condition(transition.when, state):
            return transition.next
    return None


def display_answer(step: InputStep, value: Any) -> str:
    """Human-readable form of an answer for the review summary."""
    if step.input.kind == "select":
        return step.input.option_label(value)
    if step.input.kind == "toggle":
        return "Yes" if value else "No"
    return str(value)


def _record_answer(step: InputStep, value: Any, state: dict, history: list[HistoryEntry]) -> None:
    if not step.state_key:
        return
    set_value(state, step.state_key, value)
    history.append({"question": step.title, "answer": display_answer(step, value)})


def walk_flow(
    flow: FlowDefinition,
    prompt: Callable[[InputStep], Any] = prompt_step,
    on_review: ReviewHandler | None = None,
) -> WalkResult:
    """Walk the flow from its start step until it ends, is cancelled, or fails.

    The walker owns the state dict for the duration of the walk. The review
    handler receives it once the review step is reached and must only read it.
    """
    state: dict = {}
    history: list[HistoryEntry] = []
    current: str | None = flow.start
    last: str | None = None

    while current:
        step = flow.get_step(current)

        if step is None:
            err = UnknownStepError(current)
            console.error(str(err))
            return WalkResult("failed", state, history, step_id=current, error=str(err))

        if isinstance(step, ReviewStep):
            console.info(format_history(history))
            completed = on_review(state, history) if on_review else True
            status: WalkStatus = "terminal" if completed else "cancelled"
            return WalkResult(status, state, history, reviewed=True, step_id=step.id)

        value = prompt(step)
        if is_cancel(value):
            return WalkResult("cancelled", state, history, step_id=step.id)

        _record_answer(step, value, state, history)
        last = step.id
        current = find_next_step(step, state)

    return WalkResult("terminal", state, history, step_id=last)
