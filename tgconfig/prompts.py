"""Terminal prompts — one function per input kind, plus the CANCEL signal.

Every prompt returns either the answer or the CANCEL sentinel when the user
aborts with Ctrl+C / Ctrl+D. Callers check with ``is_cancel``.
"""

from typing import Any

from tgconfig.flow import InputSpec, InputStep
from tgconfig.utils import console
from tgconfig.utils.validator import parse_number, validate_number


class _Cancel:
    """Sentinel returned by a prompt the user aborted."""

    def __repr__(self) -> str:
        return "CANCEL"


CANCEL = _Cancel()

_YES = {"y", "yes", "true", "1"}
_NO = {"n", "no", "false", "0"}


def is_cancel(value: Any) -> bool:
    return value is CANCEL


def _ask(message: str) -> str | _Cancel:
    try:
        return input(message)
    except (KeyboardInterrupt, EOFError):
        print()
        return CANCEL


def prompt_select(title: str, spec: InputSpec) -> Any:
    """Pick one option by number.

    A single option is chosen without asking. The option marked ``recommended``
    is the default for an empty answer.
    """
    options = list(spec.options)
    if len(options) == 1:
        opt = options[0]
        console.info(f"{title} {opt.get('label', opt['value'])}")
        return opt["value"]

    default_index = next(
        (i for i, opt in enumerate(options, 1) if opt.get("recommended")), None
    )

    print(f"\n{title}")
    for i, opt in enumerate(options, 1):
        rec = " (Recommended)" if opt.get("recommended") else ""
        hint = f" — {opt['description']}" if opt.get("description") else ""
        print(f"  {i}. {opt.get('label', opt['value'])}{rec}{hint}")

    suffix = f" [{default_index}]" if default_index else ""
    while True:
        answer = _ask(f"Your choice (number){suffix}: ")
        if is_cancel(answer):
            return CANCEL
        answer = answer.strip()
        if not answer and default_index:
            return options[default_index - 1]["value"]
        try:
            choice_num = int(answer)
        except ValueError:
            print("Please enter a number.")
            continue
        if 1 <= choice_num <= len(options):
            return options[choice_num - 1]["value"]
        print(f"Please enter a number between 1 and {len(options)}.")


def prompt_toggle(title: str, spec: InputSpec) -> Any:
    default = spec.default if isinstance(spec.default, bool) else False
    hint = "Y/n" if default else "y/N"
    while True:
        answer = _ask(f"{title} ({hint}): ")
        if is_cancel(answer):
            return CANCEL
        answer = answer.strip().lower()
        if not answer:
            return default
        if answer in _YES:
            return True
        if answer in _NO:
            return False
        print("Please answer y or n.")


def prompt_number(title: str, spec: InputSpec) -> Any:
    default = "" if spec.default is None else str(spec.default)
    suffix = f" [{default}]" if default else ""
    while True:
        answer = _ask(f"{title}{suffix}: ")
        if is_cancel(answer):
            return CANCEL
        answer = answer.strip() or default
        problem = validate_number(answer, spec.min, spec.max)
        if problem:
            print(problem)
            continue
        return parse_number(answer)


def prompt_text(title: str, default: str = "", placeholder: str | None = None) -> Any:
    """Free text; an empty answer takes ``default``."""
    if default:
        suffix = f" [{default}]"
    elif placeholder:
        suffix = f" (e.g. {placeholder})"
    else:
        suffix = ""
    answer = _ask(f"{title}{suffix}: ")
    if is_cancel(answer):
        return CANCEL
    return answer.strip() or default


def prompt_step(step: InputStep) -> Any:
    """Ask the question for one input step and return the answer (or CANCEL).

    Returns None for an input kind this client does not know.
    """
    spec = step.input
    if spec.kind == "select":
        return prompt_select(step.title, spec)
    if spec.kind == "toggle":
        return prompt_toggle(step.title, spec)
    if spec.kind == "number":
        return prompt_number(step.title, spec)
    if spec.kind == "text":
        default = "" if spec.default is None else str(spec.default)
        return prompt_text(step.title, default=default, placeholder=spec.placeholder)

    console.warn(f"Step '{step.id}' has unsupported input type '{spec.kind}'")
    return None
