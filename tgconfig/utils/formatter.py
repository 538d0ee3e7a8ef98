"""Output Formatter — review summary and the Markdown installation guide."""

from typing import Any, Callable

from tgconfig.state import HistoryEntry
from tgconfig.utils.expressions import evaluate_condition

DEFAULT_PRIORITY = 99


def format_history(history: list[HistoryEntry]) -> str:
    """Render the question/answer trail shown before artifacts are generated."""
    lines = [f"  {h['question']} {h['answer']}" for h in history]
    return "Configuration Summary:\n" + "\n".join(lines)


def format_state(state: dict, prefix: str = "") -> list[str]:
    """Flatten the state tree into ``dotted.key: value`` lines."""
    lines = []
    for key, value in state.items():
        full_key = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            lines.extend(format_state(value, full_key))
        else:
            display = ("Yes" if value else "No") if isinstance(value, bool) else str(value)
            lines.append(f"  {full_key}: {display}")
    return lines


def _is_included(instruction: dict, state: dict) -> bool:
    # Neither 'always' nor 'when' means the fragment is never included.
    if instruction.get("always"):
        return True
    if instruction.get("when"):
        return evaluate_condition(instruction["when"], state)
    return False


def _priority(value: Any) -> Any:
    return DEFAULT_PRIORITY if value is None else value


def select_instructions(state: dict, documentation: dict) -> list[dict]:
    """Pick the instructions that apply to ``state``, sorted for output.

    Each returned item is a copy of the instruction with ``category_priority``
    and ``category_title`` attached. The first included instruction with a
    given id wins; later duplicates are dropped.
    """
    categories = {c["id"]: c for c in documentation.get("categories") or []}

    matching = []
    seen_ids = set()
    for instruction in documentation.get("instructions") or []:
        if not _is_included(instruction, state):
            continue
        if instruction.get("id") in seen_ids:
            continue
        seen_ids.add(instruction.get("id"))

        cat = categories.get(instruction.get("category"), {})
        matching.append({
            **instruction,
            "category_priority": _priority(cat.get("priority")),
            "category_title": cat.get("title") or instruction.get("category"),
        })

    # Stable: manifest order breaks ties.
    matching.sort(key=lambda item: (item["category_priority"], _priority(item.get("priority"))))
    return matching


def group_by_category(items: list[dict]) -> list[dict]:
    """Group sorted instructions by category, groups ordered by category priority."""
    grouped: dict[Any, dict] = {}
    for item in items:
        group = grouped.setdefault(item.get("category"), {
            "title": item["category_title"],
            "priority": item["category_priority"],
            "items": [],
        })
        group["items"].append(item)
    return sorted(grouped.values(), key=lambda g: g["priority"])


def assemble_docs(state: dict, manifest: dict, fetch_doc: Callable[[str], str]) -> str:
    """Build the installation guide for the final state.

    ``fetch_doc`` maps a fragment path to its Markdown text and must not raise.
    """
    documentation = manifest["documentation"]
    groups = group_by_category(select_instructions(state, documentation))

    output = [f"# {documentation.get('title', 'Installation Guide')}\n"]
    for group in groups:
        output.append(f"\n## {group['title']}\n")
        for item in group["items"]:
            if item.get("goal"):
                output.append(f"\n### {item['goal']}\n")
            if item.get("file"):
                output.append(fetch_doc(item["file"]))

    return "\n".join(output)
