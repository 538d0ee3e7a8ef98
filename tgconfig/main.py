"""Entry point: loads the dialog flow, walks it, then writes the deployment artifacts."""

import argparse
import sys
from functools import partial

from tgconfig.config import get_config, resolve_api_base
from tgconfig.deploy import deliver_config, derive_config, save_artifact
from tgconfig.errors import ConfigWizardError, DeliveryError, FetchError, PersistenceError, TemplateEvaluationError
from tgconfig.flow import FlowDefinition, load_flow
from tgconfig.graph import ReviewHandler, walk_flow
from tgconfig.prompts import is_cancel, prompt_text
from tgconfig.state import HistoryEntry
from tgconfig.utils import console
from tgconfig.utils.expressions import compile_template
from tgconfig.utils.fetch import fetch_doc, fetch_text, fetch_yaml
from tgconfig.utils.formatter import assemble_docs, format_state


def load_resources(api_base: str) -> tuple[FlowDefinition, object, dict]:
    """Fetch and parse the flow, output template and docs manifest.

    Raises FetchError, FlowDefinitionError or TemplateEvaluationError; any of
    them aborts the session before the first question.
    """
    endpoints = get_config()["endpoints"]

    flow = load_flow(fetch_yaml(api_base, endpoints["dialog_flow"]))
    template = compile_template(fetch_text(api_base, endpoints["config_prepare"]))
    manifest = fetch_yaml(api_base, endpoints["docs_manifest"])

    if not isinstance(manifest, dict) or not isinstance(manifest.get("documentation"), dict):
        raise FetchError("Docs manifest has no 'documentation' section")

    return flow, template, manifest


def _generate_package(template, state: dict) -> bool:
    """Derive the config, download the deployment package and save it.

    Returns False only if the user cancelled the filename prompt.
    """
    console.info("Generating configuration...")
    try:
        payload = derive_config(template, state)
    except TemplateEvaluationError as exc:
        console.error(str(exc))
        return True
    console.success("Configuration generated")

    filename = prompt_text("Save deployment package as", default=get_config()["package_filename"])
    if is_cancel(filename):
        return False

    console.info("Downloading...")
    try:
        path = save_artifact(filename, deliver_config(payload))
    except (DeliveryError, PersistenceError) as exc:
        console.error(f"Download failed: {exc}")
        return True
    console.success(f"Saved to {path}")
    return True


def _generate_guide(api_base: str, manifest: dict, state: dict) -> bool:
    """Assemble the installation guide and save it.

    Returns False only if the user cancelled the filename prompt.
    """
    console.info("Generating installation guide...")
    docs = assemble_docs(state, manifest, partial(fetch_doc, api_base))
    console.success("Installation guide generated")

    filename = prompt_text("Save installation guide as", default=get_config()["guide_filename"])
    if is_cancel(filename):
        return False

    try:
        path = save_artifact(filename, docs)
    except PersistenceError as exc:
        console.error(str(exc))
        return True
    console.success(f"Saved to {path}")
    return True


def make_review_handler(api_base: str, template, manifest: dict) -> ReviewHandler:
    """Build the review-step callback: package first, then the guide."""

    def on_review(state: dict, history: list[HistoryEntry]) -> bool:
        console.debug("Final state:\n" + "\n".join(format_state(state)))
        if not _generate_package(template, state):
            return False
        return _generate_guide(api_base, manifest, state)

    return on_review


def run(api_base: str) -> int:
    """Run one wizard session. Returns the process exit code."""
    console.banner("TrustGraph Configuration")

    console.info(f"Loading from {api_base}...")
    try:
        flow, template, manifest = load_resources(api_base)
    except ConfigWizardError as exc:
        console.error("Failed to load resources")
        console.error(str(exc))
        return 1
    console.success("Resources loaded")

    console.info(flow.title)

    try:
        result = walk_flow(flow, on_review=make_review_handler(api_base, template, manifest))
    except ConfigWizardError as exc:
        console.error(str(exc))
        return 1

    if result.status == "cancelled":
        console.info("Cancelled")
        return 0
    if result.status == "failed":
        return 1

    console.info("Done!")
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="tg-config",
        description="TrustGraph Configuration CLI",
    )
    parser.add_argument(
        "-a", "--api",
        metavar="URL",
        default=None,
        help=f"API base URL (default: {get_config()['api_base']})",
    )
    args = parser.parse_args(argv)

    return run(resolve_api_base(args.api))


if __name__ == "__main__":
    sys.exit(main())
