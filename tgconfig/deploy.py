"""Deployment package generation — derive the config payload, deliver it, save artifacts."""

from pathlib import Path
from typing import Any

import httpx

from tgconfig.config import get_config
from tgconfig.errors import DeliveryError, PersistenceError, TemplateEvaluationError
from tgconfig.utils.expressions import evaluate_template

TARGET_FIELD = "api_url"
BODY_FIELD = "templates"


def derive_config(template: Any, state: dict) -> dict:
    """Apply the output template to the final state.

    The result must be a mapping carrying the delivery target (``api_url``)
    and the request body (``templates``). Raises TemplateEvaluationError.
    """
    payload = evaluate_template(template, state)
    if not isinstance(payload, dict):
        raise TemplateEvaluationError(
            f"Output template produced {type(payload).__name__}, expected an object"
        )
    missing = [f for f in (TARGET_FIELD, BODY_FIELD) if payload.get(f) is None]
    if missing:
        raise TemplateEvaluationError(
            f"Output template result is missing: {', '.join(missing)}"
        )
    if not isinstance(payload[TARGET_FIELD], str) or not payload[TARGET_FIELD].strip():
        raise TemplateEvaluationError(
            f"Output template produced an invalid {TARGET_FIELD}: {payload[TARGET_FIELD]!r}"
        )
    return payload


def deliver_config(payload: dict) -> bytes:
    """POST the payload body to its target and return the packaged artifact bytes.

    Raises DeliveryError on transport failure or a non-success response.
    """
    url = payload[TARGET_FIELD]
    if not isinstance(url, str):
        raise DeliveryError(f"Invalid delivery target: {url!r}")
    timeout = get_config().get("request_timeout", 30)
    try:
        response = httpx.post(url, json=payload[BODY_FIELD], timeout=timeout)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise DeliveryError(f"Request to {url} failed: {exc}") from exc
    if not response.is_success:
        raise DeliveryError(f"HTTP {response.status_code}: {response.reason_phrase}")
    return response.content


def save_artifact(filename: str, content: bytes | str) -> Path:
    """Write an artifact to disk, creating parent directories.

    Returns the Path written. Raises PersistenceError on I/O failure.
    """
    path = Path(filename)
    try:
        if path.parent != Path("."):
            path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(f"Could not write {path}: {exc}") from exc
    return path
