"""Trigger gate: decide which stages a triggering event asks for."""

from __future__ import annotations

from collections.abc import Mapping

from zrci.core.config import DEFAULT_TAG_PREFIX
from zrci.pipeline.model import EventKind, RunDecision

__all__ = ["decide", "is_tag_ref", "trigger_from_env"]

_CHECK_EVENTS = frozenset({EventKind.PUSH, EventKind.PULL_REQUEST, EventKind.TAG_PUSH})

# Git namespace of tag refs. tag_prefix may narrow it but the tag name is
# always the full name under this namespace.
_TAG_NAMESPACE = "refs/tags/"


def is_tag_ref(ref: str, *, tag_prefix: str = DEFAULT_TAG_PREFIX) -> bool:
    return ref.startswith(tag_prefix) and len(ref) > len(tag_prefix)


def decide(event: EventKind, ref: str, *, tag_prefix: str = DEFAULT_TAG_PREFIX) -> RunDecision:
    """Compute the run decision for an event.

    Verification runs for pushes (tag pushes included) and pull requests.
    Release is a candidate whenever the ref is a tag ref.
    """
    run_release = is_tag_ref(ref, tag_prefix=tag_prefix)
    return RunDecision(
        run_check=event in _CHECK_EVENTS,
        run_release=run_release,
        tag=ref.removeprefix(_TAG_NAMESPACE) if run_release else None,
    )


def trigger_from_env(
    environ: Mapping[str, str], *, tag_prefix: str = DEFAULT_TAG_PREFIX
) -> tuple[EventKind, str]:
    """Read the triggering event from a GitHub Actions environment."""
    event = EventKind.parse(environ.get("GITHUB_EVENT_NAME", ""))
    ref = environ.get("GITHUB_REF", "")
    if event == EventKind.PUSH and is_tag_ref(ref, tag_prefix=tag_prefix):
        event = EventKind.TAG_PUSH
    return event, ref
