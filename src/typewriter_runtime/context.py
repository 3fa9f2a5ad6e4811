"""Provenance metadata attached to every outgoing analytics call."""

from __future__ import annotations

from dataclasses import replace
from importlib.metadata import PackageNotFoundError, version

from typewriter_runtime.models import Message, Options

LIBRARY_LANGUAGE = "python"

try:
    LIBRARY_VERSION = version("typewriter-runtime")
except PackageNotFoundError:  # running from a source checkout
    LIBRARY_VERSION = "0.0.0+unknown"


def typewriter_context() -> dict[str, str]:
    return {"language": LIBRARY_LANGUAGE, "version": LIBRARY_VERSION}


def decorate(message: Message) -> Message:
    """Return a copy of ``message`` whose context carries the ``typewriter`` block.

    The caller's message, options and context mappings are left untouched. Any
    caller-supplied ``typewriter`` key is overwritten; every other context key
    passes through.
    """
    context = dict(message.options.context or {})
    context["typewriter"] = typewriter_context()
    options = Options(integrations=message.options.integrations, context=context)
    return replace(message, options=options)
