"""
Error chaining helpers.

Errors bubble up as a single message, each layer prefixing the context it
was working in: ``"context: inner cause"``.
"""

import copy
from typing import TypeVar

E = TypeVar("E", bound=Exception)


def with_context(prefix: str, error: E) -> E:
    """Return a copy of ``error`` whose message is prefixed with ``prefix``.

    The copy keeps the class and every attribute of the original, so callers
    can still match on the error type. Raise it with ``from error``.
    """
    chained = copy.copy(error)
    chained.args = (f"{prefix}: {error}",)
    return chained
