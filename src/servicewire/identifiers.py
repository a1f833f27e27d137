from __future__ import annotations

import types
from typing import Any, TypeAlias, TypeGuard

ServiceIdentifier: TypeAlias = str
"""Fully qualified ``module.QualName`` of a class known to the container."""


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations."""
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def identify(value: type[Any] | str) -> ServiceIdentifier:
    """Return the service identifier for a class or pass an identifier through.

    Args:
        value: A class, or a string already in ``module.QualName`` form.

    """
    if isinstance(value, str):
        return value
    if not is_runtime_class(value):
        msg = f"Expected a class or a service identifier, got {value!r}."
        raise TypeError(msg)
    return f"{value.__module__}.{value.__qualname__}"


__all__ = ["ServiceIdentifier", "identify", "is_runtime_class"]
