"""Model value → Maven output mapping: dependency scopes and element text.

Pure mapping logic with no XML writing and no file I/O. Every
:class:`~pomgen.pom_models.DependencyScope` member must appear in
``SCOPE_MAP``; anything else is a configuration error.
"""

from typing import Optional

from .pom_models import DependencyScope

# Scope → (``<scope>`` text, ``<optional>true</optional>`` flag).
# Maven has no compile-only scope: such dependencies are written as optional
# compile dependencies so they do not leak to consumers.
SCOPE_MAP = {
    DependencyScope.COMPILE: (None, False),
    DependencyScope.RUNTIME: ("runtime", False),
    DependencyScope.PROVIDED_RUNTIME: ("provided", False),
    DependencyScope.TEST_COMPILE: ("test", False),
    DependencyScope.TEST_RUNTIME: ("test", False),
    DependencyScope.ANNOTATION_PROCESSOR: (None, True),
    DependencyScope.COMPILE_ONLY: (None, True),
}


def text_value(value) -> str:
    """Render a scalar as element text; booleans use XML Schema spelling."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class UnmappedScopeError(ValueError):
    """Raised for a dependency scope outside :class:`DependencyScope`."""


def scope_elements(scope) -> tuple[Optional[str], bool]:
    """Map a dependency scope to its Maven ``<scope>`` and ``<optional>`` output.

    Args:
        scope: A :class:`DependencyScope`, its string value
            (e.g. ``"test-compile"``), or ``None`` for compile.

    Returns:
        ``(scope_text, optional)`` where ``scope_text`` is ``None`` when no
        ``<scope>`` element should be written.

    Raises:
        UnmappedScopeError: If ``scope`` is not a known scope.
    """
    if scope is None:
        return SCOPE_MAP[DependencyScope.COMPILE]
    try:
        key = DependencyScope(scope)
    except ValueError:
        raise UnmappedScopeError(f"Unmapped dependency scope: {scope!r}") from None
    return SCOPE_MAP[key]
