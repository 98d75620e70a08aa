"""Platform dependency detection heuristics.

Classifies dependencies by coordinate namespace. The classification drives
the default dependency order in :mod:`pomgen.ordering`.
"""

from .pom_models import Dependency

# Group prefix of the platform whose dependencies are listed first.
PLATFORM_GROUP = "org.springframework.boot"

# The platform's own root starter, listed before everything else.
ROOT_ARTIFACT = "spring-boot-starter"

ROOT_TIER = 0
PLATFORM_TIER = 1
OTHER_TIER = 2


def is_platform_dependency(dep: Dependency, platform_group: str = PLATFORM_GROUP) -> bool:
    """Check whether a dependency belongs to the platform namespace.

    Args:
        dep: The dependency to check.
        platform_group: Group prefix identifying the platform.

    Returns:
        ``True`` if the groupId starts with ``platform_group``.
    """
    return dep.group_id.startswith(platform_group)


def is_root_starter(
    dep: Dependency,
    platform_group: str = PLATFORM_GROUP,
    root_artifact: str = ROOT_ARTIFACT,
) -> bool:
    """Check if a dependency is the platform's root starter.

    Args:
        dep: The dependency to check.
        platform_group: Group prefix identifying the platform.
        root_artifact: ArtifactId of the root starter.

    Returns:
        ``True`` for e.g. ``org.springframework.boot:spring-boot-starter``.
    """
    return is_platform_dependency(dep, platform_group) and dep.artifact_id == root_artifact


def dependency_tier(
    dep: Dependency,
    platform_group: str = PLATFORM_GROUP,
    root_artifact: str = ROOT_ARTIFACT,
) -> int:
    """Return the ordering tier of a dependency: root, platform, or other."""
    if is_root_starter(dep, platform_group, root_artifact):
        return ROOT_TIER
    if is_platform_dependency(dep, platform_group):
        return PLATFORM_TIER
    return OTHER_TIER
