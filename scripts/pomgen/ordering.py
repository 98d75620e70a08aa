"""Ordering strategies for repeated POM sections.

Dependencies use a pluggable comparator (default: tiered by platform
namespace). Boms sort by their numeric ``order``. Every other list keeps
insertion order and is not touched here.
"""

from functools import cmp_to_key
from typing import Callable, Optional

from .detection import PLATFORM_GROUP, ROOT_ARTIFACT, dependency_tier
from .pom_models import BillOfMaterials, Dependency

DependencyComparator = Callable[[Dependency, Dependency], int]


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def tiered_comparator(
    platform_group: str = PLATFORM_GROUP,
    root_artifact: str = ROOT_ARTIFACT,
) -> DependencyComparator:
    """Build a three-tier dependency comparator.

    Order: the root starter, then other ``platform_group`` dependencies,
    then everything else. Within a tier, by groupId then artifactId.

    Args:
        platform_group: Group prefix identifying the platform.
        root_artifact: ArtifactId of the platform's root starter.

    Returns:
        A ``(a, b) -> int`` comparator.
    """
    def compare(a: Dependency, b: Dependency) -> int:
        key_a = (dependency_tier(a, platform_group, root_artifact), a.group_id, a.artifact_id)
        key_b = (dependency_tier(b, platform_group, root_artifact), b.group_id, b.artifact_id)
        return _cmp(key_a, key_b)
    return compare


compare_dependencies = tiered_comparator()


def sort_dependencies(
    dependencies,
    comparator: Optional[DependencyComparator] = None,
) -> list[Dependency]:
    """Sort dependencies with ``comparator`` (default: :func:`compare_dependencies`).

    The sort is stable: dependencies the comparator considers equal keep
    their insertion order.
    """
    return sorted(dependencies, key=cmp_to_key(comparator or compare_dependencies))


def sort_boms(boms) -> list[BillOfMaterials]:
    """Sort boms by ascending ``order``; ties keep insertion order."""
    return sorted(boms, key=lambda bom: bom.order)
