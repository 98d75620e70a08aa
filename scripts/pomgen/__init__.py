"""Maven ``pom.xml`` generation package."""

from .cli import generate, main
from .mapping import UnmappedScopeError, scope_elements
from .ordering import compare_dependencies, sort_boms, sort_dependencies, tiered_comparator
from .pom_models import (
    BillOfMaterials,
    BuildSection,
    Configuration,
    Dependency,
    DependencyScope,
    DeploymentRepository,
    Developer,
    DistributionManagement,
    Exclusion,
    InvalidCoordinateError,
    License,
    LicenseDistribution,
    MavenBuild,
    Parent,
    Plugin,
    Profile,
    ProjectSettings,
    Repository,
    Resource,
    Scm,
    VersionReference,
)
from .pom_writer import PomWriter, generate_pom
from .project_parser import ProjectDescriptorError, load_project, parse_project
from .xml_writer import IndentingXmlWriter, escape

__all__ = [
    "generate", "main", "generate_pom", "PomWriter", "IndentingXmlWriter", "escape",
    "parse_project", "load_project", "scope_elements", "compare_dependencies",
    "tiered_comparator", "sort_dependencies", "sort_boms",
    "MavenBuild", "ProjectSettings", "Parent", "Scm", "License", "LicenseDistribution",
    "Developer", "Dependency", "DependencyScope", "Exclusion", "VersionReference",
    "BillOfMaterials", "BuildSection", "Configuration", "Plugin", "Resource",
    "Repository", "DeploymentRepository", "DistributionManagement", "Profile",
    "InvalidCoordinateError", "UnmappedScopeError", "ProjectDescriptorError",
]
