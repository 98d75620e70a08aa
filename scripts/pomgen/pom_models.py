"""Maven build model classes.

Pure data structures describing the ``pom.xml`` to generate. Populated by
callers (or by :mod:`pomgen.project_parser`) and read by the writer.
No imports from other pomgen modules.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

# Version written when the project settings leave it unset.
DEFAULT_VERSION = "0.0.1-SNAPSHOT"

# Boms without an explicit order sit in the middle so callers can place
# others before or after them.
DEFAULT_BOM_ORDER = 500


class InvalidCoordinateError(ValueError):
    """Raised when an entity is missing a mandatory coordinate."""


def _require(kind: str, **coordinates):
    missing = [name for name, value in coordinates.items() if not value]
    if missing:
        raise InvalidCoordinateError(f"{kind} requires {', '.join(missing)}")


class DependencyScope(Enum):
    """Build-tool neutral dependency scope."""
    COMPILE = "compile"
    RUNTIME = "runtime"
    PROVIDED_RUNTIME = "provided-runtime"
    TEST_COMPILE = "test-compile"
    TEST_RUNTIME = "test-runtime"
    ANNOTATION_PROCESSOR = "annotation-processor"
    COMPILE_ONLY = "compile-only"


class LicenseDistribution(Enum):
    REPO = "repo"
    MANUAL = "manual"


@dataclass(frozen=True)
class VersionReference:
    """A literal version or a reference to a version property.

    Attributes:
        value: Literal version string (e.g. ``1.0.0.RELEASE``).
        property: Property name, rendered as ``${property}``.
    """
    value: Optional[str] = None
    property: Optional[str] = None

    @classmethod
    def of_value(cls, value: str) -> "VersionReference":
        return cls(value=value)

    @classmethod
    def of_property(cls, name: str) -> "VersionReference":
        return cls(property=name)

    def render(self) -> Optional[str]:
        if self.property:
            return "${" + self.property + "}"
        return self.value


def _as_version(version) -> Optional[VersionReference]:
    if version is None or isinstance(version, VersionReference):
        return version
    return VersionReference.of_value(str(version))


# ── Project settings ─────────────────────────────────────────────────────────

@dataclass
class Parent:
    """The ``<parent>`` coordinates.

    Attributes:
        relative_path: Explicit ``<relativePath>``. When ``None`` an empty
            ``<relativePath/>`` is written so the parent is looked up from
            the repository.
    """
    group_id: str
    artifact_id: str
    version: Optional[str] = None
    relative_path: Optional[str] = None

    def __post_init__(self):
        _require("Parent", group_id=self.group_id, artifact_id=self.artifact_id)


@dataclass
class Scm:
    connection: Optional[str] = None
    developer_connection: Optional[str] = None
    tag: Optional[str] = None
    url: Optional[str] = None

    def is_empty(self) -> bool:
        return not any((self.connection, self.developer_connection, self.tag, self.url))


@dataclass
class License:
    """A ``<license>`` entry. Every field is optional."""
    name: Optional[str] = None
    url: Optional[str] = None
    distribution: Optional[LicenseDistribution] = None
    comments: Optional[str] = None


@dataclass
class Developer:
    """A ``<developer>`` entry.

    Attributes:
        roles: Role names, written under ``<roles>`` only when non-empty.
        properties: Free-form properties, written under ``<properties>``
            only when non-empty.
    """
    id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    url: Optional[str] = None
    organization: Optional[str] = None
    organization_url: Optional[str] = None
    timezone: Optional[str] = None
    roles: list = field(default_factory=list)
    properties: dict = field(default_factory=dict)


@dataclass
class ProjectSettings:
    """Project-level coordinates and descriptive metadata.

    Attributes:
        version: Project version. ``None`` is written as ``DEFAULT_VERSION``.
        packaging: Packaging type. Omitted when unset or ``jar``.
    """
    group_id: Optional[str] = None
    artifact_id: Optional[str] = None
    version: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    packaging: Optional[str] = None
    url: Optional[str] = None
    parent: Optional[Parent] = None
    scm: Optional[Scm] = None
    licenses: list = field(default_factory=list)
    developers: list = field(default_factory=list)

    def coordinates(self, group_id: str, artifact_id: str) -> "ProjectSettings":
        self.group_id = group_id
        self.artifact_id = artifact_id
        return self

    @property
    def effective_version(self) -> str:
        return self.version or DEFAULT_VERSION


class PropertyContainer:
    """Insertion-ordered ``<properties>`` values.

    Version properties are tracked separately only as a provenance flag;
    they serialize exactly like plain properties.
    """

    def __init__(self):
        self._values = {}
        self._versions = {}

    def add(self, name: str, value: str) -> "PropertyContainer":
        self._values[name] = value
        return self

    def version(self, name: str, value: str, internal: bool = False) -> "PropertyContainer":
        self._values[name] = value
        self._versions[name] = internal
        return self

    def has(self, name: str) -> bool:
        return name in self._values

    def is_version(self, name: str) -> bool:
        return name in self._versions

    def is_internal(self, name: str) -> bool:
        return self._versions.get(name, False)

    def items(self):
        return list(self._values.items())

    def is_empty(self) -> bool:
        return not self._values

    def __len__(self):
        return len(self._values)


# ── Dependencies ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Exclusion:
    group_id: str
    artifact_id: str

    def __post_init__(self):
        _require("Exclusion", group_id=self.group_id, artifact_id=self.artifact_id)


@dataclass
class Dependency:
    """A dependency to declare.

    Attributes:
        version: Literal string or :class:`VersionReference`; ``None`` when
            the version is managed elsewhere.
        scope: A :class:`DependencyScope`; ``None`` means compile.
        dep_type: Artifact type (e.g. ``tar.gz``).
        optional: Force ``<optional>true</optional>`` regardless of scope.
        exclusions: :class:`Exclusion` entries, in declaration order.
    """
    group_id: str
    artifact_id: str
    version: Optional[VersionReference] = None
    scope: Optional[DependencyScope] = None
    classifier: Optional[str] = None
    dep_type: Optional[str] = None
    optional: bool = False
    exclusions: list = field(default_factory=list)

    def __post_init__(self):
        _require("Dependency", group_id=self.group_id, artifact_id=self.artifact_id)
        self.version = _as_version(self.version)


@dataclass
class BillOfMaterials:
    """A bom imported in ``<dependencyManagement>``.

    Always written with ``type=pom`` and ``scope=import``. Lower ``order``
    values are written first.
    """
    group_id: str
    artifact_id: str
    version: Optional[VersionReference] = None
    order: int = DEFAULT_BOM_ORDER

    def __post_init__(self):
        _require("BillOfMaterials", group_id=self.group_id, artifact_id=self.artifact_id)
        self.version = _as_version(self.version)


class KeyedContainer:
    """Insertion-ordered items keyed by a caller-supplied id.

    Re-adding an existing id replaces the item in place. Ids are never
    serialized.
    """

    def __init__(self):
        self._items = {}

    def add(self, item_id, item):
        self._items[item_id] = item
        return item

    def get(self, item_id):
        return self._items.get(item_id)

    def has(self, item_id) -> bool:
        return item_id in self._items

    def remove(self, item_id) -> bool:
        if item_id not in self._items:
            return False
        del self._items[item_id]
        return True

    def ids(self) -> list:
        return list(self._items)

    def values(self) -> list:
        return list(self._items.values())

    def is_empty(self) -> bool:
        return not self._items

    def __iter__(self):
        return iter(self._items.values())

    def __len__(self):
        return len(self._items)


# ── Plugin configuration ─────────────────────────────────────────────────────

def singularize(name: str) -> Optional[str]:
    """Derive the element name for items of a repeated setting.

    ``args`` → ``arg``, ``dependencies`` → ``dependency``, ``classes`` →
    ``class``. Returns ``None`` when ``name`` has no plural ending.
    """
    if name.endswith("ies") and len(name) > 3:
        return name[:-3] + "y"
    for suffix in ("sses", "xes", "ches", "shes"):
        if name.endswith(suffix):
            return name[:-2]
    if name.endswith("s") and not name.endswith("ss") and len(name) > 1:
        return name[:-1]
    return None


@dataclass
class Setting:
    """One configuration entry: a leaf string, a nested
    :class:`Configuration` or a :class:`RepeatedSetting`."""
    name: str
    value: Union[str, "Configuration", "RepeatedSetting"]

    def is_empty(self) -> bool:
        if isinstance(self.value, (Configuration, RepeatedSetting)):
            return self.value.is_empty()
        return self.value is None


@dataclass
class RepeatedSetting:
    """Values written as ``item_name`` siblings inside one wrapper element."""
    item_name: str
    values: list = field(default_factory=list)

    def is_empty(self) -> bool:
        return all(v is None or (isinstance(v, Configuration) and v.is_empty()) for v in self.values)


@dataclass
class Configuration:
    """An ordered, recursively nested ``<configuration>`` tree."""
    settings: list = field(default_factory=list)

    def add(self, name: str, value) -> "Configuration":
        self.settings.append(Setting(name, value))
        return self

    def configure(self, name: str) -> "Configuration":
        """Return the nested configuration ``name``, creating it if needed."""
        for setting in self.settings:
            if setting.name == name and isinstance(setting.value, Configuration):
                return setting.value
        nested = Configuration()
        self.settings.append(Setting(name, nested))
        return nested

    def add_all(self, name: str, values, item_name: Optional[str] = None) -> "Configuration":
        item_name = item_name or singularize(name)
        if not item_name:
            raise ValueError(f"Cannot derive an item name for '{name}', pass item_name")
        self.settings.append(Setting(name, RepeatedSetting(item_name, list(values))))
        return self

    def is_empty(self) -> bool:
        return all(s.is_empty() for s in self.settings)


# ── Build ────────────────────────────────────────────────────────────────────

@dataclass
class Resource:
    """A ``<resource>`` or ``<testResource>`` entry.

    Attributes:
        filtering: Written whenever explicitly set.
    """
    directory: str
    target_path: Optional[str] = None
    filtering: Optional[bool] = None
    includes: list = field(default_factory=list)
    excludes: list = field(default_factory=list)


@dataclass
class Execution:
    id: str
    goals: list = field(default_factory=list)
    phase: Optional[str] = None
    configuration: Optional[Configuration] = None

    def goal(self, goal: str) -> "Execution":
        self.goals.append(goal)
        return self

    def configure(self) -> Configuration:
        if self.configuration is None:
            self.configuration = Configuration()
        return self.configuration


@dataclass
class Plugin:
    """A build ``<plugin>``.

    Attributes:
        version: Explicit version, or ``None`` if managed by a parent.
        extensions: Writes ``<extensions>true</extensions>`` when set.
        executions: :class:`Execution` entries in declaration order.
        dependencies: Plugin-level :class:`Dependency` entries.
    """
    group_id: str
    artifact_id: str
    version: Optional[str] = None
    extensions: bool = False
    configuration: Optional[Configuration] = None
    executions: list = field(default_factory=list)
    dependencies: list = field(default_factory=list)

    def __post_init__(self):
        _require("Plugin", group_id=self.group_id, artifact_id=self.artifact_id)

    def configure(self) -> Configuration:
        if self.configuration is None:
            self.configuration = Configuration()
        return self.configuration

    def execution(self, execution_id: str) -> Execution:
        for execution in self.executions:
            if execution.id == execution_id:
                return execution
        execution = Execution(execution_id)
        self.executions.append(execution)
        return execution

    def dependency(self, group_id: str, artifact_id: str, version: Optional[str] = None) -> "Plugin":
        self.dependencies.append(Dependency(group_id, artifact_id, version))
        return self


class PluginContainer(KeyedContainer):
    """Plugins keyed by ``(group_id, artifact_id)``."""

    def add(self, group_id: str, artifact_id: str, **attributes) -> Plugin:
        plugin = self.get((group_id, artifact_id))
        if plugin is None:
            plugin = super().add((group_id, artifact_id), Plugin(group_id, artifact_id))
        for name, value in attributes.items():
            setattr(plugin, name, value)
        return plugin


@dataclass
class BuildSection:
    """The ``<build>`` sub-tree, shared by the project and its profiles."""
    source_directory: Optional[str] = None
    test_source_directory: Optional[str] = None
    default_goal: Optional[str] = None
    directory: Optional[str] = None
    final_name: Optional[str] = None
    filters: list = field(default_factory=list)
    resources: list = field(default_factory=list)
    test_resources: list = field(default_factory=list)
    plugin_management: PluginContainer = field(default_factory=PluginContainer)
    plugins: PluginContainer = field(default_factory=PluginContainer)

    def is_empty(self) -> bool:
        filters = [f for f in self.filters if f is not None]
        return not any((
            self.source_directory, self.test_source_directory, self.default_goal,
            self.directory, self.final_name, filters, self.resources,
            self.test_resources,
        )) and self.plugin_management.is_empty() and self.plugins.is_empty()


# ── Repositories & distribution ──────────────────────────────────────────────

@dataclass
class Repository:
    """A ``<repository>`` or ``<pluginRepository>``.

    Attributes:
        snapshots_enabled: Writes ``<snapshots><enabled>`` when set.
        releases_enabled: Writes ``<releases><enabled>`` when set.
    """
    id: str
    url: str
    name: Optional[str] = None
    snapshots_enabled: Optional[bool] = None
    releases_enabled: Optional[bool] = None

    def __post_init__(self):
        _require("Repository", id=self.id, url=self.url)


# Implicit in every Maven build; never written.
MAVEN_CENTRAL = Repository("maven-central", "https://repo.maven.apache.org/maven2", "Maven Central")


class RepositoryContainer(KeyedContainer):
    """Repositories keyed by id."""

    def add(self, repository: Repository) -> Repository:
        return super().add(repository.id, repository)


@dataclass
class DeploymentRepository:
    id: Optional[str] = None
    name: Optional[str] = None
    url: Optional[str] = None
    layout: Optional[str] = None
    unique_version: Optional[bool] = None

    def is_empty(self) -> bool:
        return not any((self.id, self.name, self.url, self.layout)) and self.unique_version is None


@dataclass
class Site:
    id: Optional[str] = None
    name: Optional[str] = None
    url: Optional[str] = None

    def is_empty(self) -> bool:
        return not any((self.id, self.name, self.url))


@dataclass
class Relocation:
    group_id: Optional[str] = None
    artifact_id: Optional[str] = None
    version: Optional[str] = None
    message: Optional[str] = None

    def is_empty(self) -> bool:
        return not any((self.group_id, self.artifact_id, self.version, self.message))


@dataclass
class DistributionManagement:
    """``<distributionManagement>``; each part is omitted independently."""
    download_url: Optional[str] = None
    repository: Optional[DeploymentRepository] = None
    snapshot_repository: Optional[DeploymentRepository] = None
    site: Optional[Site] = None
    relocation: Optional[Relocation] = None

    def is_empty(self) -> bool:
        parts = (self.repository, self.snapshot_repository, self.site, self.relocation)
        return not self.download_url and all(p is None or p.is_empty() for p in parts)


# ── Reporting ────────────────────────────────────────────────────────────────

@dataclass
class ReportSet:
    id: str
    inherited: Optional[bool] = None
    reports: list = field(default_factory=list)
    configuration: Optional[Configuration] = None


@dataclass
class ReportPlugin:
    group_id: str
    artifact_id: str
    version: Optional[str] = None
    inherited: Optional[bool] = None
    configuration: Optional[Configuration] = None
    report_sets: list = field(default_factory=list)

    def __post_init__(self):
        _require("ReportPlugin", group_id=self.group_id, artifact_id=self.artifact_id)


@dataclass
class Reporting:
    exclude_defaults: Optional[bool] = None
    output_directory: Optional[str] = None
    plugins: list = field(default_factory=list)

    def is_empty(self) -> bool:
        return self.exclude_defaults is None and not self.output_directory and not self.plugins


# ── Profiles ─────────────────────────────────────────────────────────────────

@dataclass
class ActivationOS:
    name: Optional[str] = None
    family: Optional[str] = None
    arch: Optional[str] = None
    version: Optional[str] = None

    def is_empty(self) -> bool:
        return not any((self.name, self.family, self.arch, self.version))


@dataclass
class ActivationProperty:
    name: Optional[str] = None
    value: Optional[str] = None

    def is_empty(self) -> bool:
        return not any((self.name, self.value))


@dataclass
class ActivationFile:
    exists: Optional[str] = None
    missing: Optional[str] = None

    def is_empty(self) -> bool:
        return not any((self.exists, self.missing))


@dataclass
class ProfileActivation:
    active_by_default: Optional[bool] = None
    jdk: Optional[str] = None
    os: Optional[ActivationOS] = None
    property: Optional[ActivationProperty] = None
    file: Optional[ActivationFile] = None

    def is_empty(self) -> bool:
        parts = (self.os, self.property, self.file)
        return (self.active_by_default is None and not self.jdk
                and all(p is None or p.is_empty() for p in parts))


@dataclass
class Profile:
    """A ``<profile>``: a structurally complete overlay of the build.

    Uses the same section types as :class:`MavenBuild`, so every omission
    and ordering rule applies identically inside the profile.
    """
    id: str
    activation: Optional[ProfileActivation] = None
    build: BuildSection = field(default_factory=BuildSection)
    modules: list = field(default_factory=list)
    repositories: RepositoryContainer = field(default_factory=RepositoryContainer)
    plugin_repositories: RepositoryContainer = field(default_factory=RepositoryContainer)
    dependencies: KeyedContainer = field(default_factory=KeyedContainer)
    reporting: Optional[Reporting] = None
    boms: KeyedContainer = field(default_factory=KeyedContainer)
    distribution_management: DistributionManagement = field(default_factory=DistributionManagement)
    properties: PropertyContainer = field(default_factory=PropertyContainer)


class ProfileContainer(KeyedContainer):
    """Profiles keyed by id; adding an existing id returns that profile."""

    def add(self, profile_id: str) -> Profile:
        profile = self.get(profile_id)
        if profile is None:
            profile = super().add(profile_id, Profile(profile_id))
        return profile


@dataclass
class MavenBuild:
    """Root of the model handed to :class:`pomgen.pom_writer.PomWriter`.

    Attributes:
        dependencies: :class:`Dependency` entries keyed by logical id.
        boms: :class:`BillOfMaterials` entries keyed by logical id.
        build: Build settings, resources and plugins.
    """
    settings: ProjectSettings = field(default_factory=ProjectSettings)
    properties: PropertyContainer = field(default_factory=PropertyContainer)
    dependencies: KeyedContainer = field(default_factory=KeyedContainer)
    boms: KeyedContainer = field(default_factory=KeyedContainer)
    build: BuildSection = field(default_factory=BuildSection)
    repositories: RepositoryContainer = field(default_factory=RepositoryContainer)
    plugin_repositories: RepositoryContainer = field(default_factory=RepositoryContainer)
    distribution_management: DistributionManagement = field(default_factory=DistributionManagement)
    profiles: ProfileContainer = field(default_factory=ProfileContainer)
