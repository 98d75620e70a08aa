"""Project descriptor parsing.

Loads a TOML or JSON project descriptor into a
:class:`~pomgen.pom_models.MavenBuild`. The descriptor mirrors the model:
snake_case keys, one table per section, and plain tables/arrays for plugin
configuration trees.
"""

import json
import sys
import tomllib
from pathlib import Path
from typing import Optional

from .mapping import text_value
from .pom_models import (
    ActivationFile,
    ActivationOS,
    ActivationProperty,
    BillOfMaterials,
    BuildSection,
    Configuration,
    Dependency,
    DependencyScope,
    DeploymentRepository,
    Developer,
    DistributionManagement,
    Exclusion,
    Execution,
    KeyedContainer,
    License,
    LicenseDistribution,
    MavenBuild,
    Parent,
    PluginContainer,
    ProfileActivation,
    ProjectSettings,
    PropertyContainer,
    Relocation,
    ReportPlugin,
    Reporting,
    ReportSet,
    Repository,
    RepositoryContainer,
    Resource,
    Scm,
    Site,
    VersionReference,
)

TOP_LEVEL_KEYS = {
    "project", "properties", "version_properties", "dependencies", "boms", "build",
    "repositories", "plugin_repositories", "distribution_management", "profiles",
}


class ProjectDescriptorError(Exception):
    """Raised when a descriptor cannot be read or holds an invalid entry."""


def _build(cls, entry: dict, where: str):
    """Instantiate ``cls`` from a descriptor table, reporting bad entries."""
    try:
        return cls(**entry)
    except (TypeError, ValueError) as ex:
        raise ProjectDescriptorError(f"{where}: {ex}") from None


def _optional(cls, data: dict, key: str, where: str):
    entry = _table(data, key, where)
    return _build(cls, entry, f"{where}.{key}") if entry else None


def _entry(entry, where: str) -> dict:
    if not isinstance(entry, dict):
        raise ProjectDescriptorError(f"{where} must be a table, got {type(entry).__name__}")
    return entry


def _table(data: dict, key: str, where: str) -> dict:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ProjectDescriptorError(f"'{key}' in {where} must be a table")
    return value


def _array(data: dict, key: str, where: str) -> list:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise ProjectDescriptorError(f"'{key}' in {where} must be an array")
    return value


def _version(entry: dict) -> Optional[VersionReference]:
    """Read ``version`` (literal) or ``version_property`` (``${...}``) from an entry."""
    if entry.get("version_property"):
        return VersionReference.of_property(entry["version_property"])
    if entry.get("version") is not None:
        return VersionReference.of_value(str(entry["version"]))
    return None


def _scope(value: Optional[str], where: str) -> Optional[DependencyScope]:
    if value is None:
        return None
    try:
        return DependencyScope(value)
    except ValueError:
        raise ProjectDescriptorError(f"{where}: unknown scope '{value}'") from None


def _parse_configuration(data: Optional[dict], where: str) -> Optional[Configuration]:
    """Convert a nested table into a configuration tree.

    Scalars become leaves, tables become nested configurations and arrays
    become repeated settings whose items use the singular of the key.

    Args:
        data: The ``configuration`` table, or ``None``.
        where: Location used in error messages.

    Returns:
        A :class:`Configuration`, or ``None`` if ``data`` is ``None``.
    """
    if data is None:
        return None
    configuration = Configuration()
    for name, value in _entry(data, where).items():
        if isinstance(value, dict):
            configuration.add(name, _parse_configuration(value, f"{where}.{name}"))
        elif isinstance(value, list):
            items = [
                _parse_configuration(v, f"{where}.{name}") if isinstance(v, dict) else v
                for v in value
            ]
            try:
                configuration.add_all(name, items)
            except ValueError as ex:
                raise ProjectDescriptorError(f"{where}: {ex}") from None
        else:
            configuration.add(name, value)
    return configuration


def _parse_dependency(entry: dict, where: str) -> Dependency:
    """Parse a dependency table into a Dependency.

    Args:
        entry: Table with ``group_id``, ``artifact_id`` and optional
            ``version``/``version_property``, ``scope``, ``classifier``,
            ``type``, ``optional`` and ``exclusions``.
        where: Location used in error messages.

    Returns:
        A populated Dependency instance.
    """
    _entry(entry, where)
    exclusions = [
        _build(Exclusion, ex, f"{where}.exclusions[{i}]")
        for i, ex in enumerate(_array(entry, "exclusions", where))
    ]
    try:
        return Dependency(
            group_id=entry.get("group_id"),
            artifact_id=entry.get("artifact_id"),
            version=_version(entry),
            scope=_scope(entry.get("scope"), where),
            classifier=entry.get("classifier"),
            dep_type=entry.get("type"),
            optional=bool(entry.get("optional", False)),
            exclusions=exclusions,
        )
    except ValueError as ex:
        raise ProjectDescriptorError(f"{where}: {ex}") from None


def _parse_dependencies(data: dict, where: str) -> KeyedContainer:
    container = KeyedContainer()
    for dep_id, entry in data.items():
        container.add(dep_id, _parse_dependency(entry, f"{where}.{dep_id}"))
    return container


def _parse_boms(data: dict, where: str) -> KeyedContainer:
    container = KeyedContainer()
    for bom_id, entry in data.items():
        _entry(entry, f"{where}.{bom_id}")
        try:
            bom = BillOfMaterials(entry.get("group_id"), entry.get("artifact_id"), _version(entry))
            if "order" in entry:
                bom.order = int(entry["order"])
        except (TypeError, ValueError) as ex:
            raise ProjectDescriptorError(f"{where}.{bom_id}: {ex}") from None
        container.add(bom_id, bom)
    return container


def _parse_properties(plain: dict, versions: dict) -> PropertyContainer:
    properties = PropertyContainer()
    for name, value in plain.items():
        if value is not None:
            properties.add(name, text_value(value))
    for name, value in versions.items():
        if value is not None:
            properties.version(name, text_value(value))
    return properties


def _parse_plugins(entries: list, where: str) -> PluginContainer:
    """Parse ``[[build.plugins]]`` entries.

    Entries sharing ``group_id``/``artifact_id`` merge into one plugin, the
    later entry's attributes winning.
    """
    container = PluginContainer()
    for i, entry in enumerate(entries):
        plugin_where = f"{where}[{i}]"
        _entry(entry, plugin_where)
        try:
            plugin = container.add(entry.get("group_id"), entry.get("artifact_id"))
        except ValueError as ex:
            raise ProjectDescriptorError(f"{plugin_where}: {ex}") from None
        if "version" in entry:
            plugin.version = entry["version"]
        if "extensions" in entry:
            plugin.extensions = bool(entry["extensions"])
        if "configuration" in entry:
            plugin.configuration = _parse_configuration(
                entry["configuration"], f"{plugin_where}.configuration")
        for j, ex_entry in enumerate(_array(entry, "executions", plugin_where)):
            _entry(ex_entry, f"{plugin_where}.executions[{j}]")
            if not ex_entry.get("id"):
                raise ProjectDescriptorError(f"{plugin_where}: every execution requires an 'id'")
            plugin.executions.append(Execution(
                id=ex_entry["id"],
                goals=list(ex_entry.get("goals", [])),
                phase=ex_entry.get("phase"),
                configuration=_parse_configuration(
                    ex_entry.get("configuration"), f"{plugin_where}.{ex_entry['id']}"),
            ))
        for j, dep_entry in enumerate(_array(entry, "dependencies", plugin_where)):
            plugin.dependencies.append(
                _parse_dependency(dep_entry, f"{plugin_where}.dependencies[{j}]"))
    return container


def _parse_resources(data: dict, key: str, where: str) -> list[Resource]:
    return [
        _build(Resource, entry, f"{where}.{key}[{i}]")
        for i, entry in enumerate(_array(data, key, where))
    ]


def _parse_build(data: dict, where: str) -> BuildSection:
    return BuildSection(
        source_directory=data.get("source_directory"),
        test_source_directory=data.get("test_source_directory"),
        default_goal=data.get("default_goal"),
        directory=data.get("directory"),
        final_name=data.get("final_name"),
        filters=list(_array(data, "filters", where)),
        resources=_parse_resources(data, "resources", where),
        test_resources=_parse_resources(data, "test_resources", where),
        plugin_management=_parse_plugins(
            _array(data, "plugin_management", where), f"{where}.plugin_management"),
        plugins=_parse_plugins(_array(data, "plugins", where), f"{where}.plugins"),
    )


def _parse_repositories(entries: list, where: str) -> RepositoryContainer:
    container = RepositoryContainer()
    for i, entry in enumerate(entries):
        container.add(_build(Repository, entry, f"{where}[{i}]"))
    return container


def _parse_distribution_management(data: dict, where: str) -> DistributionManagement:
    return DistributionManagement(
        download_url=data.get("download_url"),
        repository=_optional(DeploymentRepository, data, "repository", where),
        snapshot_repository=_optional(DeploymentRepository, data, "snapshot_repository", where),
        site=_optional(Site, data, "site", where),
        relocation=_optional(Relocation, data, "relocation", where),
    )


def _parse_activation(data: dict, where: str) -> Optional[ProfileActivation]:
    if not data:
        return None
    return ProfileActivation(
        active_by_default=data.get("active_by_default"),
        jdk=data.get("jdk"),
        os=_optional(ActivationOS, data, "os", where),
        property=_optional(ActivationProperty, data, "property", where),
        file=_optional(ActivationFile, data, "file", where),
    )


def _parse_reporting(data: dict, where: str) -> Optional[Reporting]:
    if not data:
        return None
    reporting = Reporting(
        exclude_defaults=data.get("exclude_defaults"),
        output_directory=data.get("output_directory"),
    )
    for i, entry in enumerate(_array(data, "plugins", where)):
        plugin_where = f"{where}.plugins[{i}]"
        try:
            plugin = ReportPlugin(
                group_id=entry.get("group_id"),
                artifact_id=entry.get("artifact_id"),
                version=entry.get("version"),
                inherited=entry.get("inherited"),
                configuration=_parse_configuration(
                    entry.get("configuration"), f"{plugin_where}.configuration"),
            )
        except ValueError as ex:
            raise ProjectDescriptorError(f"{plugin_where}: {ex}") from None
        for set_entry in _array(entry, "report_sets", plugin_where):
            plugin.report_sets.append(ReportSet(
                id=set_entry.get("id"),
                inherited=set_entry.get("inherited"),
                reports=list(set_entry.get("reports", [])),
                configuration=_parse_configuration(
                    set_entry.get("configuration"), f"{plugin_where}.report_sets"),
            ))
        reporting.plugins.append(plugin)
    return reporting


def _parse_profile(build: MavenBuild, entry: dict):
    """Parse a ``[[profiles]]`` entry and add it to ``build.profiles``.

    Every section goes through the same helpers as the top level, so a
    profile accepts the same keys as the project plus ``id``,
    ``activation``, ``modules`` and ``reporting``.
    """
    profile_id = entry.get("id")
    if not profile_id:
        raise ProjectDescriptorError("Every profile requires an 'id'")
    where = f"profiles.{profile_id}"
    profile = build.profiles.add(profile_id)
    profile.activation = _parse_activation(_table(entry, "activation", where), f"{where}.activation")
    profile.build = _parse_build(_table(entry, "build", where), f"{where}.build")
    profile.modules = list(_array(entry, "modules", where))
    profile.repositories = _parse_repositories(
        _array(entry, "repositories", where), f"{where}.repositories")
    profile.plugin_repositories = _parse_repositories(
        _array(entry, "plugin_repositories", where), f"{where}.plugin_repositories")
    profile.dependencies = _parse_dependencies(
        _table(entry, "dependencies", where), f"{where}.dependencies")
    profile.reporting = _parse_reporting(_table(entry, "reporting", where), f"{where}.reporting")
    profile.boms = _parse_boms(_table(entry, "boms", where), f"{where}.boms")
    profile.distribution_management = _parse_distribution_management(
        _table(entry, "distribution_management", where), f"{where}.distribution_management")
    profile.properties = _parse_properties(
        _table(entry, "properties", where), _table(entry, "version_properties", where))


def _parse_license(entry: dict, where: str) -> License:
    entry = dict(entry)
    if entry.get("distribution"):
        try:
            entry["distribution"] = LicenseDistribution(entry["distribution"])
        except ValueError:
            raise ProjectDescriptorError(
                f"{where}: unknown distribution '{entry['distribution']}'") from None
    return _build(License, entry, where)


def _parse_settings(data: dict) -> ProjectSettings:
    where = "project"
    settings = ProjectSettings(
        group_id=data.get("group_id"),
        artifact_id=data.get("artifact_id"),
        version=data.get("version"),
        name=data.get("name"),
        description=data.get("description"),
        packaging=data.get("packaging"),
        url=data.get("url"),
        parent=_optional(Parent, data, "parent", where),
        scm=_optional(Scm, data, "scm", where),
    )
    for i, entry in enumerate(_array(data, "licenses", where)):
        settings.licenses.append(_parse_license(entry, f"{where}.licenses[{i}]"))
    for i, entry in enumerate(_array(data, "developers", where)):
        settings.developers.append(_build(Developer, entry, f"{where}.developers[{i}]"))
    return settings


def load_project(data: dict) -> MavenBuild:
    """Build a MavenBuild from an already-decoded descriptor mapping.

    Unknown top-level keys are reported as warnings and ignored.

    Args:
        data: Decoded descriptor (TOML or JSON).

    Returns:
        A fully populated MavenBuild.

    Raises:
        ProjectDescriptorError: If an entry is malformed.
    """
    for key in data:
        if key not in TOP_LEVEL_KEYS:
            print(f"WARNING: Ignoring unknown descriptor section '{key}'", file=sys.stderr)

    where = "descriptor"
    build = MavenBuild(
        settings=_parse_settings(_table(data, "project", where)),
        properties=_parse_properties(
            _table(data, "properties", where), _table(data, "version_properties", where)),
        dependencies=_parse_dependencies(_table(data, "dependencies", where), "dependencies"),
        boms=_parse_boms(_table(data, "boms", where), "boms"),
        build=_parse_build(_table(data, "build", where), "build"),
        repositories=_parse_repositories(_array(data, "repositories", where), "repositories"),
        plugin_repositories=_parse_repositories(
            _array(data, "plugin_repositories", where), "plugin_repositories"),
        distribution_management=_parse_distribution_management(
            _table(data, "distribution_management", where), "distribution_management"),
    )
    for entry in _array(data, "profiles", where):
        _parse_profile(build, entry)
    return build


def parse_project(path: Path) -> MavenBuild:
    """Parse a ``.toml`` or ``.json`` project descriptor into a MavenBuild.

    Args:
        path: Filesystem path to the descriptor.

    Returns:
        A fully populated MavenBuild.

    Raises:
        ProjectDescriptorError: If the file is missing, cannot be decoded, or
            holds an invalid entry.
    """
    path = Path(path)
    if not path.is_file():
        raise ProjectDescriptorError(f"No project descriptor found at {path}")
    try:
        if path.suffix == ".json":
            data = json.loads(path.read_text(encoding="utf-8"))
        else:
            with open(path, "rb") as f:
                data = tomllib.load(f)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as ex:
        raise ProjectDescriptorError(f"Cannot parse {path}: {ex}") from None
    if not isinstance(data, dict):
        raise ProjectDescriptorError(f"{path} must contain a table at the top level")
    return load_project(data)
