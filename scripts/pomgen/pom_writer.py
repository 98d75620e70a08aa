"""``pom.xml`` generation.

Walks a :class:`~pomgen.pom_models.MavenBuild` in the order mandated by the
POM 4.0.0 schema and drives an :class:`~pomgen.xml_writer.IndentingXmlWriter`.
Sections without content are never written, not even as empty tags.
Profiles reuse the same section writers as the top level so the omission
and ordering rules cannot drift between the two.
"""

import io
from pathlib import Path
from typing import Optional

from .mapping import scope_elements, text_value
from .ordering import DependencyComparator, sort_boms, sort_dependencies
from .pom_models import (
    MAVEN_CENTRAL,
    BuildSection,
    Configuration,
    DeploymentRepository,
    DistributionManagement,
    InvalidCoordinateError,
    MavenBuild,
    Profile,
    PropertyContainer,
    RepeatedSetting,
    Reporting,
)
from .xml_writer import IndentingXmlWriter, escape

MODEL_VERSION = "4.0.0"

PROJECT_ATTRIBUTES = {
    "xmlns": "http://maven.apache.org/POM/4.0.0",
    "xmlns:xsi": "http://www.w3.org/2001/XMLSchema-instance",
    "xsi:schemaLocation": "http://maven.apache.org/POM/4.0.0 https://maven.apache.org/xsd/maven-4.0.0.xsd",
}


def _write_single(writer: IndentingXmlWriter, name: str, value):
    """Write ``<name>value</name>``; ``None`` writes nothing."""
    if value is None:
        return
    writer.open_element(name)
    writer.write_text(escape(text_value(value)))
    writer.close_element(name)


def _write_collection(writer: IndentingXmlWriter, name: str, items, write_item):
    """Write ``items`` inside a ``<name>`` wrapper, or nothing when empty.

    ``None`` items are skipped and do not count toward emptiness.
    """
    items = [item for item in items if item is not None]
    if not items:
        return
    writer.open_element(name)
    for item in items:
        write_item(writer, item)
    writer.close_element(name)


def _write_entries(writer: IndentingXmlWriter, name: str, entries):
    """Write ``(key, value)`` pairs as ``<key>value</key>``; ``None`` values are dropped."""
    present = [(key, value) for key, value in entries if value is not None]
    _write_collection(writer, name, present, lambda w, item: _write_single(w, item[0], item[1]))


def _write_values(writer: IndentingXmlWriter, name: str, item_name: str, values):
    _write_collection(writer, name, values, lambda w, v: _write_single(w, item_name, v))


def _require_coordinates(kind: str, entity):
    if not entity.group_id or not entity.artifact_id:
        raise InvalidCoordinateError(f"{kind} is missing groupId or artifactId: {entity!r}")


class PomWriter:
    """Serialize a :class:`MavenBuild` to ``pom.xml``.

    Holds configuration only; each call writes through its own sink, so one
    instance may be shared across threads.

    Args:
        dependency_order: ``(a, b) -> int`` comparator for dependency lists.
            Replaces the default tiered order for dependencies only.
        xml_declaration: Whether to write the ``<?xml ...?>`` prologue.
        indent: Indentation unit.
    """

    def __init__(
        self,
        dependency_order: Optional[DependencyComparator] = None,
        xml_declaration: bool = True,
        indent: str = "    ",
    ):
        self.dependency_order = dependency_order
        self.xml_declaration = xml_declaration
        self.indent = indent

    def to_xml(self, build: MavenBuild) -> str:
        """Return the complete ``pom.xml`` content as a string."""
        out = io.StringIO()
        self.write_to(IndentingXmlWriter(out, self.indent), build)
        return out.getvalue()

    def write_file(self, build: MavenBuild, path: Path):
        """Write ``pom.xml`` to ``path``, creating parent directories as needed.

        The file is closed on every exit path. On failure it may hold
        partial output; callers should discard it.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="\n") as out:
            self.write_to(IndentingXmlWriter(out, self.indent), build)

    def write_to(self, writer: IndentingXmlWriter, build: MavenBuild):
        """Write the ``<project>`` document for ``build`` to ``writer``."""
        settings = build.settings
        if self.xml_declaration:
            writer.declaration()
        writer.open_element("project", {k: escape(v) for k, v in PROJECT_ATTRIBUTES.items()})
        _write_single(writer, "modelVersion", MODEL_VERSION)

        # ── Parent ──
        if settings.parent is not None:
            self._write_parent(writer, settings.parent)

        # ── Coordinates & description ──
        writer.section_break()
        _write_single(writer, "groupId", settings.group_id)
        _write_single(writer, "artifactId", settings.artifact_id)
        _write_single(writer, "version", settings.effective_version)
        if settings.packaging and settings.packaging != "jar":
            _write_single(writer, "packaging", settings.packaging)
        _write_single(writer, "name", settings.name)
        _write_single(writer, "description", settings.description)

        _write_collection(writer, "licenses", settings.licenses, self._write_license)
        _write_collection(writer, "developers", settings.developers, self._write_developer)
        if settings.scm is not None and not settings.scm.is_empty():
            self._write_scm(writer, settings.scm)
        _write_single(writer, "url", settings.url)

        writer.section_break()
        self._write_properties(writer, build.properties)
        writer.section_break()
        self._write_dependency_management(writer, build.boms)
        writer.section_break()
        self._write_dependencies(writer, build.dependencies)
        writer.section_break()
        self._write_build(writer, build.build)
        writer.section_break()
        self._write_repositories(writer, build.repositories, "repositories", "repository")
        self._write_repositories(writer, build.plugin_repositories, "pluginRepositories", "pluginRepository")
        writer.section_break()
        self._write_distribution_management(writer, build.distribution_management)
        writer.section_break()
        _write_collection(writer, "profiles", build.profiles, self._write_profile)

        writer.close_element("project")
        writer.flush()

    # ── Project metadata ─────────────────────────────────────────────────────

    def _write_parent(self, writer, parent):
        _require_coordinates("Parent", parent)
        writer.section_break()
        writer.open_element("parent")
        _write_single(writer, "groupId", parent.group_id)
        _write_single(writer, "artifactId", parent.artifact_id)
        _write_single(writer, "version", parent.version)
        if parent.relative_path is None:
            writer.empty_element("relativePath")
        else:
            _write_single(writer, "relativePath", parent.relative_path)
        writer.close_element("parent")

    def _write_license(self, writer, license):
        writer.open_element("license")
        _write_single(writer, "name", license.name)
        _write_single(writer, "url", license.url)
        if license.distribution is not None:
            _write_single(writer, "distribution", license.distribution.value)
        _write_single(writer, "comments", license.comments)
        writer.close_element("license")

    def _write_developer(self, writer, developer):
        writer.open_element("developer")
        _write_single(writer, "id", developer.id)
        _write_single(writer, "name", developer.name)
        _write_single(writer, "email", developer.email)
        _write_single(writer, "url", developer.url)
        _write_single(writer, "organization", developer.organization)
        _write_single(writer, "organizationUrl", developer.organization_url)
        _write_values(writer, "roles", "role", developer.roles)
        _write_single(writer, "timezone", developer.timezone)
        _write_entries(writer, "properties", developer.properties.items())
        writer.close_element("developer")

    def _write_scm(self, writer, scm):
        writer.open_element("scm")
        _write_single(writer, "connection", scm.connection)
        _write_single(writer, "developerConnection", scm.developer_connection)
        _write_single(writer, "tag", scm.tag)
        _write_single(writer, "url", scm.url)
        writer.close_element("scm")

    def _write_properties(self, writer, properties: PropertyContainer):
        _write_entries(writer, "properties", properties.items())

    # ── Dependencies ─────────────────────────────────────────────────────────

    def _write_dependencies(self, writer, dependencies):
        ordered = sort_dependencies(dependencies, self.dependency_order)
        _write_collection(writer, "dependencies", ordered, self._write_dependency)

    def _write_dependency(self, writer, dependency):
        _require_coordinates("Dependency", dependency)
        scope, optional = scope_elements(dependency.scope)
        writer.open_element("dependency")
        _write_single(writer, "groupId", dependency.group_id)
        _write_single(writer, "artifactId", dependency.artifact_id)
        if dependency.version is not None:
            _write_single(writer, "version", dependency.version.render())
        _write_single(writer, "scope", scope)
        _write_single(writer, "classifier", dependency.classifier)
        if optional or dependency.optional:
            _write_single(writer, "optional", True)
        _write_single(writer, "type", dependency.dep_type)
        _write_collection(writer, "exclusions", dependency.exclusions, self._write_exclusion)
        writer.close_element("dependency")

    def _write_exclusion(self, writer, exclusion):
        writer.open_element("exclusion")
        _write_single(writer, "groupId", exclusion.group_id)
        _write_single(writer, "artifactId", exclusion.artifact_id)
        writer.close_element("exclusion")

    def _write_dependency_management(self, writer, boms):
        ordered = sort_boms(boms)
        if not ordered:
            return
        writer.open_element("dependencyManagement")
        _write_collection(writer, "dependencies", ordered, self._write_bom)
        writer.close_element("dependencyManagement")

    def _write_bom(self, writer, bom):
        _require_coordinates("BillOfMaterials", bom)
        writer.open_element("dependency")
        _write_single(writer, "groupId", bom.group_id)
        _write_single(writer, "artifactId", bom.artifact_id)
        if bom.version is not None:
            _write_single(writer, "version", bom.version.render())
        _write_single(writer, "type", "pom")
        _write_single(writer, "scope", "import")
        writer.close_element("dependency")

    # ── Build ────────────────────────────────────────────────────────────────

    def _write_build(self, writer, build: BuildSection):
        if build.is_empty():
            return
        writer.open_element("build")
        _write_single(writer, "sourceDirectory", build.source_directory)
        _write_single(writer, "testSourceDirectory", build.test_source_directory)
        _write_single(writer, "defaultGoal", build.default_goal)
        _write_single(writer, "directory", build.directory)
        _write_single(writer, "finalName", build.final_name)
        _write_values(writer, "filters", "filter", build.filters)
        _write_collection(writer, "resources", build.resources,
                          lambda w, r: self._write_resource(w, "resource", r))
        _write_collection(writer, "testResources", build.test_resources,
                          lambda w, r: self._write_resource(w, "testResource", r))
        if not build.plugin_management.is_empty():
            writer.open_element("pluginManagement")
            _write_collection(writer, "plugins", build.plugin_management, self._write_plugin)
            writer.close_element("pluginManagement")
        _write_collection(writer, "plugins", build.plugins, self._write_plugin)
        writer.close_element("build")

    def _write_resource(self, writer, name, resource):
        writer.open_element(name)
        _write_single(writer, "directory", resource.directory)
        _write_single(writer, "targetPath", resource.target_path)
        _write_single(writer, "filtering", resource.filtering)
        _write_values(writer, "includes", "include", resource.includes)
        _write_values(writer, "excludes", "exclude", resource.excludes)
        writer.close_element(name)

    def _write_plugin(self, writer, plugin):
        _require_coordinates("Plugin", plugin)
        writer.open_element("plugin")
        _write_single(writer, "groupId", plugin.group_id)
        _write_single(writer, "artifactId", plugin.artifact_id)
        _write_single(writer, "version", plugin.version)
        if plugin.extensions:
            _write_single(writer, "extensions", True)
        self._write_configuration(writer, plugin.configuration)
        _write_collection(writer, "executions", plugin.executions, self._write_execution)
        _write_collection(writer, "dependencies", plugin.dependencies, self._write_dependency)
        writer.close_element("plugin")

    def _write_execution(self, writer, execution):
        writer.open_element("execution")
        _write_single(writer, "id", execution.id)
        _write_single(writer, "phase", execution.phase)
        _write_values(writer, "goals", "goal", execution.goals)
        self._write_configuration(writer, execution.configuration)
        writer.close_element("execution")

    def _write_configuration(self, writer, configuration: Optional[Configuration]):
        if configuration is None or configuration.is_empty():
            return
        writer.open_element("configuration")
        self._write_settings(writer, configuration)
        writer.close_element("configuration")

    def _write_settings(self, writer, configuration: Configuration):
        for setting in configuration.settings:
            if setting.is_empty():
                continue
            value = setting.value
            if isinstance(value, Configuration):
                writer.open_element(setting.name)
                self._write_settings(writer, value)
                writer.close_element(setting.name)
            elif isinstance(value, RepeatedSetting):
                writer.open_element(setting.name)
                for item in value.values:
                    if isinstance(item, Configuration):
                        if item.is_empty():
                            continue
                        writer.open_element(value.item_name)
                        self._write_settings(writer, item)
                        writer.close_element(value.item_name)
                    else:
                        _write_single(writer, value.item_name, item)
                writer.close_element(setting.name)
            else:
                _write_single(writer, setting.name, value)

    # ── Repositories & distribution ──────────────────────────────────────────

    def _write_repositories(self, writer, repositories, name, item_name):
        kept = [r for r in repositories if r.id != MAVEN_CENTRAL.id]
        _write_collection(writer, name, kept, lambda w, r: self._write_repository(w, item_name, r))

    def _write_repository(self, writer, name, repository):
        writer.open_element(name)
        _write_single(writer, "id", repository.id)
        _write_single(writer, "name", repository.name)
        _write_single(writer, "url", repository.url)
        for policy, enabled in (("releases", repository.releases_enabled),
                                ("snapshots", repository.snapshots_enabled)):
            if enabled is not None:
                writer.open_element(policy)
                _write_single(writer, "enabled", enabled)
                writer.close_element(policy)
        writer.close_element(name)

    def _write_distribution_management(self, writer, distribution: DistributionManagement):
        if distribution.is_empty():
            return
        writer.open_element("distributionManagement")
        _write_single(writer, "downloadUrl", distribution.download_url)
        self._write_deployment_repository(writer, "repository", distribution.repository)
        self._write_deployment_repository(writer, "snapshotRepository", distribution.snapshot_repository)
        site = distribution.site
        if site is not None and not site.is_empty():
            writer.open_element("site")
            _write_single(writer, "id", site.id)
            _write_single(writer, "name", site.name)
            _write_single(writer, "url", site.url)
            writer.close_element("site")
        relocation = distribution.relocation
        if relocation is not None and not relocation.is_empty():
            writer.open_element("relocation")
            _write_single(writer, "groupId", relocation.group_id)
            _write_single(writer, "artifactId", relocation.artifact_id)
            _write_single(writer, "version", relocation.version)
            _write_single(writer, "message", relocation.message)
            writer.close_element("relocation")
        writer.close_element("distributionManagement")

    def _write_deployment_repository(self, writer, name, repository: Optional[DeploymentRepository]):
        if repository is None or repository.is_empty():
            return
        writer.open_element(name)
        _write_single(writer, "id", repository.id)
        _write_single(writer, "name", repository.name)
        _write_single(writer, "url", repository.url)
        _write_single(writer, "layout", repository.layout)
        _write_single(writer, "uniqueVersion", repository.unique_version)
        writer.close_element(name)

    # ── Reporting ────────────────────────────────────────────────────────────

    def _write_reporting(self, writer, reporting: Optional[Reporting]):
        if reporting is None or reporting.is_empty():
            return
        writer.open_element("reporting")
        _write_single(writer, "excludeDefaults", reporting.exclude_defaults)
        _write_single(writer, "outputDirectory", reporting.output_directory)
        _write_collection(writer, "plugins", reporting.plugins, self._write_report_plugin)
        writer.close_element("reporting")

    def _write_report_plugin(self, writer, plugin):
        _require_coordinates("ReportPlugin", plugin)
        writer.open_element("plugin")
        _write_single(writer, "groupId", plugin.group_id)
        _write_single(writer, "artifactId", plugin.artifact_id)
        _write_single(writer, "version", plugin.version)
        _write_single(writer, "inherited", plugin.inherited)
        self._write_configuration(writer, plugin.configuration)
        _write_collection(writer, "reportSets", plugin.report_sets, self._write_report_set)
        writer.close_element("plugin")

    def _write_report_set(self, writer, report_set):
        writer.open_element("reportSet")
        _write_single(writer, "id", report_set.id)
        _write_single(writer, "inherited", report_set.inherited)
        _write_values(writer, "reports", "report", report_set.reports)
        self._write_configuration(writer, report_set.configuration)
        writer.close_element("reportSet")

    # ── Profiles ─────────────────────────────────────────────────────────────

    def _write_profile(self, writer, profile: Profile):
        writer.open_element("profile")
        _write_single(writer, "id", profile.id)
        self._write_activation(writer, profile.activation)
        self._write_build(writer, profile.build)
        _write_values(writer, "modules", "module", profile.modules)
        self._write_repositories(writer, profile.repositories, "repositories", "repository")
        self._write_repositories(writer, profile.plugin_repositories, "pluginRepositories", "pluginRepository")
        self._write_dependencies(writer, profile.dependencies)
        self._write_reporting(writer, profile.reporting)
        self._write_dependency_management(writer, profile.boms)
        self._write_distribution_management(writer, profile.distribution_management)
        self._write_properties(writer, profile.properties)
        writer.close_element("profile")

    def _write_activation(self, writer, activation):
        if activation is None or activation.is_empty():
            return
        writer.open_element("activation")
        _write_single(writer, "activeByDefault", activation.active_by_default)
        _write_single(writer, "jdk", activation.jdk)
        if activation.os is not None and not activation.os.is_empty():
            writer.open_element("os")
            _write_single(writer, "name", activation.os.name)
            _write_single(writer, "family", activation.os.family)
            _write_single(writer, "arch", activation.os.arch)
            _write_single(writer, "version", activation.os.version)
            writer.close_element("os")
        if activation.property is not None and not activation.property.is_empty():
            writer.open_element("property")
            _write_single(writer, "name", activation.property.name)
            _write_single(writer, "value", activation.property.value)
            writer.close_element("property")
        if activation.file is not None and not activation.file.is_empty():
            writer.open_element("file")
            _write_single(writer, "missing", activation.file.missing)
            _write_single(writer, "exists", activation.file.exists)
            writer.close_element("file")
        writer.close_element("activation")


def generate_pom(build: MavenBuild, **options) -> str:
    """Generate ``pom.xml`` content for ``build``.

    Args:
        build: The populated build model.
        **options: Forwarded to :class:`PomWriter`.

    Returns:
        Complete ``pom.xml`` file content as a string.
    """
    return PomWriter(**options).to_xml(build)
