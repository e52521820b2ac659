"""Representation of ArgoCD manifests and the dependencies extracted from them.

ArgoCD objects are parsed from raw yaml documents into typed objects with a
best-effort schema check. A document that does not look like an ArgoCD
`Application` or `ApplicationSet` is rejected with an `InputException` so that
callers may skip it and keep going with the rest of the file.
"""

from dataclasses import dataclass, field
import logging
from typing import Any, ClassVar, Union

import yaml
from mashumaro import DataClassDictMixin, field_options
from mashumaro.config import BaseConfig

from .exceptions import InputException

__all__ = [
    "parse_definitions",
    "parse_definition",
    "ApplicationDefinition",
    "Application",
    "ApplicationSet",
    "ApplicationSpec",
    "ApplicationSource",
    "ApplicationKustomize",
    "PackageDependency",
    "PackageFileContent",
]

_LOGGER = logging.getLogger(__name__)


# Match a prefix of apiVersion to ensure we have the right type of object.
# We don't check specific versions for forward compatibility on upgrade.
ARGOCD_DOMAIN = "argoproj.io/"
APPLICATION_KIND = "Application"
APPLICATION_SET_KIND = "ApplicationSet"


@dataclass
class BaseManifest(DataClassDictMixin):
    """Base class for all manifest objects."""

    class Config(BaseConfig):
        omit_none = True
        serialize_by_alias = True


def _optional_str(doc: dict[str, Any], key: str, obj: str) -> str | None:
    """Return an optional string field.

    Unquoted yaml numbers are rejected, as the loaded value may not match the
    text of the file (`1.10` loads as `1.1`).
    """
    if (value := doc.get(key)) is None:
        return None
    if not isinstance(value, str):
        raise InputException(f"Invalid {obj} field {key} expected string: {doc}")
    return value


@dataclass
class ApplicationKustomize(BaseManifest):
    """Kustomize options of an application source."""

    images: list[str] | None = None
    """Image overrides in the form `name=image[:tag]`."""

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "ApplicationKustomize":
        """Parse the kustomize options of an application source."""
        if not isinstance(doc, dict):
            raise InputException(f"Invalid {cls.__name__} expected mapping: {doc}")
        if (images := doc.get("images")) is None:
            return cls()
        if not isinstance(images, list):
            raise InputException(f"Invalid {cls.__name__} images expected list: {doc}")
        return cls(images=[image for image in images if isinstance(image, str)])


@dataclass
class ApplicationSource(BaseManifest):
    """A single deployment source of an application."""

    repo_url: str = field(metadata=field_options(alias="repoURL"))
    """Git repository, Helm repository or OCI registry of the source."""

    target_revision: str | None = field(
        metadata=field_options(alias="targetRevision"), default=None
    )
    """The revision, tag or chart version to deploy."""

    chart: str | None = None
    """The Helm chart name, only set for Helm sources."""

    kustomize: ApplicationKustomize | None = None
    """Kustomize options when the source is a kustomization in a git repo."""

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "ApplicationSource":
        """Parse an ApplicationSource from a raw source object."""
        if not isinstance(doc, dict):
            raise InputException(f"Invalid {cls.__name__} expected mapping: {doc}")
        if not (repo_url := doc.get("repoURL")) or not isinstance(repo_url, str):
            raise InputException(f"Invalid {cls.__name__} missing repoURL: {doc}")
        kustomize: ApplicationKustomize | None = None
        if (kustomize_doc := doc.get("kustomize")) is not None:
            kustomize = ApplicationKustomize.parse_doc(kustomize_doc)
        return cls(
            repo_url=repo_url,
            target_revision=_optional_str(doc, "targetRevision", cls.__name__),
            chart=_optional_str(doc, "chart", cls.__name__),
            kustomize=kustomize,
        )


@dataclass
class ApplicationSpec(BaseManifest):
    """The sources of an application."""

    source: ApplicationSource | None = None
    """A single source of the application."""

    sources: list[ApplicationSource] | None = None
    """Multiple sources of the application."""

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "ApplicationSpec":
        """Parse an ApplicationSpec from a raw spec object.

        Invalid entries of `sources` are dropped individually, while an invalid
        `source` invalidates the whole spec.
        """
        if not isinstance(doc, dict):
            raise InputException(f"Invalid {cls.__name__} expected mapping: {doc}")
        source: ApplicationSource | None = None
        if source_doc := doc.get("source"):
            source = ApplicationSource.parse_doc(source_doc)
        sources: list[ApplicationSource] | None = None
        if (sources_doc := doc.get("sources")) is not None:
            if not isinstance(sources_doc, list):
                raise InputException(
                    f"Invalid {cls.__name__} sources expected list: {doc}"
                )
            sources = []
            for subdoc in sources_doc:
                try:
                    sources.append(ApplicationSource.parse_doc(subdoc))
                except InputException as err:
                    _LOGGER.debug("Skipping invalid source: %s", err)
        return cls(source=source, sources=sources)


@dataclass
class Application(BaseManifest):
    """A representation of an ArgoCD Application."""

    kind: ClassVar[str] = APPLICATION_KIND
    """The kind of the object."""

    spec: ApplicationSpec
    """The sources of the application."""

    name: str | None = None
    """The name of the Application."""

    namespace: str | None = None
    """The namespace of the Application."""

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "Application":
        """Parse an Application from a kubernetes resource object."""
        if not (spec := doc.get("spec")):
            raise InputException(f"Invalid {cls.__name__} missing spec: {doc}")
        metadata = doc.get("metadata") or {}
        return cls(
            spec=ApplicationSpec.parse_doc(spec),
            name=metadata.get("name"),
            namespace=metadata.get("namespace"),
        )


@dataclass
class ApplicationTemplate(BaseManifest):
    """The Application template of an ApplicationSet."""

    spec: ApplicationSpec
    """The spec of the generated applications."""


@dataclass
class ApplicationSet(BaseManifest):
    """A representation of an ArgoCD ApplicationSet."""

    kind: ClassVar[str] = APPLICATION_SET_KIND
    """The kind of the object."""

    template: ApplicationTemplate
    """The template of the generated applications."""

    name: str | None = None
    """The name of the ApplicationSet."""

    namespace: str | None = None
    """The namespace of the ApplicationSet."""

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "ApplicationSet":
        """Parse an ApplicationSet from a kubernetes resource object."""
        if not (spec := doc.get("spec")) or not isinstance(spec, dict):
            raise InputException(f"Invalid {cls.__name__} missing spec: {doc}")
        if not (template := spec.get("template")) or not isinstance(template, dict):
            raise InputException(
                f"Invalid {cls.__name__} missing spec.template: {doc}"
            )
        if not (template_spec := template.get("spec")):
            raise InputException(
                f"Invalid {cls.__name__} missing spec.template.spec: {doc}"
            )
        metadata = doc.get("metadata") or {}
        return cls(
            template=ApplicationTemplate(spec=ApplicationSpec.parse_doc(template_spec)),
            name=metadata.get("name"),
            namespace=metadata.get("namespace"),
        )


ApplicationDefinition = Union[Application, ApplicationSet]


def parse_definition(doc: Any) -> ApplicationDefinition:
    """Parse a raw yaml document into an ApplicationDefinition."""
    if not isinstance(doc, dict):
        raise InputException(f"Invalid object expected mapping: {doc}")
    if not (api_version := doc.get("apiVersion")) or not isinstance(api_version, str):
        raise InputException(f"Invalid object missing apiVersion: {doc}")
    if not api_version.startswith(ARGOCD_DOMAIN):
        raise InputException(f"Invalid object expected '{ARGOCD_DOMAIN}': {doc}")
    if not isinstance(metadata := doc.get("metadata", {}), dict):
        raise InputException(f"Invalid object metadata expected mapping: {doc}")
    kind = doc.get("kind")
    if kind == APPLICATION_KIND:
        return Application.parse_doc(doc)
    if kind == APPLICATION_SET_KIND:
        return ApplicationSet.parse_doc(doc)
    raise InputException(f"Unsupported kind '{kind}' in {metadata.get('name')}")


def parse_definitions(content: str) -> list[ApplicationDefinition]:
    """Parse all ArgoCD definitions from a multi-document yaml string.

    Documents that fail to parse as an ApplicationDefinition are skipped. A
    `yaml.YAMLError` is raised when the content is not valid yaml.
    """
    definitions: list[ApplicationDefinition] = []
    for doc in yaml.safe_load_all(content):
        if not doc:
            continue
        try:
            definitions.append(parse_definition(doc))
        except InputException as err:
            _LOGGER.debug("Skipping document: %s", err)
    return definitions


@dataclass
class PackageDependency(BaseManifest):
    """A dependency reference found in a package file."""

    dep_name: str = field(metadata=field_options(alias="depName"))
    """The name of the package, image or repository."""

    datasource: str
    """The datasource used to look up versions of the dependency."""

    current_value: str | None = field(
        metadata=field_options(alias="currentValue"), default=None
    )
    """The version currently referenced, if any."""

    current_digest: str | None = field(
        metadata=field_options(alias="currentDigest"), default=None
    )
    """The image digest currently referenced, if any."""

    registry_urls: list[str] | None = field(
        metadata=field_options(alias="registryUrls"), default=None
    )
    """The registries to query, only set for Helm repositories."""

    replace_string: str | None = field(
        metadata=field_options(alias="replaceString"), default=None
    )
    """The exact string in the file that references the dependency."""


@dataclass
class PackageFileContent(BaseManifest):
    """The dependencies extracted from a single package file."""

    deps: list[PackageDependency]
    """Dependencies in the order they appear in the file."""

    package_file: str | None = field(
        metadata=field_options(alias="packageFile"), default=None
    )
    """The file the dependencies were extracted from."""
