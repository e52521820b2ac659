"""Library for extracting dependencies from ArgoCD manifests.

Each ArgoCD `Application` (or the Application template of an `ApplicationSet`)
has one or more sources. A source is either a Helm chart, published in a Helm
repository or an OCI registry, or a git repository that may carry kustomize
image overrides. Every source is turned into a `PackageDependency` with the
datasource that can be used to look up newer versions.

Example usage:

```python
from argocd_deps import extract

result = extract.extract_package_file(content, "apps/podinfo.yaml")
if result:
    for dep in result.deps:
        print(f"Found {dep.datasource} dependency: {dep.dep_name}")
```
"""

import logging
import re

import yaml

from . import datasource
from .config import ExtractConfig
from .image import split_image_parts
from .manifest import (
    Application,
    ApplicationDefinition,
    ApplicationSource,
    ApplicationSpec,
    PackageDependency,
    PackageFileContent,
    parse_definitions,
)

__all__ = [
    "extract_package_file",
    "is_argocd_manifest",
]

_LOGGER = logging.getLogger(__name__)

# Cheap check for an ArgoCD apiVersion before parsing the yaml
FILE_TEST_RE = re.compile(r"\s*apiVersion:\s*'?\"?argoproj\.io/")

# Kustomize image override `name=image[:tag]`
KUSTOMIZE_IMAGE_RE = re.compile(r"(.+)=(.+)")

OCI_SCHEME = "oci://"
SCHEME_SEPARATOR = "://"


def is_argocd_manifest(content: str) -> bool:
    """Return True if the content references an ArgoCD apiVersion."""
    return FILE_TEST_RE.search(content) is not None


def select_spec(definition: ApplicationDefinition) -> ApplicationSpec:
    """Return the ApplicationSpec of a definition."""
    if isinstance(definition, Application):
        return definition.spec
    return definition.template.spec


def process_kustomize_image(image: str) -> PackageDependency | None:
    """Return the image dependency of a kustomize image override."""
    if not (match := KUSTOMIZE_IMAGE_RE.search(image)):
        return None
    if len(match.groups()) != 2:
        return None
    parts = split_image_parts(match.group(2))
    return PackageDependency(
        dep_name=parts.dep_name,
        current_value=parts.current_value,
        current_digest=parts.current_digest,
        replace_string=parts.replace_string,
        datasource=datasource.DOCKER,
    )


def process_source(source: ApplicationSource) -> list[PackageDependency]:
    """Return the dependencies referenced by a single application source."""
    if source.chart:
        # Assume an OCI registry when the repoURL has no explicit scheme
        if source.repo_url.startswith(OCI_SCHEME) or (
            SCHEME_SEPARATOR not in source.repo_url
        ):
            registry_url = source.repo_url.replace(OCI_SCHEME, "", 1).rstrip("/")
            return [
                PackageDependency(
                    dep_name=f"{registry_url}/{source.chart}",
                    current_value=source.target_revision,
                    datasource=datasource.DOCKER,
                )
            ]
        return [
            PackageDependency(
                dep_name=source.chart,
                registry_urls=[source.repo_url],
                current_value=source.target_revision,
                datasource=datasource.HELM,
            )
        ]

    deps = [
        PackageDependency(
            dep_name=source.repo_url,
            current_value=source.target_revision,
            datasource=datasource.GIT_TAGS,
        )
    ]
    if source.kustomize and source.kustomize.images:
        deps.extend(
            dep
            for image in source.kustomize.images
            if (dep := process_kustomize_image(image)) is not None
        )
    return deps


def process_app_spec(definition: ApplicationDefinition) -> list[PackageDependency]:
    """Return the dependencies of all sources of a definition.

    The singular `source` comes first, followed by each entry of `sources`.
    """
    spec = select_spec(definition)
    deps: list[PackageDependency] = []
    if spec.source:
        deps.extend(process_source(spec.source))
    for source in spec.sources or ():
        deps.extend(process_source(source))
    return deps


def extract_package_file(
    content: str,
    package_file: str,
    config: ExtractConfig | None = None,  # pylint: disable=unused-argument
) -> PackageFileContent | None:
    """Extract the dependencies from the contents of a single file.

    Returns None when the file is not an ArgoCD manifest, is not valid yaml, or
    does not reference any dependencies.
    """
    if not is_argocd_manifest(content):
        _LOGGER.debug(
            "Skip file %s as no argoproj.io apiVersion could be found in matched file",
            package_file,
        )
        return None

    try:
        definitions = parse_definitions(content)
    except yaml.YAMLError as err:
        _LOGGER.debug("Failed to parse ArgoCD definition %s: %s", package_file, err)
        return None

    deps = [dep for definition in definitions for dep in process_app_spec(definition)]
    if not deps:
        return None
    return PackageFileContent(deps=deps)
