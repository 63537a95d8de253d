"""
Conversion of build artifacts and projects into BOM model objects.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, Optional

from packageurl import PackageURL

from .. import __version__
from ..error_handling import ConfigurationError
from ..models import (
    Artifact, Component, ComponentType, Metadata, ProjectDescriptor, Tool
)

logger = logging.getLogger(__name__)

ANALYSIS_PROPERTY = "bom-normalizer:analysis"

PurlFunction = Callable[[Artifact], str]


def generate_package_url(artifact: Artifact) -> str:
    """
    Build the Maven package URL of an artifact.

    The URL is the artifact's identity: the same coordinates always give
    the same string.

    Args:
        artifact: Artifact to identify

    Returns:
        Package URL such as ``pkg:maven/org.acme/core@1.0?type=jar``
    """
    qualifiers: Dict[str, str] = {"type": artifact.type}
    if artifact.classifier:
        qualifiers["classifier"] = artifact.classifier

    return PackageURL(
        type="maven",
        namespace=artifact.group,
        name=artifact.name,
        version=artifact.version,
        qualifiers=qualifiers
    ).to_string()


class ModelConverter:
    """
    Turns artifacts into components and projects into BOM metadata.

    The identity function is injectable; it defaults to Maven package URLs.
    """

    def __init__(self, purl_function: Optional[PurlFunction] = None):
        self.purl_function = purl_function or generate_package_url

    def generate_package_url(self, artifact: Artifact) -> str:
        return self.purl_function(artifact)

    def convert(self, artifact: Artifact, identity: Optional[str] = None) -> Component:
        """
        Create a component from an artifact's descriptive fields.

        Args:
            artifact: Artifact to convert
            identity: Reference key for the component (defaults to its purl)

        Returns:
            New component with an UNKNOWN scope
        """
        purl = self.generate_package_url(artifact)
        return Component(
            bom_ref=identity or purl,
            group=artifact.group,
            name=artifact.name,
            version=artifact.version,
            purl=purl,
            component_type=ComponentType.LIBRARY
        )

    def convert_project(
        self,
        project: ProjectDescriptor,
        analysis: str,
        project_type: str
    ) -> Metadata:
        """
        Build the metadata describing the project itself.

        Args:
            project: Project self-identity and descriptive fields
            analysis: Analysis description, e.g. "makeBom compile+runtime"
            project_type: Component type tag for the project

        Returns:
            Metadata whose component is the project, referenced by its purl

        Raises:
            ConfigurationError: If project_type is not a known component type
        """
        try:
            component_type = ComponentType.from_string(project_type)
        except ValueError as e:
            raise ConfigurationError(
                str(e), config_section="bom", config_key="project_type", cause=e
            ) from e

        purl = self.generate_package_url(project.as_artifact())
        component = Component(
            bom_ref=purl,
            group=project.group,
            name=project.name,
            version=project.version,
            purl=purl,
            component_type=component_type,
            description=project.description
        )

        return Metadata(
            component=component,
            timestamp=datetime.utcnow(),
            tools=(Tool(vendor="bom-normalizer project", name="bom-normalizer", version=__version__),),
            properties=((ANALYSIS_PROPERTY, analysis),)
        )
