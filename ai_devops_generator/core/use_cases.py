"""
Use-case registry.

Fixed mapping of artifact kind to description and output file extension.
"""

from dataclasses import dataclass
from typing import Dict, List

GENERIC_DESCRIPTION = "Custom DevOps configuration"
GENERIC_EXTENSION = ".txt"


class UseCaseNotFound(KeyError):
    """Raised when a key is not present in the registry."""


@dataclass(frozen=True)
class UseCaseDefinition:
    """A kind of artifact the generator can produce."""
    key: str
    description: str
    file_extension: str


@dataclass(frozen=True)
class UseCaseRegistry:
    """Immutable registry of supported use cases."""
    definitions: Dict[str, UseCaseDefinition]

    def lookup(self, key: str) -> UseCaseDefinition:
        """Get the definition for a use case.

        Args:
            key: Use case identifier, e.g. "Dockerfile"

        Returns:
            UseCaseDefinition for the key

        Raises:
            UseCaseNotFound: If the key is not registered
        """
        if key not in self.definitions:
            raise UseCaseNotFound(f"Unknown use case: {key}")
        return self.definitions[key]

    def describe(self, key: str) -> str:
        """Description for display, with a placeholder for unknown keys."""
        definition = self.definitions.get(key)
        return definition.description if definition else GENERIC_DESCRIPTION

    def file_extension(self, key: str) -> str:
        """Output extension, falling back to a generic one for unknown keys."""
        definition = self.definitions.get(key)
        return definition.file_extension if definition else GENERIC_EXTENSION

    def keys(self) -> List[str]:
        return list(self.definitions)

    def __contains__(self, key: object) -> bool:
        return key in self.definitions


def _registry(*rows) -> UseCaseRegistry:
    return UseCaseRegistry({
        key: UseCaseDefinition(key=key, description=description, file_extension=extension)
        for key, description, extension in rows
    })


# Insertion order is the display order
USE_CASE_REGISTRY = _registry(
    ("Dockerfile", "Container configuration for your application", ".dockerfile"),
    ("GitHub Actions Workflow", "CI/CD pipeline for automated testing & deployment", ".yml"),
    ("Shell Script", "Automation scripts for setup and deployment", ".sh"),
    ("Docker Compose", "Multi-container application orchestration", ".yml"),
    ("Kubernetes Deployment", "Container orchestration manifests", ".yaml"),
    ("Jenkins Pipeline", "CI/CD pipeline for Jenkins", ".groovy"),
    ("Terraform Infrastructure", "Infrastructure as Code (IaC) for AWS/Azure/GCP", ".tf"),
)

DEFAULT_USE_CASE = "Dockerfile"


def lookup(key: str) -> UseCaseDefinition:
    """Look up a use case in the default registry."""
    return USE_CASE_REGISTRY.lookup(key)


def describe(key: str) -> str:
    return USE_CASE_REGISTRY.describe(key)


def file_extension(key: str) -> str:
    return USE_CASE_REGISTRY.file_extension(key)
