"""
Unit tests for the use-case registry.
"""

import pytest

from ai_devops_generator.core.use_cases import (
    GENERIC_DESCRIPTION,
    GENERIC_EXTENSION,
    USE_CASE_REGISTRY,
    UseCaseDefinition,
    UseCaseNotFound,
    describe,
    file_extension,
    lookup,
)


class TestRegistry:
    """Test registry lookups and fallbacks."""

    def test_lookup_known_key(self):
        definition = lookup("GitHub Actions Workflow")
        assert definition == UseCaseDefinition(
            key="GitHub Actions Workflow",
            description="CI/CD pipeline for automated testing & deployment",
            file_extension=".yml"
        )

    def test_lookup_unknown_key_raises(self):
        """Unknown keys are rejected, never defaulted."""
        with pytest.raises(UseCaseNotFound):
            lookup("Ansible Playbook")

    def test_not_found_is_key_error(self):
        with pytest.raises(KeyError):
            lookup("")

    def test_describe_falls_back_to_placeholder(self):
        assert describe("Dockerfile") == "Container configuration for your application"
        assert describe("Ansible Playbook") == GENERIC_DESCRIPTION

    def test_extension_falls_back_to_generic(self):
        assert file_extension("Terraform Infrastructure") == ".tf"
        assert file_extension("Ansible Playbook") == GENERIC_EXTENSION == ".txt"

    def test_registry_contents(self):
        assert USE_CASE_REGISTRY.keys() == [
            "Dockerfile",
            "GitHub Actions Workflow",
            "Shell Script",
            "Docker Compose",
            "Kubernetes Deployment",
            "Jenkins Pipeline",
            "Terraform Infrastructure",
        ]

    def test_definitions_are_immutable(self):
        definition = lookup("Dockerfile")
        with pytest.raises(AttributeError):
            definition.file_extension = ".txt"

    def test_contains(self):
        assert "Shell Script" in USE_CASE_REGISTRY
        assert "shell script" not in USE_CASE_REGISTRY
