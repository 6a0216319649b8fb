"""Architecture tests using pytest-archon.

These tests enforce DDD architectural boundaries between layers
within the directory bounded context and the shared kernel.
"""

from pytest_archon import archrule


class TestDirectoryDomainLayerBoundaries:
    """Tests that the domain layer has no forbidden dependencies."""

    def test_domain_does_not_import_infrastructure(self):
        """Domain layer should not depend on infrastructure.

        Users and roles are plain aggregates; they do not know how they
        are stored in the directory.
        """
        (
            archrule("domain_no_infrastructure")
            .match("directory.domain*")
            .should_not_import("directory.infrastructure*")
            .check("directory")
        )

    def test_domain_does_not_import_application(self):
        (
            archrule("domain_no_application")
            .match("directory.domain*")
            .should_not_import("directory.application*")
            .check("directory")
        )

    def test_domain_does_not_import_ldap(self):
        """Domain objects should be independent of the directory client."""
        (
            archrule("domain_no_ldap")
            .match("directory.domain*")
            .should_not_import("ldap3*")
            .check("directory")
        )


class TestDirectoryPortsLayerBoundaries:
    """Tests that the ports layer has no forbidden dependencies."""

    def test_ports_does_not_import_infrastructure(self):
        """Ports define interfaces and must not know the LDAP implementation."""
        (
            archrule("ports_no_infrastructure")
            .match("directory.ports*")
            .should_not_import("directory.infrastructure*")
            .check("directory")
        )

    def test_ports_does_not_import_application(self):
        (
            archrule("ports_no_application")
            .match("directory.ports*")
            .should_not_import("directory.application*")
            .check("directory")
        )


class TestDirectoryApplicationLayerBoundaries:
    """Tests that application services depend on ports only."""

    def test_application_does_not_import_infrastructure(self):
        """Services talk to repositories through the port protocols."""
        (
            archrule("application_no_infrastructure")
            .match("directory.application*")
            .should_not_import("directory.infrastructure*", "ldap3*")
            .check("directory")
        )


class TestSharedKernelBoundaries:
    """Tests that the shared kernel stays independent of bounded contexts."""

    def test_shared_kernel_does_not_import_directory(self):
        (
            archrule("shared_kernel_no_directory")
            .match("shared_kernel*")
            .should_not_import("directory*")
            .check("shared_kernel")
        )
