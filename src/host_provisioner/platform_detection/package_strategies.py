"""Package-manager strategies selected once by the platform detector."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from host_provisioner.host_shell import HostShell

from .capability_models import PackageManagerKind, Prerequisite, UnsupportedPlatformError

NODESOURCE_SETUP_URL = "https://deb.nodesource.com/setup_{version}.x"


class PackageManagerStrategy(ABC):
    """Common capability set of a system package manager."""

    kind: PackageManagerKind
    bootstrap_prerequisites: tuple[Prerequisite, ...] = ()
    unpinned_runtime_package: str | None = None

    def __init__(self, shell: HostShell) -> None:
        self.shell = shell

    @abstractmethod
    def is_installed(self, package: str) -> bool:
        """Return whether the package manager reports `package` as installed."""

    @abstractmethod
    def install(self, packages: Sequence[str]) -> None:
        """Install `packages`."""

    @abstractmethod
    def update_index(self) -> None:
        """Refresh the package index."""

    @abstractmethod
    def install_runtime(self, version: str) -> None:
        """Install the Node.js runtime pinned to `version`."""

    def after_bootstrap(self) -> None:
        """Hook run once bootstrap packages are present."""


class AptStrategy(PackageManagerStrategy):
    """Debian/Ubuntu hosts."""

    kind = PackageManagerKind.APT
    bootstrap_prerequisites = (
        Prerequisite(binary="curl", package="curl"),
        Prerequisite(binary="mysql", package="mysql-server"),
    )

    def is_installed(self, package: str) -> bool:
        result = self.shell.run(
            ("dpkg-query", "-W", "-f=${Status}", package), check=False
        )
        return result.ok and "install ok installed" in result.stdout

    def install(self, packages: Sequence[str]) -> None:
        self.shell.run(("apt-get", "install", "-y", *packages), privileged=True)

    def update_index(self) -> None:
        self.shell.run(("apt-get", "update", "-y"), privileged=True)

    def install_runtime(self, version: str) -> None:
        setup_script = self.shell.run(
            ("curl", "-fsSL", NODESOURCE_SETUP_URL.format(version=version))
        ).stdout
        self.shell.run(("bash", "-"), input_text=setup_script, privileged=True)
        self.install(("nodejs",))


class BrewStrategy(PackageManagerStrategy):
    """macOS hosts with Homebrew."""

    kind = PackageManagerKind.BREW
    bootstrap_prerequisites = (
        Prerequisite(binary="curl", package="curl"),
        Prerequisite(binary="mysql", package="mysql"),
    )
    unpinned_runtime_package = "node"

    def is_installed(self, package: str) -> bool:
        return self.shell.run(("brew", "list", "--versions", package), check=False).ok

    def install(self, packages: Sequence[str]) -> None:
        self.shell.run(("brew", "install", *packages))

    def update_index(self) -> None:
        self.shell.run(("brew", "update"))

    def install_runtime(self, version: str) -> None:
        formula = f"node@{version}"
        self.install((formula,))
        self.shell.run(("brew", "link", "--overwrite", "--force", formula))

    def after_bootstrap(self) -> None:
        # MySQL may already be running under another service manager.
        self.shell.run(("brew", "services", "start", "mysql"), check=False)


class NoneDetected(PackageManagerStrategy):
    """No supported package manager; only valid when nothing must be installed."""

    kind = PackageManagerKind.NONE

    def is_installed(self, package: str) -> bool:
        return False

    def install(self, packages: Sequence[str]) -> None:
        raise UnsupportedPlatformError(
            f"Cannot install {', '.join(packages)}: no supported package manager found."
        )

    def update_index(self) -> None:
        return None

    def install_runtime(self, version: str) -> None:
        self.install((f"node {version}",))
