"""Platform detection exports."""

from .capability_models import (
    CapabilityDescriptor,
    PackageManagerKind,
    Prerequisite,
    UnsupportedPlatformError,
)
from .detector import detect_capabilities
from .package_strategies import AptStrategy, BrewStrategy, NoneDetected, PackageManagerStrategy

__all__ = [
    "AptStrategy",
    "BrewStrategy",
    "CapabilityDescriptor",
    "NoneDetected",
    "PackageManagerKind",
    "PackageManagerStrategy",
    "Prerequisite",
    "UnsupportedPlatformError",
    "detect_capabilities",
]
