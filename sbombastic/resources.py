"""Resource types for registries, images, SBOMs and vulnerability reports."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar

API_GROUP = "sbombastic.rancher.io"
API_VERSION = "v1alpha1"
STORAGE_GROUP = "storage.sbombastic.rancher.io"
STORAGE_VERSION = "v1alpha1"

REGISTRY_LAST_DISCOVERED_AT_ANNOTATION = "sbombastic.rancher.io/last-discovered-at"
REGISTRY_LAST_SCANNED_AT_ANNOTATION = "sbombastic.rancher.io/last-scanned-at"

REGISTRY_DISCOVERING_CONDITION = "Discovering"
REGISTRY_DISCOVERED_CONDITION = "Discovered"

REGISTRY_DISCOVERY_REQUESTED_REASON = "DiscoveryRequested"
REGISTRY_FAILED_TO_REQUEST_DISCOVERY_REASON = "FailedToRequestDiscovery"


class ConditionStatus(str, enum.Enum):
    """Status of a condition."""

    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


@dataclass
class Condition:
    """One observation of an object's state."""

    type: str
    status: ConditionStatus
    reason: str = ""
    message: str = ""
    observed_generation: int = 0
    last_transition_time: datetime | None = None


def _now() -> datetime:
    return datetime.now(timezone.utc)


def set_status_condition(conditions: list[Condition], condition: Condition) -> bool:
    """Add or update the condition of the same type; return whether anything changed."""
    existing = find_status_condition(conditions, condition.type)
    if existing is None:
        if condition.last_transition_time is None:
            condition.last_transition_time = _now()
        conditions.append(condition)
        return True

    changed = False
    if existing.status != condition.status:
        existing.status = condition.status
        existing.last_transition_time = condition.last_transition_time or _now()
        changed = True
    if existing.reason != condition.reason:
        existing.reason = condition.reason
        changed = True
    if existing.message != condition.message:
        existing.message = condition.message
        changed = True
    if existing.observed_generation != condition.observed_generation:
        existing.observed_generation = condition.observed_generation
        changed = True
    return changed


def find_status_condition(conditions: list[Condition], condition_type: str) -> Condition | None:
    """Return the condition with the given type, or None."""
    return next((c for c in conditions if c.type == condition_type), None)


@dataclass
class ObjectMeta:
    """Name, namespace and free-form metadata of an object."""

    name: str = ""
    namespace: str = ""
    annotations: dict[str, str] = field(default_factory=dict)
    labels: dict[str, str] = field(default_factory=dict)


@dataclass
class RegistrySpec:
    """Desired state of a registry.

    An empty repository list means every repository found is scanned.
    """

    uri: str = ""
    repositories: list[str] = field(default_factory=list)
    auth_secret: str = ""
    ca_bundle: str = ""
    insecure: bool = False


@dataclass
class RegistryStatus:
    """Observed state of a registry."""

    conditions: list[Condition] = field(default_factory=list)


@dataclass
class Registry:
    """A container registry to discover and scan."""

    KIND: ClassVar[str] = "Registry"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: RegistrySpec = field(default_factory=RegistrySpec)
    status: RegistryStatus = field(default_factory=RegistryStatus)


@dataclass
class ImageMetadata:
    """Where an image lives and what it is."""

    registry: str = ""
    registry_uri: str = ""
    repository: str = ""
    tag: str = ""
    platform: str = ""
    digest: str = ""


@dataclass
class ImageLayer:
    """A layer of an OCI image; the command is base64 encoded."""

    command: str = ""
    digest: str = ""
    diff_id: str = ""


@dataclass
class ImageSpec:
    """Desired state of an image."""

    image_metadata: ImageMetadata = field(default_factory=ImageMetadata)
    layers: list[ImageLayer] = field(default_factory=list)


@dataclass
class Image:
    """An image found in a registry."""

    KIND: ClassVar[str] = "Image"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ImageSpec = field(default_factory=ImageSpec)

    def get_image_metadata(self) -> ImageMetadata:
        return self.spec.image_metadata


@dataclass
class SBOMSpec:
    """Image metadata and the SPDX document in JSON form."""

    image_metadata: ImageMetadata = field(default_factory=ImageMetadata)
    spdx: Any = field(default_factory=dict)


@dataclass
class SBOM:
    """A software bill of materials of an OCI artifact."""

    KIND: ClassVar[str] = "SBOM"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: SBOMSpec = field(default_factory=SBOMSpec)

    def get_image_metadata(self) -> ImageMetadata:
        return self.spec.image_metadata


@dataclass
class VulnerabilityReportSpec:
    """Image metadata and the vulnerability report in SARIF form."""

    image_metadata: ImageMetadata = field(default_factory=ImageMetadata)
    sarif: Any = field(default_factory=dict)


@dataclass
class VulnerabilityReport:
    """The result of scanning an SBOM for vulnerabilities."""

    KIND: ClassVar[str] = "VulnerabilityReport"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: VulnerabilityReportSpec = field(default_factory=VulnerabilityReportSpec)

    def get_image_metadata(self) -> ImageMetadata:
        return self.spec.image_metadata