"""Group/version bookkeeping and field selector conversion for the storage API."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field

from .resources import (
    API_GROUP,
    API_VERSION,
    SBOM,
    STORAGE_GROUP,
    STORAGE_VERSION,
    Image,
    VulnerabilityReport,
)

FieldLabelConversionFunc = Callable[[str, str], "tuple[str, str]"]


@dataclass(frozen=True)
class GroupKind:
    group: str
    kind: str

    def __str__(self) -> str:
        return f"{self.kind}.{self.group}" if self.group else self.kind


@dataclass(frozen=True)
class GroupResource:
    group: str
    resource: str

    def __str__(self) -> str:
        return f"{self.resource}.{self.group}" if self.group else self.resource


@dataclass(frozen=True)
class GroupVersion:
    group: str
    version: str

    def with_kind(self, kind: str) -> GroupKind:
        return GroupKind(self.group, kind)

    def with_resource(self, resource: str) -> GroupResource:
        return GroupResource(self.group, resource)

    def __str__(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version


INTERNAL_VERSION = "__internal"

SCHEME_GROUP_VERSION = GroupVersion(STORAGE_GROUP, STORAGE_VERSION)
INTERNAL_GROUP_VERSION = GroupVersion(STORAGE_GROUP, INTERNAL_VERSION)
REGISTRY_GROUP_VERSION = GroupVersion(API_GROUP, API_VERSION)

_IMAGE_METADATA_FIELDS = frozenset(
    {
        "metadata.name",
        "metadata.namespace",
        "spec.imageMetadata.registry",
        "spec.imageMetadata.registryURI",
        "spec.imageMetadata.repository",
        "spec.imageMetadata.tag",
        "spec.imageMetadata.platform",
        "spec.imageMetadata.digest",
    }
)

_STORAGE_TYPES = (Image, SBOM, VulnerabilityReport)


class FieldSelectorError(ValueError):
    """A field selector names a field that cannot be selected on."""


def kind(kind: str) -> GroupKind:
    """Qualify a kind with the storage group."""
    return SCHEME_GROUP_VERSION.with_kind(kind)


def resource(resource: str) -> GroupResource:
    """Qualify a resource with the storage group."""
    return SCHEME_GROUP_VERSION.with_resource(resource)


def _quoted(text: str) -> str:
    return json.dumps(text)


def image_metadata_field_selector_conversion(label: str, value: str) -> tuple[str, str]:
    """Accept object name, namespace and image metadata fields as selectors."""
    if label in _IMAGE_METADATA_FIELDS:
        return label, value
    raise FieldSelectorError(
        f"{_quoted(label)} is not a known field selector: only "
        f'{_quoted("metadata.name")}, {_quoted("metadata.namespace")}, {_quoted("spec.imageMetadata.*")}'
    )


def _default_field_selector_conversion(label: str, value: str) -> tuple[str, str]:
    if label in ("metadata.name", "metadata.namespace"):
        return label, value
    raise FieldSelectorError(
        f"{_quoted(label)} is not a known field selector: only "
        f'{_quoted("metadata.name")}, {_quoted("metadata.namespace")}'
    )


@dataclass
class Scheme:
    """Registry of known types, field label conversions and version priorities."""

    _types: dict[GroupVersion, dict[str, type]] = field(default_factory=dict)
    _conversions: dict[GroupKind, FieldLabelConversionFunc] = field(default_factory=dict)
    _priorities: dict[str, list[GroupVersion]] = field(default_factory=dict)

    def add_known_types(self, group_version: GroupVersion, *args: type) -> None:
        """Register types under a group version, keyed by their class name."""
        known = self._types.setdefault(group_version, {})
        for cls in args:
            name = cls.__name__
            registered = known.get(name)
            if registered is not None and registered is not cls:
                raise ValueError(
                    f"double registration of different types for {group_version.with_kind(name)} "
                    f"in {group_version}"
                )
            known[name] = cls

    def add_field_label_conversion_func(self, group_kind: GroupKind, func: FieldLabelConversionFunc) -> None:
        self._conversions[group_kind] = func

    def convert_field_label(self, group_kind: GroupKind, label: str, value: str) -> tuple[str, str]:
        """Convert a field selector label, raising FieldSelectorError when unsupported."""
        func = self._conversions.get(group_kind, _default_field_selector_conversion)
        return func(label, value)

    def recognizes(self, group_version: GroupVersion, kind: str) -> bool:
        return kind in self._types.get(group_version, {})

    def set_version_priority(self, *args: GroupVersion) -> None:
        """Set the preferred order of versions within one group."""
        if not args:
            return
        groups = {gv.group for gv in args}
        if len(groups) != 1:
            raise ValueError(f"set_version_priority with different groups: {sorted(groups)}")
        self._priorities[args[0].group] = list(args)

    def prioritized_versions_for_group(self, group: str) -> list[GroupVersion]:
        """Return the versions of a group in priority order."""
        ordered = list(self._priorities.get(group, []))
        extra = sorted(
            (gv for gv in self._types if gv.group == group and gv not in ordered and gv.version != INTERNAL_VERSION),
            key=lambda gv: gv.version,
        )
        return ordered + extra


def _add_internal_types(scheme: Scheme) -> None:
    scheme.add_known_types(INTERNAL_GROUP_VERSION, *_STORAGE_TYPES)


def add_known_types(scheme: Scheme) -> None:
    """Register the storage types and their field selector conversions."""
    scheme.add_known_types(SCHEME_GROUP_VERSION, *_STORAGE_TYPES)
    for cls in _STORAGE_TYPES:
        scheme.add_field_label_conversion_func(kind(cls.__name__), image_metadata_field_selector_conversion)


def install(scheme: Scheme) -> None:
    """Register the storage API group in both versions and prefer v1alpha1."""
    _add_internal_types(scheme)
    add_known_types(scheme)
    scheme.set_version_priority(SCHEME_GROUP_VERSION)