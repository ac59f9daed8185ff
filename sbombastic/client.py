"""An in-memory object store with the read and write operations reconcilers need."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .scheme import FieldSelectorError, image_metadata_field_selector_conversion

_IMAGE_METADATA_PREFIX = "spec.imageMetadata."
_IMAGE_METADATA_ATTRIBUTES = {
    "registry": "registry",
    "registryURI": "registry_uri",
    "repository": "repository",
    "tag": "tag",
    "platform": "platform",
    "digest": "digest",
}


class NotFoundError(LookupError):
    """The requested object does not exist."""


class AlreadyExistsError(ValueError):
    """An object with the same kind, namespace and name already exists."""


@dataclass(frozen=True)
class ObjectKey:
    """Namespace and name that identify an object of a given kind."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}" if self.namespace else self.name


def _key_of(obj: Any) -> ObjectKey:
    return ObjectKey(obj.metadata.namespace, obj.metadata.name)


def _convert_selector(kind: type, label: str, value: str) -> tuple[str, str]:
    if hasattr(kind, "get_image_metadata"):
        return image_metadata_field_selector_conversion(label, value)
    if label in ("metadata.name", "metadata.namespace"):
        return label, value
    raise FieldSelectorError(
        f'"{label}" is not a known field selector: only "metadata.name", "metadata.namespace"'
    )


def _field_value(obj: Any, label: str) -> str:
    if label == "metadata.name":
        return obj.metadata.name
    if label == "metadata.namespace":
        return obj.metadata.namespace
    attribute = _IMAGE_METADATA_ATTRIBUTES.get(label.removeprefix(_IMAGE_METADATA_PREFIX))
    if label.startswith(_IMAGE_METADATA_PREFIX) and attribute is not None:
        return getattr(obj.get_image_metadata(), attribute)
    raise FieldSelectorError(f'"{label}" is not a known field selector')


@dataclass
class InMemoryClient:
    """Stores copies of objects, keyed by kind, namespace and name.

    Objects handed in and out are copied, so callers never share state with
    the store. Updating an object keeps its stored status; updating the
    status keeps everything else.
    """

    _objects: dict[tuple[str, ObjectKey], Any] = field(default_factory=dict)

    def create(self, obj: Any) -> None:
        key = _key_of(obj)
        if not key.name:
            raise ValueError(f"{obj.KIND} must have a name")
        store_key = (obj.KIND, key)
        if store_key in self._objects:
            raise AlreadyExistsError(f'{obj.KIND} "{key}" already exists')
        self._objects[store_key] = copy.deepcopy(obj)

    def get(self, kind: type, key: ObjectKey) -> Any:
        try:
            return copy.deepcopy(self._objects[(kind.KIND, key)])
        except KeyError:
            raise NotFoundError(f'{kind.KIND} "{key}" not found') from None

    def list(
        self,
        kind: type,
        namespace: str | None = None,
        fields: Mapping[str, str] | None = None,
    ) -> list[Any]:
        """Return the objects of a kind, optionally within a namespace and matching all fields."""
        selectors = [_convert_selector(kind, label, value) for label, value in (fields or {}).items()]
        return [
            copy.deepcopy(obj)
            for (obj_kind, key), obj in self._objects.items()
            if obj_kind == kind.KIND
            and (not namespace or key.namespace == namespace)
            and all(_field_value(obj, label) == value for label, value in selectors)
        ]

    def _stored(self, obj: Any) -> Any:
        key = _key_of(obj)
        try:
            return self._objects[(obj.KIND, key)]
        except KeyError:
            raise NotFoundError(f'{obj.KIND} "{key}" not found') from None

    def update(self, obj: Any) -> None:
        stored = self._stored(obj)
        updated = copy.deepcopy(obj)
        if hasattr(stored, "status"):
            updated.status = stored.status
        self._objects[(obj.KIND, _key_of(obj))] = updated

    def update_status(self, obj: Any) -> None:
        stored = self._stored(obj)
        if not hasattr(stored, "status"):
            raise ValueError(f"{obj.KIND} has no status")
        stored.status = copy.deepcopy(obj.status)

    def delete(self, obj: Any) -> None:
        self._stored(obj)
        del self._objects[(obj.KIND, _key_of(obj))]