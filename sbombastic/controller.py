"""Reconcilers that drive registry discovery, SBOM generation and scanning."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol, Union

from .client import InMemoryClient, NotFoundError, ObjectKey
from .resources import (
    REGISTRY_DISCOVERING_CONDITION,
    REGISTRY_DISCOVERY_REQUESTED_REASON,
    REGISTRY_FAILED_TO_REQUEST_DISCOVERY_REASON,
    REGISTRY_LAST_DISCOVERED_AT_ANNOTATION,
    SBOM,
    Condition,
    ConditionStatus,
    Image,
    Registry,
    set_status_condition,
)

_log = logging.getLogger(__name__)

_REGISTRY_FIELD = "spec.imageMetadata.registry"


@dataclass(frozen=True)
class Request:
    """Names the object to reconcile."""

    name: str
    namespace: str

    @property
    def key(self) -> ObjectKey:
        return ObjectKey(self.namespace, self.name)


@dataclass(frozen=True)
class Result:
    """Outcome of a reconcile; nothing is requeued unless asked for."""

    requeue: bool = False
    requeue_after: float = 0.0


class ReconcileError(Exception):
    """A reconcile could not be completed."""


@dataclass(frozen=True)
class CreateCatalog:
    """Asks the workers to discover the images of a registry."""

    registry_name: str
    registry_namespace: str


@dataclass(frozen=True)
class GenerateSBOM:
    """Asks the workers to generate the SBOM of an image."""

    image_name: str
    image_namespace: str


@dataclass(frozen=True)
class ScanSBOM:
    """Asks the workers to scan an SBOM for vulnerabilities."""

    sbom_name: str
    sbom_namespace: str


Message = Union[CreateCatalog, GenerateSBOM, ScanSBOM]


class Publisher(Protocol):
    """Sends messages to the worker queue."""

    def publish(self, message: Message) -> None:
        """Send one message, raising if it cannot be delivered."""


def _rfc3339_now() -> str:
    text = datetime.now().astimezone().isoformat(timespec="seconds")
    return text[:-6] + "Z" if text.endswith("+00:00") else text


def _fetch(client: InMemoryClient, kind: type, key: ObjectKey):
    """Return the object, None when it does not exist, or raise ReconcileError."""
    try:
        return client.get(kind, key)
    except NotFoundError:
        return None
    except Exception as err:
        raise ReconcileError(f"unable to fetch {kind.KIND}: {err}") from err


@dataclass
class ImageReconciler:
    """Requests an SBOM for every image that does not have one."""

    client: InMemoryClient
    publisher: Publisher | None = None
    logger: logging.Logger = field(default=_log)

    def reconcile(self, request: Request) -> Result:
        image = _fetch(self.client, Image, request.key)
        if image is None:
            return Result()

        if _fetch(self.client, SBOM, request.key) is None:
            self.logger.info(
                "Creating SBOM of Image name=%s namespace=%s",
                image.metadata.name,
                image.metadata.namespace,
            )
            message = GenerateSBOM(image.metadata.name, image.metadata.namespace)
            try:
                self.publisher.publish(message)
            except Exception as err:
                raise ReconcileError(f"unable to publish CreateSBOM message: {err}") from err

        return Result()


@dataclass
class RegistryReconciler:
    """Starts discovery of new registries and prunes images of dropped repositories."""

    client: InMemoryClient
    publisher: Publisher | None = None
    logger: logging.Logger = field(default=_log)

    def _set_condition(self, registry: Registry, condition: Condition) -> None:
        set_status_condition(registry.status.conditions, condition)
        try:
            self.client.update_status(registry)
        except Exception as err:
            raise ReconcileError(f"unable to set status condition: {err}") from err

    def reconcile(self, request: Request) -> Result:
        registry = _fetch(self.client, Registry, request.key)
        if registry is None:
            return Result()

        name, namespace = registry.metadata.name, registry.metadata.namespace

        if not registry.metadata.annotations.get(REGISTRY_LAST_DISCOVERED_AT_ANNOTATION):
            self.logger.info(
                "Registry needs to be discovered, sending the request. name=%s namespace=%s", name, namespace
            )
            try:
                self.publisher.publish(CreateCatalog(name, namespace))
            except Exception as err:
                self._set_condition(
                    registry,
                    Condition(
                        type=REGISTRY_DISCOVERING_CONDITION,
                        status=ConditionStatus.UNKNOWN,
                        reason=REGISTRY_FAILED_TO_REQUEST_DISCOVERY_REASON,
                        message="Failed to communicate with the workers",
                    ),
                )
                raise ReconcileError(f"failed to publish CreateCatalog message: {err}") from err

            self._set_condition(
                registry,
                Condition(
                    type=REGISTRY_DISCOVERING_CONDITION,
                    status=ConditionStatus.TRUE,
                    reason=REGISTRY_DISCOVERY_REQUESTED_REASON,
                    message="Registry discovery in progress",
                ),
            )

        if registry.spec.repositories:
            self.logger.debug(
                "Deleting Images that are not in the current list of repositories name=%s namespace=%s repositories=%s",
                name,
                namespace,
                registry.spec.repositories,
            )
            try:
                images = self.client.list(Image, request.namespace, {_REGISTRY_FIELD: name})
            except Exception as err:
                raise ReconcileError(f"unable to list Images: {err}") from err

            allowed = set(registry.spec.repositories)
            for image in images:
                repository = image.get_image_metadata().repository
                if repository in allowed:
                    continue
                try:
                    self.client.delete(image)
                except Exception as err:
                    raise ReconcileError(f"unable to delete Image {image.metadata.name}: {err}") from err
                self.logger.debug("Deleted Image name=%s repository=%s", image.metadata.name, repository)

        return Result()


@dataclass
class SBOMReconciler:
    """Requests a scan of each SBOM and marks a registry discovered once every image has one."""

    client: InMemoryClient
    publisher: Publisher | None = None
    logger: logging.Logger = field(default=_log)

    def reconcile(self, request: Request) -> Result:
        sbom = _fetch(self.client, SBOM, request.key)
        if sbom is None:
            return Result()

        try:
            self.publisher.publish(ScanSBOM(sbom.metadata.name, sbom.metadata.namespace))
        except Exception as err:
            raise ReconcileError(f"unable to publish ScanSBOM message: {err}") from err

        registry_name = sbom.get_image_metadata().registry
        selector = {_REGISTRY_FIELD: registry_name}
        try:
            sboms = self.client.list(SBOM, request.namespace, selector)
        except Exception as err:
            raise ReconcileError(f"unable to list SBOMs: {err}") from err
        try:
            images = self.client.list(Image, request.namespace, selector)
        except Exception as err:
            raise ReconcileError(f"unable to list Images: {err}") from err

        if len(sboms) != len(images):
            return Result()

        self.logger.info(
            "Registry discovery is completed. name=%s namespace=%s", registry_name, request.namespace
        )
        try:
            registry = self.client.get(Registry, ObjectKey(request.namespace, registry_name))
        except Exception as err:
            raise ReconcileError(f"unable to fetch Registry: {err}") from err

        if REGISTRY_LAST_DISCOVERED_AT_ANNOTATION in registry.metadata.annotations:
            self.logger.debug(
                "Registry already has a last discovered timestamp name=%s namespace=%s",
                registry.metadata.name,
                registry.metadata.namespace,
            )
            return Result()

        self.logger.debug(
            "Updating Registry last discovered timestamp name=%s namespace=%s",
            registry.metadata.name,
            registry.metadata.namespace,
        )
        registry.metadata.annotations[REGISTRY_LAST_DISCOVERED_AT_ANNOTATION] = _rfc3339_now()
        try:
            self.client.update(registry)
        except Exception as err:
            raise ReconcileError(f"unable to update Registry LastScannedAt: {err}") from err

        return Result()