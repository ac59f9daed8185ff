# sbombastic

sbombastic models the workflow that keeps a software bill of materials (SBOM)
and a vulnerability report for every image in a container registry: the
resource types, a type registry with field selector rules, an in-memory object
store, and three reconcilers that decide which work to request.

## Reconcilers

All three live in `sbombastic.controller`. Each is a dataclass built from a
`client` (an `InMemoryClient`), a `publisher` and an optional `logger`, and its
`reconcile(request)` takes a `Request(name, namespace)` and returns a `Result`.
Failures raise `ReconcileError`; an object that no longer exists is not an
error.

- **`RegistryReconciler`**: when a `Registry` has no
  `sbombastic.rancher.io/last-discovered-at` annotation, it publishes a
  `CreateCatalog` message and sets a `Discovering` status condition: `True`
  with reason `DiscoveryRequested` on success, `Unknown` with reason
  `FailedToRequestDiscovery` (and then `ReconcileError`) if publishing fails.
  If the registry lists repositories, it deletes every `Image` of that registry
  whose repository is no longer listed.
- **`ImageReconciler`**: publishes a `GenerateSBOM` message for an `Image` that
  has no `SBOM` of the same namespace and name.
- **`SBOMReconciler`**: publishes a `ScanSBOM` message for the `SBOM`. When the
  number of SBOMs of its registry equals the number of images, it sets the
  last-discovered-at annotation on the registry to the current RFC 3339 time,
  unless the annotation is already there.

A publisher is any object with a `publish(message)` method that raises when
the message cannot be delivered (see the `Publisher` protocol).

```python
from sbombastic.client import InMemoryClient
from sbombastic.controller import RegistryReconciler, Request
from sbombastic.resources import ObjectMeta, Registry, RegistrySpec


class ListPublisher:
    def __init__(self):
        self.sent = []

    def publish(self, message):
        self.sent.append(message)


client = InMemoryClient()
client.create(Registry(metadata=ObjectMeta(name="main", namespace="default"),
                       spec=RegistrySpec(uri="ghcr.example.com/team")))
publisher = ListPublisher()
RegistryReconciler(client, publisher).reconcile(Request("main", "default"))
# publisher.sent == [CreateCatalog(registry_name="main", registry_namespace="default")]
```

## Modules

| Module | What it holds |
| --- | --- |
| `sbombastic.resources` | `Registry`, `Image`, `SBOM`, `VulnerabilityReport`, their specs, `ImageMetadata`, `ImageLayer`, `ObjectMeta`, `Condition`, `ConditionStatus`, and `set_status_condition` / `find_status_condition` |
| `sbombastic.scheme` | `GroupVersion`, `GroupKind`, `GroupResource`, `kind`, `resource`, the type registry `Scheme`, `add_known_types`, `install`, and `image_metadata_field_selector_conversion` with `FieldSelectorError` |
| `sbombastic.client` | `InMemoryClient` (`create`, `get`, `list`, `update`, `update_status`, `delete`), `ObjectKey`, `NotFoundError`, `AlreadyExistsError` |
| `sbombastic.controller` | the reconcilers, `Request`, `Result`, `ReconcileError`, `Publisher` and the messages `CreateCatalog`, `GenerateSBOM`, `ScanSBOM` |
| `sbombastic.version` | `Version`, `default_kube_binary_version` and `wardle_version_to_kube_version` |
| `sbombastic.logs` | `parse_log_level` and `LogLevelError` |

`InMemoryClient` stores copies of what it is given and hands out copies.
`update` keeps the stored status; `update_status` changes only the status.
`list(kind, namespace, fields)` filters by namespace and by field selectors
such as `{"spec.imageMetadata.registry": "main"}`.

## Examples

Field selectors on images, SBOMs and vulnerability reports accept
`metadata.name`, `metadata.namespace` and the `spec.imageMetadata.*` fields;
any other label raises `FieldSelectorError`:

```python
from sbombastic.scheme import FieldSelectorError, image_metadata_field_selector_conversion

image_metadata_field_selector_conversion("spec.imageMetadata.registry", "my-registry")
# ("spec.imageMetadata.registry", "my-registry")

try:
    image_metadata_field_selector_conversion("spec.unknown", "x")
except FieldSelectorError as err:
    print(err)
```

`install(scheme)` registers the storage types under
`storage.sbombastic.rancher.io` in `v1alpha1` and an internal version, adds
their field selector conversions and makes `v1alpha1` the preferred version:

```python
from sbombastic.scheme import SCHEME_GROUP_VERSION, Scheme, install, kind

scheme = Scheme()
install(scheme)
assert scheme.recognizes(SCHEME_GROUP_VERSION, "SBOM")
scheme.convert_field_label(kind("Image"), "metadata.name", "nginx")
```

Storage component version 1.2 maps to the Kubernetes binary version (1.32).
Lower minor versions map to older Kubernetes versions, higher ones are capped,
and any major version other than 1 has no mapping:

```python
from sbombastic.version import Version, default_kube_binary_version, wardle_version_to_kube_version

kube = wardle_version_to_kube_version(Version.major_minor(1, 1))
assert kube.equal_to(default_kube_binary_version().offset_minor(-1))
assert wardle_version_to_kube_version(Version.major_minor(2, 10)) is None
```

Log level names (`debug`, `info`, `warn`, `error`, in any case, optionally
with an offset such as `info+2`) turn into `logging` levels:

```python
import logging
from sbombastic.logs import LogLevelError, parse_log_level

assert parse_log_level("debug") == logging.DEBUG

try:
    parse_log_level("loud")
except LogLevelError as err:
    print(err)
```

## What this package does not do

- It has no commands: there is no controller process, worker process or
  storage server to start.
- It does not talk to a cluster or a message queue. Objects live only in
  `InMemoryClient`, and messages go to whatever publisher you pass in.
- It does not discover registries, generate SBOMs or scan them; it only
  decides when to ask for that work.
- Nothing is persisted to disk.