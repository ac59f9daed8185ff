import pytest

from sbombastic.resources import SBOM, Image, Registry, VulnerabilityReport
from sbombastic.scheme import (
    INTERNAL_GROUP_VERSION,
    SCHEME_GROUP_VERSION,
    FieldSelectorError,
    GroupKind,
    GroupResource,
    GroupVersion,
    Scheme,
    add_known_types,
    image_metadata_field_selector_conversion,
    install,
    kind,
    resource,
)

GROUP = "storage.sbombastic.rancher.io"


def test_kind_and_resource_are_group_qualified():
    assert kind("Image") == GroupKind(GROUP, "Image")
    assert resource("sboms") == GroupResource(GROUP, "sboms")
    assert str(kind("SBOM")) == "SBOM." + GROUP


def test_group_version_helpers():
    gv = GroupVersion(GROUP, "v1alpha1")
    assert gv == SCHEME_GROUP_VERSION
    assert gv.with_kind("Image").kind == "Image"
    assert gv.with_resource("images").group == GROUP


@pytest.mark.parametrize(
    "label",
    [
        "metadata.name",
        "metadata.namespace",
        "spec.imageMetadata.registry",
        "spec.imageMetadata.registryURI",
        "spec.imageMetadata.repository",
        "spec.imageMetadata.tag",
        "spec.imageMetadata.platform",
        "spec.imageMetadata.digest",
    ],
)
def test_conversion_accepts_known_labels(label):
    assert image_metadata_field_selector_conversion(label, "value") == (label, "value")


def test_conversion_rejects_unknown_label():
    with pytest.raises(FieldSelectorError) as info:
        image_metadata_field_selector_conversion("spec.other", "x")
    assert '"spec.other" is not a known field selector' in str(info.value)


def test_install_registers_storage_types():
    scheme = Scheme()
    install(scheme)
    for cls in (Image, SBOM, VulnerabilityReport):
        assert scheme.recognizes(SCHEME_GROUP_VERSION, cls.__name__)
        assert scheme.recognizes(INTERNAL_GROUP_VERSION, cls.__name__)
    assert not scheme.recognizes(SCHEME_GROUP_VERSION, "Registry")
    assert scheme.prioritized_versions_for_group(GROUP) == [SCHEME_GROUP_VERSION]


def test_installed_conversion_for_each_kind():
    scheme = Scheme()
    add_known_types(scheme)
    for name in ("Image", "SBOM", "VulnerabilityReport"):
        assert scheme.convert_field_label(kind(name), "spec.imageMetadata.registry", "r") == (
            "spec.imageMetadata.registry",
            "r",
        )
        with pytest.raises(FieldSelectorError):
            scheme.convert_field_label(kind(name), "status.phase", "x")


def test_default_conversion_only_allows_name_and_namespace():
    scheme = Scheme()
    other = GroupKind("example", "Thing")
    assert scheme.convert_field_label(other, "metadata.name", "a") == ("metadata.name", "a")
    with pytest.raises(FieldSelectorError):
        scheme.convert_field_label(other, "spec.imageMetadata.registry", "r")


def test_registering_same_type_twice_is_allowed_but_conflict_is_not():
    scheme = Scheme()
    gv = GroupVersion("example", "v1")
    scheme.add_known_types(gv, Registry)
    scheme.add_known_types(gv, Registry)
    assert scheme.recognizes(gv, "Registry")

    class Registry2:
        pass

    Registry2.__name__ = "Registry"
    with pytest.raises(ValueError):
        scheme.add_known_types(gv, Registry2)


def test_version_priority_requires_single_group():
    scheme = Scheme()
    with pytest.raises(ValueError):
        scheme.set_version_priority(GroupVersion("a", "v1"), GroupVersion("b", "v1"))
    scheme.set_version_priority(GroupVersion("a", "v2"), GroupVersion("a", "v1"))
    assert scheme.prioritized_versions_for_group("a") == [GroupVersion("a", "v2"), GroupVersion("a", "v1")]