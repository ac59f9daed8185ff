import pytest

from sbombastic.version import (
    Version,
    default_kube_binary_version,
    wardle_version_to_kube_version,
)


@pytest.mark.parametrize(
    "wardle, offset",
    [
        pytest.param((1, 2), 0, id="same version as kube binary"),
        pytest.param((1, 1), -1, id="1 version lower than kube binary"),
        pytest.param((1, 0), -2, id="2 versions lower than kube binary"),
        pytest.param((1, 3), 0, id="capped at kube binary"),
    ],
)
def test_wardle_emulation_version_to_kube_emulation_version(wardle, offset):
    expected = default_kube_binary_version().offset_minor(offset)
    mapped = wardle_version_to_kube_version(Version.major_minor(*wardle))
    assert mapped.equal_to(expected)


def test_no_mapping_for_other_major_versions():
    assert wardle_version_to_kube_version(Version.major_minor(2, 10)) is None


def test_default_kube_binary_version():
    assert str(default_kube_binary_version()) == "1.32"


def test_parse_full_version():
    ver = Version.parse("v1.32.1-beta.2+build.7")
    assert (ver.major, ver.minor, ver.patch) == (1, 32, 1)
    assert ver.pre_release == "beta.2"
    assert ver.build_metadata == "build.7"
    assert str(ver) == "1.32.1-beta.2+build.7"


def test_parse_major_minor_round_trip():
    assert str(Version.parse("1.2")) == "1.2"
    assert Version.parse("1.2").equal_to(Version.major_minor(1, 2))


@pytest.mark.parametrize("text", ["", "1", "a.b", "1.2.3.4", "1.2-"])
def test_parse_rejects_malformed(text):
    with pytest.raises(ValueError):
        Version.parse(text)


def test_offset_minor_does_not_go_below_zero():
    assert Version.major_minor(1, 1).offset_minor(-5).equal_to(Version.major_minor(1, 0))


def test_offset_minor_drops_patch():
    assert str(Version.parse("1.30.4").offset_minor(1)) == "1.31"


def test_missing_patch_equals_zero_patch():
    assert Version.parse("1.2").equal_to(Version.parse("1.2.0"))


def test_greater_than_orders_versions():
    assert Version.parse("1.3").greater_than(Version.parse("1.2.9"))
    assert not Version.parse("1.2").greater_than(Version.parse("1.2"))
    assert Version.parse("1.2.0").greater_than(Version.parse("1.2.0-rc.1"))
    assert Version.parse("1.2.0-rc.2").greater_than(Version.parse("1.2.0-rc.1"))


def test_equal_to_none_is_false():
    assert not Version.major_minor(1, 2).equal_to(None)