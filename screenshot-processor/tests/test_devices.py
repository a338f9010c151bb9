import pytest

from showcase.devices import (
    DEVICE_TARGETS, DevicePlatform, get_device_options, get_device_target,
    get_device_target_for_platform, platform_tag,
)
from showcase.errors import DeviceTargetNotFoundError


def test_catalog_has_exact_store_sizes():
    iphone = get_device_target("iphone-6.7")
    ipad = get_device_target("ipad-12.9")

    assert iphone.size == (1290, 2796)
    assert ipad.size == (2064, 2752)
    assert (iphone.safe_margin.top, iphone.safe_margin.right, iphone.safe_margin.bottom, iphone.safe_margin.left) == (120, 60, 120, 60)
    assert (ipad.safe_margin.top, ipad.safe_margin.right, ipad.safe_margin.bottom, ipad.safe_margin.left) == (160, 80, 160, 80)


def test_unknown_target_raises():
    with pytest.raises(DeviceTargetNotFoundError):
        get_device_target("android-phone")


def test_lookup_error_is_a_lookup_error():
    with pytest.raises(LookupError):
        get_device_target("nope")


def test_target_for_platform():
    assert get_device_target_for_platform(DevicePlatform.IPAD).id == "ipad-12.9"
    assert get_device_target_for_platform("iPhone").id == "iphone-6.7"


def test_platform_tags():
    assert platform_tag(DevicePlatform.IPHONE) == "iphone"
    assert platform_tag("iPad") == "ipad"
    assert [t.tag for t in DEVICE_TARGETS] == ["iphone", "ipad"]


def test_device_options():
    options = get_device_options()
    assert [o["dimensions"] for o in options] == ["1290x2796", "2064x2752"]
    assert options[0]["safe_margin"]["left"] == 60
