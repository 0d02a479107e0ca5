"""
Tests for the ManagedObject identity helper
"""

# Third Party
import pytest

# Local
from amp_upgrade.managed_object import ManagedObject, object_info


def test_managed_object_identity():
    """Make sure the identity fields are parsed"""
    obj = ManagedObject(
        {
            "kind": "Secret",
            "apiVersion": "v1",
            "metadata": {"name": "foo", "namespace": "bar", "resourceVersion": "7"},
        }
    )
    assert obj.key == ("Secret", "bar", "foo")
    assert obj.api_version == "v1"
    assert obj.resource_version == "7"
    assert str(obj) == "Secret bar/foo"


def test_managed_object_equality():
    """Make sure objects compare by identity and not by content"""
    obj1 = ManagedObject({"kind": "Secret", "metadata": {"name": "foo"}, "data": {}})
    obj2 = ManagedObject({"kind": "Secret", "metadata": {"name": "foo"}})
    obj3 = ManagedObject({"kind": "ConfigMap", "metadata": {"name": "foo"}})
    assert obj1 == obj2
    assert obj1 != obj3
    assert len({obj1, obj2, obj3}) == 2


def test_managed_object_requires_name():
    """Make sure an object without a name is rejected"""
    with pytest.raises(AssertionError):
        ManagedObject({"kind": "Secret", "metadata": {}})


def test_object_info_without_namespace():
    assert object_info("Secret", "foo") == "Secret foo"
