"""
Tests for the RootResource wrapper
"""

# Third Party
import pytest

# Local
from amp_upgrade.exceptions import ConfigError
from amp_upgrade.root_resource import RootResource
from amp_upgrade.test_helpers.helpers import (
    AWS_CREDENTIALS_SECRET_NAME,
    TEST_INSTANCE_NAME,
    TEST_NAMESPACE,
    s3_spec,
    setup_cr,
)


def test_identity():
    """Make sure name and namespace come from the metadata"""
    root = RootResource(setup_cr())
    assert root.name == TEST_INSTANCE_NAME
    assert root.namespace == TEST_NAMESPACE
    assert str(root) == f"APIManager {TEST_NAMESPACE}/{TEST_INSTANCE_NAME}"


def test_defaults():
    """Make sure an empty spec reads as internal databases, mysql and no s3"""
    root = RootResource(setup_cr())
    assert not root.is_external_database_enabled()
    assert not root.is_postgresql_enabled()
    assert not root.has_s3()
    assert root.pvc_spec() is None
    assert root.mysql_spec() is None


def test_external_database():
    """Make sure high availability means external databases"""
    root = RootResource(setup_cr({"highAvailability": {"enabled": True}}))
    assert root.is_external_database_enabled()
    root = RootResource(setup_cr({"highAvailability": {"enabled": False}}))
    assert not root.is_external_database_enabled()


def test_postgresql():
    """Make sure an empty postgresql block is enough to select it"""
    root = RootResource(setup_cr({"system": {"database": {"postgresql": {}}}}))
    assert root.is_postgresql_enabled()


def test_s3():
    """Make sure the s3 block and its credentials secret are found"""
    root = RootResource(setup_cr(s3_spec(bucket="b", region="r")))
    assert root.has_s3()
    assert root.s3_spec()["awsBucket"] == "b"
    assert root.aws_credentials_secret_name() == AWS_CREDENTIALS_SECRET_NAME


def test_s3_missing_credentials_secret():
    """Make sure an s3 block without credentials secret is a config error"""
    cr = setup_cr(
        {"system": {"fileStorage": {"amazonSimpleStorageService": {"awsBucket": "b"}}}}
    )
    with pytest.raises(ConfigError):
        RootResource(cr).aws_credentials_secret_name()


def test_manifest_is_shared():
    """Make sure changes made through the blocks land in the manifest"""
    cr = setup_cr(s3_spec())
    root = RootResource(cr)
    del root.s3_spec()["awsBucket"]
    assert "awsBucket" not in cr["spec"]["system"]["fileStorage"][
        "amazonSimpleStorageService"
    ]
