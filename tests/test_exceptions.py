"""
Test the custom exceptions and assert functions
"""

# Third Party
import pytest

# Local
from amp_upgrade import exceptions


def test_assert_config_pass():
    """Make sure that no exception is throw by assert_config when it
    passes
    """
    exceptions.assert_config(True)


def test_assert_config_fail():
    """Make sure the right exception is thrown by assert_config when it
    fails
    """
    exception_msg = "error mesage"
    with pytest.raises(exceptions.ConfigError, match=exception_msg):
        exceptions.assert_config(False, exception_msg)


def test_assert_cluster_pass():
    """Make sure that no exception is throw by assert_cluster when it
    passes
    """
    exceptions.assert_cluster(True)


def test_assert_cluster_fail():
    """Make sure the right exception is thrown by assert_cluster when it
    fails
    """
    exception_msg = "error mesage"
    with pytest.raises(exceptions.ClusterError, match=exception_msg):
        exceptions.assert_cluster(False, exception_msg)


def test_exception_derived_from_base():
    """Make sure the derived classes are instances of the base class"""
    assert isinstance(exceptions.UpgradeFatalError(), exceptions.UpgradeError)
    assert isinstance(exceptions.UpgradeExpectedError(), exceptions.UpgradeError)


@pytest.mark.parametrize(
    "error_class",
    [
        exceptions.ConfigError,
        exceptions.ClusterError,
        exceptions.ShapeMismatchError,
        exceptions.ObjectStoreError,
        exceptions.NotFoundError,
        exceptions.AlreadyExistsError,
    ],
)
def test_fatal_errors(error_class):
    """Make sure errors that need an administrator are flagged fatal"""
    err = error_class("boom")
    assert err.is_fatal_error
    assert isinstance(err, exceptions.UpgradeFatalError)


def test_conflict_is_non_fatal():
    """Make sure a write conflict is expected to resolve on the next pass"""
    err = exceptions.ConflictError("stale", kind="Secret", name="foo")
    assert not err.is_fatal_error
    assert isinstance(err, exceptions.UpgradeExpectedError)
    assert err.kind == "Secret"
    assert err.name == "foo"


def test_store_errors_carry_identity():
    """Make sure store errors record which object they refer to"""
    err = exceptions.NotFoundError("gone", kind="Secret", name="foo", namespace="bar")
    assert (err.kind, err.name, err.namespace) == ("Secret", "foo", "bar")
    assert isinstance(err, exceptions.ObjectStoreError)
