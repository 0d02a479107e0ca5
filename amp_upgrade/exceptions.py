"""
This module implements custom exceptions
"""

## Base Error ##################################################################


class UpgradeError(Exception):
    """Base class for all amp_upgrade exceptions"""

    def __init__(self, message: str, is_fatal_error: bool):
        """Construct with a flag indicating whether this is a fatal error. This
        will be a static property of all children.
        """
        super().__init__(message)
        self._is_fatal_error = is_fatal_error

    @property
    def is_fatal_error(self):
        """Property indicating whether or not this error should be surfaced to
        the administrator rather than resolved by a later invocation
        """
        return self._is_fatal_error


## Fatal Errors ################################################################


class UpgradeFatalError(UpgradeError):
    """An UpgradeFatalError is one that indicates an unexpected, and likely
    unrecoverable, failure during an upgrade pass.
    """

    def __init__(self, message: str = ""):
        super().__init__(message=message, is_fatal_error=True)


class ConfigError(UpgradeFatalError):
    """Exception caused by invalid content in the root resource"""


class ClusterError(UpgradeFatalError):
    """Exception caused when a cluster operation fails in an unexpected way"""


class ShapeMismatchError(UpgradeFatalError):
    """Exception raised when a desired and an existing object cannot be compared
    field by field because their sub-structures differ in cardinality
    """


class ObjectStoreError(UpgradeFatalError):
    """Opaque failure reported by the remote object store"""

    def __init__(self, message: str = "", kind=None, name=None, namespace=None):
        self.kind = kind
        self.name = name
        self.namespace = namespace
        super().__init__(message)


class NotFoundError(ObjectStoreError):
    """The requested object does not exist in the store"""


class AlreadyExistsError(ObjectStoreError):
    """An object with the same identity already exists in the store"""


## Expected Errors #############################################################


class UpgradeExpectedError(UpgradeError):
    """An UpgradeExpectedError is one that indicates an expected failure
    condition that should terminate the current pass, but is expected to resolve
    in a subsequent invocation.
    """

    def __init__(self, message: str = ""):
        super().__init__(message=message, is_fatal_error=False)


class ConflictError(UpgradeExpectedError):
    """A write was rejected because the object's resourceVersion was stale"""

    def __init__(self, message: str = "", kind=None, name=None, namespace=None):
        self.kind = kind
        self.name = name
        self.namespace = namespace
        super().__init__(message)


## Assertions ##################################################################


def assert_config(condition: bool, message: str = ""):
    """Replacement for assert() which will throw a ConfigError. This should be
    used when the root resource is missing content that a step requires.
    """
    if not condition:
        raise ConfigError(message)


def assert_cluster(condition: bool, message: str = ""):
    """Replacement for assert() which will throw a ClusterError. This should
    be used when an operation in the cluster (such as fetching a resource
    handle) does not succeed.
    """
    if not condition:
        raise ClusterError(message)
