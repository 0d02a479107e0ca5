"""
Package exports
"""

# Local
from . import config, steps
from .desired_state import DesiredStateProvider
from .exceptions import (
    AlreadyExistsError,
    ConflictError,
    NotFoundError,
    ObjectStoreError,
    ShapeMismatchError,
    UpgradeError,
)
from .object_store import DryRunObjectStore, ObjectStoreBase, OpenshiftObjectStore
from .root_resource import RootResource
from .session import Session
from .upgrade import PipelineResult, UpgradeApiManager
