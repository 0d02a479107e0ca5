"""
The ObjectStore is the abstraction in charge of interacting with the kubernetes
cluster to look up, create and update individual resources.
"""

# Local
from .base import ObjectStoreBase
from .dry_run_store import DryRunObjectStore
from .openshift_store import OpenshiftObjectStore
