"""
This module holds the core session state for an individual upgrade pass
"""

# Standard
from typing import Callable, Optional, Union
import uuid

# First Party
import aconfig
import alog

# Local
from .desired_state import DesiredStateProvider
from .managed_object import ManagedObject
from .object_store import ObjectStoreBase
from .root_resource import RootResource

log = alog.use_channel("SESSION")

# Type definition for the factory building the desired state provider
DESIRED_STATE_FACTORY = Callable[[RootResource], DesiredStateProvider]


class Session:
    """A session is the context shared by every step of one upgrade pass: the
    root resource, the store holding the live objects and the provider of
    desired objects
    """

    __slots__ = [
        "__id",
        "__root_resource",
        "__object_store",
        "__desired_state",
    ]

    def __init__(
        self,
        cr_manifest: Union[dict, aconfig.Config],
        object_store: ObjectStoreBase,
        desired_state_factory: DESIRED_STATE_FACTORY,
        upgrade_id: Optional[str] = None,
    ):
        """Construct a session object to hold the state for an upgrade pass

        Args:
            cr_manifest:  Union[dict, aconfig.Config]
                The full value of the APIManager manifest as currently stored
            object_store:  ObjectStoreBase
                The store used for every lookup and write
            desired_state_factory:  DESIRED_STATE_FACTORY
                Callable building the desired state provider from the root
                resource
            upgrade_id:  Optional[str]
                Unique ID for this pass, used in logs
        """
        self.__id = upgrade_id or str(uuid.uuid4())
        if not isinstance(cr_manifest, aconfig.Config):
            cr_manifest = aconfig.Config(cr_manifest, override_env_vars=False)
        self.__root_resource = RootResource(cr_manifest)
        self.__object_store = object_store
        self.__desired_state = desired_state_factory(self.__root_resource)

    ## Properties ##############################################################

    @property
    def id(self) -> str:  # pylint: disable=invalid-name
        """The unique upgrade pass ID"""
        return self.__id

    @property
    def root_resource(self) -> RootResource:
        return self.__root_resource

    @property
    def namespace(self) -> str:
        return self.__root_resource.namespace

    @property
    def object_store(self) -> ObjectStoreBase:
        return self.__object_store

    @property
    def desired_state(self) -> DesiredStateProvider:
        return self.__desired_state

    ## Cluster access ##########################################################

    def get_object(
        self,
        kind: str,
        name: str,
        api_version: Optional[str] = None,
    ) -> dict:
        """Fetch an object from the root resource's namespace. NotFoundError
        propagates to the caller.
        """
        return self.__object_store.get(
            kind=kind,
            name=name,
            namespace=self.namespace,
            api_version=api_version,
        )

    def create_object(self, resource_definition: dict) -> dict:
        log.info("Create object %s", ManagedObject(resource_definition))
        return self.__object_store.create(resource_definition)

    def update_object(self, resource_definition: dict) -> dict:
        log.info("Update object %s", ManagedObject(resource_definition))
        return self.__object_store.update(resource_definition)

    def update_root_resource(self) -> dict:
        """Write the (modified) root resource manifest back to the cluster"""
        return self.update_object(self.__root_resource.manifest)
