"""
This ObjectStore is responsible for delegating cluster operations to the
openshift library. It is the one that will be used when the upgrade is running
in the cluster or outside the cluster making live changes.
"""

# Standard
from collections import namedtuple
from typing import Optional

# Third Party
from openshift.dynamic import DynamicClient
from openshift.dynamic.exceptions import ConflictError as OpenshiftConflictError
from openshift.dynamic.exceptions import DynamicApiError
from openshift.dynamic.exceptions import NotFoundError as OpenshiftNotFoundError
from openshift.dynamic.exceptions import ResourceNotFoundError, ResourceNotUniqueError
from openshift.dynamic.resource import Resource
import kubernetes

# First Party
import alog

# Local
from .. import config
from ..exceptions import (
    AlreadyExistsError,
    ConflictError,
    NotFoundError,
    ObjectStoreError,
    assert_cluster,
)
from ..managed_object import object_info
from .base import ObjectStoreBase

log = alog.use_channel("OSFTS")

## Object Store ################################################################


class OpenshiftObjectStore(ObjectStoreBase):
    """This ObjectStore uses the openshift DynamicClient to interact with the
    cluster
    """

    def __init__(self, client: Optional[DynamicClient] = None):
        """
        Args:
            client:  Optional[DynamicClient]
                Preconfigured client to use. If not given, one is created from
                the in-cluster config or the local kubeconfig.
        """
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = self._setup_client()
        return self._client

    ## Interface ###############################################################

    def get(self, kind, name, namespace=None, api_version=None):
        resource_handle = self._get_resource_handle(kind, api_version)
        # A kind the cluster does not serve is not an absent object, so it
        # must not trigger the create fallbacks
        if not resource_handle:
            raise ObjectStoreError(
                f"No resource handle for {api_version}/{kind}",
                kind=kind,
                name=name,
                namespace=namespace,
            )

        try:
            return resource_handle.get(name=name, namespace=namespace).to_dict()
        except OpenshiftNotFoundError as err:
            log.debug(
                "No object named [%s] found", object_info(kind, name, namespace)
            )
            raise NotFoundError(
                f"{object_info(kind, name, namespace)} not found",
                kind=kind,
                name=name,
                namespace=namespace,
            ) from err
        except DynamicApiError as err:
            raise ObjectStoreError(
                f"Failed to fetch {object_info(kind, name, namespace)}: {err}",
                kind=kind,
                name=name,
                namespace=namespace,
            ) from err

    def create(self, resource_definition):
        res_id = self._get_resource_identifiers(resource_definition)
        resource_handle = self._require_resource_handle(res_id)
        log.debug2(
            "Attempting to create [%s]",
            object_info(res_id.kind, res_id.name, res_id.namespace),
        )
        try:
            return resource_handle.create(
                body=resource_definition,
                namespace=res_id.namespace,
                field_manager=config.field_manager,
            ).to_dict()
        except OpenshiftConflictError as err:
            raise AlreadyExistsError(
                f"{object_info(res_id.kind, res_id.name, res_id.namespace)} "
                "already exists",
                kind=res_id.kind,
                name=res_id.name,
                namespace=res_id.namespace,
            ) from err
        except DynamicApiError as err:
            raise ObjectStoreError(
                f"Failed to create "
                f"{object_info(res_id.kind, res_id.name, res_id.namespace)}: {err}",
                kind=res_id.kind,
                name=res_id.name,
                namespace=res_id.namespace,
            ) from err

    def update(self, resource_definition):
        res_id = self._get_resource_identifiers(resource_definition)
        resource_handle = self._require_resource_handle(res_id)
        log.debug2(
            "Attempting to put [%s]",
            object_info(res_id.kind, res_id.name, res_id.namespace),
        )
        try:
            return resource_handle.replace(
                body=resource_definition,
                name=res_id.name,
                namespace=res_id.namespace,
                field_manager=config.field_manager,
            ).to_dict()
        except OpenshiftConflictError as err:
            raise ConflictError(
                f"{object_info(res_id.kind, res_id.name, res_id.namespace)} "
                f"has been modified: {err}",
                kind=res_id.kind,
                name=res_id.name,
                namespace=res_id.namespace,
            ) from err
        except OpenshiftNotFoundError as err:
            raise NotFoundError(
                f"{object_info(res_id.kind, res_id.name, res_id.namespace)} "
                "not found",
                kind=res_id.kind,
                name=res_id.name,
                namespace=res_id.namespace,
            ) from err
        except DynamicApiError as err:
            raise ObjectStoreError(
                f"Failed to update "
                f"{object_info(res_id.kind, res_id.name, res_id.namespace)}: {err}",
                kind=res_id.kind,
                name=res_id.name,
                namespace=res_id.namespace,
            ) from err

    ## Implementation Helpers ##################################################

    @staticmethod
    def _setup_client():
        """Create a DynamicClient that will work based on where the upgrade is
        running
        """
        # Try in-cluster config
        try:
            log.debug2("Running with in-cluster config")

            # Create Empty Config and load in-cluster information
            kube_config = kubernetes.client.Configuration()
            kubernetes.config.load_incluster_config(client_configuration=kube_config)

            # Generate ApiClient and return Openshift DynamicClient
            api_client = kubernetes.client.ApiClient(kube_config)
            return DynamicClient(api_client)

        # Fall back to out-of-cluster config
        except kubernetes.config.ConfigException:
            log.debug2("Running with out-of-cluster config")
            return DynamicClient(kubernetes.config.new_client_from_config())

    def _get_resource_handle(
        self, kind: str, api_version: Optional[str]
    ) -> Optional[Resource]:
        """Get the openshift resource handle for a specified kind and api_version"""
        resources = None
        try:
            resources = self.client.resources.get(kind=kind, api_version=api_version)
        except (ResourceNotFoundError, ResourceNotUniqueError):
            log.debug(
                "No objects of kind [%s] found or multiple objects matching "
                "request found",
                kind,
            )
        return resources

    def _require_resource_handle(self, res_id) -> Resource:
        resource_handle = self._get_resource_handle(res_id.kind, res_id.api_version)
        assert_cluster(
            resource_handle,
            (
                "Failed to fetch resource handle for "
                + f"{res_id.namespace}/{res_id.api_version}/{res_id.kind}"
            ),
        )
        return resource_handle

    _ResourceIdentifiers = namedtuple(
        "ResourceIdentifiers", ["api_version", "kind", "name", "namespace"]
    )

    @classmethod
    def _get_resource_identifiers(cls, resource_definition):
        """Helper for getting the required parts of a single resource definition"""
        api_version = resource_definition.get("apiVersion")
        kind = resource_definition.get("kind")
        name = resource_definition.get("metadata", {}).get("name")
        namespace = resource_definition.get("metadata", {}).get("namespace")
        assert None not in [
            api_version,
            kind,
            name,
        ], "Cannot write resource without apiVersion, kind or name"
        return cls._ResourceIdentifiers(api_version, kind, name, namespace)
