"""
The DryRunObjectStore implements the ObjectStore interface but does not
actually interact with the cluster and instead holds the state of the cluster in
a local map.
"""

# Standard
from datetime import datetime
from threading import RLock
from typing import List, Optional
import copy
import itertools
import uuid

# First Party
import alog

# Local
from .. import config
from ..constants import SECRET_KIND
from ..exceptions import AlreadyExistsError, ConflictError, NotFoundError
from ..managed_object import ManagedObject, object_info
from ..secret_data import encode
from .base import ObjectStoreBase

log = alog.use_channel("DRY-RUN")

# Lock to ensure writes are thread safe
DRY_RUN_CLUSTER_LOCK = RLock()


class DryRunObjectStore(ObjectStoreBase):
    """
    Object store which doesn't actually talk to a cluster!
    """

    def __init__(
        self,
        resources: Optional[List[dict]] = None,
        strict_resource_version: Optional[bool] = None,
    ):
        """Construct with an optional set of resources that are present in the
        cluster from the start
        """
        self._cluster_content = {}
        if strict_resource_version is None:
            strict_resource_version = config.strict_resource_version
        self.strict_resource_version = strict_resource_version
        self._resource_versions = itertools.count(1)

        for resource in resources or []:
            self._store(copy.deepcopy(resource))

    ## Interface ###############################################################

    def get(self, kind, name, namespace=None, api_version=None):
        log.debug2("DRY RUN get [%s]", object_info(kind, name, namespace))
        matches = []
        kind_entries = self._cluster_content.get(namespace, {}).get(kind, {})
        for api_ver, entries in kind_entries.items():
            log.debug3("Checking api_version [%s // %s]", api_ver, api_version)
            if name in entries and (api_ver == api_version or api_version is None):
                matches.append(entries[name])
        log.debug3(
            "Found %d matches for [%s]",
            len(matches),
            object_info(kind, name, namespace),
        )
        if len(matches) != 1:
            raise NotFoundError(
                f"{object_info(kind, name, namespace)} not found",
                kind=kind,
                name=name,
                namespace=namespace,
            )
        return copy.deepcopy(matches[0])

    def create(self, resource_definition):
        resource = copy.deepcopy(resource_definition)
        obj = ManagedObject(resource)
        log.debug2("DRY RUN create [%s]", obj)
        with DRY_RUN_CLUSTER_LOCK:
            if self._lookup(resource) is not None:
                raise AlreadyExistsError(
                    f"{obj} already exists",
                    kind=obj.kind,
                    name=obj.name,
                    namespace=obj.namespace,
                )
            resource.setdefault("metadata", {}).pop("resourceVersion", None)
            return copy.deepcopy(self._store(resource))

    def update(self, resource_definition):
        resource = copy.deepcopy(resource_definition)
        obj = ManagedObject(resource)
        log.debug2("DRY RUN update [%s]", obj)
        with DRY_RUN_CLUSTER_LOCK:
            current = self._lookup(resource)
            if current is None:
                raise NotFoundError(
                    f"{obj} not found",
                    kind=obj.kind,
                    name=obj.name,
                    namespace=obj.namespace,
                )
            current_version = current.get("metadata", {}).get("resourceVersion")
            if (
                self.strict_resource_version
                and obj.resource_version
                and current_version
                and obj.resource_version != current_version
            ):
                log.warning(
                    "Unable to update %s. resourceVersion is out of date", obj
                )
                raise ConflictError(
                    f"{obj} has been modified: resourceVersion "
                    f"{obj.resource_version} != {current_version}",
                    kind=obj.kind,
                    name=obj.name,
                    namespace=obj.namespace,
                )
            current_metadata = current.get("metadata", {})
            resource["metadata"]["uid"] = current_metadata.get("uid")
            resource["metadata"]["creationTimestamp"] = current_metadata.get(
                "creationTimestamp"
            )
            return copy.deepcopy(self._store(resource))

    ## Implementation Details ##################################################

    def _lookup(self, resource: dict) -> Optional[dict]:
        metadata = resource.get("metadata", {})
        return (
            self._cluster_content.get(metadata.get("namespace"), {})
            .get(resource.get("kind"), {})
            .get(resource.get("apiVersion"), {})
            .get(metadata.get("name"))
        )

    def _store(self, resource: dict) -> dict:
        """Persist the resource the way the API server would: assign server
        side metadata and fold Secret stringData into data
        """
        metadata = resource.setdefault("metadata", {})
        metadata.setdefault("uid", str(uuid.uuid4()))
        metadata.setdefault("creationTimestamp", datetime.now().isoformat())
        metadata["resourceVersion"] = str(next(self._resource_versions)).zfill(5)

        if resource.get("kind") == SECRET_KIND and "stringData" in resource:
            string_data = resource.pop("stringData") or {}
            if string_data:
                data = resource.get("data") or {}
                data.update(encode(string_data))
                resource["data"] = data

        with DRY_RUN_CLUSTER_LOCK:
            entries = (
                self._cluster_content.setdefault(metadata.get("namespace"), {})
                .setdefault(resource.get("kind"), {})
                .setdefault(resource.get("apiVersion"), {})
            )
            entries[metadata["name"]] = resource
        log.debug4(resource)
        return resource
