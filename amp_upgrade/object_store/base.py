"""
This defines the base class for all ObjectStore types.
"""

# Standard
from typing import Optional
import abc


class ObjectStoreBase(abc.ABC):
    """
    Base class for object stores which are responsible for the point lookups
    and writes the upgrade performs. Stores never list, watch or delete.
    """

    @abc.abstractmethod
    def get(
        self,
        kind: str,
        name: str,
        namespace: Optional[str] = None,
        api_version: Optional[str] = None,
    ) -> dict:
        """Fetch the current state of a single object

        Args:
            kind:  str
                The kind of the object to fetch
            name:  str
                The name of the object to fetch
            namespace:  Optional[str]
                The namespace to search for the object
            api_version:  Optional[str]
                The api_version of the resource kind to fetch

        Returns:
            current_state:  dict
                The dict representation of the object, including its
                metadata.resourceVersion

        Raises:
            NotFoundError: No such object
            ObjectStoreError: Any other failure
        """

    @abc.abstractmethod
    def create(self, resource_definition: dict) -> dict:
        """Create a fully formed object

        Args:
            resource_definition:  dict
                The full manifest of the object to create

        Returns:
            current_state:  dict
                The object as stored

        Raises:
            AlreadyExistsError: An object with the same identity exists
            ObjectStoreError: Any other failure
        """

    @abc.abstractmethod
    def update(self, resource_definition: dict) -> dict:
        """Replace an existing object. The write is rejected if the
        metadata.resourceVersion of the definition is stale.

        Args:
            resource_definition:  dict
                The full manifest of the object, as previously fetched and then
                modified

        Returns:
            current_state:  dict
                The object as stored

        Raises:
            ConflictError: The resourceVersion was stale
            NotFoundError: No such object
            ObjectStoreError: Any other failure
        """
