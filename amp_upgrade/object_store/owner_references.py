"""
This module holds the functionality used to link objects created during the
upgrade to the APIManager that owns them
"""

# First Party
import alog

# Local
from ..exceptions import ClusterError, assert_config

log = alog.use_channel("OWNRF")


def set_controller_reference(owner_cr: dict, child_obj: dict):
    """Add a controller ownerReference for the owner CR to the child object so
    that it is garbage collected along with the CR

    Args:
        owner_cr:  dict
            The full manifest of the owning resource
        child_obj:  dict
            The manifest of the object about to be created. Modified in place.
    """
    _validate_object_struct(owner_cr)
    _validate_object_struct(child_obj)

    owner_metadata = owner_cr["metadata"]
    child_metadata = child_obj["metadata"]
    assert_config(
        owner_metadata.get("namespace") == child_metadata.get("namespace"),
        "Cross-namespace owner references are not allowed",
    )

    owner_refs = list(child_metadata.get("ownerReferences") or [])
    for ref in owner_refs:
        if not ref.get("controller"):
            continue
        if ref.get("uid") == owner_metadata.get("uid"):
            log.debug2("Controller reference already present")
            return
        raise ClusterError(
            f"Object {child_metadata['name']} is already owned by another "
            f"{ref.get('kind')} controller {ref.get('name')}"
        )

    owner_refs.append(_make_owner_reference(owner_cr))
    log.debug4("Final owner refs: %s", owner_refs)
    child_metadata["ownerReferences"] = owner_refs


## Implementation Details ######################################################


def _validate_object_struct(obj: dict):
    """Ensure that the required portions of an object are present (kind,
    apiVerison, metadata.name)
    """
    assert "kind" in obj, "Got object without 'kind'"
    assert "apiVersion" in obj, "Got object without 'apiVersion'"
    metadata = obj.get("metadata")
    assert isinstance(metadata, dict), "Got object with non-dict 'metadata'"
    assert "name" in metadata, "Got object without 'metadata.name'"


def _make_owner_reference(owner_cr: dict) -> dict:
    """Make a controller owner reference for the given CR instance

    Args:
        owner_cr:  dict
            The full CR manifest for the owning resource

    Returns:
        owner_reference:  dict
            The dict entry for the `metadata.ownerReferences` entry of the owned
            object
    """
    metadata = owner_cr.get("metadata", {})
    return {
        "apiVersion": owner_cr.get("apiVersion"),
        "kind": owner_cr.get("kind"),
        "name": metadata.get("name"),
        "uid": metadata.get("uid"),
        "controller": True,
        # The parent will not be deleted until this object completes its
        # deletion
        "blockOwnerDeletion": True,
    }
