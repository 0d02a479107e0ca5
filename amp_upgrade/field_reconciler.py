"""
Narrow field patching between a desired and an existing object. Each public
function names the one field path it owns. Nothing outside that path is read
or written, so live values owned by others (status, unrelated containers,
replicas) are left untouched.
"""

# Standard
import copy

# First Party
import alog

# Local
from .exceptions import ShapeMismatchError
from .utils import nested_get, nested_pop, nested_set

log = alog.use_channel("FIELD")

# Sentinel for absent fields
_ABSENT = object()

## Field paths #################################################################

POD_TEMPLATE_CONTAINERS = "spec.template.spec.containers"
CONTAINER_ENV = "env"
PRE_HOOK_POD = "spec.strategy.rollingParams.pre.execNewPod"
PRE_HOOK_POD_ENV = f"{PRE_HOOK_POD}.env"
PRE_HOOK_POD_COMMAND = f"{PRE_HOOK_POD}.command"
IMAGE_STREAM_TAGS = "spec.tags"

## Generic #####################################################################


def ensure_field(desired: dict, existing: dict, path: str) -> bool:
    """Make the value at the given path of the existing object structurally
    equal to the desired one

    Args:
        desired:  dict
            The object holding the target value
        existing:  dict
            The object to patch in place
        path:  str
            The dotted path of the single field to compare

    Returns:
        changed:  bool
            True if the existing object was modified
    """
    desired_value = nested_get(desired, path, _ABSENT)
    existing_value = nested_get(existing, path, _ABSENT)
    if desired_value == existing_value:
        return False

    log.debug3("Field [%s] differs: %s != %s", path, existing_value, desired_value)
    if desired_value is _ABSENT:
        nested_pop(existing, path)
    else:
        nested_set(existing, path, copy.deepcopy(desired_value))
    return True


## DeploymentConfig ############################################################


def ensure_pod_template_env_vars(desired: dict, existing: dict) -> bool:
    """Align the env list of every pod template container. Containers are
    matched by position, so both objects must have the same number of them.

    Raises:
        ShapeMismatchError: The container counts differ
    """
    desired_containers = nested_get(desired, POD_TEMPLATE_CONTAINERS) or []
    existing_containers = nested_get(existing, POD_TEMPLATE_CONTAINERS) or []
    if len(desired_containers) != len(existing_containers):
        name = nested_get(desired, "metadata.name")
        raise ShapeMismatchError(
            f"{name} desired containers length "
            f"({len(desired_containers)}) does not match existing containers "
            f"length ({len(existing_containers)})"
        )

    changed = False
    for desired_container, existing_container in zip(
        desired_containers, existing_containers
    ):
        if ensure_field(desired_container, existing_container, CONTAINER_ENV):
            log.debug2(
                "Env vars changed for container [%s]", existing_container.get("name")
            )
            changed = True
    return changed


def ensure_pre_hook_pod_env_vars(desired: dict, existing: dict) -> bool:
    return ensure_field(desired, existing, PRE_HOOK_POD_ENV)


def ensure_pre_hook_pod_command(desired: dict, existing: dict) -> bool:
    return ensure_field(desired, existing, PRE_HOOK_POD_COMMAND)


## ImageStream #################################################################


def ensure_image_stream_tags(desired: dict, existing: dict) -> bool:
    return ensure_field(desired, existing, IMAGE_STREAM_TAGS)
