"""
Steps moving ImageStreams to the image references of the current release
"""

# Standard
from typing import Callable, List

# First Party
import alog

# Local
from .. import constants, field_reconciler
from ..exceptions import NotFoundError
from ..managed_object import ManagedObject
from ..object_store.owner_references import set_controller_reference
from ..session import Session
from .base import MigrationStep, StepGroup

log = alog.use_channel("IMGST")

# Type definition for selecting one desired image stream
IMAGE_STREAM_SELECTOR = Callable[[Session], dict]


class ImageStreamStep(MigrationStep):
    """Create a missing ImageStream, or align the tags of an existing one"""

    def __init__(self, name: str, selector: IMAGE_STREAM_SELECTOR, **kwargs):
        super().__init__(name=name, **kwargs)
        self._selector = selector

    def migrate(self, session: Session) -> bool:
        desired = self._selector(session)
        desired_obj = ManagedObject(desired)
        try:
            existing = session.get_object(
                kind=constants.IMAGE_STREAM_KIND,
                name=desired_obj.name,
                api_version=desired_obj.api_version,
            )
        except NotFoundError:
            log.debug2("%s not found. Creating it.", desired_obj)
            desired.setdefault("metadata", {})["namespace"] = session.namespace
            set_controller_reference(session.root_resource.manifest, desired)
            session.create_object(desired)
            return True

        if not field_reconciler.ensure_image_stream_tags(desired, existing):
            return False

        session.update_object(existing)
        return True


class AmpImageStreams(StepGroup):
    """One ImageStreamStep per main system image"""

    def __init__(self, name: str = "amp_image_streams", **kwargs):
        super().__init__(name=name, **kwargs)

    def children(self, session: Session) -> List[MigrationStep]:
        return [
            ImageStreamStep(
                name=f"image_stream_{ManagedObject(image_stream).name}",
                selector=_constant(image_stream),
            )
            for image_stream in session.desired_state.amp_image_streams()
        ]


def backend_redis_image_stream(session: Session) -> dict:
    return session.desired_state.backend_redis_image_stream()


def system_redis_image_stream(session: Session) -> dict:
    return session.desired_state.system_redis_image_stream()


def system_database_image_stream(session: Session) -> dict:
    """The database image stream matching the configured system database.
    MySQL is the default.
    """
    if session.root_resource.is_postgresql_enabled():
        return session.desired_state.system_postgresql_image_stream()
    return session.desired_state.system_mysql_image_stream()


def _constant(image_stream: dict) -> IMAGE_STREAM_SELECTOR:
    return lambda _: image_stream
