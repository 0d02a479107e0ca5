"""
Steps removing blocks of the APIManager spec that older releases filled in with
explicit default values. Once removed, the current defaults are computed again
by the desired state builders.

A block is only removed when its sentinel field is unset, so user
customizations are never stripped.
"""

# First Party
import alog

# Local
from .. import root_resource
from ..session import Session
from ..utils import nested_pop
from .base import MigrationStep
from .conditions import internal_databases

log = alog.use_channel("CRDEF")


class StripStorageDefaults(MigrationStep):
    """Remove a persistentVolumeClaim file storage block that has no
    storageClassName
    """

    def migrate(self, session: Session) -> bool:
        pvc = session.root_resource.pvc_spec()
        if pvc is None or pvc.get(root_resource.PVC_STORAGE_CLASS_NAME) is not None:
            return False

        log.debug("Removing default %s", root_resource.FILE_STORAGE)
        nested_pop(session.root_resource.manifest, root_resource.FILE_STORAGE)
        session.update_root_resource()
        return True


class StripDatabaseDefaults(MigrationStep):
    """Remove a mysql database block that has no image override. Only relevant
    when the databases are managed internally.
    """

    def __init__(self, **kwargs):
        kwargs.setdefault("condition", internal_databases)
        super().__init__(**kwargs)

    def migrate(self, session: Session) -> bool:
        mysql = session.root_resource.mysql_spec()
        if mysql is None or mysql.get(root_resource.DATABASE_MYSQL_IMAGE) is not None:
            return False

        log.debug("Removing default %s", root_resource.DATABASE)
        nested_pop(session.root_resource.manifest, root_resource.DATABASE)
        session.update_root_resource()
        return True
