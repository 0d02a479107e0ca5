"""
Read access to the APIManager custom resource that drives the upgrade
"""

# Standard
from typing import Optional, Union

# First Party
import aconfig
import alog

# Local
from .exceptions import assert_config
from .managed_object import ManagedObject
from .utils import nested_get

log = alog.use_channel("ROOTR")

## Spec paths ##################################################################

HIGH_AVAILABILITY_ENABLED = "spec.highAvailability.enabled"
FILE_STORAGE = "spec.system.fileStorage"
PVC = "spec.system.fileStorage.persistentVolumeClaim"
PVC_STORAGE_CLASS_NAME = "storageClassName"
S3 = "spec.system.fileStorage.amazonSimpleStorageService"
S3_AWS_BUCKET = "awsBucket"
S3_AWS_REGION = "awsRegion"
S3_AWS_CREDENTIALS_SECRET_NAME = "awsCredentialsSecret.name"
DATABASE = "spec.system.database"
DATABASE_MYSQL = "spec.system.database.mysql"
DATABASE_MYSQL_IMAGE = "image"
DATABASE_POSTGRESQL = "spec.system.database.postgresql"


class RootResource:
    """Wrapper around the APIManager manifest. The wrapped manifest is shared,
    not copied, so steps that strip fields mutate the object that is written
    back to the cluster.
    """

    def __init__(self, manifest: Union[dict, aconfig.Config]):
        self.manifest = manifest
        self._identity = ManagedObject(manifest)

    @property
    def name(self) -> str:
        return self._identity.name

    @property
    def namespace(self) -> str:
        return self._identity.namespace

    def __str__(self):
        return str(self._identity)

    ## Gates ###################################################################

    def is_external_database_enabled(self) -> bool:
        """Databases are managed outside of the system when high availability
        is turned on
        """
        return bool(nested_get(self.manifest, HIGH_AVAILABILITY_ENABLED, False))

    def is_postgresql_enabled(self) -> bool:
        return nested_get(self.manifest, DATABASE_POSTGRESQL) is not None

    def has_s3(self) -> bool:
        return self.s3_spec() is not None

    ## Blocks ##################################################################

    def pvc_spec(self) -> Optional[dict]:
        return nested_get(self.manifest, PVC)

    def mysql_spec(self) -> Optional[dict]:
        return nested_get(self.manifest, DATABASE_MYSQL)

    def s3_spec(self) -> Optional[dict]:
        return nested_get(self.manifest, S3)

    def aws_credentials_secret_name(self) -> str:
        name = nested_get(self.s3_spec() or {}, S3_AWS_CREDENTIALS_SECRET_NAME)
        assert_config(
            name,
            f"{self} has no {S3}.{S3_AWS_CREDENTIALS_SECRET_NAME}",
        )
        return name
