"""
Steps moving the S3 bucket and region settings out of the APIManager spec and
the system-environment config map into the AWS credentials secret.

The order matters: the CR attributes are only stripped once the secret holds
the values, so the source of truth is never lost if a write fails.
"""

# First Party
import alog

# Local
from .. import constants, root_resource, secret_data
from ..session import Session
from .base import MigrationStep

log = alog.use_channel("S3STP")

# Pairs of (secret key, attribute of the CR S3 block)
RELOCATED_ATTRIBUTES = [
    (constants.AWS_BUCKET, root_resource.S3_AWS_BUCKET),
    (constants.AWS_REGION, root_resource.S3_AWS_REGION),
]


class RemoveS3ConfigFromSystemEnvironment(MigrationStep):
    """Drop the plaintext S3 keys from the system-environment config map"""

    def migrate(self, session: Session) -> bool:
        configmap = session.get_object(
            kind=constants.CONFIGMAP_KIND,
            name=constants.SYSTEM_ENVIRONMENT_CONFIGMAP_NAME,
            api_version=constants.CORE_API_VERSION,
        )
        data = configmap.get("data") or {}

        changed = False
        for key in (constants.AWS_BUCKET, constants.AWS_REGION):
            if key in data:
                log.debug2("Removing %s", key)
                del data[key]
                changed = True
        if not changed:
            return False

        session.update_object(configmap)
        return True


class MigrateAwsCredentialsSecret(MigrationStep):
    """Stage the CR bucket and region into the AWS credentials secret.

    The secret must already exist; it is never created here. A key that is
    already present is never overwritten, even when its value differs from
    the CR.
    """

    def migrate(self, session: Session) -> bool:
        # NotFoundError propagates: the secret is provisioned by the user
        secret = session.get_object(
            kind=constants.SECRET_KIND,
            name=session.root_resource.aws_credentials_secret_name(),
            api_version=constants.CORE_API_VERSION,
        )
        s3_spec = session.root_resource.s3_spec()
        current = secret_data.decode(secret.get("data"))
        string_data = secret.get("stringData") or {}

        changed = False
        for key, attribute in RELOCATED_ATTRIBUTES:
            if key in current:
                log.debug3("%s already present in the secret", key)
                continue
            string_data[key] = s3_spec.get(attribute) or ""
            changed = True
        if not changed:
            return False

        secret["stringData"] = string_data
        session.update_object(secret)
        return True


class StripS3Attributes(MigrationStep):
    """Remove the bucket and region attributes from the CR S3 block"""

    def migrate(self, session: Session) -> bool:
        s3_spec = session.root_resource.s3_spec()

        changed = False
        for _, attribute in RELOCATED_ATTRIBUTES:
            if s3_spec.get(attribute):
                log.debug2("Removing %s.%s", root_resource.S3, attribute)
                del s3_spec[attribute]
                changed = True
        if not changed:
            return False

        session.update_root_resource()
        return True
