"""
The ordered units of work performed by an upgrade pass
"""

# Local
from .base import MigrationOutcome, MigrationStep, StepGroup, run_steps
from .conditions import internal_databases, s3_file_storage
from .cr_defaults import StripDatabaseDefaults, StripStorageDefaults
from .deployment_configs import (
    SystemAppEnvVars,
    SystemAppPreHookPod,
    SystemSidekiqEnvVars,
)
from .image_streams import (
    AmpImageStreams,
    ImageStreamStep,
    backend_redis_image_stream,
    system_database_image_stream,
    system_redis_image_stream,
)
from .s3 import (
    MigrateAwsCredentialsSecret,
    RemoveS3ConfigFromSystemEnvironment,
    StripS3Attributes,
)
from .smtp import MigrateSMTPData
