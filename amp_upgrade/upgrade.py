"""
The UpgradeApiManager owns the fixed order of the migration steps and turns the
outcome of a pass into the result handed back to the calling controller.

Each invocation performs at most one write. The caller is expected to invoke
again whenever the result asks for a requeue, until a pass completes with
nothing left to do.
"""

# Standard
from dataclasses import dataclass
from typing import List, Optional, Union

# First Party
import aconfig
import alog

# Local
from .object_store import ObjectStoreBase
from .session import DESIRED_STATE_FACTORY, Session
from .steps import (
    AmpImageStreams,
    ImageStreamStep,
    MigrateAwsCredentialsSecret,
    MigrateSMTPData,
    MigrationStep,
    RemoveS3ConfigFromSystemEnvironment,
    StepGroup,
    StripDatabaseDefaults,
    StripS3Attributes,
    StripStorageDefaults,
    SystemAppEnvVars,
    SystemAppPreHookPod,
    SystemSidekiqEnvVars,
    backend_redis_image_stream,
    internal_databases,
    run_steps,
    s3_file_storage,
    system_database_image_stream,
    system_redis_image_stream,
)

log = alog.use_channel("UPGRD")


## Data models #################################################################


@dataclass
class PipelineResult:
    """PipelineResult is the result of one upgrade pass"""

    # A write happened; the pass must be run again
    requeue: bool = False
    # The error that ended the pass, to be surfaced to the administrator
    error: Optional[Exception] = None

    @property
    def done(self) -> bool:
        """The system is fully migrated"""
        return not self.requeue and self.error is None


## UpgradeApiManager ###########################################################


class UpgradeApiManager:
    """Runs the upgrade steps for one APIManager"""

    def __init__(
        self,
        cr_manifest: Union[dict, aconfig.Config],
        object_store: ObjectStoreBase,
        desired_state_factory: DESIRED_STATE_FACTORY,
    ):
        """
        Args:
            cr_manifest:  Union[dict, aconfig.Config]
                The APIManager manifest as currently stored in the cluster
            object_store:  ObjectStoreBase
                The store used for every lookup and write
            desired_state_factory:  DESIRED_STATE_FACTORY
                Callable building the desired state provider from the root
                resource
        """
        self.session = Session(
            cr_manifest=cr_manifest,
            object_store=object_store,
            desired_state_factory=desired_state_factory,
        )

    @staticmethod
    def steps() -> List[MigrationStep]:
        """The top level steps in the order they run"""
        return [
            StepGroup(
                "cr_defaults",
                [
                    StripStorageDefaults(),
                    StripDatabaseDefaults(),
                ],
            ),
            SystemAppPreHookPod(),
            StepGroup(
                "images",
                [
                    AmpImageStreams(),
                    StepGroup(
                        "database_images",
                        [
                            ImageStreamStep(
                                "backend_redis_image_stream",
                                backend_redis_image_stream,
                            ),
                            ImageStreamStep(
                                "system_redis_image_stream",
                                system_redis_image_stream,
                            ),
                            ImageStreamStep(
                                "system_database_image_stream",
                                system_database_image_stream,
                            ),
                        ],
                        condition=internal_databases,
                    ),
                ],
            ),
            StepGroup(
                "smtp",
                [
                    MigrateSMTPData(),
                    StepGroup(
                        "smtp_env_vars",
                        [SystemSidekiqEnvVars(), SystemAppEnvVars()],
                    ),
                ],
            ),
            StepGroup(
                "s3",
                [
                    RemoveS3ConfigFromSystemEnvironment(),
                    MigrateAwsCredentialsSecret(),
                    StepGroup(
                        "s3_env_vars",
                        [SystemSidekiqEnvVars(), SystemAppEnvVars()],
                    ),
                    StripS3Attributes(),
                ],
                condition=s3_file_storage,
            ),
        ]

    @alog.logged_function(log.info)
    @alog.timed_function(log.info, "Upgrade pass finished in: ")
    def upgrade(self) -> PipelineResult:
        """Run the steps in order until one of them writes or fails.

        Errors are not raised; they are returned on the result so that the
        caller can surface them and decide on backoff.

        Returns:
            result:  PipelineResult
                requeue=True if a write happened, error set if a step failed,
                both unset once the system is fully migrated
        """
        log.debug(
            "Starting upgrade pass [%s] for %s",
            self.session.id,
            self.session.root_resource,
        )
        outcome = run_steps(self.steps(), self.session)
        result = PipelineResult(requeue=outcome.mutated, error=outcome.error)
        if result.error is not None:
            log.warning("Upgrade pass failed: %s", result.error)
        elif result.requeue:
            log.info("Upgrade pass changed the cluster. Requeue required.")
        else:
            log.info("%s is fully upgraded", self.session.root_resource)
        return result
