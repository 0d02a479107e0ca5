"""
Steps aligning individual fields of the system DeploymentConfigs with their
desired shape
"""

# First Party
import alog

# Local
from .. import constants, field_reconciler
from ..managed_object import ManagedObject
from ..session import Session
from .base import MigrationStep

log = alog.use_channel("DCSTP")


def _get_existing(session: Session, desired: dict) -> dict:
    return session.get_object(
        kind=constants.DEPLOYMENT_CONFIG_KIND,
        name=ManagedObject(desired).name,
        api_version=constants.DEPLOYMENT_CONFIG_API_VERSION,
    )


class SystemAppPreHookPod(MigrationStep):
    """Align the command and env vars of the system-app pre-deployment hook
    pod
    """

    def migrate(self, session: Session) -> bool:
        existing = session.get_object(
            kind=constants.DEPLOYMENT_CONFIG_KIND,
            name=constants.SYSTEM_APP_NAME,
            api_version=constants.DEPLOYMENT_CONFIG_API_VERSION,
        )
        desired = session.desired_state.app_deployment_config()

        changed = field_reconciler.ensure_pre_hook_pod_env_vars(desired, existing)
        if field_reconciler.ensure_pre_hook_pod_command(desired, existing):
            changed = True
        if not changed:
            return False

        session.update_object(existing)
        return True


class SystemSidekiqEnvVars(MigrationStep):
    """Align the container env vars of system-sidekiq"""

    def migrate(self, session: Session) -> bool:
        desired = session.desired_state.sidekiq_deployment_config()
        existing = _get_existing(session, desired)

        if not field_reconciler.ensure_pod_template_env_vars(desired, existing):
            return False

        session.update_object(existing)
        return True


class SystemAppEnvVars(MigrationStep):
    """Align the container and pre-hook pod env vars of system-app in a single
    write
    """

    def migrate(self, session: Session) -> bool:
        desired = session.desired_state.app_deployment_config()
        existing = _get_existing(session, desired)

        changed = field_reconciler.ensure_pod_template_env_vars(desired, existing)
        if field_reconciler.ensure_pre_hook_pod_env_vars(desired, existing):
            changed = True
        if not changed:
            return False

        session.update_object(existing)
        return True
