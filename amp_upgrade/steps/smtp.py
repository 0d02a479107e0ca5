"""
Step relocating the SMTP settings from the legacy plaintext config map into the
system-smtp secret
"""

# First Party
import alog

# Local
from .. import constants, secret_data
from ..exceptions import NotFoundError
from ..object_store.owner_references import set_controller_reference
from ..session import Session
from .base import MigrationStep

log = alog.use_channel("SMTP")


class MigrateSMTPData(MigrationStep):
    """Copy the data of the smtp config map into the system-smtp secret.

    The config map is required. When the secret does not exist yet it is built
    from its default desired shape and created with the config map's data. When
    it exists, its decoded data is compared with the config map's data and
    replaced if they differ. The config map itself is never removed here.
    """

    def migrate(self, session: Session) -> bool:
        configmap = session.get_object(
            kind=constants.CONFIGMAP_KIND,
            name=constants.SMTP_CONFIGMAP_NAME,
            api_version=constants.CORE_API_VERSION,
        )
        smtp_data = dict(configmap.get("data") or {})

        try:
            secret = session.get_object(
                kind=constants.SECRET_KIND,
                name=constants.SYSTEM_SMTP_SECRET_NAME,
                api_version=constants.CORE_API_VERSION,
            )
        except NotFoundError:
            log.debug2(
                "Secret %s not found. Creating it from config map %s",
                constants.SYSTEM_SMTP_SECRET_NAME,
                constants.SMTP_CONFIGMAP_NAME,
            )
            session.create_object(self._new_secret(session, smtp_data))
            return True

        if secret_data.decode(secret.get("data")) == smtp_data:
            return False

        secret["data"] = secret_data.encode(smtp_data)
        session.update_object(secret)
        return True

    @staticmethod
    def _new_secret(session: Session, smtp_data: dict) -> dict:
        secret = session.desired_state.smtp_secret()
        secret.setdefault("metadata", {})["namespace"] = session.namespace
        set_controller_reference(session.root_resource.manifest, secret)

        # stringData takes precedence over data on write, so it must not
        # carry the provider's defaults
        secret.pop("stringData", None)
        secret["data"] = secret_data.encode(smtp_data)
        return secret
