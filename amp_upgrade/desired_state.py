"""
Interface to the builders that compute the canonical shape of each managed
object from the APIManager
"""

# Standard
from typing import List
import abc

# Local
from .root_resource import RootResource


class DesiredStateProvider(abc.ABC):
    """A DesiredStateProvider deterministically computes fully formed target
    manifests from the current content of the root resource. Implementations
    must be pure: calling a method twice against the same root resource yields
    equal manifests.
    """

    def __init__(self, root_resource: RootResource):
        self.root_resource = root_resource

    ## System ##################################################################

    @abc.abstractmethod
    def app_deployment_config(self) -> dict:
        """The system-app DeploymentConfig"""

    @abc.abstractmethod
    def sidekiq_deployment_config(self) -> dict:
        """The system-sidekiq DeploymentConfig"""

    @abc.abstractmethod
    def smtp_secret(self) -> dict:
        """The default system-smtp Secret"""

    ## Images ##################################################################

    @abc.abstractmethod
    def amp_image_streams(self) -> List[dict]:
        """The ImageStreams for the main system images, in migration order"""

    @abc.abstractmethod
    def backend_redis_image_stream(self) -> dict:
        """The ImageStream for the backend redis"""

    @abc.abstractmethod
    def system_redis_image_stream(self) -> dict:
        """The ImageStream for the system redis"""

    @abc.abstractmethod
    def system_mysql_image_stream(self) -> dict:
        """The ImageStream for the system MySQL database"""

    @abc.abstractmethod
    def system_postgresql_image_stream(self) -> dict:
        """The ImageStream for the system PostgreSQL database"""
