"""
This module holds common helper functions for making testing easy
"""

# Standard
from contextlib import contextmanager
from unittest import mock
import copy
import inspect
import os

# First Party
import aconfig
import alog

# Local
from amp_upgrade import constants
from amp_upgrade.config import library_config as config_detail_dict
from amp_upgrade.desired_state import DesiredStateProvider
from amp_upgrade.object_store.dry_run_store import DryRunObjectStore
from amp_upgrade.object_store.owner_references import set_controller_reference
from amp_upgrade.root_resource import RootResource
from amp_upgrade.secret_data import encode
from amp_upgrade.session import Session

log = alog.use_channel("TEST")


def configure_logging():
    alog.configure(
        os.environ.get("LOG_LEVEL", "off"),
        os.environ.get("LOG_FILTERS", ""),
        formatter="json"
        if os.environ.get("LOG_JSON", "").lower() == "true"
        else "pretty",
        thread_id=os.environ.get("LOG_THREAD_ID", "").lower() == "true",
    )


configure_logging()

TEST_INSTANCE_NAME = "example-apimanager"
TEST_INSTANCE_UID = "12345678-1234-1234-1234-123456789012"
TEST_NAMESPACE = "test"
AWS_CREDENTIALS_SECRET_NAME = "aws-auth"
SMTP_DATA = {"address": "smtp.example.com", "port": "25"}


## Root resource ###############################################################


def setup_cr(
    spec=None,
    name=TEST_INSTANCE_NAME,
    namespace=TEST_NAMESPACE,
    **kwargs,
):
    """Build an APIManager manifest with the given spec"""
    cr_dict = copy.deepcopy(kwargs)
    cr_dict.setdefault("kind", "APIManager")
    cr_dict.setdefault("apiVersion", "apps.3scale.net/v1alpha1")
    cr_dict.setdefault("metadata", {}).setdefault("name", name)
    cr_dict["metadata"].setdefault("namespace", namespace)
    cr_dict["metadata"].setdefault("uid", TEST_INSTANCE_UID)
    cr_dict.setdefault("spec", {}).update(copy.deepcopy(spec or {}))
    cr_dict["spec"].setdefault("wildcardDomain", "example.com")
    return aconfig.Config(cr_dict, override_env_vars=False)


def s3_spec(bucket="my-bucket", region="us-east-1"):
    """Spec fragment for an APIManager storing files on S3"""
    s3_block = {"awsCredentialsSecret": {"name": AWS_CREDENTIALS_SECRET_NAME}}
    if bucket is not None:
        s3_block["awsBucket"] = bucket
    if region is not None:
        s3_block["awsRegion"] = region
    return {"system": {"fileStorage": {"amazonSimpleStorageService": s3_block}}}


## Failure injection ###########################################################


def get_failable_method(fail_flag, method):
    log.debug4(
        "Setting up failable mock of [%s] with fail flag: %s", str(method), fail_flag
    )

    def failable_method(*args, **kwargs):
        if isinstance(fail_flag, Exception) or (
            inspect.isclass(fail_flag) and issubclass(fail_flag, Exception)
        ):
            log.debug4("Raising in failable mock")
            raise fail_flag
        if callable(fail_flag):
            log.debug4("Calling callable fail flag")
            res = fail_flag(*args, **kwargs)
            if res is not None:
                return res
        log.debug4("Passing through (%s, **%s)", args, kwargs)
        return method(*args, **kwargs)

    return failable_method


class FailOnce:
    """Helper callable that will fail once on the N'th call"""

    def __init__(self, fail_val, fail_number=1):
        self.call_count = 0
        self.fail_number = fail_number
        self.fail_val = fail_val

    def __call__(self, *_, **__):
        self.call_count += 1
        if self.call_count == self.fail_number:
            log.debug("Failing on call %d with %s", self.call_count, self.fail_val)
            if isinstance(self.fail_val, type) and issubclass(self.fail_val, Exception):
                raise self.fail_val("Raising!")
            raise self.fail_val
        log.debug("Not failing on call %d", self.call_count)


class MockObjectStore(DryRunObjectStore):
    """The MockObjectStore wraps a standard DryRunObjectStore, records every
    call and can be configured to simulate failures in each of its operations
    """

    def __init__(
        self,
        resources=None,
        get_fail=None,
        create_fail=None,
        update_fail=None,
        **kwargs,
    ):
        super().__init__(resources=resources, **kwargs)
        self.get = mock.Mock(side_effect=get_failable_method(get_fail, super().get))
        self.create = mock.Mock(
            side_effect=get_failable_method(create_fail, super().create)
        )
        self.update = mock.Mock(
            side_effect=get_failable_method(update_fail, super().update)
        )

    def get_obj(self, kind, name, namespace=TEST_NAMESPACE, api_version=None):
        """Fetch without recording the call"""
        return DryRunObjectStore.get(self, kind, name, namespace, api_version)

    def has_obj(self, *args, **kwargs):
        try:
            self.get_obj(*args, **kwargs)
            return True
        except Exception:  # pylint: disable=broad-except
            return False

    def get_cr(self, name=TEST_INSTANCE_NAME, namespace=TEST_NAMESPACE):
        return aconfig.Config(
            self.get_obj("APIManager", name, namespace), override_env_vars=False
        )

    @property
    def write_count(self) -> int:
        return self.create.call_count + self.update.call_count

    def reset_calls(self):
        self.get.reset_mock()
        self.create.reset_mock()
        self.update.reset_mock()

    def touched_names(self):
        """Names of every object that was looked up or written"""
        names = [call.kwargs.get("name") for call in self.get.call_args_list]
        for call in self.create.call_args_list + self.update.call_args_list:
            names.append(call.args[0]["metadata"]["name"])
        return names


## Desired state ###############################################################

AMP_IMAGES = {
    "amp-apicast": "quay.io/3scale/apicast",
    "amp-backend": "quay.io/3scale/apisonator",
    "amp-system": "quay.io/3scale/porta",
    "amp-zync": "quay.io/3scale/zync",
    "zync-database-postgresql": "centos/postgresql-10-centos7",
    "system-memcached": "memcached",
}
DATABASE_IMAGES = {
    "backend-redis": "centos/redis-5-centos7",
    "system-redis": "centos/redis-5-centos7",
    "system-mysql": "centos/mysql-57-centos7",
    "system-postgresql": "centos/postgresql-10-centos7",
}
SMTP_ENV_KEYS = {
    "SMTP_ADDRESS": "address",
    "SMTP_PORT": "port",
}
SYSTEM_APP_CONTAINERS = ["system-master", "system-provider", "system-developer"]
PRE_HOOK_COMMAND = ["bash", "-c", "bundle exec rake boot openshift:deploy"]
RELEASE = "2.8"
PREVIOUS_RELEASE = "2.7"
LEGACY_PRE_HOOK_COMMAND = [
    "bash",
    "-c",
    "bundle exec rake boot openshift:deploy MASTER_ACCESS_TOKEN=$MASTER_ACCESS_TOKEN",
]


class FakeDesiredStateProvider(DesiredStateProvider):
    """Deterministic provider computing small but realistic manifests from the
    APIManager
    """

    def app_deployment_config(self):
        env = self._system_env()
        containers = [
            {"name": name, "image": "amp-system:latest", "env": copy.deepcopy(env)}
            for name in SYSTEM_APP_CONTAINERS
        ]
        pre_hook = {
            "containerName": "system-master",
            "command": list(PRE_HOOK_COMMAND),
            "env": copy.deepcopy(env),
        }
        return self._deployment_config(
            constants.SYSTEM_APP_NAME, containers, pre_hook=pre_hook
        )

    def sidekiq_deployment_config(self):
        containers = [
            {
                "name": "system-sidekiq",
                "image": "amp-system:latest",
                "env": self._system_env(),
            }
        ]
        return self._deployment_config(constants.SYSTEM_SIDEKIQ_NAME, containers)

    def smtp_secret(self):
        return {
            "apiVersion": constants.CORE_API_VERSION,
            "kind": constants.SECRET_KIND,
            "metadata": {
                "name": constants.SYSTEM_SMTP_SECRET_NAME,
                "labels": {"app": "3scale-api-management"},
            },
            "type": "Opaque",
            "stringData": {"address": "", "port": ""},
        }

    def amp_image_streams(self):
        return [self._image_stream(name, image) for name, image in AMP_IMAGES.items()]

    def backend_redis_image_stream(self):
        return self._image_stream("backend-redis", DATABASE_IMAGES["backend-redis"])

    def system_redis_image_stream(self):
        return self._image_stream("system-redis", DATABASE_IMAGES["system-redis"])

    def system_mysql_image_stream(self):
        return self._image_stream("system-mysql", DATABASE_IMAGES["system-mysql"])

    def system_postgresql_image_stream(self):
        return self._image_stream(
            "system-postgresql", DATABASE_IMAGES["system-postgresql"]
        )

    ## Implementation Details ##################################################

    def _system_env(self):
        env = [
            {
                "name": env_name,
                "valueFrom": {
                    "secretKeyRef": {
                        "name": constants.SYSTEM_SMTP_SECRET_NAME,
                        "key": key,
                    }
                },
            }
            for env_name, key in SMTP_ENV_KEYS.items()
        ]
        if self.root_resource.has_s3():
            secret_name = self.root_resource.aws_credentials_secret_name()
            env.extend(
                {
                    "name": key,
                    "valueFrom": {"secretKeyRef": {"name": secret_name, "key": key}},
                }
                for key in (constants.AWS_BUCKET, constants.AWS_REGION)
            )
        return env

    @staticmethod
    def _deployment_config(name, containers, pre_hook=None):
        spec = {
            "replicas": 1,
            "template": {
                "metadata": {"labels": {"deploymentConfig": name}},
                "spec": {"containers": containers},
            },
        }
        if pre_hook is not None:
            spec["strategy"] = {
                "type": "Rolling",
                "rollingParams": {
                    "pre": {"failurePolicy": "Retry", "execNewPod": pre_hook}
                },
            }
        return {
            "apiVersion": constants.DEPLOYMENT_CONFIG_API_VERSION,
            "kind": constants.DEPLOYMENT_CONFIG_KIND,
            "metadata": {"name": name},
            "spec": spec,
        }

    @staticmethod
    def _image_stream(name, image):
        return {
            "apiVersion": constants.IMAGE_STREAM_API_VERSION,
            "kind": constants.IMAGE_STREAM_KIND,
            "metadata": {"name": name},
            "spec": {
                "tags": [
                    {
                        "name": RELEASE,
                        "from": {"kind": "DockerImage", "name": f"{image}:{RELEASE}"},
                        "importPolicy": {"insecure": False},
                    },
                    {
                        "name": "latest",
                        "from": {
                            "kind": "ImageStreamTag",
                            "name": f"{name}:{RELEASE}",
                        },
                    },
                ]
            },
        }


## Cluster fixtures ############################################################


def configmap(name, data, namespace=TEST_NAMESPACE):
    return {
        "apiVersion": constants.CORE_API_VERSION,
        "kind": constants.CONFIGMAP_KIND,
        "metadata": {"name": name, "namespace": namespace},
        "data": dict(data),
    }


def secret(name, string_data, namespace=TEST_NAMESPACE):
    return {
        "apiVersion": constants.CORE_API_VERSION,
        "kind": constants.SECRET_KIND,
        "metadata": {"name": name, "namespace": namespace},
        "type": "Opaque",
        "data": encode(string_data),
    }


def aws_credentials_secret(bucket="my-bucket", region="us-east-1"):
    """The user provisioned AWS credentials secret. Bucket and region are only
    included when given.
    """
    string_data = {
        "AWS_ACCESS_KEY_ID": "access-key",
        "AWS_SECRET_ACCESS_KEY": "secret-key",
    }
    if bucket is not None:
        string_data[constants.AWS_BUCKET] = bucket
    if region is not None:
        string_data[constants.AWS_REGION] = region
    return secret(AWS_CREDENTIALS_SECRET_NAME, string_data)


def migrated_resources(cr):
    """Every object of a cluster that has already been fully upgraded, given
    the APIManager as it stands after its own migration
    """
    provider = FakeDesiredStateProvider(RootResource(cr))
    root = provider.root_resource
    owned = [
        provider.app_deployment_config(),
        provider.sidekiq_deployment_config(),
        secret(constants.SYSTEM_SMTP_SECRET_NAME, SMTP_DATA),
        *provider.amp_image_streams(),
    ]
    if not root.is_external_database_enabled():
        owned.append(provider.backend_redis_image_stream())
        owned.append(provider.system_redis_image_stream())
        if root.is_postgresql_enabled():
            owned.append(provider.system_postgresql_image_stream())
        else:
            owned.append(provider.system_mysql_image_stream())

    resources = [copy.deepcopy(cr), configmap(constants.SMTP_CONFIGMAP_NAME, SMTP_DATA)]
    for resource in owned:
        resource = copy.deepcopy(resource)
        resource["metadata"]["namespace"] = cr["metadata"]["namespace"]
        set_controller_reference(cr, resource)
        resources.append(resource)
    if root.has_s3():
        resources.append(configmap(constants.SYSTEM_ENVIRONMENT_CONFIGMAP_NAME, {}))
        resources.append(aws_credentials_secret())
    return resources


def legacy_resources(cr):
    """Every object of a cluster still in the shape of the previous release:
    SMTP settings read from the plaintext config map, no system-smtp secret and
    ImageStreams pointing at the previous release
    """
    resources = migrated_resources(cr)
    legacy = []
    for resource in resources:
        name = resource["metadata"]["name"]
        kind = resource["kind"]
        if (kind, name) == (constants.SECRET_KIND, constants.SYSTEM_SMTP_SECRET_NAME):
            continue
        if kind == constants.DEPLOYMENT_CONFIG_KIND:
            resource = _legacy_deployment_config(resource)
        elif kind == constants.IMAGE_STREAM_KIND:
            resource["spec"]["tags"] = [
                {
                    "name": PREVIOUS_RELEASE,
                    "from": {
                        "kind": "DockerImage",
                        "name": f"{name}:{PREVIOUS_RELEASE}",
                    },
                }
            ]
        legacy.append(resource)
    return legacy


def _legacy_deployment_config(deployment_config):
    legacy_env = [
        {
            "name": env_name,
            "valueFrom": {
                "configMapKeyRef": {"name": constants.SMTP_CONFIGMAP_NAME, "key": key}
            },
        }
        for env_name, key in SMTP_ENV_KEYS.items()
    ]
    for container in deployment_config["spec"]["template"]["spec"]["containers"]:
        container["env"] = copy.deepcopy(legacy_env)
    pre_hook = (
        deployment_config["spec"]
        .get("strategy", {})
        .get("rollingParams", {})
        .get("pre", {})
        .get("execNewPod")
    )
    if pre_hook is not None:
        pre_hook["env"] = copy.deepcopy(legacy_env)
        pre_hook["command"] = list(LEGACY_PRE_HOOK_COMMAND)
    return deployment_config


def setup_session(cr=None, resources=None, store=None, **store_kwargs):
    """Build a Session backed by a MockObjectStore holding the CR and the given
    resources
    """
    cr = cr if cr is not None else setup_cr()
    if store is None:
        store = MockObjectStore(resources=[cr, *(resources or [])], **store_kwargs)
    return Session(cr, store, FakeDesiredStateProvider)


@contextmanager
def library_config(**config_overrides):
    """This context manager sets library config values temporarily and reverts
    them on completion
    """
    # Override the configs and hang onto the old values
    old_vals = {}
    for key, val in config_overrides.items():
        if key in config_detail_dict:
            old_vals[key] = config_detail_dict[key]
        config_detail_dict[key] = val

    # Yield to the context
    yield

    # Revert to the old values
    for key in config_overrides:
        if key in old_vals:
            config_detail_dict[key] = old_vals[key]
        else:
            del config_detail_dict[key]
