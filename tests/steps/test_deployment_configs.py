"""
Tests for the DeploymentConfig field steps
"""

# Standard
import copy

# Third Party
import pytest

# Local
from amp_upgrade import constants
from amp_upgrade.exceptions import NotFoundError, ShapeMismatchError
from amp_upgrade.steps import (
    SystemAppEnvVars,
    SystemAppPreHookPod,
    SystemSidekiqEnvVars,
)
from amp_upgrade.test_helpers.helpers import (
    LEGACY_PRE_HOOK_COMMAND,
    PRE_HOOK_COMMAND,
    legacy_resources,
    migrated_resources,
    setup_cr,
    setup_session,
)

## Helpers #####################################################################


def get_dc(session, name):
    return session.object_store.get_obj(constants.DEPLOYMENT_CONFIG_KIND, name)


def pre_hook(deployment_config):
    return deployment_config["spec"]["strategy"]["rollingParams"]["pre"]["execNewPod"]


def containers(deployment_config):
    return deployment_config["spec"]["template"]["spec"]["containers"]


def legacy_session():
    cr = setup_cr()
    return setup_session(cr, legacy_resources(cr)[1:])


def migrated_session():
    cr = setup_cr()
    return setup_session(cr, migrated_resources(cr)[1:])


## SystemAppPreHookPod #########################################################


def test_pre_hook_pod_migrated():
    """Make sure the pre hook command and env are aligned in one write without
    touching the containers
    """
    session = legacy_session()
    before = get_dc(session, constants.SYSTEM_APP_NAME)
    assert pre_hook(before)["command"] == LEGACY_PRE_HOOK_COMMAND

    assert SystemAppPreHookPod().migrate(session)
    assert session.object_store.write_count == 1

    after = get_dc(session, constants.SYSTEM_APP_NAME)
    desired = session.desired_state.app_deployment_config()
    assert pre_hook(after)["command"] == PRE_HOOK_COMMAND
    assert pre_hook(after)["env"] == pre_hook(desired)["env"]
    assert containers(after) == containers(before)


def test_pre_hook_pod_noop():
    session = migrated_session()
    assert not SystemAppPreHookPod().migrate(session)
    assert session.object_store.write_count == 0


def test_pre_hook_pod_missing_dc():
    """Make sure a missing DeploymentConfig propagates"""
    session = setup_session()
    with pytest.raises(NotFoundError) as err:
        SystemAppPreHookPod().migrate(session)
    assert err.value.name == constants.SYSTEM_APP_NAME


## SystemSidekiqEnvVars ########################################################


def test_sidekiq_env_vars():
    """Make sure the sidekiq container env is aligned and nothing else"""
    session = legacy_session()
    before = get_dc(session, constants.SYSTEM_SIDEKIQ_NAME)
    assert SystemSidekiqEnvVars().migrate(session)

    after = get_dc(session, constants.SYSTEM_SIDEKIQ_NAME)
    desired = session.desired_state.sidekiq_deployment_config()
    assert containers(after)[0]["env"] == containers(desired)[0]["env"]
    assert containers(after)[0]["image"] == containers(before)[0]["image"]
    assert after["spec"]["replicas"] == before["spec"]["replicas"]
    assert not SystemSidekiqEnvVars().migrate(session)
    assert session.object_store.write_count == 1


def test_sidekiq_env_vars_shape_mismatch():
    """Make sure an extra live container is rejected without any write"""
    cr = setup_cr()
    resources = legacy_resources(cr)[1:]
    for resource in resources:
        if resource["metadata"]["name"] == constants.SYSTEM_SIDEKIQ_NAME:
            containers(resource).append(copy.deepcopy(containers(resource)[0]))
    session = setup_session(cr, resources)
    outcome = SystemSidekiqEnvVars().run(session)
    assert isinstance(outcome.error, ShapeMismatchError)
    assert session.object_store.write_count == 0


## SystemAppEnvVars ############################################################


def test_app_env_vars_single_write():
    """Make sure every container and the pre hook pod are aligned together"""
    session = legacy_session()
    assert SystemAppEnvVars().migrate(session)
    assert session.object_store.write_count == 1

    after = get_dc(session, constants.SYSTEM_APP_NAME)
    desired = session.desired_state.app_deployment_config()
    for live, target in zip(containers(after), containers(desired)):
        assert live["env"] == target["env"]
    assert pre_hook(after)["env"] == pre_hook(desired)["env"]
    assert pre_hook(after)["command"] == LEGACY_PRE_HOOK_COMMAND


def test_app_env_vars_noop():
    session = migrated_session()
    assert not SystemAppEnvVars().migrate(session)
    assert session.object_store.write_count == 0
