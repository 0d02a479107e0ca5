"""
Tests for the ImageStream steps
"""

# Local
from amp_upgrade import constants
from amp_upgrade.steps import (
    AmpImageStreams,
    ImageStreamStep,
    backend_redis_image_stream,
    system_database_image_stream,
)
from amp_upgrade.test_helpers.helpers import (
    AMP_IMAGES,
    RELEASE,
    TEST_INSTANCE_UID,
    TEST_NAMESPACE,
    legacy_resources,
    migrated_resources,
    setup_cr,
    setup_session,
)

## Helpers #####################################################################


def get_image_stream(session, name):
    return session.object_store.get_obj(constants.IMAGE_STREAM_KIND, name)


## ImageStreamStep #############################################################


def test_image_stream_created():
    """Make sure a missing image stream is created and owned by the CR"""
    session = setup_session()
    step = ImageStreamStep("backend_redis", backend_redis_image_stream)
    assert step.migrate(session)
    assert session.object_store.create.call_count == 1

    created = get_image_stream(session, "backend-redis")
    assert created["metadata"]["namespace"] == TEST_NAMESPACE
    owner_refs = created["metadata"]["ownerReferences"]
    assert [ref["uid"] for ref in owner_refs] == [TEST_INSTANCE_UID]
    assert created["spec"]["tags"][0]["name"] == RELEASE


def test_image_stream_tags_updated():
    """Make sure an outdated image stream gets the new tags only"""
    cr = setup_cr()
    session = setup_session(cr, legacy_resources(cr)[1:])
    before = get_image_stream(session, "backend-redis")
    step = ImageStreamStep("backend_redis", backend_redis_image_stream)
    assert step.migrate(session)

    after = get_image_stream(session, "backend-redis")
    assert [tag["name"] for tag in after["spec"]["tags"]] == [RELEASE, "latest"]
    assert after["metadata"]["ownerReferences"] == before["metadata"][
        "ownerReferences"
    ]
    assert not step.migrate(session)
    assert session.object_store.write_count == 1


def test_system_database_image_stream_selection():
    """Make sure the database image follows the configured database"""
    mysql_session = setup_session(setup_cr())
    postgresql_session = setup_session(
        setup_cr({"system": {"database": {"postgresql": {}}}})
    )
    assert (
        system_database_image_stream(mysql_session)["metadata"]["name"]
        == "system-mysql"
    )
    assert (
        system_database_image_stream(postgresql_session)["metadata"]["name"]
        == "system-postgresql"
    )


## AmpImageStreams #############################################################


def test_amp_image_streams_children():
    """Make sure there is one child step per image, in provider order"""
    session = setup_session()
    children = AmpImageStreams().children(session)
    assert [child.name for child in children] == [
        f"image_stream_{name}" for name in AMP_IMAGES
    ]


def test_amp_image_streams_one_write_per_run():
    """Make sure each run creates a single image stream"""
    session = setup_session()
    group = AmpImageStreams()
    for expected in range(1, len(AMP_IMAGES) + 1):
        assert group.run(session).mutated
        assert session.object_store.create.call_count == expected
    assert not group.run(session).stop
    for name in AMP_IMAGES:
        assert session.object_store.has_obj(constants.IMAGE_STREAM_KIND, name)


def test_amp_image_streams_noop():
    cr = setup_cr()
    session = setup_session(cr, migrated_resources(cr)[1:])
    assert not AmpImageStreams().run(session).stop
    assert session.object_store.write_count == 0
