import math

import pytest

from robot_console_tf.frame_registry import FrameRegistry, normalize_frame_id
from robot_console_tf.robo_utils.coordinates import RigidTransform


@pytest.fixture()
def registry():
    return FrameRegistry()


def test_normalize_strips_leading_slash():
    assert normalize_frame_id("/map") == "map"
    assert normalize_frame_id("map") == "map"
    assert normalize_frame_id("robot/base_link") == "robot/base_link"


@pytest.mark.parametrize("bad_id", [None, 3, b"map"])
def test_normalize_rejects_non_strings(bad_id):
    with pytest.raises(TypeError):
        normalize_frame_id(bad_id)


def test_frames_created_lazily_in_registration_order(registry):
    assert registry.frame_ids() == []
    registry.upsert_edge("odom", "map", RigidTransform())
    registry.upsert_edge("base_link", "/odom", RigidTransform())
    assert registry.frame_ids() == ["map", "odom", "base_link"]
    assert registry.has_frame("/base_link")
    assert not registry.has_frame("laser")
    assert registry.get_frame("laser") is None
    assert len(registry) == 3


def test_same_id_resolves_to_same_frame(registry):
    registry.upsert_edge("base_link", "/map", RigidTransform())
    assert registry.get_frame("/map") is registry.get_frame("map")
    registry.upsert_edge("laser", "base_link", RigidTransform())
    assert registry.get_frame("base_link") is registry.get_frame("/base_link")


def test_reparenting_replaces_old_parent(registry):
    registry.upsert_edge("x", "A", RigidTransform((1.0, 0.0, 0.0)))
    registry.upsert_edge("x", "B", RigidTransform((2.0, 0.0, 0.0)))
    assert registry.parent_id("x") == "B"
    assert registry.children_ids("A") == []
    assert registry.children_ids("B") == ["x"]
    assert registry.get_frame("x").transform_to_parent.translation[0] == 2.0
    assert sorted(registry.root_ids()) == ["A", "B"]


def test_update_with_same_parent_keeps_single_child_entry(registry):
    registry.upsert_edge("base_link", "odom", RigidTransform((1.0, 0.0, 0.0)))
    registry.upsert_edge("base_link", "odom", RigidTransform((3.0, 0.0, 0.0)))
    assert registry.children_ids("odom") == ["base_link"]
    assert registry.get_frame("base_link").transform_to_parent.translation[0] == 3.0


def test_edge_closing_a_cycle_is_rejected(registry):
    assert registry.upsert_edge("b", "a", RigidTransform())
    assert registry.upsert_edge("c", "b", RigidTransform())
    assert not registry.upsert_edge("a", "c", RigidTransform())
    assert registry.parent_id("a") is None
    assert registry.children_ids("c") == []


def test_self_parent_is_rejected(registry):
    assert not registry.upsert_edge("/loop", "loop", RigidTransform())
    assert registry.has_frame("loop")
    assert registry.get_frame("loop").is_root


def test_nan_transform_is_stored_as_is(registry):
    assert registry.upsert_edge("base_link", "map", RigidTransform((math.nan, 0.0, 0.0)))
    assert math.isnan(registry.get_frame("base_link").transform_to_parent.translation[0])


def test_ancestor_chain(registry):
    registry.upsert_edge("odom", "map", RigidTransform())
    registry.upsert_edge("base_link", "odom", RigidTransform())
    chain = registry.ancestor_indices(registry.get_frame("base_link").index)
    assert [registry.frame_at(i).id for i in chain] == ["base_link", "odom", "map"]


def test_ancestor_walk_is_bounded_on_corrupted_graph(registry):
    registry.upsert_edge("a", "root", RigidTransform())
    registry.upsert_edge("b", "a", RigidTransform())
    # bypass upsert_edge to build a loop a <-> b
    registry.get_frame("a").parent = registry.get_frame("b").index
    assert registry.ancestor_indices(registry.get_frame("b").index) is None


def test_clear_restores_initial_state(registry):
    registry.upsert_edge("base_link", "map", RigidTransform())
    registry.clear()
    assert len(registry) == 0
    assert registry.frame_ids() == []
    assert registry.root_ids() == []
    assert registry.get_frame("map") is None
    registry.upsert_edge("laser", "base_link", RigidTransform())
    assert registry.get_frame("base_link").index == 0
    assert registry.frame_ids() == ["base_link", "laser"]
