import pytest

from robot_console_tf.robo_utils.recursive_config import Config


def test_default_config_has_tf_section():
    tf_cfg = Config().section("tf")
    assert tf_cfg["map_frame"] == "map"
    assert tf_cfg["base_frame"] == "base_link"
    assert tf_cfg["tf_static_topic"] == "/tf_static"


def test_extends_merges_recursively(tmp_path):
    (tmp_path / "base.yaml").write_text("tf:\n  map_frame: map\n  base_frame: base_link\n")
    (tmp_path / "robot.yaml").write_text("extends: base.yaml\ntf:\n  base_frame: base_footprint\n")
    cfg = Config("robot", config_dir=str(tmp_path))
    assert cfg.section("tf") == {"map_frame": "map", "base_frame": "base_footprint"}
    assert cfg["extends"] is None


def test_recursive_extends_raises(tmp_path):
    (tmp_path / "a.yaml").write_text("extends: b.yaml\n")
    (tmp_path / "b.yaml").write_text("extends: a.yaml\n")
    with pytest.raises(AssertionError):
        Config("a", config_dir=str(tmp_path))


def test_missing_config_is_empty(tmp_path):
    cfg = Config("nothing", config_dir=str(tmp_path))
    assert cfg.get_config() == {}
    assert cfg.section("tf") == {}
