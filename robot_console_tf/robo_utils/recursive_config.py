from __future__ import annotations
import logging
import os
import yaml

CONFIG_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "configs")

logger = logging.getLogger(__name__)


class Config:
    def __init__(self, file=None, config_dir=None):
        if file is None:
            file = "config.yaml"
        elif not file.endswith(".yaml"):
            file = f"{file}.yaml"
        self.config_dir = config_dir or CONFIG_DIR

        def load_recursive(config_name: str, stack: list[str]) -> dict:
            if config_name in stack:
                raise AssertionError("Attempting to build recursive configuration.")

            config_path = os.path.join(self.config_dir, config_name)
            if not os.path.exists(config_path):
                logger.warning(f"Config file {config_path} not found.")
                return {}

            with open(config_path, "r", encoding="UTF-8") as file_handle:
                cfg = yaml.safe_load(file_handle) or {}

            base = (
                {}
                if "extends" not in cfg
                else load_recursive(cfg.pop("extends"), stack + [config_name])
            )
            return _recursive_update(base, cfg)

        self._config = load_recursive(file, [])

    def section(self, name: str) -> dict:
        value = self._config.get(name) or {}
        if not isinstance(value, dict):
            raise ValueError(f"Config section {name} must be a mapping.")
        return value

    def __getitem__(self, item):
        return self._config.get(item)

    def __setitem__(self, key, value):
        self._config[key] = value

    def get(self, key, default=None):
        return self._config.get(key, default)

    def get_config(self):
        return self._config


def _recursive_update(base: dict, cfg: dict) -> dict:
    for k, v in cfg.items():
        if k in base and isinstance(base[k], dict) and isinstance(v, dict):
            base[k] = _recursive_update(base[k], v)
        else:
            base[k] = v
    return base
