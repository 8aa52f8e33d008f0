"""Tests for config/settings: YAML loading, admin block parsing, defaults, ConfigInvalid."""

import logging

import pytest

from spacebeacon.config.settings import parse_config, read_config
from spacebeacon.errors import ConfigInvalid
from spacebeacon.status_server.app import create_app


class TestAdminConfig:
    def test_defaults(self, config_dict):
        cfg = parse_config(config_dict(admin_enabled=False))
        assert cfg.admin.enabled is False
        assert cfg.admin.keep_open_interval == 300.0
        assert cfg.admin.tick_interval == pytest.approx(0.1)

    def test_intervals_from_strings(self, config_dict):
        cfg = parse_config(config_dict(keep_open_interval="60", tick_interval="250"))
        assert cfg.admin.keep_open_interval == 60.0
        assert cfg.admin.tick_interval == pytest.approx(0.25)

    def test_intervals_from_ints(self, config_dict):
        cfg = parse_config(config_dict(keep_open_interval=5, tick_interval=3))
        assert cfg.admin.keep_open_interval == 5.0
        assert cfg.admin.tick_interval == pytest.approx(0.003)

    @pytest.mark.parametrize("value", ["abc", "-5", "1.5", True, "²", "１２"])
    def test_bad_interval_is_invalid(self, config_dict, value):
        with pytest.raises(ConfigInvalid):
            parse_config(config_dict(keep_open_interval=value))

    def test_zero_tick_is_invalid(self, config_dict):
        with pytest.raises(ConfigInvalid):
            parse_config(config_dict(tick_interval="0"))

    def test_enable_must_be_bool(self, config_dict):
        with pytest.raises(ConfigInvalid):
            parse_config(config_dict(enable="yes please"))

    def test_configured_key_kept(self, config_dict, api_key):
        assert parse_config(config_dict()).admin.api_key == api_key


class TestGeneratedApiKey:
    def test_generated_and_logged_when_enabled(self, config_dict, caplog):
        raw = config_dict()
        del raw["admin"]["api_key"]
        with caplog.at_level(logging.WARNING):
            cfg = parse_config(raw)
        key = cfg.admin.api_key
        assert key and len(key) == 32
        assert all(c in "0123456789abcdef" for c in key)
        assert key in caplog.text

    def test_generated_silently_when_disabled(self, config_dict, caplog):
        with caplog.at_level(logging.WARNING):
            cfg = parse_config(config_dict(admin_enabled=False))
        assert cfg.admin.api_key
        assert cfg.admin.api_key not in caplog.text

    def test_keys_differ_between_loads(self, config_dict):
        a = parse_config(config_dict(admin_enabled=False)).admin.api_key
        b = parse_config(config_dict(admin_enabled=False)).admin.api_key
        assert a != b

    @pytest.mark.parametrize("blank", ["", "   "])
    def test_blank_key_is_replaced(self, config_dict, blank, caplog):
        with caplog.at_level(logging.WARNING):
            cfg = parse_config(config_dict(api_key=blank))
        key = cfg.admin.api_key
        assert len(key) == 32
        assert all(c in "0123456789abcdef" for c in key)
        assert key in caplog.text
        # the gate refuses empty keys, so the app must still build
        create_app(cfg)


class TestStatusDisplay:
    def test_defaults(self, config_dict):
        cfg = parse_config(config_dict())
        assert cfg.status_display.text.open == "open"
        assert cfg.status_display.text.closed == "closed"
        assert cfg.status_display.html.open == "open"
        assert cfg.status_display.html.closed == "closed"

    def test_partial_override(self, config_dict):
        raw = config_dict()
        raw["status_display"] = {"text": {"open": "Come in!"}}
        cfg = parse_config(raw)
        assert cfg.status_display.text.open == "Come in!"
        assert cfg.status_display.text.closed == "closed"

    def test_non_string_is_invalid(self, config_dict):
        raw = config_dict()
        raw["status_display"] = {"html": {"open": 1}}
        with pytest.raises(ConfigInvalid):
            parse_config(raw)


class TestPublish:
    def test_state_is_discarded(self, config_dict):
        raw = config_dict()
        raw["publish"]["state"] = {"open": True}
        assert "state" not in parse_config(raw).publish

    def test_missing_publish_is_invalid(self):
        with pytest.raises(ConfigInvalid):
            parse_config({"admin": {"enable": True}})

    @pytest.mark.parametrize("field", ["space", "logo", "url"])
    def test_missing_required_field_is_invalid(self, config_dict, field):
        raw = config_dict()
        del raw["publish"][field]
        with pytest.raises(ConfigInvalid):
            parse_config(raw)

    def test_sensors_are_normalized(self, config_dict):
        raw = config_dict()
        raw["publish"]["sensors"] = {"temperature": [{"location": "Hall", "unit": "°C", "value": "21.5"}]}
        cfg = parse_config(raw)
        assert cfg.publish["sensors"] == {"temperature": [{"location": "Hall", "unit": "°C", "value": 21.5}]}

    def test_bad_sensors_are_invalid(self, config_dict):
        raw = config_dict()
        raw["publish"]["sensors"] = {"temperature": [{"unit": "°C", "value": "21.5"}]}
        with pytest.raises(ConfigInvalid):
            parse_config(raw)

    def test_non_ascii_people_count_is_invalid(self, config_dict):
        raw = config_dict()
        raw["publish"]["sensors"] = {"people_now_present": [{"value": "²"}]}
        with pytest.raises(ConfigInvalid):
            parse_config(raw)

    def test_root_must_be_mapping(self):
        with pytest.raises(ConfigInvalid):
            parse_config(["publish"])


class TestReadConfig:
    def test_example_config_loads(self, project_root):
        cfg, path = read_config(str(project_root / "config" / "config.yaml.example"))
        assert path.endswith("config.yaml.example")
        assert cfg.admin.enabled is True
        assert cfg.server.port == 8000
        assert cfg.space_name == "Example Hackspace"

    def test_missing_file_is_invalid(self, tmp_path):
        with pytest.raises(ConfigInvalid):
            read_config(str(tmp_path / "nope.yaml"))

    def test_malformed_yaml_is_invalid(self, tmp_path):
        p = tmp_path / "bad.yaml"
        p.write_text("publish: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigInvalid):
            read_config(str(p))

    def test_empty_file_is_invalid(self, tmp_path):
        p = tmp_path / "empty.yaml"
        p.write_text("", encoding="utf-8")
        with pytest.raises(ConfigInvalid):
            read_config(str(p))

    def test_env_config_file(self, tmp_path, monkeypatch):
        p = tmp_path / "space.yml"
        p.write_text(
            "publish:\n  space: envspace\n  logo: l.png\n  url: http://x\n",
            encoding="utf-8",
        )
        monkeypatch.setenv("CONFIG_FILE", str(p))
        cfg, path = read_config()
        assert cfg.space_name == "envspace"
        assert path == str(p.resolve())
