import json

import pytest
from pydantic import ValidationError

from modbot.config.loader import (
    build_arg_parser,
    env_overrides,
    load_config_file,
    load_session_config,
)
from modbot.config.model import SessionConfig, normalize_username
from modbot.errors.internal import ConfigError
from tests.fixtures.fakes import build_config


def test_normalize_username():
    assert normalize_username("  @SomeUser ") == "someuser"
    assert normalize_username("#Chan") == "chan"


def test_config_normalizes_identity_fields():
    cfg = build_config(nickname="@ModBot", channel="#MyChannel", token="oauth:xyz1234")
    assert cfg.nickname == "modbot"
    assert cfg.channel == "#mychannel"
    assert cfg.owner == "mychannel"
    assert cfg.token == "oauth:xyz1234"


def test_token_gets_oauth_prefix():
    assert build_config(token="  abcdefghijk ").token == "oauth:abcdefghijk"


def test_moderators_accept_comma_string_and_dedup():
    cfg = build_config(moderators="Bob, alice,,BOB")
    assert cfg.moderators == ("alice", "bob")


def test_defaults():
    cfg = SessionConfig.from_dict({"nickname": "bot", "channel": "chan", "token": "abcdefg"})
    assert cfg.server == "irc.chat.twitch.tv"
    assert cfg.port == 6667
    assert cfg.min_send_interval == 3.0
    assert cfg.auto_message_seconds == cfg.auto_message_interval * 60
    assert cfg.connect_max_attempts == 10
    assert ".com" in cfg.link_suffixes


@pytest.mark.parametrize("value", [0, -3, "0"])
def test_non_positive_attempt_ceiling_means_forever(value):
    assert build_config(connect_max_attempts=value).connect_max_attempts is None


def test_config_is_frozen():
    cfg = build_config()
    with pytest.raises(ValidationError):
        cfg.channel = "#other"


@pytest.mark.parametrize(
    "overrides",
    [
        {"token": ""},
        {"channel": "#"},
        {"port": 0},
        {"auto_message_interval": -1},
        {"min_send_interval": -0.5},
    ],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ValidationError):
        build_config(**overrides)


def test_to_dict_redacts_token():
    data = build_config().to_dict()
    assert data["token"] == "oauth:***"
    assert data["channel"] == "#chan"


def test_load_config_file_missing_returns_empty(tmp_path):
    assert load_config_file(tmp_path / "nope.conf") == {}


def test_load_config_file_bad_json(tmp_path):
    path = tmp_path / "modbot.conf"
    path.write_text("{not json")
    with pytest.raises(ConfigError):
        load_config_file(path)


def test_load_config_file_requires_object(tmp_path):
    path = tmp_path / "modbot.conf"
    path.write_text(json.dumps(["a", "b"]))
    with pytest.raises(ConfigError) as exc:
        load_config_file(path)
    assert exc.value.data["path"] == str(path)


def test_env_overrides_skip_blank_values():
    env = {"MODBOT_CHANNEL": "envchan", "MODBOT_TOKEN": "  ", "UNRELATED": "x"}
    assert env_overrides(env) == {"channel": "envchan"}


def test_layering_file_then_env_then_flags(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "bot.json"
    path.write_text(
        json.dumps(
            {
                "nickname": "filebot",
                "channel": "filechan",
                "token": "filetoken123",
                "auto_message_interval": 2,
                "moderators": ["FileMod"],
            }
        )
    )
    env = {"MODBOT_CHANNEL": "envchan", "MODBOT_MODERATORS": "a,b"}
    cfg, args = load_session_config(
        ["--config", str(path), "--nickname", "CliBot", "--automessage", "hi"], env
    )
    assert cfg.nickname == "clibot"
    assert cfg.channel == "#envchan"
    assert cfg.token == "oauth:filetoken123"
    assert cfg.auto_message == "hi"
    assert cfg.auto_message_interval == 2.0
    assert cfg.moderators == ("a", "b")
    assert args.health_check is False


def test_config_file_from_environment(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "other.conf"
    path.write_text(json.dumps({"nickname": "bot", "channel": "c", "token": "abcdefg"}))
    cfg, _ = load_session_config([], {"MODBOT_CONF_FILE": str(path)})
    assert cfg.channel == "#c"


def test_flags_alone_need_a_token(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ConfigError) as exc:
        load_session_config(["--channel", "c", "--nickname", "bot"], {})
    assert "token" in str(exc.value)


def test_interval_flag_is_numeric():
    args = build_arg_parser().parse_args(["--automessage-interval", "0.5", "--health-check"])
    assert args.automessage_interval == 0.5
    assert args.health_check is True
