from __future__ import annotations

import pytest

from modbot.irc.models import ChatLine, Ping, Unrecognized, UserJoined, UserLeft
from modbot.irc.parser import (
    format_outbound,
    format_pong,
    parse_irc_message,
    parse_line,
    username_from_prefix,
)

CHANNEL = "#chan"


@pytest.mark.parametrize(
    "raw,token",
    [
        ("PING :tmi.twitch.tv", ":tmi.twitch.tv"),
        ("PING tmi.twitch.tv\r\n", "tmi.twitch.tv"),
        ("PING :abc def", ":abc def"),
    ],
)
def test_ping_carries_token_verbatim(raw, token):
    event = parse_line(raw, CHANNEL)
    assert event == Ping(token)
    assert format_pong(event.token) == f"PONG {token}"


def test_ping_without_token_is_unrecognized():
    assert isinstance(parse_line("PING", CHANNEL), Unrecognized)


def test_pinglike_word_is_not_ping():
    assert isinstance(parse_line("PINGER :x", CHANNEL), Unrecognized)


def test_join_extracts_username():
    raw = ":viewer42!viewer42@viewer42.tmi.twitch.tv JOIN #chan"
    assert parse_line(raw, CHANNEL) == UserJoined("viewer42")


def test_part_extracts_username():
    raw = ":viewer42!viewer42@viewer42.tmi.twitch.tv PART #chan"
    assert parse_line(raw, CHANNEL) == UserLeft("viewer42")


def test_join_for_other_channel_is_unrecognized():
    raw = ":viewer42!viewer42@viewer42.tmi.twitch.tv JOIN #elsewhere"
    assert isinstance(parse_line(raw, CHANNEL), Unrecognized)


def test_join_channel_match_is_case_insensitive():
    raw = ":Viewer!viewer@viewer.tmi.twitch.tv JOIN #Chan"
    assert parse_line(raw, CHANNEL) == UserJoined("viewer")


def test_privmsg_plain_chat():
    raw = ":user1!user1@user1.tmi.twitch.tv PRIVMSG #chan :hello there"
    assert parse_line(raw, CHANNEL) == ChatLine("user1", "hello there", is_command=False)


def test_privmsg_command_candidate_is_flagged():
    raw = ":user1!user1@user1.tmi.twitch.tv PRIVMSG #chan :!timeout spammer"
    event = parse_line(raw, CHANNEL)
    assert isinstance(event, ChatLine)
    assert event.is_command is True
    assert event.text == "!timeout spammer"


def test_privmsg_with_only_link_is_still_chat():
    raw = ":user1!user1@user1.tmi.twitch.tv PRIVMSG #chan :spam.com"
    assert parse_line(raw, CHANNEL) == ChatLine("user1", "spam.com")


def test_privmsg_with_tags_and_colons_in_body():
    raw = "@badge-info=;color=#FF0000 :user1!user1@user1.tmi.twitch.tv PRIVMSG #chan :time is 10:30 :)"
    assert parse_line(raw, CHANNEL) == ChatLine("user1", "time is 10:30 :)")


def test_prefix_without_leading_colon_is_tolerated():
    raw = "user1@user1.tmi.twitch.tv PRIVMSG #chan :check out spam.com"
    assert parse_line(raw, CHANNEL) == ChatLine("user1", "check out spam.com")


@pytest.mark.parametrize(
    "raw",
    [
        "",
        ":tmi.twitch.tv 001 modbot :Welcome, GLHF!",
        ":tmi.twitch.tv CAP * ACK :twitch.tv/membership",
        ":user1!user1@host PRIVMSG #chan",
        ":user1!user1@host PRIVMSG",
        ":user1!user1@host",
        ":onlyprefix",
        "@tagsonly",
        ":user1!user1@host PRIVMSG #other :hi",
        "garbage without structure",
    ],
)
def test_wrong_shapes_are_unrecognized(raw):
    assert isinstance(parse_line(raw, CHANNEL), Unrecognized)


def test_username_from_prefix_variants():
    assert username_from_prefix("nick!user@host") == "nick"
    assert username_from_prefix("user@host") == "user"
    assert username_from_prefix("tmi.twitch.tv") is None
    assert username_from_prefix(None) is None


@pytest.mark.parametrize(
    "text",
    ["hello", "", "!timeout someone", "with :colon inside", "  padded  ", "ünïcødé ✓"],
)
def test_format_outbound_round_trip(text):
    line = format_outbound(CHANNEL, text)
    msg = parse_irc_message(line)
    assert msg.command == "PRIVMSG"
    assert msg.params == [CHANNEL]
    assert msg.trailing == text


def test_format_outbound_collapses_line_terminators():
    line = format_outbound(CHANNEL, "one\r\nPRIVMSG #chan :two\nthree\r")
    assert "\r" not in line and "\n" not in line
    assert line == "PRIVMSG #chan :one PRIVMSG #chan :two three "
