import pytest

from modbot.moderation.actions import (
    ModerationAction,
    ModerationActions,
    ModerationOutcome,
)
from modbot.moderation.policy import ModeratorPolicy


class ChatRecorder:
    def __init__(self) -> None:
        self.messages: list[str] = []

    async def __call__(self, text: str) -> bool:
        self.messages.append(text)
        return True


@pytest.fixture
def chat() -> ChatRecorder:
    return ChatRecorder()


@pytest.fixture
def actions(chat: ChatRecorder) -> ModerationActions:
    return ModerationActions(ModeratorPolicy(["mod1"], owner="chan"), chat)


@pytest.mark.asyncio
async def test_timeout_sends_directive_then_confirmation(actions, chat):
    assert await actions.timeout("user1") is ModerationOutcome.APPLIED
    assert chat.messages == ["/timeout user1", "Timed out user: user1"]


@pytest.mark.asyncio
async def test_ban_and_unban(actions, chat):
    await actions.ban("user1")
    await actions.unban("user1")
    assert chat.messages == [
        "/ban user1",
        "Banned user: user1",
        "/unban user1",
        "Unbanned user: user1",
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("target", ["mod1", "chan", "MOD1"])
async def test_automatic_action_against_privileged_user_is_quiet(actions, chat, target):
    outcome = await actions.timeout(target)
    assert outcome is ModerationOutcome.REFUSED_PRIVILEGED_TARGET
    assert chat.messages == []


@pytest.mark.asyncio
async def test_issued_action_against_privileged_user_is_announced(actions, chat):
    outcome = await actions.apply(ModerationAction.BAN, "mod1", issuer="chan")
    assert outcome is ModerationOutcome.REFUSED_PRIVILEGED_TARGET
    assert chat.messages == ["Unmod mod1 before punishing"]


def test_action_enum_carries_directive_and_confirmation():
    assert ModerationAction.TIMEOUT.directive == "timeout"
    assert ModerationAction.UNBAN.confirmation.format(user="x") == "Unbanned user: x"
