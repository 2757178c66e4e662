import pytest
from pydantic_ai.messages import ModelRequest, ModelResponse
from pydantic_ai.models.test import TestModel as ScriptedModel

from app.modules.chat.models.chat import ChatRole, ChatTurn
from app.modules.generation.errors import ModelInvocationFailed
from app.modules.generation.model_client import PydanticAIModelClient, to_model_messages

pytestmark = pytest.mark.unit

REPLY = '{"flashcards": [{"question": "Q", "answer": "A"}]}'


def test_history_maps_roles_to_message_kinds():
    messages = to_model_messages(
        [
            ChatTurn(role=ChatRole.USER, content="hi"),
            ChatTurn(role=ChatRole.ASSISTANT, content="hello"),
        ]
    )
    assert isinstance(messages[0], ModelRequest)
    assert isinstance(messages[1], ModelResponse)
    assert messages[0].parts[0].content == "hi"
    assert messages[1].parts[0].content == "hello"


async def test_generate_returns_model_text():
    client = PydanticAIModelClient(lambda: ScriptedModel(custom_output_text=REPLY))
    assert await client.generate("make flashcards") == REPLY


async def test_stream_yields_the_whole_reply():
    client = PydanticAIModelClient(lambda: ScriptedModel(custom_output_text="Hello there, learner"))
    history = [
        ChatTurn(role=ChatRole.USER, content="You are a tutor."),
        ChatTurn(role=ChatRole.ASSISTANT, content="Understood."),
    ]
    chunks = [c async for c in client.generate_stream(history, "Say hello")]
    assert "".join(chunks) == "Hello there, learner"


async def test_provider_errors_become_invocation_failures():
    def broken_factory():
        raise RuntimeError("no credentials")

    client = PydanticAIModelClient(broken_factory)
    with pytest.raises(ModelInvocationFailed):
        await client.generate("anything")
    with pytest.raises(ModelInvocationFailed):
        async for _ in client.generate_stream([], "anything"):
            pass
