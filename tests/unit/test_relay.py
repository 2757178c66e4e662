import pytest

from app.modules.chat.relay import RelayState, StreamRelay, prime_stream
from app.modules.generation.errors import ModelInvocationFailed

pytestmark = pytest.mark.unit


class Source:
    """Async chunk source that records whether it was closed."""

    def __init__(self, chunks, error=None):
        self.chunks = chunks
        self.error = error
        self.closed = False

    async def gen(self):
        try:
            for c in self.chunks:
                yield c
            if self.error is not None:
                raise self.error
        finally:
            self.closed = True


class Recorder:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    async def __call__(self, reply):
        self.calls.append(reply)
        if self.error is not None:
            raise self.error


async def _collect(relay):
    return [chunk async for chunk in relay.stream()]


async def test_chunks_are_forwarded_in_order_and_persisted_once():
    persist = Recorder()
    relay = StreamRelay(Source(["Hel", "lo, ", "world"]).gen(), persist)
    assert relay.state == RelayState.IDLE

    assert await _collect(relay) == ["Hel", "lo, ", "world"]
    assert persist.calls == ["Hello, world"]
    assert relay.state == RelayState.DONE
    assert relay.reply == "Hello, world"


async def test_closing_the_transport_aborts_without_persisting():
    source = Source(["Hel", "lo, ", "world"])
    persist = Recorder()
    relay = StreamRelay(source.gen(), persist)

    agen = relay.stream()
    assert await agen.__anext__() == "Hel"
    await agen.aclose()

    assert relay.state == RelayState.ABORTED
    assert persist.calls == []
    assert source.closed is True


async def test_disconnect_probe_aborts():
    probes = iter([False, True, True])

    async def is_disconnected():
        return next(probes)

    persist = Recorder()
    relay = StreamRelay(
        Source(["Hel", "lo, ", "world"]).gen(), persist, is_disconnected=is_disconnected
    )
    assert await _collect(relay) == ["Hel"]
    assert relay.state == RelayState.ABORTED
    assert relay.abort_reason == "client disconnected"
    assert persist.calls == []


async def test_model_failure_mid_stream_is_not_persisted():
    persist = Recorder()
    relay = StreamRelay(Source(["Hel"], error=ModelInvocationFailed()).gen(), persist)
    assert await _collect(relay) == ["Hel"]
    assert relay.state == RelayState.ABORTED
    assert isinstance(relay.error, ModelInvocationFailed)
    assert persist.calls == []


async def test_empty_stream_is_not_persisted():
    persist = Recorder()
    relay = StreamRelay(Source([]).gen(), persist)
    assert await _collect(relay) == []
    assert relay.state == RelayState.DONE
    assert persist.calls == []


async def test_persist_failure_is_reported_on_the_relay():
    persist = Recorder(error=RuntimeError("database is gone"))
    relay = StreamRelay(Source(["ok"]).gen(), persist)
    assert await _collect(relay) == ["ok"]
    assert persist.calls == ["ok"]
    assert relay.state == RelayState.ABORTED
    assert isinstance(relay.error, RuntimeError)


async def test_relay_streams_only_once():
    relay = StreamRelay(Source(["a"]).gen(), Recorder())
    await _collect(relay)
    with pytest.raises(RuntimeError):
        await _collect(relay)


async def test_primed_stream_replays_the_first_chunk():
    source = Source(["Hel", "lo"])
    primed = await prime_stream(source.gen())
    assert [c async for c in primed] == ["Hel", "lo"]
    assert source.closed is True


async def test_priming_an_empty_stream():
    primed = await prime_stream(Source([]).gen())
    assert [c async for c in primed] == []


async def test_priming_raises_failures_before_output():
    with pytest.raises(ModelInvocationFailed):
        await prime_stream(Source([], error=ModelInvocationFailed()).gen())


async def test_closing_a_primed_stream_closes_the_source():
    source = Source(["Hel", "lo, ", "world"])
    persist = Recorder()
    relay = StreamRelay(await prime_stream(source.gen()), persist)

    agen = relay.stream()
    assert await agen.__anext__() == "Hel"
    await agen.aclose()

    assert relay.state == RelayState.ABORTED
    assert persist.calls == []
    assert source.closed is True
