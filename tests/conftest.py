# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import msgspec
import pytest
import trio
import trio.testing

from keypilot.eventtypes import Connected
from keypilot.history import KeyHistory
from keypilot.rpctypes import ClientMessages, Keystroke, KeystrokeReceived
from keypilot.session import KeyboardSession
from keypilot.settings import Settings


class RecordingTransport:
    def __init__(self):
        self.sent = []

    def send(self, message):
        self.sent.append(message)

    @property
    def keystrokes(self):
        return [m for m in self.sent if isinstance(m, Keystroke)]


@pytest.fixture
def settings():
    return Settings.for_test()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def history():
    return KeyHistory()


@pytest.fixture
def session(settings, transport, history):
    session = KeyboardSession(settings, transport, history)
    session.dispatch(Connected())
    return session


class FakeKeyboardService:
    """The far end of a length-prefixed JSON stream, speaking for the keyboard service."""

    def __init__(self, stream: trio.abc.Stream):
        self.stream = stream
        self.buffer = bytearray()
        self.decoder = msgspec.json.Decoder(ClientMessages)
        self.encoder = msgspec.json.Encoder()

    async def receive(self):
        "Returns the next client message, or None once the client has closed the stream."
        with trio.fail_after(5):
            while True:
                if len(self.buffer) >= 4:
                    n = int.from_bytes(self.buffer[:4], "big")
                    if len(self.buffer) >= 4 + n:
                        body = bytes(self.buffer[4 : 4 + n])
                        del self.buffer[: 4 + n]
                        return self.decoder.decode(body)
                chunk = await self.stream.receive_some()
                if not chunk:
                    return None
                self.buffer.extend(chunk)

    async def send_raw(self, body: bytes):
        await self.stream.send_all(len(body).to_bytes(4, "big") + body)

    async def send(self, message):
        await self.send_raw(self.encoder.encode(message))

    async def acknowledge_all(self, succeeds=lambda message: True):
        while True:
            message = await self.receive()
            if message is None:
                return
            if isinstance(message, Keystroke):
                await self.send(KeystrokeReceived(success=succeeds(message), id=message.id))


@pytest.fixture
def make_service_pair():
    "Call inside trio.run; returns a client stream and the fake service on the other end of it."

    def factory():
        client_stream, service_stream = trio.testing.memory_stream_pair()
        return client_stream, FakeKeyboardService(service_stream)

    return factory


@pytest.fixture
async def service_pair(make_service_pair):
    client_stream, service = make_service_pair()
    yield client_stream, service
    await service.stream.aclose()
