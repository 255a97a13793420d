# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import logging
import math
import typing

import msgspec
import tricycle
import trio

from .commontypes import TransportError
from .eventtypes import Connected, Disconnected
from .rpctypes import ClientMessages, ServiceMessages
from .session import KeyboardSession

if typing.TYPE_CHECKING:
    from .history import HistoryView
    from .settings import Settings

logger = logging.getLogger(__name__)

CLOSED_BY_SERVICE = "transport closed"
CLOSED_BY_CLIENT = "client closed"


class Transport(typing.Protocol):
    def send(self, message: ClientMessages) -> None:
        ...


class LengthPrefixedJsonStreamChannel(trio.abc.Channel):
    """JSON messages, each preceded by a 4-byte big-endian length."""

    def __init__(self, stream: trio.abc.Stream):
        self.decoder = msgspec.json.Decoder(ServiceMessages)
        self.encoder = msgspec.json.Encoder()
        self.stream = stream
        self.buffered_stream = tricycle.BufferedReceiveStream(stream)
        self._prefix_length = 4

    async def send(self, value: ClientMessages):
        buffer = self.encoder.encode(value)
        prefix = len(buffer).to_bytes(self._prefix_length, "big")
        await self.stream.send_all(prefix + buffer)

    async def receive(self) -> ServiceMessages:
        try:
            prefix = await self.buffered_stream.receive_all_or_none(self._prefix_length)
            if prefix is None:
                raise trio.EndOfChannel()
            n = int.from_bytes(prefix, "big")
            buffer = await self.buffered_stream.receive_exactly(n)
        except ValueError as exc:
            # tricycle reports EOF part way through a frame as ValueError
            raise TransportError("stream closed mid-message") from exc
        try:
            return self.decoder.decode(buffer)
        except msgspec.DecodeError as exc:
            raise TransportError(f"malformed message: {exc}") from exc

    async def aclose(self):
        await self.stream.aclose()


class ChannelTransport:
    """Queues outbound messages without blocking; a sender task drains them in order."""

    def __init__(self):
        self.send_channel, self.receive_channel = trio.open_memory_channel(math.inf)

    def send(self, message: ClientMessages):
        self.send_channel.send_nowait(message)

    def discard_queued(self) -> int:
        discarded = 0
        while True:
            try:
                self.receive_channel.receive_nowait()
            except trio.WouldBlock:
                return discarded
            discarded += 1


class KeyboardClient:
    def __init__(self, settings: Settings, history: typing.Optional[HistoryView] = None):
        self.settings = settings
        self.transport = ChannelTransport()
        self.session = KeyboardSession(settings, self.transport, history)
        self.disconnect_reason = CLOSED_BY_CLIENT

    async def _send_client_messages(self, network_channel: trio.abc.SendChannel, cancel_scope: trio.CancelScope):
        try:
            async for message in self.transport.receive_channel:
                await network_channel.send(message)
        except (trio.BrokenResourceError, trio.ClosedResourceError) as exc:
            self.disconnect_reason = str(exc) or CLOSED_BY_SERVICE
        cancel_scope.cancel()

    async def _handle_service_messages(self, network_channel: trio.abc.ReceiveChannel, cancel_scope: trio.CancelScope):
        try:
            async for message in network_channel:
                self.session.dispatch(message)
            self.disconnect_reason = CLOSED_BY_SERVICE
        except (trio.BrokenResourceError, trio.ClosedResourceError, TransportError) as exc:
            logger.warning("Keyboard service connection failed: %s", exc)
            self.disconnect_reason = str(exc) or CLOSED_BY_SERVICE
        cancel_scope.cancel()

    async def serve(self, stream: trio.abc.Stream, *, task_status=trio.TASK_STATUS_IGNORED):
        self.disconnect_reason = CLOSED_BY_CLIENT
        async with stream:
            network_channel = LengthPrefixedJsonStreamChannel(stream)
            self.session.dispatch(Connected())
            try:
                async with trio.open_nursery() as nursery:
                    nursery.start_soon(self._send_client_messages, network_channel, nursery.cancel_scope)
                    nursery.start_soon(self._handle_service_messages, network_channel, nursery.cancel_scope)
                    task_status.started()
            finally:
                self.session.dispatch(
                    Disconnected(self.disconnect_reason, requested=self.disconnect_reason == CLOSED_BY_CLIENT)
                )
                discarded = self.transport.discard_queued()
                if discarded:
                    logger.debug("Discarded %d unsent messages", discarded)

    async def run(self, *, task_status=trio.TASK_STATUS_IGNORED):
        logger.debug("Connecting to keyboard service at %s:%d", self.settings.host, self.settings.port)
        stream = await trio.open_tcp_stream(self.settings.host, self.settings.port)
        await self.serve(stream, task_status=task_status)
