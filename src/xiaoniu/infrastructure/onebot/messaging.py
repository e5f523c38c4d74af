"""OneBot messaging service."""

import asyncio
import functools
import json
import logging
from typing import Any

from aiohttp import web

from xiaoniu.domain.entities import ChannelKind
from xiaoniu.domain.exceptions import ReplyDeliveryError

logger = logging.getLogger(__name__)

_dumps = functools.partial(json.dumps, ensure_ascii=False)


class OneBotReplySender:
    """OneBot implementation of ReplySender.

    Replies are written as ``send_msg`` actions onto the reverse WebSocket
    opened by the OneBot implementation. At most one connection is attached
    at a time; writes are serialized.
    """

    def __init__(self) -> None:
        """Initialize the sender with no connection attached."""
        self._ws: web.WebSocketResponse | None = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        """Check if a gateway connection is attached and open."""
        return self._ws is not None and not self._ws.closed

    def attach(self, ws: web.WebSocketResponse) -> None:
        """Use the given connection for outgoing messages."""
        if self._ws is not None and self._ws is not ws:
            logger.info("Replacing existing gateway connection")
        self._ws = ws

    def detach(self, ws: web.WebSocketResponse) -> None:
        """Forget the connection if it is still the current one."""
        if self._ws is ws:
            self._ws = None

    @staticmethod
    def build_payload(
        channel_kind: ChannelKind,
        user_id: int,
        group_id: int,
        text: str,
    ) -> dict[str, Any]:
        """Build a ``send_msg`` action.

        Anything that is not a group message is sent as a private message.
        """
        message_type = "group" if channel_kind is ChannelKind.GROUP else "private"
        return {
            "action": "send_msg",
            "params": {
                "message_type": message_type,
                "user_id": user_id,
                "group_id": group_id,
                "message": text,
            },
        }

    async def send(
        self,
        channel_kind: ChannelKind,
        user_id: int,
        group_id: int,
        text: str,
    ) -> None:
        """Send a message.

        Delivery failures are logged, never raised.

        Args:
            channel_kind: Private or group.
            user_id: Target user.
            group_id: Target group, 0 for private messages.
            text: Message content.
        """
        if channel_kind is ChannelKind.GROUP:
            target = f"group:{group_id}"
        else:
            target = f"user:{user_id}"
        payload = self.build_payload(channel_kind, user_id, group_id, text)

        async with self._lock:
            try:
                await self._write(target, payload)
            except ReplyDeliveryError as e:
                logger.warning("Reply not sent: %s", e)
                return

        logger.info("Sent -> %s: %s", target, text)

    async def _write(self, target: str, payload: dict[str, Any]) -> None:
        ws = self._ws
        if ws is None or ws.closed:
            raise ReplyDeliveryError(target, f"{target}: no gateway connection")
        try:
            await ws.send_json(payload, dumps=_dumps)
        except (ConnectionError, RuntimeError) as e:
            raise ReplyDeliveryError(target, f"{target}: {e!s}") from e
