# channel.py
from __future__ import annotations

import threading
from typing import Any, Iterator


class ChannelClosed(Exception):
    """Raised by recv() once the channel is closed and drained, and by send() after close()."""


_EMPTY = object()


class Channel:
    """
    Unbuffered hand-off between one or more senders and a set of receivers.

    send() returns only after some receiver has taken the item, so a sender
    that finishes every send() knows every item has been claimed. close()
    wakes all blocked receivers; each of them then gets ChannelClosed.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._item: Any = _EMPTY
        self._closed = False
        self._sent = 0
        self._taken = 0

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def send(self, item: Any) -> None:
        with self._cond:
            # wait for the slot in case another sender is mid hand-off
            while self._item is not _EMPTY and not self._closed:
                self._cond.wait()
            if self._closed:
                raise ChannelClosed("send on closed channel")

            self._item = item
            self._sent += 1
            ticket = self._sent
            self._cond.notify_all()

            while self._taken < ticket:
                self._cond.wait()

    def recv(self) -> Any:
        with self._cond:
            while self._item is _EMPTY:
                if self._closed:
                    raise ChannelClosed("channel closed")
                self._cond.wait()

            item = self._item
            self._item = _EMPTY
            self._taken += 1
            self._cond.notify_all()
            return item

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def __iter__(self) -> Iterator[Any]:
        while True:
            try:
                yield self.recv()
            except ChannelClosed:
                return
