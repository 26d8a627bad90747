"""Transport failure classification for the Foo client.

Decides whether a transport failure means the peer tore down the connection
or the multiplexed stream carrying the request ("reuse disconnect"), as
opposed to any other failure such as DNS or TLS errors.

httpx reports HTTP/2 teardown as ``httpx.RemoteProtocolError`` chained from
an httpcore error whose argument is the h2 event itself, so recognition
walks the whole exception chain and the arguments of every link.

This is an internal module and should not be imported directly by users.
"""

from collections.abc import Callable, Iterator

import h2.events
import h2.exceptions
import httpx

__all__ = [
    "is_reuse_disconnect",
    "register_reuse_disconnect_shape",
]

# A recognizer looks at one object from the exception chain
ShapePredicate = Callable[[object], bool]

# Message httpcore uses when an HTTP/1.1 peer closes a kept-alive connection
_SERVER_DISCONNECTED = "server disconnected without sending a response"


def _is_goaway(obj: object) -> bool:
    return isinstance(obj, h2.events.ConnectionTerminated)


def _is_stream_reset(obj: object) -> bool:
    return isinstance(obj, (h2.events.StreamReset, h2.exceptions.StreamClosedError))


def _is_connection_reset(obj: object) -> bool:
    return isinstance(obj, (ConnectionResetError, BrokenPipeError))


def _is_server_disconnect(obj: object) -> bool:
    return isinstance(obj, httpx.RemoteProtocolError) and (
        _SERVER_DISCONNECTED in str(obj).lower()
    )


_SHAPES: list[ShapePredicate] = [
    _is_goaway,
    _is_stream_reset,
    _is_connection_reset,
    _is_server_disconnect,
]


def register_reuse_disconnect_shape(predicate: ShapePredicate) -> None:
    """Add a recognizer for another reuse-disconnect failure shape.

    The predicate receives each exception in the chain and each of their
    arguments, and returns True when the object denotes a connection or
    stream torn down by the peer.

    Args:
        predicate: The recognizer to add.
    """
    if predicate not in _SHAPES:
        _SHAPES.append(predicate)


def _iter_chain(exc: BaseException) -> Iterator[object]:
    """Yield every exception in the cause/context chain and their args."""
    seen: set[int] = set()
    pending: list[BaseException] = [exc]
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        for arg in current.args:
            if isinstance(arg, BaseException):
                pending.append(arg)
            else:
                yield arg
        if current.__cause__ is not None:
            pending.append(current.__cause__)
        if current.__context__ is not None:
            pending.append(current.__context__)


def is_reuse_disconnect(exc: BaseException) -> bool:
    """Check whether a transport failure is a reuse disconnect.

    Recognized shapes:
    - HTTP/2 GOAWAY (``h2.events.ConnectionTerminated``)
    - HTTP/2 stream reset (``h2.events.StreamReset``, ``StreamClosedError``)
    - Connection reset or broken pipe from the peer
    - HTTP/1.1 server disconnect on a reused connection

    Anything else, including DNS, dial and TLS failures, returns False.
    Failures while opening a new connection (``httpx.ConnectError``) never
    count, even when the peer reset the socket during the handshake.
    Classification only: nothing is retried here.

    Args:
        exc: The transport failure to inspect.

    Returns:
        True if the same request may be re-issued on a fresh connection.
    """
    if isinstance(exc, httpx.ConnectError):
        return False
    return any(
        shape(obj)
        for obj in _iter_chain(exc)
        for shape in _SHAPES
    )
