"""Systemd notify support for the raumserver process.

READY=1 is sent once the kernel is up, then WATCHDOG=1 at a fixed interval.
Everything is a no-op when NOTIFY_SOCKET is unset (dev mode, tests).
"""

import asyncio
import logging
import os
import socket

logger = logging.getLogger(__name__)


def _socket_address(path: str) -> str:
    # Linux abstract namespace sockets are announced with a leading '@'
    if path.startswith("@"):
        return "\0" + path[1:]
    return path


def sd_notify(msg: str) -> bool:
    """Send *msg* to the systemd notify socket. Returns False when there is none."""
    path = os.environ.get("NOTIFY_SOCKET")
    if not path:
        return False
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM)
    try:
        sock.sendto(msg.encode(), _socket_address(path))
    except OSError as e:
        logger.warning("sd_notify(%s) failed: %s", msg.split("\n")[0], e)
        return False
    finally:
        sock.close()
    return True


async def watchdog_loop(interval: float = 20):
    """Announce readiness, then keep the watchdog fed until cancelled."""
    sd_notify("READY=1\nSTATUS=Accepting requests")
    logger.debug("Watchdog heartbeat every %ss", interval)
    try:
        while True:
            sd_notify("WATCHDOG=1")
            await asyncio.sleep(interval)
    finally:
        sd_notify("STOPPING=1")
