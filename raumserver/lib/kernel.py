# Raumserver
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Kernel: the multiroom control layer raumserver drives.

Wraps the SoCo library.  A *room* is a single speaker (its room renderer);
a *zone* is a group of rooms whose coordinator acts as the zone's virtual
renderer.  Transport commands (next, play, ...) must go to the virtual
renderer; volume and mute can address a single room, or a whole zone
through the group itself.

Every call in here is blocking network I/O.  Callers on the event loop run
them through ``loop.run_in_executor``.

Usage:
    kernel = Raumkernel(logger)
    kernel.init(host="192.168.0.190")          # or init() for discovery
    disposer = kernel.manager_disposer
    renderer = disposer.device_manager.get_room_renderer("Kitchen")
    zone     = disposer.zone_manager.get_virtual_renderer_for_room(renderer)
"""

import logging
import time

import soco
from soco import SoCo

log = logging.getLogger(__name__)

KERNEL_NAME = "soco"


def kernel_version() -> str:
    return getattr(soco, "__version__", "unknown")


def is_zone_group(renderer) -> bool:
    """Speaker groups list their members; single speakers do not."""
    return hasattr(renderer, "members")


class DeviceManager:
    """Looks up rooms (individual speakers)."""

    def __init__(self, kernel: "Raumkernel"):
        self._kernel = kernel

    def rooms(self) -> list:
        return sorted(self._kernel.speakers, key=lambda s: s.player_name)

    def get_room_renderer(self, room_id: str):
        """Find a room by uid, or by name (case-insensitive)."""
        wanted = room_id.casefold()
        for speaker in self._kernel.speakers:
            if speaker.uid == room_id:
                return speaker
        for speaker in self._kernel.speakers:
            if speaker.player_name.casefold() == wanted:
                return speaker
        return None


class ZoneManager:
    """Looks up zones (speaker groups) and their virtual renderers."""

    def __init__(self, kernel: "Raumkernel"):
        self._kernel = kernel

    def zones(self) -> list:
        groups = {}
        for speaker in self._kernel.speakers:
            group = speaker.group
            if group is not None:
                groups[group.uid] = group
        return [groups[uid] for uid in sorted(groups)]

    def get_zone(self, zone_udn: str):
        """The speaker group itself; group volume and mute act on every member."""
        for group in self.zones():
            if group.uid == zone_udn:
                return group
        return None

    def get_virtual_renderer(self, zone_udn: str):
        group = self.get_zone(zone_udn)
        if group is None:
            return None
        return group.coordinator

    def get_virtual_renderer_for_room(self, room_renderer):
        group = room_renderer.group
        if group is None:
            return None
        return group.coordinator

    def zone_config(self) -> dict:
        if not self._kernel.speakers:
            self._kernel.rediscover()
        zones = []
        for group in self.zones():
            coordinator = group.coordinator
            zones.append({
                "udn": group.uid,
                "name": group.label,
                "coordinator": coordinator.player_name if coordinator else None,
                "rooms": [
                    {"udn": member.uid, "name": member.player_name}
                    for member in sorted(group.members, key=lambda m: m.player_name)
                ],
            })
        return {"zones": zones}


class ManagerDisposer:
    """The handle every request gets to reach rooms and zones."""

    def __init__(self, kernel: "Raumkernel"):
        self._kernel = kernel
        self.device_manager = DeviceManager(kernel)
        self.zone_manager = ZoneManager(kernel)

    def rediscover(self) -> bool:
        return self._kernel.rediscover()


class Raumkernel:
    # minimum seconds between two lazy re-discoveries
    rediscover_interval: float = 30

    def __init__(self, logger: logging.Logger | None = None):
        self.log = logger or log
        self.speakers: set = set()
        self.host: str | None = None
        self.timeout: float = 5
        self._last_discovery: float | None = None
        self.manager_disposer = ManagerDisposer(self)

    @property
    def version(self) -> str:
        return kernel_version()

    def init(self, host: str | None = None, timeout: float = 5) -> int:
        """Populate the household.  Returns the number of rooms found.

        With *host*, the household is read from that speaker's topology;
        otherwise speakers are discovered by multicast for *timeout* seconds.
        An unreachable household is logged, not raised: lookups that miss
        later trigger ``rediscover()``.
        """
        self.host = host
        self.timeout = timeout
        return self.discover()

    def discover(self) -> int:
        self._last_discovery = time.monotonic()
        try:
            if self.host:
                self.log.info("Reading household topology from %s", self.host)
                speakers = set(SoCo(self.host).visible_zones)
            else:
                self.log.info("Discovering speakers (timeout %ss)", self.timeout)
                speakers = soco.discover(timeout=self.timeout) or set()
        except Exception as e:
            self.log.warning("Speaker discovery failed: %s", e)
            return len(self.speakers)

        self.speakers = speakers
        if not self.speakers:
            self.log.warning("No speakers found, will retry when a request needs one")
        else:
            self.log.info("Kernel ready: %d room(s): %s", len(self.speakers),
                          ", ".join(sorted(s.player_name for s in self.speakers)))
        return len(self.speakers)

    def rediscover(self) -> bool:
        """Discover again unless the last attempt was too recent.

        Returns True when a discovery actually ran.
        """
        if (self._last_discovery is not None and
                time.monotonic() - self._last_discovery < self.rediscover_interval):
            return False
        self.log.info("Renderer lookup missed, re-discovering speakers")
        self.discover()
        return True
