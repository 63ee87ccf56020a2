from __future__ import annotations

import contextlib
from typing import Any

from aiohttp.test_utils import TestClient, TestServer

from raumserver.lib.kernel import Raumkernel
from raumserver.server import create_app


class FakeGroup:
    """Stands in for soco.groups.ZoneGroup; group volume and mute reach every member."""

    def __init__(self, uid: str, label: str, coordinator: FakeSpeaker, members: set):
        self.uid = uid
        self.label = label
        self.coordinator = coordinator
        self.members = members

    @property
    def volume(self) -> int:
        return round(sum(m.volume for m in self.members) / len(self.members))

    @volume.setter
    def volume(self, value: int) -> None:
        for member in self.members:
            member.volume = value

    @property
    def mute(self) -> bool:
        return all(m.mute for m in self.members)

    @mute.setter
    def mute(self, value: bool) -> None:
        for member in self.members:
            member.mute = value

    def set_relative_volume(self, relative_volume: int) -> int:
        for member in self.members:
            member.volume = max(0, min(100, member.volume + relative_volume))
        return self.volume


class FakeSpeaker:
    """Stands in for soco.SoCo; records every transport call."""

    def __init__(self, name: str, uid: str):
        self.player_name = name
        self.uid = uid
        self.group: FakeGroup | None = None
        self.volume = 20
        self.mute = False
        self.play_mode = "NORMAL"
        self.calls: list[tuple[str, tuple]] = []
        self.results: dict[str, Any] = {}
        self.failures: dict[str, Exception] = {}

    def _call(self, name: str, *args: Any) -> Any:
        self.calls.append((name, args))
        if name in self.failures:
            raise self.failures[name]
        return self.results.get(name)

    def next(self):
        return self._call("next")

    def previous(self):
        return self._call("previous")

    def play(self):
        return self._call("play")

    def pause(self):
        return self._call("pause")

    def stop(self):
        return self._call("stop")

    def seek(self, position):
        return self._call("seek", position)

    def play_uri(self, uri):
        return self._call("play_uri", uri)

    def set_relative_volume(self, relative_volume):
        self._call("set_relative_volume", relative_volume)
        self.volume = max(0, min(100, self.volume + relative_volume))
        return self.volume

    def get_current_transport_info(self):
        return {"current_transport_state": "PLAYING", "current_transport_status": "OK"}

    def get_current_track_info(self):
        return {
            "title": "So What", "artist": "Miles Davis", "album": "Kind of Blue",
            "position": "0:01:10", "duration": "0:09:22", "uri": "x-file-cifs://nas/so_what.flac",
        }


class Household:
    """Kitchen + Dining grouped (Kitchen coordinates), Bath on its own."""

    def __init__(self):
        self.kitchen = FakeSpeaker("Kitchen", "RINCON_KITCHEN")
        self.dining = FakeSpeaker("Dining", "RINCON_DINING")
        self.bath = FakeSpeaker("Bath", "RINCON_BATH")
        ground_floor = FakeGroup("RINCON_KITCHEN:12", "Kitchen + 1",
                                 self.kitchen, {self.kitchen, self.dining})
        bath = FakeGroup("RINCON_BATH:3", "Bath", self.bath, {self.bath})
        self.kitchen.group = ground_floor
        self.dining.group = ground_floor
        self.bath.group = bath

        self.kernel = Raumkernel()
        self.kernel.speakers = {self.kitchen, self.dining, self.bath}
        # lookups that miss re-discover; count them instead of touching the network
        self.discoveries = 0
        self.kernel.discover = self._discover

    def _discover(self) -> int:
        self.discoveries += 1
        return len(self.kernel.speakers)


@contextlib.asynccontextmanager
async def serve(kernel: Raumkernel):
    app = create_app(kernel, init_kernel=False)
    async with TestClient(TestServer(app)) as client:
        yield client
