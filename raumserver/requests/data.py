# Raumserver
# SPDX-License-Identifier: GPL-3.0-or-later

"""Read-only requests served under /raumserver/data/."""

from .. import __version__
from ..lib.kernel import KERNEL_NAME, is_zone_group, kernel_version
from .base import MediaRendererRequest, Request


class GetRendererStateRequest(MediaRendererRequest):
    """Snapshot of transport, current track and volume for a room or zone.

    For a zone, transport and track come from the coordinator while volume
    and mute are the group's.
    """

    def is_zone_group_target(self) -> bool:
        return True

    def run_action(self, renderer, ctx):
        if is_zone_group(renderer):
            player, name = renderer.coordinator, renderer.label
        else:
            player, name = renderer, renderer.player_name
        transport = player.get_current_transport_info()
        track = player.get_current_track_info()
        return {
            "name": name,
            "udn": renderer.uid,
            "transportState": transport.get("current_transport_state"),
            "track": {
                "title": track.get("title"),
                "artist": track.get("artist"),
                "album": track.get("album"),
                "position": track.get("position"),
                "duration": track.get("duration"),
                "uri": track.get("uri"),
            },
            "volume": renderer.volume,
            "mute": renderer.mute,
        }


class GetZoneConfigRequest(Request):
    async def run(self, ctx):
        return await self.call_kernel(ctx.manager_disposer.zone_manager.zone_config)


class GetActionsRequest(Request):
    async def run(self, ctx):
        return {"actions": sorted(ctx.actions)}


class GetVersionRequest(Request):
    async def run(self, ctx):
        return {
            "raumserver": __version__,
            "kernel": {"name": KERNEL_NAME, "version": kernel_version()},
        }
