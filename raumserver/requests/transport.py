# Raumserver
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Transport controls.  All of them act on a zone, so a room id is mapped to
the virtual renderer of the zone the room is in.
"""

import re

from .base import MediaRendererRequest, RequestRejected

PLAY_MODES = ("NORMAL", "REPEAT_ALL", "REPEAT_ONE", "SHUFFLE",
              "SHUFFLE_NOREPEAT", "SHUFFLE_REPEAT_ONE")

_SEEK_RE = re.compile(r"^\d{1,2}:\d{2}:\d{2}$")


class ZoneRequest(MediaRendererRequest):
    def is_allowed_for_room_renderer(self) -> bool:
        return False


class NextRequest(ZoneRequest):
    def run_action(self, renderer, ctx):
        return renderer.next()


class PrevRequest(ZoneRequest):
    def run_action(self, renderer, ctx):
        return renderer.previous()


class PlayRequest(ZoneRequest):
    def run_action(self, renderer, ctx):
        return renderer.play()


class PauseRequest(ZoneRequest):
    def run_action(self, renderer, ctx):
        return renderer.pause()


class StopRequest(ZoneRequest):
    def run_action(self, renderer, ctx):
        return renderer.stop()


class SeekRequest(ZoneRequest):
    """Jump to an absolute position, ``value`` as hh:mm:ss."""

    def check_params(self, ctx):
        position = ctx.param("value")
        if not position or not _SEEK_RE.match(position):
            raise RequestRejected("Seek position must be given as hh:mm:ss")

    def run_action(self, renderer, ctx):
        return renderer.seek(ctx.param("value"))


class LoadUriRequest(ZoneRequest):
    def check_params(self, ctx):
        if not ctx.param("value"):
            raise RequestRejected("No uri given")

    def run_action(self, renderer, ctx):
        return renderer.play_uri(ctx.param("value"))


class SetPlayModeRequest(ZoneRequest):
    def check_params(self, ctx):
        mode = (ctx.param("mode") or "").upper()
        if mode not in PLAY_MODES:
            raise RequestRejected(
                f"Unknown play mode '{ctx.param('mode')}' (expected one of {', '.join(PLAY_MODES)})")

    def run_action(self, renderer, ctx):
        mode = ctx.param("mode").upper()
        renderer.play_mode = mode
        return {"playMode": mode}
