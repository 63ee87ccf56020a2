# Raumserver
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Volume and mute.  These may address a single room, or a whole zone when
``id`` names one; the speaker group then applies the change to every member.
"""

from .base import MediaRendererRequest, RequestRejected

DEFAULT_VOLUME_STEP = 3


def _int_param(ctx, name: str, default: int | None = None) -> int:
    raw = ctx.param(name)
    if raw is None:
        if default is None:
            raise RequestRejected(f"Parameter '{name}' is required")
        return default
    try:
        return int(raw)
    except ValueError:
        raise RequestRejected(f"Parameter '{name}' must be an integer, got '{raw}'")


class VolumeRequest(MediaRendererRequest):
    def is_zone_group_target(self) -> bool:
        return True


class SetVolumeRequest(VolumeRequest):
    def check_params(self, ctx):
        volume = _int_param(ctx, "value")
        if not 0 <= volume <= 100:
            raise RequestRejected(f"Volume {volume} out of range 0-100")

    def run_action(self, renderer, ctx):
        volume = _int_param(ctx, "value")
        renderer.volume = volume
        return {"volume": volume}


class VolumeUpRequest(VolumeRequest):
    direction = 1

    def check_params(self, ctx):
        _int_param(ctx, "value", DEFAULT_VOLUME_STEP)

    def run_action(self, renderer, ctx):
        step = abs(_int_param(ctx, "value", DEFAULT_VOLUME_STEP))
        return {"volume": renderer.set_relative_volume(self.direction * step)}


class VolumeDownRequest(VolumeUpRequest):
    direction = -1


class MuteRequest(VolumeRequest):
    mute = True

    def run_action(self, renderer, ctx):
        renderer.mute = self.mute
        return {"mute": self.mute}


class UnmuteRequest(MuteRequest):
    mute = False


class ToggleMuteRequest(VolumeRequest):
    def run_action(self, renderer, ctx):
        mute = not renderer.mute
        renderer.mute = mute
        return {"mute": mute}
