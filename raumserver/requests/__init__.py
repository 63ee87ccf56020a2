"""
Raumserver requests — one class per action name.

``create_request`` is the registry: it maps the action segment of the URL
(``/raumserver/controller/next`` → ``next``) to a fresh request object, or
returns None when the action is unknown.

Controller actions:
  - ``next`` ``prev`` ``play`` ``pause`` ``stop``  – zone transport
  - ``seek`` ``loadUri`` ``setPlayMode``          – zone transport with a parameter
  - ``setVolume`` ``volumeUp`` ``volumeDown``     – room or zone volume
  - ``mute`` ``unmute`` ``toggleMute``            – room or zone mute

Data actions:
  - ``getRendererState`` ``getZoneConfig`` ``getActions`` ``getVersion``
"""

from .base import Request
from .data import (GetActionsRequest, GetRendererStateRequest,
                   GetVersionRequest, GetZoneConfigRequest)
from .transport import (LoadUriRequest, NextRequest, PauseRequest, PlayRequest,
                        PrevRequest, SeekRequest, SetPlayModeRequest, StopRequest)
from .volume import (MuteRequest, SetVolumeRequest, ToggleMuteRequest,
                     UnmuteRequest, VolumeDownRequest, VolumeUpRequest)

_REQUESTS: dict[str, type[Request]] = {
    "next": NextRequest,
    "prev": PrevRequest,
    "play": PlayRequest,
    "pause": PauseRequest,
    "stop": StopRequest,
    "seek": SeekRequest,
    "loadUri": LoadUriRequest,
    "setPlayMode": SetPlayModeRequest,
    "setVolume": SetVolumeRequest,
    "volumeUp": VolumeUpRequest,
    "volumeDown": VolumeDownRequest,
    "mute": MuteRequest,
    "unmute": UnmuteRequest,
    "toggleMute": ToggleMuteRequest,
    "getRendererState": GetRendererStateRequest,
    "getZoneConfig": GetZoneConfigRequest,
    "getActions": GetActionsRequest,
    "getVersion": GetVersionRequest,
}


def available_actions() -> list[str]:
    return sorted(_REQUESTS)


def create_request(action: str) -> Request | None:
    """Return a new request object for *action*, or None if there is none."""
    request_cls = _REQUESTS.get(action)
    if request_cls is None:
        return None
    return request_cls()
