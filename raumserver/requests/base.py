# Raumserver
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Base classes for raumserver requests.

One request object is created per HTTP call.  The dispatcher hands it a
RequestContext and awaits ``run()`` exactly once; the return value becomes
the envelope's ``data``, a raised exception makes the request rejected.

Subclass contract for renderer requests:

    class NextRequest(MediaRendererRequest):
        def is_allowed_for_room_renderer(self) -> bool:
            return False

        def run_action(self, renderer, ctx):      # blocking, runs in executor
            return renderer.next()

Optional override:
    check_params(ctx) — validate query parameters before the renderer is
                        resolved; raise RequestRejected to stop early.
"""

import asyncio
import logging
from abc import ABC, abstractmethod

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class RequestRejected(Exception):
    """An action refused to run or the kernel refused the call."""

    def __init__(self, msg: str, data=None):
        super().__init__(msg)
        self.data = msg if data is None else data


class RequestContext:
    """Everything a request needs from the server, passed explicitly."""

    def __init__(self, logger: logging.Logger, manager_disposer, action: str,
                 url: str, query: dict[str, str], actions: list[str] | None = None):
        self.logger = logger
        self.manager_disposer = manager_disposer
        self.action = action
        self.url = url
        self.query = query
        # every action name the dispatcher can serve
        self.actions = actions or []

    def param(self, name: str, default: str | None = None) -> str | None:
        value = self.query.get(name)
        return default if value in (None, "") else value


class Request(ABC):
    """Interface every action must implement."""

    def __init__(self):
        # headers echoed back on the HTTP response
        self.return_headers: dict[str, str] = dict(CORS_HEADERS)

    def is_allowed_for_room_renderer(self) -> bool:
        return True

    @abstractmethod
    async def run(self, ctx: RequestContext): ...

    @staticmethod
    async def call_kernel(func, *args):
        """Run one blocking kernel call off the event loop."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)


class MediaRendererRequest(Request):
    """A request that targets a renderer selected by the ``id`` parameter.

    ``id`` (alias ``room``) may name a zone or a room.  Rooms are addressed
    directly only when the action allows room renderers; otherwise the
    virtual renderer of the room's zone is used.  A lookup that misses asks
    the kernel to re-discover once before giving up.
    """

    def check_params(self, ctx: RequestContext) -> None:
        pass

    def is_zone_group_target(self) -> bool:
        """True when a zone id should hand run_action the group, not its coordinator."""
        return False

    @abstractmethod
    def run_action(self, renderer, ctx: RequestContext): ...

    def _lookup_renderer(self, ctx: RequestContext, renderer_id: str):
        disposer = ctx.manager_disposer
        if self.is_zone_group_target():
            renderer = disposer.zone_manager.get_zone(renderer_id)
        else:
            renderer = disposer.zone_manager.get_virtual_renderer(renderer_id)
        if renderer is not None:
            return renderer

        room_renderer = disposer.device_manager.get_room_renderer(renderer_id)
        if room_renderer is None:
            return None
        if self.is_allowed_for_room_renderer():
            return room_renderer
        ctx.logger.debug("'%s' is not allowed on room '%s', using its zone",
                         ctx.action, renderer_id)
        return disposer.zone_manager.get_virtual_renderer_for_room(room_renderer)

    def find_renderer(self, ctx: RequestContext, renderer_id: str):
        renderer = self._lookup_renderer(ctx, renderer_id)
        if renderer is None and ctx.manager_disposer.rediscover():
            renderer = self._lookup_renderer(ctx, renderer_id)
        return renderer

    async def run(self, ctx: RequestContext):
        renderer_id = ctx.param("id") or ctx.param("room")
        if not renderer_id:
            raise RequestRejected("No renderer id given")
        self.check_params(ctx)

        renderer = await self.call_kernel(self.find_renderer, ctx, renderer_id)
        if renderer is None:
            raise RequestRejected(f"Renderer for id '{renderer_id}' not found")

        return await self.call_kernel(self.run_action, renderer, ctx)
