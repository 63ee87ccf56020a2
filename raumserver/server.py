#!/usr/bin/env python3
# Raumserver
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Raumserver HTTP front end.

Accepts requests on

    /raumserver/controller/{action}?id=<room or zone>&...
    /raumserver/data/{action}?...

looks the action up in the request registry, runs it against the kernel and
answers with a JSON envelope:

    {"requestUrl": ..., "action": ..., "error": bool, "msg": str, "data": ...}

Every response is HTTP 200; failures are reported through ``error``/``msg``.

Port: 8080 (config: server.port)
"""

import asyncio
import functools
import json
import logging

from aiohttp import web

from . import __version__
from .lib.config import LOG_LEVELS, cfg
from .lib.kernel import Raumkernel
from .lib.watchdog import watchdog_loop
from .requests import available_actions, create_request
from .requests.base import CORS_HEADERS, RequestContext, RequestRejected

logger = logging.getLogger("raumserver")

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080

PATH_PREFIXES = ("/raumserver/controller/", "/raumserver/data/")

MSG_UNKNOWN_PATH = "Unknown url path"
MSG_UNKNOWN_ACTION = "Unknown action"
MSG_REJECTED = "Action was rejected"

_dumps = functools.partial(json.dumps, default=str)


def build_envelope(request_url: str, action: str, msg: str, error: bool, data) -> dict:
    return {
        "requestUrl": request_url,
        "action": action,
        "error": error,
        "msg": msg,
        "data": data,
    }


def split_path(path: str) -> list[str] | None:
    """Return the path segments of a raumserver url, or None if it is not one."""
    if not path.startswith(PATH_PREFIXES):
        return None
    segments = path.split("/")
    if len(segments) != 4:
        return None
    return segments


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------
class Raumserver:
    def __init__(self, kernel: Raumkernel | None = None):
        self.kernel = kernel or Raumkernel(logger)

    async def handle_request(self, request: web.Request) -> web.Response:
        """Entry point for every inbound request, whatever its method or path."""
        url = request.raw_path
        logger.debug("Request received: %s %s", request.method, url)

        path = request.rel_url.raw_path
        segments = split_path(path)
        if segments is None:
            return self.handle_unknown_path(url, path)

        logger.debug("Request to raumserver recognized: %s", url)
        query = {key: value for key, value in request.rel_url.query.items()}
        return await self.handle_request_object(segments[3], query, url)

    async def handle_request_object(self, action: str, query: dict[str, str],
                                    url: str) -> web.Response:
        request_obj = create_request(action)
        if request_obj is None:
            logger.error("Action '%s' is not a valid action!", action)
            return self.handle_unknown_action(action, url)

        logger.debug("Handle action '%s' with query: %s", action, json.dumps(query))
        ctx = RequestContext(
            logger=logger,
            manager_disposer=self.kernel.manager_disposer,
            action=action,
            url=url,
            query=query,
            actions=available_actions(),
        )
        try:
            data = await request_obj.run(ctx)
        except RequestRejected as e:
            logger.warning("Action '%s' rejected: %s", action, e)
            return self._respond(url, action, MSG_REJECTED, True, e.data,
                                 request_obj.return_headers)
        except Exception as e:
            logger.warning("Action '%s' failed: %s", action, e, exc_info=True)
            return self._respond(url, action, MSG_REJECTED, True, str(e),
                                 request_obj.return_headers)
        return self._respond(url, action, "", False, data, request_obj.return_headers)

    def handle_unknown_path(self, url: str, path: str) -> web.Response:
        action = path.rstrip("/").rsplit("/", 1)[-1]
        return self._respond(url, action, MSG_UNKNOWN_PATH, True, {}, CORS_HEADERS)

    def handle_unknown_action(self, action: str, url: str) -> web.Response:
        return self._respond(url, action, MSG_UNKNOWN_ACTION, True, {}, CORS_HEADERS)

    def _respond(self, url: str, action: str, msg: str, error: bool, data,
                 headers: dict[str, str]) -> web.Response:
        return web.json_response(
            build_envelope(url, action, msg, error, data),
            status=200, dumps=_dumps, headers=headers)


# ---------------------------------------------------------------------------
# App lifecycle
# ---------------------------------------------------------------------------
RAUMSERVER_KEY = web.AppKey("raumserver", Raumserver)
WATCHDOG_KEY = web.AppKey("watchdog", asyncio.Task)


async def on_startup(app: web.Application):
    server = app[RAUMSERVER_KEY]
    kernel = server.kernel
    logger.info("Welcome to raumserver v%s (kernel v%s)", __version__, kernel.version)

    logger.debug("Setting up kernel")
    loop = asyncio.get_running_loop()
    await loop.run_in_executor(
        None, lambda: kernel.init(
            host=cfg("kernel", "host"),
            timeout=float(cfg("kernel", "discovery_timeout", default=5)),
        ))
    app[WATCHDOG_KEY] = asyncio.create_task(watchdog_loop())


async def on_cleanup(app: web.Application):
    task = app.get(WATCHDOG_KEY)
    if task:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
    logger.info("Raumserver stopped")


def create_app(kernel: Raumkernel | None = None, *, init_kernel: bool = True) -> web.Application:
    app = web.Application()
    server = Raumserver(kernel)
    app[RAUMSERVER_KEY] = server
    app.router.add_route("*", "/{tail:.*}", server.handle_request)
    if init_kernel:
        app.on_startup.append(on_startup)
        app.on_cleanup.append(on_cleanup)
    return app


def log_level() -> str:
    level = str(cfg("log", "level", default="INFO")).upper()
    return level if level in LOG_LEVELS else "INFO"


def main():
    logging.basicConfig(
        level=log_level(),
        format="[%(asctime)s] %(levelname)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    host = cfg("server", "host", default=DEFAULT_HOST)
    port = int(cfg("server", "port", default=DEFAULT_PORT))
    app = create_app()
    logger.info("Raumserver listening on port %d", port)
    web.run_app(app, host=host, port=port, print=lambda msg: logger.info(msg))


if __name__ == "__main__":
    main()
