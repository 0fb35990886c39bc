"""Debug surfaces — read-only inspection endpoints.

``/debug/vars``                  request counters (expvar-style JSON)
``/debug/events``                event log summary and filtered recent events
``/debug/pprof/buffer.pool``     buffers currently borrowed from the pool

Only registered when the matching feature is enabled, and never counted
by the metrics middleware.
"""

from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING, Any

from chirp.http.request import Request
from chirp.http.response import Response

from whisker._errors import InputError
from whisker.observability.log import event_record
from whisker.routes.handlers import error_response
from whisker.routes.params import parse_count

if TYPE_CHECKING:
    from whisker.app import Services

VARS_ENDPOINT = "/debug/vars"
EVENTS_ENDPOINT = "/debug/events"
POOL_PROFILE_ENDPOINT = "/debug/pprof/buffer.pool"

DEFAULT_EVENT_LIMIT = 20


def _json(payload: dict[str, Any]) -> Response:
    return Response(
        body=json.dumps(payload, indent=2, default=str),
        status=200,
        content_type="application/json",
    )


def register_metrics_endpoints(app: Any, services: Services) -> None:
    """Register ``/debug/vars`` and ``/debug/events``."""

    async def debug_vars(request: Request) -> Response:
        return _json({
            "cmdline": sys.argv,
            "metrics": services.counters.snapshot(),
        })

    async def debug_events(request: Request) -> Response:
        """``?type=``, ``?path=``, ``?since_ns=`` and ``?limit=`` narrow the listing."""
        query = request.query
        try:
            since_ns = parse_count(query.get("since_ns"), "since_ns", 0)
            limit = parse_count(query.get("limit"), "limit", DEFAULT_EVENT_LIMIT)
        except InputError as exc:
            return error_response(exc)

        log = services.collector.log
        events = log.query(
            event_type=query.get("type") or None,
            since_ns=since_ns,
            path=query.get("path") or None,
            limit=limit,
        )
        return _json({
            "event_log": log.stats(),
            "events": [event_record(event) for event in events],
        })

    app.route(VARS_ENDPOINT, name="whisker:vars")(debug_vars)
    app.route(EVENTS_ENDPOINT, name="whisker:events")(debug_events)


def register_pool_profile_endpoint(app: Any, services: Services) -> None:
    """Register ``/debug/pprof/buffer.pool``."""
    pool = services.pool

    async def pool_profile(request: Request) -> Response:
        return _json({
            "profile": pool.profile.snapshot(),
            "pool": pool.stats(),
        })

    app.route(POOL_PROFILE_ENDPOINT, name="whisker:pool-profile")(pool_profile)
