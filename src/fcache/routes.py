"""
Route table caching.

Routes that stay the same for a long time can be loaded from the cache
instead of being redefined on every start:

    table = RouteTable()
    if not cache_route(cache, table):
        table.add(Route(name="default", uri="<controller>(/<action>)"))
        cache_route(cache, table, save=True)

Routes with a callback cannot be cached.
"""

from __future__ import annotations

from typing import Any, Callable

from pydantic import BaseModel, Field, ValidationError

from fcache.cache.base import CacheProtocol
from fcache.exceptions import CacheEncodeError, RouteCacheError
from fcache.logging import get_logger, log_context

logger = get_logger(__name__)

ROUTE_CACHE_KEY = "route-table"


class Route(BaseModel):
    """A named URI pattern with default parameters."""

    name: str
    uri: str
    defaults: dict[str, Any] = Field(default_factory=dict)
    regex: dict[str, str] = Field(default_factory=dict)
    callback: Callable[..., Any] | None = None


class RouteTable:
    """Mutable set of current routes, keyed by route name."""

    def __init__(self, routes: dict[str, Route] | None = None) -> None:
        self.routes: dict[str, Route] = dict(routes or {})
        self.cached = False

    def add(self, route: Route) -> Route:
        """Register a route, replacing any route with the same name."""
        self.routes[route.name] = route
        return route

    def get(self, name: str) -> Route | None:
        return self.routes.get(name)

    def names(self) -> list[str]:
        return list(self.routes)

    def __len__(self) -> int:
        return len(self.routes)


def _load_routes(cached: Any) -> dict[str, Route] | None:
    if not isinstance(cached, dict) or not cached:
        return None
    try:
        return {name: Route.model_validate(data) for name, data in cached.items()}
    except ValidationError as e:
        logger.warning("Cached route table is invalid", error=str(e))
        return None


def cache_route(
    cache: CacheProtocol,
    table: RouteTable,
    save: bool = False,
    append: bool = False,
) -> bool:
    """Save the route table to the cache, or load it from the cache.

    Args:
        cache: Cache to read from or write to.
        table: Route table to save, or to fill when loading.
        save: Store the current routes instead of loading.
        append: When loading, merge the cached routes into the current table
            rather than replacing it.

    Returns:
        When saving, whether the write succeeded. When loading, whether a
        cached table was found.

    Raises:
        RouteCacheError: If a route cannot be serialized (usually a callback).
    """
    if save:
        with log_context(component="routes", operation="save"):
            try:
                written = cache.set(ROUTE_CACHE_KEY, table.routes)
            except CacheEncodeError as e:
                raise RouteCacheError(
                    f"One or more routes could not be cached ({e.message})",
                    context={"routes": len(table)},
                ) from e
            logger.debug("Route table saved", routes=len(table), written=written)
            return written

    with log_context(component="routes", operation="load"):
        routes = _load_routes(cache.get(ROUTE_CACHE_KEY))
        if routes is None:
            table.cached = False
            return False

        if append:
            table.routes.update(routes)
        else:
            table.routes = routes

        logger.debug("Route table loaded", routes=len(routes), append=append)
        table.cached = True
        return True
