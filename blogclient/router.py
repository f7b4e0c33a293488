from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Union
from urllib.parse import unquote

from blogclient.api import encode_component

logger = logging.getLogger(__name__)

NEW_PREFIX = "#/new"
DETAIL_PREFIX = "#/post/"


@dataclass(frozen=True)
class ListRoute:
    pass


@dataclass(frozen=True)
class NewRoute:
    pass


@dataclass(frozen=True)
class DetailRoute:
    post_id: str


Route = Union[ListRoute, NewRoute, DetailRoute]
RouteHandler = Callable[[Route], None]


def parse_fragment(fragment: str | None) -> Route:
    """
    Derive a route from a location fragment.

    Rules (in priority order):
    - "#/new..." -> NewRoute
    - "#/post/<id>" -> DetailRoute(percent-decoded id)
    - anything else, including "" -> ListRoute
    """
    frag = fragment or "#/"
    if frag.startswith(NEW_PREFIX):
        return NewRoute()
    if frag.startswith(DETAIL_PREFIX):
        return DetailRoute(unquote(frag[len(DETAIL_PREFIX):]))
    return ListRoute()


def fragment_for(route: Route) -> str:
    if isinstance(route, NewRoute):
        return NEW_PREFIX
    if isinstance(route, DetailRoute):
        return DETAIL_PREFIX + encode_component(route.post_id)
    return "#/"


class Router:
    """
    Owns the current fragment and notifies subscribers when it changes.

    Subscribers are not called for the initial fragment; the app dispatches
    the initial route itself.
    """

    def __init__(self, fragment: str = ""):
        self._fragment = fragment
        self._handlers: list[RouteHandler] = []

    @property
    def fragment(self) -> str:
        return self._fragment

    def current_route(self) -> Route:
        return parse_fragment(self._fragment)

    def subscribe(self, handler: RouteHandler) -> Callable[[], None]:
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def navigate(self, fragment: str) -> None:
        if fragment == self._fragment:
            return
        logger.info("Navigate: %s -> %s", self._fragment or "#/", fragment)
        self._fragment = fragment
        route = self.current_route()
        for handler in list(self._handlers):
            handler(route)

    def navigate_to(self, route: Route) -> None:
        self.navigate(fragment_for(route))
