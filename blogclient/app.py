from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import requests

from blogclient.api import BlogApi
from blogclient.controller import ViewController
from blogclient.html_utils import html_to_text
from blogclient.http_client import HttpClient, HttpConfig
from blogclient.router import Router
from blogclient.settings import ClientSettings
from blogclient.views import ViewSurface

logger = logging.getLogger(__name__)


class BufferSurface:
    """Holds the markup currently on screen."""

    def __init__(self) -> None:
        self.markup = ""

    @property
    def text(self) -> str:
        return html_to_text(self.markup)

    def show(self, markup: str) -> None:
        self.markup = markup


class BlogApp:
    """Wires router, transport and views together."""

    def __init__(
            self,
            settings: ClientSettings,
            surface: ViewSurface,
            *,
            fragment: str = "",
            session: Optional[requests.Session] = None,
            sleep: Callable[[float], None] = time.sleep,
    ):
        http = HttpClient(
            HttpConfig(timeout_sec=settings.request_timeout_sec, user_agent=settings.user_agent),
            session=session,
        )
        self.api = BlogApi(settings.api_base_url, http, prefix=settings.api_prefix)
        self.router = Router(fragment)
        self.surface = surface
        self.views = ViewController(
            self.api,
            surface,
            self.router,
            list_limit=settings.list_limit,
            poll_interval_sec=settings.poll_interval_sec,
            sleep=sleep,
        )
        self._unsubscribe: Optional[Callable[[], None]] = None

    def start(self) -> None:
        self._unsubscribe = self.router.subscribe(self.views.dispatch)
        route = self.router.current_route()
        logger.info("Initial route: %s", route)
        self.views.dispatch(route)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
