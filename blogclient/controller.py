from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Callable, Optional

from blogclient.api import BlogApi
from blogclient.create_workflow import CreatePostWorkflow, CreateResult
from blogclient.errors import TransportError
from blogclient.http_client import UploadFile
from blogclient.job_poller import DEFAULT_POLL_INTERVAL_SEC
from blogclient.models import Effect, Post
from blogclient.router import DetailRoute, ListRoute, NewRoute, Route, Router
from blogclient.views import (
    CreateFormState,
    ErrorState,
    LoadingState,
    PostDetailState,
    PostListState,
    ViewState,
    ViewSurface,
    render,
)

logger = logging.getLogger(__name__)


class ViewController:
    """
    Renders the view for each route onto a single surface.

    Every dispatch starts a new render generation; results from an older
    generation are dropped instead of overwriting the current view, and any
    running job poller is cancelled.
    """

    def __init__(
            self,
            api: BlogApi,
            surface: ViewSurface,
            router: Router,
            *,
            list_limit: Optional[int] = None,
            poll_interval_sec: float = DEFAULT_POLL_INTERVAL_SEC,
            sleep: Callable[[float], None] = time.sleep,
    ):
        self.api = api
        self.surface = surface
        self.router = router
        self.list_limit = list_limit
        self.form = CreateFormState()
        self._poll_interval_sec = poll_interval_sec
        self._sleep = sleep
        self._generation = 0
        self._workflow: Optional[CreatePostWorkflow] = None

    def dispatch(self, route: Route) -> None:
        if self._workflow is not None:
            self._workflow.cancel()
            self._workflow = None

        if isinstance(route, NewRoute):
            self.show_new()
        elif isinstance(route, DetailRoute):
            self.show_detail(route.post_id)
        elif isinstance(route, ListRoute):
            self.show_list()
        else:
            raise TypeError(f"Unknown route: {route!r}")

    # -------------------------
    # List / Detail
    # -------------------------

    def show_list(self) -> None:
        token = self._begin()
        self._apply(token, LoadingState("Loading posts…"))
        try:
            payload = self.api.list_posts(self.list_limit)
        except TransportError as err:
            self._apply(token, ErrorState("Latest Posts", err))
            return

        posts = [Post.from_json(p) for p in payload if isinstance(p, dict)] if isinstance(payload, list) else []
        self._apply(token, PostListState(posts))

    def show_detail(self, post_id: str) -> None:
        token = self._begin()
        self._apply(token, LoadingState("Loading post…"))
        try:
            post = self.api.get_post(post_id)
        except TransportError as err:
            self._apply(token, ErrorState("Post", err))
            return

        if not self._apply(token, PostDetailState(post, self.api.image_url(post.id))):
            return
        # Image is optional: a missing one is dropped from the view without an error
        if not self.api.image_available(post.id):
            self._apply(token, PostDetailState(post, None))

    # -------------------------
    # Create
    # -------------------------

    def show_new(self) -> None:
        token = self._begin()
        self.form = CreateFormState()
        self._apply(token, self.form)

    def update_form(self, *, title: Optional[str] = None, body: Optional[str] = None) -> None:
        if title is not None:
            self.form = replace(self.form, title=title)
        if body is not None:
            self.form = replace(self.form, body=body)
        self._show_form()

    def attach_image(self, image: Optional[UploadFile]) -> None:
        self.form = self.form.with_image(image)
        self._show_form()

    def select_effect(self, effect: Effect | str) -> None:
        self.form = self.form.with_effect(effect)
        self._show_form()

    def submit(self) -> CreateResult:
        token = self._generation

        def display(status_html: str) -> None:
            if token != self._generation:
                return
            self.form = self.form.with_status(status_html)
            self._apply(token, self.form)

        workflow = CreatePostWorkflow(
            self.api,
            display=display,
            navigate=self.router.navigate_to,
            poll_interval_sec=self._poll_interval_sec,
            sleep=self._sleep,
        )
        self._workflow = workflow
        result = workflow.submit(self.form)
        if self._workflow is workflow:
            self._workflow = None
        logger.info("Create submission finished: outcome=%s", result.outcome.value)
        return result

    # -------------------------
    # Helpers
    # -------------------------

    def _show_form(self) -> None:
        # Form edits only repaint while the Create view is the current route
        if isinstance(self.router.current_route(), NewRoute):
            self._apply(self._generation, self.form)

    def _begin(self) -> int:
        self._generation += 1
        return self._generation

    def _apply(self, token: int, state: ViewState) -> bool:
        if token != self._generation:
            logger.debug("Dropping stale render: token=%s current=%s", token, self._generation)
            return False
        self.surface.show(render(state))
        return True
