from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from blogclient.api import BlogApi
from blogclient.errors import FormValidationError, TransportError, describe_error
from blogclient.html_utils import escape_html
from blogclient.job_poller import DEFAULT_POLL_INTERVAL_SEC, JobPoller, PollState
from blogclient.models import Effect, Post
from blogclient.router import DetailRoute, Route
from blogclient.views import CreateFormState, status_error

logger = logging.getLogger(__name__)


class CreateOutcome(str, Enum):
    INVALID = "invalid"
    POST_FAILED = "post_failed"
    IMAGE_FAILED = "image_failed"
    JOB_START_FAILED = "job_start_failed"
    CREATED = "created"
    JOB_SUCCEEDED = "job_succeeded"
    JOB_FAILED = "job_failed"
    JOB_POLL_ERROR = "job_poll_error"
    JOB_CANCELLED = "job_cancelled"


_POLL_OUTCOMES = {
    PollState.SUCCEEDED: CreateOutcome.JOB_SUCCEEDED,
    PollState.FAILED: CreateOutcome.JOB_FAILED,
    PollState.POLL_ERROR: CreateOutcome.JOB_POLL_ERROR,
    PollState.CANCELLED: CreateOutcome.JOB_CANCELLED,
}


@dataclass(frozen=True)
class CreateResult:
    outcome: CreateOutcome
    post: Optional[Post] = None
    job_name: Optional[str] = None


class CreatePostWorkflow:
    """
    Post submission: create post -> upload image -> start effect job -> poll.

    Steps run strictly in order. Failure handling per step:
    - create post: inline error, nothing else runs
    - upload image: inline error, still navigates to the new post
    - start job: inline error, stays on the form
    Navigation after a job is deferred until the job succeeds.
    """

    def __init__(
            self,
            api: BlogApi,
            *,
            display: Callable[[str], None],
            navigate: Callable[[Route], None],
            poll_interval_sec: float = DEFAULT_POLL_INTERVAL_SEC,
            sleep: Callable[[float], None] = time.sleep,
    ):
        self.api = api
        self._display = display
        self._navigate = navigate
        self._poll_interval_sec = poll_interval_sec
        self._sleep = sleep
        self.poller: Optional[JobPoller] = None

    def cancel(self) -> None:
        if self.poller is not None:
            self.poller.cancel()

    def submit(self, form: CreateFormState) -> CreateResult:
        self._display("")
        try:
            form = form.validated()
        except FormValidationError as e:
            self._display(f'<div class="error">{escape_html(e)}</div>')
            return CreateResult(CreateOutcome.INVALID)

        try:
            post = self.api.create_post(form.title, form.body)
        except TransportError as err:
            self._display(status_error("Create post failed", describe_error(err)))
            return CreateResult(CreateOutcome.POST_FAILED)

        detail = DetailRoute(post.id)
        if form.image is None:
            self._navigate(detail)
            return CreateResult(CreateOutcome.CREATED, post)

        try:
            self.api.upload_image(post.id, form.image)
        except TransportError as err:
            self._display(status_error("Image upload failed", describe_error(err)))
            self._navigate(detail)
            return CreateResult(CreateOutcome.IMAGE_FAILED, post)

        if form.effect is Effect.NONE:
            self._navigate(detail)
            return CreateResult(CreateOutcome.CREATED, post)

        self._display(f'<div class="running">Starting image job ({escape_html(form.effect.value)})…</div>')
        try:
            job_name = self.api.start_effect_job(post.id, form.effect)
        except TransportError as err:
            self._display(status_error("Failed to start job", describe_error(err)))
            return CreateResult(CreateOutcome.JOB_START_FAILED, post)

        self.poller = JobPoller(
            self.api,
            job_name,
            display=self._display,
            on_success=lambda: self._navigate(detail),
            interval_sec=self._poll_interval_sec,
            sleep=self._sleep,
        )
        state = self.poller.run()
        return CreateResult(_POLL_OUTCOMES[state], post, job_name)
