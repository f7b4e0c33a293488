from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable

from blogclient.api import BlogApi
from blogclient.errors import TransportError, describe_error
from blogclient.html_utils import escape_html
from blogclient.views import status_error

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SEC = 1.0


class PollState(str, Enum):
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    POLL_ERROR = "poll_error"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset({PollState.SUCCEEDED, PollState.FAILED, PollState.POLL_ERROR, PollState.CANCELLED})


class JobPoller:
    """
    Polls an effect job until it reaches a terminal state.

    - One status request per interval, strictly sequential
    - A single transport failure ends monitoring (POLL_ERROR), no retry
    - on_success runs at most once, only on SUCCEEDED
    - cancel() stops the loop before the next poll and discards an in-flight result
    """

    def __init__(
            self,
            api: BlogApi,
            job_name: str,
            *,
            display: Callable[[str], None],
            on_success: Callable[[], None],
            interval_sec: float = DEFAULT_POLL_INTERVAL_SEC,
            sleep: Callable[[float], None] = time.sleep,
    ):
        self.api = api
        self.job_name = job_name
        self.interval_sec = interval_sec
        self.state = PollState.RUNNING
        self.polls = 0
        self._display = display
        self._on_success = on_success
        self._sleep = sleep
        self._cancelled = False

    @property
    def done(self) -> bool:
        return self.state in TERMINAL_STATES

    def cancel(self) -> None:
        if not self.done:
            logger.info("Job polling cancelled: job=%s polls=%s", self.job_name, self.polls)
        self._cancelled = True

    def run(self) -> PollState:
        name = escape_html(self.job_name)
        self._display(f'<div class="running">Job <b>{name}</b> running…</div>')

        while self.state is PollState.RUNNING:
            self._sleep(self.interval_sec)
            if self._cancelled:
                self.state = PollState.CANCELLED
                break

            self.polls += 1
            try:
                st = self.api.job_status(self.job_name)
            except TransportError as err:
                if self._cancelled:
                    self.state = PollState.CANCELLED
                    break
                self.state = PollState.POLL_ERROR
                logger.warning("Job poll failed: job=%s poll=%s err=%s", self.job_name, self.polls, err)
                self._display(status_error("Failed to poll job", describe_error(err)))
                break

            if self._cancelled:
                self.state = PollState.CANCELLED
                break

            if st.status == PollState.SUCCEEDED.value:
                self.state = PollState.SUCCEEDED
                logger.info("Job succeeded: job=%s polls=%s", self.job_name, self.polls)
                self._display(f"Job <b>{name}</b> succeeded.")
                self._on_success()
            elif st.status == PollState.FAILED.value:
                self.state = PollState.FAILED
                logger.info("Job failed: job=%s reason=%s", self.job_name, st.reason)
                self._display(f'<div class="error">Job failed: {escape_html(st.reason or "unknown error")}</div>')
            else:
                self._display(f'<div class="running">Job <b>{name}</b> {escape_html(st.status)}…</div>')

        return self.state
