from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

from blogclient.http_client import HttpClient, UploadFile
from blogclient.models import Effect, JobStatus, Post

logger = logging.getLogger(__name__)


def encode_component(value: str) -> str:
    # Same reserved set as encodeURIComponent
    return quote(str(value), safe="-_.!~*'()")


class BlogApi:
    """
    Typed endpoints of the posts API.

    All methods raise TransportError subclasses unchanged; callers decide how to
    present them.
    """

    def __init__(self, base_url: str, http: HttpClient, prefix: str = "/api"):
        self.base_url = base_url.rstrip("/")
        self.prefix = "/" + prefix.strip("/") if prefix.strip("/") else ""
        self.http = http

    def url(self, path: str) -> str:
        return f"{self.base_url}{self.prefix}{path}"

    def list_posts(self, limit: Optional[int] = None) -> Any:
        """Raw list payload; the List view decides what an unusable payload means."""
        path = "/posts" if not limit else f"/posts?limit={int(limit)}"
        return self.http.request_json("GET", self.url(path))

    def get_post(self, post_id: str) -> Post:
        data = self.http.request_json("GET", self.url(f"/posts/{encode_component(post_id)}"))
        return Post.from_json(data if isinstance(data, dict) else {})

    def create_post(self, title: str, body: str) -> Post:
        data = self.http.request_json("POST", self.url("/posts"), json={"title": title, "body": body})
        post = Post.from_json(data if isinstance(data, dict) else {})
        logger.info("Created post: id=%s", post.id)
        return post

    def image_url(self, post_id: str) -> str:
        return self.url(f"/images/{encode_component(post_id)}")

    def upload_image(self, post_id: str, file: UploadFile) -> Any:
        logger.info("Uploading image: post_id=%s filename=%s", post_id, file.filename)
        return self.http.upload(self.image_url(post_id), "file", file)

    def image_available(self, post_id: str) -> bool:
        return self.http.probe(self.image_url(post_id))

    def start_effect_job(self, post_id: str, effect: Effect) -> str:
        data = self.http.request_json(
            "POST",
            self.url("/jobs/effect"),
            json={"post_id": post_id, "effect": effect.value},
        )
        job_name = str(data.get("job_name", "")) if isinstance(data, dict) else ""
        logger.info("Started effect job: post_id=%s effect=%s job=%s", post_id, effect.value, job_name)
        return job_name

    def job_status(self, job_name: str) -> JobStatus:
        data = self.http.request_json("GET", self.url(f"/jobs/{encode_component(job_name)}/status"))
        return JobStatus.from_json(job_name, data)

    def health(self) -> bool:
        data = self.http.request_json("GET", self.url("/healthz"))
        return isinstance(data, dict) and data.get("status") == "ok"
