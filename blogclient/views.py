from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional, Protocol, Sequence, Union

from blogclient.errors import FormValidationError, TransportError, describe_error
from blogclient.html_utils import escape_html
from blogclient.http_client import UploadFile
from blogclient.models import Effect, Post
from blogclient.router import DetailRoute, ListRoute, NewRoute, fragment_for


class ViewSurface(Protocol):
    """Display target of the current view. Last writer wins."""

    def show(self, markup: str) -> None: ...


# -------------------------
# View states
# -------------------------


@dataclass(frozen=True)
class LoadingState:
    message: str


@dataclass(frozen=True)
class PostListState:
    posts: Sequence[Post]


@dataclass(frozen=True)
class PostDetailState:
    post: Post
    image_url: Optional[str] = None


@dataclass(frozen=True)
class ErrorState:
    title: str
    error: TransportError


@dataclass(frozen=True)
class CreateFormState:
    """
    Create form values.

    The effect choice only applies while an image is attached; detaching the
    image resets it to Effect.NONE.
    """

    title: str = ""
    body: str = ""
    image: Optional[UploadFile] = None
    effect: Effect = Effect.NONE
    status_html: str = field(default="", compare=False)

    @property
    def effects_visible(self) -> bool:
        return self.image is not None

    def with_image(self, image: Optional[UploadFile]) -> "CreateFormState":
        if image is None:
            return replace(self, image=None, effect=Effect.NONE)
        return replace(self, image=image)

    def with_effect(self, effect: Effect | str) -> "CreateFormState":
        if self.image is None:
            return replace(self, effect=Effect.NONE)
        return replace(self, effect=Effect(effect))

    def with_status(self, status_html: str) -> "CreateFormState":
        return replace(self, status_html=status_html)

    def validated(self) -> "CreateFormState":
        title = self.title.strip()
        body = self.body.strip()
        if not title or not body:
            raise FormValidationError("title and body required")
        return replace(self, title=title, body=body)


ViewState = Union[LoadingState, PostListState, PostDetailState, ErrorState, CreateFormState]


# -------------------------
# Rendering (pure)
# -------------------------


INVALID_DATE = "Invalid Date"


def format_timestamp(epoch_sec: int) -> str:
    try:
        return datetime.fromtimestamp(epoch_sec).strftime("%c")
    except (OverflowError, OSError, ValueError):
        return INVALID_DATE


def render(state: ViewState) -> str:
    if isinstance(state, LoadingState):
        return f'<div class="loading">{escape_html(state.message)}</div>'
    if isinstance(state, PostListState):
        return render_post_list(state)
    if isinstance(state, PostDetailState):
        return render_post_detail(state)
    if isinstance(state, ErrorState):
        return render_error_card(state.title, describe_error(state.error))
    if isinstance(state, CreateFormState):
        return render_create_form(state)
    raise TypeError(f"Unknown view state: {type(state).__name__}")


def render_post_list(state: PostListState) -> str:
    new_href = fragment_for(NewRoute())
    if not state.posts:
        return (
            "<h2>Latest Posts</h2>"
            f'<p>No posts yet… <a href="{new_href}">click here to create one</a>.</p>'
        )

    rows = "".join(
        "<tr>"
        f'<td><a href="{escape_html(fragment_for(DetailRoute(p.id)))}">{escape_html(p.title)}</a></td>'
        f"<td>{escape_html(format_timestamp(p.created_at))}</td>"
        "</tr>"
        for p in state.posts
    )
    return (
        "<h2>Latest Posts</h2>"
        "<table><thead><tr><th>Title</th><th>Published</th></tr></thead>"
        f"<tbody>{rows}</tbody></table>"
    )


def render_post_detail(state: PostDetailState) -> str:
    p = state.post
    image = ""
    if state.image_url:
        image = f'<img class="post-image" src="{escape_html(state.image_url)}" alt="{escape_html(p.title)} image"/>'
    return (
        '<div class="post-window">'
        f"<h2>{escape_html(p.title)}</h2>"
        f'<div class="post-body">{image}<pre class="body">{escape_html(p.body)}</pre></div>'
        f'<p><a href="{fragment_for(ListRoute())}">← Back</a></p>'
        "</div>"
    )


def render_error_card(title: str, details_html: str) -> str:
    details = f'<p class="error-details">{details_html}</p>' if details_html else ""
    return (
        '<div class="card">'
        f"<h2>{escape_html(title)}</h2>"
        '<p class="error">Could not reach the API.</p>'
        f"{details}"
        f'<p><a href="{fragment_for(NewRoute())}">Create a post</a> or try again.</p>'
        "</div>"
    )


def render_create_form(state: CreateFormState) -> str:
    effects = ""
    if state.effects_visible:
        options = "".join(
            f'<label><input type="radio" name="effect" value="{e.value}"'
            f'{" checked" if e is state.effect else ""} /> {e.value.capitalize()}</label>'
            for e in Effect
        )
        effects = f'<div id="effectsSection"><strong>Effects</strong><div>{options}</div></div>'
    image_name = f' <span class="file">{escape_html(state.image.filename)}</span>' if state.image else ""
    return (
        '<form id="postForm">'
        "<h2>Create New Post</h2>"
        f'<label>Title <input name="title" value="{escape_html(state.title)}" required/></label>'
        f'<label>Body <textarea name="body" required>{escape_html(state.body)}</textarea></label>'
        f'<label>Image <input type="file" name="image" accept="image/*"/>{image_name}</label>'
        f"{effects}"
        '<button type="submit">Create</button>'
        "</form>"
        f'<div id="jobStatus">{state.status_html}</div>'
    )


def status_error(prefix: str, details_html: str) -> str:
    return f'<div class="error">{escape_html(prefix)}: {details_html}</div>'
