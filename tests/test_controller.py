from __future__ import annotations

import requests
from bs4 import BeautifulSoup

from blogclient.controller import ViewController
from blogclient.create_workflow import CreateOutcome
from blogclient.http_client import UploadFile
from blogclient.router import DetailRoute, ListRoute, NewRoute, Router
from fakes import FakeSession, RecordingSurface, make_api, make_response, url

POST = {"id": "Ab12Cd34Ef56", "title": "Hi <there>", "body": "b", "created_at": 1700000000}


def _controller(session: FakeSession, fragment: str = "") -> tuple[ViewController, Router, RecordingSurface]:
    router = Router(fragment)
    surface = RecordingSurface()
    views = ViewController(make_api(session), surface, router, sleep=lambda _: None)
    router.subscribe(views.dispatch)
    return views, router, surface


def test_list_shows_loading_then_rows():
    session = FakeSession({("GET", url("/posts")): make_response(200, [POST])})
    views, _, surface = _controller(session)

    views.dispatch(ListRoute())

    assert "Loading posts" in surface.history[0]
    soup = BeautifulSoup(surface.markup, "lxml")
    assert soup.find("a", href="#/post/Ab12Cd34Ef56").get_text() == "Hi <there>"


def test_list_uses_configured_limit():
    session = FakeSession({("GET", url("/posts?limit=5")): make_response(200, [])})
    views, _, surface = _controller(session)
    views.list_limit = 5

    views.dispatch(ListRoute())

    assert "No posts yet" in surface.markup


def test_non_list_payload_renders_empty_state():
    session = FakeSession({("GET", url("/posts")): make_response(200, {"unexpected": True})})
    views, _, surface = _controller(session)

    views.dispatch(ListRoute())

    assert BeautifulSoup(surface.markup, "lxml").find("a", href="#/new") is not None


def test_list_error_renders_error_card():
    session = FakeSession({("GET", url("/posts")): make_response(200, "<html>", content_type="text/html")})
    views, _, surface = _controller(session)

    views.dispatch(ListRoute())

    text = BeautifulSoup(surface.markup, "lxml").get_text()
    assert "Invalid JSON: <html>" in text
    assert "Create a post" in text


def test_detail_drops_missing_image_silently():
    session = FakeSession(
        {
            ("GET", url("/posts/Ab12Cd34Ef56")): make_response(200, POST),
            ("GET", url("/images/Ab12Cd34Ef56")): make_response(404, "image not found", content_type="text/plain"),
        }
    )
    views, _, surface = _controller(session)

    views.dispatch(DetailRoute("Ab12Cd34Ef56"))

    assert "<img" in surface.history[-2]
    assert "<img" not in surface.markup
    assert "error" not in surface.markup


def test_detail_keeps_available_image():
    session = FakeSession(
        {
            ("GET", url("/posts/Ab12Cd34Ef56")): make_response(200, POST),
            ("GET", url("/images/Ab12Cd34Ef56")): make_response(200, b"\x89PNG", content_type="image/png"),
        }
    )
    views, _, surface = _controller(session)

    views.dispatch(DetailRoute("Ab12Cd34Ef56"))

    assert BeautifulSoup(surface.markup, "lxml").find("img")["src"] == url("/images/Ab12Cd34Ef56")


def test_detail_failure_renders_error_card():
    session = FakeSession({("GET", url("/posts/missing")): requests.ConnectionError("refused")})
    views, _, surface = _controller(session)

    views.dispatch(DetailRoute("missing"))

    assert "Network error" in surface.markup


def test_stale_list_response_does_not_overwrite_newer_view():
    routes = {
        ("GET", url("/posts/Ab12Cd34Ef56")): make_response(200, POST),
        ("GET", url("/images/Ab12Cd34Ef56")): make_response(200, b"", content_type="image/png"),
    }
    session = FakeSession(routes)
    views, router, surface = _controller(session)

    def slow_list():
        router.navigate("#/post/Ab12Cd34Ef56")
        return make_response(200, [POST])

    routes[("GET", url("/posts"))] = slow_list
    session.routes = routes

    views.dispatch(ListRoute())

    assert router.current_route() == DetailRoute("Ab12Cd34Ef56")
    assert "post-window" in surface.markup
    assert not any("<table" in m for m in surface.history)


def test_create_flow_navigates_to_new_post_after_job():
    session = FakeSession(
        {
            ("POST", url("/posts")): make_response(201, POST),
            ("POST", url("/images/Ab12Cd34Ef56")): make_response(200, {"ok": True}),
            ("POST", url("/jobs/effect")): make_response(202, {"job_name": "effect-1"}),
            ("GET", url("/jobs/effect-1/status")): make_response(200, {"status": "succeeded"}),
            ("GET", url("/posts/Ab12Cd34Ef56")): make_response(200, POST),
            ("GET", url("/images/Ab12Cd34Ef56")): make_response(200, b"", content_type="image/png"),
        }
    )
    views, router, surface = _controller(session, "#/new")
    views.dispatch(NewRoute())
    views.update_form(title="Hi", body="there")
    views.attach_image(UploadFile("cat.png", b"\x89PNG", "image/png"))
    views.select_effect("invert")
    assert 'name="effect"' in surface.markup

    result = views.submit()

    assert result.outcome is CreateOutcome.JOB_SUCCEEDED
    assert router.fragment == "#/post/Ab12Cd34Ef56"
    assert "post-window" in surface.markup
    assert any("effect-1" in m for m in surface.history)


def test_create_post_failure_stays_on_form_with_inline_error():
    session = FakeSession({("POST", url("/posts")): make_response(500, "hset failed", content_type="text/plain", reason="Internal Server Error")})
    views, router, surface = _controller(session, "#/new")
    views.dispatch(NewRoute())
    views.update_form(title="Hi", body="there")

    result = views.submit()

    assert result.outcome is CreateOutcome.POST_FAILED
    assert router.fragment == "#/new"
    status = BeautifulSoup(surface.markup, "lxml").find(id="jobStatus").get_text()
    assert status == "Create post failed: HTTP 500 Internal Server Error: hset failed"


def test_unusual_created_at_values_render_instead_of_crashing():
    posts = [
        dict(POST, id="ms1", created_at=1700000000000000),
        dict(POST, id="iso1", created_at="2024-01-01T00:00:00Z"),
        dict(POST, id="none1", created_at=None),
    ]
    session = FakeSession({("GET", url("/posts")): make_response(200, posts)})
    views, _, surface = _controller(session)

    views.dispatch(ListRoute())

    soup = BeautifulSoup(surface.markup, "lxml")
    assert [a["href"] for a in soup.select("tbody a")] == ["#/post/ms1", "#/post/iso1", "#/post/none1"]
    assert soup.select("tbody tr")[0].find_all("td")[1].get_text() == "Invalid Date"


def test_same_route_dispatched_twice_re_renders():
    session = FakeSession({("GET", url("/posts")): make_response(200, [POST])})
    views, _, surface = _controller(session)

    views.dispatch(ListRoute())
    first = surface.markup
    views.dispatch(ListRoute())

    assert surface.markup == first
    assert len(surface.history) == 4
    assert session.urls() == [url("/posts"), url("/posts")]


def test_form_edits_do_not_replace_other_views():
    session = FakeSession({("GET", url("/posts")): make_response(200, [POST])})
    views, _, surface = _controller(session, "#/")
    views.dispatch(ListRoute())
    rendered = len(surface.history)

    views.update_form(title="draft")
    views.attach_image(UploadFile("cat.png", b"\x89PNG", "image/png"))
    views.select_effect("grayscale")

    assert len(surface.history) == rendered
    assert "<table" in surface.markup
    assert views.form.title == "draft"
    assert views.form.effect.value == "grayscale"
