from __future__ import annotations

import locale

import pytest

from blogclient import run_client


class _IdleApp:
    def __init__(self, settings, surface, *, fragment: str = ""):
        self.fragment = fragment
        surface.show(f"<p>{fragment}</p>")

    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass


def test_main_applies_user_locale_before_rendering(monkeypatch: pytest.MonkeyPatch, capsys):
    calls: list[tuple[int, str]] = []
    monkeypatch.setattr(run_client.locale, "setlocale", lambda category, value: calls.append((category, value)))
    monkeypatch.setattr(run_client, "BlogApp", _IdleApp)

    assert run_client.main(["#/post/abc"]) == 0

    assert calls == [(locale.LC_TIME, "")]
    assert "#/post/abc" in capsys.readouterr().out


def test_main_survives_unknown_locale(monkeypatch: pytest.MonkeyPatch):
    def broken(category, value):
        raise locale.Error("unsupported locale setting")

    monkeypatch.setattr(run_client.locale, "setlocale", broken)
    monkeypatch.setattr(run_client, "BlogApp", _IdleApp)

    assert run_client.main([]) == 0
