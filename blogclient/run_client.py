from __future__ import annotations

import argparse
import locale
import logging
import mimetypes
from pathlib import Path
from typing import Optional, Sequence

from blogclient.app import BlogApp, BufferSurface
from blogclient.http_client import UploadFile
from blogclient.models import Effect
from blogclient.router import NewRoute, fragment_for
from blogclient.settings import load_settings

logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Terminal client for the posts API.")
    parser.add_argument("fragment", nargs="?", default="#/", help='route fragment, e.g. "#/post/<id>"')
    parser.add_argument("--title", help="submit a new post with this title")
    parser.add_argument("--body", help="body of the new post")
    parser.add_argument("--image", type=Path, help="image file to attach")
    parser.add_argument("--effect", choices=[e.value for e in Effect], default=Effect.NONE.value)
    return parser.parse_args(argv)


def _load_image(path: Path) -> UploadFile:
    ctype, _ = mimetypes.guess_type(path.name)
    return UploadFile(filename=path.name, content=path.read_bytes(), content_type=ctype)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    s = load_settings()

    logging.basicConfig(
        level=s.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )

    # Published timestamps use the user's locale
    try:
        locale.setlocale(locale.LC_TIME, "")
    except locale.Error as e:
        logger.warning("Falling back to C locale for timestamps: err=%s", e)

    surface = BufferSurface()
    creating = args.title is not None or args.body is not None
    app = BlogApp(s, surface, fragment=fragment_for(NewRoute()) if creating else args.fragment)
    app.start()

    if creating:
        app.views.update_form(title=args.title or "", body=args.body or "")
        if args.image:
            app.views.attach_image(_load_image(args.image))
            app.views.select_effect(args.effect)
        result = app.views.submit()
        logger.info("Submission result: outcome=%s fragment=%s", result.outcome.value, app.router.fragment)

    print(surface.text)
    app.stop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
