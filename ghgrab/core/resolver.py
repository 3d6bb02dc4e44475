"""
Turns GitHub URLs into canonical download targets.

Recognized forms::

    https://raw.githubusercontent.com/<owner>/<repo>/<ref>/<path>
    https://github.com/<owner>/<repo>/blob/<ref>/<path>
    https://github.com/<owner>/<repo>/raw/<ref>/<path>
    https://github.com/<owner>/<repo>/tree/<ref>[/<path>]

The first segment after the verb is taken as the ref, so refs containing
slashes cannot be expressed.
"""

from posixpath import basename
from typing import Callable, Dict, List
from urllib.parse import unquote, urlparse

from ..infrastructure.error_handler import InvalidUrlError
from ..infrastructure.logger import logger
from ..models import HostFamily, Target, TargetKind


FILE_VERBS = frozenset({"blob", "raw"})
DIRECTORY_VERBS = frozenset({"tree"})
MIN_SEGMENTS = 4


class TargetResolver:
    """Parses a raw URL string into a ``Target``."""

    def __init__(self) -> None:
        self._parsers: Dict[HostFamily, Callable[[List[str], str], Target]] = {
            HostFamily.RAW: self._parse_raw,
            HostFamily.BROWSER: self._parse_browser,
        }

    def resolve(self, raw_url: str) -> Target:
        """
        Resolve ``raw_url`` into a ``Target``.

        Raises:
            InvalidUrlError: If the string is not an absolute http(s) URL or
                its host/path shape is not one of the recognized forms
        """
        url = (raw_url or "").strip()

        try:
            parsed = urlparse(url)
            hostname = parsed.hostname
        except ValueError as e:
            raise InvalidUrlError(f"Not a valid URL: {url!r}", e) from e

        if parsed.scheme not in ("http", "https") or not hostname:
            raise InvalidUrlError(f"Not a valid URL: {url!r}")

        family = HostFamily.from_hostname(hostname)
        parser = self._parsers.get(family)
        if parser is None:
            raise InvalidUrlError(f"Not a GitHub URL: {url}")

        segments = [unquote(part) for part in parsed.path.split("/") if part]
        if any(part in (".", "..") or "/" in part for part in segments):
            raise InvalidUrlError(f"URL path contains unsafe segments: {url}")

        target = parser(segments, url)

        logger.debug(f"Resolved {url} -> {target.kind.value} {target.display_path}")
        return target

    def _parse_raw(self, segments: List[str], url: str) -> Target:
        if len(segments) < MIN_SEGMENTS:
            raise InvalidUrlError(f"Raw URL needs owner, repo, ref and path: {url}")

        owner, repo, ref, *path_parts = segments
        path = "/".join(path_parts)
        return Target(
            owner=owner,
            repo=repo,
            ref=ref,
            path=path,
            display_name=basename(path),
            kind=TargetKind.FILE,
            host=HostFamily.RAW,
        )

    def _parse_browser(self, segments: List[str], url: str) -> Target:
        if len(segments) < MIN_SEGMENTS:
            raise InvalidUrlError(f"GitHub URL does not point at a file or folder: {url}")

        owner, repo, verb, ref, *path_parts = segments
        path = "/".join(path_parts)

        if verb in FILE_VERBS:
            if not path_parts:
                raise InvalidUrlError(f"File URL has no file path: {url}")
            kind = TargetKind.FILE
            display_name = basename(path)
        elif verb in DIRECTORY_VERBS:
            kind = TargetKind.DIRECTORY
            display_name = path_parts[-1] if path_parts else repo
        else:
            raise InvalidUrlError(f"Unsupported GitHub URL type '{verb}': {url}")

        return Target(
            owner=owner,
            repo=repo,
            ref=ref,
            path=path,
            display_name=display_name,
            kind=kind,
            host=HostFamily.BROWSER,
        )


_default_resolver = TargetResolver()


def resolve_target(raw_url: str) -> Target:
    """Module-level shortcut for ``TargetResolver().resolve``."""
    return _default_resolver.resolve(raw_url)


__all__ = [
    "TargetResolver",
    "resolve_target",
]
