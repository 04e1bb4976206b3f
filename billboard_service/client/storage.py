"""Client-local persistence.

``LocalStorage`` is a JSON file playing the part of browser local storage;
``ContentStore`` keeps each billboard's ordered post list on top of it.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
import tempfile
from typing import Any

from pydantic import ValidationError

from .models import Post

logger = logging.getLogger(__name__)

CONTENT_KEY = "billboardContent"
CODE_KEY = "billboardCode"
THEME_KEY = "selectedTheme"


class LocalStorage:
    """String-keyed JSON store.

    With ``path=None`` values live only in memory. Otherwise every write
    rewrites the file atomically.
    """

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path).expanduser() if path is not None else None
        self._data: dict[str, Any] = self._load()

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._flush()

    def remove(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._flush()

    def keys(self) -> list[str]:
        return list(self._data)

    def _load(self) -> dict[str, Any]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(
                "Local storage unreadable, starting empty",
                extra={"path": str(self.path), "error": str(e)},
            )
            return {}
        if not isinstance(data, dict):
            logger.warning("Local storage is not a JSON object, starting empty", extra={"path": str(self.path)})
            return {}
        return data

    def _flush(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class ContentStore:
    """Billboard code -> append-only list of posts.

    Example:
        store = ContentStore(LocalStorage())
        store.ensure_board("4821")
        store.append("4821", post)
        store.posts("4821")  # [post]
    """

    def __init__(self, storage: LocalStorage) -> None:
        self._storage = storage

    def _boards(self) -> dict[str, list[dict[str, Any]]]:
        return self._storage.get(CONTENT_KEY) or {}

    def has_board(self, code: str) -> bool:
        return code in self._boards()

    def ensure_board(self, code: str) -> bool:
        """Create an empty post list for ``code`` on first use.

        Returns:
            True if the board was created by this call.
        """
        boards = self._boards()
        if code in boards:
            return False
        boards[code] = []
        self._storage.set(CONTENT_KEY, boards)
        logger.debug("Created billboard", extra={"billboard_code": code})
        return True

    def posts(self, code: str) -> list[Post]:
        """Posts for ``code`` in insertion order (empty for unknown codes).

        Stored entries that no longer validate are skipped with a warning.
        """
        posts: list[Post] = []
        for index, raw in enumerate(self._boards().get(code, [])):
            try:
                posts.append(Post.model_validate(raw))
            except ValidationError as e:
                logger.warning(
                    "Skipping unreadable stored post",
                    extra={"billboard_code": code, "index": index, "error_count": e.error_count()},
                )
        return posts

    def append(self, code: str, post: Post) -> Post:
        boards = self._boards()
        boards.setdefault(code, []).append(post.to_storage())
        self._storage.set(CONTENT_KEY, boards)
        return post

    def codes(self) -> list[str]:
        return list(self._boards())
