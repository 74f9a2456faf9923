"""Storage backends the SVG components read their templates from.

A storage is anything offering ``read(namespace, key)`` that returns the
stored bytes, or ``None`` when there is nothing stored under that key.
Templates for the full component pipeline live in the
``ninja_components`` namespace, plain modules in ``ninja_modules``.
"""

import logging
import os
import pathlib
from typing import Dict, Optional, Tuple, Union

logger = logging.getLogger(__name__)

COMPONENTS_NAMESPACE = "ninja_components"
MODULES_NAMESPACE = "ninja_modules"
STORAGE_ROOT_ENV_VAR = "NINJASVG_STORAGE_ROOT"


class TemplateStorage:
    """An abstract class for read-only, namespaced template storage."""

    def read(self, namespace: str, key: str) -> Optional[bytes]:
        """Return the bytes stored under ``key`` in ``namespace``.

        Implementations return ``None`` for missing keys instead of raising.
        """
        raise NotImplementedError


class FileSystemStorage(TemplateStorage):
    """Read templates from ``<root>/<namespace>/<key>`` on the local disk."""

    def __init__(self, root: Union[str, "os.PathLike[str]"]) -> None:
        self.root = pathlib.Path(root)

    def path_for(self, namespace: str, key: str) -> Optional[pathlib.Path]:
        """Return the file path for a key, or None if it leaves the root."""
        base = (self.root / namespace).resolve()
        path = (base / key).resolve()
        if base != path and base not in path.parents:
            logger.warning("Refusing to read %r outside of %s", key, base)
            return None
        return path

    def read(self, namespace: str, key: str) -> Optional[bytes]:
        path = self.path_for(namespace, key)
        if path is None or not path.is_file():
            return None
        return path.read_bytes()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({str(self.root)!r})"


class InMemoryStorage(TemplateStorage):
    """Keep templates in a dict, keyed by ``(namespace, key)``."""

    def __init__(self, files: Optional[Dict[Tuple[str, str], bytes]] = None) -> None:
        self._files: Dict[Tuple[str, str], bytes] = dict(files or {})

    def put(self, namespace: str, key: str, content: Union[str, bytes]) -> None:
        if isinstance(content, str):
            content = content.encode("utf-8")
        self._files[(namespace, key)] = content

    def read(self, namespace: str, key: str) -> Optional[bytes]:
        return self._files.get((namespace, key))


def default_storage() -> FileSystemStorage:
    """Return a file system storage rooted at ``$NINJASVG_STORAGE_ROOT``.

    Falls back to the current working directory when the variable is unset.
    """
    return FileSystemStorage(os.environ.get(STORAGE_ROOT_ENV_VAR) or os.curdir)
