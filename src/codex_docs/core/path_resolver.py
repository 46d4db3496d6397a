import posixpath
import re
from pathlib import Path, PurePosixPath


class PathResolver:
    """Resolves the stable ``file_path`` of a source relative to a project root."""

    def __init__(self, root_path: str | Path, file_path: str | Path, package_name: str | None = None) -> None:
        self._root_path = Path(root_path).resolve()
        path = Path(file_path)
        self._absolute_path = path if path.is_absolute() else (self._root_path / path)
        self._package_name = package_name

    @property
    def absolute_path(self) -> str:
        return str(self._absolute_path)

    @property
    def file_path(self) -> str:
        try:
            relative = self._absolute_path.resolve().relative_to(self._root_path)
        except ValueError:
            return PurePosixPath(self._absolute_path).as_posix()
        return relative.as_posix()

    @property
    def import_path(self) -> str:
        if self._package_name:
            return posixpath.join(self._package_name, self.file_path)
        return self.file_path

    def resolve(self, relative_path: str) -> str:
        """Resolve an import specifier against this file's directory."""
        if not relative_path.startswith("."):
            return relative_path

        base = posixpath.dirname(self.file_path)
        resolved = posixpath.normpath(posixpath.join(base, relative_path))
        if not posixpath.splitext(resolved)[1]:
            resolved = f"{resolved}.js"
        return resolved


def filepath_to_name(file_path: str) -> str:
    """Derive an identifier from a file name, e.g. ``foo-bar.js`` -> ``fooBar``."""
    name = posixpath.basename(file_path).split(".")[0]
    return re.sub(r"-(\w)", lambda match: match.group(1).upper(), name)
