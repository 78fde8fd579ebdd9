from __future__ import annotations

import shutil
from pathlib import Path

from filederive.config import Settings
from filederive.storage.base import Location, tail_segments


class FileLocation(Location):
    @property
    def local_path(self) -> Path:
        return Path(self.path)

    def exists(self) -> bool:
        return self.local_path.is_file()

    def _download(self, target: Path) -> None:
        shutil.copyfile(self.local_path, target)

    def _upload(self, staged: Path) -> None:
        self.local_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(staged, self.local_path)

    def list_matching(self, pattern: str) -> list[Location]:
        directory = self.local_path.parent
        if not directory.is_dir():
            return []
        matches = sorted(path for path in directory.glob(pattern) if path.is_file())
        return [FileLocation(f"file://{path}", settings=self.settings) for path in matches]

    @classmethod
    def create_uri(cls, path: str | Path, parts: int | None = None, settings: Settings | None = None) -> str:
        return f"file:///{tail_segments(Path(path).expanduser().resolve(), parts)}"


__all__ = ["FileLocation"]
