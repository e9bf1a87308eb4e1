"""Value type for a resolved grammar import."""

from __future__ import annotations

from pathlib import Path

import attrs


def _to_path(value: str | Path) -> Path:
    return Path(value)


@attrs.frozen
class ImportedGrammar:
    """A grammar loaded to satisfy an ``import`` declaration."""

    name: str
    content: str
    source_path: Path = attrs.field(converter=_to_path)
    locator: str = attrs.field()

    @locator.default
    def _default_locator(self) -> str:
        return self.source_path.absolute().as_uri()

    @classmethod
    def from_file(cls, name: str, content: str, source_path: str | Path) -> ImportedGrammar:
        return cls(name=name, content=content, source_path=Path(source_path).absolute())

    @property
    def base_dir(self) -> Path:
        """Directory nested imports of this grammar are resolved against."""
        return self.source_path.parent

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "path": str(self.source_path),
            "locator": self.locator,
            "size": len(self.content),
        }
