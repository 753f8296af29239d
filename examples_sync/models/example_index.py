"""Models for the browsable examples index (examples-index.json)."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ExampleMetadata:
    """Metadata taken from the leading doc comment of an example file."""

    title: str | None = None
    description: str | None = None
    category: str | None = None
    tags: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, omitting unset keys like JSON.stringify does."""
        result: dict[str, Any] = {}
        if self.title is not None:
            result["title"] = self.title
        if self.description is not None:
            result["description"] = self.description
        if self.category is not None:
            result["category"] = self.category
        if self.tags is not None:
            result["tags"] = self.tags
        return result

    @classmethod
    def from_tags(cls, tags: dict[str, str]) -> "ExampleMetadata":
        """Create from a tag name -> text mapping."""
        raw_tags = tags.get("tags")
        return cls(
            title=tags.get("title"),
            description=tags.get("description"),
            category=tags.get("category"),
            tags=[t.strip() for t in raw_tags.split(",")] if raw_tags is not None else None,
        )


@dataclass
class ExampleFile:
    """A single example file in the index."""

    name: str
    path: str
    code: str
    metadata: ExampleMetadata = field(default_factory=ExampleMetadata)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "file",
            "name": self.name,
            "path": self.path,
            "code": self.code,
            "metadata": self.metadata.to_dict(),
        }


@dataclass
class ExampleFolder:
    """A folder node in the index; children are folders and files."""

    name: str
    path: str
    children: list["ExampleFolder | ExampleFile"] = field(default_factory=list)

    def get_folder(self, name: str) -> "ExampleFolder | None":
        """Find a direct child folder by name."""
        for child in self.children:
            if isinstance(child, ExampleFolder) and child.name == name:
                return child
        return None

    def iter_files(self) -> list[ExampleFile]:
        """All files below this folder, depth first."""
        files: list[ExampleFile] = []
        for child in self.children:
            if isinstance(child, ExampleFolder):
                files.extend(child.iter_files())
            else:
                files.append(child)
        return files

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "folder",
            "name": self.name,
            "path": self.path,
            "children": [child.to_dict() for child in self.children],
        }
