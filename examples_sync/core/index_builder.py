"""Build the examples index consumed by the static examples viewer."""

import json
import re
import shutil
from pathlib import Path

from rich.console import Console

from ..models.example_index import ExampleFile, ExampleFolder, ExampleMetadata


console = Console()

DOC_COMMENT_RE = re.compile(r"/\*\*(.*?)\*/", re.DOTALL)
TAG_RE = re.compile(r"^@(\w+)\s*(.*)$")
METADATA_TAGS = ("title", "description", "category", "tags")

INDEX_FILENAME = "examples-index.json"
# Static viewer assets copied next to the index: source -> destination in public/
STATIC_ASSETS = {
    "index.html": "index.html",
    "js/main.js": "js/main.js",
}


def parse_doc_tags(code: str) -> dict[str, str]:
    """Collect @tag values from the first /** ... */ comment.

    A tag's value is the rest of its line plus any following lines up to the
    next tag.
    """
    match = DOC_COMMENT_RE.search(code)
    if not match:
        return {}

    tags: dict[str, str] = {}
    current: str | None = None
    for raw_line in match.group(1).splitlines():
        line = raw_line.strip().lstrip("*").strip()
        tag_match = TAG_RE.match(line)
        if tag_match:
            current = tag_match.group(1)
            tags[current] = tag_match.group(2).strip()
        elif current and line:
            tags[current] = f"{tags[current]} {line}".strip()
    return tags


def parse_metadata(code: str) -> ExampleMetadata:
    tags = parse_doc_tags(code)
    return ExampleMetadata.from_tags({k: v for k, v in tags.items() if k in METADATA_TAGS})


def build_file_tree(base_path: Path, root: Path | None = None, pattern: str = "**/*.ts") -> ExampleFolder:
    """Build a folder/file tree of example files below base_path.

    Args:
        base_path: Examples directory to walk
        root: Directory paths in the index are relative to (default: parent of base_path)
        pattern: Glob for example files

    Returns:
        Root ExampleFolder named after base_path
    """
    base_path = Path(base_path)
    root = Path(root) if root else base_path.parent
    base_rel = base_path.relative_to(root).as_posix()
    tree = ExampleFolder(name=base_rel, path=base_rel)

    for file_path in sorted(base_path.glob(pattern)):
        if not file_path.is_file():
            continue

        parts = file_path.relative_to(base_path).parts
        current = tree
        for depth, folder_name in enumerate(parts[:-1]):
            folder = current.get_folder(folder_name)
            if folder is None:
                folder_path = "/".join([base_rel, *parts[: depth + 1]])
                folder = ExampleFolder(name=folder_name, path=folder_path)
                current.children.append(folder)
            current = folder

        code = file_path.read_text(encoding="utf-8")
        current.children.append(ExampleFile(
            name=parts[-1],
            path=file_path.relative_to(root).as_posix(),
            code=code,
            metadata=parse_metadata(code),
        ))

    return tree


def build_examples_index(repo_root: Path, examples_dir: str = "examples", public_dir: str = "public") -> Path:
    """Write public/examples-index.json and copy the viewer assets.

    Returns:
        Path of the written index file
    """
    repo_root = Path(repo_root)
    tree = build_file_tree(repo_root / examples_dir, root=repo_root)

    output_dir = repo_root / public_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    index_path = output_dir / INDEX_FILENAME
    with open(index_path, "w", encoding="utf-8") as f:
        json.dump(tree.to_dict(), f, indent=2, ensure_ascii=False)

    console.print(f"[green]✅ Wrote {len(tree.iter_files())} examples to {index_path}")

    for source, destination in STATIC_ASSETS.items():
        source_path = repo_root / source
        if not source_path.exists():
            console.print(f"[yellow]⚠️  Viewer asset not found, skipped: {source}")
            continue
        dest_path = output_dir / destination
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source_path, dest_path)

    return index_path
