"""Rewrite SDK-internal examples into standalone examples."""

from collections import Counter

from .patterns import CLONED_REPO_LINE, EXCESS_NEWLINES, TransformPatterns, get_transform_patterns


class ContentTransformer:
    """Applies one exchange's patterns to example files.

    Also counts how many times each pattern matched, so a sync run can point
    out patterns that never fired (usually a sign the SDK changed its comment
    style).
    """

    def __init__(self, exchange: str, package_name: str) -> None:
        self.exchange = exchange
        self.package_name = package_name
        self.patterns: TransformPatterns = get_transform_patterns(exchange, package_name)
        self.match_counts: Counter[str] = Counter({name: 0 for name in self.patterns.active_names()})
        self.files_transformed = 0

    def transform(self, content: str) -> str:
        """Transform the full text of one example file.

        Steps run in a fixed order; a pattern that doesn't match leaves the
        text as it was.
        """
        p = self.patterns
        package_import = f"from '{self.package_name}'"

        # Step 1: relative src imports -> package import
        result, count = p.src_import.subn(lambda _: package_import, content)
        self.match_counts["src_import"] += count

        # Step 2: inline comments on import lines
        result, count = p.inline_comment.subn("", result)
        self.match_counts["inline_comment"] += count

        # Step 3: doc block comments showing the package import
        if p.block_comment is not None:
            result, count = p.block_comment.subn("\n\n", result)
            self.match_counts["block_comment"] += count

        # Step 4: "If you cloned the repo" instructions
        if p.cloned_repo_comment is not None:
            result, count = p.cloned_repo_comment.subn("\n", result)
            result, line_count = CLONED_REPO_LINE.subn("", result)
            self.match_counts["cloned_repo_comment"] += count + line_count

        # Step 5: remaining comment lines naming the package
        result, count = p.package_comment.subn("\n\n", result)
        self.match_counts["package_comment"] += count

        # Step 6: "// or, with the npm package" block comments
        if p.or_comment_block is not None:
            result, count = p.or_comment_block.subn("\n\n", result)
            self.match_counts["or_comment_block"] += count

        # Step 7: collapse blank lines left by the removals
        result = EXCESS_NEWLINES.sub("\n\n", result)

        self.files_transformed += 1
        return result

    def unmatched_patterns(self) -> list[str]:
        """Patterns that found nothing across every file transformed so far."""
        if self.files_transformed == 0:
            return []
        return [name for name, count in self.match_counts.items() if count == 0]


def transform_example_content(content: str, package_name: str, exchange: str) -> str:
    """Transform one example file's text for the given exchange."""
    return ContentTransformer(exchange, package_name).transform(content)
