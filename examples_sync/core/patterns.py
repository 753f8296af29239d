"""Per-exchange regular expressions for rewriting SDK examples.

Each SDK author writes the "alternative import" comments around an example's
imports a little differently, so every exchange gets its own set of patterns.
Patterns are kept as templates; ``{package}`` is replaced with the escaped
npm package name when they are resolved.
"""

import re
from dataclasses import dataclass


PACKAGE_PLACEHOLDER = "{package}"

# Relative imports into the SDK's own source tree: from '../../src/index'
SRC_IMPORT = r"""from\s+['"](?:\.\./)+src(?:/[^'"]*)?['"]"""
# Same, also tolerating "src//index" and a trailing ".js"
SRC_IMPORT_JS = r"""from\s+['"](?:\.\./)+src(?://?[^'"]*)?(?:\.js)?['"]"""
SRC_IMPORT_JS_TS = r"""from\s+['"](?:\.\./)+src(?://?[^'"]*)?(?:\.(?:js|ts))?['"]"""

# "// or" followed by a commented out import, repeated
OR_IMPORT_LINES = r"""(?:\n\s*//\s*or\s*\n\s*//\s*(?:import|const).*?\n)+"""
PACKAGE_COMMENT = (
    OR_IMPORT_LINES
    + r"""|\n\s*//\s*(?://\s*)?(?:import|const).*?['"]{package}['"].*?\n"""
)
INLINE_FROM = r"""\s*//\s*from\s*['"]{package}['"];?\s*$"""
DOC_BLOCK = r"""\n\s*/\*\*\s*\n\s*\*\s*(?:import|const).*?['"]{package}['"][\s\S]*?\*/\s*\n"""
NPM_OR_BLOCK = (
    r"""\n\s*//\s*or,?\s*with the npm package\s*\n"""
    r"""\s*/\*[\s\S]*?from\s*['"]{package}['"];?\s*\*/\s*\n"""
)

# Single "If you cloned the repo" lines left over after the block pattern
CLONED_REPO_LINE = re.compile(r"^\s*//\s*If you cloned the repo[^\n]*\n", re.MULTILINE)
EXCESS_NEWLINES = re.compile(r"\n{3,}")


@dataclass(frozen=True)
class PatternSpec:
    """Regex templates for one exchange. None means the step is skipped."""

    src_import: str
    package_comment: str
    inline_comment: str
    block_comment: str | None = None
    or_comment_block: str | None = None
    cloned_repo_comment: str | None = None


@dataclass(frozen=True)
class TransformPatterns:
    """Compiled patterns for one exchange and package name."""

    src_import: re.Pattern[str]
    package_comment: re.Pattern[str]
    inline_comment: re.Pattern[str]
    block_comment: re.Pattern[str] | None = None
    or_comment_block: re.Pattern[str] | None = None
    cloned_repo_comment: re.Pattern[str] | None = None

    def active_names(self) -> list[str]:
        """Names of the patterns that apply to this exchange."""
        names = ["src_import", "inline_comment"]
        if self.block_comment is not None:
            names.append("block_comment")
        if self.cloned_repo_comment is not None:
            names.append("cloned_repo_comment")
        names.append("package_comment")
        if self.or_comment_block is not None:
            names.append("or_comment_block")
        return names


DEFAULT_PATTERN_SPEC = PatternSpec(
    src_import=SRC_IMPORT,
    package_comment=PACKAGE_COMMENT,
    inline_comment=INLINE_FROM,
)

EXCHANGE_PATTERN_SPECS: dict[str, PatternSpec] = {
    "binance": PatternSpec(
        src_import=SRC_IMPORT,
        package_comment=PACKAGE_COMMENT,
        inline_comment=INLINE_FROM,
        or_comment_block=NPM_OR_BLOCK,
    ),
    "okx": PatternSpec(
        src_import=SRC_IMPORT_JS,
        package_comment=(
            r"""(?:\n\s*//\s*(?:If you cloned|or|or if you're not using typescript|or use the module installed)"""
            r"""[^\n]*\n\s*//\s*(?:import|const).*?\n)+"""
            r"""|\n\s*//\s*(?://\s*)?(?:import|const|If you cloned|or use the module|or if you're not)"""
            r""".*?['"]{package}['"].*?\n"""
        ),
        inline_comment=INLINE_FROM,
        block_comment=DOC_BLOCK,
        cloned_repo_comment=(
            r"""\n\s*//\s*If you cloned the repo[^\n]*\n"""
            r"""(?:\s*//\s*(?:or use the module|or if you're not using typescript)[^\n]*\n"""
            r"""\s*//\s*(?:import|const).*?\n)*"""
        ),
    ),
    # The scoped package name is matched without surrounding quotes
    "kraken": PatternSpec(
        src_import=SRC_IMPORT_JS,
        package_comment=(
            OR_IMPORT_LINES
            + r"""|\n\s*//\s*(?://\s*)?(?:import|const|normally you should install).*?{package}.*?\n"""
        ),
        inline_comment=(
            r"""\s*//\s*(?:from\s*['"]{package}['"]|normally you should install[^\n]*{package}[^\n]*);?\s*$"""
        ),
        block_comment=r"""\n\s*/\*\*\s*\n\s*\*\s*(?:import|const).*?{package}[\s\S]*?\*/\s*\n""",
    ),
    "gate": PatternSpec(
        src_import=SRC_IMPORT_JS,
        package_comment=PACKAGE_COMMENT,
        inline_comment=(
            r"""\s*//\s*(?:For an easy demonstration[^\n]*"""
            r"""|Import the[^\n]*from the published version[^\n]*"""
            r"""|normally you should install[^\n]*"""
            r"""|.*{package}[^\n]*)$"""
        ),
    ),
    "kucoin": PatternSpec(
        src_import=SRC_IMPORT_JS_TS,
        package_comment=(
            OR_IMPORT_LINES
            + r"""|\n\s*//\s*(?://\s*)?(?:import|const|normally you should install).*?['"]{package}['"].*?\n"""
        ),
        inline_comment=(
            r"""\s*//\s*(?:from\s*['"]{package}['"]|normally you should install[^\n]*{package}[^\n]*);?\s*$"""
        ),
        block_comment=DOC_BLOCK,
    ),
    "bitget": PatternSpec(
        src_import=SRC_IMPORT_JS,
        package_comment=PACKAGE_COMMENT,
        inline_comment=INLINE_FROM,
    ),
    "bitmart": PatternSpec(
        src_import=SRC_IMPORT_JS,
        package_comment=(
            OR_IMPORT_LINES
            + r"""|\n\s*//\s*(?://\s*)?(?:import\s*from\s*npm[^\n]*\n\s*)?//\s*(?:import|const)"""
            r""".*?['"]{package}['"].*?\n"""
        ),
        inline_comment=INLINE_FROM,
    ),
    "bybit": PatternSpec(
        src_import=SRC_IMPORT_JS,
        package_comment=PACKAGE_COMMENT,
        inline_comment=INLINE_FROM,
        or_comment_block=NPM_OR_BLOCK,
    ),
    "coinbase": PatternSpec(
        src_import=SRC_IMPORT_JS,
        package_comment=PACKAGE_COMMENT,
        inline_comment=INLINE_FROM,
        block_comment=DOC_BLOCK,
    ),
}


def _compile(template: str, package: str, flags: int = 0) -> re.Pattern[str]:
    return re.compile(template.replace(PACKAGE_PLACEHOLDER, package), flags)


def _compile_optional(template: str | None, package: str) -> re.Pattern[str] | None:
    if template is None:
        return None
    return _compile(template, package)


def get_pattern_spec(exchange: str) -> PatternSpec:
    """Get the pattern templates for an exchange, or the generic fallback."""
    return EXCHANGE_PATTERN_SPECS.get(exchange.lower(), DEFAULT_PATTERN_SPEC)


def get_transform_patterns(exchange: str, package_name: str) -> TransformPatterns:
    """Resolve the compiled patterns for an exchange and its package name.

    Args:
        exchange: Exchange key (case-insensitive); unknown keys use the
            generic patterns
        package_name: npm package name; escaped so that scoped names like
            "@siebly/kraken-api" only ever match literally

    Returns:
        TransformPatterns ready for the transformer
    """
    spec = get_pattern_spec(exchange)
    package = re.escape(package_name)

    return TransformPatterns(
        src_import=_compile(spec.src_import, package),
        package_comment=_compile(spec.package_comment, package),
        inline_comment=_compile(spec.inline_comment, package, re.MULTILINE),
        block_comment=_compile_optional(spec.block_comment, package),
        or_comment_block=_compile_optional(spec.or_comment_block, package),
        cloned_repo_comment=_compile_optional(spec.cloned_repo_comment, package),
    )
