"""Core sync functionality."""

from .collector import get_all_files
from .git import GitError, GitRepository, parse_github_remote
from .github import GitHubAPIError, GitHubClient, PullRequestOutcome, PullRequestPublisher
from .index_builder import build_examples_index, build_file_tree, parse_metadata
from .operations import RunStatus, SyncOperations, SyncRun
from .patterns import TransformPatterns, get_transform_patterns
from .runner import CommandResult, CommandRunner
from .transformer import ContentTransformer, transform_example_content

__all__ = [
    "CommandResult",
    "CommandRunner",
    "ContentTransformer",
    "GitError",
    "GitHubAPIError",
    "GitHubClient",
    "GitRepository",
    "PullRequestOutcome",
    "PullRequestPublisher",
    "RunStatus",
    "SyncOperations",
    "SyncRun",
    "TransformPatterns",
    "build_examples_index",
    "build_file_tree",
    "get_all_files",
    "get_transform_patterns",
    "parse_github_remote",
    "parse_metadata",
    "transform_example_content",
]
