"""Git operations used by the sync, run through a CommandRunner."""

import re
from pathlib import Path

from rich.console import Console

from .runner import CommandResult, CommandRunner


console = Console()

GITHUB_REMOTE_RE = re.compile(r"(?:github\.com[:/]|git@github\.com:)([^/]+)/([^/]+?)(?:\.git)?$")


class GitError(Exception):
    """Exception raised when a required git command fails."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr

    @classmethod
    def from_result(cls, message: str, result: CommandResult) -> "GitError":
        return cls(f"{message}: {result.describe_failure()}", result.returncode, result.stderr)


def parse_github_remote(remote_url: str) -> tuple[str, str] | None:
    """Extract (owner, repo) from a GitHub remote URL.

    Handles both git@github.com:owner/repo.git and
    https://github.com/owner/repo.git forms.
    """
    match = GITHUB_REMOTE_RE.search(remote_url.strip())
    if not match:
        return None
    return match.group(1), match.group(2)


class GitRepository:
    """A git working tree on disk."""

    def __init__(self, path: Path, runner: CommandRunner | None = None) -> None:
        self.path = Path(path)
        self.runner = runner or CommandRunner()

    def git(self, *args: str, capture: bool = True) -> CommandResult:
        """Run a git subcommand inside this repository."""
        return self.runner.run(["git", *args], cwd=self.path, capture=capture)

    # -------------------------------------------------------------------------
    # SDK checkout
    # -------------------------------------------------------------------------

    @classmethod
    def clone(cls, url: str, target: Path, runner: CommandRunner | None = None) -> "GitRepository":
        """Clone a repository into target.

        Raises:
            GitError: If the clone fails
        """
        runner = runner or CommandRunner()
        target = Path(target)
        target.parent.mkdir(parents=True, exist_ok=True)

        result = runner.run(["git", "clone", url, str(target)], cwd=target.parent, capture=False)
        if not result.ok:
            raise GitError.from_result(f"Failed to clone {url}", result)
        return cls(target, runner)

    def reset_to_remote(self, branch: str) -> CommandResult:
        """Fetch origin and hard-reset to origin/<branch>."""
        result = self.git("fetch", "origin", capture=False)
        if not result.ok:
            return result
        return self.git("reset", "--hard", f"origin/{branch}", capture=False)

    def update_from_remote(self, branches: list[str]) -> str:
        """Reset to the first remote branch that works.

        Args:
            branches: Branch names to try in order (e.g. ["main", "master"])

        Returns:
            The branch that was checked out

        Raises:
            GitError: If every branch fails
        """
        last_result: CommandResult | None = None
        for index, branch in enumerate(branches):
            if index > 0:
                console.print(f"[yellow]⚠️  Failed to update, trying origin/{branch}...")
            last_result = self.reset_to_remote(branch)
            if last_result.ok:
                return branch

        if last_result is None:
            raise GitError("No branches given to update from")
        raise GitError.from_result(f"Failed to update repo at {self.path}", last_result)

    # -------------------------------------------------------------------------
    # Working tree
    # -------------------------------------------------------------------------

    def status(self, *paths: str) -> CommandResult:
        """Porcelain status, optionally scoped to paths."""
        return self.git("status", "--porcelain", "--", *paths)

    def remove_cached(self, path: str) -> CommandResult:
        """Remove a path from the index, keeping whatever is on disk."""
        return self.git("rm", "-r", "--cached", "--quiet", "--ignore-unmatch", path)

    def add(self, path: str) -> CommandResult:
        return self.git("add", "--", path)

    def staged_files(self) -> list[str]:
        """Names of files currently staged for commit."""
        result = self.git("diff", "--cached", "--name-only")
        if not result.ok:
            raise GitError.from_result("Failed to list staged files", result)
        return [line for line in result.stdout.splitlines() if line.strip()]

    def checkout_branch(self, branch: str) -> None:
        """Create and switch to a branch, or switch to it if it already exists.

        Raises:
            GitError: If neither works
        """
        result = self.git("checkout", "-b", branch, capture=False)
        if result.ok:
            return
        result = self.git("checkout", branch, capture=False)
        if not result.ok:
            raise GitError.from_result(f"Failed to check out branch {branch}", result)

    def commit(self, message: str) -> None:
        result = self.git("commit", "-m", message, capture=False)
        if not result.ok:
            raise GitError.from_result("Failed to commit", result)

    def push(self, branch: str) -> None:
        result = self.git("push", "-u", "origin", branch, capture=False)
        if not result.ok:
            raise GitError.from_result(f"Failed to push {branch}", result)

    def remote_url(self, remote: str = "origin") -> str | None:
        result = self.git("config", "--get", f"remote.{remote}.url")
        if not result.ok:
            return None
        return result.stdout.strip() or None

    def github_repo(self) -> tuple[str, str] | None:
        """(owner, repo) of the origin remote if it points at GitHub."""
        url = self.remote_url()
        return parse_github_remote(url) if url else None
