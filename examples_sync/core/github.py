"""GitHub REST client and pull request publishing with fallbacks."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import requests
from dotenv import load_dotenv
from rich.console import Console

from .git import GitRepository
from .runner import CommandRunner


console = Console()


class GitHubAPIError(Exception):
    """Exception raised for GitHub API errors."""

    def __init__(self, message: str, status_code: int | None = None, response: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class GitHubClient:
    """HTTP client for the GitHub REST API with token authentication."""

    API_URL = "https://api.github.com"
    USER_AGENT = "sync-examples-script"

    def __init__(self, token: str | None = None, api_url: str | None = None) -> None:
        """Initialize client with a token.

        Args:
            token: GitHub token (or load from GITHUB_TOKEN env)
            api_url: API base URL, for GitHub Enterprise
        """
        load_dotenv()

        self.token = token or os.getenv("GITHUB_TOKEN", "")
        self.api_url = (api_url or self.API_URL).rstrip("/")

        if not self.token:
            raise ValueError("Missing GitHub token. Set the GITHUB_TOKEN environment variable or pass it directly.")

        self.session = requests.Session()

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"token {self.token}",
            "Accept": "application/vnd.github+json",
            "Content-Type": "application/json",
            "User-Agent": self.USER_AGENT,
        }

    def _request(
        self,
        method: str,
        path: str,
        json_data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated request to the GitHub API.

        Raises:
            GitHubAPIError: On API errors
        """
        url = f"{self.api_url}{path}"

        try:
            response = self.session.request(
                method=method,
                url=url,
                headers=self._headers(),
                json=json_data,
                timeout=30,
            )

            if response.status_code >= 400:
                error_msg = f"API error {response.status_code}: {response.text[:500]}"
                raise GitHubAPIError(error_msg, response.status_code, response)

            if not response.content:
                return {}

            return response.json()  # type: ignore[no-any-return]

        except requests.RequestException as e:
            raise GitHubAPIError(f"Request failed: {e}") from e

    def create_pull_request(
        self,
        owner: str,
        repo: str,
        title: str,
        body: str,
        head: str,
        base: str = "main",
    ) -> dict[str, Any]:
        """Open a pull request.

        Returns:
            The created pull request (html_url, number, ...)
        """
        return self._request(
            "POST",
            f"/repos/{owner}/{repo}/pulls",
            json_data={"title": title, "body": body, "head": head, "base": base},
        )


@dataclass
class PullRequestOutcome:
    """How (and whether) a pull request was opened."""

    method: str  # "api", "cli" or "manual"
    url: str  # PR URL, or the compare link for manual creation
    title: str
    branch: str

    @property
    def created(self) -> bool:
        return self.method != "manual"


class PullRequestPublisher:
    """Opens pull requests, degrading from API to gh CLI to a manual link.

    Failures never propagate: the worst case is a printed link (also written
    to the GitHub Actions step summary when running in CI).
    """

    def __init__(
        self,
        runner: CommandRunner | None = None,
        token: str | None = None,
        step_summary_path: Path | None = None,
        base_branch: str = "main",
        client: GitHubClient | None = None,
    ) -> None:
        self.runner = runner or CommandRunner()
        self.token = token
        self.step_summary_path = step_summary_path
        self.base_branch = base_branch
        self._client = client

    @property
    def client(self) -> GitHubClient | None:
        """GitHub API client, or None without a token."""
        if self._client is None and self.token:
            self._client = GitHubClient(token=self.token)
        return self._client

    @staticmethod
    def build_title(exchange: str) -> str:
        return f"Sync {exchange} examples from SDK"

    @staticmethod
    def build_body(exchange: str) -> str:
        return (
            f"This PR syncs examples from the {exchange} SDK repository.\n\n"
            "Automatically generated by sync-examples script."
        )

    def compare_url(self, github_repo: tuple[str, str] | None, branch: str) -> str:
        owner, repo = github_repo or ("YOUR_ORG", "YOUR_REPO")
        return f"https://github.com/{owner}/{repo}/compare/{self.base_branch}...{branch}?expand=1"

    def create_pull_request(self, exchange: str, branch: str, repo: GitRepository) -> PullRequestOutcome:
        """Open a pull request for a pushed branch.

        Args:
            exchange: Exchange key, used in the title and body
            branch: The pushed branch
            repo: The examples repository (for its origin remote)

        Returns:
            PullRequestOutcome describing which tier succeeded
        """
        title = self.build_title(exchange)
        body = self.build_body(exchange)
        github_repo = repo.github_repo()

        if self.client is not None and github_repo is not None:
            owner, name = github_repo
            try:
                pr = self.client.create_pull_request(
                    owner=owner,
                    repo=name,
                    title=title,
                    body=body,
                    head=branch,
                    base=self.base_branch,
                )
                console.print("\n[green]✅ PR created successfully!")
                console.print(f"   {pr.get('html_url', '')}\n")
                return PullRequestOutcome("api", pr.get("html_url", ""), title, branch)
            except GitHubAPIError as e:
                console.print(f"[yellow]⚠️  GitHub API PR creation failed: {e}")

        env = dict(os.environ)
        if self.token:
            env["GH_TOKEN"] = self.token
        result = self.runner.run(
            [
                "gh", "pr", "create",
                "--title", title,
                "--body", body,
                "--base", self.base_branch,
                "--head", branch,
            ],
            cwd=repo.path,
            env=env,
        )
        if result.ok:
            console.print("\n[green]✅ PR created successfully!\n")
            return PullRequestOutcome("cli", result.stdout.strip(), title, branch)

        compare_url = self.compare_url(github_repo, branch)
        self.output_manual_link(exchange, branch, title, compare_url)
        return PullRequestOutcome("manual", compare_url, title, branch)

    def output_manual_link(self, exchange: str, branch: str, title: str, pr_url: str) -> None:
        """Print the compare link and add it to the CI step summary if present."""
        console.print("\n[yellow]⚠️  Could not create PR automatically. Create PR manually:")
        console.print("\n🔗 PR Creation Link:")
        console.print(f"   {pr_url}\n", soft_wrap=True)
        console.print(f"   Branch: {branch}")
        console.print(f"   Title: {title}\n")

        if self.step_summary_path:
            summary = (
                "\n## 🔗 Create Pull Request\n\n"
                "Click the button below to create a pull request:\n\n"
                f"[**👉 Create PR: {title}**]({pr_url})\n\n"
                f"**Branch:** `{branch}`  \n"
                f"**Exchange:** {exchange}\n\n"
                "---\n"
            )
            with open(self.step_summary_path, "a", encoding="utf-8") as f:
                f.write(summary)
