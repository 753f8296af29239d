"""Sync operations: pull SDK examples, transform, verify and publish."""

import shlex
import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from ..models.config import ExchangeConfig, SyncPaths, SyncSettings
from .collector import get_all_files
from .git import GitRepository
from .github import PullRequestOutcome, PullRequestPublisher
from .runner import CommandResult, CommandRunner
from .transformer import ContentTransformer


console = Console()


class RunStatus:
    """Final states of a sync run."""

    SUCCESS = "success"  # Changes committed and PR step done
    NO_CHANGES = "no_changes"  # Nothing differs from what's committed
    SKIPPED_PUBLISH = "skipped_publish"  # --skip-pr
    MISSING_SOURCE = "missing_source"  # SDK checkout has no examples/ folder
    VERIFICATION_FAILED = "verification_failed"  # lint/format/build failed
    NOTHING_STAGED = "nothing_staged"  # Status showed changes but nothing could be staged

    FAILURES = (MISSING_SOURCE, VERIFICATION_FAILED)


@dataclass
class SyncRun:
    """Everything one sync invocation did. Not persisted."""

    exchange: str
    config: ExchangeConfig
    sdk_dir: Path
    source_dir: Path
    dest_dir: Path
    status: str = RunStatus.SUCCESS
    files_copied: int = 0
    verification: list[CommandResult] = field(default_factory=list)
    has_changes: bool = False
    branch_name: str | None = None
    pull_request: PullRequestOutcome | None = None
    unmatched_patterns: list[str] = field(default_factory=list)
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status not in RunStatus.FAILURES


class SyncOperations:
    """Runs the sync steps for one exchange, in order."""

    COMMIT_MESSAGE = "chore: sync {exchange} examples from SDK and rebuild"
    BRANCH_NAME = "sync/{exchange}-examples-{timestamp}"

    def __init__(
        self,
        exchange: str,
        config: ExchangeConfig,
        paths: SyncPaths,
        settings: SyncSettings | None = None,
        runner: CommandRunner | None = None,
        publisher: PullRequestPublisher | None = None,
    ) -> None:
        """Initialize sync operations.

        Args:
            exchange: Exchange key (used for pattern selection and naming)
            config: Exchange configuration
            paths: Repository, SDK and examples directories
            settings: Sync settings (defaults if not provided)
            runner: Command runner for git/npm/gh (real subprocesses if not provided)
            publisher: Pull request publisher (created from runner if not provided)
        """
        self.exchange = exchange.lower()
        self.config = config
        self.paths = paths
        self.settings = settings or SyncSettings()
        self.runner = runner or CommandRunner()
        self.publisher = publisher or PullRequestPublisher(
            runner=self.runner,
            base_branch=self.settings.base_branch,
        )
        self.repo = GitRepository(paths.repo_root, self.runner)
        self.transformer = ContentTransformer(self.exchange, config.package_name)
        self.removed_variants: list[str] = []

    @property
    def sdk_dir(self) -> Path:
        return self.paths.sdk_repo_dir(self.config)

    @property
    def source_dir(self) -> Path:
        return self.paths.source_dir(self.config)

    @property
    def dest_dir(self) -> Path:
        return self.paths.dest_dir(self.config)

    # =========================================================================
    # Steps
    # =========================================================================

    def acquire_source(self) -> GitRepository:
        """Clone the SDK repo, or bring an existing checkout up to date.

        Raises:
            GitError: If cloning fails, or updating fails for every branch
        """
        if self.sdk_dir.exists():
            console.print(f"📥 Updating existing repo: {self.config.repo_name}")
            sdk_repo = GitRepository(self.sdk_dir, self.runner)
            sdk_repo.update_from_remote(self.settings.fallback_branches)
            return sdk_repo

        console.print(f"📥 Cloning repo: {self.config.repo_name}")
        return GitRepository.clone(
            self.config.get_repo_url(self.settings.github_org),
            self.sdk_dir,
            self.runner,
        )

    def cleanup_destination(self) -> list[str]:
        """Remove every case variant of the destination folder.

        Variants spelled differently from dest_folder are dropped from the git
        index as well as the filesystem so that "Binance" and "binance" can't
        both stay tracked. The canonical folder stays in the index; it is
        rewritten by copy_and_transform and compared against HEAD.

        Returns:
            Names of the directories removed
        """
        examples_root = self.paths.examples_root
        self.removed_variants = []
        if not examples_root.is_dir():
            return []

        removed: list[str] = []
        for entry in sorted(examples_root.iterdir()):
            if not entry.is_dir() or not self.config.matches_folder(entry.name):
                continue

            relative = self.paths.relative(entry)
            console.print(f"   Removing old directory (case cleanup): {relative}")
            if entry.name != self.config.dest_folder:
                # Untracked folders aren't an error here
                self.repo.remove_cached(relative)
                self.removed_variants.append(f"{relative}/")
            shutil.rmtree(entry, ignore_errors=True)
            removed.append(entry.name)

        return removed

    def copy_and_transform(self) -> int:
        """Mirror the SDK examples into the destination folder.

        Files with a transformable extension are rewritten, anything else is
        copied as-is.

        Returns:
            Number of files written
        """
        console.print(f"\n📦 Copying examples from {self.config.repo_name}...")
        console.print(f"   Source: {self.source_dir}")
        console.print(f"   Destination: {self.dest_dir}")
        console.print(f"   Excluding folders: {', '.join(self.config.exclude_folders)}")

        if self.dest_dir.exists():
            console.print("   Cleaning existing destination directory...")
            shutil.rmtree(self.dest_dir)

        all_files = get_all_files(self.source_dir, self.config.exclude_folders)
        console.print(f"   Found {len(all_files)} files to process")

        extensions = set(self.settings.transform_extensions)
        copied = 0

        for source_file in all_files:
            dest_file = self.dest_dir / source_file.relative_to(self.source_dir)
            dest_file.parent.mkdir(parents=True, exist_ok=True)

            if source_file.suffix in extensions:
                content = source_file.read_text(encoding="utf-8")
                dest_file.write_text(self.transformer.transform(content), encoding="utf-8")
            else:
                shutil.copyfile(source_file, dest_file)
            copied += 1

        console.print(f"\n[green]✅ Copied {copied} files\n")
        return copied

    def _run_commands(self, commands: list[str]) -> list[CommandResult]:
        """Run commands in order, stopping after the first failure."""
        results: list[CommandResult] = []
        for command in commands:
            console.print(f"  → Running {command}...")
            result = self.runner.run(shlex.split(command), cwd=self.paths.repo_root, capture=False)
            results.append(result)
            if not result.ok:
                break
        return results

    def verify(self) -> list[CommandResult]:
        """Run lint/format checks, then the build.

        Returns:
            Results of the commands that ran; the last one failed if any did
        """
        console.print("🔨 Running lint and format checks...\n")
        results = self._run_commands(self.settings.lint_commands)
        if results and not results[-1].ok:
            console.print("\n[red]❌ Lint checks failed. Please fix errors before creating PR.")
            console.print(f"[red]Error details: {results[-1].describe_failure()}")
            return results
        console.print("\n[green]✅ Lint checks passed!\n")

        console.print("🔨 Building examples...\n")
        build_results = self._run_commands(self.settings.build_commands)
        results.extend(build_results)
        if build_results and not build_results[-1].ok:
            console.print("\n[red]❌ Build failed. Please fix errors before creating PR.")
            console.print(f"[red]Error details: {build_results[-1].describe_failure()}")
            return results
        console.print("\n[green]✅ Build completed!\n")

        return results

    def _publish_paths(self) -> list[str]:
        """Paths the sync may commit: the destination folder, built output and
        case variants removed by cleanup_destination."""
        paths = [f"{self.paths.relative(self.dest_dir)}/"]
        if self.paths.public_dir.exists():
            paths.append(f"{self.paths.relative(self.paths.public_dir)}/")
        paths.extend(self.removed_variants)
        return paths

    def changed_paths(self) -> list[str]:
        """Publishable paths that git reports as changed.

        If git status itself fails, paths that exist on disk are assumed
        changed.
        """
        changed: list[str] = []
        for path in self._publish_paths():
            result = self.repo.status(path)
            if result.ok:
                if result.stdout.strip():
                    changed.append(path)
            elif (self.paths.repo_root / path).exists():
                changed.append(path)
        return changed

    def detect_changes(self) -> bool:
        return bool(self.changed_paths())

    def commit_changes(self) -> bool:
        """Stage the changed sync paths and commit them.

        Returns:
            True if a commit was made
        """
        paths = self.changed_paths()
        if not paths:
            console.print("[yellow]⚠️  No changes detected to commit")
            return False

        for path in paths:
            # A path that can't be added is skipped
            self.repo.add(path)

        if not self.repo.staged_files():
            console.print("[yellow]⚠️  No files were staged for commit")
            return False

        self.repo.commit(self.COMMIT_MESSAGE.format(exchange=self.exchange))
        return True

    def make_branch_name(self) -> str:
        return self.BRANCH_NAME.format(exchange=self.exchange, timestamp=int(time.time() * 1000))

    def publish(self, run: SyncRun) -> SyncRun:
        """Branch, commit, push and open a pull request.

        Raises:
            GitError: If branching, committing or pushing fails
        """
        console.print("📝 Changes detected. Creating PR...\n")
        run.branch_name = self.make_branch_name()

        self.repo.checkout_branch(run.branch_name)
        if not self.commit_changes():
            run.status = RunStatus.NOTHING_STAGED
            run.message = "Nothing was staged, skipped push and PR"
            return run

        self.repo.push(run.branch_name)
        run.pull_request = self.publisher.create_pull_request(self.exchange, run.branch_name, self.repo)

        console.print(f"\n[green]✅ PR branch pushed: {run.branch_name}\n")
        run.status = RunStatus.SUCCESS
        return run

    # =========================================================================
    # Full run
    # =========================================================================

    def run(self, skip_build: bool = False, skip_pr: bool = False) -> SyncRun:
        """Sync this exchange end to end.

        Args:
            skip_build: Skip lint/format/build verification
            skip_pr: Skip change detection, commit and PR (local dry runs)

        Returns:
            SyncRun describing the outcome

        Raises:
            GitError: On fatal git failures
        """
        run = SyncRun(
            exchange=self.exchange,
            config=self.config,
            sdk_dir=self.sdk_dir,
            source_dir=self.source_dir,
            dest_dir=self.dest_dir,
        )

        console.print(f"\n🚀 Syncing {self.exchange} examples")
        console.print(f"   Repo: {self.config.repo_name}")
        console.print(f"   Package: {self.config.package_name}")
        console.print(f"   Destination: {self.config.dest_folder}\n")

        self.acquire_source()

        if not self.source_dir.is_dir():
            run.status = RunStatus.MISSING_SOURCE
            run.message = f"Source directory not found: {self.source_dir}"
            return run

        self.cleanup_destination()
        run.files_copied = self.copy_and_transform()
        run.unmatched_patterns = self.transformer.unmatched_patterns()

        if not skip_build:
            run.verification = self.verify()
            if run.verification and not run.verification[-1].ok:
                run.status = RunStatus.VERIFICATION_FAILED
                run.message = run.verification[-1].describe_failure()
                return run

        if skip_pr:
            run.status = RunStatus.SKIPPED_PUBLISH
            return run

        run.has_changes = self.detect_changes()
        if not run.has_changes:
            console.print("[green]✅ No changes detected. Nothing to commit.\n")
            run.status = RunStatus.NO_CHANGES
            return run

        return self.publish(run)
