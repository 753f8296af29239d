#!/usr/bin/env python3
"""CLI entry points for syncing exchange SDK examples."""

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .core.git import GitError
from .core.github import PullRequestPublisher
from .core.index_builder import build_examples_index
from .core.operations import RunStatus, SyncOperations
from .core.runner import CommandRunner
from .models.config import DEFAULT_CONFIG_FILENAME, SyncConfig, SyncPaths, UnknownExchangeError

console = Console()


def get_base_dir() -> Path:
    """Get the base directory (the examples repository).

    Only correct when running from a source checkout; an installed package
    needs --repo-root.
    """
    return Path(__file__).parent.parent


def _load_config(args: argparse.Namespace, repo_root: Path) -> SyncConfig:
    config_path = Path(args.config) if args.config else repo_root / DEFAULT_CONFIG_FILENAME
    return SyncConfig.load(config_path)


def _print_usage_hint(config: SyncConfig) -> None:
    console.print("Usage: sync-examples <exchange> [--skip-build] [--skip-pr]")
    console.print(f"\nAvailable exchanges: {', '.join(config.exchanges)}")
    console.print("\nOptions:")
    console.print("  --skip-build    Skip running lint/format checks")
    console.print("  --skip-pr       Skip creating PR (useful for local testing)")


def cmd_list(config: SyncConfig) -> int:
    """Show the exchange registry."""
    table = Table(title="Exchanges")
    table.add_column("Key", style="cyan")
    table.add_column("SDK Repo", style="blue")
    table.add_column("Package", style="green")
    table.add_column("Destination")
    table.add_column("Excluded")

    for key, exchange in config.exchanges.items():
        table.add_row(
            key,
            exchange.repo_name,
            exchange.package_name,
            f"examples/{exchange.dest_folder}",
            ", ".join(exchange.exclude_folders),
        )

    console.print(table)
    return 0


def cmd_sync(args: argparse.Namespace) -> int:
    """Sync one exchange's examples."""
    repo_root = Path(args.repo_root) if args.repo_root else get_base_dir()
    config = _load_config(args, repo_root)
    if args.verbose:
        config.settings.verbose = True

    if args.list:
        return cmd_list(config)

    if not args.exchange:
        _print_usage_hint(config)
        return 1

    try:
        exchange_config = config.get_exchange(args.exchange)
    except UnknownExchangeError as e:
        console.print(f"[red]❌ Unknown exchange: {e.exchange}")
        console.print(f"   Available exchanges: {', '.join(e.available)}")
        return 1

    if not (repo_root / "examples").is_dir():
        console.print(f"[red]❌ Examples directory not found: {repo_root / 'examples'}")
        console.print("   Run from a source checkout or pass --repo-root <examples repository>")
        return 1

    load_dotenv()
    summary_path = os.getenv("GITHUB_STEP_SUMMARY")

    runner = CommandRunner()
    publisher = PullRequestPublisher(
        runner=runner,
        token=os.getenv("GITHUB_TOKEN") or None,
        step_summary_path=Path(summary_path) if summary_path else None,
        base_branch=config.settings.base_branch,
    )
    ops = SyncOperations(
        exchange=args.exchange,
        config=exchange_config,
        paths=SyncPaths.from_repo_root(repo_root, Path(args.sdk_root) if args.sdk_root else None),
        settings=config.settings,
        runner=runner,
        publisher=publisher,
    )

    try:
        run = ops.run(skip_build=args.skip_build, skip_pr=args.skip_pr)
    except GitError as e:
        console.print(f"[red]❌ Git operation failed: {e}")
        return 1
    except Exception as e:
        console.print(f"[red]❌ Error: {e}")
        return 1

    if config.settings.verbose and run.unmatched_patterns:
        console.print(
            f"[dim]Patterns with no matches in {run.files_copied} files: "
            f"{', '.join(run.unmatched_patterns)}[/dim]"
        )

    if run.status == RunStatus.MISSING_SOURCE:
        console.print(f"[red]❌ {run.message}")
    elif run.status == RunStatus.VERIFICATION_FAILED:
        console.print(f"[red]❌ Verification failed, nothing was committed: {run.message}")
    elif run.status == RunStatus.NOTHING_STAGED:
        console.print(f"[yellow]⚠️  {run.message}")

    return 0 if run.ok else 1


def cmd_build_index(args: argparse.Namespace) -> int:
    """Build public/examples-index.json."""
    repo_root = Path(args.repo_root) if args.repo_root else get_base_dir()

    examples_dir = repo_root / args.examples_dir
    if not examples_dir.is_dir():
        console.print(f"[red]❌ Examples directory not found: {examples_dir}")
        return 1

    try:
        build_examples_index(repo_root, examples_dir=args.examples_dir, public_dir=args.public_dir)
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]❌ Failed to build examples index: {e}")
        return 1

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point (sync-examples)."""
    parser = argparse.ArgumentParser(
        prog="sync-examples",
        description="Sync examples from an exchange SDK repo into this repository",
    )
    parser.add_argument("exchange", nargs="?", help="Exchange key (e.g. binance, okx)")
    parser.add_argument("--skip-build", action="store_true", help="Skip running lint/format checks")
    parser.add_argument("--skip-pr", action="store_true", help="Skip creating PR (useful for local testing)")
    parser.add_argument("--config", help=f"YAML config file (default: <repo-root>/{DEFAULT_CONFIG_FILENAME})")
    parser.add_argument("--repo-root", help="Examples repository root (default: this checkout; required when installed)")
    parser.add_argument("--sdk-root", help="Directory holding SDK checkouts (default: parent of repo root)")
    parser.add_argument("--list", action="store_true", help="List configured exchanges")
    parser.add_argument("--verbose", action="store_true", help="Report transform patterns that never matched")

    args = parser.parse_args(argv)
    return cmd_sync(args)


def build_index_main(argv: list[str] | None = None) -> int:
    """CLI entry point for building the examples index (build-examples)."""
    parser = argparse.ArgumentParser(
        prog="build-examples",
        description="Build the examples index for the static examples viewer",
    )
    parser.add_argument("--repo-root", help="Examples repository root (default: this checkout; required when installed)")
    parser.add_argument("--examples-dir", default="examples", help="Examples folder (default: examples)")
    parser.add_argument("--public-dir", default="public", help="Output folder (default: public)")

    args = parser.parse_args(argv)
    return cmd_build_index(args)


if __name__ == "__main__":
    sys.exit(main())
