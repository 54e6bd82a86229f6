"""Main CLI entry point for issuemood - GitHub issue sentiment analysis."""

import argparse
import sys

import trio

from ..config import LOG_LEVEL, MAX_ISSUES
from ..main import main as analyze_main
from ..main import parse_repo, setup_logging, show_rate_limit


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="issuemood",
        description="Sentiment analysis of GitHub issue threads",
        epilog="Run 'issuemood <command> --help' for more information on a command.",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # analyze command - fetch, score and report
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze comment sentiment for a repository's issues",
        description="Fetch recent issues (open and closed), score every comment with VADER, and print per-issue averages.",
    )
    analyze_parser.add_argument(
        "repository",
        type=str,
        help="Repository as OWNER/REPO",
    )
    analyze_parser.add_argument(
        "--max-issues",
        "-n",
        type=int,
        default=MAX_ISSUES,
        help=f"Maximum number of issues to fetch (default: {MAX_ISSUES})",
    )
    analyze_parser.add_argument(
        "--token",
        "-t",
        type=str,
        default=None,
        help="GitHub token (default: GITHUB_TOKEN from environment or .env)",
    )
    analyze_parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only show warnings and the final report",
    )

    # rate-limit command
    rate_parser = subparsers.add_parser(
        "rate-limit",
        help="Show remaining GitHub API quota",
    )
    rate_parser.add_argument("--token", "-t", type=str, default=None)

    return parser


def main():
    """Main CLI entry point for issuemood."""
    parser = build_parser()
    args = parser.parse_args()

    if args.command == "analyze":
        try:
            owner, repo = parse_repo(args.repository)
        except ValueError as e:
            parser.error(str(e))

        if args.max_issues < 1:
            parser.error("--max-issues must be at least 1")

        setup_logging("WARNING" if args.quiet else LOG_LEVEL)
        trio.run(analyze_main, owner, repo, args.max_issues, args.token)

    elif args.command == "rate-limit":
        setup_logging()
        trio.run(show_rate_limit, args.token)

    elif args.command is None:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    main()
