import argparse
import logging
import sys

from errors import LastCommonCommitsError
from finder import create_finder
from repo_utils import get_repo_config


def build_arg_parser():
    parser = argparse.ArgumentParser(
        description="Print the last common commits of two branches of a GitHub repository.")
    parser.add_argument("branch_a")
    parser.add_argument("branch_b")
    parser.add_argument("--owner", help="repository owner (default: $REPO_OWNER)")
    parser.add_argument("--repo", help="repository name (default: $REPO)")
    parser.add_argument("--token", help="GitHub token (default: $GITHUB_ACCESS_TOKEN)")
    parser.add_argument("--max-commits", type=int, help="commits to load per branch (default: $MAX_COMMITS or 1000)")
    parser.add_argument("--parallel", action="store_true", help="fetch both branches at the same time")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = get_repo_config(args.owner, args.repo, args.token, args.max_commits)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    finder = create_finder(config.owner, config.repo, config.token,
                           max_commits=config.max_commits, parallel=args.parallel)
    try:
        commits = finder.find_last_common_commits(args.branch_a, args.branch_b)
    except LastCommonCommitsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for sha in sorted(commits):
        print(sha)

    if finder.truncated:
        print(f"Note: history was cut off at {config.max_commits} commits; "
              f"older common commits may be missing.", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
