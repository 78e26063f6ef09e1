"""CLI entrypoints for onboardgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .errors import ConfigurationError, OnboardGenError
from .logging import configure_logging
from .orchestrator import Orchestrator

_VERBOSE_HELP = "Increase log verbosity for troubleshooting."


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="onboardgen",
        description="Generate onboarding documentation for a project using Gemini.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help=_VERBOSE_HELP)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write detailed logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate documentation for a project at the given path.",
    )
    # SUPPRESS keeps a top-level -v from being reset by the subcommand default.
    generate_parser.add_argument(
        "-v", "--verbose", action="store_true", default=argparse.SUPPRESS, help=_VERBOSE_HELP
    )
    generate_parser.add_argument(
        "path",
        help="Path to the project directory.",
    )
    generate_parser.add_argument(
        "--model",
        default=None,
        help="Override the generation model (defaults to gemini-1.5-flash).",
    )
    generate_parser.add_argument(
        "--base-url",
        default=None,
        help="Override the generation service base URL (or set ONBOARDGEN_BASE_URL).",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for onboardgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    orchestrator = Orchestrator()

    if args.command == "generate":
        try:
            outcome = orchestrator.run_generate(
                args.path, model=args.model, base_url=args.base_url
            )
        except ConfigurationError as exc:
            parser.exit(1, f"Error: {exc}\n")
        except (OnboardGenError, OSError) as exc:
            parser.exit(1, f"onboardgen generate failed: {exc}\nRun with --verbose for more details.\n")
        if outcome.count:
            print(f'All done! Your new docs are in the "{_relativize(outcome.docs_dir)}" folder.')
        else:
            print("No documentation files were written.")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
