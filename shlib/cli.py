"""Command line interface for the shared library helpers."""
from __future__ import annotations

from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import Iterable, List
import sys

from core.command_runner import RecordingCommandRunner, SubprocessCommandRunner
from core.console import Console

from .cleanup import maybe_remove_file
from .config import ShlibConfig, load_package_manifest
from .libname import LibraryNameError, PackageDescriptor, derive_library_name
from .pkgconfig import PkgConfigError, PkgConfigQuery
from .platforms import current_platform, shared_library_filename


def _parse_arguments(argv: Iterable[str]) -> Namespace:
    parser = ArgumentParser(prog="shlib", description="Shared library naming and build output helpers")
    parser.add_argument("--config-dir", type=Path, help="Configuration directory (default: ./config)")
    parser.add_argument("--log", choices=list(Console.LEVELS), help="Set log level (default from configuration)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output (maps to debug)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    name_parser = subparsers.add_parser("name", help="Derive the shared library name for package patterns")
    name_parser.add_argument("patterns", nargs="*", help="Package patterns as given to the build")
    name_parser.add_argument(
        "--import-path",
        action="append",
        default=[],
        help="Import path of a package the patterns resolved to (repeatable)",
    )
    name_parser.add_argument("--manifest", type=Path, help="File listing resolved packages under 'packages'")
    name_parser.add_argument("--platform", help="Platform whose file naming to use")
    name_parser.add_argument("--bare", action="store_true", help="Print the name without prefix or suffix")

    flags_parser = subparsers.add_parser("flags", help="Query pkg-config for compiler and linker flags")
    flags_parser.add_argument("packages", nargs="+", help="pkg-config packages; other --options are passed through")
    mode_group = flags_parser.add_mutually_exclusive_group()
    mode_group.add_argument("--cflags", action="store_true", help="Only print compiler flags")
    mode_group.add_argument("--libs", action="store_true", help="Only print linker flags")
    flags_parser.add_argument("--dry-run", action="store_true", help="Print pkg-config commands without running them")

    clean_parser = subparsers.add_parser("clean", help="Remove stale regular files, keeping special files")
    clean_parser.add_argument("paths", nargs="+", help="Output paths to clear")

    args, passthrough = parser.parse_known_args(list(argv))
    if passthrough:
        if args.command != "flags":
            parser.error(f"unrecognized arguments: {' '.join(passthrough)}")
        args.packages.extend(passthrough)
    return args


def main(argv: Iterable[str] | None = None) -> int:
    args = _parse_arguments(sys.argv[1:] if argv is None else argv)
    config_dir = args.config_dir or Path.cwd() / "config"

    try:
        config = ShlibConfig.from_directory(config_dir)
    except (OSError, TypeError, ValueError) as exc:
        Console("debug" if args.verbose else args.log or "error").error(f"Invalid configuration: {exc}")
        return 1

    level = "debug" if args.verbose else args.log or config.log_level
    console = Console(level, dry_run=getattr(args, "dry_run", False))
    console.debug(f"Configuration directory: {config_dir}")

    handlers = {
        "name": _handle_name,
        "flags": _handle_flags,
        "clean": _handle_clean,
    }
    handler = handlers.get(args.command)
    if handler is None:
        raise ValueError(f"Unknown command: {args.command}")
    try:
        return handler(args, config, console)
    except (LibraryNameError, PkgConfigError) as exc:
        console.error(str(exc))
        return 1
    except (OSError, TypeError, ValueError) as exc:
        console.error(f"{args.command}: {exc}")
        return 1


def _handle_name(args: Namespace, config: ShlibConfig, console: Console) -> int:
    packages: List[PackageDescriptor] = [PackageDescriptor.from_value(path) for path in args.import_path]
    if args.manifest:
        packages.extend(load_package_manifest(args.manifest))
    console.debug(f"Patterns: {args.patterns}; packages: {[package.import_path for package in packages]}")

    name = derive_library_name(args.patterns, packages)
    if args.bare:
        print(name)
        return 0

    platform_name = args.platform or config.platform or current_platform()
    filename = shared_library_filename(name, platform_name, overrides=config.platforms)
    console.info(f"Library name for {platform_name}: {filename}")
    print(filename)
    return 0


def _handle_flags(args: Namespace, config: ShlibConfig, console: Console) -> int:
    runner: SubprocessCommandRunner | RecordingCommandRunner
    if args.dry_run:
        runner = RecordingCommandRunner()
    else:
        runner = SubprocessCommandRunner()
    query = PkgConfigQuery(runner, command=config.pkg_config_command, console=console)

    if args.cflags:
        tokens = query.cflags(args.packages)
    elif args.libs:
        tokens = query.libs(args.packages)
    else:
        result = query.flags(args.packages)
        tokens = [*result.cflags, *result.ldflags]

    if isinstance(runner, RecordingCommandRunner):
        for line in runner.iter_formatted():
            console.dry(line)
        return 0

    for token in tokens:
        _write_token(token)
    return 0


def _write_token(token: str) -> None:
    # Tokens may carry undecodable bytes as surrogates; write them back as bytes.
    buffer = getattr(sys.stdout, "buffer", None)
    if buffer is None:
        print(token)
        return
    sys.stdout.flush()
    buffer.write(token.encode("utf-8", "surrogateescape") + b"\n")
    buffer.flush()


def _handle_clean(args: Namespace, config: ShlibConfig, console: Console) -> int:
    for raw in args.paths:
        if maybe_remove_file(raw, console=console):
            console.info(f"Removed {raw}")
        else:
            console.info(f"Nothing to remove at {raw}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
