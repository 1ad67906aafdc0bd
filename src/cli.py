"""Command-line interface for modpack-core."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from artifacts.utils import _json_bytes
from artifacts.write import build_bundle, write_outputs
from contract.errors import BundleError
from rules.config import ConfigError, load_config, resolve_output_path
from verify.verify import verify_artifact


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "entry",
        nargs="?",
        default=None,
        help="Entry module (default: config entry, src/entry.py)",
    )
    parser.add_argument(
        "--root",
        default=".",
        help="Project root holding modpack.toml (default: .)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="modpack")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log build progress to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    bundle_parser = subparsers.add_parser("bundle", help="Bundle a program")
    _add_common_paths(bundle_parser)
    bundle_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Artifact file (default: config output, else standard output)",
    )
    bundle_parser.add_argument(
        "--manifest",
        default=None,
        help="Also write the JSON graph manifest to this file",
    )

    graph_parser = subparsers.add_parser(
        "graph", help="Print the module graph manifest as JSON"
    )
    _add_common_paths(graph_parser)

    verify_parser = subparsers.add_parser(
        "verify", help="Verify an artifact matches a fresh build"
    )
    verify_parser.add_argument("artifact", help="Previously written artifact")
    _add_common_paths(verify_parser)

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _resolve_target(
    root: Path, cli_value: str | None, config_value: str | None
) -> Path | None:
    if cli_value is not None:
        return Path(cli_value).expanduser().resolve()
    if config_value is not None:
        return resolve_output_path(root, config_value)
    return None


def _handle_bundle(
    root: Path, entry: str | None, output: str | None, manifest: str | None
) -> int:
    config = load_config(root)
    output_path = _resolve_target(root, output, config.output)
    manifest_path = _resolve_target(root, manifest, config.manifest)

    result = build_bundle(root=root, entry=entry, config=config)
    write_outputs(result, output=output_path, manifest=manifest_path)
    if output_path is None:
        sys.stdout.write(result.artifact)
    return 0


def _handle_graph(root: Path, entry: str | None) -> int:
    result = build_bundle(root=root, entry=entry)
    sys.stdout.write(_json_bytes(result.manifest()).decode("utf-8"))
    return 0


def _handle_verify(root: Path, entry: str | None, artifact: str) -> int:
    artifact_path = Path(artifact).expanduser().resolve()
    try:
        result = verify_artifact(root=root, artifact_path=artifact_path, entry=entry)
    except (FileNotFoundError, IsADirectoryError) as exc:
        sys.stderr.write(f"artifact: {artifact_path}\n")
        sys.stderr.write(f"error: {exc}\n")
        return 2
    if not result.ok:
        sys.stderr.write(f"mismatch: {artifact_path}\n")
        sys.stderr.write(f"expected sha256: {result.expected_sha256}\n")
        sys.stderr.write(f"rebuilt sha256: {result.actual_sha256}\n")
        return 1
    sys.stdout.write(f"ok: {artifact_path} ({result.module_count} modules)\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    root = Path(args.root).expanduser().resolve()

    try:
        if args.command == "bundle":
            return _handle_bundle(root, args.entry, args.output, args.manifest)

        if args.command == "graph":
            return _handle_graph(root, args.entry)

        if args.command == "verify":
            return _handle_verify(root, args.entry, args.artifact)
    except (BundleError, ConfigError, OSError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
