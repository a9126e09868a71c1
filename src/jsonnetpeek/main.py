import sys
import os
import argparse
import logging
from typing import List, Optional
from .compiler.driver import JsonnetDriver
from .parsing import extract_diagnostics
from .preview import OUTPUT_FORMATS, Document, MalformedPayloadError, Previewer, RenderFailure, reformat
from .ui.app import run_tui
from .utils.config import ConfigManager
from .utils.highlighter import format_diagnostic
from .utils.lang import is_supported

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(description="jsonnetpeek: live Jsonnet preview with inline diagnostics")
    parser.add_argument("files", nargs="*", help="Jsonnet files to preview (t cycles between them)")
    parser.add_argument("-f", "--format", choices=OUTPUT_FORMATS, help="Preview output format")
    parser.add_argument("-J", "--jpath", action="append", default=None, metavar="DIR",
                        help="Additional library search path (repeatable)")
    parser.add_argument("-V", "--ext-str", action="append", default=None, metavar="KEY=VALUE",
                        help="External string variable (repeatable)")
    parser.add_argument("-y", "--yaml-stream", action="store_true", default=None,
                        help="Render a '---' separated document stream")
    parser.add_argument("--check", action="store_true",
                        help="Render once and print the preview or diagnostics instead of starting the UI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    return parser


def _configure(args: argparse.Namespace) -> ConfigManager:
    config = ConfigManager()
    lib_paths = None
    if args.jpath:
        lib_paths = list(config.get("lib_paths") or []) + args.jpath
    ext_strs = None
    if args.ext_str:
        ext_strs = config.ext_strs()
        for item in args.ext_str:
            key, sep, value = item.partition("=")
            if not sep or not key:
                raise SystemExit(f"Error: --ext-str expects KEY=VALUE, got {item!r}")
            ext_strs[key] = value
    config.override(
        output_format=args.format,
        lib_paths=lib_paths,
        ext_strs=ext_strs,
        yaml_stream=args.yaml_stream,
    )
    return config


def _setup_logging(config: ConfigManager, check: bool, verbose: bool):
    if check:
        # No UI owns the terminal; warnings go to stderr
        logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)
    else:
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format=LOG_FORMAT,
            filename=config.get("log_file"),
        )


def check(files: List[str], config: ConfigManager) -> int:
    """Render each file once. Returns the process exit code."""
    previewer = Previewer(JsonnetDriver(config))
    output_format = config.get("output_format", "json")
    exit_code = 0

    for path in files:
        payload = previewer.render(Document(path))
        if isinstance(payload, RenderFailure):
            exit_code = 1
            diagnostics = extract_diagnostics(payload.message)
            if not diagnostics:
                print(payload.message, file=sys.stderr)
            for file, items in diagnostics.items():
                for diag in items:
                    print(format_diagnostic(file, diag), file=sys.stderr)
            continue

        try:
            print(reformat(payload, output_format))
        except MalformedPayloadError as e:
            print(f"Error: {path}: {e}", file=sys.stderr)
            exit_code = 1

    return exit_code


def run(argv: Optional[List[str]] = None):
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.files:
        print("Error: No source file specified.")
        print("Usage: jsonnetpeek <file.jsonnet> [more.jsonnet ...]")
        sys.exit(1)

    # Resolve to absolute paths immediately
    abs_paths = [os.path.abspath(f) for f in args.files]

    for abs_path in abs_paths:
        if not os.path.exists(abs_path):
            print(f"Error: File not found: {abs_path}")
            sys.exit(1)

        if not is_supported(abs_path):
            print("Error: Unsupported file type. Use .jsonnet, .libsonnet or .json")
            sys.exit(1)

    config = _configure(args)
    _setup_logging(config, args.check, args.verbose)

    if args.check:
        sys.exit(check(abs_paths, config))

    try:
        run_tui(abs_paths, config)
    except KeyboardInterrupt:
        pass
    except Exception as e:
        print(f"Fatal Error: {e}")
        sys.exit(1)

if __name__ == "__main__":
    run()
