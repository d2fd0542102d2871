"""Command-line interface for normalizing and merging SVG documents."""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from .errors import SvgBuilderError
from .manager import DEFAULT_HEIGHT, DEFAULT_WIDTH, DocumentRegistry
from .root import SVGRoot


@dataclass
class CliError(Exception):
    code: str
    message: str
    hint: Optional[str] = None
    exit_code: int = 1
    file: Optional[str] = None
    retryable: bool = True


class UsageError(Exception):
    pass


class FriendlyArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # pragma: no cover - argparse callback
        raise UsageError(message)


def _build_parser() -> argparse.ArgumentParser:
    parser = FriendlyArgumentParser(
        prog="svgbuilder",
        description="Normalize and merge SVG documents through the svgbuilder document model.",
    )
    parser.add_argument("--error-format", choices=["text", "json"], default="text")
    parser.add_argument("--debug", action="store_true")

    subparsers = parser.add_subparsers(dest="command")

    normalize_parser = subparsers.add_parser("normalize", help="Re-serialize one SVG document")
    normalize_parser.add_argument("input", nargs="?", help="Input .svg file or http(s) URL")
    normalize_parser.add_argument("--text", help="Raw SVG source")
    normalize_parser.add_argument("--stdout", action="store_true", help="Write SVG to stdout")
    normalize_parser.add_argument("-o", "--output", help="Output .svg path")
    normalize_parser.add_argument("--width", default=str(DEFAULT_WIDTH))
    normalize_parser.add_argument("--height", default=str(DEFAULT_HEIGHT))
    normalize_parser.add_argument(
        "--keep-size",
        action="store_true",
        help="Keep --width/--height instead of the loaded document's size",
    )

    merge_parser = subparsers.add_parser("merge", help="Merge several SVG documents into one")
    merge_parser.add_argument("inputs", nargs="+", help="Input .svg files or http(s) URLs")
    merge_parser.add_argument("--stdout", action="store_true", help="Write SVG to stdout")
    merge_parser.add_argument("-o", "--output", help="Output .svg path")

    return parser


def _is_url(value: str) -> bool:
    return value.startswith(("http://", "https://", "file://"))


def _read_input(path: Optional[str], text: Optional[str]) -> tuple[str, str]:
    if path and text is not None:
        raise CliError(
            "E_ARGS",
            "--text cannot be combined with file input",
            hint="Use either FILE or --text.",
            exit_code=2,
        )

    if text is not None:
        return text, "<text>"

    if path:
        input_path = Path(path)
        if not input_path.exists():
            raise CliError(
                "E_IO_READ",
                f"input file not found: {input_path}",
                exit_code=2,
                file=str(input_path),
            )
        try:
            return input_path.read_text(encoding="utf-8"), str(input_path)
        except OSError as exc:
            raise CliError(
                "E_IO_READ",
                f"failed to read input file: {input_path}",
                hint=str(exc),
                exit_code=2,
                file=str(input_path),
            )

    if sys.stdin.isatty():
        raise CliError(
            "E_ARGS",
            "no input provided",
            hint="Use a subcommand with FILE, --text, or pipe stdin.",
            exit_code=2,
        )

    data = sys.stdin.read()
    if not data.strip():
        raise CliError(
            "E_ARGS",
            "stdin was empty",
            hint="Pipe SVG content into stdin.",
            exit_code=2,
        )
    return data, "<stdin>"


def _write_text(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise CliError(
            "E_IO_WRITE",
            f"failed to write output file: {path}",
            hint=str(exc),
            exit_code=4,
            file=str(path),
        )


def _new_document(width: str, height: str) -> SVGRoot:
    registry = DocumentRegistry()
    handle = registry.attach("cli", width, height)
    return registry.get_by_handle(handle)


def _load_into(root: SVGRoot, source: str, *, markup: Optional[str], add_to: bool, change_size: bool) -> None:
    errors: List[str] = []

    def _on_load(_root: SVGRoot, error: Optional[str]) -> None:
        if error:
            errors.append(error)

    if markup is not None:
        root.load_markup(markup, add_to=add_to, change_size=change_size, on_load=_on_load)
    else:
        root.load(source, add_to=add_to, change_size=change_size, on_load=_on_load)
    if errors:
        raise CliError(
            "E_LOAD",
            errors[0],
            hint="Ensure the input is reachable and well-formed XML.",
            exit_code=3,
            file=source,
        )


def _emit_svg(svg_text: str, *, stdout: bool, output: Optional[str], default_path: Optional[Path]) -> None:
    if stdout or (output is None and default_path is None):
        sys.stdout.write(svg_text)
        if not svg_text.endswith("\n"):
            sys.stdout.write("\n")
        return
    output_path = Path(output) if output else default_path
    _write_text(output_path, svg_text)
    print(f"Wrote {output_path}")


def _handle_normalize(args: argparse.Namespace) -> int:
    if args.stdout and args.output:
        raise CliError(
            "E_ARGS",
            "--stdout and --output are mutually exclusive",
            hint="Choose either --stdout or --output.",
            exit_code=2,
        )

    root = _new_document(args.width, args.height)
    if args.input and _is_url(args.input) and args.text is None:
        _load_into(root, args.input, markup=None, add_to=False, change_size=not args.keep_size)
        default_path = None
    else:
        source, source_name = _read_input(args.input, args.text)
        _load_into(root, source_name, markup=source, add_to=False, change_size=not args.keep_size)
        default_path = Path(args.input).with_suffix(".normalized.svg") if args.input else None

    _emit_svg(root.to_svg(), stdout=args.stdout, output=args.output, default_path=default_path)
    return 0


def _handle_merge(args: argparse.Namespace) -> int:
    if args.stdout and args.output:
        raise CliError(
            "E_ARGS",
            "--stdout and --output are mutually exclusive",
            hint="Choose either --stdout or --output.",
            exit_code=2,
        )

    root = _new_document(str(DEFAULT_WIDTH), str(DEFAULT_HEIGHT))
    for item in args.inputs:
        if _is_url(item):
            _load_into(root, item, markup=None, add_to=True, change_size=True)
        else:
            source, source_name = _read_input(item, None)
            _load_into(root, source_name, markup=source, add_to=True, change_size=True)

    _emit_svg(root.to_svg(), stdout=args.stdout, output=args.output, default_path=None)
    return 0


def _error_from_exception(exc: Exception) -> CliError:
    if isinstance(exc, CliError):
        return exc
    if isinstance(exc, SvgBuilderError):
        return CliError(
            exc.code,
            str(exc),
            hint="Check the input document and retry.",
            exit_code=3,
            retryable=True,
        )
    return CliError(
        "E_INTERNAL",
        str(exc) or exc.__class__.__name__,
        hint="Re-run with --debug to see traceback.",
        exit_code=1,
        retryable=False,
    )


def _emit_error(err: CliError, *, error_format: str) -> None:
    if error_format == "json":
        payload = {
            "ok": False,
            "code": err.code,
            "message": err.message,
            "file": err.file,
            "hint": err.hint,
            "retryable": err.retryable,
        }
        sys.stderr.write(json.dumps(payload) + "\n")
        return

    sys.stderr.write(f"error[{err.code}]: {err.message}\n")
    if err.hint:
        sys.stderr.write(f"hint: {err.hint}\n")


def main(argv: Optional[Iterable[str]] = None) -> int:
    raw_argv = list(argv) if argv is not None else sys.argv[1:]
    parser = _build_parser()

    if not raw_argv:
        err = CliError(
            "E_ARGS",
            "missing subcommand",
            hint="Use one of: normalize, merge.",
            exit_code=2,
        )
        _emit_error(err, error_format="text")
        return err.exit_code

    debug_enabled = "--debug" in raw_argv or os.getenv("SVGBUILDER_DEBUG") == "1"
    if debug_enabled:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)
    error_format = "text"
    if "--error-format" in raw_argv:
        idx = raw_argv.index("--error-format")
        if idx + 1 < len(raw_argv):
            error_format = raw_argv[idx + 1]

    try:
        args = parser.parse_args(raw_argv)
        error_format = args.error_format

        if args.command == "normalize":
            return _handle_normalize(args)
        if args.command == "merge":
            return _handle_merge(args)

        raise CliError(
            "E_ARGS",
            "missing subcommand",
            hint="Use one of: normalize, merge.",
            exit_code=2,
        )
    except UsageError as exc:
        err = CliError(
            "E_ARGS",
            str(exc),
            hint="Use subcommands: normalize, merge.",
            exit_code=2,
        )
        _emit_error(err, error_format=error_format)
        return err.exit_code
    except Exception as exc:  # pragma: no cover - exercised in integration tests
        err = _error_from_exception(exc)
        _emit_error(err, error_format=error_format)
        if debug_enabled:
            traceback.print_exc(file=sys.stderr)
        return err.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
