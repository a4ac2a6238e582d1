import argparse
import logging
import os
import sys
from pathlib import Path

import uvicorn

from modrewrite.config import DEFAULT_MAX_WORKERS, TSX_EXTENSIONS
from modrewrite.services import batch
from modrewrite.services.errors import TransformError
from modrewrite.services.rewrite import transform_source


def _transform_file(path: Path, out: Path | None, tsx: bool) -> int:
    try:
        source = path.read_text(encoding="utf-8")
        code = transform_source(source, tsx=tsx or path.suffix in TSX_EXTENSIONS)
    except (TransformError, OSError, UnicodeDecodeError) as e:
        print(f"❌ {path}: {e}", file=sys.stderr)
        return 1

    if out is None:
        sys.stdout.write(code)
        return 0

    if out.is_dir():
        out = out / path.name
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(code, encoding="utf-8")
    print(f"✅ Wrote {out}", flush=True)
    return 0


def _transform_directory(path: Path, out: Path | None, workers: int) -> int:
    print(f"🔍 Transforming: {path}", flush=True)
    results = batch.transform_directory(path, out_dir=out, max_workers=workers)

    failed = [r for r in results if not r.ok]
    for r in results:
        if r.ok:
            print(f"✅ {r.output_path or r.path}", flush=True)
        else:
            print(f"❌ {r.path}: {r.error}", flush=True)

    print(f"📂 {len(results) - len(failed)} transformed, {len(failed)} failed", flush=True)
    return 1 if failed else 0


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the CLI.

    - ``transform PATH`` rewrites a file (printed to stdout unless --out is
      given) or every source file under a directory.
    - ``serve`` starts the FastAPI server.
    """
    parser = argparse.ArgumentParser(
        prog="modrewrite",
        description="Rewrite ES module declarations into require()/module.exports form.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    transform_parser = subparsers.add_parser("transform", help="Transform a file or directory.")
    transform_parser.add_argument("path", help="File or directory to transform.")
    transform_parser.add_argument(
        "--out",
        default=None,
        help="Output file or directory (default: stdout for files, report only for directories).",
    )
    transform_parser.add_argument(
        "--tsx",
        action="store_true",
        help="Parse single files with the TSX grammar.",
    )
    transform_parser.add_argument(
        "--workers",
        type=int,
        default=DEFAULT_MAX_WORKERS,
        help=f"Worker processes for directories (default: {DEFAULT_MAX_WORKERS}).",
    )

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API.")
    serve_parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host interface to bind the server to (default: 127.0.0.1).",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run the server on (default: 8000).",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        url = f"http://{args.host}:{args.port}"
        print(f"🚀 Starting server at {url}")
        print("   Press Ctrl+C to stop.")
        uvicorn.run(
            "modrewrite.main:app",
            host=args.host,
            port=args.port,
            reload=False,
        )
        return 0

    target_path = Path(os.path.abspath(args.path))
    if not target_path.exists():
        raise SystemExit(f"Path does not exist: {target_path}")

    out = Path(args.out) if args.out else None
    if target_path.is_dir():
        return _transform_directory(target_path, out, args.workers)
    return _transform_file(target_path, out, args.tsx)


if __name__ == "__main__":
    sys.exit(main())
