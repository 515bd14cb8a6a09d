from __future__ import annotations

import argparse, json, sys
from pathlib import Path

from .api import EmbeddingIndexAPI
from .config import settings
from .errors import EmbeddingAPIError, HTTPError
from .logging import configure_logging

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="embedding-index")
    p.add_argument("--server", default=settings.base_url)
    p.add_argument("--token", default=settings.api_token)
    p.add_argument("--log-level", default=settings.log_level)
    sub = p.add_subparsers(dest="command", required=True)

    c = sub.add_parser("create"); c.add_argument("name"); c.add_argument("category"); c.add_argument("geographic")
    c.add_argument("--append-summary", action="store_true")
    ls = sub.add_parser("list"); ls.add_argument("--public", action="store_true")
    f = sub.add_parser("files"); f.add_argument("index_id", type=int)
    u = sub.add_parser("upload"); u.add_argument("index_id", type=int); u.add_argument("path", type=Path)
    u.add_argument("--content-type", default=None)
    d = sub.add_parser("delete"); d.add_argument("index_id", type=int); d.add_argument("file_id", type=int); d.add_argument("doc_ref_id")
    q = sub.add_parser("query"); q.add_argument("index_id", type=int); q.add_argument("question")
    return p

def run(args: argparse.Namespace, api: EmbeddingIndexAPI):
    if args.command == "create":
        return api.create_index(args.name, args.category, args.geographic, args.append_summary)
    if args.command == "list":
        return api.list_public_indexes() if args.public else api.list_indexes()
    if args.command == "files":
        return api.list_files(args.index_id)
    if args.command == "upload":
        return api.upload_file(args.index_id, args.path, content_type=args.content_type)
    if args.command == "delete":
        return api.delete_file(args.index_id, args.file_id, args.doc_ref_id)
    if args.command == "query":
        return api.query_ranked_chunks(args.index_id, args.question)
    raise ValueError(f"unknown command: {args.command}")

def main(argv: list[str] | None = None, api: EmbeddingIndexAPI | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level.upper())
    api = api or EmbeddingIndexAPI(args.server, args.token or None)
    try:
        result = run(args, api)
    except HTTPError as e:
        print(f"error: {e.detail!r} (HTTP {e.status_code})", file=sys.stderr); return 1
    except EmbeddingAPIError as e:
        print(f"error: {e}", file=sys.stderr); return 1
    except OSError as e:
        print(f"error: {e}", file=sys.stderr); return 1
    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0

if __name__ == "__main__":
    sys.exit(main())
