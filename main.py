#!/usr/bin/env python3
"""
Teacher retirement records — command-line front end.

Usage:
    python main.py add --photo foto.jpg --name "Siti Aminah" --nip 196501011990032001 \\
        --position "Guru Madya" --school "SDN 1 Bandung" --retirement-date 2031-01-01
    python main.py list --search siti --status "In Progress" --sort retirementDate --desc
    python main.py update teacher_1760882400000_k3j9x0q2a --status Approved
    python main.py delete teacher_1760882400000_k3j9x0q2a
    python main.py stats
    python main.py check-nip 196501011990032001
    python main.py export --output laporan.xlsx --no-links
    python main.py photo teacher_1760882400000_k3j9x0q2a --output foto.jpg

Environment:
    PENSIUN_DB_PATH, PENSIUN_EXPORT_DIR, PENSIUN_LOG_FORMAT, PENSIUN_LOG_LEVEL
"""

from __future__ import annotations

import argparse
import mimetypes
import sys
from pathlib import Path

from pydantic import ValidationError

from records.filters import describe_filters
from records.forms import PhotoEncodingError, decode_photo
from records.logging import configure_logging
from records.models import PhotoUpload, TeacherFormData
from records.sorting import sort_key
from records.storage import SqliteStorage
from records.store import RecordStore
from records.workspace import RecordWorkspace
from utils.config import AppConfig, KnownValues
from utils.formatting import ReportFormatter, TableFormatter, format_date


def _add_filter_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--search", default="", help="Free-text search")
    parser.add_argument("--from", dest="start_date", default="",
                        help="Earliest retirement date (YYYY-MM-DD, inclusive)")
    parser.add_argument("--to", dest="end_date", default="",
                        help="Latest retirement date (YYYY-MM-DD, inclusive)")
    parser.add_argument("--status", default=KnownValues.ALL_STATUSES,
                        help="Status value or label, or 'all' (default)")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Manage teacher retirement submission records.",
    )
    parser.add_argument("--db", type=Path, default=None,
                        help="SQLite file (default: pensiun_guru.sqlite or PENSIUN_DB_PATH)")
    parser.add_argument("--log-format", choices=["text", "json"], default=None,
                        help="Log output format (default: PENSIUN_LOG_FORMAT or text)")
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Add a record from form values")
    add.add_argument("--photo", type=Path, required=True, help="JPG, PNG or WebP, max 5MB")
    add.add_argument("--name", required=True)
    add.add_argument("--nip", required=True)
    add.add_argument("--position", required=True)
    add.add_argument("--school", required=True)
    add.add_argument("--retirement-date", required=True, help="YYYY-MM-DD")
    add.add_argument("--document-link", default="")

    lst = sub.add_parser("list", help="Show records")
    _add_filter_args(lst)
    lst.add_argument("--sort", default=None, help="Field to sort by, e.g. name, retirementDate")
    lst.add_argument("--desc", action="store_true", help="Sort descending")

    upd = sub.add_parser("update", help="Change fields of one or more records")
    upd.add_argument("ids", nargs="+")
    upd.add_argument("--status", default=None)
    upd.add_argument("--name", default=None)
    upd.add_argument("--position", default=None)
    upd.add_argument("--school", default=None)
    upd.add_argument("--retirement-date", default=None)
    upd.add_argument("--document-link", default=None)

    dele = sub.add_parser("delete", help="Delete records by id")
    dele.add_argument("ids", nargs="+")

    sub.add_parser("stats", help="Show summary counts")

    chk = sub.add_parser("check-nip", help="Check whether a NIP is already used")
    chk.add_argument("nip")
    chk.add_argument("--exclude", default=None, help="Record id to ignore")

    exp = sub.add_parser("export", help="Write the Excel report")
    exp.add_argument("--output", default=None, help="File name (default: timestamped)")
    exp.add_argument("--no-links", action="store_true", help="Omit the document-link column")
    exp.add_argument("--filtered", action="store_true",
                     help="Export only records matching the filter options")
    _add_filter_args(exp)

    pho = sub.add_parser("photo", help="Save a record's photo to a file")
    pho.add_argument("id")
    pho.add_argument("--output", type=Path, default=None)

    return parser.parse_args(argv)


# ── commands ──────────────────────────────────────────────────────────────────

def cmd_add(ws: RecordWorkspace, args: argparse.Namespace) -> int:
    try:
        photo = PhotoUpload.from_path(args.photo)
    except OSError as e:
        print(f"ERROR: cannot read photo {args.photo}: {e}", file=sys.stderr)
        return 1
    form = TeacherFormData(
        photo=photo,
        name=args.name,
        nip=args.nip,
        position=args.position,
        school=args.school,
        retirement_date=args.retirement_date,
        document_link=args.document_link,
    )
    result = ws.submit_form(form)
    if not result.success:
        for field, message in (result.errors or {"form": result.error}).items():
            print(f"ERROR: {field}: {message}", file=sys.stderr)
        return 1
    for field, message in result.warnings.items():
        print(f"WARNING: {field}: {message}")
    print(f"Added {result.record.id}")
    return 0


def cmd_list(ws: RecordWorkspace, args: argparse.Namespace) -> int:
    ws.update_filters(search_text=args.search, start_date=args.start_date,
                      end_date=args.end_date, progress_status=args.status)
    if args.sort:
        ws.request_sort(args.sort)
        if args.desc:
            ws.request_sort(args.sort)
    rows = ws.view()

    table = TableFormatter(["ID", "Nama", "NIP", "Jabatan", "Sekolah",
                            "Tanggal Pensiun", "Status"])
    for r in rows:
        table.add_row([r.id, r.name, r.nip, r.position, r.school,
                       format_date(r.retirement_date), r.progress_status.value])
    print(table.to_string())
    print(f"\n{len(rows)} of {len(ws.store)} records (filters: {describe_filters(ws.filters)})")
    return 0


def cmd_update(ws: RecordWorkspace, args: argparse.Namespace) -> int:
    changes = {
        "progress_status": args.status,
        "name": args.name,
        "position": args.position,
        "school": args.school,
        "retirement_date": args.retirement_date,
        "document_link": args.document_link,
    }
    changes = {k: v for k, v in changes.items() if v is not None}
    if not changes:
        print("ERROR: nothing to update", file=sys.stderr)
        return 2
    changed = ws.update_many(args.ids, changes)
    print(f"Updated {changed} record(s)")
    return 0 if changed else 1


def cmd_delete(ws: RecordWorkspace, args: argparse.Namespace) -> int:
    removed = ws.delete_many(args.ids)
    print(f"Deleted {removed} record(s)")
    return 0


def cmd_stats(ws: RecordWorkspace, args: argparse.Namespace) -> int:
    stats = ws.statistics()
    report = ReportFormatter("RINGKASAN DATA PENSIUN GURU")
    report.add_section("Total", {
        "Total data guru": stats.total,
        "Pensiun tahun ini": stats.retiring_this_year,
    })
    report.add_section("Status", stats.status_counts or "Belum ada data")
    print(report.to_string(), end="")
    return 0


def cmd_check_nip(ws: RecordWorkspace, args: argparse.Namespace) -> int:
    if ws.nip_exists(args.nip, args.exclude):
        print(f"NIP {args.nip} is already registered")
        return 1
    print(f"NIP {args.nip} is not registered")
    return 0


def cmd_export(ws: RecordWorkspace, args: argparse.Namespace) -> int:
    if args.filtered:
        ws.update_filters(search_text=args.search, start_date=args.start_date,
                          end_date=args.end_date, progress_status=args.status)
    result = ws.export(filename=args.output,
                       include_document_links=not args.no_links,
                       filtered=args.filtered)
    if not result.success:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return 1
    print(f"Exported {result.count} record(s) to {result.path}")
    return 0


def cmd_photo(ws: RecordWorkspace, args: argparse.Namespace) -> int:
    record = ws.store.get(args.id)
    if record is None:
        print(f"ERROR: no record {args.id}", file=sys.stderr)
        return 1
    try:
        mime_type, content = decode_photo(record.photo)
    except PhotoEncodingError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    output = args.output or Path(f"{record.id}{mimetypes.guess_extension(mime_type) or ''}")
    output.write_bytes(content)
    print(f"Saved photo to {output}")
    return 0


COMMANDS = {
    "add": cmd_add,
    "list": cmd_list,
    "update": cmd_update,
    "delete": cmd_delete,
    "stats": cmd_stats,
    "check-nip": cmd_check_nip,
    "export": cmd_export,
    "photo": cmd_photo,
}


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    config = AppConfig.from_env()
    if args.db is not None:
        config.db_path = args.db
    configure_logging(args.log_format or config.log_format, config.log_level)

    if getattr(args, "sort", None):
        try:
            sort_key(args.sort)
        except ValueError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 2

    storage_config = config.storage_config()
    storage = SqliteStorage(storage_config.db_path, storage_config.table_name)
    try:
        store = RecordStore(storage, key=storage_config.teachers_key)
        ws = RecordWorkspace(store, export_config=config.export_config())
        return COMMANDS[args.command](ws, args)
    except ValidationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except (ValueError, KeyError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    finally:
        storage.close()


if __name__ == "__main__":
    sys.exit(main())
