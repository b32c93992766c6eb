#!/usr/bin/env python3
"""
Job Tracker - track job applications from the command line

Usage:
    jobtracker add "ACME" "Backend Developer" "CV, cover letter" "Zurich" [2024-05-01]
    jobtracker list
    jobtracker update --id 3 --answer "Interview"
    jobtracker delete --id 3
    jobtracker import applications.csv
    jobtracker export [--output jobs.pdf]
"""
import argparse
import logging
import sys

from jobtracker import __version__, config
from jobtracker.controllers.controller import Controller
from jobtracker.engines.report import max_page_size
from jobtracker.enums.application_status import ApplicationStatus
from jobtracker.errors import JobTrackerError
from jobtracker.models.database import ApplicationDatabase
from jobtracker.views.table_view import render_table


def page_size(value):
    number = int(value)
    if not 1 <= number <= max_page_size():
        raise argparse.ArgumentTypeError(f"must be between 1 and {max_page_size()}, got {value}")
    return number


# ------------------------- Parser -------------------------
def build_parser():
    parser = argparse.ArgumentParser(prog="jobtracker", description="A CLI tool to track job applications")
    parser.add_argument("--data", default=config.DATA_FILE, help=f"state file (default: {config.DATA_FILE})")
    parser.add_argument("-v", "--verbose", action="store_true", help="log progress to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    commands = parser.add_subparsers(dest="command", required=True)

    add = commands.add_parser("add", help="add a new job application")
    add.add_argument("company")
    add.add_argument("title")
    add.add_argument("docs", help="documents sent with the application")
    add.add_argument("location")
    add.add_argument("date", nargs="?", help="date applied, YYYY-MM-DD (default: today)")

    commands.add_parser("list", help="list all job applications")

    update = commands.add_parser("update", help="set the final answer of an application")
    update.add_argument("--id", type=int, required=True)
    update.add_argument("-a", "--answer", required=True,
                        help=f"e.g. {', '.join(ApplicationStatus.values())}")

    delete = commands.add_parser("delete", help="delete a job application")
    delete.add_argument("--id", type=int, required=True)

    import_ = commands.add_parser("import", help="import applications from a ';'-separated CSV file")
    import_.add_argument("file")

    export = commands.add_parser("export", help="export all applications to a PDF file")
    export.add_argument("-o", "--output", default=config.REPORT_FILE)
    export.add_argument("--page-size", type=page_size, default=config.PAGE_SIZE,
                        help=f"rows per page (default: {config.PAGE_SIZE})")
    return parser


# ------------------------- Commands -------------------------
def run_command(args, controller):
    if args.command == "add":
        app = controller.create_application({
            "company": args.company,
            "title": args.title,
            "docs": args.docs,
            "location": args.location,
            "date": args.date
        })
        print(f"Added job: {app.title} at {app.company} (ID: {app.id})")

    elif args.command == "list":
        print(render_table(controller.list_applications()))

    elif args.command == "update":
        app = controller.update_answer(args.id, args.answer)
        print(f"Updated job {app.id} with final answer: {app.answer}")

    elif args.command == "delete":
        app = controller.delete_application(args.id)
        print(f"Deleted job: ID {app.id}")

    elif args.command == "import":
        summary = controller.import_csv(args.file)
        print(f"Imported {summary.imported} new job(s) from {summary.total} row(s): "
              f"{summary.skipped_duplicate} duplicate(s), {summary.skipped_invalid} invalid row(s) skipped.")
        for skipped in summary.skipped:
            print(f"  row {skipped.row_number}: {skipped.reason} ({skipped.detail})")

    elif args.command == "export":
        pages = controller.export_pdf(args.output, page_size=args.page_size)
        print(f"Exported {len(controller.list_applications())} jobs to {args.output} ({pages} page(s))")


# ------------------------- Main -------------------------
def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        # One store handle per invocation, passed down explicitly
        database = ApplicationDatabase(args.data)
        run_command(args, Controller(database))
    except JobTrackerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
