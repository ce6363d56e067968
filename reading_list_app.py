"""Command-line reading list application.

This module is the user-facing side of the reading list: it fetches
the books through :class:`reading_list_client.ReadingListClient`,
groups them by status for display and issues add, delete and status
change requests.  After every mutation the full list is fetched again
so the rendered view always matches the server; nothing is patched
locally.

Failures are logged and surfaced to the user as alerts on stderr.
Nothing is retried automatically; the user re-runs ``list`` to
refresh.

Usage::

    reading-list list
    reading-list add "Dune" "Frank Herbert" --status to_read
    reading-list set-status <id> reading
    reading-list delete <id>

Connection settings are read from the environment, see
:class:`reading_list_client.ClientSettings`.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Callable, Dict, List, Optional, TextIO

from reading_list_client import (
    ClientConfigurationError,
    ClientSettings,
    ReadingListClient,
)


logger = logging.getLogger(__name__)

# Display order of the status categories.
STATUS_ORDER = ("to_read", "reading", "read")
STALE_NOTICE = "The reading list could not be refreshed; run `reading-list list` to retry."


def group_by_status(books: List[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """Bucket books into status categories.

    Known statuses come first, in :data:`STATUS_ORDER`; any other status
    the server may return is kept under its own key afterwards.  Empty
    categories are left out.  Books keep their relative order.
    """
    buckets: Dict[str, List[Dict[str, Any]]] = {}
    for book in books:
        buckets.setdefault(str(book.get("status")), []).append(book)
    ordered = {status: buckets.pop(status) for status in STATUS_ORDER if status in buckets}
    ordered.update(buckets)
    return ordered


def status_label(status: str) -> str:
    return status.replace("_", " ").upper()


class AlertError(Exception):
    """A failure that has been shown to the user."""


class ReadingListApp:
    """State holder for the rendered reading list.

    Args:
        client: API client used for every call.
        alert: Callable that shows a message to the user.  Defaults to
            writing to stderr.
    """

    def __init__(
        self,
        client: ReadingListClient,
        alert: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.client = client
        self.alert = alert or self._stderr_alert
        # ``None`` until the first successful fetch.
        self.grouped: Optional[Dict[str, List[Dict[str, Any]]]] = None
        self.refresh_failed = False

    @staticmethod
    def _stderr_alert(message: str) -> None:
        print(f"[!] {message}", file=sys.stderr)

    def _fail(self, message: str) -> None:
        self.alert(message)
        raise AlertError(message)

    def refresh(self, force: bool = False) -> Dict[str, List[Dict[str, Any]]]:
        """Re-fetch every book and regroup them.

        A failed fetch is always logged.  It is only alerted when the
        refresh was requested explicitly (``force``); background
        refreshes after a mutation keep the previous view.
        """
        logger.debug("Fetching books...%s", " (forced refresh)" if force else "")
        books, error = self.client.list_books()
        if error:
            logger.error("Error fetching books: %s", error["message"])
            self.refresh_failed = True
            if force:
                self._fail("Failed to load books. Please try again.")
            return self.grouped or {}
        self.refresh_failed = False
        self.grouped = group_by_status(books)
        logger.debug("Grouped books: %s", {k: len(v) for k, v in self.grouped.items()})
        return self.grouped

    def add_book(self, title: str, author: str, status: str) -> Dict[str, Any]:
        book, error = self.client.add_book(title, author, status)
        self.refresh()
        if error:
            self._fail(f"Failed to add book: {error['message']}")
        logger.info("Book added: %s", book)
        return book  # type: ignore[return-value]

    def update_status(self, book_id: str, status: str) -> Dict[str, Any]:
        result, error = self.client.update_status(book_id, status)
        self.refresh()
        if error:
            self._fail(f"Failed to update book: {error['message']}")
        return result  # type: ignore[return-value]

    def delete_book(self, book_id: str) -> None:
        if not book_id:
            logger.error("Cannot delete: id is missing")
            self._fail("Cannot delete book: ID is missing")
        _, error = self.client.delete_book(book_id)
        self.refresh()
        if error:
            self._fail(f"Failed to delete book. Please try again. ({error['message']})")
        logger.info("Book deleted successfully")

    def render(self) -> str:
        """Return the grouped reading list as text.

        When the last fetch failed the view is marked as possibly out
        of date, or replaced by a notice if nothing was ever fetched.
        """
        if self.refresh_failed and self.grouped is None:
            return STALE_NOTICE
        if not self.grouped:
            return "No books yet! Start building your reading list by adding your first book."
        lines: List[str] = [STALE_NOTICE] if self.refresh_failed else []
        for status, books in self.grouped.items():
            lines.append(f"{status_label(status)} ({len(books)})")
            for book in books:
                lines.append(f"  - {book.get('title')} by {book.get('author')} [{book.get('id')}]")
        return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="reading-list", description="Manage your reading list.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr.")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="Show the reading list grouped by status.")

    add = sub.add_parser("add", help="Add a book.")
    add.add_argument("title")
    add.add_argument("author")
    add.add_argument("--status", default="to_read", help="to_read | reading | read (default: to_read)")

    set_status = sub.add_parser("set-status", help="Change the status of a book.")
    set_status.add_argument("id")
    set_status.add_argument("status")

    delete = sub.add_parser("delete", help="Delete a book.")
    delete.add_argument("id")

    sub.add_parser("health", help="Check that the service is up.")
    return ap


def run(args: argparse.Namespace, app: ReadingListApp, out: TextIO = sys.stdout) -> int:
    """Execute a parsed command; return the process exit code."""
    try:
        if args.command == "health":
            ok, error = app.client.health()
            if not ok:
                app.alert(f"Service is unhealthy: {error['message'] if error else 'unknown error'}")
                return 1
            print("ok", file=out)
            return 0
        if args.command == "list":
            app.refresh(force=True)
        elif args.command == "add":
            app.add_book(args.title, args.author, args.status)
        elif args.command == "set-status":
            app.update_status(args.id, args.status)
        elif args.command == "delete":
            app.delete_book(args.id)
    except AlertError:
        return 1
    print(app.render(), file=out)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    try:
        client = ReadingListClient.from_settings(ClientSettings.from_env())
    except ClientConfigurationError as exc:
        print(f"[!] {exc}", file=sys.stderr)
        return 2
    try:
        return run(args, ReadingListApp(client))
    except ClientConfigurationError as exc:
        print(f"[!] {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
