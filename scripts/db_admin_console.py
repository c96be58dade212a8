#!/usr/bin/env python3
"""
Render the database admin dashboard from the command line.

Logs in through the gateway's /auth pass-through, loads /api/stats with the
resulting bearer token and writes the dashboard HTML to stdout or a file.
"""

import argparse
import asyncio
import getpass
import locale
import os
import sys
from pathlib import Path
from typing import Optional

from service_dbweb.app.presentation import (
    AdminConsoleClient,
    ConsoleError,
    DashboardRenderer,
    LoadOutcome,
    SortColumn,
    SortState,
)


async def render_dashboard(
    *,
    base_url: str,
    email: str,
    password: str,
    sort_column: str,
    descending: bool,
) -> str:
    """Log in, load the stats and return the rendered HTML."""
    renderer = DashboardRenderer()
    state = SortState(SortColumn(sort_column))
    if descending:
        state = state.toggle(sort_column)

    async with AdminConsoleClient(base_url) as client:
        await client.login(email, password)
        view = await client.load_stats()

        if view.outcome is LoadOutcome.LOGGED_OUT:
            raise ConsoleError(view.message or "Session rejected by the gateway")
        if view.outcome is LoadOutcome.FAILED:
            return renderer.render_error(view.message, client.session)
        return renderer.render(view.payload, client.session, state)


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--url", default=os.getenv("DBWEB_URL", "http://localhost:3390"), help="Gateway base URL")
    parser.add_argument("--email", required=True, help="Operator e-mail")
    parser.add_argument("--password", default=os.getenv("DBWEB_PASSWORD"), help="Operator password (prompted if omitted)")
    parser.add_argument("--sort", choices=["name", "size", "connections"], default="name")
    parser.add_argument("--desc", action="store_true", help="Sort in descending order")
    parser.add_argument("--output", type=Path, help="Write HTML here instead of stdout")
    args = parser.parse_args(argv)

    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        print(f"warning: keeping C collation: {exc}", file=sys.stderr)

    password = args.password or getpass.getpass("Password: ")
    try:
        html = asyncio.run(
            render_dashboard(
                base_url=args.url,
                email=args.email,
                password=password,
                sort_column=args.sort,
                descending=args.desc,
            )
        )
    except ConsoleError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.output:
        args.output.write_text(html, encoding="utf-8")
    else:
        sys.stdout.write(html)
    return 0


if __name__ == "__main__":
    sys.exit(main())
