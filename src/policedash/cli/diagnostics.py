"""Command-line diagnostics for the dashboard's backends.

Examples:
    policedash-diag health
    policedash-diag alerts --status Pending --limit 20
    policedash-diag init-db --admin-email admin@police.gov.in --admin-password secret
"""

from __future__ import annotations

import argparse
import json
import sys

from policedash.client.alerts import get_alerts
from policedash.client.errors import ApiError
from policedash.client.health import check_backend_connection
from policedash.client.http import FaceApiClient
from policedash.client.models import ALERT_STATUSES
from policedash.observability import configure_logging
from policedash.settings import get_settings
from policedash.store.datastore import DataStore, DataStoreError


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Police dashboard diagnostics.")
    parser.add_argument("--base-url", default=None, help="Override the face-recognition API base URL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    health = subparsers.add_parser("health", help="Probe the API /health endpoint")
    health.add_argument("--timeout", type=float, default=None, help="Probe timeout in seconds")

    alerts = subparsers.add_parser("alerts", help="List alerts")
    alerts.add_argument("--status", choices=ALERT_STATUSES, default=None)
    alerts.add_argument("--limit", type=int, default=20)
    alerts.add_argument("--offset", type=int, default=0)

    init_db = subparsers.add_parser("init-db", help="Create data-store tables, optionally adding an admin")
    init_db.add_argument("--admin-email", default=None)
    init_db.add_argument("--admin-password", default=None)

    return parser.parse_args(argv)


def _health(client: FaceApiClient, args: argparse.Namespace) -> int:
    report = check_backend_connection(client, timeout=args.timeout)
    marker = "✅" if report.success else "❌"
    print(f"{marker} {report.message}")
    if report.details is not None:
        print(json.dumps(report.details, indent=2, default=str))
    return 0 if report.success else 1


def _alerts(client: FaceApiClient, args: argparse.Namespace) -> int:
    try:
        alerts = get_alerts(client, status=args.status, limit=args.limit, offset=args.offset)
    except ApiError as exc:
        print(f"❌ {exc.message}")
        return 1
    if not alerts:
        print("No alerts found.")
    for alert in alerts:
        top = alert.matches[0] if alert.matches else None
        match_text = f"{top.name} ({top.confidence:.1f}%)" if top else "no match"
        print(f"{alert.alert_id}  {alert.status:<9}  {match_text}  {alert.created_at or '-'}")
    return 0


def _init_db(args: argparse.Namespace) -> int:
    if bool(args.admin_email) != bool(args.admin_password):
        print("❌ --admin-email and --admin-password must be given together")
        return 1
    try:
        store = DataStore(create_schema=True)
        if args.admin_email:
            store.insert("admins", {"email": args.admin_email, "password": args.admin_password})
    except DataStoreError as exc:
        print(f"❌ {exc}")
        return 1
    print(f"✅ Data store ready at {store.engine.url.render_as_string(hide_password=True)}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point; returns non-zero when a check fails."""

    args = parse_args(argv)
    settings = get_settings()
    configure_logging(settings)

    if args.command == "init-db":
        return _init_db(args)

    with FaceApiClient(base_url=args.base_url, settings=settings) as client:
        if args.command == "health":
            return _health(client, args)
        return _alerts(client, args)


if __name__ == "__main__":
    sys.exit(main())
