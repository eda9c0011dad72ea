"""Command-line entry point."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from .api_clients import GoogleSheetsClient
from .auth import EnvTokenProvider, StaticTokenProvider, TokenProvider
from .config import ConfigLoader, ConfigurationError, SheetConfig, get_settings, load_config_from_env
from .connectivity import ConnectivityMonitor
from .core import SyncCoordinator, SyncResult
from .database import (
    ApplicationRecord,
    ApplicationStatus,
    LocalStorageService,
    RecordStore,
    close_database,
    init_database
)
from .utils.logging import get_logger, setup_logging


class JobTrackerApp:
    """Wires the record store, remote client and coordinator together."""

    def __init__(
        self,
        database_url: Optional[str] = None,
        token: Optional[str] = None,
        online: Optional[bool] = None
    ):
        self.settings = get_settings()
        self.logger = get_logger("JobTracker")
        self.database_url = database_url
        self.token_provider: TokenProvider = StaticTokenProvider(token) if token else EnvTokenProvider()
        self.initial_online = online
        self.remote_client: Optional[GoogleSheetsClient] = None
        self.coordinator: Optional[SyncCoordinator] = None

    async def startup(self) -> SyncCoordinator:
        """Open local storage and load the cached state."""
        self.logger.info(
            "Starting job tracker",
            version=self.settings.version,
            environment=self.settings.environment
        )

        db_manager = init_database(self.database_url, create_tables=True)
        record_store = RecordStore(LocalStorageService(db_manager))

        self.remote_client = GoogleSheetsClient()
        self.coordinator = SyncCoordinator(
            record_store=record_store,
            remote_client=self.remote_client,
            connectivity=ConnectivityMonitor(initial_online=self.initial_online),
            token_provider=self.token_provider
        )
        self.coordinator.start()
        return self.coordinator

    async def shutdown(self):
        """Release network and database resources."""
        if self.remote_client:
            await self.remote_client.close()

        close_database()
        self.logger.info("Job tracker stopped")


STATUS_CHOICES = [status.value for status in ApplicationStatus]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jobtracker",
        description="Track job applications locally and sync them with a Google Sheet."
    )
    parser.add_argument("--database-url", help="SQLAlchemy URL of the local store")
    parser.add_argument("--token", help="Google OAuth bearer token (default: $JOBTRACKER_GOOGLE_TOKEN)")
    connectivity = parser.add_mutually_exclusive_group()
    connectivity.add_argument("--offline", dest="online", action="store_false", default=None,
                              help="Treat the network as unavailable")
    connectivity.add_argument("--online", dest="online", action="store_true", default=None,
                              help="Skip the reachability probe and assume the network is up")
    parser.add_argument("--log-level", help="Override the configured log level")

    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="Show cached applications")
    list_cmd.add_argument("--search", default="", help="Match company, position, source or notes")
    list_cmd.add_argument("--status", default="All", help="Only show this status")

    add_cmd = commands.add_parser("add", help="Add an application")
    add_cmd.add_argument("company")
    add_cmd.add_argument("position")
    add_cmd.add_argument("--date", required=True, help="YYYY-MM-DD")
    add_cmd.add_argument("--status", default=ApplicationStatus.APPLIED.value, choices=STATUS_CHOICES)
    add_cmd.add_argument("--source", default="")
    add_cmd.add_argument("--notes", default="")
    add_cmd.add_argument("--salary", default="")

    update_cmd = commands.add_parser("update", help="Edit fields of an application")
    update_cmd.add_argument("id", type=int)
    for name in ("company", "position", "date", "source", "notes", "salary"):
        update_cmd.add_argument(f"--{name}")
    update_cmd.add_argument("--status", choices=STATUS_CHOICES)

    status_cmd = commands.add_parser("status", help="Move an application to another stage")
    status_cmd.add_argument("id", type=int)
    status_cmd.add_argument("status", choices=STATUS_CHOICES)

    delete_cmd = commands.add_parser("delete", help="Delete an application")
    delete_cmd.add_argument("id", type=int)

    commands.add_parser("pull", help="Replace the local cache with the spreadsheet contents")
    commands.add_parser("push", help="Overwrite the spreadsheet with the local cache")
    commands.add_parser("sync", help="Push, then pull")

    configure_cmd = commands.add_parser("configure", help="Set the spreadsheet to sync with")
    configure_cmd.add_argument("--spreadsheet-id")
    configure_cmd.add_argument("--range")
    configure_cmd.add_argument("--api-key")
    source = configure_cmd.add_mutually_exclusive_group()
    source.add_argument("--from-file", help="Read settings from a YAML or JSON file")
    source.add_argument("--from-env", action="store_true",
                        help="Read settings from JOBTRACKER_SPREADSHEET_ID, JOBTRACKER_RANGE and JOBTRACKER_API_KEY")
    configure_cmd.add_argument("--save-to", help="Also write the resulting settings to a YAML or JSON file")

    import_cmd = commands.add_parser("import", help="Load applications from an exported JSON file")
    import_cmd.add_argument("path")

    export_cmd = commands.add_parser("export", help="Write applications as JSON")
    export_cmd.add_argument("path", nargs="?", default="job_applications.json",
                            help="Output file, or - for stdout")

    return parser


def format_records(records: List[ApplicationRecord]) -> str:
    if not records:
        return "No applications yet."
    lines = []
    for record in records:
        line = f"{record.id}  {record.date:<10}  {record.status.value:<20}  {record.company} - {record.position}"
        if record.salary:
            line += f"  ({record.salary})"
        lines.append(line)
    return "\n".join(lines)


def report(result: SyncResult) -> int:
    stream = sys.stdout if result.success else sys.stderr
    if result.message:
        print(result.message, file=stream)
    return 0 if result.success else 1


async def run_command(args: argparse.Namespace, coordinator: SyncCoordinator) -> int:
    if args.command == "list":
        try:
            print(format_records(coordinator.filter(args.search, args.status)))
        except ValueError as e:
            print(str(e), file=sys.stderr)
            return 2
        return 0

    if args.command == "add":
        return report(await coordinator.add_application({
            "company": args.company,
            "position": args.position,
            "date": args.date,
            "status": args.status,
            "source": args.source,
            "notes": args.notes,
            "salary": args.salary,
        }))

    if args.command == "update":
        fields = ("company", "position", "date", "status", "source", "notes", "salary")
        patch = {name: getattr(args, name) for name in fields if getattr(args, name) is not None}
        return report(await coordinator.update_application(args.id, patch))

    if args.command == "status":
        return report(await coordinator.update_status(args.id, args.status))

    if args.command == "delete":
        return report(await coordinator.delete_application(args.id))

    if args.command == "pull":
        return report(await coordinator.load_from_remote())

    if args.command == "push":
        return report(await coordinator.save_to_remote(coordinator.records))

    if args.command == "sync":
        return report(await coordinator.sync())

    if args.command == "configure":
        loader = ConfigLoader()
        if args.from_file:
            try:
                config = loader.load_from_file(args.from_file)
            except ConfigurationError as e:
                print(str(e), file=sys.stderr)
                return 2
        elif args.from_env:
            try:
                config = load_config_from_env()
            except ConfigurationError as e:
                print(str(e), file=sys.stderr)
                return 2
        else:
            current = coordinator.config
            config = SheetConfig(
                spreadsheet_id=args.spreadsheet_id if args.spreadsheet_id is not None else current.spreadsheet_id,
                range=args.range or current.range,
                api_key=args.api_key if args.api_key is not None else current.api_key
            )
        if args.save_to:
            try:
                loader.save_to_file(config, args.save_to)
            except OSError as e:
                print(f"Cannot write {args.save_to}: {e}", file=sys.stderr)
                return 2
        return report(await coordinator.configure(config))

    if args.command == "import":
        try:
            payload = Path(args.path).read_text(encoding="utf-8")
        except OSError as e:
            print(f"Cannot read {args.path}: {e}", file=sys.stderr)
            return 2
        return report(await coordinator.import_json(payload))

    if args.command == "export":
        data = coordinator.export_json()
        if args.path == "-":
            print(data)
        else:
            Path(args.path).write_text(data, encoding="utf-8")
            print(f"Exported {len(coordinator.records)} applications to {args.path}")
        return 0

    raise ValueError(f"Unknown command: {args.command}")


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(log_level=args.log_level)

    app = JobTrackerApp(database_url=args.database_url, token=args.token, online=args.online)
    coordinator = await app.startup()
    try:
        return await run_command(args, coordinator)
    finally:
        await app.shutdown()


def cli() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nInterrupted")
        sys.exit(130)


if __name__ == "__main__":
    cli()
