"""
GallerySync Client - CLI Mode Module

Implements the command-line interface: run a sync round, show sync
status, list or show images from the local replica or the server, and
record local edits or removals. Server operations check /health first.
Logs to a timestamped file as well as the console.

Author: GallerySync Project
"""

import sys
import logging
from pathlib import Path
from datetime import datetime
from typing import Optional

from gallerysync_client.managers import ConfigManager
from gallerysync_client.api import GallerySyncAPI
from gallerysync_client.exceptions import GallerySyncAPIError, GallerySyncDataError, GallerySyncServerError
from gallerysync_client.operations import SyncOperations
from gallerysync_client.storage import JsonFileStorage, LocalReplica


# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2
EXIT_NOT_FOUND = 3
EXIT_SERVER_ERROR = 4


def setup_cli_logging(config_manager: ConfigManager) -> Path:
    """
    Setup logging for CLI mode with timestamped log file.

    Creates log file with format: gallerysync-YYYY-MM-DD-HH-MM-SS.log
    in a "logs" subdirectory next to config.json.

    Args:
        config_manager: ConfigManager instance for log settings

    Returns:
        Path to the created log file
    """
    log_level = config_manager.get("log_level", "INFO")

    timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
    log_dir = config_manager.base_dir / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"gallerysync-{timestamp}.log"

    logging.basicConfig(
        level=getattr(logging, str(log_level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(sys.stdout)  # Also output to console
        ]
    )

    logger = logging.getLogger(__name__)
    logger.info(f"GallerySync CLI Mode - Log file: {log_file}")
    logger.info(f"Log level: {log_level}")

    return log_file


def cleanup_old_logs(config_manager: ConfigManager, current_log: Path):
    """
    Delete log files older than retention period.

    Args:
        config_manager: ConfigManager instance for retention settings
        current_log: Path to current log file (don't delete this)
    """
    logger = logging.getLogger(__name__)
    retention_days = config_manager.get("log_retention_days", 30)

    if retention_days <= 0:
        return  # Retention disabled

    log_dir = current_log.parent
    cutoff_time = datetime.now().timestamp() - (retention_days * 86400)

    deleted_count = 0
    for log_file in log_dir.glob("gallerysync-*.log"):
        if log_file == current_log:
            continue

        try:
            if log_file.stat().st_mtime < cutoff_time:
                log_file.unlink()
                deleted_count += 1
        except OSError as e:
            logger.warning(f"Failed to delete old log file {log_file}: {e}")

    if deleted_count > 0:
        logger.info(f"Deleted {deleted_count} old log file(s)")


def build_replica(config_manager: ConfigManager) -> LocalReplica:
    """Open the local replica in the configured data directory."""
    return LocalReplica(JsonFileStorage(config_manager.get_data_dir()))


def build_api_client(config_manager: ConfigManager) -> GallerySyncAPI:
    return GallerySyncAPI(
        config_manager.get("server_url"),
        config_manager.get("server_port"),
        verify_ssl=config_manager.get("verify_ssl", True),
        timeout=config_manager.get("request_timeout", 30)
    )


def format_timestamp(millis: Optional[int]) -> str:
    if millis is None:
        return "never"
    return datetime.fromtimestamp(millis / 1000).strftime("%Y-%m-%d %H:%M:%S")


def check_server(api_client: GallerySyncAPI) -> bool:
    """Confirm the server answers its health check before operating."""
    logger = logging.getLogger(__name__)
    try:
        health = api_client.health()
    except GallerySyncAPIError as e:
        logger.error(f"Server unavailable at {api_client.base_url}: {e}")
        return False
    if isinstance(health, dict) and health.get("version"):
        logger.info(f"Server at {api_client.base_url} is up (version {health['version']})")
    else:
        logger.info(f"Server at {api_client.base_url} is up")
    return True


def run_sync(config_manager: ConfigManager, replica: LocalReplica) -> int:
    """Run one reconciliation round and report the counts."""
    logger = logging.getLogger(__name__)

    api_client = build_api_client(config_manager)
    try:
        if not check_server(api_client):
            return EXIT_SERVER_ERROR

        sync_ops = SyncOperations(api_client, replica)

        def cli_progress_callback(message: str, current: int, total: int):
            if total > 0:
                percentage = (current / total) * 100
                logger.info(f"[{percentage:5.1f}%] {message}")
            else:
                logger.info(message)

        result = sync_ops.run_sync(cli_progress_callback)
    finally:
        api_client.close()

    if result.success:
        logger.info("=" * 60)
        logger.info(
            f"SYNC COMPLETED: {result.downloaded} downloaded, "
            f"{result.uploaded} uploaded, {result.conflicts} conflicts"
        )
        logger.info("=" * 60)
        return EXIT_SUCCESS

    logger.error("=" * 60)
    logger.error(f"SYNC FAILED: {result.error}")
    logger.error("=" * 60)
    return EXIT_FAILURE


def show_status(replica: LocalReplica) -> int:
    summary = replica.status_summary()
    print(f"Images:    {summary.total}")
    print(f"Pending:   {summary.pending}")
    print(f"Conflicts: {summary.conflicts}")
    print(f"Last sync: {format_timestamp(summary.last_sync)}")
    return EXIT_SUCCESS


def list_images(replica: LocalReplica) -> int:
    for record in sorted(replica.load_all(), key=lambda r: r.id):
        print(f"{record.id:>6}  {record.sync_status.value:<8}  {format_timestamp(record.last_modified)}  {record.filename}")
    return EXIT_SUCCESS


def list_remote_images(config_manager: ConfigManager) -> int:
    """Print the server catalog, newest first, without touching the replica."""
    api_client = build_api_client(config_manager)
    try:
        if not check_server(api_client):
            return EXIT_SERVER_ERROR
        images = api_client.list_images()
    finally:
        api_client.close()

    for image in images:
        print(f"{image.id:>6}  {image.updated_at or '-':<24}  {image.filename}")
    return EXIT_SUCCESS


def print_image(record) -> None:
    print(f"Id:        {record.id}")
    print(f"Filename:  {record.filename}")
    print(f"Size:      {record.size if record.size is not None else '-'}")
    print(f"Mimetype:  {record.mimetype}")
    print(f"Created:   {record.created_at or '-'}")
    print(f"Updated:   {record.updated_at or '-'}")
    print(f"Thumbnail: {record.thumbnail}")


def show_image(config_manager: ConfigManager, replica: LocalReplica,
               image_id: int, remote: bool = False) -> int:
    """
    Print one image's metadata from the replica, or from the server with remote.

    A missing image exits with EXIT_NOT_FOUND either way.
    """
    logger = logging.getLogger(__name__)

    if not remote:
        record = replica.get(image_id)
        if record is None:
            logger.error(f"Image {image_id} is not in the local replica")
            return EXIT_NOT_FOUND
        print_image(record)
        print(f"Status:    {record.sync_status.value}")
        print(f"Modified:  {format_timestamp(record.last_modified)}")
        return EXIT_SUCCESS

    api_client = build_api_client(config_manager)
    try:
        if not check_server(api_client):
            return EXIT_SERVER_ERROR
        try:
            image = api_client.get_image(image_id)
        except GallerySyncServerError as e:
            if e.status_code == 404:
                logger.error(f"Image {image_id} is not on the server")
                return EXIT_NOT_FOUND
            raise
    finally:
        api_client.close()

    print_image(image)
    return EXIT_SUCCESS


def run_cli_operation(operation: str, image_id: Optional[int] = None,
                      config_manager: Optional[ConfigManager] = None,
                      remote: bool = False) -> int:
    """
    Execute CLI operation.

    Args:
        operation: "sync", "status", "list", "show", "pending" or "remove"
        image_id: Target image for "show", "pending" and "remove"
        config_manager: Preloaded configuration (loaded from disk if omitted)
        remote: For "list" and "show", read the server catalog instead of the replica

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    logger = None

    try:
        if config_manager is None:
            config_manager = ConfigManager()
            try:
                config_manager.load_config()
            except GallerySyncDataError as e:
                print(f"Configuration error: {e}", file=sys.stderr)
                return EXIT_CONFIG_ERROR
        log_file = setup_cli_logging(config_manager)
        logger = logging.getLogger(__name__)

        cleanup_old_logs(config_manager, log_file)

        replica = build_replica(config_manager)
        logger.info(f"Local replica: {config_manager.get_data_dir()}")

        if operation == "sync":
            return run_sync(config_manager, replica)
        elif operation == "status":
            return show_status(replica)
        elif operation == "list":
            if remote:
                return list_remote_images(config_manager)
            return list_images(replica)
        elif operation in ("show", "pending", "remove"):
            if image_id is None:
                logger.error(f"'{operation}' requires an image id")
                return EXIT_CONFIG_ERROR
            if operation == "show":
                return show_image(config_manager, replica, image_id, remote)
            if operation == "pending":
                found = replica.mark_pending(image_id)
            else:
                found = replica.remove(image_id)
            if not found:
                logger.error(f"Image {image_id} is not in the local replica")
                return EXIT_NOT_FOUND
            logger.info(f"Image {image_id}: {operation} recorded")
            return EXIT_SUCCESS
        else:
            logger.error(f"Unknown operation: {operation}")
            return EXIT_FAILURE

    except GallerySyncAPIError as e:
        if logger:
            logger.error(f"API Error: {e}")
        else:
            print(f"API Error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    except KeyboardInterrupt:
        if logger:
            logger.warning("Operation cancelled by user (Ctrl+C)")
        else:
            print("\nOperation cancelled by user", file=sys.stderr)
        return EXIT_FAILURE

    except Exception as e:
        if logger:
            logger.exception(f"Unexpected error: {e}")
        else:
            print(f"Unexpected error: {e}", file=sys.stderr)
        return EXIT_FAILURE
