"""Bundle resolver CLI: resolve a workspace project against its repositories.

    Returns:
        int: Exit code
"""
import logging
import os
import signal
import sys
import threading

from args import parse_args
from cli_config import build_resolution_config, find_config_file, load_config
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes, OutputFormats
from model.elements import describe
from repository.workspace import WorkspaceError, load_workspace
from resolution import BundleResolver, LoggingResolutionMonitor, ProgressMonitor, ResolutionError
from resolution.export import export_csv, export_json

logger = logging.getLogger(__name__)


def _setup_logging(args) -> None:
    """Configure logging from CLI arguments; the CLI level wins over the environment."""
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging()

    level_name = str(getattr(args, "LOG_LEVEL", "INFO")).upper()
    logging.getLogger().setLevel(getattr(logging, level_name, logging.INFO))

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        ))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def output_format(args) -> str:
    """Explicit --format, else inferred from the --output extension, else json."""
    fmt = getattr(args, "OUTPUT_FORMAT", None)
    if fmt:
        return fmt
    output = getattr(args, "OUTPUT", None) or ""
    if output.lower().endswith(".csv"):
        return OutputFormats.CSV.value
    return OutputFormats.JSON.value


def print_summary(resolution, stream=None) -> None:
    """Write one ``requirement -> provider`` line per satisfied requirement."""
    stream = stream or sys.stdout
    for requirement in resolution.requirements():
        provider = resolution.get_provider(requirement)
        stream.write(f"{describe(requirement)} -> {describe(provider)}\n")


def resolve_workspace(workspace, config, monitor):
    """Resolve the workspace project; SIGINT cancels the search softly."""
    resolver = BundleResolver(workspace.manager)
    previous = None
    install_handler = threading.current_thread() is threading.main_thread()
    if install_handler:
        previous = signal.signal(signal.SIGINT, lambda signum, frame: monitor.cancel())
    try:
        return resolver.resolve(workspace.project, config, monitor)
    finally:
        if install_handler:
            signal.signal(signal.SIGINT, previous)


def run(args) -> int:
    """Run the CLI for parsed ``args`` and return the exit code."""
    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="run")
        )

    try:
        workspace = load_workspace(args.WORKSPACE)
    except WorkspaceError as e:
        logger.error("%s", e)
        return ExitCodes.FILE_ERROR.value

    config = build_resolution_config(args, load_config(find_config_file(getattr(args, "CONFIG", None))))
    monitor = LoggingResolutionMonitor()

    try:
        resolution = resolve_workspace(workspace, config, monitor)
    except ResolutionError as e:
        logger.error("%s", e)
        for depth, requirement in enumerate(e.trace):
            logger.error("%s%s", "  " * depth, describe(requirement))
        return ExitCodes.RESOLUTION_FAILED.value

    if monitor.is_cancelled():
        logger.warning("Resolution was cancelled; results may be incomplete.")
    logger.info(
        "Resolved %d requirements using %d bundles.",
        len(resolution),
        len(resolution.bundles()),
    )

    if not getattr(args, "QUIET", False):
        print_summary(resolution)

    if getattr(args, "OUTPUT", None):
        try:
            if output_format(args) == OutputFormats.CSV.value:
                export_csv(resolution, args.OUTPUT)
            else:
                export_json(resolution, args.OUTPUT)
        except OSError:
            return ExitCodes.FILE_ERROR.value

    if getattr(args, "SYNC", False):
        resolution.synchronize_all(ProgressMonitor())
        if not resolution.is_fully_synchronized():
            logger.warning("Not every resolved bundle could be synchronized.")
            return ExitCodes.SYNC_INCOMPLETE.value

    return ExitCodes.SUCCESS.value


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
