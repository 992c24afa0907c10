"""Export a Resolution to JSON or CSV files."""

import csv
import json
import logging

from .resolution import Resolution

logger = logging.getLogger(__name__)

CSV_HEADERS = [
    "kind",
    "requirement",
    "version_range",
    "optional",
    "provider",
    "provider_version",
    "synchronized",
]


def export_json(resolution: Resolution, path: str) -> None:
    """Exports the resolution to a JSON file.

    Args:
        resolution (Resolution): Resolution to export.
        path (str): File path to export the JSON.
    """
    data = resolution.to_dict()
    try:
        with open(path, "w", encoding="utf-8") as file:
            json.dump(data, file, ensure_ascii=False, indent=4)
        logger.info("JSON file saved successfully: %s", path)
    except OSError as e:
        logger.error("Error writing JSON file %s: %s", path, e)
        raise


def export_csv(resolution: Resolution, path: str) -> None:
    """Exports the resolution to a CSV file, one row per satisfied requirement.

    Args:
        resolution (Resolution): Resolution to export.
        path (str): File path to export the CSV.
    """
    rows = resolution.to_dict()["resolved"]
    try:
        with open(path, "w", newline="", encoding="utf-8") as file:
            writer = csv.DictWriter(file, fieldnames=CSV_HEADERS)
            writer.writeheader()
            for row in rows:
                writer.writerow({key: "" if row[key] is None else row[key] for key in CSV_HEADERS})
        logger.info("CSV file saved successfully: %s", path)
    except OSError as e:
        logger.error("Error writing CSV file %s: %s", path, e)
        raise
