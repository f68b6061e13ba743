import os
import re
from typing import Dict, Optional

from econ_pipeline.exceptions import ExportError
from econ_pipeline.logging_config import create_logger

logger = create_logger(__name__)


# File path and naming utilities
def get_filename_from_path(file_path: str) -> str:
    """Extract filename from a given file path.

    Args:
        file_path: Full path to the file

    Returns:
        Extracted filename without extension
    """
    return os.path.splitext(os.path.basename(file_path))[0]


def collect_file_paths(directory: str, file_extension: str) -> Dict[str, str]:
    """Collect file paths for a specific file extension in a directory.

    Args:
        directory: Directory to search for files
        file_extension: File extension to filter (e.g., '.csv')

    Returns:
        Dictionary mapping filenames (without extension) to full file paths
    """
    file_paths: Dict[str, str] = {}
    for root, dirs, files in os.walk(directory):
        dirs.sort()
        for file in sorted(files):
            if file.endswith(file_extension):
                file_paths.setdefault(get_filename_from_path(file), os.path.join(root, file))
    return file_paths


def find_world_bank_export(directory: str, indicator_code: str) -> Optional[str]:
    """Locate the World Bank download for an indicator code.

    Downloads are named ``API_<code>_DS2_<lang>_csv_v2_<id>.csv``; the
    ``Metadata_*`` files shipped in the same archive are ignored. The code
    must match exactly, so ``FP.CPI.TOTL`` does not pick up
    ``FP.CPI.TOTL.ZG``.

    Args:
        directory: Directory searched recursively
        indicator_code: World Bank series code, e.g. ``NY.GDP.MKTP.CD``

    Returns:
        Path to the first matching file, or None
    """
    if not os.path.isdir(directory):
        return None

    pattern = re.compile(rf"^API_{re.escape(indicator_code)}(?:_|$)")
    for filename, path in collect_file_paths(directory, ".csv").items():
        if pattern.match(filename):
            return path
    return None


def sidecar_path(output_path: str, suffix: str) -> str:
    """Derive a sidecar file name: ``economic_data.csv`` -> ``economic_data<suffix>``.

    Args:
        output_path: Path of the main CSV output
        suffix: Replacement for the trailing ``.csv``, e.g. ``_summary.csv``
    """
    return re.sub(r"\.csv$", suffix, output_path)


def ensure_directory(directory: str) -> None:
    """Create ``directory`` if needed.

    Raises:
        ExportError: If the directory cannot be created
    """
    if not directory or os.path.isdir(directory):
        return
    try:
        os.makedirs(directory, exist_ok=True)
    except OSError as e:
        raise ExportError(f"Unable to create output directory {directory}: {e}") from e
    logger.info(f"Created output directory: {directory}")


def file_size_mb(file_path: str) -> float:
    """Size of a file in megabytes, rounded to 2 decimals."""
    return round(os.path.getsize(file_path) / (1024 * 1024), 2)
