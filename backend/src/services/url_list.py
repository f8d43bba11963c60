"""Default URL list loaded once at process start."""
from pathlib import Path
from typing import Iterable, Tuple, Union

from ..exceptions import URLListError
from ..utils.logger import logger


def parse_url_list(lines: Iterable[str]) -> Tuple[str, ...]:
    """Parse one URL per line, ignoring blank lines.

    Args:
        lines: Raw lines of the list file

    Returns:
        URLs in file order
    """
    return tuple(line.strip() for line in lines if line.strip())


def load_url_list(path: Union[str, Path]) -> Tuple[str, ...]:
    """Read the default URL list from disk.

    Args:
        path: Path to the list file

    Returns:
        Immutable tuple of URLs

    Raises:
        URLListError: If the file cannot be read
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            urls = parse_url_list(f)
    except (OSError, UnicodeDecodeError) as e:
        raise URLListError(f"Failed to load URL list {path}: {e}") from e

    logger.info(f"Loaded {len(urls)} URLs from {path}")
    return urls
