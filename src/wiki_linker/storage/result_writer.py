import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from wiki_linker.models import SearchResult


def result_filename(moment: datetime) -> str:
    """File name for a listing written at ``moment``, e.g. ``link_dated_2024-3-7_9-5-12.txt``."""
    return (
        f"link_dated_{moment.year}-{moment.month}-{moment.day}_"
        f"{moment.hour}-{moment.minute}-{moment.second}.txt"
    )


class ResultWriter:
    """Writes search result listings to timestamped text files."""

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)
        self.logger = logging.getLogger(__name__)

    def _ensure_output_directory(self):
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def write(self, result: SearchResult, moment: Optional[datetime] = None) -> Path:
        """Write the result listing and return the path of the new file."""
        moment = moment or datetime.now(timezone.utc)
        self._ensure_output_directory()
        path = self.output_dir / result_filename(moment)

        with open(path, "w", encoding="utf-8") as f:
            for line in result.lines():
                f.write(line + "\n")

        self.logger.info(f"Stored {len(result.paths)} path(s) in {path}")
        return path
