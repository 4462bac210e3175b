import datetime
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class FileManager:
    """Writes file entry payloads to disk so they can be put on the clipboard as file references."""

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def save_file(self, payload: bytes, file_name: Optional[str]) -> Optional[Path]:
        try:
            # strip any directory part coming from the stored display name
            safe_name = Path(file_name or "").name or "unknown_file"
            file_path = self.base_dir / safe_name

            counter = 1
            original_stem = file_path.stem
            original_suffix = file_path.suffix
            while file_path.exists():
                file_path = self.base_dir / \
                    f"{original_stem}_{counter}{original_suffix}"
                counter += 1

            file_path.write_bytes(payload)
            logger.info("Saved file to %s", file_path)
            return file_path
        except OSError as e:
            logger.error("Failed to save file: %s", e)
            return None

    def cleanup_old_files(self, max_age_hours: int = 24) -> int:
        removed = 0
        try:
            now = datetime.datetime.now()
            for file_path in self.base_dir.iterdir():
                if file_path.is_file():
                    file_age = now - \
                        datetime.datetime.fromtimestamp(
                            file_path.stat().st_mtime)
                    if file_age.total_seconds() > max_age_hours * 3600:
                        file_path.unlink()
                        removed += 1
                        logger.info("Cleaned up old file: %s", file_path)
        except OSError as e:
            logger.error("Cleanup error: %s", e)
        return removed
