from prefilter.logging.logger import Log
from prefilter.processor.exceptions import DataUnavailable
from prefilter.processor.models import Screenshot


class ImageSource:
    """Obtains the encoded image bytes for a screenshot."""

    def load(self, screenshot: Screenshot) -> bytes:
        """Return in-memory bytes if present, else the file contents.

        Raises:
            DataUnavailable: if there are no bytes and no readable file.
        """
        if screenshot.image_bytes:
            return screenshot.image_bytes
        path = screenshot.file_path
        if path is None:
            raise DataUnavailable(f"Screenshot {screenshot.id} has no image data")
        if not path.is_file():
            raise DataUnavailable(f"File not found for screenshot {screenshot.id}: {path}")
        try:
            data = path.read_bytes()
        except OSError as exc:
            Log.error(f"Error reading screenshot file {path}: {exc}")
            raise DataUnavailable(f"Cannot read {path}: {exc}") from exc
        if not data:
            raise DataUnavailable(f"File for screenshot {screenshot.id} is empty: {path}")
        return data
