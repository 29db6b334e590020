import asyncio
import base64
import logging
from typing import Optional

from config.backend import BackendConfig
from registration.schema import PhotoUpload

logger = logging.getLogger(__name__)


def to_data_uri(upload: PhotoUpload) -> str:
    encoded = base64.b64encode(upload.content).decode("ascii")
    return f"data:{upload.content_type};base64,{encoded}"


class PhotoField:
    """
    Holds the single optional photo of a form session together with its
    preview. The value is set synchronously; the preview of a freshly
    selected file is encoded in a background task owned by this field.
    """

    def __init__(self, config: BackendConfig):
        self.config = config
        self.value: Optional[PhotoUpload] = None
        self.preview: Optional[str] = None
        self._task: Optional[asyncio.Task] = None
        self._closed = False

    def select(self, upload: PhotoUpload) -> None:
        """Must be called from inside the running event loop."""
        self._cancel()
        self.value = upload
        self.preview = None
        self._task = asyncio.get_running_loop().create_task(self._read_preview(upload))

    def clear(self) -> None:
        self._cancel()
        self.value = None
        self.preview = None

    def show_existing(self, reference: Optional[str]) -> None:
        """Preview a photo already stored by the backend until a new file is selected."""
        if self.value is not None:
            return
        self.preview = self.config.photo_url(reference)

    async def wait_preview(self) -> Optional[str]:
        task = self._task
        if task is not None:
            await asyncio.wait([task])
        return self.preview

    def close(self) -> None:
        self._closed = True
        self._cancel()

    def _cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _read_preview(self, upload: PhotoUpload) -> None:
        uri = await asyncio.to_thread(to_data_uri, upload)
        if self._closed or self.value is not upload:
            logger.debug(f"Discarding stale preview for {upload.filename}")
            return
        self.preview = uri
