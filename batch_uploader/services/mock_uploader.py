"""In-memory uploader for dry runs and tests."""
from typing import Dict, List, Optional
import asyncio
import logging
import re
import time

from ..errors import TransportError
from ..models import Group, UploadReceipt
logger = logging.getLogger(__name__)


class MockUploader:
    """
    Pretends to upload: waits a little, records the group and names objects.

    Implements IUploader protocol. Groups containing a file listed in
    ``fail_files`` raise TransportError, which is handy for exercising
    partial failures.
    """

    def __init__(
        self,
        delay: float = 0.02,
        fail_files: Optional[Dict[str, str]] = None,
    ):
        self._delay = delay
        self._fail_files = dict(fail_files or {})
        self.sent: List[Group] = []

    async def send(self, group: Group) -> UploadReceipt:
        await asyncio.sleep(self._delay)

        for file in group:
            if file.name in self._fail_files:
                raise TransportError(self._fail_files[file.name])

        self.sent.append(group)
        stamp = int(time.time() * 1000)
        objects = tuple(f"mock-{stamp}-{re.sub(r'[^a-zA-Z0-9.]', '_', f.name)}" for f in group)
        for name in objects:
            logger.debug(f"[Mock] stored {name}")
        return UploadReceipt(message=f"Stored {len(group)} files", objects=objects)
