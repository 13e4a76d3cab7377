"""
=============================================================================
FILE ENDPOINTS
=============================================================================

Read and write files under the served directory.

    GET  /files/<name>   → 200 application/octet-stream with the file bytes
                           404 if it cannot be read
    POST /files/<name>   → 201 after writing the request body to the file
                           404 if it cannot be written

Any filesystem failure (missing file, permission denied, target is a
directory, missing parent directory, no served directory configured) is
reported as an empty 404. Nothing is escalated beyond the request.

=============================================================================
KNOWN GAPS
=============================================================================

- <name> is joined onto the served directory as-is. There is no
  path-traversal protection: "/files/../secret" reaches outside the root.
- There is no locking. Concurrent writes to the same name race (last
  writer wins) and a read during a write may see a partial file.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Optional

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, OCTET_STREAM, created, not_found, ok


logger = logging.getLogger(__name__)


class FileHandler:
    """
    Handler pair for the /files/ routes.

        files = FileHandler("/tmp/data")
        router.get("/files/*filename")(files.read)
        router.post("/files/*filename")(files.write)
    """

    def __init__(self, directory: Optional[str]):
        """
        Args:
            directory: Served directory. None or "" leaves the handler
                       unusable: every request answers 404.
        """
        self.directory = Path(directory) if directory else None

    def resolve(self, filename: str) -> Optional[Path]:
        """Filesystem path for a requested name, or None if unconfigured."""
        if self.directory is None or not filename:
            return None
        return self.directory / filename

    def read(self, request: HTTPRequest) -> HTTPResponse:
        path = self.resolve(request.path_params.get("filename", ""))
        if path is None:
            return not_found()

        try:
            content = path.read_bytes()
        except (OSError, ValueError) as e:  # ValueError: NUL byte in the name
            logger.warning(f"Cannot read {path}: {e}")
            return not_found()

        return ok(content, OCTET_STREAM)

    def write(self, request: HTTPRequest) -> HTTPResponse:
        path = self.resolve(request.path_params.get("filename", ""))
        if path is None:
            return not_found()

        try:
            path.write_bytes(request.body)
        except (OSError, ValueError) as e:  # ValueError: NUL byte in the name
            logger.warning(f"Cannot write {path}: {e}")
            return not_found()

        logger.debug(f"Wrote {len(request.body)} bytes to {path}")
        return created()
