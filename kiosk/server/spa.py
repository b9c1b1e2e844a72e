"""
Kiosk front-end serving.

Files that exist under the public directory are served as-is; every other
GET falls back to index.html so client-side routes load the app. Nothing is
cacheable: the display must always pick up a fresh bundle.
"""

from pathlib import Path
from typing import Optional, Union
from aiohttp import web

from sdk.logging import getLogger
from kiosk.core.errors import AssetError

DEFAULT_PUBLIC_DIR = Path(__file__).parent.parent / 'public'
ENTRY_DOCUMENT = 'index.html'
NO_STORE = {'Cache-Control': 'no-store'}


class SpaServer:
    """Static asset + single-page-application fallback handler"""

    def __init__(self, publicDir: Optional[Union[str, Path]] = None):
        self.publicDir = Path(publicDir or DEFAULT_PUBLIC_DIR).resolve()
        self.log = getLogger()

    @property
    def entryPath(self) -> Path:
        return self.publicDir / ENTRY_DOCUMENT

    def verify(self):
        """Startup check: the entry document must exist"""
        if not self.entryPath.is_file():
            raise AssetError(f"Kiosk entry document not found: {self.entryPath}")

    def resolveAsset(self, relPath: str) -> Optional[Path]:
        """
        Map a request path to a file in the public directory.

        Returns None when nothing matches (caller falls back to the entry
        document). Raises HTTPNotFound for paths escaping the directory.
        """
        relPath = relPath.lstrip('/')
        if not relPath:
            return None
        candidate = (self.publicDir / relPath).resolve()
        if not candidate.is_relative_to(self.publicDir):
            self.log.warning("[SPA] Rejected path outside public dir", path=relPath)
            raise web.HTTPNotFound(headers=NO_STORE)
        return candidate if candidate.is_file() else None

    async def handle(self, request: web.Request) -> web.StreamResponse:
        asset = self.resolveAsset(request.match_info.get('tail', ''))
        return web.FileResponse(asset or self.entryPath, headers=NO_STORE)
