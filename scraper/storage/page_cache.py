"""
Content-addressed on-disk cache for raw page markup.
"""

import hashlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Union

from ..errors import CacheMissError, FilesystemError, ParseError


class PageCache:
    """
    Maps URLs to files under ``<base_dir>/cache``.

    Each entry is stored at ``cache/<hh>/page_<sha256>.html`` where the hash
    is taken over the UTF-8 bytes of the URL and ``hh`` is its first two
    hex characters. Writes go to a temporary file in the target directory
    and are moved into place with ``os.replace``, so a path that exists
    always holds a complete page.
    """

    CACHE_DIRNAME = 'cache'
    FILE_PREFIX = 'page_'
    FILE_EXTENSION = '.html'

    def __init__(self, base_dir: Union[str, Path]):
        self.base_dir = Path(base_dir)
        self.cache_dir = self.base_dir / self.CACHE_DIRNAME
        self.logger = logging.getLogger(__name__)
        self.stats = {
            'reads': 0,
            'writes': 0,
            'bytes_written': 0
        }

    def path_for(self, url: str) -> Path:
        """Derive the cache file path for a URL."""
        url_hash = hashlib.sha256(url.encode('utf-8')).hexdigest()
        subdir = url_hash[:2]
        return self.cache_dir / subdir / f"{self.FILE_PREFIX}{url_hash}{self.FILE_EXTENSION}"

    def exists(self, url: str) -> bool:
        """Check whether a cached copy exists for the URL."""
        return self.path_for(url).is_file()

    async def read(self, url: str) -> str:
        """Read cached markup for a URL."""
        file_path = self.path_for(url)

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise CacheMissError(url)
        except UnicodeDecodeError as e:
            raise ParseError(url, f"Cached content is not valid UTF-8: {e}") from e
        except OSError as e:
            raise FilesystemError(file_path, str(e)) from e

        self.stats['reads'] += 1
        self.logger.debug(f"Read {len(content)} chars from cache for {url}")
        return content

    async def write(self, url: str, content: str) -> Path:
        """
        Persist raw markup for a URL.

        Args:
            url: The (already rewritten) URL the content was fetched from
            content: Raw page markup

        Returns:
            Path of the cache file
        """
        file_path = self.path_for(url)
        data = content.encode('utf-8')

        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                prefix=f".{file_path.stem}.", suffix='.tmp', dir=file_path.parent
            )
        except OSError as e:
            raise FilesystemError(file_path.parent, str(e)) from e

        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
            os.replace(temp_path, file_path)
        except OSError as e:
            try:
                os.unlink(temp_path)
            except FileNotFoundError:
                pass
            raise FilesystemError(file_path, str(e)) from e

        self.stats['writes'] += 1
        self.stats['bytes_written'] += len(data)
        self.logger.debug(f"Cached {url} at {file_path}")
        return file_path

    def get_stats(self) -> Dict[str, int]:
        """Get cache statistics."""
        return self.stats.copy()
