"""
Local file storage.

Per-run output folders under a dated directory, plus image, audio, video and
metadata persistence.
"""

import asyncio
import json
import secrets
import time
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

import httpx

from shared.clients import ServiceClients
from shared.errors import GenerationError, StorageError
from shared.logging import get_logger
from shared.models.metadata import GenerationMetadata

logger = get_logger("storage")

DOWNLOAD_CHUNK_SIZE = 1024 * 1024

PathLike = Union[str, Path]


class StorageLayer:
    """Creates run folders and persists run artifacts."""

    def __init__(self, base_path: PathLike, http: Optional[httpx.AsyncClient] = None):
        """
        Initialize storage.

        Args:
            base_path: Output root
            http: Async HTTP client used for downloads
        """
        self.base_path = Path(base_path).expanduser()
        self._http = http

    @classmethod
    def from_clients(cls, clients: ServiceClients) -> "StorageLayer":
        return cls(clients.settings.resolve_output_path(), http=clients.http)

    def create_output_folder(self, now: Optional[datetime] = None) -> Path:
        """
        Create a unique folder for one run: <base>/YYYY-MM-DD/generation_<timestamp>_<suffix>.

        Raises:
            StorageError: If the folder cannot be created
        """
        now = now or datetime.now()
        folder = (
            self.base_path
            / now.strftime("%Y-%m-%d")
            / f"generation_{now.strftime('%Y-%m-%d_%H-%M-%S')}_{secrets.token_hex(3)}"
        )
        try:
            folder.mkdir(parents=True, exist_ok=False)
        except OSError as e:
            raise StorageError(f"Failed to create output folder {folder}: {str(e)}") from e

        logger.info(f"Created output folder: {folder}")
        return folder

    def save_bytes(self, folder: PathLike, filename: str, data: bytes) -> Path:
        """
        Write raw bytes into a run folder.

        Raises:
            StorageError: If the file cannot be written
        """
        path = Path(folder) / filename
        try:
            path.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {str(e)}") from e
        logger.debug(f"Saved {filename} ({len(data)} bytes)")
        return path

    def save_image_file(self, folder: PathLike, filename: str, image: bytes) -> Path:
        return self.save_bytes(folder, filename, image)

    def save_audio_file(self, folder: PathLike, filename: str, audio: bytes) -> Path:
        return self.save_bytes(folder, filename, audio)

    async def download_video(self, url: str, folder: PathLike, filename: str) -> Path:
        """
        Stream a remote video into a run folder.

        Raises:
            GenerationError: If the download fails (partial file is removed)
            StorageError: If the file cannot be written
        """
        if self._http is None:
            raise StorageError("Video download requires an HTTP client")

        path = Path(folder) / filename
        loop = asyncio.get_running_loop()
        start = time.monotonic()
        try:
            async with self._http.stream("GET", url) as response:
                if response.status_code >= 400:
                    raise GenerationError(f"Video download failed: HTTP {response.status_code}")
                with open(path, "wb") as f:
                    async for chunk in response.aiter_bytes(DOWNLOAD_CHUNK_SIZE):
                        await loop.run_in_executor(None, f.write, chunk)
        except httpx.HTTPError as e:
            path.unlink(missing_ok=True)
            raise GenerationError(f"Video download failed: {str(e)}") from e
        except OSError as e:
            path.unlink(missing_ok=True)
            raise StorageError(f"Failed to write {path}: {str(e)}") from e
        except GenerationError:
            path.unlink(missing_ok=True)
            raise

        logger.info(
            f"Downloaded video to {path.name}",
            extra={"bytes": path.stat().st_size, "elapsed_s": round(time.monotonic() - start, 2)}
        )
        return path

    def save_metadata(self, folder: PathLike, metadata: GenerationMetadata) -> Path:
        """
        Write metadata_<ms>.json into a run folder.

        Raises:
            StorageError: If the file cannot be written
        """
        path = Path(folder) / f"metadata_{int(time.time() * 1000)}.json"
        try:
            path.write_text(json.dumps(metadata.to_record(), indent=2), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to write metadata {path}: {str(e)}") from e
        logger.info(f"Saved metadata: {path.name}")
        return path

    def load_metadata(self, path: PathLike) -> GenerationMetadata:
        """
        Raises:
            StorageError: If the file is missing or not a valid metadata record
        """
        try:
            return GenerationMetadata.model_validate_json(Path(path).read_text(encoding="utf-8"))
        except OSError as e:
            raise StorageError(f"Failed to read metadata {path}: {str(e)}") from e
        except ValueError as e:
            raise StorageError(f"Invalid metadata in {path}: {str(e)}") from e

    def list_metadata_files(self, folder: PathLike) -> List[Path]:
        folder = Path(folder)
        if not folder.is_dir():
            return []
        return sorted(folder.glob("metadata_*.json"))
