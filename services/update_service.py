"""
Update Service - version and download descriptor for the client auto-updater
"""
import logging
from pathlib import Path
from typing import Optional

from config.settings import Settings, settings as default_settings
from models.client import UpdateInfo, VersionInfo

logger = logging.getLogger(__name__)


class UpdateService:
    """
    Describes the current update artifact. The bytes themselves are served
    by the static /updates mount.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings

    @property
    def filename(self) -> str:
        return self.settings.update_filename_template.format(version=self.settings.app_version)

    @property
    def artifact_path(self) -> Path:
        return Path(self.settings.updates_dir) / self.filename

    def current_version(self) -> VersionInfo:
        return VersionInfo(
            version=self.settings.app_version,
            latest_version=self.settings.app_version,
        )

    def download_url(self) -> str:
        if self.settings.update_download_url:
            return self.settings.update_download_url
        return f"{self.settings.public_base_url.rstrip('/')}/updates/{self.filename}"

    def artifact_size(self) -> int:
        """Size of the update file in bytes, 0 if it is missing."""
        try:
            if self.artifact_path.is_file():
                return self.artifact_path.stat().st_size
        except OSError as e:
            logger.warning(f"Could not stat update artifact {self.artifact_path}: {e}")
        return 0

    def update_metadata(self) -> UpdateInfo:
        return UpdateInfo(
            download_url=self.download_url(),
            version=self.settings.app_version,
            size=self.artifact_size(),
        )
