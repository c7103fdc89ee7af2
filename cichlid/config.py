"""
Runtime configuration for the cache purger.

Centralises all environment variable names, default cache roots,
and root validation.  Uses ``pydantic_settings.BaseSettings`` for
automatic environment variable binding, type coercion, and
validation.  The CLI loads a ``.env`` file before reading settings.
"""

from __future__ import annotations

import pathlib

import pydantic
import pydantic_settings

from cichlid.utils import errors

# ── Defaults ────────────────────────────────────────────────────
XCODE_DEVELOPER_DIR = pathlib.Path("Library") / "Developer" / "Xcode"
DEFAULT_HOST_APP = "Xcode"


def _default_derived_data() -> pathlib.Path:
    return pathlib.Path.home() / XCODE_DEVELOPER_DIR / "DerivedData"


def _default_archives() -> pathlib.Path:
    return pathlib.Path.home() / XCODE_DEVELOPER_DIR / "Archives"


class CichlidSettings(pydantic_settings.BaseSettings):
    """Settings for cache locations and automatic purging.

    Attributes:
        derived_data_path: Root holding per-project derived data.
        archives_path: Root holding dated archive folders.
        auto_purge: Purge derived data after a clean build.
        notify_auto_purge: Show a notice after an automatic purge.
        host_app_name: Host application the plugin arms inside.
        current_project: Project name used when no host is present.
    """

    model_config = pydantic_settings.SettingsConfigDict(populate_by_name=True, extra="ignore")

    derived_data_path: pathlib.Path = pydantic.Field(
        default_factory=_default_derived_data,
        validation_alias="CICHLID_DERIVED_DATA_PATH",
    )
    archives_path: pathlib.Path = pydantic.Field(
        default_factory=_default_archives,
        validation_alias="CICHLID_ARCHIVES_PATH",
    )
    auto_purge: bool = pydantic.Field(default=True, validation_alias="CICHLID_AUTO_PURGE")
    notify_auto_purge: bool = pydantic.Field(default=True, validation_alias="CICHLID_NOTIFY_AUTO_PURGE")
    host_app_name: str = pydantic.Field(default=DEFAULT_HOST_APP, validation_alias="CICHLID_HOST_APP")
    current_project: str | None = pydantic.Field(default=None, validation_alias="CICHLID_PROJECT")

    @pydantic.field_validator("derived_data_path", "archives_path", mode="after")
    @classmethod
    def _check_root(cls, value: pathlib.Path) -> pathlib.Path:
        """Expand ``~`` and reject roots whose purge would be catastrophic."""
        path = value.expanduser().absolute()
        if path == pathlib.Path(path.anchor):
            raise errors.ConfigurationError(f"Cache root cannot be a filesystem root: {path}")
        home = pathlib.Path.home().absolute()
        if path == home:
            raise errors.ConfigurationError(f"Cache root cannot be the home directory: {path}")
        if path in home.parents:
            raise errors.ConfigurationError(f"Cache root cannot contain the home directory: {path}")
        return path
