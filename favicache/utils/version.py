"""Build metadata served by the `/__version__` endpoint"""

import pathlib

from pydantic import BaseModel, ConfigDict, HttpUrl

VERSION_FILE_NAME: str = "version.json"


class Version(BaseModel):
    """Content of `version.json`, written at deployment time."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    source: HttpUrl
    version: str
    commit: str
    build: str


def fetch_app_version_from_file(app_root_path: pathlib.Path | None = None) -> Version:
    """Read `version.json` from `app_root_path`, the working directory by default.

    Raises:
        FileNotFoundError if the file doesn't exist.
        ValidationError if the file isn't valid JSON or doesn't match `Version`.
    """
    root = app_root_path if app_root_path is not None else pathlib.Path.cwd()
    return Version.model_validate_json((root / VERSION_FILE_NAME).read_text())
