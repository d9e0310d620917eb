from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from valkey_demo.config import Settings
from valkey_demo.errors import AppDirError

# Container working directory used when running outside the platform.
LOCAL_APP_DIR = Path("/app")


@dataclass(frozen=True)
class AppPaths:
    app_dir: Path

    @property
    def public_dir(self) -> Path:
        return self.app_dir / "public"


def resolve_app_dir(settings: Settings) -> Path:
    """Resolve the base directory static assets are served from.

    - Platform mode: HOME (an empty HOME means the current directory).
    - Local mode: /app.
    - APP_DIR, when set, overrides both (local testing).
    """

    try:
        app_dir = Path(settings.home or ".").resolve()
        if not settings.platform_managed:
            app_dir = LOCAL_APP_DIR.resolve()

        if settings.app_dir:
            app_dir = Path(settings.app_dir).expanduser().resolve()
    except (OSError, RuntimeError) as exc:
        raise AppDirError(f"Failed to resolve app directory: {exc}") from exc

    return app_dir


def resolve_app_paths(settings: Settings) -> AppPaths:
    return AppPaths(app_dir=resolve_app_dir(settings))
