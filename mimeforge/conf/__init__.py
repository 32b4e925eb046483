from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any, cast

from monkay import Monkay

if TYPE_CHECKING:
    from mimeforge.conf.global_settings import Settings

ENVIRONMENT_VARIABLE = "MIMEFORGE_SETTINGS_MODULE"

_monkay: Monkay[Any, Settings] = Monkay(
    globals(),
    settings_path=lambda: os.environ.get(
        ENVIRONMENT_VARIABLE, "mimeforge.conf.global_settings.Settings"
    ),
)


class SettingsForward:
    def __getattribute__(self, name: str) -> Any:
        return getattr(_monkay.settings, name)


settings: Settings = cast("Settings", SettingsForward())


def reload_settings() -> None:
    """
    Reloads the global settings.
    """
    _monkay.settings = os.environ.get(
        ENVIRONMENT_VARIABLE, "mimeforge.conf.global_settings.Settings"
    )
