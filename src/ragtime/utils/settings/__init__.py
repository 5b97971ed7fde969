from ragtime.utils.settings.core import (
    ApiSettings,
    AwsSettings,
    DatabaseSettings,
    AnalysisSettings,
    LambdaSettings,
)
from ragtime.utils.settings.factory import SettingsFactory, settings_factory

__all__ = [
    "ApiSettings",
    "AwsSettings",
    "DatabaseSettings",
    "AnalysisSettings",
    "LambdaSettings",
    "SettingsFactory",
    "settings_factory",
]
