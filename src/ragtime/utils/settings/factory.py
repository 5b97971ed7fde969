"""
Settings Factory

Factory to create settings instances without using singleton pattern.
Provides methods to create individual setting objects as needed.
"""

from ragtime.utils.settings.core import (
    ApiSettings,
    AwsSettings,
    DatabaseSettings,
    AnalysisSettings,
    LambdaSettings,
)


class SettingsFactory:
    """Factory for creating settings instances"""

    @staticmethod
    def create_api_settings() -> ApiSettings:
        """Create REST API settings instance"""
        return ApiSettings()

    @staticmethod
    def create_aws_settings() -> AwsSettings:
        """Create AWS settings instance"""
        return AwsSettings()

    @staticmethod
    def create_database_settings() -> DatabaseSettings:
        """Create PostgreSQL settings instance"""
        return DatabaseSettings()

    @staticmethod
    def create_analysis_settings() -> AnalysisSettings:
        """Create analysis workflow settings instance"""
        return AnalysisSettings()

    @staticmethod
    def create_lambda_settings() -> LambdaSettings:
        """Create Lambda environment settings instance"""
        return LambdaSettings()


# Convenience factory instance for easy importing
settings_factory = SettingsFactory()
