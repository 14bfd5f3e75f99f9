"""Exceptions raised by es_batch_settings."""


class BatchSettingsError(Exception):
    """Base class for all errors raised by this package."""


class MissingContextValueError(BatchSettingsError):
    """A required key is absent from the job execution context."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(message)
        self.key = key


class ContextValueTypeError(BatchSettingsError, TypeError):
    """A value stored in the job execution context does not have the expected shape."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(message)
        self.key = key


class IndexSettingNotFoundError(BatchSettingsError):
    """An index setting is missing from both the explicit settings and the defaults."""

    def __init__(self, index: str, setting: str) -> None:
        super().__init__(f"Setting '{setting}' not found for index '{index}'.")
        self.index = index
        self.setting = setting


class IndexNotFoundError(BatchSettingsError):
    def __init__(self, index: str) -> None:
        super().__init__(f"Index '{index}' does not exist.")
        self.index = index
