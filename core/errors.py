"""Error types raised by the tax map engine."""


class TaxMapError(Exception):
    """Base class for tax map errors."""


class DataUnavailable(TaxMapError):
    """Source data for a county or layer could not be retrieved."""

    def __init__(self, message: str, county: str | None = None):
        super().__init__(message)
        self.county = county


class MalformedRecord(TaxMapError):
    """A feature is missing its GEOID."""


class LoadSuperseded(TaxMapError):
    """A newer load was started before this one finished."""

    def __init__(self, token: int, latest_token: int):
        super().__init__(f"Load {token} superseded by load {latest_token}")
        self.token = token
        self.latest_token = latest_token
