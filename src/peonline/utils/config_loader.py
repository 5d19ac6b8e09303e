# peonline/utils/config_loader.py
"""
Configuration for the PE-online clients.

config.yaml holds one section per webservice (attendance, data_request) plus
the shared client and logging settings. The file is read with PyYAML and
checked against the pydantic models below, so a typo or a missing credential
is reported when the configuration is loaded, not on the first request.

Notes:
- Either service section may be left out, but not both. AttendanceClient and
  DataRequestClient each refuse a configuration without their own section.
- User keys are SecretStr and never show up in reprs or log lines.
- Unknown keys are rejected in every section.
"""

import logging
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    SecretStr,
    ValidationError,
    field_validator,
    model_validator,
)

logger: logging.Logger = logging.getLogger(__name__)

# Level names accepted in the logging section
LevelName = Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

# Numeric equivalents of LevelName
STANDARD_LEVELS: frozenset[int] = frozenset(
    {logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL}
)


def _key_not_empty(v: SecretStr) -> SecretStr:
    if not v.get_secret_value():
        raise ValueError('User key cannot be empty')
    return v


class AttendanceSection(BaseModel):
    """
    Schema for the 'attendance' section of config.yaml.

    Endpoint and EDU account credentials for the ProcessXML operation of the
    WriteAttendance ASMX service. The values end up in the <Settings> element
    of every submitted <Entry>.
    """

    model_config = ConfigDict(extra='forbid')
    endpoint_url: HttpUrl = Field(
        ...,
        description='Full URL of the ProcessXML operation, e.g. '
        'https://www.pe-online.org/pe-services/pe-attendanceelearning/'
        'WriteAttendance.asmx/ProcessXML',
    )

    user_id: str = Field(
        ...,
        min_length=1,
        description='userID issued by PE-online for the EDU account.',
    )

    user_key: SecretStr = Field(
        ...,
        description='userKey issued by PE-online. Stored as SecretStr.',
    )

    org_id: int = Field(
        ...,
        gt=0,
        description='orgID of the educational organisation.',
    )

    @field_validator('user_key')
    @classmethod
    def user_key_not_empty(cls, v: SecretStr) -> SecretStr:
        """Ensure the user key is not an empty string."""
        return _key_not_empty(v)


class DataRequestSection(BaseModel):
    """
    Schema for the 'data_request' section of config.yaml.

    Endpoint, credentials and default request options for the
    RetrieveDataBySoapMessage operation. xml_id, nested and include_schema
    are defaults that every get_data() call may override.
    """

    model_config = ConfigDict(extra='forbid')
    endpoint_url: HttpUrl = Field(
        ...,
        description='Full URL of the RetrieveDataBySoapMessage operation.',
    )

    user_type: str = Field(
        default='E',
        min_length=1,
        description="usertype form field, e.g. 'E' for educator.",
    )

    user_id: str = Field(..., min_length=1, description='ID form field.')

    user_key: SecretStr = Field(..., description='Key form field. Stored as SecretStr.')

    xml_id: int = Field(
        default=0,
        ge=0,
        description='Identifier of the predefined query (XmlID form field).',
    )

    nested: bool = Field(
        default=True,
        description='Ask the service for nested data (Nested form field).',
    )

    include_schema: bool = Field(
        default=False,
        description='Ask the service to embed an xs:schema (Schema form field).',
    )

    @field_validator('user_key')
    @classmethod
    def user_key_not_empty(cls, v: SecretStr) -> SecretStr:
        """Ensure the user key is not an empty string."""
        return _key_not_empty(v)


class ClientSection(BaseModel):
    """
    Schema for the 'client' section of config.yaml.

    HTTP settings shared by both clients. Requests are never retried, so a
    timeout surfaces directly as an ApiException.
    """

    model_config = ConfigDict(extra='forbid')
    request_timeout: tuple[float, float] = Field(
        default=(10.0, 30.0),
        description='(connect, read) timeouts in seconds, passed to requests as is.',
    )

    verify_ssl: bool = Field(
        default=True,
        description='Verify the service certificate. Only disable against test servers.',
    )

    @field_validator('request_timeout')
    @classmethod
    def check_timeouts(cls, v: tuple[float, float]) -> tuple[float, float]:
        """Both timeouts must be positive and the connect phase the shorter one."""
        connect: float
        read: float
        connect, read = v

        if min(connect, read) <= 0:
            raise ValueError(f'Timeouts must be positive, got connect={connect} read={read}')

        if connect > read:
            raise ValueError(f'Connect timeout {connect}s is longer than read timeout {read}s')

        return v


def _level_to_int(level: LevelName | int) -> int:
    if isinstance(level, int):
        return level
    return logging.getLevelName(level)


class LoggingSection(BaseModel):
    """
    Schema for the 'logging' section of config.yaml, consumed by setup_logger().

    Console output is always on. Setting file_path adds a log file, at DEBUG
    unless file_level says otherwise.
    """

    model_config = ConfigDict(extra='forbid')
    console_level: LevelName | int = Field(
        default='INFO',
        description="Console level, as a name ('INFO') or a number (20).",
    )

    file_path: Path | None = Field(
        default=None,
        description='Log file location. Leave unset to log to the console only.',
    )

    file_level: LevelName | int | None = Field(
        default=None,
        description='File level. Requires file_path.',
    )

    @field_validator('console_level', 'file_level')
    @classmethod
    def check_numeric_level(cls, v: LevelName | int | None) -> LevelName | int | None:
        """Numeric levels must be one of the standard logging levels."""
        if isinstance(v, int) and v not in STANDARD_LEVELS:
            raise ValueError(f'Unknown log level {v}, expected one of {sorted(STANDARD_LEVELS)}')
        return v

    @model_validator(mode='after')
    def check_file_settings(self) -> 'LoggingSection':
        """A file level without a file is an error; a file without a level logs DEBUG."""
        if self.file_path is None:
            if self.file_level is not None:
                raise ValueError('logging.file_level is set but logging.file_path is not')
            return self

        if self.file_level is None:
            logger.warning('logging.file_path set without file_level, using DEBUG')
            self.file_level = 'DEBUG'

        return self

    def get_console_level_int(self) -> int:
        """Console level as a logging module integer."""
        return _level_to_int(self.console_level)

    def get_file_level_int(self) -> int | None:
        """File level as a logging module integer, or None without a log file."""
        if self.file_level is None:
            return None
        return _level_to_int(self.file_level)


class PeOnlineConfig(BaseModel):
    """
    Root of config.yaml.

    Usage:
        config = load_config()
        config.attendance.org_id
        config.client.request_timeout
    """

    model_config = ConfigDict(extra='forbid')
    attendance: AttendanceSection | None = None
    data_request: DataRequestSection | None = None
    client: ClientSection = Field(default_factory=ClientSection)
    logging: LoggingSection = Field(default_factory=LoggingSection)

    @model_validator(mode='after')
    def validate_has_service_section(self) -> 'PeOnlineConfig':
        """Require at least one webservice section."""
        if self.attendance is None and self.data_request is None:
            raise ValueError(
                "Configuration must define an 'attendance' or a 'data_request' section"
            )
        return self


def _get_default_config_path() -> Path:
    """
    Location used when no path is given: config/config.yaml inside the
    installed peonline package (next to config.example.yaml).
    """
    return Path(__file__).resolve().parent.parent / 'config' / 'config.yaml'


def load_config(config_path: Path | str | None = None) -> PeOnlineConfig:
    """
    Read config.yaml and validate it.

    Args:
        config_path: Path to the configuration file. Defaults to
                     _get_default_config_path().

    Returns:
        The validated configuration.

    Raises:
        FileNotFoundError: No file at the resolved path.
        yaml.YAMLError: The file is not valid YAML.
        ValidationError: The YAML does not describe a valid configuration.
            An empty file ends up here too.

    Example:
        >>> config = load_config('/etc/peonline/config.yaml')
        >>> config.attendance.org_id
        1234567
    """
    path: Path = Path(config_path) if config_path else _get_default_config_path()
    logger.debug('Loading configuration from %s', path)

    if not path.is_file():
        message: str = f'Configuration file not found at: {path}'
        logger.error(message)
        raise FileNotFoundError(message)

    try:
        with path.open(encoding='utf-8') as config_file:
            raw_config: dict[str, Any] = yaml.safe_load(config_file) or {}
    except yaml.YAMLError as yaml_error:
        logger.error('Configuration file %s is not valid YAML: %s', path, yaml_error)
        raise

    try:
        config: PeOnlineConfig = PeOnlineConfig.model_validate(raw_config)
    except ValidationError as validation_error:
        logger.error('Configuration file %s is invalid: %s', path, validation_error)
        raise

    logger.debug(
        'Configuration loaded (attendance=%s, data_request=%s)',
        config.attendance is not None,
        config.data_request is not None,
    )
    return config
