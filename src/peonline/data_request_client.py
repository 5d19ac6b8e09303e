# peonline/data_request_client.py
"""
PE-online Data Request Client

This module provides a client for the RetrieveDataBySoapMessage operation of
the PE-online ASMX webservice, which returns course and related data as
(optionally schema-annotated) datasets.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import requests

from peonline.models import DataRequestOptions
from peonline.normalizer import normalize_response
from peonline.request_builder import build_data_request_form
from peonline.response_models import NormalizedResponse, ResponseKind
from peonline.utils import DataRequestSection, PeOnlineConfig, load_config, post_form

logger: logging.Logger = logging.getLogger(__name__)


class DataRequestClient:
    """
    Client for retrieving data from PE-online.

    xml_id, nested and include_schema default to the values of the
    'data_request' configuration section and can be overridden per call.

    Usage:
        >>> client = DataRequestClient(config=load_config())
        >>> dataset = client.get_data({'param_tblcourseid': '653570'})
        >>> dataset.rows('Table')
        [{'tblcourseid': '653570', 'title': 'First aid'}]
        >>>
        >>> # Same query, with the embedded schema
        >>> client.get_data({'param_tblcourseid': '653570'}, {'schema': True})
    """

    def __init__(
        self, config_path: Path | None = None, config: PeOnlineConfig | None = None
    ) -> None:
        """
        Initialize the client with configuration.

        Args:
            config_path: Optional path to the configuration file.
            config: Optional pre-loaded PeOnlineConfig instance. If provided,
                   config_path is ignored.

        Raises:
            FileNotFoundError: If the config file doesn't exist.
            ValueError: If the configuration has no 'data_request' section.
        """
        if config is not None:
            self.config: PeOnlineConfig = config
            logger.debug('Initializing DataRequestClient with injected configuration')
        elif config_path is not None:
            logger.info('Loading PE-online configuration from: %r', config_path)
            self.config = load_config(config_path)
        else:
            logger.info('Loading PE-online configuration from default location')
            self.config = load_config()

        if self.config.data_request is None:
            error_message: str = "Configuration has no 'data_request' section"
            logger.error(error_message)
            raise ValueError(error_message)

        self.data_config: DataRequestSection = self.config.data_request
        logger.debug(
            'DataRequestClient ready for endpoint %r', str(self.data_config.endpoint_url)
        )

    def build_form(
        self,
        parameters: Mapping[str, str | int] | None = None,
        options: DataRequestOptions | Mapping[str, Any] | None = None,
    ) -> dict[str, str]:
        """
        Build the form fields for a request, applying per-call overrides.

        Args:
            parameters: Query parameters for the predefined query.
            options: Overrides for xml_id / nested / include_schema, either as
                    DataRequestOptions or as a mapping using the option names
                    (e.g. {'xmlId': 100, 'nested': False}).

        Returns:
            The form fields to POST.

        Raises:
            pydantic.ValidationError: If options contains unknown or invalid keys.
        """
        overrides: DataRequestOptions = (
            options
            if isinstance(options, DataRequestOptions)
            else DataRequestOptions.model_validate(dict(options or {}))
        )

        return build_data_request_form(
            user_type=self.data_config.user_type,
            user_id=self.data_config.user_id,
            user_key=self.data_config.user_key.get_secret_value(),
            xml_id=self._pick(overrides.xml_id, self.data_config.xml_id),
            nested=self._pick(overrides.nested, self.data_config.nested),
            include_schema=self._pick(
                overrides.include_schema, self.data_config.include_schema
            ),
            parameters=parameters,
        )

    @staticmethod
    def _pick(override: Any, default: Any) -> Any:
        return default if override is None else override

    def get_data(
        self,
        parameters: Mapping[str, str | int] | None = None,
        options: DataRequestOptions | Mapping[str, Any] | None = None,
    ) -> NormalizedResponse:
        """
        Retrieve data with the given query parameters.

        Args:
            parameters: Query parameters, e.g. {'param_tblcourseid': '653570'}.
            options: Per-call overrides for xml_id, nested and include_schema.

        Returns:
            A DatasetResponse with the schema (if requested) and rows grouped
            by element name; a RawResponse or ResultResponse if the body could
            not be normalized.

        Raises:
            ApiException: If the HTTP request fails.
        """
        form_data: dict[str, str] = self.build_form(parameters, options)
        logger.info(
            'Retrieving data (XmlID=%s, Nested=%s, Schema=%s)',
            form_data['XmlID'],
            form_data['Nested'],
            form_data['Schema'],
        )

        response: requests.Response = post_form(
            str(self.data_config.endpoint_url),
            form_data,
            self.config.client,
            DataRequestOptions.operation_name,
        )

        return normalize_response(response.content, expected_kind=ResponseKind.DATASET)

    def __repr__(self) -> str:
        return (
            f'DataRequestClient('
            f'endpoint={self.data_config.endpoint_url}, '
            f'xml_id={self.data_config.xml_id}'
            f')'
        )
