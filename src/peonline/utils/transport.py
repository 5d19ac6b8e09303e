# peonline/utils/transport.py
"""
HTTP transport for the PE-online ASMX operations.

Both operations are plain HTTP POSTs with a form-encoded body. This module
sends them through requests and translates every transport-level failure into
an ApiException, so callers only ever see the package's own error types.
"""

import logging

import requests

from ..exceptions import ApiException
from .config_loader import ClientSection

logger: logging.Logger = logging.getLogger(__name__)

FORM_HEADERS: dict[str, str] = {
    'Content-Type': 'application/x-www-form-urlencoded; charset=utf-8',
    'Accept': 'text/xml, application/xml',
}


def post_form(
    endpoint_url: str,
    form_data: dict[str, str],
    client_config: ClientSection,
    operation_name: str,
) -> requests.Response:
    """
    POST a form-encoded body to an ASMX operation endpoint.

    Args:
        endpoint_url: The full operation URL.
        form_data: Form fields to send. requests performs the encoding.
        client_config: Timeout and SSL settings.
        operation_name: The operation name (for logging purposes).

    Returns:
        The HTTP response, guaranteed to have a 2xx status.

    Raises:
        ApiException: With the HTTP status as code when the server answered
                      with an error, or code 0 when the request never got an
                      answer (connection error, timeout).
    """
    try:
        logger.debug(
            'Sending %r request to %r (connect/read timeout=%r)',
            operation_name,
            endpoint_url,
            client_config.request_timeout,
        )

        response: requests.Response = requests.post(
            endpoint_url,
            data=form_data,
            headers=FORM_HEADERS,
            timeout=client_config.request_timeout,
            verify=client_config.verify_ssl,
        )

        logger.debug(
            'Received response for operation %r: HTTP %r',
            operation_name,
            response.status_code,
        )

        # Note: the service reports rejected rows with 200 OK, so the caller
        # still has to look at the normalized body.
        response.raise_for_status()

        logger.info(
            'Operation %r completed successfully (HTTP %r)',
            operation_name,
            response.status_code,
        )
        return response

    except requests.exceptions.HTTPError as http_error:
        logger.error('HTTP error for operation %r: %r', operation_name, http_error)

        # Form fields carry credentials, so only their names are logged
        logger.debug('***REQUEST FIELDS***')
        logger.debug(', '.join(form_data))

        status_code: int = 0
        body: str = ''
        if http_error.response is not None:
            status_code = http_error.response.status_code
            body = http_error.response.text
            logger.debug('***RESPONSE BODY***')
            logger.debug(body)

        raise ApiException(f'API error: {body}', status_code) from http_error

    except requests.exceptions.Timeout as timeout_error:
        logger.error(
            'Request timeout for operation %r after %r: %r',
            operation_name,
            client_config.request_timeout,
            timeout_error,
        )
        raise ApiException(
            f'Failed to communicate with PE-online API: {timeout_error}', 0
        ) from timeout_error

    except requests.exceptions.RequestException as request_error:
        logger.error('Network error for operation %r: %r', operation_name, request_error)
        raise ApiException(
            f'Failed to communicate with PE-online API: {request_error}', 0
        ) from request_error
