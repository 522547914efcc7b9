"""Extract upstream status codes from provider SDK exceptions."""

import anthropic
import httpx
import openai
from google.genai import errors as genai_errors

# Client-side timeouts are reported as a request timeout so they retry like one.
REQUEST_TIMEOUT = 408


def upstream_status_code(error: BaseException) -> int | None:
    """Return the HTTP-like status an SDK error carries, if any.

    Args:
        error: Exception raised by the OpenAI, Anthropic or Google GenAI SDK,
            or an httpx timeout the GenAI SDK lets through unwrapped.

    Returns:
        The status code, or None when the failure never reached the server
        (connection refused, DNS) or the error is not an SDK error.
    """
    if isinstance(
        error,
        openai.APITimeoutError | anthropic.APITimeoutError | httpx.TimeoutException,
    ):
        return REQUEST_TIMEOUT
    if isinstance(error, openai.APIStatusError | anthropic.APIStatusError):
        return error.status_code
    if isinstance(error, genai_errors.APIError):
        return error.code
    return None
