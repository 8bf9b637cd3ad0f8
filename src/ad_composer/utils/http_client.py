"""Shared OpenAI / Anthropic client factory.

Handles certificate errors behind corporate proxies.
Controlled by SSL_VERIFY=false or CA_BUNDLE_PATH.
"""
import logging
import os
import ssl

import certifi
import httpx
from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from ad_composer.config import get_settings

logger = logging.getLogger(__name__)


def configure_ssl_globally() -> None:
    """Export the CA bundle setting so every HTTPS client in the process picks it up.

    Call once at startup, before any client is created.
    """
    settings = get_settings()

    if not settings.ssl_verify:
        logger.warning(
            "SSL verification disabled (SSL_VERIFY=false). "
            "Use only in development / corporate proxy environments."
        )
    elif settings.ca_bundle_path:
        os.environ["SSL_CERT_FILE"] = settings.ca_bundle_path
        os.environ["REQUESTS_CA_BUNDLE"] = settings.ca_bundle_path


def _build_ssl_context() -> ssl.SSLContext | bool | str:
    """Pick the `verify` value for httpx from settings.

    Returns:
        - ssl.SSLContext: custom CA bundle merged with certifi's
        - str (certifi path): default
        - False: verification disabled
    """
    settings = get_settings()

    if not settings.ssl_verify:
        return False

    if settings.ca_bundle_path:
        ctx = ssl.create_default_context(cafile=certifi.where())
        ctx.load_verify_locations(cafile=settings.ca_bundle_path)
        return ctx

    return certifi.where()


def create_openai_client() -> AsyncOpenAI:
    settings = get_settings()
    http_client = httpx.AsyncClient(verify=_build_ssl_context())
    return AsyncOpenAI(
        api_key=settings.openai_api_key,
        http_client=http_client,
    )


def create_anthropic_client() -> AsyncAnthropic:
    settings = get_settings()
    http_client = httpx.AsyncClient(verify=_build_ssl_context())
    return AsyncAnthropic(
        api_key=settings.anthropic_api_key,
        http_client=http_client,
    )
