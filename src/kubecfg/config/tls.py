"""TLS availability check used for scheme inference."""

import logging
import ssl

from .models import ResolvedConfig
from .normalize import decode_data

logger = logging.getLogger(__name__)

__all__ = ["https_available"]


def https_available(config: ResolvedConfig) -> bool:
    """Tell whether an SSL context can be built from ``config``'s TLS material.

    CA material is loaded from inline data or a file. A client certificate
    is loaded when both the certificate and the key are given as files;
    inline client material is left to the transport. Any failure means TLS
    is not available and the master URL falls back to plain HTTP.
    """
    try:
        context = ssl.create_default_context()
        if config.trust_certs:
            return True
        if config.ca_cert_data:
            context.load_verify_locations(cadata=decode_data(config.ca_cert_data))
        elif config.ca_cert_file:
            context.load_verify_locations(cafile=config.ca_cert_file)
        if config.client_cert_file and config.client_key_file:
            context.load_cert_chain(
                config.client_cert_file,
                config.client_key_file,
                password=config.client_key_passphrase,
            )
        return True
    except (ssl.SSLError, OSError, ValueError) as e:
        logger.warning(f"SSL setup failed, falling back to an insecure connection: {e}")
        return False
