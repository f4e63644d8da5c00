"""
Resolution of the Cloudant API key for the configured authentication mode.

* ``IAMAPIKEY`` – the key is read from a mounted secret file.
* ``ENV`` – the key is read from the ``API_KEY`` environment variable,
  helpful when running locally.
* no mode – the plugin proceeds without authentication.
"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from cloudant_output_lib.constants import API_KEY_ENV_VAR, AuthModes
from cloudant_output_lib.data_models.config import PluginConfig
from cloudant_output_lib.exceptions import CredentialError


def resolve_api_key(
    config: PluginConfig,
    environ: Optional[Mapping[str, str]] = None,
    logger: Optional[logging.Logger] = None,
) -> Optional[str]:
    """
    Return the API key for ``config.auth_mode`` or ``None`` when unauthenticated.

    Raises
    ------
    CredentialError
        If the token file cannot be read or is empty, or ``API_KEY`` is unset.
    """
    logger = logger or logging.getLogger(__name__)
    environ = os.environ if environ is None else environ

    if config.auth_mode == AuthModes.IAMAPIKEY:
        try:
            api_key = Path(config.token_path).read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise CredentialError(
                f"Failed to read IAMAPIKEY from: {config.token_path}, error: {exc}"
            ) from exc
        if not api_key:
            raise CredentialError(f"IAMAPIKEY file {config.token_path} is empty")
        return api_key

    if config.auth_mode == AuthModes.ENV:
        api_key = environ.get(API_KEY_ENV_VAR, "").strip()
        if not api_key:
            raise CredentialError(
                f"{API_KEY_ENV_VAR} environment variable not set"
            )
        return api_key

    logger.warning("Authentication_Mode not set, proceeding without authentication.")
    return None
