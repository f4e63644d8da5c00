"""
Validated plugin configuration.

The host pipeline hands the plugin a flat mapping of option names to string
values.  :func:`load_config` checks the mandatory options, normalises the
authentication mode and returns an immutable :class:`PluginConfig` that is
built once during ``init`` and read by every later ``flush``.
"""

from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict

from cloudant_output_lib.constants import (
    ConfigKeys,
    AuthModes,
    POSSIBLE_AUTH_MODES,
    DEFAULT_TIMEOUT,
    DEFAULT_RETRIES,
    TRUE_VALUES,
)
from cloudant_output_lib.exceptions import ConfigError


class PluginConfig(BaseModel):
    """
    Configuration of a single plugin instance.

    Attributes
    ----------
    endpoint : str
        Cloudant service URL as configured (scheme may be missing).
    database : str
        Name of the target database.
    auth_mode : Optional[str]
        ``"IAMAPIKEY"``, ``"ENV"`` or ``None`` for unauthenticated access.
    token_path : Optional[str]
        Mounted file holding the API key, used in ``IAMAPIKEY`` mode.
    timeout : int
        Per‑request timeout in seconds.
    retries : int
        Transport retries for transient HTTP statuses.
    verify_writes : bool
        Read every created document back for debugging.
    """

    model_config = ConfigDict(frozen=True)

    endpoint: str
    database: str
    auth_mode: Optional[str] = None
    token_path: Optional[str] = None
    timeout: int = DEFAULT_TIMEOUT
    retries: int = DEFAULT_RETRIES
    verify_writes: bool = False


def _lookup(raw: Mapping[str, str], key: str) -> str:
    """Case‑insensitive option lookup; a missing option reads as ``""``."""
    wanted = key.lower()
    for name, value in raw.items():
        if str(name).lower() == wanted:
            return "" if value is None else str(value).strip()
    return ""


def _int_option(raw: Mapping[str, str], key: str, default: int) -> int:
    value = _lookup(raw, key)
    if not value:
        return default
    try:
        number = int(value)
    except ValueError:
        raise ConfigError(f"invalid {key}: {value!r} is not an integer")
    if number < 0:
        raise ConfigError(f"invalid {key}: must not be negative")
    return number


def load_config(raw: Mapping[str, str]) -> PluginConfig:
    """
    Validate raw plugin options and build a :class:`PluginConfig`.

    Raises
    ------
    ConfigError
        If ``Endpoint`` or ``Database`` is missing, the authentication mode
        is not one of ``IAMAPIKEY``/``ENV``, ``IAMAPIKEY`` is used without
        ``CR_Token_Mount_Path``, or a numeric option is malformed.
    """
    endpoint = _lookup(raw, ConfigKeys.ENDPOINT)
    if not endpoint:
        raise ConfigError(f"missing mandatory config: {ConfigKeys.ENDPOINT}")

    auth_mode = _lookup(raw, ConfigKeys.AUTHENTICATION_MODE).upper() or None
    if auth_mode is not None and auth_mode not in POSSIBLE_AUTH_MODES:
        raise ConfigError(
            f"invalid {ConfigKeys.AUTHENTICATION_MODE}: {auth_mode}, "
            f"must be one of {POSSIBLE_AUTH_MODES}"
        )

    token_path = _lookup(raw, ConfigKeys.TOKEN_MOUNT_PATH) or None
    if auth_mode == AuthModes.IAMAPIKEY and token_path is None:
        raise ConfigError(f"missing mandatory config: {ConfigKeys.TOKEN_MOUNT_PATH}")

    database = _lookup(raw, ConfigKeys.DATABASE)
    if not database:
        raise ConfigError(f"missing mandatory config: {ConfigKeys.DATABASE} name")

    return PluginConfig(
        endpoint=endpoint,
        database=database,
        auth_mode=auth_mode,
        token_path=token_path,
        timeout=_int_option(raw, ConfigKeys.TIMEOUT, DEFAULT_TIMEOUT),
        retries=_int_option(raw, ConfigKeys.RETRIES, DEFAULT_RETRIES),
        verify_writes=_lookup(raw, ConfigKeys.VERIFY_WRITES).lower() in TRUE_VALUES,
    )
