"""Credential precondition checked by callers before generation."""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional, Union

from config import ReguflowConfig
from errors import AuthorizationRequired
from models import Tier

logger = logging.getLogger(__name__)


class EnvCredentialProvider:
    """Resolve the API key a tier needs from the environment."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None,
                 key_env: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ
        self.key_env = dict(key_env or ReguflowConfig.TIER_KEY_ENV)

    def ensure_ready(self, tier: Union[Tier, str]) -> str:
        """
        Return the API key for ``tier``.

        Raises:
            AuthorizationRequired: when the tier's key has not been configured
        """
        tier_value = Tier(tier).value
        env_name = self.key_env[tier_value]
        key = (self.environ.get(env_name) or "").strip()
        if not key:
            logger.warning(f"No credential selected for tier {tier_value} ({env_name} unset)")
            raise AuthorizationRequired(tier_value, f"Set {env_name} to use the {tier_value} tier.")
        return key
