# raia_client/config.py

from dataclasses import dataclass
from typing import Optional

import environ


@dataclass(frozen=True)
class ClientSettings:
    """
    Configuração do cliente

    Lida do ambiente (ou de um arquivo .env) com django-environ, igual
    às settings do servidor.
    """

    api_url: str = 'http://localhost:8000/api'
    token: Optional[str] = None
    # None = sem timeout
    timeout: Optional[float] = None

    @classmethod
    def from_env(cls, env_file=None) -> 'ClientSettings':
        env = environ.Env()
        if env_file is not None:
            environ.Env.read_env(env_file)

        return cls(
            api_url=env.str('RAIA_API_URL', default=cls.api_url),
            token=env.str('RAIA_API_TOKEN', default=None),
            timeout=env.float('RAIA_API_TIMEOUT', default=None),
        )
