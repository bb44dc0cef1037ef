from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

DEFAULT_BUCKET_NAME = "example.com"
DEFAULT_BUCKET_KEY = "ABCDE"
DEFAULT_BUCKET_SECRET = "example_secret"
DEFAULT_BUCKET_TOKEN = ""
DEFAULT_BUCKET_REGION = "us-west-1"
DEFAULT_BUCKET_ENDPOINT = "s3.amazonaws.com"
DEFAULT_BUCKET_SECURE = "true"
DEFAULT_BUCKET_ACL = ""
DEFAULT_BUCKET_TIMEOUT = "5"

_TRUTHY = {"1", "true", "t", "yes", "y"}


def env_name_for(key: str) -> str:
    """Converte uma chave pontuada no nome da variável de ambiente equivalente.

    Exemplo
    >>> env_name_for("media.bucket_name")
    'MEDIA_BUCKET_NAME'
    >>> env_name_for("media-eu.bucket_region")
    'MEDIA_EU_BUCKET_REGION'
    """
    return re.sub(r"[^0-9A-Za-z]", "_", key).upper()


@dataclass
class Settings:
    """Repositório chave-valor de configuração endereçado por `escopo.chave`.

    Cada leitura resolve o valor novamente: valor explícito, variável de
    ambiente, default registrado e, por fim, string vazia.

    Exemplo
    >>> s = Settings()
    >>> s.set_default("media.bucket_name", "example.com")
    >>> s.get_str("media.bucket_name")  # doctest: +SKIP
    'example.com'
    """

    values: dict[str, str] = field(default_factory=dict)
    defaults: dict[str, str] = field(default_factory=dict)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def set_default(self, key: str, value: str) -> None:
        self.defaults[key] = value

    def get_str(self, key: str) -> str:
        if key in self.values:
            return self.values[key]
        env_value = os.getenv(env_name_for(key))
        if env_value is not None:
            return env_value
        return self.defaults.get(key, "")

    def get_bool(self, key: str) -> bool:
        return self.get_str(key).strip().lower() in _TRUTHY

    def get_float(self, key: str, fallback: float) -> float:
        raw = self.get_str(key).strip()
        if not raw:
            return fallback
        try:
            return float(raw)
        except ValueError:
            return fallback


@dataclass(frozen=True)
class ConnectionConfig:
    """Parâmetros de conexão de um escopo, lidos no momento da abertura.

    O nome do bucket não faz parte deste snapshot: ele é lido a cada chamada.
    """

    endpoint: str
    access_key: str
    secret_key: str
    session_token: str
    region: str
    secure: bool
    timeout: float


def config_path(scope: str, key: str) -> str:
    """Monta a chave completa `escopo.chave`."""
    return f"{scope}.{key}"


def init_default_configs(settings: Settings, scope: str) -> None:
    """Registra os defaults do conector para o escopo (somente para testes locais)."""
    settings.set_default(config_path(scope, "bucket_name"), DEFAULT_BUCKET_NAME)
    settings.set_default(config_path(scope, "bucket_key"), DEFAULT_BUCKET_KEY)
    settings.set_default(config_path(scope, "bucket_secret"), DEFAULT_BUCKET_SECRET)
    settings.set_default(config_path(scope, "bucket_token"), DEFAULT_BUCKET_TOKEN)
    settings.set_default(config_path(scope, "bucket_region"), DEFAULT_BUCKET_REGION)
    settings.set_default(config_path(scope, "bucket_endpoint"), DEFAULT_BUCKET_ENDPOINT)
    settings.set_default(config_path(scope, "bucket_secure"), DEFAULT_BUCKET_SECURE)
    settings.set_default(config_path(scope, "bucket_acl"), DEFAULT_BUCKET_ACL)
    settings.set_default(config_path(scope, "bucket_timeout"), DEFAULT_BUCKET_TIMEOUT)


def connection_config(settings: Settings, scope: str) -> ConnectionConfig:
    """Lê os parâmetros de conexão do escopo informado."""
    return ConnectionConfig(
        endpoint=settings.get_str(config_path(scope, "bucket_endpoint")),
        access_key=settings.get_str(config_path(scope, "bucket_key")),
        secret_key=settings.get_str(config_path(scope, "bucket_secret")),
        session_token=settings.get_str(config_path(scope, "bucket_token")),
        region=settings.get_str(config_path(scope, "bucket_region")),
        secure=settings.get_bool(config_path(scope, "bucket_secure")),
        timeout=settings.get_float(config_path(scope, "bucket_timeout"), float(DEFAULT_BUCKET_TIMEOUT)),
    )


def read_env_file(env_path: Path) -> dict[str, str]:
    """Lê pares KEY=VALUE de um .env; comentários e linhas sem `=` são ignorados.

    Exemplo
    >>> read_env_file(Path("/nao/existe/.env"))
    {}
    """
    if not env_path.is_file():
        return {}
    pairs: dict[str, str] = {}
    text = env_path.read_text(encoding="utf-8-sig")
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        name, sep, value = line.partition("=")
        name = name.strip()
        if sep and name:
            pairs[name] = value.strip()
    return pairs


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """Exporta o .env para o ambiente e devolve um repositório de configuração vazio.

    Sem `env_file`, procura `.env` no diretório de trabalho. Valores do arquivo
    sobrescrevem variáveis já definidas.
    """
    path = env_file if env_file is not None else Path.cwd() / ".env"
    os.environ.update(read_env_file(path))
    return Settings()
