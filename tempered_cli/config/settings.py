"""
settings.py

Responsável por:
- Definir a configuração central do projeto (Settings).
- Ler variáveis de ambiente (ou .env) de forma tipada e validada.
- Oferecer um ponto único de acesso às configurações.

Uso típico em outros módulos:

    from tempered_cli.config.settings import settings

    backend = carregar_backend(settings.SENSOR_BACKEND)

As calibrações NÃO ficam aqui: elas chegam sempre pela linha de comando
e valem apenas para a execução atual.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Classe de configuração principal do projeto.

    Herda de BaseSettings, o que faz com que:
    - valores padrão possam ser definidos aqui no código;
    - variáveis de ambiente (ou arquivo .env) possam sobrescrever esses valores;
    - todos os campos sejam validados e convertidos para os tipos corretos.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ---------------------------------------------------------
    # BACKEND DE SENSORES
    # ---------------------------------------------------------
    # Caminho "modulo:Classe" do backend que faz enumeração e leitura.
    # Exemplo:
    #   tempered_cli.backend.simulador:BackendSimulado
    SENSOR_BACKEND: str = Field(
        "tempered_cli.backend.simulador:BackendSimulado",
        description="Backend de sensores no formato modulo:Classe.",
    )

    # ---------------------------------------------------------
    # SIMULADOR DE DISPOSITIVOS
    # ---------------------------------------------------------
    SIMULATOR_DEVICE_COUNT: int = Field(
        2,
        ge=0,
        description="Quantidade de dispositivos simulados na enumeração.",
    )

    SIMULATOR_DEVICE_PREFIX: str = Field(
        "/dev/hidraw",
        description="Prefixo do caminho dos dispositivos simulados.",
    )

    SIMULATOR_SENSORS_PER_DEVICE: int = Field(
        1,
        ge=0,
        description="Quantidade de sensores em cada dispositivo simulado.",
    )

    SIMULATOR_FAILURE_RATE: float = Field(
        0.0,
        ge=0.0,
        le=1.0,
        description=(
            "Probabilidade de falha simulada em cada abertura de dispositivo, "
            "leitura dos sensores e obtenção de temperatura ou umidade."
        ),
    )

    SIMULATOR_SEED: Optional[int] = Field(
        None,
        description="Semente do gerador aleatório (None = não determinístico).",
    )

    # ---------------------------------------------------------
    # LOGGING
    # ---------------------------------------------------------
    # Em uma ferramenta de linha de comando o stderr também recebe as
    # mensagens de erro por dispositivo, então o padrão é mais silencioso.
    LOG_LEVEL: str = Field(
        "WARNING",
        description="Nível de log padrão: DEBUG, INFO, WARNING, ERROR.",
    )

    LOG_JSON: bool = Field(
        False,
        description="Se verdadeiro, emite os logs como JSON (uma linha por registro).",
    )

    # ---------------------------------------------------------
    # VALIDADORES
    # ---------------------------------------------------------

    @field_validator("LOG_LEVEL")
    def normalize_log_level(cls, v: str) -> str:
        """
        Normaliza nível de log (p.ex., "debug" → "DEBUG") e garante valores válidos.
        """
        nivel = v.upper()
        niveis_validos = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

        if nivel not in niveis_validos:
            return "WARNING"

        return nivel

    @field_validator("SENSOR_BACKEND")
    def validar_caminho_backend(cls, v: str) -> str:
        """
        Garante o formato modulo:Classe, sem espaços nas pontas.
        """
        caminho = v.strip()
        modulo, sep, classe = caminho.partition(":")
        if not sep or not modulo or not classe:
            raise ValueError("SENSOR_BACKEND deve estar no formato modulo:Classe")
        return caminho


# ---------------------------------------------------------
# Singleton de configurações
# ---------------------------------------------------------
@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
