"""
schemas.py

Modelos Pydantic do tempered-cli.
Compatível com Pydantic v2.

Todos os modelos são imutáveis (frozen): descritores vêm do backend e
são apenas lidos, tabelas de calibração e opções são montadas uma vez
na inicialização e não mudam depois.
"""

from enum import Enum, Flag
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TipoSensor(Flag):
    """
    Capacidades de um sensor.

    Um sensor pode expor temperatura, umidade, ambos ou (depois de uma
    falha de leitura) nenhum. Use `in` para testar:

        if TipoSensor.TEMPERATURA in tipo:
            ...
    """

    NENHUM = 0
    TEMPERATURA = 1
    UMIDADE = 2
    AMBOS = TEMPERATURA | UMIDADE


class DescritorDispositivo(BaseModel):
    """
    Um dispositivo encontrado na enumeração do backend.

        {
          "path": "/dev/hidraw1",
          "type_name": "TEMPerHUM",
          "vendor_id": 3141,
          "product_id": 29698
        }
    """

    model_config = ConfigDict(frozen=True)

    path: str
    type_name: str
    vendor_id: int = Field(ge=0, le=0xFFFF)
    product_id: int = Field(ge=0, le=0xFFFF)


class PontoCalibracao(BaseModel):
    """Par (valor bruto, valor corrigido)."""

    model_config = ConfigDict(frozen=True)

    raw_x: float
    corrigido_y: float


class TabelaCalibracao(BaseModel):
    """
    Conjunto ordenado de pontos de calibração.

    - Sempre tem ao menos um ponto.
    - Os pontos ficam ordenados por `raw_x` (ordenação estável: pontos
      com o mesmo `raw_x` mantêm a ordem em que foram informados).
    """

    model_config = ConfigDict(frozen=True)

    pontos: Tuple[PontoCalibracao, ...] = Field(min_length=1)

    @field_validator("pontos")
    def ordenar_pontos(cls, v):
        return tuple(sorted(v, key=lambda p: p.raw_x))


class OpcoesSaida(BaseModel):
    """
    Opções da execução, montadas a partir da linha de comando.

    `dispositivos_solicitados` = None significa "todos os dispositivos".
    """

    model_config = ConfigDict(frozen=True)

    enumerate_only: bool = False
    batch: bool = False
    calibracao_temperatura: Optional[TabelaCalibracao] = None
    calibracao_umidade: Optional[TabelaCalibracao] = None
    dispositivos_solicitados: Optional[Tuple[str, ...]] = None


class LeituraSensor(BaseModel):
    """
    Resultado da leitura de um sensor, já calibrado.

    `tipo` reflete as capacidades que sobraram depois das falhas:
    se a temperatura falhou, TEMPERATURA já foi removido.
    """

    caminho: str
    sensor: int
    tipo: TipoSensor
    temperatura_c: Optional[float] = None
    umidade_relativa: Optional[float] = None


class StatusSelecao(str, Enum):
    ENCONTRADO = "encontrado"
    NAO_ENCONTRADO = "nao_encontrado"


class ResultadoSelecao(BaseModel):
    """Um caminho solicitado e o dispositivo correspondente (se houver)."""

    model_config = ConfigDict(frozen=True)

    caminho: str
    status: StatusSelecao
    dispositivo: Optional[DescritorDispositivo] = None

    @property
    def encontrado(self) -> bool:
        return self.status is StatusSelecao.ENCONTRADO


class Canal(str, Enum):
    STDOUT = "stdout"
    STDERR = "stderr"


class LinhaSaida(BaseModel):
    """Uma linha a ser escrita no stdout (dados) ou stderr (erros)."""

    model_config = ConfigDict(frozen=True)

    canal: Canal
    texto: str
