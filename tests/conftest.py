"""
conftest.py

Configuração de testes para o projeto tempered-cli.

Aqui:
- Definimos um backend falso, roteirizado por dispositivo, que registra
  todas as chamadas recebidas (para verificar abertura/fechamento e
  ausência de I/O no modo de enumeração).
- Expomos fixtures para criar esse backend e as OpcoesSaida.
"""

from typing import Dict, List, Optional, Tuple

import pytest

from tempered_cli.backend.base import BackendSensores
from tempered_cli.core.erros import (
    ErroAberturaDispositivo,
    ErroEncerramentoBackend,
    ErroEnumeracao,
    ErroInicializacaoBackend,
    ErroLeituraSensores,
    ErroObtencaoValor,
)
from tempered_cli.core.schemas import DescritorDispositivo, OpcoesSaida, TipoSensor


def descritor(path: str, type_name: str = "TEMPerHUM") -> DescritorDispositivo:
    return DescritorDispositivo(
        path=path, type_name=type_name, vendor_id=0x0C45, product_id=0x7402
    )


class SensorRoteiro:
    """
    Roteiro de um sensor: tipo informado, valores brutos e erros opcionais.
    """

    def __init__(
        self,
        tipo: TipoSensor = TipoSensor.AMBOS,
        temperatura: float = 20.0,
        umidade: float = 50.0,
        erro_temperatura: Optional[str] = None,
        erro_umidade: Optional[str] = None,
    ):
        self.tipo = tipo
        self.temperatura = temperatura
        self.umidade = umidade
        self.erro_temperatura = erro_temperatura
        self.erro_umidade = erro_umidade


class BackendFalso(BackendSensores):
    """
    Backend em memória. O handle é o próprio path do dispositivo.

    `chamadas` guarda tuplas (operacao, path[, sensor]) na ordem.
    """

    def __init__(
        self,
        dispositivos: Optional[List[DescritorDispositivo]] = None,
        sensores: Optional[Dict[str, List[SensorRoteiro]]] = None,
        erros_abertura: Optional[Dict[str, str]] = None,
        erros_leitura: Optional[Dict[str, str]] = None,
        erro_inicializacao: Optional[str] = None,
        erro_enumeracao: Optional[str] = None,
        erro_encerramento: Optional[str] = None,
    ):
        self.dispositivos = dispositivos or []
        self.sensores = sensores or {}
        self.erros_abertura = erros_abertura or {}
        self.erros_leitura = erros_leitura or {}
        self.erro_inicializacao = erro_inicializacao
        self.erro_enumeracao = erro_enumeracao
        self.erro_encerramento = erro_encerramento
        self.chamadas: List[Tuple] = []
        self.erro = ""

    def inicializar(self) -> None:
        self.chamadas.append(("inicializar",))
        if self.erro_inicializacao:
            raise ErroInicializacaoBackend(self.erro_inicializacao)

    def enumerar(self) -> List[DescritorDispositivo]:
        self.chamadas.append(("enumerar",))
        if self.erro_enumeracao:
            raise ErroEnumeracao(self.erro_enumeracao)
        return list(self.dispositivos)

    def abrir(self, dispositivo: DescritorDispositivo) -> str:
        self.chamadas.append(("abrir", dispositivo.path))
        if dispositivo.path in self.erros_abertura:
            raise ErroAberturaDispositivo(self.erros_abertura[dispositivo.path])
        return dispositivo.path

    def ler_sensores(self, handle: str) -> None:
        self.chamadas.append(("ler_sensores", handle))
        if handle in self.erros_leitura:
            mensagem = self.erros_leitura[handle]
            # Mensagem vazia: só o ultimo_erro (definido pelo teste) explica a falha
            if mensagem:
                self.erro = mensagem
            raise ErroLeituraSensores(mensagem)

    def quantidade_sensores(self, handle: str) -> int:
        return len(self.sensores.get(handle, []))

    def tipo_sensor(self, handle: str, sensor: int) -> TipoSensor:
        return self.sensores[handle][sensor].tipo

    def obter_temperatura(self, handle: str, sensor: int) -> float:
        self.chamadas.append(("obter_temperatura", handle, sensor))
        roteiro = self.sensores[handle][sensor]
        if roteiro.erro_temperatura:
            self.erro = roteiro.erro_temperatura
            raise ErroObtencaoValor(self.erro)
        return roteiro.temperatura

    def obter_umidade(self, handle: str, sensor: int) -> float:
        self.chamadas.append(("obter_umidade", handle, sensor))
        roteiro = self.sensores[handle][sensor]
        if roteiro.erro_umidade:
            self.erro = roteiro.erro_umidade
            raise ErroObtencaoValor(self.erro)
        return roteiro.umidade

    def fechar(self, handle: str) -> None:
        self.chamadas.append(("fechar", handle))

    def encerrar(self) -> None:
        self.chamadas.append(("encerrar",))
        if self.erro_encerramento:
            raise ErroEncerramentoBackend(self.erro_encerramento)

    def ultimo_erro(self, handle: str) -> str:
        return self.erro

    def operacoes(self) -> List[str]:
        return [c[0] for c in self.chamadas]


@pytest.fixture
def criar_backend():
    """
    Factory de BackendFalso. Uso:

        backend = criar_backend(
            dispositivos=[descritor("a")],
            sensores={"a": [SensorRoteiro()]},
        )
    """

    def _criar(**kwargs) -> BackendFalso:
        return BackendFalso(**kwargs)

    return _criar


@pytest.fixture
def opcoes_padrao() -> OpcoesSaida:
    return OpcoesSaida()
