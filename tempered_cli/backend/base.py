"""
base.py

Interface do backend de sensores e o carregador de backends.

O backend é quem conversa com o hardware (ou finge conversar, no caso
do simulador). O núcleo do tempered-cli só consome estas operações;
transporte USB/HID fica inteiramente do lado do backend.

Convenção de erros: toda operação que pode falhar levanta uma subclasse
de ErroBackend cuja mensagem é o texto de erro do próprio backend.
"""

import importlib
from abc import ABC, abstractmethod
from typing import Any, List

from tempered_cli.core.erros import ErroInicializacaoBackend
from tempered_cli.core.schemas import DescritorDispositivo, TipoSensor


class BackendSensores(ABC):
    """
    Operações que um backend precisa oferecer.

    O "handle" devolvido por `abrir` é opaco para o núcleo: ele só é
    repassado de volta às demais operações e, por fim, a `fechar`.
    """

    @abstractmethod
    def inicializar(self) -> None:
        """Prepara o backend. Levanta ErroInicializacaoBackend."""

    @abstractmethod
    def enumerar(self) -> List[DescritorDispositivo]:
        """Lista os dispositivos encontrados. Levanta ErroEnumeracao."""

    @abstractmethod
    def abrir(self, dispositivo: DescritorDispositivo) -> Any:
        """Abre o dispositivo. Levanta ErroAberturaDispositivo."""

    @abstractmethod
    def ler_sensores(self, handle: Any) -> None:
        """Dispara a leitura de todos os sensores. Levanta ErroLeituraSensores."""

    @abstractmethod
    def quantidade_sensores(self, handle: Any) -> int:
        ...

    @abstractmethod
    def tipo_sensor(self, handle: Any, sensor: int) -> TipoSensor:
        ...

    @abstractmethod
    def obter_temperatura(self, handle: Any, sensor: int) -> float:
        """Temperatura bruta em °C. Levanta ErroObtencaoValor."""

    @abstractmethod
    def obter_umidade(self, handle: Any, sensor: int) -> float:
        """Umidade relativa bruta em %. Levanta ErroObtencaoValor."""

    @abstractmethod
    def fechar(self, handle: Any) -> None:
        ...

    @abstractmethod
    def encerrar(self) -> None:
        """Libera o backend. Levanta ErroEncerramentoBackend."""

    @abstractmethod
    def ultimo_erro(self, handle: Any) -> str:
        """
        Texto do último erro ocorrido no dispositivo.

        Usado na linha "Failed to read the sensors"; se vier vazio, vale a
        mensagem da exceção.
        """


def carregar_backend(caminho: str) -> BackendSensores:
    """
    Carrega e instancia um backend a partir de "modulo.sub:Classe".

    Qualquer problema (módulo inexistente, classe ausente, classe que não
    é um BackendSensores) vira ErroInicializacaoBackend.
    """
    if ":" not in caminho:
        raise ErroInicializacaoBackend(
            f"backend deve estar no formato modulo:Classe, recebido {caminho!r}"
        )
    nome_modulo, nome_classe = caminho.split(":", 1)

    try:
        modulo = importlib.import_module(nome_modulo)
    except ImportError as exc:
        raise ErroInicializacaoBackend(
            f"não foi possível importar {nome_modulo!r}: {exc}"
        ) from exc

    classe = getattr(modulo, nome_classe, None)
    if not isinstance(classe, type) or not issubclass(classe, BackendSensores):
        raise ErroInicializacaoBackend(
            f"{caminho} não é uma classe de BackendSensores"
        )

    return classe()
