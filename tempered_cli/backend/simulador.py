"""
simulador.py

Backend simulado do tempered-cli.

Responsável por:
- Gerar uma lista de dispositivos falsos a partir das configurações.
- Simular a leitura de temperatura e umidade de cada sensor.
- Simular falhas de leitura com a probabilidade configurada.

Serve para testar o fluxo completo sem hardware. Não existe nenhuma
comunicação USB/HID aqui.
"""

import random
from typing import Dict, List, Optional, Tuple

from tempered_cli.backend.base import BackendSensores
from tempered_cli.config.settings import settings
from tempered_cli.core.erros import (
    ErroAberturaDispositivo,
    ErroEncerramentoBackend,
    ErroEnumeracao,
    ErroInicializacaoBackend,
    ErroLeituraSensores,
    ErroObtencaoValor,
)
from tempered_cli.core.schemas import DescritorDispositivo, TipoSensor
from tempered_cli.utils.logger import get_logger

logger = get_logger(__name__)

NOME_TIPO = "TEMPerHUM simulado"
VENDOR_ID = 0x0C45
PRODUCT_ID = 0x7402

FAIXA_TEMPERATURA = (-10.0, 40.0)
FAIXA_UMIDADE = (10.0, 90.0)


class DispositivoSimulado:
    """
    Handle de um dispositivo simulado aberto.

    Guarda as leituras do último `ler_sensores` e o último erro.
    """

    def __init__(self, descritor: DescritorDispositivo, quantidade_sensores: int):
        self.descritor = descritor
        self.quantidade_sensores = quantidade_sensores
        # sensor -> (temperatura, umidade)
        self.leituras: Dict[int, Tuple[float, float]] = {}
        self.erro: str = ""
        self.aberto = True


class BackendSimulado(BackendSensores):
    """
    Backend que publica dispositivos e leituras aleatórias.

    Parâmetros (todos com padrão vindo de settings):
    - quantidade_dispositivos: SIMULATOR_DEVICE_COUNT
    - prefixo: SIMULATOR_DEVICE_PREFIX (paths "<prefixo><n>", n a partir de 0)
    - sensores_por_dispositivo: SIMULATOR_SENSORS_PER_DEVICE
    - taxa_falha: SIMULATOR_FAILURE_RATE
    - semente: SIMULATOR_SEED
    """

    def __init__(
        self,
        quantidade_dispositivos: Optional[int] = None,
        prefixo: Optional[str] = None,
        sensores_por_dispositivo: Optional[int] = None,
        taxa_falha: Optional[float] = None,
        semente: Optional[int] = None,
    ):
        self.quantidade_dispositivos = (
            settings.SIMULATOR_DEVICE_COUNT
            if quantidade_dispositivos is None
            else quantidade_dispositivos
        )
        self.prefixo = settings.SIMULATOR_DEVICE_PREFIX if prefixo is None else prefixo
        self.sensores_por_dispositivo = (
            settings.SIMULATOR_SENSORS_PER_DEVICE
            if sensores_por_dispositivo is None
            else sensores_por_dispositivo
        )
        self.taxa_falha = (
            settings.SIMULATOR_FAILURE_RATE if taxa_falha is None else taxa_falha
        )
        self._random = random.Random(
            settings.SIMULATOR_SEED if semente is None else semente
        )
        self._inicializado = False

    # ---------------- CICLO DE VIDA ---------------- #

    def inicializar(self) -> None:
        if self._inicializado:
            raise ErroInicializacaoBackend("simulador já inicializado")
        self._inicializado = True
        logger.info(
            "Simulador iniciado com %s dispositivos, %s sensores cada, taxa de falha %.2f.",
            self.quantidade_dispositivos,
            self.sensores_por_dispositivo,
            self.taxa_falha,
        )

    def encerrar(self) -> None:
        if not self._inicializado:
            raise ErroEncerramentoBackend("simulador não foi inicializado")
        self._inicializado = False
        logger.info("Simulador encerrado.")

    # ---------------- DISPOSITIVOS ---------------- #

    def enumerar(self) -> List[DescritorDispositivo]:
        if not self._inicializado:
            raise ErroEnumeracao("simulador não foi inicializado")

        return [
            DescritorDispositivo(
                path=f"{self.prefixo}{i}",
                type_name=NOME_TIPO,
                vendor_id=VENDOR_ID,
                product_id=PRODUCT_ID,
            )
            for i in range(self.quantidade_dispositivos)
        ]

    def abrir(self, dispositivo: DescritorDispositivo) -> DispositivoSimulado:
        if self._falhou():
            raise ErroAberturaDispositivo("dispositivo ocupado (simulado)")
        logger.debug(
            "Dispositivo simulado aberto: %s",
            dispositivo.path,
            extra={"dispositivo": dispositivo.path},
        )
        return DispositivoSimulado(dispositivo, self.sensores_por_dispositivo)

    def fechar(self, handle: DispositivoSimulado) -> None:
        handle.aberto = False
        logger.debug(
            "Dispositivo simulado fechado: %s",
            handle.descritor.path,
            extra={"dispositivo": handle.descritor.path},
        )

    # ---------------- LEITURA ---------------- #

    def ler_sensores(self, handle: DispositivoSimulado) -> None:
        if self._falhou():
            handle.erro = "timeout na leitura (simulado)"
            raise ErroLeituraSensores(handle.erro)

        handle.leituras = {
            sensor: (
                self._random.uniform(*FAIXA_TEMPERATURA),
                self._random.uniform(*FAIXA_UMIDADE),
            )
            for sensor in range(handle.quantidade_sensores)
        }

    def quantidade_sensores(self, handle: DispositivoSimulado) -> int:
        return handle.quantidade_sensores

    def tipo_sensor(self, handle: DispositivoSimulado, sensor: int) -> TipoSensor:
        if sensor not in handle.leituras:
            return TipoSensor.NENHUM
        return TipoSensor.AMBOS

    def obter_temperatura(self, handle: DispositivoSimulado, sensor: int) -> float:
        return self._obter(handle, sensor, 0, "temperatura")

    def obter_umidade(self, handle: DispositivoSimulado, sensor: int) -> float:
        return self._obter(handle, sensor, 1, "umidade")

    def ultimo_erro(self, handle: DispositivoSimulado) -> str:
        return handle.erro

    # ---------------- AUXILIARES ---------------- #

    def _falhou(self) -> bool:
        return self.taxa_falha > 0 and self._random.random() < self.taxa_falha

    def _obter(
        self, handle: DispositivoSimulado, sensor: int, indice: int, grandeza: str
    ) -> float:
        if sensor not in handle.leituras:
            handle.erro = f"sensor {sensor} sem leitura"
            raise ErroObtencaoValor(handle.erro)
        if self._falhou():
            handle.erro = f"checksum inválido na {grandeza} (simulado)"
            raise ErroObtencaoValor(handle.erro)
        return handle.leituras[sensor][indice]
