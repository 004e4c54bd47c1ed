"""
consulta.py

Pipeline de consulta dos sensores.

Para cada dispositivo selecionado:
- abre o dispositivo no backend;
- dispara a leitura de todos os sensores;
- obtém temperatura e umidade de cada sensor, aplicando a calibração;
- calcula o ponto de orvalho quando há as duas grandezas;
- produz as linhas de saída (stdout para dados, stderr para erros).

Erros de um dispositivo ou de um sensor viram linhas no stderr e NÃO
interrompem o processamento dos demais. Tudo é sequencial.
"""

from typing import Any, Iterator, List, Optional, Sequence, Tuple

from tempered_cli.backend.base import BackendSensores
from tempered_cli.core.calibracao import aplicar_calibracao
from tempered_cli.core.erros import (
    ErroAberturaDispositivo,
    ErroLeituraSensores,
    ErroObtencaoValor,
)
from tempered_cli.core.ponto_orvalho import calcular_ponto_orvalho
from tempered_cli.core.schemas import (
    Canal,
    DescritorDispositivo,
    LeituraSensor,
    LinhaSaida,
    OpcoesSaida,
    TipoSensor,
)
from tempered_cli.core.selecao import selecionar_dispositivos
from tempered_cli.utils.logger import get_logger

logger = get_logger(__name__)


def _saida(texto: str) -> LinhaSaida:
    return LinhaSaida(canal=Canal.STDOUT, texto=texto)


def _erro(texto: str) -> LinhaSaida:
    return LinhaSaida(canal=Canal.STDERR, texto=texto)


# ---------------- FORMATAÇÃO ---------------- #


def formatar_enumeracao(dispositivo: DescritorDispositivo) -> str:
    return (
        f"{dispositivo.path} : {dispositivo.type_name} "
        f"(USB IDs {dispositivo.vendor_id:04X}:{dispositivo.product_id:04X})"
    )


def formatar_leitura(leitura: LeituraSensor, batch: bool = False) -> str:
    """
    Monta a linha de um sensor a partir do estado final de `leitura.tipo`.

    O formato batch só existe para a linha completa (temperatura +
    umidade + ponto de orvalho); as demais linhas são iguais nos dois modos.
    """
    caminho, sensor, tipo = leitura.caminho, leitura.sensor, leitura.tipo

    if TipoSensor.TEMPERATURA in tipo and TipoSensor.UMIDADE in tipo:
        temperatura = leitura.temperatura_c
        umidade = leitura.umidade_relativa
        orvalho = calcular_ponto_orvalho(temperatura, umidade)
        if batch:
            return f"'{caminho}', {temperatura:.2f}, {umidade:.2f}, {orvalho:.2f}"
        return (
            f"{caminho} {sensor}: temperature {temperatura:.2f} C, "
            f"relative humidity {umidade:.1f}%, dew point {orvalho:.1f} C"
        )

    if TipoSensor.TEMPERATURA in tipo:
        return f"{caminho} {sensor}: temperature {leitura.temperatura_c:.2f} C"

    if TipoSensor.UMIDADE in tipo:
        return f"{caminho} {sensor}: relative humidity {leitura.umidade_relativa:.1f}%"

    return f"{caminho} {sensor}: no sensor data available"


# ---------------- LEITURA ---------------- #


def ler_sensor(
    backend: BackendSensores,
    handle: Any,
    caminho: str,
    sensor: int,
    opcoes: OpcoesSaida,
) -> Tuple[LeituraSensor, List[LinhaSaida]]:
    """
    Lê e calibra um sensor.

    Retorna a leitura e as linhas de erro geradas. Uma falha ao obter
    uma grandeza remove a flag correspondente de `tipo`; a outra
    grandeza continua sendo lida normalmente.
    """
    erros: List[LinhaSaida] = []
    contexto = {"dispositivo": caminho, "sensor": sensor}
    tipo = backend.tipo_sensor(handle, sensor)
    temperatura: Optional[float] = None
    umidade: Optional[float] = None

    if TipoSensor.TEMPERATURA in tipo:
        try:
            bruto = backend.obter_temperatura(handle, sensor)
        except ErroObtencaoValor as exc:
            logger.debug("Falha ao obter temperatura: %s", exc, extra=contexto)
            erros.append(
                _erro(f"{caminho} {sensor}: Failed to get the temperature: {exc}")
            )
            tipo &= ~TipoSensor.TEMPERATURA
        else:
            temperatura = aplicar_calibracao(opcoes.calibracao_temperatura, bruto)

    if TipoSensor.UMIDADE in tipo:
        try:
            bruto = backend.obter_umidade(handle, sensor)
        except ErroObtencaoValor as exc:
            logger.debug("Falha ao obter umidade: %s", exc, extra=contexto)
            erros.append(
                _erro(f"{caminho} {sensor}: Failed to get the humidity: {exc}")
            )
            tipo &= ~TipoSensor.UMIDADE
        else:
            umidade = aplicar_calibracao(opcoes.calibracao_umidade, bruto)

    leitura = LeituraSensor(
        caminho=caminho,
        sensor=sensor,
        tipo=tipo,
        temperatura_c=temperatura,
        umidade_relativa=umidade,
    )
    return leitura, erros


def consultar_dispositivo(
    backend: BackendSensores,
    dispositivo: DescritorDispositivo,
    opcoes: OpcoesSaida,
) -> Iterator[LinhaSaida]:
    """
    Produz as linhas de saída de um dispositivo.

    - enumerate_only: uma linha de resumo, sem abrir o dispositivo.
    - Falha ao abrir: uma linha de erro e fim.
    - Falha na leitura: uma linha de erro, o dispositivo é fechado e fim.
    - Caso contrário: uma linha por sensor, em ordem crescente de índice.

    Depois de aberto, o dispositivo é sempre fechado.
    """
    caminho = dispositivo.path

    if opcoes.enumerate_only:
        yield _saida(formatar_enumeracao(dispositivo))
        return

    try:
        handle = backend.abrir(dispositivo)
    except ErroAberturaDispositivo as exc:
        logger.debug(
            "Falha ao abrir %s", caminho, exc_info=True, extra={"dispositivo": caminho}
        )
        yield _erro(f"{caminho}: Could not open device: {exc}")
        return

    try:
        try:
            backend.ler_sensores(handle)
        except ErroLeituraSensores as exc:
            motivo = backend.ultimo_erro(handle) or str(exc)
            yield _erro(f"{caminho}: Failed to read the sensors: {motivo}")
            return

        quantidade = backend.quantidade_sensores(handle)
        logger.debug(
            "%s: %s sensores para ler", caminho, quantidade, extra={"dispositivo": caminho}
        )

        for sensor in range(quantidade):
            leitura, erros = ler_sensor(backend, handle, caminho, sensor, opcoes)
            yield from erros
            yield _saida(formatar_leitura(leitura, batch=opcoes.batch))
    finally:
        backend.fechar(handle)


def executar_consulta(
    backend: BackendSensores,
    dispositivos: Sequence[DescritorDispositivo],
    opcoes: OpcoesSaida,
) -> Iterator[LinhaSaida]:
    """
    Seleciona os dispositivos e consulta cada um, em ordem.

    Caminhos pedidos que não existem na enumeração geram um aviso no
    stderr e o processamento segue com os próximos.
    """
    for resultado in selecionar_dispositivos(dispositivos, opcoes.dispositivos_solicitados):
        if not resultado.encontrado:
            yield _erro(f"{resultado.caminho}: TEMPered device not found or ignored.")
            continue
        yield from consultar_dispositivo(backend, resultado.dispositivo, opcoes)
