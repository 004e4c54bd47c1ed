"""
main.py

Ponto de entrada de linha de comando do tempered-cli.

Fluxo:
- interpreta as opções e monta OpcoesSaida (calibrações já validadas);
- carrega e inicializa o backend configurado em settings.SENSOR_BACKEND;
- enumera, seleciona e consulta os dispositivos;
- encerra o backend.

Códigos de saída: 0 em sucesso; 1 em erro de opções/calibração, falha ao
inicializar ou ao encerrar o backend. Erros por dispositivo ou sensor
não alteram o código de saída.
"""

import argparse
import sys
from typing import List, Optional, Sequence, TextIO

from tempered_cli.backend.base import BackendSensores, carregar_backend
from tempered_cli.config.settings import settings
from tempered_cli.core.calibracao import parse_tabela_calibracao
from tempered_cli.core.consulta import executar_consulta
from tempered_cli.core.erros import (
    ErroCalibracao,
    ErroEncerramentoBackend,
    ErroEnumeracao,
    ErroInicializacaoBackend,
    ErroOpcoes,
)
from tempered_cli.core.schemas import Canal, OpcoesSaida
from tempered_cli.utils.logger import get_logger

logger = get_logger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser que levanta ErroOpcoes em vez de sair com código 2."""

    def error(self, message):
        raise ErroOpcoes(message)


def criar_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(
        prog="tempered",
        usage="tempered [options] [device-path...]",
        description="Read TEMPered temperature/humidity sensors.",
    )
    p.add_argument(
        "-e", "--enumerate",
        action="store_true",
        help="Enumerate the found devices without reading them.",
    )
    p.add_argument("-b", "--batch", action="store_true", help="Use batch output format.")
    p.add_argument(
        "-c", "--calibrate-temp",
        metavar="<cal>",
        help="Calibrate the measured temperature.",
    )
    p.add_argument(
        "-r", "--calibrate-relh",
        metavar="<cal>",
        help="Calibrate the measured relative humidity.",
    )
    p.add_argument("devices", nargs="*", metavar="device-path")
    return p


def construir_opcoes(args: argparse.Namespace) -> OpcoesSaida:
    """
    Converte o Namespace do argparse em OpcoesSaida.

    Levanta ErroCalibracao se alguma especificação de calibração for inválida.
    """
    calibracao_temperatura = (
        parse_tabela_calibracao(args.calibrate_temp)
        if args.calibrate_temp is not None
        else None
    )
    calibracao_umidade = (
        parse_tabela_calibracao(args.calibrate_relh)
        if args.calibrate_relh is not None
        else None
    )
    return OpcoesSaida(
        enumerate_only=args.enumerate,
        batch=args.batch,
        calibracao_temperatura=calibracao_temperatura,
        calibracao_umidade=calibracao_umidade,
        dispositivos_solicitados=tuple(args.devices) if args.devices else None,
    )


OPCOES_CALIBRACAO = {
    "-c": "--calibrate-temp",
    "--calibrate-temp": "--calibrate-temp",
    "-r": "--calibrate-relh",
    "--calibrate-relh": "--calibrate-relh",
}


def juntar_valores_calibracao(argv: Sequence[str]) -> List[str]:
    """
    Reescreve "-c X" e "-r X" (e as formas longas) como "--calibrate-temp=X".

    O argparse recusa um valor que começa com "-" ("-10:-9,30:31"); o
    argumento seguinte à opção é sempre o valor, como no getopt. Depois
    de "--" nada é reescrito.
    """
    resultado: List[str] = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--":
            resultado.extend(argv[i:])
            break
        if arg in OPCOES_CALIBRACAO and i + 1 < len(argv):
            resultado.append(f"{OPCOES_CALIBRACAO[arg]}={argv[i + 1]}")
            i += 2
            continue
        resultado.append(arg)
        i += 1
    return resultado


def parse_opcoes(argv: Optional[Sequence[str]] = None) -> OpcoesSaida:
    """Levanta ErroOpcoes ou ErroCalibracao. `-h` termina com SystemExit(0)."""
    if argv is None:
        argv = sys.argv[1:]
    args = criar_parser().parse_args(juntar_valores_calibracao(argv))
    return construir_opcoes(args)


def executar(
    backend: BackendSensores,
    opcoes: OpcoesSaida,
    stdout: TextIO,
    stderr: TextIO,
) -> int:
    """
    Roda o ciclo completo com um backend já instanciado.
    """
    try:
        backend.inicializar()
    except ErroInicializacaoBackend as exc:
        print(f"Failed to initialize libtempered: {exc}", file=stderr)
        return 1

    try:
        dispositivos = backend.enumerar()
    except ErroEnumeracao as exc:
        print(f"Failed to enumerate devices: {exc}", file=stderr)
    else:
        logger.info("%s dispositivos enumerados.", len(dispositivos))
        for linha in executar_consulta(backend, dispositivos, opcoes):
            destino = stdout if linha.canal is Canal.STDOUT else stderr
            print(linha.texto, file=destino)

    try:
        backend.encerrar()
    except ErroEncerramentoBackend as exc:
        print(str(exc), file=stderr)
        return 1

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Função principal do CLI.
    """
    try:
        opcoes = parse_opcoes(argv)
    except SystemExit as exc:
        # argparse só sai sozinho no -h/--help
        return exc.code or 0
    except (ErroOpcoes, ErroCalibracao) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        backend = carregar_backend(settings.SENSOR_BACKEND)
    except ErroInicializacaoBackend as exc:
        print(f"Failed to initialize libtempered: {exc}", file=sys.stderr)
        return 1

    logger.debug("Backend carregado: %s", settings.SENSOR_BACKEND)
    return executar(backend, opcoes, sys.stdout, sys.stderr)


if __name__ == "__main__":
    raise SystemExit(main())
