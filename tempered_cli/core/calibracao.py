"""
calibracao.py

Calibração linear por partes das leituras brutas.

Formato da especificação (vinda de -c/--calibrate-temp e -r/--calibrate-relh):

    "bruto1:real1,bruto2:real2,..."

Exemplo: "0:0,100:110" diz que o sensor mostra 100 quando o valor real
é 110. Entre os pontos a correção é interpolada; fora deles é
extrapolada com a inclinação do segmento da ponta.
"""

import math
import re
from typing import List, Optional

from tempered_cli.core.erros import (
    ErroAncoraMalformada,
    ErroCalibracaoVazia,
    ErroNumeroInvalido,
)
from tempered_cli.core.schemas import PontoCalibracao, TabelaCalibracao

SEPARADOR_PONTOS = ","
SEPARADOR_CAMPOS = ":"

# Apenas literais decimais: rejeita "inf", "nan", "1_000", "0x10"...
_NUMERO_DECIMAL = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def _converter_numero(token: str, campo: str) -> float:
    campo = campo.strip()
    if not _NUMERO_DECIMAL.match(campo):
        raise ErroNumeroInvalido(token, campo)
    numero = float(campo)
    # "1e400" passa na expressão mas vira inf
    if not math.isfinite(numero):
        raise ErroNumeroInvalido(token, campo)
    return numero


def parse_tabela_calibracao(especificacao: str) -> TabelaCalibracao:
    """
    Converte a especificação textual em uma TabelaCalibracao.

    Regras:
    - Espaços em volta dos pontos e dos campos são ignorados.
    - Especificação sem nenhum ponto → ErroCalibracaoVazia.
    - Ponto sem exatamente dois campos (inclusive ponto vazio, como em
      "0:0,,1:1") → ErroAncoraMalformada.
    - Campo que não é número decimal → ErroNumeroInvalido (com o ponto).
    - Os pontos saem ordenados por valor bruto; duplicados são mantidos
      na ordem em que apareceram.
    """
    if not especificacao.strip():
        raise ErroCalibracaoVazia(especificacao)

    pontos: List[PontoCalibracao] = []

    for token in especificacao.split(SEPARADOR_PONTOS):
        token = token.strip()
        campos = token.split(SEPARADOR_CAMPOS)
        if len(campos) != 2:
            raise ErroAncoraMalformada(token)

        raw_x = _converter_numero(token, campos[0])
        corrigido_y = _converter_numero(token, campos[1])
        pontos.append(PontoCalibracao(raw_x=raw_x, corrigido_y=corrigido_y))

    return TabelaCalibracao(pontos=tuple(pontos))


def _reta(x0: float, y0: float, x1: float, y1: float, valor: float) -> float:
    # Segmento de largura zero (raw_x duplicado): fica com o primeiro ponto.
    if x1 == x0:
        return y0
    return y0 + (valor - x0) * (y1 - y0) / (x1 - x0)


def aplicar_calibracao(tabela: Optional[TabelaCalibracao], valor: float) -> float:
    """
    Aplica a tabela a uma leitura bruta.

    - Sem tabela: devolve o valor sem alteração.
    - Um único ponto: devolve sempre o valor corrigido desse ponto.
    - Abaixo do primeiro / acima do último ponto: extrapola com a
      inclinação do primeiro / último segmento.
    - Entre pontos: interpola no primeiro segmento (em ordem) que
      contém o valor.
    """
    if tabela is None:
        return valor

    pontos = tabela.pontos
    if len(pontos) == 1:
        return pontos[0].corrigido_y

    primeiro, segundo = pontos[0], pontos[1]
    if valor < primeiro.raw_x:
        return _reta(
            primeiro.raw_x, primeiro.corrigido_y,
            segundo.raw_x, segundo.corrigido_y,
            valor,
        )

    penultimo, ultimo = pontos[-2], pontos[-1]
    if valor > ultimo.raw_x:
        # Largura zero aqui deve ficar com o ponto da ponta.
        if ultimo.raw_x == penultimo.raw_x:
            return ultimo.corrigido_y
        return _reta(
            penultimo.raw_x, penultimo.corrigido_y,
            ultimo.raw_x, ultimo.corrigido_y,
            valor,
        )

    for p0, p1 in zip(pontos, pontos[1:]):
        if p0.raw_x <= valor <= p1.raw_x:
            return _reta(p0.raw_x, p0.corrigido_y, p1.raw_x, p1.corrigido_y, valor)

    # Só chega aqui com valor não finito (NaN não entra em nenhum segmento).
    return valor
