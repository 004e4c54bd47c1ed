"""
Testes para o parser e a aplicação da calibração linear por partes.

Objetivo:
- Garantir que sem tabela o valor passa inalterado.
- Garantir interpolação, extrapolação e o caso de um único ponto.
- Garantir que especificações inválidas geram o erro certo.
- Fixar o comportamento com raw_x duplicado (o primeiro ponto vence).
"""

import pytest

from tempered_cli.core.calibracao import aplicar_calibracao, parse_tabela_calibracao
from tempered_cli.core.erros import (
    ErroAncoraMalformada,
    ErroCalibracao,
    ErroCalibracaoVazia,
    ErroNumeroInvalido,
)
from tempered_cli.core.schemas import PontoCalibracao


@pytest.mark.parametrize("valor", [-40.0, 0.0, 21.5, 1e6])
def test_sem_tabela_devolve_valor_bruto(valor):
    assert aplicar_calibracao(None, valor) == valor


def test_interpolacao_entre_pontos():
    tabela = parse_tabela_calibracao("0:0,100:110")

    assert aplicar_calibracao(tabela, 50) == pytest.approx(55.0)


def test_extrapolacao_abaixo_e_acima():
    tabela = parse_tabela_calibracao("0:0,100:110")

    assert aplicar_calibracao(tabela, -10) == pytest.approx(-11.0)
    assert aplicar_calibracao(tabela, 110) == pytest.approx(121.0)


def test_extrapolacao_usa_segmentos_das_pontas():
    # Inclinação 1 no primeiro segmento e 2 no último
    tabela = parse_tabela_calibracao("0:0,10:10,20:30")

    assert aplicar_calibracao(tabela, -5) == pytest.approx(-5.0)
    assert aplicar_calibracao(tabela, 25) == pytest.approx(40.0)
    assert aplicar_calibracao(tabela, 15) == pytest.approx(20.0)


def test_valor_igual_a_um_ponto_devolve_valor_corrigido():
    tabela = parse_tabela_calibracao("0:1,10:12,20:19")

    assert aplicar_calibracao(tabela, 0) == pytest.approx(1.0)
    assert aplicar_calibracao(tabela, 10) == pytest.approx(12.0)
    assert aplicar_calibracao(tabela, 20) == pytest.approx(19.0)


@pytest.mark.parametrize("valor", [-100.0, 5.0, 7.0, 1000.0])
def test_tabela_com_um_ponto_e_constante(valor):
    tabela = parse_tabela_calibracao("5:7")

    assert aplicar_calibracao(tabela, valor) == 7


def test_parse_ordena_pontos():
    tabela = parse_tabela_calibracao("100:110,0:0")

    assert tabela.pontos == (
        PontoCalibracao(raw_x=0, corrigido_y=0),
        PontoCalibracao(raw_x=100, corrigido_y=110),
    )


def test_parse_ignora_espacos():
    tabela = parse_tabela_calibracao(" 0 : -1.5 ,  2.5e1:26 ")

    assert [(p.raw_x, p.corrigido_y) for p in tabela.pontos] == [(0.0, -1.5), (25.0, 26.0)]


@pytest.mark.parametrize("especificacao", ["", "   "])
def test_parse_vazio(especificacao):
    with pytest.raises(ErroCalibracaoVazia):
        parse_tabela_calibracao(especificacao)


def test_parse_numero_invalido_identifica_ponto():
    with pytest.raises(ErroNumeroInvalido) as info:
        parse_tabela_calibracao("1:1,0:a")

    assert info.value.token == "0:a"
    assert info.value.campo == "a"
    assert "0:a" in str(info.value)


@pytest.mark.parametrize("especificacao", ["inf:1", "0:nan", "1_0:2", "0x10:1"])
def test_parse_rejeita_literais_nao_decimais(especificacao):
    with pytest.raises(ErroNumeroInvalido):
        parse_tabela_calibracao(especificacao)


def test_parse_rejeita_numero_que_estoura_para_infinito():
    with pytest.raises(ErroNumeroInvalido) as info:
        parse_tabela_calibracao("0:0,1e400:1")

    assert info.value.campo == "1e400"


@pytest.mark.parametrize("especificacao", ["5", "1:2:3", "0:0,,1:1", "0:0,"])
def test_parse_ponto_malformado(especificacao):
    with pytest.raises(ErroAncoraMalformada):
        parse_tabela_calibracao(especificacao)


def test_erros_de_calibracao_sao_value_error():
    with pytest.raises(ValueError):
        parse_tabela_calibracao("x")
    assert issubclass(ErroCalibracaoVazia, ErroCalibracao)


def test_raw_x_duplicado_primeiro_ponto_vence():
    # Ordenação estável: entre os dois pontos em 50, "50:20" veio primeiro
    tabela = parse_tabela_calibracao("100:30,50:20,0:0,50:10")

    assert [(p.raw_x, p.corrigido_y) for p in tabela.pontos] == [
        (0.0, 0.0),
        (50.0, 20.0),
        (50.0, 10.0),
        (100.0, 30.0),
    ]
    assert aplicar_calibracao(tabela, 50) == pytest.approx(20.0)
    assert aplicar_calibracao(tabela, 25) == pytest.approx(10.0)
    # Acima do ponto duplicado vale o segmento que começa no último deles
    assert aplicar_calibracao(tabela, 75) == pytest.approx(20.0)


def test_raw_x_duplicado_nas_pontas_nao_divide_por_zero():
    tabela = parse_tabela_calibracao("0:1,0:2,10:20,10:30")

    assert aplicar_calibracao(tabela, -5) == pytest.approx(1.0)
    assert aplicar_calibracao(tabela, 15) == pytest.approx(30.0)
    assert aplicar_calibracao(tabela, 0) == pytest.approx(1.0)
