"""
ponto_orvalho.py

Ponto de orvalho pela aproximação de Magnus (constantes de Sonntag,
a = 17.271, b = 237.7 °C), válida aproximadamente entre 0 e 60 °C.
"""

import math

MAGNUS_A = 17.271
MAGNUS_B = 237.7


def calcular_ponto_orvalho(temperatura_c: float, umidade_relativa: float) -> float:
    """
    Retorna o ponto de orvalho em °C.

    Com umidade <= 0 o logaritmo não existe, e com temperatura <= -b a
    fração diverge. Nos dois casos devolvemos o limite da fórmula, que
    é -MAGNUS_B.
    """
    if umidade_relativa <= 0 or temperatura_c <= -MAGNUS_B:
        return -MAGNUS_B

    gama = (MAGNUS_A * temperatura_c) / (MAGNUS_B + temperatura_c) + math.log(
        umidade_relativa / 100.0
    )
    return (MAGNUS_B * gama) / (MAGNUS_A - gama)
