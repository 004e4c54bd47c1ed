"""
erros.py

Hierarquia de exceções do tempered-cli.

Dois grupos:
- Fatais (opções, calibração, inicialização/encerramento do backend):
  sobem até o `main` e viram código de saída 1.
- Por dispositivo / por sensor (abertura, leitura, obtenção de valor):
  são convertidas em uma linha no stderr pelo pipeline de consulta e o
  processamento continua.
"""


class ErroOpcoes(Exception):
    """Opções de linha de comando inválidas."""


# ---------------- CALIBRAÇÃO ---------------- #


class ErroCalibracao(ValueError):
    """Especificação de calibração inválida."""


class ErroCalibracaoVazia(ErroCalibracao):
    """A especificação não produziu nenhum ponto de calibração."""

    def __init__(self, especificacao: str):
        super().__init__(f"Calibração vazia: {especificacao!r}")
        self.especificacao = especificacao


class ErroAncoraMalformada(ErroCalibracao):
    """Um ponto não se decompõe em exatamente dois campos `x:y`."""

    def __init__(self, token: str):
        super().__init__(f"Ponto de calibração malformado: {token!r} (esperado x:y)")
        self.token = token


class ErroNumeroInvalido(ErroCalibracao):
    """Um dos campos de um ponto não é um número decimal válido."""

    def __init__(self, token: str, campo: str):
        super().__init__(
            f"Número inválido {campo!r} no ponto de calibração {token!r}"
        )
        self.token = token
        self.campo = campo


# ---------------- BACKEND ---------------- #


class ErroBackend(Exception):
    """
    Erro reportado pelo backend de sensores.

    A mensagem é o texto de erro do próprio backend, usado sem
    alterações nas linhas de erro impressas pelo CLI.
    """


class ErroInicializacaoBackend(ErroBackend):
    pass


class ErroEncerramentoBackend(ErroBackend):
    pass


class ErroEnumeracao(ErroBackend):
    pass


class ErroAberturaDispositivo(ErroBackend):
    pass


class ErroLeituraSensores(ErroBackend):
    pass


class ErroObtencaoValor(ErroBackend):
    """Falha ao obter temperatura ou umidade de um sensor específico."""
