"""
selecao.py

Filtra a lista enumerada pelo backend de acordo com os caminhos
pedidos na linha de comando.
"""

from typing import List, Optional, Sequence

from tempered_cli.core.schemas import (
    DescritorDispositivo,
    ResultadoSelecao,
    StatusSelecao,
)


def selecionar_dispositivos(
    todos: Sequence[DescritorDispositivo],
    solicitados: Optional[Sequence[str]] = None,
) -> List[ResultadoSelecao]:
    """
    Seleciona os dispositivos a processar.

    - Sem `solicitados`: todos, na ordem da enumeração.
    - Com `solicitados`: na ordem pedida; cada caminho é procurado com
      busca linear e o primeiro dispositivo com o mesmo path vence.
      Caminhos sem correspondência voltam como NAO_ENCONTRADO.
    - Caminhos repetidos não são deduplicados.
    """
    if solicitados is None:
        return [
            ResultadoSelecao(
                caminho=dispositivo.path,
                status=StatusSelecao.ENCONTRADO,
                dispositivo=dispositivo,
            )
            for dispositivo in todos
        ]

    resultados: List[ResultadoSelecao] = []

    for caminho in solicitados:
        encontrado = next((d for d in todos if d.path == caminho), None)
        if encontrado is None:
            resultados.append(
                ResultadoSelecao(caminho=caminho, status=StatusSelecao.NAO_ENCONTRADO)
            )
        else:
            resultados.append(
                ResultadoSelecao(
                    caminho=caminho,
                    status=StatusSelecao.ENCONTRADO,
                    dispositivo=encontrado,
                )
            )

    return resultados
