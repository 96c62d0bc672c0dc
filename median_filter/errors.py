"""Exceções do filtro de mediana."""


class MedianFilterError(Exception):
    """Base para todos os erros do projeto."""


class ConfigurationError(MedianFilterError):
    """Parâmetro inválido (kernel, ruído, método). Detectado antes de filtrar."""


class ImageIOError(MedianFilterError):
    """Falha ao ler ou gravar a imagem."""


class TransportError(MedianFilterError):
    """Um send/recv entre processos não pôde ser concluído. Fatal para a execução."""


class ChunkSizeError(MedianFilterError):
    """Payload com tamanho diferente de largura * altura * 3.

    Nunca acontece com remetente/destinatário corretos; é erro de programação.
    """
