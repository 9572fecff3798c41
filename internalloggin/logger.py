# Filosofia: "O que não está no log, não aconteceu."

import logging
import os
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler

# Pasta de logs internos; EDV_LOG_DIR permite apontar para outro local
LOG_DIR = Path(os.getenv("EDV_LOG_DIR", Path(__file__).parent / "internallogs"))
LOG_DIR.mkdir(parents=True, exist_ok=True)


def _console_level() -> int:
    level = logging.getLevelName(os.getenv("EDV_LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logger(name: str = "edv") -> logging.Logger:
    """
    Configura o logger do EDV.

    Args:
        name (str): O nome do logger. Default é "edv".

    Returns:
        logging.Logger: O logger configurado.
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Evita duplicidade de log se o logger for inicializado mais de uma vez
    if not logger.handlers:
        # Formato do log: Timestamp - Nível de Log - Modulo - Mensagem
        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(name)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        # Handler para console (Saida padrão)
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(_console_level())
        logger.addHandler(console_handler)

        # Handler para arquivo (Rotativo)
        file_path = LOG_DIR / f"{name}.log"
        file_handler = RotatingFileHandler(
            filename=file_path,
            maxBytes=5 * 1024 * 1024,  # 5 MB
            backupCount=13,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)
    return logger
