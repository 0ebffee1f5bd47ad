"""
ロガーの設定。

対話 UI の表示を汚さないよう既定レベルは WARNING。
`--verbose` で DEBUG、`--log-file` でファイル出力を追加する。
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

LOGGER_NAME = "triversi"
FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATEFMT = '%Y-%m-%d %H:%M:%S'


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """`triversi` 配下のロガーを返す。"""
    if name != LOGGER_NAME and not name.startswith(LOGGER_NAME + "."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def setup_logging(level: int = logging.WARNING, log_file: Optional[str] = None) -> logging.Logger:
    """ルートの `triversi` ロガーにハンドラを付ける。

    何度呼んでもコンソールハンドラは 1 つだけ。
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    formatter = logging.Formatter(FORMAT, datefmt=DATEFMT)

    # 重複を避ける
    if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
               for h in logger.handlers):
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(formatter)
        logger.addHandler(console)
    for h in logger.handlers:
        h.setLevel(level)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    return logger
