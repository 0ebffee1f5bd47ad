"""
PyInstaller 実行時に Tcl/Tk の参照先をアプリ内に向けるランタイムフック。

`build_exe.py` が `tcl/` 以下に同梱した `tcl8.x` / `tk8.x` を
`TCL_LIBRARY` / `TK_LIBRARY` に設定する（既に設定済みなら触らない）。
"""

from __future__ import annotations

import glob
import os
import sys

ENV_PATTERNS = (("TCL_LIBRARY", "tcl*"), ("TK_LIBRARY", "tk*"))


def _bundle_dir() -> str:
    # onefile 時は展開先、onedir 時は実行ファイルのディレクトリ
    return getattr(sys, "_MEIPASS", os.path.dirname(sys.executable))


def setup_tcl_tk_env() -> None:
    base = os.path.join(_bundle_dir(), "tcl")
    for env, pattern in ENV_PATTERNS:
        found = sorted(glob.glob(os.path.join(base, pattern)))
        if found and not os.environ.get(env):
            os.environ[env] = found[0]


setup_tcl_tk_env()
