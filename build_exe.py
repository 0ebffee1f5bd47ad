"""
PyInstaller でトライバーシの実行ファイルを作るためのビルドスクリプト。

ポイント
- GUI 版（既定）は Tkinter を含めるため Tcl/Tk のデータと DLL を自動同梱
- `--cli` でコンソール版（テキスト UI）をビルド。Tcl/Tk は同梱しない
- `--onefile` を付けると 1 ファイル版
- `icon.ico` がリポジトリ直下にあれば自動でアイコン適用

使い方
- 標準: `python build_exe.py`
- 1ファイル: `python build_exe.py --onefile`
- テキスト版: `python build_exe.py --cli`

出力
- フォルダ版: `dist/Triversi/Triversi(.exe)`
- 1ファイル版: `dist/Triversi(.exe)`
"""

from __future__ import annotations

import os
import sys

import PyInstaller.__main__

HERE = os.path.dirname(os.path.abspath(__file__))


def _tcl_roots() -> list[str]:
    # CPython 標準と conda 系の配置
    base = sys.base_prefix
    return [p for p in (os.path.join(base, "tcl"), os.path.join(base, "Library", "tcl")) if os.path.isdir(p)]


def _dll_dirs() -> list[str]:
    base = sys.base_prefix
    return [p for p in (os.path.join(base, "DLLs"), os.path.join(base, "Library", "bin")) if os.path.isdir(p)]


def tk_data_specs() -> list[str]:
    """`tcl8.x` / `tk8.x` ディレクトリを `tcl/` 以下に置く --add-data 指定。"""
    specs: list[str] = []
    for root in _tcl_roots():
        for name in sorted(os.listdir(root)):
            src = os.path.join(root, name)
            if name.startswith(("tcl", "tk")) and os.path.isdir(src):
                specs.append(f"{src}{os.pathsep}{os.path.join('tcl', name)}")
    return specs


def tk_binary_specs() -> list[str]:
    """_tkinter.pyd と tcl/tk の DLL を同梱する --add-binary 指定。"""
    specs: list[str] = []
    for d in _dll_dirs():
        for name in sorted(os.listdir(d)):
            lower = name.lower()
            wanted = lower == "_tkinter.pyd" or (
                lower.startswith(("tcl", "tk")) and lower.endswith(".dll")
            )
            path = os.path.join(d, name)
            if wanted and os.path.isfile(path):
                specs.append(f"{path}{os.pathsep}.")
    return specs


def build_options(argv: list[str]) -> list[str]:
    cli = "--cli" in argv
    opts: list[str] = ["--name", "Triversi"]

    if cli:
        opts += ["--console"]
    else:
        opts += [
            "--noconsole",
            "--hidden-import", "tkinter",
            "--hidden-import", "_tkinter",
            # tkinter のデータ/バイナリを収集（PyInstaller 6+）
            "--collect-all", "tkinter",
        ]
        for spec in tk_data_specs():
            opts += ["--add-data", spec]
        for spec in tk_binary_specs():
            opts += ["--add-binary", spec]
        # ランタイムフックで実行時に tcl/tk の場所を解決
        rt_hook = os.path.join(HERE, "rt_tk_path.py")
        if os.path.exists(rt_hook):
            opts += ["--runtime-hook", rt_hook]

    if "--onefile" in argv:
        opts.append("--onefile")

    icon_path = os.path.join(HERE, "icon.ico")
    if os.path.exists(icon_path):
        opts += ["--icon", icon_path]

    entry = "cli.py" if cli else "main.py"
    opts.append(os.path.join(HERE, "triversi", entry))
    return opts


def main() -> None:
    opts = build_options(sys.argv[1:])
    print("PyInstaller options:")
    for o in opts:
        print(" ", o)
    PyInstaller.__main__.run(opts)


if __name__ == "__main__":
    main()
