"""
Tkinter GUI で起動するためのスクリプト（PyInstaller のエントリ）。

通常の起動は `python -m triversi.gui_tk` や `triversi-gui` でも可能ですが、
このファイルを直接実行した場合でも GUI が開くようにしています。
`--cli` を付けるとテキスト版を起動します。
"""

import sys

try:
    # パッケージ内からの相対 import（推奨ルート）
    from .gui_tk import main as gui_main
    from .cli import main as cli_main
except ImportError:
    # 単体ファイル実行に対応: python triversi/main.py
    import os
    sys.path.append(os.path.dirname(os.path.dirname(__file__)))
    from triversi.gui_tk import main as gui_main
    from triversi.cli import main as cli_main


def main() -> int:
    if "--cli" in sys.argv[1:]:
        return cli_main([a for a in sys.argv[1:] if a != "--cli"])
    gui_main()
    return 0


if __name__ == "__main__":
    sys.exit(main())
