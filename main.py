# main.py
"""
MTurkView を起動する。

    python main.py [結果ファイル ...]

引数にファイルを渡すとまとめて読み込んで表示する。
引数なしの場合は前回開いたファイルを復元する。
"""

import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

# リポジトリから直接起動した場合も mturkview を import できるようにする
SRC_DIR = Path(__file__).resolve().parent / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from mturkview.gui.main_window import MainWindow  # noqa: E402
from mturkview.settings import configure_logging  # noqa: E402


def main(argv: list[str]) -> int:
    configure_logging()
    app = QApplication(argv)

    win = MainWindow()
    paths = [Path(a) for a in app.arguments()[1:]]
    if paths:
        win.open_files(paths)
    win.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
