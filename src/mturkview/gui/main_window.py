# src/mturkview/gui/main_window.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Mapping, Optional

from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QComboBox,
    QFileDialog,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QTableWidget,
    QTableWidgetItem,
    QTabWidget,
    QTreeWidget,
    QTreeWidgetItem,
    QVBoxLayout,
    QWidget,
)

from mturkview.exporter import export_records_csv, records_to_rows
from mturkview.logic.record_search import RecordSearchCondition, search_records
from mturkview.output_reader import MTurkOutputReader
from mturkview.parser.record_parser import OutputFormatError
from mturkview.settings import ViewerSettings, load_settings, save_settings

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """
    MTurk 出力ファイルの簡易ビューア。

    1行 = 1レコード（HIT の回答1件）として表示する。
    """

    TAB_RECORDS = 0   # レコード一覧
    TAB_FILES = 1     # ファイル一覧

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("MTurkView - MTurk 出力ビューア")
        self.resize(1000, 600)

        self._reader: Optional[MTurkOutputReader] = None
        self._records: List[Mapping[str, str]] = []
        self._settings: ViewerSettings = load_settings()

        # UI 構築
        self._create_central_widgets()
        self._create_actions()
        self._create_menus()
        self.statusBar().showMessage("ファイルが読み込まれていません")

        # 前回のファイルが残っていれば自動で開く
        existing = [p for p in self._settings.recent_files if p.is_file()]
        if existing:
            self._load_files(existing)

    # ─ UI 構築 ─────────────────────────────────────────────
    def _create_central_widgets(self) -> None:
        self.search_edit = QLineEdit(self)
        self.search_edit.setPlaceholderText("検索語を入力（例: hitid, workerid, 回答の一部 など）")
        self.column_combo = QComboBox(self)
        self.column_combo.addItem("全列")

        self.record_table = QTableWidget(self)
        self.record_table.verticalHeader().setVisible(False)
        self.record_table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.record_table.setSelectionBehavior(QTableWidget.SelectRows)
        self.record_table.horizontalHeader().setStretchLastSection(True)

        record_page = QWidget(self)
        record_layout = QVBoxLayout(record_page)
        search_row = QHBoxLayout()
        search_row.addWidget(QLabel("検索語:", record_page))
        search_row.addWidget(self.search_edit)
        search_row.addWidget(QLabel("対象列:", record_page))
        search_row.addWidget(self.column_combo)
        record_layout.addLayout(search_row)
        record_layout.addWidget(self.record_table)

        self.file_tree = QTreeWidget(self)
        self.file_tree.setHeaderLabels(["ファイル", "レコード数", "hittypeid"])

        self.tabs = QTabWidget(self)
        self.tabs.addTab(record_page, "レコード一覧")
        self.tabs.addTab(self.file_tree, "ファイル一覧")
        self.setCentralWidget(self.tabs)

        self.search_edit.returnPressed.connect(self._apply_search)
        self.column_combo.currentIndexChanged.connect(lambda _index: self._apply_search())

    def _create_actions(self) -> None:
        self.act_open = QAction("開く...", self)
        self.act_open.setShortcut(QKeySequence.Open)
        self.act_open.triggered.connect(self._on_open_files)

        self.act_required = QAction("必須フィールド設定...", self)
        self.act_required.triggered.connect(self._on_set_required_fields)

        self.act_export = QAction("CSV出力...", self)
        self.act_export.triggered.connect(self._on_export_csv)

        self.act_quit = QAction("終了", self)
        self.act_quit.setShortcut(QKeySequence.Quit)
        self.act_quit.triggered.connect(self.close)

    def _create_menus(self) -> None:
        file_menu = self.menuBar().addMenu("ファイル")
        file_menu.addAction(self.act_open)
        file_menu.addAction(self.act_required)
        file_menu.addSeparator()
        file_menu.addAction(self.act_export)
        file_menu.addSeparator()
        file_menu.addAction(self.act_quit)

    # ─ ファイル読み込み ────────────────────────────────────
    def _on_open_files(self) -> None:
        path_strs, _ = QFileDialog.getOpenFileNames(
            self,
            "MTurk 出力ファイルを開く",
            "",
            "MTurk 出力 (*.csv *.tsv *.txt *.results);;すべてのファイル (*.*)",
        )
        if not path_strs:
            return
        self._load_files([Path(p) for p in path_strs])

    def open_files(self, paths: List[Path]) -> None:
        """コマンドライン引数などから渡されたファイル群を開く。"""
        self._load_files(list(paths))

    def _load_files(self, paths: List[Path]) -> None:
        """
        ファイル群をまとめて読み込み、表示を差し替える。
        失敗した場合は前回の表示をそのまま残す。
        """
        try:
            reader = MTurkOutputReader(
                *paths,
                additional_required_fields=self._settings.additional_required_fields,
            )
        except (OSError, OutputFormatError) as e:
            logger.error("Failed to load %s: %s", [str(p) for p in paths], e)
            QMessageBox.critical(self, "読み込みエラー", f"ファイルを読み込めませんでした:\n{e}")
            return

        self._reader = reader
        self._records = list(reader)
        self._settings.recent_files = list(paths)
        save_settings(self._settings)

        self.column_combo.blockSignals(True)
        self.column_combo.clear()
        self.column_combo.addItem("全列")
        self.column_combo.addItems(list(reader.column_names))
        self.column_combo.blockSignals(False)
        self.search_edit.clear()

        self._populate_record_table(range(len(self._records)))
        self._populate_file_tree()
        self.tabs.setCurrentIndex(self.TAB_RECORDS)

    def _populate_record_table(self, indexes) -> None:
        if self._reader is None:
            return
        columns = list(self._reader.column_names)
        rows = records_to_rows((self._records[i] for i in indexes), columns)

        self.record_table.clear()
        self.record_table.setColumnCount(len(columns))
        self.record_table.setHorizontalHeaderLabels(columns)
        self.record_table.setRowCount(len(rows))
        for r, row in enumerate(rows):
            for c, value in enumerate(row):
                # 改行を含む回答も1行で見せる
                item = QTableWidgetItem(value.replace("\n", " "))
                item.setToolTip(value)
                self.record_table.setItem(r, c, item)

        self.statusBar().showMessage(
            f"{len(rows)} / {len(self._records)} 件のレコードを表示中 "
            f"({len(self._reader.files)} ファイル)"
        )

    def _populate_file_tree(self) -> None:
        self.file_tree.clear()
        if self._reader is None:
            return
        for output in self._reader.files:
            item = QTreeWidgetItem([
                output.path.name,
                str(output.record_count),
                output.hit_type_id or "-",
            ])
            item.setToolTip(0, str(output.path))
            for i, name in enumerate(output.column_names):
                QTreeWidgetItem(item, [f"{i}: {name}"])
            self.file_tree.addTopLevelItem(item)
        self.file_tree.resizeColumnToContents(0)

    # ─ 検索 ─────────────────────────────────────────────
    def _apply_search(self) -> None:
        # 先頭の「全列」は列指定なし
        columns: tuple = ()
        if self.column_combo.currentIndex() > 0:
            columns = (self.column_combo.currentText(),)
        cond = RecordSearchCondition(
            keyword=self.search_edit.text(),
            columns=columns,
        )
        self._populate_record_table(search_records(self._records, cond))

    # ─ 設定 ─────────────────────────────────────────────
    def _on_set_required_fields(self) -> None:
        current = ", ".join(self._settings.additional_required_fields)
        text, ok = QInputDialog.getText(
            self,
            "必須フィールド設定",
            "hitid / hittypeid 以外に必須とする列（カンマ区切り）:",
            QLineEdit.Normal,
            current,
        )
        if not ok:
            return

        self._settings.additional_required_fields = [
            f.strip() for f in text.split(",") if f.strip()
        ]
        save_settings(self._settings)

        # 開いているファイルがあれば新しい条件で読み直す
        if self._reader is not None:
            self._load_files([output.path for output in self._reader.files])

    # ─ CSV 出力 ──────────────────────────────────────────
    def _on_export_csv(self) -> None:
        if self._reader is None or not self._records:
            QMessageBox.information(self, "CSV出力", "出力可能なレコードがありません。")
            return

        path, _ = QFileDialog.getSaveFileName(
            self,
            "レコードをCSV出力",
            "mturk_records.csv",
            "CSV ファイル (*.csv);;すべてのファイル (*.*)",
        )
        if not path:
            return  # キャンセル

        try:
            count = export_records_csv(self._records, self._reader.column_names, Path(path))
        except OSError as e:
            QMessageBox.critical(
                self,
                "CSV出力エラー",
                f"CSV出力中にエラーが発生しました:\n{e}",
            )
            return

        QMessageBox.information(self, "CSV出力", f"{count} 件のレコードを出力しました。")
