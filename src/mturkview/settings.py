# src/mturkview/settings.py
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

LOG_LEVEL = os.getenv("MTURKVIEW_LOG_LEVEL", "INFO")

_DEFAULT_SETTINGS_PATH = Path.home() / ".mturkview_settings.json"


def configure_logging(level: Optional[str] = None) -> None:
    """エントリポイントから1回だけ呼ぶ。ライブラリ側ではハンドラを設定しない。"""
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )


def settings_path() -> Path:
    override = os.getenv("MTURKVIEW_SETTINGS_PATH")
    return Path(override) if override else _DEFAULT_SETTINGS_PATH


@dataclass
class ViewerSettings:
    """
    ビューアの状態として保存する設定。

    - recent_files: 前回開いたファイル一覧
    - additional_required_fields: hitid / hittypeid 以外に必須とする列
    """
    recent_files: List[Path] = field(default_factory=list)
    additional_required_fields: List[str] = field(default_factory=list)


def load_settings(path: Optional[Path] = None) -> ViewerSettings:
    """
    保存済みの設定を読み込む。

    ファイルが無い・壊れている場合は既定値を返す。
    """
    config_path = path or settings_path()
    if not config_path.exists():
        return ViewerSettings()

    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", config_path, e)
        return ViewerSettings()

    if not isinstance(raw, dict):
        return ViewerSettings()

    files = raw.get("recent_files")
    fields = raw.get("additional_required_fields")
    return ViewerSettings(
        recent_files=[Path(p) for p in files if isinstance(p, str)] if isinstance(files, list) else [],
        additional_required_fields=(
            [f for f in fields if isinstance(f, str) and f] if isinstance(fields, list) else []
        ),
    )


def save_settings(settings: ViewerSettings, path: Optional[Path] = None) -> None:
    """
    設定を JSON に書き出す。

    書き出しに失敗してもビューアの動作は継続する（警告のみ）。
    """
    config_path = path or settings_path()
    data = {
        "recent_files": [str(p) for p in settings.recent_files],
        "additional_required_fields": list(settings.additional_required_fields),
    }
    try:
        config_path.write_text(
            json.dumps(data, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
    except OSError as e:
        logger.warning("Could not write settings file %s: %s", config_path, e)
