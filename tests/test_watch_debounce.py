"""
Watch Mode / ChangeHandler debounce 單元測試
不需要真實檔案系統事件，用 mock event 物件測試過濾與防抖邏輯。
"""
import time
import pytest
from unittest.mock import MagicMock

from airis_codegen.cli import ChangeHandler, _WATCHED_EXTENSIONS


# ─── helper: 建立假 FileModifiedEvent ────────────────────────────────────────

def make_event(src_path: str, is_directory: bool = False):
    ev = MagicMock()
    ev.is_directory = is_directory
    ev.src_path = src_path
    return ev


# ─── ChangeHandler.on_modified 過濾邏輯 ──────────────────────────────────────

class TestChangeHandlerFilter:
    """測試 on_modified 的過濾條件：目錄、副檔名、目標檔。"""

    def setup_method(self):
        self.callback = MagicMock()
        self.handler = ChangeHandler(self.callback, debounce=0.0)

    def test_directory_event_ignored(self):
        self.handler.on_modified(make_event("/designs/", is_directory=True))
        self.callback.assert_not_called()

    def test_non_watched_extension_ignored(self):
        for ext in [".png", ".md", ".tsx", ".lock"]:
            self.handler.on_modified(make_event(f"/designs/scene{ext}"))
        self.callback.assert_not_called()

    def test_watched_extensions_trigger_callback(self):
        for ext in _WATCHED_EXTENSIONS:
            self.handler.last_trigger = 0  # 重置 debounce
            self.handler.on_modified(make_event(f"/designs/scene{ext}"))
        assert self.callback.call_count == len(_WATCHED_EXTENSIONS)

    def test_target_filter(self, tmp_path):
        target = tmp_path / "scene.json"
        handler = ChangeHandler(self.callback, target=str(target), debounce=0.0)
        handler.on_modified(make_event(str(tmp_path / "other.json")))
        self.callback.assert_not_called()
        handler.on_modified(make_event(str(target)))
        self.callback.assert_called_once()


# ─── ChangeHandler debounce 邏輯 ─────────────────────────────────────────────

class TestChangeHandlerDebounce:
    """測試防抖：短時間內重複觸發只呼叫一次 callback。"""

    def test_rapid_events_debounced(self):
        callback = MagicMock()
        handler = ChangeHandler(callback, debounce=10.0)
        for _ in range(5):
            handler.on_modified(make_event("/designs/scene.json"))
        callback.assert_called_once()

    def test_events_after_window_trigger_again(self):
        callback = MagicMock()
        handler = ChangeHandler(callback, debounce=0.05)
        handler.on_modified(make_event("/designs/scene.json"))
        time.sleep(0.1)
        handler.on_modified(make_event("/designs/scene.json"))
        assert callback.call_count == 2

    def test_last_trigger_updated(self):
        handler = ChangeHandler(MagicMock(), debounce=1.0)
        before = time.time()
        handler.on_modified(make_event("/designs/scene.json"))
        assert handler.last_trigger >= before

    def test_default_debounce(self):
        handler = ChangeHandler(MagicMock())
        assert handler.debounce_seconds == pytest.approx(1.0)
