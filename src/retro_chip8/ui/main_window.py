# src/retro_chip8/ui/main_window.py
"""
メインウィンドウの実装。
CHIP-8マシンのホストとして、実行ペースの制御、画面表示、キー入力の受け渡しを行います。

全ての cycle() / tick_timers() / キー状態の更新はGUIスレッド上のQTimerから直列に呼ばれるため、
マシンへの同時アクセスは発生しません。
"""
import dataclasses
import logging
import time
from typing import Optional

from PySide6.QtWidgets import QMainWindow, QApplication, QDockWidget, QToolBar, QLabel, QFileDialog, QMessageBox
from PySide6.QtGui import QPalette, QColor, QAction, QCloseEvent, QKeyEvent
from PySide6.QtCore import Qt, QTimer, Slot

from retro_chip8.config.builder import SystemBuilder
from retro_chip8.config.models import SystemConfig
from retro_chip8.core.errors import Chip8Error
from retro_chip8.core.state import NUM_KEYS
from retro_chip8.host.scheduler import CycleScheduler
from retro_chip8.loader.loader import RomLoader
from .display_view import DisplayView
from .keymap import KeyMapper
from .keypad_view import KeypadView
from .register_view import RegisterView

logger = logging.getLogger(__name__)

FRAME_INTERVAL_MS = 16

# @intent:responsibility アプリケーションのメインウィンドウを定義し、ホストループを駆動します。
class MainWindow(QMainWindow):
    """
    アプリケーションのメインウィンドウクラス。
    """
    def __init__(self, config: Optional[SystemConfig] = None, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Retro CHIP-8")

        self._config = config if config is not None else SystemConfig()
        builder = SystemBuilder()
        # 起動時のROMはload_rom経由で読み込み、失敗をダイアログで通知します。
        self.cpu = builder.build_system(dataclasses.replace(self._config, rom=None))
        self.key_mapper = KeyMapper(builder.build_keymap(self._config))
        self.scheduler = CycleScheduler(self._config.cycles_per_second, self._config.timer_hz)

        self._frame_timer = QTimer(self)
        self._frame_timer.setInterval(FRAME_INTERVAL_MS)
        self._frame_timer.timeout.connect(self._run_frame)
        self._last_frame_time = time.monotonic()

        self._apply_palette()
        self._create_display()
        self._create_register_dock()
        self._create_toolbar()
        self._create_menus()
        self._create_status_bar()

        self._refresh_view()
        self._update_ui_state(False)
        if self._config.rom:
            self.load_rom(self._config.rom)

    # @intent:responsibility メニューバーを作成し、ROMロードアクションを追加します。
    def _create_menus(self):
        file_menu = self.menuBar().addMenu("File")

        self.load_rom_action = QAction("Load ROM...", self)
        self.load_rom_action.setShortcut("Ctrl+O")
        self.load_rom_action.triggered.connect(self._load_rom_file)
        file_menu.addAction(self.load_rom_action)

    def _create_display(self):
        display = self._config.display
        self.display_view = DisplayView(display.scale, display.foreground, display.background)
        self.setCentralWidget(self.display_view)

    # @intent:responsibility レジスタとスタックのパネルを右側のドックに配置します。
    def _create_register_dock(self):
        dock = QDockWidget("Machine State", self)
        dock.setAllowedAreas(Qt.RightDockWidgetArea | Qt.LeftDockWidgetArea)
        self.register_view = RegisterView()
        self.register_view.set_cpu(self.cpu)
        dock.setWidget(self.register_view)
        self.addDockWidget(Qt.RightDockWidgetArea, dock)

        keypad_dock = QDockWidget("Keypad", self)
        self.keypad_view = KeypadView(self.key_mapper)
        keypad_dock.setWidget(self.keypad_view)
        self.addDockWidget(Qt.RightDockWidgetArea, keypad_dock)

    # @intent:responsibility Run/Stop/Step/Resetの各アクションを生成し、マシン操作用ツールバーに並べます。
    def _create_toolbar(self):
        toolbar = QToolBar("Machine")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        self.run_action = self._add_machine_action(toolbar, "Run", "F5", self._run)
        self.stop_action = self._add_machine_action(toolbar, "Stop", "Shift+F5", self._stop)
        self.step_action = self._add_machine_action(toolbar, "Step", "F10", self._step)
        self.reset_action = self._add_machine_action(toolbar, "Reset", "Ctrl+R", self._reset)

    def _add_machine_action(self, toolbar: QToolBar, text: str, shortcut: str, slot) -> QAction:
        action = QAction(text, self)
        action.setShortcut(shortcut)
        action.triggered.connect(slot)
        toolbar.addAction(action)
        return action

    def _create_status_bar(self):
        self.status_label = QLabel("Ready")
        self.sound_label = QLabel("")
        self.statusBar().addWidget(self.status_label, 1)
        self.statusBar().addPermanentWidget(self.sound_label)

    # @intent:responsibility 実行状態に応じてUIコンポーネントの有効/無効を切り替えます。
    def _update_ui_state(self, is_running: bool):
        halted = self.cpu.halted
        self.load_rom_action.setEnabled(not is_running)
        self.run_action.setEnabled(not is_running and not halted)
        self.step_action.setEnabled(not is_running and not halted)
        self.stop_action.setEnabled(is_running)

    @Slot()
    def _run(self):
        self._last_frame_time = time.monotonic()
        self.scheduler.reset()
        self._frame_timer.start()
        self.status_label.setText("Running...")
        self._update_ui_state(True)

    @Slot()
    def _stop(self):
        self._frame_timer.stop()
        self.status_label.setText("Stopped")
        self._update_ui_state(False)

    @Slot()
    def _step(self):
        try:
            snapshot = self.cpu.cycle()
        except Chip8Error as e:
            self._report_fault(e)
            return
        self.status_label.setText(snapshot.metadata.symbol_info or "")
        self._refresh_view()

    @Slot()
    def _reset(self):
        self._stop()
        self.cpu.reset()
        self.status_label.setText("Reset")
        self._refresh_view()
        self._update_ui_state(False)

    # @intent:responsibility 1フレーム分の経過時間に応じて命令とタイマーを進め、表示を更新します。
    @Slot()
    def _run_frame(self):
        now = time.monotonic()
        elapsed = now - self._last_frame_time
        self._last_frame_time = now
        try:
            self.scheduler.run_frame(self.cpu, elapsed)
        except Chip8Error as e:
            self._report_fault(e)
        self._refresh_view()

    # @intent:responsibility 致命的エラーでマシンを停止し、診断情報を表示します。
    def _report_fault(self, error: Chip8Error):
        self._frame_timer.stop()
        self._refresh_view()
        self._update_ui_state(False)
        self.status_label.setText(f"Halted: {error}")
        QMessageBox.critical(self, "Machine Halted", f"{error}\n\nUse Reset to restart the program.")

    def _refresh_view(self):
        frame = self.cpu.take_frame_if_dirty()
        if frame is not None:
            self.display_view.update_frame(frame)
        self.register_view.update_registers()
        self.keypad_view.update_keys(self.cpu.get_state().keys)
        self.sound_label.setText("BEEP" if self.cpu.sound_active else "")

    @Slot()
    def _load_rom_file(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open CHIP-8 ROM", "", "CHIP-8 ROMs (*.ch8 *.c8);;All Files (*)")
        if file_name:
            self.load_rom(file_name)

    # @intent:responsibility ROMをロードしてマシンをリセットします。失敗時はダイアログで通知します。
    def load_rom(self, file_name: str) -> bool:
        self._stop()
        try:
            self.cpu.reset(keep_program=False)
            RomLoader().load_rom(file_name, self.cpu)
        except (OSError, Chip8Error) as e:
            logger.error("Failed to load ROM %s: %s", file_name, e)
            QMessageBox.critical(self, "Error", f"Failed to load ROM: {e}")
            return False
        self.status_label.setText(f"Loaded {file_name}")
        self._refresh_view()
        self._update_ui_state(False)
        return True

    # @intent:responsibility キー押下をCHIP-8キーパッドの状態に反映します。
    def keyPressEvent(self, event: QKeyEvent):
        key = self.key_mapper.translate(event.text())
        if key is None or event.isAutoRepeat():
            super().keyPressEvent(event)
            return
        self.cpu.press_key(key)
        self.keypad_view.update_keys(self.cpu.get_state().keys)

    def keyReleaseEvent(self, event: QKeyEvent):
        key = self.key_mapper.translate(event.text())
        if key is None or event.isAutoRepeat():
            super().keyReleaseEvent(event)
            return
        self.cpu.release_key(key)
        self.keypad_view.update_keys(self.cpu.get_state().keys)

    # @intent:responsibility 表示色の背景色を基調にしたパレットをアプリケーション全体へ適用します。
    def _apply_palette(self):
        background = QColor(self._config.display.background)
        text = QColor(224, 224, 224)
        palette = QPalette()
        palette.setColor(QPalette.Window, background.lighter(180))
        palette.setColor(QPalette.Base, background)
        palette.setColor(QPalette.Button, background.lighter(250))
        for role in (QPalette.WindowText, QPalette.Text, QPalette.ButtonText):
            palette.setColor(role, text)
        palette.setColor(QPalette.Highlight, QColor(self._config.display.foreground))
        QApplication.setPalette(palette)

    # @intent:responsibility ウィンドウを閉じる際にフレームタイマーを止め、押下中のキーを解放します。
    def closeEvent(self, event: QCloseEvent):
        self._frame_timer.stop()
        self.cpu.set_keys([False] * NUM_KEYS)
        super().closeEvent(event)
