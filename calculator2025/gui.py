#!/usr/bin/env python3
"""
gui.py
Windows-style calculator window (PyQt6) driving a CalculatorEngine.

The window holds no arithmetic state of its own: every button or key press
is forwarded as one engine call and the returned Snapshot is rendered.

To run:
    python -m calculator2025
"""

import logging
import sys

from PyQt6 import QtWidgets, QtCore, QtGui

from . import config
from .core import Operator, parse_number
from .engine import CalculatorEngine, Snapshot
from .history import HistoryStore

logger = logging.getLogger(__name__)

# ----------------------------
# UI Components
# ----------------------------
class RoundedButton(QtWidgets.QPushButton):
    def __init__(self, text, slot=None, min_h=48):
        super().__init__(text)
        self.setSizePolicy(QtWidgets.QSizePolicy.Policy.Expanding, QtWidgets.QSizePolicy.Policy.Expanding)
        self.setMinimumHeight(min_h)
        self.setFont(QtGui.QFont("Segoe UI", 11))
        if slot:
            self.clicked.connect(slot)

class CalcWindow(QtWidgets.QWidget):
    def __init__(self, engine: CalculatorEngine):
        super().__init__()
        self.engine = engine
        self.setWindowTitle("Calculator 2025")
        self.setMinimumSize(360, 520)
        self.dark_mode = True
        self.show_history = True
        self.compact_mode = False
        self.buttons = {}

        self._build_ui()
        self._apply_styles()
        self._connect_shortcuts()
        self._render(self.engine.snapshot())
        self._refresh_history()

    def _build_ui(self):
        main = QtWidgets.QHBoxLayout(self)
        main.setContentsMargins(12,12,12,12)

        # Left: calculator area
        left = QtWidgets.QVBoxLayout()
        left.setSpacing(8)

        # Top bar: title, theme toggle, compact toggle, history toggle
        topbar = QtWidgets.QHBoxLayout()
        title = QtWidgets.QLabel("Calculator")
        title.setFont(QtGui.QFont("Segoe UI", 14, QtGui.QFont.Weight.DemiBold))
        topbar.addWidget(title)
        topbar.addStretch()

        self.theme_btn = QtWidgets.QPushButton("🌗")
        self.theme_btn.setToolTip("Toggle theme")
        self.theme_btn.setFixedSize(36,28)
        self.theme_btn.clicked.connect(self.toggle_theme)
        topbar.addWidget(self.theme_btn)

        self.compact_btn = QtWidgets.QPushButton("☐")
        self.compact_btn.setToolTip("Toggle compact mode")
        self.compact_btn.setFixedSize(36,28)
        self.compact_btn.clicked.connect(self.toggle_compact)
        topbar.addWidget(self.compact_btn)

        self.history_btn = QtWidgets.QPushButton("History <<")
        self.history_btn.setToolTip("Show or hide history")
        self.history_btn.clicked.connect(self.toggle_history)
        topbar.addWidget(self.history_btn)

        left.addLayout(topbar)

        # Expression label (small) + result lineedit
        self.expr_label = QtWidgets.QLabel("")
        self.expr_label.setAlignment(QtCore.Qt.AlignmentFlag.AlignRight)
        self.expr_label.setFont(QtGui.QFont("Segoe UI", 10))
        left.addWidget(self.expr_label)

        self.result_edit = QtWidgets.QLineEdit("0")
        self.result_edit.setReadOnly(True)
        self.result_edit.setAlignment(QtCore.Qt.AlignmentFlag.AlignRight)
        self.result_edit.setMinimumHeight(72)
        self.result_edit.setFrame(False)
        left.addWidget(self.result_edit)

        e = self.engine
        btns = [
            (0,0,"%", e.percent), (0,1,"CE", e.clear_entry), (0,2,"C", e.clear), (0,3,"⌫", e.backspace),
            (1,0,"1/x", e.reciprocal), (1,1,"x²", e.square), (1,2,"√x", e.square_root), (1,3,"÷", lambda: e.input_operator(Operator.DIVIDE)),
            (2,0,"7", lambda: e.input_digit(7)), (2,1,"8", lambda: e.input_digit(8)), (2,2,"9", lambda: e.input_digit(9)), (2,3,"×", lambda: e.input_operator(Operator.MULTIPLY)),
            (3,0,"4", lambda: e.input_digit(4)), (3,1,"5", lambda: e.input_digit(5)), (3,2,"6", lambda: e.input_digit(6)), (3,3,"-", lambda: e.input_operator(Operator.SUBTRACT)),
            (4,0,"1", lambda: e.input_digit(1)), (4,1,"2", lambda: e.input_digit(2)), (4,2,"3", lambda: e.input_digit(3)), (4,3,"+", lambda: e.input_operator(Operator.ADD)),
            (5,0,"±", e.toggle_sign), (5,1,"0", lambda: e.input_digit(0)), (5,2,".", e.input_decimal), (5,3,"=", e.compute),
        ]

        self.grid = QtWidgets.QGridLayout()
        self.grid.setSpacing(8)
        for r,c,t,action in btns:
            btn = RoundedButton(t, self._dispatcher(action))
            if t == "=":
                btn.setObjectName("equals")
            self.buttons[t] = btn
            self.grid.addWidget(btn, r, c)
        left.addLayout(self.grid)

        main.addLayout(left, 3)

        # Right: history panel
        self.history_frame = QtWidgets.QWidget()
        self.history_panel = QtWidgets.QVBoxLayout(self.history_frame)
        self.history_panel.setContentsMargins(0,0,0,0)
        header = QtWidgets.QHBoxLayout()
        hlabel = QtWidgets.QLabel("History")
        hlabel.setFont(QtGui.QFont("Segoe UI", 12, QtGui.QFont.Weight.DemiBold))
        header.addWidget(hlabel)
        header.addStretch()
        self.clear_history_btn = QtWidgets.QPushButton("Clear")
        self.clear_history_btn.clicked.connect(self.clear_history)
        header.addWidget(self.clear_history_btn)
        self.history_panel.addLayout(header)

        self.history_empty = QtWidgets.QLabel("No history yet")
        self.history_empty.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        self.history_panel.addWidget(self.history_empty)

        self.history_list = QtWidgets.QListWidget()
        self.history_list.itemClicked.connect(self.on_history_click)
        self.history_panel.addWidget(self.history_list)
        main.addWidget(self.history_frame, 2)

        self._assign_key_map()

    # ----------------------------
    # Engine plumbing
    # ----------------------------
    def _dispatcher(self, action):
        def run():
            self._dispatch(action)
        return run

    def _dispatch(self, action):
        before = self.engine.history.entries()
        snap = action()
        self._render(snap)
        if self.engine.history.entries() != before:
            self._refresh_history()

    def _render(self, snap: Snapshot):
        self.expr_label.setText(snap.expression)
        self.result_edit.setText(snap.display)
        # shrink long numbers so they stay inside the window
        n = len(snap.display)
        size = 18 if n > 12 else 22 if n > 8 else 28
        self.result_edit.setFont(QtGui.QFont("Segoe UI", size, QtGui.QFont.Weight.Bold))

    def _refresh_history(self):
        self.history_list.clear()
        entries = self.engine.history.entries()
        for entry in entries:
            item = QtWidgets.QListWidgetItem(str(entry))
            item.setData(QtCore.Qt.ItemDataRole.UserRole, entry.result)
            self.history_list.addItem(item)
        self.history_empty.setVisible(not entries)
        self.history_list.setVisible(bool(entries))
        self.clear_history_btn.setEnabled(bool(entries))

    # ----------------------------
    # Keyboard
    # ----------------------------
    def _assign_key_map(self):
        e = self.engine
        self._key_map = {
            QtCore.Qt.Key.Key_Enter: e.compute,
            QtCore.Qt.Key.Key_Return: e.compute,
            QtCore.Qt.Key.Key_Backspace: e.backspace,
            QtCore.Qt.Key.Key_Delete: e.clear_entry,
            QtCore.Qt.Key.Key_Escape: e.clear,
        }
        self._char_map = {
            ".": e.input_decimal,
            ",": e.input_decimal,
            "%": e.percent,
            "=": e.compute,
        }
        for d in "0123456789":
            self._char_map[d] = lambda d=d: e.input_digit(d)
        for op in Operator:
            self._char_map[op.value] = lambda op=op: e.input_operator(op)

    def _connect_shortcuts(self):
        copy_sc = QtGui.QShortcut(QtGui.QKeySequence("Ctrl+C"), self)
        copy_sc.activated.connect(self.copy_result)
        paste_sc = QtGui.QShortcut(QtGui.QKeySequence("Ctrl+V"), self)
        paste_sc.activated.connect(self.paste_number)

    def keyPressEvent(self, event):
        k = event.key()
        if k in self._key_map:
            self._dispatch(self._key_map[k])
            return
        ch = event.text()
        if ch in self._char_map:
            self._dispatch(self._char_map[ch])
            return
        super().keyPressEvent(event)

    # ----------------------------
    # Styles
    # ----------------------------
    def _apply_styles(self):
        self.setStyleSheet(self._stylesheet())

    def _stylesheet(self):
        if self.dark_mode:
            bg = "#202020"
            card = "#282828"
            text = "#FFFFFF"
            sub = "#969696"
            accent = "#76B9ED"
            btn = "#3B3B3B"
            hover = "#454545"
        else:
            bg = "#F3F3F3"
            card = "#FFFFFF"
            text = "#1A1A1A"
            sub = "#5F5F5F"
            accent = "#005FB8"
            btn = "#FBFBFB"
            hover = "#EAEAEA"
        return f"""
            QWidget {{
                background: {bg};
                color: {text};
                font-family: "Segoe UI", "Inter", sans-serif;
            }}
            QLineEdit {{ background: transparent; color: {text}; }}
            QLabel {{ color: {sub}; }}
            QListWidget {{
                background: {card};
                border-radius: 6px;
                padding: 6px;
            }}
            QPushButton {{
                background: {btn};
                color: {text};
                border: none;
                border-radius: 4px;
                padding: 8px;
            }}
            QPushButton:hover {{ background: {hover}; }}
            QPushButton#equals {{ background: {accent}; color: {bg}; }}
        """

    # ----------------------------
    # Actions
    # ----------------------------
    def toggle_theme(self):
        self.dark_mode = not self.dark_mode
        self._apply_styles()

    def toggle_history(self):
        self.show_history = not self.show_history
        self.history_frame.setVisible(self.show_history)
        self.history_btn.setText("History <<" if self.show_history else "History >>")

    def toggle_compact(self):
        # compact mode hides the unary row and the history panel
        self.compact_mode = not self.compact_mode
        for c in range(3):
            item = self.grid.itemAtPosition(1, c)
            if item:
                item.widget().setVisible(not self.compact_mode)
        self.history_frame.setVisible(self.show_history and not self.compact_mode)
        self.history_btn.setEnabled(not self.compact_mode)
        if self.compact_mode:
            self.setMinimumSize(320, 420)
        else:
            self.setMinimumSize(360, 520)

    def clear_history(self):
        self.engine.history.clear()
        self._refresh_history()

    def on_history_click(self, item):
        value = item.data(QtCore.Qt.ItemDataRole.UserRole)
        if value is not None:
            self._dispatch(lambda: self.engine.recall(value))

    def copy_result(self):
        QtWidgets.QApplication.clipboard().setText(self.result_edit.text())

    def paste_number(self):
        text = QtWidgets.QApplication.clipboard().text()
        try:
            value = parse_number(text.replace(",", ""))
        except ValueError:
            logger.debug("Ignoring non-numeric paste: %r", text)
            return
        self._dispatch(lambda: self.engine.recall(value))

# ----------------------------
# Run app
# ----------------------------
def main():
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    store = HistoryStore(config.HISTORY_FILE, capacity=config.HISTORY_LIMIT)
    store.load()
    engine = CalculatorEngine(store)

    app = QtWidgets.QApplication(sys.argv)
    window = CalcWindow(engine)
    window.show()
    logger.info("Calculator started; history file %s", config.HISTORY_FILE)
    sys.exit(app.exec())

if __name__ == "__main__":
    main()
