"""Barre de pagination : First / Prev / pages numérotées / Next / Last."""

from __future__ import annotations

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QHBoxLayout, QPushButton, QWidget

from ..services.dashboard_state import DashboardState
from ..services.translation_service import translate


class PaginationBar(QWidget):
    """
    Widget "stupide" : affiche la pagination d'un `DashboardState` et émet des
    signaux, la vue parente applique les reducers correspondants.

    Signals:
        firstRequested, previousRequested, nextRequested, lastRequested
        pageRequested (int): clic sur un numéro de page.
    """

    firstRequested = Signal()
    previousRequested = Signal()
    nextRequested = Signal()
    lastRequested = Signal()
    pageRequested = Signal(int)

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self._layout = QHBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)

        self.first_button = self._nav_button("first", self.firstRequested)
        self.prev_button = self._nav_button("prev", self.previousRequested)
        self._layout.addWidget(self.first_button)
        self._layout.addWidget(self.prev_button)

        # Conteneur des boutons numérotés, reconstruit à chaque rendu
        self._pages_layout = QHBoxLayout()
        self._layout.addLayout(self._pages_layout)
        self.page_buttons: list[QPushButton] = []

        self.next_button = self._nav_button("next", self.nextRequested)
        self.last_button = self._nav_button("last", self.lastRequested)
        self._layout.addWidget(self.next_button)
        self._layout.addWidget(self.last_button)
        self._layout.addStretch()

    def _nav_button(self, name: str, signal) -> QPushButton:
        button = QPushButton(translate(f"pagination.{name}"))
        button.setToolTip(translate(f"pagination.{name}_tooltip"))
        button.setFixedWidth(32)
        button.clicked.connect(signal)
        return button

    def update_state(self, state: DashboardState) -> None:
        """Met à jour les boutons selon la page courante et le nombre de pages."""
        self.first_button.setEnabled(state.can_go_back)
        self.prev_button.setEnabled(state.can_go_back)
        self.next_button.setEnabled(state.can_go_forward)
        self.last_button.setEnabled(state.can_go_forward)

        # Nettoie les anciens numéros avant de reconstruire la fenêtre
        while self._pages_layout.count():
            item = self._pages_layout.takeAt(0)
            if widget := item.widget():
                widget.deleteLater()
        self.page_buttons = []

        for number in state.page_window:
            button = QPushButton(str(number))
            button.setCheckable(True)
            button.setChecked(number == state.page)
            button.setFixedWidth(40)
            button.clicked.connect(lambda _checked=False, n=number: self.pageRequested.emit(n))
            self._pages_layout.addWidget(button)
            self.page_buttons.append(button)
