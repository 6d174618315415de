"""
Vue principale du tableau de bord d'administration du catalogue.

Ce module définit `AdminDashboardView`, qui affiche une page de notices
OpenLibrary enrichies (auteur, naissance, œuvre majeure) avec choix de la
taille de page, recherche par auteur, pagination et édition en ligne.

L'état est un `DashboardState` immuable : chaque interaction applique un
reducer de `services.dashboard_state`, puis la vue se redessine. Un
changement de page, de taille de page ou de recherche relance un chargement
dans un thread de travail ; le résultat revient par signal Qt dans le thread
de l'interface.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from functools import partial

from PySide6.QtCore import Qt, Signal, Slot
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QPushButton,
    QStackedWidget,
    QTableView,
    QVBoxLayout,
    QWidget,
)

from ..services.config_service import AppConfig
from ..services.dashboard_state import (
    PAGE_SIZES,
    DashboardState,
    FetchStatus,
    begin_edit,
    begin_fetch,
    edit_field,
    fetch_failed,
    fetch_succeeded,
    first_page,
    go_to_page,
    initial_state,
    last_page,
    needs_fetch,
    next_page,
    previous_page,
    save_edit,
    set_page_size,
    set_search_query,
)
from ..services.openlibrary_service import CatalogServiceError, OpenLibraryService
from ..services.translation_service import translate
from .catalog_table_model import CatalogTableModel
from .pagination_bar import PaginationBar

logger = logging.getLogger(__name__)


class AdminDashboardView(QWidget):
    """
    Widget du tableau de bord : formulaire de filtre, table et pagination.

    Signals:
        stateChanged (DashboardState): émis après chaque transition d'état.
    """

    stateChanged = Signal(object)

    # Retour des chargements, émis depuis le thread de travail
    _fetchSucceeded = Signal(int, object)  # (epoch, PageResult)
    _fetchFailed = Signal(int, str)  # (epoch, message)

    def __init__(
        self,
        parent: QWidget | None = None,
        config: AppConfig | None = None,
        service: OpenLibraryService | None = None,
    ):
        """Initialise la vue et lance le premier chargement."""
        super().__init__(parent)
        self._config = config or AppConfig()
        self._service = service or OpenLibraryService(
            base_url=self._config.base_url,
            subject=self._config.subject,
            timeout=self._config.request_timeout,
            max_workers=self._config.max_workers,
        )
        self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="catalog")
        self._closed = False
        self._state: DashboardState = initial_state(self._config.default_page_size)

        self._setup_ui()
        self._connect_signals()
        self.refresh()

    @property
    def state(self) -> DashboardState:
        return self._state

    def _setup_ui(self):
        """Construit l'interface du tableau de bord."""
        root_layout = QVBoxLayout(self)

        title_label = QLabel(translate("dashboard.view_title"))
        title_label.setStyleSheet("font-size: 16px; font-weight: bold;")
        root_layout.addWidget(title_label)

        # --- Taille de page ---
        per_page_layout = QHBoxLayout()
        per_page_layout.addWidget(QLabel(translate("dashboard.per_page_label")))
        self.page_size_combo = QComboBox()
        for size in PAGE_SIZES:
            self.page_size_combo.addItem(str(size), size)
        self.page_size_combo.setCurrentIndex(PAGE_SIZES.index(self._state.page_size))
        per_page_layout.addWidget(self.page_size_combo)
        per_page_layout.addStretch()
        root_layout.addLayout(per_page_layout)

        # --- Recherche par auteur ---
        search_layout = QHBoxLayout()
        search_layout.addWidget(QLabel(translate("dashboard.search_label")))
        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText(translate("dashboard.search_placeholder"))
        self.search_input.setClearButtonEnabled(True)
        search_layout.addWidget(self.search_input)
        root_layout.addLayout(search_layout)

        # --- Zone principale : chargement / erreur / table ---
        self.stack = QStackedWidget()
        self.loading_label = QLabel(translate("dashboard.loading"))
        self.loading_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.error_label = QLabel()
        self.error_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.error_label.setStyleSheet("color: red;")
        self.error_label.setWordWrap(True)

        table_page = QWidget()
        table_layout = QVBoxLayout(table_page)
        table_layout.setContentsMargins(0, 0, 0, 0)
        self.table_model = CatalogTableModel(self)
        self.table_view = QTableView()
        self.table_view.setModel(self.table_model)
        self.table_view.setAlternatingRowColors(True)
        self.table_view.setSelectionBehavior(QTableView.SelectionBehavior.SelectRows)
        self.table_view.setEditTriggers(QTableView.EditTrigger.AllEditTriggers)
        self.table_view.horizontalHeader().setSectionResizeMode(
            QHeaderView.ResizeMode.Interactive
        )
        self.table_view.horizontalHeader().setStretchLastSection(True)
        table_layout.addWidget(self.table_view)
        self.pagination = PaginationBar()
        table_layout.addWidget(self.pagination)

        self.stack.addWidget(self.loading_label)
        self.stack.addWidget(self.error_label)
        self.stack.addWidget(table_page)
        self._table_page = table_page
        root_layout.addWidget(self.stack)

    def _connect_signals(self):
        """Connecte les widgets internes aux reducers."""
        self.page_size_combo.currentIndexChanged.connect(self._on_page_size_changed)
        self.search_input.textChanged.connect(self._on_search_changed)
        self.table_model.fieldEdited.connect(self._on_field_edited)

        self.pagination.firstRequested.connect(lambda: self.dispatch(first_page))
        self.pagination.previousRequested.connect(lambda: self.dispatch(previous_page))
        self.pagination.nextRequested.connect(lambda: self.dispatch(next_page))
        self.pagination.lastRequested.connect(lambda: self.dispatch(last_page))
        self.pagination.pageRequested.connect(lambda page: self.dispatch(go_to_page, page))

        # Toujours en file : le résultat est traité par la boucle Qt, jamais dans _start_fetch
        self._fetchSucceeded.connect(self._on_fetch_succeeded, Qt.ConnectionType.QueuedConnection)
        self._fetchFailed.connect(self._on_fetch_failed, Qt.ConnectionType.QueuedConnection)

    # --- Transitions ---

    def dispatch(self, reducer: Callable[..., DashboardState], *args) -> None:
        """Applique un reducer ; relance un chargement si page/taille/recherche changent."""
        old = self._state
        self._state = reducer(old, *args)
        if needs_fetch(old, self._state):
            self._start_fetch(old)
        else:
            self._render(old)

    @Slot()
    def refresh(self) -> None:
        """Recharge la page courante (montage de la vue)."""
        self._start_fetch(self._state)

    def _start_fetch(self, old: DashboardState) -> None:
        self._state = begin_fetch(self._state)
        epoch = self._state.epoch
        page, page_size, query = self._state.fetch_key
        future = self._executor.submit(self._service.fetch_page, page, page_size, query)
        future.add_done_callback(partial(self._on_future_done, epoch))
        self._render(old)

    def _on_future_done(self, epoch: int, future: Future) -> None:
        """Appelé dans le thread de travail : relaie le résultat par signal."""
        if self._closed:
            return
        try:
            result = future.result()
        except CancelledError:
            return
        except CatalogServiceError as e:
            self._fetchFailed.emit(epoch, str(e))
            return
        except Exception as e:
            logger.exception("Erreur inattendue pendant le chargement du catalogue")
            self._fetchFailed.emit(epoch, str(e))
            return
        self._fetchSucceeded.emit(epoch, result)

    @Slot(int, object)
    def _on_fetch_succeeded(self, epoch: int, result) -> None:
        if epoch != self._state.epoch:
            logger.debug("Résultat périmé ignoré (époque %s, courante %s)", epoch, self._state.epoch)
            return
        self.dispatch(fetch_succeeded, epoch, result)

    @Slot(int, str)
    def _on_fetch_failed(self, epoch: int, message: str) -> None:
        if epoch != self._state.epoch:
            logger.debug("Échec périmé ignoré (époque %s, courante %s)", epoch, self._state.epoch)
            return
        self.dispatch(fetch_failed, epoch, message)

    @Slot(int)
    def _on_page_size_changed(self, index: int) -> None:
        self.dispatch(set_page_size, int(self.page_size_combo.itemData(index)))

    @Slot(str)
    def _on_search_changed(self, text: str) -> None:
        self.dispatch(set_search_query, text)

    @Slot(int, str, str)
    def _on_field_edited(self, row: int, name: str, value: str) -> None:
        if self._state.edit is not None and self._state.edit.row == row:
            self.dispatch(edit_field, name, value)

    # --- Rendu ---

    def _render(self, old: DashboardState) -> None:
        """Redessine les parties de la vue qui dépendent de l'état."""
        state = self._state

        if state.status == FetchStatus.FAILED:
            self.error_label.setText(translate("dashboard.error", message=state.error))
            self.stack.setCurrentWidget(self.error_label)
        elif state.status == FetchStatus.READY:
            self.stack.setCurrentWidget(self._table_page)
        else:
            self.stack.setCurrentWidget(self.loading_label)

        old_row = old.edit.row if old.edit is not None else None
        new_row = state.edit.row if state.edit is not None else None
        if old.entries is not state.entries or old_row != new_row or old is state:
            self.table_model.set_rows(state.entries, state.edit)
            self._install_row_widgets()
        elif state.edit is not None and old.edit != state.edit:
            self.table_model.set_draft(state.edit)

        self.pagination.update_state(state)
        self.stateChanged.emit(state)

    def _install_row_widgets(self) -> None:
        """Boutons Edit/Save de la colonne Actions + éditeurs de la ligne en édition."""
        edit_row = self.table_model.edit_row
        for row in range(self.table_model.rowCount()):
            if row == edit_row:
                button = QPushButton(translate("dashboard.save_button"))
                button.setStyleSheet("color: green;")
                button.clicked.connect(lambda _checked=False: self.dispatch(save_edit))
                for col in range(CatalogTableModel.ACTIONS_COLUMN):
                    self.table_view.openPersistentEditor(self.table_model.index(row, col))
            else:
                button = QPushButton(translate("dashboard.edit_button"))
                button.clicked.connect(
                    lambda _checked=False, r=row: self.dispatch(begin_edit, r)
                )
            self.table_view.setIndexWidget(
                self.table_model.index(row, CatalogTableModel.ACTIONS_COLUMN), button
            )
        self.table_view.resizeColumnsToContents()

    def shutdown(self) -> None:
        """Arrête le thread de travail et ferme la session HTTP."""
        self._closed = True
        self._executor.shutdown(wait=False, cancel_futures=True)
        self._service.close()
