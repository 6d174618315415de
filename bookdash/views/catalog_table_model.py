"""Modèle de données Qt pour la table des notices du catalogue."""

from __future__ import annotations

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt, Signal

from ..services.dashboard_state import EDITABLE_FIELDS, EditBuffer
from ..services.translation_service import translate
from ..services.types import CatalogEntry


class CatalogTableModel(QAbstractTableModel):
    """Affiche une page de notices ; la ligne en édition montre sa copie de travail.

    Le modèle ne modifie jamais les notices : une saisie dans une cellule est
    relayée par `fieldEdited` et c'est la vue qui applique le reducer.
    """

    fieldEdited = Signal(int, str, str)  # (row, field, value)

    # 🎯 Colonnes affichées, dans l'ordre ; la dernière porte les boutons
    COLUMNS: tuple[str, ...] = EDITABLE_FIELDS + ("actions",)
    ACTIONS_COLUMN = len(COLUMNS) - 1

    def __init__(self, parent=None):
        super().__init__(parent)
        self._entries: tuple[CatalogEntry, ...] = ()
        self._edit: EditBuffer | None = None

    def set_rows(self, entries: tuple[CatalogEntry, ...], edit: EditBuffer | None) -> None:
        self.beginResetModel()
        self._entries = tuple(entries)
        self._edit = edit
        self.endResetModel()

    def set_draft(self, edit: EditBuffer) -> None:
        """Met à jour la copie de travail de la ligne déjà en édition."""
        self._edit = edit
        self.dataChanged.emit(
            self.index(edit.row, 0), self.index(edit.row, self.ACTIONS_COLUMN - 1)
        )

    @property
    def edit_row(self) -> int | None:
        return self._edit.row if self._edit is not None else None

    def get_entry(self, row: int) -> CatalogEntry | None:
        if 0 <= row < len(self._entries):
            return self._entries[row]
        return None

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return 0 if parent.isValid() else len(self._entries)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return 0 if parent.isValid() else len(self.COLUMNS)

    def _is_field(self, index: QModelIndex) -> bool:
        return index.isValid() and 0 <= index.column() < self.ACTIONS_COLUMN

    def data(self, index: QModelIndex, role=Qt.ItemDataRole.DisplayRole):
        """Données d'une cellule."""
        if not self._is_field(index):
            return None
        entry = self.get_entry(index.row())
        if entry is None:
            return None
        col_name = self.COLUMNS[index.column()]

        if role in (Qt.ItemDataRole.DisplayRole, Qt.ItemDataRole.EditRole):
            if self._edit is not None and index.row() == self._edit.row:
                return self._edit.draft.get(col_name, "")
            return self.display_value(entry, col_name)

        if role == Qt.ItemDataRole.UserRole:
            return entry

        return None

    @staticmethod
    def display_value(entry: CatalogEntry, col_name: str) -> str:
        if col_name == "subject":
            return entry.subject_text
        value = getattr(entry, col_name)
        return "" if value is None else str(value)

    def flags(self, index: QModelIndex) -> Qt.ItemFlag:
        if not index.isValid():
            return Qt.ItemFlag.NoItemFlags
        flags = Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable
        if self._is_field(index) and index.row() == self.edit_row:
            flags |= Qt.ItemFlag.ItemIsEditable
        return flags

    def setData(self, index: QModelIndex, value, role=Qt.ItemDataRole.EditRole) -> bool:
        if role != Qt.ItemDataRole.EditRole or not self._is_field(index):
            return False
        if index.row() != self.edit_row:
            return False
        self.fieldEdited.emit(index.row(), self.COLUMNS[index.column()], str(value))
        return True

    def headerData(
        self, section: int, orientation: Qt.Orientation, role: int = Qt.ItemDataRole.DisplayRole
    ) -> str | None:
        if role == Qt.ItemDataRole.DisplayRole and orientation == Qt.Orientation.Horizontal:
            if 0 <= section < len(self.COLUMNS):
                return translate(f"dashboard.column.{self.COLUMNS[section]}")
        return None
