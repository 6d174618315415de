"""
Module principal de l'application BookDash.

Contient la MainWindow, qui héberge le tableau de bord du catalogue, et le
point d'entrée `main()` qui prépare configuration, logging et langue avant de
lancer la boucle d'événements Qt.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import replace

from PySide6.QtCore import Slot
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QApplication, QMainWindow

from .services.config_service import AppConfig, load_config, save_config
from .services.dashboard_state import DashboardState, FetchStatus
from .services.logging_config import setup_app_logging
from .services.translation_service import set_language, translate
from .views import __app_name__, __version__
from .views.admin_dashboard import AdminDashboardView

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Fenêtre principale de l'application."""

    def __init__(self, config: AppConfig, parent=None, service=None):
        """Initialise la fenêtre principale."""
        super().__init__(parent)
        self._config = config
        self.setWindowTitle(translate("window.title"))
        self.resize(1200, 800)

        self.dashboard = AdminDashboardView(self, config=config, service=service)
        self.setCentralWidget(self.dashboard)
        self._create_status_bar()
        self.dashboard.stateChanged.connect(self._on_state_changed)

    def _create_status_bar(self):
        """Crée une barre de statut simple."""
        self.statusBar().showMessage(translate("statusbar.loading"))

    @Slot(object)
    def _on_state_changed(self, state: DashboardState) -> None:
        """Résume la page affichée dans la barre de statut."""
        if state.status == FetchStatus.READY:
            message = translate(
                "statusbar.page",
                page=state.page,
                pages=state.total_pages,
                total=state.total_count,
            )
        elif state.status == FetchStatus.FAILED:
            message = translate("statusbar.failed")
        else:
            message = translate("statusbar.loading")
        self.statusBar().showMessage(message)

    def _save_page_size(self) -> None:
        """Mémorise la dernière taille de page choisie pour le prochain lancement."""
        page_size = self.dashboard.state.page_size
        if page_size != self._config.default_page_size:
            self._config = replace(self._config, default_page_size=page_size)
            save_config(self._config)

    def closeEvent(self, event: QCloseEvent) -> None:
        """Sauvegarde la taille de page, libère le thread de chargement et la session HTTP."""
        self._save_page_size()
        self.dashboard.shutdown()
        logger.info("👋 Fermeture de %s", __app_name__)
        super().closeEvent(event)


def main() -> int:
    """Point d'entrée de la commande `bookdash`."""
    config = load_config()
    setup_app_logging(config.log_level, console_output=config.console_logging)
    set_language(config.language)
    logger.info("🚀 Démarrage de %s %s", __app_name__, __version__)

    app = QApplication(sys.argv)
    app.setApplicationName(__app_name__)
    app.setApplicationVersion(__version__)

    window = MainWindow(config)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
