"""Version et informations de l'application BookDash."""

__version__ = "1.0.0"
__app_name__ = "BookDash"
__author__ = "6f4"
__license__ = "GPL-3.0"
__copyright__ = "© 2025 6f4. Tous droits réservés."
__description__ = "Tableau de bord d'administration du catalogue science-fiction OpenLibrary"
