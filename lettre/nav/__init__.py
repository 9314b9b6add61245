"""Navigation state: folder universe, selection, message list and cursors."""

from lettre.nav.navigator import FolderSelectionCallback, Mode, Navigator
from lettre.nav.search import wrap_search

__all__ = ["Navigator", "Mode", "FolderSelectionCallback", "wrap_search"]
