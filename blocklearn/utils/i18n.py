import gettext
import logging
from gettext import gettext as _
from pathlib import Path

logger = logging.getLogger(__name__)

# Catalogs live in blocklearn/i18n/<lang>/LC_MESSAGES/blocklearn.mo. None ship
# yet, so gettext falls back to the untranslated messages.
locale_dir = Path(__file__).parent.parent / "i18n"


gettext.bindtextdomain(
    "blocklearn",
    localedir=str(locale_dir),
)

logger.debug(
    _('Loading locale data from "{locale_folder}"').format(
        locale_folder=locale_dir
    )
)
