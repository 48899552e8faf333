from typing import Any, Callable, Optional

from ....core.errors import UnclassifiedRemoteError
from ....core.logging import log
from ....core.models import Locale, LocaleBootstrap


def bootstrap_locales(client: Any, locale_filter: Optional[Callable[[Locale], bool]] = None) -> LocaleBootstrap:
    """
    Fetch the space locales once and pick the default.

    The default locale is taken from the full list; ``locale_filter`` only
    narrows the returned ``locales``, so a filtered-out default is still
    the fallback consumers use.
    """
    log.info("ingest.contentful.locales.fetch")
    response = client.get_locales()
    locales = [Locale.model_validate(item) for item in response.get("items") or []]

    default = next((locale for locale in locales if locale.default), None)
    if default is None:
        raise UnclassifiedRemoteError("Space has no default locale")

    if locale_filter is not None:
        locales = [locale for locale in locales if locale_filter(locale)]

    log.info(
        "ingest.contentful.locales.done",
        default_locale=default.code,
        locales=[locale.code for locale in locales],
    )
    return LocaleBootstrap(locales=locales, default_locale=default.code)
