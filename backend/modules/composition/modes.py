"""
modules/composition/modes.py
-----------------------------
The three states of the tours page, each carrying only its own data:

  ChoosingMode — the customer has not picked yet
  BrowseMode   — read-only list of predefined tours (+ people selector)
  BuildMode    — a TourComposer for a custom tour

Browse mode never reaches the composer; build mode never touches the
catalog. Opening either mode fetches what it needs up front, so a mode
value only exists once its data has resolved.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional, Union

from modules.composition.engine import TourComposer
from modules.observability.logger import StructuredLogger
from modules.providers.catalog import CatalogProvider, TourQuote
from modules.providers.settings import SettingsProvider
from schemas.tour import PredefinedTour


@dataclass(frozen=True)
class ChoosingMode:
    kind: Literal["choosing"] = "choosing"


@dataclass
class BrowseMode:
    tours: list[PredefinedTour] = field(default_factory=list)
    people: int = 1
    kind: Literal["explore"] = "explore"

    def quotes(self) -> list[TourQuote]:
        return [TourQuote.for_tour(t, self.people) for t in self.tours]


@dataclass
class BuildMode:
    composer: TourComposer
    kind: Literal["build"] = "build"


TourPageMode = Union[ChoosingMode, BrowseMode, BuildMode]


def open_browse(catalog: CatalogProvider, people: int = 1) -> BrowseMode:
    """Enter browse mode. Raises FetchError when the catalog is unreachable."""
    return BrowseMode(tours=catalog.list_tours(), people=people)


def open_build(
    settings_provider: SettingsProvider,
    event_log: Optional[StructuredLogger] = None,
) -> BuildMode:
    """
    Enter build mode with a fresh composer.

    The settings snapshot is taken here, once; later admin edits do not
    reach this session. Raises FetchError when the settings are unreachable.
    """
    settings = settings_provider.get_configuration()
    composer = TourComposer(settings, event_log=event_log)
    if event_log is not None:
        event_log.log(composer.session_id, "SESSION_OPEN", {"settings": settings.to_dict()})
    return BuildMode(composer=composer)
