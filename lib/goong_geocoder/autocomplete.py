"""
Headless autocomplete session for a place search surface.

AutocompleteSession holds the state a search UI needs: it debounces text
input into forward geocoding requests, exposes predictions as sections and
their children as rows, and resolves a selected entry into a Placemark that
is handed to the delegate. Rendering is up to the caller.

Example:
    >>> class Delegate(AutocompleteDelegate):
    ...     def didAutocomplete(self, session, placemark):
    ...         print(f"Selected: {placemark}")
    ...     def didFailAutocomplete(self, session, error):
    ...         print(f"Failed: {error}")
    >>>
    >>> session = AutocompleteSession(GoongGeocoder("your_api_key"), Delegate())
    >>> session.textDidChange("91 Trung")
    >>> # ...after debounce delay, session.predictions are filled
    >>> await session.selectChild(0, 0)
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .client import GoongGeocoder
from .constants import FORWARD_RESULT_COUNT
from .exceptions import GeocoderError
from .models import Child, Placemark, Prediction
from .options import CoordinateLike, ForwardGeocodeOptions

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_DELAY = 0.5


class AutocompleteDelegate(ABC):
    """Receives the outcome of a selection in AutocompleteSession"""

    @abstractmethod
    def didAutocomplete(self, session: "AutocompleteSession", placemark: Optional[Placemark]) -> None:
        raise NotImplementedError

    @abstractmethod
    def didFailAutocomplete(self, session: "AutocompleteSession", error: Optional[GeocoderError]) -> None:
        raise NotImplementedError


class AutocompleteSession:
    """State of one place search surface, dood!

    Attributes:
        geocoder: Client used for requests
        delegate: Receives selection outcome and failures (optional)
        debounceDelay: Seconds to wait after last text change before searching
        focalLocation: Location to prioritize results around (optional)
        maximumResultCount: Number of predictions to request
        text: Current search text
        searchActive: Whether there is non-empty search text
        predictions: Predictions of the latest successful search
    """

    def __init__(
        self,
        geocoder: GoongGeocoder,
        delegate: Optional[AutocompleteDelegate] = None,
        *,
        debounceDelay: float = DEFAULT_DEBOUNCE_DELAY,
        focalLocation: Optional[CoordinateLike] = None,
        maximumResultCount: int = FORWARD_RESULT_COUNT,
    ) -> None:
        self.geocoder = geocoder
        self.delegate = delegate
        self.debounceDelay = debounceDelay
        self.focalLocation = focalLocation
        self.maximumResultCount = maximumResultCount
        self.text = ""
        self.searchActive = False
        self.predictions: List[Prediction] = []
        self._pendingSearch: Optional["asyncio.Task[List[Prediction]]"] = None

    @classmethod
    def fromConfig(
        cls,
        geocoder: GoongGeocoder,
        config: Dict[str, Any],
        delegate: Optional[AutocompleteDelegate] = None,
    ) -> "AutocompleteSession":
        """Create session from ``[autocomplete]`` config section (``debounce-delay``, ``limit``)."""
        return cls(
            geocoder,
            delegate,
            debounceDelay=float(config.get("debounce-delay", DEFAULT_DEBOUNCE_DELAY)),
            maximumResultCount=int(config.get("limit", FORWARD_RESULT_COUNT)),
        )

    def textDidChange(self, text: str) -> Optional["asyncio.Task[List[Prediction]]"]:
        """Schedule search for text after debounce delay, cancelling the previous one.

        Must be called from a running event loop.

        Returns:
            Scheduled search task, None for empty text
        """
        self._cancelPendingSearch()
        self.text = text
        self.searchActive = bool(text)
        if not text:
            return None

        self._pendingSearch = asyncio.get_running_loop().create_task(self._debouncedSearch(text))
        return self._pendingSearch

    async def _debouncedSearch(self, text: str) -> List[Prediction]:
        await asyncio.sleep(self.debounceDelay)
        return await self.search(text)

    async def search(self, query: str) -> List[Prediction]:
        """Search predictions for query right away.

        Empty query issues no request. On error the delegate is notified and
        previous predictions are kept.
        """
        if not query:
            return self.predictions

        options = ForwardGeocodeOptions(
            query,
            focalLocation=self.focalLocation,
            maximumResultCount=self.maximumResultCount,
        )
        try:
            result = await self.geocoder.geocode(options)
        except GeocoderError as e:
            logger.error(f"Autocomplete search for {query!r} failed: {e}")
            self._reportFailure(e)
            return self.predictions

        if result.predictions:
            self.predictions = list(result.predictions)
        else:
            logger.debug(f"No predictions for {query!r}")
        return self.predictions

    def numberOfSections(self) -> int:
        return len(self.predictions)

    def numberOfRows(self, section: int) -> int:
        prediction = self.predictions[section]
        if prediction.hasChildren and prediction.children:
            return len(prediction.children)
        return 0

    def childAt(self, section: int, row: int) -> Child:
        children = self.predictions[section].children or []
        return children[row]

    async def selectPrediction(self, section: int) -> Optional[Placemark]:
        """Resolve prediction at section into a Placemark and report it to the delegate."""
        return await self._fetchAndReport(self.predictions[section].placeID)

    async def selectChild(self, section: int, row: int) -> Optional[Placemark]:
        """Resolve child at section/row into a Placemark and report it to the delegate."""
        return await self._fetchAndReport(self.childAt(section, row).pid)

    def cancel(self) -> None:
        """Clear search text and cancel pending search."""
        self._cancelPendingSearch()
        self.text = ""
        self.searchActive = False

    async def _fetchAndReport(self, placeID: Optional[str]) -> Optional[Placemark]:
        if not placeID:
            logger.warning("Selected entry has no place identifier")
            self._reportFailure(None)
            return None

        try:
            result = await self.geocoder.fetchPlace(placeID)
        except GeocoderError as e:
            logger.error(f"Fetching place {placeID} failed: {e}")
            self._reportFailure(e)
            return None

        if self.delegate is not None:
            self.delegate.didAutocomplete(self, result.placemark)
        return result.placemark

    def _reportFailure(self, error: Optional[GeocoderError]) -> None:
        if self.delegate is not None:
            self.delegate.didFailAutocomplete(self, error)

    def _cancelPendingSearch(self) -> None:
        if self._pendingSearch is not None and not self._pendingSearch.done():
            self._pendingSearch.cancel()
        self._pendingSearch = None
