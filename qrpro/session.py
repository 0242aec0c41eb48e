"""Generation session: validate, build, render and record in one step."""

import itertools
from dataclasses import dataclass

from qrpro.config import Settings
from qrpro.contrast import ContrastReport, check
from qrpro.errors import QRProError, RenderError, ValidationError
from qrpro.history import HistoryStore
from qrpro.logging import audit, get_logger
from qrpro.models import AppearanceConfig, ContentRequest, HistoryRecord, Payload, UrlRequest
from qrpro.payload import build, is_valid
from qrpro.render import RenderCompositor, RenderToken
from qrpro.surface import Surface

log = get_logger("session")


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of ``GeneratorSession.generate``: a payload or an error, never both."""

    payload: Payload | None = None
    error: QRProError | None = None
    record: HistoryRecord | None = None
    rendered: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


class GeneratorSession:
    """Owns the active request, appearance and render target for one user.

    Replacing the request or appearance cancels whatever render is still in
    flight, so only the latest render can reach the surface.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        compositor: RenderCompositor | None = None,
        history: HistoryStore | None = None,
        surface: Surface | None = None,
    ):
        self.settings = settings or Settings()
        self.compositor = compositor or RenderCompositor(settings=self.settings)
        self.history = history or HistoryStore(self.settings.history_capacity)
        self.surface = surface if surface is not None else Surface()
        self._ids = itertools.count(1)
        self._request: ContentRequest = UrlRequest()
        self._appearance = AppearanceConfig()
        self._payload: Payload | None = None
        self._token: RenderToken | None = None

    # -- active state ------------------------------------------------------

    @property
    def request(self) -> ContentRequest:
        return self._request

    @property
    def appearance(self) -> AppearanceConfig:
        return self._appearance

    @property
    def payload(self) -> Payload | None:
        """Payload currently shown on the surface, if any."""
        return self._payload

    @property
    def can_generate(self) -> bool:
        return is_valid(self._request)

    @property
    def contrast(self) -> ContrastReport:
        return check(self._appearance.fg_color, self._appearance.bg_color, self.settings.min_contrast)

    def set_request(self, request: ContentRequest) -> bool:
        """Replace the active request; returns whether it can be generated."""
        if request != self._request:
            self._request = request
            self._cancel_inflight()
        return is_valid(request)

    def set_appearance(self, appearance: AppearanceConfig) -> ContrastReport:
        """Replace the active appearance; returns the (advisory) contrast report."""
        if appearance != self._appearance:
            self._appearance = appearance
            self._cancel_inflight()
        report = self.contrast
        if not report.ok:
            log.warning(report.message)
        return report

    def _cancel_inflight(self) -> None:
        if self._token is not None and not self._token.cancelled:
            self._token.cancel()
            audit("render.cancelled", logger=log, generation=self._token.generation)

    def _next_token(self) -> RenderToken:
        self._cancel_inflight()
        self._token = RenderToken()
        return self._token

    # -- operations --------------------------------------------------------

    async def generate(self, request: ContentRequest, appearance: AppearanceConfig) -> GenerationResult:
        """Build, render and record ``request`` drawn with ``appearance``.

        Validation and render failures come back in the result and leave the
        surface and history untouched.
        """
        self.set_request(request)
        self.set_appearance(appearance)

        try:
            payload = build(request)
        except ValidationError as e:
            audit("generate.rejected", logger=log, kind=request.kind.value, missing=list(e.missing))
            return GenerationResult(error=e)

        token = self._next_token()
        try:
            rendered = await self.compositor.render(payload, appearance, self.surface, token)
        except RenderError as e:
            log.error("Render failed: %s", e)
            return GenerationResult(error=e)

        if not token.cancelled:
            self._payload = payload
        record = HistoryRecord(
            id=next(self._ids),
            kind=request.kind,
            payload=payload,
            appearance=appearance,
        )
        self.history.record(record)
        audit("generate.done", logger=log, id=record.id, kind=record.kind.value, rendered=rendered)
        return GenerationResult(payload=payload, record=record, rendered=rendered)

    async def load_from_history(self, record_id: int) -> HistoryRecord | None:
        """Re-activate a past record as the render target and count the reload.

        The record is redrawn first; the active appearance, shown payload and
        reload count change only once the redraw has succeeded. If another
        change supersedes the redraw while it is in flight, the reload is
        still counted but the newer state is kept.

        Returns the updated record, or None if ``record_id`` is not in history.

        Raises:
            RenderError: if the record cannot be redrawn. Session and history
                are left as they were.
        """
        rec = self.history.get(record_id)
        if rec is None:
            audit("history.load_missing", logger=log, id=record_id)
            return None

        token = self._next_token()
        await self.compositor.render(rec.payload, rec.appearance, self.surface, token)

        if not token.cancelled:
            self._appearance = rec.appearance
            self._payload = rec.payload
        return self.history.reload(record_id)
