import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from booking_flow.api.pages import router as pages_router
from booking_flow.api.widgets import router as widgets_router
from booking_flow.core.config import settings
from booking_flow.wiring.dependencies import shutdown


class ContextFormatter(logging.Formatter):
    """
    Render "[page_id/widget] LEVEL:logger:message | key=value ..." so every line
    of a page's widget traffic can be grepped by page and widget.
    """

    scope_keys = ("page_id", "widget")
    detail_keys = ("message_type", "service_id", "epoch", "reason")

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)

        scope = [str(getattr(record, key)) for key in self.scope_keys if _present(getattr(record, key, None))]
        if scope:
            base = f"[{'/'.join(scope)}] {base}"

        details = []
        for key in self.detail_keys:
            value = getattr(record, key, None)
            if _present(value):
                details.append(f"{key}={value}")
        if details:
            return f"{base} | " + " ".join(details)
        return base


def _present(value: object) -> bool:
    return value not in (None, "")


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Booking flow orchestrator starting", extra={"reason": settings.ENV})
    yield
    await shutdown()
    logger.info("Booking flow orchestrator stopped")


app = FastAPI(title="Booking Flow Orchestrator", version="1.0.0", lifespan=lifespan)

app.include_router(pages_router, tags=["pages"])
app.include_router(widgets_router, tags=["widgets"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
