import logging

from fastapi import FastAPI

from govslots.api.v1.slots import router as slots_router
from govslots.core.config import settings


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("slot_id", "service_id", "date", "status", "path", "reason", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="Gov Office Slot Admin", version="1.0.0")

app.include_router(slots_router, prefix="/api/v1/admin", tags=["slots"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
