from pathlib import Path
from typing import Callable


def create_app(*, source: str | None = None, fetch: Callable[[], str] | None = None):
    # Lazy import so core CLI works without web deps.
    from fastapi import FastAPI, Request
    from fastapi.responses import HTMLResponse, JSONResponse
    from fastapi.templating import Jinja2Templates

    from .. import __version__
    from ..config import Settings
    from ..errors import ErrorKind
    from ..pipeline import Pipeline, PipelineNotReady, PipelineState

    settings = Settings()
    location = source or settings.data_url

    if fetch is not None:
        pipeline = Pipeline(
            fetch=fetch,
            entity_field=settings.entity_field,
            neighbor_field=settings.neighbor_field,
            delimiter=settings.delimiter,
        )
    else:
        pipeline = Pipeline.from_settings(settings, source=location)

    base = Path(__file__).resolve().parent
    templates = Jinja2Templates(directory=str(base / "templates"))

    app = FastAPI(title="Limitrofes", version=__version__)
    app.state.pipeline = pipeline

    def _ensure_loaded() -> None:
        if pipeline.state is PipelineState.UNINITIALIZED:
            pipeline.load()

    def _error_response():
        status = 502 if pipeline.error_kind is ErrorKind.FETCH_FAILURE else 422
        if pipeline.state is PipelineState.LOADING:
            return JSONResponse({"ok": False, "state": pipeline.state.value, "error": "Dataset is loading"}, status_code=503)
        return JSONResponse(
            {
                "ok": False,
                "state": pipeline.state.value,
                "error": str(pipeline.error),
                "kind": pipeline.error_kind.value if pipeline.error_kind else None,
            },
            status_code=status,
        )

    @app.get("/", response_class=HTMLResponse)
    def home(request: Request):
        return templates.TemplateResponse(
            request,
            "index.html",
            {"source": location, "entity_field": settings.entity_field, "neighbor_field": settings.neighbor_field},
        )

    @app.get("/api/health")
    def health():
        return {"ok": True, "state": pipeline.state.value, "source": location}

    @app.get("/api/options")
    def options():
        _ensure_loaded()
        out = {
            "ok": pipeline.state is PipelineState.READY,
            "state": pipeline.state.value,
            "options": [o.as_dict() for o in pipeline.options],
        }
        if pipeline.error is not None:
            out["error"] = str(pipeline.error)
            out["kind"] = pipeline.error_kind.value
        return out

    @app.get("/api/neighbors")
    def neighbors(municipio: str = ""):
        _ensure_loaded()
        try:
            res = pipeline.select(municipio)
        except PipelineNotReady:
            return _error_response()

        return {
            "ok": True,
            "selected": res.selected,
            "status": res.status.value,
            "neighbors": list(res.neighbors),
            "message": res.message,
            "lines": res.lines(),
        }

    @app.post("/api/reload")
    def reload():
        state = pipeline.load()
        if state is not PipelineState.READY or pipeline.dataset is None:
            return _error_response()
        return {"ok": True, "state": state.value, "stats": pipeline.dataset.stats()}

    return app
