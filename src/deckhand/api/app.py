"""FastAPI application for the deckhand local JSON API."""

import secrets
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .. import __version__
from ..core.errors import (
    DeckhandError,
    NotetypeNotFoundError,
    PreconditionError,
)
from ..core.model import Notetype, OrdinalMode, TemplateChange
from ..core.operations import delete_media, save_notetype
from ..media.check import check_media


def create_app(runtime: Any, token: str | None = None, enable_cors: bool = False) -> FastAPI:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime instance with collection and config
        token: Bearer token for authentication (None to disable auth)
        enable_cors: Enable CORS middleware

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Deckhand API",
        description="Local JSON API for a deckhand collection",
        version=__version__,
        docs_url="/docs" if token is None else None,
        redoc_url="/redoc" if token is None else None,
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Security setup
    if token:
        security_scheme = HTTPBearer(auto_error=False)

        async def verify_token(
            credentials: HTTPAuthorizationCredentials | None = Security(security_scheme),  # noqa: B008
        ) -> None:
            """Verify bearer token."""
            if credentials is None or credentials.credentials != token:
                raise HTTPException(status_code=401, detail="Invalid or missing token")
    else:

        async def verify_token() -> None:
            """No-op when auth is disabled."""
            return None

    def _get_notetype(notetype_id: int) -> Notetype:
        notetype = runtime.col.get_notetype_by_id(notetype_id)
        if notetype is None:
            raise HTTPException(status_code=404, detail=f"Note type {notetype_id} not found")
        return notetype

    @app.get("/health")  # type: ignore[misc]
    async def health(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "version": __version__}

    @app.get("/notetypes")  # type: ignore[misc]
    async def list_notetypes(auth: None = Depends(verify_token)) -> list[dict[str, Any]]:
        """List note type ids and names."""
        return [
            {"id": nt.id, "name": nt.name, "templates": len(nt.tmpls)}
            for nt in runtime.col.all_notetypes()
        ]

    @app.get("/notetypes/{notetype_id}")  # type: ignore[misc]
    async def get_notetype(notetype_id: int, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Get a full note type definition."""
        return _get_notetype(notetype_id).to_dict()

    @app.get("/notetypes/{notetype_id}/fields/{key}")  # type: ignore[misc]
    async def get_notetype_field(
        notetype_id: int, key: str, auth: None = Depends(verify_token)
    ) -> dict[str, Any]:
        """Get one top-level string value of a note type."""
        value = _get_notetype(notetype_id).get_str_or_none(key)
        if value is None:
            raise HTTPException(status_code=404, detail=f"No string value for {key}")
        return {"key": key, "value": value}

    @app.put("/notetypes/{notetype_id}")  # type: ignore[misc]
    async def put_notetype(
        notetype_id: int,
        payload: dict[str, Any] = Body(...),  # noqa: B008
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        """Save an edited note type along with its template changes."""
        data = payload.get("notetype")
        if not isinstance(data, dict):
            raise HTTPException(status_code=422, detail="Body needs a 'notetype' object")
        data = dict(data, id=notetype_id)

        try:
            notetype = Notetype(data)
            changes = [TemplateChange.parse(c) for c in payload.get("changes") or []]
            ordinals = OrdinalMode(payload.get("ordinals", runtime.config.templates.ordinals.value))
        except PreconditionError as e:
            raise HTTPException(status_code=422, detail=str(e))
        except (TypeError, ValueError) as e:
            raise HTTPException(status_code=422, detail=f"Invalid request: {e}")

        try:
            save_notetype(runtime.col, notetype, changes, ordinals=ordinals)
        except NotetypeNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except PreconditionError as e:
            raise HTTPException(status_code=422, detail=str(e))
        except DeckhandError as e:
            raise HTTPException(status_code=409, detail=str(e))

        return _get_notetype(notetype_id).to_dict()

    @app.post("/media/delete")  # type: ignore[misc]
    async def media_delete(
        payload: dict[str, Any] = Body(...),  # noqa: B008
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        """Delete media files by name."""
        names = payload.get("names")
        if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
            raise HTTPException(status_code=422, detail="'names' must be a list of strings")
        try:
            requested = delete_media(runtime.col, names)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
        return {"requested": requested}

    @app.get("/media/check")  # type: ignore[misc]
    async def media_check(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Report unused and missing media."""
        report = check_media(runtime.col)
        return {
            "referenced": sorted(report.referenced),
            "missing": report.missing,
            "unused": report.unused,
        }

    return app


def generate_token() -> str:
    """Generate a random bearer token."""
    return secrets.token_urlsafe(32)
